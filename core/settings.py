import logging
from dataclasses import dataclass
from enum import Enum

from core.background_image import ImageLoadError, load_background_image

logger = logging.getLogger(__name__)

FONT_PLAIN = 0
FONT_BOLD = 1
FONT_ITALIC = 2

WHITE = 0xFFFFFFFF
BLACK = 0xFF000000


class SettingsLoadError(Exception):
    """保存された設定が読み込めない (値が壊れている) 場合の例外"""


class BackgroundMode(Enum):
    IMAGE = "IMAGE"
    COLOR = "COLOR"
    TRANSPARENT = "TRANSPARENT"


class Alignment(Enum):
    TOP_LEFT = ("top", "left")
    TOP_CENTER = ("top", "center")
    TOP_RIGHT = ("top", "right")
    MIDDLE_LEFT = ("middle", "left")
    MIDDLE_CENTER = ("middle", "center")
    MIDDLE_RIGHT = ("middle", "right")
    BOTTOM_LEFT = ("bottom", "left")
    BOTTOM_CENTER = ("bottom", "center")
    BOTTOM_RIGHT = ("bottom", "right")

    @property
    def vertical(self):
        return self.value[0]

    @property
    def horizontal(self):
        return self.value[1]


@dataclass(frozen=True)
class FontSpec:
    family: str
    style: int = FONT_PLAIN
    size: int = 40

    @property
    def bold(self):
        return bool(self.style & FONT_BOLD)

    @property
    def italic(self):
        return bool(self.style & FONT_ITALIC)


@dataclass(frozen=True)
class Bounds:
    x: int
    y: int
    width: int
    height: int


class Settings:
    # デフォルト設定
    DEFAULT_FONT = FontSpec("Serif", FONT_PLAIN, 40)
    DEFAULT_ALIGNMENT = Alignment.MIDDLE_CENTER
    DEFAULT_MODE = BackgroundMode.COLOR
    DEFAULT_TEXT_COLOR = WHITE
    DEFAULT_BACKGROUND_COLOR = BLACK
    DEFAULT_MARGIN_X = 50
    DEFAULT_MARGIN_Y = 50
    DEFAULT_FULLSCREEN = True

    def __init__(self):
        self.font = self.DEFAULT_FONT
        self.text_color = self.DEFAULT_TEXT_COLOR
        self.mode = self.DEFAULT_MODE
        self.image_path = None
        self.background_image = None
        self.background_color = self.DEFAULT_BACKGROUND_COLOR
        self.alignment = self.DEFAULT_ALIGNMENT
        self.margin_x = self.DEFAULT_MARGIN_X
        self.margin_y = self.DEFAULT_MARGIN_Y
        self.bounds = Bounds(0, 0, 0, 0)
        self.fullscreen = self.DEFAULT_FULLSCREEN

    def load_from(self, store, default_bounds):
        """
        ストアから全項目を読み込む。
        値が壊れている場合は SettingsLoadError を送出する (呼び出し側で load_defaults へ)。
        """
        font = FontSpec(
            family=_read_str(store, "fontName", self.DEFAULT_FONT.family),
            style=_read_int(store, "fontStyle", self.DEFAULT_FONT.style),
            size=_read_int(store, "fontSize", self.DEFAULT_FONT.size),
        )
        alignment = _read_enum(store, "alignment", Alignment, self.DEFAULT_ALIGNMENT)
        mode = _read_enum(store, "mode", BackgroundMode, self.DEFAULT_MODE)
        text_color = _read_int(store, "textColor", self.DEFAULT_TEXT_COLOR) & 0xFFFFFFFF
        background_color = _read_int(store, "bgColor", self.DEFAULT_BACKGROUND_COLOR) & 0xFFFFFFFF
        margin_x = _read_int(store, "marginX", self.DEFAULT_MARGIN_X)
        margin_y = _read_int(store, "marginY", self.DEFAULT_MARGIN_Y)
        bounds = Bounds(
            _read_int(store, "boundsX", default_bounds.x),
            _read_int(store, "boundsY", default_bounds.y),
            _read_int(store, "boundsW", default_bounds.width),
            _read_int(store, "boundsH", default_bounds.height),
        )
        image_path = _read_str(store, "imagePath", None) or None
        fullscreen = _read_bool(store, "fullscreen", self.DEFAULT_FULLSCREEN)

        self.font = font
        self.alignment = alignment
        self.mode = mode
        self.text_color = text_color
        self.background_color = background_color
        self.margin_x = margin_x
        self.margin_y = margin_y
        self.bounds = bounds
        self.image_path = image_path
        self.background_image = None
        self.fullscreen = fullscreen

        if image_path is not None:
            try:
                self.background_image = load_background_image(image_path)
            except ImageLoadError as e:
                # 画像が読めない場合は背景画像なしで続行する
                logger.warning("Background image could not be restored: %s", e)

    def save_to(self, store):
        store.setValue("fontName", self.font.family)
        store.setValue("fontStyle", self.font.style)
        store.setValue("fontSize", self.font.size)

        store.setValue("alignment", self.alignment.name)
        store.setValue("mode", self.mode.name)

        store.setValue("textColor", self.text_color)
        store.setValue("bgColor", self.background_color)

        store.setValue("marginX", self.margin_x)
        store.setValue("marginY", self.margin_y)

        store.setValue("boundsX", self.bounds.x)
        store.setValue("boundsY", self.bounds.y)
        store.setValue("boundsW", self.bounds.width)
        store.setValue("boundsH", self.bounds.height)

        if self.image_path is not None:
            store.setValue("imagePath", self.image_path)

        store.setValue("fullscreen", self.fullscreen)

        if hasattr(store, "sync"):
            store.sync()
        logger.info("Settings saved")

    def load_defaults(self, default_bounds):
        self.font = self.DEFAULT_FONT
        self.alignment = self.DEFAULT_ALIGNMENT
        self.mode = self.DEFAULT_MODE
        self.text_color = self.DEFAULT_TEXT_COLOR
        self.background_color = self.DEFAULT_BACKGROUND_COLOR
        self.margin_x = self.DEFAULT_MARGIN_X
        self.margin_y = self.DEFAULT_MARGIN_Y
        self.image_path = None
        self.background_image = None
        self.bounds = Bounds(default_bounds.x, default_bounds.y, default_bounds.width, default_bounds.height)
        self.fullscreen = self.DEFAULT_FULLSCREEN


def _read_str(store, key, default):
    value = store.value(key, default)
    if value is None:
        return None
    return str(value)


def _read_int(store, key, default):
    value = store.value(key, default)
    try:
        return int(value)
    except (TypeError, ValueError) as e:
        raise SettingsLoadError(f"Invalid integer for '{key}': {value!r}") from e


def _read_bool(store, key, default):
    value = store.value(key, default)
    # INI 形式では bool が "true"/"false" の文字列で返ってくる
    if isinstance(value, bool):
        return value
    if isinstance(value, str) and value.lower() in ("true", "false"):
        return value.lower() == "true"
    raise SettingsLoadError(f"Invalid boolean for '{key}': {value!r}")


def _read_enum(store, key, enum_cls, default):
    name = _read_str(store, key, default.name)
    try:
        return enum_cls[name]
    except KeyError as e:
        raise SettingsLoadError(f"Unknown {enum_cls.__name__} '{name}' for '{key}'") from e
