import logging

from PyQt6.QtWidgets import QWidget, QLabel, QGridLayout
from PyQt6.QtCore import Qt, QRect
from PyQt6.QtGui import QFont, QColor, QImage, QPainter

from core.appearance import Appearance
from core.settings import FONT_BOLD, FONT_ITALIC, Bounds
from core.timer_engine import TimerEngine

logger = logging.getLogger(__name__)

_HORIZONTAL_FLAGS = {
    "left": Qt.AlignmentFlag.AlignLeft,
    "center": Qt.AlignmentFlag.AlignHCenter,
    "right": Qt.AlignmentFlag.AlignRight,
}
_VERTICAL_FLAGS = {
    "top": Qt.AlignmentFlag.AlignTop,
    "middle": Qt.AlignmentFlag.AlignVCenter,
    "bottom": Qt.AlignmentFlag.AlignBottom,
}
# 論理フォント名 -> Qt のスタイルヒント
_STYLE_HINTS = {
    "serif": QFont.StyleHint.Serif,
    "sansserif": QFont.StyleHint.SansSerif,
    "monospaced": QFont.StyleHint.Monospace,
}


def alignment_flags(appearance):
    return _HORIZONTAL_FLAGS[appearance.horizontal] | _VERTICAL_FLAGS[appearance.vertical]


def make_font(family, style, point_size):
    font = QFont(family, point_size)
    hint = _STYLE_HINTS.get(family.lower())
    if hint is not None:
        font.setStyleHint(hint)
    font.setBold(bool(style & FONT_BOLD))
    font.setItalic(bool(style & FONT_ITALIC))
    return font


def css_rgba(argb):
    color = QColor.fromRgba(argb)
    return f"rgba({color.red()}, {color.green()}, {color.blue()}, {color.alpha()})"


def to_qimage(image):
    """RGBA の PIL Image を QImage に変換する"""
    data = image.tobytes("raw", "RGBA")
    qimage = QImage(data, image.width, image.height, image.width * 4, QImage.Format.Format_RGBA8888)
    # data の寿命に依存しないようコピーしておく
    return qimage.copy()


class CountdownOverlay(QWidget):
    """カウントダウンを大きく表示する枠なし・最前面のウィンドウ"""

    def __init__(self, settings, engine=None):
        super().__init__()
        self.setWindowFlags(Qt.WindowType.FramelessWindowHint | Qt.WindowType.WindowStaysOnTopHint | Qt.WindowType.Tool)
        self.setAttribute(Qt.WidgetAttribute.WA_TranslucentBackground)
        self.setWindowTitle("TimerWindow")

        self.settings = settings
        self.appearance = None
        self._background = None
        self._timer_update_callback = None
        self._drag_offset = None

        self.grid = QGridLayout()
        self.label = QLabel("")
        self.grid.addWidget(self.label, 0, 0)
        self.setLayout(self.grid)

        self.engine = engine if engine is not None else TimerEngine()
        self.engine.set_update_callback(self._on_time_text)

        self.update_appearance(settings)

    def set_timer_update_callback(self, callback):
        """カウントダウン文字列を受け取るコールバックを設定する (上書き)"""
        self._timer_update_callback = callback

    def _on_time_text(self, text):
        # tick ごとの更新はテキストのみ (レイアウトは変えない)
        self.label.setText(text)
        if self._timer_update_callback is not None:
            self._timer_update_callback(text)

    def update_appearance(self, settings):
        """設定変更時: レイアウトと背景を作り直して再描画する"""
        self.settings = settings
        appearance = Appearance.from_settings(settings)
        self.appearance = appearance

        self.label.setFont(make_font(appearance.font_family, appearance.font_style, appearance.point_size))
        self.label.setStyleSheet(f"color: {css_rgba(appearance.text_color)}; background: transparent;")
        self.grid.setContentsMargins(*appearance.contents_margins)
        self.grid.setAlignment(self.label, alignment_flags(appearance))

        self._background = to_qimage(settings.background_image) if appearance.draws_image else None

        self.label.setText(self.engine.text)
        if not settings.fullscreen:
            b = settings.bounds
            self.setGeometry(b.x, b.y, b.width, b.height)
        self.update()

    def show_on(self, screen, fullscreen):
        """指定スクリーンに全画面表示、またはウィンドウ表示する"""
        if fullscreen and screen is not None:
            self.setGeometry(screen.geometry())
            self.showFullScreen()
            logger.info("Overlay shown fullscreen on %s", screen.name())
        else:
            b = self.settings.bounds
            self.setGeometry(b.x, b.y, b.width, b.height)
            self.showNormal()
            logger.info("Overlay shown windowed at %s", b)

    def paintEvent(self, event):
        appearance = self.appearance
        if appearance is None:
            return
        painter = QPainter(self)
        rect = self.rect()
        if appearance.fills_color:
            painter.fillRect(rect, QColor.fromRgba(appearance.background_color))
        elif self._background is not None:
            painter.setRenderHint(QPainter.RenderHint.SmoothPixmapTransform)
            painter.drawImage(QRect(rect), self._background)
        # TRANSPARENT: 何も塗らない (背後のデスクトップが見える)
        painter.end()

    def mousePressEvent(self, event):
        if event.button() == Qt.MouseButton.LeftButton and not self.settings.fullscreen:
            self._drag_offset = event.globalPosition().toPoint() - self.frameGeometry().topLeft()

    def mouseMoveEvent(self, event):
        if self._drag_offset is not None:
            self.move(event.globalPosition().toPoint() - self._drag_offset)

    def mouseReleaseEvent(self, event):
        if self._drag_offset is not None and event.button() == Qt.MouseButton.LeftButton:
            self._drag_offset = None
            pos = self.pos()
            self.settings.bounds = Bounds(pos.x(), pos.y(), self.width(), self.height())
            logger.debug("Overlay moved to %s", self.settings.bounds)
