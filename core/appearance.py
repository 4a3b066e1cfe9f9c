from dataclasses import dataclass

from core.settings import BackgroundMode

# 表示フォントは設定サイズの4倍で描画する
FONT_SCALE = 4


def scaled_point_size(base_size):
    return base_size * FONT_SCALE


@dataclass(frozen=True)
class Appearance:
    """Settings から導出したオーバーレイの描画パラメータ"""

    font_family: str
    font_style: int
    point_size: int
    text_color: int
    mode: BackgroundMode
    background_color: int
    draws_image: bool
    horizontal: str
    vertical: str
    margin_x: int
    margin_y: int

    @classmethod
    def from_settings(cls, settings):
        return cls(
            font_family=settings.font.family,
            font_style=settings.font.style,
            point_size=scaled_point_size(settings.font.size),
            text_color=settings.text_color,
            mode=settings.mode,
            background_color=settings.background_color,
            draws_image=settings.mode is BackgroundMode.IMAGE and settings.background_image is not None,
            horizontal=settings.alignment.horizontal,
            vertical=settings.alignment.vertical,
            margin_x=settings.margin_x,
            margin_y=settings.margin_y,
        )

    @property
    def fills_color(self):
        return self.mode is BackgroundMode.COLOR

    @property
    def contents_margins(self):
        """(left, top, right, bottom) の余白。各軸の余白は両側に適用される"""
        return (self.margin_x, self.margin_y, self.margin_x, self.margin_y)
