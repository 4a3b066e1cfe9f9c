from __future__ import annotations

from PIL import Image
from PyQt6.QtCore import QPoint, Qt
from PyQt6.QtGui import QColor, QImage, QRegion
from PyQt6.QtWidgets import QWidget

from core.settings import Alignment, BackgroundMode, Bounds, FontSpec, Settings
from core.timer_engine import TimerEngine
from gui.countdown_overlay import CountdownOverlay, css_rgba, make_font


def _settings(**overrides) -> Settings:
    settings = Settings()
    settings.load_defaults(Bounds(0, 0, 800, 600))
    for name, value in overrides.items():
        setattr(settings, name, value)
    return settings


def _overlay(settings, timer):
    return CountdownOverlay(settings, engine=TimerEngine(timer=timer))


def test_label_uses_scaled_font_and_text_color(qapp, fake_timer) -> None:
    overlay = _overlay(_settings(font=FontSpec("Serif", 1, 30), text_color=0xFF00FF00), fake_timer)

    font = overlay.label.font()
    assert font.pointSize() == 120
    assert font.bold()
    assert not font.italic()
    assert "rgba(0, 255, 0, 255)" in overlay.label.styleSheet()


def test_tick_updates_label_and_mirrors_to_callback(qapp, fake_timer) -> None:
    overlay = _overlay(_settings(), fake_timer)
    mirrored = []
    overlay.set_timer_update_callback(mirrored.append)

    overlay.engine.set_countdown(61)
    overlay.engine.start()
    fake_timer.fire()

    assert overlay.label.text() == "00:01:00"
    assert mirrored == ["00:01:01", "00:01:00"]


def test_alignment_and_margins_applied_to_layout(qapp, fake_timer) -> None:
    overlay = _overlay(_settings(alignment=Alignment.TOP_RIGHT, margin_x=15, margin_y=25), fake_timer)

    margins = overlay.grid.contentsMargins()
    assert (margins.left(), margins.top(), margins.right(), margins.bottom()) == (15, 25, 15, 25)
    item = overlay.grid.itemAt(0)
    assert item.alignment() == Qt.AlignmentFlag.AlignRight | Qt.AlignmentFlag.AlignTop


def test_update_appearance_relayouts_on_change(qapp, fake_timer) -> None:
    settings = _settings()
    overlay = _overlay(settings, fake_timer)

    settings.alignment = Alignment.BOTTOM_LEFT
    settings.font = FontSpec("Serif", 0, 10)
    overlay.update_appearance(settings)

    assert overlay.label.font().pointSize() == 40
    assert overlay.grid.itemAt(0).alignment() == Qt.AlignmentFlag.AlignLeft | Qt.AlignmentFlag.AlignBottom


def test_background_image_converted_only_in_image_mode(qapp, fake_timer) -> None:
    image = Image.new("RGBA", (5, 7), (10, 20, 30, 255))
    overlay = _overlay(_settings(mode=BackgroundMode.IMAGE, background_image=image), fake_timer)
    assert overlay._background is not None
    assert (overlay._background.width(), overlay._background.height()) == (5, 7)

    overlay.update_appearance(_settings(mode=BackgroundMode.COLOR, background_image=image))
    assert overlay._background is None


def _paint(overlay) -> QImage:
    # 子ウィジェット (ラベル) を除いた背景だけを描画する
    overlay.resize(60, 40)
    image = QImage(overlay.size(), QImage.Format.Format_ARGB32)
    image.fill(Qt.GlobalColor.transparent)
    overlay.render(image, QPoint(), QRegion(), QWidget.RenderFlag(0))
    return image


def _corners(image) -> list:
    w, h = image.width() - 1, image.height() - 1
    return [image.pixel(0, 0), image.pixel(w, 0), image.pixel(0, h), image.pixel(w, h)]


def test_color_mode_fills_background_color(qapp, fake_timer) -> None:
    overlay = _overlay(_settings(mode=BackgroundMode.COLOR, background_color=0xFF336699), fake_timer)

    assert _corners(_paint(overlay)) == [0xFF336699] * 4


def test_image_mode_stretches_image_over_window(qapp, fake_timer) -> None:
    image = Image.new("RGBA", (3, 2), (200, 40, 10, 255))
    overlay = _overlay(_settings(mode=BackgroundMode.IMAGE, background_image=image), fake_timer)

    expected = QColor(200, 40, 10).rgba()
    assert _corners(_paint(overlay)) == [expected] * 4


def test_image_mode_without_image_paints_nothing(qapp, fake_timer) -> None:
    overlay = _overlay(_settings(mode=BackgroundMode.IMAGE, background_image=None), fake_timer)

    assert all(QColor.fromRgba(pixel).alpha() == 0 for pixel in _corners(_paint(overlay)))


def test_transparent_mode_paints_nothing(qapp, fake_timer) -> None:
    overlay = _overlay(_settings(mode=BackgroundMode.TRANSPARENT), fake_timer)

    assert all(QColor.fromRgba(pixel).alpha() == 0 for pixel in _corners(_paint(overlay)))


def test_windowed_settings_apply_bounds(qapp, fake_timer) -> None:
    overlay = _overlay(_settings(fullscreen=False, bounds=Bounds(10, 20, 300, 200)), fake_timer)

    geometry = overlay.geometry()
    assert (geometry.width(), geometry.height()) == (300, 200)


def test_make_font_maps_style_bits(qapp) -> None:
    font = make_font("Serif", 3, 12)
    assert font.bold()
    assert font.italic()
    assert font.pointSize() == 12


def test_css_rgba_unpacks_argb() -> None:
    assert css_rgba(0x80102030) == "rgba(16, 32, 48, 128)"
