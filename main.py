import logging
import os
import sys

from PyQt6.QtWidgets import QApplication, QMessageBox

from core.settings import Bounds, Settings, SettingsLoadError
from gui.control_window import ControlWindow
from gui.countdown_overlay import CountdownOverlay
from utils.config import config
from utils.logging_setup import init_logging

logger = logging.getLogger(__name__)


def has_display():
    """GUI を表示できる環境かどうか (Linux では DISPLAY / WAYLAND_DISPLAY を確認)"""
    if not sys.platform.startswith("linux"):
        return True
    if os.environ.get("QT_QPA_PLATFORM"):
        return True
    return bool(os.environ.get("DISPLAY") or os.environ.get("WAYLAND_DISPLAY"))


def load_settings(store, default_bounds):
    """
    設定を読み込む。失敗した場合はデフォルトに戻し、エラーメッセージを返す。
    """
    settings = Settings()
    try:
        settings.load_from(store, default_bounds)
    except SettingsLoadError as e:
        logger.error("Error occurred on loading preferences: %s", e)
        settings.load_defaults(default_bounds)
        return settings, str(e)
    return settings, None


def main():
    if not has_display():
        print("Application cannot be run in headless mode.", file=sys.stderr)
        sys.exit(1)

    init_logging()

    app = QApplication(sys.argv)
    app.setStyle("Fusion")

    screens = app.screens()
    if not screens:
        logger.critical("No screen available")
        print("Application cannot be run without a screen.", file=sys.stderr)
        sys.exit(1)

    # 最後のスクリーンをオーバーレイの表示先にする
    screen = screens[-1]
    geometry = screen.geometry()
    default_bounds = Bounds(geometry.x(), geometry.y(), geometry.width(), geometry.height())

    store = config.create_store()
    settings, load_error = load_settings(store, default_bounds)
    if load_error is not None:
        QMessageBox.critical(None, "Error",
                             "Error occurred on loading preferences. Falling back to default\n\n"
                             f"  Message: {load_error}")

    overlay = CountdownOverlay(settings)
    window = ControlWindow(overlay, settings, store, screen=screen)

    overlay.show_on(screen, settings.fullscreen)
    overlay.engine.set_countdown(config.countdown_seconds)
    window.show()

    sys.exit(app.exec())


if __name__ == "__main__":
    main()
