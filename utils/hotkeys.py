import logging

import keyboard
from PyQt6.QtCore import QObject, pyqtSignal

logger = logging.getLogger(__name__)

TOGGLE_HOTKEY = "F9"
RESET_HOTKEY = "F10"


class HotkeyManager(QObject):
    # シグナル定義（GUIスレッドで処理するため）
    toggle_timer_triggered = pyqtSignal()  # F9
    reset_timer_triggered = pyqtSignal()   # F10

    def __init__(self):
        super().__init__()
        self.running = False

    def start_listening(self):
        """ホットキーの監視を開始"""
        if not self.running:
            try:
                # F9: カウントダウン開始/停止
                keyboard.add_hotkey(TOGGLE_HOTKEY, self._on_toggle)
                # F10: リセット
                keyboard.add_hotkey(RESET_HOTKEY, self._on_reset)
                self.running = True
                logger.info("Global hotkeys registered (%s toggle, %s reset)", TOGGLE_HOTKEY, RESET_HOTKEY)
            except Exception as e:
                # Linux では root 権限がないと ImportError になる
                logger.warning("Failed to register hotkeys: %s", e)

    def stop_listening(self):
        """ホットキーの監視を停止"""
        if self.running:
            try:
                keyboard.remove_hotkey(TOGGLE_HOTKEY)
                keyboard.remove_hotkey(RESET_HOTKEY)
            except (KeyError, ValueError) as e:
                logger.debug("Hotkey removal failed: %s", e)
            self.running = False

    def _on_toggle(self):
        """F9押下時のコールバック (リスナースレッド)"""
        self.toggle_timer_triggered.emit()

    def _on_reset(self):
        """F10押下時のコールバック (リスナースレッド)"""
        self.reset_timer_triggered.emit()
