import os
from pathlib import Path

from PyQt6.QtCore import QSettings

ORG_NAME = "CountdownOverlay"
APP_NAME = "CountdownOverlay"


class Config:
    # デフォルト設定
    DEFAULT_COUNTDOWN_SECONDS = 5 * 60
    DEFAULT_TICK_INTERVAL_MS = 1000
    DEFAULT_PRESET_TEXT = "00:05:00"
    DEFAULT_CLOCK_TEXT = "10:00 h"
    DEFAULT_PREVIEW_POINT_SIZE = 20
    DEFAULT_LOG_LEVEL = "INFO"
    MAX_MARGIN = 10000

    def __init__(self):
        self.countdown_seconds = self.DEFAULT_COUNTDOWN_SECONDS
        self.tick_interval_ms = self.DEFAULT_TICK_INTERVAL_MS
        self.preset_text = self.DEFAULT_PRESET_TEXT
        self.clock_text = self.DEFAULT_CLOCK_TEXT
        self.preview_point_size = self.DEFAULT_PREVIEW_POINT_SIZE
        self.log_level = os.environ.get("COUNTDOWN_LOG_LEVEL", self.DEFAULT_LOG_LEVEL).upper()
        self.settings_file = os.environ.get("COUNTDOWN_SETTINGS_FILE") or None
        self.log_file = self._get_default_log_file()

    def _get_default_log_file(self):
        """ユーザーのホーム配下のログファイルの場所 (ディレクトリは init_logging で作る)"""
        return str(Path.home() / ".countdown-overlay" / "countdown-overlay.log")

    def create_store(self):
        """設定の保存先 (QSettings) を生成する"""
        if self.settings_file:
            return QSettings(self.settings_file, QSettings.Format.IniFormat)
        return QSettings(QSettings.Format.IniFormat, QSettings.Scope.UserScope, ORG_NAME, APP_NAME)


# グローバル設定インスタンス
config = Config()
