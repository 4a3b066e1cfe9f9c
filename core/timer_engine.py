import logging
from datetime import datetime

from PyQt6.QtCore import QTimer

from utils.config import config

logger = logging.getLogger(__name__)


def format_countdown(seconds):
    """秒数を HH:MM:SS 形式に変換する (時間は24で折り返さない)"""
    seconds = int(seconds)
    hours = seconds // 3600
    minutes = (seconds % 3600) // 60
    secs = seconds % 60
    return f"{hours:02}:{minutes:02}:{secs:02}"


class TimerEngine:
    """
    1秒ごとに減算されるカウントダウンの状態を管理する。
    tick は QTimer (UIスレッドのイベントループ) から呼ばれる。
    """

    def __init__(self, timer=None, now=None, initial_seconds=0):
        self._timer = timer if timer is not None else QTimer()
        self._timer.setInterval(config.tick_interval_ms)
        self._timer.timeout.connect(self._on_tick)
        self._now = now or datetime.now

        self._reset_value = int(initial_seconds)
        self._current_value = int(initial_seconds)
        self._update_callback = None

    @property
    def reset_value(self):
        return self._reset_value

    @property
    def current_value(self):
        return self._current_value

    @property
    def running(self):
        return self._timer.isActive()

    @property
    def text(self):
        return format_countdown(self._current_value)

    def set_update_callback(self, callback):
        """表示更新コールバックを設定する (上書き。複数登録はしない)"""
        self._update_callback = callback

    def start(self):
        if not self._timer.isActive():
            self._timer.start()
            logger.info("Countdown started at %s", self.text)

    def stop(self):
        if self._timer.isActive():
            self._timer.stop()
            logger.info("Countdown stopped at %s", self.text)

    def reset(self):
        self._current_value = self._reset_value
        self._emit_text()
        self._restart_if_running()

    def set_countdown(self, seconds):
        seconds = int(seconds)
        if seconds < 0:
            raise ValueError(f"Countdown duration must not be negative: {seconds}")
        self._reset_value = seconds
        self._current_value = seconds
        self._emit_text()
        self._restart_if_running()
        logger.debug("Countdown set to %s", self.text)

    def set_countdown_to_time(self, target):
        now = self._now()
        if target <= now:
            # 過去の時刻は無視する (エラーにはしない)
            logger.debug("Ignoring countdown target in the past: %s", target)
            return
        self.set_countdown(int((target - now).total_seconds()))

    def _restart_if_running(self):
        # 実行中なら周期をリセットし、次の tick を1秒後にする
        if self._timer.isActive():
            self._timer.start()

    def _on_tick(self):
        # 0 になっても停止しない (以降の tick は何もしない)
        if self._current_value > 0:
            self._current_value -= 1
            self._emit_text()

    def _emit_text(self):
        if self._update_callback is not None:
            self._update_callback(self.text)
