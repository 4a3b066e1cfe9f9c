import re
from datetime import datetime, timedelta

_PRESET_PATTERN = re.compile(r"^\s*(\d+):(\d+):(\d+)\s*$")
_CLOCK_PATTERN = re.compile(r"^\s*(\d{1,2}):(\d{2})(?:\s*h)?\s*$")


class TimeInputError(ValueError):
    """時刻入力欄の値が不正な場合の例外"""


def parse_preset_time(text):
    """
    "HH:MM:SS" を秒数に変換する。
    各フィールドは範囲チェックしない (例: "00:90:00" は 90 分)。
    """
    match = _PRESET_PATTERN.match(text or "")
    if not match:
        raise TimeInputError(f"Invalid preset time: {text!r}")
    hours, minutes, seconds = (int(part) for part in match.groups())
    return hours * 3600 + minutes * 60 + seconds


def parse_clock_time(text, now=None):
    """
    "HH:MM h" (時計の時刻) を次に訪れるその時刻の datetime に変換する。
    今日の時刻が既に過ぎていれば翌日に繰り越す。
    """
    match = _CLOCK_PATTERN.match(text or "")
    if not match:
        raise TimeInputError(f"Invalid clock time: {text!r}")
    hours, minutes = int(match.group(1)), int(match.group(2))
    if hours > 23 or minutes > 59:
        raise TimeInputError(f"Clock time out of range: {text!r}")

    now = now or datetime.now()
    target = datetime(now.year, now.month, now.day) + timedelta(hours=hours, minutes=minutes)
    if target < now:
        target += timedelta(days=1)
    return target
