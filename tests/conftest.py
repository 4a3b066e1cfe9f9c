from __future__ import annotations

import os

import pytest

# GUI テストはディスプレイなしで実行する
os.environ.setdefault("QT_QPA_PLATFORM", "offscreen")


class StubSignal:
    def __init__(self) -> None:
        self.slots = []

    def connect(self, slot) -> None:
        self.slots.append(slot)

    def emit(self) -> None:
        for slot in list(self.slots):
            slot()


class FakeTimer:
    """TimerEngine が使う QTimer の一部だけを真似るスタブ"""

    def __init__(self) -> None:
        self.timeout = StubSignal()
        self.interval = None
        self.active = False
        self.start_calls = 0

    def setInterval(self, interval: int) -> None:
        self.interval = interval

    def start(self) -> None:
        self.active = True
        self.start_calls += 1

    def stop(self) -> None:
        self.active = False

    def isActive(self) -> bool:
        return self.active

    def fire(self, count: int = 1) -> None:
        for _ in range(count):
            if self.active:
                self.timeout.emit()


class DictStore:
    """QSettings と同じ value / setValue を持つメモリ上のストア"""

    def __init__(self, values=None) -> None:
        self.values = dict(values or {})
        self.synced = 0

    def value(self, key, default=None):
        return self.values.get(key, default)

    def setValue(self, key, value) -> None:
        self.values[key] = value

    def sync(self) -> None:
        self.synced += 1


@pytest.fixture
def fake_timer() -> FakeTimer:
    return FakeTimer()


@pytest.fixture
def dict_store() -> DictStore:
    return DictStore()


@pytest.fixture(scope="session")
def qapp():
    from PyQt6.QtWidgets import QApplication

    app = QApplication.instance() or QApplication([])
    yield app
