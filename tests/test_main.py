from __future__ import annotations

import main
from core.settings import Alignment, BackgroundMode, Bounds

SCREEN = Bounds(0, 0, 1920, 1080)


def test_load_settings_reads_store(dict_store) -> None:
    dict_store.setValue("alignment", "TOP_CENTER")

    settings, error = main.load_settings(dict_store, SCREEN)

    assert error is None
    assert settings.alignment is Alignment.TOP_CENTER
    assert settings.bounds == SCREEN


def test_load_settings_falls_back_to_defaults_on_corrupt_store(dict_store) -> None:
    dict_store.setValue("mode", "SPARKLES")
    dict_store.setValue("alignment", "TOP_CENTER")

    settings, error = main.load_settings(dict_store, SCREEN)

    assert error is not None
    assert "SPARKLES" in error
    assert settings.mode is BackgroundMode.COLOR
    assert settings.alignment is Alignment.MIDDLE_CENTER
    assert settings.fullscreen is True


def test_has_display_checks_environment_on_linux(monkeypatch) -> None:
    monkeypatch.setattr(main.sys, "platform", "linux")
    for name in ("QT_QPA_PLATFORM", "DISPLAY", "WAYLAND_DISPLAY"):
        monkeypatch.delenv(name, raising=False)
    assert not main.has_display()

    monkeypatch.setenv("DISPLAY", ":0")
    assert main.has_display()


def test_has_display_assumes_display_elsewhere(monkeypatch) -> None:
    monkeypatch.setattr(main.sys, "platform", "win32")
    assert main.has_display()
