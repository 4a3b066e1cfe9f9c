from __future__ import annotations

import pytest
from PIL import Image

from core.background_image import ImageLoadError, load_background_image


def test_load_background_image_converts_to_rgba(tmp_path) -> None:
    path = tmp_path / "bg.jpg"
    Image.new("RGB", (8, 6), (0, 128, 255)).save(path)

    image = load_background_image(str(path))

    assert image.mode == "RGBA"
    assert image.size == (8, 6)


def test_load_background_image_rejects_non_image(tmp_path) -> None:
    path = tmp_path / "notes.png"
    path.write_text("not an image")

    with pytest.raises(ImageLoadError):
        load_background_image(str(path))


def test_load_background_image_rejects_missing_file(tmp_path) -> None:
    with pytest.raises(ImageLoadError):
        load_background_image(str(tmp_path / "missing.png"))
