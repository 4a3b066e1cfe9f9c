import logging

from PIL import Image, UnidentifiedImageError

logger = logging.getLogger(__name__)

IMAGE_EXTENSIONS = ("png", "jpg", "jpeg", "gif", "bmp", "tif", "tiff")


class ImageLoadError(Exception):
    """背景画像のデコードに失敗した場合の例外"""


def load_background_image(path):
    """
    背景画像を読み込み、RGBA の PIL Image として返す。
    読み込みに失敗した場合は ImageLoadError を送出する。
    """
    try:
        with Image.open(path) as img:
            img.load()
            image = img.convert("RGBA")
    except (OSError, UnidentifiedImageError, ValueError) as e:
        raise ImageLoadError(f"Error on loading file {path}: {e}") from e

    logger.info("Loaded background image %s (%dx%d)", path, image.width, image.height)
    return image
