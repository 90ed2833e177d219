"""
Qt-free image I/O utilities.

Provides helpers to open images (including PSD), read dimensions without
full loading, crop at source resolution, and save PNG exports to unique
file paths.
"""

import logging
from pathlib import Path

from PIL import Image
from psd_tools import PSDImage

from image_cropper.config import PNG_COMPRESS_LEVEL
from image_cropper.models import CropRect

logger = logging.getLogger(__name__)

# Allow very large images (Pillow's default limit is ~178MP)
Image.MAX_IMAGE_PIXELS = None


def open_image(path: Path) -> Image.Image:
    """Open an image file, using psd-tools for PSD and Pillow for the rest."""
    path = Path(path)
    if path.suffix.lower() == ".psd":
        psd = PSDImage.open(str(path))
        return psd.composite()
    img = Image.open(path)
    img.load()
    return img


def get_image_size(path: Path) -> tuple[int, int]:
    """Get image dimensions without fully loading/compositing."""
    path = Path(path)
    if path.suffix.lower() == ".psd":
        psd = PSDImage.open(str(path))
        return psd.width, psd.height
    with Image.open(path) as img:
        return img.size


def crop_image(img: Image.Image, rect: CropRect) -> Image.Image:
    """
    Crop ``img`` to ``rect`` given in source pixel coordinates.

    Coordinates are rounded to whole pixels.  Areas of the rectangle that fall
    outside the image come out transparent.
    """
    left = int(round(rect.x))
    top = int(round(rect.y))
    right = left + max(1, int(round(rect.w)))
    bottom = top + max(1, int(round(rect.h)))
    return img.convert("RGBA").crop((left, top, right, bottom))


def unique_path(out_path: Path) -> Path:
    """Return a unique path by appending -01, -02, etc. if file already exists."""
    if not out_path.exists():
        return out_path
    stem = out_path.stem
    suffix = out_path.suffix
    parent = out_path.parent
    counter = 1
    while True:
        candidate = parent / f"{stem}-{counter:02d}{suffix}"
        if not candidate.exists():
            return candidate
        counter += 1


def save_png(img: Image.Image, out_path: Path) -> Path:
    """Save ``img`` as PNG next to any existing file of the same name; return the path."""
    out_path = unique_path(Path(out_path).with_suffix(".png"))
    out_path.parent.mkdir(parents=True, exist_ok=True)
    img.save(str(out_path), "PNG", compress_level=PNG_COMPRESS_LEVEL)
    logger.info("Saved %dx%d crop to %s", img.width, img.height, out_path)
    return out_path
