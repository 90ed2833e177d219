"""
Data models and crop-geometry utilities.

CropRect, ViewState and DragSession are the core data structures shared by
the controller and the widgets.  Everything here is plain float arithmetic in
preview units and is Qt-free, so it can be unit tested without a display.

The helper functions cover the three pieces of math the cropper needs:
fitting the source image into the preview box, sizing the fixed crop window
for an aspect ratio, and clamping the image so it keeps covering that window.
"""

import math
from dataclasses import dataclass

from image_cropper.config import ZOOM_MAX, ZOOM_MIN


# =============================================================================
# Data classes
# =============================================================================
@dataclass
class CropRect:
    """Axis-aligned rectangle in preview coordinates."""
    x: float = 0.0
    y: float = 0.0
    w: float = 0.0
    h: float = 0.0

    @property
    def min_x(self) -> float:
        return self.x

    @property
    def min_y(self) -> float:
        return self.y

    @property
    def max_x(self) -> float:
        return self.x + self.w

    @property
    def max_y(self) -> float:
        return self.y + self.h

    def center(self) -> tuple[float, float]:
        return self.x + self.w / 2, self.y + self.h / 2

    def contains(self, other: "CropRect", tolerance: float = 1e-9) -> bool:
        """Return True if ``other`` lies fully inside this rectangle."""
        return (
            self.min_x <= other.min_x + tolerance
            and self.min_y <= other.min_y + tolerance
            and self.max_x >= other.max_x - tolerance
            and self.max_y >= other.max_y - tolerance
        )

    def contains_point(self, px: float, py: float) -> bool:
        return self.min_x <= px <= self.max_x and self.min_y <= py <= self.max_y

    def to_tuple(self) -> tuple[float, float, float, float]:
        return self.x, self.y, self.w, self.h


@dataclass
class ViewState:
    """Position and displayed size of the preview image.

    ``natural_width``/``natural_height`` are the fitted size at zoom 1.0;
    ``width``/``height`` follow them times ``scale``.
    """
    x: float = 0.0
    y: float = 0.0
    width: float = 0.0
    height: float = 0.0
    natural_width: float = 0.0
    natural_height: float = 0.0
    scale: float = 1.0

    def bounds(self) -> CropRect:
        return CropRect(self.x, self.y, self.width, self.height)


@dataclass
class DragSession:
    """Last pointer position seen during a drag."""
    x: float = 0.0
    y: float = 0.0


# =============================================================================
# Validation
# =============================================================================
def _is_positive(value) -> bool:
    try:
        return math.isfinite(value) and value > 0
    except TypeError:
        return False


def validate_ratio(ratio_w: float, ratio_h: float) -> None:
    """Raise ValueError unless both ratio components are positive and finite."""
    if not (_is_positive(ratio_w) and _is_positive(ratio_h)):
        raise ValueError(f"Aspect ratio must be positive, got {ratio_w!r}:{ratio_h!r}")


def validate_image_size(img_w: float, img_h: float) -> None:
    """Raise ValueError for images with a zero or negative dimension."""
    if not (_is_positive(img_w) and _is_positive(img_h)):
        raise ValueError(f"Image dimensions must be positive, got {img_w!r}x{img_h!r}")


# =============================================================================
# Geometry
# =============================================================================
def fit_scale(img_w: float, img_h: float, box_w: float, box_h: float) -> float:
    """Uniform scale that fits an image inside a box, preserving aspect ratio."""
    validate_image_size(img_w, img_h)
    return min(box_w / img_w, box_h / img_h)


def scaled_size(img_w: float, img_h: float, scale: float) -> tuple[float, float]:
    return img_w * scale, img_h * scale


def fitted_size(img_w: float, img_h: float, box_w: float, box_h: float) -> tuple[int, int]:
    """Whole-pixel size of the preview bitmap fitted into the box.

    Dimensions are truncated, never below one pixel.
    """
    scale = fit_scale(img_w, img_h, box_w, box_h)
    return max(1, int(img_w * scale)), max(1, int(img_h * scale))


def crop_window_size(
    display_w: float, display_h: float, ratio_w: float, ratio_h: float,
) -> tuple[float, float]:
    """Largest window with the given ratio that fits the displayed image.

    A ratio wider than the image takes the full width; anything else takes
    the full height.
    """
    validate_ratio(ratio_w, ratio_h)
    validate_image_size(display_w, display_h)
    crop_ratio = ratio_w / ratio_h
    display_ratio = display_w / display_h

    if crop_ratio > display_ratio:
        crop_w = display_w
        crop_h = display_w / crop_ratio
    else:
        crop_h = display_h
        crop_w = crop_h * crop_ratio
    return crop_w, crop_h


def center_rect(box_w: float, box_h: float, w: float, h: float) -> CropRect:
    """Return a ``w`` x ``h`` rectangle centred in the box."""
    return CropRect((box_w - w) / 2, (box_h - h) / 2, w, h)


def clamp_position(
    x: float, y: float, img_w: float, img_h: float, bounds: CropRect,
) -> tuple[float, float]:
    """Correct a proposed image position so the image covers ``bounds``.

    All four checks run every time.  When the image is smaller than the
    window on an axis the later check wins and the window is left partly
    uncovered on that axis.
    """
    if x > bounds.min_x:
        x = bounds.min_x
    if y > bounds.min_y:
        y = bounds.min_y
    if x + img_w < bounds.max_x:
        x = bounds.max_x - img_w
    if y + img_h < bounds.max_y:
        y = bounds.max_y - img_h
    return x, y


def clamp_zoom_value(value: float) -> float:
    return max(ZOOM_MIN, min(ZOOM_MAX, value))


def zoom_factor(value: float) -> float:
    """Map a slider value (0..100) to a scale factor (1.0..2.0)."""
    return 1 + clamp_zoom_value(value) / 100.0


def zoom_anchor_offset(
    old_w: float, old_h: float, new_w: float, new_h: float,
) -> tuple[float, float]:
    """Position shift that keeps the image centre fixed across a resize."""
    return -(new_w - old_w) / 2, -(new_h - old_h) / 2
