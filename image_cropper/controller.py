"""
Qt-free interaction controller for the cropper.

``CropController`` owns the view state of the preview image, the fixed crop
window and the drag session.  The widgets forward pointer, slider and key
input to it and repaint from ``view`` whenever a listener fires.
"""

import logging
from typing import Callable

from image_cropper.config import PREVIEW_HEIGHT, PREVIEW_WIDTH, ZOOM_DEFAULT
from image_cropper.models import (
    CropRect,
    DragSession,
    ViewState,
    center_rect,
    clamp_position,
    clamp_zoom_value,
    crop_window_size,
    fit_scale,
    fitted_size,
    scaled_size,
    validate_ratio,
    zoom_anchor_offset,
    zoom_factor,
)

logger = logging.getLogger(__name__)


class CropController:
    """Pan/zoom state for one image inside a fixed-ratio crop window."""

    STATE_IDLE = 0
    STATE_DRAGGING = 1

    def __init__(
        self,
        image_w: float,
        image_h: float,
        ratio_w: float = 1,
        ratio_h: float = 1,
        box_w: float = PREVIEW_WIDTH,
        box_h: float = PREVIEW_HEIGHT,
    ):
        validate_ratio(ratio_w, ratio_h)
        self._image_w = image_w
        self._image_h = image_h
        self._box_w = box_w
        self._box_h = box_h
        self._fit_scale = fit_scale(image_w, image_h, box_w, box_h)

        # Natural size is the whole-pixel preview bitmap, centred in the box
        nat_w, nat_h = fitted_size(image_w, image_h, box_w, box_h)
        start = center_rect(box_w, box_h, nat_w, nat_h)
        self._view = ViewState(
            x=start.x, y=start.y, width=nat_w, height=nat_h,
            natural_width=nat_w, natural_height=nat_h, scale=1.0,
        )

        # Crop window is sized from the initial fitted image and never changes
        crop_w, crop_h = crop_window_size(nat_w, nat_h, ratio_w, ratio_h)
        self._crop = center_rect(box_w, box_h, crop_w, crop_h)

        self._state = self.STATE_IDLE
        self._drag = DragSession()
        self._zoom_value = ZOOM_DEFAULT
        self._listeners: list[Callable[[], None]] = []

        logger.debug(
            "Cropper geometry: image %sx%s, fit %.4f, view %s, crop %s",
            image_w, image_h, self._fit_scale, self._view.bounds(), self._crop,
        )

    # --- Read-only state ---

    @property
    def view(self) -> ViewState:
        return self._view

    @property
    def crop_rect(self) -> CropRect:
        return CropRect(*self._crop.to_tuple())

    @property
    def state(self) -> int:
        return self._state

    @property
    def is_dragging(self) -> bool:
        return self._state == self.STATE_DRAGGING

    @property
    def zoom_value(self) -> float:
        return self._zoom_value

    @property
    def fit_scale(self) -> float:
        return self._fit_scale

    def image_contains(self, x: float, y: float) -> bool:
        """Return True if the preview point lies on the displayed image."""
        return self._view.bounds().contains_point(x, y)

    # --- Listeners ---

    def add_listener(self, callback: Callable[[], None]):
        """Register a callback fired after every view change."""
        self._listeners.append(callback)

    def remove_listener(self, callback: Callable[[], None]):
        if callback in self._listeners:
            self._listeners.remove(callback)

    def _notify(self):
        for callback in list(self._listeners):
            callback()

    # --- Clamping ---

    def clamp(self, x: float, y: float) -> tuple[float, float]:
        """Clamp a proposed position against the crop window at the current size."""
        return clamp_position(x, y, self._view.width, self._view.height, self._crop)

    def _apply_position(self, x: float, y: float) -> bool:
        x, y = self.clamp(x, y)
        moved = (x, y) != (self._view.x, self._view.y)
        self._view.x = x
        self._view.y = y
        return moved

    # --- Drag interaction ---

    def press(self, x: float, y: float):
        """Start a drag session at pointer position (x, y)."""
        self._state = self.STATE_DRAGGING
        self._drag.x = x
        self._drag.y = y

    def drag(self, x: float, y: float) -> bool:
        """Move the image by the pointer delta since the last event.

        Returns True if the image position changed.  Ignored while idle.
        """
        if self._state != self.STATE_DRAGGING:
            return False
        dx = x - self._drag.x
        dy = y - self._drag.y
        moved = self._apply_position(self._view.x + dx, self._view.y + dy)
        self._drag.x = x
        self._drag.y = y
        if moved:
            self._notify()
        return moved

    def release(self):
        self._state = self.STATE_IDLE

    def move_by(self, dx: float, dy: float) -> bool:
        """Nudge the image by a fixed delta, clamped."""
        moved = self._apply_position(self._view.x + dx, self._view.y + dy)
        if moved:
            self._notify()
        return moved

    # --- Zoom interaction ---

    def set_zoom(self, value: float):
        """Rescale the image for a slider value, keeping its centre in place."""
        value = clamp_zoom_value(value)
        old_w, old_h = self._view.width, self._view.height

        scale = zoom_factor(value)
        new_w, new_h = scaled_size(self._view.natural_width, self._view.natural_height, scale)
        self._view.width = new_w
        self._view.height = new_h
        self._view.scale = scale
        self._zoom_value = value

        dx, dy = zoom_anchor_offset(old_w, old_h, new_w, new_h)
        self._apply_position(self._view.x + dx, self._view.y + dy)
        logger.debug("Zoom %s -> scale %.2f, view %s", value, scale, self._view.bounds())
        self._notify()

    def reset(self):
        """Return to zoom 1.0 with the image centred in the box."""
        self._state = self.STATE_IDLE
        self._zoom_value = ZOOM_DEFAULT
        self._view.scale = zoom_factor(ZOOM_DEFAULT)
        self._view.width, self._view.height = scaled_size(
            self._view.natural_width, self._view.natural_height, self._view.scale,
        )
        start = center_rect(self._box_w, self._box_h, self._view.width, self._view.height)
        self._apply_position(start.x, start.y)
        self._notify()

    # --- Export mapping ---

    def source_crop_rect(self) -> CropRect:
        """Crop window mapped into source-image pixel coordinates."""
        sx = self._view.width / self._image_w
        sy = self._view.height / self._image_h
        return CropRect(
            (self._crop.x - self._view.x) / sx,
            (self._crop.y - self._view.y) / sy,
            self._crop.w / sx,
            self._crop.h / sy,
        )
