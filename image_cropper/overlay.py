"""
Crop overlay widget: a darkened mask with a transparent crop window.

The overlay is a fixed-size layer stacked above the preview image.  It never
takes pointer input, so presses fall through to the image underneath.
"""

from contextlib import contextmanager

from PyQt6.QtCore import Qt, QRectF
from PyQt6.QtGui import QColor, QImage, QPainter, QPaintEvent, QPen
from PyQt6.QtWidgets import QWidget

from image_cropper.config import MASK_COLOR, STROKE_COLOR, STROKE_WIDTH
from image_cropper.models import CropRect, center_rect


class CropOverlay(QWidget):
    """Mask layer with a centred, fixed-size crop hole and optional outline."""

    def __init__(
        self, overlay_width: float, overlay_height: float,
        crop_width: float, crop_height: float, parent=None,
    ):
        super().__init__(parent)
        self._overlay_width = overlay_width
        self._overlay_height = overlay_height
        self._crop_width = crop_width
        self._crop_height = crop_height
        self._draw_stroke = True

        self.setFixedSize(int(round(overlay_width)), int(round(overlay_height)))
        self.setAttribute(Qt.WidgetAttribute.WA_TransparentForMouseEvents, True)

        # Offscreen surface the overlay is drawn into; paintEvent only blits it
        self._surface = QImage(
            self.width(), self.height(), QImage.Format.Format_ARGB32_Premultiplied,
        )
        self._draw()

    def get_crop_rect(self) -> CropRect:
        return center_rect(
            self._overlay_width, self._overlay_height, self._crop_width, self._crop_height,
        )

    def draw_stroke(self) -> bool:
        return self._draw_stroke

    def set_draw_stroke(self, draw: bool):
        """Show or hide the crop outline; redraws only when the value changes."""
        if self._draw_stroke != draw:
            self._draw_stroke = draw
            self._draw()

    @contextmanager
    def hidden_stroke(self):
        """Hide the outline for the duration of the block, then restore it."""
        previous = self._draw_stroke
        self.set_draw_stroke(False)
        try:
            yield self
        finally:
            self.set_draw_stroke(previous)

    def surface(self) -> QImage:
        """Return a copy of the rendered overlay."""
        return self._surface.copy()

    # --- Painting ---

    def _draw(self):
        # Order matters: the outline goes on after the hole is punched
        self._surface.fill(Qt.GlobalColor.transparent)

        painter = QPainter(self._surface)
        painter.fillRect(QRectF(0, 0, self._overlay_width, self._overlay_height), QColor(*MASK_COLOR))

        crop = QRectF(*self.get_crop_rect().to_tuple())
        painter.setCompositionMode(QPainter.CompositionMode.CompositionMode_Clear)
        painter.fillRect(crop, Qt.GlobalColor.transparent)
        painter.setCompositionMode(QPainter.CompositionMode.CompositionMode_SourceOver)

        if self._draw_stroke:
            painter.setPen(QPen(QColor(*STROKE_COLOR), STROKE_WIDTH))
            painter.setBrush(Qt.BrushStyle.NoBrush)
            painter.drawRect(crop)
        painter.end()

        self.update()

    def paintEvent(self, event: QPaintEvent):
        painter = QPainter(self)
        painter.drawImage(0, 0, self._surface)
        painter.end()
