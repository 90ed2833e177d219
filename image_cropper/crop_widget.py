"""
Interactive image-cropper widget and Qt image helpers.

This module contains everything that touches both Qt **and** image display:
the PIL ↔ Qt conversions, the draggable ``ImageView`` layer, and the
``ImageCropper`` panel that stacks the image, the ``CropOverlay`` and a zoom
slider.  All geometry lives in ``CropController``; the widgets only forward
input to it and repaint.
"""

import logging

from PIL import Image
from PyQt6.QtWidgets import QSizePolicy, QSlider, QVBoxLayout, QWidget
from PyQt6.QtCore import Qt, QPoint, QRectF, pyqtSignal
from PyQt6.QtGui import (
    QImage, QKeyEvent, QMouseEvent, QPainter, QPaintEvent, QPixmap, QRegion, QWheelEvent,
)

from image_cropper.config import (
    LAYOUT_MARGIN, LAYOUT_SPACING, NUDGE_LARGE, NUDGE_SMALL,
    PREVIEW_HEIGHT, PREVIEW_WIDTH, ZOOM_DEFAULT, ZOOM_MAX, ZOOM_MIN, ZOOM_WHEEL_STEP,
)
from image_cropper.controller import CropController
from image_cropper.image_io import crop_image
from image_cropper.models import CropRect, fitted_size, validate_image_size, validate_ratio
from image_cropper.overlay import CropOverlay

logger = logging.getLogger(__name__)


# =============================================================================
# Qt ↔ PIL helpers
# =============================================================================

def pil_to_qpixmap(pil_img: Image.Image) -> QPixmap:
    """Convert a PIL Image to QPixmap."""
    img_rgba = pil_img.convert("RGBA")
    data = img_rgba.tobytes("raw", "RGBA")
    qimg = QImage(data, img_rgba.width, img_rgba.height, QImage.Format.Format_RGBA8888)
    return QPixmap.fromImage(qimg)


def qimage_to_pil(qimg: QImage) -> Image.Image:
    """Convert a QImage to an RGBA PIL Image."""
    rgba = qimg.convertToFormat(QImage.Format.Format_RGBA8888)
    ptr = rgba.constBits()
    ptr.setsize(rgba.sizeInBytes())
    return Image.frombuffer(
        "RGBA", (rgba.width(), rgba.height()), bytes(ptr), "raw", "RGBA", rgba.bytesPerLine(), 1,
    )


def image_size(image) -> tuple[int, int]:
    """Return ``(width, height)`` of a QPixmap, QImage or PIL Image."""
    if image is None:
        raise ValueError("image must not be None")
    if isinstance(image, Image.Image):
        return image.size
    if isinstance(image, (QPixmap, QImage)):
        return image.width(), image.height()
    raise TypeError(f"Unsupported image type: {type(image).__name__}")


def to_qpixmap(image) -> QPixmap:
    """Convert any supported image type to QPixmap."""
    if isinstance(image, QPixmap):
        return image
    if isinstance(image, QImage):
        return QPixmap.fromImage(image)
    if isinstance(image, Image.Image):
        return pil_to_qpixmap(image)
    raise TypeError(f"Unsupported image type: {type(image).__name__}")


def scale_to_fit(pixmap: QPixmap, max_w: float, max_h: float) -> QPixmap:
    """Return a copy of ``pixmap`` uniformly scaled to fit within max_w x max_h."""
    w, h = fitted_size(pixmap.width(), pixmap.height(), max_w, max_h)
    return pixmap.scaled(
        w, h, Qt.AspectRatioMode.IgnoreAspectRatio, Qt.TransformationMode.SmoothTransformation,
    )


# =============================================================================
# Image View — the draggable, zoomable image layer
# =============================================================================

class ImageView(QWidget):
    """Paints the preview pixmap at the controller's view rect and handles drag."""

    wheel_steps = pyqtSignal(int)

    def __init__(self, pixmap: QPixmap, controller: CropController, parent=None):
        super().__init__(parent)
        self._pixmap = pixmap
        self._controller = controller
        self.setCursor(Qt.CursorShape.OpenHandCursor)

    def paintEvent(self, event: QPaintEvent):
        view = self._controller.view
        painter = QPainter(self)
        painter.setRenderHint(QPainter.RenderHint.SmoothPixmapTransform)
        painter.drawPixmap(
            QRectF(view.x, view.y, view.width, view.height),
            self._pixmap,
            QRectF(self._pixmap.rect()),
        )
        painter.end()

    # --- Mouse interaction ---

    def mousePressEvent(self, event: QMouseEvent):
        if event.button() != Qt.MouseButton.LeftButton:
            return
        pos = event.position()
        if not self._controller.image_contains(pos.x(), pos.y()):
            return
        self._controller.press(pos.x(), pos.y())
        self.setCursor(Qt.CursorShape.ClosedHandCursor)

    def mouseMoveEvent(self, event: QMouseEvent):
        if not self._controller.is_dragging:
            return
        pos = event.position()
        self._controller.drag(pos.x(), pos.y())

    def mouseReleaseEvent(self, event: QMouseEvent):
        if event.button() == Qt.MouseButton.LeftButton:
            self._controller.release()
            self.setCursor(Qt.CursorShape.OpenHandCursor)

    def wheelEvent(self, event: QWheelEvent):
        notches = int(event.angleDelta().y() / 120)
        if notches:
            self.wheel_steps.emit(notches)
            event.accept()
        else:
            super().wheelEvent(event)


# =============================================================================
# Image Cropper — preview panel, overlay and zoom slider
# =============================================================================

class ImageCropper(QWidget):
    """Reusable panel for cropping an image to a fixed aspect ratio.

    The image can be dragged inside the preview and zoomed with the slider
    below it; it is always kept covering the centred crop window.  ``snap()``
    returns the pixels under the crop window with a transparent background.

    Usage::

        cropper = ImageCropper(QPixmap("photo.jpg"), 16, 9)
        layout.addWidget(cropper)
        ...
        result = cropper.snap()
    """

    view_changed = pyqtSignal()
    zoom_changed = pyqtSignal(int)

    def __init__(self, image, ratio_w: float = 1, ratio_h: float = 1, parent=None):
        super().__init__(parent)
        img_w, img_h = image_size(image)
        validate_image_size(img_w, img_h)
        validate_ratio(ratio_w, ratio_h)

        self._source = image
        self._ratio = (ratio_w, ratio_h)
        self._controller = CropController(img_w, img_h, ratio_w, ratio_h, PREVIEW_WIDTH, PREVIEW_HEIGHT)
        self._base_pixmap = scale_to_fit(to_qpixmap(image), PREVIEW_WIDTH, PREVIEW_HEIGHT)

        self.setFocusPolicy(Qt.FocusPolicy.StrongFocus)
        self.setSizePolicy(QSizePolicy.Policy.Fixed, QSizePolicy.Policy.Fixed)

        layout = QVBoxLayout(self)
        layout.setSpacing(LAYOUT_SPACING)
        layout.setContentsMargins(LAYOUT_MARGIN, LAYOUT_MARGIN, LAYOUT_MARGIN, LAYOUT_MARGIN)

        self._create_preview_panel(layout)
        self._create_preview_view()
        self._create_crop_overlay()
        self._create_zoom_slider(layout)

        self._controller.add_listener(self._on_view_changed)
        logger.debug(
            "ImageCropper created: source %dx%d, ratio %s:%s, crop %s",
            img_w, img_h, ratio_w, ratio_h, self._controller.crop_rect,
        )

    # --- Public API ---

    @property
    def controller(self) -> CropController:
        return self._controller

    @property
    def overlay(self) -> CropOverlay:
        return self._overlay

    @property
    def zoom_slider(self) -> QSlider:
        return self._zoom_slider

    @property
    def crop_rect(self) -> CropRect:
        return self._overlay.get_crop_rect()

    @property
    def ratio(self) -> tuple[float, float]:
        return self._ratio

    def snap(self) -> QImage:
        """Capture the crop window as an image with a transparent background.

        The overlay outline is hidden while capturing and restored afterwards,
        also when the capture raises.
        """
        with self._overlay.hidden_stroke():
            rect = self._overlay.get_crop_rect()
            snapshot = self._capture_viewport(rect)
        logger.debug("Snapshot %dx%d taken at %s", snapshot.width(), snapshot.height(), rect)
        return snapshot

    def snap_pil(self) -> Image.Image:
        """Same as ``snap()`` but returned as an RGBA PIL Image."""
        return qimage_to_pil(self.snap())

    def crop_source(self) -> Image.Image:
        """Crop the original image at full resolution to the current crop window."""
        if isinstance(self._source, Image.Image):
            source = self._source
        elif isinstance(self._source, QPixmap):
            source = qimage_to_pil(self._source.toImage())
        else:
            source = qimage_to_pil(self._source)
        return crop_image(source, self._controller.source_crop_rect())

    def reset_view(self):
        """Return to zoom 0 with the image centred."""
        self._zoom_slider.blockSignals(True)
        self._zoom_slider.setValue(ZOOM_DEFAULT)
        self._zoom_slider.blockSignals(False)
        self._controller.reset()
        self.zoom_changed.emit(ZOOM_DEFAULT)

    # --- Initialization ---

    def _create_preview_panel(self, layout: QVBoxLayout):
        self._preview_panel = QWidget(self)
        self._preview_panel.setFixedSize(PREVIEW_WIDTH, PREVIEW_HEIGHT)
        layout.addWidget(self._preview_panel)

        self._layered_pane = QWidget(self._preview_panel)
        self._layered_pane.setObjectName("cropLayeredPane")
        self._layered_pane.setFixedSize(PREVIEW_WIDTH, PREVIEW_HEIGHT)
        self._layered_pane.move(0, 0)
        # Layers draw no background of their own
        self._layered_pane.setStyleSheet(
            "#cropLayeredPane, #cropLayeredPane QWidget { background: transparent; }"
        )

    def _create_preview_view(self):
        self._image_view = ImageView(self._base_pixmap, self._controller, self._layered_pane)
        self._image_view.setFixedSize(PREVIEW_WIDTH, PREVIEW_HEIGHT)
        self._image_view.move(0, 0)
        self._image_view.wheel_steps.connect(self._on_wheel_steps)

    def _create_crop_overlay(self):
        crop = self._controller.crop_rect
        self._overlay = CropOverlay(PREVIEW_WIDTH, PREVIEW_HEIGHT, crop.w, crop.h, self._layered_pane)
        self._overlay.move(0, 0)
        self._overlay.raise_()

    def _create_zoom_slider(self, layout: QVBoxLayout):
        self._zoom_slider = QSlider(Qt.Orientation.Horizontal, self)
        self._zoom_slider.setRange(ZOOM_MIN, ZOOM_MAX)
        self._zoom_slider.setValue(ZOOM_DEFAULT)
        self._zoom_slider.valueChanged.connect(self._on_zoom_value_changed)
        layout.addWidget(self._zoom_slider)

    # --- Capture ---

    def _capture_viewport(self, rect: CropRect) -> QImage:
        """Render the layered pane shifted by ``rect``'s origin into a transparent image."""
        snapshot = QImage(int(rect.w), int(rect.h), QImage.Format.Format_ARGB32_Premultiplied)
        snapshot.fill(Qt.GlobalColor.transparent)

        painter = QPainter(snapshot)
        if not painter.isActive():
            raise RuntimeError(f"Cannot paint on a {snapshot.width()}x{snapshot.height()} snapshot")
        try:
            # The translation alone selects the viewport; the snapshot bounds clip it
            painter.translate(-rect.x, -rect.y)
            self._layered_pane.render(
                painter, QPoint(0, 0), QRegion(), QWidget.RenderFlag.DrawChildren,
            )
        finally:
            painter.end()
        return snapshot

    # --- Event handlers ---

    def _on_view_changed(self):
        self._image_view.update()
        self.view_changed.emit()

    def _on_zoom_value_changed(self, value: int):
        self._controller.set_zoom(value)
        self.zoom_changed.emit(value)

    def _on_wheel_steps(self, notches: int):
        self._zoom_slider.setValue(self._zoom_slider.value() + notches * ZOOM_WHEEL_STEP)

    def keyPressEvent(self, event: QKeyEvent):
        amount = NUDGE_LARGE if event.modifiers() & Qt.KeyboardModifier.ShiftModifier else NUDGE_SMALL
        key = event.key()
        if key == Qt.Key.Key_Left:
            self._controller.move_by(-amount, 0)
        elif key == Qt.Key.Key_Right:
            self._controller.move_by(amount, 0)
        elif key == Qt.Key.Key_Up:
            self._controller.move_by(0, -amount)
        elif key == Qt.Key.Key_Down:
            self._controller.move_by(0, amount)
        else:
            super().keyPressEvent(event)
