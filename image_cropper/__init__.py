"""
Reusable PyQt6 widget for cropping an image to a fixed aspect ratio.

``ImageCropper`` is the widget; ``CropController`` and the helpers in
``models`` hold the Qt-free pan/zoom geometry.
"""

from image_cropper.controller import CropController
from image_cropper.crop_widget import ImageCropper
from image_cropper.models import CropRect, DragSession, ViewState
from image_cropper.overlay import CropOverlay

__version__ = "26.1.0"

__all__ = [
    "CropController",
    "CropOverlay",
    "CropRect",
    "DragSession",
    "ImageCropper",
    "ViewState",
]
