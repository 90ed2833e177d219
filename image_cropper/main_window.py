"""
Demo window hosting an ``ImageCropper``.

Opens an image, lets the user pick a ratio preset and saves either the
preview snapshot or a full-resolution crop as PNG.  Changing the ratio or
the image rebuilds the cropper, since its crop window is fixed for the
widget's lifetime.
"""

import logging
from pathlib import Path

from PIL import Image
from PyQt6.QtWidgets import (
    QComboBox, QFileDialog, QLabel, QMainWindow, QMessageBox, QStatusBar,
    QToolBar, QVBoxLayout, QWidget,
)
from PyQt6.QtCore import Qt
from PyQt6.QtGui import QAction, QKeySequence, QShortcut

from image_cropper.config import IMAGE_EXTENSIONS
from image_cropper.crop_widget import ImageCropper
from image_cropper.image_io import open_image, save_png
from image_cropper.ratios import aspect_key, load_presets

logger = logging.getLogger(__name__)


class MainWindow(QMainWindow):
    def __init__(self, image_path: Path | None = None, ratio: tuple[float, float] | None = None,
                 output_path: Path | None = None):
        super().__init__()
        self.setWindowTitle("Image Cropper")

        self._presets = load_presets()
        self._image: Image.Image | None = None
        self._image_path: Path | None = None
        self._output_path = output_path
        self._cropper: ImageCropper | None = None
        self._ratio = ratio or (self._presets[0]["ratio_w"], self._presets[0]["ratio_h"])

        self._build_ui()
        if image_path is not None:
            self.load_image(Path(image_path))
        self._update_button_states()

    # =========================================================================
    # UI construction
    # =========================================================================

    def _build_ui(self):
        self._build_toolbar()

        central = QWidget()
        self.setCentralWidget(central)
        self._central_layout = QVBoxLayout(central)
        self._central_layout.setContentsMargins(4, 4, 4, 4)

        self._placeholder = QLabel("Open an image to begin.")
        self._placeholder.setAlignment(Qt.AlignmentFlag.AlignCenter)
        self._placeholder.setMinimumSize(600, 460)
        self._central_layout.addWidget(self._placeholder)

        self._status = QStatusBar()
        self.setStatusBar(self._status)
        self._status.showMessage("Drag to position, use the slider or mouse wheel to zoom.")

        QShortcut(QKeySequence.StandardKey.Open, self, self._select_image)
        QShortcut(QKeySequence.StandardKey.Save, self, self._save_snapshot)
        QShortcut(QKeySequence(Qt.Key.Key_R), self, self._reset_view)

    def _build_toolbar(self):
        toolbar = QToolBar("Main")
        toolbar.setMovable(False)
        self.addToolBar(toolbar)

        act_open = QAction("📂 Open Image", self)
        act_open.triggered.connect(self._select_image)
        toolbar.addAction(act_open)

        toolbar.addSeparator()
        toolbar.addWidget(QLabel(" Ratio: "))

        self._ratio_combo = QComboBox()
        current_key = aspect_key(*self._ratio)
        for preset in self._presets:
            self._ratio_combo.addItem(preset["name"], (preset["ratio_w"], preset["ratio_h"]))
        index = self._find_ratio_index(current_key)
        if index < 0:
            # Ratio from the command line that is not a preset
            self._ratio_combo.addItem(current_key, self._ratio)
            index = self._ratio_combo.count() - 1
        self._ratio_combo.setCurrentIndex(index)
        self._ratio_combo.currentIndexChanged.connect(self._on_ratio_selected)
        toolbar.addWidget(self._ratio_combo)

        toolbar.addSeparator()

        self._act_reset = QAction("⟲ Reset View", self)
        self._act_reset.triggered.connect(self._reset_view)
        toolbar.addAction(self._act_reset)

        self._act_save = QAction("💾 Save Crop", self)
        self._act_save.setToolTip("Save the crop window as shown in the preview")
        self._act_save.triggered.connect(self._save_snapshot)
        toolbar.addAction(self._act_save)

        self._act_save_full = QAction("💾 Save Full Resolution", self)
        self._act_save_full.setToolTip("Save the crop window at the source image's resolution")
        self._act_save_full.triggered.connect(self._save_full_resolution)
        toolbar.addAction(self._act_save_full)

    def _find_ratio_index(self, key: str) -> int:
        """Index of the combo entry whose ratio normalizes to ``key``, or -1."""
        for i in range(self._ratio_combo.count()):
            data = self._ratio_combo.itemData(i)
            if data and aspect_key(*data) == key:
                return i
        return -1

    def _update_button_states(self):
        has_image = self._cropper is not None
        self._act_reset.setEnabled(has_image)
        self._act_save.setEnabled(has_image)
        self._act_save_full.setEnabled(has_image)

    # =========================================================================
    # Image / ratio handling
    # =========================================================================

    def load_image(self, path: Path) -> bool:
        """Open ``path`` and show it in a new cropper.  Returns False on failure."""
        try:
            image = open_image(path)
            self._install_cropper(image)
        except (OSError, ValueError) as exc:
            logger.warning("Could not open %s: %s", path, exc)
            QMessageBox.warning(self, "Open Failed", f"Could not open {path.name}:\n{exc}")
            return False

        self._image = image
        self._image_path = path
        self.setWindowTitle(f"Image Cropper — {path.name}")
        self._status.showMessage(f"{path.name}: {image.width}×{image.height}")
        self._update_button_states()
        return True

    def _install_cropper(self, image: Image.Image):
        cropper = ImageCropper(image, *self._ratio)
        cropper.view_changed.connect(self._on_view_changed)

        if self._cropper is not None:
            self._central_layout.removeWidget(self._cropper)
            self._cropper.deleteLater()
        else:
            self._placeholder.hide()
        self._cropper = cropper
        self._central_layout.addWidget(cropper, alignment=Qt.AlignmentFlag.AlignCenter)
        cropper.setFocus()

    def _select_image(self):
        patterns = " ".join(f"*{ext}" for ext in sorted(IMAGE_EXTENSIONS))
        start = str(self._image_path.parent if self._image_path else Path.home())
        path, _ = QFileDialog.getOpenFileName(self, "Open Image", start, f"Images ({patterns})")
        if path:
            self.load_image(Path(path))

    def _on_ratio_selected(self, index: int):
        ratio = self._ratio_combo.itemData(index)
        if not ratio:
            return
        self._ratio = tuple(ratio)
        if self._image is not None:
            self._install_cropper(self._image)

    def _on_view_changed(self):
        if self._cropper is None:
            return
        src = self._cropper.controller.source_crop_rect()
        self._status.showMessage(
            f"Zoom {self._cropper.controller.view.scale:.2f}×  |  "
            f"source crop {int(src.w)}×{int(src.h)} at ({int(src.x)}, {int(src.y)})"
        )

    def _reset_view(self):
        if self._cropper is not None:
            self._cropper.reset_view()

    # =========================================================================
    # Saving
    # =========================================================================

    def _default_output(self, suffix: str) -> Path:
        if self._output_path is not None:
            return self._output_path
        stem = self._image_path.stem if self._image_path else "crop"
        parent = self._image_path.parent if self._image_path else Path.home()
        return parent / f"{stem}-{suffix}.png"

    def _save(self, image: Image.Image, suffix: str):
        out = self._default_output(suffix)
        if self._output_path is None:
            chosen, _ = QFileDialog.getSaveFileName(self, "Save Crop", str(out), "PNG (*.png)")
            if not chosen:
                return
            out = Path(chosen)
        try:
            saved = save_png(image, out)
        except OSError as exc:
            logger.warning("Could not save %s: %s", out, exc)
            QMessageBox.warning(self, "Save Failed", f"Could not save crop:\n{exc}")
            return
        self._status.showMessage(f"Saved {saved}")

    def _save_snapshot(self):
        if self._cropper is None:
            return
        self._save(self._cropper.snap_pil(), "crop")

    def _save_full_resolution(self):
        if self._cropper is None:
            return
        self._save(self._cropper.crop_source(), "crop-full")
