import os

# Widgets are created without a display server
os.environ.setdefault("QT_QPA_PLATFORM", "offscreen")

import pytest
from PIL import Image


@pytest.fixture
def make_pixmap(qapp):
    """Return a factory for solid-colour QPixmaps."""
    from PyQt6.QtGui import QColor, QPixmap

    def _make(w: int, h: int, color=(255, 0, 0)):
        pixmap = QPixmap(w, h)
        pixmap.fill(QColor(*color))
        return pixmap

    return _make


@pytest.fixture
def png_file(tmp_path):
    """A 1000x1000 opaque PNG on disk."""
    path = tmp_path / "photo.png"
    Image.new("RGB", (1000, 1000), (0, 128, 255)).save(path)
    return path
