"""Tests for the CropOverlay mask layer."""

from unittest.mock import Mock

import pytest
from PyQt6.QtCore import Qt

from image_cropper.overlay import CropOverlay


@pytest.fixture
def overlay(qtbot):
    widget = CropOverlay(580, 400, 400, 225)
    qtbot.addWidget(widget)
    return widget


def test_crop_rect_is_centred(overlay):
    assert overlay.get_crop_rect().to_tuple() == (90, 87.5, 400, 225)
    assert (overlay.width(), overlay.height()) == (580, 400)


def test_ignores_mouse_input(overlay):
    assert overlay.testAttribute(Qt.WidgetAttribute.WA_TransparentForMouseEvents)


def test_mask_and_hole(overlay):
    surface = overlay.surface()

    corner = surface.pixelColor(5, 5)
    assert (corner.red(), corner.green(), corner.blue()) == (0, 0, 0)
    assert abs(corner.alpha() - 153) <= 1

    assert surface.pixelColor(290, 200).alpha() == 0


def _stroke_visible(overlay) -> bool:
    surface = overlay.surface()
    for x in (89, 90, 91):
        color = surface.pixelColor(x, 200)
        if color.alpha() == 255 and color.red() == 255:
            return True
    return False


def test_stroke_drawn_after_hole(overlay):
    assert overlay.draw_stroke() is True
    assert _stroke_visible(overlay)

    overlay.set_draw_stroke(False)
    assert not _stroke_visible(overlay)


def test_set_draw_stroke_redraws_only_on_change(overlay):
    overlay._draw = Mock(wraps=overlay._draw)

    overlay.set_draw_stroke(True)
    assert overlay._draw.call_count == 0

    overlay.set_draw_stroke(False)
    overlay.set_draw_stroke(False)
    assert overlay._draw.call_count == 1

    overlay.set_draw_stroke(True)
    before = overlay.surface()
    overlay.set_draw_stroke(True)
    assert overlay._draw.call_count == 2
    assert overlay.surface() == before


def test_hidden_stroke_restores_previous_value(overlay):
    with overlay.hidden_stroke():
        assert overlay.draw_stroke() is False
    assert overlay.draw_stroke() is True

    overlay.set_draw_stroke(False)
    with overlay.hidden_stroke():
        pass
    assert overlay.draw_stroke() is False


def test_hidden_stroke_restores_on_error(overlay):
    with pytest.raises(RuntimeError):
        with overlay.hidden_stroke():
            raise RuntimeError("capture failed")
    assert overlay.draw_stroke() is True
