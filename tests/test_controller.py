"""Tests for CropController drag, zoom and clamp behaviour."""

import random
from unittest.mock import Mock

import pytest

from image_cropper.controller import CropController


@pytest.fixture
def wide():
    """1000x1000 source cropped at 16:9: view (90, 0, 400, 400), window (90, 87.5, 400, 225)."""
    return CropController(1000, 1000, 16, 9)


def _covered(ctrl: CropController) -> bool:
    return ctrl.view.bounds().contains(ctrl.crop_rect)


def test_initial_geometry(wide):
    view = wide.view
    assert wide.fit_scale == pytest.approx(0.4)
    assert (view.x, view.y, view.width, view.height) == pytest.approx((90, 0, 400, 400))
    assert wide.crop_rect.to_tuple() == pytest.approx((90, 87.5, 400, 225))
    assert wide.state == CropController.STATE_IDLE
    assert wide.zoom_value == 0


def test_default_ratio_is_square():
    ctrl = CropController(800, 400)
    assert ctrl.crop_rect.w == pytest.approx(ctrl.crop_rect.h)


@pytest.mark.parametrize("ratio", [(0, 1), (1, 0), (-16, 9), (16, -9)])
def test_invalid_ratio_rejected(ratio):
    with pytest.raises(ValueError):
        CropController(1000, 1000, *ratio)


def test_zero_size_image_rejected():
    with pytest.raises(ValueError):
        CropController(0, 100, 1, 1)


def test_drag_on_exactly_covering_image_stays_put():
    ctrl = CropController(1000, 1000, 1, 1)
    assert ctrl.view.bounds().to_tuple() == pytest.approx(ctrl.crop_rect.to_tuple())

    ctrl.press(200, 200)
    moved = ctrl.drag(250, 250)

    assert moved is False
    assert (ctrl.view.x, ctrl.view.y) == pytest.approx((90, 0))
    assert _covered(ctrl)


def test_drag_uses_incremental_deltas(wide):
    wide.set_zoom(100)
    assert (wide.view.x, wide.view.y) == pytest.approx((-110, -200))

    wide.press(0, 0)
    assert wide.is_dragging
    wide.drag(10, 10)
    assert (wide.view.x, wide.view.y) == pytest.approx((-100, -190))
    wide.drag(20, 20)
    assert (wide.view.x, wide.view.y) == pytest.approx((-90, -180))

    wide.release()
    assert wide.state == CropController.STATE_IDLE


def test_press_and_release_switch_drag_state(wide):
    wide.press(100, 100)
    assert wide.state == CropController.STATE_DRAGGING
    assert wide.is_dragging
    wide.release()
    assert wide.state == CropController.STATE_IDLE


def test_drag_ignored_while_idle(wide):
    wide.set_zoom(100)
    before = wide.view.bounds()
    assert wide.drag(50, 50) is False
    assert wide.view.bounds() == before


def test_drag_is_clamped(wide):
    wide.set_zoom(100)
    wide.press(0, 0)
    wide.drag(1000, 1000)
    assert (wide.view.x, wide.view.y) == pytest.approx((90, 87.5))

    wide.drag(-5000, -5000)
    assert wide.view.x + wide.view.width == pytest.approx(490)
    assert wide.view.y + wide.view.height == pytest.approx(312.5)
    assert _covered(wide)


def test_zoom_to_max_doubles_size_and_stays_centred(wide):
    centre = wide.view.bounds().center()
    wide.set_zoom(100)

    assert wide.view.scale == 2.0
    assert (wide.view.width, wide.view.height) == pytest.approx((800, 800))
    assert wide.view.bounds().center() == pytest.approx(centre)
    assert _covered(wide)


@pytest.mark.parametrize("start, end", [(0, 50), (30, 80), (100, 20), (60, 0)])
def test_zoom_keeps_centre_without_drag(wide, start, end):
    wide.set_zoom(start)
    centre = wide.view.bounds().center()
    wide.set_zoom(end)
    assert wide.view.bounds().center() == pytest.approx(centre)


def test_zoom_out_after_drag_reclamps(wide):
    wide.set_zoom(100)
    wide.press(0, 0)
    wide.drag(1000, 1000)
    wide.release()

    wide.set_zoom(0)
    assert (wide.view.x, wide.view.y) == pytest.approx((90, 87.5))
    assert _covered(wide)


def test_zoom_value_is_clamped(wide):
    wide.set_zoom(250)
    assert wide.zoom_value == 100
    assert wide.view.scale == 2.0


@pytest.mark.parametrize("seed", range(5))
def test_random_interactions_keep_window_covered(seed):
    rng = random.Random(seed)
    ratio = (rng.uniform(0.2, 5), rng.uniform(0.2, 5))
    ctrl = CropController(rng.randint(10, 4000), rng.randint(10, 4000), *ratio)
    px, py = 300.0, 200.0

    for _ in range(300):
        op = rng.random()
        if op < 0.15:
            ctrl.set_zoom(rng.uniform(0, 100))
        elif op < 0.25:
            px, py = rng.uniform(0, 580), rng.uniform(0, 400)
            ctrl.press(px, py)
        elif op < 0.3:
            ctrl.release()
        elif op < 0.35:
            ctrl.move_by(rng.uniform(-20, 20), rng.uniform(-20, 20))
        else:
            px += rng.uniform(-80, 80)
            py += rng.uniform(-80, 80)
            ctrl.drag(px, py)
        assert _covered(ctrl)


def test_listeners_fire_on_change(wide):
    listener = Mock()
    wide.add_listener(listener)

    wide.set_zoom(50)
    assert listener.call_count == 1

    wide.press(0, 0)
    wide.drag(5, 5)
    assert listener.call_count == 2

    wide.remove_listener(listener)
    wide.set_zoom(0)
    assert listener.call_count == 2


def test_move_by_nudges_and_clamps(wide):
    wide.set_zoom(100)
    assert wide.move_by(1, 0) is True
    assert wide.view.x == pytest.approx(-109)
    wide.move_by(10_000, 0)
    assert wide.view.x == pytest.approx(90)


def test_reset_restores_initial_view(wide):
    initial = wide.view.bounds()
    wide.set_zoom(70)
    wide.press(0, 0)
    wide.drag(40, -30)

    wide.reset()
    assert wide.view.bounds().to_tuple() == pytest.approx(initial.to_tuple())
    assert wide.zoom_value == 0
    assert not wide.is_dragging


def test_source_crop_rect_maps_to_source_pixels(wide):
    src = wide.source_crop_rect()
    assert src.to_tuple() == pytest.approx((0, 218.75, 1000, 562.5))

    wide.set_zoom(100)
    src = wide.source_crop_rect()
    # Twice the zoom covers half the source
    assert (src.w, src.h) == pytest.approx((500, 281.25))
    assert src.center() == pytest.approx((500, 500))


def test_natural_size_is_preview_bitmap_size():
    ctrl = CropController(1000, 333)
    view = ctrl.view
    assert (view.natural_width, view.natural_height) == (580, 193)
    assert (view.x, view.y) == pytest.approx((0, 103.5))
    assert ctrl.crop_rect.to_tuple() == pytest.approx((193.5, 103.5, 193, 193))

    src = ctrl.source_crop_rect()
    assert src.h == pytest.approx(333)
    assert src.w == pytest.approx(193 * 1000 / 580)


def test_image_contains(wide):
    assert wide.image_contains(100, 10)
    assert not wide.image_contains(10, 10)
