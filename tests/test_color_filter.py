"""Tests for pixel color classification."""

import numpy as np
import pytest

from png_planning.core.color_filter import (
    PNGColor,
    ClassifyPixel,
    FilterImage,
    IsNearWhite,
)


TARGET = PNGColor(126, 106, 61)


def test_pixel_within_tolerance_is_obstacle():
    assert ClassifyPixel((130, 110, 65), [TARGET], tolerance=15)


def test_pixel_outside_tolerance_on_one_channel_is_free():
    # diffs (19, 15, 15): red channel exceeds the tolerance
    assert not ClassifyPixel((145, 121, 76), [TARGET], tolerance=15)


@pytest.mark.parametrize("channel", [0, 1, 2])
def test_tolerance_boundary_is_inclusive(channel):
    base = [126, 106, 61]
    exact = list(base)
    exact[channel] += 15
    beyond = list(base)
    beyond[channel] += 16
    assert ClassifyPixel(tuple(exact), [TARGET], tolerance=15)
    assert not ClassifyPixel(tuple(beyond), [TARGET], tolerance=15)


def test_tolerance_boundary_below_target():
    assert ClassifyPixel((111, 91, 46), [TARGET], tolerance=15)
    assert not ClassifyPixel((110, 91, 46), [TARGET], tolerance=15)


def test_near_white_is_obstacle_without_targets():
    assert ClassifyPixel((251, 251, 251), [], tolerance=0)
    assert ClassifyPixel((255, 255, 255), [], tolerance=15)


def test_near_white_threshold_is_strict():
    assert not IsNearWhite((250, 255, 255))
    assert not ClassifyPixel((250, 251, 251), [], tolerance=0)


def test_near_white_rule_can_be_disabled():
    assert not ClassifyPixel((255, 255, 255), [], tolerance=15, near_white_threshold=None)


def test_adding_targets_never_removes_obstacles():
    rng = np.random.default_rng(7)
    pixels = [tuple(int(v) for v in p) for p in rng.integers(0, 256, size=(300, 3))]
    targets = []
    previous = [ClassifyPixel(p, targets, tolerance=20) for p in pixels]
    for color in rng.integers(0, 256, size=(6, 3)):
        targets.append(PNGColor(*(int(c) for c in color)))
        current = [ClassifyPixel(p, targets, tolerance=20) for p in pixels]
        assert all(c or not p for p, c in zip(previous, current))
        previous = current


def test_duplicate_targets_are_harmless():
    image = np.array([[[130, 110, 65], [0, 0, 0]]], dtype=np.uint8)
    once = FilterImage(image, [TARGET], tolerance=15).obstacle
    twice = FilterImage(image, [TARGET, TARGET], tolerance=15).obstacle
    assert np.array_equal(once, twice)


def test_filter_image_matches_pixel_classifier():
    rng = np.random.default_rng(3)
    image = rng.integers(0, 256, size=(12, 9, 3), dtype=np.uint8)
    image[0, 0] = (130, 110, 65)
    image[1, 1] = (252, 253, 254)
    targets = [TARGET, PNGColor(61, 53, 6)]

    result = FilterImage(image, targets, tolerance=15)

    assert result.obstacle.shape == (12, 9)
    assert result.filtered is None
    for y in range(12):
        for x in range(9):
            expected = ClassifyPixel(tuple(int(v) for v in image[y, x]), targets, tolerance=15)
            assert result.obstacle[y, x] == expected


def test_filtered_image_is_black_and_white_and_input_untouched():
    image = np.array(
        [[[130, 110, 65], [10, 200, 10]],
         [[255, 255, 255], [145, 121, 76]]],
        dtype=np.uint8,
    )
    original = image.copy()

    result = FilterImage(image, [TARGET], tolerance=15, write_filtered=True)

    assert np.array_equal(image, original)
    assert result.filtered.shape == image.shape
    assert result.filtered.dtype == np.uint8
    assert tuple(result.filtered[0, 0]) == (0, 0, 0)
    assert tuple(result.filtered[0, 1]) == (255, 255, 255)
    assert tuple(result.filtered[1, 0]) == (0, 0, 0)
    assert tuple(result.filtered[1, 1]) == (255, 255, 255)


def test_filter_image_rejects_wrong_shape():
    with pytest.raises(ValueError):
        FilterImage(np.zeros((4, 4), dtype=np.uint8), [TARGET])
    with pytest.raises(ValueError):
        FilterImage(np.zeros((4, 4, 4), dtype=np.uint8), [TARGET])
    with pytest.raises(ValueError):
        FilterImage(np.zeros((4, 4, 3), dtype=np.float32), [TARGET])


def test_png_color_rejects_out_of_range_channel():
    with pytest.raises(ValueError):
        PNGColor(256, 0, 0)
