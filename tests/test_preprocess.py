import numpy as np

from pivkit.preprocess import X_SPACING, Y_SPACING, generate_grid


def test_transparent_mask_matches_no_mask():
    mask = np.zeros((64, 80), dtype=np.uint8)
    assert generate_grid(80, 64, mask) == generate_grid(80, 64)


def test_points_are_on_spacing_and_inside_image():
    points = generate_grid(100, 70)
    assert points
    for x, y in points:
        assert x % X_SPACING == 0 and y % Y_SPACING == 0
        assert 0 < x < 100 and 0 < y < 70


def test_points_ordered_by_row_then_column():
    points = generate_grid(100, 70)
    assert points == sorted(points, key=lambda p: (p[1], p[0]))


def test_first_point_is_one_spacing_in():
    assert generate_grid(64, 64)[0] == (16, 16)


def test_opaque_mask_removes_everything():
    mask = np.full((64, 64), 255, dtype=np.uint8)
    assert generate_grid(64, 64, mask) == []


def test_single_opaque_pixel_removes_only_nearby_point():
    mask = np.zeros((64, 64), dtype=np.uint8)
    mask[0, 0] = 10
    full = generate_grid(64, 64)
    masked = generate_grid(64, 64, mask)
    assert masked == [p for p in full if p != (16, 16)]


def test_small_image_has_no_points():
    assert generate_grid(16, 16) == []


def test_mask_smaller_than_image_is_transparent_outside():
    mask = np.zeros((10, 10), dtype=np.uint8)
    assert generate_grid(64, 64, mask) == generate_grid(64, 64)