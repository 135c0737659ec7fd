"""
Test suite for vision/color_detector.py
========================================
Tests for tolerance translation, buffer matching and cluster detection.
"""

import numpy as np
import pytest

from vision.color_detector import (
    ColorDetector,
    euclidean_distances,
    manhattan_distances,
    tolerance_to_distance,
    window_counts,
)
from tests.conftest import solid

RED = (241, 27, 28)


def with_pixels(points, color=RED, size=20):
    """Black BGRA buffer with the given (row, col) pixels set to color"""
    buffer = solid((0, 0, 0), width=size, height=size)
    r, g, b = color
    for row, col in points:
        buffer[row, col] = [b, g, r, 255]
    return buffer


class TestToleranceAndDistances:
    """Tests for tolerance translation and distance maths"""

    def test_tolerance_is_percentage_of_channel_range(self):
        assert tolerance_to_distance(0) == 0.0
        assert tolerance_to_distance(10) == pytest.approx(76.5)
        assert tolerance_to_distance(30) == pytest.approx(229.5)

    def test_negative_tolerance_clamps_to_zero(self):
        assert tolerance_to_distance(-5) == 0.0

    def test_manhattan_distance_sums_channels(self):
        buffer = solid((251, 22, 28))
        distances = manhattan_distances(buffer, RED)
        assert distances.shape == (12, 12)
        assert int(distances[0, 0]) == 15

    def test_euclidean_distance(self):
        buffer = solid((244, 31, 28))
        distances = euclidean_distances(buffer, RED)
        assert distances[0, 0] == pytest.approx(5.0)

    def test_bgr_and_bgra_buffers_agree(self):
        bgra = solid((10, 200, 30), alpha=True)
        bgr = solid((10, 200, 30), alpha=False)
        assert np.array_equal(
            manhattan_distances(bgra, RED), manhattan_distances(bgr, RED)
        )

    def test_bad_buffer_shape_raises(self):
        with pytest.raises(ValueError):
            manhattan_distances(np.zeros((5, 5), dtype=np.uint8), RED)


class TestBufferMatching:
    """Tests for basic (any pixel) matching over buffers"""

    def test_solid_marker_matches_at_zero_tolerance(self):
        detector = ColorDetector()
        assert detector.has_match(solid(RED), RED, 0) is True

    def test_near_color_needs_tolerance(self):
        detector = ColorDetector()
        buffer = solid((251, 27, 28))  # distance 10

        assert detector.has_match(buffer, RED, 0) is False
        assert detector.has_match(buffer, RED, 2) is True

    def test_single_pixel_is_enough(self):
        detector = ColorDetector()
        buffer = with_pixels([(7, 7)])

        assert detector.has_match(buffer, RED, 5) is True
        assert int(detector.match_mask(buffer, RED, 5).sum()) == 1

    def test_background_does_not_match(self):
        detector = ColorDetector()
        assert detector.has_match(solid((20, 40, 60)), RED, 10) is False


class TestClusterMatching:
    """Tests for advanced (cluster quorum) matching"""

    def test_isolated_pixel_is_rejected(self):
        detector = ColorDetector()
        buffer = with_pixels([(10, 10)])

        assert detector.has_match(buffer, RED, 5) is True
        assert detector.has_cluster(buffer, RED, 5) is False

    def test_two_pixels_below_quorum(self):
        detector = ColorDetector()
        assert detector.has_cluster(with_pixels([(10, 10), (10, 11)]), RED, 5) is False

    def test_three_close_pixels_form_cluster(self):
        detector = ColorDetector()
        buffer = with_pixels([(10, 10), (10, 11), (12, 14)])
        assert detector.has_cluster(buffer, RED, 5) is True

    def test_scattered_pixels_do_not_form_cluster(self):
        detector = ColorDetector()
        buffer = with_pixels([(0, 0), (0, 19), (19, 0)])
        assert detector.has_cluster(buffer, RED, 5) is False

    def test_window_counts_clip_at_edges(self):
        mask = np.zeros((5, 5), dtype=bool)
        mask[0, 0] = True
        mask[0, 1] = True

        counts = window_counts(mask, 1)

        assert counts[0, 0] == 2
        assert counts[1, 1] == 2
        assert counts[4, 4] == 0
