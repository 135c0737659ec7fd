"""
Color Detector
==============
Pixel color distance and matching for bite marker detection.

All reference colors are RGB tuples. Buffers are numpy arrays in mss
layout (BGR or BGRA); only the first three channels are used.
"""

import numpy as np

# Per-channel range of an 8-bit color
CHANNEL_RANGE = 255


def tolerance_to_distance(tolerance_pct):
    """
    Translate a tolerance percentage into an absolute distance threshold.

    The percentage applies to the 0-255 range of each channel; the threshold
    is summed over the three RGB channels.

    Args:
        tolerance_pct (float): Tolerance in percent (0-30 in configuration)

    Returns:
        float: Maximum color distance still considered a match
    """
    return max(0.0, float(tolerance_pct)) / 100.0 * CHANNEL_RANGE * 3


def to_rgb(buffer):
    """Return an HxWx3 int32 RGB view of a BGR/BGRA buffer"""
    pixels = np.asarray(buffer)
    if pixels.ndim != 3 or pixels.shape[2] < 3:
        raise ValueError(f"Expected an HxWx3 or HxWx4 buffer, got shape {pixels.shape}")
    return pixels[:, :, 2::-1].astype(np.int32)


def manhattan_distances(buffer, reference_color):
    """Sum of absolute per-channel differences, per pixel"""
    diff = to_rgb(buffer) - np.asarray(reference_color[:3], dtype=np.int32)
    return np.abs(diff).sum(axis=2)


def euclidean_distances(buffer, reference_color):
    """Euclidean RGB distance, per pixel"""
    diff = to_rgb(buffer) - np.asarray(reference_color[:3], dtype=np.int32)
    return np.sqrt((diff * diff).sum(axis=2))


def window_counts(mask, radius):
    """
    Number of True pixels in the (2r+1)x(2r+1) window around each pixel.

    Uses a summed-area table, windows are clipped at the buffer edges.
    """
    mask = np.asarray(mask, dtype=np.int32)
    height, width = mask.shape
    table = np.zeros((height + 1, width + 1), dtype=np.int64)
    table[1:, 1:] = mask.cumsum(axis=0).cumsum(axis=1)

    rows = np.arange(height)
    cols = np.arange(width)
    top = np.clip(rows - radius, 0, height)[:, None]
    bottom = np.clip(rows + radius + 1, 0, height)[:, None]
    left = np.clip(cols - radius, 0, width)[None, :]
    right = np.clip(cols + radius + 1, 0, width)[None, :]

    return table[bottom, right] - table[top, right] - table[bottom, left] + table[top, left]


class ColorDetector:
    """
    Color detection and matching utilities.

    Matches region buffers against a reference color, either any single
    pixel (basic) or a cluster of nearby pixels (advanced).
    """

    def __init__(self, cluster_radius=5, cluster_quorum=3):
        """
        Initialize color detector.

        Args:
            cluster_radius (int): Half-size of the neighbourhood window (default: 5 -> 11x11)
            cluster_quorum (int): Matching pixels required inside the window (default: 3)
        """
        self.cluster_radius = cluster_radius
        self.cluster_quorum = cluster_quorum

    def match_mask(self, buffer, reference_color, tolerance_pct, euclidean=False):
        """
        Boolean mask of pixels within tolerance of the reference color.

        Args:
            buffer (numpy.ndarray): Region buffer (BGR/BGRA)
            reference_color (tuple): (R, G, B) target
            tolerance_pct (float): Tolerance in percent of the channel range
            euclidean (bool): Use Euclidean instead of Manhattan distance
        """
        threshold = tolerance_to_distance(tolerance_pct)
        if euclidean:
            distances = euclidean_distances(buffer, reference_color)
        else:
            distances = manhattan_distances(buffer, reference_color)
        return distances <= threshold

    def has_match(self, buffer, reference_color, tolerance_pct):
        """True if any single pixel matches (basic detection)"""
        return bool(self.match_mask(buffer, reference_color, tolerance_pct).any())

    def has_cluster(self, buffer, reference_color, tolerance_pct):
        """
        True if some matching pixel has a quorum of matching neighbours.

        A pixel counts when at least cluster_quorum matching pixels (itself
        included) lie in the window around it. Isolated matches from
        compression or dithering noise are ignored.
        """
        mask = self.match_mask(buffer, reference_color, tolerance_pct, euclidean=True)
        if not mask.any():
            return False
        counts = window_counts(mask, self.cluster_radius)
        return bool((mask & (counts >= self.cluster_quorum)).any())
