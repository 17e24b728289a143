"""
Edge / Shape Analyzer
=====================

Heuristic card-presence test: does the frame contain a centred,
rectangular subject?

No contour extraction or segmentation is done. Instead three cheap
signals are combined:

    1. Edge density: share of interior pixels whose Sobel magnitude beats
       an ADAPTIVE threshold (a fraction of the image's own top-decile
       magnitude). Too few strong edges means a blank frame; too many
       means texture noise rather than a clean boundary.
    2. Axis balance: strong edges are split into horizontally-dominant
       and vertically-dominant pixels. The straight borders of a card
       put a meaningful share on BOTH axes.
    3. Center content: the luminance variance of a centred square,
       which is low when the middle of the frame is empty background.

Formulas:
    magnitude   = sqrt(Gx^2 + Gy^2)                 (3x3 Sobel)
    threshold   = magnitude_desc[floor(n * p)] * k  (p = 0.1, k = 0.5)
    edge_ratio  = strong_edges / interior_pixels
    horizontal  : |g[x+1] - g[x-1]| > m * |g[y+1] - g[y-1]|   (m = 1.5)
    vertical    : |g[y+1] - g[y-1]| > m * |g[x+1] - g[x-1]|
"""

import logging
import math
from dataclasses import dataclass
from typing import Optional

import cv2
import numpy as np

from card_gate.models.buffers import GrayscaleBuffer
from card_gate.models.outcome import FailureKind, ValidationOutcome
from card_gate.models.thresholds import DEFAULT_THRESHOLDS, ValidationThresholds


logger = logging.getLogger(__name__)


@dataclass(frozen=True, slots=True)
class EdgeField:
    """
    Gradient magnitudes and strong-edge counts for one image.

    Attributes:
        magnitude: Sobel magnitude at interior pixels, shape (H - 2, W - 2)
        threshold: Adaptive strong-edge threshold
        strong_edges: Pixels with magnitude > threshold
        horizontal_edges: Strong pixels dominated by the horizontal difference
        vertical_edges: Strong pixels dominated by the vertical difference
    """

    magnitude: np.ndarray
    threshold: float
    strong_edges: int
    horizontal_edges: int
    vertical_edges: int

    @property
    def interior_pixels(self) -> int:
        return int(self.magnitude.size)

    @property
    def edge_ratio(self) -> float:
        if self.interior_pixels == 0:
            return 0.0
        return self.strong_edges / self.interior_pixels

    def __repr__(self) -> str:
        return (
            f"EdgeField(threshold={self.threshold:.2f}, "
            f"ratio={self.edge_ratio:.3f}, "
            f"h={self.horizontal_edges}, v={self.vertical_edges})"
        )


@dataclass(frozen=True, slots=True)
class ShapeAnalysis:
    """
    Card-likelihood verdict with the signals it was built from.

    Attributes:
        edges: Edge field of the working copy
        center_variance: Luminance variance of the center square
        edge_ratio_in_range: edge_ratio within [edge_ratio_min, edge_ratio_max]
        has_rectangular_edges: Both axes hold enough of the strong edges
        has_center_content: center_variance above its floor
    """

    edges: EdgeField
    center_variance: float
    edge_ratio_in_range: bool
    has_rectangular_edges: bool
    has_center_content: bool

    @property
    def is_likely_card(self) -> bool:
        return (
            self.edge_ratio_in_range
            and self.has_rectangular_edges
            and self.has_center_content
        )


def adaptive_threshold(magnitude: np.ndarray, percentile: float, scale: float) -> float:
    """
    Data-driven strong-edge cutoff.

    Equivalent to sorting the magnitudes in descending order and taking
    the value at index floor(n * percentile), multiplied by scale. A
    selection (np.partition) is used instead of a full sort.

    Args:
        magnitude: Gradient magnitudes (any shape)
        percentile: Position from the top, in [0, 1)
        scale: Multiplier for the selected value

    Returns:
        Threshold value (0.0 for an empty input)
    """
    values = magnitude.ravel()
    count = values.size
    if count == 0:
        return 0.0
    rank = min(int(math.floor(count * percentile)), count - 1)
    kth = count - 1 - rank
    return float(np.partition(values, kth)[kth]) * scale


def compute_edge_field(
    gray: GrayscaleBuffer,
    thresholds: ValidationThresholds = DEFAULT_THRESHOLDS,
) -> Optional[EdgeField]:
    """
    Compute Sobel magnitudes and classify strong edges by axis.

    Args:
        gray: Luminance of the working copy
        thresholds: Threshold set

    Returns:
        EdgeField, or None if the image has no interior pixels
    """
    if gray.interior_pixel_count == 0:
        return None

    luma = gray.luma

    # Interior only: border values depend on the filter's border mode
    gx = cv2.Sobel(luma, cv2.CV_64F, 1, 0, ksize=3)[1:-1, 1:-1]
    gy = cv2.Sobel(luma, cv2.CV_64F, 0, 1, ksize=3)[1:-1, 1:-1]
    magnitude = np.sqrt(gx * gx + gy * gy)

    threshold = adaptive_threshold(
        magnitude,
        thresholds.edge_percentile,
        thresholds.edge_threshold_scale,
    )
    strong = magnitude > threshold

    dx = np.abs(luma[1:-1, 2:] - luma[1:-1, :-2])
    dy = np.abs(luma[2:, 1:-1] - luma[:-2, 1:-1])
    margin = thresholds.dominance_margin

    horizontal = strong & (dx > dy * margin)
    vertical = strong & ~horizontal & (dy > dx * margin)

    return EdgeField(
        magnitude=magnitude,
        threshold=threshold,
        strong_edges=int(np.count_nonzero(strong)),
        horizontal_edges=int(np.count_nonzero(horizontal)),
        vertical_edges=int(np.count_nonzero(vertical)),
    )


def compute_center_variance(gray: GrayscaleBuffer, region_fraction: float = 0.6) -> float:
    """
    Luminance variance of a centred square.

    The square has side 2 * floor(min(W, H) * region_fraction / 2),
    clipped to the image bounds.

    Returns:
        Population variance, 0.0 if the square is empty
    """
    width, height = gray.width, gray.height
    half = int(math.floor(min(width, height) * region_fraction / 2))
    cx, cy = width // 2, height // 2

    region = gray.luma[
        max(0, cy - half):min(height, cy + half),
        max(0, cx - half):min(width, cx + half),
    ]
    if region.size == 0:
        return 0.0
    return float(region.var())


def analyze_shape(
    gray: GrayscaleBuffer,
    thresholds: ValidationThresholds = DEFAULT_THRESHOLDS,
) -> Optional[ShapeAnalysis]:
    """
    Run the full card-likelihood heuristic.

    Returns:
        ShapeAnalysis, or None if the image is too small to analyse
    """
    edges = compute_edge_field(gray, thresholds)
    if edges is None:
        return None

    strong = edges.strong_edges
    axis_floor = strong * thresholds.axis_share_min
    has_rectangular_edges = (
        edges.horizontal_edges > axis_floor and edges.vertical_edges > axis_floor
    )

    center_variance = compute_center_variance(gray, thresholds.center_region_fraction)

    analysis = ShapeAnalysis(
        edges=edges,
        center_variance=center_variance,
        edge_ratio_in_range=(
            thresholds.edge_ratio_min <= edges.edge_ratio <= thresholds.edge_ratio_max
        ),
        has_rectangular_edges=has_rectangular_edges,
        has_center_content=center_variance > thresholds.center_variance_floor,
    )
    logger.debug(f"Shape analysis: {edges!r}, center_variance={center_variance:.1f}")
    return analysis


def check_shape(analysis: ShapeAnalysis) -> ValidationOutcome:
    """Invalid(NO_CARD_DETECTED) unless the frame looks like a card."""
    if not analysis.is_likely_card:
        return ValidationOutcome.failed(FailureKind.NO_CARD_DETECTED)
    return ValidationOutcome.passed()
