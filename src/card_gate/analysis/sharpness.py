"""
Sharpness Analyzer
==================

Laplacian-variance focus measure.

The 4-neighbour Laplacian approximates the second derivative of the
luminance. Sharp detail produces a wide spread of responses; a blurred
image produces responses clustered near zero.

Kernel:
    [[ 0, -1,  0],
     [-1,  4, -1],
     [ 0, -1,  0]]

Only interior pixels (all four neighbours in bounds) contribute, so the
border handling of the filter never enters the statistic.

The default floor (5) is deliberately low because the measure runs on the
downsampled working copy, which is already softened.
"""

import logging
from typing import Optional

import cv2
import numpy as np

from card_gate.models.buffers import GrayscaleBuffer
from card_gate.models.outcome import FailureKind, ValidationOutcome
from card_gate.models.thresholds import DEFAULT_THRESHOLDS, ValidationThresholds


logger = logging.getLogger(__name__)


LAPLACIAN_KERNEL = np.array(
    [
        [0.0, -1.0, 0.0],
        [-1.0, 4.0, -1.0],
        [0.0, -1.0, 0.0],
    ],
    dtype=np.float64,
)


def laplacian_response(gray: GrayscaleBuffer) -> np.ndarray:
    """
    Laplacian response at every interior pixel.

    Returns:
        Array of shape (H - 2, W - 2); empty if the image is under 3x3
    """
    if gray.width < 3 or gray.height < 3:
        return np.empty((0, 0), dtype=np.float64)
    response = cv2.filter2D(gray.luma, cv2.CV_64F, LAPLACIAN_KERNEL)
    return response[1:-1, 1:-1]


def compute_sharpness(gray: GrayscaleBuffer) -> Optional[float]:
    """
    Population variance of the interior Laplacian response.

    Returns:
        Variance, or None when the buffer is smaller than 3x3 and the
        measure cannot be taken
    """
    response = laplacian_response(gray)
    if response.size == 0:
        return None
    return float(response.var())


def check_sharpness(
    sharpness: float,
    thresholds: ValidationThresholds = DEFAULT_THRESHOLDS,
) -> ValidationOutcome:
    """Invalid(TOO_BLURRY) when the Laplacian variance is below the floor."""
    if sharpness < thresholds.sharpness_floor:
        return ValidationOutcome.failed(FailureKind.TOO_BLURRY)
    return ValidationOutcome.passed()
