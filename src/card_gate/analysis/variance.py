"""
Variance Analyzer
=================

Rejects near-blank and flat images.

Formula:
    var_c = E[x_c^2] - E[x_c]^2        for c in (R, G, B)
    total_variance = var_R + var_G + var_B

Sums are accumulated in int64: a 300x300 working copy reaches
90,000 * 255^2 ~ 5.9e9 per channel, past the int32 range.
"""

import numpy as np

from card_gate.models.buffers import PixelBuffer
from card_gate.models.outcome import FailureKind, ValidationOutcome
from card_gate.models.thresholds import DEFAULT_THRESHOLDS, ValidationThresholds


def compute_color_variance(buffer: PixelBuffer) -> float:
    """
    Sum of the per-channel population variances of R, G and B.

    Args:
        buffer: Pixels to analyse (alpha is ignored)

    Returns:
        Total variance on the 8-bit scale (0 for a solid color)
    """
    samples = buffer.rgb.reshape(-1, 3).astype(np.int64)
    count = samples.shape[0]

    sums = samples.sum(axis=0)
    sums_sq = (samples * samples).sum(axis=0)

    means = sums / count
    variances = sums_sq / count - means ** 2

    # Cancellation can leave a tiny negative residue on flat channels
    return float(np.clip(variances, 0.0, None).sum())


def check_variance(
    total_variance: float,
    thresholds: ValidationThresholds = DEFAULT_THRESHOLDS,
) -> ValidationOutcome:
    """Invalid(LOW_CONTRAST) when total_variance is below the floor."""
    if total_variance < thresholds.variance_floor:
        return ValidationOutcome.failed(FailureKind.LOW_CONTRAST)
    return ValidationOutcome.passed()
