"""
Geometry Checker
================

Absolute size and aspect-ratio gate, run on the ORIGINAL dimensions
before any pixel work is done.
"""

from card_gate.models.outcome import FailureKind, ValidationOutcome
from card_gate.models.thresholds import DEFAULT_THRESHOLDS, ValidationThresholds


def check_geometry(
    width: int,
    height: int,
    thresholds: ValidationThresholds = DEFAULT_THRESHOLDS,
) -> ValidationOutcome:
    """
    Validate image dimensions.

    Size is checked before aspect ratio, so a tiny and extremely
    elongated image is reported as TOO_SMALL.

    Args:
        width: Image width in pixels
        height: Image height in pixels
        thresholds: Threshold set

    Returns:
        Valid, or Invalid(TOO_SMALL) / Invalid(BAD_ASPECT_RATIO)
    """
    if width < thresholds.min_dimension or height < thresholds.min_dimension:
        return ValidationOutcome.failed(FailureKind.TOO_SMALL)

    aspect_ratio = width / height
    if not thresholds.min_aspect_ratio <= aspect_ratio <= thresholds.max_aspect_ratio:
        return ValidationOutcome.failed(FailureKind.BAD_ASPECT_RATIO)

    return ValidationOutcome.passed()
