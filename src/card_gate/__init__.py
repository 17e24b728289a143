"""
CardGate
========

Image quality and card-presence validation for trading-card photos.

This package inspects a user-submitted photograph and decides whether it
is usable input for grading, before any network call is made. It rejects
blank, blurry, oddly-proportioned, or card-less photos with a single
machine-readable reason and a user-facing message.

Components:
    - imaging: Decoding, downsampling, grayscale projection
    - analysis: Geometry, variance, edge/shape and sharpness checks
    - engine: Fixed-order, short-circuiting orchestrator
    - main: FastAPI service wrapping the engine

Example:
    from card_gate import ImageValidator

    outcome = ImageValidator().validate(image_bytes)
    if not outcome.valid:
        print(outcome.reason.value, outcome.message)
"""

__version__ = "0.1.0"
__author__ = "CardGate Project"

from card_gate.engine import ImageValidator, validate_card_image
from card_gate.models.outcome import FailureKind, ValidationOutcome
from card_gate.models.thresholds import ValidationThresholds

__all__ = [
    "__version__",
    "ImageValidator",
    "validate_card_image",
    "FailureKind",
    "ValidationOutcome",
    "ValidationThresholds",
]
