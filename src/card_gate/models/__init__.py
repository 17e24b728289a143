"""
Data Models
===========

Typed values passed through the validation pipeline.

Models:
    Buffers:
        - PixelBuffer: Decoded RGB(A) pixels
        - GrayscaleBuffer: Luminance projection
        - BufferInvariantError: Layout violation (programming defect)

    Thresholds:
        - ValidationThresholds: All tunable constants

    Outcome:
        - FailureKind: Machine-readable rejection codes
        - ValidationState: PENDING / VALID / INVALID
        - ValidationOutcome: Single verdict for an image

    Report:
        - ImageMetrics: Observability-only measurements
        - ValidationReport: Outcome plus metrics

    Request:
        - ValidateRequest: HTTP request body
"""

from card_gate.models.buffers import BufferInvariantError, GrayscaleBuffer, PixelBuffer
from card_gate.models.thresholds import DEFAULT_THRESHOLDS, ValidationThresholds
from card_gate.models.outcome import FailureKind, ValidationOutcome, ValidationState
from card_gate.models.report import ImageMetrics, ValidationReport
from card_gate.models.request import ValidateRequest

__all__ = [
    # Buffers
    "PixelBuffer",
    "GrayscaleBuffer",
    "BufferInvariantError",
    # Thresholds
    "ValidationThresholds",
    "DEFAULT_THRESHOLDS",
    # Outcome
    "FailureKind",
    "ValidationState",
    "ValidationOutcome",
    # Report
    "ImageMetrics",
    "ValidationReport",
    # Request
    "ValidateRequest",
]
