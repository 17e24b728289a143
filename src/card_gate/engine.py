"""
Validation Engine
=================

Orchestrates the quality checks for one submitted photo.

Pipeline:
    decode -> geometry -> downsample -> variance -> grayscale
           -> shape -> sharpness -> verdict

Design Rules:
    - Checks run in a FIXED order and the first failure wins; reasons are
      never aggregated
    - Sharpness runs last: it is the most tolerant check
    - Decode failures become Invalid(UNREADABLE_IMAGE); they never escape
    - BufferInvariantError DOES escape: it signals a programming defect
    - A check that cannot run on a tiny working copy is skipped and
      recorded, the remaining checks still decide the verdict
    - No state is kept between calls; one validator may be shared by
      any number of threads

Example:
    from card_gate.engine import ImageValidator

    validator = ImageValidator()
    outcome = validator.validate(open("card.jpg", "rb").read())
    if not outcome.valid:
        print(outcome.reason, outcome.message)
"""

import logging
from typing import Any, Dict, Optional, Union

from card_gate.analysis.geometry import check_geometry
from card_gate.analysis.shape import analyze_shape, check_shape
from card_gate.analysis.sharpness import check_sharpness, compute_sharpness
from card_gate.analysis.variance import check_variance, compute_color_variance
from card_gate.imaging.decoder import ImageDecodeError, ImagePayload, decode_image
from card_gate.imaging.grayscale import to_grayscale
from card_gate.imaging.resample import downsample
from card_gate.models.buffers import PixelBuffer
from card_gate.models.outcome import FailureKind, ValidationOutcome, ValidationState
from card_gate.models.report import ImageMetrics, ValidationReport
from card_gate.models.thresholds import DEFAULT_THRESHOLDS, ValidationThresholds


logger = logging.getLogger(__name__)


ImageInput = Union[ImagePayload, PixelBuffer]


class ImageValidator:
    """
    Stateless validation pipeline bound to one threshold set.

    Attributes:
        thresholds: Immutable thresholds applied to every call
    """

    def __init__(self, thresholds: Optional[ValidationThresholds] = None) -> None:
        """
        Initialize the validator.

        Args:
            thresholds: Threshold set; library defaults when None
        """
        self.thresholds = thresholds or DEFAULT_THRESHOLDS

    def validate(self, image: ImageInput) -> ValidationOutcome:
        """
        Validate an encoded payload or an already-decoded buffer.

        Args:
            image: Raw bytes, base64 text, data URL, or PixelBuffer

        Returns:
            ValidationOutcome
        """
        return self.inspect(image).outcome

    def validate_pixels(self, buffer: PixelBuffer) -> ValidationOutcome:
        """Validate a decoded buffer."""
        return self.inspect_pixels(buffer).outcome

    def inspect(self, image: ImageInput) -> ValidationReport:
        """
        Validate and return the verdict together with its measurements.

        Args:
            image: Raw bytes, base64 text, data URL, or PixelBuffer

        Returns:
            ValidationReport
        """
        if isinstance(image, PixelBuffer):
            return self.inspect_pixels(image)

        try:
            buffer = decode_image(image)
        except ImageDecodeError as e:
            logger.warning(f"Image decode failed: {e}")
            return self._finish(
                ValidationOutcome.failed(FailureKind.UNREADABLE_IMAGE),
                {},
            )

        return self.inspect_pixels(buffer)

    def inspect_pixels(self, buffer: PixelBuffer) -> ValidationReport:
        """Run every check after decoding."""
        thresholds = self.thresholds
        metrics: Dict[str, Any] = {
            "original_width": buffer.width,
            "original_height": buffer.height,
            "skipped_checks": [],
        }

        # Geometry (original dimensions)
        outcome = check_geometry(buffer.width, buffer.height, thresholds)
        if not outcome.valid:
            return self._finish(outcome, metrics)

        # Working copy
        working = downsample(buffer, thresholds.max_analysis_size)
        metrics["analysis_width"] = working.width
        metrics["analysis_height"] = working.height

        # Variance
        total_variance = compute_color_variance(working)
        metrics["total_variance"] = total_variance
        outcome = check_variance(total_variance, thresholds)
        if not outcome.valid:
            return self._finish(outcome, metrics)

        gray = to_grayscale(working)

        # Shape
        shape = analyze_shape(gray, thresholds)
        if shape is None:
            logger.warning(
                f"Shape check skipped: {working.width}x{working.height} "
                f"working copy has no interior pixels"
            )
            metrics["skipped_checks"].append("shape")
        else:
            metrics.update(
                edge_threshold=shape.edges.threshold,
                edge_ratio=shape.edges.edge_ratio,
                strong_edges=shape.edges.strong_edges,
                horizontal_edges=shape.edges.horizontal_edges,
                vertical_edges=shape.edges.vertical_edges,
                center_variance=shape.center_variance,
            )
            outcome = check_shape(shape)
            if not outcome.valid:
                return self._finish(outcome, metrics)

        # Sharpness
        sharpness = compute_sharpness(gray)
        if sharpness is None:
            logger.warning(
                f"Sharpness check skipped: {working.width}x{working.height} "
                f"working copy is smaller than 3x3"
            )
            metrics["skipped_checks"].append("sharpness")
        else:
            metrics["sharpness"] = sharpness
            outcome = check_sharpness(sharpness, thresholds)
            if not outcome.valid:
                return self._finish(outcome, metrics)

        return self._finish(ValidationOutcome.passed(), metrics)

    def _finish(self, outcome: ValidationOutcome, metrics: Dict[str, Any]) -> ValidationReport:
        report = ValidationReport(outcome=outcome, metrics=ImageMetrics(**metrics))

        if outcome.valid:
            logger.info(f"Image validation -> {ValidationState.VALID.value}")
        else:
            logger.info(
                f"Image validation -> {ValidationState.INVALID.value} "
                f"({outcome.reason.value})"
            )
        logger.debug(f"Image metrics: {report.metrics.model_dump(exclude_none=True)}")
        return report


def validate_card_image(
    image: ImageInput,
    thresholds: Optional[ValidationThresholds] = None,
) -> ValidationOutcome:
    """
    Validate one image with a one-off validator.

    Args:
        image: Raw bytes, base64 text, data URL, or PixelBuffer
        thresholds: Optional override of the default thresholds

    Returns:
        ValidationOutcome
    """
    return ImageValidator(thresholds).validate(image)
