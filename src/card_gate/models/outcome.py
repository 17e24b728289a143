"""
Validation Outcome
==================

Fixed set of failure kinds and the single verdict returned for an image.

Each rejected image carries exactly ONE failure kind: the first check
that failed. There is no warning or partial state.

Output Contract:
    {"valid": true, "reason": null, "message": null}
    {"valid": false, "reason": "TOO_BLURRY", "message": "Image appears blurry. ..."}
"""

from enum import Enum
from typing import Optional

from pydantic import BaseModel, ConfigDict, Field, model_validator


class FailureKind(str, Enum):
    """
    Machine-readable rejection codes.

    All are user-recoverable by retrying with a different photo.

    Attributes:
        UNREADABLE_IMAGE: Payload could not be decoded
        TOO_SMALL: Below the minimum pixel dimensions
        BAD_ASPECT_RATIO: Width/height ratio outside tolerance
        LOW_CONTRAST: Near-blank or flat image
        NO_CARD_DETECTED: Failed the rectangular-shape/center-content heuristic
        TOO_BLURRY: Laplacian focus measure below floor
    """

    UNREADABLE_IMAGE = "UNREADABLE_IMAGE"
    TOO_SMALL = "TOO_SMALL"
    BAD_ASPECT_RATIO = "BAD_ASPECT_RATIO"
    LOW_CONTRAST = "LOW_CONTRAST"
    NO_CARD_DETECTED = "NO_CARD_DETECTED"
    TOO_BLURRY = "TOO_BLURRY"

    @property
    def message(self) -> str:
        """User-facing message shown by the capture screen."""
        return _MESSAGES[self]


_MESSAGES = {
    FailureKind.UNREADABLE_IMAGE: "Could not load the image. Please try again with a different photo.",
    FailureKind.TOO_SMALL: "Image is too small. Please upload a clearer photo.",
    FailureKind.BAD_ASPECT_RATIO: "Image has unusual proportions. Please upload a photo of just the card.",
    FailureKind.LOW_CONTRAST: "Image appears blank or has very low contrast. Please upload a clearer photo.",
    FailureKind.NO_CARD_DETECTED: "No card detected in the image. Please make sure the card is clearly visible.",
    FailureKind.TOO_BLURRY: "Image appears blurry. Please take a clearer photo with better focus.",
}


class ValidationState(str, Enum):
    """Orchestrator states. VALID and INVALID are terminal."""

    PENDING = "PENDING"
    VALID = "VALID"
    INVALID = "INVALID"


class ValidationOutcome(BaseModel):
    """
    Verdict for one image.

    Attributes:
        valid: True when every check passed
        reason: Failure kind of the first failing check (None when valid)
        message: Short user-facing message (None when valid)
    """

    model_config = ConfigDict(frozen=True)

    valid: bool = Field(..., description="Whether the image is usable")
    reason: Optional[FailureKind] = Field(
        default=None,
        description="First failing check",
    )
    message: Optional[str] = Field(
        default=None,
        description="User-facing explanation",
    )

    @model_validator(mode="after")
    def check_tag(self) -> "ValidationOutcome":
        if self.valid and self.reason is not None:
            raise ValueError("a valid outcome cannot carry a failure reason")
        if not self.valid and self.reason is None:
            raise ValueError("an invalid outcome requires a failure reason")
        return self

    @classmethod
    def passed(cls) -> "ValidationOutcome":
        return cls(valid=True)

    @classmethod
    def failed(
        cls,
        reason: FailureKind,
        message: Optional[str] = None,
    ) -> "ValidationOutcome":
        """Build an Invalid outcome, defaulting to the kind's standard message."""
        return cls(valid=False, reason=reason, message=message or reason.message)

    @property
    def state(self) -> ValidationState:
        return ValidationState.VALID if self.valid else ValidationState.INVALID

    def __repr__(self) -> str:
        if self.valid:
            return "ValidationOutcome(VALID)"
        return f"ValidationOutcome(INVALID, reason={self.reason.value})"
