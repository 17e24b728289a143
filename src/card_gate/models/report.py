"""
Validation Report
=================

Verdict plus the measurements taken while reaching it.

Metrics are observability-only: they are recorded for logging and for
retuning thresholds, and never influence the verdict. A metric is None
when its stage did not run (short-circuit or skipped check).

Output Contract:
    {
        "outcome": {"valid": false, "reason": "NO_CARD_DETECTED", "message": "..."},
        "metrics": {
            "original_width": 600,
            "original_height": 840,
            "analysis_width": 214,
            "analysis_height": 300,
            "total_variance": 7123.4,
            "edge_ratio": 0.61,
            "horizontal_edges": 12001,
            "vertical_edges": 11876,
            "center_variance": 2411.9,
            "sharpness": null,
            "skipped_checks": []
        }
    }
"""

from typing import List, Optional

from pydantic import BaseModel, ConfigDict, Field

from card_gate.models.outcome import ValidationOutcome


class ImageMetrics(BaseModel):
    """Measurements gathered by the analysis stages."""

    model_config = ConfigDict(frozen=True)

    original_width: Optional[int] = Field(default=None, ge=0)
    original_height: Optional[int] = Field(default=None, ge=0)
    analysis_width: Optional[int] = Field(default=None, ge=0)
    analysis_height: Optional[int] = Field(default=None, ge=0)
    total_variance: Optional[float] = Field(default=None, ge=0)
    edge_threshold: Optional[float] = Field(default=None, ge=0)
    edge_ratio: Optional[float] = Field(default=None, ge=0, le=1.0)
    strong_edges: Optional[int] = Field(default=None, ge=0)
    horizontal_edges: Optional[int] = Field(default=None, ge=0)
    vertical_edges: Optional[int] = Field(default=None, ge=0)
    center_variance: Optional[float] = Field(default=None, ge=0)
    sharpness: Optional[float] = Field(default=None, ge=0)
    skipped_checks: List[str] = Field(
        default_factory=list,
        description="Checks that could not run on this image",
    )


class ValidationReport(BaseModel):
    """Complete result of one validation call."""

    model_config = ConfigDict(frozen=True)

    outcome: ValidationOutcome
    metrics: ImageMetrics = Field(default_factory=ImageMetrics)
