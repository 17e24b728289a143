"""
Validation Thresholds
=====================

Every tunable constant used by the analysis stages.

The defaults were hand-tuned against a small set of trading-card photos.
They are calibration parameters, not physical constants, and can be
overridden per call, from config.yaml, or from the environment.
"""

from pydantic import BaseModel, ConfigDict, Field, model_validator


class ValidationThresholds(BaseModel):
    """
    Immutable threshold set for one validation call.

    Geometry:
        min_dimension, min_aspect_ratio, max_aspect_ratio
    Working copy:
        max_analysis_size
    Contrast / focus:
        variance_floor, sharpness_floor
    Edge / shape heuristic:
        edge_percentile, edge_threshold_scale, dominance_margin,
        axis_share_min, edge_ratio_min, edge_ratio_max,
        center_region_fraction, center_variance_floor
    """

    model_config = ConfigDict(frozen=True, extra="forbid")

    min_dimension: int = Field(
        default=200,
        ge=1,
        description="Minimum width and height of the original image (px)",
    )
    min_aspect_ratio: float = Field(
        default=1.0 / 3.0,
        gt=0,
        description="Lowest accepted width/height ratio",
    )
    max_aspect_ratio: float = Field(
        default=3.0,
        gt=0,
        description="Highest accepted width/height ratio",
    )
    max_analysis_size: int = Field(
        default=300,
        ge=3,
        description="Longest side of the downsampled working copy (px)",
    )
    variance_floor: float = Field(
        default=500.0,
        ge=0,
        description="Minimum summed RGB channel variance",
    )
    sharpness_floor: float = Field(
        default=5.0,
        ge=0,
        description="Minimum Laplacian variance",
    )
    edge_percentile: float = Field(
        default=0.1,
        ge=0,
        lt=1.0,
        description="Rank (from the top) of the gradient magnitude used for the adaptive threshold",
    )
    edge_threshold_scale: float = Field(
        default=0.5,
        gt=0,
        description="Multiplier applied to the percentile magnitude",
    )
    dominance_margin: float = Field(
        default=1.5,
        ge=1.0,
        description="Factor by which one axis difference must exceed the other",
    )
    axis_share_min: float = Field(
        default=0.15,
        ge=0,
        le=0.5,
        description="Minimum share of strong edges required on each axis",
    )
    edge_ratio_min: float = Field(
        default=0.02,
        ge=0,
        le=1.0,
        description="Lowest accepted strong-edge ratio",
    )
    edge_ratio_max: float = Field(
        default=0.5,
        ge=0,
        le=1.0,
        description="Highest accepted strong-edge ratio",
    )
    center_region_fraction: float = Field(
        default=0.6,
        gt=0,
        le=1.0,
        description="Side of the center square relative to the shorter image side",
    )
    center_variance_floor: float = Field(
        default=200.0,
        ge=0,
        description="Minimum luminance variance inside the center square",
    )

    @model_validator(mode="after")
    def check_bounds(self) -> "ValidationThresholds":
        if self.min_aspect_ratio > self.max_aspect_ratio:
            raise ValueError("min_aspect_ratio must not exceed max_aspect_ratio")
        if self.edge_ratio_min > self.edge_ratio_max:
            raise ValueError("edge_ratio_min must not exceed edge_ratio_max")
        return self


DEFAULT_THRESHOLDS = ValidationThresholds()
