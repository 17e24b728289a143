"""
Analysis Module
===============

Stateless quality checks run on a decoded image.

This module provides:
    - Geometry: minimum size and aspect ratio
    - Variance: blank / low-contrast rejection
    - Shape: Sobel edge density, axis balance, center content
    - Sharpness: Laplacian-variance focus measure

Each stage exposes a compute_* function returning the raw measurement and
a check_* function turning it into a ValidationOutcome.
"""

from card_gate.analysis.geometry import check_geometry
from card_gate.analysis.variance import check_variance, compute_color_variance
from card_gate.analysis.sharpness import check_sharpness, compute_sharpness
from card_gate.analysis.shape import (
    EdgeField,
    ShapeAnalysis,
    adaptive_threshold,
    analyze_shape,
    check_shape,
    compute_center_variance,
    compute_edge_field,
)

__all__ = [
    # Geometry
    "check_geometry",
    # Variance
    "compute_color_variance",
    "check_variance",
    # Sharpness
    "compute_sharpness",
    "check_sharpness",
    # Shape
    "EdgeField",
    "ShapeAnalysis",
    "adaptive_threshold",
    "compute_edge_field",
    "compute_center_variance",
    "analyze_shape",
    "check_shape",
]
