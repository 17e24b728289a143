"""
Request Schema
==============

Body of POST /validate.

Input Contract:
    {
        "image": "data:image/jpeg;base64,/9j/4AAQSkZJRg...",
        "thresholds": {"min_dimension": 150}
    }

`image` may be a bare base64 string or a data URL. `thresholds` is an
optional partial override merged over the service defaults.
"""

from typing import Any, Dict, Optional

from pydantic import BaseModel, Field


class ValidateRequest(BaseModel):
    """
    Schema for validation requests.

    Attributes:
        image: Base64-encoded image or data URL
        thresholds: Optional per-request threshold overrides
    """

    image: str = Field(
        ...,
        min_length=1,
        description="Base64-encoded JPEG/PNG or data URL",
    )

    thresholds: Optional[Dict[str, Any]] = Field(
        default=None,
        description="Partial ValidationThresholds override",
    )

    class Config:
        """Pydantic model configuration."""

        json_schema_extra = {
            "example": {
                "image": "data:image/jpeg;base64,/9j/4AAQSkZJRg...",
                "thresholds": {"min_dimension": 150},
            }
        }
