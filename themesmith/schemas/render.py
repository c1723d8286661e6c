# themesmith/schemas/render.py
"""
Pydantic schemas for the rendering service's request payload.
"""
from typing import Any, Dict

from pydantic import BaseModel, ConfigDict, Field


class ThemeLayer(BaseModel):
    """
    The `theme` object of a render request.

    Only the `extend` layer is accepted, so a request can add or override
    named entries but never replace a whole default category.
    """

    model_config = ConfigDict(extra="forbid")

    extend: Dict[str, Any] = Field(
        default_factory=dict,
        description="ThemeConfiguration fragment merged over the framework defaults.",
    )


class RenderRequest(BaseModel):
    """Request body of `POST /`."""

    html: str = Field(..., description="Markup snapshot scanned for class-name usage.")
    theme: ThemeLayer = Field(default_factory=ThemeLayer)
