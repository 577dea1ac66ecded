"""
Pydantic models describing template render output.

A template's render function returns a ``FrameRender`` descriptor:
the buttons shown under the card, the image aspect ratio, the fonts
the image renderer needs, the rendered view markup and the name of the
template function that handles the next interaction.
"""

from typing import Any, Dict, List, Optional

from pydantic import BaseModel, Field


class FrameButton(BaseModel):
    """A single button rendered below the frame image."""

    label: str = Field(..., examples=["Vote A"])
    action: Optional[str] = Field(None, examples=["post"])
    target: Optional[str] = None


class FontResource(BaseModel):
    """One font file (family, weight and style) used by the image renderer.

    ``data`` holds the raw font bytes and is excluded from API output.
    """

    name: str = Field(..., examples=["Roboto"])
    weight: int = Field(400, examples=[400])
    style: str = Field("normal", examples=["normal"])
    data: bytes = Field(b"", exclude=True, repr=False)


class FrameRender(BaseModel):
    """Render descriptor returned by template functions."""

    buttons: List[FrameButton] = Field(default_factory=list)
    aspect_ratio: str = Field("1.91:1", examples=["1.91:1"])
    fonts: List[FontResource] = Field(default_factory=list)
    component: str = Field(..., description="Rendered view markup")
    function_name: Optional[str] = Field(None, examples=["vote"])


class TemplateRead(BaseModel):
    """Schema for listing registered templates."""

    tag: str
    name: str
    description: Optional[str] = None
    initial_config: Dict[str, Any]
    functions: List[str]
