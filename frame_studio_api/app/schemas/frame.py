"""
Pydantic schemas for frames.

``FrameCreate`` is the request body for creating a frame from a
template.  ``FrameRead`` mirrors a row of the ``frames`` table with its
JSON columns decoded.  The remaining models are request bodies for the
single-field update routes.

Config payloads are deliberately typed as ``Any``: the shape of a
config depends on the template and is only checked when the template
renders it.
"""

from typing import Any, Dict, Optional

from pydantic import BaseModel, Field, field_validator

from frame_studio_api.app.templates import TEMPLATES


class FrameCreate(BaseModel):
    """Schema for creating a new frame."""

    name: str = Field(..., min_length=1, examples=["Lunch poll"])
    description: Optional[str] = Field(None, examples=["Where should the team eat on Friday?"])
    template: str = Field(..., examples=["poll"], description="Tag of a registered template")

    @field_validator("template")
    @classmethod
    def validate_template(cls, v: str) -> str:
        if v not in TEMPLATES:
            raise ValueError(f"Unknown template '{v}'")
        return v


class FrameRead(BaseModel):
    """Schema for reading a frame."""

    id: str
    owner: str
    name: str
    description: Optional[str] = None
    template: str
    config: Any = None
    draft_config: Any = None
    storage: Dict[str, Any] = Field(default_factory=dict)
    linked_page: Optional[str] = None
    webhooks: Dict[str, str] = Field(default_factory=dict)
    current_month_calls: int = 0
    created_at: Optional[str] = None
    updated_at: Optional[str] = None

    model_config = {
        "from_attributes": True,
    }


class FrameNameUpdate(BaseModel):
    name: str = Field(..., min_length=1, examples=["Dinner poll"])


class FrameConfigUpdate(BaseModel):
    """Replacement draft config.  Not validated against the template."""

    config: Any = Field(..., examples=[{"question": "Pizza or sushi?", "options": []}])


class LinkedPageUpdate(BaseModel):
    """Set the linked page, or clear it by omitting ``url``."""

    url: Optional[str] = Field(None, examples=["https://example.com/landing"])


class WebhookUpdate(BaseModel):
    """Set the webhook for ``event``, or remove it by omitting ``url``."""

    event: str = Field(..., min_length=1, examples=["cast"])
    url: Optional[str] = Field(None, examples=["https://example.com/hooks/cast"])


class StorageUpdate(BaseModel):
    storage: Dict[str, Any] = Field(default_factory=dict)


class CallsUpdate(BaseModel):
    calls: int = Field(..., ge=0, examples=[42])


class PreviewUpdate(BaseModel):
    """Rendered frame markup containing a ``data:image/png;base64,`` image."""

    preview: str
