"""
Template endpoints for API v1.

Lists the registered templates so clients can offer them when a user
creates a frame.  Publicly accessible.
"""

from typing import List

from fastapi import APIRouter, HTTPException, status

from frame_studio_api.app.schemas.template import TemplateRead
from frame_studio_api.app.templates import TEMPLATES, TemplateDescriptor

router = APIRouter()


def _to_read(tag: str, template: TemplateDescriptor) -> TemplateRead:
    return TemplateRead(
        tag=tag,
        name=template.name,
        description=template.description,
        initial_config=template.initial_config,
        functions=sorted(template.functions),
    )


@router.get("/", response_model=List[TemplateRead])
async def list_templates() -> List[TemplateRead]:
    return [_to_read(tag, template) for tag, template in TEMPLATES.items()]


@router.get("/{tag}", response_model=TemplateRead)
async def get_template(tag: str) -> TemplateRead:
    template = TEMPLATES.get(tag)
    if template is None:
        raise HTTPException(status_code=status.HTTP_404_NOT_FOUND, detail="Template not found")
    return _to_read(tag, template)
