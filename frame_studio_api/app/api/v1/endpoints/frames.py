"""
Frame endpoints for API v1.

Owner routes resolve the optional caller session and hand it to
``FrameService``.  Every failure of an owner-scoped operation,
including a missing or invalid token, is answered with the same 404
``Frame not found`` response.

The storage, calls and preview routes are for internal services
(renderer, call counter) and require an ``INTERNAL_TOKENS`` bearer
token instead of a user session.
"""

from typing import List, Optional

from fastapi import APIRouter, Depends, HTTPException, Query, status
from pydantic import ValidationError

from frame_studio_api.app.core.security import Session, get_session, require_internal
from frame_studio_api.app.schemas.frame import (
    CallsUpdate,
    FrameConfigUpdate,
    FrameCreate,
    FrameNameUpdate,
    FrameRead,
    LinkedPageUpdate,
    PreviewUpdate,
    StorageUpdate,
    WebhookUpdate,
)
from frame_studio_api.app.schemas.template import FrameRender
from frame_studio_api.app.services.frame_service import FrameNotFoundError, FrameService
from frame_studio_api.app.templates import TEMPLATES

router = APIRouter()

NOT_FOUND = "Frame not found"


def _not_found() -> HTTPException:
    return HTTPException(status_code=status.HTTP_404_NOT_FOUND, detail=NOT_FOUND)


@router.get("/", response_model=List[FrameRead])
async def list_frames(session: Optional[Session] = Depends(get_session)) -> List[FrameRead]:
    """List all frames of the caller."""
    try:
        return await FrameService.list_frames(session)
    except FrameNotFoundError as e:
        raise _not_found() from e


@router.get("/recent", response_model=List[FrameRead])
async def list_recent_frames(session: Optional[Session] = Depends(get_session)) -> List[FrameRead]:
    """List the caller's ten most recently updated frames, newest first."""
    try:
        return await FrameService.list_recent_frames(session)
    except FrameNotFoundError as e:
        raise _not_found() from e


@router.post("/", response_model=FrameRead, status_code=status.HTTP_201_CREATED)
async def create_frame(
    frame_in: FrameCreate,
    session: Optional[Session] = Depends(get_session),
) -> FrameRead:
    """Create a frame from a registered template."""
    try:
        return await FrameService.create_frame(session, frame_in)
    except FrameNotFoundError as e:
        raise _not_found() from e


@router.get("/{frame_id}", response_model=FrameRead)
async def get_frame(frame_id: str, session: Optional[Session] = Depends(get_session)) -> FrameRead:
    try:
        return await FrameService.get_frame(session, frame_id)
    except FrameNotFoundError as e:
        raise _not_found() from e


@router.put("/{frame_id}/name", response_model=FrameRead)
async def update_frame_name(
    frame_id: str,
    payload: FrameNameUpdate,
    session: Optional[Session] = Depends(get_session),
) -> FrameRead:
    try:
        return await FrameService.update_frame_name(session, frame_id, payload.name)
    except FrameNotFoundError as e:
        raise _not_found() from e


@router.put("/{frame_id}/config", response_model=FrameRead)
async def update_frame_config(
    frame_id: str,
    payload: FrameConfigUpdate,
    session: Optional[Session] = Depends(get_session),
) -> FrameRead:
    """Replace the draft config.  The published config is unchanged."""
    try:
        return await FrameService.update_frame_config(session, frame_id, payload.config)
    except FrameNotFoundError as e:
        raise _not_found() from e


@router.post("/{frame_id}/publish", response_model=FrameRead)
async def publish_frame_config(
    frame_id: str,
    session: Optional[Session] = Depends(get_session),
) -> FrameRead:
    """Make the draft config the published config."""
    try:
        return await FrameService.publish_frame_config(session, frame_id)
    except FrameNotFoundError as e:
        raise _not_found() from e


@router.post("/{frame_id}/revert", response_model=FrameRead)
async def revert_frame_config(
    frame_id: str,
    session: Optional[Session] = Depends(get_session),
) -> FrameRead:
    """Reset the draft config to the published config."""
    try:
        return await FrameService.revert_frame_config(session, frame_id)
    except FrameNotFoundError as e:
        raise _not_found() from e


@router.put("/{frame_id}/linked-page", response_model=FrameRead)
async def update_frame_linked_page(
    frame_id: str,
    payload: LinkedPageUpdate,
    session: Optional[Session] = Depends(get_session),
) -> FrameRead:
    try:
        return await FrameService.update_frame_linked_page(session, frame_id, payload.url)
    except FrameNotFoundError as e:
        raise _not_found() from e


@router.put("/{frame_id}/webhooks", response_model=FrameRead)
async def update_frame_webhooks(
    frame_id: str,
    payload: WebhookUpdate,
    session: Optional[Session] = Depends(get_session),
) -> FrameRead:
    """Set or remove (when ``url`` is omitted) the webhook of one event."""
    try:
        return await FrameService.update_frame_webhooks(session, frame_id, payload.event, payload.url)
    except FrameNotFoundError as e:
        raise _not_found() from e


@router.get("/{frame_id}/render", response_model=FrameRender)
async def render_frame(
    frame_id: str,
    draft: bool = Query(False, description="Render the draft config instead of the published one"),
    session: Optional[Session] = Depends(get_session),
) -> FrameRender:
    """Render the initial card of a frame through its template."""
    try:
        frame = await FrameService.get_frame(session, frame_id)
    except FrameNotFoundError as e:
        raise _not_found() from e
    template = TEMPLATES.get(frame.template)
    if template is None:
        raise HTTPException(
            status_code=status.HTTP_422_UNPROCESSABLE_ENTITY,
            detail=f"Unknown template '{frame.template}'",
        )
    try:
        config = template.config_model.model_validate(frame.draft_config if draft else frame.config)
        state = template.state_model.model_validate(frame.storage or {})
    except ValidationError as e:
        raise HTTPException(status_code=status.HTTP_422_UNPROCESSABLE_ENTITY, detail=str(e)) from e
    return await template.initial(config, state)


@router.put("/{frame_id}/storage", status_code=status.HTTP_204_NO_CONTENT)
async def update_frame_storage(
    frame_id: str,
    payload: StorageUpdate,
    _: str = Depends(require_internal),
) -> None:
    """Overwrite the frame's storage blob (internal callers only).

    An unknown ``frame_id`` answers 404.
    """
    try:
        await FrameService.update_frame_storage(frame_id, payload.storage)
    except FrameNotFoundError as e:
        raise _not_found() from e
    return None


@router.put("/{frame_id}/calls", status_code=status.HTTP_204_NO_CONTENT)
async def update_frame_calls(
    frame_id: str,
    payload: CallsUpdate,
    _: str = Depends(require_internal),
) -> None:
    """Overwrite the current month call counter (internal callers only).

    An unknown ``frame_id`` answers 404.
    """
    try:
        await FrameService.update_frame_calls(frame_id, payload.calls)
    except FrameNotFoundError as e:
        raise _not_found() from e
    return None


@router.put("/{frame_id}/preview", status_code=status.HTTP_204_NO_CONTENT)
async def update_frame_preview(
    frame_id: str,
    payload: PreviewUpdate,
    _: str = Depends(require_internal),
) -> None:
    """Store the PNG preview embedded in rendered frame markup (internal callers only)."""
    try:
        await FrameService.update_frame_preview(frame_id, payload.preview)
    except ValueError as e:
        raise HTTPException(status_code=status.HTTP_400_BAD_REQUEST, detail=str(e)) from e
    return None


@router.delete("/{frame_id}", status_code=status.HTTP_204_NO_CONTENT)
async def delete_frame(frame_id: str, session: Optional[Session] = Depends(get_session)) -> None:
    try:
        await FrameService.delete_frame(session, frame_id)
    except FrameNotFoundError as e:
        raise _not_found() from e
    return None
