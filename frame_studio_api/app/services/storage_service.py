"""
Preview image storage.

``upload_preview`` persists the PNG preview of a frame, keyed by frame
id.  When ``STORAGE_UPLOAD_URL`` is configured the decoded image is
uploaded with an HTTP ``PUT`` to ``<url>/frames/<id>/preview.png``
(authenticated with ``STORAGE_TOKEN`` when set).  Otherwise the image
is written to ``PREVIEW_DIR/<id>.png``.
"""

from __future__ import annotations

import base64
import logging
from pathlib import Path
from typing import Optional

import httpx

from frame_studio_api.app.core.config import settings


async def upload_preview(
    frame_id: str,
    base64_string: str,
    client: Optional[httpx.AsyncClient] = None,
) -> str:
    """Store a base64 encoded PNG preview and return its location."""
    logger = logging.getLogger(__name__)
    image = base64.b64decode(base64_string)

    if not settings.storage_upload_url:
        preview_dir = Path(settings.preview_dir)
        preview_dir.mkdir(parents=True, exist_ok=True)
        path = preview_dir / f"{frame_id}.png"
        path.write_bytes(image)
        logger.info("Stored preview for frame %s at %s", frame_id, path)
        return str(path)

    url = f"{settings.storage_upload_url.rstrip('/')}/frames/{frame_id}/preview.png"
    headers = {"Content-Type": "image/png"}
    if settings.storage_token:
        headers["Authorization"] = f"Bearer {settings.storage_token}"

    if client is None:
        async with httpx.AsyncClient(timeout=30) as own_client:
            response = await own_client.put(url, content=image, headers=headers)
    else:
        response = await client.put(url, content=image, headers=headers)
    response.raise_for_status()
    logger.info("Uploaded preview for frame %s to %s", frame_id, url)
    return url
