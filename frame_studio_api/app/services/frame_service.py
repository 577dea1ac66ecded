"""
Service layer for frames.

``FrameService`` mediates every read and write of the ``frames``
table.  Operations acting on behalf of a user receive the caller's
``Session`` explicitly and add an ``owner = ?`` predicate to every
statement.  A missing session, a missing frame and a frame owned by
someone else all raise the same ``FrameNotFoundError``, so callers
cannot discover frame ids they do not own.

Three operations are not owner-scoped and must only be reachable by
trusted internal callers: ``update_frame_storage``,
``update_frame_calls`` and ``update_frame_preview``.

Each frame keeps two configs.  ``draft_config`` is edited freely;
``publish_frame_config`` copies it into ``config`` (the version served
to the feed) and ``revert_frame_config`` copies ``config`` back into
the draft.  Mutations that change a frame's detail view signal
``/frame/<id>`` to the cache layer; deletion signals ``/``.

All queries use parameterized statements.  Column names interpolated
into SQL come from fixed whitelists in this module only.
"""

from __future__ import annotations

import json
import logging
import sqlite3
import uuid
from datetime import datetime, timezone
from typing import Any, Callable, Dict, List, Optional

from frame_studio_api.app.core.cache import frame_path, revalidate_path
from frame_studio_api.app.core.db import get_connection
from frame_studio_api.app.core.security import Session
from frame_studio_api.app.schemas.frame import FrameCreate, FrameRead
from frame_studio_api.app.services import storage_service
from frame_studio_api.app.templates import TEMPLATES

PREVIEW_MARKER = "data:image/png;base64,"

RECENT_LIMIT = 10

_JSON_COLUMNS = {"config", "draft_config", "storage", "webhooks"}
_UPDATABLE_COLUMNS = {"name", "config", "draft_config", "linked_page", "webhooks"}


class FrameNotFoundError(ValueError):
    """Raised when a frame is missing or not visible to the caller."""

    def __init__(self, frame_id: Optional[str] = None) -> None:
        super().__init__(f"Frame {frame_id} not found" if frame_id else "Frame not found")
        self.frame_id = frame_id


def extract_preview_image(preview: str) -> str:
    """Return the base64 PNG payload embedded in rendered frame markup.

    The payload is everything after ``data:image/png;base64,`` up to
    the next double quote.  Raises ``ValueError`` when the markup holds
    no PNG data URI.
    """
    _, marker, rest = preview.partition(PREVIEW_MARKER)
    if not marker:
        raise ValueError("Preview does not contain a PNG data URI")
    return rest.split('"', 1)[0]


def _now() -> str:
    # Microsecond precision keeps "recent" ordering stable for quick edits.
    return datetime.now(timezone.utc).strftime("%Y-%m-%d %H:%M:%S.%f")


def _dump(value: Any) -> Optional[str]:
    return json.dumps(value) if value is not None else None


def _load(value: Optional[str]) -> Any:
    if value is None:
        return None
    return json.loads(value)


class FrameService:
    """Service class for owner-scoped frame persistence."""

    @staticmethod
    def _owner(session: Optional[Session], frame_id: Optional[str] = None) -> str:
        """Return the caller's user id or raise ``FrameNotFoundError``."""
        if session is None or not session.user_id:
            raise FrameNotFoundError(frame_id)
        return session.user_id

    @staticmethod
    def _row_to_frame_read(row: sqlite3.Row) -> FrameRead:
        """Convert a database row to a ``FrameRead`` instance."""
        return FrameRead(
            id=row["id"],
            owner=row["owner"],
            name=row["name"],
            description=row["description"],
            template=row["template"],
            config=_load(row["config"]),
            draft_config=_load(row["draft_config"]),
            storage=_load(row["storage"]) or {},
            linked_page=row["linked_page"],
            webhooks=_load(row["webhooks"]) or {},
            current_month_calls=row["current_month_calls"] or 0,
            created_at=str(row["created_at"]) if row["created_at"] is not None else None,
            updated_at=str(row["updated_at"]) if row["updated_at"] is not None else None,
        )

    @classmethod
    def _fetch_owned(cls, conn: sqlite3.Connection, frame_id: str, owner: str) -> Optional[sqlite3.Row]:
        return conn.execute(
            "SELECT * FROM frames WHERE id = ? AND owner = ?",
            (frame_id, owner),
        ).fetchone()

    @classmethod
    def _update_owned(
        cls,
        conn: sqlite3.Connection,
        frame_id: str,
        owner: str,
        changes: Dict[str, Any],
    ) -> int:
        """Apply ``changes`` to an owned frame and return the affected row count."""
        fields = []
        values: List[Any] = []
        for column, value in changes.items():
            if column not in _UPDATABLE_COLUMNS:
                raise ValueError(f"Column {column} cannot be updated")
            fields.append(f"{column} = ?")
            values.append(_dump(value) if column in _JSON_COLUMNS else value)
        values.extend([_now(), frame_id, owner])
        cursor = conn.execute(
            f"UPDATE frames SET {', '.join(fields)}, updated_at = ? WHERE id = ? AND owner = ?",
            tuple(values),
        )
        return cursor.rowcount

    @classmethod
    async def _set_fields(
        cls,
        session: Optional[Session],
        frame_id: str,
        changes: Dict[str, Any],
    ) -> FrameRead:
        """Single-statement owner-scoped update followed by revalidation."""
        owner = cls._owner(session, frame_id)
        conn = get_connection()
        try:
            if not cls._update_owned(conn, frame_id, owner, changes):
                raise FrameNotFoundError(frame_id)
            conn.commit()
            row = cls._fetch_owned(conn, frame_id, owner)
        finally:
            conn.close()
        logging.getLogger(__name__).info(
            "User %s updated %s of frame %s", owner, ", ".join(changes), frame_id
        )
        revalidate_path(frame_path(frame_id))
        return cls._row_to_frame_read(row)

    @classmethod
    async def _read_modify_write(
        cls,
        session: Optional[Session],
        frame_id: str,
        modify: Callable[[FrameRead], Dict[str, Any]],
        action: str,
    ) -> FrameRead:
        """Read an owned frame, derive changes from it and write them back.

        Both steps run inside one ``BEGIN IMMEDIATE`` transaction, so a
        concurrent writer cannot slip in between the read and the write.
        """
        owner = cls._owner(session, frame_id)
        conn = get_connection()
        try:
            conn.execute("BEGIN IMMEDIATE")
            row = cls._fetch_owned(conn, frame_id, owner)
            if not row:
                conn.rollback()
                raise FrameNotFoundError(frame_id)
            cls._update_owned(conn, frame_id, owner, modify(cls._row_to_frame_read(row)))
            conn.commit()
            row = cls._fetch_owned(conn, frame_id, owner)
        finally:
            conn.close()
        logging.getLogger(__name__).info("User %s %s frame %s", owner, action, frame_id)
        revalidate_path(frame_path(frame_id))
        return cls._row_to_frame_read(row)

    @classmethod
    async def list_frames(cls, session: Optional[Session]) -> List[FrameRead]:
        """Return every frame owned by the caller, in no particular order."""
        owner = cls._owner(session)
        conn = get_connection()
        try:
            rows = conn.execute("SELECT * FROM frames WHERE owner = ?", (owner,)).fetchall()
            return [cls._row_to_frame_read(row) for row in rows]
        finally:
            conn.close()

    @classmethod
    async def list_recent_frames(
        cls,
        session: Optional[Session],
        limit: int = RECENT_LIMIT,
    ) -> List[FrameRead]:
        """Return the caller's most recently updated frames, newest first."""
        owner = cls._owner(session)
        conn = get_connection()
        try:
            rows = conn.execute(
                "SELECT * FROM frames WHERE owner = ? ORDER BY updated_at DESC, rowid DESC LIMIT ?",
                (owner, limit),
            ).fetchall()
            return [cls._row_to_frame_read(row) for row in rows]
        finally:
            conn.close()

    @classmethod
    async def get_frame(cls, session: Optional[Session], frame_id: str) -> FrameRead:
        """Retrieve a single frame owned by the caller."""
        owner = cls._owner(session, frame_id)
        conn = get_connection()
        try:
            row = cls._fetch_owned(conn, frame_id, owner)
        finally:
            conn.close()
        if not row:
            raise FrameNotFoundError(frame_id)
        return cls._row_to_frame_read(row)

    @classmethod
    async def create_frame(cls, session: Optional[Session], data: FrameCreate) -> FrameRead:
        """Insert a new frame built from a template and return it.

        Both the published and the draft config start as the
        template's initial config; storage starts empty.
        """
        logger = logging.getLogger(__name__)
        owner = cls._owner(session)
        template = TEMPLATES[data.template]
        frame_id = uuid.uuid4().hex
        initial_config = _dump(template.initial_config)
        now = _now()
        conn = get_connection()
        try:
            conn.execute(
                """
                INSERT INTO frames (id, owner, name, description, template, config, draft_config,
                                    storage, created_at, updated_at)
                VALUES (?, ?, ?, ?, ?, ?, ?, ?, ?, ?)
                """,
                (
                    frame_id,
                    owner,
                    data.name,
                    data.description,
                    data.template,
                    initial_config,
                    initial_config,
                    _dump({}),
                    now,
                    now,
                ),
            )
            conn.commit()
            row = cls._fetch_owned(conn, frame_id, owner)
        finally:
            conn.close()
        logger.info("User %s created frame %s from template %s", owner, frame_id, data.template)
        return cls._row_to_frame_read(row)

    @classmethod
    async def update_frame_name(cls, session: Optional[Session], frame_id: str, name: str) -> FrameRead:
        return await cls._set_fields(session, frame_id, {"name": name})

    @classmethod
    async def update_frame_config(cls, session: Optional[Session], frame_id: str, config: Any) -> FrameRead:
        """Replace the draft config wholesale.  The published config is untouched."""
        return await cls._set_fields(session, frame_id, {"draft_config": config})

    @classmethod
    async def publish_frame_config(cls, session: Optional[Session], frame_id: str) -> FrameRead:
        """Copy the draft config into the published config."""
        return await cls._read_modify_write(
            session, frame_id, lambda frame: {"config": frame.draft_config}, "published"
        )

    @classmethod
    async def revert_frame_config(cls, session: Optional[Session], frame_id: str) -> FrameRead:
        """Discard draft edits by copying the published config into the draft."""
        return await cls._read_modify_write(
            session, frame_id, lambda frame: {"draft_config": frame.config}, "reverted"
        )

    @classmethod
    async def update_frame_linked_page(
        cls,
        session: Optional[Session],
        frame_id: str,
        url: Optional[str] = None,
    ) -> FrameRead:
        """Set the linked page, or clear it when ``url`` is omitted."""
        return await cls._set_fields(session, frame_id, {"linked_page": url or None})

    @classmethod
    async def update_frame_webhooks(
        cls,
        session: Optional[Session],
        frame_id: str,
        event: str,
        url: Optional[str] = None,
    ) -> FrameRead:
        """Register ``url`` for ``event``, or remove the event when ``url`` is omitted."""

        def _apply(frame: FrameRead) -> Dict[str, Any]:
            webhooks = dict(frame.webhooks or {})
            if url:
                webhooks[event] = url
            else:
                webhooks.pop(event, None)
            return {"webhooks": webhooks}

        return await cls._read_modify_write(session, frame_id, _apply, f"updated webhook '{event}' of")

    @classmethod
    async def update_frame_storage(cls, frame_id: str, storage: Dict[str, Any]) -> None:
        """Overwrite the storage blob of a frame.

        Not owner-scoped: only trusted internal callers may reach this.
        Raises ``FrameNotFoundError`` when no frame has ``frame_id``.
        ``updated_at`` is left alone.
        """
        conn = get_connection()
        try:
            cursor = conn.execute(
                "UPDATE frames SET storage = ? WHERE id = ?",
                (_dump(storage), frame_id),
            )
            conn.commit()
            if not cursor.rowcount:
                raise FrameNotFoundError(frame_id)
        finally:
            conn.close()
        logging.getLogger(__name__).debug("Storage of frame %s overwritten", frame_id)

    @classmethod
    async def update_frame_calls(cls, frame_id: str, calls: int) -> None:
        """Overwrite the current month call counter.  Not owner-scoped.

        Raises ``FrameNotFoundError`` for an unknown ``frame_id``.
        """
        conn = get_connection()
        try:
            cursor = conn.execute(
                "UPDATE frames SET current_month_calls = ? WHERE id = ?",
                (calls, frame_id),
            )
            conn.commit()
            if not cursor.rowcount:
                raise FrameNotFoundError(frame_id)
        finally:
            conn.close()

    @classmethod
    async def update_frame_preview(cls, frame_id: str, preview: str) -> str:
        """Extract the PNG embedded in ``preview`` and upload it for ``frame_id``."""
        image = extract_preview_image(preview)
        return await storage_service.upload_preview(frame_id, image)

    @classmethod
    async def delete_frame(cls, session: Optional[Session], frame_id: str) -> None:
        """Delete a frame owned by the caller."""
        owner = cls._owner(session, frame_id)
        conn = get_connection()
        try:
            cursor = conn.execute(
                "DELETE FROM frames WHERE id = ? AND owner = ?",
                (frame_id, owner),
            )
            conn.commit()
            affected = cursor.rowcount
        finally:
            conn.close()
        if not affected:
            raise FrameNotFoundError(frame_id)
        logging.getLogger(__name__).info("User %s deleted frame %s", owner, frame_id)
        revalidate_path("/")
