from __future__ import annotations

from typing import List

import pytest

from frame_studio_api.app.core import cache
from frame_studio_api.app.core.config import settings
from frame_studio_api.app.core.db import init_db
from frame_studio_api.app.core.security import Session
from frame_studio_api.app.schemas.template import FontResource
from frame_studio_api.app.services import font_service


@pytest.fixture
def db(tmp_path, monkeypatch):
    """Point the service at a fresh SQLite file with all migrations applied."""
    monkeypatch.setattr(settings, "database_url", str(tmp_path / "frames.db"))
    init_db()
    return tmp_path / "frames.db"


@pytest.fixture
def alice() -> Session:
    return Session(user_id="alice")


@pytest.fixture
def mallory() -> Session:
    return Session(user_id="mallory")


@pytest.fixture
def revalidated():
    """Collect every path signalled to the cache layer during a test."""
    paths: List[str] = []
    cache.register_listener(paths.append)
    yield paths
    cache.unregister_listener(paths.append)


@pytest.fixture
def fake_fonts(monkeypatch):
    """Replace Google Fonts downloads with a single in-memory font."""
    requested: List[str] = []

    async def _load(family, client=None):
        requested.append(family)
        return [FontResource(name=family, weight=400, style="normal", data=b"\x00\x01font")]

    monkeypatch.setattr(font_service, "load_google_font_all_variants", _load)
    return requested
