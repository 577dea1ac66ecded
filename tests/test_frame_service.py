"""Tests for owner-scoped frame persistence."""

import asyncio
import threading

import pytest
from pydantic import ValidationError

from frame_studio_api.app.schemas.frame import FrameCreate
from frame_studio_api.app.services import storage_service
from frame_studio_api.app.services.frame_service import (
    FrameNotFoundError,
    FrameService,
    extract_preview_image,
)
from frame_studio_api.app.templates import TEMPLATES


def run(coro):
    return asyncio.run(coro)


def make_frame(session, name="Lunch poll"):
    return run(FrameService.create_frame(session, FrameCreate(name=name, template="poll")))


def test_create_then_get_starts_from_template_initial_config(db, alice):
    created = make_frame(alice)
    frame = run(FrameService.get_frame(alice, created.id))

    assert frame.owner == "alice"
    assert frame.name == "Lunch poll"
    assert frame.template == "poll"
    assert frame.config == TEMPLATES["poll"].initial_config
    assert frame.draft_config == TEMPLATES["poll"].initial_config
    assert frame.storage == {}
    assert frame.webhooks == {}
    assert frame.linked_page is None
    assert frame.current_month_calls == 0


def test_created_config_does_not_alias_template_default(db, alice):
    frame = make_frame(alice)
    frame.config["question"] = "changed"
    frame.draft_config["options"].clear()

    assert TEMPLATES["poll"].initial_config["question"] == "What should we build next?"
    assert len(TEMPLATES["poll"].initial_config["options"]) == 2


def test_create_rejects_unknown_template():
    with pytest.raises(ValidationError):
        FrameCreate(name="x", template="slideshow")


def test_create_without_session_is_not_found(db):
    with pytest.raises(FrameNotFoundError):
        make_frame(None)


def test_list_frames_only_returns_callers_frames(db, alice, mallory):
    mine = {make_frame(alice, "a").id, make_frame(alice, "b").id}
    make_frame(mallory, "c")

    assert {frame.id for frame in run(FrameService.list_frames(alice))} == mine


def test_list_recent_frames_is_limited_and_newest_first(db, alice):
    frames = [make_frame(alice, f"frame {i}") for i in range(12)]
    run(FrameService.update_frame_name(alice, frames[0].id, "touched"))

    recent = run(FrameService.list_recent_frames(alice))

    assert len(recent) == 10
    assert recent[0].id == frames[0].id
    assert recent[1].id == frames[11].id
    stamps = [frame.updated_at for frame in recent]
    assert stamps == sorted(stamps, reverse=True)


@pytest.mark.parametrize(
    "operation",
    [
        lambda s, fid: FrameService.get_frame(s, fid),
        lambda s, fid: FrameService.update_frame_name(s, fid, "stolen"),
        lambda s, fid: FrameService.update_frame_config(s, fid, {"question": "stolen"}),
        lambda s, fid: FrameService.publish_frame_config(s, fid),
        lambda s, fid: FrameService.revert_frame_config(s, fid),
        lambda s, fid: FrameService.update_frame_linked_page(s, fid, "https://evil.test"),
        lambda s, fid: FrameService.update_frame_webhooks(s, fid, "cast", "https://evil.test"),
        lambda s, fid: FrameService.delete_frame(s, fid),
    ],
)
def test_foreign_or_missing_session_is_not_found(db, alice, mallory, operation):
    frame = make_frame(alice)

    with pytest.raises(FrameNotFoundError):
        run(operation(mallory, frame.id))
    with pytest.raises(FrameNotFoundError):
        run(operation(None, frame.id))
    with pytest.raises(FrameNotFoundError):
        run(operation(alice, "does-not-exist"))

    assert run(FrameService.get_frame(alice, frame.id)) == frame


def test_listings_without_session_are_not_found(db):
    with pytest.raises(FrameNotFoundError):
        run(FrameService.list_frames(None))
    with pytest.raises(FrameNotFoundError):
        run(FrameService.list_recent_frames(None))


def test_rename_signals_frame_path(db, alice, revalidated):
    frame = make_frame(alice)
    renamed = run(FrameService.update_frame_name(alice, frame.id, "Dinner poll"))

    assert renamed.name == "Dinner poll"
    assert revalidated == [f"/frame/{frame.id}"]


def test_update_config_changes_draft_only(db, alice):
    frame = make_frame(alice)
    draft = {"question": "Pizza or sushi?", "options": [{"button_label": "Pizza"}]}

    updated = run(FrameService.update_frame_config(alice, frame.id, draft))

    assert updated.draft_config == draft
    assert updated.config == frame.config


def test_update_config_accepts_any_json_value(db, alice):
    frame = make_frame(alice)
    updated = run(FrameService.update_frame_config(alice, frame.id, ["not", "a", "poll"]))
    assert updated.draft_config == ["not", "a", "poll"]


def test_publish_copies_draft_and_is_idempotent(db, alice, revalidated):
    frame = make_frame(alice)
    draft = {"question": "Tea or coffee?", "options": []}
    run(FrameService.update_frame_config(alice, frame.id, draft))

    first = run(FrameService.publish_frame_config(alice, frame.id))
    second = run(FrameService.publish_frame_config(alice, frame.id))

    assert first.config == draft
    assert second.config == first.config
    assert second.draft_config == draft
    assert revalidated.count(f"/frame/{frame.id}") == 3


def test_revert_restores_published_config(db, alice):
    frame = make_frame(alice)
    run(FrameService.update_frame_config(alice, frame.id, {"question": "v1"}))
    published = run(FrameService.publish_frame_config(alice, frame.id))
    run(FrameService.update_frame_config(alice, frame.id, {"question": "v2"}))

    reverted = run(FrameService.revert_frame_config(alice, frame.id))

    assert reverted.draft_config == published.config == {"question": "v1"}


def test_revert_right_after_publish_is_identity(db, alice):
    frame = make_frame(alice)
    run(FrameService.update_frame_config(alice, frame.id, {"question": "v1"}))
    published = run(FrameService.publish_frame_config(alice, frame.id))
    reverted = run(FrameService.revert_frame_config(alice, frame.id))

    assert reverted.draft_config == reverted.config == published.config


def test_linked_page_set_and_cleared(db, alice):
    frame = make_frame(alice)
    linked = run(FrameService.update_frame_linked_page(alice, frame.id, "https://example.com"))
    cleared = run(FrameService.update_frame_linked_page(alice, frame.id))

    assert linked.linked_page == "https://example.com"
    assert cleared.linked_page is None


def test_webhook_removal_only_drops_that_event(db, alice):
    frame = make_frame(alice)
    run(FrameService.update_frame_webhooks(alice, frame.id, "cast", "https://a"))
    before = run(FrameService.update_frame_webhooks(alice, frame.id, "follow", "https://b"))

    after = run(FrameService.update_frame_webhooks(alice, frame.id, "cast"))

    assert after.webhooks == {"follow": "https://b"}
    assert "cast" not in after.webhooks
    assert before.webhooks == {"cast": "https://a", "follow": "https://b"}


def test_concurrent_webhook_updates_keep_every_event(db, alice):
    frame = make_frame(alice)
    start = threading.Barrier(20)
    errors = []

    def register(index):
        start.wait()
        try:
            run(FrameService.update_frame_webhooks(alice, frame.id, f"event-{index}", f"https://hooks/{index}"))
        except Exception as exc:  # surfaced by the assertion below
            errors.append(exc)

    threads = [threading.Thread(target=register, args=(i,)) for i in range(20)]
    for thread in threads:
        thread.start()
    for thread in threads:
        thread.join()

    assert errors == []
    stored = run(FrameService.get_frame(alice, frame.id))
    assert stored.webhooks == {f"event-{i}": f"https://hooks/{i}" for i in range(20)}


def test_removing_unknown_webhook_is_a_no_op(db, alice):
    frame = make_frame(alice)
    updated = run(FrameService.update_frame_webhooks(alice, frame.id, "cast"))
    assert updated.webhooks == {}


def test_storage_and_calls_are_not_owner_scoped(db, alice):
    frame = make_frame(alice)

    run(FrameService.update_frame_storage(frame.id, {"votes": {"1": 3}}))
    run(FrameService.update_frame_calls(frame.id, 17))

    stored = run(FrameService.get_frame(alice, frame.id))
    assert stored.storage == {"votes": {"1": 3}}
    assert stored.current_month_calls == 17


def test_storage_and_calls_on_missing_frame(db):
    with pytest.raises(FrameNotFoundError):
        run(FrameService.update_frame_storage("missing", {}))
    with pytest.raises(FrameNotFoundError):
        run(FrameService.update_frame_calls("missing", 1))


def test_extract_preview_image():
    preview = '<meta property="og:image" content="data:image/png;base64,AAAA" />'
    assert extract_preview_image(preview) == "AAAA"


def test_extract_preview_image_without_marker():
    with pytest.raises(ValueError):
        extract_preview_image('<meta property="og:image" content="https://example.com/a.png" />')


def test_update_preview_forwards_payload(monkeypatch):
    uploads = []

    async def _upload(frame_id, base64_string, client=None):
        uploads.append((frame_id, base64_string))
        return f"previews/{frame_id}.png"

    monkeypatch.setattr(storage_service, "upload_preview", _upload)
    preview = '...property="og:image" content="data:image/png;base64,iVBORw0KGgo="...'

    location = run(FrameService.update_frame_preview("abc", preview))

    assert uploads == [("abc", "iVBORw0KGgo=")]
    assert location == "previews/abc.png"


def test_delete_removes_frame_and_signals_listing(db, alice, revalidated):
    frame = make_frame(alice)

    run(FrameService.delete_frame(alice, frame.id))

    with pytest.raises(FrameNotFoundError):
        run(FrameService.get_frame(alice, frame.id))
    assert revalidated == ["/"]


def test_failing_cache_listener_does_not_break_mutation(db, alice):
    from frame_studio_api.app.core import cache

    def _broken(path):
        raise RuntimeError("purge failed")

    frame = make_frame(alice)
    cache.register_listener(_broken)
    try:
        renamed = run(FrameService.update_frame_name(alice, frame.id, "still renamed"))
    finally:
        cache.unregister_listener(_broken)
    assert renamed.name == "still renamed"
