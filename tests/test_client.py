import json

import requests

from frame_studio_client import FrameStudioAPI


class FakeSession:
    """Records requests and replays queued responses."""

    def __init__(self, *responses):
        self.responses = list(responses)
        self.calls = []

    def request(self, method, url, params=None, json=None, headers=None, timeout=None):
        self.calls.append({"method": method, "url": url, "params": params, "json": json, "headers": headers})
        response = self.responses.pop(0)
        response.url = url
        return response


def make_response(status_code, body=None):
    response = requests.Response()
    response.status_code = status_code
    response.reason = "OK" if status_code < 400 else "Error"
    response._content = json.dumps(body).encode() if body is not None else b""
    response.headers["Content-Type"] = "application/json"
    return response


def test_user_calls_send_user_token():
    session = FakeSession(make_response(201, {"id": "f1", "name": "Poll"}))
    api = FrameStudioAPI(base_url="https://frames.test/", api_key="user-token", session=session)

    data, error = api.create_frame("Poll", "poll")

    assert error is None
    assert data["id"] == "f1"
    call = session.calls[0]
    assert call["method"] == "POST"
    assert call["url"] == "https://frames.test/api/v1/frames/"
    assert call["json"] == {"name": "Poll", "template": "poll", "description": None}
    assert call["headers"]["Authorization"] == "Bearer user-token"


def test_internal_calls_send_internal_token():
    session = FakeSession(make_response(204))
    api = FrameStudioAPI(
        base_url="https://frames.test", api_key="user-token", internal_key="svc", session=session
    )

    data, error = api.update_calls("f1", 3)

    assert (data, error) == (None, None)
    assert session.calls[0]["url"] == "https://frames.test/api/v1/frames/f1/calls"
    assert session.calls[0]["headers"]["Authorization"] == "Bearer svc"


def test_http_error_is_returned_not_raised():
    session = FakeSession(make_response(404, {"detail": "Frame not found"}))
    api = FrameStudioAPI(base_url="https://frames.test", api_key="user-token", session=session)

    data, error = api.get_frame("missing")

    assert data is None
    assert error == {"status_code": 404, "message": "Frame not found"}


def test_delete_and_listing():
    session = FakeSession(make_response(204), make_response(200, [{"id": "f1"}]))
    api = FrameStudioAPI(base_url="https://frames.test", api_key="user-token", session=session)

    assert api.delete_frame("f1") == (True, None)
    assert api.list_recent_frames() == ([{"id": "f1"}], None)
    assert session.calls[1]["url"] == "https://frames.test/api/v1/frames/recent"


def test_webhook_removal_sends_null_url():
    session = FakeSession(make_response(200, {"webhooks": {}}))
    api = FrameStudioAPI(base_url="https://frames.test", api_key="user-token", session=session)

    api.update_webhook("f1", "cast")

    assert session.calls[0]["json"] == {"event": "cast", "url": None}
