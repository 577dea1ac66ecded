import asyncio
import base64

import httpx

from frame_studio_api.app.core.config import settings
from frame_studio_api.app.services.storage_service import upload_preview

PNG = b"\x89PNG\r\n\x1a\nfake"
PNG_B64 = base64.b64encode(PNG).decode()


def test_upload_preview_writes_local_file(tmp_path, monkeypatch):
    monkeypatch.setattr(settings, "storage_upload_url", "")
    monkeypatch.setattr(settings, "preview_dir", str(tmp_path / "previews"))

    location = asyncio.run(upload_preview("abc", PNG_B64))

    assert location == str(tmp_path / "previews" / "abc.png")
    assert (tmp_path / "previews" / "abc.png").read_bytes() == PNG


def test_upload_preview_puts_to_storage(monkeypatch):
    monkeypatch.setattr(settings, "storage_upload_url", "https://storage.test/bucket/")
    monkeypatch.setattr(settings, "storage_token", "secret")
    seen = []

    def handler(request: httpx.Request) -> httpx.Response:
        seen.append(request)
        return httpx.Response(200)

    async def _upload():
        async with httpx.AsyncClient(transport=httpx.MockTransport(handler)) as client:
            return await upload_preview("abc", PNG_B64, client)

    location = asyncio.run(_upload())

    assert location == "https://storage.test/bucket/frames/abc/preview.png"
    request = seen[0]
    assert request.method == "PUT"
    assert str(request.url) == location
    assert request.headers["Authorization"] == "Bearer secret"
    assert request.headers["Content-Type"] == "image/png"
    assert request.content == PNG
