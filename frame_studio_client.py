"""Frame Studio API client.

A thin synchronous wrapper around the ``/api/v1`` REST API built on the
``requests`` library.  It is used by scripts and by services (such as
the frame renderer) that need to manage frames remotely.

Every method returns a tuple ``(data, error)``.  On success ``error``
is ``None``; on failure ``data`` is ``None`` (or an empty list for
listings) and ``error`` is a dictionary with the keys ``status_code``
and ``message``.

User operations authenticate with a user access token (``api_key``).
The storage, calls and preview operations require an internal token
(``internal_key``).
"""

from __future__ import annotations

import logging
from typing import Any, Dict, List, Optional, Tuple

import requests


logger = logging.getLogger(__name__)

Result = Tuple[Optional[Any], Optional[Dict[str, Any]]]


class FrameStudioAPI:
    """Client for interacting with the Frame Studio API."""

    def __init__(
        self,
        *,
        base_url: str,
        api_key: Optional[str] = None,
        internal_key: Optional[str] = None,
        session: Optional[requests.Session] = None,
        prefix: str = "/api/v1",
    ) -> None:
        """Initialise the API client.

        Args:
            base_url: Base URL of the service, e.g. ``https://frames.example.com``.
            api_key: User access token sent as ``Authorization: Bearer``.
            internal_key: Internal token used for internal-only routes.
            session: Optional requests session.  If not supplied a
                session will be created automatically.
            prefix: Path prefix of the versioned API.
        """
        self.base_url = base_url.rstrip("/") + prefix
        self.api_key = api_key
        self.internal_key = internal_key
        self.session = session or requests.Session()

    # ------------------------------------------------------------------
    # Low level HTTP helpers
    # ------------------------------------------------------------------
    def _request(
        self,
        method: str,
        path: str,
        *,
        params: Dict[str, Any] | None = None,
        json_body: Any | None = None,
        internal: bool = False,
    ) -> Result:
        """Perform an HTTP request and return ``(data, error)``."""
        url = f"{self.base_url}{path}"
        headers: Dict[str, str] = {}
        token = self.internal_key if internal else self.api_key
        if token:
            headers["Authorization"] = f"Bearer {token}"
        try:
            logger.debug("Sending %s request to %s", method, url)
            response = self.session.request(
                method=method,
                url=url,
                params=params,
                json=json_body,
                headers=headers,
                timeout=15,
            )
            response.raise_for_status()
            if response.content:
                return response.json(), None
            return None, None
        except requests.HTTPError as exc:
            status = exc.response.status_code if exc.response is not None else None
            message = ""
            if exc.response is not None:
                try:
                    err_json = exc.response.json()
                    message = err_json.get("detail") or err_json.get("message") or str(err_json)
                except ValueError:
                    message = exc.response.text
            if not message:
                message = str(exc)
            logger.error("API request failed (%s): %s", status, message)
            return None, {"status_code": status, "message": str(message)}
        except requests.RequestException as exc:
            logger.error("API request failed: %s", exc)
            return None, {"status_code": None, "message": str(exc)}

    def _list(self, path: str) -> Tuple[List[Dict[str, Any]], Optional[Dict[str, Any]]]:
        data, error = self._request("GET", path)
        if error:
            return [], error
        return data if isinstance(data, list) else [], None

    # ------------------------------------------------------------------
    # Owner operations
    # ------------------------------------------------------------------
    def list_frames(self) -> Tuple[List[Dict[str, Any]], Optional[Dict[str, Any]]]:
        return self._list("/frames/")

    def list_recent_frames(self) -> Tuple[List[Dict[str, Any]], Optional[Dict[str, Any]]]:
        return self._list("/frames/recent")

    def get_frame(self, frame_id: str) -> Result:
        return self._request("GET", f"/frames/{frame_id}")

    def create_frame(self, name: str, template: str, description: Optional[str] = None) -> Result:
        payload = {"name": name, "template": template, "description": description}
        return self._request("POST", "/frames/", json_body=payload)

    def rename_frame(self, frame_id: str, name: str) -> Result:
        return self._request("PUT", f"/frames/{frame_id}/name", json_body={"name": name})

    def update_draft_config(self, frame_id: str, config: Any) -> Result:
        return self._request("PUT", f"/frames/{frame_id}/config", json_body={"config": config})

    def publish(self, frame_id: str) -> Result:
        return self._request("POST", f"/frames/{frame_id}/publish")

    def revert(self, frame_id: str) -> Result:
        return self._request("POST", f"/frames/{frame_id}/revert")

    def update_linked_page(self, frame_id: str, url: Optional[str] = None) -> Result:
        return self._request("PUT", f"/frames/{frame_id}/linked-page", json_body={"url": url})

    def update_webhook(self, frame_id: str, event: str, url: Optional[str] = None) -> Result:
        """Set the webhook for ``event``; passing no ``url`` removes it."""
        return self._request(
            "PUT", f"/frames/{frame_id}/webhooks", json_body={"event": event, "url": url}
        )

    def render(self, frame_id: str, draft: bool = False) -> Result:
        return self._request(
            "GET", f"/frames/{frame_id}/render", params={"draft": "true" if draft else "false"}
        )

    def delete_frame(self, frame_id: str) -> Tuple[bool, Optional[Dict[str, Any]]]:
        _, error = self._request("DELETE", f"/frames/{frame_id}")
        return error is None, error

    def list_templates(self) -> Tuple[List[Dict[str, Any]], Optional[Dict[str, Any]]]:
        return self._list("/templates/")

    # ------------------------------------------------------------------
    # Internal operations
    # ------------------------------------------------------------------
    def update_storage(self, frame_id: str, storage: Dict[str, Any]) -> Result:
        return self._request(
            "PUT", f"/frames/{frame_id}/storage", json_body={"storage": storage}, internal=True
        )

    def update_calls(self, frame_id: str, calls: int) -> Result:
        return self._request(
            "PUT", f"/frames/{frame_id}/calls", json_body={"calls": calls}, internal=True
        )

    def update_preview(self, frame_id: str, preview: str) -> Result:
        return self._request(
            "PUT", f"/frames/{frame_id}/preview", json_body={"preview": preview}, internal=True
        )
