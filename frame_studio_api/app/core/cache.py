"""
Path-keyed cache invalidation signal.

Mutating frame operations call :func:`revalidate_path` with the path
of the view that shows the changed data (``/frame/<id>`` for a frame
detail page, ``/`` for the frame listing).  Front-end caches or CDN
purgers subscribe with :func:`register_listener`.

The signal is fire-and-forget: a failing listener is logged and never
propagates into the operation that triggered it.
"""

import logging
from typing import Callable, List

logger = logging.getLogger(__name__)

Listener = Callable[[str], None]

_listeners: List[Listener] = []


def register_listener(listener: Listener) -> None:
    """Subscribe ``listener`` to invalidation signals."""
    if listener not in _listeners:
        _listeners.append(listener)


def unregister_listener(listener: Listener) -> None:
    """Remove a previously registered listener.  Unknown listeners are ignored."""
    if listener in _listeners:
        _listeners.remove(listener)


def frame_path(frame_id: str) -> str:
    """Return the detail view path for a frame."""
    return f"/frame/{frame_id}"


def revalidate_path(path: str) -> None:
    """Notify every listener that the view at ``path`` is stale."""
    logger.debug("Revalidating %s", path)
    for listener in list(_listeners):
        try:
            listener(path)
        except Exception:
            logger.exception("Cache listener failed for %s", path)
