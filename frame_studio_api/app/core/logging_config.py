"""
Logging setup for the Frame Studio service.

``setup_logging`` installs a console handler on the root logger and,
when ``LOG_FILE`` is set, a file handler.  Handlers installed here are
named, so calling ``setup_logging`` again (``create_app`` in tests,
uvicorn reloads) adjusts the level and adds a missing file handler
instead of duplicating output.

The ``httpx`` and ``httpcore`` loggers, which log every outbound request
at INFO, are held at WARNING unless the service runs at DEBUG.
"""

import logging
from pathlib import Path
from typing import Optional

LOG_FORMAT = "%(asctime)s [%(levelname)s] %(name)s: %(message)s"
DATE_FORMAT = "%Y-%m-%d %H:%M:%S"

CONSOLE_HANDLER = "frame_studio.console"
FILE_HANDLER = "frame_studio.file"
HTTP_CLIENT_LOGGERS = ("httpx", "httpcore")


def _named_handler(root: logging.Logger, name: str) -> Optional[logging.Handler]:
    for handler in root.handlers:
        if handler.get_name() == name:
            return handler
    return None


def setup_logging(level: str = "INFO", logfile: Optional[str] = None) -> None:
    """Configure the root logger for the service.

    Parameters
    ----------
    level : str
        Logging level name (e.g. ``"DEBUG"``, ``"INFO"``).  Case
        insensitive; unknown names fall back to INFO.
    logfile : Optional[str]
        Path of a log file.  Missing parent directories are created.
    """
    root = logging.getLogger()
    numeric_level = getattr(logging, level.upper(), logging.INFO)
    if not isinstance(numeric_level, int):
        numeric_level = logging.INFO
    root.setLevel(numeric_level)

    formatter = logging.Formatter(fmt=LOG_FORMAT, datefmt=DATE_FORMAT)

    if _named_handler(root, CONSOLE_HANDLER) is None:
        console_handler = logging.StreamHandler()
        console_handler.set_name(CONSOLE_HANDLER)
        console_handler.setFormatter(formatter)
        root.addHandler(console_handler)

    if logfile and _named_handler(root, FILE_HANDLER) is None:
        log_path = Path(logfile).resolve()
        log_path.parent.mkdir(parents=True, exist_ok=True)
        file_handler = logging.FileHandler(log_path, encoding="utf-8")
        file_handler.set_name(FILE_HANDLER)
        file_handler.setFormatter(formatter)
        root.addHandler(file_handler)

    client_level = logging.DEBUG if numeric_level <= logging.DEBUG else logging.WARNING
    for name in HTTP_CLIENT_LOGGERS:
        logging.getLogger(name).setLevel(client_level)
