"""Append-only diagnostic log kept in the temporary directory."""

from __future__ import annotations

import os
import tempfile
import threading
import time
from typing import IO, Optional

LOG_FILE_NAME = "open-license.log"


class _LogFile:
    def __init__(self) -> None:
        self.lock = threading.Lock()
        self.stream: Optional[IO[str]] = None


_LOG = _LogFile()


def log_path() -> str:
    """Where the log is written."""
    if os.name == "nt":
        return os.path.join(tempfile.gettempdir(), LOG_FILE_NAME)
    folder = os.environ.get("TMPDIR", "/tmp")
    return f"{folder}/{LOG_FILE_NAME}"


def log(message: str, *args: object) -> None:
    """Append a timestamped message; silently does nothing if the log can't be opened."""
    with _LOG.lock:
        if _LOG.stream is None:
            try:
                _LOG.stream = open(log_path(), "a", encoding="utf-8")
            except OSError:
                return
        text = message % args if args else message
        _LOG.stream.write(time.strftime("%Y-%m-%d %H:%M:%S") + text)
        _LOG.stream.flush()


def shutdown_log() -> None:
    """Close the log; the next message opens it again."""
    with _LOG.lock:
        if _LOG.stream is not None:
            _LOG.stream.close()
            _LOG.stream = None