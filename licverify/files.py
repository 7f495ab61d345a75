"""File helpers used while locating licenses."""

from __future__ import annotations

from typing import Iterable, Optional

from .events import EventRegistry, EventType


def filter_existing_files(
    paths: Iterable[str], registry: EventRegistry, extra_data: Optional[str] = None
) -> list[str]:
    """Keep the paths that can be opened, recording an event for each one."""
    existing: list[str] = []
    for path in paths:
        registry.add_event(EventType.LICENSE_SPECIFIED, path, extra_data)
        try:
            with open(path, "rb"):
                pass
        except OSError:
            registry.add_event(EventType.LICENSE_FILE_NOT_FOUND, path, extra_data)
        else:
            existing.append(path)
            registry.add_event(EventType.LICENSE_FOUND, path, extra_data)
    return existing


def get_file_contents(path: str, max_size: int) -> bytes:
    """Read at most ``max_size`` bytes of a file; raises OSError on failure."""
    with open(path, "rb") as handle:
        return handle.read(max(max_size, 0))


def remove_extension(path: str) -> str:
    """Drop the extension of the last path component, if it has one."""
    if path in (".", ".."):
        return path
    dot = path.rfind(".")
    if dot == -1:
        return path
    separator = max(path.rfind("\\"), path.rfind("/"))
    if separator == -1:
        return path if dot == 0 else path[:dot]
    if separator >= dot + 1:
        return path
    return path[:dot]