"""Small text helpers used while reading licenses."""

from __future__ import annotations

import enum
import re
import string
import time

_C_SPACE = " \t\n\v\f\r"
_UPPER = str.maketrans(string.ascii_lowercase, string.ascii_uppercase)
_INI_SECTION = re.compile(r"\[.*?\]")
_BASE64 = re.compile(r"(?:[A-Za-z0-9+/]{4})*(?:[A-Za-z0-9+/]{2}==|[A-Za-z0-9+/]{3}=)?")
_NUMBER = re.compile(r"[+-]?\d+")


class FileFormat(enum.Enum):
    INI = "ini"
    BASE64 = "base64"
    UNKNOWN = "unknown"


def trim(text: str) -> str:
    """Strip whitespace from both ends, and NUL characters from the end."""
    start = text.lstrip(_C_SPACE)
    return start.rstrip(_C_SPACE + "\0")


def upper(text: str) -> str:
    """Upper-case the ASCII letters of ``text``, leaving the rest untouched."""
    return text.translate(_UPPER)


def _scan_date(text: str, separator: str) -> list[int]:
    values: list[int] = []
    position = 0
    for index, width in enumerate((4, 2, 2)):
        if index and separator:
            if position >= len(text) or text[position] != separator:
                break
            position += 1
        while position < len(text) and text[position] in _C_SPACE:
            position += 1
        match = _NUMBER.match(text[position : position + width])
        if match is None:
            break
        values.append(int(match.group()))
        position += match.end()
    return values


def seconds_from_epoch(date_string: str) -> int:
    """Seconds since the epoch at local midnight of the given date.

    Accepts ``YYYYMMDD``, ``YYYY-MM-DD`` and ``YYYY/MM/DD``.
    Raises ValueError for anything else.
    """
    if len(date_string) == 8:
        fields = _scan_date(date_string, "")
        if len(fields) != 3:
            raise ValueError("Date not recognized")
    elif len(date_string) == 10:
        fields = _scan_date(date_string, "-")
        if len(fields) != 3:
            fields = _scan_date(date_string, "/")
            if len(fields) != 3:
                raise ValueError(f"Date [{date_string}] not recognized")
    else:
        raise ValueError(f"Date [{date_string}] not recognized")
    year, month, day = fields
    try:
        return int(time.mktime((year, month, day, 0, 0, 0, -1, -1, -1)))
    except (OverflowError, ValueError) as exc:
        raise ValueError(f"Date [{date_string}] not recognized") from exc


def split(text: str, separator: str) -> list[str]:
    """Split on ``separator``; a trailing separator yields no empty field."""
    parts = text.split(separator)
    if parts and parts[-1] == "":
        parts.pop()
    return parts


def identify_format(content: str) -> FileFormat:
    """Tell whether license content is base64, an ini file, or neither."""
    if _BASE64.fullmatch(content):
        return FileFormat.BASE64
    if _INI_SECTION.search(content):
        return FileFormat.INI
    return FileFormat.UNKNOWN