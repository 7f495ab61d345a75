"""Base64 encoding with optional line breaks, and a lenient decoder."""

from __future__ import annotations

import base64

_ALPHABET = "ABCDEFGHIJKLMNOPQRSTUVWXYZabcdefghijklmnopqrstuvwxyz0123456789+/"
_VALUES = {char: value for value, char in enumerate(_ALPHABET)}


def encode(data: bytes, line_length: int = -1) -> str:
    """Encode ``data`` as base64.

    With a positive ``line_length`` a newline is put in whenever the output
    would reach a multiple of that length. Unless ``line_length`` is zero the
    result always ends with a newline.
    """
    encoded = base64.b64encode(bytes(data)).decode("ascii")
    pieces: list[str] = []
    size = 0
    for char in encoded:
        if line_length > 0 and (size + 1) % line_length == 0:
            pieces.append("\n")
            size += 1
        pieces.append(char)
        size += 1
    if line_length and (not pieces or pieces[-1] != "\n"):
        pieces.append("\n")
    return "".join(pieces)


def decode(text: str) -> bytes:
    """Decode base64 text, ignoring newlines.

    Characters outside the alphabet count as zero; input shorter than two
    characters decodes to nothing.
    """
    cleaned = text.replace("\n", "")
    if len(cleaned) < 2:
        return b""
    pad = (cleaned[-1] == "=") + (cleaned[-2] == "=")
    values = [_VALUES.get(char, 0) for char in cleaned] + [0, 0, 0, 0]
    out = bytearray()
    position = 0
    end = len(cleaned) - 4 - pad
    while position <= end:
        a, b, c, d = values[position : position + 4]
        out += bytes(
            (((a << 2) | (b >> 4)) & 0xFF, ((b << 4) | (c >> 2)) & 0xFF, ((c << 6) | d) & 0xFF)
        )
        position += 4
    a, b, c = values[position : position + 3]
    if pad == 1:
        out += bytes((((a << 2) | (b >> 4)) & 0xFF, ((b << 4) | (c >> 2)) & 0xFF))
    elif pad == 2:
        out.append(((a << 2) | (b >> 4)) & 0xFF)
    return bytes(out)