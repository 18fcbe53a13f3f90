"""Computation of the Sec-WebSocket-Accept handshake value."""

from __future__ import annotations

import base64
import hashlib
from typing import Union

_GUID = b"258EAFA5-E914-47DA-95CA-C5AB0DC85B11"
_KEY_LENGTH = 24


def generate_accept_key(key: Union[str, bytes]) -> str:
    """Return the 28-character accept value for a client's Sec-WebSocket-Key.

    Only the first 24 bytes of the key are used (stopping early at a NUL
    byte); a shorter key is padded with NUL bytes to 24.
    """
    raw = key.encode("utf-8") if isinstance(key, str) else bytes(key)
    raw = raw.split(b"\0", 1)[0][:_KEY_LENGTH].ljust(_KEY_LENGTH, b"\0")
    digest = hashlib.sha1(raw + _GUID).digest()
    return base64.b64encode(digest).decode("ascii")