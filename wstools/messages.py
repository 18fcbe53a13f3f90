"""Value types exchanged between a WebSocket connection and its callbacks."""

from __future__ import annotations

import enum
from dataclasses import dataclass, field
from typing import Callable, Dict, Union

OnProgressCallback = Callable[[int, int], bool]
"""Called with (current, total); returning False aborts the transfer."""

WebSocketHttpHeaders = Dict[str, str]


class WebSocketMessageType(enum.IntEnum):
    """Kind of event delivered to a message callback."""

    MESSAGE = 0
    OPEN = 1
    CLOSE = 2
    ERROR = 3
    PING = 4
    PONG = 5
    FRAGMENT = 6


@dataclass
class CloseInfo:
    """Why a connection was closed, and by which side."""

    code: int = 0
    reason: str = ""
    remote: bool = False


@dataclass
class ErrorInfo:
    """Details about a failed connection attempt."""

    retries: int = 0
    wait_time: float = 0.0
    http_status: int = 0
    reason: str = ""
    decompression_error: bool = False

    def describe(self) -> str:
        """Return a multi-line, human readable report of the error."""
        return (
            f"Connection error: {self.reason}\n"
            f"#retries: {self.retries}\n"
            f"Wait time(ms): {self.wait_time:g}\n"
            f"HTTP Status: {self.http_status}\n"
        )


@dataclass
class OpenInfo:
    """The URI and handshake headers of a freshly opened connection."""

    uri: str = ""
    headers: WebSocketHttpHeaders = field(default_factory=dict)


@dataclass
class SendInfo:
    """Outcome of sending one message."""

    success: bool = False
    compression_error: bool = False
    payload_size: int = 0
    wire_size: int = 0


@dataclass
class WebSocketMessage:
    """One event delivered by a WebSocket connection."""

    type: WebSocketMessageType
    data: Union[str, bytes] = ""
    wire_size: int = 0
    error_info: ErrorInfo = field(default_factory=ErrorInfo)
    open_info: OpenInfo = field(default_factory=OpenInfo)
    close_info: CloseInfo = field(default_factory=CloseInfo)
    binary: bool = False