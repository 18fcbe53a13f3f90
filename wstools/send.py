"""Send a file over a WebSocket as a msgpack document and wait for its ack."""

from __future__ import annotations

import argparse
import sys
import time
import uuid
from typing import Iterator, Optional, Sequence

import msgpack
from websockets.exceptions import ConnectionClosed, WebSocketException
from websockets.sync.client import ClientConnection, connect

from wstools.messages import CloseInfo, OpenInfo

_MASK64 = (1 << 64) - 1
_FRAGMENT_SIZE = 32 * 1024


class Bench:
    """Measure and print how long a block of work took, in milliseconds."""

    def __init__(self, description: str) -> None:
        self.description = description
        self.duration_ms = 0
        self._start = time.perf_counter()
        self._reported = False

    def report(self) -> int:
        """Print the elapsed time and return it in milliseconds."""
        self.duration_ms = int((time.perf_counter() - self._start) * 1000)
        print(f"{self.description} completed in {self.duration_ms}ms")
        self._reported = True
        return self.duration_ms

    def __enter__(self) -> "Bench":
        return self

    def __exit__(self, *args) -> None:
        if not self._reported:
            self.report()


def load_file(path) -> bytes:
    """Return the content of a file, or empty bytes if it cannot be read."""
    try:
        with open(path, "rb") as handle:
            return handle.read()
    except OSError:
        return b""


def djb2_hash(data: bytes) -> int:
    """Return the 64-bit djb2 hash of some bytes."""
    value = 5381
    for byte in data:
        value = (value * 33 + byte) & _MASK64
    return value


def build_pdu(message_id: str, filename: str, content: bytes) -> bytes:
    """Encode the msgpack document that carries a file."""
    content = bytes(content)
    document = {
        "content": content,
        "djb2_hash": str(djb2_hash(content)),
        "filename": filename,
        "id": message_id,
        "kind": "send",
    }
    return msgpack.packb(document, use_bin_type=True)


def transfer_rate(size: int, duration_ms: int) -> int:
    """Return the transfer rate in whole MB/s for size bytes sent in duration_ms."""
    if duration_ms <= 0:
        raise ValueError("duration must be positive")
    return (1000 * size // duration_ms) // (1024 * 1024)


def _open_info(connection: ClientConnection) -> OpenInfo:
    return OpenInfo(
        uri=connection.request.path,
        headers=dict(connection.response.headers.raw_items()),
    )


class WebSocketSender:
    """Client that uploads one file per connection and checks the ack id."""

    def __init__(self, url: str, enable_per_message_deflate: bool = False) -> None:
        self.url = url
        self.enable_per_message_deflate = enable_per_message_deflate
        self._id = ""

    def send_file(self, filename: str, throttle: bool = False) -> bool:
        """Send a file and return True when the server acknowledges its id."""
        print(f"Connecting to url: {self.url}")
        print("Connecting...")
        compression = "deflate" if self.enable_per_message_deflate else None
        with connect(self.url, compression=compression, max_size=None) as connection:
            info = _open_info(connection)
            print("ws_send: connected")
            print(f"Uri: {info.uri}")
            print("Handshake Headers:")
            for name, value in info.headers.items():
                print(f"{name}: {value}")

            print("Sending...")
            with Bench("load file from disk"):
                content = load_file(filename)

            self._id = str(uuid.uuid4())
            payload = build_pdu(self._id, filename, content)

            bench = Bench("Sending file through websocket")
            connection.send(self._fragments(payload, throttle))
            duration = bench.report()
            rate = transfer_rate(len(content), max(duration, 1))
            print(f"Send transfer rate: {rate}MB/s")

            print("Waiting for ack...")
            try:
                reply = connection.recv()
            except ConnectionClosed:
                acknowledged = False
            else:
                acknowledged = self._check_ack(reply)

        close = CloseInfo(connection.close_code or 0, connection.close_reason or "")
        print(f"ws_send: connection closed: code {close.code} reason {close.reason}")
        return acknowledged

    @staticmethod
    def _fragments(payload: bytes, throttle: bool) -> Iterator[bytes]:
        total = max(1, -(-len(payload) // _FRAGMENT_SIZE))
        for step in range(total):
            print(f"ws_send: Step {step} out of {total}")
            if throttle:
                time.sleep(0.01)
            yield payload[step * _FRAGMENT_SIZE:(step + 1) * _FRAGMENT_SIZE]

    def _check_ack(self, reply) -> bool:
        raw = reply.encode("utf-8") if isinstance(reply, str) else reply
        print(f"ws_send: received message ({len(raw)} bytes)")
        try:
            data = msgpack.unpackb(raw, raw=False)
        except (ValueError, msgpack.UnpackException):
            print("Invalid MsgPack response", file=sys.stderr)
            return False
        ack_id = data.get("id") if isinstance(data, dict) else None
        if not isinstance(ack_id, str) or ack_id != self._id:
            print("Invalid id", file=sys.stderr)
            return False
        return True


def ws_send(
    url: str,
    path: str,
    enable_per_message_deflate: bool = False,
    throttle: bool = False,
) -> bool:
    """Send one file to url; return whether it was acknowledged."""
    sender = WebSocketSender(url, enable_per_message_deflate)
    acknowledged = sender.send_file(path, throttle)
    print("Done !")
    return acknowledged


def main(argv: Optional[Sequence[str]] = None) -> int:
    parser = argparse.ArgumentParser(description="Send a file over a WebSocket.")
    parser.add_argument("url")
    parser.add_argument("path")
    args = parser.parse_args(argv)
    try:
        ws_send(args.url, args.path, enable_per_message_deflate=False, throttle=False)
    except (OSError, WebSocketException) as exc:
        print(f"ws_send: {exc}", file=sys.stderr)
        return 1
    return 0


if __name__ == "__main__":
    sys.exit(main())