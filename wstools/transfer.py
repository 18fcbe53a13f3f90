"""WebSocket server that relays every message to all other connected clients."""

from __future__ import annotations

import argparse
import asyncio
import sys
from typing import FrozenSet, Iterator, Optional, Sequence, Union

from websockets.asyncio.server import ServerConnection, serve
from websockets.exceptions import ConnectionClosed

from wstools.messages import CloseInfo, OpenInfo

_FRAGMENT_SIZE = 32 * 1024


def _log(text: str) -> None:
    print(text, file=sys.stderr)


def _fragments(message: Union[str, bytes]) -> Iterator[Union[str, bytes]]:
    total = max(1, -(-len(message) // _FRAGMENT_SIZE))
    for step in range(total):
        _log(f"ws_transfer: Step {step} out of {total}")
        yield message[step * _FRAGMENT_SIZE:(step + 1) * _FRAGMENT_SIZE]


class TransferServer:
    """Relay server: a message from one client goes to every other client."""

    def __init__(self, port: int, hostname: str = "127.0.0.1") -> None:
        self.port = port
        self.hostname = hostname
        self._clients: set[ServerConnection] = set()

    def clients(self) -> FrozenSet[ServerConnection]:
        """Return the connections currently open."""
        return frozenset(self._clients)

    async def serve(self) -> None:
        """Listen and relay messages until cancelled; OSError if binding fails."""
        async with serve(self._handle, self.hostname, self.port, max_size=None):
            await asyncio.get_running_loop().create_future()

    async def _handle(self, connection: ServerConnection) -> None:
        self._clients.add(connection)
        info = OpenInfo(
            uri=connection.request.path,
            headers=dict(connection.request.headers.raw_items()),
        )
        _log("New connection")
        _log(f"id: {connection.id}")
        _log(f"Uri: {info.uri}")
        _log("Headers:")
        for name, value in info.headers.items():
            _log(f"{name}: {value}")
        try:
            async for message in connection:
                await self._relay(connection, message)
        except ConnectionClosed:
            pass
        finally:
            self._clients.discard(connection)
            close = CloseInfo(connection.close_code or 0, connection.close_reason or "")
            _log(f"Closed connection code {close.code} reason {close.reason}")

    async def _relay(self, sender: ServerConnection, message: Union[str, bytes]) -> None:
        size = len(message.encode("utf-8")) if isinstance(message, str) else len(message)
        _log(f"Received {size} bytes")
        for client in list(self._clients):
            if client is sender:
                continue
            try:
                await client.send(_fragments(message))
            except ConnectionClosed:
                continue


def run_transfer(port: int, hostname: str = "127.0.0.1") -> int:
    """Run a relay server until interrupted; return a process exit status."""
    print(f"Listening on {hostname}:{port}")
    server = TransferServer(port, hostname)
    try:
        asyncio.run(server.serve())
    except OSError as exc:
        _log(str(exc))
        return 1
    except KeyboardInterrupt:
        pass
    return 0


def main(argv: Optional[Sequence[str]] = None) -> int:
    parser = argparse.ArgumentParser(description="Relay WebSocket messages between clients.")
    parser.add_argument("--port", "-p", type=int, default=8080)
    parser.add_argument("--host", default="127.0.0.1")
    args = parser.parse_args(argv)
    return run_transfer(args.port, args.host)


if __name__ == "__main__":
    sys.exit(main())