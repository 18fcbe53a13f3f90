# wstools

Small WebSocket utilities for moving files and watching message streams.

## Commands

### ws-send

```
ws-send URL PATH
```

Connects to `URL`, prints the handshake headers, reads the file at `PATH`
and packs it into a MessagePack document with the keys `kind` (`"send"`),
`id` (a fresh UUID4), `filename`, `content` and `djb2_hash` (the 64-bit djb2
hash of the content, as a decimal string). The document is sent as one binary
WebSocket message in 32 KiB fragments, printing each step, followed by the
load time, the send time and the transfer rate in MB/s.

It then waits for one reply. The reply is expected to be a MessagePack map
whose `id` equals the id that was sent; otherwise `Invalid MsgPack response`
or `Invalid id` is printed to standard error. The exit status is 1 only when
the connection itself fails.

### ws-transfer

```
ws-transfer [--port PORT] [--host HOST]
```

Runs a WebSocket server (default `127.0.0.1:8080`) that relays every message
it receives, text or binary, to all other connected clients. New
connections with their id, path and headers, received message sizes, relay
steps and closes are logged to standard error. It runs until interrupted; if
it cannot bind, it prints the error and exits with status 1.

### ws-redis-subscribe

```
ws-redis-subscribe CHANNEL [--host HOST] [--port PORT] [--password PASSWORD] [--verbose]
```

Connects to Redis (default `127.0.0.1:6379`), authenticating when a password
is given, subscribes to `CHANNEL` and prints `#messages N msg/s M` once a
second. With `--verbose` every received message is printed too. It exits
with status 1 if it cannot connect or authenticate, or if the subscription
fails.

## Installation

```
pip install .
```

For running the test suite:

```
pip install ".[test]"
pytest
```

## Library use

```python
from wstools.handshake import generate_accept_key

# Value of the Sec-WebSocket-Accept header for a client's Sec-WebSocket-Key
generate_accept_key("dGhlIHNhbXBsZSBub25jZQ==")
# 's3pPLMBiTxaQ9kYGzzhZRbK+xOo='
```

Only the first 24 bytes of the key are used; a shorter key is padded with
NUL bytes.

```python
from wstools.send import Bench, build_pdu, djb2_hash, load_file, transfer_rate

with Bench("load file from disk"):      # prints "... completed in Nms"
    content = load_file("payload.bin")  # b"" if the file cannot be read

pdu = build_pdu("some-id", "payload.bin", content)  # MessagePack bytes
checksum = djb2_hash(content)
rate = transfer_rate(len(content), 250)  # whole MB/s; ValueError if duration <= 0
```

`WebSocketSender(url, enable_per_message_deflate).send_file(filename, throttle)`
and `ws_send(url, path, enable_per_message_deflate, throttle)` perform the
upload programmatically and return whether the reply carried the right id.

`wstools.transfer.TransferServer(port, hostname)` is the relay server behind
`ws-transfer`: `await server.serve()` runs it until cancelled and
`server.clients()` returns the open connections. `run_transfer(port, hostname)`
runs it in the foreground.

`wstools.redis_subscribe.MessageCounter` does the counting behind
`ws-redis-subscribe` (`record`, `reset_rate`, `status_line`), and
`redis_subscribe(hostname, port, password, channel, verbose)` runs the whole
subscription.

`wstools.messages` holds the event value types: `WebSocketMessageType`,
`WebSocketMessage`, `OpenInfo`, `CloseInfo`, `ErrorInfo` and `SendInfo`.
`ErrorInfo.describe()` renders a multi-line connection error report.

## What it does not do

- There is no receiving tool for `ws-send`: nothing in the package unpacks
  the uploaded document, checks its hash, writes the file to disk or sends
  the acknowledgement. `ws-transfer` only relays messages; the reply that
  `ws-send` waits for must come from another client of your own.
- There is no general-purpose WebSocket client with automatic reconnection,
  heartbeats or ping timeouts, and no HTTP client or server.
- `ws-send` makes one attempt and does not retry on failure.