"""Subscribe to a Redis channel and report message throughput every second."""

from __future__ import annotations

import argparse
import sys
import threading
from typing import Optional, Sequence

import redis


class MessageCounter:
    """Thread-safe count of messages, in total and since the last reset."""

    def __init__(self) -> None:
        self.count = 0
        self.rate = 0
        self._lock = threading.Lock()

    def record(self, message) -> None:
        """Count one received message."""
        with self._lock:
            self.count += 1
            self.rate += 1

    def reset_rate(self) -> int:
        """Start a new one-second window; return the previous window's count."""
        with self._lock:
            previous, self.rate = self.rate, 0
        return previous

    def status_line(self) -> str:
        """Return the periodic status line."""
        with self._lock:
            return f"#messages {self.count} msg/s {self.rate}"


def _report_forever(counter: MessageCounter, stop: threading.Event) -> None:
    while True:
        print(counter.status_line())
        counter.reset_rate()
        if stop.wait(1.0):
            return


def redis_subscribe(
    hostname: str,
    port: int,
    password: str,
    channel: str,
    verbose: bool,
) -> int:
    """Subscribe and count messages until the connection ends; return exit status."""
    client = redis.Redis(
        host=hostname,
        port=port,
        password=password or None,
        decode_responses=True,
        socket_connect_timeout=5,
    )
    try:
        client.ping()
    except (redis.exceptions.AuthenticationError, redis.exceptions.ResponseError):
        print("Cannot authenticated to redis", file=sys.stderr)
        return 1
    except redis.exceptions.RedisError:
        print("Cannot connect to redis host", file=sys.stderr)
        return 1

    if password:
        print(f"Auth response: OK:{port}")

    counter = MessageCounter()
    stop = threading.Event()
    threading.Thread(target=_report_forever, args=(counter, stop), daemon=True).start()

    print(f"Subscribing to {channel}...", file=sys.stderr)
    pubsub = client.pubsub()
    try:
        pubsub.subscribe(channel)
        for item in pubsub.listen():
            kind = item.get("type")
            if kind == "subscribe":
                print(f"Redis subscribe response: {kind} {item.get('channel')} {item.get('data')}")
            elif kind == "message":
                message = item.get("data")
                if verbose:
                    print(f"received: {message}")
                counter.record(message)
    except redis.exceptions.RedisError:
        print(f"Error subscribing to channel {channel}", file=sys.stderr)
        return 1
    finally:
        stop.set()
        pubsub.close()
    return 0


def main(argv: Optional[Sequence[str]] = None) -> int:
    parser = argparse.ArgumentParser(description="Subscribe to a Redis channel.")
    parser.add_argument("channel")
    parser.add_argument("--host", default="127.0.0.1")
    parser.add_argument("--port", "-p", type=int, default=6379)
    parser.add_argument("--password", default="")
    parser.add_argument("--verbose", "-v", action="store_true")
    args = parser.parse_args(argv)
    try:
        return redis_subscribe(args.host, args.port, args.password, args.channel, args.verbose)
    except KeyboardInterrupt:
        return 0


if __name__ == "__main__":
    sys.exit(main())