import asyncio
import contextlib
import socket

import pytest
from websockets.asyncio.client import connect

from wstools.transfer import TransferServer, main, run_transfer


def _free_port():
    with socket.socket() as sock:
        sock.bind(("127.0.0.1", 0))
        return sock.getsockname()[1]


async def _wait_for(predicate, timeout=5.0):
    loop = asyncio.get_running_loop()
    deadline = loop.time() + timeout
    while not predicate():
        if loop.time() > deadline:
            raise AssertionError("condition not reached")
        await asyncio.sleep(0.02)


async def _wait_listening(port):
    for _ in range(250):
        try:
            _, writer = await asyncio.open_connection("127.0.0.1", port)
        except OSError:
            await asyncio.sleep(0.02)
            continue
        writer.close()
        return
    raise AssertionError("server did not start")


@contextlib.asynccontextmanager
async def running_server():
    port = _free_port()
    server = TransferServer(port, "127.0.0.1")
    task = asyncio.create_task(server.serve())
    try:
        await _wait_listening(port)
        yield server, f"ws://127.0.0.1:{port}/"
    finally:
        task.cancel()
        with contextlib.suppress(asyncio.CancelledError):
            await task


@pytest.mark.asyncio
async def test_text_is_relayed_to_other_client():
    async with running_server() as (server, url):
        async with connect(url) as alice, connect(url) as bob:
            await _wait_for(lambda: len(server.clients()) == 2)
            await alice.send("hello")
            assert await asyncio.wait_for(bob.recv(), 5) == "hello"


@pytest.mark.asyncio
async def test_sender_does_not_get_its_own_message():
    async with running_server() as (server, url):
        async with connect(url) as alice, connect(url) as bob:
            await _wait_for(lambda: len(server.clients()) == 2)
            await alice.send("ping")
            assert await asyncio.wait_for(bob.recv(), 5) == "ping"
            with pytest.raises(asyncio.TimeoutError):
                await asyncio.wait_for(alice.recv(), 0.3)


@pytest.mark.asyncio
async def test_binary_and_large_messages_preserved():
    big = "a" * (1024 * 1024)
    blob = bytes(range(256)) * 500
    async with running_server() as (server, url):
        async with connect(url, max_size=None) as alice, connect(url, max_size=None) as bob:
            await _wait_for(lambda: len(server.clients()) == 2)
            await bob.send(big)
            await bob.send(blob)
            assert await asyncio.wait_for(alice.recv(), 10) == big
            assert await asyncio.wait_for(alice.recv(), 10) == blob


@pytest.mark.asyncio
async def test_clients_removed_after_disconnect(capsys):
    async with running_server() as (server, url):
        async with connect(url + "chat"):
            await _wait_for(lambda: len(server.clients()) == 1)
        await _wait_for(lambda: len(server.clients()) == 0)
    err = capsys.readouterr().err
    assert "New connection" in err
    assert "Uri: /chat" in err
    assert "Closed connection code 1000" in err


def test_run_transfer_port_in_use():
    with socket.socket() as busy:
        busy.bind(("127.0.0.1", 0))
        busy.listen()
        port = busy.getsockname()[1]
        assert run_transfer(port, "127.0.0.1") == 1


def test_main_port_in_use(capsys):
    with socket.socket() as busy:
        busy.bind(("127.0.0.1", 0))
        busy.listen()
        port = busy.getsockname()[1]
        assert main(["--port", str(port), "--host", "127.0.0.1"]) == 1
    assert f"Listening on 127.0.0.1:{port}" in capsys.readouterr().out