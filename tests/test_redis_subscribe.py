import socket
import threading

from wstools.redis_subscribe import MessageCounter, main, redis_subscribe


def _free_port():
    with socket.socket() as sock:
        sock.bind(("127.0.0.1", 0))
        return sock.getsockname()[1]


def test_counter_starts_empty():
    counter = MessageCounter()
    assert counter.status_line() == "#messages 0 msg/s 0"


def test_counter_records_messages():
    counter = MessageCounter()
    counter.record("a")
    counter.record("b")
    assert counter.status_line() == "#messages 2 msg/s 2"


def test_reset_rate_keeps_total():
    counter = MessageCounter()
    counter.record("a")
    counter.record("b")
    assert counter.reset_rate() == 2
    counter.record("c")
    assert counter.count == 3
    assert counter.rate == 1


def test_counter_is_thread_safe():
    counter = MessageCounter()

    def work():
        for _ in range(1000):
            counter.record("m")

    threads = [threading.Thread(target=work) for _ in range(8)]
    for thread in threads:
        thread.start()
    for thread in threads:
        thread.join()
    assert counter.count == 8000
    assert counter.rate == 8000


def test_redis_subscribe_unreachable_host(capsys):
    status = redis_subscribe("127.0.0.1", _free_port(), "", "channel", False)
    assert status == 1
    assert "Cannot connect to redis host" in capsys.readouterr().err


def test_main_unreachable_host():
    assert main(["channel", "--host", "127.0.0.1", "--port", str(_free_port())]) == 1