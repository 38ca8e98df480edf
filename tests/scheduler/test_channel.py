from __future__ import annotations

import threading
import time

from tokenlists.scheduler.channel import NotificationChannel


def _send_in_thread(channel: NotificationChannel, cancel: threading.Event | None = None):
    result: dict[str, bool] = {}

    def _run() -> None:
        result["delivered"] = channel.send(cancel)

    thread = threading.Thread(target=_run, daemon=True)
    thread.start()
    return thread, result


def test_send_blocks_until_received() -> None:
    channel = NotificationChannel()
    thread, result = _send_in_thread(channel)

    time.sleep(0.2)
    assert thread.is_alive()

    assert channel.receive(timeout=1) is True
    thread.join(timeout=1)
    assert result == {"delivered": True}


def test_receive_times_out_without_sender() -> None:
    assert NotificationChannel().receive(timeout=0.05) is False


def test_cancelled_send_gives_up() -> None:
    channel = NotificationChannel()
    cancel = threading.Event()
    thread, result = _send_in_thread(channel, cancel)

    time.sleep(0.1)
    cancel.set()
    thread.join(timeout=1)

    assert result == {"delivered": False}
    assert channel.receive(timeout=0.05) is False


def test_close_releases_sender_and_receiver() -> None:
    channel = NotificationChannel()
    thread, result = _send_in_thread(channel)

    time.sleep(0.1)
    channel.close()
    thread.join(timeout=1)

    assert result == {"delivered": False}
    assert channel.closed
    assert channel.receive(timeout=0.05) is False
    assert channel.send() is False
