"""Single-slot rendezvous between the refresh worker and its consumer."""

from __future__ import annotations

from threading import Condition, Event

_POLL_INTERVAL = 0.1


class NotificationChannel:
    """``send`` blocks until a ``receive`` takes the value, or the send is abandoned."""

    def __init__(self) -> None:
        self._cond = Condition()
        self._pending = False
        self._closed = False

    @property
    def closed(self) -> bool:
        with self._cond:
            return self._closed

    def close(self) -> None:
        with self._cond:
            self._closed = True
            self._cond.notify_all()

    def send(self, cancel: Event | None = None) -> bool:
        """Return ``True`` once the notification was received.

        Returns ``False`` when ``cancel`` is set or the channel is closed
        before a consumer picked the value up.
        """

        with self._cond:
            while self._pending and not self._closed:
                if cancel is not None and cancel.is_set():
                    return False
                self._cond.wait(_POLL_INTERVAL)
            if self._closed:
                return False
            self._pending = True
            self._cond.notify_all()
            while self._pending and not self._closed:
                if cancel is not None and cancel.is_set():
                    self._pending = False
                    return False
                self._cond.wait(_POLL_INTERVAL)
            if self._pending:
                # closed before anyone received
                self._pending = False
                return False
            return True

    def receive(self, timeout: float | None = None) -> bool:
        """Wait for a notification; ``False`` on timeout or close."""

        with self._cond:
            if not self._cond.wait_for(lambda: self._pending or self._closed, timeout):
                return False
            if not self._pending:
                return False
            self._pending = False
            self._cond.notify_all()
            return True


__all__ = ["NotificationChannel"]
