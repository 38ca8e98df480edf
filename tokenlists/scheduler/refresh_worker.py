"""Background refresh loop driven by an APScheduler interval job."""

from __future__ import annotations

from datetime import datetime, timedelta, timezone
from threading import Event, Lock
from typing import TYPE_CHECKING

import structlog
from apscheduler.events import EVENT_JOB_MAX_INSTANCES, JobSubmissionEvent
from apscheduler.jobstores.base import JobLookupError
from apscheduler.schedulers.background import BackgroundScheduler
from apscheduler.triggers.interval import IntervalTrigger

from ..engine.remote import RemoteListsFetcher
from .channel import NotificationChannel

if TYPE_CHECKING:
    from ..config.models import TokenListsConfig

REFRESH_JOB_ID = "tokenlists::refresh"
_FORCED_RETRY_DELAY = timedelta(milliseconds=50)


class _LinkedStop(Event):
    """Stop event that also reads as set once the caller's cancel event is set."""

    def __init__(self, parent: Event | None = None) -> None:
        super().__init__()
        self._parent = parent

    def is_set(self) -> bool:
        return super().is_set() or (self._parent is not None and self._parent.is_set())


class RefreshWorker:
    """Periodically fetch remote lists and notify a consumer after each refresh.

    ``start`` returns the :class:`NotificationChannel` the worker writes to;
    the channel is closed when the worker ends. Each tick checks the privacy
    guard and the refresh interval before touching the network.
    """

    def __init__(
        self,
        config: "TokenListsConfig",
        fetcher: RemoteListsFetcher,
        logger: structlog.BoundLogger | None = None,
    ) -> None:
        self.config = config
        self.fetcher = fetcher
        self.logger = logger or structlog.get_logger("tokenlists.scheduler")
        self._lock = Lock()
        self._scheduler: BackgroundScheduler | None = None
        self._channel: NotificationChannel | None = None
        self._stop: Event = _LinkedStop()
        self._cancel: Event | None = None
        self._force = Event()
        self._ticking = False

    @property
    def running(self) -> bool:
        with self._lock:
            return self._scheduler is not None

    def start(self, cancel: Event | None = None) -> NotificationChannel:
        with self._lock:
            if self._scheduler is not None and self._channel is not None:
                return self._channel
            self._stop = _LinkedStop(cancel)
            self._cancel = cancel
            channel = NotificationChannel()
            scheduler = BackgroundScheduler(timezone=timezone.utc)
            scheduler.add_job(
                self._tick,
                trigger=IntervalTrigger(
                    seconds=self.config.auto_refresh_check_interval.total_seconds(),
                    timezone=timezone.utc,
                ),
                id=REFRESH_JOB_ID,
                args=[channel],
                max_instances=1,
                coalesce=True,
                next_run_time=datetime.now(timezone.utc),
            )
            scheduler.add_listener(self._on_max_instances, EVENT_JOB_MAX_INSTANCES)
            scheduler.start()
            self._scheduler = scheduler
            self._channel = channel
        self.logger.info(
            "refresh_worker_started",
            check_interval=self.config.auto_refresh_check_interval.total_seconds(),
        )
        return channel

    def stop(self) -> None:
        """Stop the worker and wait for a running refresh to finish."""

        with self._lock:
            scheduler, channel = self._scheduler, self._channel
            self._scheduler = None
            self._channel = None
            self._stop.set()
        if scheduler is None:
            return
        if scheduler.running:
            scheduler.shutdown(wait=True)
        if channel is not None:
            channel.close()
        self.logger.info("refresh_worker_stopped")

    def request_refresh(self) -> None:
        """Force a refresh on the next tick and run that tick now."""

        self._force.set()
        with self._lock:
            scheduler = self._scheduler
        if scheduler is None:
            return
        try:
            scheduler.modify_job(REFRESH_JOB_ID, next_run_time=datetime.now(timezone.utc))
        except JobLookupError:
            self.logger.warning("refresh_job_missing")

    def check_and_refresh(self, channel: NotificationChannel, force: bool = False) -> bool:
        """Run one refresh cycle; return ``True`` when a notification was delivered."""

        try:
            privacy_on = self.config.privacy_guard.is_privacy_on()
        except Exception as exc:  # noqa: BLE001
            self.logger.error("privacy_mode_read_failed", error=str(exc))
            return False
        if privacy_on:
            self.logger.debug("refresh_skipped_privacy")
            return False

        now = datetime.now(timezone.utc)
        if not force:
            try:
                last_refresh = self.config.last_refresh_store.get()
            except Exception as exc:  # noqa: BLE001
                self.logger.error("last_refresh_read_failed", error=str(exc))
                return False
            if last_refresh is not None:
                if last_refresh.tzinfo is None:
                    last_refresh = last_refresh.replace(tzinfo=timezone.utc)
                if now - last_refresh < self.config.auto_refresh_interval:
                    return False

        try:
            stored = self.fetcher.fetch_and_store(self._stop)
        except Exception as exc:  # noqa: BLE001
            self.logger.error("fetch_and_store_failed", error=str(exc))
            stored = 0
        if stored > 0:
            self.logger.info("token_lists_updated", count=stored)

        # Recorded whatever the outcome, so a failing network is not retried every tick.
        try:
            self.config.last_refresh_store.set(datetime.now(timezone.utc).replace(microsecond=0))
        except Exception as exc:  # noqa: BLE001
            self.logger.error("last_refresh_write_failed", error=str(exc))

        return channel.send(self._stop)

    def _tick(self, channel: NotificationChannel) -> None:
        with self._lock:
            self._ticking = True
        try:
            while True:
                if self._caller_cancelled():
                    self._end_from_job(channel)
                    return
                if self._stop.is_set():
                    return
                force = self._force.is_set()
                self._force.clear()
                self.check_and_refresh(channel, force=force)
                # A refresh requested while this tick ran was skipped by the scheduler.
                with self._lock:
                    if not self._force.is_set() and not self._caller_cancelled():
                        self._ticking = False
                        return
        finally:
            with self._lock:
                self._ticking = False

    def _on_max_instances(self, event: JobSubmissionEvent) -> None:
        # The forced run hit the instance that was still finishing; retry it once that one is gone.
        if event.job_id != REFRESH_JOB_ID:
            return
        with self._lock:
            scheduler = self._scheduler
            if scheduler is None or self._ticking or not self._force.is_set():
                return
        try:
            scheduler.modify_job(REFRESH_JOB_ID, next_run_time=datetime.now(timezone.utc) + _FORCED_RETRY_DELAY)
        except JobLookupError:
            self.logger.warning("refresh_job_missing")

    def _caller_cancelled(self) -> bool:
        return self._cancel is not None and self._cancel.is_set()

    def _end_from_job(self, channel: NotificationChannel) -> None:
        # Runs on a scheduler thread, so the scheduler cannot wait for itself.
        with self._lock:
            scheduler = self._scheduler
            if self._channel is not channel:
                return
            self._scheduler = None
            self._channel = None
            self._stop.set()
        channel.close()
        if scheduler is not None and scheduler.running:
            scheduler.shutdown(wait=False)
        self.logger.info("refresh_worker_cancelled")


__all__ = ["REFRESH_JOB_ID", "RefreshWorker"]
