"""``TokensList``: the public facade over the merge engine and refresh worker."""

from __future__ import annotations

import queue
from datetime import datetime
from threading import Event, RLock, Thread

import structlog

from .config.models import TokenListsConfig
from .engine.fetcher import HTTPClient
from .engine.manifest import ManifestResolver
from .engine.merge import SnapshotBuilder
from .engine.remote import RemoteListsFetcher
from .engine.thread_pool import ThreadPoolManager
from .engine.validate import validate_config
from .errors import LifecycleError
from .scheduler.channel import NotificationChannel
from .scheduler.refresh_worker import RefreshWorker
from .types import State, Token, TokenList, token_key

_RECEIVE_TIMEOUT = 0.5


class TokensList:
    """Merged, queryable view of all configured token lists.

    Lifecycle: ``start`` once, ``stop`` once (further stops are no-ops).
    Queries never block and read whichever snapshot is current; before the
    first ``start`` they see an empty snapshot.
    """

    def __init__(
        self,
        config: TokenListsConfig,
        http_client: HTTPClient | None = None,
        logger: structlog.BoundLogger | None = None,
    ) -> None:
        validate_config(config)
        self.config = config
        self.logger = logger or structlog.get_logger("tokenlists.manager")
        self._lock = RLock()
        self._state = State()
        self._started = False
        self._stopped = False
        self._notify: queue.Queue | None = None
        self._consumer: Thread | None = None

        self._owns_http_client = http_client is None
        self.http_client = http_client or HTTPClient(timeout=config.request_timeout)
        self.pool = ThreadPoolManager(max_workers=config.fetch_workers)
        self.builder = SnapshotBuilder(config)
        resolver = ManifestResolver(config.content_store, self.http_client, config.manifest_url)
        fetcher = RemoteListsFetcher(resolver, config.content_store, self.http_client, self.pool)
        self.worker = RefreshWorker(config, fetcher)

    # ------------------------------------------------------------------
    # Lifecycle
    # ------------------------------------------------------------------
    def start(self, notify: queue.Queue, cancel: Event | None = None) -> None:
        """Build the first snapshot and start background refreshes unless private."""

        with self._lock:
            if self._started or self._stopped:
                raise LifecycleError("tokens list has already been started")
            self._rebuild()
            self._notify = notify
            self._manage_worker(cancel)
            self._started = True
        self.logger.info("tokens_list_started", tokens=len(self._state.tokens))

    def stop(self) -> None:
        with self._lock:
            if not self._started:
                raise LifecycleError("tokens list has not been started")
            if self._stopped:
                return
            self._stopped = True
            self.worker.stop()
            consumer, self._consumer = self._consumer, None
        if consumer is not None:
            consumer.join()
        self.pool.shutdown()
        if self._owns_http_client:
            self.http_client.close()
        self.logger.info("tokens_list_stopped")

    def privacy_mode_updated(self, cancel: Event | None = None) -> None:
        """Stop the worker while private; (re)start it with an immediate check otherwise."""

        with self._lock:
            self._ensure_running()
            self._manage_worker(cancel)

    def refresh_now(self, cancel: Event | None = None) -> None:
        """Trigger a refresh; while private only the local tiers are rebuilt."""

        with self._lock:
            self._ensure_running()
            if not self.config.privacy_guard.is_privacy_on():
                self._manage_worker(cancel)
                self.worker.request_refresh()
                return
            self._rebuild()
            self._notify.put(None)

    def last_refresh_time(self) -> datetime | None:
        return self.config.last_refresh_store.get()

    # ------------------------------------------------------------------
    # Queries
    # ------------------------------------------------------------------
    def unique_tokens(self) -> list[Token]:
        return list(self._state.tokens.values())

    def get_token_by_chain_address(self, chain_id: int, address: bytes) -> Token | None:
        return self._state.tokens.get(token_key(chain_id, address))

    def get_tokens_by_chain(self, chain_id: int) -> list[Token]:
        return [token for token in self._state.tokens.values() if token.chain_id == chain_id]

    def token_list(self, list_id: str) -> TokenList | None:
        return self._state.token_lists.get(list_id)

    def token_lists(self) -> list[TokenList]:
        return list(self._state.token_lists.values())

    def token_list_ids(self) -> list[str]:
        return sorted(self._state.token_lists)

    # ------------------------------------------------------------------
    # Internals
    # ------------------------------------------------------------------
    def _ensure_running(self) -> None:
        if not self._started:
            raise LifecycleError("tokens list has not been started")
        if self._stopped:
            raise LifecycleError("tokens list has been stopped")

    def _rebuild(self) -> None:
        self._state = self.builder.build()

    def _manage_worker(self, cancel: Event | None) -> None:
        if self.config.privacy_guard.is_privacy_on():
            self.worker.stop()
            return
        if self.worker.running:
            return
        # A previous consumer exits on its own once its channel is closed.
        channel = self.worker.start(cancel)
        self._consumer = Thread(
            target=self._consume,
            args=(channel,),
            name="tokenlists-consumer",
            daemon=True,
        )
        self._consumer.start()

    def _consume(self, channel: NotificationChannel) -> None:
        while True:
            if channel.receive(timeout=_RECEIVE_TIMEOUT):
                with self._lock:
                    try:
                        self._rebuild()
                    except Exception as exc:  # noqa: BLE001
                        self.logger.error("snapshot_rebuild_failed", error=str(exc))
                        continue
                    self._notify.put(None)
            elif channel.closed:
                return


__all__ = ["TokensList"]
