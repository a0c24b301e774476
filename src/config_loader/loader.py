"""
Batched configuration loader.

Fetches a batch of configuration documents in one round trip and reports
one outcome per document through a callback (load_async), or blocks until
every document has loaded successfully (load).

Flow:
1. Build one multi-get request for all identifiers (fresh, uncached reads)
2. Hand it to the store client and return immediately
3. On response, classify each item: failure, no data, or parsed config
4. On whole-batch failure, report a single BatchFailure

The blocking bridge only advances its latch on successful loads, so a
missing or failed document makes load() time out rather than return a
partial mapping.
"""

import asyncio
import threading
from datetime import timedelta
from enum import Enum
from typing import Any, Iterable

import structlog

from .clients.base import DocumentStoreClient
from .config import LoaderSettings, get_settings
from .envelope import parse_envelope
from .errors import LoadTimeoutError
from .latch import CountDownLatch
from .logging import LoadTimer, bound_context, get_logger, logging_context
from .models.outcome import (
    BatchFailure,
    ConfigCallback,
    ItemFailure,
    NoData,
    Outcome,
    OutcomeCallback,
    Success,
)
from .models.store import ItemFailureDetail, MultiGetRequest, MultiGetResponse
from .utils import uuid7

logger = get_logger(__name__)


class TimeUnit(str, Enum):
    """Unit of a numeric timeout passed to ConfigurationLoader.load()."""

    MILLISECONDS = 'ms'
    SECONDS = 's'
    MINUTES = 'm'

    def to_seconds(self, value: float) -> float:
        if self is TimeUnit.MILLISECONDS:
            return value / 1000
        if self is TimeUnit.MINUTES:
            return value * 60
        return float(value)


# =============================================================================
# Blocking bridge collector
# =============================================================================


class _LoadCollector(ConfigCallback):
    """
    Accumulates successful loads for one blocking call.

    Runs on the store's thread. Only success counts the latch down; the
    other outcomes are logged and left for the timeout to surface.
    """

    def __init__(self, config_ids: list[str]):
        self.config_ids = config_ids
        self.latch = CountDownLatch(len(config_ids))
        self._lock = threading.Lock()
        self._results: dict[str, dict[str, Any]] = {}
        self._log = logger.bind(**bound_context(), ids=config_ids)

    def success(self, config_id: str, config: dict[str, Any]) -> None:
        if self.latch.count <= 0:
            self._log.error('config_loader.latch_already_released', config_id=config_id)

        with self._lock:
            self._results[config_id] = config
        remaining = self.latch.count_down()
        self._log.debug('config_loader.config_received', config_id=config_id, remaining=remaining)

    def no_data(self, config_id: str) -> None:
        self._log.warning('config_loader.no_data', config_id=config_id)

    def single_failure(self, failure: ItemFailureDetail | None) -> None:
        self._log.error(
            'config_loader.item_failed',
            config_id=failure.id if failure else None,
            error=failure.message if failure else None,
        )

    def failure(self, error: BaseException) -> None:
        self._log.error(
            'config_loader.batch_failed',
            error=str(error),
            error_type=type(error).__name__,
        )

    def snapshot(self) -> dict[str, dict[str, Any]]:
        with self._lock:
            return dict(self._results)


# =============================================================================
# ConfigurationLoader
# =============================================================================


class ConfigurationLoader:
    """
    Loads configuration documents from the configuration index.

    The store client is owned by the caller and shared; every load creates
    its own latch and accumulator, so concurrent loads do not interact.
    """

    def __init__(
        self,
        client: DocumentStoreClient,
        settings: LoaderSettings | None = None,
        index: str | None = None,
        doc_type: str | None = None,
    ):
        """
        Initialize with a document store client.

        Args:
            client: Store client that performs the batched fetch
            settings: Loader settings (defaults to get_settings())
            index: Configuration index name (defaults to CONFIG_INDEX_NAME)
            doc_type: Document type tag (defaults to CONFIG_DOC_TYPE)
        """
        self.client = client
        self.settings = settings or get_settings()
        self.index = index or self.settings.CONFIG_INDEX_NAME
        self.doc_type = doc_type or self.settings.CONFIG_DOC_TYPE
        logger.debug('config_loader.initialized', index=self.index, doc_type=self.doc_type)

    # -------------------------------------------------------------------------
    # Async dispatch
    # -------------------------------------------------------------------------

    def load_async(
        self,
        config_ids: Iterable[str] | None,
        callback: OutcomeCallback,
    ) -> None:
        """
        Fetch the given configurations and report each outcome to ``callback``.

        Returns immediately; outcomes are delivered on the store's thread.
        An empty or missing identifier list is a no-op.

        Args:
            config_ids: Configuration identifiers to fetch
            callback: ConfigCallback or any callable taking an Outcome
        """
        ids = list(config_ids or [])
        if not ids:
            logger.warning('config_loader.no_ids_requested', index=self.index)
            return

        request = MultiGetRequest(refresh=True, realtime=True)
        for config_id in ids:
            request.add(self.index, self.doc_type, config_id)

        log = logger.bind(**{**bound_context(), 'config_index': self.index}, ids=ids)

        def on_response(response: MultiGetResponse) -> None:
            self._demultiplex(response, callback, log)

        def on_failure(error: Exception) -> None:
            self._emit(callback, BatchFailure(error=error), log)

        self.client.multi_get(request, on_response, on_failure)

    def _demultiplex(
        self,
        response: MultiGetResponse,
        callback: OutcomeCallback,
        log: structlog.stdlib.BoundLogger,
    ) -> None:
        for item in response.items:
            if item is None or item.is_failed:
                self._emit(callback, ItemFailure(failure=item.failure if item else None), log)
                continue

            doc = item.response
            if not doc.found or doc.is_source_empty:
                self._emit(callback, NoData(config_id=doc.id), log)
                continue

            try:
                config = parse_envelope(doc.source, doc.id)
            except Exception as e:
                log.error(
                    'config_loader.parse_crashed',
                    config_id=doc.id,
                    error=str(e),
                    error_type=type(e).__name__,
                )
                continue
            if config is None:
                log.error('config_loader.parse_failed', config_id=doc.id)
                continue

            self._emit(callback, Success(config_id=doc.id, config=config), log)

    @staticmethod
    def _emit(
        callback: OutcomeCallback,
        outcome: Outcome,
        log: structlog.stdlib.BoundLogger,
    ) -> None:
        try:
            callback(outcome)
        except Exception as e:
            log.error(
                'config_loader.callback_failed',
                outcome=type(outcome).__name__,
                error=str(e),
                error_type=type(e).__name__,
            )

    # -------------------------------------------------------------------------
    # Blocking bridge
    # -------------------------------------------------------------------------

    def load(
        self,
        config_ids: Iterable[str] | None,
        timeout: float | timedelta | None = None,
        unit: TimeUnit | str | None = None,
    ) -> dict[str, dict[str, Any]]:
        """
        Fetch the given configurations and wait until all have loaded.

        Args:
            config_ids: Configuration identifiers to fetch
            timeout: Seconds (or a timedelta) to wait; defaults to
                     LOAD_TIMEOUT_SECONDS
            unit: Unit of a numeric ``timeout``, a TimeUnit or its value
                  ('ms', 's', 'm'); default seconds. Not allowed with a timedelta

        Returns:
            Mapping of identifier to parsed configuration

        Raises:
            LoadTimeoutError: Not every configuration loaded in time. Any
                              partial results are discarded.
            ValueError: ``unit`` is unknown or combined with a timedelta
        """
        ids = list(config_ids or [])
        if not ids:
            logger.warning('config_loader.no_ids_requested', index=self.index)
            return {}

        timeout_seconds = self._resolve_timeout(timeout, unit)
        load_id = str(uuid7())

        with logging_context(load_id=load_id, config_index=self.index):
            timer = LoadTimer()
            collector = _LoadCollector(ids)

            logger.info('config_loader.load_started', ids=ids, timeout_seconds=timeout_seconds)

            with timer.stage('dispatch'):
                self.load_async(ids, collector)
            with timer.stage('wait'):
                completed = collector.latch.wait(timeout_seconds)

            if not completed:
                logger.error(
                    'config_loader.load_timeout',
                    ids=ids,
                    pending=collector.latch.count,
                    **timer.summary(),
                )
                raise LoadTimeoutError(
                    f'Timeout after {timeout_seconds}s while retrieving configuration '
                    f'for {ids} (index={self.index})',
                    context={
                        'config_ids': ids,
                        'index': self.index,
                        'timeout_seconds': timeout_seconds,
                    },
                )

            result = collector.snapshot()
            logger.info('config_loader.load_complete', loaded=sorted(result), **timer.summary())
            return result

    async def aload(
        self,
        config_ids: Iterable[str] | None,
        timeout: float | timedelta | None = None,
        unit: TimeUnit | str | None = None,
    ) -> dict[str, dict[str, Any]]:
        """Awaitable load(); the wait runs in a worker thread."""
        return await asyncio.to_thread(self.load, config_ids, timeout, unit)

    def _resolve_timeout(
        self,
        timeout: float | timedelta | None,
        unit: TimeUnit | str | None,
    ) -> float:
        if isinstance(timeout, timedelta):
            if unit is not None:
                raise ValueError('unit cannot be combined with a timedelta timeout')
            return timeout.total_seconds()
        if timeout is None:
            return self.settings.LOAD_TIMEOUT_SECONDS
        return TimeUnit(unit or TimeUnit.SECONDS).to_seconds(timeout)
