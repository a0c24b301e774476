"""
In-process document store.

Holds raw documents in memory and answers batched fetches on its own worker
threads, so callbacks arrive off the caller's thread exactly as they would
from a networked store. Used for tests, local tooling and embedding.
"""

import threading
import time
from concurrent.futures import ThreadPoolExecutor
from typing import Any, Mapping

from ..config import get_settings
from ..envelope import encode_envelope
from ..logging import get_logger
from ..models.store import (
    GetResult,
    ItemFailureDetail,
    MultiGetItemResponse,
    MultiGetRequest,
    MultiGetResponse,
)
from .base import FailureHandler, ResponseHandler

logger = get_logger(__name__)


class InMemoryDocumentStore:
    """
    Thread-safe in-memory implementation of DocumentStoreClient.

    Failure injection:
    - fail_item(): the next fetches report a per-item failure for that id
    - fail_next_batch(): the next fetch fails as a whole
    - response_delay: seconds to wait before answering each fetch
    """

    def __init__(
        self,
        index: str | None = None,
        doc_type: str | None = None,
        max_workers: int = 2,
        response_delay: float = 0.0,
    ):
        settings = get_settings()
        self.index = index or settings.CONFIG_INDEX_NAME
        self.doc_type = doc_type or settings.CONFIG_DOC_TYPE
        self.response_delay = response_delay

        self._lock = threading.Lock()
        self._documents: dict[tuple[str, str, str], bytes] = {}
        self._item_failures: dict[str, str] = {}
        self._batch_failure: Exception | None = None
        self._executor = ThreadPoolExecutor(
            max_workers=max_workers, thread_name_prefix='memory-store'
        )

        self.requests: list[MultiGetRequest] = []

    # -------------------------------------------------------------------------
    # Writes
    # -------------------------------------------------------------------------

    def put_document(self, config_id: str, source: bytes) -> None:
        """Store raw document content under ``config_id``."""
        with self._lock:
            self._documents[(self.index, self.doc_type, config_id)] = source

    def put_config(self, config_id: str, config: Mapping[str, Any]) -> None:
        """Store a settings mapping wrapped in its envelope."""
        self.put_document(config_id, encode_envelope(config_id, config))

    def delete_document(self, config_id: str) -> None:
        with self._lock:
            self._documents.pop((self.index, self.doc_type, config_id), None)

    def fail_item(self, config_id: str, message: str = 'shard not available') -> None:
        with self._lock:
            self._item_failures[config_id] = message

    def fail_next_batch(self, error: Exception) -> None:
        with self._lock:
            self._batch_failure = error

    # -------------------------------------------------------------------------
    # DocumentStoreClient
    # -------------------------------------------------------------------------

    def multi_get(
        self,
        request: MultiGetRequest,
        on_response: ResponseHandler,
        on_failure: FailureHandler,
    ) -> None:
        with self._lock:
            self.requests.append(request)
            batch_failure, self._batch_failure = self._batch_failure, None

        self._executor.submit(self._answer, request, batch_failure, on_response, on_failure)

    def _answer(
        self,
        request: MultiGetRequest,
        batch_failure: Exception | None,
        on_response: ResponseHandler,
        on_failure: FailureHandler,
    ) -> None:
        if self.response_delay:
            time.sleep(self.response_delay)

        try:
            if batch_failure is not None:
                on_failure(batch_failure)
            else:
                on_response(self._build_response(request))
        except Exception as e:
            logger.error(
                'memory_store.handler_failed',
                error=str(e),
                error_type=type(e).__name__,
                ids=request.ids,
            )

    def _build_response(self, request: MultiGetRequest) -> MultiGetResponse:
        items: list[MultiGetItemResponse | None] = []
        with self._lock:
            for ref in request.items:
                message = self._item_failures.get(ref.id)
                if message is not None:
                    items.append(
                        MultiGetItemResponse(
                            failure=ItemFailureDetail(
                                index=ref.index,
                                doc_type=ref.doc_type,
                                id=ref.id,
                                message=message,
                            )
                        )
                    )
                    continue

                source = self._documents.get((ref.index, ref.doc_type, ref.id))
                items.append(
                    MultiGetItemResponse(
                        response=GetResult(
                            index=ref.index,
                            doc_type=ref.doc_type,
                            id=ref.id,
                            found=source is not None,
                            source=source,
                        )
                    )
                )
        return MultiGetResponse(items=items)

    # -------------------------------------------------------------------------
    # Lifecycle
    # -------------------------------------------------------------------------

    def close(self, wait: bool = True) -> None:
        """Stop the worker threads."""
        self._executor.shutdown(wait=wait)

    def __enter__(self) -> 'InMemoryDocumentStore':
        return self

    def __exit__(self, *exc_info) -> None:
        self.close()
