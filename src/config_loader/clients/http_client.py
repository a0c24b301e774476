"""
HTTP document store client.

Speaks the Elasticsearch-compatible REST multi-get API:

    POST /_mget?refresh=true&realtime=true
    {"docs": [{"_index": "searchguard", "_type": "sg", "_id": "roles"}, ...]}

The blocking HTTP call runs on a worker thread so multi_get() returns
immediately and callbacks are delivered off the caller's thread.
"""

import json
from concurrent.futures import ThreadPoolExecutor
from typing import Any, Mapping

import httpx

from ..config import get_settings
from ..envelope import encode_envelope
from ..errors import StoreConnectionError, StoreError, StoreRequestError, wrap_store_error
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


def _flag(value: bool) -> str:
    return 'true' if value else 'false'


def _failure_message(error: Any) -> str:
    """Render a per-document ``error`` entry, which may be a string or an object."""
    if isinstance(error, dict):
        reason = error.get('reason') or ''
        error_type = error.get('type')
        return f'{error_type}: {reason}' if error_type else reason
    return str(error)


def parse_mget_body(body: Any) -> MultiGetResponse:
    """
    Convert a decoded ``_mget`` response body into a MultiGetResponse.

    Documents are re-serialized to bytes so the envelope parser sees the
    stored content exactly as the store returned it.
    """
    if not isinstance(body, Mapping):
        raise StoreRequestError(
            f'Multi-get body must be a JSON object, got {type(body).__name__}'
        )

    docs = body.get('docs', [])
    if not isinstance(docs, list):
        raise StoreRequestError(
            f'Multi-get docs must be a JSON array, got {type(docs).__name__}'
        )

    items: list[MultiGetItemResponse | None] = []
    for position, doc in enumerate(docs):
        if doc is None:
            items.append(None)
            continue
        if not isinstance(doc, Mapping):
            raise StoreRequestError(
                f'Multi-get doc must be a JSON object, got {type(doc).__name__}',
                context={'position': position},
            )

        index = doc.get('_index')
        doc_type = doc.get('_type')
        doc_id = doc.get('_id')

        if 'error' in doc:
            items.append(
                MultiGetItemResponse(
                    failure=ItemFailureDetail(
                        index=index,
                        doc_type=doc_type,
                        id=doc_id,
                        message=_failure_message(doc['error']),
                    )
                )
            )
            continue

        source = doc.get('_source')
        items.append(
            MultiGetItemResponse(
                response=GetResult(
                    index=index or '',
                    doc_type=doc_type or '',
                    id=doc_id or '',
                    found=bool(doc.get('found', False)),
                    source=json.dumps(source).encode('utf-8') if source else None,
                )
            )
        )
    return MultiGetResponse(items=items)


class HttpDocumentStore:
    """
    DocumentStoreClient backed by a REST document store.

    Configuration via settings (``CONFIG_LOADER_`` environment variables):
    - STORE_URL: Base URL of the store (default http://localhost:9200)
    - HTTP_TIMEOUT_SECONDS: Per-request timeout
    - CONFIG_INDEX_NAME / CONFIG_DOC_TYPE: Used by index_config()
    """

    def __init__(
        self,
        base_url: str | None = None,
        timeout: float | None = None,
        index: str | None = None,
        doc_type: str | None = None,
        headers: Mapping[str, str] | None = None,
        transport: httpx.BaseTransport | None = None,
        max_workers: int = 4,
    ):
        """
        Initialize the HTTP store client.

        Args:
            base_url: Store URL (defaults to STORE_URL setting)
            timeout: Request timeout in seconds (defaults to HTTP_TIMEOUT_SECONDS)
            index: Index used by index_config (defaults to CONFIG_INDEX_NAME)
            doc_type: Type tag used by index_config (defaults to CONFIG_DOC_TYPE)
            headers: Extra headers sent with every request
            transport: Custom httpx transport (tests use httpx.MockTransport)
            max_workers: Worker threads delivering batched fetches
        """
        settings = get_settings()
        self.base_url = (base_url or settings.STORE_URL).rstrip('/')
        self.index = index or settings.CONFIG_INDEX_NAME
        self.doc_type = doc_type or settings.CONFIG_DOC_TYPE

        self._client = httpx.Client(
            base_url=self.base_url,
            timeout=timeout or settings.HTTP_TIMEOUT_SECONDS,
            headers=dict(headers or {}),
            transport=transport,
        )
        self._executor = ThreadPoolExecutor(
            max_workers=max_workers, thread_name_prefix='http-store'
        )

    # -------------------------------------------------------------------------
    # DocumentStoreClient
    # -------------------------------------------------------------------------

    def multi_get(
        self,
        request: MultiGetRequest,
        on_response: ResponseHandler,
        on_failure: FailureHandler,
    ) -> None:
        self._executor.submit(self._run_multi_get, request, on_response, on_failure)

    def fetch(self, request: MultiGetRequest) -> MultiGetResponse:
        """
        Run a batched fetch synchronously.

        Raises:
            StoreConnectionError: Store unreachable or timed out
            StoreRequestError: Store answered with a non-2xx status or bad body
        """
        body = {
            'docs': [
                {'_index': ref.index, '_type': ref.doc_type, '_id': ref.id}
                for ref in request.items
            ]
        }
        params = {'refresh': _flag(request.refresh), 'realtime': _flag(request.realtime)}
        context = {'ids': request.ids}

        try:
            response = self._client.post('/_mget', params=params, json=body)
            response.raise_for_status()
            return parse_mget_body(response.json())
        except httpx.HTTPStatusError as e:
            raise StoreRequestError(
                f'Multi-get failed with HTTP {e.response.status_code}',
                context={**context, 'status_code': e.response.status_code},
            ) from e
        except (httpx.TimeoutException, httpx.ConnectError) as e:
            raise StoreConnectionError(
                f'Document store unreachable: {type(e).__name__}: {e}',
                context=context,
            ) from e
        except (httpx.HTTPError, ValueError) as e:
            raise wrap_store_error(e, context=context) from e

    def _run_multi_get(
        self,
        request: MultiGetRequest,
        on_response: ResponseHandler,
        on_failure: FailureHandler,
    ) -> None:
        try:
            response = self.fetch(request)
        except Exception as e:
            error = e if isinstance(e, StoreError) else wrap_store_error(e, context={'ids': request.ids})
            logger.error(
                'http_store.multi_get_failed',
                error=str(error),
                error_type=type(error).__name__,
                ids=request.ids,
            )
            on_failure(error)
            return

        try:
            on_response(response)
        except Exception as e:
            logger.error(
                'http_store.handler_failed',
                error=str(e),
                error_type=type(e).__name__,
                ids=request.ids,
            )

    # -------------------------------------------------------------------------
    # Writes
    # -------------------------------------------------------------------------

    def index_config(self, config_id: str, config: Mapping[str, Any]) -> None:
        """
        Store a settings mapping wrapped in its envelope, refreshing the index.

        Raises:
            StoreError: The write failed
        """
        path = f'/{self.index}/{self.doc_type}/{config_id}'
        try:
            response = self._client.put(
                path,
                params={'refresh': 'true'},
                content=encode_envelope(config_id, config),
                headers={'Content-Type': 'application/json'},
            )
            response.raise_for_status()
        except httpx.HTTPStatusError as e:
            raise StoreRequestError(
                f'Indexing {config_id!r} failed with HTTP {e.response.status_code}',
                context={'config_id': config_id, 'status_code': e.response.status_code},
            ) from e
        except httpx.HTTPError as e:
            raise wrap_store_error(e, context={'config_id': config_id}) from e

        logger.info('http_store.config_indexed', config_id=config_id, index=self.index)

    # -------------------------------------------------------------------------
    # Lifecycle
    # -------------------------------------------------------------------------

    def close(self) -> None:
        """Stop the worker threads and close the HTTP connection pool."""
        self._executor.shutdown(wait=True)
        self._client.close()

    def __enter__(self) -> 'HttpDocumentStore':
        return self

    def __exit__(self, *exc_info) -> None:
        self.close()
