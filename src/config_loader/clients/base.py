"""
Document store collaborator contract.

The loader never talks to a concrete store directly; anything that can run a
batched fetch and report back through two callbacks will do.
"""

from typing import Callable, Protocol

from ..models.store import MultiGetRequest, MultiGetResponse

ResponseHandler = Callable[[MultiGetResponse], None]
FailureHandler = Callable[[Exception], None]


class DocumentStoreClient(Protocol):
    """
    Long-lived, externally owned client for the configuration store.

    ``multi_get`` must return without waiting for the store. Exactly one of
    ``on_response`` / ``on_failure`` is later invoked, on a thread owned by
    the client.
    """

    def multi_get(
        self,
        request: MultiGetRequest,
        on_response: ResponseHandler,
        on_failure: FailureHandler,
    ) -> None: ...
