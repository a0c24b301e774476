"""
Outcome variants reported by the configuration loader.

Every requested identifier produces at most one outcome on the batch success
path; a whole-batch failure produces a single BatchFailure and nothing else.
Consumers either accept a plain ``Callable[[Outcome], None]`` or subclass
ConfigCallback and override the hooks they care about.
"""

from dataclasses import dataclass
from typing import Any, Callable, Union

from .store import ItemFailureDetail


@dataclass(frozen=True)
class Success:
    """Document existed, had content and parsed into a configuration."""

    config_id: str
    config: dict[str, Any]


@dataclass(frozen=True)
class NoData:
    """Document did not exist in the store, or existed with empty content."""

    config_id: str


@dataclass(frozen=True)
class ItemFailure:
    """
    The store failed to retrieve one item of an otherwise successful batch.

    ``failure`` is None when the store returned no item at all for a slot.
    """

    failure: ItemFailureDetail | None

    @property
    def config_id(self) -> str | None:
        return self.failure.id if self.failure else None

    @property
    def message(self) -> str | None:
        return self.failure.message if self.failure else None


@dataclass(frozen=True)
class BatchFailure:
    """The whole batched request failed; no per-item outcomes follow."""

    error: BaseException


Outcome = Union[Success, NoData, ItemFailure, BatchFailure]

OutcomeCallback = Callable[[Outcome], None]


class ConfigCallback:
    """
    Outcome consumer with one hook per outcome variant.

    Hooks run on the store's I/O thread, not the caller's, and must not
    block. Unoverridden hooks ignore their outcome.
    """

    def success(self, config_id: str, config: dict[str, Any]) -> None:
        pass

    def no_data(self, config_id: str) -> None:
        pass

    def single_failure(self, failure: ItemFailureDetail | None) -> None:
        pass

    def failure(self, error: BaseException) -> None:
        pass

    def __call__(self, outcome: Outcome) -> None:
        dispatch_outcome(self, outcome)


def dispatch_outcome(handler: ConfigCallback, outcome: Outcome) -> None:
    """Route an outcome to the matching hook of ``handler``."""
    if isinstance(outcome, Success):
        handler.success(outcome.config_id, outcome.config)
    elif isinstance(outcome, NoData):
        handler.no_data(outcome.config_id)
    elif isinstance(outcome, ItemFailure):
        handler.single_failure(outcome.failure)
    elif isinstance(outcome, BatchFailure):
        handler.failure(outcome.error)
    else:
        raise TypeError(f'Unknown outcome type: {type(outcome).__name__}')
