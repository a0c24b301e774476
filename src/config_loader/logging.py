"""
Structured logging configuration for the configuration loader.

Uses structlog for structured, context-aware logging with:
- JSON output for production
- Pretty console output for development
- Load/wait timing via LoadTimer
- load_id and config_index propagation through context variables
"""

import logging
import sys
import time
from contextlib import contextmanager
from contextvars import ContextVar
from typing import Any, Generator

import structlog
from structlog.types import Processor

from .config import get_settings

# Context variables for load-scoped data
_load_id: ContextVar[str | None] = ContextVar('load_id', default=None)
_config_index: ContextVar[str | None] = ContextVar('config_index', default=None)


def get_load_id() -> str | None:
    """Get the current load ID from context."""
    return _load_id.get()


def get_config_index() -> str | None:
    """Get the current configuration index from context."""
    return _config_index.get()


def bound_context() -> dict[str, str]:
    """
    Snapshot the load context as logger bindings.

    Outcome callbacks run on the store's threads, where these context
    variables are unset; bind the snapshot to carry them across.
    """
    context = {}
    load_id = get_load_id()
    config_index = get_config_index()
    if load_id:
        context['load_id'] = load_id
    if config_index:
        context['config_index'] = config_index
    return context


def add_context_info(
    logger: structlog.types.WrappedLogger,
    method_name: str,
    event_dict: dict[str, Any],
) -> dict[str, Any]:
    """Processor that adds context variables to log entries."""
    for key, value in bound_context().items():
        event_dict.setdefault(key, value)
    return event_dict


def configure_logging(
    json_output: bool = False,
    log_level: str | None = None,
) -> None:
    """
    Configure structlog for the application.

    Args:
        json_output: If True, output JSON logs (for production).
                    If False, output pretty console logs (for development).
        log_level: Override log level (defaults to settings LOG_LEVEL)
    """
    level = log_level or get_settings().LOG_LEVEL
    level_num = getattr(logging, level.upper(), logging.INFO)

    logging.basicConfig(
        format='%(message)s',
        stream=sys.stdout,
        level=level_num,
    )

    shared_processors: list[Processor] = [
        structlog.contextvars.merge_contextvars,
        add_context_info,
        structlog.processors.add_log_level,
        structlog.processors.TimeStamper(fmt='iso'),
        structlog.processors.StackInfoRenderer(),
    ]

    if json_output:
        processors: list[Processor] = [
            *shared_processors,
            structlog.processors.format_exc_info,
            structlog.processors.JSONRenderer(),
        ]
    else:
        processors = [
            *shared_processors,
            structlog.dev.ConsoleRenderer(colors=True),
        ]

    structlog.configure(
        processors=processors,
        wrapper_class=structlog.make_filtering_bound_logger(level_num),
        context_class=dict,
        logger_factory=structlog.PrintLoggerFactory(),
        cache_logger_on_first_use=True,
    )


def get_logger(name: str | None = None) -> structlog.stdlib.BoundLogger:
    """
    Get a structured logger instance.

    Args:
        name: Logger name (typically __name__)

    Returns:
        Configured structlog logger
    """
    return structlog.get_logger(name)


@contextmanager
def logging_context(
    load_id: str | None = None,
    config_index: str | None = None,
) -> Generator[None, None, None]:
    """
    Context manager for setting logging context variables.

    Only the calling thread sees the values; see bound_context() for
    carrying them onto the store's threads.

    Usage:
        with logging_context(load_id="abc123", config_index="searchguard"):
            logger.info("config_loader.load_started")
    """
    old_load_id = _load_id.get()
    old_index = _config_index.get()

    try:
        if load_id is not None:
            _load_id.set(load_id)
        if config_index is not None:
            _config_index.set(config_index)
        yield
    finally:
        _load_id.set(old_load_id)
        _config_index.set(old_index)


class LoadTimer:
    """
    Timer for tracking the phases of a blocking load.

    Usage:
        timer = LoadTimer()
        with timer.stage("dispatch"):
            loader.load_async(...)
        with timer.stage("wait"):
            latch.wait(timeout)
        logger.info("config_loader.load_complete", **timer.summary())
    """

    def __init__(self):
        self.stages: dict[str, float] = {}
        self.start_time: float = time.perf_counter()
        self._stage_start: float | None = None

    @contextmanager
    def stage(self, name: str) -> Generator[None, None, None]:
        """Time one phase of the load."""
        self._stage_start = time.perf_counter()
        try:
            yield
        finally:
            if self._stage_start is not None:
                elapsed = time.perf_counter() - self._stage_start
                self.stages[name] = elapsed * 1000  # Convert to ms
            self._stage_start = None

    def record(self, name: str, duration_ms: float) -> None:
        """Manually record a stage duration."""
        self.stages[name] = duration_ms

    @property
    def total_ms(self) -> float:
        """Total elapsed time since timer creation in milliseconds."""
        return (time.perf_counter() - self.start_time) * 1000

    def summary(self) -> dict[str, Any]:
        """Get timing summary as a dictionary."""
        return {
            'total_ms': round(self.total_ms, 2),
            'stages': {k: round(v, 2) for k, v in self.stages.items()},
        }


# Initialize logging on module import (development mode by default)
# Production deployments should call configure_logging(json_output=True)
configure_logging(json_output=False)
