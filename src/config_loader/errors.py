"""
Custom exceptions and error handling for the configuration loader.

Provides:
- Typed exception hierarchy for different failure modes
- Error context preservation for debugging
- Classification of raw document-store transport errors
"""

from typing import Any


class ConfigLoaderError(Exception):
    """Base exception for all configuration loader errors."""

    def __init__(self, message: str, context: dict[str, Any] | None = None):
        super().__init__(message)
        self.message = message
        self.context = context or {}

    def __str__(self) -> str:
        if self.context:
            return f"{self.message} | context={self.context}"
        return self.message


# =============================================================================
# Client Errors
# =============================================================================


class ClientError(ConfigLoaderError):
    """Base class for client-related errors."""

    pass


class StoreError(ClientError):
    """Error from the document store (whole-batch failure)."""

    pass


class StoreConnectionError(StoreError):
    """Failed to reach the document store."""

    pass


class StoreRequestError(StoreError):
    """The document store rejected or failed the request."""

    pass


# =============================================================================
# Envelope Errors
# =============================================================================


class EnvelopeError(ConfigLoaderError):
    """Base class for stored envelope errors."""

    pass


class EnvelopeValidationError(EnvelopeError):
    """Envelope field name does not match the requested identifier."""

    pass


class EnvelopeDecodeError(EnvelopeError):
    """Envelope or embedded settings document could not be decoded."""

    pass


# =============================================================================
# Load Errors
# =============================================================================


class LoadTimeoutError(ConfigLoaderError):
    """Not every requested configuration arrived before the deadline."""

    @property
    def config_ids(self) -> list[str]:
        return list(self.context.get('config_ids', []))

    @property
    def index(self) -> str | None:
        return self.context.get('index')


# =============================================================================
# Error Handling Utilities
# =============================================================================


def wrap_store_error(exc: Exception, context: dict[str, Any] | None = None) -> StoreError:
    """
    Wrap a document store exception in our typed error hierarchy.

    Args:
        exc: The original exception
        context: Additional context for debugging

    Returns:
        Typed StoreError subclass
    """
    if isinstance(exc, StoreError):
        return exc

    error_str = str(exc).lower()
    ctx = context or {}
    ctx['original_error'] = str(exc)
    ctx['error_type'] = type(exc).__name__

    if isinstance(exc, ConnectionError) or 'connection' in error_str or 'connect' in error_str:
        return StoreConnectionError(
            f"Document store connection failed: {exc}",
            context=ctx,
        )
    return StoreRequestError(
        f"Document store request failed: {exc}",
        context=ctx,
    )
