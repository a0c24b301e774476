"""
Configuration Loader

Fetches batches of configuration documents from a multi-document store in
one round trip, reports per-document outcomes through a callback, and
offers a blocking, timeout-bounded load that returns identifier -> config.
"""

__version__ = '0.1.0'

# Re-export key classes for convenience
from .loader import ConfigurationLoader, TimeUnit
from .envelope import decode_envelope, encode_envelope, parse_envelope
from .latch import CountDownLatch
from .clients import DocumentStoreClient, HttpDocumentStore, InMemoryDocumentStore
from .models import (
    BatchFailure,
    ConfigCallback,
    ItemFailure,
    NoData,
    Outcome,
    Success,
)
from .logging import (
    configure_logging,
    get_logger,
    logging_context,
    LoadTimer,
)
from .errors import (
    ConfigLoaderError,
    StoreError,
    EnvelopeError,
    EnvelopeValidationError,
    EnvelopeDecodeError,
    LoadTimeoutError,
)

__all__ = [
    # Version
    '__version__',
    # Loader
    'ConfigurationLoader',
    'TimeUnit',
    'CountDownLatch',
    # Envelope
    'decode_envelope',
    'encode_envelope',
    'parse_envelope',
    # Store clients
    'DocumentStoreClient',
    'HttpDocumentStore',
    'InMemoryDocumentStore',
    # Outcomes
    'BatchFailure',
    'ConfigCallback',
    'ItemFailure',
    'NoData',
    'Outcome',
    'Success',
    # Logging
    'configure_logging',
    'get_logger',
    'logging_context',
    'LoadTimer',
    # Errors
    'ConfigLoaderError',
    'StoreError',
    'EnvelopeError',
    'EnvelopeValidationError',
    'EnvelopeDecodeError',
    'LoadTimeoutError',
]
