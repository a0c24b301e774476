"""
Data models for the configuration loader.
"""

from .outcome import (
    BatchFailure,
    ConfigCallback,
    ItemFailure,
    NoData,
    Outcome,
    OutcomeCallback,
    Success,
    dispatch_outcome,
)
from .store import (
    DocumentRef,
    GetResult,
    ItemFailureDetail,
    MultiGetItemResponse,
    MultiGetRequest,
    MultiGetResponse,
)

__all__ = [
    'BatchFailure',
    'ConfigCallback',
    'ItemFailure',
    'NoData',
    'Outcome',
    'OutcomeCallback',
    'Success',
    'dispatch_outcome',
    'DocumentRef',
    'GetResult',
    'ItemFailureDetail',
    'MultiGetItemResponse',
    'MultiGetRequest',
    'MultiGetResponse',
]
