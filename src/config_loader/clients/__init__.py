"""
Document store clients for the configuration loader.
"""

from .base import DocumentStoreClient
from .http_client import HttpDocumentStore
from .memory_client import InMemoryDocumentStore

__all__ = [
    'DocumentStoreClient',
    'HttpDocumentStore',
    'InMemoryDocumentStore',
]
