"""
Pytest configuration and shared fixtures.

Key fixtures:
- store: InMemoryDocumentStore answering on its own worker threads
- loader: ConfigurationLoader bound to the in-memory store
- sample_configs: roles / users / actionGroups settings documents
- recorder: thread-safe outcome recorder for load_async tests

No external store is required; every test runs against the in-memory store
or an httpx.MockTransport.
"""

import sys
import threading
from pathlib import Path

import pytest

# Add src to path for imports
src_path = Path(__file__).parent.parent / 'src'
sys.path.insert(0, str(src_path))

from config_loader.clients.memory_client import InMemoryDocumentStore  # noqa: E402
from config_loader.loader import ConfigurationLoader  # noqa: E402


class OutcomeRecorder:
    """Collects outcomes delivered on the store's thread."""

    def __init__(self):
        self.outcomes = []
        self._condition = threading.Condition()

    def __call__(self, outcome) -> None:
        with self._condition:
            self.outcomes.append(outcome)
            self._condition.notify_all()

    def wait_for(self, count: int, timeout: float = 2.0) -> bool:
        with self._condition:
            return self._condition.wait_for(lambda: len(self.outcomes) >= count, timeout=timeout)


@pytest.fixture
def sample_configs() -> dict[str, dict]:
    """Representative configuration documents."""
    return {
        'roles': {
            'sg_all_access': {
                'cluster': ['UNLIMITED'],
                'indices': {'*': {'*': ['UNLIMITED']}},
            },
            'sg_readonly': {'readonly': True},
        },
        'users': {
            'admin': {'hash': '$2a$12$VcCDgh2NDk07JGN0rjGbM', 'roles': ['admin']},
            'kibanaserver': {'hash': '$2a$12$4AcgAt3xwOWadA5s5blL6e'},
        },
        'actionGroups': {
            'READ': ['indices:data/read*', 'indices:admin/mappings/fields/get*'],
            'CRUD': ['READ', 'WRITE'],
        },
    }


@pytest.fixture
def store():
    """In-memory document store, shut down after the test."""
    store = InMemoryDocumentStore(index='searchguard', doc_type='sg')
    yield store
    store.close(wait=False)


@pytest.fixture
def populated_store(store, sample_configs):
    """Store holding every sample configuration."""
    for config_id, config in sample_configs.items():
        store.put_config(config_id, config)
    return store


@pytest.fixture
def loader(store) -> ConfigurationLoader:
    """Loader bound to the in-memory store."""
    return ConfigurationLoader(store, index='searchguard', doc_type='sg')


@pytest.fixture
def recorder() -> OutcomeRecorder:
    return OutcomeRecorder()
