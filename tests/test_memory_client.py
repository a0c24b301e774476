"""
Tests for the in-memory document store.
"""

from config_loader.envelope import parse_envelope
from config_loader.models.store import MultiGetRequest


def _request(*ids):
    request = MultiGetRequest(refresh=True, realtime=True)
    for config_id in ids:
        request.add('searchguard', 'sg', config_id)
    return request


class TestInMemoryDocumentStore:
    def _fetch(self, store, recorder, *ids):
        store.multi_get(_request(*ids), recorder, recorder)
        assert recorder.wait_for(1)
        return recorder.outcomes[0]

    def test_returns_stored_envelopes_in_request_order(self, populated_store, recorder, sample_configs):
        response = self._fetch(populated_store, recorder, 'users', 'roles')

        assert [item.id for item in response.items] == ['users', 'roles']
        users = response.items[0].response
        assert users.found is True
        assert parse_envelope(users.source, 'users') == sample_configs['users']

    def test_missing_document_not_found(self, store, recorder):
        response = self._fetch(store, recorder, 'roles')

        result = response.items[0].response
        assert result.found is False
        assert result.is_source_empty is True

    def test_deleted_document_not_found(self, populated_store, recorder):
        populated_store.delete_document('roles')

        response = self._fetch(populated_store, recorder, 'roles')

        assert response.items[0].response.found is False

    def test_item_failure_injection(self, populated_store, recorder):
        populated_store.fail_item('roles', 'primary shard is not active')

        response = self._fetch(populated_store, recorder, 'roles', 'users')

        assert response.items[0].is_failed
        assert response.items[0].failure.message == 'primary shard is not active'
        assert not response.items[1].is_failed

    def test_batch_failure_applies_to_next_fetch_only(self, populated_store, recorder):
        error = ConnectionError('node left the cluster')
        populated_store.fail_next_batch(error)

        assert self._fetch(populated_store, recorder, 'roles') is error

        recorder.outcomes.clear()
        response = self._fetch(populated_store, recorder, 'roles')
        assert response.items[0].response.found is True

    def test_records_requests(self, store, recorder):
        self._fetch(store, recorder, 'roles')

        assert len(store.requests) == 1
        assert store.requests[0].ids == ['roles']
