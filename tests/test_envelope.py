"""
Tests for stored envelope encoding and parsing.

Tests cover:
- Decoding a well-formed envelope into nested settings
- Identifier mismatch is rejected without raising
- Empty, non-JSON, non-object and non-binary envelopes
- Malformed embedded settings documents
"""

import base64
import json

import pytest

from config_loader.envelope import decode_envelope, encode_envelope, parse_envelope
from config_loader.errors import EnvelopeDecodeError, EnvelopeValidationError


def _raw_envelope(field_name: str, inner: bytes) -> bytes:
    return json.dumps({field_name: base64.b64encode(inner).decode('ascii')}).encode('utf-8')


class TestEncodeEnvelope:
    """Test the stored envelope layout."""

    def test_single_field_named_after_identifier(self):
        raw = encode_envelope('roles', {'admin': {'readonly': False}})
        envelope = json.loads(raw)

        assert list(envelope) == ['roles']
        inner = json.loads(base64.b64decode(envelope['roles']))
        assert inner == {'admin': {'readonly': False}}

    def test_roundtrip_preserves_nested_values(self, sample_configs):
        config = sample_configs['roles']
        assert parse_envelope(encode_envelope('roles', config), 'roles') == config


class TestParseEnvelope:
    """Test the non-raising parser used by the loader."""

    def test_parses_valid_envelope(self):
        raw = _raw_envelope('users', b'{"admin": {"roles": ["admin"]}, "count": 1}')

        assert parse_envelope(raw, 'users') == {'admin': {'roles': ['admin']}, 'count': 1}

    def test_identifier_mismatch_returns_none(self):
        raw = encode_envelope('users', {'admin': {}})

        assert parse_envelope(raw, 'roles') is None

    @pytest.mark.parametrize('raw', [None, b''])
    def test_empty_content_returns_none(self, raw):
        assert parse_envelope(raw, 'roles') is None

    def test_invalid_json_returns_none(self):
        assert parse_envelope(b'{"roles": ', 'roles') is None

    def test_invalid_base64_returns_none(self):
        raw = json.dumps({'roles': 'not base64!!'}).encode('utf-8')
        assert parse_envelope(raw, 'roles') is None

    def test_embedded_document_not_json_returns_none(self):
        assert parse_envelope(_raw_envelope('roles', b'\xff\xfe garbage'), 'roles') is None

    def test_deeply_nested_document_returns_none(self):
        nested = (b'[' * 100000) + (b']' * 100000)

        assert parse_envelope(_raw_envelope('roles', nested), 'roles') is None


class TestDecodeEnvelope:
    """Test the strict decoder and its error types."""

    def test_mismatch_raises_validation_error(self):
        raw = encode_envelope('users', {})

        with pytest.raises(EnvelopeValidationError) as exc_info:
            decode_envelope(raw, 'roles')

        assert exc_info.value.context['field_name'] == 'users'
        assert exc_info.value.context['config_id'] == 'roles'

    def test_only_first_field_is_checked(self):
        envelope = {
            'roles': base64.b64encode(b'{"a": 1}').decode('ascii'),
            'extra': 'ignored',
        }
        raw = json.dumps(envelope).encode('utf-8')

        assert decode_envelope(raw, 'roles') == {'a': 1}

    def test_empty_object_raises_decode_error(self):
        with pytest.raises(EnvelopeDecodeError):
            decode_envelope(b'{}', 'roles')

    def test_array_envelope_raises_decode_error(self):
        with pytest.raises(EnvelopeDecodeError):
            decode_envelope(b'["roles"]', 'roles')

    def test_non_binary_value_raises_decode_error(self):
        with pytest.raises(EnvelopeDecodeError, match='binary blob'):
            decode_envelope(b'{"roles": {"admin": {}}}', 'roles')

    def test_embedded_array_raises_decode_error(self):
        with pytest.raises(EnvelopeDecodeError, match='JSON object'):
            decode_envelope(_raw_envelope('roles', b'[1, 2, 3]'), 'roles')
