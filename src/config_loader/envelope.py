"""
Stored configuration envelope encoding and parsing.

Each configuration document is stored as a single-field JSON object whose
field name equals the configuration identifier. The field value is a binary
blob (base64 in JSON, as the document store renders binary values) holding a
self-contained JSON settings document:

    {"roles": "eyJhZG1pbiI6IHsicmVhZG9ubHkiOiB0cnVlfX0="}

parse_envelope() never raises: every problem is logged and reported as None
so one bad document cannot abort the rest of a batch.
"""

import base64
import io
import json
from collections.abc import Mapping
from typing import Any

from .errors import EnvelopeDecodeError, EnvelopeError, EnvelopeValidationError
from .logging import get_logger

logger = get_logger(__name__)


def encode_envelope(config_id: str, config: Mapping[str, Any]) -> bytes:
    """
    Build the stored form of a configuration document.

    Args:
        config_id: Identifier the document is stored under
        config: Settings mapping (nested objects and arrays permitted)

    Returns:
        UTF-8 JSON bytes of the single-field envelope
    """
    blob = json.dumps(dict(config), separators=(',', ':')).encode('utf-8')
    envelope = {config_id: base64.b64encode(blob).decode('ascii')}
    return json.dumps(envelope).encode('utf-8')


def decode_envelope(raw: bytes, config_id: str) -> dict[str, Any]:
    """
    Strictly decode one stored envelope.

    Raises:
        EnvelopeValidationError: Field name does not match ``config_id``
        EnvelopeDecodeError: Envelope or embedded document is malformed
    """
    if not raw:
        raise EnvelopeDecodeError(
            'Empty or null envelope', context={'config_id': config_id}
        )

    try:
        with io.BytesIO(raw) as stream:
            envelope = json.load(stream)
    except (ValueError, RecursionError) as e:
        raise EnvelopeDecodeError(
            f'Envelope is not valid JSON: {e}', context={'config_id': config_id}
        ) from e

    if not isinstance(envelope, dict) or not envelope:
        raise EnvelopeDecodeError(
            'Envelope must be a JSON object with one field',
            context={'config_id': config_id},
        )

    # Only the first field is significant
    field_name, blob = next(iter(envelope.items()))
    if field_name != config_id:
        raise EnvelopeValidationError(
            f'Envelope field {field_name!r} does not match {config_id!r}',
            context={'config_id': config_id, 'field_name': field_name},
        )

    if not isinstance(blob, str):
        raise EnvelopeDecodeError(
            f'Envelope value must be a binary blob, got {type(blob).__name__}',
            context={'config_id': config_id},
        )

    try:
        payload = base64.b64decode(blob, validate=True)
        with io.BytesIO(payload) as stream:
            config = json.load(stream)
    except (ValueError, RecursionError) as e:
        raise EnvelopeDecodeError(
            f'Embedded settings document is malformed: {e}',
            context={'config_id': config_id},
        ) from e

    if not isinstance(config, dict):
        raise EnvelopeDecodeError(
            'Embedded settings document must be a JSON object',
            context={'config_id': config_id, 'value_type': type(config).__name__},
        )

    return config


def parse_envelope(raw: bytes | None, config_id: str) -> dict[str, Any] | None:
    """
    Parse one stored envelope into a settings mapping.

    Args:
        raw: Raw stored document content
        config_id: Identifier the document was requested under

    Returns:
        The settings mapping, or None if the envelope is empty, mismatched
        or malformed
    """
    if not raw:
        logger.error('envelope.empty', config_id=config_id)
        return None

    try:
        return decode_envelope(raw, config_id)
    except EnvelopeValidationError as e:
        logger.error(
            'envelope.id_mismatch',
            config_id=config_id,
            field_name=e.context.get('field_name'),
        )
    except EnvelopeError as e:
        logger.error('envelope.parse_failed', config_id=config_id, error=e.message)
    return None
