"""
Tests for the uuid7() helper used for load IDs.

Validates that uuid7() returns a stdlib uuid.UUID with correct UUIDv7 properties:
version 7, RFC 4122 variant bits and time-sortable ordering.
"""

import time
from uuid import UUID

from config_loader.utils import uuid7


class TestUuid7Basic:
    """Core properties that must always hold."""

    def test_returns_stdlib_uuid(self):
        """uuid7() must return a stdlib uuid.UUID, not fastuuid.UUID."""
        result = uuid7()
        assert type(result) is UUID

    def test_version_is_7(self):
        assert uuid7().version == 7

    def test_rfc4122_variant_bits(self):
        """RFC 4122 variant: bits 62-63 of the 128-bit value must be 0b10."""
        variant_bits = (uuid7().int >> 62) & 0b11
        assert variant_bits == 0b10


class TestUuid7Ordering:
    def test_ordering_after_sleep(self):
        """UUIDs generated 3ms apart must be strictly ordered."""
        a = uuid7()
        time.sleep(0.003)
        b = uuid7()

        assert b.int > a.int
        assert (b.int >> 80) > (a.int >> 80)
