"""
Tests for the errors module.
"""

from config_loader.errors import (
    ClientError,
    ConfigLoaderError,
    EnvelopeDecodeError,
    EnvelopeError,
    EnvelopeValidationError,
    LoadTimeoutError,
    StoreConnectionError,
    StoreError,
    StoreRequestError,
    wrap_store_error,
)


class TestErrorHierarchy:
    """Test error class hierarchy."""

    def test_base_error_with_context(self):
        error = ConfigLoaderError("Something went wrong", context={"index": "searchguard"})

        assert error.message == "Something went wrong"
        assert error.context == {"index": "searchguard"}
        assert "index" in str(error)

    def test_base_error_without_context(self):
        error = ConfigLoaderError("Simple error")

        assert error.context == {}
        assert str(error) == "Simple error"

    def test_error_inheritance(self):
        assert isinstance(StoreConnectionError("x"), StoreError)
        assert isinstance(StoreRequestError("x"), StoreError)
        assert isinstance(StoreError("x"), ClientError)
        assert isinstance(EnvelopeValidationError("x"), EnvelopeError)
        assert isinstance(EnvelopeDecodeError("x"), EnvelopeError)
        assert isinstance(LoadTimeoutError("x"), ConfigLoaderError)

    def test_timeout_exposes_diagnostics(self):
        error = LoadTimeoutError(
            "Timeout",
            context={"config_ids": ["roles", "users"], "index": "searchguard"},
        )

        assert error.config_ids == ["roles", "users"]
        assert error.index == "searchguard"


class TestWrapStoreError:
    """Test store error classification."""

    def test_connection_error(self):
        wrapped = wrap_store_error(ConnectionError("reset by peer"))

        assert isinstance(wrapped, StoreConnectionError)
        assert wrapped.context["error_type"] == "ConnectionError"

    def test_connect_in_message(self):
        assert isinstance(wrap_store_error(Exception("Unable to connect")), StoreConnectionError)

    def test_generic_error_keeps_context(self):
        wrapped = wrap_store_error(Exception("index_not_found"), context={"ids": ["roles"]})

        assert isinstance(wrapped, StoreRequestError)
        assert wrapped.context["ids"] == ["roles"]
        assert wrapped.context["original_error"] == "index_not_found"

    def test_store_error_passes_through(self):
        original = StoreRequestError("already typed")

        assert wrap_store_error(original) is original
