"""
Tests for the exception hierarchy (exceptions.py).
"""

from __future__ import annotations

import pytest

from completekit.exceptions import (
    CompleteKitError,
    CompletionTimeout,
    ConfigurationError,
    ParseError,
    ProviderError,
    StreamUnavailable,
    TransportError,
)


class TestHierarchy:
    @pytest.mark.parametrize(
        "error",
        [
            ConfigurationError("x"),
            ProviderError("x"),
            StreamUnavailable("x"),
            TransportError("x"),
            CompletionTimeout(1),
            ParseError("x"),
        ],
    )
    def test_all_derive_from_base(self, error: Exception) -> None:
        assert isinstance(error, CompleteKitError)

    def test_stream_unavailable_is_provider_error(self) -> None:
        error = StreamUnavailable("No response body reader available", status=200, provider="groq")
        assert isinstance(error, ProviderError)
        assert error.status == 200


class TestMessages:
    def test_configuration_error_suggestion(self) -> None:
        error = ConfigurationError("API key not configured", suggestion="export GROQ_API_KEY")
        assert error.suggestion == "export GROQ_API_KEY"
        assert str(error) == "API key not configured\n\n💡 How to fix: export GROQ_API_KEY"

    def test_configuration_error_without_suggestion(self) -> None:
        assert str(ConfigurationError("Model not found: m")) == "Model not found: m"

    def test_provider_error_fields(self) -> None:
        error = ProviderError("Groq API error: 500 Internal Server Error", status=500, provider="groq")
        assert error.message == "Groq API error: 500 Internal Server Error"
        assert error.status == 500
        assert error.provider == "groq"

    def test_timeout_message(self) -> None:
        error = CompletionTimeout(45012)
        assert error.idle_ms == 45012
        assert str(error) == "Timeout: last streaming output is 45012ms ago."

    def test_parse_error_truncates_frame(self) -> None:
        error = ParseError("x" * 200, "Expecting value")
        assert error.frame == "x" * 200
        assert "Expecting value" in str(error)
        assert len(str(error)) < 200
