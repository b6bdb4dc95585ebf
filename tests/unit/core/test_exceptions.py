"""Unit tests for the translation exception hierarchy."""

from linguavision.core.exceptions import (
    AuthFailedError,
    ExtractionFailedError,
    MissingCredentialError,
    ProviderError,
    QuotaExceededError,
    TranslationError
)
from linguavision.core.llm.exceptions import ProviderAPIError


class TestTranslationError:
    """Test TranslationError base class."""

    def test_message_and_context(self):
        error = TranslationError("Something failed", context={'filename': 'a.png'})

        assert str(error) == "Something failed"
        assert error.message == "Something failed"
        assert error.context == {'filename': 'a.png'}

    def test_context_defaults_to_empty(self):
        assert TranslationError("x").context == {}

    def test_with_suffix_keeps_type(self):
        """with_suffix returns the same error type with the message extended."""
        error = QuotaExceededError("Gemini API Quota Exceeded (OCR).", context={'a': 1})

        suffixed = error.with_suffix("Cannot proceed with Claude translation.")

        assert type(suffixed) is QuotaExceededError
        assert suffixed.message == "Gemini API Quota Exceeded (OCR). Cannot proceed with Claude translation."
        assert suffixed.context == {'a': 1}
        assert error.message == "Gemini API Quota Exceeded (OCR)."

    def test_kinds_are_distinct(self):
        assert QuotaExceededError.kind != ExtractionFailedError.kind
        assert issubclass(AuthFailedError, ProviderError)


class TestMissingCredentialError:
    """Test MissingCredentialError."""

    def test_provider_in_context(self):
        error = MissingCredentialError("Missing key", provider="claude")

        assert error.provider == "claude"
        assert error.context['provider'] == "claude"

    def test_with_suffix_keeps_provider(self):
        suffixed = MissingCredentialError("Missing key", provider="gemini").with_suffix("Stop.")

        assert isinstance(suffixed, MissingCredentialError)
        assert suffixed.provider == "gemini"


class TestProviderAPIError:
    """Test the transport error formatting."""

    def test_format_with_status(self):
        error = ProviderAPIError("Quota exceeded", status_code=429, status="RESOURCE_EXHAUSTED")

        assert str(error) == "HTTP 429 RESOURCE_EXHAUSTED: Quota exceeded"
        assert error.code == 429

    def test_format_without_status(self):
        assert str(ProviderAPIError("connection refused")) == "connection refused"
