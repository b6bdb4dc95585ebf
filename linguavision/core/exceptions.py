"""
Exception hierarchy for the image translation pipeline.

Every failure that reaches a batch item is a ``TranslationError`` whose
message is shown to the user as is.
"""

from typing import Optional, Dict, Any


class TranslationError(Exception):
    """Base exception for all translation-related errors.

    Attributes:
        message: Human-readable error message
        context: Additional context about the error
    """

    kind = "translation_error"

    def __init__(self, message: str, context: Optional[Dict[str, Any]] = None):
        super().__init__(message)
        self.message = message
        self.context = context or {}

    def __str__(self) -> str:
        return self.message

    def with_suffix(self, suffix: str) -> 'TranslationError':
        """Copy of this error, same type, with text appended to the message."""
        return type(self)(f"{self.message} {suffix}", context=dict(self.context))


class MissingCredentialError(TranslationError):
    """Raised by pre-flight validation when a required API key is absent."""
    kind = "missing_credential"

    def __init__(self, message: str, provider: Optional[str] = None,
                 context: Optional[Dict[str, Any]] = None):
        ctx = context or {}
        if provider:
            ctx['provider'] = provider
        super().__init__(message, ctx)
        self.provider = ctx.get('provider')


# ============================================================================
# Pipeline-stage errors
# ============================================================================

class ExtractionFailedError(TranslationError):
    """Text extraction (OCR) failed for a reason other than quota."""
    kind = "extraction_failed"


class MalformedResponseError(TranslationError):
    """The model answer could not be parsed as a translation payload."""
    kind = "malformed_response"


# ============================================================================
# Provider errors
# ============================================================================

class ProviderError(TranslationError):
    """Base exception for remote provider failures."""
    kind = "provider_error"


class QuotaExceededError(ProviderError):
    """Rate limit / resource exhaustion, raised once retries are exhausted."""
    kind = "quota_exceeded"


class AuthFailedError(ProviderError):
    """The provider rejected the credential."""
    kind = "auth_failed"


class ModelUnavailableError(ProviderError):
    """Unknown or unsupported model identifier."""
    kind = "model_unavailable"


class ProviderOverloadedError(ProviderError):
    """Transient capacity problem on the provider side (not retried)."""
    kind = "provider_overloaded"


class ProviderRequestError(ProviderError):
    """Any other remote failure."""
    kind = "provider_request_failed"
