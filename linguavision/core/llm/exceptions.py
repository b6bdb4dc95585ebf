"""
LLM transport exceptions.

``ProviderAPIError`` is raised by the HTTP providers and consumed by the
retry layer and the provider clients; it never reaches a batch item.
"""

from typing import Optional


class ProviderAPIError(Exception):
    """
    Raised when a provider call fails at the HTTP level.

    Attributes:
        status_code: HTTP status (None for transport failures)
        status: Provider status string (e.g. Gemini's "RESOURCE_EXHAUSTED")
        error_type: Provider error type (e.g. Anthropic's "overloaded_error")
        provider: Name of the provider that failed
    """

    def __init__(self, message: str, status_code: Optional[int] = None,
                 status: Optional[str] = None, error_type: Optional[str] = None,
                 provider: str = ""):
        self.status_code = status_code
        self.status = status
        self.error_type = error_type
        self.provider = provider
        self.message = message
        super().__init__(self._format())

    @property
    def code(self) -> Optional[int]:
        return self.status_code

    def _format(self) -> str:
        parts = []
        if self.status_code is not None:
            parts.append(f"HTTP {self.status_code}")
        if self.status:
            parts.append(self.status)
        if self.error_type:
            parts.append(self.error_type)
        prefix = " ".join(parts)
        return f"{prefix}: {self.message}" if prefix else self.message
