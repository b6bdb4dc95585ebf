"""
Base classes and data structures for LLM providers.

This module defines the abstract base class that both HTTP providers
implement, and the common LLMResponse structure.
"""

from abc import ABC, abstractmethod
from dataclasses import dataclass
from typing import Any, Dict, Optional
import httpx

from linguavision.config import REQUEST_TIMEOUT
from linguavision.core.models import ImagePayload
from .exceptions import ProviderAPIError


@dataclass
class LLMResponse:
    """Response from LLM with token usage information"""
    content: str
    prompt_tokens: int = 0
    completion_tokens: int = 0
    model: str = ""


class LLMProvider(ABC):
    """Abstract base class for LLM providers"""

    name = "llm"

    def __init__(self, api_key: str, model: str,
                 client: Optional[httpx.AsyncClient] = None,
                 timeout: int = REQUEST_TIMEOUT):
        """
        Initialize the LLM provider.

        Args:
            api_key: Provider credential
            model: Model name/identifier
            client: Shared HTTP client; when omitted the provider owns one
            timeout: Request timeout in seconds
        """
        self.api_key = api_key
        self.model = model
        self.timeout = timeout
        self._client = client
        self._owns_client = client is None

    async def _get_client(self) -> httpx.AsyncClient:
        """Get or create the HTTP client"""
        if self._client is None:
            self._client = httpx.AsyncClient(timeout=httpx.Timeout(self.timeout))
            self._owns_client = True
        return self._client

    async def close(self):
        """Close the HTTP client if this provider created it"""
        if self._client is not None and self._owns_client:
            await self._client.aclose()
            self._client = None

    async def _post_json(self, url: str, payload: Dict[str, Any],
                         headers: Dict[str, str]) -> Dict[str, Any]:
        """
        POST a JSON payload and return the decoded JSON body.

        Raises:
            ProviderAPIError: On HTTP error status, transport failure or a
                non-JSON body
        """
        client = await self._get_client()
        try:
            response = await client.post(url, json=payload, headers=headers, timeout=self.timeout)
            response.raise_for_status()
            return response.json()
        except httpx.HTTPStatusError as e:
            raise self._error_from_response(e.response) from e
        except httpx.TimeoutException as e:
            raise ProviderAPIError(f"{self.name} request timed out: {e}", provider=self.name) from e
        except httpx.HTTPError as e:
            raise ProviderAPIError(f"{self.name} connection error: {e}", provider=self.name) from e
        except ValueError as e:
            raise ProviderAPIError(f"{self.name} returned a non-JSON body: {e}", provider=self.name) from e

    def _error_from_response(self, response: httpx.Response) -> ProviderAPIError:
        """Build a ProviderAPIError from an error response (overridden per provider)"""
        return ProviderAPIError(
            response.text[:500] or response.reason_phrase,
            status_code=response.status_code,
            provider=self.name
        )

    @abstractmethod
    async def generate(self, prompt: str, image: Optional[ImagePayload] = None,
                       system_prompt: Optional[str] = None,
                       json_output: bool = False) -> LLMResponse:
        """
        Generate text from prompt.

        Args:
            prompt: The user prompt
            image: Optional image sent along with the prompt
            system_prompt: Optional system prompt (role/instructions)
            json_output: Ask the provider for a JSON response when supported

        Returns:
            LLMResponse with the raw text content

        Raises:
            ProviderAPIError: If the call fails
        """
