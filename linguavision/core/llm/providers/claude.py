"""
Anthropic Claude provider implementation.

Text-only calls to the Messages API; Claude never sees the image, it
translates text already extracted by Gemini.
"""

import logging
from typing import Optional

import httpx

from linguavision.config import CLAUDE_API_ENDPOINT, CLAUDE_API_VERSION
from linguavision.core.models import ImagePayload
from ..base import LLMProvider, LLMResponse
from ..exceptions import ProviderAPIError

logger = logging.getLogger(__name__)


class ClaudeProvider(LLMProvider):
    """Provider for the Anthropic Messages API"""

    name = "claude"

    def __init__(self, api_key: str, model: str,
                 client: Optional[httpx.AsyncClient] = None,
                 api_endpoint: str = CLAUDE_API_ENDPOINT,
                 max_tokens: int = 4096, temperature: float = 0.0, **kwargs):
        super().__init__(api_key, model, client=client, **kwargs)
        self.api_endpoint = api_endpoint
        self.max_tokens = max_tokens
        self.temperature = temperature

    async def generate(self, prompt: str, image: Optional[ImagePayload] = None,
                       system_prompt: Optional[str] = None,
                       json_output: bool = False) -> LLMResponse:
        """
        Generate text using the Messages API.

        ``image`` and ``json_output`` are not used: the JSON shape is requested
        by the system prompt.

        Returns:
            LLMResponse with the first text block ('' when there is none)
        """
        headers = {
            "Content-Type": "application/json",
            "x-api-key": self.api_key,
            "anthropic-version": CLAUDE_API_VERSION
        }
        payload = {
            "model": self.model,
            "max_tokens": self.max_tokens,
            "temperature": self.temperature,
            "messages": [{"role": "user", "content": prompt}]
        }
        if system_prompt:
            payload["system"] = system_prompt

        logger.debug(f"Claude request: model={self.model}")
        response_json = await self._post_json(self.api_endpoint, payload, headers)

        text_block = next(
            (block for block in response_json.get("content") or [] if block.get("type") == "text"),
            None
        )
        usage = response_json.get("usage", {})
        return LLMResponse(
            content=text_block.get("text", "") if text_block else "",
            prompt_tokens=usage.get("input_tokens", 0),
            completion_tokens=usage.get("output_tokens", 0),
            model=self.model
        )

    def _error_from_response(self, response: httpx.Response) -> ProviderAPIError:
        """Decode ``{"type": "error", "error": {"type", "message"}}`` bodies"""
        message = response.text[:500] or response.reason_phrase
        error_type = None
        try:
            error = response.json().get("error") or {}
            message = error.get("message") or message
            error_type = error.get("type")
        except (ValueError, AttributeError):
            pass
        return ProviderAPIError(
            message,
            status_code=response.status_code,
            error_type=error_type,
            provider=self.name
        )
