"""
Google Gemini provider implementation.

Calls the ``generateContent`` REST endpoint with optional inline image data.
Used both for text extraction (OCR) and for image-in translation.
"""

import logging
from typing import Any, Dict, Optional

import httpx

from linguavision.config import GEMINI_API_BASE
from linguavision.core.models import ImagePayload
from ..base import LLMProvider, LLMResponse
from ..exceptions import ProviderAPIError

logger = logging.getLogger(__name__)


class GeminiProvider(LLMProvider):
    """
    Provider for Google Gemini API.

    Example:
        >>> provider = GeminiProvider(api_key="AI...", model="gemini-3-flash-preview")
        >>> response = await provider.generate("Transcribe this image", image=payload)
    """

    name = "gemini"

    def __init__(self, api_key: str, model: str = "gemini-3-flash-preview",
                 client: Optional[httpx.AsyncClient] = None, api_base: str = GEMINI_API_BASE,
                 **kwargs):
        super().__init__(api_key, model, client=client, **kwargs)
        self.api_endpoint = f"{api_base.rstrip('/')}/models/{model}:generateContent"

    def _build_payload(self, prompt: str, image: Optional[ImagePayload],
                       system_prompt: Optional[str], json_output: bool) -> Dict[str, Any]:
        parts = []
        if image is not None:
            parts.append({
                "inlineData": {
                    "mimeType": image.mime_type,
                    "data": image.base64_data
                }
            })
        parts.append({"text": prompt})

        payload: Dict[str, Any] = {"contents": [{"role": "user", "parts": parts}]}
        if system_prompt:
            payload["systemInstruction"] = {"parts": [{"text": system_prompt}]}
        if json_output:
            payload["generationConfig"] = {"responseMimeType": "application/json"}
        return payload

    async def generate(self, prompt: str, image: Optional[ImagePayload] = None,
                       system_prompt: Optional[str] = None,
                       json_output: bool = False) -> LLMResponse:
        """
        Generate text using Gemini API.

        Returns:
            LLMResponse whose content is the concatenated text parts of the
            first candidate ('' when the model returned no text)
        """
        headers = {
            "Content-Type": "application/json",
            "x-goog-api-key": self.api_key
        }
        payload = self._build_payload(prompt, image, system_prompt, json_output)

        logger.debug(f"Gemini request: model={self.model}, image={'yes' if image else 'no'}")
        response_json = await self._post_json(self.api_endpoint, payload, headers)

        response_text = ""
        candidates = response_json.get("candidates") or []
        if candidates:
            parts = (candidates[0].get("content") or {}).get("parts") or []
            response_text = "".join(part.get("text", "") for part in parts)

        usage_metadata = response_json.get("usageMetadata", {})
        return LLMResponse(
            content=response_text,
            prompt_tokens=usage_metadata.get("promptTokenCount", 0),
            completion_tokens=usage_metadata.get("candidatesTokenCount", 0),
            model=self.model
        )

    def _error_from_response(self, response: httpx.Response) -> ProviderAPIError:
        """Decode ``{"error": {"code", "message", "status"}}`` bodies"""
        message = response.text[:500] or response.reason_phrase
        status = None
        try:
            error = response.json().get("error") or {}
            message = error.get("message") or message
            status = error.get("status")
        except (ValueError, AttributeError):
            pass
        return ProviderAPIError(
            message,
            status_code=response.status_code,
            status=status,
            provider=self.name
        )
