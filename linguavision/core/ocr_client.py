"""
Text extraction (OCR) through Gemini.

The extraction step always runs first, whatever provider translates, and
always uses Gemini.
"""

import logging
from typing import Callable, Optional

import httpx

from linguavision.config import OCR_MODEL, REQUEST_TIMEOUT
from linguavision.core.exceptions import ExtractionFailedError, QuotaExceededError
from linguavision.core.llm.base import LLMProvider
from linguavision.core.llm.factory import create_llm_provider
from linguavision.core.models import ImagePayload
from linguavision.core.retry_manager import RetryManager, is_quota_error
from linguavision.utils.llm_logger import log_llm_interaction
from prompts.prompts import generate_extraction_prompt

logger = logging.getLogger(__name__)

ProviderFactory = Callable[..., LLMProvider]


class TextExtractionClient:
    """Transcribes the text of an image without translating it."""

    def __init__(self, model: str = OCR_MODEL,
                 retry_manager: Optional[RetryManager] = None,
                 http_client: Optional[httpx.AsyncClient] = None,
                 provider_factory: ProviderFactory = create_llm_provider,
                 timeout: int = REQUEST_TIMEOUT):
        self.model = model
        self.timeout = timeout
        self.retry_manager = retry_manager or RetryManager()
        self.http_client = http_client
        self.provider_factory = provider_factory

    async def extract_text(self, image: ImagePayload, credential: str) -> str:
        """
        Extract the raw text of an image.

        Returns:
            The stripped text, '' when the image has no text

        Raises:
            QuotaExceededError: Quota still exhausted after the retries
            ExtractionFailedError: Any other failure
        """
        prompt = generate_extraction_prompt()
        provider = self.provider_factory("gemini", api_key=credential, model=self.model,
                                         client=self.http_client, timeout=self.timeout)

        async def _call():
            return await provider.generate(prompt, image=image)

        try:
            response = await self.retry_manager.execute_with_retry(
                _call, operation_id=f"OCR {image.filename}"
            )
        except Exception as e:
            if is_quota_error(e):
                logger.error(f"OCR quota exhausted for {image.filename}: {e}")
                raise QuotaExceededError(
                    "Gemini API Quota Exceeded (OCR). Please check your API key.",
                    context={'filename': image.filename, 'detail': str(e)}
                ) from e
            logger.error(f"OCR failed for {image.filename}: {e}")
            raise ExtractionFailedError(
                "Failed to extract text from image using Gemini.",
                context={'filename': image.filename, 'detail': str(e)}
            ) from e
        finally:
            await provider.close()

        log_llm_interaction(None, prompt, response.content, "extraction",
                            model=self.model, image=image)
        text = (response.content or "").strip()
        logger.debug(f"OCR extracted {len(text)} characters from {image.filename}")
        return text
