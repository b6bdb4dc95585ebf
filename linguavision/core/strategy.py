"""
Translation strategy: extraction, then translation with tier fallback.

Extraction always runs first on Gemini, whatever the selected provider:
an image without text is answered without any translation call, and a
failed extraction stops the attempt before a translation is paid for.
"""

import asyncio
import logging
from typing import Dict, Optional

import httpx

from linguavision.config import CLAUDE_MODEL_ID, TranslationConfig
from linguavision.core.exceptions import (
    MissingCredentialError, QuotaExceededError, TranslationError
)
from linguavision.core.models import (
    ImagePayload, ModelProvider, SourceLanguage, TranslationResult
)
from linguavision.core.ocr_client import TextExtractionClient
from linguavision.core.retry_manager import RetryManager, RetryPolicy
from linguavision.core.translation_clients import (
    ImageTranslationClient, ModelTier, ProviderCredentials, ProviderShape,
    TextTranslationClient, TranslationClient, TranslationRequest
)

logger = logging.getLogger(__name__)

MISSING_GEMINI_KEY_MESSAGE = (
    "Missing Gemini API Key (Required for OCR). Click the settings gear to add your key."
)
MISSING_CLAUDE_KEY_MESSAGE = "Missing Claude API Key. Click the settings gear to add your key."


def missing_credential(provider: ModelProvider,
                       credentials: ProviderCredentials) -> Optional[MissingCredentialError]:
    """
    Pre-flight credential check for one attempt.

    The Gemini key is always required (extraction); the Claude key only when
    Claude translates.
    """
    if provider is ModelProvider.CLAUDE and not credentials.claude:
        return MissingCredentialError(MISSING_CLAUDE_KEY_MESSAGE, provider=ModelProvider.CLAUDE.value)
    if not credentials.extraction:
        return MissingCredentialError(MISSING_GEMINI_KEY_MESSAGE, provider=ModelProvider.GEMINI.value)
    return None


class TranslationStrategy:
    """Runs the two-stage pipeline for one image."""

    def __init__(self, extraction_client: TextExtractionClient,
                 translators: Dict[ModelProvider, TranslationClient],
                 max_concurrent_requests: int = 0):
        self.extraction_client = extraction_client
        self.translators = translators
        self.max_concurrent_requests = max_concurrent_requests
        self._semaphores: Dict[ModelProvider, asyncio.Semaphore] = {}

    @classmethod
    def from_config(cls, config: TranslationConfig,
                    http_client: Optional[httpx.AsyncClient] = None,
                    retry_manager: Optional[RetryManager] = None) -> 'TranslationStrategy':
        """Build the clients described by a configuration"""
        retry_manager = retry_manager or RetryManager(
            RetryPolicy(max_retries=config.max_retries, initial_delay=config.retry_delay)
        )
        shared = {'retry_manager': retry_manager, 'http_client': http_client, 'timeout': config.timeout}
        return cls(
            extraction_client=TextExtractionClient(model=config.ocr_model, **shared),
            translators={
                ModelProvider.GEMINI: ImageTranslationClient(
                    premium_model=config.translation_model_pro,
                    standard_model=config.translation_model_flash,
                    **shared
                ),
                ModelProvider.CLAUDE: TextTranslationClient(
                    model=config.claude.model or CLAUDE_MODEL_ID, **shared
                ),
            },
            max_concurrent_requests=config.max_concurrent_requests
        )

    async def translate_item(self, image: ImagePayload, language: SourceLanguage,
                             provider: ModelProvider,
                             credentials: ProviderCredentials) -> TranslationResult:
        """
        Translate one image with the selected provider.

        Returns:
            TranslationResult (``TranslationResult.empty()`` when the image
            has no text)

        Raises:
            TranslationError: Typed failure whose message is user-facing
        """
        translator = self.translators.get(provider)
        if translator is None:
            raise TranslationError(f"No translator registered for {provider.value}")

        missing = missing_credential(provider, credentials)
        if missing is not None:
            raise missing

        try:
            text = await self.extraction_client.extract_text(image, credentials.extraction)
        except TranslationError as e:
            raise e.with_suffix(f"Cannot proceed with {translator.display_name} translation.") from e

        if not text.strip():
            logger.info(f"No text found in {image.filename}, skipping translation")
            return TranslationResult.empty()

        if translator.shape is ProviderShape.IMAGE_IN:
            request = TranslationRequest(language=language, image=image)
        else:
            request = TranslationRequest(language=language, text=text)

        tiers = translator.tiers(credentials)
        try:
            return await self._translate_with_tier(translator, request, tiers[0])
        except QuotaExceededError:
            if len(tiers) < 2:
                raise
            logger.warning(
                f"{translator.display_name} {tiers[0].label} model quota exhausted for "
                f"{image.filename}, falling back to {tiers[1].model}"
            )
        return await self._translate_with_tier(translator, request, tiers[1])

    async def _translate_with_tier(self, translator: TranslationClient,
                                   request: TranslationRequest, tier: ModelTier) -> TranslationResult:
        semaphore = self._semaphore_for(translator.provider)
        if semaphore is None:
            return await translator.translate(request, tier)
        async with semaphore:
            return await translator.translate(request, tier)

    def _semaphore_for(self, provider: ModelProvider) -> Optional[asyncio.Semaphore]:
        if self.max_concurrent_requests <= 0:
            return None
        if provider not in self._semaphores:
            self._semaphores[provider] = asyncio.Semaphore(self.max_concurrent_requests)
        return self._semaphores[provider]
