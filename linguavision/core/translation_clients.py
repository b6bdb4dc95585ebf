"""
Translation provider clients.

Two shapes exist behind one ``translate(request, tier)`` capability:

    - IMAGE_IN (Gemini): the model receives the image and segments,
      transcribes and translates it in a single call.
    - TEXT_IN (Claude): the model receives the text produced by the
      extraction step, never the image.

A client also decides its model tiers: the ordered (model, credential)
pairs the strategy walks through when the first one runs out of quota.
"""

import logging
from abc import ABC, abstractmethod
from dataclasses import dataclass
from enum import Enum
from typing import Callable, List, Optional

import httpx

from linguavision.config import (
    CLAUDE_MODEL_ID, REQUEST_TIMEOUT, TRANSLATION_MODEL_FLASH, TRANSLATION_MODEL_PRO,
    TranslationConfig
)
from linguavision.core.exceptions import (
    AuthFailedError, ModelUnavailableError, ProviderOverloadedError,
    ProviderRequestError, QuotaExceededError, TranslationError
)
from linguavision.core.llm.base import LLMProvider
from linguavision.core.llm.factory import create_llm_provider
from linguavision.core.llm.utils.extraction import parse_translation_payload
from linguavision.core.models import (
    ImagePayload, ModelProvider, SourceLanguage, TranslationResult
)
from linguavision.core.retry_manager import RetryManager, is_quota_error
from linguavision.utils.llm_logger import log_llm_interaction
from prompts.prompts import (
    generate_image_translation_prompt, generate_text_translation_prompt
)

logger = logging.getLogger(__name__)

_OVERLOADED_STATUS_CODES = (503, 529)
_OVERLOADED_MARKERS = ('overloaded_error', 'unavailable')


class ProviderShape(Enum):
    """What a translation provider consumes"""
    IMAGE_IN = "image_in"
    TEXT_IN = "text_in"


@dataclass(frozen=True)
class ProviderCredentials:
    """Resolved credentials for one attempt (empty string when absent)"""
    gemini: str = ''
    gemini_premium: str = ''
    claude: str = ''
    claude_model: Optional[str] = None

    @classmethod
    def from_config(cls, config: TranslationConfig) -> 'ProviderCredentials':
        """Resolve user values against the environment defaults"""
        return cls(
            gemini=config.gemini.credential,
            gemini_premium=config.gemini.premium_credential,
            claude=config.claude.credential,
            claude_model=config.claude.model
        )

    @property
    def extraction(self) -> str:
        """Extraction always runs on Gemini with the standard key"""
        return self.gemini


@dataclass(frozen=True)
class TranslationRequest:
    """Input of one translation call"""
    language: SourceLanguage
    image: Optional[ImagePayload] = None
    text: Optional[str] = None

    @property
    def label(self) -> str:
        return self.image.filename if self.image else "text"


@dataclass(frozen=True)
class ModelTier:
    """One (model, credential) pair a client can be called with"""
    label: str
    model: str
    credential: str


def map_provider_error(error: Exception, provider_name: str, model: str,
                       generic_message: str) -> TranslationError:
    """
    Turn a transport failure (after retries) into a user-facing error.

    Args:
        error: The failure raised by the provider call
        provider_name: Display name used in messages ("Gemini", "Claude")
        model: Model identifier the call used
        generic_message: Message for failures with no specific mapping
    """
    if isinstance(error, TranslationError):
        return error

    status_code = getattr(error, 'status_code', None)
    markers = ' '.join(
        str(value).lower() for value in (getattr(error, 'status', None),
                                         getattr(error, 'error_type', None))
        if value
    )
    context = {'provider': provider_name, 'model': model, 'detail': str(error)}

    if is_quota_error(error):
        return QuotaExceededError(
            f"{provider_name} API Quota Exceeded. Please check your API key in Settings.",
            context=context
        )
    if status_code in (401, 403):
        return AuthFailedError(
            f"Invalid {provider_name} API Key. Please check your key in Settings.",
            context=context
        )
    if status_code == 404:
        return ModelUnavailableError(
            f"Model {model} not found. Please select a valid model in Settings.",
            context=context
        )
    if status_code in _OVERLOADED_STATUS_CODES or any(m in markers for m in _OVERLOADED_MARKERS):
        return ProviderOverloadedError(
            f"{provider_name} API is currently overloaded. Please try again in a moment.",
            context=context
        )
    return ProviderRequestError(generic_message, context=context)


class TranslationClient(ABC):
    """Common call/parse/map pipeline of the translation clients"""

    shape: ProviderShape
    provider: ModelProvider
    provider_type = ""
    display_name = ""
    generic_failure_message = "Translation failed."

    def __init__(self, retry_manager: Optional[RetryManager] = None,
                 http_client: Optional[httpx.AsyncClient] = None,
                 provider_factory: Callable[..., LLMProvider] = create_llm_provider,
                 timeout: int = REQUEST_TIMEOUT):
        self.retry_manager = retry_manager or RetryManager()
        self.http_client = http_client
        self.provider_factory = provider_factory
        self.timeout = timeout

    @abstractmethod
    def tiers(self, credentials: ProviderCredentials) -> List[ModelTier]:
        """Ordered tiers to try; only a quota failure moves to the next one"""

    @abstractmethod
    def _build_call(self, request: TranslationRequest):
        """Return (prompt, system_prompt, image, json_output) for a request"""

    async def translate(self, request: TranslationRequest, tier: ModelTier) -> TranslationResult:
        """
        Translate one request with the given tier.

        Raises:
            TranslationError: Mapped provider failure or unparseable answer
        """
        prompt, system_prompt, image, json_output = self._build_call(request)
        provider = self.provider_factory(self.provider_type, api_key=tier.credential,
                                         model=tier.model, client=self.http_client,
                                         timeout=self.timeout)

        async def _call():
            return await provider.generate(prompt, image=image, system_prompt=system_prompt,
                                           json_output=json_output)

        logger.info(f"Translating {request.label} with {self.display_name} ({tier.label}: {tier.model})")
        try:
            response = await self.retry_manager.execute_with_retry(
                _call, operation_id=f"{self.display_name} {tier.label} {request.label}"
            )
        except Exception as e:
            mapped = map_provider_error(e, self.display_name, tier.model, self.generic_failure_message)
            logger.error(f"{self.display_name} translation failed ({tier.model}): {e}")
            raise mapped from e
        finally:
            await provider.close()

        log_llm_interaction(system_prompt, prompt, response.content, "translation",
                            model=tier.model, image=image)
        return parse_translation_payload(response.content, request.language)


class ImageTranslationClient(TranslationClient):
    """Gemini: image in, segmented translation out"""

    shape = ProviderShape.IMAGE_IN
    provider = ModelProvider.GEMINI
    provider_type = "gemini"
    display_name = "Gemini"
    generic_failure_message = "Failed to process image. Please try again."

    def __init__(self, premium_model: str = TRANSLATION_MODEL_PRO,
                 standard_model: str = TRANSLATION_MODEL_FLASH, **kwargs):
        super().__init__(**kwargs)
        self.premium_model = premium_model
        self.standard_model = standard_model

    def tiers(self, credentials: ProviderCredentials) -> List[ModelTier]:
        return [
            ModelTier("premium", self.premium_model, credentials.gemini_premium or credentials.gemini),
            ModelTier("standard", self.standard_model, credentials.gemini),
        ]

    def _build_call(self, request: TranslationRequest):
        if request.image is None:
            raise ValueError("Image translation requires an image")
        return generate_image_translation_prompt(request.language), None, request.image, True


class TextTranslationClient(TranslationClient):
    """Claude: extracted text in, segmented translation out"""

    shape = ProviderShape.TEXT_IN
    provider = ModelProvider.CLAUDE
    provider_type = "claude"
    display_name = "Claude"
    generic_failure_message = "Failed to translate text with Claude."

    def __init__(self, model: str = CLAUDE_MODEL_ID, **kwargs):
        super().__init__(**kwargs)
        self.model = model

    def tiers(self, credentials: ProviderCredentials) -> List[ModelTier]:
        return [ModelTier("standard", credentials.claude_model or self.model, credentials.claude)]

    def _build_call(self, request: TranslationRequest):
        if request.text is None:
            raise ValueError("Text translation requires extracted text")
        prompts = generate_text_translation_prompt(request.text, request.language)
        return prompts.user, prompts.system, None, False
