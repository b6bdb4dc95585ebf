"""
Pytest configuration and fixtures for all tests.

This file is automatically loaded by pytest and provides common fixtures
and test doubles for all test modules.
"""

import io
import sys
from pathlib import Path

# Add project root to Python path
project_root = Path(__file__).parent.parent
sys.path.insert(0, str(project_root))

import pytest
from PIL import Image

from linguavision.core.llm.base import LLMResponse
from linguavision.core.models import ImagePayload, ModelProvider, TranslationResult
from linguavision.core.retry_manager import RetryManager, RetryPolicy
from linguavision.core.translation_clients import (
    ModelTier, ProviderCredentials, ProviderShape
)


def png_bytes(color=(255, 255, 255), size=(8, 8)) -> bytes:
    """Encode a tiny real PNG image."""
    buffer = io.BytesIO()
    Image.new('RGB', size, color).save(buffer, format='PNG')
    return buffer.getvalue()


def make_image(filename: str = "page.png") -> ImagePayload:
    return ImagePayload(filename=filename, data=b"\x89PNG fake", mime_type="image/png")


class RecordingSleep:
    """Stand-in for asyncio.sleep that records the requested delays."""

    def __init__(self):
        self.delays = []

    async def __call__(self, delay):
        self.delays.append(delay)


class FakeProvider:
    """LLM provider returning scripted answers (str) or raising scripted errors."""

    def __init__(self, script, calls, provider_type, api_key, model):
        self._script = script
        self._calls = calls
        self.provider_type = provider_type
        self.api_key = api_key
        self.model = model
        self.closed = False

    async def generate(self, prompt, image=None, system_prompt=None, json_output=False):
        self._calls.append({
            'provider_type': self.provider_type,
            'api_key': self.api_key,
            'model': self.model,
            'prompt': prompt,
            'image': image,
            'system_prompt': system_prompt,
            'json_output': json_output,
        })
        outcome = self._script.pop(0)
        if isinstance(outcome, Exception):
            raise outcome
        return LLMResponse(content=outcome, model=self.model)

    async def close(self):
        self.closed = True


class FakeProviderFactory:
    """Replacement for create_llm_provider sharing one script across providers."""

    def __init__(self, *script):
        self.script = list(script)
        self.calls = []
        self.created = []

    def __call__(self, provider_type, api_key, model, client=None, **kwargs):
        self.created.append({'provider_type': provider_type, 'model': model, **kwargs})
        return FakeProvider(self.script, self.calls, provider_type, api_key, model)


class FakeExtractionClient:
    """Extraction client returning fixed text or raising a fixed error."""

    def __init__(self, text="", error=None):
        self.text = text
        self.error = error
        self.calls = []

    async def extract_text(self, image, credential):
        self.calls.append((image.filename, credential))
        if self.error is not None:
            raise self.error
        return self.text


class FakeTranslator:
    """Translator whose outcome is scripted per tier label."""

    def __init__(self, shape=ProviderShape.IMAGE_IN, provider=ModelProvider.GEMINI,
                 outcomes=None, tier_labels=("premium", "standard"), display_name="Gemini"):
        self.shape = shape
        self.provider = provider
        self.display_name = display_name
        self.outcomes = outcomes or {}
        self.tier_labels = tier_labels
        self.calls = []

    def tiers(self, credentials):
        return [ModelTier(label, f"{label}-model", credentials.gemini) for label in self.tier_labels]

    async def translate(self, request, tier):
        self.calls.append((request, tier))
        outcome = self.outcomes.get(tier.label, TranslationResult("Korean", ()))
        if isinstance(outcome, Exception):
            raise outcome
        return outcome


@pytest.fixture
def recording_sleep():
    return RecordingSleep()


@pytest.fixture
def fast_retry(recording_sleep):
    """RetryManager with the default policy that never really sleeps."""
    return RetryManager(RetryPolicy(max_retries=3, initial_delay=2.0), sleep=recording_sleep)


@pytest.fixture
def credentials():
    return ProviderCredentials(gemini="gemini-key", claude="claude-key",
                               claude_model="claude-sonnet-4-5-20250929")


@pytest.fixture
def image():
    return make_image()
