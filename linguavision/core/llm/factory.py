"""
Provider factory.

Providers are cheap wrappers around a (possibly shared) httpx client, so a
new one is created per call with the credential that call must use.
"""

from typing import Optional

import httpx

from .base import LLMProvider
from .providers.claude import ClaudeProvider
from .providers.gemini import GeminiProvider


def create_llm_provider(provider_type: str, api_key: str, model: str,
                        client: Optional[httpx.AsyncClient] = None, **kwargs) -> LLMProvider:
    """Factory function to create LLM providers"""
    if not api_key:
        raise ValueError(f"{provider_type} provider requires an API key.")

    if provider_type.lower() == "gemini":
        return GeminiProvider(api_key=api_key, model=model, client=client, **kwargs)
    elif provider_type.lower() == "claude":
        return ClaudeProvider(api_key=api_key, model=model, client=client, **kwargs)
    else:
        raise ValueError(f"Unknown provider type: {provider_type}")
