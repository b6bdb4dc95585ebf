"""
LLM transport layer: HTTP providers for Gemini and Claude.
"""
from .base import LLMProvider, LLMResponse
from .exceptions import ProviderAPIError
from .factory import create_llm_provider

__all__ = ['LLMProvider', 'LLMResponse', 'ProviderAPIError', 'create_llm_provider']
