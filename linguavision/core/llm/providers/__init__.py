"""
LLM Provider Implementations

Providers:
    - gemini: Google Gemini API (extraction and image-in translation)
    - claude: Anthropic Messages API (text-in translation)
"""
from .claude import ClaudeProvider
from .gemini import GeminiProvider

__all__ = ['ClaudeProvider', 'GeminiProvider']
