"""
LLM Utility Modules

Components:
    - extraction: Translation payload extraction from LLM responses
"""

from .extraction import TranslationPayloadExtractor, parse_translation_payload

__all__ = ['TranslationPayloadExtractor', 'parse_translation_payload']
