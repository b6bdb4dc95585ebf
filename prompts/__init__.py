"""
Prompts module for LinguaVision
"""
from prompts.prompts import (
    PromptPair,
    generate_extraction_prompt,
    generate_image_translation_prompt,
    generate_text_translation_prompt,
)

__all__ = [
    "PromptPair",
    "generate_extraction_prompt",
    "generate_image_translation_prompt",
    "generate_text_translation_prompt",
]
