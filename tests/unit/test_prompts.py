"""Unit tests for prompt generation."""

import pytest
from linguavision.core.models import SourceLanguage
from prompts.prompts import (
    generate_extraction_prompt,
    generate_image_translation_prompt,
    generate_text_translation_prompt
)


class TestImageTranslationPrompt:
    """Test the image-in prompt."""

    def test_concrete_language_is_stated(self):
        prompt = generate_image_translation_prompt(SourceLanguage.KOREAN)
        assert prompt.startswith("The text in the image is Korean.")

    def test_auto_asks_for_identification(self):
        prompt = generate_image_translation_prompt(SourceLanguage.AUTO)
        assert prompt.startswith("Identify the language of the text in the image")
        assert '"detectedLanguage"' in prompt

    def test_terminology_mappings(self):
        prompt = generate_image_translation_prompt(SourceLanguage.AUTO)
        assert '"Deputy Manager"' in prompt
        assert '"senior"' in prompt


class TestTextTranslationPrompt:
    """Test the text-in prompt pair."""

    @pytest.mark.parametrize("language,rules", [
        (SourceLanguage.KOREAN, "KOREAN SPECIFIC RULES"),
        (SourceLanguage.SPANISH, "SPANISH SPECIFIC RULES"),
        (SourceLanguage.AUTO, "AUTO-DETECTION RULES"),
    ])
    def test_language_rules_in_system_prompt(self, language, rules):
        pair = generate_text_translation_prompt("texto", language)
        assert rules in pair.system
        assert rules not in pair.user

    def test_user_prompt_carries_text(self):
        pair = generate_text_translation_prompt("선배님, 안녕하세요.", SourceLanguage.KOREAN)
        assert "선배님, 안녕하세요." in pair.user
        assert "선배님" not in pair.system


def test_extraction_prompt_forbids_translation():
    assert "Do NOT translate" in generate_extraction_prompt()
