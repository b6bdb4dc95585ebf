"""Unit tests for translation casing normalization."""

import pytest
from linguavision.core.normalizer import normalize_translation


class TestNormalizeTranslation:
    """Test normalize_translation."""

    def test_capitalizes_first_character_and_pronoun(self):
        """First letter and standalone 'i' are capitalized."""
        assert normalize_translation("i think i'm late") == "I think I'm late"

    def test_leaves_words_containing_i_untouched(self):
        assert normalize_translation("it is in the bin") == "It is in the bin"

    def test_contractions(self):
        """Contractions of the pronoun are fixed too."""
        assert normalize_translation("well, i'll go and i'd stay") == "Well, I'll go and I'd stay"

    def test_empty_string(self):
        assert normalize_translation("") == ""

    def test_other_casing_is_preserved(self):
        """Only the first letter and the pronoun change."""
        assert normalize_translation("hello, Minji. i SAID no") == "Hello, Minji. I SAID no"

    @pytest.mark.parametrize("text", [
        "i am here",
        "hello, senior.",
        "what did i do?",
        "",
        "123 apples",
    ])
    def test_idempotent(self, text):
        """Applying the normalizer twice gives the same result as once."""
        once = normalize_translation(text)
        assert normalize_translation(once) == once

    def test_non_letter_first_character(self):
        assert normalize_translation("...and i left") == "...and I left"
