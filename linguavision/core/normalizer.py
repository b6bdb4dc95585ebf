"""
Deterministic casing rules applied to every translated segment.

Models are asked to answer in lowercase with a capitalized first letter and a
capitalized pronoun "I"; these rules are enforced here rather than trusted.
"""

import re

# Standalone "i", also matches the start of contractions such as "i'm"
_LOWERCASE_PRONOUN = re.compile(r"\bi\b")


def normalize_translation(text: str) -> str:
    """
    Capitalize the first character and every standalone pronoun "i".

    All other casing is left as is. The function is idempotent.

    Example:
        >>> normalize_translation("i think i'm late, it is fine")
        "I think I'm late, it is fine"
    """
    if not text:
        return text
    text = text[0].upper() + text[1:]
    return _LOWERCASE_PRONOUN.sub("I", text)
