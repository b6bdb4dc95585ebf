"""
Translation payload extraction from LLM responses.

Models are asked for raw JSON but sometimes wrap it in a Markdown fence or
surround it with prose. Recovery is best effort: input where the outermost
braces are ambiguous (prose containing its own braces around the payload)
is not guaranteed to parse.
"""

import json
import logging
import re
from typing import Any, Dict, Optional

from linguavision.core.exceptions import MalformedResponseError
from linguavision.core.models import Segment, SourceLanguage, TranslationResult
from linguavision.core.normalizer import normalize_translation

logger = logging.getLogger(__name__)

_FENCED_BLOCK = re.compile(r"```(?:json)?\s*\n?(.*?)\n?```", re.DOTALL | re.IGNORECASE)


class TranslationPayloadExtractor:
    """
    Extracts the ``{"detectedLanguage", "segments"}`` object from a response.

    Handles, in order:
        - A response that is the JSON object itself
        - JSON wrapped in a fenced code block
        - JSON surrounded by prose (first ``{`` to last ``}``)

    Example:
        >>> extractor = TranslationPayloadExtractor()
        >>> extractor.extract('Sure! {"detectedLanguage": "Korean", "segments": []}')
        {'detectedLanguage': 'Korean', 'segments': []}
    """

    def extract(self, response: str) -> Dict[str, Any]:
        """
        Parse the translation object out of a raw response.

        Raises:
            MalformedResponseError: If no candidate parses to a JSON object
        """
        if not response or not response.strip():
            raise MalformedResponseError("Translation failed: the model returned an empty response.")

        text = response.strip()
        for candidate in (text, self._fenced_block(text), self._brace_span(text)):
            if candidate is None:
                continue
            parsed = self._try_parse(candidate)
            if isinstance(parsed, dict):
                return parsed

        logger.error(f"Failed to parse translation JSON. Raw response (first 300 chars): {text[:300]}")
        raise MalformedResponseError(
            "Translation failed due to invalid response format.",
            context={'response_preview': text[:200]}
        )

    @staticmethod
    def _try_parse(candidate: str) -> Optional[Any]:
        try:
            return json.loads(candidate)
        except (json.JSONDecodeError, TypeError):
            return None

    @staticmethod
    def _fenced_block(text: str) -> Optional[str]:
        match = _FENCED_BLOCK.search(text)
        return match.group(1).strip() if match else None

    @staticmethod
    def _brace_span(text: str) -> Optional[str]:
        first_brace = text.find("{")
        last_brace = text.rfind("}")
        if first_brace != -1 and last_brace > first_brace:
            return text[first_brace:last_brace + 1]
        return None


def build_translation_result(payload: Dict[str, Any], language: SourceLanguage) -> TranslationResult:
    """
    Turn a parsed payload into a normalized TranslationResult.

    Segment order is kept as returned. Every target goes through
    ``normalize_translation``. A missing ``detectedLanguage`` falls back to
    the language hint, or "Unknown" when the hint was auto-detect.
    """
    raw_segments = payload.get("segments")
    if not isinstance(raw_segments, list):
        raw_segments = []

    segments = []
    for raw in raw_segments:
        if not isinstance(raw, dict):
            continue
        source = raw.get("source") or ""
        target = raw.get("target") or ""
        segments.append(Segment(source=str(source), target=normalize_translation(str(target))))

    detected_language = payload.get("detectedLanguage")
    if not detected_language:
        detected_language = "Unknown" if language.is_auto else language.value

    return TranslationResult(detected_language=str(detected_language), segments=tuple(segments))


def parse_translation_payload(response: str, language: SourceLanguage) -> TranslationResult:
    """Extract, parse and normalize a raw translation response in one step."""
    payload = TranslationPayloadExtractor().extract(response)
    return build_translation_result(payload, language)
