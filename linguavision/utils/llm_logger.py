"""
LLM logging utilities for debugging and transparency

Dumps full provider interactions (prompts and raw answers) when DEBUG_MODE
is enabled. Image payloads are reported by name and size only.
"""
import logging
from typing import Optional

from linguavision import config
from linguavision.core.models import ImagePayload

logger = logging.getLogger(__name__)

_SEPARATOR = "=" * 80
_RULE = "-" * 80


def should_log_llm_details() -> bool:
    """True when DEBUG_MODE is enabled"""
    return config.DEBUG_MODE


def log_llm_interaction(
    system_prompt: Optional[str],
    user_prompt: str,
    raw_response: str,
    interaction_type: str = "translation",
    model: str = "",
    image: Optional[ImagePayload] = None
):
    """
    Log a full LLM interaction when DEBUG_MODE is enabled.

    Args:
        system_prompt: The system prompt (role/instructions), if any
        user_prompt: The user prompt
        raw_response: Raw model answer before parsing
        interaction_type: "extraction" or "translation"
        model: Model identifier used for the call
        image: Image sent along with the prompt, if any
    """
    if not should_log_llm_details():
        return

    lines = [
        _SEPARATOR,
        f"DEBUG: LLM Interaction - {interaction_type.upper()}" + (f" [{model}]" if model else ""),
        _SEPARATOR,
    ]
    if image is not None:
        lines.append(f"Image: {image.filename} ({image.mime_type}, {image.size} bytes)")
    if system_prompt:
        lines.extend(["System Prompt:", _RULE, system_prompt, _RULE])
    lines.extend(["User Prompt:", _RULE, user_prompt, _RULE])
    lines.extend(["Raw Response:", _RULE, raw_response, _RULE, _SEPARATOR])

    logger.debug("\n".join(lines))
