from typing import NamedTuple

from linguavision.core.models import SourceLanguage


class PromptPair(NamedTuple):
    """A pair of system and user prompts for LLM translation."""
    system: str
    user: str


# ============================================================================
# SHARED PROMPT SECTIONS
# ============================================================================

JSON_STRUCTURE_EXAMPLE = """{
  "detectedLanguage": "The detected source language (e.g. Korean, Spanish)",
  "segments": [
    {
      "source": "Original text segment 1",
      "target": "English translation 1"
    },
    {
      "source": "Original text segment 2",
      "target": "English translation 2"
    }
  ]
}"""


def _supported_languages_text() -> str:
    return " or ".join(language.upper() for language in SourceLanguage.supported())


def _get_language_instruction(language: SourceLanguage) -> str:
    """
    Language instruction for the image-in prompt.

    A concrete hint is stated as fact; auto-detect asks the model to identify
    the language among the supported set and report it.
    """
    if language.is_auto:
        return (f"Identify the language of the text in the image "
                f"(it is likely {_supported_languages_text().title()}).")
    return f"The text in the image is {language.value}."


def _get_text_language_rules(language: SourceLanguage) -> tuple:
    """
    Context line and source-language-specific rules for the text-in prompt.

    Returns:
        tuple: (context_instruction, specific_rules)
    """
    if language is SourceLanguage.KOREAN:
        return (
            "The input text is KOREAN (Hangul).",
            """KOREAN SPECIFIC RULES:
- Translate "Section Chief" (Gwajang/Kwajang) strictly as "Deputy Manager".
- Translate "Sunbae" as "Senior".
- Keep names consistent. Do not anglicize Korean names (e.g., keep "Minji")."""
        )
    if language is SourceLanguage.SPANISH:
        return (
            "The input text is SPANISH.",
            """SPANISH SPECIFIC RULES:
- Maintain the nuance of formal (usted) vs informal (tú) address in the English tone where appropriate.
- Treat this strictly as Spanish language content."""
        )
    return (
        f"Identify the language of the provided text. It is likely {_supported_languages_text()}.",
        """AUTO-DETECTION RULES:
1. First, identify the script (Hangul vs Latin).
2. Apply the appropriate translation nuances for the detected language.
3. Report the detected language in "detectedLanguage"."""
    )


# ============================================================================
# EXTRACTION PROMPT
# ============================================================================

def generate_extraction_prompt() -> str:
    """Verbatim transcription prompt used for the OCR step."""
    return """Perform high-accuracy OCR (Optical Character Recognition) on this image.
1. Extract ALL text visible in the image exactly as it appears.
2. Do NOT translate the text. Keep it in the original language (Korean, Spanish, etc.).
3. Preserve the logical structure (line breaks) where possible.
4. If there is no text, return an empty string.
5. Return ONLY the raw extracted text. Do not add markdown or explanations."""


# ============================================================================
# TRANSLATION PROMPT FUNCTIONS
# ============================================================================

def generate_image_translation_prompt(language: SourceLanguage) -> str:
    """
    Single prompt sent along with the image: transcribe, segment, translate.

    Args:
        language: Source language hint

    Returns:
        str: The prompt; the answer is requested as JSON
    """
    return f"""{_get_language_instruction(language)}
Please perform the following steps:
1. Transcribe the text found in the image.
2. Split the text into logical segments (sentences, phrases, or bullet points) for easy reading.
3. Translate each segment into English.

IMPORTANT Translation Rules regarding Names, Titles, Honorifics & Consistency:
1. **Strict Consistency**: You MUST maintain the exact same English term for a specific person's title, role, honorific, OR NAME throughout the translation.
2. **Character Names**:
     - Identify character names early.
     - Use the EXACT same spelling/romanization for the same character throughout the entire text.
     - Do NOT vary the spelling (e.g., do not switch between "Min-su" and "Minsu").
     - Do NOT Anglicize names (e.g., keep "Minji", do not change to "Minnie").
3. **Specific Mappings**:
     - Translate "sunbae" (or equivalent terms like 선배) strictly as "senior".
     - Translate "ajumma" (or equivalent terms like 아줌마) strictly as "ma'am".
     - **CRITICAL**: Translate "Section Chief" (or the Korean term 과장) strictly as "Deputy Manager". Do NOT use "Section Chief".
4. **Professional Titles**: If a character is addressed by a professional title (Director, Team Leader, Teacher, Doctor, etc.), preserve that specific title in English consistently (except for 'Section Chief' which must be 'Deputy Manager').

IMPORTANT formatting rule for English:
- Output the English translation in lowercase.
- **MANDATORY CAPITALIZATION EXCEPTIONS**:
  1. The first letter of the sentence/segment MUST be capitalized.
  2. The pronoun "I" MUST ALWAYS be capitalized (e.g., "I think...", "I am..."). NEVER output the pronoun "I" as "i".
- Do not capitalize proper nouns (names, places, etc.) unless they are the first word.

Return the output in the following JSON format ONLY (do not add Markdown code blocks around the JSON):
{JSON_STRUCTURE_EXAMPLE}"""


def generate_text_translation_prompt(extracted_text: str, language: SourceLanguage) -> PromptPair:
    """
    System persona and user prompt for translating already-extracted text.

    Args:
        extracted_text: Text produced by the extraction step
        language: Source language hint

    Returns:
        PromptPair: A named tuple with 'system' and 'user' prompts
    """
    context_instruction, specific_rules = _get_text_language_rules(language)

    system_prompt = f"""You are an expert translator specializing in translating text (Manhwa, Webtoons, Adult/NSFW content, Documents) into PERFECT, NATURAL ENGLISH.

OBJECTIVE:
Translate the provided raw text (extracted via OCR from an image) into fluent, grammatically correct English.

CONTEXT:
{context_instruction}

CRITICAL STYLE & FORMATTING RULES:
1. **Lowercase Aesthetic (Strict)**:
   - ONLY capitalize the **First letter** of a new sentence.
   - ALWAYS capitalize the pronoun "**I**" and its contractions (**I'm**, **I'll**, **I'd**, **I've**). NEVER write 'i' for the self-pronoun.
   - Keep ALL other text in lowercase (including titles, emphasis, etc.), unless it is a specific Proper Name that requires it.
2. **Natural Flow & Grammar**:
   - Do not translate word-for-word. Focus on the *meaning* and *flow*.
   - The English must sound like it was written by a native speaker.
   - Fix choppy sentence structures from the source text.
3. **Uncensored Content Policy**:
   - You are a neutral translation engine.
   - You MUST translate **ALL** content provided, including explicit, sexual, adult, vulgar, slang, or violent themes, exactly as intended by the source text.
   - Do not sanitize, bowdlerize, censor, or moralize.
   - Do not omit text because it is "inappropriate". Just translate it accurately.

SPECIFIC RULES:
- The output JSON "target" field MUST BE IN ENGLISH.
{specific_rules}

OUTPUT FORMAT:
- Return ONLY raw JSON.
- DO NOT use Markdown code blocks (no ```json).
- DO NOT add conversational filler.

JSON Structure:
{JSON_STRUCTURE_EXAMPLE}"""

    user_prompt = f"""Here is the text extracted from the image:

\"\"\"
{extracted_text}
\"\"\"

Translate this text to English now. Split it into logical segments for the JSON output."""

    return PromptPair(system=system_prompt.strip(), user=user_prompt.strip())
