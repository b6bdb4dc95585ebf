"""
Data structures shared by the translation pipeline and the batch orchestrator.

Items and results are immutable: every change to a batch item is a whole-item
replace built with ``dataclasses.replace``.
"""

import base64
import time
import uuid
from dataclasses import dataclass, field, replace
from enum import Enum
from typing import Any, Dict, List, Optional, Tuple


class SourceLanguage(Enum):
    """Source language hint selected by the user"""
    KOREAN = "Korean"
    SPANISH = "Spanish"
    AUTO = "auto"

    @classmethod
    def from_value(cls, value: str) -> 'SourceLanguage':
        """Parse a language hint ('korean', 'Spanish', 'auto', 'Auto-Detect'...)"""
        normalized = (value or "").strip().lower()
        if normalized in ("", "auto", "auto-detect", "autodetect"):
            return cls.AUTO
        for language in cls:
            if language.value.lower() == normalized or language.name.lower() == normalized:
                return language
        raise ValueError(f"Unsupported source language: {value}")

    @property
    def is_auto(self) -> bool:
        return self is SourceLanguage.AUTO

    @classmethod
    def supported(cls) -> List[str]:
        """Concrete languages the prompts know about"""
        return [language.value for language in cls if language is not cls.AUTO]


class ModelProvider(Enum):
    """Translation provider selection"""
    GEMINI = "gemini"
    CLAUDE = "claude"

    @classmethod
    def from_value(cls, value: str) -> 'ModelProvider':
        normalized = (value or "").strip().lower()
        for provider in cls:
            if provider.value == normalized or provider.name.lower() == normalized:
                return provider
        raise ValueError(f"Unsupported provider: {value}")

    @property
    def display_name(self) -> str:
        return {
            ModelProvider.GEMINI: "Gemini 3.0 Pro",
            ModelProvider.CLAUDE: "Claude Sonnet",
        }[self]


class ItemStatus(Enum):
    """Lifecycle of a batch item"""
    IDLE = "idle"
    ANALYZING = "analyzing"
    SUCCESS = "success"
    ERROR = "error"


@dataclass(frozen=True)
class ImagePayload:
    """Image bytes accepted for translation"""
    filename: str
    data: bytes
    mime_type: str

    @property
    def base64_data(self) -> str:
        """Base64 encoding used by the provider wire formats"""
        return base64.b64encode(self.data).decode("ascii")

    @property
    def size(self) -> int:
        return len(self.data)


@dataclass(frozen=True)
class Segment:
    """One source/target pair, in reading order"""
    source: str
    target: str

    def to_dict(self) -> Dict[str, str]:
        return {"source": self.source, "target": self.target}


@dataclass(frozen=True)
class TranslationResult:
    """Parsed and normalized translation of one image"""
    detected_language: str
    segments: Tuple[Segment, ...] = ()

    @classmethod
    def empty(cls) -> 'TranslationResult':
        """Result for an image without any text"""
        return cls(detected_language="Unknown", segments=())

    def to_dict(self) -> Dict[str, Any]:
        return {
            "detectedLanguage": self.detected_language,
            "segments": [segment.to_dict() for segment in self.segments],
        }


@dataclass(frozen=True)
class BatchItem:
    """
    One uploaded image and its translation state.

    Exactly one of ``result``/``error`` is set once the item leaves
    IDLE/ANALYZING: ``result`` for SUCCESS, ``error`` for ERROR.
    """
    image: ImagePayload
    id: str = field(default_factory=lambda: uuid.uuid4().hex)
    status: ItemStatus = ItemStatus.IDLE
    result: Optional[TranslationResult] = None
    error: Optional[str] = None
    provider: Optional[ModelProvider] = None
    language: SourceLanguage = SourceLanguage.AUTO
    attempt: int = 0
    created_at: float = field(default_factory=time.time)

    @property
    def filename(self) -> str:
        return self.image.filename

    def start_attempt(self, provider: ModelProvider,
                      language: Optional[SourceLanguage] = None) -> 'BatchItem':
        """Transition into ANALYZING for a new attempt"""
        return replace(
            self,
            status=ItemStatus.ANALYZING,
            result=None,
            error=None,
            provider=provider,
            language=language or self.language,
            attempt=self.attempt + 1,
        )

    def succeed(self, result: TranslationResult) -> 'BatchItem':
        return replace(self, status=ItemStatus.SUCCESS, result=result, error=None)

    def fail(self, message: str) -> 'BatchItem':
        return replace(self, status=ItemStatus.ERROR, result=None, error=message)

    def to_dict(self) -> Dict[str, Any]:
        """JSON-friendly snapshot (image bytes are never included)"""
        return {
            "id": self.id,
            "filename": self.image.filename,
            "mime_type": self.image.mime_type,
            "size": self.image.size,
            "status": self.status.value,
            "result": self.result.to_dict() if self.result else None,
            "error": self.error,
            "provider": self.provider.value if self.provider else None,
            "language": self.language.value,
            "attempt": self.attempt,
            "created_at": self.created_at,
        }
