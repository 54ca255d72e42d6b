"""
Localization support for generated content.
Handles the supported output languages and the language-to-voice table.
"""
from enum import Enum
from typing import Dict, List, Optional

from ..core.exceptions import ValidationError


class SupportedLanguage(str, Enum):
    """Languages content can be generated in."""
    KOREAN = "Korean"
    ENGLISH = "English"
    JAPANESE = "Japanese"
    SPANISH = "Spanish"
    CHINESE = "Chinese"


LANGUAGE_LABELS: Dict[SupportedLanguage, str] = {
    SupportedLanguage.KOREAN: "한국어 (KR)",
    SupportedLanguage.ENGLISH: "English (EN)",
    SupportedLanguage.JAPANESE: "日本語 (JP)",
    SupportedLanguage.SPANISH: "Español (ES)",
    SupportedLanguage.CHINESE: "中文 (CN)",
}

# Prebuilt narration voice per language
VOICE_TABLE: Dict[SupportedLanguage, str] = {
    SupportedLanguage.KOREAN: "nova",
    SupportedLanguage.ENGLISH: "alloy",
    SupportedLanguage.JAPANESE: "shimmer",
    SupportedLanguage.SPANISH: "coral",
    SupportedLanguage.CHINESE: "sage",
}

DEFAULT_VOICE = "alloy"

_ALIASES: Dict[str, SupportedLanguage] = {
    "ko": SupportedLanguage.KOREAN, "kr": SupportedLanguage.KOREAN, "korean": SupportedLanguage.KOREAN,
    "en": SupportedLanguage.ENGLISH, "english": SupportedLanguage.ENGLISH,
    "ja": SupportedLanguage.JAPANESE, "jp": SupportedLanguage.JAPANESE, "japanese": SupportedLanguage.JAPANESE,
    "es": SupportedLanguage.SPANISH, "spanish": SupportedLanguage.SPANISH,
    "zh": SupportedLanguage.CHINESE, "cn": SupportedLanguage.CHINESE, "chinese": SupportedLanguage.CHINESE,
}


def normalize_language(value: Optional[str]) -> SupportedLanguage:
    """Resolve a language name or code to a supported language."""
    if not value:
        raise ValidationError("Language is required")
    language = _ALIASES.get(value.strip().lower())
    if language is None:
        raise ValidationError(
            f"Unsupported language: {value}",
            {"supported": get_supported_languages()}
        )
    return language


def get_voice(language: str) -> str:
    """Deterministic language-to-voice mapping."""
    try:
        return VOICE_TABLE[normalize_language(language)]
    except ValidationError:
        return DEFAULT_VOICE


def get_supported_languages() -> List[str]:
    return [language.value for language in SupportedLanguage]
