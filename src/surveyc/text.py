"""
Text Resolver

Turns a localizable text field into the single string shown for the
active language. Resolution order:

    1. Plain text is returned verbatim
    2. The active language, if present and non-empty
    3. The default language, if present and non-empty
    4. The first non-empty translation, in stored order
    5. The empty string

The resolver is total: a missing translation is never an error.
"""

from typing import Any, Mapping

from surveyc.model import LocalizedText, PlainText


LANGUAGE_NAMES = {
    "en": "English",
    "es": "Spanish",
    "fr": "French",
    "de": "German",
    "it": "Italian",
    "pt": "Portuguese",
    "ru": "Russian",
    "zh": "Chinese",
    "ja": "Japanese",
    "ko": "Korean",
    "ar": "Arabic",
    "hi": "Hindi",
    "nl": "Dutch",
    "sv": "Swedish",
    "no": "Norwegian",
    "da": "Danish",
    "fi": "Finnish",
    "pl": "Polish",
    "tr": "Turkish",
    "he": "Hebrew",
}


def language_name(code: str) -> str:
    """Display name for a language code, e.g. 'fr' -> 'French'."""
    return LANGUAGE_NAMES.get(code, code.upper())


def _resolve_mapping(translations: Mapping[str, Any], active_language: str, default_language: str) -> str:
    for lang in (active_language, default_language):
        value = translations.get(lang)
        if value:
            return str(value)
    for value in translations.values():
        if value:
            return str(value)
    return ""


def resolve_text(field: Any, active_language: str, default_language: str) -> str:
    """
    Resolve a localizable field for display.

    Args:
        field: PlainText, LocalizedText, a raw str, a raw mapping or None
        active_language: Language currently selected by the respondent
        default_language: Survey default language

    Returns:
        The display string ("" when nothing matches)
    """
    if field is None:
        return ""
    if isinstance(field, PlainText):
        return field.value
    if isinstance(field, str):
        return field
    if isinstance(field, LocalizedText):
        return _resolve_mapping(field.translations, active_language, default_language)
    if isinstance(field, Mapping):
        return _resolve_mapping(field, active_language, default_language)
    return ""
