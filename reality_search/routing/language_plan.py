"""Upstream language hints.

An explicit hint from Brave's `search_lang` list is forwarded as is. "all"
(or "any", "default") leaves each provider on its own default. Anything else
(no hint, "auto", unknown codes) is inferred from the normalized query, and
falls back to English when the query language is not one Brave supports.
"""
from __future__ import annotations

from typing import Dict, Optional

from ..models import LanguagePlan
from ..utils.lang import detect_lang

# Brave `search_lang` values -> Google `hl` values
BRAVE_TO_GOOGLE_HL: Dict[str, str] = {
    "ar": "ar",
    "eu": "eu",
    "bn": "bn",
    "bg": "bg",
    "ca": "ca",
    "zh-hans": "zh-CN",
    "zh-hant": "zh-TW",
    "hr": "hr",
    "cs": "cs",
    "da": "da",
    "nl": "nl",
    "en": "en",
    "en-gb": "en-GB",
    "et": "et",
    "fi": "fi",
    "fr": "fr",
    "gl": "gl",
    "de": "de",
    "el": "el",
    "gu": "gu",
    "he": "iw",
    "hi": "hi",
    "hu": "hu",
    "is": "is",
    "it": "it",
    "jp": "ja",
    "kn": "kn",
    "ko": "ko",
    "lv": "lv",
    "lt": "lt",
    "ms": "ms",
    "ml": "ml",
    "mr": "mr",
    "nb": "no",
    "pl": "pl",
    "pt-br": "pt-BR",
    "pt-pt": "pt-PT",
    "pa": "pa",
    "ro": "ro",
    "ru": "ru",
    "sr": "sr",
    "sk": "sk",
    "sl": "sl",
    "es": "es",
    "sv": "sv",
    "ta": "ta",
    "te": "te",
    "th": "th",
    "tr": "tr",
    "uk": "uk",
    "vi": "vi",
}

# Detector codes that differ from Brave's `search_lang` values
DETECTED_TO_BRAVE: Dict[str, str] = {
    "ja": "jp",
    "zh-cn": "zh-hans",
    "zh-tw": "zh-hant",
    "no": "nb",
    "pt": "pt-br",
}

DEFAULT_SEARCH_LANG = "en"
NO_LANGUAGE = "none"

SOURCE_EXPLICIT = "explicit"
SOURCE_PROVIDER_DEFAULT = "provider_default"
SOURCE_INFERRED = "inferred_from_query"
SOURCE_FALLBACK_EN = "fallback_en"

ALL_LANGUAGE_ALIASES = frozenset({"all", "any", "default"})


def is_brave_search_lang(value: str) -> bool:
    return value in BRAVE_TO_GOOGLE_HL


def infer_search_lang(normalized_query: str) -> Optional[str]:
    """Brave `search_lang` for the detected query language, if Brave has one."""
    detected = detect_lang(normalized_query)
    candidate = DETECTED_TO_BRAVE.get(detected, detected)
    return candidate if is_brave_search_lang(candidate) else None


def _forwarded(search_lang: str, source: str, lang_hint: Optional[str] = None) -> LanguagePlan:
    return LanguagePlan(
        lang_hint=lang_hint,
        search_lang=search_lang,
        search_lang_source=source,
        brave_search_lang=search_lang,
        google_hl=BRAVE_TO_GOOGLE_HL[search_lang],
    )


def resolve_language_plan(normalized_query: str, raw_lang_hint: Optional[str]) -> LanguagePlan:
    """Decide which language parameters (if any) go upstream."""
    lang = (raw_lang_hint or "").strip().lower()

    if lang in ALL_LANGUAGE_ALIASES:
        return LanguagePlan(
            lang_hint="all",
            search_lang=NO_LANGUAGE,
            search_lang_source=SOURCE_PROVIDER_DEFAULT,
            brave_search_lang=None,
            google_hl=None,
        )

    if lang and is_brave_search_lang(lang):
        return _forwarded(lang, SOURCE_EXPLICIT, lang_hint=lang)

    inferred = infer_search_lang(normalized_query)
    if inferred:
        return _forwarded(inferred, SOURCE_INFERRED)
    return _forwarded(DEFAULT_SEARCH_LANG, SOURCE_FALLBACK_EN)
