"""Result language detection backed by langdetect."""
from __future__ import annotations

import logging

from langdetect import DetectorFactory, detect
from langdetect.lang_detect_exception import LangDetectException

logger = logging.getLogger(__name__)

UNKNOWN = "unknown"
DEFAULT_MIN_LENGTH = 10

# langdetect is probabilistic; a fixed seed makes repeated detections agree
DetectorFactory.seed = 0


def detect_lang(text: str, min_length: int = DEFAULT_MIN_LENGTH) -> str:
    """Language code of *text* ("en", "fr", "zh-cn", ...) or "unknown"."""
    value = (text or "").strip()
    if len(value) < min_length:
        return UNKNOWN

    try:
        return detect(value) or UNKNOWN
    except LangDetectException:
        # Raised for text without detectable features (digits, punctuation, ...)
        logger.debug(f"Language undetectable for text of length {len(value)}")
        return UNKNOWN
