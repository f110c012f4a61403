"""
Language detection utility.

Thin wrapper around langdetect. The classifier is best-effort and known to
be imprecise on short texts; callers treat its answer as a hint only.
"""

import logging
from typing import Optional

from langdetect import DetectorFactory, detect
from langdetect.lang_detect_exception import LangDetectException

logger = logging.getLogger(__name__)

UNKNOWN_LANGUAGE = "unknown"

# ISO 639-1 codes returned by langdetect -> language names used in scraped data
LANGUAGE_NAMES = {
    "en": "english",
    "es": "spanish",
    "fr": "french",
    "de": "german",
    "it": "italian",
    "pt": "portuguese",
    "nl": "dutch",
    "sv": "swedish",
    "da": "danish",
    "no": "norwegian",
    "fi": "finnish",
    "pl": "polish",
    "ru": "russian",
    "tr": "turkish",
    "ar": "arabic",
    "id": "indonesian",
    "ja": "japanese",
    "ko": "korean",
    "zh-cn": "chinese",
    "zh-tw": "chinese",
}


def normalize_language_tag(tag: Optional[str]) -> str:
    """
    Map a language tag to a lower-case language name.

    Accepts either ISO codes ("en") or names ("English").
    Unrecognised tags are returned lower-cased.
    """
    if not tag or not isinstance(tag, str):
        return UNKNOWN_LANGUAGE
    key = tag.strip().lower()
    return LANGUAGE_NAMES.get(key, key)


class LanguageDetector:
    """
    Best-guess language tag per text, backed by langdetect.
    """

    def __init__(self, seed: int = 0):
        """
        Args:
            seed: Seed for langdetect's sampling (fixed for reproducible runs)
        """
        self.seed = seed
        DetectorFactory.seed = seed
        logger.info(f"Initialized LanguageDetector with seed={seed}")

    def detect(self, text: str) -> str:
        """
        Detect the language of a text.

        Returns:
            Language name (e.g. "english"), or "unknown" if undetectable
        """
        if not text or not text.strip():
            return UNKNOWN_LANGUAGE
        try:
            return normalize_language_tag(detect(text))
        except LangDetectException as e:
            logger.debug(f"Language detection failed: {e}")
            return UNKNOWN_LANGUAGE
