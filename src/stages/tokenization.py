"""
Tokenizer / Stopword Filter.

Expands cleaned reviews into a lazy stream of (review_id, rating, token)
records with stopwords removed.
"""

import logging
from typing import FrozenSet, Iterable, Iterator, List

import nltk
from nltk.tokenize import RegexpTokenizer

from src.errors import MissingResourceError
from src.models.review import Review
from src.models.token import TokenRecord

logger = logging.getLogger(__name__)

DEFAULT_TOKEN_PATTERN = r"\w+(?:'\w+)?"


def _ensure_stopwords():
    """Make sure the nltk stopword corpus is available."""
    try:
        nltk.data.find("corpora/stopwords")
    except LookupError:
        logger.info("Downloading nltk stopwords corpus")
        nltk.download("stopwords", quiet=True)


def load_stopwords(language: str = "english", extra: Iterable[str] = ()) -> FrozenSet[str]:
    """
    Load the nltk stopword list for a language.

    Args:
        language: nltk stopword corpus file id
        extra: Additional words to treat as stopwords

    Raises:
        MissingResourceError: If the corpus cannot be found or downloaded
    """
    try:
        _ensure_stopwords()
        from nltk.corpus import stopwords
        words = stopwords.words(language)
    except (LookupError, OSError) as e:
        raise MissingResourceError(f"Could not load '{language}' stopwords: {e}") from e

    result = frozenset(w.lower() for w in words) | frozenset(w.lower() for w in extra)
    logger.info(f"Loaded {len(result)} stopwords ({language})")
    return result


class Tokenizer:
    """
    Lower-cases text, splits on word boundaries and drops stopwords.
    Punctuation is stripped: "heart-warming" yields "heart", "warming".
    """

    def __init__(self, stopwords: Iterable[str], pattern: str = DEFAULT_TOKEN_PATTERN):
        self.stopwords = frozenset(stopwords)
        self.pattern = pattern
        self._tokenizer = RegexpTokenizer(pattern)

    def tokenize(self, text: str) -> List[str]:
        """Split one text into non-stopword tokens, in order of appearance."""
        if not text:
            return []
        return [
            token for token in self._tokenizer.tokenize(text.lower())
            if token not in self.stopwords
        ]

    def stream(self, reviews: Iterable[Review]) -> Iterator[TokenRecord]:
        """
        Lazily yield one TokenRecord per surviving word occurrence.
        Only review_id and rating are carried forward.
        """
        for review in reviews:
            for token in self.tokenize(review.text):
                yield TokenRecord(
                    review_id=review.review_id,
                    rating=review.rating,
                    token=token
                )
