"""
Record Filter.

Drops scraped records that are not usable for sentiment analysis:
wrong language, malformed rating label, or text outside length bounds.
Excluded records are counted, never raised.
"""

import logging
from collections import Counter
from typing import Iterable, Optional

from src.models.review import RatingLabel, RawReview, Review
from src.models.summary import FilterReport
from src.utils.language import normalize_language_tag

logger = logging.getLogger(__name__)

# Exclusion reasons
REASON_LANGUAGE = "language"
REASON_RATING_LABEL = "rating_label"
REASON_TOO_SHORT = "too_short"
REASON_TOO_LONG = "too_long"


class RecordFilter:
    """
    Per-record validity filter for raw reviews.

    Checks, in order:
    1. Rating label is one of the five canonical labels
    2. Text has at least min_length characters
    3. Language tag matches the target language
    """

    def __init__(
        self,
        detector=None,
        target_language: str = "english",
        min_length: int = 5
    ):
        """
        Initialize record filter.

        Args:
            detector: Object with detect(text) -> tag, used when a record
                      carries no language tag
            target_language: Language to keep (name or ISO code)
            min_length: Minimum stripped text length in characters
        """
        self.detector = detector
        self.target_language = normalize_language_tag(target_language)
        self.min_length = min_length

    def apply(self, records: Iterable[RawReview]) -> FilterReport:
        """
        Filter a batch of raw reviews.

        Returns:
            FilterReport with kept records and per-reason exclusion counts
        """
        kept = []
        excluded = Counter()

        for record in records:
            reason = self.rejection_reason(record)
            if reason:
                excluded[reason] += 1
            else:
                kept.append(record)

        report = FilterReport(kept=kept, excluded=dict(excluded))
        logger.info(
            f"Record filter kept {len(kept)} reviews, "
            f"excluded {report.total_excluded} {dict(excluded)}"
        )
        return report

    def rejection_reason(self, record: RawReview) -> Optional[str]:
        """Return why a record is excluded, or None if it is kept."""
        if RatingLabel.parse(record.rating) is None:
            return REASON_RATING_LABEL

        text = record.text if isinstance(record.text, str) else ""
        if len(text.strip()) < self.min_length:
            return REASON_TOO_SHORT

        if self._language_of(record) != self.target_language:
            return REASON_LANGUAGE

        return None

    def _language_of(self, record: RawReview) -> str:
        # Prefer the scraper's tag; detect only when it is missing
        if record.language:
            return normalize_language_tag(record.language)
        if self.detector is None:
            raise ValueError(
                f"Review {record.review_id} has no language tag and no detector was provided"
            )
        return normalize_language_tag(self.detector.detect(record.text))


def apply_length_cutoff(
    reviews: Iterable[Review],
    max_length: Optional[int] = 8000
) -> FilterReport:
    """
    Drop outlier-length reviews.

    Dataset-level policy applied once the length distribution is known,
    separately from the per-record filter.

    Args:
        reviews: Cleaned reviews
        max_length: Maximum text length in characters (None disables the cutoff)
    """
    reviews = list(reviews)
    if max_length is None:
        return FilterReport(kept=reviews, excluded={})

    kept = [r for r in reviews if len(r.text) <= max_length]
    dropped = len(reviews) - len(kept)
    if dropped:
        logger.info(f"Length cutoff ({max_length} chars) dropped {dropped} reviews")

    return FilterReport(
        kept=kept,
        excluded={REASON_TOO_LONG: dropped} if dropped else {}
    )
