"""
Rating Normalizer.

Maps the five canonical rating labels onto the ordinal 1-5 scale.
"""

import logging
from typing import Iterable, List

from src.errors import UnknownRatingLabel
from src.models.review import RatingLabel, RawReview, Review

logger = logging.getLogger(__name__)


def normalize_rating(label: str) -> int:
    """
    Convert a rating label to its 1-5 ordinal.

    Raises:
        UnknownRatingLabel: If label is not one of the five canonical labels
    """
    member = RatingLabel.parse(label)
    if member is None:
        raise UnknownRatingLabel(label)
    return member.value


def normalize_reviews(records: Iterable[RawReview]) -> List[Review]:
    """
    Turn filtered raw records into cleaned reviews.

    The language tag is dropped here. Records are expected to have passed
    the Record Filter, so an unknown label is a contract violation and
    propagates as UnknownRatingLabel.
    """
    reviews = [
        Review(
            review_id=r.review_id,
            book=r.book,
            rating=normalize_rating(r.rating),
            text=r.text,
            author=r.author
        )
        for r in records
    ]
    logger.debug(f"Normalized ratings for {len(reviews)} reviews")
    return reviews
