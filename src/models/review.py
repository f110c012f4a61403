"""
Review data models.

RawReview is a record as delivered by the upstream scraper.
Review is the cleaned record that enters tokenization.
"""

from dataclasses import dataclass
from enum import Enum
from typing import Optional


class RatingLabel(Enum):
    """
    Goodreads star-rating labels in increasing sentiment order.
    The enum value is the ordinal 1-5 rating.
    """
    DID_NOT_LIKE_IT = 1
    IT_WAS_OK = 2
    LIKED_IT = 3
    REALLY_LIKED_IT = 4
    IT_WAS_AMAZING = 5

    @property
    def text(self) -> str:
        """Label as it appears in scraped data (e.g. "really liked it")."""
        return self.name.lower().replace("_", " ")

    @classmethod
    def parse(cls, label: str) -> Optional["RatingLabel"]:
        """Match a scraped label, ignoring case and surrounding whitespace."""
        if not isinstance(label, str):
            return None
        key = " ".join(label.strip().lower().split())
        for member in cls:
            if member.text == key:
                return member
        return None


@dataclass(frozen=True)
class RawReview:
    """
    Review as scraped. Rating is still a label and may be malformed.
    """
    review_id: int  # Unique identifier for the review
    book: str
    rating: str  # Label, e.g. "it was amazing"
    text: str
    language: Optional[str] = None  # Detected tag; recomputed when absent
    author: Optional[str] = None


@dataclass(frozen=True)
class Review:
    """
    Cleaned review: English, canonical rating, length within bounds.
    """
    review_id: int
    book: str
    rating: int  # 1-5 star rating
    text: str
    author: Optional[str] = None

    def __post_init__(self):
        # Validate rating
        if not (1 <= self.rating <= 5):
            raise ValueError(f"Invalid rating: {self.rating}. Must be 1-5")
