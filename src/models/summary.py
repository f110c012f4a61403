"""
Summary data models.

Output rows of the review and word aggregators.
"""

from dataclasses import dataclass, asdict, field
from typing import Dict, List, Optional


@dataclass(frozen=True)
class ReviewSentiment:
    """
    Sentiment of a single review, computed over its lexicon matches only.
    A review without lexicon matches has no ReviewSentiment at all.
    """
    review_id: int
    rating: int
    mean_sentiment: float
    median_sentiment: float
    matched_tokens: int  # Number of lexicon hits behind the statistics

    def to_dict(self) -> dict:
        return asdict(self)


@dataclass(frozen=True)
class WordSummary:
    """
    Usage of one token across the corpus.
    polarity_score is only populated in the lexicon-joined view.
    """
    token: str
    review_support: int  # Distinct reviews containing the token
    total_uses: int  # Occurrences across all reviews
    mean_rating: float  # Occurrence-weighted mean star rating
    polarity_score: Optional[float] = None

    def __post_init__(self):
        if self.total_uses < self.review_support:
            raise ValueError(
                f"total_uses ({self.total_uses}) < review_support "
                f"({self.review_support}) for token '{self.token}'"
            )

    def to_dict(self) -> dict:
        return asdict(self)


@dataclass
class FilterReport:
    """
    Records kept by a filtering pass, plus excluded counts per reason.
    """
    kept: List = field(default_factory=list)
    excluded: Dict[str, int] = field(default_factory=dict)

    @property
    def total_excluded(self) -> int:
        return sum(self.excluded.values())
