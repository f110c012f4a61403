"""
Word Aggregator.

Per-word usage statistics: how many reviews use a word, how often, and
the average star rating of those uses.
"""

import logging
from dataclasses import dataclass, field
from typing import Dict, Iterable, List, Set

from src.lexicon.lexicon import Lexicon
from src.models.summary import WordSummary
from src.models.token import TokenRecord

logger = logging.getLogger(__name__)


@dataclass
class WordTally:
    """Running counts for one token within a partial aggregate."""
    review_ids: Set[int] = field(default_factory=set)
    total_uses: int = 0
    rating_sum: int = 0


WordPartial = Dict[str, WordTally]


class WordAggregator:
    """
    Groups tokens by word and keeps words used in at least min_support
    distinct reviews.

    mean_rating is weighted by occurrence: a word used five times in one
    review counts that review's rating five times.
    """

    def __init__(self, min_support: int = 3):
        """
        Args:
            min_support: Minimum number of distinct reviews per emitted word
        """
        if min_support < 1:
            raise ValueError(f"min_support must be >= 1, got {min_support}")
        self.min_support = min_support

    @staticmethod
    def partial(tokens: Iterable[TokenRecord]) -> WordPartial:
        """Tally one chunk of the token stream."""
        tallies: WordPartial = {}
        for record in tokens:
            tally = tallies.get(record.token)
            if tally is None:
                tally = tallies[record.token] = WordTally()
            tally.review_ids.add(record.review_id)
            tally.total_uses += 1
            tally.rating_sum += record.rating
        return tallies

    @staticmethod
    def merge(partials: Iterable[WordPartial]) -> WordPartial:
        """Union review ids and sum counters per word across chunks."""
        merged: WordPartial = {}
        for part in partials:
            for token, tally in part.items():
                target = merged.get(token)
                if target is None:
                    target = merged[token] = WordTally()
                target.review_ids |= tally.review_ids
                target.total_uses += tally.total_uses
                target.rating_sum += tally.rating_sum
        return merged

    def summarize(self, partial: WordPartial) -> List[WordSummary]:
        """
        Build word rows filtered to review_support >= min_support.

        Returns:
            WordSummary rows sorted by support (descending), then token
        """
        rows = [
            WordSummary(
                token=token,
                review_support=len(tally.review_ids),
                total_uses=tally.total_uses,
                mean_rating=tally.rating_sum / tally.total_uses
            )
            for token, tally in partial.items()
            if len(tally.review_ids) >= self.min_support
        ]
        rows.sort(key=lambda r: (-r.review_support, r.token))
        return rows

    def aggregate(self, tokens: Iterable[TokenRecord]) -> List[WordSummary]:
        """Single-pass aggregation over a whole token stream."""
        partial = self.partial(tokens)
        rows = self.summarize(partial)
        logger.info(
            f"Summarized {len(rows)} of {len(partial)} distinct words "
            f"(min_support={self.min_support})"
        )
        return rows

    @staticmethod
    def join_lexicon(summaries: Iterable[WordSummary], lexicon: Lexicon) -> List[WordSummary]:
        """
        Inner-join word rows with the lexicon.

        Words absent from the lexicon are left out of this view only.
        """
        joined = []
        for row in summaries:
            score = lexicon.get(row.token)
            if score is None:
                continue
            joined.append(WordSummary(
                token=row.token,
                review_support=row.review_support,
                total_uses=row.total_uses,
                mean_rating=row.mean_rating,
                polarity_score=score
            ))
        logger.info(f"{len(joined)} summarized words found in lexicon")
        return joined
