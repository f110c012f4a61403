"""
Review Aggregator.

Joins tokens against the lexicon and computes per-review mean and median
sentiment. Works on partial aggregates so that chunks of the token stream
can be aggregated independently and merged.
"""

import logging
from collections import defaultdict
from statistics import mean, median
from typing import Dict, Iterable, List, Tuple

from src.lexicon.lexicon import Lexicon
from src.models.summary import ReviewSentiment
from src.models.token import TokenRecord

logger = logging.getLogger(__name__)

# (review_id, rating) -> matched polarity scores
ReviewPartial = Dict[Tuple[int, int], List[float]]


class ReviewAggregator:
    """
    Groups tokens by (review_id, rating) and summarizes lexicon matches.

    Inner-join semantics: tokens absent from the lexicon are dropped, and
    a review with no matches produces no row at all.
    """

    def __init__(self, lexicon: Lexicon):
        self.lexicon = lexicon

    def partial(self, tokens: Iterable[TokenRecord]) -> ReviewPartial:
        """
        Collect matched scores per review for one chunk of the token stream.
        """
        scores: ReviewPartial = defaultdict(list)
        for record in tokens:
            score = self.lexicon.get(record.token)
            if score is None:
                continue
            scores[(record.review_id, record.rating)].append(score)
        return dict(scores)

    @staticmethod
    def merge(partials: Iterable[ReviewPartial]) -> ReviewPartial:
        """Concatenate score lists per review across chunks."""
        merged: ReviewPartial = defaultdict(list)
        for part in partials:
            for key, scores in part.items():
                merged[key].extend(scores)
        return dict(merged)

    @staticmethod
    def summarize(partial: ReviewPartial) -> List[ReviewSentiment]:
        """
        Compute mean and median sentiment per review.

        Scores are sorted first so the floating-point mean does not depend
        on the order chunks were merged in.

        Returns:
            One ReviewSentiment per review with at least one match, by review_id
        """
        rows = []
        for (review_id, rating), scores in sorted(partial.items()):
            if not scores:
                continue
            ordered = sorted(scores)
            rows.append(ReviewSentiment(
                review_id=review_id,
                rating=rating,
                mean_sentiment=mean(ordered),
                median_sentiment=median(ordered),
                matched_tokens=len(ordered)
            ))
        return rows

    def aggregate(self, tokens: Iterable[TokenRecord]) -> List[ReviewSentiment]:
        """Single-pass aggregation over a whole token stream."""
        rows = self.summarize(self.partial(tokens))
        logger.info(f"Computed sentiment for {len(rows)} reviews")
        return rows
