"""
Descriptive statistics over the cleaned corpus and the aggregator outputs.

Produces the numbers a report or chart needs: corpus profile, sentiment by
star rating, and rating/sentiment correlations.
"""

import logging
from typing import Dict, Iterable, List, Optional

import pandas as pd

from src.models.review import Review
from src.models.summary import ReviewSentiment, WordSummary

logger = logging.getLogger(__name__)

RATINGS = [1, 2, 3, 4, 5]


def _to_float(value) -> Optional[float]:
    """NaN-safe float for JSON metadata."""
    if value is None or pd.isna(value):
        return None
    return float(value)


def describe_corpus(reviews: Iterable[Review]) -> Dict:
    """
    Profile a batch of cleaned reviews.

    Returns:
        Dict with review/book counts, rating distribution (1-5, zero-filled)
        and a text length summary in characters
    """
    df = pd.DataFrame(
        [{"book": r.book, "rating": r.rating, "length": len(r.text)} for r in reviews],
        columns=["book", "rating", "length"]
    )

    rating_counts = df["rating"].value_counts().reindex(RATINGS, fill_value=0)
    lengths = df["length"]

    profile = {
        "reviews": int(len(df)),
        "books": int(df["book"].nunique()),
        "rating_distribution": {int(k): int(v) for k, v in rating_counts.items()},
        "length": {
            "mean": _to_float(lengths.mean()),
            "median": _to_float(lengths.median()),
            "p90": _to_float(lengths.quantile(0.90)) if len(df) else None,
            "p99": _to_float(lengths.quantile(0.99)) if len(df) else None,
            "max": int(lengths.max()) if len(df) else None
        }
    }
    logger.info(
        f"Corpus: {profile['reviews']} reviews of {profile['books']} books, "
        f"median length {profile['length']['median']}"
    )
    return profile


def sentiment_by_rating(summaries: Iterable[ReviewSentiment]) -> pd.DataFrame:
    """
    Aggregate review sentiment per star rating.

    Returns columns: rating, reviews, mean_of_mean, median_of_mean,
    mean_of_median, median_of_median
    """
    df = pd.DataFrame(
        [s.to_dict() for s in summaries],
        columns=["review_id", "rating", "mean_sentiment", "median_sentiment", "matched_tokens"]
    )
    if df.empty:
        return pd.DataFrame(columns=[
            "rating", "reviews", "mean_of_mean", "median_of_mean",
            "mean_of_median", "median_of_median"
        ])

    summ = (
        df.groupby("rating")
          .agg(
              reviews=("review_id", "count"),
              mean_of_mean=("mean_sentiment", "mean"),
              median_of_mean=("mean_sentiment", "median"),
              mean_of_median=("median_sentiment", "mean"),
              median_of_median=("median_sentiment", "median")
          )
          .reset_index()
          .sort_values("rating")
    )
    return summ


def _correlations(x: pd.Series, y: pd.Series) -> Dict[str, Optional[float]]:
    # Undefined with fewer than two points or a constant column
    if len(x) < 2 or x.nunique() < 2 or y.nunique() < 2:
        return {"pearson": None, "spearman": None}
    # Spearman as Pearson over average ranks; pandas' method="spearman" needs scipy
    return {
        "pearson": _to_float(x.corr(y, method="pearson")),
        "spearman": _to_float(x.rank().corr(y.rank(), method="pearson"))
    }


def rating_sentiment_correlation(summaries: Iterable[ReviewSentiment]) -> Dict:
    """
    Correlation of star rating with mean and with median review sentiment.
    """
    rows: List[ReviewSentiment] = list(summaries)
    rating = pd.Series([s.rating for s in rows], dtype=float)
    return {
        "mean_sentiment": _correlations(
            rating, pd.Series([s.mean_sentiment for s in rows], dtype=float)
        ),
        "median_sentiment": _correlations(
            rating, pd.Series([s.median_sentiment for s in rows], dtype=float)
        ),
        "reviews": len(rows)
    }


def word_polarity_correlation(joined: Iterable[WordSummary]) -> Dict:
    """
    Correlation of a word's mean rating with its lexicon polarity.
    Only rows from the lexicon-joined view carry a polarity score.
    """
    rows = [w for w in joined if w.polarity_score is not None]
    result = _correlations(
        pd.Series([w.mean_rating for w in rows], dtype=float),
        pd.Series([w.polarity_score for w in rows], dtype=float)
    )
    result["words"] = len(rows)
    return result
