"""
Unit tests for descriptive statistics.
"""

import pytest
from src.models.review import Review
from src.models.summary import ReviewSentiment, WordSummary
from src.stages.statistics import (
    describe_corpus,
    rating_sentiment_correlation,
    sentiment_by_rating,
    word_polarity_correlation,
)


def _sentiment(review_id, rating, mean, median):
    return ReviewSentiment(review_id, rating, mean, median, matched_tokens=1)


def test_describe_corpus():
    reviews = [
        Review(1, "Dune", 5, "x" * 10),
        Review(2, "Dune", 5, "x" * 20),
        Review(3, "Emma", 2, "x" * 30),
    ]

    profile = describe_corpus(reviews)

    assert profile["reviews"] == 3
    assert profile["books"] == 2
    assert profile["rating_distribution"] == {1: 0, 2: 1, 3: 0, 4: 0, 5: 2}
    assert profile["length"]["median"] == 20.0
    assert profile["length"]["mean"] == 20.0
    assert profile["length"]["max"] == 30


def test_describe_empty_corpus():
    profile = describe_corpus([])

    assert profile["reviews"] == 0
    assert profile["rating_distribution"] == {1: 0, 2: 0, 3: 0, 4: 0, 5: 0}
    assert profile["length"]["median"] is None
    assert profile["length"]["max"] is None


def test_sentiment_by_rating():
    summaries = [
        _sentiment(1, 5, 3.0, 3.0),
        _sentiment(2, 5, 1.0, 2.0),
        _sentiment(3, 1, -2.0, -3.0),
    ]

    table = sentiment_by_rating(summaries)

    assert list(table["rating"]) == [1, 5]
    five = table[table["rating"] == 5].iloc[0]
    assert five["reviews"] == 2
    assert five["mean_of_mean"] == pytest.approx(2.0)
    assert five["mean_of_median"] == pytest.approx(2.5)


def test_sentiment_by_rating_empty():
    table = sentiment_by_rating([])
    assert table.empty
    assert "median_of_median" in table.columns


def test_rating_sentiment_correlation_positive():
    summaries = [
        _sentiment(1, 1, -3.0, -3.0),
        _sentiment(2, 3, 0.0, 0.0),
        _sentiment(3, 5, 3.0, 3.0),
    ]

    result = rating_sentiment_correlation(summaries)

    assert result["reviews"] == 3
    assert result["mean_sentiment"]["pearson"] == pytest.approx(1.0)
    assert result["median_sentiment"]["spearman"] == pytest.approx(1.0)


def test_spearman_is_rank_based():
    """Monotonic but non-linear: rank correlation is exact, linear is not."""
    summaries = [
        _sentiment(1, 1, -3.0, -3.0),
        _sentiment(2, 2, -2.9, -2.9),
        _sentiment(3, 3, -2.8, -2.8),
        _sentiment(4, 4, 0.0, 0.0),
        _sentiment(5, 5, 3.0, 3.0),
    ]

    result = rating_sentiment_correlation(summaries)

    assert result["mean_sentiment"]["spearman"] == pytest.approx(1.0)
    assert result["mean_sentiment"]["pearson"] < 0.95


def test_spearman_averages_tied_ranks():
    summaries = [
        _sentiment(1, 1, -1.0, -1.0),
        _sentiment(2, 1, -2.0, -2.0),
        _sentiment(3, 5, 2.0, 2.0),
        _sentiment(4, 5, 3.0, 3.0),
    ]

    result = rating_sentiment_correlation(summaries)

    assert result["mean_sentiment"]["spearman"] == pytest.approx(4 / 20 ** 0.5)


def test_correlation_undefined_for_too_few_rows():
    result = rating_sentiment_correlation([_sentiment(1, 5, 3.0, 3.0)])
    assert result["mean_sentiment"] == {"pearson": None, "spearman": None}


def test_word_polarity_correlation_ignores_unjoined_rows():
    rows = [
        WordSummary("loved", 3, 3, 4.5, polarity_score=3.0),
        WordSummary("hated", 3, 4, 1.5, polarity_score=-3.0),
        WordSummary("ok", 4, 4, 3.0, polarity_score=0.0),
        WordSummary("book", 10, 12, 3.2),
    ]

    result = word_polarity_correlation(rows)

    assert result["words"] == 3
    assert result["pearson"] == pytest.approx(1.0)


# Run tests if executed directly
if __name__ == "__main__":
    pytest.main([__file__, "-v"])
