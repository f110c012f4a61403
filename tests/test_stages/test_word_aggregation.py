"""
Unit tests for the Word Aggregator.
"""

import random

import pytest
from src.lexicon.lexicon import Lexicon
from src.models.token import TokenRecord
from src.stages.word_aggregation import WordAggregator


def _tokens(review_id, rating, words):
    return [TokenRecord(review_id, rating, w) for w in words]


@pytest.fixture
def tokens():
    return (
        _tokens(1, 5, ["loved", "heart", "warming", "book"])
        + _tokens(2, 1, ["hated", "boring", "terrible", "book"])
        + _tokens(3, 3, ["ok", "book"])
    )


def test_book_summary_at_threshold_one(tokens):
    rows = WordAggregator(min_support=1).aggregate(tokens)
    book = next(r for r in rows if r.token == "book")

    assert book.review_support == 3
    assert book.total_uses == 3
    assert book.mean_rating == 3.0
    assert book.polarity_score is None


def test_default_threshold_filters_rare_words(tokens):
    rows = WordAggregator().aggregate(tokens)
    assert [r.token for r in rows] == ["book"]


def test_support_invariant():
    rng = random.Random(7)
    vocab = ["a", "b", "c", "d", "e", "f"]
    stream = [
        TokenRecord(rid, rid % 5 + 1, rng.choice(vocab))
        for rid in range(1, 30)
        for _ in range(rng.randint(1, 8))
    ]

    for row in WordAggregator(min_support=3).aggregate(stream):
        assert row.review_support >= 3
        assert row.total_uses >= row.review_support
        assert 1 <= row.mean_rating <= 5


def test_mean_rating_is_occurrence_weighted():
    """A word repeated in one review counts that review's rating each time."""
    stream = _tokens(1, 5, ["wow"] * 4) + _tokens(2, 1, ["wow"])

    row = WordAggregator(min_support=1).aggregate(stream)[0]

    assert row.review_support == 2
    assert row.total_uses == 5
    assert row.mean_rating == pytest.approx(21 / 5)


def test_rows_sorted_by_support_then_token():
    stream = (
        _tokens(1, 5, ["zeta", "alpha", "beta"])
        + _tokens(2, 4, ["zeta", "beta"])
        + _tokens(3, 3, ["zeta"])
    )

    rows = WordAggregator(min_support=1).aggregate(stream)

    assert [r.token for r in rows] == ["zeta", "beta", "alpha"]


def test_invalid_min_support():
    with pytest.raises(ValueError):
        WordAggregator(min_support=0)


def test_join_lexicon_excludes_absent_words(tokens):
    lexicon = Lexicon({"loved": 3, "hated": -3, "boring": -2, "terrible": -3, "ok": 0})
    summaries = WordAggregator(min_support=1).aggregate(tokens)

    joined = WordAggregator.join_lexicon(summaries, lexicon)

    joined_tokens = {r.token for r in joined}
    assert "book" not in joined_tokens
    assert joined_tokens == {"loved", "hated", "boring", "terrible", "ok"}
    assert {r.token: r.polarity_score for r in joined}["ok"] == 0.0
    # The unjoined view keeps lexicon-absent words
    assert "book" in {r.token for r in summaries}


def test_merge_order_independence():
    rng = random.Random(3)
    vocab = ["good", "bad", "book", "plot", "slow"]
    stream = [
        TokenRecord(rid, rng.randint(1, 5), rng.choice(vocab))
        for rid in range(1, 50)
        for _ in range(rng.randint(1, 6))
    ]
    aggregator = WordAggregator(min_support=2)
    expected = aggregator.aggregate(stream)

    for k in (2, 5):
        chunks = [stream[i::k] for i in range(k)]
        partials = [aggregator.partial(chunk) for chunk in chunks]
        merged = aggregator.summarize(WordAggregator.merge(reversed(partials)))
        assert merged == expected


def test_merge_does_not_mutate_partials():
    aggregator = WordAggregator(min_support=1)
    first = aggregator.partial(_tokens(1, 5, ["good"]))
    second = aggregator.partial(_tokens(2, 1, ["good"]))

    WordAggregator.merge([first, second])

    assert first["good"].review_ids == {1}
    assert first["good"].total_uses == 1


# Run tests if executed directly
if __name__ == "__main__":
    pytest.main([__file__, "-v"])
