"""
End-to-end tests for the Pipeline Orchestrator.

Note: Lexicon, stopwords and the language detector are injected so the
tests run without nltk downloads or langdetect.
"""

import json
import os
import tempfile

import pandas as pd
import pytest
from unittest.mock import Mock, patch
from src.errors import MissingResourceError
from src.lexicon.lexicon import Lexicon
from src.models.review import Review
from src.orchestrator import PipelineOrchestrator
from src.stages.filtering import RecordFilter
from src.stages.tokenization import Tokenizer
import config.settings as settings


STOPWORDS = {"i", "this", "it", "was", "an", "the", "a", "is"}

LEXICON = {"loved": 3, "hated": -3, "boring": -2, "terrible": -3, "ok": 0}


@pytest.fixture
def detector():
    mock = Mock()
    mock.detect.return_value = "english"
    return mock


def _orchestrator(detector, min_support=1, **kwargs):
    return PipelineOrchestrator(
        lexicon=Lexicon(LEXICON),
        tokenizer=Tokenizer(STOPWORDS),
        record_filter=RecordFilter(detector=detector),
        min_support=min_support,
        **kwargs
    )


@pytest.fixture
def corpus_path():
    with tempfile.TemporaryDirectory() as tmpdir:
        path = os.path.join(tmpdir, "reviews.csv")
        pd.DataFrame([
            {"book": "A", "rating": "it was amazing", "review": "I loved this heart-warming book", "author": "x"},
            {"book": "B", "rating": "did not like it", "review": "I hated this boring terrible book", "author": "y"},
            {"book": "C", "rating": "liked it", "review": "It was an ok book", "author": "z"},
            {"book": "C", "rating": "Rating details", "review": "Scraped the wrong element", "author": "z"},
        ]).to_csv(path, index=False)
        yield path


def test_end_to_end_example(detector, corpus_path):
    """Three-review example: review sentiment and the 'book' word row."""
    with tempfile.TemporaryDirectory() as outdir:
        paths = _orchestrator(detector).run(corpus_path, outdir)

        reviews = pd.read_csv(paths[settings.REVIEW_SENTIMENT_FILE])
        assert reviews["review_id"].tolist() == [1, 2, 3]
        assert reviews["rating"].tolist() == [5, 1, 3]
        assert reviews["mean_sentiment"].round(2).tolist() == [3.0, -2.67, 0.0]
        assert reviews["median_sentiment"].tolist() == [3.0, -3.0, 0.0]

        words = pd.read_csv(paths[settings.WORD_SUMMARY_FILE])
        book = words[words["token"] == "book"].iloc[0]
        assert book["review_support"] == 3
        assert book["total_uses"] == 3
        assert book["mean_rating"] == 3.0
        assert "polarity_score" not in words.columns

        joined = pd.read_csv(paths[settings.WORD_LEXICON_FILE])
        assert "book" not in joined["token"].tolist()
        assert set(joined["token"]) == set(LEXICON)


def test_run_metadata(detector, corpus_path):
    with tempfile.TemporaryDirectory() as outdir:
        paths = _orchestrator(detector).run(corpus_path, outdir)

        with open(paths[settings.METADATA_FILE]) as f:
            metadata = json.load(f)

        assert metadata["records"] == {"raw": 4, "kept": 3, "excluded": {"rating_label": 1}}
        assert metadata["reviews_with_sentiment"] == 3
        assert metadata["corpus"]["books"] == 3
        assert metadata["settings"]["min_support"] == 1
        assert metadata["rating_sentiment_correlation"]["mean_sentiment"]["pearson"] > 0.9


def test_default_min_support_drops_rare_words(detector, corpus_path):
    with tempfile.TemporaryDirectory() as outdir:
        paths = _orchestrator(detector, min_support=3).run(corpus_path, outdir)

        words = pd.read_csv(paths[settings.WORD_SUMMARY_FILE])
        assert words["token"].tolist() == ["book"]
        joined = pd.read_csv(paths[settings.WORD_LEXICON_FILE])
        assert joined.empty


def test_clean_applies_length_cutoff(detector):
    from src.models.review import RawReview

    raw = [
        RawReview(1, "A", "liked it", "short but fine", "english"),
        RawReview(2, "A", "liked it", "x" * 50, "english"),
    ]

    reviews, excluded = _orchestrator(detector, max_length=20).clean(raw)

    assert [r.review_id for r in reviews] == [1]
    assert excluded == {"too_long": 1}


def test_parallel_aggregation_matches_sequential(detector):
    """Chunked worker aggregation must reproduce the single-pass result."""
    texts = [
        "I loved this book", "Boring and terrible", "ok ok book",
        "hated the plot", "loved loved loved", "terrible ending, ok start",
    ]
    reviews = [
        Review(i, "A", (i % 5) + 1, texts[i % len(texts)])
        for i in range(1, 61)
    ]

    sequential = _orchestrator(detector).aggregate(reviews)

    # Run the chunked path in-process to avoid spawning workers in tests
    with patch("src.orchestrator.ProcessPoolExecutor") as mock_pool:
        mock_pool.return_value.__enter__.return_value.map.side_effect = map
        parallel = _orchestrator(detector, workers=4, chunk_size=7).aggregate(reviews)

    assert mock_pool.called
    assert parallel == sequential


def test_failed_run_writes_nothing(detector, corpus_path):
    with tempfile.TemporaryDirectory() as outdir:
        with patch("src.orchestrator.rating_sentiment_correlation", side_effect=RuntimeError("boom")):
            with pytest.raises(RuntimeError):
                _orchestrator(detector).run(corpus_path, outdir)

        assert os.listdir(outdir) == []


def test_missing_corpus_is_fatal(detector):
    with pytest.raises(MissingResourceError):
        _orchestrator(detector).run("/nonexistent/reviews.csv", tempfile.gettempdir())


def test_from_settings_loads_resources_once():
    with patch("src.orchestrator.Lexicon.from_afinn", return_value=Lexicon(LEXICON)) as mock_afinn, \
            patch("src.orchestrator.load_stopwords", return_value=frozenset(STOPWORDS)) as mock_stop, \
            patch("src.orchestrator.LanguageDetector"), \
            patch.object(settings, "LEXICON_PATH", ""):
        orchestrator = PipelineOrchestrator.from_settings(min_support=5, workers=1)

    mock_afinn.assert_called_once_with(settings.LEXICON_LANGUAGE)
    mock_stop.assert_called_once()
    assert orchestrator.word_aggregator.min_support == 5
    assert orchestrator.tokenizer.stopwords == frozenset(STOPWORDS)


def test_from_settings_missing_lexicon_is_fatal():
    with pytest.raises(MissingResourceError):
        PipelineOrchestrator.from_settings(lexicon_path="/nonexistent/lexicon.tsv")


# Run tests if executed directly
if __name__ == "__main__":
    pytest.main([__file__, "-v"])
