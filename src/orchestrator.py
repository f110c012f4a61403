"""
Pipeline Orchestrator.

Coordinates sequential execution of all stages over one review corpus.
"""

import logging
from concurrent.futures import ProcessPoolExecutor
from datetime import datetime
from typing import Dict, List, Optional, Sequence, Tuple

from src.lexicon.lexicon import Lexicon
from src.models.review import RawReview, Review
from src.models.summary import ReviewSentiment, WordSummary
from src.stages.filtering import RecordFilter, apply_length_cutoff
from src.stages.rating import normalize_reviews
from src.stages.review_aggregation import ReviewAggregator, ReviewPartial
from src.stages.statistics import (
    describe_corpus,
    rating_sentiment_correlation,
    sentiment_by_rating,
    word_polarity_correlation,
)
from src.stages.tokenization import Tokenizer, load_stopwords
from src.stages.word_aggregation import WordAggregator, WordPartial
from src.utils.language import LanguageDetector
from src.utils.storage import StorageManager, load_corpus, records_to_frame
import config.settings as settings

logger = logging.getLogger(__name__)


def _aggregate_chunk(
    reviews: Sequence[Review],
    tokenizer: Tokenizer,
    lexicon: Lexicon
) -> Tuple[ReviewPartial, WordPartial]:
    """Tokenize one chunk and build both partial aggregates (worker entry point)."""
    tokens = list(tokenizer.stream(reviews))
    return ReviewAggregator(lexicon).partial(tokens), WordAggregator.partial(tokens)


def _chunked(items: Sequence, size: int) -> List[Sequence]:
    return [items[i:i + size] for i in range(0, len(items), size)]


class PipelineOrchestrator:
    """
    Orchestrates the batch sentiment pipeline.

    Coordinates:
    1. Record Filter → 2. Rating Normalizer → 3. Length Cutoff
    → 4. Tokenizer → 5. Review + Word Aggregation → 6. Statistics

    Lexicon and stopwords are loaded once, in __init__, so a missing
    resource fails the run before any data is read.
    """

    def __init__(
        self,
        lexicon: Lexicon,
        tokenizer: Tokenizer,
        record_filter: RecordFilter,
        min_support: int = settings.MIN_WORD_SUPPORT,
        max_length: Optional[int] = settings.MAX_REVIEW_LENGTH,
        workers: int = 1,
        chunk_size: int = settings.CHUNK_SIZE
    ):
        """
        Initialize pipeline orchestrator.

        Args:
            lexicon: Word polarity lookup
            tokenizer: Tokenizer with stopwords loaded
            record_filter: Per-record validity filter
            min_support: Minimum distinct reviews per summarized word
            max_length: Dataset-level review length cutoff (None disables it)
            workers: Worker processes for tokenization and aggregation
            chunk_size: Reviews per worker task
        """
        self.lexicon = lexicon
        self.tokenizer = tokenizer
        self.record_filter = record_filter
        self.max_length = max_length
        self.workers = max(1, workers)
        self.chunk_size = max(1, chunk_size)

        self.review_aggregator = ReviewAggregator(lexicon)
        self.word_aggregator = WordAggregator(min_support=min_support)

        logger.info(
            f"Pipeline initialized (min_support={min_support}, "
            f"max_length={max_length}, workers={self.workers})"
        )

    @classmethod
    def from_settings(
        cls,
        lexicon_path: Optional[str] = None,
        min_support: int = settings.MIN_WORD_SUPPORT,
        min_length: int = settings.MIN_REVIEW_LENGTH,
        max_length: Optional[int] = settings.MAX_REVIEW_LENGTH,
        workers: int = settings.WORKERS
    ) -> "PipelineOrchestrator":
        """
        Build a pipeline with resources loaded per config/settings.py.

        Raises:
            MissingResourceError: If the lexicon or stopwords cannot be loaded
        """
        logger.info("Loading pipeline resources...")
        lexicon_path = lexicon_path or settings.LEXICON_PATH
        if lexicon_path:
            lexicon = Lexicon.from_file(lexicon_path)
        else:
            lexicon = Lexicon.from_afinn(settings.LEXICON_LANGUAGE)

        stopwords = load_stopwords(settings.STOPWORD_LANGUAGE, settings.EXTRA_STOPWORDS)

        return cls(
            lexicon=lexicon,
            tokenizer=Tokenizer(stopwords, pattern=settings.TOKEN_PATTERN),
            record_filter=RecordFilter(
                detector=LanguageDetector(seed=settings.LANGDETECT_SEED),
                target_language=settings.TARGET_LANGUAGE,
                min_length=min_length
            ),
            min_support=min_support,
            max_length=max_length,
            workers=workers
        )

    def clean(self, records: Sequence[RawReview]) -> Tuple[List[Review], Dict[str, int]]:
        """
        Filter, normalize and length-cut raw records.

        Returns:
            (cleaned reviews, excluded counts per reason)
        """
        filtered = self.record_filter.apply(records)
        reviews = normalize_reviews(filtered.kept)
        cut = apply_length_cutoff(reviews, self.max_length)

        excluded = dict(filtered.excluded)
        for reason, count in cut.excluded.items():
            excluded[reason] = excluded.get(reason, 0) + count
        return cut.kept, excluded

    def aggregate(
        self,
        reviews: Sequence[Review]
    ) -> Tuple[List[ReviewSentiment], List[WordSummary], List[WordSummary]]:
        """
        Tokenize reviews and run both aggregators.

        Returns:
            (review sentiment rows, word summary rows, lexicon-joined word rows)
        """
        reviews = list(reviews)

        if self.workers > 1 and len(reviews) > self.chunk_size:
            review_partial, word_partial = self._aggregate_parallel(reviews)
        else:
            review_partial, word_partial = _aggregate_chunk(reviews, self.tokenizer, self.lexicon)

        review_rows = self.review_aggregator.summarize(review_partial)
        word_rows = self.word_aggregator.summarize(word_partial)
        joined_rows = self.word_aggregator.join_lexicon(word_rows, self.lexicon)

        logger.info(
            f"Aggregated {len(reviews)} reviews → {len(review_rows)} with sentiment, "
            f"{len(word_rows)} words ({len(joined_rows)} in lexicon)"
        )
        return review_rows, word_rows, joined_rows

    def _aggregate_parallel(self, reviews: List[Review]) -> Tuple[ReviewPartial, WordPartial]:
        chunks = _chunked(reviews, self.chunk_size)
        logger.info(f"Aggregating {len(chunks)} chunks with {self.workers} workers")

        with ProcessPoolExecutor(max_workers=self.workers) as executor:
            results = list(executor.map(
                _aggregate_chunk,
                chunks,
                [self.tokenizer] * len(chunks),
                [self.lexicon] * len(chunks)
            ))

        review_partial = ReviewAggregator.merge(r for r, _ in results)
        word_partial = WordAggregator.merge(w for _, w in results)
        return review_partial, word_partial

    def run(self, corpus_path: str, output_dir: str = str(settings.OUTPUT_ROOT)) -> Dict[str, str]:
        """
        Run the complete pipeline on a corpus file.

        Outputs are only written once every stage has succeeded.

        Args:
            corpus_path: CSV of scraped reviews
            output_dir: Directory for output tables

        Returns:
            Output file name -> path
        """
        start_time = datetime.now()
        logger.info(f"Starting pipeline for {corpus_path}")

        # STAGE 1: Load
        raw = load_corpus(corpus_path)

        # STAGE 2: Clean
        reviews, excluded = self.clean(raw)
        if not reviews:
            logger.warning("No reviews survived filtering")

        # STAGE 3: Aggregate
        review_rows, word_rows, joined_rows = self.aggregate(reviews)

        # STAGE 4: Statistics
        by_rating = sentiment_by_rating(review_rows)
        metadata = {
            "corpus_path": corpus_path,
            "generated_at": datetime.utcnow().isoformat() + "Z",
            "processing_time_seconds": (datetime.now() - start_time).total_seconds(),
            "settings": {
                "lexicon": self.lexicon.source,
                "lexicon_entries": len(self.lexicon),
                "min_support": self.word_aggregator.min_support,
                "min_length": self.record_filter.min_length,
                "max_length": self.max_length,
                "target_language": self.record_filter.target_language,
                "workers": self.workers
            },
            "records": {
                "raw": len(raw),
                "kept": len(reviews),
                "excluded": excluded
            },
            "corpus": describe_corpus(reviews),
            "reviews_with_sentiment": len(review_rows),
            "reviews_without_lexicon_match": len(reviews) - len(review_rows),
            "rating_sentiment_correlation": rating_sentiment_correlation(review_rows),
            "word_polarity_correlation": word_polarity_correlation(joined_rows)
        }

        # STAGE 5: Persist
        storage = StorageManager(output_dir)
        paths = storage.save_outputs(
            tables={
                settings.REVIEW_SENTIMENT_FILE: records_to_frame(review_rows, ReviewSentiment),
                settings.WORD_SUMMARY_FILE: records_to_frame(word_rows, WordSummary).drop(columns=["polarity_score"]),
                settings.WORD_LEXICON_FILE: records_to_frame(joined_rows, WordSummary),
                settings.SENTIMENT_BY_RATING_FILE: by_rating
            },
            metadata=metadata,
            metadata_name=settings.METADATA_FILE
        )

        logger.info(f"Pipeline complete in {metadata['processing_time_seconds']:.1f}s")
        return paths
