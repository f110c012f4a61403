"""
Configuration settings for the review sentiment pipeline.

Centralized configuration for all stages and pipeline parameters.
"""

import os
from pathlib import Path

# Project paths
PROJECT_ROOT = Path(__file__).parent.parent
DATA_ROOT = PROJECT_ROOT / "data"
OUTPUT_ROOT = PROJECT_ROOT / "output"

# Record Filter
TARGET_LANGUAGE = "english"
MIN_REVIEW_LENGTH = 5  # Characters, after stripping whitespace
MAX_REVIEW_LENGTH = 8000  # Dataset-level cutoff; None disables it

# Language detection
LANGDETECT_SEED = 0  # langdetect is non-deterministic without a seed

# Tokenizer
STOPWORD_LANGUAGE = "english"
EXTRA_STOPWORDS = ()
TOKEN_PATTERN = r"\w+(?:'\w+)?"

# Lexicon
LEXICON_LANGUAGE = "en"  # AFINN word list bundled with the afinn package
LEXICON_PATH = os.getenv("LEXICON_PATH", "")  # Overrides AFINN when set

# Word Aggregator
MIN_WORD_SUPPORT = 3  # Minimum distinct reviews per word

# Parallelism
WORKERS = int(os.getenv("PIPELINE_WORKERS", "1"))
CHUNK_SIZE = 5000  # Reviews per worker task

# Output file names
REVIEW_SENTIMENT_FILE = "review_sentiment.csv"
WORD_SUMMARY_FILE = "word_summary.csv"
WORD_LEXICON_FILE = "word_lexicon.csv"
SENTIMENT_BY_RATING_FILE = "sentiment_by_rating.csv"
METADATA_FILE = "run_metadata.json"

# Logging
LOG_LEVEL = "INFO"  # DEBUG, INFO, WARNING, ERROR
LOG_FORMAT = "%(asctime)s - %(name)s - %(levelname)s - %(message)s"
LOG_FILE = "review_sentiment.log"
