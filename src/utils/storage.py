"""
Storage utility.

Corpus loading and output table persistence.
"""

import json
import os
import logging
from dataclasses import asdict, fields
from typing import Dict, List, Sequence

import pandas as pd

from src.errors import DataError, MissingResourceError
from src.models.review import RawReview

logger = logging.getLogger(__name__)

REQUIRED_COLUMNS = ("book", "rating", "review")


def load_corpus(path: str) -> List[RawReview]:
    """
    Load the scraped review table.

    Expected columns: book, rating, review; optional language, author,
    review_id. Without a review_id column, ids are assigned from row order
    starting at 1.

    Raises:
        MissingResourceError: If the file does not exist or cannot be parsed
        DataError: If a required column is missing
    """
    if not os.path.exists(path):
        raise MissingResourceError(f"Corpus file not found: {path}")

    try:
        df = pd.read_csv(path)
    except (OSError, ValueError, pd.errors.ParserError) as e:
        raise MissingResourceError(f"Failed to read corpus {path}: {e}") from e

    df.columns = [str(c).strip().lower() for c in df.columns]
    missing = [c for c in REQUIRED_COLUMNS if c not in df.columns]
    if missing:
        raise DataError(f"Corpus {path} is missing required columns: {missing}")

    if "review_id" in df.columns:
        ids = pd.to_numeric(df["review_id"], errors="coerce")
        if ids.isna().any() or (ids != ids.round()).any():
            raise DataError(f"Corpus {path} has missing or non-integer review_id values")
        ids = ids.astype(int)
        if ids.duplicated().any():
            raise DataError(f"Corpus {path} has duplicate review_id values")
    else:
        ids = pd.Series(range(1, len(df) + 1), index=df.index)

    def _text(col: str) -> pd.Series:
        return df[col].fillna("").astype(str)

    def _optional(col: str) -> list:
        if col not in df.columns:
            return [None] * len(df)
        return [None if pd.isna(v) or str(v).strip() == "" else str(v) for v in df[col]]

    records = [
        RawReview(
            review_id=int(review_id),
            book=book,
            rating=rating,
            text=text,
            language=language,
            author=author
        )
        for review_id, book, rating, text, language, author in zip(
            ids, _text("book"), _text("rating"), _text("review"),
            _optional("language"), _optional("author")
        )
    ]

    logger.info(f"Loaded {len(records)} raw reviews from {path}")
    return records


def records_to_frame(records: Sequence, record_type) -> pd.DataFrame:
    """Convert dataclass rows to a DataFrame, keeping columns when empty."""
    columns = [f.name for f in fields(record_type)]
    return pd.DataFrame([asdict(r) for r in records], columns=columns)


class StorageManager:
    """
    Writes pipeline outputs into a single directory.

    All artifacts of a run are written to temporary files first and only
    renamed into place once every one of them has been written, so a failed
    run leaves no partial output behind.
    """

    def __init__(self, output_dir: str):
        """
        Initialize storage manager.

        Args:
            output_dir: Directory for output tables and metadata
        """
        self.output_dir = output_dir
        os.makedirs(self.output_dir, exist_ok=True)
        logger.info(f"Initialized StorageManager with output_dir={output_dir}")

    def save_outputs(self, tables: Dict[str, pd.DataFrame], metadata: Dict, metadata_name: str) -> Dict[str, str]:
        """
        Persist all tables (as CSV) and the run metadata (as JSON).

        Args:
            tables: file name -> DataFrame
            metadata: JSON-serializable run metadata
            metadata_name: File name for the metadata

        Returns:
            file name -> final path
        """
        staged = {}
        try:
            for name, df in tables.items():
                staged[name] = self._temp_path(name)
                df.to_csv(staged[name], index=False)

            staged[metadata_name] = self._temp_path(metadata_name)
            with open(staged[metadata_name], 'w') as f:
                json.dump(metadata, f, indent=2)

        except Exception as e:
            logger.error(f"Failed to write outputs: {e}")
            for temp_path in staged.values():
                if os.path.exists(temp_path):
                    os.remove(temp_path)
            raise

        final_paths = {}
        try:
            for name, temp_path in staged.items():
                final_path = os.path.join(self.output_dir, name)
                os.replace(temp_path, final_path)
                final_paths[name] = final_path

        except OSError as e:
            logger.error(f"Failed to move outputs into place after {len(final_paths)} of {len(staged)}: {e}")
            for temp_path in staged.values():
                if os.path.exists(temp_path):
                    os.remove(temp_path)
            raise

        logger.info(f"Saved {len(final_paths)} output files to {self.output_dir}")
        return final_paths

    def _temp_path(self, name: str) -> str:
        return os.path.join(self.output_dir, f".{name}.tmp")
