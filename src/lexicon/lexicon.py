"""
Lexicon - Immutable word polarity lookup.

Loaded once per run from the AFINN word list or a user-supplied table.
"""

import logging
import os
from types import MappingProxyType
from typing import Dict, Iterator, Mapping, Optional, Tuple

import pandas as pd
from afinn import afinn as afinn_module
from afinn.afinn import LANGUAGE_TO_FILENAME, Afinn, WordListReadingError

from src.errors import MissingResourceError

logger = logging.getLogger(__name__)


class Lexicon:
    """
    Read-only mapping from token to signed polarity score.

    Absent tokens have no polarity: get() returns None, never 0,
    so unknown words can be excluded from sentiment rather than
    counted as neutral.
    """

    def __init__(self, entries: Mapping[str, float], source: str = "memory"):
        """
        Args:
            entries: token -> polarity score
            source: Where the entries came from (for logging and metadata)
        """
        lowered: Dict[str, float] = {}
        collisions = 0
        for token, score in entries.items():
            key = str(token).lower()
            if key in lowered:
                # First entry wins, same as duplicate rows in from_file
                collisions += 1
                continue
            lowered[key] = float(score)

        if collisions:
            logger.warning(f"Lexicon {source}: {collisions} entries collide after lower-casing, keeping first")

        self._entries = MappingProxyType(lowered)
        self.source = source
        logger.info(f"Lexicon ready: {len(self._entries)} entries from {source}")

    @classmethod
    def from_afinn(cls, language: str = "en") -> "Lexicon":
        """
        Load the AFINN word list bundled with the afinn package.

        Raises:
            MissingResourceError: If the language is unknown or the word list cannot be read
        """
        filename = LANGUAGE_TO_FILENAME.get(language)
        if filename is None:
            raise MissingResourceError(
                f"Unknown AFINN language '{language}', expected one of {sorted(LANGUAGE_TO_FILENAME)}"
            )

        try:
            path = os.path.join(os.path.dirname(afinn_module.__file__), "data", filename)
            entries: Dict[str, float] = Afinn.read_word_file(path)
        except (WordListReadingError, OSError, UnicodeDecodeError) as e:
            raise MissingResourceError(f"Could not load AFINN lexicon '{language}': {e}") from e

        return cls(entries, source=f"afinn:{language}")

    @classmethod
    def from_file(cls, path: str, sep: str = "\t") -> "Lexicon":
        """
        Load a two-column (word, score) table. A header row is tolerated.

        Raises:
            MissingResourceError: If the file is missing or has no usable rows
        """
        if not os.path.exists(path):
            raise MissingResourceError(f"Lexicon file not found: {path}")

        try:
            df = pd.read_csv(
                path,
                sep=sep,
                header=None,
                names=["word", "score"],
                usecols=[0, 1],
                dtype={"word": str},
                quoting=3,  # csv.QUOTE_NONE; AFINN words contain apostrophes
                keep_default_na=False
            )
        except (OSError, ValueError, pd.errors.ParserError) as e:
            raise MissingResourceError(f"Failed to read lexicon {path}: {e}") from e

        df["score"] = pd.to_numeric(df["score"], errors="coerce")
        df = df.dropna(subset=["score"])
        df["word"] = df["word"].str.strip().str.lower()
        df = df[df["word"].str.len() > 0]

        duplicates = df["word"].duplicated(keep="first")
        if duplicates.any():
            logger.warning(
                f"Lexicon {path} has {int(duplicates.sum())} duplicate words, keeping first"
            )
            df = df[~duplicates]

        if df.empty:
            raise MissingResourceError(f"Lexicon file has no valid entries: {path}")

        return cls(dict(zip(df["word"], df["score"])), source=path)

    def get(self, token: str) -> Optional[float]:
        """Polarity of a token, or None if the token is not in the lexicon."""
        return self._entries.get(token)

    def items(self) -> Iterator[Tuple[str, float]]:
        return iter(self._entries.items())

    def __contains__(self, token) -> bool:
        return token in self._entries

    def __len__(self) -> int:
        return len(self._entries)

    def __repr__(self) -> str:
        return f"Lexicon(source={self.source!r}, entries={len(self._entries)})"

    def __reduce__(self):
        # MappingProxyType is not picklable; rebuild from a plain dict in workers
        return (self.__class__, (dict(self._entries), self.source))
