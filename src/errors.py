"""
Exception hierarchy for the review sentiment pipeline.

Malformed scraped records are never raised; they are filtered and counted.
These exceptions cover contract violations and missing resources, both of
which abort the run.
"""


class PipelineError(Exception):
    """Base class for all pipeline failures."""


class DataError(PipelineError, ValueError):
    """Data violates a contract that an earlier stage should have enforced."""


class UnknownRatingLabel(DataError):
    """A rating label outside the closed set of five canonical labels."""

    def __init__(self, label):
        self.label = label
        super().__init__(f"Unknown rating label: {label!r}")


class MissingResourceError(PipelineError):
    """A lexicon, stopword list or corpus could not be loaded."""
