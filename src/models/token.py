"""
Token data model.

One record per surviving (review, word) occurrence after stopword removal.
"""

from dataclasses import dataclass


@dataclass(frozen=True)
class TokenRecord:
    review_id: int
    rating: int
    token: str
