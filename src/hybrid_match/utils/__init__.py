"""Utility functions for the hybrid scoring engine."""

from hybrid_match.utils.text_utils import (
    contains_phrase,
    fold,
    normalize,
    normalized_text,
    tokens_match,
)

__all__ = ["contains_phrase", "fold", "normalize", "normalized_text", "tokens_match"]
