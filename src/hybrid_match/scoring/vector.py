"""Vector-space similarity between requirement and candidate texts."""

import logging
import math
from collections.abc import Sequence

import numpy as np
from sklearn.feature_extraction.text import CountVectorizer
from sklearn.metrics.pairwise import cosine_similarity as pairwise_cosine

logger = logging.getLogger(__name__)


def _pre_tokenized(terms: Sequence[str]) -> Sequence[str]:
    """CountVectorizer analyzer for documents that are already normalized terms."""
    return terms


def cosine_similarity(vec_a: Sequence[float], vec_b: Sequence[float]) -> float:
    """Cosine similarity of two dense vectors.

    Returns 0.0 for mismatched dimensions or when either vector is the zero
    vector, where the cosine is undefined.
    """
    a = np.asarray(vec_a, dtype=float)
    b = np.asarray(vec_b, dtype=float)
    if a.shape != b.shape or a.size == 0:
        return 0.0

    norm = np.linalg.norm(a) * np.linalg.norm(b)
    if norm == 0:
        return 0.0
    return float(np.dot(a, b) / norm)


def similarity_to_score(similarity: float) -> int:
    """Clamp a cosine similarity to [0, 1] and scale it to a 0-100 integer."""
    if math.isnan(similarity):
        return 0
    return round(max(0.0, min(1.0, similarity)) * 100)


class VectorScorer:
    """Term-frequency cosine similarity over the union vocabulary of both texts."""

    def score(self, requirement_terms: Sequence[str], candidate_terms: Sequence[str]) -> int:
        """Compute the vector similarity score.

        Args:
            requirement_terms: Normalized requirement terms.
            candidate_terms: Normalized candidate terms.

        Returns:
            Score from 0 to 100; 0 when either side is empty after normalization.
        """
        # An empty side is a zero vector; CountVectorizer also rejects an empty vocabulary
        if not requirement_terms or not candidate_terms:
            return 0

        vectorizer = CountVectorizer(analyzer=_pre_tokenized)
        matrix = vectorizer.fit_transform([list(requirement_terms), list(candidate_terms)])

        similarity = float(pairwise_cosine(matrix[0:1], matrix[1:2])[0][0])
        score = similarity_to_score(similarity)

        logger.debug(
            f"Vector similarity over {matrix.shape[1]} terms: {similarity:.4f} -> {score}"
        )
        return score
