"""Text normalization shared by the lexical and vector scoring stages.

All functions here are pure: the same input always yields the same output,
which keeps cache fingerprints and vector scores reproducible.
"""

import re
import unicodedata
from collections.abc import Iterable, Sequence
from functools import lru_cache

from nltk.stem.snowball import SnowballStemmer

# Word tokens, keeping trailing "+" / "#" so that "c++" and "c#" survive
TOKEN_PATTERN = re.compile(r"[^\W_]+[+#]*")

# Ligatures that NFKD does not decompose
LIGATURES = str.maketrans({"œ": "oe", "æ": "ae", "ø": "o", "đ": "d", "ł": "l"})

MIN_TOKEN_LENGTH = 2

# Porter2 rules; step 1a also strips the regular French plural "-s"
STEMMER = SnowballStemmer("english")

# Function words for the two languages the engine sees in practice (FR/EN)
STOPWORDS = frozenset(
    {
        # French
        "au", "aux", "avec", "ce", "ces", "cette", "dans", "de", "des", "du",
        "elle", "en", "est", "et", "il", "ils", "la", "le", "les", "leur",
        "lui", "ma", "mais", "me", "mes", "mon", "ne", "nos", "notre", "nous",
        "on", "ou", "par", "pas", "pour", "qu", "que", "qui", "sa", "se",
        "ses", "son", "sur", "ta", "te", "tes", "ton", "tu", "un", "une",
        "vos", "votre", "vous", "ainsi", "comme",
        # English
        "an", "and", "are", "as", "at", "be", "by", "for", "from", "has",
        "have", "in", "is", "it", "its", "of", "on", "or", "our", "that",
        "the", "their", "this", "to", "was", "we", "were", "will", "with",
        "you", "your",
    }
)


def fold(text: str) -> str:
    """Case-fold text and strip diacritics.

    Examples:
        >>> fold("Développeur SÉNIOR")
        'developpeur senior'
        >>> fold("Cœur")
        'coeur'
    """
    folded = text.casefold().translate(LIGATURES)
    decomposed = unicodedata.normalize("NFKD", folded)
    return "".join(ch for ch in decomposed if not unicodedata.combining(ch))


def normalize(text: str | None) -> list[str]:
    """Split text into normalized terms.

    Terms are case-folded, stripped of diacritics and punctuation, and filtered
    to drop tokens shorter than two characters and stopwords. Order is preserved.

    Args:
        text: Raw text (may be empty or None).

    Returns:
        Ordered list of normalized terms; empty for empty input.

    Examples:
        >>> normalize("Recherche Développeur React, remote ok")
        ['recherche', 'developpeur', 'react', 'remote', 'ok']
        >>> normalize("")
        []
    """
    if not text:
        return []

    return [
        token
        for token in TOKEN_PATTERN.findall(fold(text))
        if len(token) >= MIN_TOKEN_LENGTH and token not in STOPWORDS
    ]


def normalized_text(text: str | None) -> str:
    """Return the normalized terms of ``text`` joined by single spaces."""
    return " ".join(normalize(text))


@lru_cache(maxsize=8192)
def stem(token: str) -> str:
    """Snowball stem of a normalized token.

    Tokens carrying digits or symbols ("c++", "s3", "j2ee") are returned as-is.

    Examples:
        >>> stem("apis")
        'api'
        >>> stem("c#")
        'c#'
    """
    if not token.isalpha():
        return token
    return STEMMER.stem(token)


def tokens_match(expected: str, actual: str) -> bool:
    """Check whether two normalized tokens match, tolerating inflection.

    Tokens match if they are equal or share a stem ("developpeur" /
    "developpeurs", "api" / "apis"). A longer word that merely starts with the
    other does not match: "react" / "reactive", "java" / "javascript".
    """
    return expected == actual or stem(expected) == stem(actual)


def find_phrase(terms: Sequence[str], phrase_terms: Sequence[str]) -> bool:
    """Check whether ``phrase_terms`` appear consecutively in ``terms``."""
    if not phrase_terms:
        return False

    width = len(phrase_terms)
    for start in range(len(terms) - width + 1):
        if all(
            tokens_match(expected, terms[start + offset])
            for offset, expected in enumerate(phrase_terms)
        ):
            return True
    return False


def contains_phrase(terms: Sequence[str], phrase: str) -> bool:
    """Check whether a raw skill phrase appears in a normalized term sequence.

    Examples:
        >>> contains_phrase(normalize("Gestion des risques de crédit"), "risque credit")
        True
    """
    return find_phrase(terms, normalize(phrase))


def unique_sorted(values: Iterable[str]) -> list[str]:
    """Deduplicate strings case-insensitively and return them sorted."""
    seen: dict[str, str] = {}
    for value in values:
        cleaned = value.strip()
        if cleaned:
            seen.setdefault(fold(cleaned), cleaned)
    return [seen[key] for key in sorted(seen)]
