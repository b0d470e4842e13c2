"""
Text processing for retrieval: normalization, tokenization and cosine similarity.

Query text and record fields go through the same normalization so substring
checks and token overlap compare like with like.
"""

import math
import re
import unicodedata
from collections import Counter

# Whitespace plus ASCII and Japanese commas / full stops.
_TOKEN_SEPARATORS = re.compile(r"[\s,、.。]+")


def normalize_text(text: str) -> str:
    """
    NFKC-normalize, lowercase and trim.

    NFKC folds full-width letters and digits (e.g. "ＡＷＳ") onto their ASCII
    forms so they compare equal to what users type.
    """
    if not text or not text.strip():
        return ""
    return unicodedata.normalize("NFKC", text).lower().strip()


def tokenize(text: str) -> list[str]:
    """Split normalized text on whitespace and sentence punctuation; drop empty tokens."""
    normalized = normalize_text(text)
    if not normalized:
        return []
    return [t for t in _TOKEN_SEPARATORS.split(normalized) if t]


def contains_phrase(text: str, phrase: str) -> bool:
    """True when the normalized phrase occurs in text as whole words, not inside a longer word."""
    needle = normalize_text(phrase)
    if not needle:
        return False
    return re.search(rf"(?<!\w){re.escape(needle)}(?!\w)", normalize_text(text)) is not None


def term_frequencies(text: str) -> Counter:
    return Counter(tokenize(text))


def cosine_similarity(a: str, b: str) -> float:
    """
    Cosine similarity of the token-frequency vectors of a and b.

    Symmetric, bounded in [0, 1], and 0 when either side has no tokens.
    """
    freq_a = term_frequencies(a)
    freq_b = term_frequencies(b)
    if not freq_a or not freq_b:
        return 0.0
    dot = sum(count * freq_b[token] for token, count in freq_a.items() if token in freq_b)
    magnitude_a = sum(c * c for c in freq_a.values())
    magnitude_b = sum(c * c for c in freq_b.values())
    if magnitude_a == 0 or magnitude_b == 0:
        return 0.0
    return min(1.0, dot / (math.sqrt(magnitude_a) * math.sqrt(magnitude_b)))
