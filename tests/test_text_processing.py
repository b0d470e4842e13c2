"""
Unit tests for text processing: normalize_text, tokenize and cosine_similarity.
"""

import pytest

from people_finder.services.text_processing import cosine_similarity, normalize_text, tokenize


class TestNormalizeText:
    """Tests for normalize_text()."""

    def test_empty_returns_empty(self) -> None:
        assert normalize_text("") == ""
        assert normalize_text("   ") == ""

    def test_lowercases_and_strips(self) -> None:
        assert normalize_text("  Python Dev  ") == "python dev"

    def test_nfkc_folds_full_width(self) -> None:
        assert normalize_text("ＡＷＳ") == "aws"


class TestTokenize:
    """Tests for tokenize()."""

    def test_empty_returns_empty_list(self) -> None:
        assert tokenize("") == []
        assert tokenize(" , . ") == []

    def test_splits_on_whitespace_and_punctuation(self) -> None:
        assert tokenize("Python, React. Docker") == ["python", "react", "docker"]

    def test_splits_on_japanese_punctuation(self) -> None:
        assert tokenize("開発、設計。運用") == ["開発", "設計", "運用"]

    def test_keeps_duplicates(self) -> None:
        assert tokenize("go go gadget") == ["go", "go", "gadget"]


class TestCosineSimilarity:
    """Tests for cosine_similarity()."""

    PAIRS = [
        ("python react", "react python docker"),
        ("alice works in the dev department", "dev team"),
        ("a a b", "a b b c"),
        ("x", "y"),
    ]

    @pytest.mark.parametrize("a,b", PAIRS)
    def test_symmetric(self, a: str, b: str) -> None:
        assert cosine_similarity(a, b) == cosine_similarity(b, a)

    @pytest.mark.parametrize("a,b", PAIRS)
    def test_bounded(self, a: str, b: str) -> None:
        assert 0.0 <= cosine_similarity(a, b) <= 1.0

    def test_empty_side_is_zero(self) -> None:
        assert cosine_similarity("", "python") == 0.0
        assert cosine_similarity("python", "") == 0.0
        assert cosine_similarity("", "") == 0.0
        assert cosine_similarity(" , ", "python") == 0.0

    def test_disjoint_is_zero(self) -> None:
        assert cosine_similarity("python react", "figma photoshop") == 0.0

    def test_identical_is_one(self) -> None:
        assert cosine_similarity("python react", "React, Python") == pytest.approx(1.0)

    def test_partial_overlap(self) -> None:
        # 1 shared token; |a| = 1, |b| = sqrt(4)
        assert cosine_similarity("frontend", "learning frontend web stuff") == pytest.approx(0.5)
