"""
Unit tests for retrieval scoring and ranking.
"""

from unittest.mock import patch

import pytest

from people_finder.core.errors import PerRecordAnalysisError
from people_finder.core.record_store import build_snapshot
from people_finder.services import retrieval_service
from people_finder.services.models import PersonRecord
from people_finder.services.retrieval_service import (
    ConversationalWeights,
    check_exact_match,
    check_partial_match,
    conversational_score,
    explain,
    score_record,
    search_records,
)


def _search(query: str, records: list[PersonRecord], **kwargs) -> list:
    return search_records(query, records, build_snapshot(records).chunks_by_record, **kwargs)


class TestLexicalMatch:
    """Tests for check_exact_match() and check_partial_match()."""

    def test_exact_on_skill_department_qualification_name(self, alice: PersonRecord) -> None:
        assert check_exact_match("who knows react", alice) == 1.0
        assert check_exact_match("someone in dev", alice) == 1.0
        assert check_exact_match("aws certified solutions architect holders", alice) == 1.0
        assert check_exact_match("where is alice", alice) == 1.0
        assert check_exact_match("figma", alice) == 0.0

    def test_empty_query_never_matches(self, alice: PersonRecord) -> None:
        assert check_exact_match("", alice) == 0.0
        assert check_partial_match("", alice) == 0.0

    def test_partial_when_query_is_inside_a_field(self, alice: PersonRecord) -> None:
        assert check_partial_match("pyth", alice) == 0.8
        assert check_partial_match("figma", alice) == 0.0


class TestConversationalScore:
    """Tests for conversational_score()."""

    def test_seniority(self, alice: PersonRecord, bob: PersonRecord, carol: PersonRecord) -> None:
        assert conversational_score("any senior people", alice) == pytest.approx(0.3)
        assert conversational_score("any senior people", carol) == pytest.approx(0.2)
        assert conversational_score("any senior people", bob) == 0.0

    def test_junior(self, bob: PersonRecord, carol: PersonRecord) -> None:
        assert conversational_score("a junior", bob) == pytest.approx(0.3)
        assert conversational_score("a junior", carol) == 0.0
        mid = PersonRecord(name="Eve", department="Ops", years_of_experience=3)
        assert conversational_score("a junior", mid) == pytest.approx(0.2)

    def test_multi_skill_and_certification(self, alice: PersonRecord, carol: PersonRecord, bob: PersonRecord) -> None:
        assert conversational_score("someone versatile", alice) == pytest.approx(0.2)
        assert conversational_score("someone versatile", carol) == 0.0
        assert conversational_score("someone certified", alice) == pytest.approx(0.2)
        assert conversational_score("someone certified", bob) == 0.0

    def test_department_affinity(self) -> None:
        dana = PersonRecord(name="Dana", department="Development Division")
        assert conversational_score("development expert", dana) == pytest.approx(0.3)

    def test_own_department_affinity(self, alice: PersonRecord, carol: PersonRecord) -> None:
        assert conversational_score("senior dev", alice) == pytest.approx(0.6)
        # "dev" inside "device" is not the Dev department
        assert conversational_score("senior device person", alice) == pytest.approx(0.3)
        assert conversational_score("senior dev", carol) == pytest.approx(0.2)

    def test_custom_weights(self, alice: PersonRecord) -> None:
        weights = ConversationalWeights(senior_high=0.5)
        assert conversational_score("senior", alice, weights) == pytest.approx(0.5)


class TestExplain:
    """Tests for explain()."""

    def test_bands(self) -> None:
        assert explain(1.0) == "very high relevance"
        assert explain(0.8) == "high relevance"
        assert explain(0.5) == "moderate relevance"
        assert explain(0.4) == "low relevance"


class TestScoreRecord:
    """Tests for score_record()."""

    def test_no_signal_returns_none(self, alice: PersonRecord) -> None:
        chunks = build_snapshot([alice]).chunks_by_record[0]
        assert score_record("zzz qqq", alice, chunks) is None

    def test_failure_is_wrapped(self, alice: PersonRecord) -> None:
        with patch.object(retrieval_service, "check_exact_match", side_effect=ValueError("bad field")):
            with pytest.raises(PerRecordAnalysisError) as exc_info:
                score_record("python", alice, ())
        assert exc_info.value.record_name == "Alice"
        assert "bad field" in str(exc_info.value)


class TestSearchRecords:
    """Tests for search_records()."""

    def test_skill_token_gives_exact_match(self, records: list[PersonRecord]) -> None:
        results = _search("who knows react", records)
        assert [r.record.name for r in results] == ["Alice"]
        assert results[0].score == 1.0
        assert results[0].match_type == "exact"
        assert results[0].explanation == "very high relevance"
        assert len(results[0].matched_chunks) == 4

    def test_partial_match(self, records: list[PersonRecord]) -> None:
        results = _search("pyth", records)
        assert [r.record.name for r in results] == ["Alice"]
        assert results[0].score == 0.8
        assert results[0].match_type == "similar"
        assert results[0].explanation == "high relevance"

    def test_cosine_only(self, records: list[PersonRecord]) -> None:
        results = _search("frontend", records)
        assert [r.record.name for r in results] == ["Bob"]
        assert results[0].score == pytest.approx(1 / 8 ** 0.5)
        assert results[0].match_type == "category"
        assert [c.chunk_type for c in results[0].matched_chunks] == ["basic"]

    def test_conversational(self, records: list[PersonRecord]) -> None:
        results = _search("any senior people", records)
        assert [r.record.name for r in results] == ["Alice", "Carol"]
        assert results[0].score == pytest.approx(0.3)
        assert results[1].score == pytest.approx(0.2)

    def test_every_scoring_term_enables_conversational_scoring(self) -> None:
        zed = PersonRecord(name="Zed", department="Ops", years_of_experience=1)
        results = _search("find a beginner", [zed])
        assert [r.record.name for r in results] == ["Zed"]
        assert results[0].score == pytest.approx(0.3)

        licensed = PersonRecord(name="Yan", department="Ops", qualifications=("Forklift",))
        assert _search("anyone with a license", [licensed])[0].score == pytest.approx(0.2)

    def test_custom_weights_change_ranking_scores(self, records: list[PersonRecord]) -> None:
        results = _search("any senior people", records, weights=ConversationalWeights(senior_high=0.5))
        assert results[0].score == pytest.approx(0.5)

    def test_sorted_descending(self, records: list[PersonRecord]) -> None:
        results = _search("react frontend", records)
        assert [r.record.name for r in results] == ["Alice", "Bob"]
        assert results[0].score >= results[1].score

    def test_no_overlap_returns_empty(self, records: list[PersonRecord]) -> None:
        assert _search("zzz qqq", records) == []

    def test_blank_query_returns_empty(self, records: list[PersonRecord]) -> None:
        assert _search("", records) == []
        assert _search("   ", records) == []

    def test_capped_at_limit_and_ties_keep_order(self) -> None:
        many = [PersonRecord(name=f"P{i}", department="Ops", skills=("Python",)) for i in range(50)]
        results = _search("python", many)
        assert len(results) == 5
        assert [r.record.name for r in results] == ["P0", "P1", "P2", "P3", "P4"]

    def test_failed_record_is_skipped(self, records: list[PersonRecord]) -> None:
        original = retrieval_service.best_chunk_similarity

        def flaky(query, chunks):
            if chunks and chunks[0].record.name == "Bob":
                raise RuntimeError("boom")
            return original(query, chunks)

        assert [r.record.name for r in _search("dev", records)] == ["Alice", "Bob"]
        with patch.object(retrieval_service, "best_chunk_similarity", side_effect=flaky):
            results = _search("dev", records)
        assert [r.record.name for r in results] == ["Alice"]
