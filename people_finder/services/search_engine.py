"""
Search engine: the per-query decision between ranked matches, a computed
statistic, or escalation to the text generator.

Responsibility: Own one RecordStore, classify each query, try aggregation
first, then dispatch by query type. Called by the assistant graph and the
API; no HTTP and no generation here.
"""

import logging
from typing import Sequence

from people_finder.core.config import SEARCH_RESULT_LIMIT
from people_finder.core.errors import EmptyCorpusError, EmptyQueryError, PerRecordAnalysisError
from people_finder.core.record_store import RecordStore, Snapshot
from people_finder.services import aggregation_service as agg
from people_finder.services.classifier import classify
from people_finder.services.models import (
    AggregationResult,
    Chunk,
    PersonRecord,
    QueryType,
    SearchResponse,
    SearchResult,
)
from people_finder.services.retrieval_service import DEFAULT_WEIGHTS, ConversationalWeights, search_records
from people_finder.services.text_processing import normalize_text

logger = logging.getLogger(__name__)

NO_RESULTS_MESSAGE = "No one matched your search."

# general_question sub-intents that need a narrative answer even when matches exist
RECOMMENDATION_TERMS: tuple[str, ...] = ("recommend", "suggest", "suitable", "best fit")
EXPERTISE_TERMS: tuple[str, ...] = ("specialist", "specialty", "expert", "familiar with", "good at", "strong in")
MENTORING_TERMS: tuple[str, ...] = ("mentor", "guidance", "newcomer", "new hire")
SENIORITY_TERMS: tuple[str, ...] = ("junior", "veteran", "senior")

DEPARTMENT_LIST_TERMS: tuple[str, ...] = ("what", "which", "list", "exist")
SKILL_TERMS: tuple[str, ...] = ("skill", "technolog")
EXPERIENCE_TERMS: tuple[str, ...] = ("experience", "years")
TOP_PERFORMER_TERMS: tuple[str, ...] = ("outstanding", "top performer", "best", "top")
DEPARTMENT_STATS_TERMS: tuple[str, ...] = ("how many", "number of", "most", "outstanding", "best", "top")


def _has(text: str, terms: Sequence[str]) -> bool:
    return any(term in text for term in terms)


def format_record_block(position: int, result: SearchResult) -> str:
    record = result.record
    return (
        f"{position}. {record.name}\n"
        f"   Department: {record.department}\n"
        f"   Skills: {', '.join(record.skills)}\n"
        f"   Qualifications: {', '.join(record.qualifications)}\n"
        f"   Experience: {record.experience}\n"
        f"   Relevance: {result.explanation}"
    )


class SearchEngine:
    """One engine per corpus. initialize() replaces the corpus; search() is read-only."""

    def __init__(
        self,
        weights: ConversationalWeights = DEFAULT_WEIGHTS,
        result_limit: int = SEARCH_RESULT_LIMIT,
    ) -> None:
        self._store = RecordStore()
        self.weights = weights
        self.result_limit = result_limit

    def initialize(self, records: Sequence[PersonRecord]) -> None:
        logger.info("[engine:initialize] IN  records=%d", len(records))
        snapshot = self._store.replace(records)
        if snapshot.is_empty:
            logger.warning("[engine:initialize] corpus is empty; queries will report no data")

    @property
    def records(self) -> tuple[PersonRecord, ...]:
        return self._store.snapshot().records

    @property
    def chunks(self) -> tuple[Chunk, ...]:
        return self._store.snapshot().chunks

    @property
    def record_count(self) -> int:
        return len(self._store.snapshot().records)

    def search(self, query: str) -> SearchResponse:
        """
        Classify, try aggregation, then dispatch by query type.

        Raises EmptyQueryError for a blank query and EmptyCorpusError when no
        records are loaded.
        """
        if not query or not query.strip():
            raise EmptyQueryError()
        snapshot = self._store.snapshot()
        if snapshot.is_empty:
            raise EmptyCorpusError()

        logger.info("[engine:search] IN  query=%r records=%d", query, len(snapshot.records))
        query_type = classify(query)

        aggregation = agg.detect_aggregation(query, snapshot.records)
        if aggregation is not None:
            logger.info("[engine:search] OUT aggregation kind=%s", aggregation.kind)
            return SearchResponse(
                results=[],
                aggregation=aggregation,
                query_type=query_type,
                should_escalate=False,
                corpus=snapshot.records,
            )

        if query_type == "analytical":
            response = self._handle_analytical(query, snapshot)
        elif query_type == "general_question":
            response = self._handle_general(query, snapshot)
        else:
            results = self._rank(query, snapshot)
            response = SearchResponse(results=results, query_type=query_type, should_escalate=not results)
        response.corpus = snapshot.records
        logger.info(
            "[engine:search] OUT type=%s results=%d aggregation=%s escalate=%s",
            response.query_type,
            len(response.results),
            response.aggregation.kind if response.aggregation else None,
            response.should_escalate,
        )
        return response

    def _rank(self, query: str, snapshot: Snapshot) -> list[SearchResult]:
        return search_records(
            query, snapshot.records, snapshot.chunks_by_record, limit=self.result_limit, weights=self.weights
        )

    def _handle_analytical(self, query: str, snapshot: Snapshot) -> SearchResponse:
        text = normalize_text(query)
        records = snapshot.records
        query_type: QueryType = "analytical"
        aggregation: AggregationResult | None = None

        if "department" in text and _has(text, DEPARTMENT_STATS_TERMS):
            aggregation = agg.department_statistics(records, query)
        elif _has(text, SKILL_TERMS):
            aggregation = agg.skill_statistics(records, query)
        elif _has(text, EXPERIENCE_TERMS):
            aggregation = agg.experience_statistics(records, query)
        elif _has(text, TOP_PERFORMER_TERMS):
            performers = agg.find_top_performers(records)
            return SearchResponse(results=performers, query_type=query_type, should_escalate=False)

        return SearchResponse(
            results=[], aggregation=aggregation, query_type=query_type, should_escalate=aggregation is None
        )

    def _handle_general(self, query: str, snapshot: Snapshot) -> SearchResponse:
        text = normalize_text(query)
        query_type: QueryType = "general_question"

        if "department" in text and _has(text, DEPARTMENT_LIST_TERMS):
            return SearchResponse(
                results=[], aggregation=agg.department_list(snapshot.records), query_type=query_type, should_escalate=False
            )
        if _has(text, SKILL_TERMS):
            return SearchResponse(
                results=[], aggregation=agg.skill_list(snapshot.records), query_type=query_type, should_escalate=False
            )
        for terms in (RECOMMENDATION_TERMS, EXPERTISE_TERMS, MENTORING_TERMS, SENIORITY_TERMS):
            if _has(text, terms):
                results = self._rank(query, snapshot)
                return SearchResponse(results=results, query_type=query_type, should_escalate=True)
        return SearchResponse(results=[], query_type=query_type, should_escalate=True)

    @staticmethod
    def format_results(results: Sequence[SearchResult], aggregation: AggregationResult | None = None) -> str:
        """Aggregation text verbatim if present, else numbered record blocks separated by blank lines."""
        if aggregation is not None:
            return aggregation.description
        if not results:
            return NO_RESULTS_MESSAGE
        blocks: list[str] = []
        for result in results:
            # numbering stays contiguous over the blocks that rendered
            try:
                blocks.append(format_record_block(len(blocks) + 1, result))
            except Exception as e:
                error = PerRecordAnalysisError(getattr(getattr(result, "record", None), "name", "?"), str(e))
                logger.warning("[engine:format_results] skipping result: %s", error)
        return "\n\n".join(blocks) if blocks else NO_RESULTS_MESSAGE
