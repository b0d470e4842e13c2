"""
API handlers: convert request models, call services, map results/errors to HTTP.

Responsibility: Bridge HTTP types and services. Marshalling and exception-to-HTTP mapping.
Lives in the API layer so services stay free of FastAPI/HTTP types.
"""

import logging
from dataclasses import asdict

from fastapi import HTTPException

from people_finder.agent.graph import EMPTY_QUERY_MESSAGE, NO_DATA_MESSAGE
from people_finder.core.errors import EmptyCorpusError, EmptyQueryError
from people_finder.schemas.query import AggregationOut, SearchResponseOut, SearchResultOut
from people_finder.schemas.records import LoadRecordsRequest, LoadRecordsResponse, RecordsSummary
from people_finder.services.aggregation_service import analyze_departments, analyze_experience, analyze_skills
from people_finder.services.models import SearchResponse, SearchResult
from people_finder.services.search_engine import SearchEngine

logger = logging.getLogger(__name__)


def handle_load_records(engine: SearchEngine, body: LoadRecordsRequest) -> LoadRecordsResponse:
    """Default every row, then replace the engine's corpus in one step."""
    records = [row.to_record(i) for i, row in enumerate(body.records)]
    engine.initialize(records)
    return LoadRecordsResponse(records=engine.record_count, chunks=len(engine.chunks))


def handle_summary(engine: SearchEngine) -> RecordsSummary:
    records = engine.records
    return RecordsSummary(
        records=len(records),
        departments=asdict(analyze_departments(records)),
        skills=asdict(analyze_skills(records)),
        experience=asdict(analyze_experience(records)),
    )


def _result_out(result: SearchResult) -> SearchResultOut:
    record = result.record
    return SearchResultOut(
        name=record.name,
        department=record.department,
        skills=list(record.skills),
        qualifications=list(record.qualifications),
        experience=record.experience,
        years_of_experience=record.years_of_experience,
        score=result.score,
        explanation=result.explanation,
        match_type=result.match_type,
    )


def to_response_out(engine: SearchEngine, response: SearchResponse) -> SearchResponseOut:
    aggregation = response.aggregation
    return SearchResponseOut(
        results=[_result_out(r) for r in response.results],
        aggregation=AggregationOut(**asdict(aggregation)) if aggregation else None,
        query_type=response.query_type,
        should_escalate=response.should_escalate,
        formatted=engine.format_results(response.results, aggregation),
    )


def handle_search(engine: SearchEngine, query: str) -> SearchResponseOut:
    """Run the engine; blank query → 400, nothing loaded → 409, both with fixed messages."""
    try:
        response = engine.search(query)
    except EmptyQueryError as e:
        raise HTTPException(status_code=400, detail=EMPTY_QUERY_MESSAGE) from e
    except EmptyCorpusError as e:
        raise HTTPException(status_code=409, detail=NO_DATA_MESSAGE) from e
    return to_response_out(engine, response)
