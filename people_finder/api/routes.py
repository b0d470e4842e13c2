"""
API route aggregator: register endpoints and delegate to handlers.
"""

import json
import logging

from fastapi import APIRouter, Depends, HTTPException, Request
from fastapi.responses import StreamingResponse

from people_finder.agent.graph import GENERATION_FAILED_MESSAGE, run_assistant, run_assistant_stream
from people_finder.agent.llm import generation_status
from people_finder.api.handlers import handle_load_records, handle_search, handle_summary
from people_finder.core.errors import ServiceUnavailableError
from people_finder.core.session_store import SessionStore
from people_finder.schemas.query import QueryRequest, QueryResponse, SearchRequest, SearchResponseOut
from people_finder.schemas.records import LoadRecordsRequest, LoadRecordsResponse, RecordsSummary
from people_finder.services.search_engine import SearchEngine

logger = logging.getLogger(__name__)
router = APIRouter()

INTERNAL_ERROR_MESSAGE = "Something went wrong while answering. Please try again."


def get_engine(request: Request) -> SearchEngine:
    return request.app.state.engine


def get_sessions(request: Request) -> SessionStore:
    return request.app.state.sessions


# --- System ---

@router.get("/", tags=["system"])
def root():
    return {"status": "People finder running"}


@router.get("/health", tags=["system"])
def health(engine: SearchEngine = Depends(get_engine)):
    return {
        "ok": True,
        "records": engine.record_count,
        "chunks": len(engine.chunks),
        "generation": generation_status(),
    }


# --- Records ---

@router.post(
    "/records",
    response_model=LoadRecordsResponse,
    tags=["records"],
    summary="Load person records",
    description="Replace the loaded record set. Blank names/departments are defaulted; an empty list clears the corpus.",
)
def load_records(body: LoadRecordsRequest, engine: SearchEngine = Depends(get_engine)) -> LoadRecordsResponse:
    return handle_load_records(engine, body)


@router.delete("/records", tags=["records"], summary="Clear records and chat sessions")
def clear_records(
    engine: SearchEngine = Depends(get_engine), sessions: SessionStore = Depends(get_sessions)
) -> dict:
    engine.initialize([])
    sessions.clear()
    return {"cleared": True}


@router.get("/records/summary", response_model=RecordsSummary, tags=["records"], summary="Department, skill and experience statistics")
def records_summary(engine: SearchEngine = Depends(get_engine)) -> RecordsSummary:
    return handle_summary(engine)


# --- Search (raw engine) ---

@router.post(
    "/search",
    response_model=SearchResponseOut,
    tags=["query"],
    summary="Run the search engine without generation",
    description="Returns ranked results or an aggregation, the query type and the escalation flag. 400 on blank query, 409 when no records are loaded.",
)
def post_search(body: SearchRequest, engine: SearchEngine = Depends(get_engine)) -> SearchResponseOut:
    return handle_search(engine, body.query)


# --- Query (assistant) ---

@router.post(
    "/query",
    response_model=QueryResponse,
    tags=["query"],
    summary="Ask a question (sync)",
    description="Search, then format or escalate to the text generator. Failures come back as friendly answers.",
)
def post_query(
    body: QueryRequest,
    engine: SearchEngine = Depends(get_engine),
    sessions: SessionStore = Depends(get_sessions),
) -> QueryResponse:
    logger.info("[api:post_query] IN  question=%r session_id=%s mode=%s", body.question, body.session_id, body.mode)
    history = sessions.get_history(body.session_id)
    try:
        out = run_assistant(engine, body.question, history=history, mode=body.mode)
    except ServiceUnavailableError as e:
        logger.warning("[api:post_query] service unavailable: %s", e.message)
        raise HTTPException(status_code=503, detail=GENERATION_FAILED_MESSAGE) from e
    except Exception as e:
        logger.exception("Assistant failed")
        raise HTTPException(status_code=500, detail=INTERNAL_ERROR_MESSAGE) from e
    sessions.append_message(body.session_id, "user", body.question)
    sessions.append_message(body.session_id, "assistant", out["answer"])
    logger.info("[api:post_query] OUT escalated=%s answer_len=%d", out["escalated"], len(out["answer"]))
    return QueryResponse(**out)


def _sse_generator(engine: SearchEngine, sessions: SessionStore, body: QueryRequest, history: list):
    """Yield Server-Sent Events for the assistant's steps."""
    sessions.append_message(body.session_id, "user", body.question)
    for evt in run_assistant_stream(engine, body.question, history, mode=body.mode):
        event_type = evt.pop("event", "")
        if event_type == "answer":
            sessions.append_message(body.session_id, "assistant", evt.get("answer", ""))
        yield f"event: {event_type}\ndata: {json.dumps(evt)}\n\n"


@router.post(
    "/query/stream",
    tags=["query"],
    summary="Ask a question (SSE stream)",
    description="Stream the assistant's steps via Server-Sent Events. Events: search, answer, error.",
)
def post_query_stream(
    body: QueryRequest,
    engine: SearchEngine = Depends(get_engine),
    sessions: SessionStore = Depends(get_sessions),
) -> StreamingResponse:
    logger.info("[api:post_query_stream] IN  question=%r session_id=%s", body.question, body.session_id)
    history = sessions.get_history(body.session_id)
    return StreamingResponse(
        _sse_generator(engine, sessions, body, history),
        media_type="text/event-stream",
        headers={
            "Cache-Control": "no-cache",
            "Connection": "keep-alive",
            "X-Accel-Buffering": "no",
        },
    )
