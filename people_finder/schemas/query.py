"""Schemas for the search and query endpoints."""

from typing import Any, Literal

from pydantic import BaseModel, Field


class SearchRequest(BaseModel):
    query: str = Field(..., description="Free-text query.")


class SearchResultOut(BaseModel):
    name: str
    department: str
    skills: list[str]
    qualifications: list[str]
    experience: str
    years_of_experience: int
    score: float
    explanation: str
    match_type: Literal["exact", "similar", "category"]


class AggregationOut(BaseModel):
    kind: Literal["count", "list", "statistics"]
    value: Any
    description: str
    details: dict[str, Any] | None = None


class SearchResponseOut(BaseModel):
    """Raw engine answer plus its rendered text."""

    results: list[SearchResultOut]
    aggregation: AggregationOut | None = None
    query_type: Literal["exact_search", "fuzzy_search", "analytical", "general_question"]
    should_escalate: bool = Field(..., description="True when the caller should hand the question to the text generator.")
    formatted: str


class QueryRequest(BaseModel):
    """Request body for POST /query and /query/stream. History is stored server-side by session_id."""

    question: str = Field(..., description="User question.")
    session_id: str = Field(..., min_length=1, description="Session ID; chat history is stored on the server for this session.")
    mode: Literal["search", "chat"] = Field("search", description="search: full escalation policy; chat: answer from ranked matches.")


class QueryResponse(BaseModel):
    """Response for POST /query."""

    answer: str = Field(..., description="Final answer shown to the user.")
    query_type: str | None = Field(None, description="Classified intent, when the query reached the engine.")
    escalated: bool = Field(False, description="Whether the text generator was used.")
    results_count: int = Field(0, description="Number of ranked matches behind the answer.")
