"""
Retrieval: score every record against a query and return the top matches.

Responsibility: Layered heuristic relevance per record (exact match, partial
match, bag-of-words cosine over the record's chunks, conversational intent),
then rank and truncate. The record's score is the maximum of the layers, not
their sum.
"""

import logging
from dataclasses import dataclass
from typing import Mapping, Sequence

from people_finder.core.config import (
    CONVERSATIONAL_CERTIFIED,
    CONVERSATIONAL_DEPARTMENT,
    CONVERSATIONAL_JUNIOR_HIGH,
    CONVERSATIONAL_JUNIOR_MID,
    CONVERSATIONAL_MULTI_SKILL,
    CONVERSATIONAL_SENIOR_HIGH,
    CONVERSATIONAL_SENIOR_MID,
    COSINE_THRESHOLD,
    EXACT_MATCH_SCORE,
    PARTIAL_MATCH_SCORE,
    SEARCH_RESULT_LIMIT,
)
from people_finder.core.errors import PerRecordAnalysisError
from people_finder.services.classifier import DEPARTMENT_KEYWORDS
from people_finder.services.models import Chunk, MatchType, PersonRecord, SearchResult
from people_finder.services.text_processing import contains_phrase, cosine_similarity, normalize_text

logger = logging.getLogger(__name__)

SENIOR_TERMS: tuple[str, ...] = ("veteran", "senior", "experienced")
JUNIOR_TERMS: tuple[str, ...] = ("junior", "newcomer", "new hire", "beginner")
MULTI_SKILL_TERMS: tuple[str, ...] = ("multiple", "diverse", "versatile", "many skills")
CERTIFICATION_TERMS: tuple[str, ...] = ("certified", "certification", "qualification", "qualified", "license")

# Terms that switch on the conversational heuristic; includes every term that scores.
CONVERSATIONAL_INTENT_TERMS: tuple[str, ...] = tuple(
    dict.fromkeys(
        (
            "recommend", "suggest", "suitable", "good at", "strong in", "specialist", "specialty",
            "expert", "familiar with", "mid-level", "leader", "manager", "capable", "can handle",
            "in charge", "responsible for", "mentor", "guidance", "growing", "outstanding",
            *SENIOR_TERMS,
            *JUNIOR_TERMS,
            *MULTI_SKILL_TERMS,
            *CERTIFICATION_TERMS,
        )
    )
)


@dataclass(frozen=True)
class ConversationalWeights:
    """Increments of the conversational heuristic; defaults come from config/env."""

    senior_high: float = CONVERSATIONAL_SENIOR_HIGH
    senior_mid: float = CONVERSATIONAL_SENIOR_MID
    junior_high: float = CONVERSATIONAL_JUNIOR_HIGH
    junior_mid: float = CONVERSATIONAL_JUNIOR_MID
    multi_skill: float = CONVERSATIONAL_MULTI_SKILL
    certified: float = CONVERSATIONAL_CERTIFIED
    department: float = CONVERSATIONAL_DEPARTMENT


DEFAULT_WEIGHTS = ConversationalWeights()


def _contains_any(text: str, terms: Sequence[str]) -> bool:
    return any(term in text for term in terms)


def _key_fields(record: PersonRecord) -> list[str]:
    """Department, skills and qualifications, normalized, empties dropped."""
    fields = [record.department, *record.skills, *record.qualifications]
    return [f for f in (normalize_text(x) for x in fields) if f]


def check_exact_match(query: str, record: PersonRecord) -> float:
    """
    1.0 when the query contains the record's department, a skill, a
    qualification or the name; else 0.0. `query` must already be normalized.
    """
    if not query:
        return 0.0
    for field_value in [*_key_fields(record), normalize_text(record.name)]:
        if field_value and field_value in query:
            logger.debug("[retrieval:check_exact_match] name=%s field=%r", record.name, field_value)
            return EXACT_MATCH_SCORE
    return 0.0


def check_partial_match(query: str, record: PersonRecord) -> float:
    """0.8 when query and department/skill/qualification contain one another; else 0.0."""
    if not query:
        return 0.0
    for field_value in _key_fields(record):
        if query in field_value or field_value in query:
            return PARTIAL_MATCH_SCORE
    return 0.0


def best_chunk_similarity(query: str, chunks: Sequence[Chunk]) -> tuple[float, list[Chunk]]:
    """Max cosine over chunks above COSINE_THRESHOLD, plus the chunks that passed."""
    best = 0.0
    matched: list[Chunk] = []
    for chunk in chunks:
        similarity = cosine_similarity(query, chunk.content)
        if similarity > COSINE_THRESHOLD:
            matched.append(chunk)
            best = max(best, similarity)
    return best, matched


def is_conversational(query: str) -> bool:
    return _contains_any(query, CONVERSATIONAL_INTENT_TERMS)


def conversational_score(
    query: str, record: PersonRecord, weights: ConversationalWeights = DEFAULT_WEIGHTS
) -> float:
    """
    Additive seniority / junior / multi-skill / certification score, plus a
    department-affinity increment (applied once) when the query names the
    record's department or a department keyword it contains.
    """
    score = 0.0
    years = record.years_of_experience
    if _contains_any(query, SENIOR_TERMS):
        if years >= 5:
            score += weights.senior_high
        elif years >= 3:
            score += weights.senior_mid
    if _contains_any(query, JUNIOR_TERMS):
        if years <= 2:
            score += weights.junior_high
        elif years <= 3:
            score += weights.junior_mid
    if _contains_any(query, MULTI_SKILL_TERMS) and len(record.skills) >= 3:
        score += weights.multi_skill
    if _contains_any(query, CERTIFICATION_TERMS) and record.qualifications:
        score += weights.certified
    department = normalize_text(record.department)
    if contains_phrase(query, department) or any(
        keyword in query and keyword in department for keyword in DEPARTMENT_KEYWORDS
    ):
        score += weights.department
    return score


def explain(score: float) -> str:
    if score > 0.8:
        return "very high relevance"
    if score > 0.6:
        return "high relevance"
    if score > 0.4:
        return "moderate relevance"
    return "low relevance"


def determine_match_type(query: str, record: PersonRecord, score: float) -> MatchType:
    if score >= EXACT_MATCH_SCORE or check_exact_match(query, record) > 0:
        return "exact"
    if score > 0.6:
        return "similar"
    return "category"


def score_record(
    query: str,
    record: PersonRecord,
    chunks: Sequence[Chunk],
    weights: ConversationalWeights = DEFAULT_WEIGHTS,
) -> SearchResult | None:
    """
    Score one record against a normalized query. Returns None when the record
    scores 0. Any failure is re-raised as PerRecordAnalysisError.
    """
    try:
        lexical = check_exact_match(query, record) or check_partial_match(query, record)
        similarity, matched = best_chunk_similarity(query, chunks)
        if lexical > 0:
            matched = list(chunks)
        score = max(lexical, similarity)
        if is_conversational(query):
            score = max(score, conversational_score(query, record, weights))
        if score <= 0:
            return None
        return SearchResult(
            record=record,
            score=score,
            explanation=explain(score),
            match_type=determine_match_type(query, record, score),
            matched_chunks=matched,
        )
    except Exception as e:
        raise PerRecordAnalysisError(record.name, str(e)) from e


def search_records(
    query: str,
    records: Sequence[PersonRecord],
    chunks_by_record: Mapping[int, Sequence[Chunk]],
    limit: int = SEARCH_RESULT_LIMIT,
    weights: ConversationalWeights = DEFAULT_WEIGHTS,
) -> list[SearchResult]:
    """
    Score all records, drop zero scores, sort by score (capped at 1.0 for
    ordering, ties keep record order) and return at most `limit` results.
    """
    normalized = normalize_text(query)
    logger.info("[retrieval:search_records] IN  query=%r records=%d", query, len(records))
    if not normalized:
        logger.info("[retrieval:search_records] OUT empty query, returning []")
        return []

    results: list[SearchResult] = []
    for index, record in enumerate(records):
        try:
            result = score_record(normalized, record, chunks_by_record.get(index, ()), weights)
        except PerRecordAnalysisError as e:
            logger.warning("[retrieval:search_records] skipping record: %s", e)
            continue
        if result is not None:
            results.append(result)

    results.sort(key=lambda r: min(r.score, 1.0), reverse=True)
    top = results[:limit]
    logger.info(
        "[retrieval:search_records] OUT matched=%d returned=%d top=%s",
        len(results),
        len(top),
        [(r.record.name, round(r.score, 3)) for r in top],
    )
    return top
