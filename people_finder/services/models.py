"""
Typed records shared by the search engine: person records, derived chunks,
search results and aggregation results.
"""

import re
from dataclasses import dataclass, field
from typing import Any, Literal, Mapping

from people_finder.core.config import DEFAULT_DEPARTMENT, DEFAULT_NAME_PREFIX

QueryType = Literal["exact_search", "fuzzy_search", "analytical", "general_question"]
ChunkType = Literal["basic", "skills", "experience", "qualifications"]
MatchType = Literal["exact", "similar", "category"]
AggregationKind = Literal["count", "list", "statistics"]

_DIGITS = re.compile(r"-?\d+")


def _split_list(value: Any) -> tuple[str, ...]:
    """Accept a list or a comma-separated string; trim items and drop empties."""
    if value is None:
        return ()
    if isinstance(value, str):
        items = value.split(",")
    else:
        items = [str(v) for v in value if v is not None]
    return tuple(s.strip() for s in items if s and s.strip())


def _parse_years(value: Any) -> int:
    """First run of digits in the value; anything unparseable or negative is 0."""
    if value is None or isinstance(value, bool):
        return 0
    if isinstance(value, (int, float)):
        return max(0, int(value))
    match = _DIGITS.search(str(value))
    return max(0, int(match.group(0))) if match else 0


@dataclass(frozen=True)
class PersonRecord:
    """One normalized person row. Name and department are never empty."""

    name: str
    department: str
    skills: tuple[str, ...] = ()
    qualifications: tuple[str, ...] = ()
    bio: str = ""
    experience: str = ""
    years_of_experience: int = 0

    @classmethod
    def from_mapping(cls, row: Mapping[str, Any], index: int = 0) -> "PersonRecord":
        """Build a record from a loosely-typed row, substituting placeholders for missing fields."""
        name = str(row.get("name") or "").strip() or f"{DEFAULT_NAME_PREFIX} {index + 1}"
        department = str(row.get("department") or "").strip() or DEFAULT_DEPARTMENT
        return cls(
            name=name,
            department=department,
            skills=_split_list(row.get("skills")),
            qualifications=_split_list(row.get("qualifications")),
            bio=str(row.get("bio") or "").strip(),
            experience=str(row.get("experience") or "").strip(),
            years_of_experience=_parse_years(row.get("years_of_experience")),
        )


@dataclass(frozen=True)
class ChunkMetadata:
    """Filterable copy of the originating record's fields."""

    department: str
    skills: tuple[str, ...]
    qualifications: tuple[str, ...]
    years_of_experience: int


@dataclass(frozen=True)
class Chunk:
    """A templated sentence describing one facet of one record."""

    id: str
    record_index: int
    record: PersonRecord
    chunk_type: ChunkType
    content: str
    metadata: ChunkMetadata


@dataclass
class SearchResult:
    record: PersonRecord
    score: float
    explanation: str
    match_type: MatchType
    matched_chunks: list[Chunk] = field(default_factory=list)


@dataclass
class AggregationResult:
    kind: AggregationKind
    value: int | list[str] | dict[str, Any]
    description: str
    details: dict[str, Any] | None = None


@dataclass
class SearchResponse:
    """
    Engine answer for one query. should_escalate asks the caller to use the
    generator; corpus is the record snapshot the answer was computed from.
    """

    results: list[SearchResult]
    query_type: QueryType
    should_escalate: bool
    aggregation: AggregationResult | None = None
    corpus: tuple[PersonRecord, ...] = field(default=(), repr=False)
