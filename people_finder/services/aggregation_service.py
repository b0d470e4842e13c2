"""
Aggregation: corpus-wide counts and statistics rendered as plain sentences.

Responsibility: Answer "how many ..." questions without ranking, compute
department / skill / experience breakdowns, rank top performers, and list
distinct departments and skills. Pure functions over the record list.
"""

import logging
from dataclasses import asdict, dataclass
from typing import Sequence

from people_finder.core.config import TOP_PERFORMER_LIMIT
from people_finder.services.classifier import DEPARTMENT_KEYWORDS
from people_finder.services.models import AggregationResult, PersonRecord, SearchResult
from people_finder.services.text_processing import contains_phrase, normalize_text

logger = logging.getLogger(__name__)

COUNT_TERMS: tuple[str, ...] = ("how many", "number of", "headcount")
# Checked in order; "javascript" must come before "java".
COUNTED_SKILL_KEYWORDS: tuple[str, ...] = ("python", "javascript", "java", "react", "aws", "docker")
TOP_TERMS: tuple[str, ...] = ("top", "best", "most", "outstanding", "largest", "highest")


@dataclass
class DepartmentStats:
    counts: dict[str, int]
    skills: dict[str, list[str]]
    total: int


@dataclass
class SkillStats:
    counts: dict[str, int]
    departments: dict[str, list[str]]
    total: int


@dataclass
class ExperienceStats:
    average: float
    max: int
    min: int
    total: int


def people_count(count: int) -> str:
    return "1 person" if count == 1 else f"{count} people"


def _wants_highlight(query: str) -> bool:
    normalized = normalize_text(query)
    return any(term in normalized for term in TOP_TERMS)


def unique_departments(records: Sequence[PersonRecord]) -> list[str]:
    return list(dict.fromkeys(r.department for r in records))


def unique_skills(records: Sequence[PersonRecord]) -> list[str]:
    return list(dict.fromkeys(skill for r in records for skill in r.skills))


def _count_department(token: str, label: str, records: Sequence[PersonRecord], exact: bool = False) -> AggregationResult:
    if exact:
        count = sum(1 for r in records if normalize_text(r.department) == token)
    else:
        count = sum(1 for r in records if token in normalize_text(r.department))
    return AggregationResult(
        kind="count",
        value=count,
        description=f"{people_count(count)} belong to the {label} department.",
        details={"department": label, "count": count, "total": len(records)},
    )


def _count_skill(token: str, records: Sequence[PersonRecord]) -> AggregationResult:
    count = sum(1 for r in records if any(token in normalize_text(s) for s in r.skills))
    verb = "has" if count == 1 else "have"
    return AggregationResult(
        kind="count",
        value=count,
        description=f"{people_count(count)} {verb} {token} skills.",
        details={"skill": token, "count": count, "total": len(records)},
    )


def detect_aggregation(query: str, records: Sequence[PersonRecord]) -> AggregationResult | None:
    """
    Recognize "how many" + department and "how many" + skill questions.

    Departments present in the corpus are tried first (longest name wins) and
    must appear as whole words, so a short name like "IT" does not match
    inside "with". Then the fixed department keywords, then
    COUNTED_SKILL_KEYWORDS. Returns None when no pattern applies.
    """
    normalized = normalize_text(query)
    if not normalized or not any(term in normalized for term in COUNT_TERMS):
        return None

    for department in sorted(unique_departments(records), key=len, reverse=True):
        token = normalize_text(department)
        if contains_phrase(normalized, token):
            result = _count_department(token, department, records, exact=True)
            logger.info("[aggregation:detect] department=%r count=%s", department, result.value)
            return result

    for keyword in DEPARTMENT_KEYWORDS:
        if keyword in normalized:
            result = _count_department(keyword, keyword.capitalize(), records)
            logger.info("[aggregation:detect] department_keyword=%r count=%s", keyword, result.value)
            return result

    for skill in COUNTED_SKILL_KEYWORDS:
        if skill in normalized:
            result = _count_skill(skill, records)
            logger.info("[aggregation:detect] skill=%r count=%s", skill, result.value)
            return result

    return None


def analyze_departments(records: Sequence[PersonRecord]) -> DepartmentStats:
    counts: dict[str, int] = {}
    skills: dict[str, list[str]] = {}
    for record in records:
        counts[record.department] = counts.get(record.department, 0) + 1
        skills.setdefault(record.department, []).extend(record.skills)
    return DepartmentStats(counts=counts, skills=skills, total=len(records))


def analyze_skills(records: Sequence[PersonRecord]) -> SkillStats:
    counts: dict[str, int] = {}
    departments: dict[str, list[str]] = {}
    for record in records:
        for skill in record.skills:
            counts[skill] = counts.get(skill, 0) + 1
            depts = departments.setdefault(skill, [])
            if record.department not in depts:
                depts.append(record.department)
    return SkillStats(counts=counts, departments=departments, total=len(records))


def analyze_experience(records: Sequence[PersonRecord]) -> ExperienceStats:
    years = [r.years_of_experience for r in records]
    if not years:
        return ExperienceStats(average=0.0, max=0, min=0, total=0)
    return ExperienceStats(
        average=round(sum(years) / len(years), 1),
        max=max(years),
        min=min(years),
        total=len(years),
    )


def format_department_analysis(stats: DepartmentStats, query: str) -> str:
    lines = ["Department breakdown:", ""]
    for department, count in stats.counts.items():
        main_skills = list(dict.fromkeys(stats.skills.get(department, [])))[:3]
        lines.append(f"{department}: {people_count(count)}")
        lines.append(f"  Main skills: {', '.join(main_skills)}")
        lines.append("")
    description = "\n".join(lines)
    if _wants_highlight(query) and stats.counts:
        top_department, top_count = max(stats.counts.items(), key=lambda item: item[1])
        description += f"The largest department is {top_department} ({people_count(top_count)})."
    return description


def format_skill_analysis(stats: SkillStats, query: str) -> str:
    ranked = sorted(stats.counts.items(), key=lambda item: item[1], reverse=True)
    lines = ["Skill breakdown:", ""]
    for skill, count in ranked[:5]:
        lines.append(f"{skill}: held by {people_count(count)}")
        lines.append(f"  Departments: {', '.join(stats.departments.get(skill, []))}")
        lines.append("")
    description = "\n".join(lines)
    if _wants_highlight(query) and ranked:
        top_skill, top_count = ranked[0]
        description += f"The most widely held skill is {top_skill} ({people_count(top_count)})."
    return description


def format_experience_analysis(stats: ExperienceStats, query: str, records: Sequence[PersonRecord]) -> str:
    description = (
        "Years of experience:\n\n"
        f"Average: {stats.average} years\n"
        f"Maximum: {stats.max} years\n"
        f"Minimum: {stats.min} years\n"
        f"People: {stats.total}\n\n"
    )
    if _wants_highlight(query):
        experienced = sum(1 for r in records if r.years_of_experience >= stats.average)
        description += f"{people_count(experienced)} have at least the average experience."
    return description


def department_statistics(records: Sequence[PersonRecord], query: str) -> AggregationResult:
    stats = analyze_departments(records)
    return AggregationResult(
        kind="statistics",
        value=asdict(stats),
        description=format_department_analysis(stats, query),
        details=asdict(stats),
    )


def skill_statistics(records: Sequence[PersonRecord], query: str) -> AggregationResult:
    stats = analyze_skills(records)
    return AggregationResult(
        kind="statistics",
        value=asdict(stats),
        description=format_skill_analysis(stats, query),
        details=asdict(stats),
    )


def experience_statistics(records: Sequence[PersonRecord], query: str) -> AggregationResult:
    stats = analyze_experience(records)
    return AggregationResult(
        kind="statistics",
        value=asdict(stats),
        description=format_experience_analysis(stats, query, records),
        details=asdict(stats),
    )


def department_list(records: Sequence[PersonRecord]) -> AggregationResult:
    departments = unique_departments(records)
    return AggregationResult(
        kind="list",
        value=departments,
        description="The organization has the following departments:\n" + "\n".join(departments),
        details={"departments": departments},
    )


def skill_list(records: Sequence[PersonRecord]) -> AggregationResult:
    skills = unique_skills(records)
    return AggregationResult(
        kind="list",
        value=skills,
        description="Skills held across the organization:\n" + "\n".join(skills),
        details={"skills": skills},
    )


def find_top_performers(records: Sequence[PersonRecord], limit: int = TOP_PERFORMER_LIMIT) -> list[SearchResult]:
    """Rank by skills×0.3 + qualifications×0.2 + years×0.1 and keep the first `limit`."""
    scored = [
        SearchResult(
            record=r,
            score=len(r.skills) * 0.3 + len(r.qualifications) * 0.2 + r.years_of_experience * 0.1,
            explanation=(
                f"skills: {len(r.skills)}, qualifications: {len(r.qualifications)}, "
                f"experience: {r.years_of_experience} years"
            ),
            match_type="similar",
        )
        for r in records
    ]
    scored.sort(key=lambda r: r.score, reverse=True)
    logger.info("[aggregation:find_top_performers] OUT %s", [(r.record.name, round(r.score, 2)) for r in scored[:limit]])
    return scored[:limit]
