"""
Prompt construction for escalated questions.

A corpus summary (organization overview, per-department and per-skill
statistics, every record in detail) or the ranked result set is embedded in
one of the templates below, chosen by query type.
"""

from typing import Sequence

from people_finder.core.config import HISTORY_MAX_MESSAGES
from people_finder.services.aggregation_service import analyze_experience, people_count, unique_departments, unique_skills
from people_finder.services.models import PersonRecord, QueryType, SearchResult

_ANSWER_RULES = """\
- Base every statement on the people listed above; do not invent people or facts.
- Refer to concrete people by name when you mention or recommend someone.
- Keep the answer under 100 words.
- Use a natural, friendly tone."""

TEMPLATES: dict[str, str] = {
    "general_question": """\
You are an HR analyst who knows this organization's people data well.
Answer the user's question naturally, using the information below.

People data:
{summary}

{history}User question: {query}

Guidelines:
- Give specific, data-backed information and add insight where useful.
- Understand what the user is after and include a recommendation or suggestion when it helps.
{rules}

Answer:""",
    "analytical": """\
You are an HR data analyst. Answer the user's analytical question from the people data below.

People data:
{summary}

{history}User question: {query}

Guidelines:
- Be objective and use the numbers and statistics available.
- Point out trends and characteristics, and make any ranking or comparison explicit.
- Explain what the result means in practice.
{rules}

Answer:""",
    "fuzzy_search": """\
You are an expert at finding the right person. The user's request is vague;
recommend the people from the data below who best fit it.

People data:
{summary}

{history}User request: {query}

Guidelines:
- Infer what the user is looking for and pick the best candidates.
- Explain clearly why each person was chosen; compare when there are several.
- Offer an alternative if no one is a strong fit.
{rules}

Answer:""",
    "exact_search": """\
You are an expert at finding the right person. Find the people in the data
below who match the user's specific request.

People data:
{summary}

{history}User request: {query}

Guidelines:
- Match the concrete keywords first, then consider partial matches.
- List the most relevant people first and state the matching criteria.
- If no one matches, suggest the closest candidates.
{rules}

Answer:""",
}

DEFAULT_TEMPLATE = """\
Answer the user's question clearly and naturally, using the people data below.

People data:
{summary}

{history}User question: {query}

Guidelines:
{rules}

Answer:"""

RESULTS_TEMPLATE = """\
Answer the user's question briefly, using the matching people below.

Matching people:
{results}

{history}User question: {query}

Guidelines:
{rules}

Answer:"""


def format_history(history: Sequence[dict] | None, max_messages: int = HISTORY_MAX_MESSAGES) -> str:
    """Format the last N messages for inclusion in prompts."""
    if not history:
        return ""
    lines = []
    for m in list(history)[-max_messages:]:
        content = (m.get("content") or "").strip()
        if not content:
            continue
        label = "User" if (m.get("role") or "user").strip().lower() == "user" else "Assistant"
        lines.append(f"{label}: {content}")
    if not lines:
        return ""
    return "Recent conversation:\n" + "\n".join(lines) + "\n\n"


def build_corpus_summary(records: Sequence[PersonRecord]) -> str:
    """Organization overview, department and skill statistics, then every record in detail."""
    if not records:
        return "No people data is available."
    experience = analyze_experience(records)
    departments = unique_departments(records)

    department_lines = []
    for department in departments:
        members = [r for r in records if r.department == department]
        average = round(sum(r.years_of_experience for r in members) / len(members), 1)
        skills = list(dict.fromkeys(s for r in members for s in r.skills))[:5]
        department_lines.append(
            f"{department}: {people_count(len(members))} (average experience {average} years)\n"
            f"  Main skills: {', '.join(skills)}"
        )

    skill_rows = []
    for skill in unique_skills(records):
        holders = [r for r in records if skill in r.skills]
        skill_rows.append((skill, len(holders), list(dict.fromkeys(r.department for r in holders))))
    skill_rows.sort(key=lambda row: row[1], reverse=True)
    skill_lines = [
        f"{skill}: held by {people_count(count)} (departments: {', '.join(depts)})" for skill, count, depts in skill_rows[:10]
    ]

    qualifications = list(dict.fromkeys(q for r in records for q in r.qualifications))
    people = [
        f"{r.name} ({r.department})\n"
        f"  Skills: {', '.join(r.skills)}\n"
        f"  Qualifications: {', '.join(r.qualifications)}\n"
        f"  Experience: {r.experience} ({r.years_of_experience} years)\n"
        f"  Bio: {r.bio}"
        for r in records
    ]

    return "\n".join(
        [
            "[Organization overview]",
            f"People: {len(records)}",
            f"Departments: {len(departments)}",
            f"Average experience: {experience.average} years",
            f"Maximum experience: {experience.max} years",
            f"Minimum experience: {experience.min} years",
            "",
            "[Departments]",
            *department_lines,
            "",
            "[Main skills]",
            *skill_lines,
            "",
            "[Qualifications]",
            ", ".join(qualifications),
            "",
            "[People]",
            "\n\n".join(people),
        ]
    )


def build_prompt(
    query: str,
    records: Sequence[PersonRecord],
    query_type: QueryType | None,
    history: Sequence[dict] | None = None,
) -> str:
    template = TEMPLATES.get(query_type or "", DEFAULT_TEMPLATE)
    return template.format(
        summary=build_corpus_summary(records),
        history=format_history(history),
        query=query,
        rules=_ANSWER_RULES,
    )


def build_results_prompt(query: str, results: Sequence[SearchResult], history: Sequence[dict] | None = None) -> str:
    lines = [
        f"{i}. {r.record.name} ({r.record.department})\n"
        f"   Skills: {', '.join(r.record.skills)}\n"
        f"   Relevance: {r.score:.2f}"
        for i, r in enumerate(results, start=1)
    ]
    return RESULTS_TEMPLATE.format(
        results="\n\n".join(lines),
        history=format_history(history),
        query=query,
        rules=_ANSWER_RULES,
    )
