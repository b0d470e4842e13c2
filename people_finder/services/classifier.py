"""
Query intent classification by ordered keyword rules.

Rules are evaluated in CLASSIFICATION_RULES order and the first rule with a
keyword contained in the (normalized) query wins:

    1. exact-search terms     -> exact_search
    2. conversational terms   -> general_question
    3. analytical terms       -> analytical
    4. general terms          -> general_question
    5. nothing matched        -> fuzzy_search

Keyword sets overlap on purpose (e.g. "experience" is both an exact-search and
an analytical term); the order above decides.
"""

import logging
from dataclasses import dataclass

from people_finder.services.models import QueryType
from people_finder.services.text_processing import normalize_text

logger = logging.getLogger(__name__)

EXACT_SEARCH_KEYWORDS: tuple[str, ...] = (
    # technologies
    "python", "javascript", "typescript", "java", "react", "vue", "angular", "node.js", "nodejs",
    "aws", "azure", "gcp", "docker", "kubernetes", "sql", "mongodb", "redis", "html", "css",
    "php", "ruby", "golang",
    # departments
    "development", "infrastructure", "design", "sales", "planning", "human resources",
    # profile fields
    "qualification", "experience", "programming", "coding",
)

# Department words recognized in queries; shared with the scorer and aggregator.
DEPARTMENT_KEYWORDS: tuple[str, ...] = (
    "development", "infrastructure", "design", "sales", "planning",
)

CONVERSATIONAL_KEYWORDS: tuple[str, ...] = (
    "recommend", "suggest", "suitable", "best fit", "good at", "strong in", "specialist",
    "specialty", "expert", "familiar with", "veteran", "senior", "junior", "newcomer",
    "new hire", "mid-level", "leader", "manager", "capable", "can handle", "in charge",
    "responsible for",
)

ANALYTICAL_KEYWORDS: tuple[str, ...] = (
    "how many", "number of", "headcount", "outstanding", "top performer", "experience",
    "years", "most", "least", "average", "statistic", "analysis", "analyze", "top", "best",
    "highest", "lowest", "compare", "ranking", "rank", "how much", "how long", "percentage",
    "percent", "ratio", "proportion",
)

GENERAL_KEYWORDS: tuple[str, ...] = (
    "department", "what kind", "what sort", "characteristic", "trend", "list", "overview",
    "introduce", "tell me", "explain", "detail", "summary", "summarize", "company",
    "organization", "team", "member", "employee", "staff", "skill", "technolog",
)


@dataclass(frozen=True)
class ClassificationRule:
    name: str
    keywords: tuple[str, ...]
    query_type: QueryType


CLASSIFICATION_RULES: tuple[ClassificationRule, ...] = (
    ClassificationRule("exact", EXACT_SEARCH_KEYWORDS, "exact_search"),
    ClassificationRule("conversational", CONVERSATIONAL_KEYWORDS, "general_question"),
    ClassificationRule("analytical", ANALYTICAL_KEYWORDS, "analytical"),
    ClassificationRule("general", GENERAL_KEYWORDS, "general_question"),
)

DEFAULT_QUERY_TYPE: QueryType = "fuzzy_search"


def matches(rule: ClassificationRule, query: str) -> bool:
    """True when any of the rule's keywords is contained in the normalized query."""
    normalized = normalize_text(query)
    return bool(normalized) and any(keyword in normalized for keyword in rule.keywords)


def classify(query: str, rules: tuple[ClassificationRule, ...] = CLASSIFICATION_RULES) -> QueryType:
    """Return the query type of the first matching rule, or fuzzy_search."""
    for rule in rules:
        if matches(rule, query):
            logger.info("[classifier:classify] query=%r rule=%s -> %s", query, rule.name, rule.query_type)
            return rule.query_type
    logger.info("[classifier:classify] query=%r no rule matched -> %s", query, DEFAULT_QUERY_TYPE)
    return DEFAULT_QUERY_TYPE
