"""
Shared fixtures: a three-person corpus and an engine loaded with it.
"""

import pytest

from people_finder.services.models import PersonRecord
from people_finder.services.search_engine import SearchEngine


@pytest.fixture
def alice() -> PersonRecord:
    return PersonRecord(
        name="Alice",
        department="Dev",
        skills=("Python", "React", "Docker"),
        qualifications=("AWS Certified Solutions Architect",),
        bio="Enjoys building web services.",
        experience="Built an e-commerce backend",
        years_of_experience=6,
    )


@pytest.fixture
def bob() -> PersonRecord:
    return PersonRecord(
        name="Bob",
        department="Dev",
        skills=("JavaScript",),
        bio="Learning frontend.",
        years_of_experience=1,
    )


@pytest.fixture
def carol() -> PersonRecord:
    return PersonRecord(
        name="Carol",
        department="Design",
        skills=("Figma", "Photoshop"),
        qualifications=("Color Coordinator",),
        experience="Designed mobile apps",
        years_of_experience=4,
    )


@pytest.fixture
def records(alice: PersonRecord, bob: PersonRecord, carol: PersonRecord) -> list[PersonRecord]:
    return [alice, bob, carol]


@pytest.fixture
def engine(records: list[PersonRecord]) -> SearchEngine:
    e = SearchEngine()
    e.initialize(records)
    return e


@pytest.fixture
def record_rows() -> list[dict]:
    """The same corpus as plain JSON rows, as the API receives it."""
    return [
        {
            "name": "Alice",
            "department": "Dev",
            "skills": ["Python", "React", "Docker"],
            "qualifications": "AWS Certified Solutions Architect",
            "bio": "Enjoys building web services.",
            "experience": "Built an e-commerce backend",
            "years_of_experience": 6,
        },
        {"name": "Bob", "department": "Dev", "skills": "JavaScript", "bio": "Learning frontend.", "years_of_experience": "1"},
        {
            "name": "Carol",
            "department": "Design",
            "skills": "Figma, Photoshop",
            "qualifications": ["Color Coordinator"],
            "experience": "Designed mobile apps",
            "years_of_experience": "4 years",
        },
    ]
