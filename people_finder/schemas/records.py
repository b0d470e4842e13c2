"""Schemas for the record endpoints."""

from typing import Any

from pydantic import BaseModel, Field

from people_finder.services.models import PersonRecord


class PersonRecordIn(BaseModel):
    """One person row as supplied by the ingestion side. Missing fields are defaulted."""

    name: str | None = Field(None, description="Full name; a placeholder is used when blank.")
    department: str | None = Field(None, description="Department; 'Unassigned' when blank.")
    skills: list[str] | str | None = Field(None, description="List of skills or a comma-separated string.")
    qualifications: list[str] | str | None = Field(None, description="List of qualifications or a comma-separated string.")
    bio: str | None = Field(None, description="Self-introduction / profile text.")
    experience: str | None = Field(None, description="Description of development experience.")
    years_of_experience: int | str | None = Field(None, description="Years of experience; non-numeric text becomes 0.")

    def to_record(self, index: int) -> PersonRecord:
        return PersonRecord.from_mapping(self.model_dump(), index)


class LoadRecordsRequest(BaseModel):
    records: list[PersonRecordIn] = Field(..., description="Full record set; replaces whatever was loaded before.")


class LoadRecordsResponse(BaseModel):
    records: int = Field(..., description="Number of records now loaded.")
    chunks: int = Field(..., description="Number of derived text chunks.")

    model_config = {"json_schema_extra": {"examples": [{"records": 3, "chunks": 11}]}}


class RecordsSummary(BaseModel):
    records: int
    departments: dict[str, Any]
    skills: dict[str, Any]
    experience: dict[str, Any]
