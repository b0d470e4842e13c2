"""
Chunking: derive one templated sentence per record facet.

Every record yields a "basic" chunk; "skills", "experience" and
"qualifications" chunks exist only when the matching field is non-empty.
Content is a fixed template over the record's fields, so rebuilding from the
same records gives the same chunks.
"""

import logging
from typing import Sequence

from people_finder.services.models import Chunk, ChunkMetadata, ChunkType, PersonRecord

logger = logging.getLogger(__name__)


def _metadata(record: PersonRecord) -> ChunkMetadata:
    return ChunkMetadata(
        department=record.department,
        skills=record.skills,
        qualifications=record.qualifications,
        years_of_experience=record.years_of_experience,
    )


def _make_chunk(index: int, record: PersonRecord, chunk_type: ChunkType, content: str) -> Chunk:
    return Chunk(
        id=f"person_{index}_{chunk_type}",
        record_index=index,
        record=record,
        chunk_type=chunk_type,
        content=content,
        metadata=_metadata(record),
    )


def chunk_record(index: int, record: PersonRecord) -> list[Chunk]:
    """Chunks for a single record, in facet order basic → skills → experience → qualifications."""
    basic = f"{record.name} works in the {record.department} department."
    if record.bio:
        basic = f"{basic} {record.bio}"
    chunks = [_make_chunk(index, record, "basic", basic)]
    if record.skills:
        chunks.append(_make_chunk(index, record, "skills", f"{record.name}'s skills: {', '.join(record.skills)}"))
    if record.experience:
        chunks.append(
            _make_chunk(
                index,
                record,
                "experience",
                f"{record.name}'s development experience: {record.experience} ({record.years_of_experience} years)",
            )
        )
    if record.qualifications:
        chunks.append(
            _make_chunk(
                index, record, "qualifications", f"{record.name}'s qualifications: {', '.join(record.qualifications)}"
            )
        )
    return chunks


def build_chunks(records: Sequence[PersonRecord]) -> list[Chunk]:
    """Chunk every record, preserving record order."""
    chunks: list[Chunk] = []
    for index, record in enumerate(records):
        chunks.extend(chunk_record(index, record))
    logger.info("[chunker:build_chunks] OUT records=%d chunks=%d", len(records), len(chunks))
    return chunks
