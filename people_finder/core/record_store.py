"""
In-memory record store. Holds records and their chunks as one immutable snapshot.

replace() builds the new snapshot before taking the lock and swaps the
reference under it, so readers see either the old snapshot or the new one,
never a half-built mix.
"""

import logging
import threading
from dataclasses import dataclass, field
from typing import Mapping, Sequence

from people_finder.services.chunker import build_chunks
from people_finder.services.models import Chunk, PersonRecord

logger = logging.getLogger(__name__)


@dataclass(frozen=True)
class Snapshot:
    records: tuple[PersonRecord, ...] = ()
    chunks: tuple[Chunk, ...] = ()
    chunks_by_record: Mapping[int, tuple[Chunk, ...]] = field(default_factory=dict)

    @property
    def is_empty(self) -> bool:
        return not self.records


def build_snapshot(records: Sequence[PersonRecord]) -> Snapshot:
    frozen = tuple(records)
    chunks = tuple(build_chunks(frozen))
    grouped: dict[int, list[Chunk]] = {}
    for chunk in chunks:
        grouped.setdefault(chunk.record_index, []).append(chunk)
    return Snapshot(
        records=frozen,
        chunks=chunks,
        chunks_by_record={index: tuple(group) for index, group in grouped.items()},
    )


class RecordStore:
    def __init__(self) -> None:
        self._snapshot = Snapshot()
        self._lock = threading.Lock()

    def replace(self, records: Sequence[PersonRecord]) -> Snapshot:
        """Rebuild records and chunks from scratch and publish them atomically."""
        snapshot = build_snapshot(records)
        with self._lock:
            self._snapshot = snapshot
        logger.info(
            "[record_store:replace] records=%d chunks=%d", len(snapshot.records), len(snapshot.chunks)
        )
        return snapshot

    def snapshot(self) -> Snapshot:
        with self._lock:
            return self._snapshot
