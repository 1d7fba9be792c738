"""Canonical sensor records and the session-wide record store."""
import logging
import math
from dataclasses import dataclass
from typing import List, Optional, Sequence

from .polar import ProjectionParams

logger = logging.getLogger(__name__)

MIN_TRIGGER = 0
MAX_TRIGGER = 5


def clamp_trigger(level: int) -> int:
    return max(MIN_TRIGGER, min(MAX_TRIGGER, int(level)))


@dataclass
class CanonicalRecord:
    """One sensor reading: distance (m), signed angle (deg), trigger level 0-5."""
    distance: float
    angle: float
    trigger: int = MAX_TRIGGER

    def __post_init__(self):
        self.trigger = clamp_trigger(self.trigger)

    @property
    def is_valid(self) -> bool:
        return math.isfinite(self.distance) and math.isfinite(self.angle)


class RecordStore:
    """Mutable record list plus the projection cached from the last render.

    Created once per session. `revision` increases on every mutation so the
    chart knows when to recompute its layout. `generation` tags file imports;
    only the completion of the most recently started import is accepted.
    """

    def __init__(self, records: Optional[Sequence[CanonicalRecord]] = None):
        self.records: List[CanonicalRecord] = list(records or [])
        self.projection: Optional[ProjectionParams] = None
        self.revision = 0
        self.generation = 0

    def __len__(self) -> int:
        return len(self.records)

    def __getitem__(self, index: int) -> CanonicalRecord:
        return self.records[index]

    def _touch(self) -> None:
        self.revision += 1

    def valid_records(self) -> List[CanonicalRecord]:
        return [r for r in self.records if r.is_valid]

    # ------------------------------------------------------------------
    # Mutations
    # ------------------------------------------------------------------

    def add_record(self, distance: float = 3.0, angle: float = 0.0,
                   trigger: int = MAX_TRIGGER) -> int:
        self.records.append(CanonicalRecord(distance, angle, trigger))
        self._touch()
        return len(self.records) - 1

    def delete_record(self, index: int) -> None:
        if 0 <= index < len(self.records):
            del self.records[index]
            self._touch()

    def clear(self) -> None:
        self.records = []
        self.projection = None
        self._touch()

    def update_field(self, index: int, field_name: str, value) -> bool:
        """Apply a table edit. Returns False when the edit was ignored."""
        if not 0 <= index < len(self.records):
            return False
        rec = self.records[index]
        if field_name in ('distance', 'angle'):
            try:
                number = float(value)
            except (TypeError, ValueError):
                number = 0.0
            if not math.isfinite(number):
                number = 0.0
            setattr(rec, field_name, number)
        elif field_name == 'trigger':
            try:
                rec.trigger = clamp_trigger(int(value))
            except (TypeError, ValueError):
                rec.trigger = MIN_TRIGGER
        else:
            return False
        self._touch()
        return True

    def replace(self, records: Sequence[CanonicalRecord]) -> None:
        self.records = list(records)
        self._touch()

    # ------------------------------------------------------------------
    # Import generations
    # ------------------------------------------------------------------

    def begin_import(self) -> int:
        self.generation += 1
        return self.generation

    def accept_import(self, generation: int,
                      records: Sequence[CanonicalRecord]) -> bool:
        if generation != self.generation:
            logger.info("Discarding stale import (generation %d, current %d)",
                        generation, self.generation)
            return False
        self.replace(records)
        logger.info("Loaded %d records", len(records))
        return True
