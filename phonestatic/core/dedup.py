"""
Structural deduplication of canonical metadata.

Every distinct `CanonicalMetadata` value gets one integer slot, assigned in
first-seen order. Traversal order matters:

1. calling-code groups, ascending, each group fully before the next, so the
   slots of one group are contiguous and can be compacted into a range;
2. ids, ascending, reusing the slot of an equal record when there is one.

The id pass never touches slots of closed code ranges, it only looks them up.
"""

from __future__ import annotations

import logging
from dataclasses import dataclass, field
from typing import Mapping, Sequence

from phonestatic.core.model import CanonicalMetadata
from phonestatic.core.ranges import SlotRange, compact_ranges
from phonestatic.errors import DataShapeViolation

logger = logging.getLogger(__name__)


@dataclass(slots=True)
class DedupTable:
    """Value -> slot mapping in first-seen order."""

    records: list[CanonicalMetadata] = field(default_factory=list)
    slots: dict[CanonicalMetadata, int] = field(default_factory=dict)

    def __len__(self) -> int:
        return len(self.records)

    def get(self, record: CanonicalMetadata) -> int | None:
        return self.slots.get(record)

    def add(self, record: CanonicalMetadata) -> int:
        """Store a record not yet in the table and return its new slot."""

        slot = len(self.records)
        self.records.append(record)
        self.slots[record] = slot
        return slot

    def intern(self, record: CanonicalMetadata) -> int:
        """Return the slot of an equal record, adding this one if there is none."""

        slot = self.slots.get(record)
        if slot is None:
            slot = self.add(record)
        return slot


@dataclass(frozen=True, slots=True)
class DedupIndex:
    """Result of indexing: the unique table plus both key -> slot views."""

    table: tuple[CanonicalMetadata, ...]
    by_id: dict[str, int]
    by_code: dict[int, SlotRange]

    def records_for_code(self, country_code: int) -> tuple[CanonicalMetadata, ...] | None:
        slots = self.by_code.get(country_code)
        if slots is None:
            return None
        return self.table[slots.start : slots.end]

    def record_for_id(self, country_id: str) -> CanonicalMetadata | None:
        slot = self.by_id.get(country_id)
        return None if slot is None else self.table[slot]


def build_index(
    by_code: Mapping[int, Sequence[CanonicalMetadata]],
    by_id: Mapping[str, CanonicalMetadata],
) -> DedupIndex:
    """
    Assign slots to every record reachable from the two views.

    Raises:
        DataShapeViolation: if a record repeats one already stored while the
            code groups are being laid out, since its group could then not be
            addressed as one contiguous range.
    """

    table = DedupTable()
    boundaries: dict[int, tuple[int, int]] = {}

    for code in sorted(by_code):
        start = len(table)
        for record in by_code[code]:
            existing = table.get(record)
            if existing is not None:
                raise DataShapeViolation(
                    f"Record for id {record.id!r} under calling code {code} duplicates "
                    f"slot {existing}; code groups must map to distinct records",
                    key=code,
                )
            table.add(record)
        boundaries[code] = (start, len(table))

    grouped = len(table)
    id_slots: dict[str, int] = {}
    for country_id in sorted(by_id):
        id_slots[country_id] = table.intern(by_id[country_id])

    logger.debug(
        "Indexed %d unique records (%d from code groups, %d added by id pass)",
        len(table),
        grouped,
        len(table) - grouped,
    )
    return DedupIndex(
        table=tuple(table.records),
        by_id=id_slots,
        by_code=compact_ranges(boundaries),
    )
