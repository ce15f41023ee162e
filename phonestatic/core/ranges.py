"""
Per-calling-code slot ranges.

The dedup indexer assigns the records of one calling code consecutive
slots, so each code's group can be addressed as a slice of the unique-record
table instead of a list of individual indices.
"""

from __future__ import annotations

from dataclasses import dataclass
from typing import Iterator, Mapping

from phonestatic.errors import DataShapeViolation


@dataclass(frozen=True, slots=True)
class SlotRange:
    """Half-open range `[start, end)` of table slots."""

    start: int
    end: int

    def __len__(self) -> int:
        return self.end - self.start

    def __iter__(self) -> Iterator[int]:
        return iter(range(self.start, self.end))

    def __contains__(self, slot: object) -> bool:
        return isinstance(slot, int) and self.start <= slot < self.end

    @property
    def is_single(self) -> bool:
        return len(self) == 1


def compact_range(country_code: int, start: int, end: int) -> SlotRange:
    """Close the range for one code from the boundaries recorded around its group."""

    if start < 0 or end < start:
        raise DataShapeViolation(
            f"Invalid slot boundaries [{start}, {end}) for calling code {country_code}",
            key=country_code,
        )
    return SlotRange(start, end)


def compact_ranges(boundaries: Mapping[int, tuple[int, int]]) -> dict[int, SlotRange]:
    """
    Build the by-code range table.

    Args:
        boundaries: calling code -> (start slot before the group, end slot after it).
    """

    return {
        code: compact_range(code, *boundaries[code]) for code in sorted(boundaries)
    }
