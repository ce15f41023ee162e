"""
Two-level byte dispatch for territory-id lookup.

Region ids are two ASCII letters, plus one reserved three-digit id ("001")
shared by all non-geographic entities. Instead of comparing the input
against ~250 strings, lookup selects a branch by the first byte and then a
slot by the second byte.
"""

from __future__ import annotations

from dataclasses import dataclass
from typing import Mapping

from phonenumbers.phonenumberutil import REGION_CODE_FOR_NON_GEO_ENTITY

from phonestatic.errors import DataShapeViolation


@dataclass(frozen=True, slots=True)
class IdTrie:
    reserved_id: str
    reserved_slot: int
    # first byte -> (second byte -> slot), both levels sorted by byte
    branches: dict[int, dict[int, int]]

    def lookup(self, country_id: str) -> int | None:
        """Resolve an id to its slot, or `None` if it is not in the table."""

        if not country_id.isascii():
            return None
        raw = country_id.encode("ascii")
        if len(raw) < 2 or len(raw) > 3:
            return None
        if country_id == self.reserved_id:
            return self.reserved_slot
        if len(raw) == 3:
            return None
        second = self.branches.get(raw[0])
        if second is None:
            return None
        return second.get(raw[1])

    def __len__(self) -> int:
        return 1 + sum(len(second) for second in self.branches.values())


def _is_region_id(country_id: str) -> bool:
    return len(country_id) == 2 and country_id.isascii() and country_id.isalpha()


def build_id_trie(
    by_id: Mapping[str, int], *, reserved_id: str = REGION_CODE_FOR_NON_GEO_ENTITY
) -> IdTrie:
    """
    Partition ids into the reserved numeric id and alphabetic region ids and
    group the latter by first and second byte.

    Raises:
        DataShapeViolation: if there is not exactly one numeric id, if the
            numeric id is not the reserved one, or if an id is neither.
    """

    numeric: list[tuple[str, int]] = []
    alphabetic: list[tuple[str, int]] = []
    for country_id in sorted(by_id):
        slot = by_id[country_id]
        if country_id.isascii() and country_id.isdigit():
            numeric.append((country_id, slot))
        elif _is_region_id(country_id):
            alphabetic.append((country_id, slot))
        else:
            raise DataShapeViolation(
                f"Unexpected territory id {country_id!r}: expected two ASCII letters "
                f"or {reserved_id!r}",
                key=country_id,
            )

    if len(numeric) != 1:
        raise DataShapeViolation(
            f"Expected exactly one numeric id {reserved_id!r}, found "
            f"{[country_id for country_id, _ in numeric]}",
            key=reserved_id,
        )
    numeric_id, numeric_slot = numeric[0]
    if numeric_id != reserved_id:
        raise DataShapeViolation(
            f"Numeric id {numeric_id!r} is not the reserved id {reserved_id!r}",
            key=numeric_id,
        )

    branches: dict[int, dict[int, int]] = {}
    for country_id, slot in alphabetic:
        raw = country_id.encode("ascii")
        branches.setdefault(raw[0], {})[raw[1]] = slot

    return IdTrie(reserved_id=reserved_id, reserved_slot=numeric_slot, branches=branches)
