from __future__ import annotations

import pytest

from phonestatic.core.ranges import SlotRange, compact_range, compact_ranges
from phonestatic.errors import DataShapeViolation


def test_slot_range_behaves_like_half_open_range() -> None:
    r = SlotRange(3, 6)
    assert len(r) == 3
    assert list(r) == [3, 4, 5]
    assert 3 in r and 5 in r
    assert 6 not in r and 2 not in r
    assert not r.is_single
    assert SlotRange(7, 8).is_single


def test_compact_ranges_sorts_codes() -> None:
    ranges = compact_ranges({44: (2, 4), 1: (0, 2), 353: (4, 5)})
    assert list(ranges) == [1, 44, 353]
    assert ranges[353] == SlotRange(4, 5)


def test_compact_range_rejects_inverted_boundaries() -> None:
    with pytest.raises(DataShapeViolation) as excinfo:
        compact_range(44, 5, 4)
    assert excinfo.value.key == 44
