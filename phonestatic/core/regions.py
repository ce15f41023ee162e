"""Calling code -> region id list index."""

from __future__ import annotations

import logging
from typing import Iterable, Mapping, Sequence

from phonestatic.errors import DataShapeViolation

logger = logging.getLogger(__name__)


def build_region_index(
    regions: Mapping[int, Sequence[str]],
    *,
    known_codes: Iterable[int] | None = None,
) -> dict[int, tuple[str, ...]]:
    """
    Copy the region view into tuples keyed by ascending calling code.

    Region order is kept exactly as given: the first region of a code is its
    main region for consumers that care.

    Args:
        regions: calling code -> region ids.
        known_codes: calling codes of the by-code view. Codes present in only
            one of the two views are logged as warnings.
    """

    out: dict[int, tuple[str, ...]] = {}
    for code in sorted(regions):
        region_ids = tuple(regions[code])
        for region_id in region_ids:
            if not isinstance(region_id, str):
                raise DataShapeViolation(
                    f"Region id {region_id!r} for calling code {code} is not a string",
                    key=code,
                )
        out[code] = region_ids

    if known_codes is not None:
        known = set(known_codes)
        for code in sorted(known - out.keys()):
            logger.warning("Calling code %d has metadata but no region list", code)
        for code in sorted(out.keys() - known):
            logger.warning("Calling code %d has a region list but no metadata", code)

    return out
