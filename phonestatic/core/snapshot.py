"""
Read the dynamic metadata database out of `phonenumbers`.

`phonenumbers` builds its `PhoneMetadata` objects lazily the first time a
region is requested. This module forces all of them to load and returns the
three views the generator works from:

- region id -> metadata record
- calling code -> ordered list of metadata records
- calling code -> ordered list of region ids
"""

from __future__ import annotations

import logging
from dataclasses import dataclass
from typing import Any, Mapping, Sequence

from phonenumbers import COUNTRY_CODE_TO_REGION_CODE
from phonenumbers.phonemetadata import PhoneMetadata
from phonenumbers.phonenumberutil import REGION_CODE_FOR_NON_GEO_ENTITY

logger = logging.getLogger(__name__)


@dataclass(frozen=True, slots=True)
class MetadataSnapshot:
    """
    Raw, read-only views of a metadata database.

    Records are whatever the upstream library hands out (`PhoneMetadata` for
    the real database); the normalizer only reads their attributes.
    """

    by_id: Mapping[str, Any]
    by_code: Mapping[int, Sequence[Any]]
    regions: Mapping[int, Sequence[str]]


def _metadata_for(region_code: str, country_code: int) -> Any:
    if region_code == REGION_CODE_FOR_NON_GEO_ENTITY:
        return PhoneMetadata.metadata_for_nongeo_region(country_code)
    return PhoneMetadata.metadata_for_region(region_code)


def load_snapshot(
    country_code_to_region_code: Mapping[int, Sequence[str]] | None = None,
) -> MetadataSnapshot:
    """
    Load every territory known to `phonenumbers`.

    Args:
        country_code_to_region_code: Optional override of the region index
            (defaults to `phonenumbers.COUNTRY_CODE_TO_REGION_CODE`).

    Notes:
        All non-geographic entities share the id "001". The by-id view keeps
        the last one seen in ascending calling-code order.
    """

    index = country_code_to_region_code
    if index is None:
        index = COUNTRY_CODE_TO_REGION_CODE
    PhoneMetadata.load_all()

    by_id: dict[str, Any] = {}
    by_code: dict[int, list[Any]] = {}
    regions: dict[int, list[str]] = {}

    for country_code in sorted(index):
        region_codes = list(index[country_code])
        regions[country_code] = region_codes
        members: list[Any] = []
        for region_code in region_codes:
            metadata = _metadata_for(region_code, country_code)
            if metadata is None:
                logger.debug("No metadata for %s (+%d); skipping", region_code, country_code)
                continue
            members.append(metadata)
            by_id[region_code] = metadata
        by_code[country_code] = members

    logger.debug(
        "Loaded %d ids and %d calling codes from phonenumbers", len(by_id), len(by_code)
    )
    return MetadataSnapshot(by_id=by_id, by_code=by_code, regions=regions)
