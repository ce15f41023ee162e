from __future__ import annotations

from types import SimpleNamespace
from typing import Any, Callable

import pytest

from phonestatic.core.snapshot import MetadataSnapshot

_DESC_ATTRS = (
    "fixed_line",
    "mobile",
    "toll_free",
    "premium_rate",
    "shared_cost",
    "personal_number",
    "voip",
    "pager",
    "uan",
    "emergency",
    "voicemail",
    "short_code",
    "standard_rate",
    "carrier_specific",
    "no_international_dialling",
)


def raw_desc(
    pattern: Any = r"\d{7}",
    *,
    lengths: tuple[int, ...] = (7,),
    local: tuple[int, ...] = (),
    example: str | None = None,
) -> SimpleNamespace:
    return SimpleNamespace(
        national_number_pattern=pattern,
        possible_length=lengths,
        possible_length_local_only=local,
        example_number=example,
    )


def raw_format(
    pattern: Any = r"(\d{3})(\d{4})",
    fmt: str = r"\1 \2",
    *,
    leading: tuple[Any, ...] = (),
    national_prefix: str | None = None,
    optional: Any = None,
    carrier: str | None = None,
) -> SimpleNamespace:
    return SimpleNamespace(
        pattern=pattern,
        format=fmt,
        leading_digits_pattern=list(leading),
        national_prefix_formatting_rule=national_prefix,
        national_prefix_optional_when_formatting=optional,
        domestic_carrier_code_formatting_rule=carrier,
    )


def raw_metadata(country_id: str, country_code: int, **overrides: Any) -> SimpleNamespace:
    fields: dict[str, Any] = {
        "id": country_id,
        "country_code": country_code,
        "general_desc": raw_desc(),
        "international_prefix": "00",
        "preferred_international_prefix": None,
        "national_prefix": "0",
        "preferred_extn_prefix": None,
        "national_prefix_for_parsing": None,
        "national_prefix_transform_rule": None,
        "number_format": [raw_format()],
        "intl_number_format": [],
        "main_country_for_code": False,
        "leading_digits": None,
        "mobile_number_portable_region": False,
    }
    for attr in _DESC_ATTRS:
        fields[attr] = None
    fields.update(overrides)
    return SimpleNamespace(**fields)


def snapshot_from_groups(
    groups: dict[int, list[SimpleNamespace]],
    *,
    by_id: dict[str, SimpleNamespace] | None = None,
) -> MetadataSnapshot:
    """Build a snapshot the way `load_snapshot` does: by-id entries come from the groups."""

    ids: dict[str, SimpleNamespace] = {}
    regions: dict[int, list[str]] = {}
    for code in sorted(groups):
        regions[code] = [m.id for m in groups[code]]
        for m in groups[code]:
            ids[m.id] = m
    if by_id is not None:
        ids.update(by_id)
    return MetadataSnapshot(by_id=ids, by_code=groups, regions=regions)


@pytest.fixture
def make_metadata() -> Callable[..., SimpleNamespace]:
    return raw_metadata


@pytest.fixture
def synthetic_snapshot() -> MetadataSnapshot:
    # Groups are listed out of order on purpose; region order within a code
    # (US before CA) must survive.
    groups = {
        353: [raw_metadata("IE", 353, main_country_for_code=True)],
        44: [
            raw_metadata("GB", 44, main_country_for_code=True, mobile=raw_desc(r"7\d{9}")),
            raw_metadata("GG", 44, leading_digits="1481|7781"),
        ],
        1: [
            raw_metadata("US", 1, international_prefix="011", main_country_for_code=True),
            raw_metadata("CA", 1, international_prefix="011"),
        ],
        800: [raw_metadata("001", 800, international_prefix=None, national_prefix=None)],
        882: [raw_metadata("001", 882, international_prefix=None, national_prefix=None)],
    }
    return snapshot_from_groups(groups)


@pytest.fixture(scope="session")
def real_snapshot() -> MetadataSnapshot:
    from phonestatic.core.snapshot import load_snapshot

    return load_snapshot()


def exec_generated(text: str) -> dict[str, Any]:
    namespace: dict[str, Any] = {"__name__": "_generated_under_test"}
    exec(compile(text, "<generated>", "exec"), namespace)
    return namespace


@pytest.fixture
def load_generated() -> Callable[[str], dict[str, Any]]:
    return exec_generated
