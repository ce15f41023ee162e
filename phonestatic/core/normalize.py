"""
Metadata normalization.

Turns upstream metadata objects into `CanonicalMetadata` values:
- pattern fields are rendered to source text with insignificant whitespace
  (spaces, tabs, newlines) removed, so patterns written differently in the
  source XML still compare equal;
- length lists become tuples and flags become real bools;
- the views are re-keyed in sorted order (ids lexicographically, calling
  codes numerically) so every run sees the same traversal order.
"""

from __future__ import annotations

import re
from dataclasses import dataclass
from typing import Any, Iterable

from phonestatic.core.model import CanonicalMetadata, Descriptor, Descriptors, NumberFormat
from phonestatic.core.snapshot import MetadataSnapshot

_INSIGNIFICANT_WHITESPACE = re.compile(r"[\n\t ]+")

# canonical field -> attribute on phonenumbers.PhoneMetadata
_DESCRIPTOR_FIELDS: dict[str, str] = {
    "fixed_line": "fixed_line",
    "mobile": "mobile",
    "toll_free": "toll_free",
    "premium_rate": "premium_rate",
    "shared_cost": "shared_cost",
    "personal_number": "personal_number",
    "voip": "voip",
    "pager": "pager",
    "uan": "uan",
    "emergency": "emergency",
    "voicemail": "voicemail",
    "short_code": "short_code",
    "standard_rate": "standard_rate",
    "carrier": "carrier_specific",
    "no_international": "no_international_dialling",
}


@dataclass(frozen=True, slots=True)
class CanonicalSnapshot:
    """Normalized views, keyed in deterministic order."""

    by_id: dict[str, CanonicalMetadata]
    by_code: dict[int, tuple[CanonicalMetadata, ...]]
    regions: dict[int, tuple[str, ...]]


def strip_pattern(text: str) -> str:
    """Remove whitespace that does not change what a pattern matches."""

    return _INSIGNIFICANT_WHITESPACE.sub("", text)


def render_pattern(value: Any) -> str | None:
    """
    Render a pattern field to canonical text.

    Accepts a compiled `re.Pattern`, a plain string, or `None` (absent).
    """

    if value is None:
        return None
    source = value.pattern if isinstance(value, re.Pattern) else value
    if isinstance(source, bytes):
        source = source.decode("ascii")
    return strip_pattern(str(source))


def _lengths(value: Iterable[int] | None) -> tuple[int, ...]:
    if not value:
        return ()
    return tuple(int(n) for n in value)


def normalize_descriptor(desc: Any) -> Descriptor | None:
    if desc is None:
        return None
    return Descriptor(
        national_number=render_pattern(desc.national_number_pattern) or "",
        possible_length=_lengths(desc.possible_length),
        possible_local_length=_lengths(desc.possible_length_local_only),
        example=desc.example_number,
    )


def normalize_descriptors(metadata: Any) -> Descriptors:
    general = normalize_descriptor(metadata.general_desc)
    if general is None:
        general = Descriptor(national_number="")
    others = {
        name: normalize_descriptor(getattr(metadata, attr))
        for name, attr in _DESCRIPTOR_FIELDS.items()
    }
    return Descriptors(general=general, **others)


def normalize_format(fmt: Any) -> NumberFormat:
    leading = tuple(render_pattern(p) or "" for p in (fmt.leading_digits_pattern or ()))
    return NumberFormat(
        pattern=render_pattern(fmt.pattern) or "",
        format=fmt.format,
        leading_digits=leading,
        national_prefix=fmt.national_prefix_formatting_rule,
        national_prefix_optional=bool(fmt.national_prefix_optional_when_formatting),
        domestic_carrier=fmt.domestic_carrier_code_formatting_rule,
    )


def normalize_metadata(metadata: Any) -> CanonicalMetadata:
    """Convert one upstream metadata record into its canonical form."""

    return CanonicalMetadata(
        id=metadata.id,
        country_code=int(metadata.country_code),
        descriptors=normalize_descriptors(metadata),
        international_prefix=render_pattern(metadata.international_prefix),
        preferred_international_prefix=metadata.preferred_international_prefix,
        national_prefix=metadata.national_prefix,
        preferred_extension_prefix=metadata.preferred_extn_prefix,
        national_prefix_for_parsing=render_pattern(metadata.national_prefix_for_parsing),
        national_prefix_transform_rule=metadata.national_prefix_transform_rule,
        formats=tuple(normalize_format(f) for f in (metadata.number_format or ())),
        international_formats=tuple(
            normalize_format(f) for f in (metadata.intl_number_format or ())
        ),
        main_country_for_code=bool(metadata.main_country_for_code),
        leading_digits=render_pattern(metadata.leading_digits),
        mobile_number_portable=bool(metadata.mobile_number_portable_region),
    )


def normalize_snapshot(snapshot: MetadataSnapshot) -> CanonicalSnapshot:
    """
    Normalize all three views.

    Group member order and region order are kept as given; only the keys
    are sorted.
    """

    by_id = {
        country_id: normalize_metadata(snapshot.by_id[country_id])
        for country_id in sorted(snapshot.by_id)
    }
    by_code = {
        code: tuple(normalize_metadata(m) for m in snapshot.by_code[code])
        for code in sorted(snapshot.by_code)
    }
    regions = {code: tuple(snapshot.regions[code]) for code in sorted(snapshot.regions)}
    return CanonicalSnapshot(by_id=by_id, by_code=by_code, regions=regions)
