"""
Canonical, fully textual metadata records.

These types mirror the structure of `phonenumbers.phonemetadata` but hold
only strings, ints, bools, tuples and `None`. That makes them:

- hashable and comparable field by field, so identical territories collapse
  to one record during deduplication;
- totally ordered, with an absent value sorting before any present one;
- printable as valid Python literals (the dataclass repr), which is what the
  generated module is made of.
"""

from __future__ import annotations

from dataclasses import dataclass, fields
from typing import Any


def _order_key(value: Any) -> tuple[Any, ...]:
    if value is None:
        return (0,)
    if isinstance(value, _Ordered):
        return (1, value.sort_key())
    if isinstance(value, tuple):
        return (1, tuple(_order_key(v) for v in value))
    return (1, value)


class _Ordered:
    """Field-by-field ordering that tolerates optional fields."""

    __slots__ = ()

    def sort_key(self) -> tuple[Any, ...]:
        return tuple(_order_key(getattr(self, f.name)) for f in fields(self))  # type: ignore

    def __lt__(self, other: object) -> bool:
        if type(other) is not type(self):
            return NotImplemented
        return self.sort_key() < other.sort_key()  # type: ignore[attr-defined]

    def __le__(self, other: object) -> bool:
        if type(other) is not type(self):
            return NotImplemented
        return self.sort_key() <= other.sort_key()  # type: ignore[attr-defined]

    def __gt__(self, other: object) -> bool:
        if type(other) is not type(self):
            return NotImplemented
        return self.sort_key() > other.sort_key()  # type: ignore[attr-defined]

    def __ge__(self, other: object) -> bool:
        if type(other) is not type(self):
            return NotImplemented
        return self.sort_key() >= other.sort_key()  # type: ignore[attr-defined]


@dataclass(frozen=True, slots=True)
class Descriptor(_Ordered):
    """Matching rule for one category of numbers (mobile, toll free, ...)."""

    national_number: str
    possible_length: tuple[int, ...] = ()
    possible_local_length: tuple[int, ...] = ()
    example: str | None = None


@dataclass(frozen=True, slots=True)
class Descriptors(_Ordered):
    general: Descriptor
    fixed_line: Descriptor | None = None
    mobile: Descriptor | None = None
    toll_free: Descriptor | None = None
    premium_rate: Descriptor | None = None
    shared_cost: Descriptor | None = None
    personal_number: Descriptor | None = None
    voip: Descriptor | None = None
    pager: Descriptor | None = None
    uan: Descriptor | None = None
    emergency: Descriptor | None = None
    voicemail: Descriptor | None = None
    short_code: Descriptor | None = None
    standard_rate: Descriptor | None = None
    carrier: Descriptor | None = None
    no_international: Descriptor | None = None


@dataclass(frozen=True, slots=True)
class NumberFormat(_Ordered):
    """How to lay out numbers that match `pattern`."""

    pattern: str
    format: str
    leading_digits: tuple[str, ...] = ()
    national_prefix: str | None = None
    national_prefix_optional: bool = False
    domestic_carrier: str | None = None


@dataclass(frozen=True, slots=True)
class CanonicalMetadata(_Ordered):
    """
    One territory's complete descriptor set.

    Two values compare equal only if every field (nested ones included) is
    equal, so the id and calling code are part of a record's identity.

    Ordering compares fields in declaration order, so `descriptors` is compared
    right after the id and calling code. Callers only rely on the order being
    total and deterministic, not on any particular field precedence.
    """

    id: str
    country_code: int
    descriptors: Descriptors
    international_prefix: str | None = None
    preferred_international_prefix: str | None = None
    national_prefix: str | None = None
    preferred_extension_prefix: str | None = None
    national_prefix_for_parsing: str | None = None
    national_prefix_transform_rule: str | None = None
    formats: tuple[NumberFormat, ...] = ()
    international_formats: tuple[NumberFormat, ...] = ()
    main_country_for_code: bool = False
    leading_digits: str | None = None
    mobile_number_portable: bool = False
