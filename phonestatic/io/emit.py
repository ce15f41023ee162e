"""
Generated module rendering and output.

The emitted module is plain Python: a tuple of `CanonicalMetadata` literals
(`METADATA`) and three lookup functions over it. Records are rendered with
`pprint.pformat`, whose dataclass output is a valid constructor call once the
model classes are imported.

Rendering is deterministic: the same index always produces the same text.
"""

from __future__ import annotations

import io
import pprint
import textwrap
from pathlib import Path
from typing import Literal, Mapping, TextIO

from phonestatic import __version__
from phonestatic.core.dedup import DedupIndex
from phonestatic.core.model import CanonicalMetadata
from phonestatic.core.ranges import SlotRange
from phonestatic.core.trie import IdTrie
from phonestatic.errors import EmissionFailure

IdDispatch = Literal["trie", "linear"]

_INDENT = "    "

_PREAMBLE = '''\
from __future__ import annotations

from phonestatic.core.model import CanonicalMetadata, Descriptor, Descriptors, NumberFormat

__all__ = [
    "METADATA",
    "metadata_for_country_code",
    "metadata_for_country_id",
    "regions_for_country_code",
]
'''


def _format_value(value: object, *, width: int, indent: str = _INDENT) -> str:
    text = pprint.pformat(value, width=max(width - len(indent), 20), sort_dicts=False)
    return textwrap.indent(text, indent).lstrip()


def render_header(*, source_label: str | None = None) -> str:
    lines = [f"# Generated by phonestatic {__version__}. Do not edit."]
    if source_label:
        lines.append(f"# Source: {source_label}")
    return "\n".join(lines) + "\n\n" + _PREAMBLE


def render_metadata_table(table: tuple[CanonicalMetadata, ...], *, width: int) -> str:
    out = io.StringIO()
    out.write(f"# {len(table)} unique records\n")
    out.write("METADATA: tuple[CanonicalMetadata, ...] = (\n")
    for slot, record in enumerate(table):
        out.write(f"{_INDENT}# {slot}: {record.id} +{record.country_code}\n")
        out.write(f"{_INDENT}{_format_value(record, width=width)},\n")
    out.write(")\n")
    return out.getvalue()


def render_id_trie(trie: IdTrie) -> str:
    out = io.StringIO()
    out.write("_ID_DISPATCH: dict[int, dict[int, int]] = {\n")
    for first, second in trie.branches.items():
        out.write(f"{_INDENT}0x{first:02X}: {{  # {chr(first)}\n")
        for byte, slot in second.items():
            out.write(f"{_INDENT * 2}0x{byte:02X}: {slot},  # {chr(first)}{chr(byte)}\n")
        out.write(f"{_INDENT}}},\n")
    out.write("}\n\n\n")

    out.write("def metadata_for_country_id(country_id: str) -> CanonicalMetadata | None:\n")
    out.write(f'{_INDENT}"""Return the metadata for a region id, or None if unknown."""\n\n')
    out.write(f"{_INDENT}if not country_id.isascii():\n")
    out.write(f"{_INDENT * 2}return None\n")
    out.write(f'{_INDENT}raw = country_id.encode("ascii")\n')
    out.write(f"{_INDENT}if len(raw) < 2 or len(raw) > 3:\n")
    out.write(f"{_INDENT * 2}return None\n")
    out.write(f"{_INDENT}if raw == {trie.reserved_id.encode('ascii')!r}:\n")
    out.write(f"{_INDENT * 2}return METADATA[{trie.reserved_slot}]\n")
    out.write(f"{_INDENT}if len(raw) == 3:\n")
    out.write(f"{_INDENT * 2}return None\n")
    out.write(f"{_INDENT}second = _ID_DISPATCH.get(raw[0])\n")
    out.write(f"{_INDENT}if second is None:\n")
    out.write(f"{_INDENT * 2}return None\n")
    out.write(f"{_INDENT}slot = second.get(raw[1])\n")
    out.write(f"{_INDENT}if slot is None:\n")
    out.write(f"{_INDENT * 2}return None\n")
    out.write(f"{_INDENT}return METADATA[slot]\n")
    return out.getvalue()


def render_id_linear(by_id: Mapping[str, int]) -> str:
    """Alternate id lookup: one `case` per id, compared in order."""

    out = io.StringIO()
    out.write("def metadata_for_country_id(country_id: str) -> CanonicalMetadata | None:\n")
    out.write(f'{_INDENT}"""Return the metadata for a region id, or None if unknown."""\n\n')
    out.write(f"{_INDENT}match country_id:\n")
    for country_id in sorted(by_id):
        out.write(f"{_INDENT * 2}case {country_id!r}:\n")
        out.write(f"{_INDENT * 3}return METADATA[{by_id[country_id]}]\n")
    out.write(f"{_INDENT * 2}case _:\n")
    out.write(f"{_INDENT * 3}return None\n")
    return out.getvalue()


def _slot_expression(slots: SlotRange) -> str:
    if len(slots) == 0:
        return "()"
    if slots.is_single:
        return f"(METADATA[{slots.start}],)"
    return f"METADATA[{slots.start}:{slots.end}]"


def render_by_code(by_code: Mapping[int, SlotRange]) -> str:
    out = io.StringIO()
    out.write("_BY_CODE: dict[int, tuple[CanonicalMetadata, ...]] = {\n")
    for code in sorted(by_code):
        out.write(f"{_INDENT}{code}: {_slot_expression(by_code[code])},\n")
    out.write("}\n\n\n")
    out.write(
        "def metadata_for_country_code(country_code: int) "
        "-> tuple[CanonicalMetadata, ...] | None:\n"
    )
    out.write(f'{_INDENT}"""Return every territory sharing a calling code, or None."""\n\n')
    out.write(f"{_INDENT}return _BY_CODE.get(country_code)\n")
    return out.getvalue()


def render_regions(regions: Mapping[int, tuple[str, ...]], *, width: int) -> str:
    out = io.StringIO()
    out.write("_REGIONS: dict[int, tuple[str, ...]] = {\n")
    for code in sorted(regions):
        prefix = f"{code}: "
        value = _format_value(
            tuple(regions[code]), width=width, indent=_INDENT + " " * len(prefix)
        )
        out.write(f"{_INDENT}{prefix}{value},\n")
    out.write("}\n\n\n")
    out.write("def regions_for_country_code(country_code: int) -> tuple[str, ...] | None:\n")
    out.write(f'{_INDENT}"""Return the region ids for a calling code, main region first."""\n\n')
    out.write(f"{_INDENT}return _REGIONS.get(country_code)\n")
    return out.getvalue()


def render_module(
    index: DedupIndex,
    trie: IdTrie,
    regions: Mapping[int, tuple[str, ...]],
    *,
    id_dispatch: IdDispatch = "trie",
    width: int = 100,
    source_label: str | None = None,
) -> str:
    """
    Render the complete generated module.

    Args:
        index: Deduplicated table with by-id slots and by-code ranges.
        trie: Byte dispatch built from `index.by_id`.
        regions: calling code -> region ids.
        id_dispatch: "trie" (default) for the two-level byte dispatch, or
            "linear" for a `match` over every id string.
        width: Target line width for record literals.
        source_label: Optional description of the input, written to the header.
    """

    if id_dispatch == "trie":
        id_lookup = render_id_trie(trie)
    elif id_dispatch == "linear":
        id_lookup = render_id_linear(index.by_id)
    else:
        raise ValueError(f"Unsupported id dispatch: {id_dispatch!r}")

    sections = [
        render_header(source_label=source_label),
        render_metadata_table(index.table, width=width),
        id_lookup,
        render_by_code(index.by_code),
        render_regions(regions, width=width),
    ]
    return "\n\n".join(s.rstrip("\n") + "\n" for s in sections)


def write_module(text: str, target: Path | TextIO) -> None:
    """
    Write generated text to a file path or an open text stream.

    Raises:
        EmissionFailure: if the write fails.
    """

    try:
        if isinstance(target, Path):
            target.parent.mkdir(parents=True, exist_ok=True)
            target.write_text(text, encoding="utf-8")
        else:
            target.write(text)
            target.flush()
    except OSError as exc:
        raise EmissionFailure(f"Failed to write generated module to {target}: {exc}") from exc
