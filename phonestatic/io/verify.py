"""
Cross-check a generated module against the dynamic database.

Every id, calling code and region list in the snapshot must resolve through
the generated lookups to a record with the same id and calling code.
"""

from __future__ import annotations

import importlib.util
import logging
from dataclasses import dataclass, field
from pathlib import Path
from types import ModuleType

from phonestatic.core.snapshot import MetadataSnapshot

logger = logging.getLogger(__name__)

_UNKNOWN_ID = "XX"
_UNKNOWN_CODE = 999999


@dataclass(slots=True)
class VerificationReport:
    checked: int = 0
    problems: list[str] = field(default_factory=list)

    @property
    def ok(self) -> bool:
        return not self.problems

    def fail(self, message: str) -> None:
        logger.debug("Verification problem: %s", message)
        self.problems.append(message)

    def to_dict(self) -> dict[str, object]:
        return {"checked": self.checked, "ok": self.ok, "problems": list(self.problems)}


def load_generated_module(path: Path, *, name: str = "_phonestatic_generated") -> ModuleType:
    """Import a generated module from a file path without touching sys.modules."""

    spec = importlib.util.spec_from_file_location(name, path)
    if spec is None or spec.loader is None:
        raise ImportError(f"Cannot load generated module from {path}")
    module = importlib.util.module_from_spec(spec)
    spec.loader.exec_module(module)
    return module


def verify_module(module: ModuleType, snapshot: MetadataSnapshot) -> VerificationReport:
    """
    Compare the generated lookups with the snapshot views.

    Returns a report; it never raises for mismatches.
    """

    report = VerificationReport()
    by_id = module.metadata_for_country_id
    by_code = module.metadata_for_country_code
    regions_for = module.regions_for_country_code

    for country_id in sorted(snapshot.by_id):
        old = snapshot.by_id[country_id]
        report.checked += 1
        new = by_id(country_id)
        if new is None:
            report.fail(f"id {country_id!r}: missing")
        elif new.id != old.id or new.country_code != old.country_code:
            report.fail(
                f"id {country_id!r}: expected {old.id}/+{old.country_code}, "
                f"got {new.id}/+{new.country_code}"
            )

    for code in sorted(snapshot.by_code):
        old_list = snapshot.by_code[code]
        report.checked += 1
        new_list = by_code(code)
        if new_list is None:
            report.fail(f"calling code {code}: missing")
            continue
        if len(new_list) != len(old_list):
            report.fail(
                f"calling code {code}: expected {len(old_list)} records, got {len(new_list)}"
            )
        new_ids = [m.id for m in new_list]
        for old in old_list:
            if old.id not in new_ids:
                report.fail(f"calling code {code}: id {old.id!r} missing")

    for code in sorted(snapshot.regions):
        report.checked += 1
        new_regions = regions_for(code)
        if new_regions is None:
            report.fail(f"regions for {code}: missing")
        elif tuple(new_regions) != tuple(snapshot.regions[code]):
            report.fail(
                f"regions for {code}: expected {list(snapshot.regions[code])}, "
                f"got {list(new_regions)}"
            )

    report.checked += 2
    if by_id(_UNKNOWN_ID) is not None:
        report.fail(f"id {_UNKNOWN_ID!r}: expected not found")
    if by_code(_UNKNOWN_CODE) is not None:
        report.fail(f"calling code {_UNKNOWN_CODE}: expected not found")

    return report
