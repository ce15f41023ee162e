from __future__ import annotations

import os
import subprocess
import sys
from pathlib import Path

import pytest

from phonestatic.core.pipeline import generate
from phonestatic.core.snapshot import MetadataSnapshot
from phonestatic.io.emit import write_module
from phonestatic.io.verify import load_generated_module, verify_module


@pytest.fixture
def generated_path(synthetic_snapshot: MetadataSnapshot, tmp_path: Path) -> Path:
    path = tmp_path / "static_db.py"
    write_module(generate(synthetic_snapshot).text, path)
    return path


def test_generated_module_verifies_against_its_snapshot(
    synthetic_snapshot: MetadataSnapshot, generated_path: Path
) -> None:
    module = load_generated_module(generated_path)
    report = verify_module(module, synthetic_snapshot)
    assert report.ok, report.problems
    # 6 ids + 5 codes + 5 region lists + 2 unknown-key probes
    assert report.checked == 18


def test_mismatches_are_reported(
    synthetic_snapshot: MetadataSnapshot, generated_path: Path, monkeypatch: pytest.MonkeyPatch
) -> None:
    module = load_generated_module(generated_path)
    monkeypatch.setattr(module, "regions_for_country_code", lambda code: ("ZZ",))
    monkeypatch.setattr(module, "metadata_for_country_code", lambda code: None)

    report = verify_module(module, synthetic_snapshot)

    assert not report.ok
    assert "calling code 353: missing" in report.problems
    assert "regions for 44: expected ['GB', 'GG'], got ['ZZ']" in report.problems
    assert report.to_dict()["ok"] is False


def test_real_data_round_trip(real_snapshot: MetadataSnapshot, tmp_path: Path) -> None:
    path = tmp_path / "static_db.py"
    write_module(generate(real_snapshot).text, path)
    report = verify_module(load_generated_module(path), real_snapshot)
    assert report.ok, report.problems[:10]


def test_importing_generated_module_leaves_phonenumbers_unloaded(
    synthetic_snapshot: MetadataSnapshot, generated_path: Path
) -> None:
    script = (
        "import importlib.util, sys\n"
        f"spec = importlib.util.spec_from_file_location('static_db', {str(generated_path)!r})\n"
        "module = importlib.util.module_from_spec(spec)\n"
        "spec.loader.exec_module(module)\n"
        "print(module.metadata_for_country_id('IE').country_code)\n"
        "print(sorted(m for m in sys.modules if m.split('.')[0] == 'phonenumbers'))\n"
    )
    root = Path(__file__).resolve().parents[1]
    pythonpath = os.pathsep.join(p for p in (str(root), os.environ.get("PYTHONPATH")) if p)
    env = {**os.environ, "PYTHONPATH": pythonpath}

    result = subprocess.run(
        [sys.executable, "-c", script], capture_output=True, text=True, env=env, check=True
    )

    assert result.stdout.splitlines() == ["353", "[]"]
