from __future__ import annotations

import json
import logging
from collections.abc import Iterator
from pathlib import Path

import pytest
from click.testing import CliRunner

from phonestatic import __version__
from phonestatic.cli import main
from phonestatic.core.snapshot import MetadataSnapshot

from conftest import raw_metadata, snapshot_from_groups


@pytest.fixture(autouse=True)
def _isolate(monkeypatch: pytest.MonkeyPatch, tmp_path: Path) -> Iterator[None]:
    monkeypatch.chdir(tmp_path)
    for key in ("PHONESTATIC_CONFIG", "PHONESTATIC_OUTPUT_PATH", "PHONESTATIC_ID_DISPATCH"):
        monkeypatch.delenv(key, raising=False)

    # configure_logging replaces root handlers with ones bound to the runner streams.
    root = logging.getLogger()
    handlers, level = list(root.handlers), root.level
    yield
    root.handlers[:] = handlers
    root.setLevel(level)


def test_version() -> None:
    result = CliRunner().invoke(main, ["--version"])
    assert result.exit_code == 0
    assert __version__ in result.output


def test_generate_then_verify(tmp_path: Path) -> None:
    out = tmp_path / "static_db.py"
    runner = CliRunner()

    result = runner.invoke(main, ["generate", "--output", str(out)])
    assert result.exit_code == 0, result.output
    text = out.read_text(encoding="utf-8")
    assert text.startswith("# Generated by phonestatic ")
    assert "def metadata_for_country_id(" in text

    result = runner.invoke(main, ["verify", str(out), "--json"])
    assert result.exit_code == 0, result.output
    report = json.loads(result.output[result.output.index("{") :])
    assert report["ok"] is True


def test_generate_linear_dispatch(tmp_path: Path) -> None:
    out = tmp_path / "static_db.py"
    result = CliRunner().invoke(
        main, ["generate", "--output", str(out), "--id-dispatch", "linear"]
    )
    assert result.exit_code == 0, result.output
    text = out.read_text(encoding="utf-8")
    assert "    match country_id:\n" in text
    assert "_ID_DISPATCH" not in text


def test_generate_reports_data_shape_violation(
    synthetic_snapshot: MetadataSnapshot, monkeypatch: pytest.MonkeyPatch, tmp_path: Path
) -> None:
    broken = snapshot_from_groups(
        {**synthetic_snapshot.by_code, 801: [raw_metadata("002", 801)]}  # type: ignore[dict-item]
    )
    monkeypatch.setattr("phonestatic.cli.load_snapshot", lambda: broken)
    out = tmp_path / "static_db.py"

    result = CliRunner().invoke(main, ["generate", "--output", str(out)])

    assert result.exit_code != 0
    assert "Data shape violation" in result.output
    assert not out.exists()


def test_verify_rejects_tampered_module(tmp_path: Path) -> None:
    out = tmp_path / "static_db.py"
    runner = CliRunner()
    assert runner.invoke(main, ["generate", "--output", str(out)]).exit_code == 0

    text = out.read_text(encoding="utf-8")
    out.write_text(
        text + "\n\ndef regions_for_country_code(country_code):\n    return ('ZZ',)\n",
        encoding="utf-8",
    )

    result = runner.invoke(main, ["verify", str(out)])

    assert result.exit_code != 0
    assert "FAILED" in result.output
    assert "mismatches" in result.output
