"""
phonestatic CLI.

Commands:
  - generate: build the static lookup module from the installed `phonenumbers` data
  - verify: check a generated module against the installed `phonenumbers` data
"""

from __future__ import annotations

import json
import logging
import sys
from pathlib import Path

import click
import phonenumbers

from phonestatic import __version__
from phonestatic.config import PhonestaticSettings, load_settings
from phonestatic.core.pipeline import generate
from phonestatic.core.snapshot import load_snapshot
from phonestatic.errors import DataShapeViolation, EmissionFailure
from phonestatic.io.emit import write_module
from phonestatic.io.verify import load_generated_module, verify_module
from phonestatic.logging_config import configure_logging

logger = logging.getLogger(__name__)

_CONFIG_OPTION = click.option(
    "--config",
    "config_path",
    type=click.Path(exists=True, dir_okay=False, path_type=Path),
    default=None,
    help="YAML config path.",
)


def _settings(config_path: Path | None) -> PhonestaticSettings:
    settings = load_settings(yaml_path=config_path)
    configure_logging(level=settings.log_level, json_logging=settings.json_logging)
    return settings


def _source_label() -> str:
    return f"phonenumbers {phonenumbers.__version__}"


@click.group(context_settings={"help_option_names": ["-h", "--help"]})
@click.version_option(__version__)
def main() -> None:
    """Generate static phone-number metadata lookup tables."""


@main.command("generate")
@click.option(
    "--output",
    "output_path",
    type=click.Path(dir_okay=False, path_type=Path),
    default=None,
    help="Write the generated module to a file instead of stdout.",
)
@click.option(
    "--id-dispatch",
    type=click.Choice(["trie", "linear"], case_sensitive=False),
    default=None,
    help="Id lookup strategy: two-level byte dispatch (trie) or a match over ids (linear).",
)
@click.option(
    "--width",
    type=click.IntRange(min=40),
    default=None,
    help="Target line width for record literals.",
)
@_CONFIG_OPTION
def generate_cmd(
    output_path: Path | None,
    id_dispatch: str | None,
    width: int | None,
    config_path: Path | None,
) -> None:
    """
    Generate the static lookup module.
    """

    settings = _settings(config_path)
    dispatch = (id_dispatch or settings.id_dispatch).lower()
    target = output_path or settings.output_path

    try:
        snapshot = load_snapshot()
        result = generate(
            snapshot,
            id_dispatch=dispatch,  # type: ignore[arg-type]
            width=width or settings.pformat_width,
            source_label=_source_label(),
        )
    except DataShapeViolation as exc:
        raise click.ClickException(f"Data shape violation ({exc.key!r}): {exc}") from exc

    logger.info("Generated tables: %s", json.dumps(result.to_dict(), sort_keys=True))

    try:
        write_module(result.text, target if target is not None else sys.stdout)
    except EmissionFailure as exc:
        raise click.ClickException(str(exc)) from exc

    if target is not None:
        logger.info("Wrote %s", target)


@main.command("verify")
@click.argument("module_path", type=click.Path(exists=True, dir_okay=False, path_type=Path))
@click.option("--json", "as_json", is_flag=True, help="Print the verification report as JSON.")
@_CONFIG_OPTION
def verify_cmd(module_path: Path, as_json: bool, config_path: Path | None) -> None:
    """
    Check a generated module against the installed phonenumbers data.
    """

    _settings(config_path)

    try:
        module = load_generated_module(module_path)
    except Exception as exc:
        raise click.ClickException(
            f"Cannot import {module_path}: {type(exc).__name__}: {exc}"
        ) from exc

    report = verify_module(module, load_snapshot())

    if as_json:
        click.echo(json.dumps(report.to_dict(), indent=2, sort_keys=True))
    else:
        click.echo(f"Checked {report.checked} lookups: {'ok' if report.ok else 'FAILED'}")
        for problem in report.problems:
            click.echo(f"  - {problem}")

    if not report.ok:
        raise click.ClickException(f"{len(report.problems)} mismatches in {module_path}")
