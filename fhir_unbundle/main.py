from __future__ import annotations

import sys
from pathlib import Path
from typing import Optional

import typer
from pydantic import ValidationError
from rich.console import Console

from fhir_unbundle.config import get_settings
from fhir_unbundle.errors import UnbundleError
from fhir_unbundle.reporter import print_report
from fhir_unbundle.splitter import unbundle
from fhir_unbundle.utils.logging import configure_logging, get_logger, normalize_level

app = typer.Typer(
    help="Split a FHIR R4 bundle into one JSON file per resource.",
    add_completion=False,
)

log = get_logger(__name__)


def _validate_log_level(value: Optional[str]) -> Optional[str]:
    if value is None:
        return None
    try:
        return normalize_level(value)
    except ValueError as exc:
        raise typer.BadParameter(str(exc)) from exc


@app.command()
def run(
    bundle_path: Path = typer.Argument(
        ...,
        help="FHIR bundle file path.",
        show_default=False,
    ),
    output_dir: Optional[Path] = typer.Option(
        None,
        "--output-dir",
        "-o",
        help="Existing directory for the output files (default from settings, else '.').",
    ),
    fail_fast: Optional[bool] = typer.Option(
        None,
        "--fail-fast/--keep-going",
        help="Abort on the first entry that cannot be written, or keep going and report failures.",
    ),
    log_level: Optional[str] = typer.Option(
        None,
        "--log-level",
        "-l",
        help="Logging level (e.g., DEBUG, INFO, WARNING).",
        callback=_validate_log_level,
    ),
    json_logs: bool = typer.Option(
        False,
        "--json-logs",
        help="Emit logs as JSON.",
    ),
    quiet: bool = typer.Option(
        False,
        "--quiet",
        "-q",
        help="Do not print the summary table.",
    ),
) -> None:
    """
    Write every resource in BUNDLE_PATH to {name}-{resourceType}-{index}-{id}.json.
    """
    try:
        settings = get_settings()
    except ValidationError as exc:
        typer.echo(f"Invalid configuration: {exc}", err=True)
        raise typer.Exit(code=1) from exc

    configure_logging(
        level=log_level or settings.log_level,
        json_logs=json_logs or settings.log_json,
    )

    try:
        report = unbundle(bundle_path, output_dir=output_dir, fail_fast=fail_fast)
    except UnbundleError as exc:
        log.debug("Unbundle failed", extra={"code": exc.code, "details": exc.details})
        typer.echo(f"Failed to unbundle FHIR bundle: {exc.message}", err=True)
        raise typer.Exit(code=1) from exc

    if not quiet:
        print_report(report, console=Console())

    if not report.ok:
        typer.echo(
            f"Failed to unbundle FHIR bundle: {len(report.failed)} entries could not be written.",
            err=True,
        )
        raise typer.Exit(code=1)


def main() -> None:
    try:
        app()
    except KeyboardInterrupt:
        typer.echo("Cancelled by user.", err=True)
        sys.exit(130)


if __name__ == "__main__":
    main()
