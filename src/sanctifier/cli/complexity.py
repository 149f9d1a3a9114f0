"""Complexity metrics command."""

import json
from dataclasses import replace
from pathlib import Path

import typer

from ..config import load_config
from ..exceptions import SanctifierError
from ..formatters import RichFormatter
from ..logging_config import setup_logging
from ..models import AnalysisContext, AnalysisReport
from . import app
from ._common import analyze_target, err_console, validate_target


@app.command()
def complexity(
    path: Path = typer.Argument(
        Path("."),
        help="Contract project directory (with Cargo.toml) or a single .rs file",
    ),
    output_format: str = typer.Option(
        "text",
        "--format",
        "-f",
        help="Output format: text or json",
    ),
    verbose: bool = typer.Option(
        False,
        "--verbose",
        "-v",
        help="Enable verbose (DEBUG level) logging",
    ),
):
    """
    Report per-function complexity metrics.

    Flags functions with cyclomatic complexity > 10, more than 5 parameters,
    nesting deeper than 4 or more than 50 lines.
    """
    logger = setup_logging(verbose=verbose)
    if output_format not in ("text", "json"):
        err_console.print(f"[red]Error:[/red] unknown format {output_format!r} (choose text or json)")
        raise typer.Exit(2)

    try:
        settings = replace(load_config(), enabled_rules=frozenset({"complexity"}))
        target = validate_target(path)
        reports, scanned = analyze_target(target, settings)
    except SanctifierError as e:
        logger.debug(f"{e.__class__.__name__}: {e}")
        err_console.print(f"[red]Error:[/red] {e}")
        raise typer.Exit(1)

    metrics = [r.metrics for r in reports if r.metrics is not None]
    if output_format == "json":
        print(json.dumps([m.to_dict() for m in metrics], indent=2))
        return

    context = AnalysisContext(target=str(path), files_scanned=scanned, ledger_limit=settings.ledger_limit)
    # Security findings belong to `analyze`; show metrics only.
    RichFormatter().render([AnalysisReport(path=r.path, metrics=r.metrics) for r in reports], context)
