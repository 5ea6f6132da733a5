"""Command line interface for ``dupay``.

``cmd_find_duplicates`` holds the command logic and returns an exit status;
the Typer command below only resolves options (flags, then ``.env`` /
environment via ``python-dotenv``, then defaults) and delegates to it.

Usage::

    dupay [--time 1m] [--amount 1.0] optima.pdf mbank.pdf [more.pdf ...]
"""

from __future__ import annotations

import sys
from collections.abc import Sequence
from pathlib import Path
from typing import Annotated

import typer
from dotenv import load_dotenv

from . import __version__
from .config import AMOUNT_TOLERANCE_CURRENCY, resolve_max_workers, resolve_tolerance
from .logging_setup import configure_logging
from .models import MatchTolerance
from .report import format_amount, format_duration

USAGE = """\
Usage: dupay [OPTIONS] FILE FILE [FILE...]

At least two statement files are required.

Example:
  dupay --time 1m --amount 1 optima.pdf mbank.pdf"""


def cmd_find_duplicates(
    paths: Sequence[str | Path],
    *,
    tolerance: MatchTolerance,
    max_workers: int,
) -> int:
    """Scan ``paths``, look for duplicate payments, and print the report.

    Files that cannot be read or whose bank format is not recognized are
    reported and skipped. Returns ``0`` once the report has been printed.
    """

    from .api import collect_transactions, find_duplicate_payments, scan_documents
    from .report import render_report

    results = scan_documents(paths, max_workers=max_workers)

    for result in results:
        print(f"Processing: {result.path.name}")
        if result.error is not None:
            print(f"  Error reading document: {result.error}")
            continue
        if not result.recognized:
            print("  Warning: No parser found for this document format")
            continue
        print(f"  Detected: {result.parser_name}")
        print(f"  Found {len(result.transactions)} transactions")

    transactions = collect_transactions(results)
    print(f"\nTotal transactions: {len(transactions)}")
    max_time = format_duration(tolerance.max_time_diff)
    max_amount = format_amount(tolerance.max_amount_diff, AMOUNT_TOLERANCE_CURRENCY)
    print(f"Looking for duplicates (time diff <= {max_time}, amount diff <= {max_amount})...\n")

    matches = find_duplicate_payments(transactions, tolerance)
    print(render_report(matches))
    return 0


# ---- Typer-based console interface -------------------------------------------


app = typer.Typer(
    add_completion=False,
    help=(
        "Find payments recorded twice across bank statements (Optima Bank, Mbank). "
        "Reads DUPAY_* settings from a local .env before running."
    ),
)


def _version_callback(value: bool) -> None:
    if value:
        typer.echo(f"dupay version {__version__}")
        raise typer.Exit(0)


@app.command()
def main(
    files: Annotated[
        list[Path] | None,
        typer.Argument(help="Statement files (.pdf or extracted .txt).", show_default=False),
    ] = None,
    time: str | None = typer.Option(
        None,
        "--time",
        help="Maximum time difference between transactions, e.g. 30s, 1m, 1m30s "
        "(env DUPAY_MAX_TIME_DIFF, default 1m).",
    ),
    amount: str | None = typer.Option(
        None,
        "--amount",
        help="Maximum amount difference (env DUPAY_MAX_AMOUNT_DIFF, default 1.0).",
    ),
    workers: int | None = typer.Option(
        None,
        "--workers",
        help="Parallel document readers (env DUPAY_EXTRACT_WORKERS, default 4).",
    ),
    log_level: str | None = typer.Option(
        None, "--log-level", help="Log level (env DUPAY_LOG_LEVEL, default INFO)."
    ),
    version: bool = typer.Option(
        False,
        "--version",
        help="Print version information and exit.",
        callback=_version_callback,
        is_eager=True,
    ),
) -> None:
    """Detect likely duplicate payments across two or more bank statements."""

    # Load environment from .env in CWD (override=False to keep existing env)
    load_dotenv(dotenv_path=Path.cwd() / ".env", override=False)
    configure_logging(log_level)

    if not files or len(files) < 2:
        print(USAGE, file=sys.stderr)
        raise typer.Exit(1)

    try:
        tolerance = resolve_tolerance(time=time, amount=amount)
    except ValueError as e:
        print(f"Error: invalid tolerance: {e}", file=sys.stderr)
        raise typer.Exit(2) from e

    code = cmd_find_duplicates(
        files,
        tolerance=tolerance,
        max_workers=resolve_max_workers(workers),
    )
    raise typer.Exit(code)


if __name__ == "__main__":  # pragma: no cover
    app()
