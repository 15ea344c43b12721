"""`maintcrm export` command. Writes Jobkan-compatible CSV files."""
from __future__ import annotations

import argparse
from pathlib import Path

from rich.console import Console


def run_export(argv: list[str]) -> int:
    """Entry point for `maintcrm export`."""
    parser = argparse.ArgumentParser(
        prog="maintcrm export",
        description="Export customers or service records as CSV (UTF-8 with BOM, CRLF).",
    )
    parser.add_argument("kind", choices=["customers", "service-records"], help="What to export")
    parser.add_argument("--output", type=Path, required=True, help="CSV file to write")
    args = parser.parse_args(argv)

    console = Console()

    from maintcrm.cli.context import open_context
    from maintcrm.services.csv_export import NoDataToExportError, export_csv

    ctx = open_context()
    try:
        path = export_csv(ctx.database, args.kind, args.output)
    except NoDataToExportError as e:
        console.print(f"[yellow]{e}[/yellow]")
        return 1
    finally:
        ctx.close()

    console.print(f"[green]Exported {args.kind}:[/green] {path}")
    return 0
