"""`maintcrm seed` command. Load fixture data."""
from __future__ import annotations

import argparse
from pathlib import Path

from rich.console import Console
from rich.prompt import Confirm


def run_seed(argv: list[str]) -> int:
    """Entry point for `maintcrm seed`."""
    parser = argparse.ArgumentParser(
        prog="maintcrm seed",
        description="Insert fixture data (data.json shape) with freshly assigned IDs.",
    )
    parser.add_argument("fixture", type=Path, help="JSON file with customers, serviceRecords, reminders")
    parser.add_argument(
        "--replace",
        action="store_true",
        default=False,
        help="Delete all existing data first",
    )
    parser.add_argument(
        "--yes",
        action="store_true",
        default=False,
        help="Do not ask for confirmation with --replace",
    )
    args = parser.parse_args(argv)

    console = Console()

    if not args.fixture.is_file():
        console.print(f"[red]Fixture file not found: {args.fixture}[/red]")
        return 1
    if args.replace and not args.yes:
        if not Confirm.ask("Delete ALL existing customers, service records and reminders?"):
            console.print("Aborted.")
            return 1

    from maintcrm.cli.context import open_context
    from maintcrm.services.backup_errors import BackupError
    from maintcrm.services.seeding import load_fixtures, seed_database

    ctx = open_context()
    try:
        summary = seed_database(ctx.database, load_fixtures(args.fixture), replace=args.replace)
    except BackupError as e:
        console.print(f"[red]{e.user_message}[/red]")
        console.print(f"[dim]{e}[/dim]")
        return 1
    except ValueError as e:
        console.print(f"[red]Invalid fixture file: {e}[/red]")
        return 1
    finally:
        ctx.close()

    inserted, skipped = summary.inserted, summary.skipped
    console.print(
        f"[green]Seeded[/green] {inserted.customers} customers, "
        f"{inserted.service_records} service records, {inserted.reminders} reminders"
    )
    if skipped.service_records or skipped.reminders:
        console.print(
            f"[yellow]Skipped[/yellow] {skipped.service_records} service records, "
            f"{skipped.reminders} reminders with unknown customers"
        )
    return 0
