"""`maintcrm stats` command. Shows record counts."""
from __future__ import annotations

import argparse

from rich.console import Console
from rich.table import Table


def run_stats(argv: list[str]) -> int:
    """Entry point for `maintcrm stats`."""
    parser = argparse.ArgumentParser(prog="maintcrm stats", description="Show record counts.")
    parser.parse_args(argv)

    console = Console()

    from maintcrm.cli.context import open_context

    ctx = open_context()
    try:
        counts = ctx.database.counts()
    finally:
        ctx.close()

    table = Table(title="Data statistics")
    table.add_column("Entity")
    table.add_column("Count", justify="right")
    table.add_row("Customers", str(counts.customers))
    table.add_row("Service records", str(counts.service_records))
    table.add_row("Reminders", str(counts.reminders))
    console.print(table)
    return 0
