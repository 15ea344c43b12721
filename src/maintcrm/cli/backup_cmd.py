"""`maintcrm backup` command. Create, restore and list backup archives."""
from __future__ import annotations

import argparse
from pathlib import Path

from rich.console import Console
from rich.table import Table


def _build_parser() -> argparse.ArgumentParser:
    parser = argparse.ArgumentParser(
        prog="maintcrm backup",
        description="Create, restore and list backups of all customer data.",
    )
    sub = parser.add_subparsers(dest="action", required=True)

    create = sub.add_parser("create", help="Write a new backup archive")
    create.add_argument(
        "--output",
        type=Path,
        default=None,
        help="Archive path (default: crm_backup_<timestamp>.zip in the backup directory)",
    )

    restore = sub.add_parser("restore", help="Replace all data with a backup archive")
    restore.add_argument("path", type=Path, help="Backup archive to restore")
    restore.add_argument(
        "--no-safety-backup",
        action="store_true",
        default=False,
        help="Skip the pre-restore backup of the current data",
    )

    sub.add_parser("list", help="List archives in the backup directory")
    return parser


def run_backup(argv: list[str]) -> int:
    """Entry point for `maintcrm backup`."""
    args = _build_parser().parse_args(argv)
    console = Console()

    from maintcrm.cli.context import open_context
    from maintcrm.services.backup_errors import BackupError

    ctx = open_context()
    try:
        if args.action == "create":
            info = ctx.backup_manager.create_backup(args.output)
            m = info.manifest
            console.print(f"[green]Backup created:[/green] {info.path}")
            console.print(
                f"  {m.customer_count} customers, {m.service_record_count} service records, "
                f"{m.reminder_count} reminders"
            )
            return 0

        if args.action == "restore":
            if not args.path.exists():
                console.print(f"[red]Backup not found: {args.path}[/red]")
                return 1
            if ctx.config.backup.safety_backup_before_restore and not args.no_safety_backup:
                safety = ctx.backup_manager.create_safety_backup()
                console.print(f"[dim]Pre-restore backup: {safety.path}[/dim]")
            result = ctx.backup_manager.restore_backup(args.path)
            restored = result.restored
            console.print(f"[green]Restored from {args.path.name}[/green]")
            console.print(
                f"  {restored.customers} customers, {restored.service_records} service records, "
                f"{restored.reminders} reminders"
            )
            return 0

        backups = ctx.backup_manager.list_backups()
        if not backups:
            console.print(f"[yellow]No backups in {ctx.backup_manager.backup_dir}[/yellow]")
            return 0

        table = Table(title=f"Backups in {ctx.backup_manager.backup_dir}")
        table.add_column("Name")
        table.add_column("Created")
        table.add_column("Customers", justify="right")
        table.add_column("Service records", justify="right")
        table.add_column("Reminders", justify="right")
        table.add_column("Size (MB)", justify="right")
        for b in backups:
            entry = b.to_dict()
            table.add_row(
                entry["name"],
                entry["createdAt"],
                str(entry["customerCount"]),
                str(entry["serviceRecordCount"]),
                str(entry["reminderCount"]),
                f"{entry['size_mb']:.2f}",
            )
        console.print(table)
        return 0
    except BackupError as e:
        console.print(f"[red]{e.user_message}[/red]")
        console.print(f"[dim]{e}[/dim]")
        return 1
    finally:
        ctx.close()
