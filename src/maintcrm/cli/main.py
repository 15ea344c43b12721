"""maintcrm command-line entry point."""
from __future__ import annotations

import sys
from collections.abc import Callable


USAGE = """Usage: maintcrm <command> [options]

Commands:
  backup create [--output PATH]              Write a backup archive
  backup restore PATH [--no-safety-backup]   Replace all data with a backup
  backup list                                List backup archives
  export {customers,service-records} --output PATH
  seed FIXTURE.json [--replace [--yes]]      Load fixture data
  stats                                      Show record counts
"""


def _commands() -> dict[str, Callable[[list[str]], int]]:
    from maintcrm.cli.backup_cmd import run_backup
    from maintcrm.cli.export_cmd import run_export
    from maintcrm.cli.seed_cmd import run_seed
    from maintcrm.cli.stats_cmd import run_stats

    return {
        "backup": run_backup,
        "export": run_export,
        "seed": run_seed,
        "stats": run_stats,
    }


def run(argv: list[str]) -> int:
    if not argv or argv[0] in ("-h", "--help"):
        print(USAGE)
        return 0
    if argv[0] == "--version":
        from maintcrm import __version__

        print(__version__)
        return 0

    command = _commands().get(argv[0])
    if command is None:
        print(f"Unknown command: {argv[0]}\n")
        print(USAGE)
        return 2
    return command(argv[1:])


def main():
    """Entry point"""
    sys.exit(run(sys.argv[1:]))


if __name__ == "__main__":
    main()
