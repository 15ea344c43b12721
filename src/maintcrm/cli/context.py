"""Store and service construction shared by CLI commands."""
from __future__ import annotations

from dataclasses import dataclass

from maintcrm.config import Config, PathResolver
from maintcrm.core.logging_config import setup_logging
from maintcrm.services.backup import BackupManager
from maintcrm.store import Database


@dataclass
class CommandContext:
    config: Config
    database: Database
    backup_manager: BackupManager

    def close(self) -> None:
        self.database.dispose()


def open_context(config: Config | None = None) -> CommandContext:
    """Load configuration, set up logging and open the configured store."""
    config = config or Config.load()
    setup_logging(config.logging)
    database = Database(PathResolver.get_database_path(config), echo=config.database.echo)
    return CommandContext(
        config=config,
        database=database,
        backup_manager=BackupManager.from_config(database, config),
    )
