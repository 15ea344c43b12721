"""
Resolution of on-disk locations: data directory, SQLite database file,
and the default backup directory.
"""

from __future__ import annotations

import os
from pathlib import Path

from .constants import (
    ENV_DATA_DIR,
    DEFAULT_DATA_DIR,
    DEFAULT_DATABASE_SUBDIR,
    DEFAULT_BACKUP_SUBDIR,
    DATABASE_FILE,
)


class PathResolver:
    """Resolves configured paths and makes sure their parents exist."""

    @staticmethod
    def expand_path_template(path: str) -> str:
        """
        Expand path templates with environment variables.

        Supports:
        - {username} -> current username
        - {home} -> user home directory
        - Environment variables: $VAR or ${VAR}
        """
        path = path.replace("{username}", os.getenv("USERNAME") or os.getenv("USER") or "unknown")
        path = path.replace("{home}", str(Path.home()))
        path = os.path.expanduser(path)
        path = os.path.expandvars(path)
        return path

    @staticmethod
    def get_data_dir(config=None) -> Path:
        """
        Get the data directory.

        Checks in order:
        1. Environment variable (MAINTCRM_DATA_DIR)
        2. Config file setting
        3. Default location (~/.maintcrm)
        """
        env_dir = os.getenv(ENV_DATA_DIR)
        if env_dir:
            data_dir = Path(PathResolver.expand_path_template(env_dir))
        elif config is not None and config.paths.data_directory:
            data_dir = Path(PathResolver.expand_path_template(config.paths.data_directory))
        else:
            data_dir = DEFAULT_DATA_DIR

        data_dir.mkdir(parents=True, exist_ok=True)
        return data_dir

    @staticmethod
    def get_database_path(config=None) -> Path:
        """Path of the SQLite database file."""
        if config is not None and config.database.path:
            db_path = Path(PathResolver.expand_path_template(config.database.path))
        else:
            db_path = PathResolver.get_data_dir(config) / DEFAULT_DATABASE_SUBDIR / DATABASE_FILE

        db_path.parent.mkdir(parents=True, exist_ok=True)
        return db_path

    @staticmethod
    def get_backup_dir(config=None) -> Path:
        """Directory where backups and safety backups are written by default."""
        if config is not None and config.backup.backup_directory:
            backup_dir = Path(PathResolver.expand_path_template(config.backup.backup_directory))
        else:
            backup_dir = PathResolver.get_data_dir(config) / DEFAULT_BACKUP_SUBDIR

        backup_dir.mkdir(parents=True, exist_ok=True)
        return backup_dir

    @staticmethod
    def get_temp_dir(config=None) -> Path | None:
        """Parent for backup/restore working directories; None means the system default."""
        if config is not None and config.backup.temp_directory:
            temp_dir = Path(PathResolver.expand_path_template(config.backup.temp_directory))
            temp_dir.mkdir(parents=True, exist_ok=True)
            return temp_dir
        return None
