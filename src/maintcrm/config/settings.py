"""
Configuration management with environment variable and .env support.

Configuration precedence (highest to lowest):
1. Environment variables (MAINTCRM_*)
2. User config file (~/.maintcrm/config/settings.toml)
3. Hardcoded constants (constants.py)
"""

from __future__ import annotations

import os
from dataclasses import dataclass
from pathlib import Path
from typing import overload

import tomli
from dotenv import load_dotenv

from ..core.logging_config import LogConfig
from .constants import (
    APP_NAME,
    DEFAULT_LOGS_SUBDIR,
    DEFAULT_DATA_DIR,
    DEFAULT_CONFIG_SUBDIR,
    SETTINGS_FILE,
    ENV_FILE,
    DEFAULT_COMPRESSION_LEVEL,
    DEFAULT_INCLUDE_DATABASE_FILE,
    DEFAULT_STRICT_MANIFEST_COUNTS,
    DEFAULT_SAFETY_BACKUP_BEFORE_RESTORE,
    DEFAULT_CORS_ORIGINS,
    ENV_DATA_DIR,
    ENV_DATABASE_PATH,
    ENV_DATABASE_ECHO,
    ENV_BACKUP_DIR,
    ENV_BACKUP_TEMP_DIR,
    ENV_COMPRESSION_LEVEL,
    ENV_INCLUDE_DATABASE_FILE,
    ENV_STRICT_MANIFEST_COUNTS,
    ENV_SAFETY_BACKUP,
    ENV_CORS_ORIGINS,
    ERROR_NO_CONFIG,
)


# Load .env file at module import time
# Search order: ./.env, ~/.maintcrm/.env, ~/.maintcrm/config/.env
def _load_env_files():
    """Load .env files from standard locations."""
    env_locations = [
        Path.cwd() / ENV_FILE,
        DEFAULT_DATA_DIR / ENV_FILE,
        DEFAULT_DATA_DIR / DEFAULT_CONFIG_SUBDIR / ENV_FILE,
    ]

    for env_path in env_locations:
        if env_path.exists():
            load_dotenv(env_path, override=False)  # Don't override already-set vars


_load_env_files()


@overload
def _get_env_str(key: str, default: str) -> str: ...


@overload
def _get_env_str(key: str, default: None = None) -> str | None: ...


def _get_env_str(key: str, default: str | None = None) -> str | None:
    """Get string value from environment variable. Empty strings are treated as missing."""
    value = os.getenv(key)
    if value is None or value == "":
        return default
    return value


def _get_env_int(key: str, default: int) -> int:
    """Get integer value from environment variable."""
    value = os.getenv(key)
    if value is None:
        return default
    try:
        return int(value)
    except ValueError:
        return default


def _get_env_bool(key: str, default: bool) -> bool:
    """Get boolean value from environment variable."""
    value = os.getenv(key)
    if value is None:
        return default
    return value.lower() in ("true", "1", "yes", "on")


@dataclass
class PathsConfig:
    data_directory: str

    @classmethod
    def from_dict(cls, data: dict) -> "PathsConfig":
        """Create PathsConfig from dict with environment variable overrides."""
        return cls(
            data_directory=_get_env_str(
                ENV_DATA_DIR,
                data.get("data_directory", str(DEFAULT_DATA_DIR))
            ) or str(DEFAULT_DATA_DIR),
        )


@dataclass
class DatabaseConfig:
    path: str | None
    echo: bool

    @classmethod
    def from_dict(cls, data: dict) -> "DatabaseConfig":
        """Create DatabaseConfig from dict with environment variable overrides.

        ``path`` left unset means ``<data_directory>/database/crm.db``.
        """
        return cls(
            path=_get_env_str(ENV_DATABASE_PATH, data.get("path") or None),
            echo=_get_env_bool(ENV_DATABASE_ECHO, bool(data.get("echo", False))),
        )


@dataclass
class BackupConfig:
    backup_directory: str | None
    temp_directory: str | None
    compression_level: int
    include_database_file: bool
    strict_manifest_counts: bool
    safety_backup_before_restore: bool

    @classmethod
    def from_dict(cls, data: dict) -> "BackupConfig":
        """Create BackupConfig from dict with environment variable overrides."""
        level = _get_env_int(
            ENV_COMPRESSION_LEVEL,
            int(data.get("compression_level", DEFAULT_COMPRESSION_LEVEL)),
        )
        if not 0 <= level <= 9:
            raise ValueError(f"compression_level must be between 0 and 9, got {level}")
        return cls(
            backup_directory=_get_env_str(ENV_BACKUP_DIR, data.get("backup_directory") or None),
            temp_directory=_get_env_str(ENV_BACKUP_TEMP_DIR, data.get("temp_directory") or None),
            compression_level=level,
            include_database_file=_get_env_bool(
                ENV_INCLUDE_DATABASE_FILE,
                bool(data.get("include_database_file", DEFAULT_INCLUDE_DATABASE_FILE)),
            ),
            strict_manifest_counts=_get_env_bool(
                ENV_STRICT_MANIFEST_COUNTS,
                bool(data.get("strict_manifest_counts", DEFAULT_STRICT_MANIFEST_COUNTS)),
            ),
            safety_backup_before_restore=_get_env_bool(
                ENV_SAFETY_BACKUP,
                bool(data.get("safety_backup_before_restore", DEFAULT_SAFETY_BACKUP_BEFORE_RESTORE)),
            ),
        )


@dataclass
class ServerConfig:
    cors_origins: list[str]

    @classmethod
    def from_dict(cls, data: dict) -> "ServerConfig":
        env_origins = _get_env_str(ENV_CORS_ORIGINS)
        if env_origins:
            origins = [o.strip() for o in env_origins.split(",") if o.strip()]
        else:
            origins = data.get("cors_origins", list(DEFAULT_CORS_ORIGINS))
        return cls(cors_origins=origins)


@dataclass
class Config:
    paths: PathsConfig
    database: DatabaseConfig
    backup: BackupConfig
    server: ServerConfig
    logging: LogConfig

    @classmethod
    def load(cls, config_path: Path | None = None) -> "Config":
        """
        Load configuration with proper precedence.

        Precedence (highest to lowest):
        1. Environment variables (MAINTCRM_*)
        2. User config (~/.maintcrm/config/settings.toml)
        3. Hardcoded constants

        Args:
            config_path: Optional explicit config file path

        Returns:
            Loaded Config object

        Raises:
            FileNotFoundError: If an explicit config path does not exist
        """
        if config_path is not None:
            config_files = [config_path]
        else:
            base_data_dir = Path(os.getenv(ENV_DATA_DIR, str(DEFAULT_DATA_DIR))).expanduser()
            config_files = [base_data_dir / DEFAULT_CONFIG_SUBDIR / SETTINGS_FILE]

        data = None
        for config_file in config_files:
            if config_file.exists():
                with open(config_file, "rb") as f:
                    data = tomli.load(f)
                break

        if data is None:
            if config_path is not None:
                raise FileNotFoundError(
                    ERROR_NO_CONFIG.format(
                        path=config_path,
                        config_dir=DEFAULT_DATA_DIR / DEFAULT_CONFIG_SUBDIR,
                        settings_file=SETTINGS_FILE,
                    )
                )
            data = {}

        paths = PathsConfig.from_dict(data.get("paths", {}))

        # Log file defaults to <data_directory>/logs/maintcrm.log
        log_data = dict(data.get("logging", {}))
        log_data.setdefault(
            "file_path",
            str(Path(paths.data_directory).expanduser() / DEFAULT_LOGS_SUBDIR / f"{APP_NAME}.log"),
        )

        return cls(
            paths=paths,
            database=DatabaseConfig.from_dict(data.get("database", {})),
            backup=BackupConfig.from_dict(data.get("backup", {})),
            server=ServerConfig.from_dict(data.get("server", {})),
            logging=LogConfig(**log_data),
        )
