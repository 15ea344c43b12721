"""
Constants and default values for maintcrm.

Centralizes magic numbers and strings to improve maintainability.
"""

from pathlib import Path

# ============================================================================
# Application Metadata
# ============================================================================

APP_NAME = "maintcrm"
APP_VERSION = "0.3.0"
CONFIG_DIR_NAME = ".maintcrm"

# ============================================================================
# Path Defaults
# ============================================================================

DEFAULT_DATA_DIR = Path.home() / CONFIG_DIR_NAME
DEFAULT_CONFIG_SUBDIR = "config"
DEFAULT_DATABASE_SUBDIR = "database"
DEFAULT_BACKUP_SUBDIR = "backups"
DEFAULT_LOGS_SUBDIR = "logs"

DATABASE_FILE = "crm.db"

# Config file names
SETTINGS_FILE = "settings.toml"
ENV_FILE = ".env"

# ============================================================================
# Web Server Defaults
# ============================================================================

DEFAULT_HOST = "127.0.0.1"
DEFAULT_PORT = 8700
PORT_SCAN_RANGE = (8700, 8710)  # Will try ports in this range

DEFAULT_CORS_ORIGINS = [
    "http://localhost:8700",
    "http://127.0.0.1:8700",
]

# ============================================================================
# Backup Archive Layout
# ============================================================================

BACKUP_FORMAT_VERSION = "1.0.0"
BACKUP_DATA_FILE = "data.json"
BACKUP_MANIFEST_FILE = "backup-info.json"
BACKUP_DATABASE_FILE = "database.db"

BACKUP_FILENAME_PREFIX = "crm_backup"
SAFETY_BACKUP_FILENAME_PREFIX = "pre_restore"
BACKUP_TIMESTAMP_FORMAT = "%Y-%m-%d_%H-%M-%S"
TEMP_BACKUP_PREFIX = "crm-backup-"
TEMP_RESTORE_PREFIX = "crm-restore-"

# ============================================================================
# Backup Defaults
# ============================================================================

DEFAULT_COMPRESSION_LEVEL = 9
DEFAULT_INCLUDE_DATABASE_FILE = True
DEFAULT_STRICT_MANIFEST_COUNTS = True
DEFAULT_SAFETY_BACKUP_BEFORE_RESTORE = True

# ============================================================================
# Environment Variable Names
# ============================================================================

ENV_DATA_DIR = "MAINTCRM_DATA_DIR"
ENV_DATABASE_PATH = "MAINTCRM_DATABASE_PATH"
ENV_DATABASE_ECHO = "MAINTCRM_DATABASE_ECHO"
ENV_BACKUP_DIR = "MAINTCRM_BACKUP_DIR"
ENV_BACKUP_TEMP_DIR = "MAINTCRM_BACKUP_TEMP_DIR"
ENV_COMPRESSION_LEVEL = "MAINTCRM_COMPRESSION_LEVEL"
ENV_INCLUDE_DATABASE_FILE = "MAINTCRM_INCLUDE_DATABASE_FILE"
ENV_STRICT_MANIFEST_COUNTS = "MAINTCRM_STRICT_MANIFEST_COUNTS"
ENV_SAFETY_BACKUP = "MAINTCRM_SAFETY_BACKUP"
ENV_CORS_ORIGINS = "MAINTCRM_CORS_ORIGINS"

ENV_PORT = "MAINTCRM_PORT"
ENV_HOST = "MAINTCRM_HOST"

# ============================================================================
# Error Messages
# ============================================================================

ERROR_NO_CONFIG = """
Configuration file not found: {path}

Create one from the defaults:
    mkdir -p {config_dir}
    touch {config_dir}/{settings_file}
"""

ERROR_INVALID_PORT = """
Invalid port number: {port}

Port must be between 1 and 65535.
"""

ERROR_PORT_IN_USE = """
All ports in range {start}-{end} are in use.

Try:
1. Stop other services using these ports
2. Specify a different port: MAINTCRM_PORT=9000 maintcrm-web
"""
