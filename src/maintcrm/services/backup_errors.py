"""Error taxonomy for backup and restore.

Every error carries a ``category`` used by the API and CLI to decide how to
report it, and a short ``user_message`` safe to show to an operator. The
exception's ``str()`` keeps the technical detail for logs.
"""
from __future__ import annotations

CATEGORY_ARCHIVE = "archive"
CATEGORY_CONTENTS = "contents"
CATEGORY_DATABASE = "database"
CATEGORY_FILESYSTEM = "filesystem"

# Categories caused by the input file rather than by this installation.
CLIENT_CATEGORIES = frozenset({CATEGORY_ARCHIVE, CATEGORY_CONTENTS})


class BackupError(RuntimeError):
    """Base class for every backup/restore failure."""

    category: str = CATEGORY_FILESYSTEM
    default_user_message: str = "The backup operation failed."

    def __init__(self, message: str, *, user_message: str | None = None):
        super().__init__(message)
        self.user_message = user_message or self.default_user_message

    @property
    def is_client_error(self) -> bool:
        return self.category in CLIENT_CATEGORIES


class ArchiveCorruptError(BackupError):
    """The file is not a readable ZIP archive."""

    category = CATEGORY_ARCHIVE
    default_user_message = "The backup file is corrupted or is not a valid backup archive."


class MissingManifestError(BackupError):
    category = CATEGORY_CONTENTS
    default_user_message = "The backup archive has no backup information file (backup-info.json)."


class MalformedManifestError(BackupError):
    category = CATEGORY_CONTENTS
    default_user_message = "The backup information file is malformed."


class MissingDataError(BackupError):
    category = CATEGORY_CONTENTS
    default_user_message = "The backup archive has no data file (data.json)."


class MalformedDataError(BackupError):
    category = CATEGORY_CONTENTS
    default_user_message = "The backup data file is malformed."


class StoreTransactionError(BackupError):
    """The database rejected a statement; nothing was changed."""

    category = CATEGORY_DATABASE
    default_user_message = "The database rejected the backup data. No changes were made."


class BackupIOError(BackupError):
    """A file-system operation failed while packing, copying or cleaning up."""

    category = CATEGORY_FILESYSTEM
    default_user_message = "A file could not be read or written during the backup operation."
