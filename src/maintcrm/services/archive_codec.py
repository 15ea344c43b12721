"""ZIP packing and unpacking of backup working directories."""
from __future__ import annotations

import logging
import os
import uuid
import zipfile
import zlib
from pathlib import Path

from maintcrm.config.constants import DEFAULT_COMPRESSION_LEVEL
from maintcrm.services.backup_errors import ArchiveCorruptError, BackupError, BackupIOError

logger = logging.getLogger(__name__)

# What zipfile raises for a damaged archive, an encrypted member, or an
# unsupported compression method.
UNREADABLE_ZIP_ERRORS: tuple[type[Exception], ...] = (
    zipfile.BadZipFile,
    zlib.error,
    EOFError,
    RuntimeError,
    NotImplementedError,
)


def _partial_path(dest_path: Path) -> Path:
    return dest_path.with_name(f".{dest_path.name}.{uuid.uuid4().hex[:8]}.part")


def pack_directory(
    source_dir: Path,
    dest_path: Path,
    *,
    compression_level: int = DEFAULT_COMPRESSION_LEVEL,
) -> Path:
    """
    Pack every file under ``source_dir`` into one ZIP archive.

    The archive is written next to ``dest_path`` first and moved into place
    only once complete, so ``dest_path`` is either the finished archive or
    untouched.

    Args:
        source_dir: Directory whose files become the archive root
        dest_path: Final archive location
        compression_level: Deflate level, 0-9

    Returns:
        ``dest_path``

    Raises:
        BackupIOError: If reading the sources or writing the archive fails
    """
    source_dir = Path(source_dir)
    dest_path = Path(dest_path)
    partial = _partial_path(dest_path)

    try:
        dest_path.parent.mkdir(parents=True, exist_ok=True)
        with zipfile.ZipFile(
            partial,
            "w",
            compression=zipfile.ZIP_DEFLATED,
            compresslevel=compression_level,
        ) as zf:
            for src in sorted(source_dir.rglob("*")):
                if src.is_file():
                    zf.write(src, arcname=src.relative_to(source_dir).as_posix())
        os.replace(partial, dest_path)
    except OSError as e:
        try:
            partial.unlink(missing_ok=True)
        except OSError as cleanup_error:
            logger.warning(f"Failed to remove partial archive {partial}: {cleanup_error}")
        raise BackupIOError(f"Failed to write archive {dest_path}: {e}") from e

    logger.info(f"Archive written: {dest_path} ({dest_path.stat().st_size} bytes)")
    return dest_path


def _check_member_paths(zf: zipfile.ZipFile, dest_dir: Path) -> None:
    root = dest_dir.resolve()
    for name in zf.namelist():
        target = (root / name).resolve()
        if target != root and root not in target.parents:
            raise ArchiveCorruptError(f"Archive entry escapes the destination directory: {name}")


def unpack_archive(archive_path: Path, dest_dir: Path) -> list[str]:
    """
    Extract every entry of a ZIP archive into ``dest_dir``.

    Args:
        archive_path: ZIP file to read
        dest_dir: Target directory, created when missing

    Returns:
        Names of the extracted entries

    Raises:
        ArchiveCorruptError: Missing file, not a ZIP, CRC failure, or unsafe entry paths
        BackupIOError: If writing the extracted files fails
    """
    archive_path = Path(archive_path)
    dest_dir = Path(dest_dir)

    if not archive_path.is_file():
        raise ArchiveCorruptError(f"Backup archive not found: {archive_path}")

    try:
        with zipfile.ZipFile(archive_path, "r") as zf:
            bad_member = zf.testzip()
            if bad_member is not None:
                raise ArchiveCorruptError(f"CRC check failed for {bad_member} in {archive_path}")
            _check_member_paths(zf, dest_dir)
            dest_dir.mkdir(parents=True, exist_ok=True)
            zf.extractall(dest_dir)
            names = zf.namelist()
    except BackupError:
        raise
    except UNREADABLE_ZIP_ERRORS as e:
        raise ArchiveCorruptError(f"Not a valid ZIP archive: {archive_path}: {e}") from e
    except OSError as e:
        raise BackupIOError(f"Failed to extract {archive_path}: {e}") from e

    logger.debug(f"Unpacked {len(names)} entries from {archive_path.name}")
    return names
