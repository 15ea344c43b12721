"""Backup endpoints - create, list, restore, and delete backups."""
from __future__ import annotations

import logging
from pathlib import Path

from fastapi import APIRouter, Body, Depends, HTTPException

from maintcrm.api.dependencies import backup_http_error, get_backup_manager, get_config
from maintcrm.api.models import (
    BackupCreateRequest,
    BackupCreateResponse,
    BackupListResponse,
    BackupRestoreRequest,
    BackupRestoreResponse,
)
from maintcrm.config import Config
from maintcrm.services.backup import BackupManager
from maintcrm.services.backup_errors import BackupError


router = APIRouter()
logger = logging.getLogger(__name__)


def _resolve_archive(backup_manager: BackupManager, name_or_path: str) -> Path:
    """Bare file names refer to the backup directory; anything else is a path."""
    candidate = Path(name_or_path).expanduser()
    if not candidate.is_absolute() and candidate.parent == Path("."):
        return backup_manager.backup_dir / candidate
    return candidate


@router.post("/create", response_model=BackupCreateResponse)
def create_backup(
    request: BackupCreateRequest | None = Body(default=None),
    backup_manager: BackupManager = Depends(get_backup_manager),
):
    """Create a new backup archive of all customers, service records and reminders."""
    output_path = Path(request.output_path).expanduser() if request and request.output_path else None
    try:
        info = backup_manager.create_backup(output_path)
    except BackupError as e:
        raise backup_http_error(e)

    return {
        "success": True,
        "backup": info.to_dict(),
        "message": f"Backup created: {info.path.name}",
    }


@router.get("/list", response_model=BackupListResponse)
def list_backups(backup_manager: BackupManager = Depends(get_backup_manager)):
    """List the archives in the backup directory, newest first."""
    try:
        backups = backup_manager.list_backups()
    except OSError as e:
        logger.error(f"Failed to list backups: {e}", exc_info=True)
        raise HTTPException(status_code=500, detail=str(e))

    return {
        "backups": [b.to_dict() for b in backups],
        "total": len(backups),
        "backup_directory": str(backup_manager.backup_dir),
    }


@router.post("/restore", response_model=BackupRestoreResponse)
def restore_backup(
    request: BackupRestoreRequest,
    backup_manager: BackupManager = Depends(get_backup_manager),
    config: Config = Depends(get_config),
):
    """Replace all data with the contents of a backup archive.

    A pre-restore safety backup is written first unless disabled.
    """
    backup_path = _resolve_archive(backup_manager, request.backup_path)
    if not backup_path.exists():
        raise HTTPException(status_code=404, detail=f"Backup not found: {request.backup_path}")

    safety = request.create_safety_backup
    if safety is None:
        safety = config.backup.safety_backup_before_restore

    try:
        pre_restore = backup_manager.create_safety_backup() if safety else None
        logger.info(f"Restoring from backup: {backup_path}")
        result = backup_manager.restore_backup(backup_path)
    except BackupError as e:
        raise backup_http_error(e)

    response = {
        "success": True,
        "restored_from": backup_path.name,
        "restored": result.restored.to_dict(),
        "message": f"Successfully restored from backup: {backup_path.name}",
    }
    if pre_restore is not None:
        response["pre_restore_backup"] = pre_restore.to_dict()
    return response


@router.delete("/delete/{backup_name}")
def delete_backup(
    backup_name: str,
    backup_manager: BackupManager = Depends(get_backup_manager),
):
    """Delete a backup archive from the backup directory."""
    if Path(backup_name).name != backup_name or not backup_name.endswith(".zip"):
        raise HTTPException(status_code=400, detail=f"Invalid backup name: {backup_name}")
    try:
        backup_path = backup_manager.backup_dir / backup_name

        if not backup_path.exists():
            raise HTTPException(status_code=404, detail=f"Backup not found: {backup_name}")

        logger.info(f"Deleting backup: {backup_name}")
        backup_manager.delete_backup(backup_path)

        return {
            "success": True,
            "deleted": backup_name,
            "message": f"Backup deleted: {backup_name}"
        }

    except HTTPException:
        raise
    except OSError as e:
        logger.error(f"Failed to delete backup: {e}", exc_info=True)
        raise HTTPException(status_code=500, detail=str(e))
