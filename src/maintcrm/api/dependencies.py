"""Shared dependencies for FastAPI routes.

Everything lives on ``app.state`` and is set up by ``create_app``; there are
no module-level singletons, so several apps (one per test) can coexist.
"""
from __future__ import annotations

import logging

from fastapi import HTTPException, Request

from maintcrm.config import Config
from maintcrm.services.backup import BackupManager
from maintcrm.services.backup_errors import BackupError
from maintcrm.store import Database

logger = logging.getLogger(__name__)


def get_config(request: Request) -> Config:
    return request.app.state.config


def get_database(request: Request) -> Database:
    return request.app.state.database


def get_backup_manager(request: Request) -> BackupManager:
    return request.app.state.backup_manager


def backup_http_error(error: BackupError) -> HTTPException:
    """Problems with the uploaded archive are 400s; problems on our side are 500s."""
    status_code = 400 if error.is_client_error else 500
    return HTTPException(status_code=status_code, detail=error.user_message)
