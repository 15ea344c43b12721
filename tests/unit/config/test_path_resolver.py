"""Tests for maintcrm.config.path_resolver."""
from __future__ import annotations

from pathlib import Path

import pytest

from maintcrm.config import Config, PathResolver


@pytest.mark.unit
class TestPathResolver:
    """Tests for PathResolver."""

    def test_data_dir_from_env(self, tmp_path):
        data_dir = PathResolver.get_data_dir()
        assert data_dir == tmp_path / ".maintcrm"
        assert data_dir.is_dir()

    def test_default_database_path(self, tmp_path):
        path = PathResolver.get_database_path(Config.load())
        assert path == tmp_path / ".maintcrm" / "database" / "crm.db"
        assert path.parent.is_dir()

    def test_configured_database_path(self, tmp_path, monkeypatch):
        monkeypatch.setenv("MAINTCRM_DATABASE_PATH", str(tmp_path / "db" / "other.db"))
        path = PathResolver.get_database_path(Config.load())
        assert path == tmp_path / "db" / "other.db"
        assert path.parent.is_dir()

    def test_default_backup_dir(self, tmp_path):
        backup_dir = PathResolver.get_backup_dir(Config.load())
        assert backup_dir == tmp_path / ".maintcrm" / "backups"
        assert backup_dir.is_dir()

    def test_configured_backup_dir(self, tmp_path, monkeypatch):
        monkeypatch.setenv("MAINTCRM_BACKUP_DIR", str(tmp_path / "nas" / "crm"))
        assert PathResolver.get_backup_dir(Config.load()) == tmp_path / "nas" / "crm"

    def test_temp_dir_default_is_system(self):
        assert PathResolver.get_temp_dir(Config.load()) is None

    def test_temp_dir_configured(self, tmp_path, monkeypatch):
        monkeypatch.setenv("MAINTCRM_BACKUP_TEMP_DIR", str(tmp_path / "scratch"))
        temp_dir = PathResolver.get_temp_dir(Config.load())
        assert temp_dir == tmp_path / "scratch"
        assert temp_dir.is_dir()

    def test_expand_home_template(self):
        expanded = PathResolver.expand_path_template("{home}/backups")
        assert expanded == str(Path.home() / "backups")

    def test_expand_env_var(self, monkeypatch):
        monkeypatch.setenv("CRM_SHARE", "/srv/share")
        assert PathResolver.expand_path_template("$CRM_SHARE/crm") == "/srv/share/crm"
