"""Tests for maintcrm.config.settings."""
from __future__ import annotations

from pathlib import Path

import pytest

from maintcrm.config import Config


def _write_settings(data_dir: Path, text: str) -> Path:
    path = data_dir / "config" / "settings.toml"
    path.parent.mkdir(parents=True, exist_ok=True)
    path.write_text(text, encoding="utf-8")
    return path


@pytest.mark.unit
class TestConfigLoad:
    """Tests for Config.load."""

    def test_explicit_missing_path_raises(self, tmp_path):
        missing = tmp_path / "nonexistent" / "settings.toml"
        with pytest.raises(FileNotFoundError):
            Config.load(config_path=missing)

    def test_defaults_without_file(self, tmp_path):
        config = Config.load()

        assert config.paths.data_directory == str(tmp_path / ".maintcrm")
        assert config.database.path is None
        assert config.database.echo is False
        assert config.backup.compression_level == 9
        assert config.backup.include_database_file is True
        assert config.backup.strict_manifest_counts is True
        assert config.backup.safety_backup_before_restore is True
        assert config.server.cors_origins == ["http://localhost:8700", "http://127.0.0.1:8700"]

    def test_log_file_under_data_directory(self, tmp_path):
        config = Config.load()
        assert Path(config.logging.file_path) == tmp_path / ".maintcrm" / "logs" / "maintcrm.log"

    def test_settings_file_read(self, tmp_path):
        _write_settings(tmp_path / ".maintcrm", """
[backup]
compression_level = 6
include_database_file = false

[logging]
level = "DEBUG"
file_enabled = false
""")
        config = Config.load()

        assert config.backup.compression_level == 6
        assert config.backup.include_database_file is False
        assert config.logging.level == "DEBUG"
        assert config.logging.file_enabled is False

    def test_environment_overrides_file(self, tmp_path, monkeypatch):
        _write_settings(tmp_path / ".maintcrm", "[backup]\nstrict_manifest_counts = true\n")
        monkeypatch.setenv("MAINTCRM_STRICT_MANIFEST_COUNTS", "false")
        monkeypatch.setenv("MAINTCRM_DATABASE_PATH", str(tmp_path / "custom.db"))
        monkeypatch.setenv("MAINTCRM_CORS_ORIGINS", "http://a.example, http://b.example")

        config = Config.load()

        assert config.backup.strict_manifest_counts is False
        assert config.database.path == str(tmp_path / "custom.db")
        assert config.server.cors_origins == ["http://a.example", "http://b.example"]

    def test_bad_int_env_falls_back(self, monkeypatch):
        monkeypatch.setenv("MAINTCRM_COMPRESSION_LEVEL", "max")
        assert Config.load().backup.compression_level == 9

    def test_compression_level_out_of_range(self, monkeypatch):
        monkeypatch.setenv("MAINTCRM_COMPRESSION_LEVEL", "12")
        with pytest.raises(ValueError, match="compression_level"):
            Config.load()

    def test_explicit_path(self, tmp_path):
        path = _write_settings(tmp_path / "elsewhere", "[database]\necho = true\n")
        assert Config.load(config_path=path).database.echo is True
