"""
Tests for file helpers and settings loading.
"""

from datetime import datetime

import pytest

from reqmate.utils.file_utils import read_text, read_text_safe, save_artifact
from reqmate.utils.settings.factory import settings_factory


class TestReadText:
    """Tests for reading input files."""

    def test_reads_utf8(self, tmp_path):
        path = tmp_path / "page.html"
        path.write_text("<p>Größe</p>", encoding="utf-8")

        assert read_text(path) == "<p>Größe</p>"

    def test_missing_file(self, tmp_path):
        with pytest.raises(FileNotFoundError):
            read_text(tmp_path / "missing.html")

    def test_directory_is_rejected(self, tmp_path):
        with pytest.raises(ValueError):
            read_text(tmp_path)

    def test_safe_read_returns_none(self, tmp_path):
        assert read_text_safe(tmp_path / "missing.html") is None


class TestSaveArtifact:
    """Tests for debug artifacts."""

    def test_timestamped_name(self, tmp_path):
        path = save_artifact("text", tmp_path / "out", "plain_text", ".txt", timestamp=datetime(2025, 1, 1, 12, 0, 0))

        assert path == tmp_path / "out" / "plain_text_20250101_120000.txt"
        assert path.read_text(encoding="utf-8") == "text"

    def test_failure_returns_none(self, tmp_path):
        blocker = tmp_path / "blocker"
        blocker.write_text("not a directory", encoding="utf-8")

        assert save_artifact("text", blocker, "plain_text", ".txt") is None


class TestSettingsFactory:
    """Tests for env file loading."""

    def test_from_env_file(self, tmp_path):
        env_file = tmp_path / "test.env"
        env_file.write_text(
            "CONFLUENCE_TOKEN=abc\n"
            "CONFLUENCE_DEFAULT_SPACE_KEY=OPS\n"
            "CONFLUENCE_BASE_URL=https://confluence.internal/\n"
            "APP_SAVE_ARTIFACTS=true\n"
            "APP_EXCERPT_MAX_CHARS=120\n",
            encoding="utf-8",
        )

        confluence = settings_factory.create_confluence_settings(env_file)
        app = settings_factory.create_app_settings(env_file)

        assert confluence.token == "abc"
        assert confluence.default_space_key == "OPS"
        assert confluence.api_base_url == "https://confluence.internal"
        assert confluence.uses_local_files is False
        assert app.save_artifacts is True
        assert app.excerpt_max_chars == 120

    def test_missing_env_file(self, tmp_path):
        with pytest.raises(FileNotFoundError):
            settings_factory.create_confluence_settings(tmp_path / "missing.env")

    def test_env_file_respects_prefix(self, tmp_path):
        env_file = tmp_path / "test.env"
        env_file.write_text("TOKEN=unprefixed\nOUTPUT_DIR=/elsewhere\n", encoding="utf-8")

        assert settings_factory.create_confluence_settings(env_file).token is None
        assert str(settings_factory.create_app_settings(env_file).output_dir) == "data/confluence_output"
