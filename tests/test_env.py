"""
Tests for .env loading and credential resolution.
"""

import os

from linkmatch.env import google_credentials, load_env


class TestLoadEnv:
    """Test .env loading."""

    def test_missing_file(self, tmp_path):
        assert load_env(tmp_path / ".env") is False

    def test_loads_values(self, tmp_path, monkeypatch):
        # Removed again on teardown
        monkeypatch.setenv("LINKMATCH_TEST_VALUE", "placeholder")
        monkeypatch.delenv("LINKMATCH_TEST_VALUE")

        env_file = tmp_path / ".env"
        env_file.write_text("LINKMATCH_TEST_VALUE=from-file\n", encoding="utf-8")

        assert load_env(env_file) is True
        assert os.environ["LINKMATCH_TEST_VALUE"] == "from-file"

    def test_process_environment_wins(self, tmp_path, monkeypatch):
        monkeypatch.setenv("LINKMATCH_TEST_VALUE", "from-shell")
        env_file = tmp_path / ".env"
        env_file.write_text("LINKMATCH_TEST_VALUE=from-file\n", encoding="utf-8")

        load_env(env_file)

        assert os.environ["LINKMATCH_TEST_VALUE"] == "from-shell"

    def test_defaults_to_working_directory(self, tmp_path, monkeypatch):
        monkeypatch.chdir(tmp_path)
        assert load_env() is False


class TestGoogleCredentials:
    """Test credential resolution."""

    def test_explicit_arguments_win(self, monkeypatch):
        monkeypatch.setenv("GOOGLE_API_KEY", "env-key")
        monkeypatch.setenv("GOOGLE_CSE_ID", "env-cx")
        assert google_credentials("arg-key", "arg-cx") == ("arg-key", "arg-cx")

    def test_environment_fallback(self, monkeypatch):
        monkeypatch.setenv("GOOGLE_API_KEY", "env-key")
        monkeypatch.setenv("GOOGLE_CSE_ID", "env-cx")
        assert google_credentials() == ("env-key", "env-cx")

    def test_legacy_engine_id_name(self, monkeypatch):
        monkeypatch.delenv("GOOGLE_CSE_ID", raising=False)
        monkeypatch.setenv("GOOGLE_SEARCH_ENGINE_ID", "legacy-cx")
        assert google_credentials("k")[1] == "legacy-cx"

    def test_nothing_configured(self, monkeypatch):
        for key in ("GOOGLE_API_KEY", "GOOGLE_CSE_ID", "GOOGLE_SEARCH_ENGINE_ID"):
            monkeypatch.delenv(key, raising=False)
        assert google_credentials() == (None, None)
