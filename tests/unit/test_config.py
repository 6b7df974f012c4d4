"""Tests for configuration loading."""

import pytest

from ledger_kernel.config import (
    DEFAULT_CONFIG,
    ENV_DATABASE_URL,
    ENV_DATABASE_URL_FALLBACK,
    ENV_LOG_LEVEL,
    KernelConfig,
    load_config,
)


@pytest.fixture
def clean_env(monkeypatch):
    for name in (ENV_DATABASE_URL, ENV_DATABASE_URL_FALLBACK, ENV_LOG_LEVEL):
        monkeypatch.delenv(name, raising=False)
    return monkeypatch


class TestLoadConfig:
    def test_from_yaml(self, tmp_path, clean_env):
        path = tmp_path / "ledger.yaml"
        path.write_text(
            "database_url: sqlite:///ledger.db\n"
            "pool_size: 5\n"
            "recent_transactions_limit: 25\n"
            "budget_warning_percent: 90\n"
        )
        config = load_config(path)
        assert config.database_url == "sqlite:///ledger.db"
        assert config.pool_size == 5
        assert config.recent_transactions_limit == 25
        assert config.budget_warning_percent == 90
        assert config.budget_caution_percent == DEFAULT_CONFIG.budget_caution_percent
        assert config.is_sqlite

    def test_env_overrides_file(self, tmp_path, clean_env):
        path = tmp_path / "ledger.yaml"
        path.write_text("database_url: sqlite:///from-file.db\nlog_level: INFO\n")
        clean_env.setenv(ENV_DATABASE_URL, "postgresql://u:p@db/ledger")
        clean_env.setenv(ENV_LOG_LEVEL, "debug")

        config = load_config(path)
        assert config.database_url == "postgresql://u:p@db/ledger"
        assert config.log_level == "DEBUG"
        assert not config.is_sqlite

    def test_fallback_env_var(self, clean_env):
        clean_env.setenv(ENV_DATABASE_URL_FALLBACK, "sqlite:///fallback.db")
        assert load_config().database_url == "sqlite:///fallback.db"

    def test_empty_file_uses_defaults(self, tmp_path, clean_env):
        path = tmp_path / "empty.yaml"
        path.write_text("")
        clean_env.setenv(ENV_DATABASE_URL, "sqlite://")
        config = load_config(path)
        assert config.pool_size == DEFAULT_CONFIG.pool_size

    def test_unknown_key_rejected(self, tmp_path, clean_env):
        path = tmp_path / "bad.yaml"
        path.write_text("database_url: sqlite://\ncurrency: EUR\n")
        with pytest.raises(ValueError, match="currency"):
            load_config(path)

    def test_missing_url_rejected(self, clean_env):
        with pytest.raises(ValueError, match="No database URL"):
            load_config()

    def test_caution_above_warning_rejected(self, tmp_path, clean_env):
        path = tmp_path / "bands.yaml"
        path.write_text(
            "database_url: sqlite://\nbudget_warning_percent: 50\nbudget_caution_percent: 70\n"
        )
        with pytest.raises(ValueError):
            load_config(path)

    def test_missing_file(self, tmp_path, clean_env):
        with pytest.raises(FileNotFoundError):
            load_config(tmp_path / "nope.yaml")


def test_defaults():
    config = KernelConfig()
    assert config.recent_transactions_limit == 10
    assert config.budget_warning_percent == 80
    assert config.budget_caution_percent == 60
