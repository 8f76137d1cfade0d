"""Tests for settings defaults and SKILLGAP_ environment overrides."""

from pathlib import Path

from skillgap.config import Settings


def test_defaults():
    config = Settings()
    assert config.cache_ttl_minutes == 30
    assert config.cache_max_entries == 50
    assert config.fuzzy_threshold == 0.8
    assert config.context_window == 50
    assert Path(config.taxonomy_path).is_file()


def test_env_override(monkeypatch):
    monkeypatch.setenv("SKILLGAP_CACHE_TTL_MINUTES", "5")
    monkeypatch.setenv("SKILLGAP_FUZZY_THRESHOLD", "0.9")
    config = Settings()
    assert config.cache_ttl_minutes == 5
    assert config.fuzzy_threshold == 0.9
