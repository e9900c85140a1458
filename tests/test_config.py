"""Tests for environment-based configuration."""

from pathlib import Path

from dailybread.config import DEFAULT_BIBLE_API_URL, Config, get_config, reset_config


def test_defaults(config: Config):
    assert config.bible_api_url == DEFAULT_BIBLE_API_URL
    assert config.bible_api_key is None
    assert config.api_timeout == 15.0
    assert (config.batch_size, config.queue_delay) == (10, 0.1)
    assert config.rate_limit_per_minute == 50
    assert config.request_cooldown == 0.5
    assert (config.passage_expiry_days, config.refresh_after_days) == (7.0, 1.0)
    assert (config.passage_gc_days, config.offline_gc_days) == (30.0, 90.0)
    assert config.cleanup_interval_hours == 6.0
    assert config.ai_model == "deepseek-chat"


def test_environment_overrides(monkeypatch, tmp_path):
    monkeypatch.setenv("DAILYBREAD_DB_PATH", str(tmp_path / "custom.db"))
    monkeypatch.setenv("BIBLE_API_KEY", "bible-key")
    monkeypatch.setenv("DAILYBREAD_RATE_LIMIT", "20")
    monkeypatch.setenv("DAILYBREAD_PASSAGE_EXPIRY_DAYS", "3")

    config = Config.from_env()

    assert config.db_path == Path(tmp_path / "custom.db")
    assert config.has_bible_api_config()
    assert config.rate_limit_per_minute == 20
    assert config.passage_expiry_days == 3.0


def test_validate(config: Config):
    errors = config.validate()
    assert any("BIBLE_API_KEY" in e for e in errors)

    config.bible_api_key = "key"
    config.refresh_after_days = 10
    config.batch_size = 0
    errors = config.validate()
    assert len(errors) == 2
    assert config.db_path.parent.exists()


def test_ai_key_length(config: Config):
    config.ai_api_key = "short"
    assert not config.has_ai_config()
    config.ai_api_key = "sk-0123456789"
    assert config.has_ai_config()


def test_global_config_is_cached(config: Config):
    first = get_config()
    assert get_config() is first
    reset_config()
    assert get_config() is not first
