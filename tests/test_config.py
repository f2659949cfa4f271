import logging

from coursepilot.core import logging as log_setup
from coursepilot.core.config import Settings


def test_defaults():
    config = Settings(_env_file=None)
    assert config.catalog_path is None
    assert config.credits_required_for_degree == 120
    assert config.recommendation_limit == 20
    assert config.alternatives_limit == 5
    assert config.search_limit == 30


def test_environment_overrides(monkeypatch):
    monkeypatch.setenv("COURSEPILOT_CATALOG_PATH", "/tmp/catalog.csv")
    monkeypatch.setenv("COURSEPILOT_SEARCH_LIMIT", "10")
    config = Settings(_env_file=None)
    assert config.catalog_path == "/tmp/catalog.csv"
    assert config.search_limit == 10


def test_configure_logging(monkeypatch):
    calls = []
    monkeypatch.setattr(logging, "basicConfig", lambda **kwargs: calls.append(kwargs))
    log_setup.configure_logging("debug")
    log_setup.configure_logging()
    assert calls[0]["level"] == "DEBUG"
    assert calls[1]["level"] == "INFO"
    assert "%(name)s" in calls[0]["format"]
