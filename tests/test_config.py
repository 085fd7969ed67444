"""Tests for src.retrieval.config and src.secrets ensuring env overrides and defaults work.

Run with coverage to validate configuration handling:
    pytest tests/test_config.py --maxfail=1 -v --cov=src.retrieval.config --cov-report=term-missing
"""

from importlib import reload
import json

import src.retrieval.config as config
from src.secrets import load_local_secrets, resolve_github_tokens


def test_config_defaults_are_present():
    assert config.SEARCH_PER_PAGE > 0
    assert config.BACKOFF_BASE_SEC >= 1
    assert config.MAX_RETRIES >= 5
    assert config.USER_AGENT.startswith("topic-release-catalog")
    assert config.METADATA_FILENAME.endswith(".json")


def test_env_override_for_topic_and_page_cap(monkeypatch):
    monkeypatch.setenv("TOPIC", "other-topic")
    monkeypatch.setenv("SEARCH_PER_PAGE", "100")
    monkeypatch.delenv("MAX_SEARCH_PAGES", raising=False)
    reloaded = reload(config)
    try:
        assert reloaded.TOPIC == "other-topic"
        assert reloaded.SEARCH_PER_PAGE == 100
        assert reloaded.MAX_SEARCH_PAGES == 10
    finally:
        monkeypatch.delenv("TOPIC", raising=False)
        monkeypatch.delenv("SEARCH_PER_PAGE", raising=False)
        reload(config)


def test_load_local_secrets(tmp_path):
    path = tmp_path / "secrets.json"
    assert load_local_secrets(path) == {}
    path.write_text(json.dumps({"github_tokens": ["a"]}))
    assert load_local_secrets(path) == {"github_tokens": ["a"]}
    path.write_text("[1, 2]")
    assert load_local_secrets(path) == {}
    path.write_text("{bad")
    assert load_local_secrets(path) == {}


def test_resolve_github_tokens_env_first_without_duplicates(monkeypatch):
    monkeypatch.setenv("GITHUB_TOKEN", "envtok")
    tokens = resolve_github_tokens({"github_tokens": ["one", "envtok", "", 5, " two "]})
    assert tokens == ["envtok", "one", "two"]

    monkeypatch.delenv("GITHUB_TOKEN")
    assert resolve_github_tokens({}) == []
