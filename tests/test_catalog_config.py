"""Tests for src.catalog.config covering CLI parsing and environment-driven run mode.

Run with coverage:
    pytest tests/test_catalog_config.py --maxfail=1 -v --cov=src.catalog.config --cov-report=term-missing
"""

from pathlib import Path

from src.catalog import config


def test_resolve_settings_defaults(monkeypatch):
    monkeypatch.delenv("GITHUB_EVENT_NAME", raising=False)
    monkeypatch.delenv("VERBOSE", raising=False)
    settings = config.resolve_settings()
    assert settings.categories_path == Path(config.DEFAULT_CATEGORIES_PATH)
    assert settings.output_path == Path("releases.json")
    assert settings.errors_path == Path("ERRORS.md")
    assert settings.manual_run is False
    assert settings.verbose is False
    assert settings.branch_fallback is True
    assert settings.dry_run is False


def test_run_mode_from_environment(monkeypatch):
    monkeypatch.setenv("GITHUB_EVENT_NAME", "workflow_dispatch")
    monkeypatch.setenv("VERBOSE", "true")
    settings = config.resolve_settings(config.parse_args([]))
    assert settings.manual_run is True
    assert settings.verbose is True

    monkeypatch.setenv("GITHUB_EVENT_NAME", "schedule")
    monkeypatch.setenv("VERBOSE", "false")
    settings = config.resolve_settings(config.parse_args([]))
    assert settings.manual_run is False
    assert settings.verbose is False


def test_resolve_settings_from_cli(monkeypatch):
    monkeypatch.delenv("GITHUB_EVENT_NAME", raising=False)
    args = config.parse_args([
        "--topic",
        "my-topic",
        "--categories",
        "conf/categories.json",
        "--blocklist",
        "conf/block.json",
        "--manual",
        "conf/manual.json",
        "--output",
        "out/releases.json",
        "--errors",
        "out/ERRORS.md",
        "--manual-run",
        "--verbose",
        "--no-branch-fallback",
        "--dry-run",
    ])
    settings = config.resolve_settings(args)
    assert settings.topic == "my-topic"
    assert settings.categories_path == Path("conf/categories.json")
    assert settings.blocklist_path == Path("conf/block.json")
    assert settings.manual_path == Path("conf/manual.json")
    assert settings.output_path == Path("out/releases.json")
    assert settings.errors_path == Path("out/ERRORS.md")
    assert settings.manual_run is True
    assert settings.verbose is True
    assert settings.branch_fallback is False
    assert settings.dry_run is True
