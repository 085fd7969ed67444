"""Tests for src.catalog.aggregator grouping, sorting, and manual merges.

Run with coverage:
    pytest tests/test_aggregator.py --maxfail=1 -v --cov=src.catalog.aggregator --cov-report=term-missing
"""

import json

from src.catalog import aggregator

RELEASE = {"tag_name": "v1", "name": "v1", "published_at": "2024-01-01T00:00:00Z"}


def _app(name, category="Games", owner="o", repo="r"):
    return aggregator.make_app(owner, repo, RELEASE, {"name": name, "category": category})


def test_add_app_groups_by_category():
    catalog = {}
    aggregator.add_app(catalog, _app("Snake"))
    aggregator.add_app(catalog, _app("Notes", category="Tools"))
    aggregator.add_app(catalog, _app("Pong"))
    assert [app["metadata"]["name"] for app in catalog["Games"]] == ["Snake", "Pong"]
    assert list(catalog) == ["Games", "Tools"]


def test_make_app_shape():
    app = _app("Snake", owner="me", repo="snake")
    assert app == {
        "repo": "snake",
        "owner": "me",
        "latest_release": RELEASE,
        "metadata": {"name": "Snake", "category": "Games"},
    }


def test_sort_catalog_orders_categories_and_names():
    catalog = {
        "Tools": [_app("zip", "Tools"), _app("Archive", "Tools")],
        "Games": [_app("pong"), _app("Asteroids"), _app("Breakout")],
    }
    result = aggregator.sort_catalog(catalog)
    assert list(result) == ["Games", "Tools"]
    assert [a["metadata"]["name"] for a in result["Games"]] == ["Asteroids", "Breakout", "pong"]
    assert [a["metadata"]["name"] for a in result["Tools"]] == ["Archive", "zip"]


def test_sort_catalog_breaks_case_ties_by_exact_name():
    result = aggregator.sort_catalog({"Games": [_app("snake"), _app("Snake"), _app("apple")]})
    assert [a["metadata"]["name"] for a in result["Games"]] == ["apple", "Snake", "snake"]


def test_merge_manual_skips_duplicates_and_adds_new():
    catalog = {"Games": [_app("Snake", owner="o", repo="snake")]}
    manual = {
        "Games": [
            _app("Snake", owner="o", repo="snake"),
            _app("Snake", owner="other", repo="snake"),
            _app("Chess", owner="m", repo="chess"),
            _app("Chess", owner="m", repo="chess"),
        ],
        "Extras": [_app("Clock", category="Extras")],
    }
    merged = aggregator.merge_manual_releases(catalog, manual)
    assert list(merged) == ["Extras", "Games"]
    names = [(a["owner"], a["metadata"]["name"]) for a in merged["Games"]]
    assert names == [("m", "Chess"), ("o", "Snake"), ("other", "Snake")]
    assert len(catalog["Games"]) == 1


def test_merge_manual_tolerates_entries_without_metadata(capsys):
    merged = aggregator.merge_manual_releases({}, {"Tools": [{"owner": "a", "repo": "b"}, "junk"]})
    assert merged == {"Tools": [{"owner": "a", "repo": "b"}]}
    assert "non-object" in capsys.readouterr().out


def test_load_manual_releases(tmp_path):
    path = tmp_path / "releases_manual.json"
    assert aggregator.load_manual_releases(path) == {}

    path.write_text(json.dumps({"Games": [_app("Snake")]}))
    assert aggregator.load_manual_releases(path)["Games"][0]["metadata"]["name"] == "Snake"

    path.write_text(json.dumps(["not", "a", "map"]))
    assert aggregator.load_manual_releases(path) == {}

    path.write_text("{broken")
    assert aggregator.load_manual_releases(path) == {}


def test_count_apps():
    assert aggregator.count_apps({"A": [_app("x")], "B": [_app("y"), _app("z")]}) == 3
