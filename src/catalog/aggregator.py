"""Group validated apps by category, merge manual overrides, and sort the index."""

from __future__ import annotations

import json
from pathlib import Path
from typing import Any, Dict, List, Optional, Tuple

Catalog = Dict[str, List[Dict[str, Any]]]


def make_app(owner: str, repo: str, latest_release: Dict[str, Any], metadata: Dict[str, Any]) -> Dict[str, Any]:
    """Build one catalog record in the shape consumers of releases.json expect."""
    return {
        "repo": repo,
        "owner": owner,
        "latest_release": latest_release,
        "metadata": metadata,
    }


def add_app(catalog: Catalog, app: Dict[str, Any]) -> None:
    """Append an app under its metadata category."""
    catalog.setdefault(app["metadata"]["category"], []).append(app)


def _app_name(app: Dict[str, Any]) -> str:
    metadata = app.get("metadata") if isinstance(app, dict) else None
    name = (metadata or {}).get("name") if isinstance(metadata, dict) else None
    return str(name or "")


def _app_sort_key(app: Dict[str, Any]) -> Tuple[str, str]:
    name = _app_name(app)
    return name.casefold(), name


def _app_identity(app: Dict[str, Any]) -> Tuple[Any, Any, str]:
    return app.get("owner"), app.get("repo"), _app_name(app)


def sort_catalog(catalog: Catalog) -> Catalog:
    """Return a copy with categories in alphabetical order and apps sorted by name."""
    return {
        category: sorted(catalog[category], key=_app_sort_key)
        for category in sorted(catalog)
    }


def load_manual_releases(path: str | Path) -> Catalog:
    """Read the hand-maintained override file; problems are reported and yield {}."""
    manual_path = Path(path)
    if not manual_path.exists():
        return {}
    try:
        with manual_path.open("r", encoding="utf-8") as handle:
            data = json.load(handle)
    except (OSError, ValueError):
        print(f"[warn] could not parse {manual_path}, ignoring it")
        return {}
    if not isinstance(data, dict) or not all(isinstance(apps, list) for apps in data.values()):
        print(f"[warn] {manual_path} must map categories to lists of apps, ignoring it")
        return {}
    return data


def merge_manual_releases(catalog: Catalog, manual: Optional[Catalog]) -> Catalog:
    """Add manual apps that are not already listed, then re-sort.

    An app counts as already listed when its category holds an entry with the
    same owner, repo, and metadata name.
    """
    merged: Catalog = {category: list(apps) for category, apps in catalog.items()}
    for category, apps in (manual or {}).items():
        bucket = merged.setdefault(category, [])
        seen = {_app_identity(app) for app in bucket}
        for app in apps:
            if not isinstance(app, dict):
                print(f"[warn] skipping non-object manual entry in '{category}'")
                continue
            identity = _app_identity(app)
            if identity in seen:
                continue
            seen.add(identity)
            bucket.append(app)
    return sort_catalog(merged)


def count_apps(catalog: Catalog) -> int:
    return sum(len(apps) for apps in catalog.values())


__all__ = [
    "Catalog",
    "make_app",
    "add_app",
    "sort_catalog",
    "load_manual_releases",
    "merge_manual_releases",
    "count_apps",
]
