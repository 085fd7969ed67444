"""Entry points for building the topic release catalog and its error report."""

from __future__ import annotations

import sys
from typing import Any, Dict, List, Optional, Sequence

import requests

from src.catalog.aggregator import (
    Catalog,
    add_app,
    count_apps,
    load_manual_releases,
    make_app,
    merge_manual_releases,
    sort_catalog,
)
from src.catalog.blocklist import is_blocked, load_blocklist
from src.catalog.config import CatalogSettings, parse_args, resolve_settings
from src.catalog.report import build_error_report, build_fatal_report, write_report
from src.catalog.validation import load_categories, validate_metadata
from src.retrieval.collectors import (
    FetchError,
    MetadataParseError,
    fetch_release_metadata,
    get_latest_release,
    save_json,
    search_topic_repositories,
)
from src.retrieval.config import METADATA_FILENAME


def process_repo(item: Dict[str, Any],
                 categories: Sequence[str],
                 catalog: Catalog,
                 issues: List[str],
                 settings: CatalogSettings) -> bool:
    """Fetch, validate, and catalog one search result; return True when it had no issues."""
    full_name = item.get("full_name") or ""
    owner = (item.get("owner") or {}).get("login") or full_name.split("/", 1)[0]
    repo = item.get("name") or full_name.split("/", 1)[-1]

    try:
        latest_release = get_latest_release(owner, repo)
    except (FetchError, requests.RequestException) as exc:
        msg = f"⚠️  Error fetching latest release for {full_name}: {exc}"
        print(f"[warn] {msg}")
        issues.append(msg)
        return False

    try:
        raw, ref = fetch_release_metadata(
            owner,
            repo,
            latest_release,
            default_branch=item.get("default_branch"),
            branch_fallback=settings.branch_fallback,
        )
    except (FetchError, MetadataParseError, requests.RequestException) as exc:
        msg = f"⚠️  Error fetching {METADATA_FILENAME} for {full_name}: {exc}"
        print(f"[warn] {msg}")
        issues.append(msg)
        return False

    if settings.verbose and ref != latest_release.get("tag_name"):
        print(f"  {METADATA_FILENAME} read from branch '{ref}'")

    is_array = isinstance(raw, list)
    entries = raw if is_array else [raw]
    if is_array and not entries:
        msg = f"⚠️  {full_name}: {METADATA_FILENAME} contains an empty array"
        print(f"[warn] {msg}")
        issues.append(msg)
        return False

    clean = True
    for i, entry in enumerate(entries):
        entry_errors = validate_metadata(entry, categories, i if is_array else None)
        if entry_errors:
            for err in entry_errors:
                msg = f"⚠️  {full_name}: {err}"
                print(f"[warn] {msg}")
                issues.append(msg)
            clean = False
            continue
        add_app(catalog, make_app(owner, repo, latest_release, entry))

    if clean and settings.verbose:
        print(f"  valid {METADATA_FILENAME}")
    return clean


def run(settings: CatalogSettings) -> Catalog:
    """Build the catalog and error report for every repository tagged with the topic."""
    print(f"Run mode: {'manual' if settings.manual_run else 'scheduled / automatic'}")
    categories = load_categories(settings.categories_path)
    blocklist = load_blocklist(settings.blocklist_path)

    issues: List[str] = []
    blocked: List[str] = []

    print(f"[search] repositories with topic '{settings.topic}'...")
    repos, search_error = search_topic_repositories(settings.topic)
    if search_error:
        print(f"[error] {search_error}")
        issues.append(f"❌ {search_error}")
    print(f"[search] found {len(repos)} repositories")

    catalog: Catalog = {}
    for item in repos:
        full_name = item.get("full_name") or ""
        if is_blocked(full_name, blocklist):
            msg = f"🛑 Skipping {full_name}: Blocked by {settings.blocklist_path.name}"
            blocked.append(msg)
            if settings.manual_run and settings.verbose:
                print(f"[warn] {msg}")
            continue

        print(f"[repo] {full_name}")
        if not process_repo(item, categories, catalog, issues, settings):
            print(f"  {full_name} completed with issues")

    catalog = merge_manual_releases(sort_catalog(catalog), load_manual_releases(settings.manual_path))
    report = build_error_report(issues, blocked, settings.manual_run)
    report_entries = len(issues) + len(blocked)

    if settings.dry_run:
        print(f"[dry-run] {count_apps(catalog)} apps in {len(catalog)} categories, "
              f"{report_entries} report entries; nothing written")
        return catalog

    save_json(str(settings.output_path), catalog)
    print(f"{settings.output_path} generated ({count_apps(catalog)} apps in {len(catalog)} categories)")
    write_report(settings.errors_path, report)
    print(f"{settings.errors_path} written ({report_entries} entries)")
    return catalog


def main(argv: Optional[List[str]] = None) -> None:
    """CLI entry point; a fatal error is written to the report path and exits 1."""
    settings = resolve_settings(parse_args(argv))
    try:
        run(settings)
    except Exception as exc:
        print(f"[fatal] {exc}")
        write_report(settings.errors_path, build_fatal_report(str(exc)))
        sys.exit(1)


if __name__ == "__main__":
    main(sys.argv[1:])
