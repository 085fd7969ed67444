"""Run settings for the catalog build: file locations, topic, and run mode."""

from __future__ import annotations

import argparse
import os
from dataclasses import dataclass
from pathlib import Path
from typing import List, Optional

from src.retrieval.config import TOPIC

DEFAULT_CATEGORIES_PATH = "categories.json"
DEFAULT_BLOCKLIST_PATH = "blocklist.json"
DEFAULT_MANUAL_PATH = "releases_manual.json"
DEFAULT_OUTPUT_PATH = "releases.json"
DEFAULT_ERRORS_PATH = "ERRORS.md"


def is_manual_run_env() -> bool:
    """True when the workflow was started by hand (workflow_dispatch)."""
    return os.getenv("GITHUB_EVENT_NAME") == "workflow_dispatch"


def is_verbose_env() -> bool:
    return os.getenv("VERBOSE", "").strip().lower() == "true"


@dataclass(frozen=True)
class CatalogSettings:
    """Resolved runtime settings for one catalog build."""

    topic: str
    categories_path: Path
    blocklist_path: Path
    manual_path: Path
    output_path: Path
    errors_path: Path
    manual_run: bool
    verbose: bool
    branch_fallback: bool
    dry_run: bool


def build_arg_parser() -> argparse.ArgumentParser:
    """Return the CLI parser used by the catalog entry point."""

    parser = argparse.ArgumentParser(
        description="Build a categorized release index from repositories tagged with a topic.",
    )
    parser.add_argument("--topic", default=TOPIC)
    parser.add_argument("--categories", default=DEFAULT_CATEGORIES_PATH)
    parser.add_argument("--blocklist", default=DEFAULT_BLOCKLIST_PATH)
    parser.add_argument("--manual", default=DEFAULT_MANUAL_PATH)
    parser.add_argument("--output", default=DEFAULT_OUTPUT_PATH)
    parser.add_argument("--errors", default=DEFAULT_ERRORS_PATH)
    parser.add_argument("--manual-run", action="store_true", default=None,
                        help="report blocked repositories (default: GITHUB_EVENT_NAME=workflow_dispatch)")
    parser.add_argument("--verbose", action="store_true", default=None,
                        help="extra progress output (default: VERBOSE=true)")
    parser.add_argument("--no-branch-fallback", action="store_true",
                        help="only read metadata from the release tag")
    parser.add_argument("--dry-run", action="store_true")
    return parser


def parse_args(argv: Optional[List[str]] = None) -> argparse.Namespace:
    """Parse command-line arguments; accepts argv overrides for testing."""

    parser = build_arg_parser()
    return parser.parse_args(argv)


def resolve_settings(args: Optional[argparse.Namespace] = None) -> CatalogSettings:
    """Return immutable settings, filling run mode from the environment when unset."""

    args = args or parse_args([])
    manual_run = is_manual_run_env() if args.manual_run is None else bool(args.manual_run)
    verbose = is_verbose_env() if args.verbose is None else bool(args.verbose)
    return CatalogSettings(
        topic=args.topic,
        categories_path=Path(args.categories),
        blocklist_path=Path(args.blocklist),
        manual_path=Path(args.manual),
        output_path=Path(args.output),
        errors_path=Path(args.errors),
        manual_run=manual_run,
        verbose=verbose,
        branch_fallback=not args.no_branch_fallback,
        dry_run=bool(args.dry_run),
    )


__all__ = [
    "DEFAULT_CATEGORIES_PATH",
    "DEFAULT_BLOCKLIST_PATH",
    "DEFAULT_MANUAL_PATH",
    "DEFAULT_OUTPUT_PATH",
    "DEFAULT_ERRORS_PATH",
    "CatalogSettings",
    "is_manual_run_env",
    "is_verbose_env",
    "build_arg_parser",
    "parse_args",
    "resolve_settings",
]
