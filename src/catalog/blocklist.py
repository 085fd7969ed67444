"""Wildcard blocklist for repositories that must never enter the catalog."""

from __future__ import annotations

import json
import re
from pathlib import Path
from typing import Iterable, List


def load_blocklist(path: str | Path) -> List[str]:
    """Read blocklist patterns; a missing, unreadable, or non-array file yields []."""
    blocklist_path = Path(path)
    if not blocklist_path.exists():
        return []
    try:
        with blocklist_path.open("r", encoding="utf-8") as handle:
            data = json.load(handle)
    except (OSError, ValueError):
        print(f"[warn] could not parse {blocklist_path}, ignoring it")
        return []
    if not isinstance(data, list):
        print(f"[warn] {blocklist_path} is not an array, ignoring it")
        return []
    return [str(pattern) for pattern in data]


def wildcard_match(pattern: str, text: str) -> bool:
    """Case-insensitive whole-string match where `*` stands for any run of characters."""
    regex = ".*".join(re.escape(part) for part in pattern.split("*"))
    return re.fullmatch(regex, text, flags=re.IGNORECASE | re.DOTALL) is not None


def is_blocked(full_name: str, patterns: Iterable[str]) -> bool:
    return any(wildcard_match(pattern, full_name) for pattern in patterns)


__all__ = ["load_blocklist", "wildcard_match", "is_blocked"]
