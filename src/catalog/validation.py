"""Schema checks for metadata descriptors and the allowed-category list."""

from __future__ import annotations

import json
import re
from pathlib import Path
from typing import Any, List, Optional, Sequence

# parent-directory hops, path separators, and home expansion
UNSAFE_PATH_RE = re.compile(r"(\.\.|/|\\|~)")
REQUIRED_TEXT_FIELDS = ("name", "description")


def has_unsafe_path(value: Any) -> bool:
    """Return True when a declared file path could escape its target directory."""
    if not isinstance(value, str):
        return True
    return bool(UNSAFE_PATH_RE.search(value))


def load_categories(path: str | Path) -> List[str]:
    """Read the JSON array of allowed categories; raise ValueError on a bad file."""
    categories_path = Path(path)
    with categories_path.open("r", encoding="utf-8") as handle:
        data = json.load(handle)
    if not isinstance(data, list) or not all(isinstance(item, str) for item in data):
        raise ValueError(f"{categories_path} must contain a JSON array of category names")
    return data


def _validate_files(files: Any, prefix: str) -> List[str]:
    if not isinstance(files, list) or not files:
        return [f"{prefix}Field 'files' is missing or empty"]

    errors: List[str] = []
    for i, item in enumerate(files):
        if not isinstance(item, dict) or not item.get("source") or not item.get("destination"):
            errors.append(f"{prefix}files[{i}] must be an object with 'source' and 'destination' keys")
            continue
        for key in ("source", "destination"):
            if has_unsafe_path(item[key]):
                errors.append(f"{prefix}files[{i}].{key} contains invalid or unsafe characters")
    return errors


def validate_metadata(entry: Any, categories: Sequence[str], index: Optional[int] = None) -> List[str]:
    """Return every problem found in one descriptor entry (empty list when valid).

    `index` is the entry's position when the descriptor is an array; messages
    are then prefixed with ``[entry N]``.
    """
    prefix = f"[entry {index}] " if index is not None else ""
    if not isinstance(entry, dict):
        return [f"{prefix}Entry must be a JSON object"]

    errors: List[str] = []
    for field in REQUIRED_TEXT_FIELDS:
        if not entry.get(field):
            errors.append(f"{prefix}Missing required field: {field}")

    errors.extend(_validate_files(entry.get("files"), prefix))

    category = entry.get("category")
    if not category:
        errors.append(f"{prefix}Missing required field: category")
    elif category not in categories:
        errors.append(f"{prefix}Invalid category '{category}'")

    return errors


__all__ = [
    "UNSAFE_PATH_RE",
    "REQUIRED_TEXT_FIELDS",
    "has_unsafe_path",
    "load_categories",
    "validate_metadata",
]
