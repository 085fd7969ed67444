"""Utilities for loading local (gitignored) credentials."""

from __future__ import annotations

import json
import os
from pathlib import Path
from typing import Any, Dict, List, Optional

DEFAULT_SECRETS_FILENAME = "local_secrets.json"


def _default_secrets_path() -> Path:
    root = Path(__file__).resolve().parents[1]
    return root / DEFAULT_SECRETS_FILENAME


def load_local_secrets(path: Optional[str | Path] = None) -> Dict[str, Any]:
    """Load secrets from a JSON file; return {} when unavailable or malformed."""

    candidate = path or os.getenv("LOCAL_SECRETS_FILE") or _default_secrets_path()
    secrets_path = Path(candidate).expanduser()
    if not secrets_path.exists():
        return {}
    try:
        with secrets_path.open("r", encoding="utf-8") as handle:
            data = json.load(handle)
    except (OSError, ValueError) as exc:
        print(f"[warn] could not read {secrets_path}: {exc}")
        return {}
    return data if isinstance(data, dict) else {}


def resolve_github_tokens(secrets: Dict[str, Any]) -> List[str]:
    """Collect tokens from GITHUB_TOKEN and the secrets file, env first, no duplicates."""

    tokens: List[str] = []
    env_token = (os.getenv("GITHUB_TOKEN") or "").strip()
    if env_token:
        tokens.append(env_token)
    for token in secrets.get("github_tokens") or []:
        if isinstance(token, str) and token.strip() and token.strip() not in tokens:
            tokens.append(token.strip())
    return tokens


__all__ = ["load_local_secrets", "resolve_github_tokens", "DEFAULT_SECRETS_FILENAME"]
