"""Central configuration constants for the release catalog retrieval workflow."""

from __future__ import annotations

import os
from typing import List

from src.secrets import load_local_secrets, resolve_github_tokens

_SECRETS = load_local_secrets()
GITHUB_TOKENS: List[str] = resolve_github_tokens(_SECRETS)
USER_AGENT = "topic-release-catalog/1.0"
BASE_URL = "https://api.github.com"
RAW_BASE_URL = "https://raw.githubusercontent.com"
TOPIC = os.getenv("TOPIC", "bruce-app-store")
METADATA_FILENAME = os.getenv("METADATA_FILENAME", "metadata.json")
SEARCH_PER_PAGE = int(os.getenv("SEARCH_PER_PAGE", "50"))
# search API never serves past the 1000th result
MAX_SEARCH_PAGES = int(os.getenv("MAX_SEARCH_PAGES", str(1000 // max(1, SEARCH_PER_PAGE))))  # 0 = no cap
REQUEST_TIMEOUT = 60
MAX_RETRIES = max(5, len(GITHUB_TOKENS) * 2)
BACKOFF_BASE_SEC = 2
MAX_WAIT_ON_403 = int(os.getenv("MAX_WAIT_ON_403", "180"))
RATE_LIMIT_TOKEN_RESET_WAIT_SEC = int(
    os.getenv("RATE_LIMIT_TOKEN_RESET_WAIT_SEC", "300")
)

__all__ = [
    "GITHUB_TOKENS",
    "USER_AGENT",
    "BASE_URL",
    "RAW_BASE_URL",
    "TOPIC",
    "METADATA_FILENAME",
    "SEARCH_PER_PAGE",
    "MAX_SEARCH_PAGES",
    "REQUEST_TIMEOUT",
    "MAX_RETRIES",
    "BACKOFF_BASE_SEC",
    "MAX_WAIT_ON_403",
    "RATE_LIMIT_TOKEN_RESET_WAIT_SEC",
]
