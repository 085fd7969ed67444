"""Fetch helpers for topic search, latest releases, and metadata descriptors."""

from __future__ import annotations

import json
import os
from typing import Any, Dict, List, Optional, Tuple
from urllib.parse import quote

from .config import BASE_URL, METADATA_FILENAME, RAW_BASE_URL, TOPIC
from .http_client import describe_http_error, paged_search, request_with_backoff


class FetchError(RuntimeError):
    """Raised when GitHub answers a per-repository request with a non-200 status."""

    def __init__(self, what: str, url: str, status: Optional[int] = None, reason: str = "") -> None:
        self.what = what
        self.url = url
        self.status = status
        self.reason = reason
        super().__init__(str(status) if status is not None else (reason or f"{what} unavailable"))


class MetadataParseError(ValueError):
    """Raised when a metadata descriptor is not valid JSON."""


def ensure_dir(path: str) -> None:
    """Create output directories as-needed without raising for existing folders."""
    if path:
        os.makedirs(path, exist_ok=True)


def save_json(path: str, data: Any) -> None:
    """Write JSON to disk using UTF-8 and deterministic formatting."""
    ensure_dir(os.path.dirname(str(path)))
    with open(path, "w", encoding="utf-8") as f:
        json.dump(data, f, indent=2, ensure_ascii=False)


def search_topic_repositories(topic: str = TOPIC) -> Tuple[List[Dict[str, Any]], Optional[str]]:
    """Return every repository tagged with `topic`, plus a failure note if paging broke off."""
    url = f"{BASE_URL}/search/repositories?q=topic:{quote(topic)}"
    return paged_search(url)


def get_latest_release(owner: str, repo: str) -> Dict[str, Any]:
    """Return the tag, name, and publish date of the repository's latest release."""
    url = f"{BASE_URL}/repos/{owner}/{repo}/releases/latest"
    resp = request_with_backoff("GET", url)
    if resp.status_code != 200:
        raise FetchError("latest release", url, resp.status_code, describe_http_error(resp))
    try:
        data = resp.json()
    except ValueError as exc:
        raise FetchError("latest release", url, reason=f"invalid JSON ({exc})") from exc
    if not isinstance(data, dict):
        raise FetchError("latest release", url, reason="response is not a JSON object")
    return {
        "tag_name": data.get("tag_name"),
        "name": data.get("name"),
        "published_at": data.get("published_at"),
    }


def fetch_metadata(owner: str, repo: str, ref: str, filename: str = METADATA_FILENAME) -> Any:
    """Download and parse the metadata descriptor stored at `ref`."""
    url = f"{RAW_BASE_URL}/{owner}/{repo}/{quote(ref)}/{filename}"
    resp = request_with_backoff("GET", url)
    if resp.status_code != 200:
        raise FetchError(filename, url, resp.status_code)
    try:
        return json.loads(resp.text)
    except ValueError as exc:
        raise MetadataParseError(f"{filename} is not valid JSON: {exc}") from exc


def fetch_release_metadata(owner: str,
                           repo: str,
                           release: Dict[str, Any],
                           default_branch: Optional[str] = None,
                           branch_fallback: bool = True) -> Tuple[Any, str]:
    """Fetch the descriptor at the release tag, falling back to the default branch on 404."""
    tag = release.get("tag_name")
    if not tag:
        if branch_fallback and default_branch:
            return fetch_metadata(owner, repo, default_branch), default_branch
        raise FetchError("latest release", f"{BASE_URL}/repos/{owner}/{repo}/releases/latest",
                         reason="release has no tag_name")
    try:
        return fetch_metadata(owner, repo, tag), tag
    except FetchError as exc:
        if exc.status != 404 or not branch_fallback or not default_branch or default_branch == tag:
            raise
    return fetch_metadata(owner, repo, default_branch), default_branch


__all__ = [
    "FetchError",
    "MetadataParseError",
    "ensure_dir",
    "save_json",
    "search_topic_repositories",
    "get_latest_release",
    "fetch_metadata",
    "fetch_release_metadata",
]
