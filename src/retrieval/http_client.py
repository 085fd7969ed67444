"""HTTP helpers with retry/backoff logic and token rotation for GitHub calls."""

from __future__ import annotations

import os
import time
from typing import Any, Dict, List, Optional, Tuple

import requests

from .config import (
    BACKOFF_BASE_SEC,
    GITHUB_TOKENS,
    MAX_RETRIES,
    MAX_SEARCH_PAGES,
    MAX_WAIT_ON_403,
    RATE_LIMIT_TOKEN_RESET_WAIT_SEC,
    REQUEST_TIMEOUT,
    SEARCH_PER_PAGE,
    USER_AGENT,
)

SESSION = requests.Session()
SESSION.headers.update(
    {
        "Accept": "application/vnd.github+json",
        "User-Agent": USER_AGENT,
    }
)

GITHUB_TOKEN_INDEX = 0
TERMINAL_STATUSES = {400, 404, 410, 422}


def sleep_with_jitter(base: float) -> None:
    """Pause execution with +/- 25% jitter to avoid synchronized retries."""
    jitter = base * 0.25 * (0.5 - (os.urandom(1)[0] / 255.0))
    time.sleep(max(0.0, base + jitter))


def sleep_on_rate_limit(reason: str) -> None:
    """Sleep for the configured interval when every token is still rate limited."""
    wait_sec = max(0, RATE_LIMIT_TOKEN_RESET_WAIT_SEC)
    if wait_sec <= 0:
        return
    print(f"[rate-limit] {reason}; sleeping {wait_sec}s")
    time.sleep(wait_sec)


def describe_http_error(resp: requests.Response) -> str:
    """Return GitHub's error message for a response, or a trimmed body."""
    try:
        body = resp.json()
    except ValueError:
        body = {"text": (resp.text or "")[:300]}
    if not isinstance(body, dict):
        body = {"text": str(body)[:300]}
    return str(body.get("message") or body.get("error") or body.get("text") or "")


def log_http_error(resp: requests.Response, url: str) -> None:
    """Print a short, human-readable message when GitHub returns an error."""
    print(f"[error] HTTP {resp.status_code} for {url}\n  -> {describe_http_error(resp)}")


def get_current_token() -> Optional[str]:
    """Return the token for the current index or None when exhausted."""
    if 0 <= GITHUB_TOKEN_INDEX < len(GITHUB_TOKENS):
        return GITHUB_TOKENS[GITHUB_TOKEN_INDEX] or None
    return None


def set_auth_header_for_current_token() -> None:
    """Set or clear SESSION Authorization header for the current token index."""
    token = get_current_token()
    if token:
        SESSION.headers["Authorization"] = f"token {token}"
    else:
        SESSION.headers.pop("Authorization", None)


def switch_to_next_token() -> bool:
    """Advance to the next token if available; return True if switched."""
    global GITHUB_TOKEN_INDEX
    if not GITHUB_TOKENS or len(GITHUB_TOKENS) == 1:
        return False

    GITHUB_TOKEN_INDEX = (GITHUB_TOKEN_INDEX + 1) % len(GITHUB_TOKENS)
    set_auth_header_for_current_token()

    if GITHUB_TOKEN_INDEX == 0:
        print(f"[rate-limit] wrapped to token 1/{len(GITHUB_TOKENS)}")
    else:
        print(f"[rate-limit] switched to token {GITHUB_TOKEN_INDEX + 1}/{len(GITHUB_TOKENS)}")
    return True


def _is_rate_limited(headers: Dict[str, str]) -> bool:
    remaining = headers.get("X-RateLimit-Remaining")
    reset = headers.get("X-RateLimit-Reset")
    return remaining == "0" or bool(reset and str(reset).isdigit())


def _rate_limit_wait(headers: Dict[str, str], attempt: int) -> float:
    retry_after = headers.get("Retry-After")
    reset = headers.get("X-RateLimit-Reset")
    if retry_after and str(retry_after).isdigit():
        wait_sec = int(retry_after)
    elif reset and str(reset).isdigit():
        wait_sec = max(0, int(reset) - int(time.time())) + 1
    else:
        wait_sec = BACKOFF_BASE_SEC * (2 ** (attempt - 1))
    return min(wait_sec, MAX_WAIT_ON_403)


def request_with_backoff(method: str, url: str, **kwargs) -> requests.Response:
    """Perform a REST call with retry, exponential backoff, and token cycling.

    Successful and terminal (400/404/410/422) responses are returned as-is;
    transport errors are re-raised once retries are exhausted.
    """
    if "Authorization" not in getattr(SESSION, "headers", {}):
        set_auth_header_for_current_token()

    timeout = kwargs.pop("timeout", REQUEST_TIMEOUT)
    last_exc: Optional[Exception] = None
    last_resp: Optional[requests.Response] = None
    rotated_due_to_rate_limit = False
    wrapped_on_last_rotation = False

    for attempt in range(1, MAX_RETRIES + 1):
        try:
            resp = SESSION.request(method, url, timeout=timeout, **kwargs)
        except requests.RequestException as exc:
            delay = BACKOFF_BASE_SEC * (2 ** (attempt - 1))
            print(f"[retry {attempt}/{MAX_RETRIES}] {exc} -> sleep {delay:.1f}s")
            sleep_with_jitter(delay)
            last_exc = exc
            continue

        last_resp = resp
        last_exc = None

        if 200 <= resp.status_code < 300:
            return resp

        if resp.status_code == 401:
            if switch_to_next_token():
                continue
            log_http_error(resp, url)
            return resp

        if resp.status_code in (403, 429):
            headers_resp = resp.headers or {}
            if _is_rate_limited(headers_resp):
                token_count = len(GITHUB_TOKENS)
                reached_end_of_rotation = rotated_due_to_rate_limit and (
                    wrapped_on_last_rotation or GITHUB_TOKEN_INDEX == token_count - 1
                )
                if token_count <= 1 or reached_end_of_rotation:
                    if token_count <= 1:
                        sleep_on_rate_limit("rate limit persists with a single token")
                    else:
                        sleep_on_rate_limit("rate limit persists after cycling through all tokens")
                    rotated_due_to_rate_limit = False
                    wrapped_on_last_rotation = False
                    continue

                prev_index = GITHUB_TOKEN_INDEX
                if switch_to_next_token():
                    wrapped_on_last_rotation = prev_index == token_count - 1
                    rotated_due_to_rate_limit = True
                    continue

            wait_sec = _rate_limit_wait(headers_resp, attempt)
            print(f"[backoff {resp.status_code}] waiting {wait_sec}s for {url}")
            sleep_with_jitter(wait_sec)
            rotated_due_to_rate_limit = False
            wrapped_on_last_rotation = False
            continue

        if resp.status_code in TERMINAL_STATUSES:
            log_http_error(resp, url)
            return resp

        if attempt < MAX_RETRIES:
            delay = BACKOFF_BASE_SEC * (2 ** (attempt - 1))
            print(f"[retry {attempt}/{MAX_RETRIES}] HTTP {resp.status_code} -> sleep {delay:.1f}s")
            sleep_with_jitter(delay)
            rotated_due_to_rate_limit = False
            wrapped_on_last_rotation = False
            continue

        return resp

    if last_exc:
        raise last_exc
    if last_resp is not None:
        return last_resp
    raise RuntimeError("Request failed after retries.")


def paged_search(url: str, *, per_page: int = 0, max_pages: int = -1) -> Tuple[List[Dict[str, Any]], Optional[str]]:
    """Walk a search endpoint page by page, collecting `items`.

    Stops on a short page or after `max_pages` (0 = no cap). Returns the items
    gathered so far and, when a page failed, a description of the failure.
    """
    per_page = per_page or SEARCH_PER_PAGE
    if max_pages < 0:
        max_pages = MAX_SEARCH_PAGES
    results: List[Dict[str, Any]] = []
    page = 1
    while True:
        if max_pages and page > max_pages:
            print(f"[search] page cap {max_pages} reached, stopping")
            break
        sep = "&" if "?" in url else "?"
        page_url = f"{url}{sep}per_page={per_page}&page={page}"
        try:
            resp = request_with_backoff("GET", page_url)
        except requests.RequestException as exc:
            return results, f"Failed to search repositories (page {page}): {exc}"

        if resp.status_code != 200:
            reason = describe_http_error(resp)
            detail = f"HTTP {resp.status_code}" + (f" {reason}" if reason else "")
            return results, f"Failed to search repositories (page {page}): {detail}"

        try:
            body = resp.json()
        except ValueError as exc:
            return results, f"Failed to search repositories (page {page}): invalid JSON ({exc})"
        if not isinstance(body, dict) or not isinstance(body.get("items") or [], list):
            return results, f"Failed to search repositories (page {page}): unexpected response body"
        if body.get("incomplete_results"):
            print(f"[warn] search results for page {page} are incomplete")
        batch = body.get("items") or []
        results.extend(batch)

        if len(batch) < per_page:
            break
        page += 1
    return results, None


__all__ = [
    "SESSION",
    "TERMINAL_STATUSES",
    "sleep_with_jitter",
    "sleep_on_rate_limit",
    "describe_http_error",
    "log_http_error",
    "get_current_token",
    "set_auth_header_for_current_token",
    "switch_to_next_token",
    "request_with_backoff",
    "paged_search",
]
