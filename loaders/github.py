"""
GitHub commit-history lookup for the "last updated" caption.
"""

from __future__ import annotations
import logging
from typing import Callable, Dict, Optional

import requests

from src.core.errors import FetchError

logger = logging.getLogger(__name__)

GITHUB_API = "https://api.github.com"


def _gh_headers(token: str = "") -> Dict[str, str]:
    hdr = {
        "Accept": "application/vnd.github+json",
        "X-GitHub-Api-Version": "2022-11-28",
    }
    if token:
        hdr["Authorization"] = f"Bearer {token}"
    return hdr


def fetch_commit_date(owner: str, repo: str, path: str = "", token: str = "", timeout: float = 20) -> Optional[str]:
    """
    Commit date (ISO 8601) of the latest commit touching `path`, None if
    there is no such commit. Raises FetchError when the API call fails.
    """
    url = f"{GITHUB_API}/repos/{owner}/{repo}/commits"
    params = {"per_page": 1}
    if path:
        params["path"] = path

    try:
        r = requests.get(url, headers=_gh_headers(token), params=params, timeout=timeout)
        r.raise_for_status()
        commits = r.json()
    except (requests.RequestException, ValueError) as e:
        raise FetchError(f"{owner}/{repo}", str(e)) from e

    if not commits:
        return None
    commit = commits[0].get("commit", {})
    return (commit.get("committer") or commit.get("author") or {}).get("date")


def fetch_last_updated(
    owner: str,
    repo: str,
    path: str = "",
    token: str = "",
    timeout: float = 20,
    fetch: Optional[Callable] = None,
) -> Optional[str]:
    """
    Latest commit date for the "last updated" caption.

    Returns None when the repo is not configured or the API call fails.
    """
    if not owner or not repo:
        return None
    try:
        return (fetch or fetch_commit_date)(owner, repo, path, token, timeout)
    except FetchError as e:
        logger.warning("GitHub commit lookup failed: %s", e)
        return None
