"""GitHub URL parsing and browse-to-raw normalization."""

from __future__ import annotations

import re
from typing import Optional

RAW_HOST = "https://raw.githubusercontent.com"

_REPO_RE = re.compile(r"^https://github\.com/([^/]+)/([^/]+)")
_BLOB_RE = re.compile(r"^https?://github\.com/([^/]+)/([^/]+)/blob/([^/]+)/(.+)$")


def parse_repo_url(url: str) -> Optional[tuple[str, str]]:
    """Return ``(owner, repo)`` for a GitHub repository URL, else ``None``.

    A trailing ``.git`` is stripped from the repository name.
    """
    match = _REPO_RE.match(url)
    if not match:
        return None
    owner = match.group(1)
    repo = re.sub(r"\.git$", "", match.group(2))
    if not owner or not repo:
        return None
    return owner, repo


def raw_content_url(owner: str, repo: str, branch: str, path: str) -> str:
    return f"{RAW_HOST}/{owner}/{repo}/{branch}/{path.lstrip('/')}"


def normalize_image_url(url: Optional[str]) -> Optional[str]:
    """Rewrite a ``github.com/.../blob/...`` link to its raw-content URL.

    Anything that is not a blob link passes through unchanged.
    """
    if not url or not isinstance(url, str):
        return url
    match = _BLOB_RE.match(url)
    if not match:
        return url
    owner, repo, branch, path = match.groups()
    return raw_content_url(owner, repo, branch, path)


def resolve_image_url(
    manifest_image: Optional[str],
    submitted_image: Optional[str],
    placeholder: Optional[str] = None,
) -> Optional[str]:
    """Pick the manifest image, then the submitted one, then the placeholder."""
    chosen = manifest_image or submitted_image
    if chosen and isinstance(chosen, str):
        return normalize_image_url(chosen)
    return placeholder
