"""Manifest retrieval from a repository's default branches.

Candidate locations are tried in order and the first 2xx response wins.
Transport errors and non-2xx responses are treated the same way: the
candidate failed and the next one is tried.
"""

from __future__ import annotations

import logging
from dataclasses import dataclass
from typing import Iterator, Optional, Sequence

import httpx

from extreg.errors import ManifestFetchError
from extreg.submissions.urls import parse_repo_url, raw_content_url

logger = logging.getLogger(__name__)

DEFAULT_BRANCHES: tuple[str, ...] = ("main", "master")
DEFAULT_MANIFEST_FILENAME = "gemini-extension.json"


@dataclass
class FetchedManifest:
    """Raw manifest text and the exact URL it was retrieved from."""

    text: str
    url: str
    branch: str


class ManifestFetcher:
    """Resolve and download a repository's manifest file."""

    def __init__(
        self,
        branches: Sequence[str] = DEFAULT_BRANCHES,
        filename: str = DEFAULT_MANIFEST_FILENAME,
        timeout: float = 10.0,
        transport: Optional[httpx.AsyncBaseTransport] = None,
    ) -> None:
        self.branches = tuple(branches)
        self.filename = filename
        self.timeout = timeout
        self._transport = transport

    def candidates(self, owner: str, repo: str) -> Iterator[tuple[str, str]]:
        """Yield ``(branch, url)`` pairs in trial order."""
        for branch in self.branches:
            yield branch, raw_content_url(owner, repo, branch, self.filename)

    async def fetch(self, repo_url: str) -> FetchedManifest:
        """Fetch the manifest for ``repo_url``.

        Raises ``ManifestFetchError`` with reason ``invalid-url`` or
        ``manifest-not-found``.
        """
        parsed = parse_repo_url(repo_url)
        if parsed is None:
            raise ManifestFetchError("invalid-url", f"Not a GitHub repository URL: {repo_url}")
        owner, repo = parsed

        async with httpx.AsyncClient(
            timeout=self.timeout,
            follow_redirects=True,
            transport=self._transport,
        ) as client:
            for branch, url in self.candidates(owner, repo):
                text = await self._try_candidate(client, url)
                if text is not None:
                    logger.debug("Manifest found at %s", url)
                    return FetchedManifest(text=text, url=url, branch=branch)

        raise ManifestFetchError(
            "manifest-not-found",
            f"Could not find {self.filename} in {self.describe_branches()} branch.",
        )

    async def _try_candidate(self, client: httpx.AsyncClient, url: str) -> Optional[str]:
        try:
            response = await client.get(url)
        except httpx.HTTPError as exc:
            logger.debug("Manifest candidate %s failed: %s", url, exc)
            return None
        if not response.is_success:
            logger.debug("Manifest candidate %s returned %s", url, response.status_code)
            return None
        return response.text

    def describe_branches(self) -> str:
        """Human-readable branch list, e.g. ``main or master``."""
        if len(self.branches) == 1:
            return self.branches[0]
        return ", ".join(self.branches[:-1]) + " or " + self.branches[-1]
