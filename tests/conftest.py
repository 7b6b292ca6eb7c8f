"""Shared fixtures for extreg tests."""

import logging
from typing import Callable, Optional

import httpx
import pytest

from extreg.config import RegistrySettings
from extreg.context import RegistryContext

RAW = "https://raw.githubusercontent.com"


def manifest_url(owner: str, repo: str, branch: str) -> str:
    return f"{RAW}/{owner}/{repo}/{branch}/gemini-extension.json"


class FakeGitHub:
    """Serves raw-content responses from a ``{url: text}`` table and records requests."""

    def __init__(self, files: Optional[dict[str, str]] = None) -> None:
        self.files: dict[str, str] = dict(files or {})
        self.requested: list[str] = []
        self.fail_with: Optional[Callable[[httpx.Request], Exception]] = None

    def handler(self, request: httpx.Request) -> httpx.Response:
        url = str(request.url)
        self.requested.append(url)
        if self.fail_with is not None:
            raise self.fail_with(request)
        if url in self.files:
            return httpx.Response(200, text=self.files[url])
        return httpx.Response(404, text="404: Not Found")

    @property
    def transport(self) -> httpx.MockTransport:
        return httpx.MockTransport(self.handler)


@pytest.fixture(autouse=True)
def _reset_logging():
    yield
    logger = logging.getLogger("extreg")
    for handler in logger.handlers:
        handler.close()
    logger.handlers.clear()


@pytest.fixture
def github() -> FakeGitHub:
    return FakeGitHub()


@pytest.fixture
def settings(tmp_path) -> RegistrySettings:
    return RegistrySettings(data_dir=tmp_path / "data", token_secret="test-secret")


@pytest.fixture
def context(settings, github) -> RegistryContext:
    return RegistryContext.from_settings(settings, transport=github.transport)


@pytest.fixture
def admin_token(context) -> str:
    account = context.provider.create_account("admin@example.com", display_name="Admin")
    context.provider.set_custom_claims(account.uid, {"admin": True})
    return context.provider.issue_token(account.uid)


@pytest.fixture
def user(context):
    return context.provider.create_account("dev@example.com", display_name="Dev")


@pytest.fixture
def user_token(context, user) -> str:
    return context.provider.issue_token(user.uid)
