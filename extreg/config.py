"""Configuration loading for the extension registry.

Settings are resolved from, in increasing priority:

1. built-in defaults
2. an optional YAML file (``EXTREG_CONFIG``, default ``~/.extreg/config.yaml``)
3. ``EXTREG_*`` environment variables
"""

from __future__ import annotations

import os
import re
from pathlib import Path
from typing import Optional

import yaml
from pydantic import BaseModel, Field, field_validator

DEFAULT_CONFIG_PATH = Path.home() / ".extreg" / "config.yaml"

DEFAULT_SECRET_PATTERNS: dict[str, str] = {
    "google_api_key": r"AIza[0-9A-Za-z\-_]{35}",
    "aws_access_key": r"\bAKIA[0-9A-Z]{16}\b",
    "private_key": r"-----BEGIN\s+(RSA\s+)?PRIVATE\s+KEY-----",
}

# env var -> settings field
_ENV_OVERRIDES: dict[str, str] = {
    "EXTREG_DATA_DIR": "data_dir",
    "EXTREG_TOKEN_SECRET": "token_secret",
    "EXTREG_TOKEN_TTL_HOURS": "token_ttl_hours",
    "EXTREG_FETCH_TIMEOUT": "fetch_timeout",
    "EXTREG_VALIDATION_TIMEOUT": "validation_timeout",
    "EXTREG_LOG_LEVEL": "log_level",
}


class RegistrySettings(BaseModel):
    """Resolved runtime settings."""

    data_dir: Path = Field(default_factory=lambda: Path.home() / ".extreg")
    manifest_filename: str = "gemini-extension.json"
    default_branches: list[str] = Field(default_factory=lambda: ["main", "master"])
    default_version: str = "0.0.1"
    secret_patterns: dict[str, str] = Field(
        default_factory=lambda: dict(DEFAULT_SECRET_PATTERNS)
    )
    fetch_timeout: float = 10.0
    validation_timeout: float = 60.0
    token_secret: str = "extreg-dev-secret"
    token_ttl_hours: int = 24
    placeholder_image: Optional[str] = None
    log_level: str = "INFO"

    @field_validator("default_branches")
    @classmethod
    def _branches_not_empty(cls, value: list[str]) -> list[str]:
        branches = [b.strip() for b in value if b and b.strip()]
        if not branches:
            raise ValueError("default_branches must name at least one branch")
        return branches

    @field_validator("secret_patterns")
    @classmethod
    def _patterns_compile(cls, value: dict[str, str]) -> dict[str, str]:
        for label, pattern in value.items():
            try:
                re.compile(pattern)
            except re.error as exc:
                raise ValueError(f"secret pattern '{label}' does not compile: {exc}") from exc
        return value

    @property
    def store_dir(self) -> Path:
        return self.data_dir / "store"

    @property
    def auth_dir(self) -> Path:
        return self.data_dir / "auth"

    @property
    def audit_dir(self) -> Path:
        return self.data_dir / "audit_logs"


def load_settings(
    config_path: Optional[Path] = None,
    environ: Optional[dict[str, str]] = None,
) -> RegistrySettings:
    """Load settings from the YAML file and environment."""
    env = os.environ if environ is None else environ
    data: dict = {}

    path = config_path or Path(env.get("EXTREG_CONFIG", str(DEFAULT_CONFIG_PATH)))
    if path.exists():
        with open(path) as f:
            file_data = yaml.safe_load(f) or {}
        if not isinstance(file_data, dict):
            raise ValueError(f"Config file {path} must contain a mapping")
        data.update(file_data)

    for env_name, field_name in _ENV_OVERRIDES.items():
        if env.get(env_name):
            data[field_name] = env[env_name]

    return RegistrySettings(**data)


_settings: Optional[RegistrySettings] = None


def get_settings() -> RegistrySettings:
    """Return the process-wide settings, loading them on first use."""
    global _settings
    if _settings is None:
        _settings = load_settings()
    return _settings


def set_settings(settings: Optional[RegistrySettings]) -> None:
    """Replace the process-wide settings (``None`` forces a reload)."""
    global _settings
    _settings = settings
