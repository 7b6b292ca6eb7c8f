"""Parsing and required-field checks for ``gemini-extension.json``."""

from __future__ import annotations

import json
from dataclasses import dataclass
from typing import Any, Optional

from extreg.errors import ManifestValidationError

REQUIRED_FIELDS: tuple[str, ...] = ("name", "description")


@dataclass
class ExtensionManifest:
    """The subset of the manifest the registry trusts."""

    name: str
    description: str
    version: str
    image_url: Optional[str] = None


def _present(value: Any) -> bool:
    if value is None:
        return False
    if isinstance(value, str):
        return bool(value.strip())
    return bool(value)


def parse_manifest(text: str, default_version: str = "0.0.1") -> ExtensionManifest:
    """Parse manifest text that has already passed the secret scan.

    Raises ``ManifestValidationError`` with reason ``invalid-json`` or
    ``missing-fields``.
    """
    try:
        data = json.loads(text)
    except (json.JSONDecodeError, ValueError) as exc:
        raise ManifestValidationError("invalid-json", str(exc)) from exc

    if not isinstance(data, dict):
        data = {}

    missing = tuple(f for f in REQUIRED_FIELDS if not _present(data.get(f)))
    if missing:
        raise ManifestValidationError(
            "missing-fields",
            f"Manifest missing required fields: {', '.join(missing)}.",
            missing=missing,
        )

    version = data.get("version")
    image_url = data.get("imageUrl")
    return ExtensionManifest(
        name=str(data["name"]),
        description=str(data["description"]),
        version=str(version) if _present(version) else default_version,
        image_url=image_url if isinstance(image_url, str) and image_url else None,
    )
