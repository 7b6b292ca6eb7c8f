"""Credential-shaped substring detection for untrusted manifest text."""

from __future__ import annotations

import re
from typing import Mapping, Optional

from extreg.config import DEFAULT_SECRET_PATTERNS


class SecretScanner:
    """Scan raw text against a ``{label: regex}`` pattern table.

    This is a heuristic: unknown credential shapes go undetected, and a
    false positive only costs a rejection.
    """

    def __init__(self, patterns: Optional[Mapping[str, str]] = None) -> None:
        source = DEFAULT_SECRET_PATTERNS if patterns is None else patterns
        self._patterns: list[tuple[str, re.Pattern[str]]] = [
            (label, re.compile(pattern)) for label, pattern in source.items()
        ]

    @property
    def labels(self) -> list[str]:
        return [label for label, _ in self._patterns]

    def find(self, text: str) -> Optional[str]:
        """Return the label of the first matching pattern, or ``None``."""
        for label, pattern in self._patterns:
            if pattern.search(text):
                return label
        return None

    def has_secrets(self, text: str) -> bool:
        return self.find(text) is not None
