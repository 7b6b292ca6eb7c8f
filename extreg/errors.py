"""Error taxonomy for the extension registry.

Privileged operations raise :class:`RegistryError` subclasses whose
``kind`` is surfaced to the caller. Pipeline outcomes use
:class:`ManifestFetchError` / :class:`ManifestValidationError`, which never
leave the pipeline: they are absorbed into submission state.
"""

from __future__ import annotations


class RegistryError(Exception):
    """Base class for failures surfaced to an operation's caller."""

    kind = "internal"

    def __init__(self, message: str = "") -> None:
        super().__init__(message or self.kind)
        self.message = message or self.kind

    def to_dict(self) -> dict:
        return {"kind": self.kind, "message": self.message}


class Unauthenticated(RegistryError):
    kind = "unauthenticated"


class PermissionDenied(RegistryError):
    kind = "permission-denied"


class Unauthorized(RegistryError):
    """Caller is authenticated but does not own the target resource."""

    kind = "unauthorized"


class InvalidArgument(RegistryError):
    kind = "invalid-argument"


class NotFound(RegistryError):
    kind = "not-found"


class FailedPrecondition(RegistryError):
    kind = "failed-precondition"


class InternalError(RegistryError):
    kind = "internal"


# ---------------------------------------------------------------------------
# Pipeline outcomes
# ---------------------------------------------------------------------------


class PipelineError(Exception):
    """A content problem detected while validating a submission."""

    def __init__(self, reason: str, message: str = "") -> None:
        super().__init__(message or reason)
        self.reason = reason


class ManifestFetchError(PipelineError):
    """Raised with reason ``invalid-url`` or ``manifest-not-found``."""


class ManifestValidationError(PipelineError):
    """Raised with reason ``invalid-json`` or ``missing-fields``."""

    def __init__(self, reason: str, message: str = "", missing: tuple[str, ...] = ()) -> None:
        super().__init__(reason, message)
        self.missing = missing
