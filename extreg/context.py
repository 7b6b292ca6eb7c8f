"""Wiring of stores and services from settings."""

from __future__ import annotations

from dataclasses import dataclass
from typing import Optional

import httpx

from extreg.auth.provider import IdentityProvider
from extreg.config import RegistrySettings, get_settings
from extreg.registry.catalog import RegistryCatalog
from extreg.review.actions import ReviewService
from extreg.security.audit_log import AuditLogger
from extreg.store import DocumentStore
from extreg.submissions.fetcher import ManifestFetcher
from extreg.submissions.pipeline import SubmissionPipeline
from extreg.submissions.secrets import SecretScanner
from extreg.submissions.store import SubmissionStore


@dataclass
class RegistryContext:
    settings: RegistrySettings
    store: DocumentStore
    provider: IdentityProvider
    audit: AuditLogger
    submissions: SubmissionStore
    catalog: RegistryCatalog
    pipeline: SubmissionPipeline
    review: ReviewService

    @classmethod
    def from_settings(
        cls,
        settings: Optional[RegistrySettings] = None,
        transport: Optional[httpx.AsyncBaseTransport] = None,
    ) -> "RegistryContext":
        """Build every service from ``settings``.

        ``transport`` replaces the network for manifest retrieval.
        """
        settings = settings or get_settings()
        store = DocumentStore(settings.store_dir)
        provider = IdentityProvider(
            settings.auth_dir,
            secret=settings.token_secret,
            token_ttl_hours=settings.token_ttl_hours,
        )
        audit = AuditLogger(settings.audit_dir)
        submissions = SubmissionStore(store)
        pipeline = SubmissionPipeline(
            submissions,
            fetcher=ManifestFetcher(
                branches=settings.default_branches,
                filename=settings.manifest_filename,
                timeout=settings.fetch_timeout,
                transport=transport,
            ),
            scanner=SecretScanner(settings.secret_patterns),
            default_version=settings.default_version,
            placeholder_image=settings.placeholder_image,
            validation_timeout=settings.validation_timeout,
            audit=audit,
        )
        return cls(
            settings=settings,
            store=store,
            provider=provider,
            audit=audit,
            submissions=submissions,
            catalog=RegistryCatalog(store),
            pipeline=pipeline,
            review=ReviewService(provider, store, audit=audit),
        )
