"""Registry router -- public browsing and search of approved extensions."""

from __future__ import annotations

from typing import Optional

from fastapi import APIRouter, Depends, Query

from extreg.context import RegistryContext
from extreg.errors import NotFound
from extreg.registry.models import RegistryEntry, SearchQuery
from extreg.web.middleware.auth import get_context
from extreg.web.models.api import (
    RegistryEntryResponse,
    SearchQueryRequest,
    SearchResultResponse,
)

router = APIRouter(prefix="/api/registry", tags=["registry"])


def _entry_to_response(entry: RegistryEntry) -> RegistryEntryResponse:
    return RegistryEntryResponse(**entry.to_dict())


@router.get(
    "",
    response_model=list[RegistryEntryResponse],
    summary="List all extensions",
)
async def list_extensions(context: RegistryContext = Depends(get_context)):
    """List every approved extension."""
    return [_entry_to_response(e) for e in context.catalog.list_all()]


@router.get(
    "/search",
    response_model=SearchResultResponse,
    summary="Search extensions",
)
async def search_extensions(
    text: Optional[str] = Query(None, description="Free-text search"),
    tags: Optional[str] = Query(None, description="Comma-separated tags"),
    category: Optional[str] = Query(None, description="persona or tool"),
    context: RegistryContext = Depends(get_context),
):
    """Search the registry with optional filters."""
    query = SearchQuery(
        text=text or "",
        tags=[t.strip() for t in tags.split(",") if t.strip()] if tags else [],
        category=category or "",
    )
    result = context.catalog.search(query)

    return SearchResultResponse(
        entries=[_entry_to_response(e) for e in result.entries],
        total_count=result.total_count,
        query=SearchQueryRequest(
            text=query.text,
            tags=query.tags,
            category=query.category,
        ),
    )


@router.get(
    "/{entry_id}",
    response_model=RegistryEntryResponse,
    summary="Get one extension",
)
async def get_extension(entry_id: str, context: RegistryContext = Depends(get_context)):
    entry = context.catalog.get(entry_id)
    if entry is None:
        raise NotFound(f"Extension '{entry_id}' not found")
    return _entry_to_response(entry)
