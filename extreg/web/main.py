"""FastAPI application for the extension registry.

Provides REST API endpoints for:
- Submission intake and resubmission
- Administrator review (approve, reject, grant-admin)
- Public registry browsing and search
"""

from __future__ import annotations

import logging

from fastapi import FastAPI, Request
from fastapi.middleware.cors import CORSMiddleware
from fastapi.responses import JSONResponse

from extreg import __version__
from extreg.errors import RegistryError
from extreg.web.routers import admin, auth, registry, submissions

logger = logging.getLogger(__name__)

# error kind -> HTTP status
ERROR_STATUS: dict[str, int] = {
    "unauthenticated": 401,
    "permission-denied": 403,
    "unauthorized": 403,
    "invalid-argument": 400,
    "not-found": 404,
    "failed-precondition": 409,
    "internal": 500,
}

app = FastAPI(
    title="Extension Registry API",
    description=(
        "REST API for the extension registry. Provides endpoints for "
        "submitting extensions, administrator review, and browsing the "
        "public catalog."
    ),
    version=__version__,
)

# ---------------------------------------------------------------------------
# CORS middleware (allow all origins for development)
# ---------------------------------------------------------------------------
app.add_middleware(
    CORSMiddleware,
    allow_origins=["*"],
    allow_credentials=True,
    allow_methods=["*"],
    allow_headers=["*"],
)


@app.exception_handler(RegistryError)
async def registry_error_handler(request: Request, exc: RegistryError) -> JSONResponse:
    """Map a typed registry failure to its HTTP status."""
    status_code = ERROR_STATUS.get(exc.kind, 500)
    headers = {"WWW-Authenticate": "Bearer"} if status_code == 401 else None
    if status_code >= 500:
        logger.error("%s %s failed: %s", request.method, request.url.path, exc.message)
    return JSONResponse(
        status_code=status_code,
        content={"kind": exc.kind, "detail": exc.message},
        headers=headers,
    )


# ---------------------------------------------------------------------------
# Include routers
# ---------------------------------------------------------------------------
app.include_router(submissions.router)
app.include_router(admin.router)
app.include_router(registry.router)
app.include_router(auth.router)


@app.get("/", tags=["meta"])
async def root():
    """Return basic API information."""
    return {
        "name": "Extension Registry API",
        "version": __version__,
        "docs": "/docs",
        "openapi": "/openapi.json",
    }


@app.get("/health", tags=["meta"])
async def health_check():
    """Health check endpoint."""
    return {"status": "healthy"}
