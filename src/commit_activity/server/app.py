"""Starlette ASGI application exposing the artifact store."""

from __future__ import annotations

import logging
from typing import Any

from starlette.applications import Starlette
from starlette.requests import Request
from starlette.responses import JSONResponse
from starlette.routing import Route

from ..exceptions import (
    ArtifactParseError,
    CommitActivityError,
    InvalidDocumentError,
    InvalidInputError,
    NotFoundError,
    StorageError,
)
from ..reconciler import reconcile
from ..storage import ArtifactStore

logger = logging.getLogger(__name__)

NO_STORE = {"Cache-Control": "no-store, max-age=0"}


def _json(content: Any, status_code: int = 200) -> JSONResponse:
    return JSONResponse(content, status_code=status_code, headers=NO_STORE)


def _error(error: CommitActivityError) -> JSONResponse:
    """Map a domain error to a response without exposing filesystem paths."""
    if isinstance(error, InvalidInputError):
        return _json({"error": error.message, "details": error.reason}, 400)
    if isinstance(error, NotFoundError):
        return _json({"error": f"{error.kind} not found"}, 404)
    if isinstance(error, ArtifactParseError):
        return _json({"error": "Invalid JSON file", "details": error.reason}, 500)
    if isinstance(error, InvalidDocumentError):
        return _json({"error": error.message, "details": error.reason}, 422)
    if isinstance(error, StorageError):
        return _json({"error": "Storage error"}, 500)
    return _json({"error": error.message}, 500)


def create_app(store: ArtifactStore) -> Starlette:
    """Build the Starlette application wired to *store*."""

    async def api_health(request: Request) -> JSONResponse:
        return _json({"status": "ok"})

    async def api_data_files(request: Request) -> JSONResponse:
        """List artifact filenames, newest first."""
        try:
            return _json(store.list_artifacts())
        except CommitActivityError as e:
            logger.error("Listing artifacts failed: %s", e)
            return _error(e)

    async def api_data_file(request: Request) -> JSONResponse:
        """Return one artifact as stored."""
        filename = request.path_params["filename"]
        try:
            return _json(store.read_raw(filename))
        except CommitActivityError as e:
            logger.warning("Reading %r failed: %s", filename, e)
            return _error(e)

    async def api_reconcile(request: Request) -> JSONResponse:
        """Merge author groups and drop excluded authors from one artifact.

        Body: ``{"groups": [["Alice", "alice.smith"]], "excludes": ["bot"]}``
        """
        filename = request.path_params["filename"]
        try:
            body = await request.json()
        except ValueError:
            return _json({"error": "Request body must be JSON"}, 400)
        if not isinstance(body, dict):
            return _json({"error": "Request body must be a JSON object"}, 400)

        try:
            document = store.read_artifact(filename)
            result = reconcile(
                document,
                groups=body.get("groups", []),
                excludes=body.get("excludes", []),
            )
        except CommitActivityError as e:
            logger.warning("Reconciling %r failed: %s", filename, e)
            return _error(e)
        return _json(result.to_dict())

    routes = [
        Route("/api/health", api_health),
        Route("/api/data-files", api_data_files),
        Route("/api/data/{filename}", api_data_file),
        Route("/api/data/{filename}/reconcile", api_reconcile, methods=["POST"]),
    ]

    return Starlette(routes=routes)
