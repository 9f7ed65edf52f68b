"""FastAPI application for the scholia local JSON API."""

import secrets
from pathlib import Path
from typing import Any

from fastapi import Depends, FastAPI, HTTPException, Query, Security
from fastapi.middleware.cors import CORSMiddleware
from fastapi.security import HTTPAuthorizationCredentials, HTTPBearer

from ..core.document import Document
from ..core.hashtags import collect_hashtags
from ..core.model import WHOLE
from ..core.mutate import delete_annotation, insert_annotation
from ..core.query import list_all, list_by_hashtags
from ..core.slicer import heading_scope
from ..errors import InvalidRangeError, NotAnAnnotationError
from ..export.formats import export_document
from ..render import occurrence_to_dict


def create_app(runtime: Any, token: str | None = None, enable_cors: bool = False) -> FastAPI:
    """
    Create FastAPI application with runtime injected.

    Args:
        runtime: Runtime whose storage root holds the documents
        token: Bearer token for authentication (None to disable auth)
        enable_cors: Enable CORS middleware

    Returns:
        FastAPI application instance
    """
    app = FastAPI(
        title="Scholia API",
        description="Local JSON API for notes and hashtags in Org documents",
        version="0.1.0",
        docs_url="/docs" if token is None else None,
        redoc_url="/redoc" if token is None else None,
    )

    if enable_cors:
        app.add_middleware(
            CORSMiddleware,
            allow_origins=["*"],
            allow_credentials=True,
            allow_methods=["*"],
            allow_headers=["*"],
        )

    if token:
        security_scheme = HTTPBearer(auto_error=False)

        async def verify_token(
            credentials: HTTPAuthorizationCredentials | None = Security(security_scheme),  # noqa: B008
        ) -> None:
            """Verify bearer token."""
            if credentials is None or credentials.credentials != token:
                raise HTTPException(status_code=401, detail="Invalid or missing token")
    else:

        async def verify_token() -> None:
            """No-op when auth is disabled."""
            return None

    root = Path(runtime.storage.root).resolve()

    def open_document(path: str) -> Document:
        target = (root / path).resolve()
        if not target.is_relative_to(root):
            raise HTTPException(status_code=400, detail=f"Path {path} is outside the document root")
        document = runtime.open_document(target)
        if document is None:
            raise HTTPException(status_code=404, detail=f"Document {path} not found")
        return document

    def notes_payload(document: Document, occurrences: list) -> list[dict[str, Any]]:
        return [occurrence_to_dict(document, occ) for occ in occurrences]

    @app.get("/health")  # type: ignore[misc]
    async def health(auth: None = Depends(verify_token)) -> dict[str, Any]:
        """Health check endpoint."""
        return {"status": "ok"}

    @app.get("/documents")  # type: ignore[misc]
    async def documents(auth: None = Depends(verify_token)) -> list[str]:
        """Org documents under the root."""
        return list(runtime.storage.list_all())

    @app.get("/notes")  # type: ignore[misc]
    async def notes(
        path: str = Query(..., description="Document path relative to the root"),
        tag: list[str] = Query(default=[], description="Required hashtags (all must match)"),  # noqa: B008
        ambient: bool | None = Query(None, description="Count inherited tags"),
        heading: str | None = Query(None, description="Limit to the subtree of this heading slug"),
        auth: None = Depends(verify_token),
    ) -> list[dict[str, Any]]:
        """List notes, optionally filtered by hashtags."""
        document = open_document(path)

        scope = WHOLE
        if heading:
            scope = heading_scope(document.text, heading, runtime.parser)
            if scope is None:
                raise HTTPException(status_code=404, detail=f"Heading {heading} not found")

        placeholder = runtime.config.display.placeholder
        tags = [t.lstrip("#") for t in tag]
        if tags:
            occurrences = list_by_hashtags(
                document,
                tags,
                include_ambient_tags=runtime.config.query.ambient if ambient is None else ambient,
                scope=scope,
                mode=runtime.config.query.tag_match,
                placeholder=placeholder,
            )
        else:
            occurrences = list_all(document, scope, placeholder)
        return notes_payload(document, occurrences)

    @app.get("/tags")  # type: ignore[misc]
    async def tags(
        path: str = Query(..., description="Document path relative to the root"),
        ambient: bool = Query(False, description="Include heading and file tags"),
        auth: None = Depends(verify_token),
    ) -> list[str]:
        """Hashtags used by the document's notes."""
        document = open_document(path)
        extra = runtime.parser.all_tags(document.text) if ambient else None
        return collect_hashtags(document, extra_tags=extra)

    @app.post("/notes")  # type: ignore[misc]
    async def add_note(
        path: str = Query(..., description="Document path relative to the root"),
        start: int = Query(..., ge=0, description="Start offset of the labelled text"),
        end: int | None = Query(None, ge=0, description="End offset (default: start)"),
        note: str = Query(..., description="Note text"),
        auth: None = Depends(verify_token),
    ) -> dict[str, Any]:
        """Wrap a span in a new note."""
        document = open_document(path)
        try:
            marker = insert_annotation(document, start, start if end is None else end, note)
        except InvalidRangeError as e:
            raise HTTPException(status_code=400, detail=e.message) from e
        runtime.save_document(document)
        return {"start": marker.position, "notes": notes_payload(document, list_all(document))}

    @app.delete("/notes")  # type: ignore[misc]
    async def delete_note(
        path: str = Query(..., description="Document path relative to the root"),
        at: int = Query(..., ge=0, description="Offset where the note link starts"),
        auth: None = Depends(verify_token),
    ) -> dict[str, Any]:
        """Delete a note, keeping its label text."""
        document = open_document(path)
        try:
            replacement = delete_annotation(document, at)
        except NotAnAnnotationError as e:
            raise HTTPException(status_code=404, detail=e.message) from e
        runtime.save_document(document)
        return {"replacement": replacement, "notes": notes_payload(document, list_all(document))}

    @app.get("/export")  # type: ignore[misc]
    async def export(
        path: str = Query(..., description="Document path relative to the root"),
        to: str = Query(..., description="Export format"),
        auth: None = Depends(verify_token),
    ) -> dict[str, Any]:
        """Document text with notes rendered for a format."""
        document = open_document(path)
        text = export_document(document.text, to, runtime.export_table, runtime.parser)
        return {"format": to, "known": to in runtime.export_table, "text": text}

    return app


def generate_token() -> str:
    """Generate a random bearer token."""
    return secrets.token_urlsafe(32)
