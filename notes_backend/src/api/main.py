from __future__ import annotations

import logging
from contextlib import asynccontextmanager
from typing import List, Optional

import uvicorn
from fastapi import APIRouter, Depends, FastAPI, Request, status
from fastapi.encoders import jsonable_encoder
from fastapi.exceptions import RequestValidationError
from fastapi.middleware.cors import CORSMiddleware
from fastapi.responses import JSONResponse

from src.api.config import Settings, get_settings
from src.api.derivation import CATEGORIES, Summarizer, build_summarizer
from src.api.errors import NotesError
from src.api.logging_config import configure_logging
from src.api.models import Category, DeleteResult, Note, NoteWrite
from src.api.service import NoteService
from src.api.store import NoteStore, build_store

logger = logging.getLogger(__name__)

openapi_tags = [
    {"name": "Health", "description": "Service health checks."},
    {"name": "Notes", "description": "CRUD operations for notes with derived summary and category."},
]

router = APIRouter()


def get_note_service(request: Request) -> NoteService:
    """Return the note service bound to the running app."""
    return request.app.state.note_service


@router.get("/", tags=["Health"], summary="Health check", description="Basic service health check.")
def health_check():
    """Return a basic health response."""
    return {"message": "Healthy"}


@router.get(
    "/categories",
    response_model=List[Category],
    tags=["Notes"],
    summary="List categories",
    description="List every category a note can be assigned, in matching priority order.",
    operation_id="list_categories",
)
def list_categories() -> List[Category]:
    return CATEGORIES


@router.get(
    "/notes",
    response_model=List[Note],
    tags=["Notes"],
    summary="List notes",
    description="List notes newest first, optionally filtered by category.",
    operation_id="list_notes",
)
def list_notes(
    category: Optional[str] = None,
    service: NoteService = Depends(get_note_service),
) -> List[Note]:
    """Return all notes, or only those in ``category``."""
    return service.list_notes(category)


@router.get(
    "/notes/{note_id}",
    response_model=Note,
    tags=["Notes"],
    summary="Get note",
    description="Retrieve a single note by id.",
    operation_id="get_note",
)
def get_note(note_id: str, service: NoteService = Depends(get_note_service)) -> Note:
    return service.get_note(note_id)


@router.post(
    "/notes",
    response_model=Note,
    status_code=status.HTTP_201_CREATED,
    tags=["Notes"],
    summary="Create note",
    description="Create a note; summary and category are derived from the content.",
    operation_id="create_note",
)
def create_note(payload: NoteWrite, service: NoteService = Depends(get_note_service)) -> Note:
    """Create a note and return the persisted note."""
    return service.create_note(payload.title, payload.content)


@router.put(
    "/notes/{note_id}",
    response_model=Note,
    tags=["Notes"],
    summary="Update note",
    description="Replace a note's title and content; summary and category are re-derived.",
    operation_id="update_note",
)
def update_note(
    note_id: str,
    payload: NoteWrite,
    service: NoteService = Depends(get_note_service),
) -> Note:
    """Update a note by id and return the updated note."""
    return service.update_note(note_id, payload.title, payload.content)


@router.delete(
    "/notes/{note_id}",
    response_model=DeleteResult,
    tags=["Notes"],
    summary="Delete note",
    description="Delete a note by id. Deleting a note that does not exist also succeeds.",
    operation_id="delete_note",
)
def delete_note(note_id: str, service: NoteService = Depends(get_note_service)) -> DeleteResult:
    """Delete a note by id."""
    service.delete_note(note_id)
    return DeleteResult(success=True)


def register_exception_handlers(app: FastAPI) -> None:
    """Render NotesError and request validation failures as ``{"error": ...}`` bodies."""

    @app.exception_handler(NotesError)
    async def notes_error_handler(request: Request, exc: NotesError) -> JSONResponse:
        if exc.status_code >= 500:
            logger.error("%s %s failed: %s", request.method, request.url.path, exc.message)
        else:
            logger.warning("%s %s rejected: %s", request.method, request.url.path, exc.message)
        return JSONResponse(status_code=exc.status_code, content={"error": exc.message})

    @app.exception_handler(RequestValidationError)
    async def request_validation_handler(request: Request, exc: RequestValidationError) -> JSONResponse:
        logger.warning("%s %s rejected: invalid request", request.method, request.url.path)
        return JSONResponse(
            status_code=status.HTTP_400_BAD_REQUEST,
            content={"error": "Invalid request", "details": jsonable_encoder(exc.errors())},
        )


# PUBLIC_INTERFACE
def create_app(
    settings: Optional[Settings] = None,
    store: Optional[NoteStore] = None,
    summarizer: Optional[Summarizer] = None,
) -> FastAPI:
    """Build the FastAPI app.

    When ``store`` is given it is used as-is and left open on shutdown;
    otherwise the store named by settings is built at startup and closed at
    shutdown.
    """
    settings = settings or get_settings()
    configure_logging(settings.LOG_LEVEL)

    @asynccontextmanager
    async def lifespan(app: FastAPI):
        owned_store: Optional[NoteStore] = None
        if app.state.note_service is None:
            owned_store = build_store(settings)
            app.state.note_service = NoteService(owned_store, summarizer or build_summarizer(settings))
        try:
            yield
        finally:
            if owned_store is not None:
                owned_store.close()
                app.state.note_service = None

    app = FastAPI(
        title="Smart Notes API",
        description="Notes backend that derives a summary and a category from each note's content.",
        version="0.1.0",
        openapi_tags=openapi_tags,
        lifespan=lifespan,
    )
    app.state.note_service = None
    if store is not None:
        app.state.note_service = NoteService(store, summarizer or build_summarizer(settings))

    app.add_middleware(
        CORSMiddleware,
        allow_origins=settings.CORS_ORIGINS,
        allow_methods=["*"],
        allow_headers=["*"],
    )
    register_exception_handlers(app)
    app.include_router(router)
    return app


app = create_app()


def run() -> None:
    """Serve the app with uvicorn on the configured host and port."""
    settings = get_settings()
    logger.info("Starting Smart Notes API on port %s", settings.PORT)
    uvicorn.run(app, host=settings.HOST, port=settings.PORT, log_level=settings.LOG_LEVEL.lower())


if __name__ == "__main__":
    run()
