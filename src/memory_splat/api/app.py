"""FastAPI application factory."""

import logging
from collections.abc import AsyncIterator
from contextlib import asynccontextmanager

from fastapi import (
    BackgroundTasks,
    FastAPI,
    File,
    Form,
    HTTPException,
    Request,
    UploadFile,
    status,
)
from fastapi.responses import JSONResponse

from memory_splat.api.jobs import router as jobs_router
from memory_splat.api.models import AlbumCreate, AlbumOut, PhotoOut, SplatRequest
from memory_splat.app_logging import configure_logging
from memory_splat.containers import AppContainer
from memory_splat.domain.errors import SplatError, StorageError, SubmissionError
from memory_splat.domain.photos import SourceFile


def create_app(container: AppContainer) -> FastAPI:
    """Create a FastAPI app configured with dependencies."""
    configure_logging()
    logger = logging.getLogger(__name__)

    @asynccontextmanager
    async def lifespan(app: FastAPI) -> AsyncIterator[None]:
        snapshot = await app.state.container.photo_store.initialize()
        logger.info(
            "Loaded %d albums and %d photos",
            len(snapshot.albums),
            len(snapshot.photos),
        )
        yield
        await app.state.container.close_resources()

    app = FastAPI(lifespan=lifespan)
    app.state.container = container

    app.include_router(jobs_router)

    @app.exception_handler(StorageError)
    async def storage_error_handler(
        request: Request, exc: StorageError
    ) -> JSONResponse:
        logger.error("Storage failure on %s: %s", request.url.path, exc)
        return JSONResponse(
            status_code=status.HTTP_503_SERVICE_UNAVAILABLE,
            content={"detail": "Storage unavailable"},
        )

    @app.get("/health")
    async def health() -> dict[str, str]:
        """Simple health check endpoint."""
        return {"status": "ok"}

    @app.get("/albums")
    async def list_albums(request: Request) -> dict[str, object]:
        """Return all albums and the current album id."""
        store = request.app.state.container.photo_store
        return {
            "albums": [AlbumOut.from_album(album) for album in store.get_albums()],
            "current_album_id": store.current_album_id,
        }

    @app.post("/albums", status_code=status.HTTP_201_CREATED)
    async def create_album(body: AlbumCreate, request: Request) -> AlbumOut:
        """Create an empty album."""
        album = await request.app.state.container.photo_store.create_album(body.name)
        return AlbumOut.from_album(album)

    @app.post("/albums/{album_id}/switch")
    async def switch_album(album_id: str, request: Request) -> dict[str, object]:
        """Make another album current and return its photos."""
        photos = await request.app.state.container.photo_store.switch_album(album_id)
        return {
            "album_id": album_id,
            "photos": [PhotoOut.from_photo(photo) for photo in photos],
        }

    @app.get("/photos")
    async def list_photos(
        request: Request, album_id: str | None = None
    ) -> dict[str, list[PhotoOut]]:
        """Return photos of the current album or of the given album."""
        photos = request.app.state.container.photo_store.get_all(album_id)
        return {"photos": [PhotoOut.from_photo(photo) for photo in photos]}

    @app.post("/photos", status_code=status.HTTP_201_CREATED)
    async def upload_photos(
        request: Request,
        background_tasks: BackgroundTasks,
        files: list[UploadFile] = File(...),
        album_id: str | None = Form(default=None),
        generate: bool = Form(default=True),
    ) -> dict[str, list[PhotoOut]]:
        """Import uploaded images and queue splat generation for them."""
        state_container: AppContainer = request.app.state.container
        sources = [
            SourceFile(
                name=upload.filename or "upload",
                content_type=upload.content_type or "",
                content=await upload.read(),
            )
            for upload in files
        ]
        photos = await state_container.photo_store.add_from_source(sources, album_id)
        if generate and photos:
            background_tasks.add_task(
                state_container.orchestrator.generate_for_photos, photos
            )
        return {"photos": [PhotoOut.from_photo(photo) for photo in photos]}

    @app.post("/splats", status_code=status.HTTP_202_ACCEPTED)
    async def create_splat(
        body: SplatRequest, request: Request, background_tasks: BackgroundTasks
    ) -> dict[str, str]:
        """Submit an image URL and finish the job in the background."""
        state_container: AppContainer = request.app.state.container
        try:
            request_id = await state_container.orchestrator.start_from_reference(
                body.image_url, body.photo_id
            )
        except SubmissionError as exc:
            raise HTTPException(
                status_code=status.HTTP_502_BAD_GATEWAY, detail=str(exc)
            ) from exc
        background_tasks.add_task(_complete_job, state_container, request_id)
        return {"request_id": request_id}

    return app


async def _complete_job(container: AppContainer, request_id: str) -> None:
    try:
        await container.orchestrator.complete(request_id)
    except SplatError as exc:
        logging.getLogger(__name__).debug(
            "Background splat job %s ended without a result: %s", request_id, exc
        )
