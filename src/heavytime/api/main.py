"""Heavytime Stories — FastAPI Application.

This module is the single entry point for the REST API.  It defines the
FastAPI ``app`` instance, all routes, and the ``main()`` CLI function that
launches the uvicorn server.

Architecture
------------
- **Configuration** comes from :data:`heavytime.core.config.config`.
- **Services** (story store, image lister, generation adapters and the story
  workflow) are built once by the lifespan handler and kept on
  ``app.state.services``.
- **Errors** raised as :class:`~heavytime.core.errors.HeavytimeError` are
  rendered as ``{"error": ..., "details": ...}`` with the error's status
  code.  Missing or malformed request fields are always 400.

Endpoints
---------
========  ==========================  ======================================
Method    Path                        Purpose
========  ==========================  ======================================
GET       ``/api/images/{date}``      Photo URLs for one day
POST      ``/api/generate-poem``      Poem from photo + title
POST      ``/api/generate-audio``     Narration for a poem
POST      ``/api/generate-comic``     Comic from photo + poem
POST      ``/api/stories``            Run the full story workflow
GET       ``/api/stories``            Paginated story list, newest first
GET       ``/api/stories/{id}``       Single story
GET       ``/api/health``             Store and credential diagnostics
========  ==========================  ======================================

Usage
-----
CLI (installed entry point)::

    heavytime

Direct invocation::

    python -m heavytime.api.main
"""

from __future__ import annotations

import logging
from collections.abc import AsyncIterator
from contextlib import asynccontextmanager
from dataclasses import dataclass

from fastapi import FastAPI, HTTPException, Request
from fastapi.exceptions import RequestValidationError
from fastapi.middleware.cors import CORSMiddleware
from fastapi.responses import JSONResponse

from heavytime import __version__
from heavytime.api.models import (
    CreateStoryRequest,
    GenerateAudioRequest,
    GenerateComicRequest,
    GeneratePoemRequest,
)
from heavytime.api.story_gallery import filter_stories, paginate_stories
from heavytime.core.config import HeavytimeConfig, config
from heavytime.core.errors import (
    HeavytimeError,
    PersistenceError,
    UpstreamServiceError,
    ValidationError,
)
from heavytime.core.image_lister import ImageLister, validate_date_key
from heavytime.core.service_adapters import ServiceAdapterBase
from heavytime.core.story_db import StoryDB
from heavytime.workflows.story import StoryWorkflow, build_story_workflow

logger = logging.getLogger(__name__)


@dataclass
class AppServices:
    """Everything the route handlers need, built once per process."""

    store: StoryDB
    image_lister: ImageLister
    poem_generator: ServiceAdapterBase
    narrator: ServiceAdapterBase
    comic_renderer: ServiceAdapterBase
    workflow: StoryWorkflow


def build_services(cfg: HeavytimeConfig) -> AppServices:
    """Open the story store and instantiate the adapters and workflow."""
    store = StoryDB(cfg.database_path)
    workflow = build_story_workflow(cfg, store=store)
    return AppServices(
        store=store,
        image_lister=ImageLister(cfg),
        poem_generator=workflow.poem_generator,
        narrator=workflow.narrator,
        comic_renderer=workflow.comic_renderer,
        workflow=workflow,
    )


# ---------------------------------------------------------------------------
# Application lifecycle.
# ---------------------------------------------------------------------------


@asynccontextmanager
async def lifespan(app: FastAPI) -> AsyncIterator[None]:
    """Build the application services on startup.

    No hosted service is contacted here; clients are created lazily on the
    first request that needs them, so missing credentials only affect the
    endpoints that use them.

    Args:
        app: The FastAPI application instance.

    Yields:
        Control back to the application for the duration of its lifetime.
    """
    app.state.services = build_services(config)
    logger.info(f"Heavytime Stories API {__version__} ready (store: {config.database_path})")

    yield


app = FastAPI(
    title="Heavytime Stories",
    description="Daily photos turned into poems, narration and comics.",
    version=__version__,
    lifespan=lifespan,
)

# Allow cross-origin requests so a separately served frontend can call the
# API during development.
app.add_middleware(
    CORSMiddleware,
    allow_origins=["*"],
    allow_credentials=True,
    allow_methods=["*"],
    allow_headers=["*"],
)


def _services(request: Request) -> AppServices:
    return request.app.state.services


# ---------------------------------------------------------------------------
# Error envelopes.
# ---------------------------------------------------------------------------


@app.exception_handler(HeavytimeError)
async def heavytime_error_handler(request: Request, exc: HeavytimeError) -> JSONResponse:
    """Render application errors as ``{"error", "details"}``."""
    if isinstance(exc, (UpstreamServiceError, PersistenceError)) and exc.status_code >= 500:
        logger.error(f"{request.method} {request.url.path}: {exc.summary}: {exc}")
    return JSONResponse(status_code=exc.status_code, content=exc.to_dict())


@app.exception_handler(RequestValidationError)
async def request_validation_handler(request: Request, exc: RequestValidationError) -> JSONResponse:
    """Malformed bodies are client errors (400), like missing fields."""
    return JSONResponse(
        status_code=400,
        content={"error": "Invalid request body", "details": str(exc.errors())},
    )


# ---------------------------------------------------------------------------
# Routes.
# ---------------------------------------------------------------------------


@app.get("/api/images/{date}")
def list_images(date: str, request: Request) -> JSONResponse:
    """Return the public URLs of one day's photos.

    Args:
        date: Day to list, ``YYYY-MM-DD``.

    Returns:
        ``{images, date, count}``.  If the object store fails the response
        is ``{error, images: [], date, count: 0}`` with status 500; a
        malformed date gives the same envelope with status 400.
    """
    try:
        validate_date_key(date)
    except ValidationError as e:
        return JSONResponse(
            status_code=400,
            content={"error": str(e), "images": [], "date": date, "count": 0},
        )

    listing = _services(request).image_lister.list_images(date)
    if listing.error:
        return JSONResponse(status_code=500, content=listing.to_dict())
    return JSONResponse(content=listing.to_dict())


@app.post("/api/generate-poem")
def generate_poem(req: GeneratePoemRequest, request: Request) -> dict:
    """Generate a poem from a photo and a title.

    Returns:
        ``{poem, title}``.

    Raises:
        ValidationError: 400 if ``imageUrl`` or ``title`` is missing.
        ImageFetchError: 400 if the photo cannot be downloaded.
        PoemGenerationError: 500 if the poem cannot be generated.
    """
    req.require("image_url", "title")
    result = _services(request).poem_generator.generate(image_url=req.image_url, title=req.title)
    return {"poem": result.poem, "title": result.title}


@app.post("/api/generate-audio")
def generate_audio(req: GenerateAudioRequest, request: Request) -> dict:
    """Narrate a poem.

    Returns:
        ``{audioUrl, durationMs, requestId}``.

    Raises:
        ValidationError: 400 if ``text`` or ``storyId`` is missing.
        AudioGenerationError: 500 if narration fails.
    """
    req.require("text", "story_id")
    result = _services(request).narrator.generate(text=req.text)
    logger.info(f"Narration ready for story {req.story_id}")
    return {
        "audioUrl": result.audio_url,
        "durationMs": result.duration_ms,
        "requestId": result.request_id,
    }


@app.post("/api/generate-comic")
def generate_comic(req: GenerateComicRequest, request: Request) -> dict:
    """Render the comic for a poem and its photo.

    Returns:
        ``{comicUrl, description, requestId}``.

    Raises:
        ValidationError: 400 if ``poem``, ``imageUrl`` or ``storyId`` is missing.
        ComicGenerationError: 500 if rendering fails.
    """
    req.require("poem", "image_url", "story_id")
    result = _services(request).comic_renderer.generate(poem=req.poem, image_url=req.image_url)
    logger.info(f"Comic ready for story {req.story_id}")
    return {
        "comicUrl": result.comic_url,
        "description": result.description,
        "requestId": result.request_id,
    }


@app.post("/api/stories", status_code=201)
def create_story(req: CreateStoryRequest, request: Request) -> dict:
    """Create a story: row, poem, then narration and comic.

    Narration and comic are best effort; their outcomes are reported in the
    response but never turn a created story into an error.

    Returns:
        ``{story, audio, comic, succeeded}``.

    Raises:
        ValidationError: 400 for a missing title or photo URL.
        PersistenceError: 500 if the story cannot be stored.
        PoemGenerationError: 500 (400 for an unreachable photo) if the poem fails.
    """
    req.require("title", "image_url")
    result = _services(request).workflow.create_story(req.title, req.image_url)
    return result.to_dict()


@app.get("/api/stories")
def list_stories(
    request: Request,
    page: int = 1,
    per_page: int = 24,
    complete_only: bool = False,
) -> dict:
    """Return stories newest first, paginated.

    Args:
        page: Page number (1-indexed, clamped to the last page).
        per_page: Number of stories per page.
        complete_only: If ``True``, hide stories without a poem.
    """
    stories = _services(request).store.list_stories()
    stories = filter_stories(stories, complete_only=complete_only)
    return paginate_stories(stories, page=page, per_page=per_page)


@app.get("/api/stories/{story_id}")
def get_story(story_id: str, request: Request) -> dict:
    """Return a single story.

    Raises:
        HTTPException: 404 if the story is not found.
    """
    story = _services(request).store.get_story(story_id)
    if story is None:
        raise HTTPException(status_code=404, detail="Story not found")
    return story.to_dict()


@app.get("/api/health")
def health(request: Request) -> dict:
    """Report store reachability and which credentials are configured.

    Never reports credential values, only whether they are set.
    """
    services = _services(request)

    store_status: dict = {"ok": True, "path": str(services.store.db_path)}
    try:
        store_status["story_count"] = services.store.count_stories()
    except PersistenceError as e:
        store_status = {"ok": False, "path": str(services.store.db_path), "error": str(e)}

    return {
        "status": "healthy" if store_status["ok"] else "degraded",
        "version": __version__,
        "store": store_status,
        "services": {
            "object_store": services.image_lister.config.storage_configured,
            "poem": services.poem_generator.is_configured,
            "speech": services.narrator.is_configured,
            "comic": services.comic_renderer.is_configured,
        },
    }


# ---------------------------------------------------------------------------
# CLI entry point.
# ---------------------------------------------------------------------------


def main() -> None:
    """Launch the uvicorn ASGI server.

    Reads host and port from :data:`~heavytime.core.config.config`
    (``HEAVYTIME_SERVER_HOST`` and ``HEAVYTIME_SERVER_PORT``).  Defaults to
    ``0.0.0.0:8000``.

    This function is registered as the ``heavytime`` console script in
    ``pyproject.toml``.
    """
    import uvicorn

    logging.basicConfig(
        level=config.log_level,
        format="%(asctime)s - %(name)s - %(levelname)s - %(message)s",
    )
    uvicorn.run(
        "heavytime.api.main:app",
        host=config.server_host,
        port=config.server_port,
        reload=False,
    )


if __name__ == "__main__":
    main()
