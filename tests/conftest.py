"""Shared pytest fixtures for Heavytime tests."""

import shutil
import tempfile
import threading
from pathlib import Path
from typing import Generator

import pytest

from heavytime.core.adapters import ComicResult, NarrationResult, PoemResult
from heavytime.core.config import HeavytimeConfig
from heavytime.core.image_lister import ImageListing
from heavytime.core.story_db import StoryDB
from heavytime.ui.models import UIState
from heavytime.workflows.story import StoryWorkflow

CREDENTIAL_ENV_VARS = (
    "AWS_ACCESS_KEY_ID",
    "AWS_SECRET_ACCESS_KEY",
    "ANTHROPIC_API_KEY",
    "FAL_KEY",
    "HEAVYTIME_AWS_ACCESS_KEY_ID",
    "HEAVYTIME_AWS_SECRET_ACCESS_KEY",
    "HEAVYTIME_ANTHROPIC_API_KEY",
    "HEAVYTIME_FAL_KEY",
)


@pytest.fixture
def temp_dir() -> Generator[Path, None, None]:
    """Create a temporary directory for test files.

    Yields:
        Path to temporary directory

    Cleanup:
        Directory is removed after test completes
    """
    temp_path = Path(tempfile.mkdtemp())
    try:
        yield temp_path
    finally:
        shutil.rmtree(temp_path, ignore_errors=True)


@pytest.fixture
def test_config(temp_dir: Path, monkeypatch) -> HeavytimeConfig:
    """Create a test configuration with a temporary database and no credentials.

    Credential variables from the developer's shell are removed first.

    Args:
        temp_dir: Temporary directory from fixture

    Returns:
        HeavytimeConfig instance for testing
    """
    for name in CREDENTIAL_ENV_VARS:
        monkeypatch.delenv(name, raising=False)

    return HeavytimeConfig(_env_file=None, database_path=temp_dir / "data" / "stories.db")


@pytest.fixture
def story_db(temp_dir: Path) -> StoryDB:
    """Create an empty story database in the temporary directory."""
    return StoryDB(temp_dir / "stories.db")


class FakePoemGenerator:
    """Stands in for the Claude adapter; records every call."""

    name = "Fake Poem"
    is_configured = True

    def __init__(self, poem: str = "Light on water\nthe day begins", error: Exception | None = None):
        self.poem = poem
        self.error = error
        self.calls: list[dict] = []

    def generate(self, image_url: str, title: str) -> PoemResult:
        self.calls.append({"image_url": image_url, "title": title})
        if self.error is not None:
            raise self.error
        return PoemResult(poem=self.poem, title=title)


class FakeNarrator:
    name = "Fake Speech"
    is_configured = True

    def __init__(self, audio_url: str = "https://cdn.example/a.mp3", error: Exception | None = None):
        self.audio_url = audio_url
        self.error = error
        self.calls: list[str] = []
        self.started = threading.Event()

    def generate(self, text: str) -> NarrationResult:
        self.started.set()
        self.calls.append(text)
        if self.error is not None:
            raise self.error
        return NarrationResult(audio_url=self.audio_url, duration_ms=4200, request_id="req-audio")


class FakeComicRenderer:
    name = "Fake Comic"
    is_configured = True

    def __init__(self, comic_url: str = "https://cdn.example/c.jpg", error: Exception | None = None):
        self.comic_url = comic_url
        self.error = error
        self.calls: list[dict] = []
        self.started = threading.Event()

    def generate(self, poem: str, image_url: str) -> ComicResult:
        self.started.set()
        self.calls.append({"poem": poem, "image_url": image_url})
        if self.error is not None:
            raise self.error
        return ComicResult(comic_url=self.comic_url, description="Four panels", request_id="req-comic")


class FakeImageLister:
    """Returns canned listings keyed by date."""

    def __init__(self, config: HeavytimeConfig, listings: dict[str, list[str]] | None = None,
                 error: bool = False):
        self.config = config
        self.listings = listings or {}
        self.error = error
        self.requested: list[str] = []

    def list_images(self, date_key: str) -> ImageListing:
        self.requested.append(date_key)
        if self.error:
            return ImageListing(date=date_key, error="Failed to fetch images")
        return ImageListing(date=date_key, images=list(self.listings.get(date_key, [])))


@pytest.fixture
def poem_generator() -> FakePoemGenerator:
    return FakePoemGenerator()


@pytest.fixture
def narrator() -> FakeNarrator:
    return FakeNarrator()


@pytest.fixture
def comic_renderer() -> FakeComicRenderer:
    return FakeComicRenderer()


@pytest.fixture
def workflow(story_db, poem_generator, narrator, comic_renderer) -> StoryWorkflow:
    """Story workflow wired to the temporary store and fake adapters."""
    return StoryWorkflow(
        store=story_db,
        poem_generator=poem_generator,
        narrator=narrator,
        comic_renderer=comic_renderer,
    )


@pytest.fixture
def ui_state(test_config, story_db, workflow) -> UIState:
    """UI state whose services are the temporary store and fakes."""
    return UIState(
        store=story_db,
        image_lister=FakeImageLister(test_config),
        workflow=workflow,
    )



@pytest.fixture
def api_services(test_config, story_db, poem_generator, narrator, comic_renderer, workflow):
    """Application services backed by the temporary store and fakes."""
    from heavytime.api.main import AppServices

    return AppServices(
        store=story_db,
        image_lister=FakeImageLister(
            test_config,
            listings={"2025-10-24": ["https://x/2025-10-24/a.jpg", "https://x/2025-10-24/c.PNG"]},
        ),
        poem_generator=poem_generator,
        narrator=narrator,
        comic_renderer=comic_renderer,
        workflow=workflow,
    )


@pytest.fixture
def test_client(api_services, monkeypatch):
    """FastAPI TestClient whose lifespan installs ``api_services``."""
    from fastapi.testclient import TestClient

    from heavytime.api.main import app

    monkeypatch.setattr("heavytime.api.main.build_services", lambda cfg: api_services)

    with TestClient(app) as client:
        yield client
