"""Story creation workflow.

Turns a (title, photo URL) pair into a persisted story with a poem, a
narration and a comic, tolerating failure of the two optional artifacts.

Sequence
--------
1. **Create**: insert the story row (title + source photo).  Fatal.
2. **Poem**: generate the poem from the photo and title.  Fatal; the row is
   left without derived fields (an orphan row).
3. **Persist poem**: write ``poem_text``.  Fatal; narration and comic are
   never attempted without a stored poem.
4. **Fan-out**: narration and comic run concurrently and unordered.
5. **Independent persistence**: each branch writes its own field.  A failed
   call or a failed write is logged and recorded in that branch's
   :class:`ArtifactOutcome`; it never aborts the workflow or the other branch.
6. **Completion**: ``create_story`` returns once both branches have
   finished.  The result is successful whenever steps 1–3 succeeded.

Every call creates a new row.  There is no deduplication, idempotency key,
retry or cancellation.

Example workflow usage:

    >>> from heavytime.core.config import config
    >>> from heavytime.workflows.story import build_story_workflow
    >>>
    >>> workflow = build_story_workflow(config)
    >>> result = workflow.create_story("Morning", "https://x/a.jpg")
    >>> result.story.poem_text
"""

from __future__ import annotations

import logging
from concurrent.futures import ThreadPoolExecutor
from dataclasses import dataclass
from typing import TYPE_CHECKING, Any, Callable, Literal
from urllib.parse import urlparse

from heavytime.core.errors import (
    PersistenceError,
    UpstreamServiceError,
    ValidationError,
)

if TYPE_CHECKING:
    from heavytime.core.config import HeavytimeConfig
    from heavytime.core.service_adapters import ServiceAdapterBase
    from heavytime.core.story_db import Story, StoryDB

logger = logging.getLogger(__name__)

ArtifactKind = Literal["audio", "comic"]

# Story column written by each optional branch
ARTIFACT_FIELDS: dict[str, str] = {"audio": "poem_audio", "comic": "comic_image"}


@dataclass
class ArtifactOutcome:
    """Tagged result of one optional branch (narration or comic).

    Attributes:
        kind: Which branch produced this outcome
        ok: Whether the remote call produced a usable URL
        url: The hosted artifact URL when ``ok``
        error: Failure description when the call or the write failed
        persisted: Whether the URL was written to the story row
        details: Extra fields from the service (duration, request id, ...)
    """

    kind: ArtifactKind
    ok: bool
    url: str | None = None
    error: str | None = None
    persisted: bool = False
    details: dict[str, Any] | None = None

    @classmethod
    def success(cls, kind: ArtifactKind, url: str, **details: Any) -> ArtifactOutcome:
        return cls(kind=kind, ok=True, url=url, details=details or None)

    @classmethod
    def failure(cls, kind: ArtifactKind, error: str) -> ArtifactOutcome:
        return cls(kind=kind, ok=False, error=error)

    def to_dict(self) -> dict:
        return {
            "kind": self.kind,
            "ok": self.ok,
            "url": self.url,
            "error": self.error,
            "persisted": self.persisted,
            "details": self.details or {},
        }


@dataclass
class StoryResult:
    """Final state of one ``create_story`` call."""

    story: Story
    audio: ArtifactOutcome
    comic: ArtifactOutcome

    @property
    def succeeded(self) -> bool:
        # Reaching a StoryResult means create, poem and persist-poem completed
        return True

    def to_dict(self) -> dict:
        return {
            "story": self.story.to_dict(),
            "audio": self.audio.to_dict(),
            "comic": self.comic.to_dict(),
            "succeeded": self.succeeded,
        }


def validate_story_request(title: str | None, photo_url: str | None) -> tuple[str, str]:
    """Check the inputs of a story request.

    Returns:
        The trimmed title and the photo URL

    Raises:
        ValidationError: If the title is blank or the photo URL is not an
            absolute http(s) URL
    """
    if not title or not title.strip():
        raise ValidationError("Missing title")
    if not photo_url or not photo_url.strip():
        raise ValidationError("Missing imageUrl")

    parsed = urlparse(photo_url.strip())
    if parsed.scheme not in ("http", "https") or not parsed.netloc:
        raise ValidationError(f"imageUrl must be an http(s) URL, got {photo_url!r}")

    return title.strip(), photo_url.strip()


class StoryWorkflow:
    """Coordinate the story store and the three generation adapters."""

    name = "Story Creation"
    description = "Photo + title → poem, narration and comic"

    def __init__(
        self,
        store: StoryDB,
        poem_generator: ServiceAdapterBase,
        narrator: ServiceAdapterBase,
        comic_renderer: ServiceAdapterBase,
        delete_orphans: bool = False,
    ) -> None:
        """Initialize the workflow.

        Args:
            store: Story persistence
            poem_generator: Adapter with ``generate(image_url, title)``
            narrator: Adapter with ``generate(text)``
            comic_renderer: Adapter with ``generate(poem, image_url)``
            delete_orphans: Delete the story row when poem generation fails
        """
        self.store = store
        self.poem_generator = poem_generator
        self.narrator = narrator
        self.comic_renderer = comic_renderer
        self.delete_orphans = delete_orphans

    def create_story(self, title: str, photo_url: str) -> StoryResult:
        """Create a story for a photo.

        Args:
            title: Non-empty story title
            photo_url: URL of the source photo

        Returns:
            The stored story and the outcome of each optional branch

        Raises:
            ValidationError: If the inputs are invalid (nothing is written)
            PersistenceError: If the row cannot be created or the poem
                cannot be stored
            PoemGenerationError: If the poem cannot be generated
        """
        title, photo_url = validate_story_request(title, photo_url)

        story = self.store.create_story(title=title, camera_image=photo_url)
        logger.info(f"Story {story.id}: created for {photo_url}")

        try:
            poem = self.poem_generator.generate(image_url=photo_url, title=title).poem
        except Exception:
            self._handle_orphan(story.id)
            raise

        self.store.update_story(story.id, poem_text=poem)
        logger.info(f"Story {story.id}: poem stored")

        audio, comic = self._generate_artifacts(story.id, poem, photo_url)

        final = self._reload(story, poem, audio, comic)
        logger.info(
            f"Story {story.id}: complete (audio={'ok' if audio.persisted else 'missing'}, "
            f"comic={'ok' if comic.persisted else 'missing'})"
        )
        return StoryResult(story=final, audio=audio, comic=comic)

    def _reload(
        self, story: Story, poem: str, audio: ArtifactOutcome, comic: ArtifactOutcome
    ) -> Story:
        """Re-read the finished story, falling back to what this run stored."""
        try:
            stored = self.store.get_story(story.id)
        except PersistenceError as e:
            logger.error(f"Story {story.id}: could not re-read finished story: {e}")
            stored = None

        if stored is not None:
            return stored

        story.poem_text = poem
        story.poem_audio = audio.url if audio.persisted else None
        story.comic_image = comic.url if comic.persisted else None
        return story

    def _handle_orphan(self, story_id: str) -> None:
        if not self.delete_orphans:
            logger.warning(f"Story {story_id}: poem generation failed, row left without a poem")
            return

        try:
            self.store.delete_story(story_id)
            logger.warning(f"Story {story_id}: poem generation failed, row deleted")
        except PersistenceError as e:
            logger.error(f"Story {story_id}: could not delete orphan row: {e}")

    def _generate_artifacts(
        self, story_id: str, poem: str, photo_url: str
    ) -> tuple[ArtifactOutcome, ArtifactOutcome]:
        """Run narration and comic concurrently and wait for both."""
        with ThreadPoolExecutor(max_workers=2, thread_name_prefix=f"story-{story_id[:8]}") as pool:
            audio_future = pool.submit(self._run_branch, story_id, "audio", self._narrate, poem)
            comic_future = pool.submit(
                self._run_branch, story_id, "comic", self._render_comic, poem, photo_url
            )
            return audio_future.result(), comic_future.result()

    def _narrate(self, poem: str) -> ArtifactOutcome:
        result = self.narrator.generate(text=poem)
        return ArtifactOutcome.success(
            "audio", result.audio_url, duration_ms=result.duration_ms, request_id=result.request_id
        )

    def _render_comic(self, poem: str, photo_url: str) -> ArtifactOutcome:
        result = self.comic_renderer.generate(poem=poem, image_url=photo_url)
        return ArtifactOutcome.success(
            "comic", result.comic_url, description=result.description, request_id=result.request_id
        )

    def _run_branch(
        self,
        story_id: str,
        kind: ArtifactKind,
        produce: Callable[..., ArtifactOutcome],
        *args: str,
    ) -> ArtifactOutcome:
        """Produce one optional artifact and store it, never raising."""
        try:
            outcome = produce(*args)
        except UpstreamServiceError as e:
            logger.error(f"Story {story_id}: {kind} generation failed: {e}")
            return ArtifactOutcome.failure(kind, str(e))
        except Exception as e:
            logger.exception(f"Story {story_id}: unexpected error during {kind} generation")
            return ArtifactOutcome.failure(kind, str(e))

        try:
            self.store.update_story(story_id, **{ARTIFACT_FIELDS[kind]: outcome.url})
        except PersistenceError as e:
            logger.error(f"Story {story_id}: failed to store {kind} URL: {e}")
            outcome.error = str(e)
            return outcome

        outcome.persisted = True
        logger.info(f"Story {story_id}: {kind} stored")
        return outcome


def build_story_workflow(config: HeavytimeConfig, store: StoryDB | None = None) -> StoryWorkflow:
    """Wire a workflow from configuration and the service registry.

    Args:
        config: Configuration with credentials and the database path
        store: Existing store to reuse (a new one is opened if None)
    """
    from heavytime.core.service_adapters import service_registry
    from heavytime.core.story_db import StoryDB

    return StoryWorkflow(
        store=store or StoryDB(config.database_path),
        poem_generator=service_registry.instantiate("Claude Poem", config),
        narrator=service_registry.instantiate("Minimax Speech", config),
        comic_renderer=service_registry.instantiate("Nano Banana Comic", config),
        delete_orphans=config.delete_orphan_stories,
    )
