"""SQLite database for generated stories."""

import logging
import sqlite3
import uuid
from dataclasses import asdict, dataclass
from datetime import datetime, timezone
from pathlib import Path

from .errors import PersistenceError

logger = logging.getLogger(__name__)

# Columns that the story workflow may fill in after creation.
UPDATABLE_FIELDS = frozenset({"poem_text", "poem_audio", "comic_image"})

_COLUMNS = "id, title, camera_image, poem_text, poem_audio, comic_image, created_at"


@dataclass
class Story:
    """One row of the ``story`` table."""

    id: str
    title: str
    camera_image: str
    poem_text: str | None = None
    poem_audio: str | None = None
    comic_image: str | None = None
    created_at: str | None = None

    def to_dict(self) -> dict:
        return asdict(self)


class StoryDB:
    """Manage the story table using SQLite.

    Holds one row per generated story.  The store assigns ``id`` and
    ``created_at``; the title and source photo are written once at creation
    and the derived fields (poem, narration, comic) are filled in later.

    Unlike a cache, a rejected read or write here is a real failure for the
    caller, so every ``sqlite3.Error`` is logged and re-raised as
    :class:`PersistenceError`.
    """

    def __init__(self, db_path: Path):
        """Initialize the story database.

        Args:
            db_path: Path to SQLite database file
        """
        self.db_path = Path(db_path)
        self.db_path.parent.mkdir(parents=True, exist_ok=True)
        self._initialize_db()
        logger.info(f"Initialized story database at {self.db_path}")

    def _connect(self) -> sqlite3.Connection:
        conn = sqlite3.connect(self.db_path)
        conn.row_factory = sqlite3.Row
        return conn

    def _initialize_db(self) -> None:
        """Create database schema if it doesn't exist."""
        try:
            with self._connect() as conn:
                cursor = conn.cursor()

                cursor.execute("""
                    CREATE TABLE IF NOT EXISTS story (
                        id TEXT PRIMARY KEY,
                        title TEXT NOT NULL CHECK (length(trim(title)) > 0),
                        camera_image TEXT NOT NULL,
                        poem_text TEXT,
                        poem_audio TEXT,
                        comic_image TEXT,
                        created_at TEXT NOT NULL
                    )
                    """)

                # Story list is always read newest first
                cursor.execute("""
                    CREATE INDEX IF NOT EXISTS idx_story_created_at
                    ON story(created_at DESC)
                    """)

                conn.commit()
        except sqlite3.Error as e:
            logger.error(f"Error initializing story database {self.db_path}: {e}")
            raise PersistenceError(f"Could not initialize story database: {e}") from e

    @staticmethod
    def _row_to_story(row: sqlite3.Row) -> Story:
        return Story(**dict(row))

    def create_story(self, title: str, camera_image: str) -> Story:
        """Insert a new story with all derived fields absent.

        Args:
            title: Story title (must be non-empty)
            camera_image: URL of the source photo

        Returns:
            The created story

        Raises:
            PersistenceError: If the insert is rejected
        """
        story = Story(
            id=str(uuid.uuid4()),
            title=title,
            camera_image=camera_image,
            created_at=datetime.now(timezone.utc).isoformat(),
        )

        try:
            with self._connect() as conn:
                conn.execute(
                    """
                    INSERT INTO story (id, title, camera_image, poem_text, poem_audio,
                                       comic_image, created_at)
                    VALUES (?, ?, ?, NULL, NULL, NULL, ?)
                    """,
                    (story.id, story.title, story.camera_image, story.created_at),
                )
                conn.commit()
        except sqlite3.Error as e:
            logger.error(f"Error creating story '{title}': {e}")
            raise PersistenceError(f"Failed to create story: {e}") from e

        logger.info(f"Created story {story.id}: {title!r}")
        return story

    def update_story(self, story_id: str, **fields: str | None) -> Story:
        """Set one or more derived fields on an existing story.

        Args:
            story_id: ID of the story to update
            **fields: Any of ``poem_text``, ``poem_audio``, ``comic_image``

        Returns:
            The story as stored after the update

        Raises:
            PersistenceError: If a field is not updatable, the story does not
                exist, or the write is rejected
        """
        if not fields:
            raise PersistenceError("No fields given to update")

        unknown = set(fields) - UPDATABLE_FIELDS
        if unknown:
            raise PersistenceError(f"Fields cannot be updated: {', '.join(sorted(unknown))}")

        # Column names come from UPDATABLE_FIELDS, never from user input
        assignments = ", ".join(f"{name} = ?" for name in fields)

        try:
            with self._connect() as conn:
                cursor = conn.execute(
                    f"UPDATE story SET {assignments} WHERE id = ?",
                    (*fields.values(), story_id),
                )
                conn.commit()
                updated = cursor.rowcount > 0
        except sqlite3.Error as e:
            logger.error(f"Error updating story {story_id}: {e}")
            raise PersistenceError(f"Failed to update story: {e}") from e

        if not updated:
            raise PersistenceError(f"Story not found: {story_id}")

        logger.debug(f"Updated story {story_id}: {sorted(fields)}")
        story = self.get_story(story_id)
        if story is None:
            raise PersistenceError(f"Story not found: {story_id}")
        return story

    def get_story(self, story_id: str) -> Story | None:
        """Get a story by its ID.

        Returns:
            The story, or None if it does not exist
        """
        try:
            with self._connect() as conn:
                row = conn.execute(
                    f"SELECT {_COLUMNS} FROM story WHERE id = ? LIMIT 1",
                    (story_id,),
                ).fetchone()
        except sqlite3.Error as e:
            logger.error(f"Error reading story {story_id}: {e}")
            raise PersistenceError(f"Failed to fetch story: {e}") from e

        return self._row_to_story(row) if row is not None else None

    def list_stories(self, limit: int | None = None) -> list[Story]:
        """Get all stories, newest first.

        Args:
            limit: Maximum number of stories to return (None = all)
        """
        query = f"SELECT {_COLUMNS} FROM story ORDER BY created_at DESC"
        params: tuple = ()
        if limit is not None:
            query += " LIMIT ?"
            params = (limit,)

        try:
            with self._connect() as conn:
                rows = conn.execute(query, params).fetchall()
        except sqlite3.Error as e:
            logger.error(f"Error listing stories: {e}")
            raise PersistenceError(f"Failed to fetch stories: {e}") from e

        return [self._row_to_story(row) for row in rows]

    def count_stories(self) -> int:
        try:
            with self._connect() as conn:
                result = conn.execute("SELECT COUNT(*) FROM story").fetchone()
        except sqlite3.Error as e:
            logger.error(f"Error counting stories: {e}")
            raise PersistenceError(f"Failed to count stories: {e}") from e
        return result[0] if result else 0

    def delete_story(self, story_id: str) -> bool:
        """Delete a story.

        Returns:
            True if a row was deleted, False if the story did not exist
        """
        try:
            with self._connect() as conn:
                cursor = conn.execute("DELETE FROM story WHERE id = ?", (story_id,))
                conn.commit()
                was_deleted = cursor.rowcount > 0
        except sqlite3.Error as e:
            logger.error(f"Error deleting story {story_id}: {e}")
            raise PersistenceError(f"Failed to delete story: {e}") from e

        if was_deleted:
            logger.info(f"Deleted story {story_id}")
        else:
            logger.debug(f"Story not found for delete: {story_id}")
        return was_deleted
