"""Data models for Heavytime UI session state."""

from dataclasses import dataclass, field
from datetime import date
from typing import Any


@dataclass
class UIState:
    """Session state for the Gradio UI.

    Each user gets their own UIState instance, so the selected day, the
    listed photos and the selected photo never leak between sessions.

    Attributes
    ----------
    store : Any | None
        StoryDB instance
    image_lister : Any | None
        ImageLister instance for the daily photo folders
    workflow : Any | None
        StoryWorkflow instance used by the Create button
    current_date : date | None
        Day shown by the week strip (today on first load)
    day_images : list[str]
        Photo URLs of ``current_date``
    selected_image : str | None
        Photo chosen for the next story
    """

    # Services
    store: Any | None = None  # StoryDB instance
    image_lister: Any | None = None  # ImageLister instance
    workflow: Any | None = None  # StoryWorkflow instance

    # Today tab
    current_date: date | None = None
    day_images: list[str] = field(default_factory=list)
    selected_image: str | None = None

    def is_initialized(self) -> bool:
        """Check if the store, lister and workflow are set up."""
        return (
            self.store is not None
            and self.image_lister is not None
            and self.workflow is not None
        )

    def __repr__(self) -> str:
        """String representation for debugging."""
        return (
            f"UIState(initialized={self.is_initialized()}, "
            f"date={self.current_date}, "
            f"images={len(self.day_images)})"
        )


# UI Constants
NO_SELECTION_TEXT = "*Select a photo to begin*"
NO_STORY_TEXT = "*Select a story to read it*"
