"""Event handlers for the Heavytime UI.

Handlers are plain functions: they take component values plus the session
:class:`UIState` and return component values plus the updated state, so
they can be called directly in tests.
"""

import logging
from datetime import date

import gradio as gr

from heavytime.core.errors import HeavytimeError, PersistenceError, ValidationError
from heavytime.core.story_db import Story

from .formatting import (
    format_date_for_folder,
    format_date_heading,
    format_story_choice,
    format_story_markdown,
    shift_date,
)
from .models import NO_SELECTION_TEXT, NO_STORY_TEXT, UIState
from .state import initialize_ui_state

logger = logging.getLogger(__name__)


# ---------------------------------------------------------------------------
# Today tab
# ---------------------------------------------------------------------------


def load_day(state: UIState) -> tuple[str, list[str], str, UIState]:
    """List the photos of the selected day.

    A failed listing shows an empty gallery and a notice; it is never an error.

    Args:
        state: UI state

    Returns:
        Tuple of (date_heading, gallery_urls, selection_markdown, updated_state)
    """
    state = initialize_ui_state(state)
    day = state.current_date
    folder = format_date_for_folder(day)

    listing = state.image_lister.list_images(folder)
    state.day_images = listing.images
    state.selected_image = None

    if listing.error:
        notice = f"⚠️ Could not load photos for {folder}"
    elif not listing.images:
        notice = f"*No photos for {folder}*"
    else:
        notice = NO_SELECTION_TEXT

    logger.info(f"Loaded {listing.count} photos for {folder}")
    return format_date_heading(day), listing.images, notice, state


def navigate_day(offset: int, state: UIState) -> tuple[str, list[str], str, UIState]:
    """Move the week strip by ``offset`` days and reload the gallery."""
    state = initialize_ui_state(state)
    state.current_date = shift_date(state.current_date, offset)
    return load_day(state)


def go_to_today(state: UIState) -> tuple[str, list[str], str, UIState]:
    state = initialize_ui_state(state)
    state.current_date = date.today()
    return load_day(state)


def select_day_image(evt: gr.SelectData, state: UIState) -> tuple[str | None, str, UIState]:
    """Remember the photo chosen in the gallery.

    Args:
        evt: Gradio SelectData event containing the selected index
        state: UI state

    Returns:
        Tuple of (selected_photo_url, selection_markdown, updated_state)
    """
    index = evt.index
    if not state.day_images or index is None or index >= len(state.day_images):
        state.selected_image = None
        return None, NO_SELECTION_TEXT, state

    state.selected_image = state.day_images[index]
    return state.selected_image, "**Photo selected.** Give the story a title.", state


def create_story_from_selection(
    title: str, state: UIState
) -> tuple[str, str, str | None, str | None, str | None, UIState]:
    """Run the story workflow for the selected photo.

    On failure the title and selection are kept so the user can retry.

    Args:
        title: Story title from the dialog
        state: UI state

    Returns:
        Tuple of (status_markdown, story_markdown, audio_url, comic_url,
        photo_url, updated_state)
    """
    state = initialize_ui_state(state)

    if not state.selected_image:
        return "❌ Select a photo first", NO_STORY_TEXT, None, None, None, state
    if not title or not title.strip():
        return "❌ Enter a title for the story", NO_STORY_TEXT, None, None, None, state

    try:
        result = state.workflow.create_story(title, state.selected_image)
    except ValidationError as e:
        logger.warning(f"Validation error: {e}")
        return f"❌ **Validation Error**\n\n{e}", NO_STORY_TEXT, None, None, None, state
    except HeavytimeError as e:
        logger.error(f"Story creation failed: {e}")
        return f"❌ **{e.summary}**\n\n{e}", NO_STORY_TEXT, None, None, None, state

    story = result.story
    status = f"✅ Created **{story.title}**"
    skipped = []
    if not result.audio.persisted:
        skipped.append("narration")
    if not result.comic.persisted:
        skipped.append("comic")
    if skipped:
        status += f" (without {' and '.join(skipped)})"

    return (status, *story_detail(story), state)


# ---------------------------------------------------------------------------
# Stories tab
# ---------------------------------------------------------------------------


def story_detail(story: Story) -> tuple[str, str | None, str | None, str | None]:
    """Component values for the detail view.

    Returns:
        Tuple of (story_markdown, audio_url, comic_url, photo_url)
    """
    return (
        format_story_markdown(story),
        story.poem_audio or None,
        story.comic_image or None,
        story.camera_image or None,
    )


def refresh_stories(state: UIState) -> tuple[gr.update, UIState]:
    """Reload the story list, newest first.

    Returns:
        Tuple of (dropdown_update, updated_state)
    """
    state = initialize_ui_state(state)
    try:
        stories = state.store.list_stories()
    except PersistenceError as e:
        logger.error(f"Failed to list stories: {e}")
        stories = []

    choices = [(format_story_choice(story), story.id) for story in stories]
    return gr.update(choices=choices, value=None), state


def select_story(
    story_id: str | None, state: UIState
) -> tuple[str, str | None, str | None, str | None, UIState]:
    """Show one story in the detail view.

    Returns:
        Tuple of (story_markdown, audio_url, comic_url, photo_url, updated_state)
    """
    if not story_id:
        return NO_STORY_TEXT, None, None, None, state

    state = initialize_ui_state(state)
    try:
        story = state.store.get_story(story_id)
    except PersistenceError as e:
        logger.error(f"Failed to load story {story_id}: {e}")
        return f"❌ Could not load story: {e}", None, None, None, state

    if story is None:
        return "*Story not found*", None, None, None, state

    return (*story_detail(story), state)
