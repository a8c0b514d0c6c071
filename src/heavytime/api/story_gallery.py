"""Story gallery listing helpers for the Heavytime Stories API.

This module keeps the list/pagination logic for ``GET /api/stories`` out of
``heavytime.api.main`` so route handlers can focus on HTTP concerns while the
listing rules stay testable as a small unit.

The gallery is intentionally simple:

- every story row is listed, including stories whose optional artifacts
  (narration, comic) are missing
- list order is reverse-chronological (newest first), as returned by
  :meth:`~heavytime.core.story_db.StoryDB.list_stories`
"""

from __future__ import annotations

from heavytime.core.story_db import Story


def filter_stories(stories: list[Story], *, complete_only: bool = False) -> list[Story]:
    """Optionally keep only stories that have a poem.

    Stories without a poem are rows whose poem step failed.  They stay in
    the store but can be hidden from the gallery.

    Args:
        stories: Source stories.
        complete_only: Whether to drop stories without ``poem_text``.

    Returns:
        Filtered stories in their original order.
    """
    if not complete_only:
        return stories
    return [story for story in stories if story.poem_text]


def paginate_stories(stories: list[Story], page: int, per_page: int) -> dict:
    """Paginate stories and clamp the requested page to valid bounds.

    Args:
        stories: Stories to paginate, already in display order.
        page: Requested one-based page number.
        per_page: Requested items per page (at least 1).

    Returns:
        Dictionary containing ``total``, ``page``, ``per_page``, ``pages``, and
        ``stories`` (as dictionaries) for the resolved page.
    """
    per_page = max(per_page, 1)
    total = len(stories)
    pages = (total + per_page - 1) // per_page if total > 0 else 1
    resolved_page = min(max(page, 1), pages)

    start = (resolved_page - 1) * per_page
    end = start + per_page

    return {
        "total": total,
        "page": resolved_page,
        "per_page": per_page,
        "pages": pages,
        "stories": [story.to_dict() for story in stories[start:end]],
    }
