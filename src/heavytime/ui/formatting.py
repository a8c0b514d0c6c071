"""Pure formatting helpers for the Heavytime UI.

Nothing here touches Gradio, the store or the network, so every helper can
be tested with plain values.
"""

from __future__ import annotations

from datetime import date, datetime, timedelta

from heavytime.core.story_db import Story


def format_date_parts(day: date) -> dict[str, str]:
    """Split a day into the pieces shown by the week strip.

    >>> format_date_parts(date(2025, 10, 24))
    {'month': 'Oct', 'day_number': '24', 'year': '2025', 'weekday': 'Friday'}
    """
    return {
        "month": day.strftime("%b"),
        "day_number": str(day.day),
        "year": str(day.year),
        "weekday": day.strftime("%A"),
    }


def format_date_for_folder(day: date) -> str:
    """Return the ``YYYY-MM-DD`` key used for the daily photo folder."""
    return day.strftime("%Y-%m-%d")


def shift_date(day: date, days: int) -> date:
    """Move ``day`` by a number of days (negative goes back)."""
    return day + timedelta(days=days)


def is_today(day: date, today: date | None = None) -> bool:
    return day == (today or date.today())


def format_date_heading(day: date, today: date | None = None) -> str:
    """Markdown heading for the selected day, e.g. ``## Friday, Oct 24 2025``."""
    parts = format_date_parts(day)
    heading = f"## {parts['weekday']}, {parts['month']} {parts['day_number']} {parts['year']}"
    if is_today(day, today):
        heading += " · Today"
    return heading


def format_created_at(created_at: str | None) -> str:
    """Render a stored ISO timestamp as ``Oct 24, 2025``.

    Unparseable values are returned unchanged; a missing value gives "".
    """
    if not created_at:
        return ""
    try:
        moment = datetime.fromisoformat(created_at)
    except ValueError:
        return created_at
    return f"{moment.strftime('%b')} {moment.day}, {moment.year}"


def format_story_markdown(story: Story) -> str:
    """Markdown for the story detail view: title, date and poem.

    Narration, comic and photo are shown by their own components.
    """
    lines = [f"## {story.title}"]

    created = format_created_at(story.created_at)
    if created:
        lines.append(f"*{created}*")

    lines.append("")
    if story.poem_text:
        # Keep the poem's line breaks in Markdown
        lines.append("  \n".join(story.poem_text.splitlines()))
    else:
        lines.append("*No poem was generated for this story.*")

    missing = []
    if not story.poem_audio:
        missing.append("narration")
    if not story.comic_image:
        missing.append("comic")
    if story.poem_text and missing:
        lines.append("")
        lines.append(f"*Not available: {', '.join(missing)}*")

    return "\n".join(lines)


def format_story_choice(story: Story) -> str:
    """Label of a story in the Stories tab list."""
    created = format_created_at(story.created_at)
    return f"{story.title} ({created})" if created else story.title
