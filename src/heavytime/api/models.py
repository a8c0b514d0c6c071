"""Pydantic request models for the Heavytime Stories API.

The JSON bodies use the camelCase names of the original web client
(``imageUrl``, ``storyId``); the Python attributes are snake_case.

Every field is optional at the schema level.  Route handlers check for
missing values themselves so that a missing field produces the API's
``{"error": ...}`` envelope with status 400 rather than FastAPI's default
422 response.

Models
------
GeneratePoemRequest
    Payload for ``POST /api/generate-poem``.
GenerateAudioRequest
    Payload for ``POST /api/generate-audio``.
GenerateComicRequest
    Payload for ``POST /api/generate-comic``.
CreateStoryRequest
    Payload for ``POST /api/stories``, which runs the full story workflow.
"""

from __future__ import annotations

from pydantic import BaseModel, ConfigDict, Field

from heavytime.core.errors import ValidationError


class _ApiRequest(BaseModel):
    model_config = ConfigDict(populate_by_name=True)

    def require(self, *names: str) -> None:
        """Raise :class:`ValidationError` if any named field is missing or blank.

        The message lists the JSON names of the required fields, e.g.
        ``"Missing imageUrl or title"``.
        """
        missing = [name for name in names if not (getattr(self, name) or "").strip()]
        if missing:
            aliases = [type(self).model_fields[name].alias or name for name in names]
            if len(aliases) == 1:
                listed = aliases[0]
            elif len(aliases) == 2:
                listed = " or ".join(aliases)
            else:
                listed = ", ".join(aliases[:-1]) + ", or " + aliases[-1]
            raise ValidationError(f"Missing {listed}", summary=f"Missing {listed}")


class GeneratePoemRequest(_ApiRequest):
    """Request body for ``POST /api/generate-poem``.

    Attributes:
        image_url: Public URL of the source photo (JSON ``imageUrl``).
        title: Story title the poem is written for.
    """

    image_url: str | None = Field(default=None, alias="imageUrl")
    title: str | None = Field(default=None)


class GenerateAudioRequest(_ApiRequest):
    """Request body for ``POST /api/generate-audio``.

    Attributes:
        text: Poem text to narrate.
        story_id: Story the narration belongs to (JSON ``storyId``).
    """

    text: str | None = Field(default=None)
    story_id: str | None = Field(default=None, alias="storyId")


class GenerateComicRequest(_ApiRequest):
    """Request body for ``POST /api/generate-comic``.

    Attributes:
        poem: Poem text used as narrative inspiration.
        image_url: Public URL of the source photo (JSON ``imageUrl``).
        story_id: Story the comic belongs to (JSON ``storyId``).
    """

    poem: str | None = Field(default=None)
    image_url: str | None = Field(default=None, alias="imageUrl")
    story_id: str | None = Field(default=None, alias="storyId")


class CreateStoryRequest(_ApiRequest):
    """Request body for ``POST /api/stories``.

    Attributes:
        title: Story title (trimmed before it is stored).
        image_url: Public URL of the selected photo (JSON ``imageUrl``).
    """

    title: str | None = Field(default=None)
    image_url: str | None = Field(default=None, alias="imageUrl")
