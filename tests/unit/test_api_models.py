"""Tests for heavytime.api.models — request body models."""

from __future__ import annotations

import pytest

from heavytime.api.models import (
    CreateStoryRequest,
    GenerateAudioRequest,
    GenerateComicRequest,
    GeneratePoemRequest,
)
from heavytime.core.errors import ValidationError


class TestAliases:
    def test_camel_case_json_names(self):
        """Bodies use the web client's camelCase names."""
        req = GenerateComicRequest.model_validate(
            {"poem": "p", "imageUrl": "https://x/a.jpg", "storyId": "s1"}
        )
        assert req.image_url == "https://x/a.jpg"
        assert req.story_id == "s1"

    def test_snake_case_names_accepted(self):
        req = GeneratePoemRequest(image_url="https://x/a.jpg", title="Morning")
        assert req.image_url == "https://x/a.jpg"

    def test_all_fields_optional(self):
        """Empty bodies parse; missing fields are reported by require()."""
        assert CreateStoryRequest.model_validate({}).title is None


class TestRequire:
    def test_complete_request_passes(self):
        GenerateAudioRequest(text="a poem", story_id="s1").require("text", "story_id")

    @pytest.mark.parametrize(
        "body",
        [{}, {"imageUrl": "https://x/a.jpg"}, {"title": "Morning"}, {"imageUrl": "", "title": "T"}],
    )
    def test_poem_missing_fields(self, body):
        req = GeneratePoemRequest.model_validate(body)
        with pytest.raises(ValidationError) as exc_info:
            req.require("image_url", "title")
        assert exc_info.value.summary == "Missing imageUrl or title"
        assert exc_info.value.status_code == 400

    def test_audio_message(self):
        with pytest.raises(ValidationError, match="Missing text or storyId"):
            GenerateAudioRequest(text="p").require("text", "story_id")

    def test_comic_message_lists_three_fields(self):
        with pytest.raises(ValidationError, match="Missing poem, imageUrl, or storyId"):
            GenerateComicRequest(poem="p").require("poem", "image_url", "story_id")

    def test_blank_string_counts_as_missing(self):
        with pytest.raises(ValidationError):
            CreateStoryRequest(title="   ", image_url="https://x/a.jpg").require(
                "title", "image_url"
            )
