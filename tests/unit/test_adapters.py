"""Tests for the hosted service adapters and their registry.

No network access: the Anthropic client, ``requests.get`` and the fal.ai
client are replaced by mocks.
"""

from __future__ import annotations

import base64
from types import SimpleNamespace
from unittest.mock import MagicMock

import anthropic
import fal_client
import httpx
import pytest
import requests

from heavytime.core.adapters import (
    ClaudePoemAdapter,
    MinimaxSpeechAdapter,
    NanoBananaComicAdapter,
)
from heavytime.core.errors import (
    AudioGenerationError,
    ComicGenerationError,
    ImageFetchError,
    PoemGenerationError,
)
from heavytime.core.prompt_builder import build_comic_prompt, guess_media_type
from heavytime.core.service_adapters import service_registry

PHOTO_URL = "https://mypublicbucket.t3.storage.dev/art173/heavytime/2025-10-24/a.jpg"


def _photo_response(content: bytes = b"jpeg-bytes", content_type: str = "image/jpeg", ok=True):
    return SimpleNamespace(
        ok=ok,
        status_code=200 if ok else 404,
        content=content,
        headers={"content-type": content_type},
    )


def _message(*blocks):
    return SimpleNamespace(content=list(blocks))


@pytest.fixture
def fake_photo(monkeypatch):
    """Patch the photo download and record the URLs requested."""
    requested = []

    def fake_get(url, timeout=None):
        requested.append(url)
        return _photo_response(content_type="image/png")

    monkeypatch.setattr("heavytime.core.adapters.claude_poem.requests.get", fake_get)
    return requested


# ---------------------------------------------------------------------------
# Registry.
# ---------------------------------------------------------------------------


class TestServiceRegistry:
    def test_all_adapters_registered(self):
        available = service_registry.list_available()
        assert "Claude Poem" in available
        assert "Minimax Speech" in available
        assert "Nano Banana Comic" in available

    def test_instantiate_by_name(self, test_config):
        adapter = service_registry.instantiate("Minimax Speech", test_config)
        assert isinstance(adapter, MinimaxSpeechAdapter)
        assert adapter.config is test_config

    def test_instantiate_unknown(self, test_config):
        with pytest.raises(KeyError, match="not found"):
            service_registry.instantiate("Nope", test_config)

    def test_adapters_by_type(self):
        comic = service_registry.get_adapters_by_type("comic")
        assert [info["name"] for info in comic] == ["Nano Banana Comic"]

    def test_adapter_info_reports_configuration(self, test_config):
        info = ClaudePoemAdapter(test_config).get_adapter_info()
        assert info["service_type"] == "poem"
        assert info["is_configured"] is False


# ---------------------------------------------------------------------------
# Poem adapter.
# ---------------------------------------------------------------------------


class TestClaudePoemAdapter:
    def test_generate_sends_image_and_title(self, test_config, fake_photo):
        """The photo goes as a base64 image block followed by the title."""
        client = MagicMock()
        client.messages.create.return_value = _message(
            SimpleNamespace(type="text", text="  light on water\nthe day begins \n")
        )
        adapter = ClaudePoemAdapter(test_config, client=client)

        result = adapter.generate(image_url=PHOTO_URL, title="Morning")

        assert result.poem == "light on water\nthe day begins"
        assert result.title == "Morning"
        assert fake_photo == [PHOTO_URL]

        kwargs = client.messages.create.call_args.kwargs
        assert kwargs["model"] == "claude-sonnet-4-5"
        assert kwargs["max_tokens"] == 1024
        image_block, text_block = kwargs["messages"][0]["content"]
        assert image_block["source"]["media_type"] == "image/png"
        assert base64.b64decode(image_block["source"]["data"]) == b"jpeg-bytes"
        assert text_block == {"type": "text", "text": "Morning"}

    def test_photo_download_failure(self, test_config, monkeypatch):
        def failing_get(url, timeout=None):
            raise requests.ConnectionError("unreachable")

        monkeypatch.setattr("heavytime.core.adapters.claude_poem.requests.get", failing_get)
        client = MagicMock()
        adapter = ClaudePoemAdapter(test_config, client=client)

        with pytest.raises(ImageFetchError):
            adapter.generate(image_url=PHOTO_URL, title="Morning")
        client.messages.create.assert_not_called()

    def test_photo_http_error(self, test_config, monkeypatch):
        monkeypatch.setattr(
            "heavytime.core.adapters.claude_poem.requests.get",
            lambda url, timeout=None: _photo_response(ok=False),
        )
        adapter = ClaudePoemAdapter(test_config, client=MagicMock())

        with pytest.raises(ImageFetchError, match="404"):
            adapter.generate(image_url=PHOTO_URL, title="Morning")

    def test_image_fetch_error_is_a_poem_error(self):
        assert issubclass(ImageFetchError, PoemGenerationError)

    def test_api_error(self, test_config, fake_photo):
        client = MagicMock()
        client.messages.create.side_effect = anthropic.APIConnectionError(
            request=httpx.Request("POST", "https://api.anthropic.com/v1/messages")
        )
        adapter = ClaudePoemAdapter(test_config, client=client)

        with pytest.raises(PoemGenerationError, match="Anthropic API error"):
            adapter.generate(image_url=PHOTO_URL, title="Morning")

    @pytest.mark.parametrize(
        "blocks",
        [
            (),
            (SimpleNamespace(type="tool_use", id="x"),),
            (SimpleNamespace(type="text", text="   "),),
        ],
    )
    def test_no_text_in_reply(self, test_config, fake_photo, blocks):
        client = MagicMock()
        client.messages.create.return_value = _message(*blocks)
        adapter = ClaudePoemAdapter(test_config, client=client)

        with pytest.raises(PoemGenerationError, match="No poem text"):
            adapter.generate(image_url=PHOTO_URL, title="Morning")

    def test_missing_api_key(self, test_config, fake_photo):
        adapter = ClaudePoemAdapter(test_config)

        assert adapter.is_configured is False
        with pytest.raises(PoemGenerationError, match="ANTHROPIC_API_KEY"):
            adapter.generate(image_url=PHOTO_URL, title="Morning")
        assert fake_photo == []


class TestMediaTypes:
    @pytest.mark.parametrize(
        "content_type, expected",
        [
            ("image/png", "image/png"),
            ("image/gif", "image/gif"),
            ("image/webp; charset=binary", "image/webp"),
            ("image/jpeg", "image/jpeg"),
            ("application/octet-stream", "image/jpeg"),
            (None, "image/jpeg"),
        ],
    )
    def test_guess_media_type(self, content_type, expected):
        assert guess_media_type(content_type) == expected


# ---------------------------------------------------------------------------
# fal.ai adapters.
# ---------------------------------------------------------------------------


def _fal_client(result: dict | None = None, error: Exception | None = None) -> MagicMock:
    """Mock SyncClient whose subscribe reports a request id, then returns or raises."""
    client = MagicMock()

    def subscribe(application, arguments, with_logs, on_enqueue, on_queue_update):
        on_enqueue("req-123")
        on_queue_update(fal_client.InProgress(logs=[{"message": "working"}]))
        if error is not None:
            raise error
        return result

    client.subscribe.side_effect = subscribe
    return client


class TestMinimaxSpeechAdapter:
    def test_generate_returns_audio(self, test_config):
        client = _fal_client({"audio": {"url": "https://cdn/a.mp3"}, "duration_ms": 4200})
        adapter = MinimaxSpeechAdapter(test_config, client=client)

        result = adapter.generate(text="light on water")

        assert result.audio_url == "https://cdn/a.mp3"
        assert result.duration_ms == 4200
        assert result.request_id == "req-123"

    def test_fixed_voice_settings(self, test_config):
        client = _fal_client({"audio": {"url": "https://cdn/a.mp3"}})
        MinimaxSpeechAdapter(test_config, client=client).generate(text="a poem")

        application = client.subscribe.call_args.args[0]
        arguments = client.subscribe.call_args.kwargs["arguments"]
        assert application == "fal-ai/minimax/preview/speech-2.5-hd"
        assert arguments == {
            "text": "a poem",
            "voice_setting": {
                "voice_id": "Voice2c1bd04c1761210837",
                "speed": 1.0,
                "vol": 1.5,
                "pitch": 0,
            },
            "output_format": "url",
        }

    def test_missing_audio_url(self, test_config):
        adapter = MinimaxSpeechAdapter(test_config, client=_fal_client({"audio": {}}))
        with pytest.raises(AudioGenerationError, match="No audio URL"):
            adapter.generate(text="a poem")

    def test_request_failure(self, test_config):
        client = _fal_client(error=RuntimeError("queue timeout"))
        adapter = MinimaxSpeechAdapter(test_config, client=client)
        with pytest.raises(AudioGenerationError, match="queue timeout"):
            adapter.generate(text="a poem")

    def test_missing_key(self, test_config):
        adapter = MinimaxSpeechAdapter(test_config)
        assert adapter.is_configured is False
        with pytest.raises(AudioGenerationError, match="FAL_KEY"):
            adapter.generate(text="a poem")


class TestNanoBananaComicAdapter:
    def test_generate_returns_comic(self, test_config):
        client = _fal_client(
            {"images": [{"url": "https://cdn/c.jpg"}], "description": "Four panels"}
        )
        adapter = NanoBananaComicAdapter(test_config, client=client)

        result = adapter.generate(poem="light on water", image_url=PHOTO_URL)

        assert result.comic_url == "https://cdn/c.jpg"
        assert result.description == "Four panels"
        assert result.request_id == "req-123"

    def test_request_arguments(self, test_config):
        """The photo is passed by URL and exactly one image is requested."""
        client = _fal_client({"images": [{"url": "https://cdn/c.jpg"}]})
        NanoBananaComicAdapter(test_config, client=client).generate(
            poem="light on water", image_url=PHOTO_URL
        )

        assert client.subscribe.call_args.args[0] == "fal-ai/nano-banana/edit"
        arguments = client.subscribe.call_args.kwargs["arguments"]
        assert arguments["image_urls"] == [PHOTO_URL]
        assert arguments["num_images"] == 1
        assert arguments["output_format"] == "jpeg"
        assert arguments["prompt"] == build_comic_prompt("light on water")
        assert "light on water" in arguments["prompt"]

    @pytest.mark.parametrize("data", [{}, {"images": []}, {"images": [{"url": ""}]}])
    def test_no_image_returned(self, test_config, data):
        adapter = NanoBananaComicAdapter(test_config, client=_fal_client(data))
        with pytest.raises(ComicGenerationError, match="No comic image"):
            adapter.generate(poem="p", image_url=PHOTO_URL)

    def test_request_failure(self, test_config):
        client = _fal_client(error=RuntimeError("content policy"))
        adapter = NanoBananaComicAdapter(test_config, client=client)
        with pytest.raises(ComicGenerationError):
            adapter.generate(poem="p", image_url=PHOTO_URL)
