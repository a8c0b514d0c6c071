"""Claude poem adapter.

Turns a photo and a title into a short poem with the Anthropic Messages API.

Request Shape
-------------
- **system**: the fixed style guide from :mod:`heavytime.core.prompt_builder`
- **user content**: the photo as a base64 image block, then the title as text
- **model / max_tokens**: ``config.poem_model`` / ``config.poem_max_tokens``

The photo is downloaded by this adapter (the vision API takes image bytes,
not URLs) and its media type is taken from the response ``Content-Type``.

Usage Example
-------------
    >>> from heavytime.core.adapters.claude_poem import ClaudePoemAdapter
    >>> from heavytime.core.config import config
    >>>
    >>> poet = ClaudePoemAdapter(config)
    >>> result = poet.generate(image_url="https://x/a.jpg", title="Morning")
    >>> print(result.poem)
"""

import base64
import logging
from dataclasses import dataclass

import anthropic
import requests

from heavytime.core.config import HeavytimeConfig
from heavytime.core.errors import ImageFetchError, PoemGenerationError
from heavytime.core.prompt_builder import POEM_STYLE_GUIDE, guess_media_type
from heavytime.core.service_adapters import ServiceAdapterBase, service_registry

logger = logging.getLogger(__name__)


@dataclass
class PoemResult:
    poem: str
    title: str


@dataclass
class SourceImage:
    """Downloaded photo ready to send to the vision API."""

    data: str  # base64
    media_type: str


class ClaudePoemAdapter(ServiceAdapterBase):
    """Service adapter for poem generation with Claude vision.

    Fails with :class:`PoemGenerationError` when the API key is missing,
    the Messages API call fails, or the reply has no text.  A photo that
    cannot be downloaded raises the :class:`ImageFetchError` subclass.
    """

    name = "Claude Poem"
    description = "Short experimental poem from a photo and a title"
    service_type = "poem"
    version = "1.0.0"

    def __init__(self, config: HeavytimeConfig, client: anthropic.Anthropic | None = None) -> None:
        super().__init__(config)
        self._client = client

    @property
    def is_configured(self) -> bool:
        return self._client is not None or self.config.anthropic_configured

    @property
    def client(self) -> anthropic.Anthropic:
        if self._client is None:
            if not self.config.anthropic_configured:
                raise PoemGenerationError("ANTHROPIC_API_KEY is not configured")
            self._client = anthropic.Anthropic(api_key=self.config.anthropic_api_key)
        return self._client

    def fetch_image(self, image_url: str) -> SourceImage:
        """Download the source photo and base64-encode it.

        Raises:
            ImageFetchError: If the download fails or returns a non-2xx status
        """
        try:
            response = requests.get(image_url, timeout=self.config.image_fetch_timeout)
        except requests.RequestException as e:
            logger.error(f"Error fetching image {image_url}: {e}")
            raise ImageFetchError(f"Could not download {image_url}: {e}") from e

        if not response.ok:
            logger.error(f"Error fetching image {image_url}: HTTP {response.status_code}")
            raise ImageFetchError(f"Could not download {image_url}: HTTP {response.status_code}")

        return SourceImage(
            data=base64.b64encode(response.content).decode("utf-8"),
            media_type=guess_media_type(response.headers.get("content-type")),
        )

    def generate(self, image_url: str, title: str) -> PoemResult:
        """Write a poem for a photo.

        Args:
            image_url: Public URL of the source photo
            title: Story title supplied by the user

        Returns:
            The poem text and the title it was written for

        Raises:
            PoemGenerationError: If the poem cannot be produced
        """
        client = self.client
        image = self.fetch_image(image_url)

        logger.info(f"Requesting poem for {title!r} from {self.config.poem_model}")
        try:
            message = client.messages.create(
                model=self.config.poem_model,
                max_tokens=self.config.poem_max_tokens,
                system=POEM_STYLE_GUIDE,
                messages=[
                    {
                        "role": "user",
                        "content": [
                            {
                                "type": "image",
                                "source": {
                                    "type": "base64",
                                    "media_type": image.media_type,
                                    "data": image.data,
                                },
                            },
                            {"type": "text", "text": title},
                        ],
                    }
                ],
            )
        except anthropic.APIError as e:
            logger.error(f"Anthropic API error for {title!r}: {e}")
            raise PoemGenerationError(f"Anthropic API error: {e}") from e

        poem = ""
        if message.content and message.content[0].type == "text":
            poem = message.content[0].text.strip()

        if not poem:
            logger.error(f"No poem text in response for {title!r}")
            raise PoemGenerationError("No poem text received from Anthropic")

        logger.info(f"Generated poem for {title!r} ({len(poem.splitlines())} lines)")
        return PoemResult(poem=poem, title=title)


service_registry.register(ClaudePoemAdapter)
