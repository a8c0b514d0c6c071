"""Nano Banana comic adapter.

Turns the source photo into a four-panel manga strip with the fal.ai Nano
Banana image-editing application.  The photo is passed by URL and the poem
is wrapped in the fixed comic prompt; exactly one output image is requested.
"""

import logging
from dataclasses import dataclass

from heavytime.core.errors import ComicGenerationError
from heavytime.core.prompt_builder import build_comic_prompt
from heavytime.core.service_adapters import service_registry

from .fal_base import FalServiceAdapter

logger = logging.getLogger(__name__)


@dataclass
class ComicResult:
    comic_url: str
    description: str | None = None
    request_id: str | None = None


class NanoBananaComicAdapter(FalServiceAdapter):
    """Service adapter for comic rendering."""

    name = "Nano Banana Comic"
    description = "Four-panel manga comic built on the source photo"
    service_type = "comic"
    version = "1.0.0"
    error_class = ComicGenerationError

    def build_arguments(self, poem: str, image_url: str) -> dict:
        return {
            "prompt": build_comic_prompt(poem),
            "image_urls": [image_url],
            "num_images": 1,
            "output_format": self.config.comic_output_format,
        }

    def generate(self, poem: str, image_url: str) -> ComicResult:
        """Render the comic for a poem and its source photo.

        Raises:
            ComicGenerationError: If the request fails or returns no image
        """
        response = self.subscribe(self.config.comic_endpoint, self.build_arguments(poem, image_url))

        images = response.data.get("images") or []
        first = images[0] if images and isinstance(images[0], dict) else {}
        comic_url = first.get("url")
        if not comic_url:
            logger.error(f"No comic image URL in response: {response.data}")
            raise ComicGenerationError("No comic image received from fal.ai")

        return ComicResult(
            comic_url=comic_url,
            description=response.data.get("description"),
            request_id=response.request_id,
        )


service_registry.register(NanoBananaComicAdapter)
