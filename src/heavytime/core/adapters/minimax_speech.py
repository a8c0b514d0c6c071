"""Minimax speech adapter.

Narrates a poem with the fal.ai Minimax text-to-speech application and
returns the hosted audio URL.  Voice settings are fixed by configuration
(``speech_voice_id``, ``speech_speed``, ``speech_volume``, ``speech_pitch``)
so every story is read by the same voice.
"""

import logging
from dataclasses import dataclass

from heavytime.core.errors import AudioGenerationError
from heavytime.core.service_adapters import service_registry

from .fal_base import FalServiceAdapter

logger = logging.getLogger(__name__)


@dataclass
class NarrationResult:
    audio_url: str
    duration_ms: int | None = None
    request_id: str | None = None


class MinimaxSpeechAdapter(FalServiceAdapter):
    """Service adapter for poem narration."""

    name = "Minimax Speech"
    description = "Narrated audio of the poem with a fixed voice"
    service_type = "speech"
    version = "1.0.0"
    error_class = AudioGenerationError

    def build_arguments(self, text: str) -> dict:
        return {
            "text": text,
            "voice_setting": {
                "voice_id": self.config.speech_voice_id,
                "speed": self.config.speech_speed,
                "vol": self.config.speech_volume,
                "pitch": self.config.speech_pitch,
            },
            "output_format": "url",
        }

    def generate(self, text: str) -> NarrationResult:
        """Narrate *text*.

        Raises:
            AudioGenerationError: If the request fails or returns no audio URL
        """
        response = self.subscribe(self.config.speech_endpoint, self.build_arguments(text))

        audio = response.data.get("audio") or {}
        audio_url = audio.get("url") if isinstance(audio, dict) else None
        if not audio_url:
            logger.error(f"No audio URL in response: {response.data}")
            raise AudioGenerationError("No audio URL received from fal.ai")

        return NarrationResult(
            audio_url=audio_url,
            duration_ms=response.data.get("duration_ms"),
            request_id=response.request_id,
        )


service_registry.register(MinimaxSpeechAdapter)
