"""Hosted service adapters.

Importing this package registers every adapter with
:data:`heavytime.core.service_adapters.service_registry`.
"""

from .claude_poem import ClaudePoemAdapter, PoemResult
from .minimax_speech import MinimaxSpeechAdapter, NarrationResult
from .nano_banana_comic import ComicResult, NanoBananaComicAdapter

__all__ = [
    "ClaudePoemAdapter",
    "ComicResult",
    "MinimaxSpeechAdapter",
    "NanoBananaComicAdapter",
    "NarrationResult",
    "PoemResult",
]
