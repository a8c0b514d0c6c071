"""Heavytime Stories - daily photos turned into poems, narration and comics."""

__version__ = "0.1.0"

from heavytime.core.config import HeavytimeConfig, config
from heavytime.core.service_adapters import ServiceAdapterBase, service_registry

# Import adapters to ensure they're registered
from heavytime.core.adapters import (  # noqa: F401
    ClaudePoemAdapter,
    MinimaxSpeechAdapter,
    NanoBananaComicAdapter,
)

__all__ = [
    "ClaudePoemAdapter",
    "HeavytimeConfig",
    "MinimaxSpeechAdapter",
    "NanoBananaComicAdapter",
    "ServiceAdapterBase",
    "config",
    "service_registry",
]
