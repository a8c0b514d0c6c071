"""Core functionality for Heavytime Stories.

- **config**: Environment-based configuration (Pydantic Settings)
- **errors**: Error taxonomy shared by the API, workflow and UI
- **StoryDB**: SQLite store for the single ``story`` table
- **ImageLister**: Daily photo listing from the object store
- **Service adapters**: Poem, speech and comic generation against hosted APIs
- **service_registry**: Registry for discovering and instantiating adapters

Usage Example
-------------
    from heavytime.core import StoryDB, config, service_registry

    store = StoryDB(config.database_path)
    poet = service_registry.instantiate("Claude Poem", config)
"""

# Import adapters to ensure they're registered
from heavytime.core.adapters import (  # noqa: F401
    ClaudePoemAdapter,
    MinimaxSpeechAdapter,
    NanoBananaComicAdapter,
)
from heavytime.core.config import HeavytimeConfig, config
from heavytime.core.image_lister import ImageListing, ImageLister
from heavytime.core.service_adapters import ServiceAdapterBase, service_registry
from heavytime.core.story_db import Story, StoryDB

__all__ = [
    "HeavytimeConfig",
    "ImageLister",
    "ImageListing",
    "ServiceAdapterBase",
    "Story",
    "StoryDB",
    "config",
    "service_registry",
]
