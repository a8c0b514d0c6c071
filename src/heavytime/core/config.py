"""Configuration management for Heavytime Stories.

This module provides centralized configuration management using Pydantic Settings.
All configuration is loaded from environment variables with the HEAVYTIME_ prefix,
allowing easy customization without code changes.

Environment Variable Loading
-----------------------------
Configuration values are loaded in the following priority order:
1. Environment variables (HEAVYTIME_* prefix)
2. .env file in the project root
3. Default values defined in HeavytimeConfig

Credentials also accept the names the vendor SDKs use on their own, so an
existing shell setup keeps working:

    AWS_ACCESS_KEY_ID / HEAVYTIME_AWS_ACCESS_KEY_ID
    AWS_SECRET_ACCESS_KEY / HEAVYTIME_AWS_SECRET_ACCESS_KEY
    ANTHROPIC_API_KEY / HEAVYTIME_ANTHROPIC_API_KEY
    FAL_KEY / HEAVYTIME_FAL_KEY

Example .env file:
    HEAVYTIME_STORAGE_BUCKET=mypublicbucket
    HEAVYTIME_DATABASE_PATH=data/stories.db
    ANTHROPIC_API_KEY=sk-ant-...
    FAL_KEY=...

Missing Credentials
-------------------
A missing credential never stops the application from starting.  The
component that needs it fails its own call instead (the image lister returns
an empty listing with an error flag, the generation adapters raise their
``UpstreamServiceError`` subclass).

Usage Example
-------------
    from heavytime.core.config import config

    print(config.storage_bucket)
    print(config.database_path)
"""

from pathlib import Path
from typing import Literal

from pydantic import AliasChoices, Field
from pydantic_settings import BaseSettings, SettingsConfigDict


class HeavytimeConfig(BaseSettings):
    """Main configuration for Heavytime Stories.

    Attributes
    ----------
    Object Storage:
        storage_endpoint_url : str
            S3-compatible endpoint holding the daily photos
        storage_region : str
            Region name passed to the S3 client ("auto" for t3.storage.dev)
        storage_bucket : str
            Public bucket that holds the photos
        storage_prefix_template : str
            Key prefix for one day, formatted with ``date`` (YYYY-MM-DD)
        storage_public_url_template : str
            Public URL for one key, formatted with ``bucket`` and ``key``
        storage_page_size : int
            Page size for the object listing paginator

    Poem Generation:
        anthropic_api_key : str | None
        poem_model : str
        poem_max_tokens : int
        image_fetch_timeout : float | None
            Timeout for downloading the source photo (None = no timeout)

    Speech and Comic Generation:
        fal_key : str | None
        speech_endpoint, speech_voice_id, speech_speed, speech_volume, speech_pitch
        comic_endpoint, comic_output_format

    Persistence:
        database_path : Path
            SQLite file holding the ``story`` table

    Workflow:
        delete_orphan_stories : bool
            Delete the story row when poem generation fails

    Servers:
        server_host, server_port : REST API bind address
        gradio_server_name, gradio_server_port, gradio_share : UI bind settings
        log_level : str
    """

    model_config = SettingsConfigDict(
        env_file=".env",
        env_file_encoding="utf-8",
        env_prefix="HEAVYTIME_",
        case_sensitive=False,
        populate_by_name=True,
        extra="ignore",
    )

    # Object storage (daily photos)
    storage_endpoint_url: str = Field(
        default="https://t3.storage.dev",
        description="S3-compatible endpoint for the photo bucket",
    )
    storage_region: str = Field(default="auto", description="S3 region name")
    storage_bucket: str = Field(default="mypublicbucket", description="Photo bucket name")
    storage_prefix_template: str = Field(
        default="art173/heavytime/{date}/",
        description="Key prefix for a single day, formatted with {date}",
    )
    storage_public_url_template: str = Field(
        default="https://{bucket}.t3.storage.dev/{key}",
        description="Public URL for a key, formatted with {bucket} and {key}",
    )
    storage_page_size: int = Field(default=100, ge=1, le=1000)
    aws_access_key_id: str | None = Field(
        default=None,
        validation_alias=AliasChoices("HEAVYTIME_AWS_ACCESS_KEY_ID", "AWS_ACCESS_KEY_ID"),
    )
    aws_secret_access_key: str | None = Field(
        default=None,
        validation_alias=AliasChoices("HEAVYTIME_AWS_SECRET_ACCESS_KEY", "AWS_SECRET_ACCESS_KEY"),
    )

    # Poem generation
    anthropic_api_key: str | None = Field(
        default=None,
        validation_alias=AliasChoices("HEAVYTIME_ANTHROPIC_API_KEY", "ANTHROPIC_API_KEY"),
    )
    poem_model: str = Field(default="claude-sonnet-4-5", description="Anthropic model ID")
    poem_max_tokens: int = Field(default=1024, ge=1, le=8192)
    image_fetch_timeout: float | None = Field(
        default=None,
        description="Seconds to wait for the source photo download (None = no timeout)",
    )

    # Speech and comic generation (fal.ai)
    fal_key: str | None = Field(
        default=None,
        validation_alias=AliasChoices("HEAVYTIME_FAL_KEY", "FAL_KEY"),
    )
    speech_endpoint: str = Field(default="fal-ai/minimax/preview/speech-2.5-hd")
    speech_voice_id: str = Field(default="Voice2c1bd04c1761210837")
    speech_speed: float = Field(default=1.0)
    speech_volume: float = Field(default=1.5)
    speech_pitch: int = Field(default=0)
    comic_endpoint: str = Field(default="fal-ai/nano-banana/edit")
    comic_output_format: Literal["jpeg", "png"] = Field(default="jpeg")

    # Persistence
    database_path: Path = Field(
        default=Path("data/stories.db"),
        description="SQLite database holding the story table",
    )

    # Workflow
    delete_orphan_stories: bool = Field(
        default=False,
        description="Delete the story row when poem generation fails",
    )

    # REST API
    server_host: str = Field(default="0.0.0.0")
    server_port: int = Field(default=8000, ge=1024, le=65535)

    # UI settings
    gradio_server_name: str = Field(
        default="0.0.0.0",
        description="Server bind address (0.0.0.0 for local network)",
    )
    gradio_server_port: int = Field(default=7860, ge=1024, le=65535)
    gradio_share: bool = Field(
        default=False,
        description="Create public gradio.live link (keep False for local-only)",
    )

    log_level: Literal["DEBUG", "INFO", "WARNING", "ERROR"] = Field(default="INFO")

    def __init__(self, **kwargs):
        """Initialize configuration and create the database directory."""
        super().__init__(**kwargs)
        self.database_path.parent.mkdir(parents=True, exist_ok=True)

    @property
    def storage_configured(self) -> bool:
        return bool(self.aws_access_key_id and self.aws_secret_access_key)

    @property
    def anthropic_configured(self) -> bool:
        return bool(self.anthropic_api_key)

    @property
    def fal_configured(self) -> bool:
        return bool(self.fal_key)


# Global configuration instance
# Loaded from environment variables (HEAVYTIME_* prefix, plus the vendor
# credential names) and the .env file when the module is imported.
config = HeavytimeConfig()
