"""Daily photo listing from the S3-compatible object store.

Photos for one day live under a date-scoped prefix
(``art173/heavytime/YYYY-MM-DD/`` by default).  Listing walks every page of
``list_objects_v2`` under that prefix, keeps keys with an image extension and
maps them to public bucket URLs.

Listing never raises to its caller.  An unreachable store, missing
credentials or a client error produce an empty :class:`ImageListing` with
``error`` set, and the failure is logged.
"""

from __future__ import annotations

import logging
import re
from dataclasses import asdict, dataclass, field
from datetime import datetime

import boto3
from botocore.exceptions import BotoCoreError, ClientError

from .config import HeavytimeConfig
from .errors import ImageListingError, ValidationError

logger = logging.getLogger(__name__)

IMAGE_KEY_PATTERN = re.compile(r"\.(jpg|jpeg|png|gif|webp)$", re.IGNORECASE)
DATE_KEY_FORMAT = "%Y-%m-%d"


@dataclass
class ImageListing:
    """Result of listing one day's photos."""

    date: str
    images: list[str] = field(default_factory=list)
    error: str | None = None

    @property
    def count(self) -> int:
        return len(self.images)

    def to_dict(self) -> dict:
        data = asdict(self)
        data["count"] = self.count
        if self.error is None:
            del data["error"]
        return data


def is_image_key(key: str) -> bool:
    """Return True if an object key has an allowed image extension."""
    return bool(IMAGE_KEY_PATTERN.search(key))


def validate_date_key(date_key: str) -> str:
    """Check that *date_key* is a real calendar date in ``YYYY-MM-DD`` form.

    Raises:
        ValidationError: If the date is malformed
    """
    if not date_key or len(date_key) != 10:
        raise ValidationError(f"Date must be YYYY-MM-DD, got {date_key!r}")
    try:
        datetime.strptime(date_key, DATE_KEY_FORMAT)
    except ValueError as e:
        raise ValidationError(f"Date must be YYYY-MM-DD, got {date_key!r}") from e
    return date_key


class ImageLister:
    """List public photo URLs for a day from the object store."""

    def __init__(self, config: HeavytimeConfig, client=None) -> None:
        """Initialize the lister.

        Args:
            config: Configuration holding the bucket, prefix and credentials
            client: Pre-built S3 client (created lazily from config if None)
        """
        self.config = config
        self._client = client

    @property
    def client(self):
        if self._client is None:
            if not self.config.storage_configured:
                raise ImageListingError("Object store credentials are not configured")

            # Credentials go straight to the session and are never logged
            session = boto3.Session(
                aws_access_key_id=self.config.aws_access_key_id,
                aws_secret_access_key=self.config.aws_secret_access_key,
                region_name=self.config.storage_region,
            )
            self._client = session.client("s3", endpoint_url=self.config.storage_endpoint_url)
            logger.info(f"S3 client created for {self.config.storage_endpoint_url}")
        return self._client

    def prefix_for(self, date_key: str) -> str:
        return self.config.storage_prefix_template.format(date=date_key)

    def public_url(self, key: str) -> str:
        return self.config.storage_public_url_template.format(
            bucket=self.config.storage_bucket, key=key
        )

    def iter_keys(self, prefix: str):
        """Yield every object key under *prefix*, following pagination."""
        paginator = self.client.get_paginator("list_objects_v2")
        pages = paginator.paginate(
            Bucket=self.config.storage_bucket,
            Prefix=prefix,
            PaginationConfig={"PageSize": self.config.storage_page_size},
        )
        for page in pages:
            for obj in page.get("Contents", []):
                key = obj.get("Key")
                if key:
                    yield key

    def list_images(self, date_key: str) -> ImageListing:
        """List image URLs for one day.

        Args:
            date_key: Day to list, ``YYYY-MM-DD``

        Returns:
            Listing with the public URLs of every image under the day's
            prefix, in store order.  On failure the listing is empty and
            ``error`` describes what went wrong.
        """
        prefix = self.prefix_for(date_key)

        try:
            urls = [self.public_url(key) for key in self.iter_keys(prefix) if is_image_key(key)]
        except (ImageListingError, BotoCoreError, ClientError) as e:
            logger.error(f"Error fetching images for {date_key}: {e}")
            return ImageListing(date=date_key, error=ImageListingError.summary)

        logger.info(f"Found {len(urls)} images for {date_key}")
        return ImageListing(date=date_key, images=urls)
