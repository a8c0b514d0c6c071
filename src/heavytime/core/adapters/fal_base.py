"""Shared fal.ai queue handling for the speech and comic adapters.

Both adapters submit one job to a fal.ai application, wait for it through
the queue API and read a single URL out of the result.  This base class owns
the client, the credential check, queue log forwarding and request id
capture; subclasses only build the arguments and read the result.
"""

import logging
from dataclasses import dataclass
from typing import Any

import fal_client

from heavytime.core.config import HeavytimeConfig
from heavytime.core.errors import UpstreamServiceError
from heavytime.core.service_adapters import ServiceAdapterBase

logger = logging.getLogger(__name__)


@dataclass
class FalResponse:
    data: dict[str, Any]
    request_id: str | None = None


class FalServiceAdapter(ServiceAdapterBase):
    """Base class for adapters backed by a fal.ai application."""

    error_class: type[UpstreamServiceError] = UpstreamServiceError

    def __init__(self, config: HeavytimeConfig, client: fal_client.SyncClient | None = None) -> None:
        super().__init__(config)
        self._client = client

    @property
    def is_configured(self) -> bool:
        return self._client is not None or self.config.fal_configured

    @property
    def client(self) -> fal_client.SyncClient:
        if self._client is None:
            if not self.config.fal_configured:
                raise self.error_class("FAL_KEY is not configured")
            self._client = fal_client.SyncClient(key=self.config.fal_key)
        return self._client

    def _on_queue_update(self, update) -> None:
        if isinstance(update, fal_client.InProgress):
            for log in update.logs or []:
                logger.debug(f"[{self.name}] {log.get('message', '')}")

    def subscribe(self, application: str, arguments: dict[str, Any]) -> FalResponse:
        """Submit a job and block until its result is available.

        Raises:
            UpstreamServiceError: (``error_class``) if the job fails
        """
        client = self.client
        request_ids: list[str] = []

        try:
            data = client.subscribe(
                application,
                arguments=arguments,
                with_logs=True,
                on_enqueue=request_ids.append,
                on_queue_update=self._on_queue_update,
            )
        except Exception as e:
            logger.error(f"{application} request failed: {e}")
            raise self.error_class(f"{application} request failed: {e}") from e

        request_id = request_ids[0] if request_ids else None
        logger.info(f"{application} completed (request {request_id})")
        return FalResponse(data=data or {}, request_id=request_id)
