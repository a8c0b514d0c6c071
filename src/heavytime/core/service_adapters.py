"""Base classes and registry for hosted generation service adapters.

Each generation step of a story (poem, narration, comic) is one request to a
hosted service.  An adapter wraps that request behind a common interface:

- the service-specific client and its fixed parameters
- credential checks (a missing key fails the call, never the process)
- conversion of the raw response into a small result object
- conversion of every upstream failure into the step's error type

Service Types
-------------
- **poem**: photo + title → poem text (vision language model)
- **speech**: poem text → hosted audio URL (text-to-speech)
- **comic**: photo + poem → hosted comic image URL (image editing)

Usage Example
-------------
    >>> from heavytime.core.service_adapters import service_registry
    >>> from heavytime.core.config import config
    >>>
    >>> print(service_registry.list_available())
    ['Claude Poem', 'Minimax Speech', 'Nano Banana Comic']
    >>>
    >>> poet = service_registry.instantiate("Claude Poem", config)
    >>> result = poet.generate(image_url="https://x/a.jpg", title="Morning")

Adapters never retry.  A failed call raises the adapter's
:class:`~heavytime.core.errors.UpstreamServiceError` subclass and it is up to
the caller (normally the story workflow) to decide whether that is fatal.
"""

import logging
from abc import ABC, abstractmethod
from typing import Any, Literal

from .config import HeavytimeConfig

logger = logging.getLogger(__name__)


class ServiceAdapterBase(ABC):
    """Abstract base class for all service adapters.

    Attributes
    ----------
    name : str
        Human-readable name of the adapter (e.g., "Claude Poem")
    description : str
        Brief description of what the adapter produces
    service_type : str
        Which story step this adapter serves
    config : HeavytimeConfig
        Configuration object containing credentials and fixed parameters
    """

    name: str = "Base Service Adapter"
    description: str = "Base class for service adapters"
    service_type: Literal["poem", "speech", "comic"] = "poem"
    version: str = "0.1.0"

    def __init__(self, config: HeavytimeConfig) -> None:
        """Initialize the service adapter.

        Args:
            config: Configuration object containing service settings
        """
        self.config = config
        logger.info(f"Initialized {self.name} adapter")

    @property
    @abstractmethod
    def is_configured(self) -> bool:
        """Check whether the credentials this adapter needs are present."""

    @abstractmethod
    def generate(self, **kwargs) -> Any:
        """Run one request against the hosted service.

        Raises
        ------
        UpstreamServiceError
            If the call fails or the response lacks the expected result
        """

    def get_adapter_info(self) -> dict[str, Any]:
        """Get information about this adapter."""
        return {
            "name": self.name,
            "description": self.description,
            "service_type": self.service_type,
            "version": self.version,
            "is_configured": self.is_configured,
        }


class ServiceRegistry:
    """Registry for managing available service adapters.

    Adapters register their class when ``heavytime.core.adapters`` is
    imported; callers then instantiate them by name.
    """

    def __init__(self) -> None:
        """Initialize the service registry."""
        self._adapters: dict[str, type[ServiceAdapterBase]] = {}

    def register(self, adapter_class: type[ServiceAdapterBase]) -> type[ServiceAdapterBase]:
        """Register a service adapter class.

        Returns the class so this can be used as a decorator.
        """
        adapter_name = adapter_class.name

        if adapter_name in self._adapters:
            logger.warning(f"Service adapter '{adapter_name}' is already registered, overwriting")

        self._adapters[adapter_name] = adapter_class
        logger.debug(f"Registered service adapter: {adapter_name}")
        return adapter_class

    def instantiate(self, adapter_name: str, config: HeavytimeConfig) -> ServiceAdapterBase:
        """Create an instance of a registered adapter.

        Raises
        ------
        KeyError
            If adapter_name is not registered
        """
        if adapter_name not in self._adapters:
            available = ", ".join(self.list_available())
            raise KeyError(
                f"Service adapter '{adapter_name}' not found. Available adapters: {available}"
            )

        return self._adapters[adapter_name](config=config)

    def get_adapter_class(self, adapter_name: str) -> type[ServiceAdapterBase] | None:
        return self._adapters.get(adapter_name)

    def list_available(self) -> list[str]:
        return list(self._adapters.keys())

    def get_adapter_info(self, adapter_name: str) -> dict[str, Any] | None:
        """Get information about a registered adapter, or None if unknown."""
        if adapter_name not in self._adapters:
            return None

        adapter_class = self._adapters[adapter_name]
        return {
            "name": adapter_class.name,
            "description": adapter_class.description,
            "service_type": adapter_class.service_type,
            "version": adapter_class.version,
        }

    def get_adapters_by_type(self, service_type: str) -> list[dict[str, Any]]:
        return [
            self.get_adapter_info(name)
            for name, adapter_class in self._adapters.items()
            if adapter_class.service_type == service_type
        ]


# Global service registry instance
service_registry = ServiceRegistry()
