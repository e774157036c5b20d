"""Per-container cache of singleton instances."""

import logging
from typing import Any, Callable

from wirework.errors import type_name

__all__ = ["SingletonCache"]

logger = logging.getLogger(__name__)


class SingletonCache:
    """Maps implementation types to their single constructed instance.

    Entries are keyed by implementation type alone, so every singleton
    registration of one implementation type shares an instance, whatever
    request type or key it was registered under.

    The cache does no locking of its own; the owning container serialises access.
    """

    def __init__(self):
        self._instances: dict[type, Any] = {}

    def get_or_create(self, implementation_type: type, factory: Callable[[], Any]) -> Any:
        """Return the cached instance, building it with ``factory`` on first use.

        Nothing is cached if ``factory`` raises.
        """
        if implementation_type in self._instances:
            logger.debug("Singleton cache hit for %s", type_name(implementation_type))
            return self._instances[implementation_type]

        instance = factory()
        self._instances[implementation_type] = instance
        return instance

    def __contains__(self, implementation_type: type) -> bool:
        return implementation_type in self._instances

    def __len__(self) -> int:
        return len(self._instances)
