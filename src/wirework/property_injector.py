"""Post-construction assignment of empty attributes."""

import logging
from typing import Any, Callable, Optional

from wirework.introspection import injectable_attributes

__all__ = ["PropertyInjector"]

logger = logging.getLogger(__name__)

Resolve = Callable[[Any, Any, Optional[str], bool], Any]
"""Called as ``resolve(declared_type, requester, key, optional)``."""


class PropertyInjector:
    """Fill the injectable attributes of an instance that are still ``None``.

    Each eligible attribute is assigned whatever single-instance resolution of
    its declared type yields, which may itself be ``None`` when nothing is
    registered. Injection never fails because a type is unregistered. Attributes
    declared ``Optional`` stay ``None`` rather than taking a zero value such as
    ``0`` or ``""``.
    """

    def __init__(self, resolve: Resolve):
        self._resolve = resolve

    def inject(self, instance: Any):
        for attribute in injectable_attributes(type(instance)):
            if attribute.declared_type is None or getattr(instance, attribute.name, None) is not None:
                continue
            value = self._resolve(attribute.declared_type, instance, attribute.key, attribute.optional)
            logger.debug(
                "Injecting %s.%s (key=%r)", type(instance).__name__, attribute.name, attribute.key
            )
            setattr(instance, attribute.name, value)
