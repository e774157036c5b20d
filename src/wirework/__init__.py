"""Wirework object-resolution container.

Wirework maps abstract request types, optionally qualified by a string key, to
construction strategies, and builds object graphs on demand by resolving
constructor (and optionally attribute) dependencies from standard type hints.

Key Features:
    - Per-request, singleton and handler registrations
    - Keyed registrations selected with ``Annotated[T, "key"]``
    - Richest-resolvable constructor selection, including marked alternative
      constructors
    - ``list[T]`` and similar dependencies resolve to every registered ``T``
    - Optional property injection and activation observers
    - Reentrant locking, so resolution is safe to call from several threads

Basic Usage:
    >>> from wirework.container import Container
    >>>
    >>> container = Container()
    >>> container.register_singleton(Database, PostgresDatabase)
    >>> container.register_per_request(UserService, DefaultUserService)
    >>>
    >>> service = container.get_single_instance(UserService)

The package consists of several modules:
    - container: Registration API and resolution engine
    - registry: Ordered registration store and conflict detection
    - constructor_selector: Choice of construction path
    - property_injector: Post-construction attribute injection
    - singletons: Singleton instance cache
    - introspection: Reading dependencies from type hints
    - configuration: Container options
    - domain: Registration and dependency models
    - errors: Container-specific exceptions
"""

import logging

from wirework.configuration import ContainerConfiguration
from wirework.container import Container
from wirework.errors import (
    ContainerError,
    ContainerErrorCode,
    MultipleImplementationTypesRegistered,
    TypeAlreadyRegistered,
)
from wirework.introspection import Key, constructor

__all__ = [
    "Container",
    "ContainerConfiguration",
    "ContainerError",
    "ContainerErrorCode",
    "Key",
    "MultipleImplementationTypesRegistered",
    "TypeAlreadyRegistered",
    "constructor",
]

logging.getLogger(__name__).addHandler(logging.NullHandler())
