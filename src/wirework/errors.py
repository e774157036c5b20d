"""Exceptions raised by the container.

Only two conditions are reported by the container itself. Anything raised by
a constructor, a handler or an activation observer propagates unchanged.
"""

from enum import Enum
from typing import Any, Optional

__all__ = [
    "ContainerErrorCode",
    "ContainerError",
    "TypeAlreadyRegistered",
    "MultipleImplementationTypesRegistered",
]


class ContainerErrorCode(Enum):
    TYPE_ALREADY_REGISTERED = "type_already_registered"
    MULTIPLE_IMPLEMENTATION_TYPES_REGISTERED = "multiple_implementation_types_registered"


def type_name(tp: Any) -> str:
    """Render a type token for error and log messages."""
    if isinstance(tp, type):
        return f"{tp.__module__}.{tp.__qualname__}"
    return repr(tp)


class ContainerError(Exception):
    """Base class for errors raised by a :class:`~wirework.container.Container`."""

    def __init__(self, error_code: ContainerErrorCode, message: str):
        super().__init__(message)
        self.error_code = error_code


class TypeAlreadyRegistered(ContainerError):
    """Raised when an implementation type is registered twice under the same key."""

    def __init__(self, implementation_type: type, key: Optional[str]):
        super().__init__(
            ContainerErrorCode.TYPE_ALREADY_REGISTERED,
            f"The implementation type {type_name(implementation_type)} "
            f"is already registered for key {key!r}",
        )
        self.implementation_type = implementation_type
        self.key = key


class MultipleImplementationTypesRegistered(ContainerError):
    """Raised when a single instance is requested but several registrations match."""

    def __init__(self, registration_type: Any, key: Optional[str], candidates: list[str]):
        super().__init__(
            ContainerErrorCode.MULTIPLE_IMPLEMENTATION_TYPES_REGISTERED,
            f"Cannot get a single instance of {type_name(registration_type)} "
            f"for key {key!r}: multiple registrations match {candidates}",
        )
        self.registration_type = registration_type
        self.key = key
        self.candidates = candidates
