"""Domain models used throughout the container."""

import inspect
from dataclasses import dataclass, field
from typing import Any, Callable, Optional

__all__ = [
    "Registration",
    "TypeRegistration",
    "PerRequestTypeRegistration",
    "SingletonTypeRegistration",
    "HandlerRegistration",
    "Handler",
    "Dependency",
    "Constructor",
]

Handler = Callable[[Any, Any], Any]
"""A handler is called as ``handler(container, requester)`` on every resolution."""


@dataclass(frozen=True)
class Registration:
    """A rule mapping a request type and optional key to a construction strategy.

    Attributes:
        registration_type: The abstract type a caller asks the container for.
        key: Optional qualifier; ``None`` means unkeyed.
    """

    registration_type: Any
    key: Optional[str]

    def matches(self, registration_type: Any, key: Optional[str]) -> bool:
        return self.registration_type == registration_type and self.key == key


@dataclass(frozen=True)
class TypeRegistration(Registration):
    """A registration satisfied by constructing ``implementation_type``."""

    implementation_type: type


@dataclass(frozen=True)
class PerRequestTypeRegistration(TypeRegistration):
    """Every resolution constructs a new instance."""


@dataclass(frozen=True)
class SingletonTypeRegistration(TypeRegistration):
    """The first resolution constructs an instance which is reused afterwards."""


@dataclass(frozen=True)
class HandlerRegistration(Registration):
    """A registration satisfied by calling ``handler``. Results are never cached."""

    handler: Handler


@dataclass(frozen=True)
class Dependency:
    """Represents a dependency of a constructor or an injectable attribute.

    Attributes:
        name: The parameter or attribute name.
        declared_type: The annotated type with any ``Annotated`` or ``Optional``
            wrapper removed, or ``None`` if the declaration is not annotated.
        key: The registration key requested via ``Annotated``, if any.
        default: The parameter's default value, or ``inspect.Parameter.empty``.
        positional_only: Whether the parameter must be passed positionally.
        optional: Whether the declaration admits ``None`` (``Optional[X]`` or
            ``X | None``).
    """

    name: str
    declared_type: Optional[Any]
    key: Optional[str] = None
    default: Any = inspect.Parameter.empty
    positional_only: bool = False
    optional: bool = False

    @property
    def has_default(self) -> bool:
        return self.default is not inspect.Parameter.empty


@dataclass(frozen=True)
class Constructor:
    """One way of building an implementation type.

    Attributes:
        factory: The callable invoked with keyword arguments, either the class
            itself or a bound alternative constructor.
        dependencies: The keyword parameters of ``factory``, in declaration order.
    """

    factory: Callable
    dependencies: list[Dependency] = field(default_factory=list)

    @property
    def parameter_count(self) -> int:
        return len(self.dependencies)
