"""The container: registration API and resolution engine.

Start-up code declares how each request type is satisfied, then asks the
container for instances. Dependencies of constructed types are resolved
transitively from their type hints::

    container = Container()
    container.register_singleton(Database, PostgresDatabase)
    container.register_per_request(UserService, DefaultUserService)

    service = container.get_single_instance(UserService)

Resolution is recursive, so a single reentrant lock per container guards both
the registrations and the singleton cache. Calls from other threads wait until
the current registration or resolution has finished.
"""

import dataclasses
import logging
import threading
from typing import Any, Callable, Optional, get_origin

from wirework.configuration import ContainerConfiguration
from wirework.constructor_selector import ConstructorSelector
from wirework.domain import (
    Constructor,
    Handler,
    HandlerRegistration,
    Registration,
    SingletonTypeRegistration,
    TypeRegistration,
)
from wirework.errors import MultipleImplementationTypesRegistered, type_name
from wirework.introspection import sequence_item_type
from wirework.property_injector import PropertyInjector
from wirework.registry import RegistrationStore
from wirework.singletons import SingletonCache

__all__ = ["Container", "ActivationObserver"]

logger = logging.getLogger(__name__)

ActivationObserver = Callable[[Any], None]
"""Called with every freshly constructed instance."""

_VALUE_TYPES = (bool, int, float, complex, str, bytes)


class Container:
    """Registry of construction strategies and the engine that applies them.

    Args:
        configuration: Options for this container. A default
            :class:`ContainerConfiguration` is used if none is given.
    """

    def __init__(self, configuration: Optional[ContainerConfiguration] = None):
        self._configuration = dataclasses.replace(configuration or ContainerConfiguration())
        self._parent: Optional[Container] = None
        self._lock = threading.RLock()
        self._store = RegistrationStore()
        self._singletons = SingletonCache()
        self._selector = ConstructorSelector(self._store)
        self._property_injector = PropertyInjector(self._get_single_instance)
        self._observers: list[ActivationObserver] = []

    @property
    def configuration(self) -> ContainerConfiguration:
        return self._configuration

    @property
    def parent(self) -> Optional["Container"]:
        """The container this one was created from, if any.

        Resolution never consults the parent; only the configuration is shared.
        """
        return self._parent

    def register_per_request(
        self, registration_type: Any, implementation_type: type, key: Optional[str] = None
    ):
        """Build a new ``implementation_type`` every time ``registration_type`` is requested.

        Raises:
            TypeAlreadyRegistered: If ``implementation_type`` is already
                registered under ``key``, for any request type.
        """
        with self._lock:
            self._store.add_per_request(registration_type, implementation_type, key)

    def register_singleton(
        self, registration_type: Any, implementation_type: type, key: Optional[str] = None
    ):
        """Build ``implementation_type`` once and return the same instance afterwards.

        The instance is shared with every other singleton registration of the
        same implementation type in this container.

        Raises:
            TypeAlreadyRegistered: If ``implementation_type`` is already
                registered under ``key``, for any request type.
        """
        with self._lock:
            self._store.add_singleton(registration_type, implementation_type, key)

    def register_handler(self, registration_type: Any, handler: Handler, key: Optional[str] = None):
        """Satisfy ``registration_type`` by calling ``handler(container, requester)``.

        The requester is ``None`` for top-level calls, the container while
        resolving constructor arguments and the instance being filled during
        property injection. Results are returned as they are: never cached,
        injected or announced to activation observers.
        """
        with self._lock:
            self._store.add_handler(registration_type, handler, key)

    def per_request(self, registration_type: Any = None, key: Optional[str] = None) -> Callable:
        """Class decorator form of :meth:`register_per_request`.

        Example:
            >>> @container.per_request(Greeter)
            ... class EnglishGreeter(Greeter):
            ...     pass
        """

        def decorator(cls: type) -> type:
            self.register_per_request(cls if registration_type is None else registration_type, cls, key)
            return cls

        return decorator

    def singleton(self, registration_type: Any = None, key: Optional[str] = None) -> Callable:
        """Class decorator form of :meth:`register_singleton`."""

        def decorator(cls: type) -> type:
            self.register_singleton(cls if registration_type is None else registration_type, cls, key)
            return cls

        return decorator

    def handler(self, registration_type: Any, key: Optional[str] = None) -> Callable:
        """Function decorator form of :meth:`register_handler`.

        Example:
            >>> @container.handler(Clock)
            ... def make_clock(container, requester):
            ...     return FixedClock(0)
        """

        def decorator(func: Handler) -> Handler:
            self.register_handler(registration_type, func, key)
            return func

        return decorator

    def get_single_instance(self, registration_type: Any, key: Optional[str] = None) -> Any:
        """Resolve one instance of ``registration_type``.

        If nothing is registered, a "sequence of T" request resolves to all
        instances of ``T`` (a ``tuple`` for ``tuple[T, ...]``, a ``list``
        otherwise). Any other request yields the type's zero value: ``False``
        for ``bool``, ``0`` for ``int``, ``0.0`` for ``float``, ``0j`` for
        ``complex``, ``""`` for ``str``, ``b""`` for ``bytes`` and ``None`` for
        everything else. An unregistered ``str`` therefore resolves to ``""``,
        not ``None``.

        Raises:
            MultipleImplementationTypesRegistered: If more than one registration
                matches ``registration_type`` and ``key``.
        """
        return self._get_single_instance(registration_type, None, key)

    def get_all_instances(self, registration_type: Any, key: Optional[str] = None) -> list:
        """Resolve every registration of ``registration_type`` under ``key``.

        Type registrations are built first, in registration order, followed by
        handler results, also in registration order. Returns an empty list if
        nothing matches.
        """
        return self._get_all_instances(registration_type, None, key)

    def is_registered(self, tp: Any, key: Optional[str] = None) -> bool:
        """Check whether anything is registered for ``tp`` without building it."""
        with self._lock:
            return self._store.is_registered(tp, key)

    def is_single_registered(self, tp: Any, key: Optional[str] = None) -> bool:
        """Check whether exactly one registration exists for ``tp``."""
        with self._lock:
            return self._store.is_single_registered(tp, key)

    def get_child_container(self) -> "Container":
        """Create an empty container sharing this container's configuration."""
        with self._lock:
            child = Container(self._configuration)
            child._parent = self
            return child

    def attach_activation_observer(self, observer: ActivationObserver):
        """Call ``observer`` with every instance this container constructs.

        Observers run after property injection, in attachment order. Singleton
        cache hits and handler results are not reported.
        """
        with self._lock:
            self._observers.append(observer)

    def detach_activation_observer(self, observer: ActivationObserver):
        with self._lock:
            if observer in self._observers:
                self._observers.remove(observer)

    def _get_single_instance(
        self, registration_type: Any, requester: Any, key: Optional[str], optional: bool = False
    ) -> Any:
        with self._lock:
            if registration_type is None:
                return None

            registrations = self._store.matching(registration_type, key)
            if len(registrations) > 1:
                raise MultipleImplementationTypesRegistered(
                    registration_type, key, [_describe(r) for r in registrations]
                )

            if len(registrations) == 1:
                registration = registrations[0]
                if isinstance(registration, TypeRegistration):
                    return self._get_implementation_instance(registration)
                return registration.handler(self, requester)

            item_type = sequence_item_type(registration_type)
            if item_type is not None:
                instances = self._get_all_instances(item_type, requester, key)
                return tuple(instances) if get_origin(registration_type) is tuple else instances

            return None if optional else _zero_value(registration_type)

    def _get_all_instances(self, registration_type: Any, requester: Any, key: Optional[str]) -> list:
        with self._lock:
            if registration_type is None:
                return []

            registrations = self._store.matching(registration_type, key)
            instances = [
                self._get_implementation_instance(registration)
                for registration in registrations
                if isinstance(registration, TypeRegistration)
            ]
            instances.extend(
                registration.handler(self, requester)
                for registration in registrations
                if isinstance(registration, HandlerRegistration)
            )
            return instances

    def _get_implementation_instance(self, registration: TypeRegistration) -> Any:
        implementation_type = registration.implementation_type
        if isinstance(registration, SingletonTypeRegistration):
            return self._singletons.get_or_create(
                implementation_type, lambda: self._construct_instance(implementation_type)
            )
        return self._construct_instance(implementation_type)

    def _construct_instance(self, implementation_type: type) -> Any:
        constructor = self._selector.select(implementation_type)
        if constructor is None:
            logger.debug("No resolvable constructor for %s", type_name(implementation_type))
            instance = implementation_type()
        else:
            args, kwargs = self._constructor_arguments(constructor)
            logger.debug(
                "Constructing %s via %s with %s",
                type_name(implementation_type),
                getattr(constructor.factory, "__qualname__", constructor.factory),
                [dependency.name for dependency in constructor.dependencies],
            )
            instance = constructor.factory(*args, **kwargs)

        if self._configuration.enable_property_injection:
            self._property_injector.inject(instance)

        for observer in list(self._observers):
            observer(instance)

        return instance

    def _constructor_arguments(self, constructor: Constructor) -> tuple[list, dict[str, Any]]:
        args = []
        kwargs = {}
        for dependency in constructor.dependencies:
            if self._selector.resolves_from_registry(dependency):
                value = self._get_single_instance(dependency.declared_type, self, dependency.key)
            else:
                value = dependency.default

            if dependency.positional_only:
                args.append(value)
            else:
                kwargs[dependency.name] = value
        return args, kwargs


def _describe(registration: Registration) -> str:
    if isinstance(registration, TypeRegistration):
        return type_name(registration.implementation_type)
    return repr(registration.handler)


def _zero_value(tp: Any) -> Any:
    return tp() if tp in _VALUE_TYPES else None
