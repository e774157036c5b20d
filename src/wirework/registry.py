"""Ordered storage of registrations with conflict detection."""

import logging
from typing import Any, Iterator, Optional

from wirework.domain import (
    Handler,
    HandlerRegistration,
    PerRequestTypeRegistration,
    Registration,
    SingletonTypeRegistration,
    TypeRegistration,
)
from wirework.errors import TypeAlreadyRegistered, type_name
from wirework.introspection import sequence_item_type

__all__ = ["RegistrationStore"]

logger = logging.getLogger(__name__)


class RegistrationStore:
    """Holds registrations in the order they were made.

    Registration order is observable: collection resolution returns instances in
    the order their registrations were added. An implementation type may appear
    at most once per key, whatever request type or lifecycle it was registered
    with. Handler registrations have no implementation type and never conflict.

    The store does no locking of its own; the owning container serialises access.
    """

    def __init__(self):
        self._registrations: list[Registration] = []

    def add_per_request(
        self, registration_type: Any, implementation_type: type, key: Optional[str] = None
    ):
        self._add_type_registration(
            PerRequestTypeRegistration(registration_type, key, implementation_type)
        )

    def add_singleton(
        self, registration_type: Any, implementation_type: type, key: Optional[str] = None
    ):
        self._add_type_registration(
            SingletonTypeRegistration(registration_type, key, implementation_type)
        )

    def add_handler(self, registration_type: Any, handler: Handler, key: Optional[str] = None):
        logger.debug(
            "Registering handler %r for %s (key=%r)", handler, type_name(registration_type), key
        )
        self._registrations.append(HandlerRegistration(registration_type, key, handler))

    def _add_type_registration(self, registration: TypeRegistration):
        """Append a type registration after checking it does not duplicate another.

        Raises:
            TypeAlreadyRegistered: If the implementation type is already
                registered under the same key.
        """
        if any(
            isinstance(existing, TypeRegistration)
            and existing.key == registration.key
            and existing.implementation_type is registration.implementation_type
            for existing in self._registrations
        ):
            raise TypeAlreadyRegistered(registration.implementation_type, registration.key)

        logger.debug(
            "Registering %s as %s for %s (key=%r)",
            type_name(registration.implementation_type),
            type(registration).__name__,
            type_name(registration.registration_type),
            registration.key,
        )
        self._registrations.append(registration)

    def matching(self, registration_type: Any, key: Optional[str] = None) -> list[Registration]:
        """Return the registrations for ``registration_type`` and ``key``, in registration order."""
        return [r for r in self._registrations if r.matches(registration_type, key)]

    def is_registered(self, tp: Any, key: Optional[str] = None) -> bool:
        """Check whether anything is registered for ``tp``.

        A "sequence of T" type counts as registered when ``T`` is registered.
        """
        if self._any_matching(tp, key):
            return True
        item_type = sequence_item_type(tp)
        return item_type is not None and self._any_matching(item_type, key)

    def is_single_registered(self, tp: Any, key: Optional[str] = None) -> bool:
        """Check whether exactly one registration exists for ``tp``.

        Always false for "sequence of T" types, which resolve to collections.
        """
        return sequence_item_type(tp) is None and len(self.matching(tp, key)) == 1

    def is_registered_under_any_key(self, tp: Any) -> bool:
        """Like :meth:`is_registered`, but a registration under any key counts."""
        item_type = sequence_item_type(tp)
        return any(
            r.registration_type == tp or (item_type is not None and r.registration_type == item_type)
            for r in self._registrations
        )

    def _any_matching(self, tp: Any, key: Optional[str]) -> bool:
        return any(r.matches(tp, key) for r in self._registrations)

    def __iter__(self) -> Iterator[Registration]:
        return iter(list(self._registrations))

    def __len__(self) -> int:
        return len(self._registrations)
