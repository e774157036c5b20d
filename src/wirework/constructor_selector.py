"""Selection of the construction path used to build an implementation type."""

from typing import Optional

from wirework.domain import Constructor, Dependency
from wirework.introspection import constructors_of, sequence_item_type
from wirework.registry import RegistrationStore

__all__ = ["ConstructorSelector"]


class ConstructorSelector:
    """Pick the richest constructor whose dependencies can all be resolved.

    A dependency is resolvable when:

    - its type is a "sequence of T" and anything is registered for it or ``T``
      under any key (collection resolution never fails, so a keyed collection
      with no matching registrations resolves to an empty one);
    - otherwise, exactly one registration exists for its type and key;
    - or, failing both, it declares a default value, which is then used.

    Untyped dependencies without defaults are never resolvable.
    """

    def __init__(self, store: RegistrationStore):
        self._store = store

    def select(self, implementation_type: type) -> Optional[Constructor]:
        """Return the selected constructor, or ``None`` if none qualifies.

        Constructors are scanned in enumeration order. A candidate replaces the
        current choice only if it is fully resolvable and has strictly more
        parameters, so ties go to the first one found.
        """
        selected = None
        for candidate in constructors_of(implementation_type):
            if selected is not None and candidate.parameter_count <= selected.parameter_count:
                continue
            if all(self.is_resolvable(dependency) for dependency in candidate.dependencies):
                selected = candidate
        return selected

    def is_resolvable(self, dependency: Dependency) -> bool:
        return self.resolves_from_registry(dependency) or dependency.has_default

    def resolves_from_registry(self, dependency: Dependency) -> bool:
        if dependency.declared_type is None:
            return False
        if sequence_item_type(dependency.declared_type) is not None:
            return self._store.is_registered_under_any_key(dependency.declared_type)
        return self._store.is_single_registered(dependency.declared_type, dependency.key)
