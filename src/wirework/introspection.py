"""Introspection of constructors, keys and injectable attributes.

Dependencies are read from standard type hints. A dependency may ask for a
keyed registration by wrapping its type in ``Annotated``::

    class ReportService:
        def __init__(self, db: Annotated[Database, "reporting"], mailer: Mailer):
            ...

Classes may offer construction paths besides ``__init__`` by marking class
methods with :func:`constructor`. The container considers all of them and
picks the richest one it can satisfy.
"""

import collections.abc
import dataclasses
import inspect
import types
from dataclasses import dataclass
from functools import lru_cache
from typing import (
    Annotated,
    Any,
    Callable,
    ClassVar,
    Optional,
    Union,
    get_args,
    get_origin,
    get_type_hints,
)

from wirework.domain import Constructor, Dependency

__all__ = [
    "Key",
    "constructor",
    "sequence_item_type",
    "constructors_of",
    "injectable_attributes",
]

_CONSTRUCTOR_MARKER = "__wirework_constructor__"
_CACHE_SIZE = 512

_SEQUENCE_ORIGINS = (
    list,
    collections.abc.Sequence,
    collections.abc.MutableSequence,
    collections.abc.Collection,
    collections.abc.Iterable,
)


@dataclass(frozen=True)
class Key:
    """Metadata selecting a keyed registration, for use inside ``Annotated``.

    ``Annotated[Database, Key("reporting")]`` is equivalent to
    ``Annotated[Database, "reporting"]``.
    """

    name: str


def constructor(func: Any) -> Any:
    """Mark a class method as an alternative constructor.

    The decorator must be applied above ``@classmethod``.

    Raises:
        TypeError: If ``func`` is not a class method.

    Example:
        >>> class Repository:
        ...     def __init__(self):
        ...         self.db = None
        ...
        ...     @constructor
        ...     @classmethod
        ...     def with_database(cls, db: Database) -> "Repository":
        ...         repository = cls()
        ...         repository.db = db
        ...         return repository
    """
    if not isinstance(func, classmethod):
        raise TypeError(f"@constructor must decorate a classmethod, got {func!r}")
    setattr(func.__func__, _CONSTRUCTOR_MARKER, True)
    return func


def sequence_item_type(tp: Any) -> Optional[Any]:
    """Return ``T`` if ``tp`` is a "sequence of T" request, otherwise ``None``.

    Recognised shapes are ``list[T]``, ``tuple[T, ...]`` and the parameterised
    ``Sequence``, ``MutableSequence``, ``Collection`` and ``Iterable`` ABCs
    (or their ``typing`` aliases).

    Example:
        >>> sequence_item_type(list[Plugin])        # Plugin
        >>> sequence_item_type(Iterable[Plugin])    # Plugin
        >>> sequence_item_type(tuple[Plugin, int])  # None
        >>> sequence_item_type(Plugin)              # None
    """
    origin = get_origin(tp)
    if origin is None:
        return None
    args = get_args(tp)
    if origin is tuple:
        return args[0] if len(args) == 2 and args[1] is Ellipsis else None
    if origin in _SEQUENCE_ORIGINS and len(args) == 1:
        return args[0]
    return None


@lru_cache(maxsize=_CACHE_SIZE)
def constructors_of(cls: type) -> list[Constructor]:
    """List the construction paths of ``cls`` in enumeration order.

    The class's own initialiser comes first, followed by class methods marked
    with :func:`constructor` in definition order. Variadic parameters are not
    treated as dependencies.
    """
    constructors = []

    try:
        signature = inspect.signature(cls)
    except (TypeError, ValueError):
        signature = None
    if signature is not None:
        init = cls.__init__
        hints = _type_hints(init) if inspect.isfunction(init) else {}
        constructors.append(Constructor(cls, _dependencies(signature, hints)))

    for name, member in vars(cls).items():
        if isinstance(member, classmethod) and getattr(member.__func__, _CONSTRUCTOR_MARKER, False):
            bound = getattr(cls, name)
            constructors.append(
                Constructor(bound, _dependencies(inspect.signature(bound), _type_hints(member.__func__)))
            )

    return constructors


@lru_cache(maxsize=_CACHE_SIZE)
def injectable_attributes(cls: type) -> list[Dependency]:
    """List the attributes of ``cls`` that property injection may assign.

    Candidates are public annotated attributes (excluding ``ClassVar``) found
    anywhere in the class hierarchy, and properties that define both a getter
    and a setter. Fields of frozen dataclasses are not writable and are left
    out.
    """
    attributes: dict[str, Dependency] = {}

    frozen = dataclasses.is_dataclass(cls) and cls.__dataclass_params__.frozen
    if not frozen:
        for name, hint in get_type_hints(cls, include_extras=True).items():
            if name.startswith("_") or hint is ClassVar or get_origin(hint) is ClassVar:
                continue
            attributes[name] = _make_dependency(name, hint)

    for klass in reversed(cls.__mro__):
        for name, member in vars(klass).items():
            if name.startswith("_") or not isinstance(member, property):
                continue
            if member.fget is None or member.fset is None:
                attributes.pop(name, None)
            else:
                attributes[name] = _make_dependency(name, _type_hints(member.fget).get("return"))

    return list(attributes.values())


def _type_hints(func: Callable) -> dict[str, Any]:
    return get_type_hints(func, include_extras=True)


def _dependencies(signature: inspect.Signature, hints: dict[str, Any]) -> list[Dependency]:
    return [
        _make_dependency(
            name,
            hints.get(name, _annotation_of(parameter)),
            parameter.default,
            parameter.kind is inspect.Parameter.POSITIONAL_ONLY,
        )
        for name, parameter in signature.parameters.items()
        if parameter.kind not in (inspect.Parameter.VAR_POSITIONAL, inspect.Parameter.VAR_KEYWORD)
    ]


def _annotation_of(parameter: inspect.Parameter) -> Optional[Any]:
    annotation = parameter.annotation
    if annotation is inspect.Parameter.empty or isinstance(annotation, str):
        return None
    return annotation


def _make_dependency(
    name: str,
    annotation: Optional[Any],
    default: Any = inspect.Parameter.empty,
    positional_only: bool = False,
) -> Dependency:
    if annotation is None:
        return Dependency(name, None, None, default, positional_only)

    key = None
    optional = _is_optional(annotation)
    annotation = _strip_optional(annotation)
    if get_origin(annotation) is Annotated:
        annotation, *metadata = get_args(annotation)
        key = next(
            (m.name if isinstance(m, Key) else m for m in metadata if isinstance(m, (str, Key))),
            None,
        )

    optional = optional or _is_optional(annotation)
    return Dependency(name, _strip_optional(annotation), key, default, positional_only, optional)


def _strip_optional(annotation: Any) -> Any:
    """``Optional[X]`` asks for ``X``; ``None`` remains an acceptable outcome."""
    if get_origin(annotation) in (Union, types.UnionType):
        args = [arg for arg in get_args(annotation) if arg is not type(None)]
        if len(args) == 1:
            return args[0]
    return annotation


def _is_optional(annotation: Any) -> bool:
    return get_origin(annotation) in (Union, types.UnionType) and type(None) in get_args(annotation)
