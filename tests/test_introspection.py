from collections.abc import Collection, MutableSequence
from dataclasses import dataclass
from typing import Annotated, ClassVar, Iterable, List, Optional, Sequence

import pytest

from wirework.domain import Dependency
from wirework.introspection import (
    Key,
    constructor,
    constructors_of,
    injectable_attributes,
    sequence_item_type,
)


class Database:
    pass


class Cache:
    pass


class Service:
    def __init__(self, db: Database, cache: Annotated[Cache, "redis"], fallback: Annotated[Cache, Key("memory")]):
        pass


class Injectable:
    counter: ClassVar[int] = 0
    db: Optional[Database] = None
    cache: Annotated[Cache, "redis"] = None
    _private: Database = None

    def __init__(self):
        self._mailer = None

    @property
    def mailer(self) -> Database:
        return self._mailer

    @mailer.setter
    def mailer(self, value):
        self._mailer = value

    @property
    def read_only(self) -> Database:
        return None


@dataclass(frozen=True)
class Frozen:
    db: Optional[Database] = None


@dataclass
class Mutable:
    db: Optional[Database] = None


@pytest.mark.parametrize(
    "tp",
    [
        list[Database],
        List[Database],
        Sequence[Database],
        Iterable[Database],
        Collection[Database],
        MutableSequence[Database],
        tuple[Database, ...],
    ],
)
def test_sequence_shapes_unwrap_to_their_item_type(tp):
    assert sequence_item_type(tp) is Database


@pytest.mark.parametrize(
    "tp", [Database, list, dict[str, Database], tuple[Database, Cache], Optional[Database]]
)
def test_other_types_are_not_sequences(tp):
    assert sequence_item_type(tp) is None


def test_dependencies_carry_keys_from_annotations():
    (init,) = constructors_of(Service)

    assert init.dependencies == [
        Dependency("db", Database, None),
        Dependency("cache", Cache, "redis"),
        Dependency("fallback", Cache, "memory"),
    ]


def test_injectable_attributes_include_annotations_and_writable_properties():
    attributes = {a.name: a for a in injectable_attributes(Injectable)}

    assert set(attributes) == {"db", "cache", "mailer"}
    assert attributes["db"].declared_type is Database
    assert attributes["cache"].key == "redis"
    assert attributes["mailer"].declared_type is Database


def test_frozen_dataclass_fields_are_not_injectable():
    assert injectable_attributes(Frozen) == []
    assert [a.name for a in injectable_attributes(Mutable)] == ["db"]


def test_optional_annotations_are_recorded_on_dependencies():
    attributes = {a.name: a for a in injectable_attributes(Injectable)}

    assert attributes["db"].optional is True
    assert attributes["cache"].optional is False
    assert attributes["mailer"].optional is False


def test_optional_outside_annotated_keeps_the_key():
    class KeyedOptional:
        def __init__(self, db: Optional[Annotated[Database, "replica"]] = None):
            pass

    (init,) = constructors_of(KeyedOptional)

    assert init.dependencies == [Dependency("db", Database, "replica", None, False, True)]


def func_without_class(db: Database):
    return db


@pytest.mark.parametrize("target", [func_without_class, staticmethod(func_without_class)])
def test_constructor_rejects_anything_but_class_methods(target):
    with pytest.raises(TypeError, match="classmethod"):
        constructor(target)


def test_constructor_must_sit_above_classmethod():
    with pytest.raises(TypeError):

        class Misordered:
            @classmethod
            @constructor
            def create(cls) -> "Misordered":
                return cls()


@pytest.mark.parametrize("cached", [constructors_of, injectable_attributes])
def test_introspection_caches_are_bounded(cached):
    assert cached.cache_info().maxsize is not None
