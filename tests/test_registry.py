from abc import ABC

import pytest

from wirework.domain import (
    HandlerRegistration,
    PerRequestTypeRegistration,
    SingletonTypeRegistration,
)
from wirework.errors import TypeAlreadyRegistered
from wirework.registry import RegistrationStore


class Greeter(ABC):
    pass


class Farewell(ABC):
    pass


class EnglishGreeter(Greeter, Farewell):
    pass


class FrenchGreeter(Greeter):
    pass


def greet(container, requester):
    return EnglishGreeter()


@pytest.fixture
def store():
    return RegistrationStore()


def test_registrations_keep_their_order(store):
    store.add_handler(Greeter, greet)
    store.add_per_request(Greeter, EnglishGreeter)
    store.add_singleton(Greeter, FrenchGreeter)

    assert list(store) == [
        HandlerRegistration(Greeter, None, greet),
        PerRequestTypeRegistration(Greeter, None, EnglishGreeter),
        SingletonTypeRegistration(Greeter, None, FrenchGreeter),
    ]
    assert len(store) == 3


def test_matching_filters_by_type_and_key(store):
    store.add_per_request(Greeter, EnglishGreeter)
    store.add_per_request(Greeter, FrenchGreeter, "fr")
    store.add_per_request(Farewell, EnglishGreeter, "fr")

    assert store.matching(Greeter, "fr") == [PerRequestTypeRegistration(Greeter, "fr", FrenchGreeter)]
    assert store.matching(Greeter) == [PerRequestTypeRegistration(Greeter, None, EnglishGreeter)]
    assert store.matching(Farewell) == []


def test_conflicts_are_detected_across_request_types(store):
    store.add_singleton(Greeter, EnglishGreeter)

    with pytest.raises(TypeAlreadyRegistered, match="EnglishGreeter"):
        store.add_per_request(Farewell, EnglishGreeter)

    assert len(store) == 1


def test_same_implementation_may_be_registered_under_other_keys(store):
    store.add_singleton(Greeter, EnglishGreeter)
    store.add_singleton(Greeter, EnglishGreeter, "en")
    store.add_singleton(Greeter, EnglishGreeter, "uk")

    assert len(store) == 3


def test_handlers_are_exempt_from_conflict_checks(store):
    store.add_handler(Greeter, greet)
    store.add_handler(Greeter, greet)
    store.add_per_request(Greeter, EnglishGreeter)

    assert len(store) == 3


def test_single_registration_queries(store):
    store.add_per_request(Greeter, EnglishGreeter)
    store.add_per_request(Farewell, FrenchGreeter)
    store.add_handler(Farewell, greet)

    assert store.is_single_registered(Greeter)
    assert not store.is_single_registered(Farewell)
    assert store.is_registered(Farewell)
    assert not store.is_single_registered(Greeter, "key")


def test_sequence_types_are_registered_through_their_items(store):
    store.add_per_request(Greeter, EnglishGreeter)

    assert store.is_registered(list[Greeter])
    assert not store.is_registered(list[Farewell])
    assert not store.is_single_registered(list[Greeter])


def test_sequence_types_can_ignore_keys(store):
    store.add_per_request(Greeter, EnglishGreeter)

    assert not store.is_registered(list[Greeter], "extra")
    assert store.is_registered_under_any_key(list[Greeter])
    assert not store.is_registered_under_any_key(list[Farewell])
