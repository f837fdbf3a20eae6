import logging

import pytest

from dispatch.dispatcher import Dispatcher, MatchStatus
from dispatch.policy import MatchingPolicy
from drivers.registry import DriverRegistry
from geo.geohash import decode
from geo.models import Coordinate
from rides.queue import RideRequestNotFoundError, RideRequestQueue


@pytest.fixture
def registry(clock):
    return DriverRegistry(clock=clock)


@pytest.fixture
def queue(clock):
    return RideRequestQueue(clock=clock)


@pytest.fixture
def dispatcher(registry, queue):
    return Dispatcher(registry, queue)


def test_nearest_available_driver_is_matched(dispatcher, registry, queue, pickup_location):
    lat, lon = pickup_location
    near = registry.register(Coordinate(lat, lon))
    far = registry.register(Coordinate(lat + 0.01, lon + 0.01))
    request_id = queue.submit(Coordinate(lat, lon))

    result = dispatcher.attempt_match(request_id)

    assert result.status == MatchStatus.MATCHED
    assert result.matched
    assert result.driver_id == near
    assert result.distance_km == pytest.approx(0.0)
    assert not registry.get(near).is_available
    assert registry.get(far).is_available
    assert request_id not in queue


def test_same_distance_goes_to_driver_idle_longest(dispatcher, registry, queue, clock, pickup_location):
    lat, lon = pickup_location
    long_idle = registry.register(Coordinate(lat, lon))
    clock.advance(120)
    recently_free = registry.register(Coordinate(lat, lon))

    result = dispatcher.attempt_match(queue.submit(Coordinate(lat, lon)))

    assert result.driver_id == long_idle
    assert registry.get(recently_free).is_available


def test_becoming_free_again_resets_fairness(dispatcher, registry, queue, clock, pickup_location):
    lat, lon = pickup_location
    first = registry.register(Coordinate(lat, lon))
    clock.advance(60)
    second = registry.register(Coordinate(lat, lon))

    # first finishes a trip later than second registered
    registry.set_availability(first, False)
    clock.advance(60)
    registry.set_availability(first, True)

    result = dispatcher.attempt_match(queue.submit(Coordinate(lat, lon)))

    assert result.driver_id == second


def test_near_tie_within_tolerance_prefers_older(dispatcher, registry, queue, clock, pickup_location):
    lat, lon = pickup_location
    at_pickup = registry.register(Coordinate(lat, lon))
    clock.advance(-60)
    # ~0.5m away and registered a minute earlier
    slightly_farther = registry.register(Coordinate(lat + 0.000005, lon))

    result = dispatcher.attempt_match(queue.submit(Coordinate(lat, lon)))

    assert result.driver_id == slightly_farther
    assert registry.get(at_pickup).is_available


def test_distance_beyond_tolerance_beats_older_activity(dispatcher, registry, queue, clock, pickup_location):
    lat, lon = pickup_location
    at_pickup = registry.register(Coordinate(lat, lon))
    clock.advance(-60)
    # ~11m away
    farther = registry.register(Coordinate(lat + 0.0001, lon))

    result = dispatcher.attempt_match(queue.submit(Coordinate(lat, lon)))

    assert result.driver_id == at_pickup
    assert registry.get(farther).is_available


def test_no_available_driver_leaves_request_pending(dispatcher, registry, queue, pickup_location):
    lat, lon = pickup_location
    busy = registry.register(Coordinate(lat, lon))
    registry.set_availability(busy, False)
    # Aalborg: nowhere near the search prefix
    registry.register(Coordinate(57.64911, 10.40744))
    request_id = queue.submit(Coordinate(lat, lon))

    result = dispatcher.attempt_match(request_id)

    assert result.status == MatchStatus.NO_AVAILABLE_MATCH
    assert result.driver_id is None
    assert request_id in queue


def test_pending_request_can_be_matched_later(dispatcher, registry, queue, pickup_location):
    lat, lon = pickup_location
    request_id = queue.submit(Coordinate(lat, lon))
    assert not dispatcher.attempt_match(request_id).matched

    driver_id = registry.register(Coordinate(lat, lon))

    assert dispatcher.attempt_match(request_id).driver_id == driver_id


def test_unknown_request_raises_not_found(dispatcher):
    with pytest.raises(RideRequestNotFoundError):
        dispatcher.attempt_match(99)


def test_search_prefix_length_controls_catchment(registry, queue):
    """
    Default 3 symbols reaches across the parent cell; 6 only sees siblings.
    """
    request_location = decode("dr5re0")
    sibling = registry.register(decode("dr5rez"))
    other_parent = registry.register(decode("dr5rs0"))

    narrow = Dispatcher(registry, queue, MatchingPolicy(search_prefix_length=6))
    first = narrow.attempt_match(queue.submit(request_location))
    second = narrow.attempt_match(queue.submit(request_location))

    assert first.driver_id == sibling
    assert not second.matched

    wide = Dispatcher(registry, queue, MatchingPolicy())
    assert wide.attempt_match(second.request_id).driver_id == other_parent


def test_match_logs_terminal_status(dispatcher, registry, queue, pickup_location, caplog):
    lat, lon = pickup_location
    driver_id = registry.register(Coordinate(lat, lon))
    request_id = queue.submit(Coordinate(lat, lon))

    with caplog.at_level(logging.INFO, logger="dispatch.dispatcher"):
        dispatcher.attempt_match(request_id)

    assert f"Ride request #{request_id} MATCHED with driver #{driver_id}" in caplog.text
