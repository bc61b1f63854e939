import pytest

from tractive_exporter.core.geo import GeoPoint, haversine_m
from tractive_exporter.state.location_memory import LocationMemory

A = (47.0, 15.0)
B = (47.01, 15.0)


def test_first_observation_is_not_a_transition():
    memory = LocationMemory()

    obs = memory.observe("dog", *A, now=100.0)

    assert obs.bucket_changed is False
    assert obs.distance_m == 0.0
    assert obs.age_seconds == 0.0
    entry = memory.get("dog")
    assert entry is not None
    assert entry.geohash == obs.geohash
    assert entry.previous is None


def test_unknown_tracker_has_no_entry():
    assert LocationMemory().get("cat") is None


def test_alternating_cells_fire_only_on_transitions():
    memory = LocationMemory()
    expected_distance = haversine_m(GeoPoint(*A), GeoPoint(*B))

    results = [
        memory.observe("dog", *A, now=0.0),
        memory.observe("dog", *A, now=10.0),
        memory.observe("dog", *B, now=20.0),
        memory.observe("dog", *B, now=30.0),
        memory.observe("dog", *A, now=45.0),
    ]

    assert [r.bucket_changed for r in results] == [False, False, True, False, True]

    # A -> B: measured from the first sighting, not from the repeated A at t=10.
    assert results[2].distance_m == pytest.approx(expected_distance)
    assert results[2].age_seconds == 20.0

    # Same cell: values still describe the A -> B transition.
    assert results[3].distance_m == pytest.approx(expected_distance)
    assert results[3].age_seconds == 20.0

    # B -> A: measured from the B transition at t=20.
    assert results[4].distance_m == pytest.approx(expected_distance)
    assert results[4].age_seconds == 25.0

    entry = memory.get("dog")
    assert entry.previous == GeoPoint(*B)
    assert entry.current == GeoPoint(*A)
    assert entry.previous_geohash == results[2].geohash
    assert entry.geohash == results[0].geohash


def test_trackers_are_independent():
    memory = LocationMemory()
    memory.observe("dog", *A, now=0.0)
    memory.observe("cat", *B, now=0.0)

    assert memory.observe("dog", *A, now=5.0).bucket_changed is False
    assert memory.observe("cat", *A, now=5.0).bucket_changed is True
    assert len(memory) == 2
