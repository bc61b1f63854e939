"""
Per-tracker location memory.

Remembers where each tracker was last seen and what the most recent geohash
transition looked like (how far it moved, how long it took). Distance and age are
only recomputed when the geohash changes; repeated readings inside the same cell
leave them describing the last transition.
"""

from __future__ import annotations

from dataclasses import dataclass
from typing import NamedTuple

from tractive_exporter.core.geo import GeoPoint, encode_geohash, haversine_m


@dataclass
class LocationMemoryEntry:
    current: GeoPoint
    geohash: str
    changed_at: float
    previous: GeoPoint | None = None
    previous_geohash: str | None = None
    distance_m: float = 0.0
    age_seconds: float = 0.0


class Observation(NamedTuple):
    bucket_changed: bool
    distance_m: float
    age_seconds: float
    geohash: str


class LocationMemory:
    """Last known coordinate + geohash per tracker ID."""

    def __init__(self, geohash_precision: int = 8):
        self._precision = geohash_precision
        self._entries: dict[str, LocationMemoryEntry] = {}

    def get(self, tracker_id: str) -> LocationMemoryEntry | None:
        return self._entries.get(tracker_id)

    def __len__(self) -> int:
        return len(self._entries)

    def observe(self, tracker_id: str, lat: float, lon: float, now: float) -> Observation:
        """Record a successful reading taken at wall-clock `now` (epoch seconds).

        The first reading for a tracker has nothing to compare with, so it never
        counts as a transition.
        """
        point = GeoPoint(lat=lat, lon=lon)
        geohash = encode_geohash(lat, lon, self._precision)

        entry = self._entries.get(tracker_id)
        if entry is None:
            self._entries[tracker_id] = LocationMemoryEntry(current=point, geohash=geohash, changed_at=now)
            return Observation(False, 0.0, 0.0, geohash)

        if geohash == entry.geohash:
            return Observation(False, entry.distance_m, entry.age_seconds, geohash)

        entry.previous = entry.current
        entry.previous_geohash = entry.geohash
        entry.distance_m = haversine_m(entry.current, point)
        entry.age_seconds = now - entry.changed_at
        entry.current = point
        entry.geohash = geohash
        entry.changed_at = now
        return Observation(True, entry.distance_m, entry.age_seconds, geohash)
