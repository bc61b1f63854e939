"""
Per-(tracker, geohash) visit counter.

Backs the `tractive_geohash_total` counter. A cell's count goes up once per new
sample seen in it, and once more each time the tracker moves (back) into it. The
same sample re-served by the API is not counted twice.
"""

from __future__ import annotations

from dataclasses import dataclass
from typing import NamedTuple


@dataclass
class VisitCounterEntry:
    count: int = 0
    last_time: int | None = None


class Tick(NamedTuple):
    should_emit: bool
    count: int


class VisitCounter:
    def __init__(self) -> None:
        self._entries: dict[tuple[str, str], VisitCounterEntry] = {}

    def get(self, tracker_id: str, geohash: str) -> VisitCounterEntry | None:
        return self._entries.get((tracker_id, geohash))

    def __len__(self) -> int:
        return len(self._entries)

    def tick(self, tracker_id: str, geohash: str, reading_time: int, bucket_changed: bool) -> Tick:
        entry = self._entries.setdefault((tracker_id, geohash), VisitCounterEntry())
        if reading_time == entry.last_time and not bucket_changed:
            return Tick(False, entry.count)

        entry.count += 1
        entry.last_time = reading_time
        return Tick(True, entry.count)
