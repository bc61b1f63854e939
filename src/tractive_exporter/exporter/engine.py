"""
Poll-and-derive engine.

One call to `PollEngine.run_cycle()` is one scrape:

1. probe the upstream host; if it is unreachable report `up=0` and stop,
2. otherwise report `up=1` and poll every configured tracker in order,
3. turn each reading into samples, updating the location memory and visit counter.

A failing tracker only loses its own samples for the cycle (plus a `poll_error`
marker); the remaining trackers are still polled.
"""

from __future__ import annotations

import logging
import threading
import time
from typing import Callable, Iterable, Protocol

from tractive_exporter.config.settings import Settings
from tractive_exporter.domain.models import MalformedPositionError, MetricSample, PositionReading
from tractive_exporter.ingestion.tractive_client import TractiveClient, TractiveTransportError
from tractive_exporter.state.location_memory import LocationMemory
from tractive_exporter.state.visit_counter import VisitCounter

logger = logging.getLogger(__name__)


class PositionSource(Protocol):
    """Where readings come from.

    `get_position` signals a failed fetch with `TractiveTransportError` and an
    unusable body with `MalformedPositionError`; anything else is a bug.
    """

    def is_reachable(self) -> bool: ...

    def get_position(self, tracker_id: str) -> PositionReading: ...


class PollEngine:
    """Owns the per-tracker state and derives metric samples from fresh readings."""

    def __init__(
        self,
        client: PositionSource,
        tracker_ids: Iterable[str],
        *,
        memory: LocationMemory,
        counter: VisitCounter,
        clock: Callable[[], float] = time.time,
    ):
        self._client = client
        self._tracker_ids = list(tracker_ids)
        self._memory = memory
        self._counter = counter
        self._clock = clock
        # Scrapes may overlap (sync endpoints run in a thread pool).
        self._lock = threading.Lock()

    @property
    def tracker_ids(self) -> list[str]:
        return list(self._tracker_ids)

    def run_cycle(self) -> list[MetricSample]:
        if not self._client.is_reachable():
            return [MetricSample("up", 0.0, {})]

        samples = [MetricSample("up", 1.0, {})]
        for tracker_id in self._tracker_ids:
            samples.extend(self.poll_tracker(tracker_id))
        return samples

    def poll_tracker(self, tracker_id: str) -> list[MetricSample]:
        """Fetch one tracker and derive its samples; failures yield a `poll_error` marker."""
        try:
            reading = self._client.get_position(tracker_id)
        except TractiveTransportError as exc:
            logger.warning("Skipping tracker %s: %s", tracker_id, exc)
            return [MetricSample("poll_error", 1.0, {"tracker": tracker_id, "kind": "transport"})]
        except MalformedPositionError as exc:
            logger.warning("Skipping tracker %s: %s", tracker_id, exc)
            return [MetricSample("poll_error", 1.0, {"tracker": tracker_id, "kind": "malformed"})]

        if reading.is_error:
            logger.info(
                "Tracker %s answered with code %s (%s)", tracker_id, reading.code, reading.message or "no message"
            )
            return [MetricSample("code", float(reading.code), {"tracker": tracker_id})]

        return self.derive(tracker_id, reading)

    def derive(self, tracker_id: str, reading: PositionReading) -> list[MetricSample]:
        """Turn a successful reading into samples and update the tracker state."""
        labels = {"tracker": tracker_id}
        now = self._clock()

        samples = [
            MetricSample("last_time", float(reading.time), labels),
            MetricSample("age", now - reading.time, labels),
            MetricSample("latitude", reading.lat, labels),
            MetricSample("longitude", reading.lon, labels),
        ]

        with self._lock:
            observation = self._memory.observe(tracker_id, reading.lat, reading.lon, now)
            tick = self._counter.tick(tracker_id, observation.geohash, reading.time, observation.bucket_changed)

        if observation.bucket_changed:
            samples.append(MetricSample("distance", observation.distance_m, labels))
            samples.append(MetricSample("distance_time", observation.age_seconds, labels))

        if tick.should_emit:
            samples.append(
                MetricSample("geohash", float(tick.count), {"tracker": tracker_id, "geohash": observation.geohash})
            )

        samples.extend(
            [
                MetricSample("speed", reading.speed, labels),
                MetricSample("altitude", reading.alt, labels),
                MetricSample("live", 1.0 if reading.live else 0.0, labels),
            ]
        )
        return samples


def build_engine(settings: Settings, tracker_ids: Iterable[str] | None = None) -> PollEngine:
    """Wire a `PollEngine` with fresh state and the real Tractive client."""
    ids = settings.tractive.public_shares if tracker_ids is None else tracker_ids
    return PollEngine(
        TractiveClient(settings),
        ids,
        memory=LocationMemory(geohash_precision=settings.geo.geohash_precision),
        counter=VisitCounter(),
    )
