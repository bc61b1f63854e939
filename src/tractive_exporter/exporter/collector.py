"""
Prometheus collector.

`TractiveCollector` is registered into a `CollectorRegistry`; every time the registry
is rendered (one `/metrics` request) it runs one engine cycle and turns the samples
into metric families.
"""

from __future__ import annotations

from typing import Iterator, NamedTuple

from prometheus_client.metrics_core import CounterMetricFamily, GaugeMetricFamily, Metric
from prometheus_client.registry import Collector

from tractive_exporter.exporter.engine import PollEngine

NAMESPACE = "tractive"


class MetricDef(NamedTuple):
    kind: str
    documentation: str
    labels: tuple[str, ...]


METRICS: dict[str, MetricDef] = {
    "up": MetricDef("gauge", "Was the last Tractive query successful.", ()),
    "last_time": MetricDef("gauge", "Timestamp of the last reported message", ("tracker",)),
    "age": MetricDef("gauge", "Age of the last reported message", ("tracker",)),
    "latitude": MetricDef("gauge", "Latitude of the tracker", ("tracker",)),
    "longitude": MetricDef("gauge", "Longitude of the tracker", ("tracker",)),
    "geohash": MetricDef("counter", "Geohash count", ("tracker", "geohash")),
    "distance": MetricDef("gauge", "Distance from last location", ("tracker",)),
    "distance_time": MetricDef(
        "gauge", "Time in which the distance from last location was done", ("tracker",)
    ),
    "speed": MetricDef("gauge", "Speed of the tracker", ("tracker",)),
    "altitude": MetricDef("gauge", "Altitude of the tracker", ("tracker",)),
    "live": MetricDef("gauge", "Is tracker live", ("tracker",)),
    "code": MetricDef("gauge", "API response code", ("tracker",)),
    "poll_error": MetricDef("gauge", "Polling this tracker failed during the last scrape", ("tracker", "kind")),
}


def _new_family(name: str, definition: MetricDef) -> Metric:
    full_name = f"{NAMESPACE}_{name}"
    if definition.kind == "counter":
        return CounterMetricFamily(full_name, definition.documentation, labels=list(definition.labels))
    return GaugeMetricFamily(full_name, definition.documentation, labels=list(definition.labels))


class TractiveCollector(Collector):
    def __init__(self, engine: PollEngine):
        self._engine = engine

    def describe(self) -> Iterator[Metric]:
        """Yield the metric families without samples; registering must not poll upstream."""
        for name, definition in METRICS.items():
            yield _new_family(name, definition)

    def collect(self) -> Iterator[Metric]:
        families: dict[str, Metric] = {}
        for sample in self._engine.run_cycle():
            definition = METRICS[sample.name]
            family = families.get(sample.name)
            if family is None:
                family = families[sample.name] = _new_family(sample.name, definition)
            family.add_metric([sample.labels[label] for label in definition.labels], sample.value)
        yield from families.values()
