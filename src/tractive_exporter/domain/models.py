"""
Domain models (Pydantic).

These types represent the contract between the upstream API and the exporter:
- `PositionReading`: one parsed answer from the public-share position endpoint
- `MetricSample`: one labeled numeric observation produced by a scrape cycle

The position endpoint answers with one of two shapes:

    {"time": 1609533659, "lat": 47.1, "lon": 15.4, "speed": 0.2, "alt": 4, "lt_active": true}
    {"code": 3555, "category": "PUBLIC SHARE", "message": "The public share does not exist.", "detail": null}
"""

from __future__ import annotations

from typing import Any, Mapping, NamedTuple

from pydantic import BaseModel, ConfigDict, Field, ValidationError, field_validator, model_validator


class MalformedPositionError(ValueError):
    """The upstream body is neither a position nor an error object."""


class PositionReading(BaseModel):
    """A parsed position answer, either a fix or an upstream error."""

    model_config = ConfigDict(populate_by_name=True, extra="ignore")

    time: int | None = None
    lat: float | None = None
    lon: float | None = None
    speed: float = 0.0
    alt: float = 0.0
    live: bool = Field(default=False, alias="lt_active")

    code: int | None = None
    category: str | None = None
    message: str | None = None
    detail: Any = None

    @field_validator("speed", "alt", mode="before")
    @classmethod
    def _null_number(cls, value: Any) -> Any:
        return 0.0 if value is None else value

    @field_validator("live", mode="before")
    @classmethod
    def _null_flag(cls, value: Any) -> Any:
        return False if value is None else value

    @model_validator(mode="after")
    def _require_fix_unless_error(self) -> "PositionReading":
        if self.is_error:
            return self
        missing = [name for name in ("time", "lat", "lon") if getattr(self, name) is None]
        if missing:
            raise ValueError(f"position is missing {', '.join(missing)} and carries no error code")
        return self

    @property
    def is_error(self) -> bool:
        return bool(self.code)

    @classmethod
    def from_payload(cls, payload: Any) -> "PositionReading":
        """Validate a decoded JSON body.

        Raises:
            MalformedPositionError: If the body is not a JSON object, has wrong types,
                or has neither a complete fix nor a non-zero error code.
        """
        if not isinstance(payload, dict):
            raise MalformedPositionError(f"expected a JSON object, got {type(payload).__name__}")
        try:
            return cls.model_validate(payload)
        except ValidationError as exc:
            raise MalformedPositionError(str(exc)) from exc


class MetricSample(NamedTuple):
    """One labeled observation; `name` is the metric name without the namespace."""

    name: str
    value: float
    labels: Mapping[str, str]
