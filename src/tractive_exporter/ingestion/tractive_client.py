"""
Tractive public-share client.

This module is responsible only for:
- probing whether the Tractive API host is reachable,
- fetching the latest position of one public share,
- parsing it into a `PositionReading`.

It does not keep any state between calls and never retries; see
`tractive_exporter.exporter.engine` for what happens with the readings.
"""

from __future__ import annotations

import logging

import httpx

from tractive_exporter.config.settings import Settings
from tractive_exporter.core.http import get_json
from tractive_exporter.core.net import is_reachable
from tractive_exporter.domain.models import MalformedPositionError, PositionReading

logger = logging.getLogger(__name__)


class TractiveError(Exception):
    """Base class for per-tracker poll failures."""


class TractiveTransportError(TractiveError):
    """The position request failed (connection, timeout, non-2xx status)."""


class TractiveMalformedResponse(TractiveError, MalformedPositionError):
    """The position request succeeded but the body could not be understood."""


class TractiveClient:
    """Thin client for `https://<host>/3/public_share/<id>/position`."""

    def __init__(self, settings: Settings):
        self._settings = settings

    def position_url(self, tracker_id: str) -> str:
        tractive = self._settings.tractive
        path = tractive.position_path.format(tracker_id=tracker_id)
        return f"https://{tractive.host}{path}"

    def is_reachable(self) -> bool:
        tractive = self._settings.tractive
        return is_reachable(tractive.host, tractive.port, timeout_seconds=tractive.probe_timeout_seconds)

    def get_position(self, tracker_id: str) -> PositionReading:
        """Fetch and parse the latest position for `tracker_id`.

        Raises:
            TractiveTransportError: On transport errors or non-2xx status codes.
            TractiveMalformedResponse: If the body is not JSON or not a known shape.
        """
        tractive = self._settings.tractive
        url = self.position_url(tracker_id)
        try:
            payload = get_json(
                url,
                headers={"User-Agent": tractive.user_agent},
                timeout_seconds=self._settings.app.http_timeout_seconds,
                verify=tractive.verify_tls,
            )
        except httpx.HTTPError as exc:
            raise TractiveTransportError(f"GET {url} failed: {exc}") from exc
        except ValueError as exc:
            raise TractiveMalformedResponse(f"GET {url} returned invalid JSON: {exc}") from exc

        logger.debug("Position payload for %s: %s", tracker_id, payload)

        try:
            return PositionReading.from_payload(payload)
        except MalformedPositionError as exc:
            raise TractiveMalformedResponse(f"GET {url} returned an unexpected body: {exc}") from exc
