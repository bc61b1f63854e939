"""
Network reachability probe.

A raw TCP connect is cheaper than a real request and tells us whether polling the
upstream is worth attempting at all during a scrape.
"""

from __future__ import annotations

import logging
import socket

logger = logging.getLogger(__name__)


def is_reachable(host: str, port: int = 443, *, timeout_seconds: float = 1.0) -> bool:
    """Return True if a TCP connection to `host:port` succeeds within the timeout."""
    try:
        with socket.create_connection((host, port), timeout=timeout_seconds):
            return True
    except OSError as exc:
        logger.warning("Upstream %s:%s unreachable: %s", host, port, exc)
        return False
