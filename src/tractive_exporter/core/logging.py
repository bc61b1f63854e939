"""
Logging configuration.

We use a YAML logging config (`src/tractive_exporter/config/logging.yaml`) and then apply
runtime overrides from settings (e.g., `TRACTIVE_LOG_LEVEL` or `--log-level`).
"""

from __future__ import annotations

import logging.config

from tractive_exporter.config.settings import get_logging_config, get_settings


def configure_logging(level: str | None = None) -> None:
    """Configure the Python logging system based on packaged YAML config + settings."""
    cached = get_logging_config()
    # The cached mapping is shared; only touch copies.
    config = {
        **cached,
        "root": dict(cached.get("root", {})),
        "handlers": {name: dict(h) for name, h in cached.get("handlers", {}).items()},
    }

    level = (level or get_settings().app.log_level).upper()
    config["root"]["level"] = level
    for handler in config["handlers"].values():
        if "level" in handler:
            handler["level"] = level

    logging.config.dictConfig(config)
