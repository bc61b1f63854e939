"""
Tractive exporter CLI entrypoint.

Parses the command-line flags, merges them onto the YAML/env settings, configures
logging and serves the FastAPI app with uvicorn.
"""

from __future__ import annotations

import argparse
import logging

import uvicorn

from tractive_exporter.api.app import create_app
from tractive_exporter.config.settings import Settings, WebSettings, get_settings, split_tracker_ids
from tractive_exporter.core.logging import configure_logging

logger = logging.getLogger(__name__)


def parse_listen_address(value: str) -> tuple[str, int]:
    """Split `host:port` or `:port` into `(host, port)`; an empty host means all interfaces."""
    host, sep, port = value.strip().rpartition(":")
    if not sep or not port.isdigit():
        raise ValueError(f"Invalid listen address '{value}', expected HOST:PORT or :PORT")
    host = host.strip("[]") or "0.0.0.0"
    return host, int(port)


def apply_cli_overrides(settings: Settings, args: argparse.Namespace) -> Settings:
    """Return a copy of `settings` with CLI flags applied (tracker IDs are merged, not replaced)."""
    tractive = settings.tractive.model_copy(
        update={
            "public_shares": split_tracker_ids(",".join(settings.tractive.public_shares), args.trackers_list)
        }
    )
    web_update: dict[str, str] = {}
    if args.listen_address is not None:
        web_update["listen_address"] = args.listen_address
    if args.metrics_path is not None:
        web_update["metrics_path"] = args.metrics_path
    web = WebSettings.model_validate({**settings.web.model_dump(), **web_update})

    app_settings = settings.app
    if args.log_level is not None:
        app_settings = app_settings.model_copy(update={"log_level": args.log_level})

    return settings.model_copy(update={"tractive": tractive, "web": web, "app": app_settings})


def build_parser() -> argparse.ArgumentParser:
    """Build the argparse parser for the exporter CLI."""
    parser = argparse.ArgumentParser(prog="tractive-exporter", description="Prometheus exporter for Tractive trackers")
    parser.add_argument(
        "--trackers.list",
        dest="trackers_list",
        default="",
        help="Comma separated list of IDs from the public URLs (merged with TRACTIVE_PUBLIC_SHARES)",
    )
    parser.add_argument(
        "--web.port",
        dest="listen_address",
        default=None,
        help="Address to listen on for telemetry (default :9101)",
    )
    parser.add_argument(
        "--web.path",
        dest="metrics_path",
        default=None,
        help="Path under which to expose metrics (default /metrics)",
    )
    parser.add_argument("--log-level", dest="log_level", default=None, help="Override the log level")
    return parser


def main(argv: list[str] | None = None) -> int:
    """CLI entrypoint callable used by `python -m tractive_exporter.cli`."""
    parser = build_parser()
    args = parser.parse_args(argv)
    settings = apply_cli_overrides(get_settings(), args)
    configure_logging(settings.app.log_level)

    try:
        host, port = parse_listen_address(settings.web.listen_address)
    except ValueError as exc:
        parser.error(str(exc))

    if not settings.tractive.public_shares:
        logger.warning("No tracker IDs configured; only tractive_up will be exported.")
    else:
        logger.info("Exporting %d tracker(s)", len(settings.tractive.public_shares))

    app = create_app(settings)
    logger.info("Listening on %s:%d, metrics at %s", host, port, settings.web.metrics_path)
    uvicorn.run(app, host=host, port=port, log_config=None)
    return 0


if __name__ == "__main__":
    raise SystemExit(main())
