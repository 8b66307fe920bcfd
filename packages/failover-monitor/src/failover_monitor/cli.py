"""Command-line entry point: ``failover-monitor``."""

from __future__ import annotations

import argparse
import logging
import signal
import sys
from pathlib import Path
from typing import Any, Sequence

from failover_monitor.domain.exceptions import MonitorConfigError
from failover_monitor.factories import PrometheusNotInstalledError, create_monitor_loop
from failover_monitor.usecases.settings_loader import load_settings

logger = logging.getLogger("failover_monitor")

EXIT_OK = 0
EXIT_CONFIG_ERROR = 2


def build_parser() -> argparse.ArgumentParser:
    """Build the argument parser."""
    parser = argparse.ArgumentParser(
        prog="failover-monitor",
        description=(
            "Monitor a primary instance and fail over to the secondary. "
            "Configured through environment variables (PRIMARY_URL, "
            "SECONDARY_URL, REDIS_URL, ...) and an optional YAML file."
        ),
    )
    parser.add_argument(
        "--config",
        type=Path,
        default=None,
        help="YAML file with settings; environment variables take precedence",
    )
    parser.add_argument(
        "--once",
        action="store_true",
        help="Run a single evaluation and exit",
    )
    parser.add_argument(
        "--log-level",
        default="INFO",
        choices=["DEBUG", "INFO", "WARNING", "ERROR", "CRITICAL"],
        help="Logging level (default: INFO)",
    )
    return parser


def main(argv: Sequence[str] | None = None) -> int:
    """Run the failover monitor.

    Returns:
        Process exit code: 0 after --once or a requested stop,
        2 on configuration errors.
    """
    args = build_parser().parse_args(argv)
    logging.basicConfig(
        level=getattr(logging, args.log_level),
        format="%(asctime)s %(levelname)s %(name)s: %(message)s",
    )

    try:
        config_text = args.config.read_text() if args.config else None
        settings = load_settings(config_text=config_text)
        loop = create_monitor_loop(settings)
    except OSError as e:
        logger.error(f"Cannot read config file: {e}")
        return EXIT_CONFIG_ERROR
    except (MonitorConfigError, PrometheusNotInstalledError) as e:
        logger.error(f"Invalid failover monitor configuration: {e}")
        return EXIT_CONFIG_ERROR

    logger.info(f"Primary URL: {settings.primary_url}")
    logger.info(f"Secondary URL: {settings.secondary_url}")
    logger.info(f"Failover timeout: {settings.failover_timeout}s")

    if args.once:
        loop.tick()
        return EXIT_OK

    if settings.metrics_port is not None:
        from prometheus_client import start_http_server

        start_http_server(settings.metrics_port)
        logger.info(f"Serving metrics on port {settings.metrics_port}")

    def _request_stop(signum: int, frame: Any) -> None:
        logger.info(f"Received signal {signum}; stopping")
        loop.stop()

    signal.signal(signal.SIGTERM, _request_stop)
    signal.signal(signal.SIGINT, _request_stop)

    loop.run()
    return EXIT_OK


if __name__ == "__main__":
    sys.exit(main())
