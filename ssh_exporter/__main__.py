"""Entry point for the ssh_exporter server."""

import argparse
import logging
import sys

import uvicorn

from ssh_exporter.config import ConfigLoadError, Settings, load_config
from ssh_exporter.server import create_app
from ssh_exporter.utils.console import configure_logging

logger = logging.getLogger("ssh_exporter")


def parse_args(argv: list[str] | None = None) -> argparse.Namespace:
    """Parse command-line flags."""
    parser = argparse.ArgumentParser(
        prog="ssh_exporter",
        description="Run configured scripts over SSH and expose the results to Prometheus",
    )
    parser.add_argument(
        "--config",
        default="config.yml",
        help="Path to your ssh_exporter config file",
    )
    parser.add_argument(
        "--port",
        type=int,
        default=9428,
        help="Port probed metrics are served on.",
    )
    parser.add_argument(
        "--host",
        default="0.0.0.0",
        help="Address to listen on.",
    )
    return parser.parse_args(argv)


def main(argv: list[str] | None = None) -> int:
    """Validate configuration and run the HTTP server."""
    args = parse_args(argv)

    try:
        settings = Settings.from_env(
            config_path=args.config,
            http_port=args.port,
            http_host=args.host,
        )
    except FileNotFoundError as e:
        configure_logging()
        logger.critical("%s", e)
        return 1

    configure_logging(settings.log_level, settings.log_colors)

    # An unreadable config at startup is fatal; later failures only fail a request
    try:
        config = load_config(settings.config_path)
    except ConfigLoadError as e:
        logger.critical("%s", e)
        return 1
    logger.info(
        "Loaded %d script(s) from %s",
        len(config.scripts),
        settings.config_path,
    )

    app = create_app(settings)
    logger.info("Listening on %s:%d", settings.http_host, settings.http_port)
    uvicorn.run(
        app,
        host=settings.http_host,
        port=settings.http_port,
        log_level="warning",
    )
    return 0


if __name__ == "__main__":
    sys.exit(main())
