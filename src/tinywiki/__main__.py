"""Command-line entry point: python -m tinywiki."""

import argparse
import logging
from pathlib import Path

import uvicorn

from tinywiki.config import Settings
from tinywiki.main import create_app

logger = logging.getLogger("tinywiki")


def parse_args(argv: list[str] | None = None) -> argparse.Namespace:
    parser = argparse.ArgumentParser(description="Serve a personal wiki.")
    parser.add_argument("-H", "--host", help="Host/IP to bind")
    parser.add_argument("-p", "--port", type=int, help="Port to bind")
    parser.add_argument("-d", "--data-dir", type=Path, help="Directory holding page files")
    parser.add_argument("--template-dir", type=Path, help="Directory holding view.html and edit.html")
    parser.add_argument("--log-level", type=str.upper, help="Logging level (default: INFO)")
    return parser.parse_args(argv)


def build_settings(args: argparse.Namespace) -> Settings:
    """Environment settings with command-line flags layered on top."""
    overrides = {key: value for key, value in vars(args).items() if value is not None}
    return Settings(**overrides)


def main(argv: list[str] | None = None) -> None:
    settings = build_settings(parse_args(argv))

    logging.basicConfig(
        level=getattr(logging, settings.log_level),
        format="%(asctime)s - %(name)s - %(levelname)s - %(message)s",
    )

    app = create_app(settings)
    logger.info("Starting %s on %s:%d", settings.app_title, settings.host, settings.port)
    uvicorn.run(app, host=settings.host, port=settings.port, log_level=settings.log_level.lower())


if __name__ == "__main__":
    main()
