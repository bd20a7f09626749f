import argparse
import asyncio
import logging
import logging.config
import sys
from pathlib import Path
from typing import List, Optional

from pagewright.errors import BuildError
from pagewright.services.generator import Generator
from pagewright.services.site import DEFAULT_CONFIG_FILENAME, Site

logger = logging.getLogger(__name__)


def configure_logging(level: str = "INFO") -> None:
    logging.config.dictConfig(
        {
            "version": 1,
            "disable_existing_loggers": False,
            "formatters": {
                "json": {
                    "format": '{"time": "%(asctime)s", "level": "%(levelname)s", "logger": "%(name)s", "message": "%(message)s"}',
                },
            },
            "handlers": {
                "console": {
                    "class": "logging.StreamHandler",
                    "formatter": "json",
                },
            },
            "root": {"level": level, "handlers": ["console"]},
        }
    )


def build_parser() -> argparse.ArgumentParser:
    parser = argparse.ArgumentParser(
        prog="pagewright",
        description="Build a static site from a content tree.",
    )
    subparsers = parser.add_subparsers(dest="command", required=True)

    build = subparsers.add_parser("build", help="Build the site once.")
    build.add_argument(
        "--config",
        type=Path,
        default=Path(DEFAULT_CONFIG_FILENAME),
        help=f"Site configuration file (default: {DEFAULT_CONFIG_FILENAME}).",
    )
    build.add_argument(
        "--concurrency",
        type=int,
        default=None,
        help="Override build.concurrency from the configuration.",
    )

    parser.add_argument(
        "--log-level",
        default="INFO",
        choices=["DEBUG", "INFO", "WARNING", "ERROR"],
        help="Logging level (default: INFO).",
    )
    return parser


async def run_build(config_path: Path, concurrency: Optional[int] = None) -> int:
    site = Site()
    await site.load_config(config_path)
    if concurrency is not None:
        if concurrency < 1:
            raise BuildError("--concurrency must be at least 1")
        site.concurrency = concurrency

    summary = await Generator(site).build()
    return summary.pages


def main(argv: Optional[List[str]] = None) -> int:
    args = build_parser().parse_args(argv)
    configure_logging(args.log_level)

    try:
        asyncio.run(run_build(args.config, args.concurrency))
    except BuildError as exc:
        if exc.data is not None:
            logger.error("%s (%s)", exc.message, exc.data)
        else:
            logger.error("%s", exc.message)
        if exc.__cause__ is not None:
            logger.debug("Caused by: %r", exc.__cause__)
        return 1
    except Exception:
        logger.exception("Unexpected error during build")
        return 1
    return 0


if __name__ == "__main__":
    sys.exit(main())
