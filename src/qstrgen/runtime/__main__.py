"""
Command line entry point.

Usage:
    python -m qstrgen.runtime [options] PREPROCESSED...
"""

import argparse
import logging
import sys
from collections.abc import Sequence
from pathlib import Path
from typing import NoReturn

import structlog

from qstrgen.core.config import BytesIn, GeneratorConfig
from qstrgen.core.data import QstrData, default_qstr_data
from qstrgen.core.errors import QstrGenError
from qstrgen.extraction.aggregate import extract_data
from qstrgen.runtime.sources import PreprocessedFileReader, load_units

logger = structlog.get_logger()

LOG_LEVELS = ("DEBUG", "INFO", "WARNING", "ERROR", "CRITICAL")


def configure_logging(level: str = "INFO") -> None:
    """Route structlog through the stdlib logger at ``level``."""
    logging.basicConfig(format="%(message)s", stream=sys.stderr, level=level.upper(), force=True)
    structlog.configure(
        processors=[
            structlog.stdlib.filter_by_level,
            structlog.stdlib.add_logger_name,
            structlog.stdlib.add_log_level,
            structlog.stdlib.PositionalArgumentsFormatter(),
            structlog.processors.TimeStamper(fmt="iso"),
            structlog.processors.StackInfoRenderer(),
            structlog.processors.format_exc_info,
            structlog.processors.UnicodeDecoder(),
            structlog.dev.ConsoleRenderer(),
        ],
        wrapper_class=structlog.stdlib.BoundLogger,
        context_class=dict,
        logger_factory=structlog.stdlib.LoggerFactory(),
        cache_logger_on_first_use=True,
    )


def build_parser() -> argparse.ArgumentParser:
    parser = argparse.ArgumentParser(
        prog="qstrgen",
        description="Extract the qstr table and module registry from preprocessed sources.",
    )
    parser.add_argument("files", nargs="+", type=Path, help="Preprocessed translation units, in scan order")
    parser.add_argument("--root", type=Path, help="Source root the origin labels are relative to")
    parser.add_argument("--config", type=Path, help="JSON generator configuration")
    parser.add_argument("--data-dir", type=Path, help="Directory with replacement qstr data documents")
    parser.add_argument("--hash-bytes", type=int, choices=(1, 2), help="Bytes in each qstr hash")
    parser.add_argument(
        "--qstr", action="append", default=[], metavar="VALUE", help="Extra qstr to intern (repeatable)"
    )
    parser.add_argument("--output", type=Path, help="Write the data model here instead of stdout")
    parser.add_argument("--jobs", type=int, default=None, help="Files to read concurrently")
    parser.add_argument(
        "--log-level",
        type=str.upper,
        choices=LOG_LEVELS,
        default="INFO",
        help="Logging level (default: INFO)",
    )
    return parser


def load_config(args: argparse.Namespace) -> GeneratorConfig:
    """Configuration from ``--config``, overridden by the other options."""
    config = GeneratorConfig.from_file(args.config) if args.config else GeneratorConfig()
    if args.hash_bytes is not None:
        config = config.model_copy(update={"bytes_in_hash": BytesIn(args.hash_bytes)})
    for value in args.qstr:
        config = config.with_qstr(value)
    return config


def run(argv: Sequence[str] | None = None) -> int:
    """Run one generation; returns the process exit status."""
    args = build_parser().parse_args(argv)
    configure_logging(args.log_level)

    def origin_for(path: Path) -> str:
        if args.root is not None:
            return path.resolve().relative_to(args.root.resolve()).as_posix()
        return path.as_posix()

    try:
        config = load_config(args)
        data = QstrData.load(args.data_dir) if args.data_dir else default_qstr_data()
        units = load_units(args.files, PreprocessedFileReader(), origin_for, max_workers=args.jobs)
        result = extract_data(units, config, data)
        if args.output is not None:
            result.write_json(args.output)
    except (QstrGenError, OSError, ValueError):
        logger.exception("generation_failed")
        return 1

    if args.output is not None:
        logger.info("data_written", path=str(args.output), qstrs=len(result.all_qstrs))
    else:
        sys.stdout.write(result.model_dump_json(indent=2))
        sys.stdout.write("\n")
    return 0


def main() -> NoReturn:
    """Main entry point."""
    try:
        sys.exit(run())
    except KeyboardInterrupt:
        logger.info("interrupted")
        sys.exit(130)


if __name__ == "__main__":
    main()
