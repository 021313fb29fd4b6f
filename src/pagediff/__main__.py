"""Command line interface for pagediff."""
from __future__ import annotations

import argparse
import logging
import sys
from typing import Iterable, Optional

from dotenv import load_dotenv

from . import __version__
from .compare import compare_files
from .config import DPI_RANGE, TOLERANCE_RANGE, ToleranceConfig
from .errors import ConfigurationError, DocumentOpenError, RenderError
from .report import write_json_report

logger = logging.getLogger("pagediff.cli")

EXIT_IDENTICAL = 0
EXIT_DIFFERENT = 1
EXIT_USAGE = 2
EXIT_OPEN_FAILED = 3


class _BelowWarning(logging.Filter):
    def filter(self, record: logging.LogRecord) -> bool:
        return record.levelno < logging.WARNING


def configure_logging(verbose: bool) -> logging.Logger:
    """Route pagediff messages: progress to stdout, problems to stderr."""

    package_logger = logging.getLogger("pagediff")
    for handler in list(package_logger.handlers):
        package_logger.removeHandler(handler)
    package_logger.setLevel(logging.INFO if verbose else logging.WARNING)

    out_handler = logging.StreamHandler(sys.stdout)
    out_handler.setLevel(logging.INFO)
    out_handler.addFilter(_BelowWarning())
    out_handler.setFormatter(logging.Formatter("%(message)s"))
    package_logger.addHandler(out_handler)

    err_handler = logging.StreamHandler(sys.stderr)
    err_handler.setLevel(logging.WARNING)
    err_handler.setFormatter(logging.Formatter("%(message)s"))
    package_logger.addHandler(err_handler)

    package_logger.propagate = False
    return package_logger


def _load_env() -> None:
    """Load ``PAGEDIFF_*`` defaults from a .env file if present."""
    load_dotenv()


def build_parser(defaults: Optional[ToleranceConfig] = None) -> argparse.ArgumentParser:
    defaults = defaults or ToleranceConfig()
    parser = argparse.ArgumentParser(
        prog="pagediff",
        usage="%(prog)s [options] file1 file2",
        description="Compare two documents page by page by rasterizing them and diffing the pixels.",
        epilog="Exit status is 0 when the documents are identical, 1 when they differ, "
        "2 on invalid arguments and 3 when a document cannot be opened.",
    )
    parser.add_argument("file1", help="Path to the first document")
    parser.add_argument("file2", help="Path to the second document")
    parser.add_argument("-v", "--verbose", action="store_true", help="Be verbose")
    parser.add_argument(
        "-s",
        "--skip-identical",
        action="store_true",
        default=defaults.skip_identical,
        help="Only output pages with differences",
    )
    parser.add_argument(
        "-m",
        "--mark-differences",
        action="store_true",
        default=defaults.mark_differences,
        help="Additionally mark differences on the left side",
    )
    parser.add_argument(
        "-g",
        "--grayscale",
        action="store_true",
        default=defaults.grayscale,
        help="Only differences will be in colour, unchanged parts will show as gray",
    )
    parser.add_argument(
        "--dpi",
        type=int,
        default=defaults.dpi,
        help="Rasterization dpi, %d-%d (default: %%(default)s)" % DPI_RANGE,
    )
    parser.add_argument("--output-diff", metavar="PATH", help="Output differences to the given PDF file")
    parser.add_argument(
        "--channel-tolerance",
        type=int,
        default=defaults.channel_tolerance,
        metavar="NUM",
        help="Consider channel values equal if within this tolerance, %d-%d (default: %%(default)s)"
        % TOLERANCE_RANGE,
    )
    parser.add_argument("--report", metavar="PATH", help="Write a JSON report with per-page results")
    parser.add_argument(
        "--thumbnails",
        metavar="DIR",
        help="Save thumbnails of differing pages with marked differences",
    )
    parser.add_argument("--version", action="version", version=f"%(prog)s {__version__}")
    return parser


def _config_from_args(args: argparse.Namespace) -> ToleranceConfig:
    config = ToleranceConfig(
        dpi=args.dpi,
        channel_tolerance=args.channel_tolerance,
        grayscale=args.grayscale,
        mark_differences=args.mark_differences,
        skip_identical=args.skip_identical,
    )
    return config.validate()


def main(argv: Optional[Iterable[str]] = None) -> int:
    _load_env()
    try:
        defaults = ToleranceConfig.from_env()
    except ConfigurationError as exc:
        build_parser().error(str(exc))
        return EXIT_USAGE

    parser = build_parser(defaults)
    args = parser.parse_args(argv)

    try:
        config = _config_from_args(args)
    except ConfigurationError as exc:
        parser.error(str(exc))
        return EXIT_USAGE

    configure_logging(args.verbose)

    try:
        verdict = compare_files(
            args.file1,
            args.file2,
            config,
            output_path=args.output_diff,
            collect_differences=args.report is not None,
            verbose=args.verbose,
            thumbnail_dir=args.thumbnails,
        )
    except (DocumentOpenError, RenderError) as exc:
        logger.error("%s", exc)
        return EXIT_OPEN_FAILED

    if args.report:
        write_json_report(verdict, args.report, config=config, files=(args.file1, args.file2))

    return EXIT_IDENTICAL if verdict.identical else EXIT_DIFFERENT


if __name__ == "__main__":
    sys.exit(main())
