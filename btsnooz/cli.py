"""
Command line: `btsnooz REPORT OUTPUT`.

Exactly two positional arguments. A wrong argument count prints the usage
line to stderr and exits 0 without touching any file; every other failure
prints one diagnostic line to stderr and exits 1.
"""

from __future__ import annotations

import argparse
import logging
import sys
from typing import NoReturn, Optional, Sequence

from pydantic import ValidationError

from .config import DecoderConfig
from .errors import UsageError
from .runner import convert
from .utils import init_logging

EXIT_OK = 0
EXIT_FAILURE = 1


class _ArgumentParser(argparse.ArgumentParser):
    """argparse that raises instead of exiting, so main() decides the exit code."""

    def error(self, message: str) -> NoReturn:
        raise UsageError(message)


def build_parser() -> _ArgumentParser:
    ap = _ArgumentParser(
        prog="btsnooz",
        description="Extract the btsnooz Bluetooth log from a bug report and write a btsnoop capture.",
    )
    ap.add_argument("input", help="Bug report text file (or a bare btsnooz_hci.log).")
    ap.add_argument("output", help="Path of the btsnoop capture to write.")
    return ap


def main(argv: Optional[Sequence[str]] = None) -> int:
    parser = build_parser()
    try:
        args = parser.parse_args(argv)
    except UsageError:
        sys.stderr.write(parser.format_usage())
        return EXIT_OK

    try:
        config = DecoderConfig.from_env()
    except ValidationError as e:
        print(f"btsnooz: invalid configuration: {e.errors()[0]['msg']}", file=sys.stderr)
        return EXIT_FAILURE

    logger = logging.getLogger("btsnooz")
    try:
        logger = init_logging(config)
        result = convert(args.input, args.output, config)
    except Exception as e:
        # traceback only at DEBUG
        logger.debug("Conversion failed", exc_info=True)
        print(f"btsnooz: {e}", file=sys.stderr)
        return EXIT_FAILURE

    logger.info("Done: %d records", result.records)
    return EXIT_OK


def run() -> NoReturn:
    """Console-script entry point."""
    sys.exit(main())


if __name__ == "__main__":
    run()
