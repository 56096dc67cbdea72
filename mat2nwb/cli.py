# mat2nwb/cli.py
"""
Command line entry point.

    mat2nwb <source.mat> [session-description] [experimenter-name]

Exit codes: 0 success, 1 conversion failure (missing source, unreadable
file, failed export), 2 usage error, 3 overwrite declined.
"""
from __future__ import annotations

import argparse
import logging
import sys
from pathlib import Path
from typing import Callable, Sequence

from mat2nwb import __version__
from mat2nwb.config import DEFAULT_COMPRESSION_LEVEL, DEFAULT_UNIT, ConversionOptions
from mat2nwb.convert import convert, destination_for
from mat2nwb.core import (
    ClassificationSkipped,
    ConversionError,
    ExportError,
    InvalidFileName,
    UsageError,
)
from mat2nwb.core.metadata import DEFAULT_INSTITUTION

logger = logging.getLogger("mat2nwb")

EXIT_OK = 0
EXIT_FAILURE = 1
EXIT_USAGE = 2
EXIT_CANCELLED = 3


def build_parser() -> argparse.ArgumentParser:
    p = argparse.ArgumentParser(
        prog="mat2nwb",
        description="Convert a MATLAB .mat recording to an NWB file.",
    )
    p.add_argument("source", help="MAT file named animal_[signal_]session_tag.mat")
    p.add_argument("session_description", nargs="?", default=None,
                   help="Session description (default: 'Converted MATLAB session').")
    p.add_argument("experimenter", nargs="?", default=None,
                   help="Experimenter name (default: 'Unknown').")
    p.add_argument("-o", "--output-dir", type=Path, default=None,
                   help="Directory for the .nwb file (default: current directory).")
    p.add_argument("--institution", default=DEFAULT_INSTITUTION,
                   help=f"Institution (default: {DEFAULT_INSTITUTION!r}).")
    p.add_argument("--unit", default=DEFAULT_UNIT,
                   help=f"Unit label for every series (default: {DEFAULT_UNIT!r}).")
    p.add_argument("--compression-level", type=int, default=DEFAULT_COMPRESSION_LEVEL,
                   help="gzip level for data, 0 disables compression.")
    p.add_argument("-y", "--yes", action="store_true",
                   help="Overwrite an existing output file without asking.")
    p.add_argument("--strict", action="store_true",
                   help="Report export failures with a traceback.")
    p.add_argument("-v", "--verbose", action="count", default=0,
                   help="Debug output, including layout notes per channel.")
    p.add_argument("-q", "--quiet", action="store_true", help="Only print errors.")
    p.add_argument("--version", action="version", version=f"%(prog)s {__version__}")
    return p


def configure_logging(verbose: int = 0, quiet: bool = False) -> None:
    if quiet:
        level = logging.ERROR
    elif verbose:
        level = logging.DEBUG
    else:
        level = logging.INFO
    logging.basicConfig(level=level, format="%(levelname)s: %(message)s")


def render_skip(skip: ClassificationSkipped) -> list[str]:
    """Operator-facing report for a channel that was left out."""
    lines = [
        f"FIELD: {skip.channel}",
        f"  WARNING: {skip.reason}. Skipping.",
        "  ## DIAGNOSTIC INFO ##",
        "  Structure contents:",
    ]
    for diag in skip.diagnostics:
        lines.extend("  " + line for line in diag.render())
    lines.append("  HINT: The converter requires numeric data with multiple rows")
    lines.append("  STATUS: SKIPPED - Could not find suitable numeric data")
    return lines


def confirm_overwrite(path: Path, ask: Callable[[str], str] = input) -> bool:
    logger.warning("Output file '%s' already exists.", path)
    try:
        answer = ask("Do you want to remove it and continue? (y/n): ")
    except EOFError:
        return False
    return answer.strip().lower() in {"y", "yes"}


def main(argv: Sequence[str] | None = None, *, ask: Callable[[str], str] = input) -> int:
    args = build_parser().parse_args(argv)
    configure_logging(args.verbose, args.quiet)

    source = Path(args.source)
    if not source.is_file():
        logger.error("File not found: %s", source)
        return EXIT_FAILURE

    try:
        options = ConversionOptions(
            session_description=args.session_description or "",
            experimenter=args.experimenter or "",
            institution=args.institution,
            unit=args.unit,
            compression_level=args.compression_level,
            output_dir=args.output_dir,
            raise_errors=args.strict,
        )
        destination = destination_for(source, options)
    except (InvalidFileName, UsageError) as e:
        logger.error("%s", e)
        return EXIT_USAGE

    if destination.exists():
        if not (args.yes or confirm_overwrite(destination, ask)):
            logger.error("Conversion cancelled.")
            return EXIT_CANCELLED
        logger.info("Removing existing file '%s'", destination)
        destination.unlink()

    logger.info("Converting %s to NWB format...", source)
    try:
        result = convert(source, options=options)
    except ExportError:
        logger.exception("Conversion failed")
        return EXIT_FAILURE
    except ConversionError as e:
        logger.error("%s", e)
        return EXIT_FAILURE

    for skip in result.skipped:
        for line in render_skip(skip):
            logger.warning("%s", line)

    if not result.ok:
        logger.error("Conversion failed: output file was not created")
        return EXIT_FAILURE

    logger.info(
        "Conversion successful! %d series written to %s",
        len(result.channels),
        result.written,
    )
    return EXIT_OK


def run() -> None:
    sys.exit(main())


if __name__ == "__main__":
    run()
