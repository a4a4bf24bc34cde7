"""
tracecompare Command Line Interface

Usage:
    tracecompare -f0 <reference.bin> -f1 <candidate.bin> -ncols <N> [key value ...]
    python -m tracecompare -f0 ref.bin -f1 cand.bin -ncols 101 -l2l1 1 -xcor 1 -lag 5

Options follow a "key value key value ..." grammar; run without arguments
(or with -h / -help) to list them with their defaults. Two extra options:

    --config FILE          read settings from a YAML file first
    -o, --results-dir DIR  also save every result table as parquet in DIR

Exit codes:
    0 - success
    1 - configuration, I/O or format error (message on stderr)
    2 - unclassified internal fault
"""

import argparse
import logging
import sys
from typing import List, Optional, Tuple

from tracecompare.config.loader import load_config_file
from tracecompare.config.parameters import (
    Configuration,
    parse_command_line,
    wants_help,
)
from tracecompare.errors import (
    ConfigError,
    EXIT_INTERNAL_ERROR,
    EXIT_OK,
    TraceCompareError,
)
from tracecompare.runner import ComparisonRunner

logger = logging.getLogger("tracecompare")


def setup_logging(verbose: int) -> None:
    """Configure the 'tracecompare' logger for the given verbosity."""
    level = logging.INFO if verbose > 1 else logging.WARNING

    logger.setLevel(level)
    if logger.hasHandlers():
        logger.handlers.clear()

    handler = logging.StreamHandler(sys.stderr)
    handler.setLevel(level)
    handler.setFormatter(logging.Formatter(
        "%(asctime)s [%(levelname)s] %(message)s",
        datefmt="%Y-%m-%d %H:%M:%S",
    ))
    logger.addHandler(handler)
    logger.propagate = False


class _OptionParser(argparse.ArgumentParser):
    """ArgumentParser that reports problems as ConfigError instead of exiting."""

    def error(self, message):
        raise ConfigError(f"Command line: {message}")


def build_parser() -> argparse.ArgumentParser:
    """
    Parser for the options that sit outside the "key value" registry.

    Everything it doesn't recognise is left for parse_command_line().
    """
    parser = _OptionParser(
        prog='tracecompare',
        description='Compare two raw float32 binary datasets',
        formatter_class=argparse.RawDescriptionHelpFormatter,
        add_help=False,
        allow_abbrev=False,
        epilog="""
Examples:
    tracecompare -f0 ref.bin -f1 cand.bin -ncols 101 -l2l1 1
    tracecompare --config compare.yaml -lag 10 -o results/
        """,
    )
    parser.add_argument(
        '--config',
        help='YAML file with settings (command-line options override it)',
    )
    parser.add_argument(
        '-o', '--results-dir',
        dest='results_dir',
        help='Also save every result table as parquet in this directory',
    )
    return parser


def split_extra_options(argv: List[str]) -> Tuple[List[str], Optional[str], Optional[str]]:
    """
    Pull --config and --results-dir out of argv.

    Returns:
        (remaining key/value arguments, config file or None, results dir or None)
    """
    args, remaining = build_parser().parse_known_args(argv)
    return remaining, args.config, args.results_dir


def build_configuration(argv: List[str]) -> Configuration:
    """Configuration from an optional YAML file overlaid by the command line."""
    remaining, config_file, results_dir = split_extra_options(argv)

    config = Configuration()
    if config_file:
        load_config_file(config_file, config)
    parse_command_line(remaining, config)
    if results_dir:
        config.results_dir = results_dir
    return config


def main(argv: Optional[List[str]] = None) -> int:
    """tracecompare entry point."""
    argv = sys.argv[1:] if argv is None else list(argv)

    if wants_help(argv):
        print(Configuration().format_options())
        print()
        print(build_parser().format_help())
        return EXIT_OK

    try:
        config = build_configuration(argv)
        setup_logging(config.verbose)

        if config.verbose > 1:
            print(config.format_parameters())

        config.validate()
        ComparisonRunner(config).run()
    except TraceCompareError as e:
        print(f"ERROR: {e}", file=sys.stderr)
        return e.exit_code
    except Exception:
        logger.error("Unknown exception", exc_info=True)
        return EXIT_INTERNAL_ERROR

    return EXIT_OK


if __name__ == '__main__':
    sys.exit(main())
