"""Command-line entry point for pylsfd."""

import argparse
import logging
import sys
from collections.abc import Sequence

from pylsfd.collector import SnapshotCollector
from pylsfd.columns import columns_help, parse_columns
from pylsfd.config import VERSION, LsfdConfig, env_debug, env_workers
from pylsfd.enricher import ProcessEnricher
from pylsfd.errors import LsfdError
from pylsfd.output import write_table
from pylsfd.render import RenderContext, render_rows

logger = logging.getLogger("pylsfd")

EXIT_SUCCESS = 0
EXIT_FAILURE = 1


def _positive_int(text: str) -> int:
    try:
        value = int(text)
    except ValueError:
        raise argparse.ArgumentTypeError(f"invalid number: {text}") from None
    if value < 1:
        raise argparse.ArgumentTypeError(f"must be at least 1: {text}")
    return value


def build_parser() -> argparse.ArgumentParser:
    """Build the argument parser."""
    parser = argparse.ArgumentParser(
        prog="pylsfd",
        description="List the files held open by running processes.",
        formatter_class=argparse.RawDescriptionHelpFormatter,
        epilog="Available output columns:\n" + columns_help(),
    )
    parser.add_argument("-J", "--json", action="store_true", help="use JSON output format")
    parser.add_argument(
        "-n", "--noheadings", action="store_true", help="don't print headings"
    )
    parser.add_argument("-o", "--output", metavar="<list>", help="output columns")
    parser.add_argument("-r", "--raw", action="store_true", help="use raw output format")
    parser.add_argument(
        "-i",
        "--interactive",
        action="store_true",
        help="browse the snapshot in an interactive table",
    )
    parser.add_argument(
        "-w",
        "--workers",
        type=_positive_int,
        metavar="<num>",
        help="number of collector threads (default 1)",
    )
    parser.add_argument("--debug", action="store_true", help="log skipped entries to stderr")
    parser.add_argument("-V", "--version", action="version", version=f"%(prog)s {VERSION}")
    return parser


def build_config(args: argparse.Namespace) -> LsfdConfig:
    """
    Turn parsed arguments into a LsfdConfig.

    Raises UnknownColumnError for a bad --output list and ValueError for a
    bad PYLSFD_WORKERS value.
    """
    columns = parse_columns(args.output) if args.output else []
    workers = args.workers if args.workers is not None else env_workers()
    return LsfdConfig(
        columns=columns,
        noheadings=args.noheadings,
        raw=args.raw,
        json=args.json,
        workers=workers or 1,
        interactive=args.interactive,
        debug=args.debug or env_debug(),
    )


def setup_logging(debug: bool) -> None:
    """Send log records to stderr; DEBUG when requested, else WARNING."""
    if debug:
        fmt = "%(name)s[%(threadName)s]: %(message)s"
    else:
        fmt = "pylsfd: %(message)s"
    logging.basicConfig(
        level=logging.DEBUG if debug else logging.WARNING,
        format=fmt,
        stream=sys.stderr,
        force=True,
    )


def run(config: LsfdConfig, collector: SnapshotCollector | None = None) -> int:
    """Collect one snapshot and render it as configured."""
    if collector is None:
        collector = SnapshotCollector(ProcessEnricher(config.proc_root), workers=config.workers)

    snapshot = collector.collect()
    try:
        ctx = RenderContext()
        rows = render_rows(snapshot.processes, config.columns, ctx)
        if config.interactive:
            from pylsfd.app import SnapshotApp

            SnapshotApp(config.columns, rows).run()
        else:
            write_table(
                sys.stdout,
                config.columns,
                rows,
                noheadings=config.noheadings,
                raw=config.raw,
                json_output=config.json,
            )
    finally:
        snapshot.release()
    return EXIT_SUCCESS


def main(argv: Sequence[str] | None = None) -> int:
    """Entry point for the pylsfd command."""
    args = build_parser().parse_args(argv)
    setup_logging(args.debug or env_debug())

    try:
        config = build_config(args)
    except (LsfdError, ValueError) as e:
        logger.error("%s", e)
        return EXIT_FAILURE

    try:
        return run(config)
    except LsfdError as e:
        logger.error("%s", e)
        return EXIT_FAILURE


if __name__ == "__main__":
    sys.exit(main())
