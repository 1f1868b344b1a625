#!/usr/bin/env python
"""
Add the links of a Pocket export to a reading list.

Pickpocket reads a Pocket HTML export (https://getpocket.com/export), takes the
links of its "Unread" section (and optionally its "Read Archive" section) and
adds them to a destination. Links are added last to first so that the
destination, which shows the newest item on top, lists them in export order.

Configuration can be provided via command-line arguments, a YAML configuration file,
or environment variables in a .env file. The order of precedence is:
1. Command-line arguments
2. Configuration file (YAML)
3. Environment variables (.env file)

Usage:
    pickpocket.py [-h] [global options] {destination} --input-file HTMLFILE ...

Examples:
    pickpocket.py csv --input-file ril_export.html --output-file reading_list.csv
    pickpocket.py --preview raindrop-api --input-file ril_export.html --include-read
    pickpocket.py raindrop-api --input-file ril_export.html --api-token TOKEN --mode stepwise
"""

import argparse
import sys
import time
from datetime import datetime
from typing import Callable, List, Optional

from dateutil import parser as date_parser

from common.config import apply_config_to_args, load_config
from common.logging import get_logger, setup_logging
from common.plugins import PluginRegistry
from common.preview import preview_records
from importer.models import ImportLedger, ImportMode
from importer.session import ImportSession
from pocket.export_parser import EmptyResultError, ParseError, PocketExportParser
from pocket.models import LinkRecord

DEFAULTS = {
    "include_read": False,
    "mode": ImportMode.BULK.value,
    "step_delay": 0.0,
    "html_parser": "html.parser",
    "dry_run": False,
    "preview": False,
    "preview_limit": 10,
}


def create_main_parser() -> argparse.ArgumentParser:
    """
    Create the main argument parser.

    Returns
    -------
    argparse.ArgumentParser
        The main argument parser, without destination subcommands.
    """
    parser = argparse.ArgumentParser(
        description="Add the links of a Pocket export to a reading list",
        formatter_class=argparse.RawDescriptionHelpFormatter,
    )

    parser.add_argument(
        "--log-file",
        metavar="LOGFILE",
        help="Log file path (if not specified, logs will only be written to console)",
        type=str,
    )
    parser.add_argument(
        "--config-file",
        metavar="CONFIG",
        help="Configuration file path (if not specified, default locations will be searched)",
        type=str,
    )
    parser.add_argument(
        "--dry-run",
        action="store_true",
        default=None,
        help="Parse and filter the export without adding anything",
    )
    parser.add_argument(
        "--preview",
        action="store_true",
        default=None,
        help="Preview the links that will be added",
    )
    parser.add_argument(
        "--preview-limit",
        metavar="N",
        help="Limit the number of links shown in preview mode (default: 10)",
        type=int,
    )

    filtering_group = parser.add_argument_group("Filtering options")
    filtering_group.add_argument(
        "--filter-title",
        metavar="TEXT",
        help="Only add links whose title contains TEXT (case-insensitive)",
        type=str,
    )
    filtering_group.add_argument(
        "--filter-url",
        metavar="TEXT",
        help="Only add links whose URL contains TEXT (case-insensitive)",
        type=str,
    )
    filtering_group.add_argument(
        "--filter-date-from",
        metavar="DATE",
        help="Only add links saved on or after this date (e.g. 2023-01-31)",
        type=str,
    )
    filtering_group.add_argument(
        "--filter-date-to",
        metavar="DATE",
        help="Only add links saved on or before this date (e.g. 2023-12-31)",
        type=str,
    )

    return parser


def parse_date_bound(value: str, end_of_day: bool = False) -> datetime:
    """
    Parse a date filter bound into a naive local datetime.

    A bound without a time of day starts at midnight, or ends at 23:59:59 when
    ``end_of_day`` is set. Timezone-aware input is converted to local time so it
    compares with the save dates of the export.

    Raises
    ------
    ValueError
        If the value is not a date.
    """
    midnight = datetime.now().replace(hour=0, minute=0, second=0, microsecond=0)
    try:
        bound = date_parser.parse(str(value), default=midnight)
        if end_of_day:
            late = date_parser.parse(str(value), default=midnight.replace(hour=23, minute=59, second=59))
            if late.hour != bound.hour:
                # no time of day given
                bound = late
    except OverflowError as e:
        raise ValueError(f"Date out of range: {value}") from e

    if bound.tzinfo is not None:
        bound = bound.astimezone().replace(tzinfo=None)
    return bound


def build_filter(args: argparse.Namespace) -> Optional[Callable[[LinkRecord], bool]]:
    """
    Build a record predicate from the filtering options.

    Links without a save date are kept by the date filters.

    Returns
    -------
    callable or None
        The predicate, or None when no filter is set.

    Raises
    ------
    ValueError
        If a date filter cannot be parsed.
    """
    filter_title = getattr(args, "filter_title", None)
    filter_url = getattr(args, "filter_url", None)
    date_from = getattr(args, "filter_date_from", None)
    date_to = getattr(args, "filter_date_to", None)

    if not any([filter_title, filter_url, date_from, date_to]):
        return None

    start = parse_date_bound(date_from) if date_from else None
    end = parse_date_bound(date_to, end_of_day=True) if date_to else None

    def predicate(record: LinkRecord) -> bool:
        if filter_title and filter_title.lower() not in (record.title or "").lower():
            return False
        if filter_url and filter_url.lower() not in record.url.lower():
            return False
        if record.time_added is not None:
            if start is not None and record.time_added < start:
                return False
            if end is not None and record.time_added > end:
                return False
        return True

    return predicate


def make_wait(sink, step_delay: float) -> Callable[[], None]:
    """Wait for the sink to be ready, then for the extra step delay."""
    def wait() -> None:
        sink.wait_until_ready()
        if step_delay:
            time.sleep(step_delay)
    return wait


def apply_defaults(args: argparse.Namespace) -> argparse.Namespace:
    for key, value in DEFAULTS.items():
        if getattr(args, key, None) is None:
            setattr(args, key, value)
    return args


def import_links(args: argparse.Namespace, plugin_class) -> Optional[ImportLedger]:
    """
    Load the export, then add its links with the destination plugin.

    Returns
    -------
    ImportLedger or None
        Final counts, or None for a dry run.

    Raises
    ------
    ParseError
        If the export cannot be read.
    EmptyResultError
        If the export (after filtering) has no links to add.
    """
    logger = get_logger()

    session = ImportSession(
        include_read=bool(args.include_read),
        mode=args.mode,
        parser=PocketExportParser(logger=logger, features=args.html_parser),
        logger=logger,
    )
    session.load_file(args.input_file)

    predicate = build_filter(args)
    if predicate is not None:
        session.apply_filter(predicate)
        logger.info(f"{len(session.effective_records)} links left after filtering")

    records = session.effective_records
    if not records:
        raise EmptyResultError("No links left to add.")

    if args.preview:
        preview_records(records, limit=args.preview_limit)

    if args.dry_run:
        logger.info(f"Dry run: would add {len(records)} links to {plugin_class.get_name()}")
        return None

    def report(ledger: ImportLedger) -> None:
        logger.info(f"{ledger.added} links were successfully added to your reading list. {ledger.summary()}")

    with plugin_class.create_sink(args) as sink:
        return session.start(
            sink,
            on_complete=report,
            wait=make_wait(sink, args.step_delay),
            show_progress=True,
        )


def main(args: Optional[List[str]] = None) -> None:
    """
    Main entry point for the CLI.

    Parameters
    ----------
    args : list[str], optional
        Raw command line arguments. If None, sys.argv[1:] will be used.

    Returns
    -------
    None
    """
    if args is None:
        args = sys.argv[1:]

    PluginRegistry.discover_plugins()
    available_plugins = PluginRegistry.get_all_plugins()

    if not available_plugins:
        print("Error: No destination plugins found.")
        sys.exit(1)

    parser = create_main_parser()
    subparsers = parser.add_subparsers(
        title="destinations",
        dest="sink",
        help="Where to add the links",
        required=True,
    )
    for name, plugin_class in sorted(available_plugins.items()):
        subparsers.add_parser(
            name,
            help=plugin_class.get_description(),
            description=plugin_class.get_description(),
            parents=[plugin_class.create_parser()],
        )

    parsed_args = parser.parse_args(args)

    setup_logging(parsed_args.log_file)
    logger = get_logger()

    config = load_config(parsed_args.config_file)
    parsed_args = apply_defaults(apply_config_to_args(parsed_args, config))

    if parsed_args.config_file:
        logger.info(f"Using configuration file: {parsed_args.config_file}")
    elif config:
        logger.info("Using configuration from default location")

    if parsed_args.dry_run:
        logger.info("Running in dry-run mode (nothing will be added)")

    try:
        build_filter(parsed_args)
    except ValueError as e:
        parser.error(f"invalid date filter: {e}")

    plugin_class = PluginRegistry.get_plugin(parsed_args.sink)
    if not plugin_class:
        logger.error(f"Unknown destination: {parsed_args.sink}")
        sys.exit(1)

    try:
        import_links(parsed_args, plugin_class)
    except ParseError as e:
        logger.error(f"Could not parse the file. Please select a different file. ({e})")
        sys.exit(1)
    except EmptyResultError as e:
        logger.error(f"{e} Please select a different file.")
        sys.exit(1)
    except Exception as e:
        logger.exception(f"Failed to add links to {parsed_args.sink}: {e}")
        sys.exit(1)


if __name__ == "__main__":
    main()
