"""
Command line interface helpers shared by the destination plugins.

Every destination parser starts from ``create_base_parser`` so the import
options (input file, read archive toggle, sequencing mode) look the same for
all of them.
"""

import argparse

from common.validation import validate_delay, validate_input_file

IMPORT_MODES = ("bulk", "stepwise")
HTML_PARSERS = ("html.parser", "lxml")


def create_base_parser(description: str) -> argparse.ArgumentParser:
    """
    Create a base argument parser with the import arguments.

    Options that may also come from the configuration file default to ``None``
    so that configuration values can fill them in later.

    Parameters
    ----------
    description : str
        Description of the destination for help text.

    Returns
    -------
    argparse.ArgumentParser
        Base argument parser, usable as a parent parser.
    """
    parser = argparse.ArgumentParser(description=description, add_help=False)
    parser.add_argument(
        "--input-file",
        metavar="HTMLFILE",
        help="Pocket HTML export file path",
        type=validate_input_file,
        required=True,
    )
    parser.add_argument(
        "--include-read",
        action="store_true",
        default=None,
        help="Also import the links of the Read Archive section",
    )
    parser.add_argument(
        "--mode",
        choices=IMPORT_MODES,
        default=None,
        help="Add all links at once (bulk) or one at a time waiting for the destination (stepwise)",
    )
    parser.add_argument(
        "--step-delay",
        metavar="SECONDS",
        type=validate_delay,
        default=None,
        help="Extra delay in seconds between two links in stepwise mode",
    )
    parser.add_argument(
        "--html-parser",
        choices=HTML_PARSERS,
        default=None,
        help="BeautifulSoup backend used to parse the export (default: html.parser)",
    )
    return parser

