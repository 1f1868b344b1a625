"""
CSV reading list destination plugin.

This module provides a plugin that adds the links of a Pocket export to a
reading list saved as a CSV file.
"""

import argparse

from common.cli import create_base_parser
from common.logging import get_or_setup_logger
from common.plugins import BaseSinkPlugin, register_plugin
from common.validation import validate_output_file
from csv_export.csv_sink import CsvReadingListSink


@register_plugin
class CsvSinkPlugin(BaseSinkPlugin):
    """
    Plugin for saving the links to a CSV reading list.
    """

    @classmethod
    def get_name(cls) -> str:
        return "csv"

    @classmethod
    def get_description(cls) -> str:
        return "Add Pocket links to a reading list saved as a CSV file"

    @classmethod
    def create_parser(cls) -> argparse.ArgumentParser:
        """
        Create an argument parser for this destination.

        Returns
        -------
        argparse.ArgumentParser
            The base import arguments plus ``--output-file``.
        """
        parser = create_base_parser(cls.get_description())
        parser.add_argument(
            "--output-file",
            metavar="CSVFILE",
            help="Output CSV file path",
            type=validate_output_file,
            required=True,
        )
        return parser

    @classmethod
    def create_sink(cls, args: argparse.Namespace) -> CsvReadingListSink:
        return CsvReadingListSink(args.output_file, get_or_setup_logger())
