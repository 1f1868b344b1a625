"""
Raindrop.io destination plugin.

This module provides a plugin for adding the links of a Pocket export directly
to a Raindrop.io collection using their API.
"""

import argparse

from common.cli import create_base_parser
from common.logging import get_or_setup_logger
from common.plugins import BaseSinkPlugin, register_plugin
from raindrop_api.api_sink import RaindropSink, validate_api_token


@register_plugin
class RaindropApiSinkPlugin(BaseSinkPlugin):
    """
    Plugin for adding links to Raindrop.io using their API.
    """

    @classmethod
    def get_name(cls) -> str:
        return "raindrop-api"

    @classmethod
    def get_description(cls) -> str:
        return "Add Pocket links directly to Raindrop.io using their API"

    @classmethod
    def create_parser(cls) -> argparse.ArgumentParser:
        """
        Create an argument parser for this destination.

        The token may also come from the configuration file or the
        ``PICKPOCKET_API_TOKEN`` environment variable, so it is not required
        on the command line.

        Returns
        -------
        argparse.ArgumentParser
            An argument parser configured for this destination.
        """
        parser = create_base_parser(cls.get_description())
        parser.add_argument(
            "--api-token",
            metavar="TOKEN",
            help="Raindrop.io API token",
            type=validate_api_token,
        )
        parser.add_argument(
            "--collection-id",
            metavar="ID",
            help="Raindrop.io collection ID to add to (default: Unsorted)",
            type=int,
        )
        return parser

    @classmethod
    def create_sink(cls, args: argparse.Namespace) -> RaindropSink:
        """
        Create a Raindrop.io sink and check the token.

        Raises
        ------
        ValueError
            If no token is configured or the API rejects it.
        """
        logger = get_or_setup_logger()
        token = getattr(args, "api_token", None)
        if not token:
            raise ValueError("A Raindrop.io API token is required (--api-token or configuration)")

        sink = RaindropSink(
            validate_api_token(str(token)),
            collection_id=getattr(args, "collection_id", None) or 0,
            logger=logger,
        )
        if not sink.check_connection():
            sink.close()
            raise ValueError("Failed to connect to Raindrop.io API. Please check your API token.")
        return sink
