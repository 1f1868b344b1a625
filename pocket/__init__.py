"""
Pocket HTML export parsing.

This package reads the links of the "Unread" and "Read Archive" sections of a
Pocket HTML export.
"""

from pocket.export_parser import (
    EmptyResultError,
    MalformedExportError,
    ParseError,
    PocketExportParser,
    UndecodableExportError,
    ensure_links,
    load_export,
    parse_export,
)
from pocket.models import SECTION_READ_ARCHIVE, SECTION_UNREAD, SECTIONS, LinkRecord, ParsedExport

__all__ = [
    "EmptyResultError",
    "LinkRecord",
    "MalformedExportError",
    "ParseError",
    "ParsedExport",
    "PocketExportParser",
    "SECTIONS",
    "SECTION_READ_ARCHIVE",
    "SECTION_UNREAD",
    "UndecodableExportError",
    "ensure_links",
    "load_export",
    "parse_export",
]
