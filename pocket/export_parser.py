"""
Read the saved links out of a Pocket HTML export.

To export your links from Pocket, go to https://getpocket.com/export and
download the HTML file. The export contains an ``<h1>Unread</h1>`` heading and
an ``<h1>Read Archive</h1>`` heading, each followed by a ``<ul>`` of anchors::

    <h1>Unread</h1>
    <ul>
      <li><a href="https://example.com" time_added="1577836800" tags="news">Example</a></li>
    </ul>

Links exported without a title repeat the URL as anchor text; those records
get ``title=None``.
"""

from datetime import datetime
from typing import Optional

from bs4 import BeautifulSoup, FeatureNotFound
from bs4.element import Tag

from common.logging import get_or_setup_logger
from pocket.models import SECTION_READ_ARCHIVE, SECTION_UNREAD, LinkRecord, ParsedExport

DEFAULT_HTML_PARSER = "html.parser"


class ParseError(Exception):
    """The export could not be read as text or parsed as markup."""


class UndecodableExportError(ParseError):
    """The export is not valid UTF-8."""


class MalformedExportError(ParseError):
    """The export text could not be parsed as HTML."""


class EmptyResultError(Exception):
    """The export was parsed but contains no links in either section."""


class PocketExportParser:
    """
    Parser for Pocket HTML export files.

    Parameters
    ----------
    logger : logging.Logger, optional
        Logger to use. Defaults to the Pickpocket logger.
    features : str, optional
        BeautifulSoup tree builder, ``"html.parser"`` (default) or ``"lxml"``.
    """

    def __init__(self, logger=None, features: Optional[str] = None):
        self.logger = logger or get_or_setup_logger()
        self.features = features or DEFAULT_HTML_PARSER

    def read_export_file(self, file_path: str) -> str:
        """
        Read an export file as UTF-8 text.

        Parameters
        ----------
        file_path : str
            Path of the Pocket export.

        Returns
        -------
        str
            The file content.

        Raises
        ------
        UndecodableExportError
            If the file is not valid UTF-8.
        OSError
            If the file cannot be read.
        """
        self.logger.info(f'Reading export file "{file_path}"')
        try:
            with open(file_path, "rb") as f:
                data = f.read()
        except OSError:
            self.logger.exception(f"Failed to read export file: {file_path}")
            raise
        return self.decode_export(data)

    def decode_export(self, data: bytes) -> str:
        """Decode raw export bytes as UTF-8, raising UndecodableExportError on failure."""
        try:
            return data.decode("utf-8")
        except UnicodeDecodeError as e:
            self.logger.error(f"Export file is not valid UTF-8: {e}")
            raise UndecodableExportError(f"Export file is not valid UTF-8: {e}") from e

    def parse_html_content(self, html_content: str) -> BeautifulSoup:
        """
        Parse HTML content.

        Parameters
        ----------
        html_content : str
            HTML content to parse.

        Returns
        -------
        BeautifulSoup
            Parsed document.

        Raises
        ------
        MalformedExportError
            If the content is not text or the parser gives up on it.
        """
        if not isinstance(html_content, str):
            raise MalformedExportError(f"Expected HTML text, got {type(html_content).__name__}")

        self.logger.info("Parsing HTML content")
        try:
            return BeautifulSoup(html_content, self.features)
        except FeatureNotFound:
            self.logger.error(f"HTML parser backend {self.features!r} is not installed")
            raise
        except Exception as e:
            self.logger.exception("Failed to parse HTML")
            raise MalformedExportError(f"Could not parse the export: {e}") from e

    def find_section_heading(self, soup: BeautifulSoup, section: str) -> Optional[Tag]:
        """Return the first ``h1`` whose text contains ``section`` (case-sensitive)."""
        return soup.find(lambda tag: tag.name == "h1" and section in tag.get_text())

    def extract_record(self, anchor: Tag) -> LinkRecord:
        """
        Build a LinkRecord from an export anchor.

        Parameters
        ----------
        anchor : bs4.element.Tag
            An ``a`` element with an ``href``.

        Returns
        -------
        LinkRecord
            The link, with title ``None`` when the anchor text equals the URL.
        """
        url = anchor["href"]
        title: Optional[str] = " ".join(anchor.get_text().split())
        if title == url:
            title = None

        tags = tuple(tag.strip() for tag in (anchor.get("tags") or "").split(",") if tag.strip())

        time_added = None
        raw_time_added = anchor.get("time_added")
        if raw_time_added:
            try:
                time_added = datetime.fromtimestamp(float(raw_time_added))
            except (ValueError, TypeError, OverflowError, OSError):
                self.logger.warning(f"Invalid time_added {raw_time_added!r} for {url}, ignoring")

        return LinkRecord(url=url, title=title, tags=tags, time_added=time_added)

    def extract_section(self, soup: BeautifulSoup, section: str) -> list[LinkRecord]:
        """
        Extract the links listed under a section heading.

        Parameters
        ----------
        soup : BeautifulSoup
            Parsed export.
        section : str
            Section name, e.g. ``"Unread"``.

        Returns
        -------
        list[LinkRecord]
            Links in document order. Empty when the heading or its list is
            missing, or when extracting any of its links fails.
        """
        try:
            heading = self.find_section_heading(soup, section)
            if heading is None:
                self.logger.info(f'No "{section}" section found')
                return []

            container = heading.find_next_sibling()
            if container is None:
                self.logger.info(f'"{section}" heading is not followed by a list')
                return []

            anchors = container.find_all("a", href=True)
            if container.name == "a" and container.has_attr("href"):
                anchors.insert(0, container)

            records = []
            for anchor in anchors:
                if not anchor["href"].strip():
                    self.logger.warning(f'Link with empty href in "{section}" will fail to import')
                records.append(self.extract_record(anchor))
        except Exception:
            self.logger.exception(f'Failed to extract links from "{section}", skipping section')
            return []

        self.logger.info(f'Found {len(records)} links in "{section}"')
        return records

    def parse(self, html_content: str) -> ParsedExport:
        """
        Parse an export document into its two sections.

        Parameters
        ----------
        html_content : str
            The export HTML.

        Returns
        -------
        ParsedExport
            Unread and Read Archive links in document order.

        Raises
        ------
        MalformedExportError
            If the content cannot be parsed at all.
        """
        soup = self.parse_html_content(html_content)
        return ParsedExport(
            unread=self.extract_section(soup, SECTION_UNREAD),
            read_archive=self.extract_section(soup, SECTION_READ_ARCHIVE),
        )

    def load_export(self, file_path: str) -> ParsedExport:
        """Read and parse an export file."""
        return self.parse(self.read_export_file(file_path))


def ensure_links(parsed: ParsedExport) -> ParsedExport:
    """
    Reject exports without any links.

    Raises
    ------
    EmptyResultError
        If both sections are empty.
    """
    if parsed.is_empty:
        raise EmptyResultError("The selected file does not contain any links.")
    return parsed


def parse_export(html_content: str, features: Optional[str] = None) -> ParsedExport:
    """Parse export HTML with a default parser."""
    return PocketExportParser(features=features).parse(html_content)


def load_export(file_path: str, features: Optional[str] = None) -> ParsedExport:
    """Read and parse an export file with a default parser."""
    return PocketExportParser(features=features).load_export(file_path)
