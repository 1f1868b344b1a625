"""
Destination contract for the import sequencer.

A sink is anything links can be added to one at a time: a reading list file,
a bookmarking service, a test double. ``add`` raises ``SinkError`` when the
destination refuses an item; the sequencer counts the failure and moves on.
"""

import abc
from typing import Optional
from urllib.parse import urlparse


class SinkError(Exception):
    """A destination failed to add a link."""


def is_valid_url(url: str) -> bool:
    """Check that ``url`` has both a scheme and a network location."""
    if not url or not isinstance(url, str):
        return False

    url = url.strip()
    if not url:
        return False

    try:
        parsed = urlparse(url)
    except ValueError:
        return False
    return bool(parsed.scheme and parsed.netloc)


class BaseLinkSink(abc.ABC):
    """
    Base class for reading list destinations.

    Subclasses implement ``add``. Destinations that can store more than the
    URL and title (tags, dates) override ``add_record`` as well.
    """

    @abc.abstractmethod
    def add(self, url: str, title: Optional[str] = None, preview_text: Optional[str] = None) -> None:
        """
        Add one link to the destination.

        Parameters
        ----------
        url : str
            The link URL.
        title : str, optional
            The link title, ``None`` for untitled links.
        preview_text : str, optional
            Short preview text, if the destination supports it.

        Raises
        ------
        SinkError
            If the destination could not add the link.
        """

    def add_record(self, record) -> None:
        """Add a LinkRecord. Defaults to ``add(record.url, record.title)``."""
        self.add(record.url, record.title)

    def wait_until_ready(self) -> None:
        """Block until the destination can accept the next link."""

    def close(self) -> None:
        """Flush pending output and release resources."""

    def __enter__(self):
        return self

    def __exit__(self, exc_type, exc_value, traceback):
        self.close()
        return False
