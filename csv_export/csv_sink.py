"""
A reading list kept in a CSV file.

Like a browser reading list, the newest item goes on top: every ``add``
prepends. Adding a URL that is already on the list does nothing. The list is
written out when the sink is closed.
"""

import csv
from typing import Dict, List, Optional

from common.logging import get_or_setup_logger
from importer.sink import BaseLinkSink, SinkError

FIELDNAMES = ["title", "url", "tags", "created"]


class CsvReadingListSink(BaseLinkSink):
    """
    Reading list written to a CSV file on ``close()``.

    Parameters
    ----------
    file_path : str
        Output CSV file path.
    logger : logging.Logger, optional
        Logger to use.
    """

    def __init__(self, file_path: str, logger=None):
        self.file_path = file_path
        self.logger = logger or get_or_setup_logger()
        self.items: List[Dict[str, str]] = []
        self._urls = set()
        self._closed = False

    def add(self, url: str, title: Optional[str] = None, preview_text: Optional[str] = None) -> None:
        self._prepend({"title": title or "", "url": url, "tags": "", "created": ""})

    def add_record(self, record) -> None:
        self._prepend({
            "title": record.title or "",
            "url": record.url,
            "tags": ",".join(record.tags),
            "created": record.time_added.strftime("%Y-%m-%d %H:%M:%S") if record.time_added else "",
        })

    def _prepend(self, row: Dict[str, str]) -> None:
        if self._closed:
            raise SinkError(f"Reading list {self.file_path} is already closed")
        if row["url"] in self._urls:
            self.logger.debug(f"Already on the reading list: {row['url']}")
            return
        self._urls.add(row["url"])
        self.items.insert(0, row)

    def close(self) -> None:
        """
        Write the reading list to the CSV file.

        Raises
        ------
        OSError
            If the file cannot be written.
        """
        if self._closed:
            return
        self._closed = True

        self.logger.info(f'Writing {len(self.items)} links to "{self.file_path}"')
        try:
            with open(self.file_path, "w", newline="", encoding="utf-8") as f:
                writer = csv.DictWriter(
                    f, fieldnames=FIELDNAMES, delimiter=",", lineterminator="\n", quotechar='"', quoting=csv.QUOTE_ALL
                )
                writer.writeheader()
                writer.writerows(self.items)
        except OSError:
            self.logger.exception(f"Failed to write reading list to {self.file_path}")
            raise
