"""Data models for links read from a Pocket export."""

from dataclasses import dataclass, field
from datetime import datetime
from typing import List, Optional, Tuple

SECTION_UNREAD = "Unread"
SECTION_READ_ARCHIVE = "Read Archive"
SECTIONS = (SECTION_UNREAD, SECTION_READ_ARCHIVE)


@dataclass(frozen=True)
class LinkRecord:
    """
    One saved link.

    ``url`` is the raw ``href`` text from the export and is only checked when
    the link is added to a destination. ``title`` is ``None`` for links Pocket
    exported without a title (the anchor text repeats the URL).
    """
    url: str
    title: Optional[str] = None
    tags: Tuple[str, ...] = ()
    time_added: Optional[datetime] = None


@dataclass(frozen=True)
class ParsedExport:
    """The links of both sections of a Pocket export, in document order."""
    unread: List[LinkRecord] = field(default_factory=list)
    read_archive: List[LinkRecord] = field(default_factory=list)

    @property
    def all_records(self) -> List[LinkRecord]:
        return list(self.unread) + list(self.read_archive)

    @property
    def is_empty(self) -> bool:
        return not self.unread and not self.read_archive

    def section(self, name: str) -> List[LinkRecord]:
        """Return the records of the section called ``name``."""
        if name == SECTION_UNREAD:
            return self.unread
        if name == SECTION_READ_ARCHIVE:
            return self.read_archive
        raise KeyError(name)
