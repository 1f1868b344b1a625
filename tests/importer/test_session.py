import pytest
from pathlib import Path
from unittest.mock import MagicMock
from importer.models import ImportLedger, ImportMode
from importer.session import ImportSession
from importer.sink import BaseLinkSink
from pocket.export_parser import EmptyResultError, PocketExportParser
from pocket.models import LinkRecord

SAMPLE_EXPORT = Path(__file__).parent.parent / "samples" / "pocket_export.html"

EXPORT_HTML = """
<h1>Unread</h1>
<ul>
  <li><a href="https://u1.com">U1</a></li>
  <li><a href="https://u2.com">U2</a></li>
</ul>
<h1>Read Archive</h1>
<ul>
  <li><a href="https://r1.com">R1</a></li>
</ul>
"""


class ListSink(BaseLinkSink):
    """Sink that prepends like a reading list."""

    def __init__(self):
        self.items = []

    def add(self, url, title=None, preview_text=None):
        self.items.insert(0, url)


class TestImportSession:
    """Tests for the import session."""

    def setup_method(self):
        self.mock_logger = MagicMock()
        self.session = ImportSession(
            parser=PocketExportParser(logger=self.mock_logger),
            logger=self.mock_logger,
        )

    def test_effective_records_unread_only(self):
        """Test that only unread links are imported by default."""
        self.session.load_html(EXPORT_HTML)
        assert [record.url for record in self.session.effective_records] == ["https://u1.com", "https://u2.com"]

    def test_effective_records_include_read(self):
        """Test that the read archive follows the unread links when included."""
        self.session.load_html(EXPORT_HTML)
        self.session.include_read = True
        assert [record.url for record in self.session.effective_records] == [
            "https://u1.com", "https://u2.com", "https://r1.com"
        ]

    def test_load_without_links(self):
        """Test that an export without links is rejected and the previous links are kept."""
        self.session.load_html(EXPORT_HTML)
        with pytest.raises(EmptyResultError):
            self.session.load_html("<h1>Nothing here</h1>")
        assert len(self.session.records.unread) == 2

    def test_load_replaces_records_and_resets_ledger(self):
        """Test that loading a new export replaces the links wholesale."""
        self.session.load_html(EXPORT_HTML)
        self.session.start(ListSink())
        assert self.session.ledger.added == 2

        self.session.load_html('<h1>Unread</h1><ul><li><a href="https://new.com">New</a></li></ul>')
        assert self.session.ledger == ImportLedger()
        assert self.session.records.unread == [LinkRecord("https://new.com", "New")]
        assert self.session.records.read_archive == []

    def test_load_file(self):
        """Test loading the sample export from disk."""
        parsed = self.session.load_file(str(SAMPLE_EXPORT))
        assert len(parsed.unread) == 3
        assert self.session.records is parsed

    def test_start_bulk_keeps_export_order(self):
        """Test that a prepending destination ends up in export order."""
        self.session.load_html(EXPORT_HTML)
        self.session.include_read = True
        sink = ListSink()
        on_complete = MagicMock()

        ledger = self.session.start(sink, on_complete=on_complete)

        assert sink.items == ["https://u1.com", "https://u2.com", "https://r1.com"]
        assert ledger == ImportLedger(added=3, failed=0)
        on_complete.assert_called_once_with(ledger)

    def test_start_stepwise(self):
        """Test a stepwise run through the session."""
        self.session.load_html(EXPORT_HTML)
        self.session.mode = ImportMode.STEPWISE
        sink = ListSink()
        wait = MagicMock()

        ledger = self.session.start(sink, wait=wait)

        assert sink.items == ["https://u1.com", "https://u2.com"]
        assert ledger == ImportLedger(added=2, failed=0)
        assert wait.call_count == 1
        assert self.session.stepper.done
        assert not self.session.is_running

    def test_begin_stepwise_tracks_ledger(self):
        """Test that the session ledger follows a manually stepped run."""
        self.session.load_html(EXPORT_HTML)
        stepper = self.session.begin_stepwise(ListSink())

        assert self.session.is_running
        stepper.step()
        assert self.session.ledger.added == 1

    def test_apply_filter(self):
        """Test that filters apply to both sections."""
        self.session.load_html(EXPORT_HTML)
        self.session.apply_filter(lambda record: record.url.endswith("1.com"))
        assert [record.url for record in self.session.records.unread] == ["https://u1.com"]
        assert [record.url for record in self.session.records.read_archive] == ["https://r1.com"]

    def test_mode_from_string(self):
        """Test that the mode may be given by name."""
        session = ImportSession(mode="stepwise", logger=self.mock_logger)
        assert session.mode is ImportMode.STEPWISE
