import csv
import datetime
import argparse
import pytest
from unittest.mock import patch, MagicMock
from csv_export import CsvSinkPlugin
from csv_export.csv_sink import CsvReadingListSink, FIELDNAMES
from importer.sequencer import run_bulk
from importer.sink import SinkError
from pocket.models import LinkRecord


def read_rows(path):
    with open(path, "r", encoding="utf-8", newline="") as f:
        return list(csv.DictReader(f))


class TestCsvReadingListSink:
    """Tests for the CSV reading list."""

    def setup_method(self):
        self.mock_logger = MagicMock()

    def test_add_prepends(self, tmp_path):
        """Test that the newest item goes on top."""
        sink = CsvReadingListSink(str(tmp_path / "list.csv"), self.mock_logger)
        sink.add("https://a.com", "A")
        sink.add("https://b.com")
        assert [item["url"] for item in sink.items] == ["https://b.com", "https://a.com"]
        assert sink.items[0]["title"] == ""

    def test_duplicates_are_ignored(self, tmp_path):
        """Test that adding a URL twice keeps one entry."""
        sink = CsvReadingListSink(str(tmp_path / "list.csv"), self.mock_logger)
        sink.add("https://a.com", "A")
        sink.add("https://a.com", "A again")
        assert len(sink.items) == 1
        assert sink.items[0]["title"] == "A"

    def test_add_record_includes_tags_and_date(self, tmp_path):
        """Test that records keep their tags and save date."""
        sink = CsvReadingListSink(str(tmp_path / "list.csv"), self.mock_logger)
        sink.add_record(LinkRecord(
            "https://a.com", "A", tags=("news", "tech"), time_added=datetime.datetime(2020, 1, 1, 12, 30)
        ))
        assert sink.items[0] == {
            "title": "A",
            "url": "https://a.com",
            "tags": "news,tech",
            "created": "2020-01-01 12:30:00",
        }

    def test_close_writes_csv(self, tmp_path):
        """Test that closing writes the header and all rows."""
        path = tmp_path / "list.csv"
        with CsvReadingListSink(str(path), self.mock_logger) as sink:
            sink.add("https://a.com", "A")
            sink.add("https://b.com", "B, with comma")

        rows = read_rows(path)
        assert list(rows[0].keys()) == FIELDNAMES
        assert [row["url"] for row in rows] == ["https://b.com", "https://a.com"]
        assert rows[0]["title"] == "B, with comma"
        assert path.read_text(encoding="utf-8").startswith('"title","url","tags","created"')

    def test_add_after_close_fails(self, tmp_path):
        """Test that a closed reading list rejects new links."""
        sink = CsvReadingListSink(str(tmp_path / "list.csv"), self.mock_logger)
        sink.close()
        with pytest.raises(SinkError):
            sink.add("https://a.com")

    def test_close_is_idempotent(self, tmp_path):
        """Test that closing twice writes once."""
        sink = CsvReadingListSink(str(tmp_path / "list.csv"), self.mock_logger)
        with patch("builtins.open", MagicMock()) as mock_file:
            sink.close()
            sink.close()
        mock_file.assert_called_once()

    def test_close_write_error(self, tmp_path):
        """Test that write errors are logged and re-raised."""
        sink = CsvReadingListSink(str(tmp_path / "missing" / "list.csv"), self.mock_logger)
        with pytest.raises(OSError):
            sink.close()
        self.mock_logger.exception.assert_called_once()

    def test_reverse_import_keeps_export_order(self, tmp_path):
        """Test that a bulk run writes the links in their original order."""
        path = tmp_path / "list.csv"
        records = [LinkRecord(f"https://example.com/{i}", f"Link {i}") for i in range(4)]

        with CsvReadingListSink(str(path), self.mock_logger) as sink:
            run_bulk(records, sink, logger=self.mock_logger)

        assert [row["url"] for row in read_rows(path)] == [record.url for record in records]


class TestCsvSinkPlugin:
    """Tests for the CSV destination plugin."""

    def test_get_name(self):
        assert CsvSinkPlugin.get_name() == "csv"

    def test_create_parser(self, tmp_path):
        """Test that the parser has the import and output arguments."""
        parser = CsvSinkPlugin.create_parser()
        assert parser.description == CsvSinkPlugin.get_description()

        arguments = {action.dest: action for action in parser._actions}
        assert arguments["input_file"].required
        assert arguments["output_file"].required
        assert not arguments["include_read"].required
        assert arguments["input_file"].metavar == "HTMLFILE"

    def test_create_sink(self, tmp_path):
        """Test that create_sink writes to the output file."""
        args = argparse.Namespace(output_file=str(tmp_path / "out.csv"))
        sink = CsvSinkPlugin.create_sink(args)
        assert isinstance(sink, CsvReadingListSink)
        assert sink.file_path == str(tmp_path / "out.csv")
