import datetime
from unittest.mock import patch, MagicMock
from common.preview import preview_records
from pocket.models import LinkRecord


class TestPreview:
    """Tests for the preview module."""

    def setup_method(self):
        self.logger_patcher = patch("common.preview.get_or_setup_logger")
        self.mock_logger = MagicMock()
        self.logger_patcher.start().return_value = self.mock_logger

    def teardown_method(self):
        self.logger_patcher.stop()

    def logged(self):
        return [call.args[0] for call in self.mock_logger.info.call_args_list]

    def test_preview_empty(self):
        """Test that an empty preview says so."""
        preview_records([])
        assert self.logged() == ["No links to preview"]

    def test_preview_untitled_and_details(self):
        """Test that untitled links, tags and dates are shown."""
        preview_records([
            LinkRecord("https://a.com", None, tags=("news", "tech"), time_added=datetime.datetime(2020, 1, 2, 3, 4)),
        ])
        lines = self.logged()
        assert "Title: Untitled Link" in lines
        assert "URL: https://a.com" in lines
        assert "Tags: news, tech" in lines
        assert "Added: 2020-01-02 03:04" in lines

    def test_preview_limit(self):
        """Test that only `limit` links are shown."""
        records = [LinkRecord(f"https://example.com/{i}", f"Link {i}") for i in range(5)]
        preview_records(records, limit=2)
        lines = self.logged()
        assert lines[0] == "Previewing 2 of 5 links:"
        assert "Title: Link 1" in lines
        assert "Title: Link 2" not in lines
        assert lines[-1].startswith("... and 3 more links")
