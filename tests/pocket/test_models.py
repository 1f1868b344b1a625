import pytest
from pocket.models import LinkRecord, ParsedExport, SECTION_UNREAD, SECTION_READ_ARCHIVE


class TestParsedExport:
    """Tests for the ParsedExport container."""

    def test_all_records_unread_first(self):
        """Test that all_records lists unread links before archived ones."""
        parsed = ParsedExport(
            unread=[LinkRecord("https://u.com", "U")],
            read_archive=[LinkRecord("https://r.com", "R")],
        )
        assert [record.url for record in parsed.all_records] == ["https://u.com", "https://r.com"]

    def test_is_empty(self):
        """Test that is_empty needs both sections to be empty."""
        assert ParsedExport().is_empty
        assert not ParsedExport(read_archive=[LinkRecord("https://r.com")]).is_empty

    def test_section_lookup(self):
        """Test looking up sections by name."""
        unread = [LinkRecord("https://u.com")]
        parsed = ParsedExport(unread=unread)
        assert parsed.section(SECTION_UNREAD) == unread
        assert parsed.section(SECTION_READ_ARCHIVE) == []
        with pytest.raises(KeyError):
            parsed.section("Favorites")

    def test_link_record_is_immutable(self):
        """Test that records cannot be modified."""
        record = LinkRecord("https://a.com", "A")
        with pytest.raises(AttributeError):
            record.title = "B"
