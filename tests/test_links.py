"""Tests for the link reference table."""

from markweave.services.links import LinkReference, LinkReferenceTable


class TestLinkReferenceTable:
    """Tests for LinkReferenceTable."""

    def test_ids_follow_first_seen_order(self):
        """Test ids start at 1 and increase per new URL."""
        table = LinkReferenceTable()
        assert table.register("https://a.com") == 1
        assert table.register("https://b.com") == 2

    def test_deduplicates_by_url(self):
        """Test the same URL keeps its first id."""
        table = LinkReferenceTable()
        table.register("https://a.com")
        table.register("https://b.com")
        assert table.register("https://a.com") == 1
        assert len(table) == 2

    def test_first_title_wins(self):
        """Test a later title does not replace the first registration's."""
        table = LinkReferenceTable()
        table.register("https://a.com", "First")
        table.register("https://a.com", "Second")
        assert table.references() == [LinkReference(id=1, url="https://a.com", title="First")]

    def test_render(self):
        """Test the appendix lists definitions in id order."""
        table = LinkReferenceTable()
        table.register("https://a.com")
        table.register("https://b.com", 'The "B" site')
        assert table.render() == '[1]: https://a.com\n[2]: https://b.com "The \\"B\\" site"'

    def test_empty_table(self):
        """Test an empty table renders nothing."""
        table = LinkReferenceTable()
        assert len(table) == 0
        assert table.render() == ""
