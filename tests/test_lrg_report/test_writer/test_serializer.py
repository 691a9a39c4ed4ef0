"""Tests for ReportSerializer."""

import io

from lrg_report.shared import ParserConfig
from lrg_report.tree import ReportDocument, ReportTreeBuilder
from lrg_report.writer import ReportSerializer

HEADER = (
    '<?xml version="1.0" encoding="UTF-8"?>\n'
    '<?xml-stylesheet type="text/xsl" href="lrg2html.xsl"?>\n'
)


def serialize(document, config=None):
    """Serialize a document to a string."""
    stream = io.StringIO()
    ReportSerializer(config).serialize(document, stream)
    return stream.getvalue()


class TestReportSerializer:
    """Test serialization of report trees."""

    def test_empty_document(self):
        """Test the output of a document with no nodes."""
        assert serialize(ReportDocument()) == HEADER

    def test_empty_node(self):
        """Test the self-closing format."""
        document = ReportDocument()
        document.add_empty_node("leaf", {"x": "5"})
        assert serialize(document) == HEADER + '<leaf x="5" />\n'

    def test_content_before_children(self):
        """Test that content is written right after the opening tag."""
        document = ReportDocument()
        exon = document.add_node("exon")
        exon.content = "note"
        exon.add_empty_node("coordinates", {"start": "1"})

        assert serialize(document) == HEADER + (
            "<exon>note\n"
            '  <coordinates start="1" />\n'
            "</exon>\n"
        )

    def test_element_without_content_or_children(self):
        """Test that a non-empty node without content keeps both tags."""
        document = ReportDocument()
        document.add_node("annotation_set")
        assert serialize(document) == HEADER + "<annotation_set></annotation_set>\n"

    def test_multiple_top_level_nodes(self):
        """Test that every top-level node is written in order."""
        document = ReportDocument()
        document.add_node("first").content = "1"
        document.add_node("second").content = "2"
        assert serialize(document) == HEADER + "<first>1</first>\n<second>2</second>\n"

    def test_without_stylesheet(self):
        """Test disabling the stylesheet processing instruction."""
        config = ParserConfig().override(writer__include_stylesheet=False)
        assert serialize(ReportDocument(), config) == '<?xml version="1.0" encoding="UTF-8"?>\n'

    def test_custom_stylesheet(self):
        """Test a different stylesheet href."""
        config = ParserConfig().override(writer__stylesheet_href="report.xsl")
        assert 'href="report.xsl"' in serialize(ReportDocument(), config)


class TestRoundTrip:
    """Test that serialized output reads back to the same tree."""

    def build(self, text):
        """Parse markup into a document."""
        return ReportTreeBuilder().build(text).document

    def test_tree_round_trip(self):
        """Test structure, attributes and content after a round trip."""
        document = ReportDocument()
        lrg = document.add_node("lrg", {"schema_version": "1.9"})
        transcript = lrg.add_node("transcript", {"name": "t1"})
        exon = transcript.add_node("exon", {"label": "1"})
        exon.add_empty_node("coordinates", {"start": "5001", "end": "5284"})
        lrg.add_node("comment").content = "Coordinates < 10 & \"quoted\""

        restored = self.build(serialize(document))
        assert [child.to_dict() for child in restored.children] == [
            child.to_dict() for child in document.children
        ]

    def test_serialization_is_stable(self):
        """Test that a second round trip produces identical text."""
        first = serialize(self.build("<a x=\"1\"><b>t &amp; u</b><c/></a>"))
        second = serialize(self.build(first))
        assert first == second

    def test_attribute_value_with_spaced_equals(self):
        """Test that "=" surrounded by spaces inside a value survives a round trip."""
        document = ReportDocument()
        document.add_empty_node("note", {"expr": "a = b"})

        restored = self.build(serialize(document))
        assert restored.children[0].attributes == {"expr": "a = b"}

    def test_round_trip_without_data_mode(self):
        """Test that compact output still reads back to the same tree."""
        config = ParserConfig().override(writer__data_mode=False)
        document = ReportDocument(config=config)
        lrg = document.add_node("lrg", {"schema_version": "1.9"})
        lrg.add_node("id").content = "LRG_1"

        text = serialize(document, config)
        assert text.splitlines()[1] == '<?xml-stylesheet type="text/xsl" href="lrg2html.xsl"?>'

        restored = self.build(text)
        assert [child.name for child in restored.children] == ["lrg"]
        assert restored.find_node("lrg/id").content == "LRG_1"

    def test_whitespace_only_content_reads_back_empty(self):
        """Test that whitespace-only content is not kept as content."""
        document = ReportDocument()
        document.add_node("comment").content = " "

        restored = self.build(serialize(document))
        assert restored.children[0].content is None
