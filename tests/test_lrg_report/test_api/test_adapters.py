"""Tests for the lxml and pandas integration adapters."""

import pytest

from lrg_report.api import (
    AdapterType,
    LxmlAdapter,
    PandasAdapter,
    get_adapter,
    list_adapters,
    parse_string,
)
from lrg_report.shared import DiagnosticSeverity
from lrg_report.tree import ReportDocument

REPORT = (
    '<lrg schema_version="1.9">'
    "<fixed_annotation>"
    "<id>LRG_1</id>"
    '<sequence_source type="RefSeqGene"/>'
    '<transcript name="t1"><exon label="1"><coordinates start="5001" end="5284"/></exon></transcript>'
    "</fixed_annotation>"
    "</lrg>"
)

STYLESHEET = """<?xml version="1.0"?>
<xsl:stylesheet version="1.0" xmlns:xsl="http://www.w3.org/1999/XSL/Transform">
  <xsl:output method="html"/>
  <xsl:template match="/">
    <html><body><h1><xsl:value-of select="lrg/fixed_annotation/id"/></h1></body></html>
  </xsl:template>
</xsl:stylesheet>
"""


class TestLxmlAdapter:
    """Test conversion to and from lxml."""

    def setup_method(self):
        """Skip when lxml is not installed."""
        pytest.importorskip("lxml")
        self.adapter = LxmlAdapter(correlation_id="lxml-test")

    def test_metadata(self):
        """Test adapter metadata."""
        assert self.adapter.metadata.name == "lxml"
        assert self.adapter.metadata.adapter_type == AdapterType.XML_LIBRARY
        assert self.adapter.is_available()

    def test_to_target(self):
        """Test converting a parse result to an element."""
        result = self.adapter.to_target(parse_string(REPORT))

        assert result.success
        root = result.converted_data
        assert root.tag == "lrg"
        assert root.get("schema_version") == "1.9"
        assert root.findtext("fixed_annotation/id") == "LRG_1"
        assert root.find(".//coordinates").get("end") == "5284"
        assert result.metadata["element_count"] == 7

    def test_to_target_needs_single_root(self):
        """Test that several top-level nodes cannot become one element."""
        document = ReportDocument()
        document.add_node("a")
        document.add_node("b")

        result = self.adapter.to_target(document)
        assert not result.success
        assert "exactly one top-level node" in result.errors[0]
        assert result.diagnostics[0].severity == DiagnosticSeverity.ERROR

    def test_to_target_rejects_other_types(self):
        """Test that conversion failures are reported, not raised."""
        result = self.adapter.to_target("<lrg/>")  # type: ignore[arg-type]
        assert not result.success

    def test_from_target(self):
        """Test converting an lxml element to a document."""
        from lxml import etree

        root = etree.fromstring('<lrg><id>LRG_1</id><!-- note --><leaf x="5"/></lrg>')
        result = self.adapter.from_target(root)

        assert result.success
        document = result.converted_data
        assert document.find_node("lrg/id").content == "LRG_1"
        leaf = document.find_node("leaf")
        assert leaf.is_empty
        assert leaf.attributes == {"x": "5"}
        assert result.metadata["node_count"] == 3

    def test_from_target_element_tree(self):
        """Test that element trees are accepted."""
        from lxml import etree

        tree = etree.ElementTree(etree.fromstring("<lrg><id>LRG_2</id></lrg>"))
        result = self.adapter.from_target(tree)
        assert result.converted_data.find_node("id").content == "LRG_2"

    def test_from_target_invalid(self):
        """Test rejected target data."""
        result = self.adapter.from_target({"lrg": {}})
        assert not result.success
        assert "not a valid lxml element" in result.errors[0]

    def test_render_html(self, tmp_path):
        """Test XSLT rendering of a report."""
        stylesheet = tmp_path / "lrg2html.xsl"
        stylesheet.write_text(STYLESHEET, encoding="utf-8")

        result = self.adapter.render_html(parse_string(REPORT).document, stylesheet)
        assert result.success
        assert "<h1>LRG_1</h1>" in result.converted_data

    def test_render_html_missing_stylesheet(self, tmp_path):
        """Test rendering with a stylesheet that does not exist."""
        result = self.adapter.render_html(parse_string(REPORT), tmp_path / "missing.xsl")
        assert not result.success
        assert "missing.xsl" in result.errors[0]


class TestPandasAdapter:
    """Test conversion to and from pandas DataFrames."""

    def setup_method(self):
        """Skip when pandas is not installed."""
        pytest.importorskip("pandas")
        self.adapter = PandasAdapter()

    def test_to_target(self):
        """Test one row per node in document order."""
        result = self.adapter.to_target(parse_string(REPORT))

        assert result.success
        df = result.converted_data
        assert len(df) == 7
        assert list(df["name"]) == [
            "lrg", "fixed_annotation", "id", "sequence_source",
            "transcript", "exon", "coordinates",
        ]
        assert df.loc[2, "path"] == "lrg/fixed_annotation/id"
        assert df.loc[2, "content"] == "LRG_1"
        assert df.loc[3, "position"] == 1
        assert df.loc[6, "depth"] == 4
        assert bool(df.loc[6, "is_empty"]) is True
        assert df.loc[6, "attributes"] == {"start": "5001", "end": "5284"}
        assert int(df.loc[1, "parent_id"]) == 0
        assert result.metadata["row_count"] == 7

    def test_round_trip(self):
        """Test rebuilding a document from its DataFrame."""
        document = parse_string(REPORT).document
        df = self.adapter.to_target(document).converted_data

        result = self.adapter.from_target(df)
        assert result.success
        assert result.converted_data.to_dict()["children"] == document.to_dict()["children"]

    def test_from_target_not_dataframe(self):
        """Test rejected target data."""
        result = self.adapter.from_target([{"name": "lrg"}])
        assert not result.success

    def test_from_target_missing_columns(self):
        """Test that required columns are checked."""
        import pandas as pd

        result = self.adapter.from_target(pd.DataFrame({"name": ["lrg"]}))
        assert not result.success
        assert "missing columns" in result.errors[0]

    def test_from_target_unknown_parent(self):
        """Test rows pointing at a parent that does not exist."""
        import pandas as pd

        df = pd.DataFrame([{
            "node_id": 0, "parent_id": 5, "name": "id",
            "attributes": {}, "content": "LRG_1", "is_empty": False,
        }])
        result = self.adapter.from_target(df)
        assert not result.success
        assert "unknown parent" in result.errors[0]


class TestAdapterRegistry:
    """Test adapter lookup."""

    def test_unknown_adapter(self):
        """Test that unknown names give None."""
        assert get_adapter("polars") is None

    def test_get_lxml_adapter(self):
        """Test lookup of an installed adapter."""
        pytest.importorskip("lxml")
        adapter = get_adapter("lxml", correlation_id="registry")
        assert isinstance(adapter, LxmlAdapter)
        assert adapter.correlation_id == "registry"

    def test_list_adapters(self):
        """Test that listed adapters are all known."""
        names = {metadata.name for metadata in list_adapters()}
        assert names <= {"lxml", "pandas"}
