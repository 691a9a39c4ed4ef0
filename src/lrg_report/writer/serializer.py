"""Serialization of report documents to XML text."""

import time
from typing import TYPE_CHECKING, Optional, TextIO

from lrg_report.shared import ParserConfig, get_logger

from .xml_writer import XMLWriter

if TYPE_CHECKING:
    from lrg_report.tree import ReportDocument, ReportNode


class ReportSerializer:
    """Writes a ReportDocument as an LRG XML report.

    Output starts with the XML declaration and the xml-stylesheet processing
    instruction, followed by each top-level node in pre-order.
    """

    def __init__(
        self,
        config: Optional[ParserConfig] = None,
        correlation_id: Optional[str] = None,
    ) -> None:
        self.config = config or ParserConfig()
        self.logger = get_logger(__name__, correlation_id, "report_serializer")

    def serialize(self, document: "ReportDocument", stream: TextIO) -> None:
        """Write the whole document to a text stream."""
        start_time = time.time()
        writer_config = self.config.writer
        writer = XMLWriter(stream, writer_config.indent, writer_config.data_mode)

        writer.xml_decl(writer_config.encoding)
        if writer_config.include_stylesheet:
            writer.pi("xml-stylesheet", writer_config.stylesheet_data)

        for node in document.children:
            self._write_node(writer, node)
        writer.end()

        self.logger.debug(
            "Document serialized",
            extra={
                "top_level_nodes": len(document.children),
                "processing_time_ms": (time.time() - start_time) * 1000,
            }
        )

    def _write_node(self, writer: XMLWriter, node: "ReportNode") -> None:
        if node.is_empty:
            writer.empty_tag(node.name, node.attributes)
            return

        writer.start_tag(node.name, node.attributes)
        if node.content is not None:
            writer.characters(node.content)
        for child in node.children:
            self._write_node(writer, child)
        writer.end_tag(node.name)
