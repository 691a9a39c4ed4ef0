"""Report document: the root container of an LRG report tree."""

import io
from pathlib import Path
from typing import Dict, List, Optional, Union

from lrg_report.shared import ParserConfig, ReportFileError, get_logger

from .node import NodeContainer, ReportNode

PathLike = Union[str, Path]


class ReportDocument(NodeContainer):
    """Ordered top-level nodes plus the file the report is written to.

    Examples:
        >>> document = ReportDocument("LRG_1.xml")
        >>> lrg = document.add_node("lrg", {"schema_version": "1.9"})
        >>> lrg.add_node("fixed_annotation").add_node("id").content = "LRG_1"
        >>> document.find_node("lrg/fixed_annotation/id").content
        'LRG_1'
    """

    ROOT_NAME = "LRG_ROOT_NODE"

    def __init__(
        self,
        output_path: Optional[PathLike] = None,
        config: Optional[ParserConfig] = None,
        correlation_id: Optional[str] = None,
    ) -> None:
        """Initialize an empty document.

        Args:
            output_path: File written by write() when no path is given
            config: Configuration used for serialization
            correlation_id: Optional correlation ID for request tracking
        """
        self.children: List[ReportNode] = []
        self.output_path = Path(output_path) if output_path is not None else None
        self.config = config or ParserConfig()
        self.correlation_id = correlation_id or self.config.correlation_id
        self.logger = get_logger(__name__, self.correlation_id, "report_document")

    def __repr__(self) -> str:
        return (
            f"ReportDocument(output_path={self.output_path!r}, "
            f"children={len(self.children)})"
        )

    @property
    def name(self) -> str:
        """Name of the implicit root."""
        return self.ROOT_NAME

    @property
    def parent(self) -> None:
        """The document is never a child."""
        return None

    @classmethod
    def from_string(
        cls,
        text: str,
        output_path: Optional[PathLike] = None,
        config: Optional[ParserConfig] = None,
    ) -> "ReportDocument":
        """Build a document from report markup.

        Raises:
            MalformedMarkupError: If the markup is structurally unbalanced
        """
        from .builder import ReportTreeBuilder

        builder = ReportTreeBuilder(config=config)
        return builder.build(text, output_path=output_path).document

    @classmethod
    def from_file(
        cls,
        path: PathLike,
        output_path: Optional[PathLike] = None,
        config: Optional[ParserConfig] = None,
    ) -> "ReportDocument":
        """Build a document from a report file.

        Raises:
            ReportFileError: If the file cannot be read
            MalformedMarkupError: If the markup is structurally unbalanced
        """
        return cls.from_string(read_report_text(path), output_path, config)

    def write(self, path: Optional[PathLike] = None) -> Path:
        """Serialize the whole document to a file.

        Args:
            path: Destination; defaults to the document's output path

        Returns:
            The path written

        Raises:
            ReportFileError: If no destination is known or it cannot be written
        """
        from lrg_report.writer import ReportSerializer

        target = Path(path) if path is not None else self.output_path
        if target is None:
            raise ReportFileError("No output path given for report document")

        serializer = ReportSerializer(self.config, self.correlation_id)
        try:
            with target.open("w", encoding=self.config.writer.encoding) as stream:
                serializer.serialize(self, stream)
        except OSError as e:
            raise ReportFileError(f"Could not write to file {target}: {e}", target) from e

        self.logger.info(
            "Report written",
            extra={"path": str(target), "node_count": self.node_count}
        )
        return target

    def to_string(self) -> str:
        """Serialize the whole document to a string."""
        from lrg_report.writer import ReportSerializer

        buffer = io.StringIO()
        ReportSerializer(self.config, self.correlation_id).serialize(self, buffer)
        return buffer.getvalue()

    def to_dict(self) -> Dict[str, object]:
        """Convert document to dictionary representation."""
        return {
            "name": self.ROOT_NAME,
            "output_path": str(self.output_path) if self.output_path else None,
            "children": [child.to_dict() for child in self.children],
        }


def read_report_text(path: PathLike) -> str:
    """Read a report file as text.

    Raises:
        ReportFileError: If the file cannot be opened
    """
    source = Path(path)
    try:
        return source.read_text(encoding="utf-8", errors="replace")
    except OSError as e:
        raise ReportFileError(f"Could not read from file {source}: {e}", source) from e
