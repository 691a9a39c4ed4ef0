"""Integration adapters between report documents and third-party libraries.

The lxml adapter converts to and from ``lxml.etree`` elements and renders
reports through their XSLT stylesheet; the pandas adapter flattens a report
into one DataFrame row per node. Third-party libraries are imported lazily so
the core parser works without them.
"""

import time
from abc import ABC, abstractmethod
from dataclasses import dataclass, field
from enum import Enum, auto
from pathlib import Path
from typing import Any, Dict, List, Optional, Type, Union

from lrg_report.shared import (
    DiagnosticEntry,
    DiagnosticSeverity,
    ParseResult,
    get_logger,
)
from lrg_report.tree import ReportDocument, ReportNode

DocumentSource = Union[ReportDocument, ParseResult]

DATAFRAME_COLUMNS = [
    "node_id",
    "parent_id",
    "name",
    "path",
    "depth",
    "position",
    "attributes",
    "content",
    "is_empty",
]


class AdapterType(Enum):
    """Types of integration adapters."""

    XML_LIBRARY = auto()     # XML processing libraries (lxml)
    DATA_FRAME = auto()      # DataFrame libraries (pandas)


@dataclass
class AdapterMetadata:
    """Metadata about an integration adapter."""

    name: str
    version: str
    adapter_type: AdapterType
    target_library: str
    description: str


@dataclass
class ConversionResult:
    """Result of a conversion operation."""

    success: bool
    converted_data: Any
    original_data: Any
    conversion_time_ms: float
    warnings: List[str] = field(default_factory=list)
    errors: List[str] = field(default_factory=list)
    metadata: Dict[str, Any] = field(default_factory=dict)
    diagnostics: List[DiagnosticEntry] = field(default_factory=list)


class IntegrationAdapter(ABC):
    """Abstract base class for all integration adapters.

    Conversions never raise; failures are reported through a ConversionResult
    with success=False and the error message in ``errors``.
    """

    def __init__(self, correlation_id: Optional[str] = None) -> None:
        """Initialize the integration adapter.

        Args:
            correlation_id: Optional correlation ID for request tracking
        """
        self.correlation_id = correlation_id
        self._logger = get_logger(__name__, correlation_id, self.__class__.__name__)

    @property
    @abstractmethod
    def metadata(self) -> AdapterMetadata:
        """Get adapter metadata."""

    @abstractmethod
    def is_available(self) -> bool:
        """Check if the target library can be imported."""

    @abstractmethod
    def to_target(self, source: DocumentSource) -> ConversionResult:
        """Convert a report document to the target format."""

    @abstractmethod
    def from_target(self, target_data: Any) -> ConversionResult:
        """Convert target data to a ReportDocument."""

    def _create_error_result(
        self,
        error_message: str,
        original_data: Any,
        conversion_time_ms: float = 0.0
    ) -> ConversionResult:
        self._logger.warning(error_message)
        return ConversionResult(
            success=False,
            converted_data=None,
            original_data=original_data,
            conversion_time_ms=conversion_time_ms,
            errors=[error_message],
            diagnostics=[
                DiagnosticEntry(
                    severity=DiagnosticSeverity.ERROR,
                    message=error_message,
                    component=self.__class__.__name__,
                    correlation_id=self.correlation_id
                )
            ]
        )


def _document_of(source: DocumentSource) -> ReportDocument:
    if isinstance(source, ParseResult):
        return source.document
    if isinstance(source, ReportDocument):
        return source
    raise TypeError(f"Expected ReportDocument or ParseResult, got {type(source).__name__}")


class LxmlAdapter(IntegrationAdapter):
    """Adapter for conversion with lxml.etree and XSLT rendering."""

    @property
    def metadata(self) -> AdapterMetadata:
        """Get adapter metadata."""
        return AdapterMetadata(
            name="lxml",
            version="1.0.0",
            adapter_type=AdapterType.XML_LIBRARY,
            target_library="lxml",
            description="Conversion between ReportDocument and lxml.etree, XSLT rendering"
        )

    def is_available(self) -> bool:
        """Check if lxml is available."""
        try:
            import lxml.etree  # noqa: F401
            return True
        except ImportError:
            return False

    def to_target(self, source: DocumentSource) -> ConversionResult:
        """Convert a single-rooted report document to an lxml element."""
        start_time = time.time()

        try:
            from lxml import etree

            document = _document_of(source)
            if len(document.children) != 1:
                return self._create_error_result(
                    f"lxml needs exactly one top-level node, found {len(document.children)}",
                    source,
                    (time.time() - start_time) * 1000
                )

            root = self._convert_node_to_lxml(document.children[0], etree)
            return ConversionResult(
                success=True,
                converted_data=root,
                original_data=source,
                conversion_time_ms=(time.time() - start_time) * 1000,
                metadata={"element_count": sum(1 for _ in root.iter())},
            )

        except Exception as e:
            return self._create_error_result(
                f"Failed to convert to lxml: {e}",
                source,
                (time.time() - start_time) * 1000
            )

    def from_target(self, target_data: Any) -> ConversionResult:
        """Convert an lxml element or element tree to a ReportDocument.

        Elements with neither text nor children become empty nodes; comments
        and processing instructions are skipped.
        """
        start_time = time.time()

        try:
            from lxml import etree

            if isinstance(target_data, etree._ElementTree):
                root = target_data.getroot()
            elif isinstance(target_data, etree._Element):
                root = target_data
            else:
                return self._create_error_result(
                    "Target data is not a valid lxml element",
                    target_data,
                    (time.time() - start_time) * 1000
                )

            document = ReportDocument(correlation_id=self.correlation_id)
            self._convert_lxml_to_node(root, document)
            return ConversionResult(
                success=True,
                converted_data=document,
                original_data=target_data,
                conversion_time_ms=(time.time() - start_time) * 1000,
                metadata={"node_count": document.node_count},
            )

        except Exception as e:
            return self._create_error_result(
                f"Failed to convert from lxml: {e}",
                target_data,
                (time.time() - start_time) * 1000
            )

    def render_html(
        self,
        source: DocumentSource,
        stylesheet: Union[str, Path],
    ) -> ConversionResult:
        """Apply an XSLT stylesheet to the serialized report.

        Args:
            source: Document (or parse result) to render
            stylesheet: Path to the XSLT stylesheet, e.g. lrg2html.xsl

        Returns:
            ConversionResult whose converted_data is the rendered text
        """
        start_time = time.time()

        try:
            from lxml import etree

            document = _document_of(source)
            encoding = document.config.writer.encoding
            tree = etree.fromstring(document.to_string().encode(encoding))
            transform = etree.XSLT(etree.parse(str(stylesheet)))
            rendered = transform(tree)

            return ConversionResult(
                success=True,
                converted_data=str(rendered),
                original_data=source,
                conversion_time_ms=(time.time() - start_time) * 1000,
                warnings=[str(entry) for entry in transform.error_log],
                metadata={"stylesheet": str(stylesheet)},
            )

        except Exception as e:
            return self._create_error_result(
                f"Failed to render with stylesheet {stylesheet}: {e}",
                source,
                (time.time() - start_time) * 1000
            )

    def _convert_node_to_lxml(self, node: ReportNode, etree: Any) -> Any:
        element = etree.Element(node.name)
        for key, value in node.attributes.items():
            element.set(key, value)
        if node.content is not None:
            element.text = node.content
        for child in node.children:
            element.append(self._convert_node_to_lxml(child, etree))
        return element

    def _convert_lxml_to_node(self, element: Any, parent: Any) -> None:
        if not isinstance(element.tag, str):
            return

        children = [child for child in element if isinstance(child.tag, str)]
        text = element.text.strip() if element.text and element.text.strip() else None
        attributes = {str(key): str(value) for key, value in element.attrib.items()}

        if not children and text is None:
            parent.add_empty_node(element.tag, attributes)
            return

        node = parent.add_node(element.tag, attributes)
        node.content = text
        for child in children:
            self._convert_lxml_to_node(child, node)


class PandasAdapter(IntegrationAdapter):
    """Adapter flattening report documents into pandas DataFrames."""

    @property
    def metadata(self) -> AdapterMetadata:
        """Get adapter metadata."""
        return AdapterMetadata(
            name="pandas",
            version="1.0.0",
            adapter_type=AdapterType.DATA_FRAME,
            target_library="pandas",
            description="One DataFrame row per report node, in document order"
        )

    def is_available(self) -> bool:
        """Check if pandas is available."""
        try:
            import pandas  # noqa: F401
            return True
        except ImportError:
            return False

    def to_target(self, source: DocumentSource) -> ConversionResult:
        """Convert a report document to a DataFrame.

        Rows are in pre-order; ``parent_id`` refers to the parent's
        ``node_id`` and is None for top-level nodes.
        """
        start_time = time.time()

        try:
            import pandas as pd

            document = _document_of(source)
            rows = self._extract_rows(document)
            df = pd.DataFrame(rows, columns=DATAFRAME_COLUMNS)

            return ConversionResult(
                success=True,
                converted_data=df,
                original_data=source,
                conversion_time_ms=(time.time() - start_time) * 1000,
                metadata={
                    "dataframe_shape": df.shape,
                    "row_count": len(df),
                    "columns": list(df.columns),
                }
            )

        except Exception as e:
            return self._create_error_result(
                f"Failed to convert to pandas DataFrame: {e}",
                source,
                (time.time() - start_time) * 1000
            )

    def from_target(self, target_data: Any) -> ConversionResult:
        """Rebuild a ReportDocument from a DataFrame produced by to_target."""
        start_time = time.time()

        try:
            import pandas as pd

            if not isinstance(target_data, pd.DataFrame):
                return self._create_error_result(
                    "Target data is not a pandas DataFrame",
                    target_data,
                    (time.time() - start_time) * 1000
                )

            required = {"node_id", "parent_id", "name", "attributes", "content", "is_empty"}
            missing = sorted(required - set(target_data.columns))
            if missing:
                return self._create_error_result(
                    f"DataFrame is missing columns: {', '.join(missing)}",
                    target_data,
                    (time.time() - start_time) * 1000
                )

            document = ReportDocument(correlation_id=self.correlation_id)
            nodes: Dict[int, ReportNode] = {}
            for row in target_data.sort_values("node_id").itertuples(index=False):
                if pd.isna(row.parent_id):
                    parent: Any = document
                elif int(row.parent_id) in nodes:
                    parent = nodes[int(row.parent_id)]
                else:
                    return self._create_error_result(
                        f"Row {row.node_id} refers to unknown parent {row.parent_id}",
                        target_data,
                        (time.time() - start_time) * 1000
                    )

                attributes = row.attributes if isinstance(row.attributes, dict) else {}
                if bool(row.is_empty):
                    node = parent.add_empty_node(row.name, attributes)
                else:
                    node = parent.add_node(row.name, attributes)
                    if isinstance(row.content, str):
                        node.content = row.content
                nodes[int(row.node_id)] = node

            return ConversionResult(
                success=True,
                converted_data=document,
                original_data=target_data,
                conversion_time_ms=(time.time() - start_time) * 1000,
                metadata={"node_count": len(nodes)},
            )

        except Exception as e:
            return self._create_error_result(
                f"Failed to convert from pandas DataFrame: {e}",
                target_data,
                (time.time() - start_time) * 1000
            )

    def _extract_rows(self, document: ReportDocument) -> List[Dict[str, Any]]:
        rows: List[Dict[str, Any]] = []
        ids: Dict[int, int] = {}
        for node in document.iter_nodes():
            parent = node.parent
            node_id = len(rows)
            ids[id(node)] = node_id
            rows.append({
                "node_id": node_id,
                "parent_id": ids[id(parent)] if isinstance(parent, ReportNode) else None,
                "name": node.name,
                "path": node.path,
                "depth": node.depth,
                "position": node.position(),
                "attributes": dict(node.attributes),
                "content": node.content,
                "is_empty": node.is_empty,
            })
        return rows


_ADAPTERS: Dict[str, Type[IntegrationAdapter]] = {
    "lxml": LxmlAdapter,
    "pandas": PandasAdapter,
}


def get_adapter(
    adapter_name: str,
    correlation_id: Optional[str] = None
) -> Optional[IntegrationAdapter]:
    """Get an adapter instance by name, or None if unknown or unavailable."""
    adapter_class = _ADAPTERS.get(adapter_name)
    if adapter_class is None:
        return None
    adapter = adapter_class(correlation_id)
    return adapter if adapter.is_available() else None


def list_adapters() -> List[AdapterMetadata]:
    """List metadata for adapters whose target library is installed."""
    available = []
    for adapter_class in _ADAPTERS.values():
        adapter = adapter_class()
        if adapter.is_available():
            available.append(adapter.metadata)
    return available
