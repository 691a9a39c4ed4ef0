"""Report tree for LRG report documents.

Key Components:
    ReportNode: One element with attributes, optional content and children
    ReportDocument: Root container owning the top-level nodes
    ReportTreeBuilder: Builds a ReportDocument from report markup
"""

from .builder import ReportTreeBuilder
from .document import ReportDocument, read_report_text
from .node import NodeContainer, ReportNode

__all__ = [
    "NodeContainer",
    "ReportDocument",
    "ReportNode",
    "ReportTreeBuilder",
    "read_report_text",
]
