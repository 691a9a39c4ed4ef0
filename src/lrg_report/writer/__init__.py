"""XML output for LRG report documents.

Key Components:
    XMLWriter: Streaming writer for declarations, tags and character data
    ReportSerializer: Pre-order serialization of a ReportDocument
"""

from .serializer import ReportSerializer
from .xml_writer import XMLWriter, escape_attribute, escape_text

__all__ = [
    "ReportSerializer",
    "XMLWriter",
    "escape_attribute",
    "escape_text",
]
