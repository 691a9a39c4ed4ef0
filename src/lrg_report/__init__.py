"""LRG report XML.

Reads, builds and writes LRG (Locus Reference Genomic) report documents: a
simple tag/attribute XML dialect rendered downstream through an XSLT
stylesheet.

Progressive API Disclosure:
- Level 1: Simple functions - parse(), parse_string(), parse_file(), new_document()
- Level 2: Document API - ReportDocument / ReportNode building and path queries
- Level 3: Components - ReportTreeBuilder, ReportSerializer, ParserConfig
"""

__version__ = "0.1.0"
__author__ = "LRG Report Team"

from .api import new_document, parse, parse_file, parse_string, write_document
from .shared import (
    ContentMode,
    MalformedMarkupError,
    ParseResult,
    ParserConfig,
    ReportError,
    ReportFileError,
)
from .tree import ReportDocument, ReportNode, ReportTreeBuilder
from .writer import ReportSerializer

__all__ = [
    # Version and metadata
    "__author__",
    "__version__",

    # Level 1: Simple functions
    "parse",
    "parse_string",
    "parse_file",
    "new_document",
    "write_document",

    # Level 2: Document API
    "ReportDocument",
    "ReportNode",
    "ParseResult",

    # Level 3: Components and configuration
    "ReportTreeBuilder",
    "ReportSerializer",
    "ParserConfig",
    "ContentMode",

    # Errors
    "ReportError",
    "ReportFileError",
    "MalformedMarkupError",
]
