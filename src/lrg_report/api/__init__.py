"""Public API for reading, writing and converting LRG reports."""

from .adapters import (
    AdapterMetadata,
    AdapterType,
    ConversionResult,
    IntegrationAdapter,
    LxmlAdapter,
    PandasAdapter,
    get_adapter,
    list_adapters,
)
from .parser import (
    new_document,
    parse,
    parse_file,
    parse_string,
    write_document,
)

__all__ = [
    "AdapterMetadata",
    "AdapterType",
    "ConversionResult",
    "IntegrationAdapter",
    "LxmlAdapter",
    "PandasAdapter",
    "get_adapter",
    "list_adapters",
    "new_document",
    "parse",
    "parse_file",
    "parse_string",
    "write_document",
]
