"""Entry points for reading and writing LRG reports.

Simple module-level functions cover the common cases; ReportTreeBuilder and
ReportSerializer remain available for callers that need more control.
"""

import time
from pathlib import Path
from typing import Optional, TextIO, Union

from lrg_report.shared import ParseResult, ParserConfig, ReportFileError, get_logger
from lrg_report.tree import ReportDocument, ReportTreeBuilder, read_report_text

InputType = Union[str, Path, TextIO]
PathLike = Union[str, Path]

# Max length for content preview in logs
PREVIEW_LENGTH = 100


def parse(
    input_data: InputType,
    config: Optional[ParserConfig] = None,
    correlation_id: Optional[str] = None,
) -> ParseResult:
    """Parse a report from markup, a Path, or a readable text stream.

    Strings are always treated as markup; pass a Path to read a file.

    Examples:
        >>> result = parse('<lrg><fixed_annotation><id>LRG_1</id></fixed_annotation></lrg>')
        >>> result.tree.find_node('id').content
        'LRG_1'
    """
    if isinstance(input_data, Path):
        return parse_file(input_data, config=config, correlation_id=correlation_id)
    if isinstance(input_data, str):
        return parse_string(input_data, config=config, correlation_id=correlation_id)
    if hasattr(input_data, "read"):
        return parse_string(input_data.read(), config=config, correlation_id=correlation_id)
    raise TypeError(f"Unsupported input type: {type(input_data).__name__}")


def parse_string(
    xml_string: str,
    config: Optional[ParserConfig] = None,
    correlation_id: Optional[str] = None,
    output_path: Optional[PathLike] = None,
) -> ParseResult:
    """Parse report markup held in a string.

    Raises:
        MalformedMarkupError: If the markup is structurally unbalanced
    """
    logger = get_logger(__name__, correlation_id, "parse_string")
    logger.debug(
        "Starting string parse operation",
        extra={
            "content_length": len(xml_string),
            "preview": (
                xml_string[:PREVIEW_LENGTH] + "..."
                if len(xml_string) > PREVIEW_LENGTH else xml_string
            ),
        }
    )

    builder = ReportTreeBuilder(config=config, correlation_id=correlation_id)
    return builder.build(xml_string, output_path=output_path)


def parse_file(
    file_path: PathLike,
    output_path: Optional[PathLike] = None,
    config: Optional[ParserConfig] = None,
    correlation_id: Optional[str] = None,
) -> ParseResult:
    """Parse a report file.

    Args:
        file_path: Report to read
        output_path: Destination recorded on the document for a later write()
        config: Parser configuration
        correlation_id: Optional correlation ID for request tracking

    Raises:
        ReportFileError: If the file cannot be read
        MalformedMarkupError: If the markup is structurally unbalanced
    """
    start_time = time.time()
    logger = get_logger(__name__, correlation_id, "parse_file").bind(file_path=str(file_path))
    logger.info("Starting file parse operation")

    try:
        text = read_report_text(file_path)
    except ReportFileError:
        logger.error("Report file could not be read")
        raise

    result = parse_string(text, config=config, correlation_id=correlation_id,
                          output_path=output_path)
    logger.info(
        "File parse operation completed",
        extra={
            "node_count": result.node_count,
            "processing_time_ms": (time.time() - start_time) * 1000,
        }
    )
    return result


def new_document(
    output_path: Optional[PathLike] = None,
    config: Optional[ParserConfig] = None,
    correlation_id: Optional[str] = None,
) -> ReportDocument:
    """Create an empty document that write() will save to output_path."""
    return ReportDocument(output_path, config=config, correlation_id=correlation_id)


def write_document(document: ReportDocument, path: Optional[PathLike] = None) -> Path:
    """Serialize a document to path (or to its own output path).

    Raises:
        ReportFileError: If the destination cannot be written
    """
    return document.write(path)
