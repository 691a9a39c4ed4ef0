"""Tree building from LRG report markup.

The builder consumes the tokenizer's lazy token stream and keeps an explicit
stack of open containers. The bottom of the stack is always the document, so a
closing tag that would pop it is reported as malformed markup instead of
leaving the builder without a current node.
"""

import time
from pathlib import Path
from typing import List, Optional, Union

from lrg_report.shared import (
    ContentMode,
    DiagnosticSeverity,
    MalformedMarkupError,
    ParseMetrics,
    ParseResult,
    ParserConfig,
    get_logger,
)
from lrg_report.tokenization import (
    TagTokenizer,
    Token,
    TokenType,
    decode_text,
    flatten_markup,
    parse_tag_body,
)

from .document import ReportDocument
from .node import NodeContainer, ReportNode


class ReportTreeBuilder:
    """Builds a ReportDocument from report markup."""

    def __init__(
        self,
        config: Optional[ParserConfig] = None,
        correlation_id: Optional[str] = None,
    ) -> None:
        """Initialize tree builder.

        Args:
            config: Parser configuration (defaults to ParserConfig())
            correlation_id: Optional correlation ID for request tracking
        """
        self.config = config or ParserConfig()
        self.correlation_id = correlation_id or self.config.correlation_id
        self.logger = get_logger(__name__, self.correlation_id, "report_tree_builder")
        self.tokenizer = TagTokenizer(self.correlation_id)

        self._stack: List[NodeContainer] = []

    def build(
        self,
        text: str,
        output_path: Union[str, Path, None] = None,
    ) -> ParseResult:
        """Build a document tree from raw report text.

        Args:
            text: Report markup, possibly spread over many lines
            output_path: Output path recorded on the resulting document

        Returns:
            ParseResult holding the document, diagnostics and metrics

        Raises:
            MalformedMarkupError: On unmatched closing tags, unterminated or
                empty tags, and (depending on configuration) mismatched close
                names or elements left open at the end of input
        """
        start_time = time.time()
        markup = flatten_markup(text, self.config.tokenization.skip_declaration_lines)

        document = ReportDocument(output_path, self.config, self.correlation_id)
        result = ParseResult(
            document=document,
            metrics=ParseMetrics(characters_processed=len(markup)),
            correlation_id=self.correlation_id,
        )

        self.logger.info(
            "Starting tree building",
            extra={"character_count": len(markup)}
        )

        self._stack = [document]
        for token in self.tokenizer.iter_tokens(markup):
            result.metrics.tokens_generated += 1
            self._process_token(token, result)

        self._finish(result)

        result.metrics.processing_time_ms = (time.time() - start_time) * 1000
        self.logger.info(
            "Tree building completed",
            extra={
                "node_count": result.metrics.nodes_created,
                "token_count": result.metrics.tokens_generated,
                "diagnostic_count": len(result.diagnostics),
            }
        )
        return result

    @property
    def _cursor(self) -> NodeContainer:
        return self._stack[-1]

    def _process_token(self, token: Token, result: ParseResult) -> None:
        if token.type == TokenType.OPEN_TAG:
            node = self._open_node(token, result)
            self._stack.append(node)
        elif token.type == TokenType.EMPTY_TAG:
            self._open_node(token, result)
        elif token.type == TokenType.CLOSE_TAG:
            self._close_node(token, result)
        elif token.type == TokenType.TEXT:
            self._add_text(token, result)
        else:
            self._handle_declaration(token, result)

    def _open_node(self, token: Token, result: ParseResult) -> ReportNode:
        try:
            spec = parse_tag_body(
                token.value, self.config.tokenization.legacy_quote_stripping
            )
        except MalformedMarkupError as e:
            raise MalformedMarkupError(str(e), offset=token.offset, tag=token.value) from e

        try:
            if spec.is_empty:
                node = self._cursor.add_empty_node(spec.name, spec.attributes)
            else:
                node = self._cursor.add_node(spec.name, spec.attributes)
        except ValueError as e:
            raise MalformedMarkupError(str(e), offset=token.offset, tag=spec.name) from e

        result.metrics.nodes_created += 1
        if self.logger.is_debug_enabled():
            self.logger.debug(
                "Node created",
                extra={"node": spec.name, "is_empty": spec.is_empty, "offset": token.offset}
            )
        return node

    def _close_node(self, token: Token, result: ParseResult) -> None:
        if len(self._stack) == 1:
            raise MalformedMarkupError(
                f"Closing tag </{token.value}> has no matching opening tag",
                offset=token.offset,
                tag=token.value,
            )

        node = self._stack.pop()
        if token.value and token.value != node.name:
            message = f"Closing tag </{token.value}> closes <{node.name}>"
            if self.config.tree.strict_close_names:
                raise MalformedMarkupError(message, offset=token.offset, tag=token.value)
            result.add_diagnostic(
                DiagnosticSeverity.WARNING,
                message,
                "report_tree_builder",
                offset=token.offset,
                details={"expected": node.name, "found": token.value},
            )

    def _add_text(self, token: Token, result: ParseResult) -> None:
        if not token.value.strip():
            return

        cursor = self._cursor
        if not isinstance(cursor, ReportNode):
            result.metrics.text_runs_dropped += 1
            result.add_diagnostic(
                DiagnosticSeverity.WARNING,
                "Text outside of any element dropped",
                "report_tree_builder",
                offset=token.offset,
                details={"text": token.value[:50]},
            )
            return

        text = decode_text(token.value)
        if self.config.tree.content_mode == ContentMode.CONCATENATE:
            cursor.append_content(text)
            return

        if cursor.content is not None:
            result.add_diagnostic(
                DiagnosticSeverity.INFO,
                f"Content of <{cursor.name}> replaced by a later text run",
                "report_tree_builder",
                offset=token.offset,
            )
        cursor.content = text

    def _handle_declaration(self, token: Token, result: ParseResult) -> None:
        if not self.config.tokenization.skip_markup_declarations:
            raise MalformedMarkupError(
                "Markup declarations are not supported inside report content",
                offset=token.offset,
                tag=token.value,
            )
        result.add_diagnostic(
            DiagnosticSeverity.DEBUG,
            "Markup declaration skipped",
            "report_tree_builder",
            offset=token.offset,
            details={"declaration": token.value[:50]},
        )

    def _finish(self, result: ParseResult) -> None:
        unclosed = [node.name for node in self._stack[1:]]
        self._stack = []
        if not unclosed:
            return

        message = f"Elements left open at end of input: {', '.join(unclosed)}"
        if not self.config.tree.allow_unclosed:
            raise MalformedMarkupError(message, tag=unclosed[-1])

        self.logger.warning(message, extra={"unclosed": unclosed})
        result.add_diagnostic(
            DiagnosticSeverity.WARNING,
            message,
            "report_tree_builder",
            details={"unclosed": unclosed},
        )
