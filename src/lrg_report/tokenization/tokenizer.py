"""Tag tokenizer for LRG report markup.

Report files are flattened before tokenization: each physical line is
trimmed, declaration lines (``<?...``) are dropped and the remainder is joined
into a single string. The tokenizer then walks that string with an explicit
state machine and yields open, empty, close and text tokens.

Tag bodies end at the first ``>``; angle brackets inside attribute values are
not supported by the report format.
"""

import re
import time
from dataclasses import dataclass, field
from enum import Enum, auto
from typing import Dict, Iterator, List, Optional
from xml.sax.saxutils import unescape

from lrg_report.shared import MalformedMarkupError, get_logger

_ENTITIES = {"&quot;": '"', "&apos;": "'"}

# Spaces around "=" belong to the assignment, never to the value
_ATTRIBUTE = re.compile(r"""([^\s=]+)(?:\s*=\s*("[^"]*"|'[^']*'|[^\s]*))?""")


class TokenType(Enum):
    """Token types produced by the tag tokenizer."""

    OPEN_TAG = auto()       # <name attr="v">
    EMPTY_TAG = auto()      # <name attr="v" />
    CLOSE_TAG = auto()      # </name>
    TEXT = auto()           # Character run between two tags
    DECLARATION = auto()    # <?...?> or <!...> surviving flattening


class TokenizerState(Enum):
    """State machine states for tag tokenization."""

    OUTSIDE = auto()        # Between tags, nothing buffered
    IN_TEXT = auto()        # Accumulating a text run
    IN_OPEN_TAG = auto()    # After "<", reading an opening or empty tag body
    IN_CLOSE_TAG = auto()   # After "</", reading a closing tag name


@dataclass
class Token:
    """Single token with its offset in the flattened markup."""

    type: TokenType
    value: str
    offset: int

    def __post_init__(self) -> None:
        """Validate token values."""
        if self.offset < 0:
            raise ValueError("Offset must be >= 0")


@dataclass
class TagSpec:
    """Element name, attributes and emptiness decoded from a tag body."""

    name: str
    attributes: Dict[str, str] = field(default_factory=dict)
    is_empty: bool = False


@dataclass
class TokenizationResult:
    """Materialized token stream with basic statistics."""

    tokens: List[Token]
    character_count: int = 0
    processing_time: float = 0.0

    @property
    def token_count(self) -> int:
        """Get the total number of tokens."""
        return len(self.tokens)

    def count(self, token_type: TokenType) -> int:
        """Count tokens of a given type."""
        return sum(1 for token in self.tokens if token.type == token_type)


def flatten_markup(text: str, skip_declaration_lines: bool = True) -> str:
    """Collapse report markup into a single line.

    Args:
        text: Raw report text
        skip_declaration_lines: Drop lines that start with ``<?``

    Returns:
        Trimmed lines joined without separators, with CR/LF removed
    """
    parts = []
    for line in text.splitlines():
        line = line.strip()
        if skip_declaration_lines and line.startswith("<?"):
            continue
        parts.append(line)

    return "".join(parts).replace("\r", "").replace("\n", "")


def decode_text(text: str) -> str:
    """Decode the predefined XML entities in a text run or attribute value."""
    return unescape(text, _ENTITIES)


def parse_tag_body(body: str, legacy_quote_stripping: bool = False) -> TagSpec:
    """Decode the inside of an opening or empty tag.

    Args:
        body: Tag text without the surrounding angle brackets
        legacy_quote_stripping: Remove every quote character from values
            instead of only the surrounding pair

    Returns:
        TagSpec with the element name, attributes and emptiness flag

    Raises:
        MalformedMarkupError: If the body has no element name
    """
    body = body.strip()
    is_empty = body.endswith("/")
    if is_empty:
        body = body[:-1].rstrip()

    parts = body.split(None, 1)
    if not parts:
        raise MalformedMarkupError("Tag has no element name", tag=body)

    name = parts[0]
    attributes: Dict[str, str] = {}
    if len(parts) > 1:
        for match in _ATTRIBUTE.finditer(parts[1]):
            key, value = match.group(1), match.group(2) or ""
            if legacy_quote_stripping:
                value = value.replace('"', "").replace("'", "")
            elif len(value) >= 2 and value[0] == value[-1] and value[0] in "\"'":
                value = value[1:-1]
            attributes[key] = decode_text(value)

    return TagSpec(name=name, attributes=attributes, is_empty=is_empty)


class TagTokenizer:
    """State machine tokenizer over flattened report markup.

    Yields tokens lazily; the whole markup string must already be in memory.
    """

    def __init__(self, correlation_id: Optional[str] = None) -> None:
        """Initialize the tokenizer.

        Args:
            correlation_id: Optional correlation ID for tracking requests
        """
        self.correlation_id = correlation_id
        self.logger = get_logger(__name__, correlation_id, "tag_tokenizer")
        self._reset_state()

    def _reset_state(self) -> None:
        self.state = TokenizerState.OUTSIDE
        self.buffer: List[str] = []
        self.token_start = 0

    def iter_tokens(self, markup: str) -> Iterator[Token]:
        """Tokenize flattened markup lazily.

        Args:
            markup: Flattened markup (see flatten_markup)

        Yields:
            Tokens in document order

        Raises:
            MalformedMarkupError: On an empty tag or a tag left open at the end
        """
        self._reset_state()

        for offset, char in enumerate(markup):
            token = self._process_character(char, offset)
            if token is not None:
                yield token

        if self.state in (TokenizerState.IN_OPEN_TAG, TokenizerState.IN_CLOSE_TAG):
            raise MalformedMarkupError(
                "Unterminated tag at end of input", offset=self.token_start
            )
        if self.state == TokenizerState.IN_TEXT:
            yield self._emit(TokenType.TEXT)

    def tokenize(self, markup: str) -> TokenizationResult:
        """Tokenize flattened markup into a materialized result."""
        start_time = time.time()
        tokens = list(self.iter_tokens(markup))
        result = TokenizationResult(
            tokens=tokens,
            character_count=len(markup),
            processing_time=time.time() - start_time,
        )

        self.logger.debug(
            "Tokenization completed",
            extra={
                "token_count": result.token_count,
                "character_count": result.character_count,
            }
        )
        return result

    def _process_character(self, char: str, offset: int) -> Optional[Token]:
        if self.state == TokenizerState.OUTSIDE:
            return self._process_outside(char, offset)
        if self.state == TokenizerState.IN_TEXT:
            return self._process_text(char, offset)
        if self.state == TokenizerState.IN_OPEN_TAG:
            return self._process_open_tag(char, offset)
        return self._process_close_tag(char, offset)

    def _process_outside(self, char: str, offset: int) -> Optional[Token]:
        if char == "<":
            self._start(offset, TokenizerState.IN_OPEN_TAG)
        else:
            self._start(offset, TokenizerState.IN_TEXT)
            self.buffer.append(char)
        return None

    def _process_text(self, char: str, offset: int) -> Optional[Token]:
        if char == "<":
            token = self._emit(TokenType.TEXT)
            self._start(offset, TokenizerState.IN_OPEN_TAG)
            return token
        self.buffer.append(char)
        return None

    def _process_open_tag(self, char: str, offset: int) -> Optional[Token]:
        if char == "/" and not self.buffer:
            self.state = TokenizerState.IN_CLOSE_TAG
            return None
        if char != ">":
            self.buffer.append(char)
            return None

        body = "".join(self.buffer)
        if not body.strip():
            raise MalformedMarkupError("Empty tag", offset=self.token_start)
        if body[0] in "?!":
            return self._emit(TokenType.DECLARATION)
        if body.rstrip().endswith("/"):
            return self._emit(TokenType.EMPTY_TAG)
        return self._emit(TokenType.OPEN_TAG)

    def _process_close_tag(self, char: str, offset: int) -> Optional[Token]:
        if char != ">":
            self.buffer.append(char)
            return None
        token = self._emit(TokenType.CLOSE_TAG)
        token.value = token.value.strip()
        return token

    def _start(self, offset: int, state: TokenizerState) -> None:
        self.token_start = offset
        self.buffer = []
        self.state = state

    def _emit(self, token_type: TokenType) -> Token:
        token = Token(type=token_type, value="".join(self.buffer), offset=self.token_start)
        self.buffer = []
        self.state = TokenizerState.OUTSIDE
        return token
