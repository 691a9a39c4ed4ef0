"""Tokenization layer for LRG report markup.

Key Components:
    flatten_markup: Collapses a report file into one line of markup
    TagTokenizer: Explicit state machine yielding tag and text tokens
    parse_tag_body: Decodes element name, attributes and emptiness of a tag
"""

from .tokenizer import (
    TagSpec,
    TagTokenizer,
    Token,
    TokenizationResult,
    TokenizerState,
    TokenType,
    decode_text,
    flatten_markup,
    parse_tag_body,
)

__all__ = [
    "TagSpec",
    "TagTokenizer",
    "Token",
    "TokenizationResult",
    "TokenizerState",
    "TokenType",
    "decode_text",
    "flatten_markup",
    "parse_tag_body",
]
