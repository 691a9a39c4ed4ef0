"""Streaming XML writer.

In data mode every element starts on its own line, indented by depth, and an
element holding only text is written on a single line::

    <fixed_annotation>
      <id>LRG_1</id>
      <sequence_source />
    </fixed_annotation>
"""

from typing import Dict, List, Optional, TextIO
from xml.sax.saxutils import escape

from lrg_report.shared import WriterError

_ATTRIBUTE_ENTITIES = {'"': "&quot;"}


def escape_text(text: str) -> str:
    """Escape character data."""
    return escape(text)


def escape_attribute(value: str) -> str:
    """Escape an attribute value for double-quoted output."""
    return escape(value, _ATTRIBUTE_ENTITIES)


class XMLWriter:
    """Writes declarations, tags and character data to a text stream."""

    def __init__(self, stream: TextIO, indent: int = 2, data_mode: bool = True) -> None:
        """Initialize the writer.

        Args:
            stream: Text stream receiving the output
            indent: Spaces per nesting level in data mode
            data_mode: Put each element on its own indented line
        """
        self.stream = stream
        self.indent = indent
        self.data_mode = data_mode

        self._open: List[str] = []
        self._has_children: List[bool] = []
        self._line_start = True
        self._ended = False

    @property
    def depth(self) -> int:
        """Number of currently open elements."""
        return len(self._open)

    def xml_decl(self, encoding: str = "UTF-8", version: str = "1.0") -> None:
        """Write the XML declaration."""
        self._check_writable()
        self._write(f'<?xml version="{version}" encoding="{encoding}"?>')
        self._end_line()

    def pi(self, target: str, data: Optional[str] = None) -> None:
        """Write a processing instruction."""
        self._check_writable()
        if not target:
            raise WriterError("Processing instruction target cannot be empty")
        if data and "?>" in data:
            raise WriterError("Processing instruction data cannot contain '?>'")

        self._begin_markup()
        self._write(f"<?{target} {data}?>" if data else f"<?{target}?>")
        # Prolog instructions keep their own line so readers can skip them
        if self._open:
            self._after_element()
        else:
            self._end_line()

    def start_tag(self, name: str, attributes: Optional[Dict[str, str]] = None) -> None:
        """Open an element."""
        self._check_writable()
        self._begin_markup()
        self._write(f"<{name}{self._format_attributes(attributes)}>")
        self._open.append(name)
        self._has_children.append(False)

    def empty_tag(self, name: str, attributes: Optional[Dict[str, str]] = None) -> None:
        """Write a self-closing element."""
        self._check_writable()
        self._begin_markup()
        self._write(f"<{name}{self._format_attributes(attributes)} />")
        self._after_element()

    def characters(self, text: str) -> None:
        """Write character data inside the current element."""
        self._check_writable()
        if not self._open:
            raise WriterError("Character data outside of any element")
        self._write(escape_text(text))

    def end_tag(self, name: Optional[str] = None) -> None:
        """Close the current element.

        Raises:
            WriterError: If no element is open or name does not match it
        """
        self._check_writable()
        if not self._open:
            raise WriterError(f"End tag </{name or ''}> without an open element")

        current = self._open.pop()
        had_children = self._has_children.pop()
        if name is not None and name != current:
            raise WriterError(f"Attempt to end element <{current}> with </{name}>")

        if self.data_mode and had_children:
            self._write("\n" + " " * (self.indent * self.depth))
        self._write(f"</{current}>")
        self._after_element()

    def end(self) -> None:
        """Finish the document; no further output is accepted.

        Raises:
            WriterError: If elements are still open
        """
        self._check_writable()
        if self._open:
            raise WriterError(f"Document ended with open elements: {', '.join(self._open)}")
        if not self._line_start:
            self._end_line()
        self._ended = True

    def _format_attributes(self, attributes: Optional[Dict[str, str]]) -> str:
        if not attributes:
            return ""
        return "".join(
            f' {key}="{escape_attribute(str(value))}"'
            for key, value in attributes.items()
        )

    def _begin_markup(self) -> None:
        if self._open:
            self._has_children[-1] = True
        if self.data_mode:
            if not self._line_start:
                self._write("\n")
            self._write(" " * (self.indent * self.depth))

    def _after_element(self) -> None:
        if self.data_mode and not self._open:
            self._end_line()

    def _end_line(self) -> None:
        if self.data_mode or not self._open:
            self._write("\n")
        self._line_start = True

    def _write(self, text: str) -> None:
        if text:
            self.stream.write(text)
            self._line_start = text.endswith("\n")

    def _check_writable(self) -> None:
        if self._ended:
            raise WriterError("Document already ended")
