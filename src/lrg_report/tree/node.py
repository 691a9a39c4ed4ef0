"""Report node and shared container behaviour.

Both the document and its nodes own an ordered list of child nodes; the
operations that only need that list (adding children and path lookups) live
on NodeContainer. A child refers back to its container through a weak
reference so that ownership flows strictly from parent to child.
"""

import re
import weakref
from typing import Callable, Dict, Iterable, Iterator, List, Optional, Union

_PATH_SEPARATOR = re.compile(r"\s*/\s*")

AttributeFilter = Optional[Dict[str, str]]


class NodeContainer:
    """Ordered collection of child nodes with lookup helpers."""

    children: List["ReportNode"]

    def add_node(
        self, name: str, attributes: Optional[Dict[str, str]] = None
    ) -> "ReportNode":
        """Append a new child node and return it.

        Args:
            name: Element name of the new node
            attributes: Optional attribute mapping, copied into the node

        Returns:
            The newly attached node
        """
        return self._attach(ReportNode(name, attributes))

    def add_empty_node(
        self, name: str, attributes: Optional[Dict[str, str]] = None
    ) -> "ReportNode":
        """Append a new self-closing child node and return it."""
        return self._attach(ReportNode(name, attributes, is_empty=True))

    def _attach(self, node: "ReportNode") -> "ReportNode":
        self._check_accepts_children()
        if node.parent is not None:
            raise ValueError(f"Node <{node.name}> already has a parent")
        node._parent_ref = weakref.ref(self)
        self.children.append(node)
        return node

    def _check_accepts_children(self) -> None:
        """Hook for containers that cannot hold children."""

    def find_node(
        self, path: str, attributes: AttributeFilter = None
    ) -> Optional["ReportNode"]:
        """Find a node by name or by a ``/``-delimited path.

        A single name is searched among the direct children first and then
        recursively through each child's subtree in order, so the first match
        in encounter order wins. A path with several segments is delegated to
        find_node_multi.

        Args:
            path: Element name, or names separated by ``/``
            attributes: Optional filter; every key must be present on the
                matched node with an equal value

        Returns:
            The first matching node, or None
        """
        if "/" in path:
            return self.find_node_multi(path, attributes)
        return self._find_descendant(path.strip(), attributes)

    def find_node_multi(
        self, path: str, attributes: AttributeFilter = None
    ) -> Optional["ReportNode"]:
        """Resolve a multi-level path one level at a time.

        Each segment is matched only among the direct children of the node
        found for the previous segment; the attribute filter applies to the
        last segment. A one-segment path behaves like find_node.
        """
        levels = [level for level in _PATH_SEPARATOR.split(path.strip()) if level]
        if not levels:
            return None
        if len(levels) == 1:
            return self._find_descendant(levels[0], attributes)

        current: Optional[NodeContainer] = self
        for index, level in enumerate(levels):
            is_last = index == len(levels) - 1
            current = current._find_child(level, attributes if is_last else None)
            if current is None:
                return None
        return current

    def _find_child(
        self, name: str, attributes: AttributeFilter
    ) -> Optional["ReportNode"]:
        for child in self.children:
            if child.matches(name, attributes):
                return child
        return None

    def _find_descendant(
        self, name: str, attributes: AttributeFilter
    ) -> Optional["ReportNode"]:
        found = self._find_child(name, attributes)
        if found is not None:
            return found

        for child in self.children:
            found = child._find_descendant(name, attributes)
            if found is not None:
                return found
        return None

    def iter_nodes(self) -> Iterator["ReportNode"]:
        """Iterate over all descendant nodes in document (pre-)order."""
        for child in self.children:
            yield child
            yield from child.iter_nodes()

    @property
    def node_count(self) -> int:
        """Number of descendant nodes."""
        return sum(1 for _ in self.iter_nodes())


class ReportNode(NodeContainer):
    """One element of a report tree.

    Empty (self-closing) nodes never hold children or content. The parent is
    held weakly; a node whose tree has been discarded reports no parent.
    """

    def __init__(
        self,
        name: str,
        attributes: Optional[Dict[str, str]] = None,
        content: Optional[str] = None,
        is_empty: bool = False,
    ) -> None:
        if not name:
            raise ValueError("Node name cannot be empty")
        if is_empty and content is not None:
            raise ValueError("Empty nodes cannot hold content")

        self._name = name
        self._attributes: Dict[str, str] = dict(attributes or {})
        self._content = content
        self._is_empty = is_empty
        self.children: List[ReportNode] = []
        self._parent_ref: Optional["weakref.ReferenceType[NodeContainer]"] = None

    def __repr__(self) -> str:
        return (
            f"ReportNode(name={self._name!r}, attributes={self._attributes!r}, "
            f"content={self._content!r}, is_empty={self._is_empty}, "
            f"children={len(self.children)})"
        )

    @property
    def name(self) -> str:
        """Element name."""
        return self._name

    @name.setter
    def name(self, value: str) -> None:
        if not value:
            raise ValueError("Node name cannot be empty")
        self._name = value

    @property
    def attributes(self) -> Dict[str, str]:
        """Attribute mapping (mutable in place)."""
        return self._attributes

    @attributes.setter
    def attributes(self, value: Optional[Dict[str, str]]) -> None:
        self._attributes = dict(value or {})

    def get_attribute(self, name: str, default: Optional[str] = None) -> Optional[str]:
        """Get attribute value with optional default."""
        return self._attributes.get(name, default)

    def set_attribute(self, name: str, value: str) -> None:
        """Set attribute value."""
        if not isinstance(name, str) or not isinstance(value, str):
            raise TypeError("Attribute name and value must be strings")
        self._attributes[name] = value

    @property
    def content(self) -> Optional[str]:
        """Text content written directly inside the opening tag."""
        return self._content

    @content.setter
    def content(self, value: Optional[str]) -> None:
        if value is not None and self._is_empty:
            raise ValueError(f"Empty node <{self._name}> cannot hold content")
        self._content = value

    def append_content(self, text: str) -> None:
        """Append text to existing content."""
        self.content = text if self._content is None else self._content + text

    @property
    def is_empty(self) -> bool:
        """Whether the node is written as a self-closing tag."""
        return self._is_empty

    @is_empty.setter
    def is_empty(self, value: bool) -> None:
        if value and (self.children or self._content is not None):
            raise ValueError(
                f"Node <{self._name}> has children or content and cannot be empty"
            )
        self._is_empty = value

    def _check_accepts_children(self) -> None:
        if self._is_empty:
            raise ValueError(f"Empty node <{self._name}> cannot hold children")

    @property
    def parent(self) -> Optional[NodeContainer]:
        """Owning node or document, if still alive."""
        if self._parent_ref is None:
            return None
        return self._parent_ref()

    def matches(self, name: str, attributes: AttributeFilter = None) -> bool:
        """Check name equality and that every filter attribute is equal."""
        if self._name != name:
            return False
        if not attributes:
            return True
        return all(
            key in self._attributes and self._attributes[key] == value
            for key, value in attributes.items()
        )

    def position(self) -> int:
        """Zero-based index among the parent's children, compared by identity."""
        parent = self.parent
        if parent is None:
            raise ValueError(f"Node <{self._name}> is not attached to a parent")

        for index, sibling in enumerate(parent.children):
            if sibling is self:
                return index
        raise ValueError(f"Node <{self._name}> is missing from its parent's children")

    def move_to(self, index: int = 1) -> None:
        """Move this node to ``index`` among its siblings.

        The node is removed first, so ``index`` refers to the shortened sibling
        list. Positions of the other siblings shift accordingly.

        Raises:
            IndexError: If index is outside the shortened sibling list
        """
        current = self.position()
        siblings = self.parent.children

        siblings.pop(current)
        if not (0 <= index <= len(siblings)):
            siblings.insert(current, self)
            raise IndexError("Target index out of range")
        siblings.insert(index, self)

    def detach(self) -> None:
        """Remove this node from its parent."""
        parent = self.parent
        if parent is None:
            return
        parent.children.pop(self.position())
        self._parent_ref = None

    @property
    def depth(self) -> int:
        """Depth in the tree; top-level nodes have depth 0."""
        parent = self.parent
        if isinstance(parent, ReportNode):
            return parent.depth + 1
        return 0

    @property
    def path(self) -> str:
        """Slash-delimited names from the top-level node down to this one."""
        parent = self.parent
        if isinstance(parent, ReportNode):
            return f"{parent.path}/{self._name}"
        return self._name

    def request_content(
        self,
        fields: Iterable[str],
        prompt: Optional[Callable[[str], str]] = None,
    ) -> List["ReportNode"]:
        """Interactively create one child per field holding the entered value.

        Args:
            fields: Names of the child nodes to create, in order
            prompt: Callable used to ask for each value (defaults to input)

        Returns:
            The created child nodes
        """
        prompt = prompt or input
        created = []
        for item in fields:
            answer = prompt(f"Input {item} >")
            node = self.add_node(item)
            node.content = answer.rstrip("\r\n")
            created.append(node)
        return created

    def to_dict(self) -> Dict[str, Union[str, bool, list, dict]]:
        """Convert node and its subtree to dictionary representation."""
        result: Dict[str, Union[str, bool, list, dict]] = {
            "name": self._name,
            "attributes": dict(self._attributes),
            "is_empty": self._is_empty,
        }
        if self._content is not None:
            result["content"] = self._content
        if self.children:
            result["children"] = [child.to_dict() for child in self.children]
        return result
