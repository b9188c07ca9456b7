"""
Document tree abstraction used by the extraction heuristic.

The heuristic only needs a handful of capabilities from a parsed page:
walk element children, read tag names and attributes, get text, copy a
subtree and remove a node. DocumentNode captures exactly that, SoupNode
implements it with BeautifulSoup, and any other tree (for example a
hand-built one in tests) can be plugged in instead.
"""

from __future__ import annotations

from abc import ABC, abstractmethod
import copy
from dataclasses import dataclass
from typing import Iterator

from bs4 import BeautifulSoup, Tag


class DocumentNode(ABC):
    """An element in a parsed HTML document."""

    @property
    @abstractmethod
    def tag(self) -> str:
        """Lower-case tag name."""
        raise NotImplementedError

    @property
    @abstractmethod
    def attrs(self) -> dict[str, str]:
        """Attributes as plain strings; multi-valued ones are space-joined."""
        raise NotImplementedError

    @abstractmethod
    def children(self) -> list["DocumentNode"]:
        """Element children in document order (text nodes excluded)."""
        raise NotImplementedError

    @abstractmethod
    def text(self) -> str:
        """Concatenated text of the node and all its descendants."""
        raise NotImplementedError

    @abstractmethod
    def clone(self) -> "DocumentNode":
        """Detached deep copy of this subtree."""
        raise NotImplementedError

    @abstractmethod
    def remove(self) -> None:
        """Detach this node from its parent."""
        raise NotImplementedError


@dataclass(frozen=True)
class NodeQuery:
    """A simple element predicate.

    All set fields must hold for a node to match.

    Attributes:
        tag: Required tag name
        class_token: Required whitespace-separated class token (``.name``)
        attr: Attribute whose value is checked with ``contains`` or ``equals``
        contains: Case-sensitive substring of ``attr`` (``[attr*=value]``)
        equals: Exact value of ``attr`` (``[attr=value]``)
    """
    tag: str | None = None
    class_token: str | None = None
    attr: str | None = None
    contains: str | None = None
    equals: str | None = None

    def matches(self, node: DocumentNode) -> bool:
        if self.tag is not None and node.tag != self.tag:
            return False
        attrs = node.attrs
        if self.class_token is not None and self.class_token not in attrs.get("class", "").split():
            return False
        if self.attr is not None:
            value = attrs.get(self.attr)
            if value is None:
                return False
            if self.contains is not None and self.contains not in value:
                return False
            if self.equals is not None and value != self.equals:
                return False
        return True

    def __str__(self) -> str:
        out = self.tag or ""
        if self.class_token:
            out += f".{self.class_token}"
        if self.attr:
            if self.contains is not None:
                out += f'[{self.attr}*="{self.contains}"]'
            elif self.equals is not None:
                out += f'[{self.attr}="{self.equals}"]'
            else:
                out += f"[{self.attr}]"
        return out or "*"


def iter_descendants(root: DocumentNode) -> Iterator[DocumentNode]:
    """Yield every element below ``root`` in document order."""
    stack = list(reversed(root.children()))
    while stack:
        node = stack.pop()
        yield node
        stack.extend(reversed(node.children()))


def find_all(root: DocumentNode, query: NodeQuery) -> list[DocumentNode]:
    return [node for node in iter_descendants(root) if query.matches(node)]


def find_first(root: DocumentNode, query: NodeQuery) -> DocumentNode | None:
    for node in iter_descendants(root):
        if query.matches(node):
            return node
    return None


def find_outermost(root: DocumentNode, query: NodeQuery) -> list[DocumentNode]:
    """Matches below ``root`` that have no matching ancestor.

    Descendants of a match are covered by the match itself, so skipping
    them keeps every paragraph counted once.
    """
    found = []
    stack = list(reversed(root.children()))
    while stack:
        node = stack.pop()
        if query.matches(node):
            found.append(node)
            continue
        stack.extend(reversed(node.children()))
    return found


class SoupNode(DocumentNode):
    """DocumentNode backed by a BeautifulSoup tag."""

    def __init__(self, element: Tag):
        self._element = element

    @property
    def tag(self) -> str:
        return (self._element.name or "").lower()

    @property
    def attrs(self) -> dict[str, str]:
        out = {}
        for key, value in self._element.attrs.items():
            out[key] = " ".join(value) if isinstance(value, list) else str(value)
        return out

    def children(self) -> list[DocumentNode]:
        return [SoupNode(child) for child in self._element.children if isinstance(child, Tag)]

    def text(self) -> str:
        return self._element.get_text()

    def clone(self) -> DocumentNode:
        return SoupNode(copy.copy(self._element))

    def remove(self) -> None:
        self._element.decompose()


def parse_html(html: str) -> DocumentNode:
    """Parse an HTML string into a document tree."""
    return SoupNode(BeautifulSoup(html, "html.parser"))
