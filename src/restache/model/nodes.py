# Copyright 2026 Restache Contributors
# SPDX-License-Identifier: Apache-2.0

"""Template AST: nodes, attributes and scope paths."""

from __future__ import annotations

import enum
from collections.abc import Iterator
from dataclasses import dataclass, field

from pydantic import BaseModel, ConfigDict

from restache.model.atoms import atom_name

# ###############
# Public Interface
# ###############


class NodeType(enum.Enum):
    """Kinds of nodes produced by the parser."""

    ERROR = "error"
    COMPONENT = "component"
    ELEMENT = "element"
    TEXT = "text"
    VARIABLE = "variable"
    WHEN = "when"
    UNLESS = "unless"
    RANGE = "range"
    COMMENT = "comment"


#: Node types that open a control block and are closed by ``{/name}``.
CONTROL_TYPES: frozenset[NodeType] = frozenset({NodeType.WHEN, NodeType.UNLESS, NodeType.RANGE})


class Attribute(BaseModel):
    """An element attribute, or an import entry on a component root.

    Attributes:
        key: The attribute name (camelCased unless ``data-``/``aria-`` prefixed).
            On a component root this is the tag of the imported component.
        key_atom: Atom of the attribute name, 0 if the name is not well known.
        value: Literal value, or the dotted identifier when ``is_expression``.
            On a component root this is the stem of the imported component.
        is_expression: Whether ``value`` refers to a dotted identifier path.
    """

    key: str
    key_atom: int = 0
    value: str = ""
    is_expression: bool = False


class PathSegment(BaseModel):
    """One segment of the scope path captured by every node."""

    model_config = ConfigDict(frozen=True)

    name: str
    is_iteration: bool = False


@dataclass(eq=False)
class Node:
    """A node of the template tree.

    Nodes form a doubly linked tree. The link fields are managed through
    :meth:`append_child`, :meth:`insert_before` and :meth:`remove_child` and are
    excluded from ``repr``.
    """

    type: NodeType
    data: str = ""
    atom: int = 0
    attrs: list[Attribute] = field(default_factory=list)
    path: list[PathSegment] = field(default_factory=list)
    recursive: bool = False

    parent: Node | None = field(default=None, repr=False)
    first_child: Node | None = field(default=None, repr=False)
    last_child: Node | None = field(default=None, repr=False)
    prev_sibling: Node | None = field(default=None, repr=False)
    next_sibling: Node | None = field(default=None, repr=False)

    def tag_name(self) -> str:
        """Return the element's tag name, or "" for non-element nodes."""
        if self.type != NodeType.ELEMENT:
            return ""
        if self.atom:
            return atom_name(self.atom)
        return self.data

    def children(self) -> Iterator[Node]:
        """Iterate over the direct children in document order."""
        c = self.first_child
        while c is not None:
            yield c
            c = c.next_sibling

    def has_children(self) -> bool:
        return self.first_child is not None

    def append_child(self, child: Node) -> None:
        """Add *child* as the last child of this node.

        Raises:
            ValueError: If *child* already has a parent or siblings.
        """
        self.insert_before(child, None)

    def insert_before(self, child: Node, old_child: Node | None) -> None:
        """Insert *child* immediately before *old_child* (or append when None).

        Raises:
            ValueError: If *child* already has a parent or siblings, or if
                *old_child* is not a child of this node.
        """
        if child.parent is not None or child.prev_sibling is not None or child.next_sibling is not None:
            raise ValueError("insert_before called for an attached child node")
        if old_child is not None and old_child.parent is not self:
            raise ValueError("insert_before called with a reference node that is not a child")
        if old_child is not None:
            prev, nxt = old_child.prev_sibling, old_child
        else:
            prev, nxt = self.last_child, None
        if prev is not None:
            prev.next_sibling = child
        else:
            self.first_child = child
        if nxt is not None:
            nxt.prev_sibling = child
        else:
            self.last_child = child
        child.parent = self
        child.prev_sibling = prev
        child.next_sibling = nxt

    def remove_child(self, child: Node) -> None:
        """Detach *child* from this node.

        Raises:
            ValueError: If *child* is not a child of this node.
        """
        if child.parent is not self:
            raise ValueError("remove_child called for a non-child node")
        if self.first_child is child:
            self.first_child = child.next_sibling
        if child.next_sibling is not None:
            child.next_sibling.prev_sibling = child.prev_sibling
        if self.last_child is child:
            self.last_child = child.prev_sibling
        if child.prev_sibling is not None:
            child.prev_sibling.next_sibling = child.next_sibling
        child.parent = None
        child.prev_sibling = None
        child.next_sibling = None


def scope_depth(path: list[PathSegment]) -> int:
    """Return the number of iteration scopes opened along *path*."""
    return sum(1 for seg in path if seg.is_iteration)


def new_component(name: str = "") -> Node:
    """Create an empty component root."""
    return Node(type=NodeType.COMPONENT, data=name, attrs=[])

