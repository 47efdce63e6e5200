# Copyright 2026 Restache Contributors
# SPDX-License-Identifier: Apache-2.0

"""Tree-building parser for restache templates.

Drives the :class:`~restache.parser.tokenizer.Tokenizer` and assembles a
:class:`~restache.model.nodes.Node` tree rooted at a component node. Control
blocks are balanced with an open-element stack, iteration scopes are recorded
on every node as a path of :class:`~restache.model.nodes.PathSegment`, and
references to sibling components are collected as dependency indices.
"""

from __future__ import annotations

import io
from collections.abc import Mapping
from pathlib import Path
from typing import BinaryIO

from restache.model.atoms import PREFORMATTED_ELEMENTS, atom_lookup, is_common_element, is_void_element
from restache.model.nodes import CONTROL_TYPES, Attribute, Node, NodeType, PathSegment, new_component
from restache.parser.normalize import collapse_whitespace
from restache.parser.tokenizer import Tokenizer, TokenType

# ###############
# Public Interface
# ###############


class Parser:
    """Builds the tree of a single template.

    Args:
        reader: Binary reader holding the template.
        lookup: Optional map from component tag (lower-cased file stem) to the
            component's index in a module. Elements whose tag is found in the
            map are recorded in :attr:`dependencies`.
    """

    def __init__(self, reader: BinaryIO, lookup: Mapping[str, int] | None = None) -> None:
        self._z = Tokenizer(reader)
        self._lookup = lookup
        self.doc = new_component()
        self._oe: list[Node] = [self.doc]
        self._path: list[PathSegment] = []
        # Insertion-ordered set of referenced component indices.
        self.dependencies: dict[int, None] = {}

    def parse(self) -> Node:
        """Consume the whole input and return the component root.

        Raises:
            OSError: If reading from the underlying reader fails.
            TokenizerError: If the input cannot be decoded.
        """
        while True:
            tt = self._z.next()
            if tt == TokenType.ERROR:
                self._z.raise_for_error()
                return self.doc
            self._handle(tt)

    # ------------------------------------------------------------------
    # Token handlers
    # ------------------------------------------------------------------

    def _handle(self, tt: TokenType) -> None:
        if tt == TokenType.TEXT:
            self._on_text(self._z.raw())
        elif tt in (TokenType.START_TAG, TokenType.SELF_CLOSING_TAG):
            self._on_start_tag(self_closing=tt == TokenType.SELF_CLOSING_TAG)
        elif tt == TokenType.END_TAG:
            self._on_end_tag()
        elif tt == TokenType.VARIABLE:
            self._on_variable()
        elif tt in (TokenType.WHEN, TokenType.UNLESS):
            node_type = NodeType.WHEN if tt == TokenType.WHEN else NodeType.UNLESS
            node = Node(type=node_type, data=self._z.control_name(), path=list(self._path))
            self._top().append_child(node)
            self._oe.append(node)
        elif tt == TokenType.RANGE:
            self._on_range()
        elif tt == TokenType.END_CONTROL:
            self._on_end_control()
        elif tt == TokenType.COMMENT:
            self._top().append_child(Node(type=NodeType.COMMENT, data=self._z.comment(), path=list(self._path)))

    def _on_text(self, raw: str) -> None:
        if self._in_preformatted():
            text = raw
        else:
            text = collapse_whitespace(raw)
        if not text:
            return
        self._top().append_child(Node(type=NodeType.TEXT, data=text, path=list(self._path)))

    def _on_start_tag(self, self_closing: bool) -> None:
        name, has_attr = self._z.tag_name()
        element = Node(type=NodeType.ELEMENT, path=list(self._path))
        atom = atom_lookup(name)
        if atom and is_common_element(atom):
            element.atom = atom
        else:
            element.data = name
            self._mark_dependency(name)

        while has_attr:
            key, value, is_expr, has_attr = self._z.tag_attr()
            element.attrs.append(
                Attribute(key=key, key_atom=atom_lookup(key), value=value, is_expression=is_expr)
            )

        self._top().append_child(element)
        if self_closing or is_void_element(element.atom):
            return
        self._oe.append(element)

    def _on_end_tag(self) -> None:
        name, _ = self._z.tag_name()
        atom = atom_lookup(name)
        # The root (index 0) is never popped.
        for i in range(len(self._oe) - 1, 0, -1):
            n = self._oe[i]
            if n.type != NodeType.ELEMENT:
                continue
            if (atom and is_common_element(atom) and n.atom == atom) or (n.atom == 0 and n.data == name):
                self._unwind(i)
                return

    def _on_variable(self) -> None:
        name = self._z.control_name()
        if not name:
            # "{}" carries no identifier; keep it as literal text.
            self._on_text("{" + self._z.raw() + "}")
            return
        self._top().append_child(Node(type=NodeType.VARIABLE, data=name, path=list(self._path)))

    def _on_range(self) -> None:
        name = self._z.control_name()
        node = Node(type=NodeType.RANGE, data=name, path=list(self._path))
        parts = name.split(".")
        last = len(parts) - 1
        for i, part in enumerate(parts):
            self._path.append(PathSegment(name=part, is_iteration=i == last))
        self._top().append_child(node)
        self._oe.append(node)

    def _on_end_control(self) -> None:
        name = self._z.control_name()
        for i in range(len(self._oe) - 1, 0, -1):
            n = self._oe[i]
            if n.type in CONTROL_TYPES and n.data == name:
                self._unwind(i)
                return
        # Orphan end-control: nothing to close.

    # ------------------------------------------------------------------
    # Helpers
    # ------------------------------------------------------------------

    def _top(self) -> Node:
        return self._oe[-1]

    def _unwind(self, i: int) -> None:
        """Pop the open frames from index *i* up, leaving the scope of any popped range."""
        for n in self._oe[i:]:
            if n.type == NodeType.RANGE:
                self._path = list(n.path)
                break
        del self._oe[i:]

    def _in_preformatted(self) -> bool:
        return any(n.type == NodeType.ELEMENT and n.atom in PREFORMATTED_ELEMENTS for n in self._oe)

    def _mark_dependency(self, tag: str) -> None:
        if self._lookup is None:
            return
        index = self._lookup.get(tag)
        if index is not None and index not in self.dependencies:
            self.dependencies[index] = None


def parse(reader: BinaryIO) -> Node:
    """Parse a template from a binary reader into a component tree with no name.

    Raises:
        OSError: If reading fails.
        TokenizerError: If the input cannot be decoded.
    """
    return Parser(reader).parse()


def parse_string(source: str) -> Node:
    """Parse template text held in memory."""
    return parse(io.BytesIO(source.encode("utf-8")))


def parse_file(path: Path) -> Node:
    """Parse a template file.

    The returned component is named after the file stem. Component
    references are not resolved; use :func:`restache.compiler.module.parse_dir`
    for that.

    Raises:
        OSError: If the file cannot be opened or read.
        TokenizerError: If the file is not valid UTF-8.
    """
    with path.open("rb") as f:
        doc = parse(f)
    doc.data = path.stem
    return doc
