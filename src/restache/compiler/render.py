# Copyright 2026 Restache Contributors
# SPDX-License-Identifier: Apache-2.0

"""JSX renderer for parsed templates.

Walks a component tree and writes a JSX module exporting a single default
function component. Output is line oriented with two-space indentation; the
component body starts at indentation level 2, inside ``return (``.

Shape rules:

* The body of the component, of a conditional branch and of an iteration is
  wrapped in a fragment unless it consists of exactly one element. An empty
  body renders as ``null``.
* An element holding text, or only variables, is written on a single line so
  that the whitespace between text and inline elements survives JSX line
  trimming. Other elements place each child on its own line.
* Consecutive when/unless blocks with the same name are grouped into ``&&``
  expressions or ternaries.
* Iterations become ``.map`` calls whose body carries a ``key``.
"""

from __future__ import annotations

import enum
import io
import json
import re
from collections.abc import Iterator
from typing import TextIO

from restache.model.atoms import (
    PREFORMATTED_ELEMENTS,
    atom_name,
    global_rewrite,
    is_boolean_attribute,
    is_void_element,
    tag_scoped_rewrite,
)
from restache.model.nodes import Attribute, Node, NodeType, scope_depth
from restache.parser.normalize import (
    escape_attribute_value,
    escape_comment,
    escape_jsx_text,
    escape_template_literal,
    is_dotted_identifier,
    sanitize_identifier,
    strip_spaces,
)

# ###############
# Public Interface
# ###############


class RenderErrorKind(enum.Enum):
    """Structural problems detected while rendering."""

    ERROR_NODE = "error_node"
    UNKNOWN_NODE = "unknown_node"
    VOID_CHILDREN = "void_children"
    NESTED_COMPONENT = "nested_component"


class RenderError(Exception):
    """Raised when a tree cannot be rendered.

    Attributes:
        kind: The structural violation that was detected.
    """

    def __init__(self, kind: RenderErrorKind, message: str) -> None:
        super().__init__(message)
        self.kind = kind


#: Parameter name of the outermost scope.
PROPS = "props"

#: Comments at least this long are written over several lines.
COMMENT_LINE_LIMIT = 80


def render(node: Node, writer: TextIO) -> int:
    """Write the JSX for *node* to *writer*.

    A component root produces a complete module. Any other node is written in
    its block form at the indentation used for component bodies, which is
    mostly useful for inspecting subtrees.

    Args:
        node: The node to render; normally a component root.
        writer: Text stream receiving the output.

    Returns:
        The number of characters written.

    Raises:
        RenderError: If the tree violates a structural rule.
    """
    r = _Renderer(writer)
    r.render(node)
    return r.written


def render_to_string(node: Node) -> str:
    """Render *node* and return the JSX source as a string."""
    buf = io.StringIO()
    render(node, buf)
    return buf.getvalue()


def resolve_attribute_name(element_atom: int, attr: Attribute) -> str:
    """Return the JSX name of *attr* on an element identified by *element_atom*.

    Resolution order: the global rewrite table, the tag-scoped table, the
    canonical name of the attribute atom, and finally the literal key.
    """
    if attr.key_atom:
        alias = global_rewrite(attr.key_atom)
        if alias is None:
            alias = tag_scoped_rewrite(element_atom, attr.key_atom)
        if alias is not None:
            return alias
        return atom_name(attr.key_atom)
    return attr.key


def scope_name(depth: int) -> str:
    """Return the identifier bound by the iteration scope at *depth*."""
    if depth == 0:
        return PROPS
    return f"${depth}"


def component_identifier(stem: str) -> str:
    """Return the JavaScript identifier used for the component stored in *stem*."""
    return sanitize_identifier(stem)


# ################
# Implementation
# ################

_INDENT = "  "
_BODY_INDENT = 2
_RANGE_KEY = "key"
_EMBEDDED = re.compile(r"\{([^{}]*)\}")


class _Renderer:
    def __init__(self, w: TextIO) -> None:
        self._w = w
        self.indent = _BODY_INDENT
        self.written = 0
        # Lower-cased tag -> JSX identifier of imported (or self) components.
        self._components: dict[str, str] = {}

    # ------------------------------------------------------------------
    # Output primitives
    # ------------------------------------------------------------------

    def _print(self, s: str) -> None:
        self._w.write(s)
        self.written += len(s)

    def _line(self, s: str) -> None:
        self._print(_INDENT * self.indent + s + "\n")

    # ------------------------------------------------------------------
    # Entry points
    # ------------------------------------------------------------------

    def render(self, n: Node) -> None:
        if n.type == NodeType.COMPONENT:
            if n.parent is not None:
                raise RenderError(RenderErrorKind.NESTED_COMPONENT, "component node must be the root of its tree")
            self._render_component(n)
            return
        self._render_block(n)

    def _render_component(self, n: Node) -> None:
        own_name = component_identifier(n.data)
        if n.data:
            self._components[n.data.lower()] = own_name
        imports: list[tuple[str, str]] = []
        for attr in n.attrs:
            ident = component_identifier(attr.value)
            self._components[attr.key] = ident
            imports.append((ident, attr.value))

        header = False
        if _uses_react_fragment(n):
            self._print("import * as React from 'react';\n")
            header = True
        for ident, source in imports:
            self._print(f'import {ident} from "./{source}.jsx";\n')
            header = True
        if header:
            self._print("\n")

        self._print(f"export default function {own_name}({PROPS}) {{\n")
        self._print(f"{_INDENT}return (\n")
        self._render_body(list(n.children()))
        self._print(f"{_INDENT});\n")
        self._print("}\n")

    # ------------------------------------------------------------------
    # Block mode: one construct per line
    # ------------------------------------------------------------------

    def _render_body(self, children: list[Node]) -> None:
        """Render the children of a component, branch or iteration as one expression."""
        if not children:
            self._line("null")
        elif len(children) == 1 and children[0].type == NodeType.ELEMENT:
            self._render_block(children[0])
        else:
            self._render_sequence(children, "<>", "</>")

    def _render_sequence(self, children: list[Node], open_tag: str, close_tag: str) -> None:
        if _is_inline_content(children):
            self._line(open_tag + self._inline_children(children) + close_tag)
            return
        self._line(open_tag)
        self.indent += 1
        for item in _group_children(children):
            if isinstance(item, list):
                self._render_group_block(item)
            else:
                self._render_block(item)
        self.indent -= 1
        self._line(close_tag)

    def _render_block(self, n: Node, keyed: bool = False) -> None:
        t = n.type
        if t == NodeType.ELEMENT:
            self._render_element_block(n, keyed)
        elif t == NodeType.TEXT:
            self._line(self._text(n))
        elif t == NodeType.VARIABLE:
            self._line("{" + _reference(n) + "}")
        elif t == NodeType.COMMENT:
            self._render_comment_block(n)
        elif t in (NodeType.WHEN, NodeType.UNLESS):
            self._render_group_block([n])
        elif t == NodeType.RANGE:
            self._render_range_block(n)
        else:
            _refuse(n)

    def _render_element_block(self, n: Node, keyed: bool) -> None:
        tag = self._tag(n)
        open_tag = "<" + tag + self._attrs(n, keyed)
        if is_void_element(n.atom):
            _check_void(n, tag)
            self._line(open_tag + " />")
        elif not n.has_children():
            self._line(open_tag + "></" + tag + ">")
        else:
            self._render_sequence(list(n.children()), open_tag + ">", "</" + tag + ">")

    def _render_comment_block(self, n: Node) -> None:
        body = escape_comment(n.data)
        if len(body) < COMMENT_LINE_LIMIT and "\n" not in body:
            self._line("{/* " + body + " */}")
            return
        self._line("{/*")
        self.indent += 1
        for line in body.split("\n"):
            line = strip_spaces(line)
            if line:
                self._line(line)
        self.indent -= 1
        self._line("*/}")

    def _render_group_block(self, group: list[Node]) -> None:
        if len(group) == 1:
            self._render_single_condition_block(group[0])
            return
        if len(group) == 2:
            a, b = group
            if a.type != b.type:
                positive, negative = (a, b) if a.type == NodeType.WHEN else (b, a)
                self._render_two_way_ternary_block(positive, negative)
            else:
                self._render_single_condition_block(a)
                self._render_single_condition_block(b)
            return
        self._render_multi_ternary_block(group)

    def _render_single_condition_block(self, n: Node) -> None:
        """Render ``{props.cond && (...)}`` or ``{!props.cond && (...)}``."""
        self._line("{" + _condition(n) + " && (")
        self._render_nested_body(n)
        self._line(")}")

    def _render_two_way_ternary_block(self, positive: Node, negative: Node) -> None:
        """Render ``{props.cond ? (...) : (...)}``."""
        self._line("{" + _condition(positive) + " ? (")
        self._render_nested_body(positive)
        self._line(") : (")
        self._render_nested_body(negative)
        self._line(")}")

    def _render_multi_ternary_block(self, group: list[Node]) -> None:
        """Render ``{c1 ? (...) : c2 ? (...) : ... : null}``."""
        for i, n in enumerate(group):
            prefix = "{" if i == 0 else ") : "
            self._line(prefix + _condition(n) + " ? (")
            self._render_nested_body(n)
        self._line(") : null}")

    def _render_nested_body(self, n: Node) -> None:
        self.indent += 1
        self._render_body(list(n.children()))
        self.indent -= 1

    def _render_range_block(self, n: Node) -> None:
        head = _range_head(n)
        children = list(n.children())
        if not children:
            self._line(head + "null)}")
            return
        self._line(head + "(")
        self.indent += 1
        if len(children) == 1 and children[0].type == NodeType.ELEMENT:
            self._render_block(children[0], keyed=True)
        else:
            self._render_sequence(children, _KEYED_FRAGMENT_OPEN, _KEYED_FRAGMENT_CLOSE)
        self.indent -= 1
        self._line("))}")

    # ------------------------------------------------------------------
    # Inline mode: everything on the current line
    # ------------------------------------------------------------------

    def _inline(self, n: Node, keyed: bool = False) -> str:
        t = n.type
        if t == NodeType.ELEMENT:
            tag = self._tag(n)
            open_tag = "<" + tag + self._attrs(n, keyed)
            if is_void_element(n.atom):
                _check_void(n, tag)
                return open_tag + " />"
            return open_tag + ">" + self._inline_children(list(n.children())) + "</" + tag + ">"
        if t == NodeType.TEXT:
            return self._text(n)
        if t == NodeType.VARIABLE:
            return "{" + _reference(n) + "}"
        if t == NodeType.COMMENT:
            return "{/* " + escape_comment(n.data).replace("\n", " ") + " */}"
        if t in (NodeType.WHEN, NodeType.UNLESS):
            return self._inline_group([n])
        if t == NodeType.RANGE:
            return self._inline_range(n)
        _refuse(n)
        return ""

    def _inline_children(self, children: list[Node]) -> str:
        parts: list[str] = []
        for item in _group_children(children):
            if isinstance(item, list):
                parts.append(self._inline_group(item))
            else:
                parts.append(self._inline(item))
        return "".join(parts)

    def _inline_body(self, n: Node) -> str:
        children = list(n.children())
        if not children:
            return "null"
        if len(children) == 1 and children[0].type == NodeType.ELEMENT:
            return self._inline(children[0])
        return "<>" + self._inline_children(children) + "</>"

    def _inline_group(self, group: list[Node]) -> str:
        if len(group) == 1:
            n = group[0]
            return "{" + _condition(n) + " && (" + self._inline_body(n) + ")}"
        if len(group) == 2:
            a, b = group
            if a.type == b.type:
                return self._inline_group([a]) + self._inline_group([b])
            positive, negative = (a, b) if a.type == NodeType.WHEN else (b, a)
            return (
                "{"
                + _condition(positive)
                + " ? ("
                + self._inline_body(positive)
                + ") : ("
                + self._inline_body(negative)
                + ")}"
            )
        branches = [_condition(n) + " ? (" + self._inline_body(n) + ")" for n in group]
        return "{" + " : ".join(branches) + " : null}"

    def _inline_range(self, n: Node) -> str:
        head = _range_head(n)
        children = list(n.children())
        if not children:
            return head + "null)}"
        if len(children) == 1 and children[0].type == NodeType.ELEMENT:
            return head + self._inline(children[0], keyed=True) + ")}"
        return head + _KEYED_FRAGMENT_OPEN + self._inline_children(children) + _KEYED_FRAGMENT_CLOSE + ")}"

    # ------------------------------------------------------------------
    # Pieces
    # ------------------------------------------------------------------

    def _tag(self, n: Node) -> str:
        if n.atom:
            return atom_name(n.atom)
        return self._components.get(n.data, n.data)

    def _attrs(self, n: Node, keyed: bool) -> str:
        parts: list[str] = []
        if keyed:
            parts.append(f" key={{{_RANGE_KEY}}}")
        depth = scope_depth(n.path)
        for a in n.attrs:
            name = resolve_attribute_name(n.atom, a)
            if a.is_expression:
                parts.append(f" {name}={{{scope_name(depth)}.{a.value}}}")
            elif not a.value and a.key_atom and is_boolean_attribute(a.key_atom):
                parts.append(" " + name)
            else:
                parts.append(f" {name}={_attribute_value(a.value, depth)}")
        return "".join(parts)

    def _text(self, n: Node) -> str:
        data = n.data
        if _in_preformatted(n):
            parent = n.parent
            if (
                n.prev_sibling is None
                and parent is not None
                and parent.atom in PREFORMATTED_ELEMENTS
                and data.startswith("\n")
            ):
                # A newline right after the start tag is dropped by HTML parsers.
                data = "\n" + data
            return "{" + json.dumps(data, ensure_ascii=False) + "}"
        if n.prev_sibling is None:
            data = data.lstrip(" ")
        if n.next_sibling is None:
            data = data.rstrip(" ")
        return escape_jsx_text(data)


_KEYED_FRAGMENT_OPEN = f"<React.Fragment key={{{_RANGE_KEY}}}>"
_KEYED_FRAGMENT_CLOSE = "</React.Fragment>"


def _refuse(n: Node) -> None:
    if n.type == NodeType.ERROR:
        raise RenderError(RenderErrorKind.ERROR_NODE, "cannot render an error node")
    if n.type == NodeType.COMPONENT:
        raise RenderError(RenderErrorKind.NESTED_COMPONENT, f"component {n.data!r} cannot be nested")
    raise RenderError(RenderErrorKind.UNKNOWN_NODE, f"unknown node type: {n.type!r}")


def _check_void(n: Node, tag: str) -> None:
    if n.has_children():
        raise RenderError(RenderErrorKind.VOID_CHILDREN, f"void element <{tag}> has child nodes")


def _reference(n: Node) -> str:
    """Return the scoped JavaScript reference for the name held by *n*."""
    return scope_name(scope_depth(n.path)) + "." + n.data


def _condition(n: Node) -> str:
    ref = _reference(n)
    if n.type == NodeType.UNLESS:
        return "!" + ref
    return ref


def _range_head(n: Node) -> str:
    """Open a ``.map`` call whose callback binds the item and its index.

    The index is named ``key`` so that the ``key={key}`` placed on a single
    body element, or on its keyed fragment, refers to a bound variable.
    """
    item = scope_name(scope_depth(n.path) + 1)
    return "{" + _reference(n) + f".map(({item}, {_RANGE_KEY}) => "


def _attribute_value(value: str, depth: int) -> str:
    """Render a literal attribute value, interpolating embedded ``{name}`` variables."""
    pieces: list[str] = []
    last = 0
    found = False
    for m in _EMBEDDED.finditer(value):
        name = strip_spaces(m.group(1))
        if not is_dotted_identifier(name):
            continue
        found = True
        pieces.append(escape_template_literal(value[last : m.start()]))
        pieces.append("${" + scope_name(depth) + "." + name + "}")
        last = m.end()
    if not found:
        return '"' + escape_attribute_value(value) + '"'
    pieces.append(escape_template_literal(value[last:]))
    return "{`" + "".join(pieces) + "`}"


def _group_children(children: list[Node]) -> Iterator[Node | list[Node]]:
    """Yield children, merging runs of when/unless siblings with the same name."""
    i = 0
    n = len(children)
    while i < n:
        c = children[i]
        if c.type not in (NodeType.WHEN, NodeType.UNLESS):
            yield c
            i += 1
            continue
        group = [c]
        i += 1
        while i < n and children[i].type in (NodeType.WHEN, NodeType.UNLESS) and children[i].data == c.data:
            group.append(children[i])
            i += 1
        yield group


def _is_inline_content(children: list[Node]) -> bool:
    """Return True if *children* must stay on one line (text, or variables only)."""
    if any(c.type == NodeType.TEXT for c in children):
        return True
    return all(c.type == NodeType.VARIABLE for c in children)


def _in_preformatted(n: Node) -> bool:
    p = n.parent
    while p is not None:
        if p.type == NodeType.ELEMENT and p.atom in PREFORMATTED_ELEMENTS:
            return True
        p = p.parent
    return False


def _uses_react_fragment(root: Node) -> bool:
    """Return True if some iteration body needs a keyed ``React.Fragment``."""
    stack = list(root.children())
    while stack:
        n = stack.pop()
        if n.type == NodeType.RANGE:
            children = list(n.children())
            if children and not (len(children) == 1 and children[0].type == NodeType.ELEMENT):
                return True
        stack.extend(n.children())
    return False
