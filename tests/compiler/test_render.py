# Copyright 2026 Restache Contributors
# SPDX-License-Identifier: Apache-2.0

"""Tests for the JSX renderer."""

import io

import pytest

from restache.compiler.render import (
    RenderError,
    RenderErrorKind,
    component_identifier,
    render,
    render_to_string,
    resolve_attribute_name,
    scope_name,
)
from restache.model.atoms import atom_lookup
from restache.model.nodes import Attribute, Node, NodeType, new_component
from restache.parser.parser import parse_string

# ###############
# Test Helpers
# ###############

_HEADER = "export default function (props) {\n  return (\n"
_FOOTER = "  );\n}\n"


def _jsx(source: str, name: str = "") -> str:
    root = parse_string(source)
    root.data = name
    return render_to_string(root)


def _body(source: str) -> str:
    """Render an unnamed component without imports and return the lines inside ``return (...)``."""
    out = _jsx(source)
    assert out.startswith(_HEADER), out
    assert out.endswith(_FOOTER), out
    return out[len(_HEADER) : -len(_FOOTER)]


def _flat(text: str) -> str:
    return " ".join(text.split())


def _element(tag: str) -> Node:
    return Node(type=NodeType.ELEMENT, atom=atom_lookup(tag))


# ###############
# Module Shape
# ###############


class TestModuleShape:
    def test_single_element(self) -> None:
        assert _jsx("<span></span>") == "export default function (props) {\n  return (\n    <span></span>\n  );\n}\n"

    def test_named_component(self) -> None:
        assert _jsx("<p>x</p>", name="Card").startswith("export default function Card(props) {\n")

    def test_hyphenated_name_becomes_identifier(self) -> None:
        assert _jsx("<p>x</p>", name="user-card").startswith("export default function UserCard(props) {\n")

    def test_empty_template_renders_null(self) -> None:
        assert _body("") == "    null\n"

    def test_multiple_roots_are_wrapped_in_fragment(self) -> None:
        assert _body("<h1>a</h1><p>b</p>") == "    <>\n      <h1>a</h1>\n      <p>b</p>\n    </>\n"

    def test_text_root(self) -> None:
        assert _body("Hello") == "    <>Hello</>\n"

    def test_variable_root(self) -> None:
        assert _body("{name}") == "    <>{props.name}</>\n"

    def test_written_count_matches_output(self) -> None:
        buf = io.StringIO()
        n = render(parse_string("<div><p>Hi {name}</p></div>"), buf)
        assert n == len(buf.getvalue())

    def test_imports_are_emitted_for_root_attributes(self) -> None:
        root = parse_string("<avatar></avatar>")
        root.data = "Card"
        root.attrs.append(Attribute(key="avatar", value="Avatar"))
        assert render_to_string(root) == (
            'import Avatar from "./Avatar.jsx";\n'
            "\n"
            "export default function Card(props) {\n"
            "  return (\n"
            "    <Avatar></Avatar>\n"
            "  );\n"
            "}\n"
        )

    def test_keyed_fragment_imports_react(self) -> None:
        out = _jsx("{#items}<dt>{term}</dt><dd>{desc}</dd>{/items}")
        assert out.startswith("import * as React from 'react';\n\nexport default function (props) {\n")

    def test_react_is_not_imported_without_keyed_fragments(self) -> None:
        assert "import" not in _jsx("{#items}<li>{name}</li>{/items}")


# ###############
# Elements
# ###############


class TestElements:
    def test_nested_block_layout(self) -> None:
        assert _body("<div>\n  <p>a</p>\n  <p>b</p>\n</div>") == (
            "    <div>\n      <p>a</p>\n      <p>b</p>\n    </div>\n"
        )

    def test_void_element_self_closes(self) -> None:
        assert _body("<img>") == "    <img />\n"

    def test_void_element_with_attributes(self) -> None:
        assert _body('<input type="checkbox" checked disabled="disabled">') == (
            '    <input type="checkbox" checked disabled="disabled" />\n'
        )

    def test_text_with_inline_elements_stays_on_one_line(self) -> None:
        assert _body("<p>Hello <b>{name}</b>, welcome!</p>") == "    <p>Hello <b>{props.name}</b>, welcome!</p>\n"

    def test_leading_and_trailing_spaces_are_trimmed(self) -> None:
        assert _body("<p>\n  Hello {name}  \n</p>") == "    <p>Hello {props.name}</p>\n"

    def test_unknown_tags_render_verbatim(self) -> None:
        assert _body("<my-widget></my-widget>") == "    <my-widget></my-widget>\n"

    def test_jsx_characters_in_text_are_escaped(self) -> None:
        assert _body("<p>a { b</p>") == "    <p>a {'{'} b</p>\n"
        assert _body("<p>a } b</p>") == "    <p>a {'}'} b</p>\n"

    def test_entities_pass_through(self) -> None:
        assert _body("<p>a &amp; b</p>") == "    <p>a &amp; b</p>\n"

    def test_bare_ampersands_are_unchanged(self) -> None:
        assert _body("<p>R&D team &copy 2024</p>") == "    <p>R&D team &copy 2024</p>\n"

    def test_empty_braces_render_as_text(self) -> None:
        assert _body("<p>{}</p>") == "    <p>{'{'}{'}'}</p>\n"

    def test_preformatted_text_is_a_string_literal(self) -> None:
        assert _body("<pre>a\n  b</pre>") == '    <pre>{"a\\n  b"}</pre>\n'

    def test_preformatted_leading_newline_is_doubled(self) -> None:
        assert _body("<pre>\nx</pre>") == '    <pre>{"\\n\\nx"}</pre>\n'


# ###############
# Attributes
# ###############


class TestAttributes:
    def test_form_rewrites(self) -> None:
        assert _body('<form accept-charset="utf-8" novalidate></form>') == (
            '    <form acceptCharset="utf-8" noValidate></form>\n'
        )

    def test_global_rewrites(self) -> None:
        assert _body('<label for="x" class="lbl" tabindex="0">X</label>') == (
            '    <label htmlFor="x" className="lbl" tabIndex="0">X</label>\n'
        )

    def test_event_handler_expression(self) -> None:
        assert _body('<button onclick="{save}">Save</button>') == "    <button onClick={props.save}>Save</button>\n"

    def test_tag_scoped_rewrites(self) -> None:
        assert _body('<td colspan="2" rowspan="{span}"></td>') == "    <td colSpan=\"2\" rowSpan={props.span}></td>\n"

    def test_tag_scoped_rewrite_needs_matching_element(self) -> None:
        assert _body('<div colspan="2"></div>') == '    <div colspan="2"></div>\n'

    def test_boolean_attribute_with_value_keeps_it(self) -> None:
        assert _body('<form novalidate="novalidate"></form>') == '    <form noValidate="novalidate"></form>\n'

    def test_expression_value(self) -> None:
        assert _body('<a href="{ user.url }">go</a>') == "    <a href={props.user.url}>go</a>\n"

    def test_empty_braces_value_stays_literal(self) -> None:
        assert _body('<a href="{ }">x</a>') == '    <a href="{ }">x</a>\n'

    def test_embedded_variables_become_template_literal(self) -> None:
        assert _body('<div class="card {variant}"></div>') == "    <div className={`card ${props.variant}`}></div>\n"

    def test_non_identifier_braces_stay_literal(self) -> None:
        assert _body('<div title="a {b c}"></div>') == '    <div title="a {b c}"></div>\n'

    def test_quotes_are_escaped(self) -> None:
        assert _body("<div title='say \"hi\"'></div>") == '    <div title="say &quot;hi&quot;"></div>\n'

    def test_data_and_aria_attributes(self) -> None:
        assert _body('<div data-user-id="{id}" aria-label="Close"></div>') == (
            '    <div data-user-id={props.id} aria-label="Close"></div>\n'
        )


class TestResolveAttributeName:
    @pytest.mark.parametrize("element", ["div", "form", "td", "input", "iframe", "label"])
    @pytest.mark.parametrize(
        "key",
        ["class", "for", "tabindex", "onclick", "colspan", "novalidate", "readonly", "value", "data-x", "fooBar"],
    )
    def test_resolution_is_idempotent(self, element: str, key: str) -> None:
        el = atom_lookup(element)
        first = resolve_attribute_name(el, Attribute(key=key, key_atom=atom_lookup(key)))
        second = resolve_attribute_name(el, Attribute(key=first, key_atom=atom_lookup(first)))
        assert first == second

    def test_literal_key_without_atom(self) -> None:
        assert resolve_attribute_name(atom_lookup("div"), Attribute(key="fooBar")) == "fooBar"


# ###############
# Conditionals
# ###############


class TestConditionals:
    def test_two_way_ternary(self) -> None:
        body = _body("{?hi}<b>x</b>{/hi}{^hi}<i>y</i>{/hi}")
        assert "{props.hi ? ( <b>x</b> ) : ( <i>y</i> )}" in _flat(body)
        assert body == (
            "    <>\n"
            "      {props.hi ? (\n"
            "        <b>x</b>\n"
            "      ) : (\n"
            "        <i>y</i>\n"
            "      )}\n"
            "    </>\n"
        )

    def test_negative_branch_first_is_reordered(self) -> None:
        body = _body("{^hi}<i>y</i>{/hi}{?hi}<b>x</b>{/hi}")
        assert "{props.hi ? ( <b>x</b> ) : ( <i>y</i> )}" in _flat(body)

    def test_single_when(self) -> None:
        assert _body("<div>{?open}<p>x</p>{/open}</div>") == (
            "    <div>\n      {props.open && (\n        <p>x</p>\n      )}\n    </div>\n"
        )

    def test_single_unless(self) -> None:
        assert "{!props.open && ( <p>x</p> )}" in _flat(_body("{^open}<p>x</p>{/open}"))

    def test_same_polarity_pair_is_not_merged(self) -> None:
        flat = _flat(_body("{?a}<p>1</p>{/a}{?a}<p>2</p>{/a}"))
        assert "{props.a && ( <p>1</p> )} {props.a && ( <p>2</p> )}" in flat

    def test_different_names_are_not_grouped(self) -> None:
        flat = _flat(_body("{?a}<p>1</p>{/a}{^b}<p>2</p>{/b}"))
        assert "{props.a && ( <p>1</p> )} {!props.b && ( <p>2</p> )}" in flat

    def test_three_way_chain(self) -> None:
        flat = _flat(_body("{?a}<p>1</p>{/a}{^a}<p>2</p>{/a}{?a}<p>3</p>{/a}"))
        assert "{props.a ? ( <p>1</p> ) : !props.a ? ( <p>2</p> ) : props.a ? ( <p>3</p> ) : null}" in flat

    def test_multi_child_branch_gets_fragment(self) -> None:
        flat = _flat(_body("{?a}<p>1</p><p>2</p>{/a}"))
        assert "{props.a && ( <> <p>1</p> <p>2</p> </> )}" in flat

    def test_empty_branch_is_null(self) -> None:
        assert "{props.a && ( null )}" in _flat(_body("{?a}{/a}"))

    def test_inline_when_in_text(self) -> None:
        assert _body("<p>Hi {?name}<b>{name}</b>{/name}!</p>") == (
            "    <p>Hi {props.name && (<b>{props.name}</b>)}!</p>\n"
        )

    def test_inline_ternary_in_text(self) -> None:
        assert _body("<p>{?hi}<b>x</b>{/hi}{^hi}<i>y</i>{/hi} there</p>") == (
            "    <p>{props.hi ? (<b>x</b>) : (<i>y</i>)} there</p>\n"
        )

    def test_conditions_inside_range_use_item_scope(self) -> None:
        flat = _flat(_body("<ul>{#items}<li>{?done}<s>{name}</s>{/done}</li>{/items}</ul>"))
        assert "<li key={key}> {$1.done && ( <s>{$1.name}</s> )} </li>" in flat


# ###############
# Iteration
# ###############


class TestRanges:
    def test_single_element_body_gets_key(self) -> None:
        body = _body("{#items}<li>{name}</li>{/items}")
        assert "props.items.map(($1, key) =>" in body
        assert "<li key={key}>{$1.name}</li>" in body
        assert body == (
            "    <>\n"
            "      {props.items.map(($1, key) => (\n"
            "        <li key={key}>{$1.name}</li>\n"
            "      ))}\n"
            "    </>\n"
        )

    def test_range_inside_element(self) -> None:
        assert _body("<ul>{#items}<li>{name}</li>{/items}</ul>") == (
            "    <ul>\n"
            "      {props.items.map(($1, key) => (\n"
            "        <li key={key}>{$1.name}</li>\n"
            "      ))}\n"
            "    </ul>\n"
        )

    def test_multi_child_body_uses_keyed_fragment(self) -> None:
        out = _jsx("<dl>{#items}<dt>{term}</dt><dd>{desc}</dd>{/items}</dl>")
        assert (
            "    <dl>\n"
            "      {props.items.map(($1, key) => (\n"
            "        <React.Fragment key={key}>\n"
            "          <dt>{$1.term}</dt>\n"
            "          <dd>{$1.desc}</dd>\n"
            "        </React.Fragment>\n"
            "      ))}\n"
            "    </dl>\n"
        ) in out

    def test_nested_ranges_use_deeper_scopes(self) -> None:
        assert _body("<table>{#rows}<tr>{#cells}<td>{value}</td>{/cells}</tr>{/rows}</table>") == (
            "    <table>\n"
            "      {props.rows.map(($1, key) => (\n"
            "        <tr key={key}>\n"
            "          {$1.cells.map(($2, key) => (\n"
            "            <td key={key}>{$2.value}</td>\n"
            "          ))}\n"
            "        </tr>\n"
            "      ))}\n"
            "    </table>\n"
        )

    def test_dotted_range_source(self) -> None:
        assert "{props.user.posts.map(($1, key) => (" in _body("<ul>{#user.posts}<li>{title}</li>{/user.posts}</ul>")

    def test_empty_range(self) -> None:
        assert _body("<ul>{#items}{/items}</ul>") == "    <ul>\n      {props.items.map(($1, key) => null)}\n    </ul>\n"

    def test_inline_range_in_text(self) -> None:
        assert _body("<p>Tags: {#tags}<b>{name}</b>{/tags}</p>") == (
            "    <p>Tags: {props.tags.map(($1, key) => <b key={key}>{$1.name}</b>)}</p>\n"
        )

    def test_attributes_in_range_scope(self) -> None:
        assert "<a key={key} href={$1.url}>{$1.label}</a>" in _body("{#links}<a href=\"{url}\">{label}</a>{/links}")

    def test_unclosed_range_does_not_leak_past_close_tag(self) -> None:
        out = _body("<div>{#items}<span>{x}</div>{y}")
        assert "{props.y}" in out
        assert "$1.y" not in out

    def test_text_body_uses_keyed_fragment(self) -> None:
        out = _jsx("<p>{#items}{name}, {/items}</p>")
        assert out.startswith("import * as React from 'react';\n\n")
        assert "<React.Fragment key={key}>{$1.name},</React.Fragment>" in out

    def test_key_is_bound_by_the_callback(self) -> None:
        assert "props.items.map(($1, key) => " in _jsx("<ul>{#items}<li>{name}</li>{/items}</ul>")


# ###############
# Comments
# ###############


class TestComments:
    def test_short_comment(self) -> None:
        assert _body("{! note }<p></p>") == "    <>\n      {/* note */}\n      <p></p>\n    </>\n"

    def test_comment_terminator_is_escaped(self) -> None:
        assert "{/* a *\\/ b */}" in _body("{! a */ b }<p></p>")

    def test_long_comment_spans_lines(self) -> None:
        text = "x" * 90
        assert f"      {{/*\n        {text}\n      */}}\n" in _body("{! " + text + " }<p></p>")


# ###############
# Components
# ###############


class TestComponents:
    def test_self_reference_renders_own_identifier(self) -> None:
        root = parse_string("<ul>{#children}<tree></tree>{/children}</ul>")
        root.data = "Tree"
        root.recursive = True
        out = render_to_string(root)
        assert "<Tree key={key}></Tree>" in out
        assert "import" not in out

    def test_imported_component_keeps_attributes(self) -> None:
        root = parse_string('<avatar src="{url}" class="round"/>')
        root.data = "Card"
        root.attrs.append(Attribute(key="avatar", value="Avatar"))
        assert '    <Avatar src={props.url} className="round"></Avatar>\n' in render_to_string(root)

    def test_identifiers(self) -> None:
        assert component_identifier("Avatar") == "Avatar"
        assert component_identifier("user-card") == "UserCard"
        assert scope_name(0) == "props"
        assert scope_name(2) == "$2"


# ###############
# Errors
# ###############


class TestRenderErrors:
    def test_void_element_with_children(self) -> None:
        root = new_component()
        img = _element("img")
        img.append_child(_element("a"))
        root.append_child(img)
        with pytest.raises(RenderError) as exc_info:
            render_to_string(root)
        assert exc_info.value.kind == RenderErrorKind.VOID_CHILDREN

    def test_void_element_with_children_inline(self) -> None:
        root = new_component()
        p = _element("p")
        p.append_child(Node(type=NodeType.TEXT, data="x"))
        br = _element("br")
        br.append_child(Node(type=NodeType.TEXT, data="y"))
        p.append_child(br)
        root.append_child(p)
        with pytest.raises(RenderError) as exc_info:
            render_to_string(root)
        assert exc_info.value.kind == RenderErrorKind.VOID_CHILDREN

    def test_error_node(self) -> None:
        root = new_component()
        root.append_child(Node(type=NodeType.ERROR))
        with pytest.raises(RenderError) as exc_info:
            render_to_string(root)
        assert exc_info.value.kind == RenderErrorKind.ERROR_NODE

    def test_nested_component(self) -> None:
        outer = new_component()
        inner = new_component("Inner")
        outer.append_child(inner)
        with pytest.raises(RenderError) as exc_info:
            render_to_string(outer)
        assert exc_info.value.kind == RenderErrorKind.NESTED_COMPONENT
        with pytest.raises(RenderError) as exc_info:
            render_to_string(inner)
        assert exc_info.value.kind == RenderErrorKind.NESTED_COMPONENT

    def test_render_subtree(self) -> None:
        assert render_to_string(_element("br")) == "    <br />\n"
