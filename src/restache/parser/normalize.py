# Copyright 2026 Restache Contributors
# SPDX-License-Identifier: Apache-2.0

"""String normalization helpers shared by the tokenizer, parser and renderer."""

from __future__ import annotations

import re

# ###############
# Public Interface
# ###############

#: Characters treated as whitespace by the template language.
SPACE_CHARS = " \t\r\n"


def kebab_to_camel(key: str) -> str:
    """Convert a kebab-cased name to camelCase (``foo-bar-baz`` → ``fooBarBaz``).

    Only ASCII lower-case letters following a hyphen are upper-cased; other
    characters after a hyphen are kept as they are.
    """
    if "-" not in key:
        return key
    out: list[str] = []
    upper_next = False
    for ch in key:
        if ch == "-":
            upper_next = True
            continue
        if upper_next and "a" <= ch <= "z":
            out.append(ch.upper())
        else:
            out.append(ch)
        upper_next = False
    return "".join(out)


def is_data_or_aria(key: str) -> bool:
    """Return True for ``data-*`` and ``aria-*`` attribute names."""
    return len(key) > 5 and key[4] == "-" and key[:4] in ("data", "aria")


def normalize_attribute_key(key: str) -> str:
    """camelCase an attribute key unless it is a ``data-``/``aria-`` attribute."""
    if is_data_or_aria(key):
        return key
    return kebab_to_camel(key)


def collapse_whitespace(text: str) -> str:
    """Collapse every run of ASCII whitespace into a single space.

    Returns "" when *text* consists of whitespace only.
    """
    if not text.strip(SPACE_CHARS):
        return ""
    return _SPACE_RUN.sub(" ", text)


def strip_spaces(text: str) -> str:
    """Trim template whitespace (not Unicode whitespace) from both ends."""
    return text.strip(SPACE_CHARS)


def escape_comment(text: str) -> str:
    """Escape ``*/`` so *text* can be embedded in a JavaScript block comment."""
    return text.replace("*/", "*\\/")


def escape_jsx_text(text: str) -> str:
    """Escape characters that JSX does not allow in literal text."""
    return "".join(_JSX_TEXT_ESCAPES.get(ch, ch) for ch in text)


def escape_attribute_value(value: str) -> str:
    """Escape a literal attribute value for a double-quoted JSX attribute."""
    return value.replace('"', "&quot;")


def escape_template_literal(text: str) -> str:
    """Escape literal text for use inside a JavaScript template literal."""
    return text.replace("\\", "\\\\").replace("`", "\\`").replace("${", "\\${")


def sanitize_identifier(name: str) -> str:
    """Turn a component stem into a JSX component identifier.

    Hyphenated stems are camelCased, characters that are not valid in a
    JavaScript identifier are dropped and the first letter is upper-cased so
    that JSX treats the name as a component rather than a host element.
    Returns "" for an empty name.
    """
    camel = kebab_to_camel(name)
    cleaned = _NON_IDENT.sub("", camel)
    if not cleaned:
        return ""
    if cleaned[0].isdigit():
        cleaned = "_" + cleaned
    return cleaned[0].upper() + cleaned[1:]


def is_dotted_identifier(name: str) -> bool:
    """Return True if *name* is a dotted path of JavaScript identifiers."""
    return bool(_DOTTED_IDENT.fullmatch(name))


# ################
# Implementation
# ################

_SPACE_RUN = re.compile(r"[ \t\r\n]+")
_NON_IDENT = re.compile(r"[^A-Za-z0-9_$]")
_DOTTED_IDENT = re.compile(r"[A-Za-z_$][A-Za-z0-9_$]*(\.[A-Za-z_$][A-Za-z0-9_$]*)*")

_JSX_TEXT_ESCAPES: dict[str, str] = {
    "{": "{'{'}",
    "}": "{'}'}",
    "<": "&lt;",
    ">": "&gt;",
}
