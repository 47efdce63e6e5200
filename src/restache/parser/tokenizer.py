# Copyright 2026 Restache Contributors
# SPDX-License-Identifier: Apache-2.0

"""Streaming tokenizer for restache templates.

Tag-shaped syntax (start, end and self-closing tags with their attribute
lists) is recognised by the standard library :class:`html.parser.HTMLParser`.
Character data between tags is scanned for brace-delimited constructs:

* ``{name}`` – variable
* ``{?name}`` – when (positive conditional)
* ``{^name}`` – unless (negative conditional)
* ``{#name}`` – range (iteration)
* ``{/name}`` – end of the nearest matching control block
* ``{! text}`` – comment

The tokenizer has a pull interface: :meth:`Tokenizer.next` advances to the
next token and returns its type; accessors describe the current token.
"""

from __future__ import annotations

import codecs
import enum
import html
import io
from collections import deque
from collections.abc import Iterator
from dataclasses import dataclass, field
from html.parser import HTMLParser
from typing import BinaryIO

from restache.parser.normalize import SPACE_CHARS, normalize_attribute_key, strip_spaces

# ###############
# Public Interface
# ###############


class TokenType(enum.Enum):
    """All token types produced by the tokenizer."""

    ERROR = "error"
    START_TAG = "start_tag"
    END_TAG = "end_tag"
    SELF_CLOSING_TAG = "self_closing_tag"
    TEXT = "text"
    COMMENT = "comment"
    VARIABLE = "variable"
    WHEN = "when"
    UNLESS = "unless"
    RANGE = "range"
    END_CONTROL = "end_control"


@dataclass(frozen=True)
class Token:
    """A token and its content.

    Attributes:
        type: The kind of token.
        value: Tag name for tag tokens, raw text for text tokens, and the
            trimmed name/body for brace constructs.
    """

    type: TokenType
    value: str


class TokenizerError(Exception):
    """Raised when the input cannot be decoded or tokenized."""


class Tokenizer:
    """Pull tokenizer over a binary reader.

    Args:
        reader: Any object with a ``read(size)`` method returning bytes.
        chunk_size: Number of bytes requested from *reader* per read
            (default 4096).
    """

    def __init__(self, reader: BinaryIO, chunk_size: int | None = None) -> None:
        self._reader = reader
        self._chunk_size = chunk_size or _CHUNK_SIZE
        self._decoder = codecs.getincrementaldecoder("utf-8")()
        self._html = _EventCollector()
        self._eof = False

        self._type = TokenType.ERROR
        self._err: BaseException | None = None
        self._event: _Event | None = None
        self._attr_index = 0

        self._buf = ""
        self._pos = 0
        self._tok_begin = 0
        self._tok_end = 0

    def err(self) -> BaseException | None:
        """Return the error that stopped the tokenizer.

        End of input is reported as an :class:`EOFError`.
        """
        return self._err

    def raw(self) -> str:
        """Return the raw text of the current token."""
        if self._type in _TAG_TYPES and self._event is not None:
            return self._event.raw
        return self._buf[self._tok_begin : self._tok_end]

    def tag_name(self) -> tuple[str, bool]:
        """Return the lower-cased name of the current tag and whether it has attributes."""
        if self._type not in _TAG_TYPES or self._event is None:
            return "", False
        return self._event.tag, self._attr_index < len(self._event.attrs)

    def tag_attr(self) -> tuple[str, str, bool, bool]:
        """Return the next attribute of the current start tag.

        Returns:
            A ``(key, value, is_expression, more)`` tuple. *key* is camelCased
            unless it is a ``data-``/``aria-`` attribute. When the value is a
            single ``{ name }`` construct, *value* is the trimmed name and
            *is_expression* is True. *more* tells whether further attributes
            follow.
        """
        if self._event is None or self._attr_index >= len(self._event.attrs):
            return "", "", False, False
        key, value = self._event.attrs[self._attr_index]
        self._attr_index += 1
        more = self._attr_index < len(self._event.attrs)
        value = value if value is not None else ""
        expr = _attribute_expression(value)
        if expr is not None:
            return normalize_attribute_key(key), expr, True, more
        return normalize_attribute_key(key), value, False, more

    def control_name(self) -> str:
        """Return the trimmed name of the current when/unless/range/end-control token."""
        symbol = _CONTROL_SYMBOLS.get(self._type)
        raw = self.raw()
        if symbol is None:
            return strip_spaces(raw)
        return strip_spaces(raw[raw.find(symbol) + 1 :])

    def comment(self) -> str:
        """Return the trimmed body of the current comment token."""
        raw = self.raw()
        return strip_spaces(raw[raw.find("!") + 1 :])

    def next(self) -> TokenType:
        """Advance to the next token and return its type.

        Returns :attr:`TokenType.ERROR` at end of input or after a read or
        decode failure; :meth:`err` tells which.
        """
        if self._err is not None:
            self._type = TokenType.ERROR
            return self._type

        if self._pos < len(self._buf):
            self._scan_text()
            return self._type

        try:
            event = self._next_event()
        except (OSError, ValueError) as exc:
            self._err = exc
            self._type = TokenType.ERROR
            return self._type

        if event is None:
            self._err = EOFError("end of template input")
            self._type = TokenType.ERROR
            return self._type

        if event.kind == TokenType.TEXT:
            self._event = None
            self._buf = event.raw
            self._pos = 0
            self._scan_text()
            return self._type

        self._event = event
        self._attr_index = 0
        self._buf = ""
        self._pos = 0
        self._tok_begin = 0
        self._tok_end = 0
        self._type = event.kind
        return self._type

    def raise_for_error(self) -> None:
        """Raise the stored error unless it is the end-of-input marker.

        Raises:
            OSError: If reading from the underlying reader failed.
            TokenizerError: If the input could not be decoded or tokenized.
        """
        err = self._err
        if err is None or isinstance(err, EOFError):
            return
        if isinstance(err, OSError):
            raise err
        raise TokenizerError(f"Cannot tokenize template: {err}") from err

    def __iter__(self) -> Iterator[Token]:
        while True:
            tt = self.next()
            if tt == TokenType.ERROR:
                self.raise_for_error()
                return
            yield Token(tt, self._token_value(tt))

    # ------------------------------------------------------------------
    # Text scanning
    # ------------------------------------------------------------------

    def _scan_text(self) -> None:
        """Emit the next text or brace token from the current text run."""
        b = self._buf
        start = self._pos
        end = len(b)

        lpos = b.find("{", start)
        if lpos < 0:
            self._set_token(TokenType.TEXT, start, end, end)
            return
        if lpos > start:
            # Text before the brace goes first.
            self._set_token(TokenType.TEXT, start, lpos, lpos)
            return
        rpos = b.find("}", lpos + 1)
        if rpos < 0:
            self._set_token(TokenType.TEXT, lpos, end, end)
            return
        self._set_token(_identify_construct(b[lpos + 1 : rpos]), lpos + 1, rpos, rpos + 1)

    def _set_token(self, tt: TokenType, begin: int, end: int, pos: int) -> None:
        self._type = tt
        self._tok_begin = begin
        self._tok_end = end
        self._pos = pos

    def _token_value(self, tt: TokenType) -> str:
        if tt in _TAG_TYPES:
            return self.tag_name()[0]
        if tt == TokenType.COMMENT:
            return self.comment()
        if tt == TokenType.TEXT:
            return self.raw()
        return self.control_name()

    # ------------------------------------------------------------------
    # Reading
    # ------------------------------------------------------------------

    def _next_event(self) -> _Event | None:
        """Return the next HTML event, reading more input as needed."""
        events = self._html.events
        while not events and not self._eof:
            chunk = self._reader.read(self._chunk_size)
            if not chunk:
                self._eof = True
                self._html.feed(self._decoder.decode(b"", final=True))
                self._html.close()
            else:
                self._html.feed(self._decoder.decode(chunk))
        if events:
            return events.popleft()
        return None


def tokenize(source: str | bytes) -> list[Token]:
    """Tokenize a whole template held in memory.

    Args:
        source: Template text, or its UTF-8 encoding.

    Returns:
        All tokens in order (end of input is not represented as a token).

    Raises:
        TokenizerError: If *source* is not valid UTF-8.
    """
    if isinstance(source, str):
        source = source.encode("utf-8")
    return list(Tokenizer(io.BytesIO(source)))


# ################
# Implementation
# ################

_CHUNK_SIZE = 4096
_AMP = "&amp;"

_TAG_TYPES: frozenset[TokenType] = frozenset(
    {TokenType.START_TAG, TokenType.END_TAG, TokenType.SELF_CLOSING_TAG}
)

_CONTROL_SYMBOLS: dict[TokenType, str] = {
    TokenType.WHEN: "?",
    TokenType.UNLESS: "^",
    TokenType.RANGE: "#",
    TokenType.END_CONTROL: "/",
}

_CONSTRUCT_TYPES: dict[str, TokenType] = {
    "?": TokenType.WHEN,
    "^": TokenType.UNLESS,
    "#": TokenType.RANGE,
    "/": TokenType.END_CONTROL,
    "!": TokenType.COMMENT,
}


@dataclass
class _Event:
    """One callback of the HTML parser."""

    kind: TokenType
    raw: str
    tag: str = ""
    attrs: list[tuple[str, str | None]] = field(default_factory=list)


class _EventCollector(HTMLParser):
    """Queues HTMLParser callbacks; adjacent character data is merged into one run.

    Every ``&`` is fed to the HTML parser as ``&amp;``, so character
    references in text come back exactly as written (``R&D`` stays ``R&D``,
    ``&copy`` does not gain a semicolon). Attribute values are still decoded.
    """

    def __init__(self) -> None:
        super().__init__(convert_charrefs=False)
        self.events: deque[_Event] = deque()
        self._text: list[str] = []

    def feed(self, data: str) -> None:
        super().feed(data.replace("&", _AMP))

    def close(self) -> None:
        super().close()
        self._flush_text()

    def handle_starttag(self, tag: str, attrs: list[tuple[str, str | None]]) -> None:
        self._flush_text()
        raw = self._starttag_text() or f"<{tag}>"
        self.events.append(_Event(TokenType.START_TAG, raw, tag, _decode_attrs(attrs)))

    def handle_startendtag(self, tag: str, attrs: list[tuple[str, str | None]]) -> None:
        self._flush_text()
        raw = self._starttag_text() or f"<{tag}/>"
        self.events.append(_Event(TokenType.SELF_CLOSING_TAG, raw, tag, _decode_attrs(attrs)))

    def handle_endtag(self, tag: str) -> None:
        self._flush_text()
        self.events.append(_Event(TokenType.END_TAG, f"</{tag}>", tag))

    def handle_data(self, data: str) -> None:
        # Raw text elements (script, style) bypass reference parsing.
        self._text.append(data.replace(_AMP, "&"))

    def handle_entityref(self, name: str) -> None:
        # The only reference the parser can see is the escaped "&" itself.
        self._text.append("&")

    # HTML comments, doctypes and processing instructions separate text runs
    # but produce no tokens.

    def handle_comment(self, data: str) -> None:
        self._flush_text()

    def handle_decl(self, decl: str) -> None:
        self._flush_text()

    def handle_pi(self, data: str) -> None:
        self._flush_text()

    def unknown_decl(self, data: str) -> None:
        self._flush_text()

    def _flush_text(self) -> None:
        if self._text:
            self.events.append(_Event(TokenType.TEXT, "".join(self._text)))
            self._text.clear()

    def _starttag_text(self) -> str:
        return (self.get_starttag_text() or "").replace(_AMP, "&")


def _decode_attrs(attrs: list[tuple[str, str | None]]) -> list[tuple[str, str | None]]:
    """Undo the ``&`` escaping added by :meth:`_EventCollector.feed` on attribute values."""
    return [(key, None if value is None else html.unescape(value)) for key, value in attrs]


def _identify_construct(chunk: str) -> TokenType:
    """Classify the content between ``{`` and ``}``."""
    stripped = chunk.lstrip(SPACE_CHARS)
    if not stripped:
        return TokenType.VARIABLE
    return _CONSTRUCT_TYPES.get(stripped[0], TokenType.VARIABLE)


def _attribute_expression(value: str) -> str | None:
    """Return the inner name if *value* is exactly one ``{ name }`` variable construct."""
    stripped = value.strip(SPACE_CHARS)
    if len(stripped) < 2 or stripped[0] != "{":
        return None
    rpos = stripped.find("}")
    if rpos != len(stripped) - 1:
        return None
    inner = stripped[1:rpos]
    if _identify_construct(inner) != TokenType.VARIABLE:
        return None
    # "{ }" names nothing and stays a literal value.
    return strip_spaces(inner) or None
