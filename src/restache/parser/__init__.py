# Copyright 2026 Restache Contributors
# SPDX-License-Identifier: Apache-2.0

"""Tokenizer and tree-building parser for restache templates."""

from restache.parser.parser import Parser, parse, parse_file, parse_string
from restache.parser.tokenizer import Token, Tokenizer, TokenizerError, TokenType, tokenize

__all__ = [
    "Parser",
    "parse",
    "parse_file",
    "parse_string",
    "Token",
    "Tokenizer",
    "TokenizerError",
    "TokenType",
    "tokenize",
]
