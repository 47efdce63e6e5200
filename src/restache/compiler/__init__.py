# Copyright 2026 Restache Contributors
# SPDX-License-Identifier: Apache-2.0

"""Compiler pipeline: JSX rendering, module building and tree artifacts."""

from restache.compiler.artifact import deserialize, dump_node, read_artifact, serialize, write_artifact
from restache.compiler.module import CycleError, DuplicateTagError, InvalidBasenameError, ModuleError, parse_dir
from restache.compiler.render import RenderError, RenderErrorKind, render, render_to_string

__all__ = [
    "render",
    "render_to_string",
    "RenderError",
    "RenderErrorKind",
    "parse_dir",
    "ModuleError",
    "InvalidBasenameError",
    "DuplicateTagError",
    "CycleError",
    "serialize",
    "deserialize",
    "dump_node",
    "write_artifact",
    "read_artifact",
]
