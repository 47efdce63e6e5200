# Copyright 2026 Restache Contributors
# SPDX-License-Identifier: Apache-2.0

"""Module builder: compiles a directory of templates as one set of components.

Every input file becomes a component whose tag is its lower-cased file stem.
Files are parsed concurrently; an element whose tag names another file of the
set records a dependency edge. The components are then wired with import
entries and returned in topological order, so that every component appears
after the components it uses.
"""

from __future__ import annotations

import concurrent.futures
import heapq
import os
from pathlib import Path

from restache.model.nodes import Attribute, Node
from restache.parser.parser import Parser

# ###############
# Public Interface
# ###############


class ModuleError(Exception):
    """Raised when a set of templates cannot be compiled as a module."""

    def __init__(self, message: str) -> None:
        super().__init__(message)


class InvalidBasenameError(ModuleError):
    """Raised when a file name cannot be used as a component tag."""


class DuplicateTagError(ModuleError):
    """Raised when two file names map to the same component tag."""


class CycleError(ModuleError):
    """Raised when two or more components reference each other in a cycle.

    Attributes:
        components: Stems of the components left unsorted, in input order.
    """

    def __init__(self, message: str, components: list[str]) -> None:
        super().__init__(message)
        self.components = components


#: Upper bound of the default worker count.
MAX_DEFAULT_PARALLELISM = 32


def component_tag(basename: str) -> tuple[str, str]:
    """Validate a file basename and return its ``(tag, stem)`` pair.

    The stem is everything before the last ``.``; the tag is the lower-cased
    stem. The stem must start with an ASCII letter and contain only ASCII
    letters, digits and ``-``.

    Raises:
        InvalidBasenameError: If *basename* does not conform.
    """
    if not basename or "/" in basename or "\\" in basename:
        raise InvalidBasenameError(f"File name {basename!r} is not valid")
    stem = basename.rsplit(".", 1)[0] if "." in basename else basename
    if not stem:
        raise InvalidBasenameError(f"File name {basename!r} is not valid")
    if not _is_ascii_letter(stem[0]):
        raise InvalidBasenameError(f"File name {basename!r} must start with a letter")
    for ch in stem:
        if not (_is_ascii_letter(ch) or "0" <= ch <= "9" or ch == "-"):
            raise InvalidBasenameError(f"File name {basename!r} contains invalid character {ch!r}")
    return stem.lower(), stem


def default_parallelism() -> int:
    """Return the worker count used when the caller does not choose one."""
    return min(os.cpu_count() or 1, MAX_DEFAULT_PARALLELISM)


def parse_dir(directory: Path, basenames: list[str], parallelism: int | None = None) -> list[Node]:
    """Parse the templates *basenames* inside *directory* as one module.

    Args:
        directory: Directory containing the template files.
        basenames: File names relative to *directory*. Their order breaks
            ties in the topological sort.
        parallelism: Maximum number of files parsed at once. Defaults to the
            host CPU count capped at :data:`MAX_DEFAULT_PARALLELISM`; values
            below 1 are raised to 1.

    Returns:
        The component roots in topological order. Each root is named after its
        file stem and lists the components it imports as attributes
        ``(key=tag, value=stem)`` in first-reference order.

    Raises:
        InvalidBasenameError: If a file name is not a valid component name.
        DuplicateTagError: If two file names share a tag.
        ModuleError: If a file cannot be read or tokenized; the original
            error is chained as ``__cause__``.
        CycleError: If components depend on each other in a cycle.
    """
    if not basenames:
        raise ModuleError("no input files provided")

    tags: list[str] = []
    stems: list[str] = []
    lookup: dict[str, int] = {}
    for i, basename in enumerate(basenames):
        tag, stem = component_tag(basename)
        if tag in lookup:
            other = basenames[lookup[tag]]
            raise DuplicateTagError(f"Files {other!r} and {basename!r} both define component '{tag}'")
        lookup[tag] = i
        tags.append(tag)
        stems.append(stem)

    paths = [directory / basename for basename in basenames]
    workers = _clamp_parallelism(parallelism, len(paths))
    parsed = _parse_all(paths, lookup, workers)

    roots: list[Node] = []
    edges: list[list[int]] = [[] for _ in paths]
    for i, (root, dependencies) in enumerate(parsed):
        root.data = stems[i]
        for j in dependencies:
            if j == i:
                root.recursive = True
                continue
            root.attrs.append(Attribute(key=tags[j], value=stems[j]))
            edges[j].append(i)
        roots.append(root)

    order = _topological_order(edges)
    if len(order) < len(roots):
        ordered = set(order)
        remaining = [stems[i] for i in range(len(roots)) if i not in ordered]
        raise CycleError(
            f"Dependency cycle between components in {str(directory)!r}: {', '.join(remaining)}",
            remaining,
        )
    return [roots[i] for i in order]


# ################
# Implementation
# ################


def _is_ascii_letter(ch: str) -> bool:
    return "a" <= ch <= "z" or "A" <= ch <= "Z"


def _clamp_parallelism(parallelism: int | None, n: int) -> int:
    if parallelism is None:
        parallelism = default_parallelism()
    return max(1, min(parallelism, n))


def _parse_one(path: Path, lookup: dict[str, int]) -> tuple[Node, list[int]]:
    with path.open("rb") as f:
        p = Parser(f, lookup)
        root = p.parse()
    return root, list(p.dependencies)


def _parse_all(paths: list[Path], lookup: dict[str, int], workers: int) -> list[tuple[Node, list[int]]]:
    """Parse *paths* with at most *workers* threads, keeping input order.

    On failure, files not yet started are cancelled and the error of the
    earliest failing input is raised once running parses have finished.
    """
    with concurrent.futures.ThreadPoolExecutor(max_workers=workers) as executor:
        futures = [executor.submit(_parse_one, path, lookup) for path in paths]
        _, pending = concurrent.futures.wait(futures, return_when=concurrent.futures.FIRST_EXCEPTION)
        for future in pending:
            future.cancel()

    for path, future in zip(paths, futures):
        if future.cancelled():
            continue
        exc = future.exception()
        if exc is not None:
            raise ModuleError(f"Cannot parse '{path}': {exc}") from exc
    return [future.result() for future in futures]


def _topological_order(edges: list[list[int]]) -> list[int]:
    """Kahn's algorithm over ``edges[src] -> [dst, ...]``.

    Ready components are taken lowest input index first. Returns fewer
    indices than nodes when the graph has a cycle.
    """
    indegree = [0] * len(edges)
    for targets in edges:
        for dst in targets:
            indegree[dst] += 1
    ready = [i for i, d in enumerate(indegree) if d == 0]
    heapq.heapify(ready)
    order: list[int] = []
    while ready:
        i = heapq.heappop(ready)
        order.append(i)
        for dst in edges[i]:
            indegree[dst] -= 1
            if indegree[dst] == 0:
                heapq.heappush(ready, dst)
    return order
