# Copyright 2026 Restache Contributors
# SPDX-License-Identifier: Apache-2.0

"""Serialization and deserialization of parsed component trees.

Trees are stored as JSON for inspection and for caching parse results. The
format is versioned so future schema changes can be detected. Element atoms
are stored by name, which keeps the format independent of the atom numbering.
"""

from __future__ import annotations

import json
from pathlib import Path
from typing import Any

from restache.model.atoms import atom_lookup, atom_name
from restache.model.nodes import Attribute, Node, NodeType, PathSegment

# ###############
# Public Interface
# ###############

ARTIFACT_FORMAT_VERSION = "1"


def serialize(root: Node, indent: int | None = None) -> str:
    """Serialize a component tree to a JSON string.

    Args:
        root: The tree to serialize.
        indent: Pretty-print with this indentation; compact when None.
    """
    separators = (",", ":") if indent is None else None
    return json.dumps(_document_to_dict(root), separators=separators, indent=indent, ensure_ascii=False)


def deserialize(data: str) -> Node:
    """Deserialize a component tree from a JSON string.

    Args:
        data: JSON string produced by :func:`serialize`.

    Returns:
        The reconstructed tree.

    Raises:
        ValueError: If the artifact format version is not recognised or a
            node type is unknown.
    """
    obj = json.loads(data)
    version = obj.get("v")
    if version != ARTIFACT_FORMAT_VERSION:
        raise ValueError(f"Unsupported artifact format version: {version!r}")
    return _node_from_dict(obj["root"])


def dump_node(root: Node) -> dict[str, Any]:
    """Return the plain-data form of *root* (without the format header)."""
    return _node_to_dict(root)


def write_artifact(root: Node, path: Path, indent: int | None = None) -> None:
    """Write a tree to *path*, creating parent directories as needed."""
    path.parent.mkdir(parents=True, exist_ok=True)
    path.write_text(serialize(root, indent=indent), encoding="utf-8")


def read_artifact(path: Path) -> Node:
    """Read and deserialize a tree from *path*."""
    return deserialize(path.read_text(encoding="utf-8"))


# ################
# Implementation
# ################


def _document_to_dict(root: Node) -> dict[str, Any]:
    return {"v": ARTIFACT_FORMAT_VERSION, "root": _node_to_dict(root)}


def _node_to_dict(node: Node) -> dict[str, Any]:
    d: dict[str, Any] = {"type": node.type.value}
    if node.atom:
        d["tag"] = atom_name(node.atom)
    if node.data:
        d["data"] = node.data
    if node.attrs:
        d["attrs"] = [_attr_to_dict(a) for a in node.attrs]
    if node.path:
        d["path"] = [_segment_to_dict(s) for s in node.path]
    if node.recursive:
        d["recursive"] = True
    children = [_node_to_dict(c) for c in node.children()]
    if children:
        d["children"] = children
    return d


def _node_from_dict(obj: dict[str, Any]) -> Node:
    node = Node(
        type=NodeType(obj["type"]),
        data=obj.get("data", ""),
        atom=atom_lookup(obj["tag"]) if "tag" in obj else 0,
        attrs=[_attr_from_dict(a) for a in obj.get("attrs", [])],
        path=[_segment_from_dict(s) for s in obj.get("path", [])],
        recursive=obj.get("recursive", False),
    )
    for child in obj.get("children", []):
        node.append_child(_node_from_dict(child))
    return node


def _attr_to_dict(attr: Attribute) -> dict[str, Any]:
    d: dict[str, Any] = {"key": attr.key, "value": attr.value}
    if attr.is_expression:
        d["expr"] = True
    return d


def _attr_from_dict(obj: dict[str, Any]) -> Attribute:
    return Attribute(
        key=obj["key"],
        key_atom=atom_lookup(obj["key"]),
        value=obj.get("value", ""),
        is_expression=obj.get("expr", False),
    )


def _segment_to_dict(seg: PathSegment) -> dict[str, Any]:
    return {"name": seg.name, "iter": seg.is_iteration}


def _segment_from_dict(obj: dict[str, Any]) -> PathSegment:
    return PathSegment(name=obj["name"], is_iteration=obj.get("iter", False))
