# Copyright 2026 Restache Contributors
# SPDX-License-Identifier: Apache-2.0

"""Template tree model and the element/attribute tables it refers to."""

from restache.model.atoms import (
    atom_lookup,
    atom_name,
    global_rewrite,
    is_boolean_attribute,
    is_common_element,
    is_void_element,
    scoped_key,
    tag_scoped_rewrite,
)
from restache.model.nodes import (
    CONTROL_TYPES,
    Attribute,
    Node,
    NodeType,
    PathSegment,
    new_component,
    scope_depth,
)

__all__ = [
    # Atoms
    "atom_lookup",
    "atom_name",
    "is_common_element",
    "is_void_element",
    "is_boolean_attribute",
    "global_rewrite",
    "tag_scoped_rewrite",
    "scoped_key",
    # Tree
    "NodeType",
    "CONTROL_TYPES",
    "Attribute",
    "PathSegment",
    "Node",
    "new_component",
    "scope_depth",
]
