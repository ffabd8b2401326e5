"""treeprotocol - Representation-agnostic tree construction and traversal.

Producers of tree-shaped results (parsers, transformers) write their
construction logic once against the Builder protocol; callers pick the
concrete representation at the point of use. Any tree built this way can
be walked back out through the Introspector protocol without knowing its
representation.

Quick start:
━━━━━━━━━━━━━━━━━━━━━━━━━━
    from treeprotocol import ListBuilder, make_finish, make_finish_relations, walk

    builder = ListBuilder()
    tree = make_finish_relations(builder, "operator", {}, [
        ("operand", [make_finish(builder, "literal", {"value": 5}),
                     make_finish(builder, "literal", {"value": 6})]),
    ])
━━━━━━━━━━━━━━━━━━━━━━━━━━
"""

__version__ = "0.1.0"

from .core import *  # noqa: F401,F403
from .core import __all__ as _core_all
from .builders import (
    BuiltNode,
    ForwardingBuilder,
    ListBuilder,
    NodeDraft,
    NodeSchema,
    ObjectBuilder,
    to_literal,
)
from .config import ValidationConfig, WalkConfig
from .errors import (
    CardinalityError,
    ConfigurationError,
    ConstructionError,
    DuplicateKeyError,
    InitargsError,
    IntrospectionError,
    KindMismatchError,
    NoActiveBuilderError,
    NodeFinishedError,
    PeekResultError,
    RelationSpecError,
    TreeProtocolError,
    UnknownKindError,
    WalkDepthError,
    WalkError,
)
from .syntax import NodeTemplate, RelationTemplate, build, node, rel
from .api import (
    UnbuiltNode,
    build_tree,
    collect_kinds,
    count_nodes,
    find_nodes,
    rebuild,
    unbuild,
)

__all__ = [
    "__version__",
    *_core_all,
    # Builders
    "ListBuilder",
    "to_literal",
    "ObjectBuilder",
    "NodeSchema",
    "NodeDraft",
    "BuiltNode",
    "ForwardingBuilder",
    # Config
    "ValidationConfig",
    "WalkConfig",
    # Errors
    "TreeProtocolError",
    "ConfigurationError",
    "ConstructionError",
    "UnknownKindError",
    "InitargsError",
    "CardinalityError",
    "DuplicateKeyError",
    "KindMismatchError",
    "NodeFinishedError",
    "RelationSpecError",
    "NoActiveBuilderError",
    "IntrospectionError",
    "WalkError",
    "WalkDepthError",
    "PeekResultError",
    # Syntax
    "node",
    "rel",
    "build",
    "NodeTemplate",
    "RelationTemplate",
    # API
    "build_tree",
    "unbuild",
    "UnbuiltNode",
    "rebuild",
    "count_nodes",
    "find_nodes",
    "collect_kinds",
]
