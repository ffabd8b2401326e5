"""Core protocols of treeprotocol.

Construction (Builder, make/relate/finish and sessions) and traversal
(Introspector and walk) over arbitrary node representations.
"""

from .node import (
    BOUNDS,
    Bounds,
    Cardinality,
    Deferred,
    Multiplicity,
    MANY,
    ONE,
    OPTIONAL,
    Relation,
    RelationSpec,
    deferred,
    keyed,
    make_bounds,
    normalize_relation,
)
from .builder import Builder, check_relate
from .introspection import (
    Introspector,
    node_initargs,
    node_kind,
    node_relation,
    node_relations,
)
from .session import builder_session, current_builder, with_builder
from .construction import (
    finish,
    make,
    make_finish,
    make_finish_relations,
    relate,
)
from .walker import (
    Continue,
    PeekingVisitor,
    Replace,
    Skip,
    coerce_peek_result,
    peeking,
    walk,
)

__all__ = [
    # Data model
    'BOUNDS',
    'Bounds',
    'Cardinality',
    'Deferred',
    'Multiplicity',
    'MANY',
    'ONE',
    'OPTIONAL',
    'Relation',
    'RelationSpec',
    'deferred',
    'keyed',
    'make_bounds',
    'normalize_relation',
    # Construction
    'Builder',
    'check_relate',
    'make',
    'relate',
    'finish',
    'make_finish',
    'make_finish_relations',
    'with_builder',
    'builder_session',
    'current_builder',
    # Introspection and traversal
    'Introspector',
    'node_kind',
    'node_initargs',
    'node_relations',
    'node_relation',
    'walk',
    'peeking',
    'PeekingVisitor',
    'Skip',
    'Continue',
    'Replace',
    'coerce_peek_result',
]
