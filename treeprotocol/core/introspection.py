"""Introspection abstraction for treeprotocol.

An Introspector answers questions about nodes it (or a paired builder)
constructed: kind, initargs, relations and related nodes. The walker only
ever looks at nodes through these four queries, which is what lets one walk
work over any representation.

The module-level functions are what the rest of the library calls. They
normalize the answers of a concrete introspector so implementations can be
terse: relations may be reported as bare names, and cardinality defaults
to MANY.
"""

from abc import ABC, abstractmethod
from typing import Any, Iterable, List, Sequence, Tuple

from ..errors import CardinalityError, IntrospectionError
from .node import Initargs, Kind, Relation, RelationArgs, RelationLike, normalize_relation


class Introspector(ABC):
    """Abstract interface for recovering the structure of built nodes.

    Builders that support traversal implement this alongside Builder.
    """

    @abstractmethod
    def node_kind(self, node: Any) -> Kind:
        """Return the kind node was created with."""
        pass

    @abstractmethod
    def node_initargs(self, node: Any) -> Initargs:
        """Return the initargs node was created with."""
        pass

    @abstractmethod
    def node_relations(self, node: Any) -> Iterable[RelationLike]:
        """Return the relations of node.

        Entries may be Relation objects, bare names (cardinality MANY), or
        (name, cardinality) pairs.
        """
        pass

    @abstractmethod
    def node_relation(self, relation: Relation, node: Any) -> Tuple[Sequence[Any], Sequence[RelationArgs]]:
        """Return the right nodes of relation on node.

        Returns:
            Two parallel sequences: right nodes, and the relation args each
            was related with
        """
        pass


def _introspector(builder: Any) -> Introspector:
    if not isinstance(builder, Introspector):
        raise IntrospectionError(
            f"{builder!r} does not support introspection"
        )
    return builder


def node_kind(builder: Any, node: Any) -> Kind:
    """Return the kind of node as reported by builder."""
    return _introspector(builder).node_kind(node)


def node_initargs(builder: Any, node: Any) -> Initargs:
    """Return the initargs of node as reported by builder."""
    return dict(_introspector(builder).node_initargs(node))


def node_relations(builder: Any, node: Any) -> List[Relation]:
    """Return the relations of node as normalized Relation objects."""
    relations = []
    for entry in _introspector(builder).node_relations(node):
        try:
            relations.append(normalize_relation(entry))
        except CardinalityError as e:
            raise IntrospectionError(
                f"{builder!r} reported a malformed relation {entry!r}"
            ) from e
    return relations


def node_relation(builder: Any, relation: RelationLike, node: Any) -> Tuple[List[Any], List[RelationArgs]]:
    """Return (right_nodes, relation_args) for relation on node.

    Raises:
        IntrospectionError: If the two sequences differ in length
    """
    relation = normalize_relation(relation)
    rights, args = _introspector(builder).node_relation(relation, node)
    rights = list(rights)
    args = [dict(each or {}) for each in args]
    if len(rights) != len(args):
        raise IntrospectionError(
            f"{builder!r} returned {len(rights)} right nodes but "
            f"{len(args)} argument mappings for relation {relation.name!r}"
        )
    return rights, args
