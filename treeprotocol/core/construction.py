"""Construction helpers for treeprotocol.

Thin functions over the Builder interface. Producers should call these
rather than the builder methods directly: they normalize relations and
mappings, and make_finish_relations() is the single step nested
construction reduces to.
"""

from collections.abc import Iterable as IterableABC
from typing import Any, Iterable, List, Mapping, Optional, Union

from ..errors import RelationSpecError
from .builder import Builder
from .node import (
    Kind,
    Multiplicity,
    RelationLike,
    RelationSpec,
    normalize_relation,
    resolve_right,
    spread_args,
)


def make(builder: Builder, kind: Kind, initargs: Optional[Mapping[str, Any]] = None) -> Any:
    """Create an unfinished node of kind."""
    return builder.make(kind, dict(initargs or {}))


def relate(builder: Builder,
           relation: RelationLike,
           left: Any,
           right: Any,
           args: Optional[Mapping[str, Any]] = None) -> Any:
    """Relate right to left and return the resulting left node."""
    return builder.relate(normalize_relation(relation), left, right, dict(args or {}))


def finish(builder: Builder, kind: Kind, node: Any) -> Any:
    """Finish node and return the finished value."""
    return builder.finish(kind, node)


def make_finish(builder: Builder, kind: Kind, initargs: Optional[Mapping[str, Any]] = None) -> Any:
    """Create and immediately finish a leaf node."""
    return finish(builder, kind, make(builder, kind, initargs))


SpecLike = Union[RelationSpec, tuple]


def _as_spec(spec: SpecLike) -> RelationSpec:
    if isinstance(spec, RelationSpec):
        return spec
    if isinstance(spec, tuple) and len(spec) in (2, 3):
        return RelationSpec(*spec)
    raise RelationSpecError(f"Not a relation spec: {spec!r}")


def _right_nodes(spec: RelationSpec) -> List[Any]:
    """Return the right values of spec as a list, checked against cardinality."""
    relation = spec.normalized
    multiplicity = relation.cardinality.multiplicity
    right = spec.right

    if multiplicity is Multiplicity.ONE:
        if right is None:
            raise RelationSpecError(
                f"Relation {relation.name!r} requires exactly one right node"
            )
        return [right]
    if multiplicity is Multiplicity.OPTIONAL:
        return [] if right is None else [right]

    if right is None:
        return []
    if isinstance(right, (str, bytes)) or not isinstance(right, IterableABC):
        raise RelationSpecError(
            f"Relation {relation.name!r} with cardinality {relation.cardinality} "
            f"requires an iterable of right nodes, got {right!r}"
        )
    return list(right)


def make_finish_relations(builder: Builder,
                          kind: Kind,
                          initargs: Optional[Mapping[str, Any]],
                          relations: Iterable[SpecLike]) -> Any:
    """Make a node, establish every relation in relations, then finish it.

    Args:
        builder: Builder to construct with
        kind: Kind of the node
        initargs: Initargs of the node
        relations: RelationSpec objects or (relation, right[, args]) tuples

    Returns:
        The finished node

    Raises:
        RelationSpecError: If a spec's right values do not fit its cardinality

    Example:
        >>> make_finish_relations(builder, "operator", {}, [
        ...     ("operand", [make_finish(builder, "literal", {"value": 5}),
        ...                  make_finish(builder, "literal", {"value": 6})]),
        ... ])
    """
    node = make(builder, kind, initargs)
    for spec in map(_as_spec, relations):
        relation = spec.normalized
        rights = _right_nodes(spec)
        all_args = spread_args(spec.args, len(rights))
        key = relation.cardinality.key
        for right, args in zip(rights, all_args):
            if key is not None and key not in args:
                raise RelationSpecError(
                    f"Keyed relation {relation.name!r} requires argument {key!r}"
                )
            node = builder.relate(relation, node, resolve_right(right), args)
    return finish(builder, kind, node)
