"""Declarative shorthand for construction.

node() and rel() describe a tree as a NodeTemplate; build() materializes a
template through make_finish_relations() with any builder:

    tree = node("operator",
                rel("operand", node("literal", value=5), node("literal", value=6)))
    build(tree, ListBuilder())

Children are built depth-first, left to right, each one finished before it
is related to its parent.
"""

from dataclasses import dataclass, field
from typing import Any, Dict, List, Mapping, Optional, Sequence, Union

from .core.builder import Builder
from .core.construction import make_finish_relations
from .core.node import Relation, RelationLike, RelationSpec, normalize_relation
from .core.session import current_builder
from .errors import RelationSpecError


@dataclass(frozen=True)
class RelationTemplate:
    """A relation whose right nodes are templates or ready-made nodes."""
    relation: Relation
    children: Sequence[Any]
    args: Union[None, Mapping[str, Any], Sequence[Mapping[str, Any]]] = None


@dataclass(frozen=True)
class NodeTemplate:
    """Description of a node to be built."""
    kind: Any
    initargs: Dict[str, Any] = field(default_factory=dict)
    relations: Sequence[RelationTemplate] = ()


def rel(relation: RelationLike, *children: Any, args=None) -> RelationTemplate:
    """Describe a relation of a node template.

    Args:
        relation: Name, (name, cardinality) pair or Relation; default MANY
        *children: NodeTemplates or already built nodes
        args: Relation args for every child, or one mapping per child
    """
    relation = normalize_relation(relation)
    if relation.cardinality.is_single and len(children) > 1:
        raise RelationSpecError(
            f"Relation {relation.name!r} with cardinality {relation.cardinality} "
            f"takes at most one child, got {len(children)}"
        )
    return RelationTemplate(relation, tuple(children), args)


def node(kind: Any, *relations: RelationTemplate, **initargs: Any) -> NodeTemplate:
    """Describe a node with initargs and relations."""
    for each in relations:
        if not isinstance(each, RelationTemplate):
            raise RelationSpecError(f"Expected a rel(...) template, got {each!r}")
    return NodeTemplate(kind, dict(initargs), tuple(relations))


def build(template: Any, builder: Optional[Builder] = None) -> Any:
    """Materialize template with builder (default: the current builder).

    Values that are not NodeTemplates are returned unchanged, so built
    nodes can be mixed into templates.
    """
    if not isinstance(template, NodeTemplate):
        return template
    if builder is None:
        builder = current_builder()

    specs: List[RelationSpec] = []
    for relation in template.relations:
        children = [build(child, builder) for child in relation.children]
        if relation.relation.cardinality.is_single:
            right = children[0] if children else None
            args = relation.args
            if isinstance(args, Sequence) and not isinstance(args, Mapping):
                args = args[0] if args else None
        else:
            right = children
            args = relation.args
        specs.append(RelationSpec(relation.relation, right, args))
    return make_finish_relations(builder, template.kind, template.initargs, specs)
