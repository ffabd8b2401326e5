"""List builder: nodes as plain nested Python lists.

A node is the list [kind, relations, initargs] where relations is an
insertion-ordered dict mapping relation names to [cardinality, targets] and
targets is a list of (right, args) pairs. Nodes are mutated in place.

Mostly useful for debugging and tests: the result of any construction is a
plain literal that prints readably and compares with ==.
"""

from typing import Any, Dict, List, Optional, Sequence, Tuple

from ..config import ValidationConfig, ensure_valid
from ..core.builder import Builder, check_relate
from ..core.introspection import Introspector
from ..core.node import Initargs, Kind, Relation, RelationArgs
from ..errors import ConstructionError, KindMismatchError

KIND, RELATIONS, INITARGS = 0, 1, 2


def _check_node(node: Any) -> list:
    if not (isinstance(node, list) and len(node) == 3 and isinstance(node[RELATIONS], dict)):
        raise ConstructionError(f"Not a list builder node: {node!r}")
    return node


class ListBuilder(Builder, Introspector):
    """Builder and introspector for nested-list nodes.

    Example:
        >>> builder = ListBuilder()
        >>> five = make_finish(builder, "literal", {"value": 5})
        >>> op = make_finish_relations(builder, "operator", {}, [("operand", [five])])
        >>> to_literal(op)
        ['operator', {'operand': ['*', [[['literal', {}, {'value': 5}], {}]]]}, {}]
    """

    def __init__(self, config: Optional[ValidationConfig] = None):
        self.config = config or ValidationConfig()
        ensure_valid(self.config)

    # Builder

    def make(self, kind: Kind, initargs: Initargs) -> list:
        return [kind, {}, dict(initargs)]

    def finish(self, kind: Kind, node: Any) -> list:
        node = _check_node(node)
        if self.config.check_finish_kind and node[KIND] != kind:
            raise KindMismatchError(kind, node[KIND])
        return node

    def relate(self, relation: Relation, left: Any, right: Any, args: RelationArgs) -> list:
        left = _check_node(left)
        slot = left[RELATIONS].get(relation.name)
        if slot is None:
            slot = left[RELATIONS][relation.name] = [relation.cardinality, []]
        elif slot[0] != relation.cardinality:
            raise ConstructionError(
                f"Relation {relation.name!r} was established with cardinality "
                f"{slot[0]}, not {relation.cardinality}"
            )
        check_relate(
            relation,
            [existing for _, existing in slot[1]],
            args,
            check_cardinality=self.config.check_cardinality,
            check_keys=self.config.check_keys,
        )
        slot[1].append((right, dict(args)))
        return left

    # Introspector

    def node_kind(self, node: Any) -> Kind:
        return _check_node(node)[KIND]

    def node_initargs(self, node: Any) -> Initargs:
        return dict(_check_node(node)[INITARGS])

    def node_relations(self, node: Any) -> List[Relation]:
        return [
            Relation(name, cardinality)
            for name, (cardinality, _) in _check_node(node)[RELATIONS].items()
        ]

    def node_relation(self, relation: Relation, node: Any) -> Tuple[List[Any], List[RelationArgs]]:
        slot = _check_node(node)[RELATIONS].get(relation.name)
        if slot is None:
            return [], []
        targets = slot[1]
        return [right for right, _ in targets], [dict(args) for _, args in targets]


def to_literal(node: Any) -> Any:
    """Render a list builder node as a nested literal of builtins.

    Cardinalities become their symbols and relation targets become
    [right, args] lists, which makes the result easy to print or to compare
    against an expected value.
    """
    node = _check_node(node)
    relations: Dict[str, Sequence[Any]] = {}
    for name, (cardinality, targets) in node[RELATIONS].items():
        relations[name] = [
            str(cardinality),
            [[to_literal(right), dict(args)] for right, args in targets],
        ]
    return [node[KIND], relations, dict(node[INITARGS])]
