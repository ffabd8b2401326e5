"""High-level API for treeprotocol.

Simple functional interfaces over walk() and the construction helpers for
the common cases: snapshotting a built tree, copying it into another
representation, and counting or searching its nodes.
"""

from dataclasses import dataclass, field
from typing import Any, Callable, List, Optional, Tuple

from .config import WalkConfig
from .core.builder import Builder
from .core.construction import make_finish_relations
from .core.node import Initargs, Kind, Relation, RelationArgs, RelationSpec
from .core.session import with_builder
from .core.walker import Visit, peeking, walk


def build_tree(builder: Builder, body: Callable[[Any], Any]) -> Any:
    """Run body in a session of builder and return the session result.

    Example:
        >>> build_tree(ListBuilder(), lambda b: build(node("literal", value=5), b))
        ['literal', {}, {'value': 5}]
    """
    return with_builder(builder, body)


def _flatten(relation: Relation, result: Any) -> List[Any]:
    """Child results of one relation as a list without suppressed entries."""
    if relation.cardinality.is_single:
        result = [result]
    return [each for each in result if each is not None]


@dataclass
class UnbuiltNode:
    """Representation-independent snapshot of a built node.

    Attributes:
        kind: Node kind
        initargs: Node initargs
        relations: (relation, [(child, relation_args), ...]) in reported order
        node: The original node
    """

    kind: Kind
    initargs: Initargs
    relations: List[Tuple[Relation, List[Tuple['UnbuiltNode', RelationArgs]]]] = field(default_factory=list)
    node: Any = field(default=None, repr=False, compare=False)

    def children(self, name: str) -> List['UnbuiltNode']:
        for relation, targets in self.relations:
            if relation.name == name:
                return [child for child, _ in targets]
        return []


def unbuild(builder: Any, root: Any, peek=None, config: Optional[WalkConfig] = None) -> Optional[UnbuiltNode]:
    """Snapshot the tree at root as nested UnbuiltNode objects.

    Args:
        builder: Introspector for the tree
        root: Root node
        peek: Optional peek function applied during the walk
        config: Optional WalkConfig

    Returns:
        The root snapshot, or None if peek skipped the root
    """
    def visit(recurse, relation, relation_args, node, kind, relations, initargs):
        snapshot = UnbuiltNode(kind, initargs, node=node)
        for child_relation, result in zip(relations, recurse()):
            snapshot.relations.append((child_relation, _flatten(child_relation, result)))
        return snapshot, relation_args

    function: Visit = visit if peek is None else peeking(peek, visit)
    result = walk(builder, function, root, config)
    return None if result is None else result[0]


def rebuild(source: Any,
            root: Any,
            target: Builder,
            peek=None,
            config: Optional[WalkConfig] = None) -> Any:
    """Copy the tree at root into the representation of target.

    The tree is walked with source and reconstructed bottom-up with
    make_finish_relations() inside a session of target. A peek function
    may drop, substitute or reinterpret nodes on the way.

    Returns:
        The root node built by target, or None if peek skipped the root
    """
    def body(builder):
        def visit(recurse, relation, relation_args, node, kind, relations, initargs):
            specs = []
            for child_relation, result in zip(relations, recurse()):
                built = _flatten(child_relation, result)
                if child_relation.cardinality.is_single:
                    if not built:
                        continue
                    right, args = built[0]
                else:
                    right = [child for child, _ in built]
                    args = [child_args for _, child_args in built]
                specs.append(RelationSpec(child_relation, right, args))
            return make_finish_relations(builder, kind, initargs, specs), relation_args

        function: Visit = visit if peek is None else peeking(peek, visit)
        result = walk(source, function, root, config)
        return None if result is None else result[0]

    return with_builder(target, body)


def count_nodes(builder: Any, root: Any, config: Optional[WalkConfig] = None) -> int:
    """Count the nodes of the tree at root."""
    def visit(recurse, relation, relation_args, node, kind, relations, initargs):
        total = 1
        for child_relation, result in zip(relations, recurse()):
            total += sum(_flatten(child_relation, result))
        return total

    return walk(builder, visit, root, config)


def find_nodes(builder: Any,
               root: Any,
               predicate: Callable[[Kind, Initargs], bool],
               config: Optional[WalkConfig] = None) -> List[Any]:
    """Return the nodes for which predicate(kind, initargs) is true.

    Nodes are returned in pre-order: parents before children, relations
    in reported order.
    """
    found: List[Any] = []

    def visit(recurse, relation, relation_args, node, kind, relations, initargs):
        if predicate(kind, initargs):
            found.append(node)
        recurse()

    walk(builder, visit, root, config)
    return found


def collect_kinds(builder: Any, root: Any, config: Optional[WalkConfig] = None) -> List[Kind]:
    """Return the kind of every node in pre-order."""
    kinds: List[Kind] = []

    def visit(recurse, relation, relation_args, node, kind, relations, initargs):
        kinds.append(kind)
        recurse()

    walk(builder, visit, root, config)
    return kinds
