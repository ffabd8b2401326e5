"""Generic tree walking for treeprotocol.

walk() drives a user-supplied visit function over any tree whose builder
implements Introspector. The visit function controls recursion itself: it
receives a recurse callback and decides whether, where and with which
function to descend.

A visit function may be paired with a peek function (see peeking()). Peek
runs before a node is introspected and may skip the node, let it through,
substitute a different node with explicit kind/initargs/relations, or
switch to another builder for the node and its descendants.
"""

import logging
from dataclasses import dataclass
from typing import Any, Callable, Iterable, List, Optional, Sequence, Union

from ..config import WalkConfig, ensure_valid
from ..errors import PeekResultError, WalkDepthError
from .introspection import node_initargs, node_kind, node_relation, node_relations
from .node import Initargs, Kind, Relation, RelationArgs, RelationLike, normalize_relation

logger = logging.getLogger(__name__)


# Peek results

@dataclass(frozen=True)
class Skip:
    """Suppress the node: no introspection, no visit."""
    pass


@dataclass(frozen=True)
class Continue:
    """Process the node normally, optionally through another builder."""
    builder: Optional[Any] = None


@dataclass(frozen=True)
class Replace:
    """Process node in place of the peeked one with the given structure.

    The peeked node's builder is not asked for kind, initargs or relations.
    If builder is given, it is used for node and its descendants.
    """
    node: Any
    kind: Kind
    initargs: Initargs
    relations: Sequence[RelationLike]
    builder: Optional[Any] = None


PeekResult = Union[Skip, Continue, Replace]

SKIP = Skip()
CONTINUE = Continue()


def coerce_peek_result(value: Any) -> PeekResult:
    """Turn the return value of a peek function into a PeekResult.

    Besides the tagged variants, the untagged shapes are accepted:
    None, False or an empty tuple or list skip, True continues,
    (True, builder) continues with builder, and 4- or 5-tuples replace.

    Raises:
        PeekResultError: If value has none of these shapes
    """
    if isinstance(value, (Skip, Continue, Replace)):
        return value
    if value is None or value is False or (isinstance(value, (tuple, list)) and not value):
        return SKIP
    if value is True:
        return CONTINUE
    if isinstance(value, tuple):
        if len(value) == 2 and value[0] is True:
            return Continue(value[1])
        if len(value) in (4, 5):
            return Replace(*value)
    raise PeekResultError(f"Cannot interpret peek result {value!r}")


Visit = Callable[..., Any]
Peek = Callable[[Any, Optional[Relation], Optional[RelationArgs], Any], Any]


@dataclass(frozen=True)
class PeekingVisitor:
    """A visit function paired with a peek function."""
    peek: Peek
    visit: Visit

    def __call__(self, *args):
        return self.visit(*args)


def peeking(peek: Peek, visit: Visit) -> PeekingVisitor:
    """Pair visit with peek for use with walk().

    peek is called as peek(builder, relation, relation_args, node) before
    each node is processed. relation is the incoming Relation object, not
    its bare name: compare relation.name, and read relation.cardinality
    when the multiplicity matters. relation and relation_args are None
    for the root.
    """
    return PeekingVisitor(peek, visit)


@dataclass
class _Walk:
    """State of one walk() call."""
    config: WalkConfig
    nodes_visited: int = 0

    def visit_node(self,
                   builder: Any,
                   function: Visit,
                   relation: Optional[Relation],
                   relation_args: Optional[RelationArgs],
                   node: Any,
                   depth: int) -> Any:
        max_depth = self.config.max_depth
        if max_depth is not None and depth > max_depth:
            raise WalkDepthError(max_depth)

        if isinstance(function, PeekingVisitor):
            decision = coerce_peek_result(
                function.peek(builder, relation, relation_args, node)
            )
            visit = function.visit
        else:
            decision = CONTINUE
            visit = function

        if isinstance(decision, Skip):
            logger.debug("Peek skipped node at relation %s", relation)
            return None
        if isinstance(decision, Replace):
            logger.debug("Peek replaced node at relation %s", relation)
            if decision.builder is not None:
                builder = decision.builder
            node = decision.node
            kind = decision.kind
            initargs = dict(decision.initargs)
            relations = [normalize_relation(each) for each in decision.relations]
        else:
            if decision.builder is not None:
                builder = decision.builder
            kind = node_kind(builder, node)
            relations = node_relations(builder, node)
            initargs = node_initargs(builder, node)

        self.nodes_visited += 1

        def recurse(relations_filter: Optional[Iterable[RelationLike]] = None,
                    function_override: Optional[Visit] = None) -> List[Any]:
            return self.recurse(builder, node, relations, depth,
                                function_override or function, relations_filter)

        return visit(recurse, relation, relation_args, node, kind, relations, initargs)

    def recurse(self,
                builder: Any,
                node: Any,
                relations: List[Relation],
                depth: int,
                function: Visit,
                relations_filter: Optional[Iterable[RelationLike]]) -> List[Any]:
        if relations_filter is not None:
            if isinstance(relations_filter, (str, Relation)):
                relations_filter = [relations_filter]
            wanted = {normalize_relation(each).name for each in relations_filter}
            relations = [each for each in relations if each.name in wanted]

        results = []
        for relation in relations:
            rights, all_args = node_relation(builder, relation, node)
            children = [
                self.visit_node(builder, function, relation, args, right, depth + 1)
                for right, args in zip(rights, all_args)
            ]
            if relation.cardinality.is_single:
                results.append(children[0] if children else None)
            else:
                results.append(children)
        return results


def walk(builder: Any, function: Visit, root: Any, config: Optional[WalkConfig] = None) -> Any:
    """Walk the tree at root, calling function for visited nodes.

    function is called as

        function(recurse, relation, relation_args, node, kind, relations, initargs)

    where relation is the incoming Relation object (use relation.name for
    the name) and relation_args its args, both None for root. Calling
    recurse(relations_filter=None, function_override=None) visits the
    children of the current node and returns one entry per traversed
    relation, in reported order: the child's result for ONE/OPTIONAL
    relations (None if absent), a list of child results for MANY/KEYED
    relations. Children suppressed by a peek function contribute None.
    relations_filter is an iterable of relation names or Relation objects;
    a single name or Relation is accepted as well.

    Args:
        builder: Introspector for the tree (usually the builder that built it)
        function: Visit function, or a PeekingVisitor from peeking()
        root: Root node of the tree
        config: Optional WalkConfig

    Returns:
        What function returned for root (None if root was skipped)

    Raises:
        WalkDepthError: If config.max_depth is exceeded
        PeekResultError: If a peek function returns an unknown shape

    Example:
        >>> def count(recurse, relation, relation_args, node, kind, relations, initargs):
        ...     return 1 + sum(
        ...         sum(r) if isinstance(r, list) else (r or 0) for r in recurse())
        >>> walk(builder, count, root)
        3
    """
    config = config or WalkConfig()
    ensure_valid(config)
    logger.debug("Walking tree with %r", builder)
    state = _Walk(config)
    result = state.visit_node(builder, function, None, None, root, 0)
    logger.debug("Walk visited %d nodes", state.nodes_visited)
    return result
