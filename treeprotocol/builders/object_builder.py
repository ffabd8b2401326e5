"""Object builder: nodes as immutable objects, optionally schema-checked.

make() returns a mutable NodeDraft; finish() freezes it into a BuiltNode.
Relations can only be established on drafts, so the finished tree cannot be
changed behind its producer's back.

An ObjectBuilder may be given NodeSchema entries. The schemas form a
dispatch table keyed by kind: unknown kinds, missing or unexpected
initargs, undeclared relations and unsatisfied ONE relations are rejected.
Without schemas every kind is accepted.
"""

import logging
from dataclasses import dataclass, field
from typing import Any, Dict, FrozenSet, Iterable, List, Mapping, Optional, Tuple

from ..config import ValidationConfig, ensure_valid
from ..core.builder import Builder, check_relate
from ..core.introspection import Introspector
from ..core.node import (
    BOUNDS,
    Cardinality,
    Initargs,
    Kind,
    Multiplicity,
    Relation,
    RelationArgs,
)
from ..errors import (
    CardinalityError,
    ConstructionError,
    InitargsError,
    IntrospectionError,
    KindMismatchError,
    NodeFinishedError,
    UnknownKindError,
)

logger = logging.getLogger(__name__)


@dataclass(frozen=True)
class NodeSchema:
    """Shape of one node kind.

    Attributes:
        kind: Kind the schema describes
        required: Initargs every node of this kind must have
        optional: Initargs a node of this kind may have (bounds always may)
        relations: Relation name -> cardinality designator
        open_initargs: Accept initargs not listed in required/optional
    """

    kind: Kind
    required: FrozenSet[str] = frozenset()
    optional: FrozenSet[str] = frozenset()
    relations: Mapping[str, Any] = field(default_factory=dict)
    open_initargs: bool = False

    def __post_init__(self):
        object.__setattr__(self, "required", frozenset(self.required))
        object.__setattr__(self, "optional", frozenset(self.optional))
        object.__setattr__(self, "relations", {
            name: Cardinality.parse(cardinality)
            for name, cardinality in dict(self.relations).items()
        })

    def check_initargs(self, initargs: Initargs) -> None:
        missing = self.required - initargs.keys()
        if missing:
            raise InitargsError(
                f"Node of kind {self.kind!r} is missing initargs: {', '.join(sorted(missing))}"
            )
        if not self.open_initargs:
            allowed = self.required | self.optional | {BOUNDS}
            unexpected = initargs.keys() - allowed
            if unexpected:
                raise InitargsError(
                    f"Node of kind {self.kind!r} got unexpected initargs: "
                    f"{', '.join(sorted(unexpected))}"
                )

    def check_relation(self, relation: Relation) -> None:
        declared = self.relations.get(relation.name)
        if declared is None:
            raise ConstructionError(
                f"Node of kind {self.kind!r} has no relation {relation.name!r}"
            )
        if declared != relation.cardinality:
            raise CardinalityError(
                f"Relation {relation.name!r} of kind {self.kind!r} is declared "
                f"with cardinality {declared}, not {relation.cardinality}"
            )


@dataclass
class NodeDraft:
    """A node under construction."""

    kind: Kind
    initargs: Initargs
    relations: Dict[str, Tuple[Relation, List[Tuple[Any, RelationArgs]]]] = field(default_factory=dict)
    finished: bool = False


@dataclass(frozen=True)
class BuiltNode:
    """A finished, immutable node.

    relations holds (relation, ((right, args), ...)) pairs in establishment
    order; args are stored as tuples of (keyword, value) pairs.
    """

    kind: Kind
    initargs: Tuple[Tuple[str, Any], ...]
    relations: Tuple[Tuple[Relation, Tuple[Tuple[Any, Tuple[Tuple[str, Any], ...]], ...]], ...] = ()

    @property
    def attrs(self) -> Initargs:
        """Initargs as a fresh dict."""
        return dict(self.initargs)

    def children(self, name: str) -> List[Any]:
        """Right nodes of the relation called name (empty if absent)."""
        for relation, targets in self.relations:
            if relation.name == name:
                return [right for right, _ in targets]
        return []

    def __getitem__(self, name: str) -> Any:
        return dict(self.initargs)[name]


class ObjectBuilder(Builder, Introspector):
    """Builder and introspector for NodeDraft/BuiltNode objects.

    Example:
        >>> builder = ObjectBuilder([
        ...     NodeSchema("literal", required={"value"}),
        ...     NodeSchema("operator", relations={"operand": "*"}),
        ... ])
        >>> five = make_finish(builder, "literal", {"value": 5})
        >>> five["value"]
        5
    """

    def __init__(self,
                 schemas: Optional[Iterable[NodeSchema]] = None,
                 config: Optional[ValidationConfig] = None):
        self.config = config or ValidationConfig()
        ensure_valid(self.config)
        self.schemas: Optional[Dict[Kind, NodeSchema]] = None
        if schemas is not None:
            self.schemas = {schema.kind: schema for schema in schemas}

    def register(self, schema: NodeSchema) -> None:
        """Add schema to the kind table, enabling schema checks."""
        if self.schemas is None:
            self.schemas = {}
        self.schemas[schema.kind] = schema
        logger.debug("Registered schema for kind %r", schema.kind)

    def schema_for(self, kind: Kind) -> Optional[NodeSchema]:
        """Return the schema for kind, or None when schemas are not in use.

        Raises:
            UnknownKindError: If schemas are in use and kind has none
        """
        if self.schemas is None:
            return None
        try:
            return self.schemas[kind]
        except KeyError:
            raise UnknownKindError(kind, self.schemas.keys()) from None

    # Builder

    def make(self, kind: Kind, initargs: Initargs) -> NodeDraft:
        schema = self.schema_for(kind)
        if schema is not None and self.config.check_initargs:
            schema.check_initargs(initargs)
        return NodeDraft(kind, dict(initargs))

    def relate(self, relation: Relation, left: Any, right: Any, args: RelationArgs) -> NodeDraft:
        if isinstance(left, BuiltNode) or (isinstance(left, NodeDraft) and left.finished):
            raise NodeFinishedError(
                f"Cannot relate {relation.name!r} from a finished node of kind {left.kind!r}"
            )
        if not isinstance(left, NodeDraft):
            raise ConstructionError(f"Not an object builder node: {left!r}")
        if isinstance(right, NodeDraft):
            raise ConstructionError(
                f"Right node of kind {right.kind!r} must be finished before relating it"
            )

        schema = self.schema_for(left.kind)
        if schema is not None:
            schema.check_relation(relation)

        slot = left.relations.get(relation.name)
        if slot is None:
            slot = left.relations[relation.name] = (relation, [])
        elif slot[0].cardinality != relation.cardinality:
            raise CardinalityError(
                f"Relation {relation.name!r} was established with cardinality "
                f"{slot[0].cardinality}, not {relation.cardinality}"
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

    def finish(self, kind: Kind, node: Any) -> BuiltNode:
        if isinstance(node, BuiltNode):
            raise NodeFinishedError(f"Node of kind {node.kind!r} is already finished")
        if not isinstance(node, NodeDraft):
            raise ConstructionError(f"Not an object builder node: {node!r}")
        if node.finished:
            raise NodeFinishedError(f"Node of kind {node.kind!r} is already finished")
        if self.config.check_finish_kind and node.kind != kind:
            raise KindMismatchError(kind, node.kind)

        schema = self.schema_for(node.kind)
        if schema is not None and self.config.check_cardinality:
            for name, cardinality in schema.relations.items():
                if cardinality.multiplicity is Multiplicity.ONE and name not in node.relations:
                    raise CardinalityError(
                        f"Node of kind {node.kind!r} requires exactly one {name!r}"
                    )

        node.finished = True
        return BuiltNode(
            kind=node.kind,
            initargs=tuple(node.initargs.items()),
            relations=tuple(
                (relation, tuple((right, tuple(args.items())) for right, args in targets))
                for relation, targets in node.relations.values()
            ),
        )

    # Introspector

    def node_kind(self, node: Any) -> Kind:
        return self._known(node).kind

    def node_initargs(self, node: Any) -> Initargs:
        node = self._known(node)
        if isinstance(node, BuiltNode):
            return node.attrs
        return dict(node.initargs)

    def node_relations(self, node: Any) -> List[Relation]:
        node = self._known(node)
        if isinstance(node, BuiltNode):
            return [relation for relation, _ in node.relations]
        return [relation for relation, _ in node.relations.values()]

    def node_relation(self, relation: Relation, node: Any) -> Tuple[List[Any], List[RelationArgs]]:
        node = self._known(node)
        if isinstance(node, BuiltNode):
            for candidate, targets in node.relations:
                if candidate.name == relation.name:
                    return [right for right, _ in targets], [dict(args) for _, args in targets]
            return [], []
        slot = node.relations.get(relation.name)
        if slot is None:
            return [], []
        return [right for right, _ in slot[1]], [dict(args) for _, args in slot[1]]

    @staticmethod
    def _known(node: Any):
        if not isinstance(node, (BuiltNode, NodeDraft)):
            raise IntrospectionError(f"Not an object builder node: {node!r}")
        return node

    def __repr__(self) -> str:
        kinds = "open" if self.schemas is None else len(self.schemas)
        return f"ObjectBuilder(kinds={kinds})"
