"""Node and relation data model for treeprotocol.

Nodes themselves are opaque: their representation belongs entirely to the
builder that created them. This module only defines the vocabulary shared
by every builder - kinds, initargs, relations and their cardinalities - and
the relation specs consumed by make_finish_relations().
"""

from dataclasses import dataclass
from enum import Enum
from typing import Any, Callable, Dict, Hashable, Iterable, List, Mapping, NamedTuple, Optional, Tuple, Union

from ..errors import CardinalityError, InitargsError, RelationSpecError


Kind = Hashable
Initargs = Dict[str, Any]
RelationArgs = Dict[str, Any]

# Reserved initarg carrying the input range a node was produced from
BOUNDS = "bounds"


class Multiplicity(Enum):
    """How many right nodes a relation may hold."""
    OPTIONAL = "?"   # zero or one
    ONE = "1"        # exactly one
    MANY = "*"       # any number, establishment order preserved
    KEYED = "map"    # any number, unique value for a key argument


@dataclass(frozen=True)
class Cardinality:
    """Multiplicity of a relation, plus the key name for keyed relations."""

    multiplicity: Multiplicity
    key: Optional[str] = None

    def __post_init__(self):
        if self.multiplicity is Multiplicity.KEYED and not self.key:
            raise CardinalityError("Keyed cardinality requires a key name")
        if self.multiplicity is not Multiplicity.KEYED and self.key is not None:
            raise CardinalityError(
                f"Only keyed cardinality takes a key, not {self.multiplicity.name}"
            )

    @property
    def is_single(self) -> bool:
        """True if the relation holds at most one right node."""
        return self.multiplicity in (Multiplicity.OPTIONAL, Multiplicity.ONE)

    @classmethod
    def parse(cls, value: Any) -> 'Cardinality':
        """Coerce a cardinality designator into a Cardinality.

        Accepts a Cardinality, a Multiplicity, one of the symbols
        "?", "1", "*", or a ("map", key) pair.

        Raises:
            CardinalityError: If value is not a cardinality designator
        """
        if isinstance(value, Cardinality):
            return value
        if isinstance(value, Multiplicity):
            if value is Multiplicity.KEYED:
                raise CardinalityError("Keyed cardinality requires a key name")
            return cls(value)
        if isinstance(value, tuple) and len(value) == 2 and value[0] == Multiplicity.KEYED.value:
            return cls(Multiplicity.KEYED, value[1])
        if isinstance(value, str):
            for multiplicity in (Multiplicity.OPTIONAL, Multiplicity.ONE, Multiplicity.MANY):
                if value == multiplicity.value:
                    return cls(multiplicity)
        raise CardinalityError(f"Not a cardinality designator: {value!r}")

    def __str__(self) -> str:
        if self.multiplicity is Multiplicity.KEYED:
            return f"(map {self.key})"
        return self.multiplicity.value


OPTIONAL = Cardinality(Multiplicity.OPTIONAL)
ONE = Cardinality(Multiplicity.ONE)
MANY = Cardinality(Multiplicity.MANY)


def keyed(key: str) -> Cardinality:
    """Cardinality of a relation whose right nodes are unique by args[key]."""
    return Cardinality(Multiplicity.KEYED, key)


@dataclass(frozen=True)
class Relation:
    """A relation name tagged with its cardinality."""

    name: str
    cardinality: Cardinality = MANY

    def __str__(self) -> str:
        return f"{self.name}{self.cardinality}"


RelationLike = Union[Relation, str, Tuple[str, Any]]


def normalize_relation(value: RelationLike) -> Relation:
    """Coerce a relation designator into a Relation.

    A bare name gets MANY cardinality; a (name, cardinality) pair has its
    cardinality parsed with Cardinality.parse().
    """
    if isinstance(value, Relation):
        return value
    if isinstance(value, str):
        return Relation(value)
    if isinstance(value, tuple) and len(value) == 2:
        name, cardinality = value
        return Relation(name, Cardinality.parse(cardinality))
    raise CardinalityError(f"Not a relation designator: {value!r}")


class Bounds(NamedTuple):
    """Half-open [start, end) range of input a node was built from."""
    start: int
    end: Optional[int] = None


def make_bounds(start: int, end: Optional[int] = None) -> Bounds:
    """Create a validated Bounds value for the reserved bounds initarg."""
    if start < 0:
        raise InitargsError(f"Bounds start cannot be negative: {start}")
    if end is not None and end < start:
        raise InitargsError(f"Bounds end {end} precedes start {start}")
    return Bounds(start, end)


class Deferred:
    """A right node whose construction is delayed until it is related.

    make_finish_relations() calls the producer only when the relation is
    established, so the child is built while its parent is in progress.
    """

    __slots__ = ("producer",)

    def __init__(self, producer: Callable[[], Any]):
        self.producer = producer

    def __call__(self) -> Any:
        return self.producer()

    def __repr__(self) -> str:
        return f"Deferred({self.producer!r})"


def deferred(producer: Callable[[], Any]) -> Deferred:
    """Wrap a zero-argument callable as a right-node producer."""
    return Deferred(producer)


@dataclass(frozen=True)
class RelationSpec:
    """One relation to establish in make_finish_relations().

    Attributes:
        relation: Relation name, (name, cardinality) pair or Relation
        right: A node for single cardinalities (None allowed for OPTIONAL),
            an iterable of nodes for MANY/KEYED. Elements may be Deferred.
        args: One mapping applied to every right node, or a sequence of
            mappings with one entry per right node
    """

    relation: RelationLike
    right: Any
    args: Union[None, Mapping[str, Any], Iterable[Mapping[str, Any]]] = None

    @property
    def normalized(self) -> Relation:
        return normalize_relation(self.relation)


def resolve_right(value: Any) -> Any:
    """Produce the node for a right value, calling Deferred producers."""
    if isinstance(value, Deferred):
        return value()
    return value


def spread_args(args: Any, count: int) -> List[RelationArgs]:
    """Expand a spec's args into one mapping per right node."""
    if args is None:
        return [{} for _ in range(count)]
    if isinstance(args, Mapping):
        return [dict(args) for _ in range(count)]
    expanded = [dict(each or {}) for each in args]
    if len(expanded) != count:
        raise RelationSpecError(
            f"Got {len(expanded)} relation argument mappings for {count} right nodes"
        )
    return expanded
