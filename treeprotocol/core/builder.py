"""Builder abstraction for treeprotocol.

The Builder is what makes a producer independent of its result
representation. A parser written against this interface calls make(),
relate() and finish(); the concrete builder decides whether that produces
nested lists, frozen objects, or anything else.
"""

from abc import ABC, abstractmethod
from typing import Any, Callable, Optional, Sequence

from ..errors import CardinalityError, DuplicateKeyError
from .node import Initargs, Kind, Multiplicity, Relation, RelationArgs


class Builder(ABC):
    """Abstract builder for constructing one concrete tree representation.

    Only make(), finish() and relate() are required. The session hooks
    prepare(), wrap() and finish_session() have pass-through defaults and
    are run by with_builder() around a batch of construction calls.

    Callers must always continue with the value returned by relate() and
    finish(): a builder may mutate the node in place and return it, or
    return a new node.
    """

    @abstractmethod
    def make(self, kind: Kind, initargs: Initargs) -> Any:
        """Create a new, unfinished node of the given kind.

        Args:
            kind: Tag naming what sort of node to create
            initargs: Attribute data for the node

        Returns:
            The new node, with no relations yet

        Raises:
            UnknownKindError: If the builder does not recognize kind
            InitargsError: If initargs do not fit the kind
        """
        pass

    @abstractmethod
    def finish(self, kind: Kind, node: Any) -> Any:
        """Mark construction of node complete.

        Args:
            kind: Kind the node was created with
            node: The node to finish

        Returns:
            The finished node, possibly rewritten by the builder

        Raises:
            KindMismatchError: If kind is not the node's kind
        """
        pass

    @abstractmethod
    def relate(self, relation: Relation, left: Any, right: Any, args: RelationArgs) -> Any:
        """Establish relation from left to right.

        Args:
            relation: Normalized relation (name and cardinality)
            left: The node the relation starts from
            right: The related node
            args: Relation arguments, e.g. the key of a keyed relation

        Returns:
            The resulting left node; may or may not be the same object

        Raises:
            CardinalityError: If relation already holds all it permits
        """
        pass

    # Session hooks - override to buffer, transact or substitute a builder

    def prepare(self) -> Any:
        """Open a construction session.

        Returns:
            Session state handed to wrap() and finish_session(). The
            default is the builder itself.
        """
        return self

    def wrap(self, state: Any, thunk: Callable[[Any], Any]) -> Any:
        """Run the session body.

        Override to run code around the body. The default just calls
        thunk(state).
        """
        return thunk(state)

    def finish_session(self, state: Any, result: Any, error: Optional[BaseException] = None) -> Any:
        """Close a construction session.

        Called exactly once per session, also when the body raised. In that
        case result is None, error is the exception, and the return value
        is ignored because the error propagates.

        Returns:
            The session result. The default returns result unchanged.
        """
        return result

    def __repr__(self) -> str:
        return f"{self.__class__.__name__}()"


def check_relate(relation: Relation,
                 existing: Sequence[RelationArgs],
                 args: RelationArgs,
                 check_cardinality: bool = True,
                 check_keys: bool = True) -> None:
    """Check that one more right node fits relation.

    Shared by the reference builders so ONE/OPTIONAL limits and keyed
    uniqueness are enforced the same way everywhere.

    Args:
        relation: The relation being established
        existing: Relation args of the right nodes already attached
        args: Relation args of the right node being attached
        check_cardinality: Enforce the single-node limit
        check_keys: Enforce key presence and uniqueness for KEYED

    Raises:
        CardinalityError: If the relation is full or the key is missing
        DuplicateKeyError: If a keyed relation already holds the key value
    """
    cardinality = relation.cardinality
    if check_cardinality and cardinality.is_single and existing:
        raise CardinalityError(
            f"Relation {relation.name!r} with cardinality {cardinality} "
            f"already has a right node"
        )
    if check_keys and cardinality.multiplicity is Multiplicity.KEYED:
        key = cardinality.key
        if key not in args:
            raise CardinalityError(
                f"Keyed relation {relation.name!r} requires argument {key!r}"
            )
        value = args[key]
        if any(other.get(key) == value for other in existing):
            raise DuplicateKeyError(relation.name, key, value)
