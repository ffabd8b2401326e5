"""Forwarding builder for treeprotocol.

ForwardingBuilder wraps another builder and passes every construction,
session and introspection call through to it. Subclasses override the
calls they want to observe or alter, which makes it the base for
middleware builders such as testing.RecordingBuilder.
"""

from typing import Any, Callable, List, Optional, Tuple

from ..core.builder import Builder
from ..core.introspection import Introspector, node_initargs, node_kind, node_relation, node_relations
from ..core.node import Initargs, Kind, Relation, RelationArgs


class ForwardingBuilder(Builder, Introspector):
    """Builder that forwards all protocol calls to a target builder.

    Introspection calls raise IntrospectionError if the target does not
    implement Introspector. Attributes not defined here are looked up on
    the target.
    """

    def __init__(self, target: Builder):
        """Initialize the forwarding builder.

        Args:
            target: The builder to forward to
        """
        self._target = target

    @property
    def target(self) -> Builder:
        return self._target

    def get_builder_chain(self) -> List[str]:
        """Class names from this builder down to the innermost target."""
        chain = []
        current: Any = self
        while current is not None:
            chain.append(type(current).__name__)
            current = getattr(current, "_target", None)
        return chain

    # Builder

    def make(self, kind: Kind, initargs: Initargs) -> Any:
        return self._target.make(kind, initargs)

    def finish(self, kind: Kind, node: Any) -> Any:
        return self._target.finish(kind, node)

    def relate(self, relation: Relation, left: Any, right: Any, args: RelationArgs) -> Any:
        return self._target.relate(relation, left, right, args)

    # Sessions: the target's state is what the body sees, so construction
    # inside the body goes to the target unless a subclass changes that.

    def prepare(self) -> Any:
        return self._target.prepare()

    def wrap(self, state: Any, thunk: Callable[[Any], Any]) -> Any:
        return self._target.wrap(state, thunk)

    def finish_session(self, state: Any, result: Any, error: Optional[BaseException] = None) -> Any:
        return self._target.finish_session(state, result, error)

    # Introspector

    def node_kind(self, node: Any) -> Kind:
        return node_kind(self._target, node)

    def node_initargs(self, node: Any) -> Initargs:
        return node_initargs(self._target, node)

    def node_relations(self, node: Any) -> List[Relation]:
        return node_relations(self._target, node)

    def node_relation(self, relation: Relation, node: Any) -> Tuple[List[Any], List[RelationArgs]]:
        return node_relation(self._target, relation, node)

    def __getattr__(self, name: str) -> Any:
        # Only reached for attributes not found normally
        if name == "_target":
            raise AttributeError(name)
        return getattr(self._target, name)

    def __repr__(self) -> str:
        return f"{self.__class__.__name__}({self._target!r})"
