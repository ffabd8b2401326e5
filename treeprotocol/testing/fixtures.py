"""Test fixtures for treeprotocol consumers.

RecordingBuilder lets a test suite observe exactly which protocol calls a
producer makes, in which order, and how sessions are opened and closed,
without depending on the representation the wrapped builder produces.
"""

from dataclasses import dataclass, field
from typing import Any, Callable, Dict, List, Optional, Tuple

from ..builders.forwarding import ForwardingBuilder
from ..builders.list_builder import ListBuilder
from ..core.builder import Builder
from ..core.node import Initargs, Kind, Relation, RelationArgs


@dataclass
class RecordedCall:
    """One protocol call seen by a RecordingBuilder."""
    operation: str
    arguments: Tuple[Any, ...]
    error: Optional[BaseException] = None


@dataclass
class SessionLog:
    """Session activity seen by a RecordingBuilder."""
    opened: int = 0
    closed: int = 0
    errors: List[BaseException] = field(default_factory=list)

    @property
    def balanced(self) -> bool:
        return self.opened == self.closed


class RecordingBuilder(ForwardingBuilder):
    """Forwarding builder that records every protocol call.

    The session state handed to the body is the recording builder itself,
    so construction calls made inside with_builder() are recorded too.

    Example:
        recorder = RecordingBuilder()
        with_builder(recorder, producer)
        assert recorder.operations() == ["make", "make", "finish", ...]
        assert recorder.sessions.balanced
    """

    def __init__(self, target: Optional[Builder] = None):
        super().__init__(target if target is not None else ListBuilder())
        self.calls: List[RecordedCall] = []
        self.sessions = SessionLog()

    def _record(self, operation: str, arguments: Tuple[Any, ...], call: Callable[[], Any]) -> Any:
        entry = RecordedCall(operation, arguments)
        self.calls.append(entry)
        try:
            return call()
        except Exception as e:
            entry.error = e
            raise

    def operations(self) -> List[str]:
        """Names of recorded operations, in call order."""
        return [call.operation for call in self.calls]

    def calls_to(self, operation: str) -> List[RecordedCall]:
        return [call for call in self.calls if call.operation == operation]

    def counts(self) -> Dict[str, int]:
        """Number of recorded calls per operation."""
        counts: Dict[str, int] = {}
        for call in self.calls:
            counts[call.operation] = counts.get(call.operation, 0) + 1
        return counts

    def reset(self) -> None:
        self.calls.clear()
        self.sessions = SessionLog()

    # Builder

    def make(self, kind: Kind, initargs: Initargs) -> Any:
        return self._record("make", (kind, dict(initargs)),
                            lambda: super(RecordingBuilder, self).make(kind, initargs))

    def finish(self, kind: Kind, node: Any) -> Any:
        return self._record("finish", (kind, node),
                            lambda: super(RecordingBuilder, self).finish(kind, node))

    def relate(self, relation: Relation, left: Any, right: Any, args: RelationArgs) -> Any:
        return self._record("relate", (relation, left, right, dict(args)),
                            lambda: super(RecordingBuilder, self).relate(relation, left, right, args))

    # Sessions

    def prepare(self) -> Any:
        state = super().prepare()
        self.sessions.opened += 1
        return (state, self)

    def wrap(self, state: Any, thunk: Callable[[Any], Any]) -> Any:
        target_state, recorder = state
        return super().wrap(target_state, lambda _: thunk(recorder))

    def finish_session(self, state: Any, result: Any, error: Optional[BaseException] = None) -> Any:
        self.sessions.closed += 1
        if error is not None:
            self.sessions.errors.append(error)
        target_state, _ = state
        return super().finish_session(target_state, result, error)
