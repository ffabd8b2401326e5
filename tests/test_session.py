"""Tests for construction sessions and the current builder."""

import pytest

from treeprotocol import (
    Builder,
    ListBuilder,
    NoActiveBuilderError,
    UnknownKindError,
    builder_session,
    current_builder,
    make_finish,
    with_builder,
)
from treeprotocol.testing import RecordingBuilder


class TransactionalBuilder(ListBuilder):
    """List builder that tracks its session hooks."""

    def __init__(self):
        super().__init__()
        self.events = []

    def prepare(self):
        self.events.append("prepare")
        return self

    def wrap(self, state, thunk):
        self.events.append("wrap:enter")
        try:
            return thunk(state)
        finally:
            self.events.append("wrap:exit")

    def finish_session(self, state, result, error=None):
        self.events.append(("finish", error is not None))
        if error is None:
            return {"committed": result}
        return None


class TestWithBuilder:
    """Session lifecycle guarantees."""

    def test_default_hooks_return_body_result(self):
        result = with_builder(ListBuilder(), lambda b: make_finish(b, "literal", {"value": 5}))
        assert result == ["literal", {}, {"value": 5}]

    def test_hooks_run_in_order(self):
        builder = TransactionalBuilder()
        result = with_builder(builder, lambda b: make_finish(b, "leaf", {}))
        assert builder.events == ["prepare", "wrap:enter", "wrap:exit", ("finish", False)]
        assert result == {"committed": ["leaf", {}, {}]}

    def test_close_runs_once_on_error(self):
        builder = TransactionalBuilder()

        def body(b):
            raise ValueError("boom")

        with pytest.raises(ValueError, match="boom"):
            with_builder(builder, body)
        assert builder.events.count(("finish", True)) == 1
        assert ("finish", False) not in builder.events

    def test_builder_error_reaches_close(self):
        class StrictBuilder(TransactionalBuilder):
            def make(self, kind, initargs):
                if kind != "known":
                    raise UnknownKindError(kind, ["known"])
                return super().make(kind, initargs)

        builder = StrictBuilder()
        with pytest.raises(UnknownKindError):
            with_builder(builder, lambda b: make_finish(b, "other", {}))
        assert builder.events[-1] == ("finish", True)

    @pytest.mark.parametrize("fails", [False, True])
    def test_recording_builder_sessions_balanced(self, fails):
        recorder = RecordingBuilder()

        def body(b):
            make_finish(b, "leaf", {})
            if fails:
                raise RuntimeError("body failed")
            return "done"

        if fails:
            with pytest.raises(RuntimeError):
                with_builder(recorder, body)
        else:
            assert with_builder(recorder, body) == "done"

        assert recorder.sessions.opened == 1
        assert recorder.sessions.closed == 1
        assert recorder.sessions.balanced
        assert len(recorder.sessions.errors) == (1 if fails else 0)
        assert recorder.operations() == ["make", "finish"]

    def test_recording_builder_failed_prepare_opens_nothing(self):
        class UnavailableBuilder(ListBuilder):
            def prepare(self):
                raise ConnectionError("store unavailable")

        recorder = RecordingBuilder(UnavailableBuilder())
        with pytest.raises(ConnectionError):
            with_builder(recorder, lambda b: make_finish(b, "leaf", {}))

        assert recorder.sessions.opened == 0
        assert recorder.sessions.closed == 0
        assert recorder.sessions.balanced
        assert recorder.calls == []

    def test_decorator_form(self):
        @builder_session(ListBuilder())
        def tree(b):
            return make_finish(b, "leaf", {})

        assert tree == ["leaf", {}, {}]


class TestCurrentBuilder:
    """The current builder is bound during sessions only."""

    def test_no_session(self):
        with pytest.raises(NoActiveBuilderError):
            current_builder()

    def test_bound_to_state(self):
        builder = ListBuilder()
        seen = with_builder(builder, lambda b: current_builder())
        assert seen is builder

    def test_nested_sessions_restore(self):
        outer = ListBuilder()
        inner = ListBuilder()

        def outer_body(b):
            inner_seen = with_builder(inner, lambda _: current_builder())
            return inner_seen, current_builder()

        inner_seen, outer_seen = with_builder(outer, outer_body)
        assert inner_seen is inner
        assert outer_seen is outer

    def test_unbound_after_error(self):
        with pytest.raises(KeyError):
            with_builder(ListBuilder(), lambda b: {}["missing"])
        with pytest.raises(NoActiveBuilderError):
            current_builder()

    def test_recording_builder_state_is_recorder(self):
        recorder = RecordingBuilder()
        assert with_builder(recorder, lambda b: current_builder()) is recorder


class TestBuilderDefaults:
    """Default session hooks of the Builder base class."""

    def test_defaults(self):
        class Minimal(Builder):
            def make(self, kind, initargs):
                return (kind, initargs)

            def finish(self, kind, node):
                return node

            def relate(self, relation, left, right, args):
                return left

        builder = Minimal()
        assert builder.prepare() is builder
        assert builder.wrap("state", lambda s: s + "!") == "state!"
        assert builder.finish_session(builder, 42) == 42
        assert with_builder(builder, lambda b: make_finish(b, "x", {"a": 1})) == ("x", {"a": 1})
