"""Tests for the construction helpers.

Both reference builders are exercised; tests never assume relate() mutates
in place and always continue with the returned node.
"""

import pytest

from treeprotocol import (
    CardinalityError,
    ConstructionError,
    DuplicateKeyError,
    KindMismatchError,
    ListBuilder,
    MANY,
    ObjectBuilder,
    ONE,
    OPTIONAL,
    Relation,
    RelationSpec,
    RelationSpecError,
    deferred,
    finish,
    keyed,
    make,
    make_bounds,
    make_finish,
    make_finish_relations,
    node_initargs,
    node_kind,
    node_relation,
    node_relations,
    relate,
)
from treeprotocol.testing import RecordingBuilder


@pytest.fixture(params=["list", "object"])
def builder(request):
    if request.param == "list":
        return ListBuilder()
    return ObjectBuilder()


class TestRoundTrip:
    """Kind and initargs survive construction."""

    def test_kind_and_initargs(self, builder):
        initargs = {"value": 5, "bounds": make_bounds(0, 1)}
        node = make_finish(builder, "literal", initargs)
        assert node_kind(builder, node) == "literal"
        assert node_initargs(builder, node) == initargs

    def test_initargs_are_copied(self, builder):
        initargs = {"value": 5}
        node = make_finish(builder, "literal", initargs)
        initargs["value"] = 6
        assert node_initargs(builder, node) == {"value": 5}

    def test_fresh_node_has_no_relations(self, builder):
        node = make(builder, "operator", {})
        assert node_relations(builder, node) == []


class TestRelate:
    """Relation establishment and cardinality enforcement."""

    def test_relation_fidelity(self, builder):
        left = make(builder, "operator", {})
        right = make_finish(builder, "literal", {"value": 1})
        left = relate(builder, "operand", left, right, {"position": 0})
        left = finish(builder, "operator", left)

        rights, args = node_relation(builder, "operand", left)
        assert len(rights) == 1
        assert node_initargs(builder, rights[0]) == {"value": 1}
        assert args == [{"position": 0}]

    def test_many_accumulates(self, builder):
        left = make(builder, "operator", {})
        for value in range(3):
            left = relate(builder, "operand", left, make_finish(builder, "literal", {"value": value}))
        left = finish(builder, "operator", left)

        rights, args = node_relation(builder, "operand", left)
        assert [node_initargs(builder, r)["value"] for r in rights] == [0, 1, 2]
        assert args == [{}, {}, {}]

    def test_second_one_fails(self, builder):
        left = make(builder, "if", {})
        left = relate(builder, ("test", ONE), left, make_finish(builder, "literal", {"value": True}))
        with pytest.raises(CardinalityError):
            relate(builder, ("test", ONE), left, make_finish(builder, "literal", {"value": False}))

    def test_second_optional_fails(self, builder):
        left = make(builder, "if", {})
        left = relate(builder, ("else", OPTIONAL), left, make_finish(builder, "block", {}))
        with pytest.raises(CardinalityError):
            relate(builder, ("else", OPTIONAL), left, make_finish(builder, "block", {}))

    def test_keyed_duplicate_fails(self, builder):
        left = make(builder, "record", {})
        relation = ("fields", ("map", "name"))
        left = relate(builder, relation, left, make_finish(builder, "field", {}), {"name": "a"})
        left = relate(builder, relation, left, make_finish(builder, "field", {}), {"name": "b"})
        with pytest.raises(DuplicateKeyError) as info:
            relate(builder, relation, left, make_finish(builder, "field", {}), {"name": "a"})
        assert info.value.value == "a"

    def test_keyed_requires_key(self, builder):
        left = make(builder, "record", {})
        with pytest.raises(CardinalityError):
            relate(builder, Relation("fields", keyed("name")), left, make_finish(builder, "field", {}))

    def test_cardinality_change_fails(self, builder):
        left = make(builder, "operator", {})
        left = relate(builder, ("operand", ONE), left, make_finish(builder, "literal", {}))
        with pytest.raises(ConstructionError):
            relate(builder, ("operand", MANY), left, make_finish(builder, "literal", {}))

    def test_finish_kind_mismatch(self, builder):
        node = make(builder, "literal", {"value": 1})
        with pytest.raises(KindMismatchError) as info:
            finish(builder, "operator", node)
        assert info.value.expected == "operator"
        assert info.value.actual == "literal"


class TestMakeFinishRelations:
    """The composed construction step."""

    def test_operator_scenario(self, builder):
        five = make_finish(builder, "literal", {"value": 5})
        six = make_finish(builder, "literal", {"value": 6})
        root = make_finish_relations(builder, "operator", {}, [("operand", [five, six])])

        assert node_relations(builder, root) == [Relation("operand", MANY)]
        rights, args = node_relation(builder, "operand", root)
        assert [node_initargs(builder, r) for r in rights] == [{"value": 5}, {"value": 6}]
        assert args == [{}, {}]

    def test_single_relations(self, builder):
        test = make_finish(builder, "literal", {"value": True})
        root = make_finish_relations(builder, "if", {}, [
            RelationSpec(("test", "1"), test),
            RelationSpec(("else", "?"), None),
        ])
        relations = node_relations(builder, root)
        assert [r.name for r in relations] == ["test"]
        rights, _ = node_relation(builder, ("test", "1"), root)
        assert len(rights) == 1

    def test_one_without_right_fails(self, builder):
        with pytest.raises(RelationSpecError):
            make_finish_relations(builder, "if", {}, [(("test", "1"), None)])

    def test_many_requires_iterable(self, builder):
        with pytest.raises(RelationSpecError):
            make_finish_relations(builder, "operator", {}, [("operand", 5)])

    def test_empty_many_is_legal(self, builder):
        root = make_finish_relations(builder, "block", {}, [("statements", [])])
        assert node_relations(builder, root) == []

    def test_per_right_args(self, builder):
        children = [make_finish(builder, "item", {"n": n}) for n in range(2)]
        root = make_finish_relations(builder, "list", {}, [
            ("items", children, [{"index": 0}, {"index": 1}]),
        ])
        _, args = node_relation(builder, "items", root)
        assert args == [{"index": 0}, {"index": 1}]

    def test_shared_args(self, builder):
        children = [make_finish(builder, "item", {}) for _ in range(2)]
        root = make_finish_relations(builder, "list", {}, [("items", children, {"kind": "x"})])
        _, args = node_relation(builder, "items", root)
        assert args == [{"kind": "x"}, {"kind": "x"}]

    def test_args_length_mismatch(self, builder):
        children = [make_finish(builder, "item", {})]
        with pytest.raises(RelationSpecError):
            make_finish_relations(builder, "list", {}, [("items", children, [{}, {}])])

    def test_keyed_spec_requires_key(self, builder):
        child = make_finish(builder, "field", {})
        with pytest.raises(RelationSpecError):
            make_finish_relations(builder, "record", {}, [
                (("fields", ("map", "name")), [child], {}),
            ])

    def test_malformed_spec(self, builder):
        with pytest.raises(RelationSpecError):
            make_finish_relations(builder, "x", {}, ["operand"])

    def test_deferred_children_are_built_inside_parent(self):
        recorder = RecordingBuilder()
        make_finish_relations(recorder, "operator", {}, [
            ("operand", [deferred(lambda: make_finish(recorder, "literal", {"value": 1}))]),
        ])
        assert recorder.operations() == ["make", "make", "finish", "relate", "finish"]
        assert recorder.calls[0].arguments[0] == "operator"
