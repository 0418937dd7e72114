"""Unit tests for the graph model, wire conditions and factories."""

from __future__ import annotations

import pytest
from pydantic import ValidationError

from flowform.models.factory import (
    CounterIdGenerator,
    UuidIdGenerator,
    create_edge,
    create_entry_node,
    create_exit_node,
    create_question_node,
)
from flowform.models.graph import (
    FlowEdge,
    FlowGraph,
    MultiOptionMatch,
    ScalarCompare,
    SingleOptionMatch,
    condition_from_wire,
    condition_to_wire,
)
from flowform.utils.exceptions import ConditionFormatError


class TestConditionFromWire:
    def test_option_ids_take_precedence(self):
        condition = condition_from_wire({
            "comparator": "equals",
            "operand": "x",
            "option_id": "a",
            "option_ids": ["a", "b"],
            "match_mode": "all",
        })
        assert condition == MultiOptionMatch(option_ids=["a", "b"], match_mode="all")

    def test_empty_option_ids_still_select_multi(self):
        condition = condition_from_wire({"comparator": "equals", "option_ids": []})
        assert isinstance(condition, MultiOptionMatch)
        assert condition.match_mode == "any"

    def test_option_id_over_scalar(self):
        condition = condition_from_wire({"comparator": "equals", "operand": "Yes", "optionId": "opt-1"})
        assert condition == SingleOptionMatch(option_id="opt-1")

    def test_scalar_comparison(self):
        condition = condition_from_wire({"comparator": "greater_than", "operand": 7})
        assert condition == ScalarCompare(comparator="greater_than", operand=7)

    def test_unknown_comparator_rejected(self):
        with pytest.raises(ConditionFormatError):
            condition_from_wire({"comparator": "between", "operand": 1})

    def test_unknown_match_mode_rejected(self):
        with pytest.raises(ConditionFormatError):
            condition_from_wire({"option_ids": ["a"], "match_mode": "some"})

    def test_to_wire_keeps_option_ids(self):
        wire = condition_to_wire(MultiOptionMatch(option_ids=["a"], match_mode="exactly"))
        assert wire["option_ids"] == ["a"]
        assert wire["match_mode"] == "exactly"
        assert condition_to_wire(ScalarCompare(comparator="contains", operand="x")) == {
            "comparator": "contains",
            "operand": "x",
        }


class TestFlowEdge:
    def test_wire_condition_is_converted(self):
        edge = FlowEdge.model_validate({
            "id": "e",
            "source_node_id": "a",
            "target_node_id": "b",
            "condition": {"comparator": "contains", "operand": "hi"},
        })
        assert edge.condition == ScalarCompare(comparator="contains", operand="hi")
        assert not edge.is_default

    def test_tagged_condition_is_accepted(self):
        edge = FlowEdge.model_validate({
            "id": "e",
            "source_node_id": "a",
            "target_node_id": "b",
            "condition": {"match": "single_option", "option_id": "x"},
        })
        assert edge.condition == SingleOptionMatch(option_id="x")

    def test_bad_wire_condition_is_a_validation_error(self):
        with pytest.raises(ValidationError):
            FlowEdge.model_validate({
                "id": "e",
                "source_node_id": "a",
                "target_node_id": "b",
                "condition": {"comparator": "nope"},
            })

    def test_default_edge(self):
        assert FlowEdge(id="e", source_node_id="a", target_node_id="b").is_default


class TestFlowGraph:
    def test_nodes_are_discriminated_by_kind(self, yes_no_graph):
        kinds = {n.id: type(n).__name__ for n in yes_no_graph.nodes}
        assert kinds == {"start": "EntryNode", "q1": "QuestionNode", "A": "ExitNode", "B": "ExitNode"}

    def test_lookups(self, yes_no_graph):
        assert yes_no_graph.entry_node().id == "start"
        assert [n.id for n in yes_no_graph.question_nodes()] == ["q1"]
        assert [e.id for e in yes_no_graph.outgoing_edges("q1")] == ["e1", "e2"]
        assert [e.id for e in yes_no_graph.incoming_edges("q1")] == ["e0"]
        assert yes_no_graph.get_node("missing") is None

    def test_graph_is_frozen(self, yes_no_graph):
        with pytest.raises(ValidationError):
            yes_no_graph.nodes = []

    def test_unknown_question_kind_rejected(self):
        with pytest.raises(ValidationError):
            FlowGraph.model_validate({
                "nodes": [{"id": "q", "kind": "question", "payload": {"question_kind": "slider"}}],
            })


class TestFactories:
    def test_counter_ids_are_deterministic(self):
        new_id = CounterIdGenerator()
        assert create_entry_node(new_id).id == "entry-1"
        assert create_exit_node(new_id).id == "exit-2"

    def test_uuid_ids_are_unique(self):
        new_id = UuidIdGenerator()
        assert new_id("edge") != new_id("edge")
        assert new_id("edge").startswith("edge-")

    def test_question_defaults_per_kind(self):
        new_id = CounterIdGenerator()
        yes_no = create_question_node(new_id, "yes_no")
        assert [o.text for o in yes_no.payload.options] == ["Yes", "No"]
        assert yes_no.payload.required is True

        nps = create_question_node(new_id, "nps")
        assert (nps.payload.min_value, nps.payload.max_value) == (0, 10)

        rating = create_question_node(new_id, "rating")
        assert (rating.payload.min_value, rating.payload.max_value) == (1, 5)

        dropdown = create_question_node(new_id, "dropdown")
        assert len(dropdown.payload.options) == 3
        assert len({o.id for o in dropdown.payload.options}) == 3

    def test_create_edge(self):
        new_id = CounterIdGenerator(start=7)
        edge = create_edge(new_id, "a", "b", condition=SingleOptionMatch(option_id="x"), output_slot="x")
        assert edge.id == "edge-7"
        assert edge.output_slot == "x"
        assert not edge.is_default
