"""Tests for the evaluation engine module."""

import math
from collections.abc import Sequence

import pytest

from ghx_engine._components import ComponentCategory, ComponentKind, ComponentOutputs, ComponentRegistry
from ghx_engine._errors import (
    ComponentFailedError,
    ComponentMessageError,
    ComponentNotFoundError,
    CycleError,
    MissingDependencyOutputError,
    MissingInputError,
    UnknownEvaluationNodeError,
)
from ghx_engine._eval_engine import EvaluationPlan, EvaluationResult, evaluate, gather_inputs
from ghx_engine._graph import Graph, MetaMap, Node, Wire
from ghx_engine._parse import parse
from ghx_engine._value import NULL, Boolean, CurveLine, List, Matrix, Number, Point, Value


def _recording_kind(name: str, calls: list[Sequence[Value]], optional: tuple[str, ...] = ()) -> ComponentKind:
    def run(inputs: Sequence[Value], meta: MetaMap) -> ComponentOutputs:
        calls.append(list(inputs))
        return {"R": Number(float(len(inputs)))}

    return ComponentKind(
        name=name,
        category=ComponentCategory.MATHS,
        guids=(),
        names=(name,),
        evaluate=run,
        outputs=("R",),
        optional_inputs=optional,
    )


def _registry(*kinds: ComponentKind) -> ComponentRegistry:
    registry = ComponentRegistry()
    registry.register_all(kinds)
    return registry


def _mass_addition_graph(wire_order: Sequence[int]) -> Graph:
    graph = Graph()
    for value in (1.0, 2.0, 3.0):
        node = Node(name="Number")
        node.add_input("Num", Number(value))
        graph.add_node(node)
    graph.add_node(Node(name="Mass Addition"))
    for source in wire_order:
        graph.add_wire(Wire(source, "Num", 3, "I"))
    return graph


class TestEvaluationPlan:
    """Tests for EvaluationPlan construction."""

    def test_order_and_sources(self) -> None:
        plan = EvaluationPlan.from_graph(_mass_addition_graph([2, 0, 1]))

        assert plan.order == (0, 1, 2, 3)
        assert plan.sources(3, "I") == ((0, "Num"), (1, "Num"), (2, "Num"))
        assert plan.sources(3, "missing") == ()

    def test_pins_are_declared_then_sorted_extras(self) -> None:
        graph = Graph()
        source = graph.add_node(Node(name="Pi"))
        target = Node(name="Addition")
        target.add_input("B")
        graph.add_node(target)
        graph.add_wire(Wire(source, "y", 1, "Z"))
        graph.add_wire(Wire(source, "y", 1, "A"))

        plan = EvaluationPlan.from_graph(graph)

        assert plan.pins(1) == ("B", "A", "Z")
        assert plan.pins(source) == ()

    def test_cycle(self) -> None:
        graph = Graph()
        graph.add_node(Node(name="Number"))
        graph.add_node(Node(name="Number"))
        graph.add_wire(Wire(0, "Num", 1, "Num"))
        graph.add_wire(Wire(1, "Num", 0, "Num"))

        with pytest.raises(CycleError) as exc_info:
            EvaluationPlan.from_graph(graph)

        assert exc_info.value.node_ids == (0, 1)


class TestGatherInputs:
    """Tests for per-pin input resolution priority."""

    def test_wire_beats_default(self) -> None:
        calls: list[Sequence[Value]] = []
        kind = _recording_kind("K", calls)
        graph = Graph()
        graph.add_node(Node(name="K"))
        node = Node(name="K")
        node.add_input("A", Number(9.0))
        graph.add_node(node)
        graph.add_wire(Wire(0, "R", 1, "A"))
        plan = EvaluationPlan.from_graph(graph)

        values = gather_inputs(node, kind, plan, {0: {"R": Number(1.0)}})

        assert values == [Number(1.0)]

    def test_optional_pin_becomes_null(self) -> None:
        kind = _recording_kind("K", [], optional=("A",))
        graph = Graph()
        node = Node(name="K")
        node.add_input("A")
        graph.add_node(node)

        assert gather_inputs(node, kind, EvaluationPlan.from_graph(graph), {}) == [NULL]

    def test_one_input_per_planned_pin(self) -> None:
        calls: list[Sequence[Value]] = []
        graph = Graph()
        graph.add_node(Node(name="K"))
        node = Node(name="K")
        node.add_input("A", Number(1.0))
        node.add_input("B", Number(2.0))
        graph.add_node(node)
        graph.add_wire(Wire(0, "R", 1, "Z"))
        plan = EvaluationPlan.from_graph(graph)

        evaluate(graph, _registry(_recording_kind("K", calls)), plan)

        assert [len(inputs) for inputs in calls] == [len(plan.pins(0)), len(plan.pins(1))] == [0, 3]
        assert calls[1] == [Number(1.0), Number(2.0), Number(0.0)]

    def test_missing_dependency_output(self) -> None:
        kind = _recording_kind("K", [])
        graph = Graph()
        graph.add_node(Node(name="K"))
        node = Node(name="K")
        graph.add_node(node)
        graph.add_wire(Wire(0, "nope", 1, "A"))

        with pytest.raises(MissingDependencyOutputError) as exc_info:
            gather_inputs(node, kind, EvaluationPlan.from_graph(graph), {0: {"R": Number(1.0)}})

        assert (exc_info.value.node_id, exc_info.value.dependency_node_id, exc_info.value.pin) == (1, 0, "nope")


class TestEvaluate:
    """Tests for the evaluate function."""

    def test_slider_feeds_number(self, slider_number_ghx: str) -> None:
        result = evaluate(parse(slider_number_ghx))

        assert result.outputs(0) == {"OUT": Number(3.0)}
        assert result.outputs(1) == {"Num": Number(3.0)}
        assert result.geometry == []

    def test_fan_in_is_independent_of_wire_order(self) -> None:
        first = evaluate(_mass_addition_graph([0, 1, 2]))
        second = evaluate(_mass_addition_graph([2, 1, 0]))

        assert first.outputs(3) == {"Pr": List((Number(1.0), Number(3.0), Number(6.0))), "R": Number(6.0)}
        assert first.node_outputs == second.node_outputs

    def test_slider_drives_line_in_archive(self, slider_line_archive: str) -> None:
        result = evaluate(parse(slider_line_archive))

        line = CurveLine((0.0, 0.0, 0.0), (2.0, 2.0, 2.0))
        assert result.value(1, "L") == line
        assert result.geometry == [line]

    def test_geometry_harvest_keeps_lists_whole(self, points_ghx: str) -> None:
        result = evaluate(parse(points_ghx))

        polyline = List((Point(0.0, 0.0, 0.0), Point(1.0, 2.0, 0.0)))
        assert result.value(3, "Pl") == polyline
        assert result.geometry == [
            Point(0.0, 0.0, 0.0),
            Point(1.0, 2.0, 0.0),
            CurveLine((0.0, 0.0, 0.0), (1.0, 2.0, 0.0)),
            polyline,
        ]

    def test_cycle_runs_nothing(self) -> None:
        calls: list[Sequence[Value]] = []
        graph = Graph()
        graph.add_node(Node(name="K"))
        graph.add_node(Node(name="K"))
        graph.add_wire(Wire(0, "R", 1, "A"))
        graph.add_wire(Wire(1, "R", 0, "A"))

        with pytest.raises(CycleError):
            evaluate(graph, _registry(_recording_kind("K", calls)))

        assert calls == []

    def test_missing_required_input(self) -> None:
        graph = Graph()
        node = Node(name="K")
        node.add_input("P")
        graph.add_node(node)

        with pytest.raises(MissingInputError) as exc_info:
            evaluate(graph, _registry(_recording_kind("K", [])))

        assert (exc_info.value.node_id, exc_info.value.pin) == (0, "P")

    def test_unknown_component(self) -> None:
        graph = Graph()
        graph.add_node(Node(name="No Such Thing", nickname="NST"))

        with pytest.raises(ComponentNotFoundError, match="No Such Thing") as exc_info:
            evaluate(graph)

        assert exc_info.value.nickname == "NST"

    def test_component_failure_is_wrapped(self) -> None:
        graph = Graph()
        node = Node(name="Division")
        node.add_input("A", Number(1.0))
        node.add_input("B", Number(0.0))
        graph.add_node(node)

        with pytest.raises(ComponentFailedError, match="Division by zero") as exc_info:
            evaluate(graph)

        assert exc_info.value.node_id == 0
        assert exc_info.value.component_name == "Division"
        assert isinstance(exc_info.value.__cause__, ComponentMessageError)

    def test_infinite_operand_fails_on_its_node(self) -> None:
        graph = Graph()
        source = Node(name="Number")
        source.add_input("Num", Number(math.inf))
        graph.add_node(source)
        modulus = Node(name="Modulus")
        modulus.add_input("A", Number(5.0))
        modulus.add_input("B")
        graph.add_node(modulus)
        graph.add_wire(Wire(0, "Num", 1, "B"))

        with pytest.raises(ComponentFailedError, match="undefined") as exc_info:
            evaluate(graph)

        assert exc_info.value.node_id == 1
        assert isinstance(exc_info.value.__cause__, ComponentMessageError)

    def test_plan_with_unknown_node(self) -> None:
        with pytest.raises(UnknownEvaluationNodeError) as exc_info:
            evaluate(Graph(), plan=EvaluationPlan(order=(5,)))

        assert exc_info.value.node_id == 5

    def test_outputs_overlay_seeded_values(self) -> None:
        """Pins a component does not produce keep the value stored on the node."""
        graph = Graph()
        node = Node(name="Invert Matrix")
        node.add_input("M", Matrix(2, 2, (1.0, 2.0, 2.0, 4.0)))
        node.set_output("M", NULL)
        graph.add_node(node)

        result = evaluate(graph)

        assert result.outputs(0) == {"M": NULL, "S": Boolean(False)}
        assert list(result.outputs(0)) == ["M", "S"]

    def test_graph_is_not_modified(self, slider_number_ghx: str) -> None:
        graph = parse(slider_number_ghx)
        number = graph.node(1)
        assert number is not None

        evaluate(graph)

        assert number.outputs == {"Num": NULL}

    def test_reused_plan(self, slider_number_ghx: str) -> None:
        graph = parse(slider_number_ghx)
        plan = EvaluationPlan.from_graph(graph)

        assert evaluate(graph, plan=plan).node_outputs == evaluate(graph).node_outputs


class TestEvaluationResult:
    """Tests for EvaluationResult accessors."""

    def test_accessors(self) -> None:
        result = EvaluationResult(node_outputs={4: {"R": Number(1.0)}, 2: {"y": NULL}})

        assert result.value(4, "R") == Number(1.0)
        assert [node_id for node_id, _ in result.items()] == [4, 2]

    def test_missing_node(self) -> None:
        with pytest.raises(KeyError):
            EvaluationResult().outputs(0)
