"""Stateful facade over parsing, slider edits and evaluation."""

import logging
import math
from dataclasses import dataclass, field
from enum import StrEnum
from pathlib import Path

from ghx_engine._components import ComponentRegistry
from ghx_engine._components.inputs import SLIDER_OUTPUT, quantize_slider
from ghx_engine._errors import EngineError
from ghx_engine._eval_engine import EvaluationPlan, EvaluationResult, evaluate
from ghx_engine._graph import Graph, Node, normalize_name
from ghx_engine._parse import parse
from ghx_engine._value import CurveLine, List, Mesh, Number, Point, Surface, Value, Vec3, describe

logger = logging.getLogger(__name__)

SLIDER_KEYS = ("min", "max", "value")
MIN_POLYLINE_POINTS = 2


@dataclass(frozen=True, slots=True)
class SliderInfo:
    """Current state of a slider node."""

    node_id: int
    name: str
    min: float
    max: float
    step: float | None
    value: float


class GeometryKind(StrEnum):
    POINT = "Point"
    LINE = "Line"
    POLYLINE = "Polyline"
    SURFACE = "Surface"
    MESH = "Mesh"


@dataclass(frozen=True, slots=True)
class GeometryItem:
    """A render-ready geometry value.

    Attributes:
        kind: Shape of the item.
        points: Positions: the point itself, the two line endpoints, the
            polyline vertices, or the surface/mesh vertices.
        value: The value the item was built from.

    """

    kind: GeometryKind
    points: tuple[Vec3, ...]
    value: Value


@dataclass(frozen=True, slots=True)
class NodeInfo:
    node_id: int
    name: str
    outputs: dict[str, str] = field(default_factory=dict)
    connected_to: list[int] = field(default_factory=list)


def _is_slider(node: Node) -> bool:
    return all(key in node.meta for key in SLIDER_KEYS)


def _as_float(node: Node, key: str) -> float:
    raw = node.meta[key]
    if isinstance(raw, str):
        msg = f"Slider {node.label} has a non-numeric '{key}': {raw!r}"
        raise EngineError(msg)
    return float(raw)


def _slider_info(node: Node) -> SliderInfo:
    assert node.id is not None  # noqa: S101
    step = _as_float(node, "step") if "step" in node.meta else None
    return SliderInfo(
        node_id=node.id,
        name=node.label,
        min=_as_float(node, "min"),
        max=_as_float(node, "max"),
        step=step,
        value=_as_float(node, "value"),
    )


def geometry_items(result: EvaluationResult) -> list[GeometryItem]:
    """Flatten the harvested geometry of a run into render-ready items.

    Nested lists are walked. A list of two or more values that are all
    points becomes one polyline instead of separate points.
    """
    found: list[GeometryItem] = []

    def walk(value: Value) -> None:
        match value:
            case Point():
                found.append(GeometryItem(GeometryKind.POINT, (value.coords,), value))
            case CurveLine(p1=p1, p2=p2):
                found.append(GeometryItem(GeometryKind.LINE, (p1, p2), value))
            case Surface(vertices=vertices):
                found.append(GeometryItem(GeometryKind.SURFACE, vertices, value))
            case Mesh(vertices=vertices):
                found.append(GeometryItem(GeometryKind.MESH, vertices, value))
            case List(items=items):
                points = tuple(item.coords for item in items if isinstance(item, Point))
                if len(points) >= MIN_POLYLINE_POINTS and len(points) == len(items):
                    found.append(GeometryItem(GeometryKind.POLYLINE, points, value))
                    return
                for item in items:
                    walk(item)
            case _:
                pass

    for value in result.geometry:
        walk(value)
    return found


@dataclass(slots=True)
class Engine:
    """Load a document once, adjust sliders and re-evaluate.

    The evaluation plan is cached with the graph because slider edits only
    touch node metadata and outputs, never wires.

    Example:
        >>> engine = Engine()
        >>> engine.load_ghx(Path("bridge.ghx").read_text())
        >>> engine.set_slider_value("Span", 12.0)
        >>> result = engine.evaluate()

    """

    registry: ComponentRegistry = field(default_factory=ComponentRegistry.default)
    _graph: Graph | None = field(default=None, init=False, repr=False)
    _plan: EvaluationPlan | None = field(default=None, init=False, repr=False)

    def load_ghx(self, xml_text: str) -> Graph:
        """Parse a document and build its evaluation plan.

        Raises:
            ParseError: If the document cannot be parsed.
            CycleError: If the graph is cyclic.

        """
        graph = parse(xml_text)
        plan = EvaluationPlan.from_graph(graph)
        self._graph, self._plan = graph, plan
        logger.info("Loaded graph with %d nodes and %d wires", len(graph.nodes), len(graph.wires))
        return graph

    def load_file(self, path: Path) -> Graph:
        return self.load_ghx(path.read_text(encoding="utf-8-sig"))

    @property
    def graph(self) -> Graph:
        """The loaded graph.

        Raises:
            EngineError: If no document has been loaded.

        """
        if self._graph is None:
            msg = "No document loaded"
            raise EngineError(msg)
        return self._graph

    @property
    def plan(self) -> EvaluationPlan:
        if self._plan is None:
            msg = "No document loaded"
            raise EngineError(msg)
        return self._plan

    def sliders(self) -> list[SliderInfo]:
        """Every node that carries slider bounds and a value, in node order."""
        return [_slider_info(node) for node in self.graph.nodes if _is_slider(node)]

    def find_slider(self, id_or_name: int | str) -> Node:
        """Find a slider by node id or by name/nickname.

        A string made of digits is treated as a node id.

        Raises:
            EngineError: If no slider matches or a name is ambiguous.

        """
        graph = self.graph
        if isinstance(id_or_name, int) or id_or_name.strip().isdigit():
            node = graph.node(int(id_or_name))
            if node is None or not _is_slider(node):
                msg = f"No slider with id {id_or_name}"
                raise EngineError(msg)
            return node

        matches = [node for node in graph.nodes_with_name(id_or_name) if _is_slider(node)]
        if not matches:
            msg = f"No slider named {normalize_name(id_or_name)!r}"
            raise EngineError(msg)
        if len(matches) > 1:
            ids = ", ".join(str(node.id) for node in matches)
            msg = f"Slider name {id_or_name!r} is ambiguous (nodes {ids})"
            raise EngineError(msg)
        return matches[0]

    def set_slider_value(self, id_or_name: int | str, value: float) -> float:
        """Set a slider, clamped to its bounds and snapped to its step.

        Returns:
            The value actually stored.

        Raises:
            EngineError: If the value is not finite or the slider is unknown.

        """
        if not math.isfinite(value):
            msg = f"Slider value must be finite, got {value}"
            raise EngineError(msg)
        node = self.find_slider(id_or_name)
        info = _slider_info(node)
        stored = quantize_slider(value, info.min, info.max, info.step)
        node.meta["value"] = stored
        node.set_output(SLIDER_OUTPUT, Number(stored))
        logger.debug("Slider %d (%s) set to %s (requested %s)", info.node_id, info.name, stored, value)
        return stored

    def evaluate(self) -> EvaluationResult:
        """Evaluate the loaded graph with the cached plan."""
        return evaluate(self.graph, self.registry, self.plan)

    def geometry_items(self, result: EvaluationResult) -> list[GeometryItem]:
        return geometry_items(result)

    def topology_map(self) -> str:
        """The evaluation order rendered as ``"0 -> 1 -> 2"``."""
        return " -> ".join(str(node_id) for node_id in self.plan.order)

    def node_info(self, node_id: int, result: EvaluationResult | None = None) -> NodeInfo:
        """Describe a node: its label, outputs and the nodes it feeds.

        Outputs come from ``result`` when given, otherwise from the node's
        stored outputs.

        Raises:
            EngineError: If the node does not exist.

        """
        node = self.graph.node(node_id)
        if node is None:
            msg = f"No node with id {node_id}"
            raise EngineError(msg)
        outputs = node.outputs
        if result is not None and node_id in result.node_outputs:
            outputs = result.node_outputs[node_id]
        targets = sorted({wire.to_node for wire in self.graph.wires_from(node_id)})
        return NodeInfo(
            node_id=node_id,
            name=node.label,
            outputs={pin: describe(value) for pin, value in sorted(outputs.items())},
            connected_to=targets,
        )
