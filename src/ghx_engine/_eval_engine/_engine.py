"""Core evaluator: runs every node of a graph once, in plan order."""

import logging
from collections.abc import Iterator
from dataclasses import dataclass, field

from ghx_engine._components import ComponentRegistry
from ghx_engine._errors import ComponentError, ComponentFailedError, ComponentNotFoundError, UnknownEvaluationNodeError
from ghx_engine._graph import Graph
from ghx_engine._value import Value, is_geometry

from ._plan import EvaluationPlan
from ._resolution import gather_inputs

logger = logging.getLogger(__name__)


@dataclass(frozen=True, slots=True)
class EvaluationResult:
    """Outputs of one evaluation run.

    Attributes:
        node_outputs: Output values by node id, then by pin name. Each pin
            map is sorted by pin name.
        geometry: Every renderable output value, in evaluation order and
            then pin order. Lists are kept whole when any item (at any
            depth) is renderable.

    """

    node_outputs: dict[int, dict[str, Value]] = field(default_factory=dict)
    geometry: list[Value] = field(default_factory=list)

    def outputs(self, node_id: int) -> dict[str, Value]:
        """Output map of a node.

        Raises:
            KeyError: If the node was not evaluated.

        """
        return self.node_outputs[node_id]

    def value(self, node_id: int, pin: str) -> Value:
        return self.node_outputs[node_id][pin]

    def items(self) -> Iterator[tuple[int, dict[str, Value]]]:
        """Iterate ``(node id, outputs)`` in evaluation order."""
        return iter(self.node_outputs.items())


def evaluate(
    graph: Graph,
    registry: ComponentRegistry | None = None,
    plan: EvaluationPlan | None = None,
) -> EvaluationResult:
    """Evaluate every node of ``graph`` once.

    The run is all-or-nothing: the first failure aborts the evaluation and
    no partial result is returned. The graph itself is not modified.

    Args:
        graph: The graph to evaluate.
        registry: Component kinds to resolve nodes against. Defaults to
            :meth:`ComponentRegistry.default`.
        plan: A plan previously built for ``graph``. Built on demand when
            omitted.

    Returns:
        The outputs of every node and the harvested geometry.

    Raises:
        CycleError: If the plan has to be built and the graph is cyclic.
        ComponentNotFoundError: If no kind matches a node's identifiers.
        MissingInputError: If a required input pin has no value.
        MissingDependencyOutputError: If a wired output is unavailable.
        ComponentFailedError: If a component raises a ComponentError.
        UnknownEvaluationNodeError: If the plan names a node not in the graph.

    Example:
        >>> result = evaluate(parse(document))
        >>> result.value(1, "Num")
        Number(value=3.0)

    """
    if registry is None:
        registry = ComponentRegistry.default()
    if plan is None:
        plan = EvaluationPlan.from_graph(graph)

    node_outputs: dict[int, dict[str, Value]] = {}
    geometry: list[Value] = []

    logger.debug("Starting evaluation with %d nodes in order", len(plan.order))

    for node_id in plan.order:
        node = graph.node(node_id)
        if node is None:
            raise UnknownEvaluationNodeError(node_id)

        kind = registry.resolve_node(node)
        if kind is None:
            raise ComponentNotFoundError(node_id, node.guid, node.name, node.nickname)

        inputs = gather_inputs(node, kind, plan, node_outputs)
        logger.debug("Evaluating node %d (%s) with %d inputs", node_id, kind.name, len(inputs))
        try:
            produced = kind.evaluate(inputs, node.meta)
        except ComponentError as e:
            raise ComponentFailedError(node_id, kind.name, e) from e

        merged = {**node.outputs, **produced}
        outputs = {pin: merged[pin] for pin in sorted(merged)}
        geometry.extend(value for value in outputs.values() if is_geometry(value))
        node_outputs[node_id] = outputs

    logger.debug("Evaluation finished: %d nodes, %d geometry values", len(node_outputs), len(geometry))
    return EvaluationResult(node_outputs=node_outputs, geometry=geometry)
