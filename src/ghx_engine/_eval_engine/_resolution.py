"""Input gathering for a single node."""

from collections.abc import Mapping

from ghx_engine._components import ComponentKind
from ghx_engine._errors import MissingDependencyOutputError, MissingInputError
from ghx_engine._graph import Node
from ghx_engine._value import NULL, List, Value

from ._plan import EvaluationPlan


def gather_inputs(
    node: Node,
    kind: ComponentKind,
    plan: EvaluationPlan,
    node_outputs: Mapping[int, Mapping[str, Value]],
) -> list[Value]:
    """Build the positional input vector of ``node`` in plan pin order.

    For each pin, in priority order: the value of a single wire; a List of
    the values of several wires (fan-in, in plan order); the node's own
    default; Null when the component declares the pin optional.

    Args:
        node: The node about to be evaluated.
        kind: The component kind resolved for the node.
        plan: The evaluation plan of the node's graph.
        node_outputs: Outputs of the nodes evaluated so far.

    Returns:
        One value per pin of ``plan.pins(node.id)``.

    Raises:
        MissingDependencyOutputError: If a wired source node has not been
            evaluated or lacks the source pin.
        MissingInputError: If an unwired, undefaulted pin is not optional.

    """
    node_id = node.id
    assert node_id is not None  # noqa: S101

    values: list[Value] = []
    for pin in plan.pins(node_id):
        sources = plan.sources(node_id, pin)
        if sources:
            wired = [_read_source(node_id, src_node, src_pin, node_outputs) for src_node, src_pin in sources]
            values.append(wired[0] if len(wired) == 1 else List(tuple(wired)))
        elif pin in node.inputs:
            values.append(node.inputs[pin])
        elif kind.is_optional(pin):
            values.append(NULL)
        else:
            raise MissingInputError(node_id, pin)
    return values


def _read_source(
    node_id: int,
    source_node: int,
    source_pin: str,
    node_outputs: Mapping[int, Mapping[str, Value]],
) -> Value:
    outputs = node_outputs.get(source_node)
    if outputs is None or source_pin not in outputs:
        raise MissingDependencyOutputError(node_id, source_node, source_pin)
    return outputs[source_pin]
