"""Exception hierarchy for parsing, graph construction, planning and evaluation.

Every error carries the identifiers needed to locate its origin (node id,
pin name, upstream node id) as attributes, and renders them in its message.
"""

from collections.abc import Sequence


class GhxError(Exception):
    """Base class for all errors raised by ghx_engine."""


# =============================================================================
# Parse
# =============================================================================


class ParseError(GhxError):
    """Error while reading a document into a graph."""


class UnknownFormatError(ParseError):
    """The root element is neither ``ghx`` nor ``archive``."""

    def __init__(self, root: str) -> None:
        self.root = root
        super().__init__(f"Unknown document format: root element <{root}>")


class XmlMalformedError(ParseError):
    """The document is not well-formed XML."""


class NumberParseError(ParseError):
    """A numeric attribute or item could not be parsed."""

    def __init__(self, text: str, context: str = "") -> None:
        self.text = text
        self.context = context
        where = f" in {context}" if context else ""
        super().__init__(f"Invalid number {text!r}{where}")


class IndexParseError(ParseError):
    """A node id or pin reference could not be parsed."""

    def __init__(self, text: str) -> None:
        self.text = text
        super().__init__(f"Invalid index or pin reference {text!r}")


class GraphStructureError(ParseError):
    """Structural failure: duplicate node, unknown source, missing chunk."""


# =============================================================================
# Graph construction
# =============================================================================


class GraphError(GhxError):
    """Error while building a graph."""


class DuplicateNodeError(GraphError):
    """A node with the same id already exists."""

    def __init__(self, node_id: int) -> None:
        self.node_id = node_id
        super().__init__(f"Node {node_id} already exists")


class UnknownNodeError(GraphError):
    """A wire endpoint references a node that does not exist."""

    def __init__(self, node_id: int) -> None:
        self.node_id = node_id
        super().__init__(f"Unknown node {node_id}")


# =============================================================================
# Topology
# =============================================================================


class TopologyError(GhxError):
    """The graph cannot be ordered."""


class CycleError(TopologyError):
    """The graph contains a cycle.

    Attributes:
        node_ids: The nodes participating in the cycle, in path order.

    """

    def __init__(self, node_ids: Sequence[int]) -> None:
        self.node_ids = tuple(node_ids)
        if self.node_ids:
            path = " -> ".join(str(node_id) for node_id in (*self.node_ids, self.node_ids[0]))
            super().__init__(f"Cycle detected in graph: {path}")
        else:
            super().__init__("Cycle detected in graph")


# =============================================================================
# Components
# =============================================================================


class ComponentError(GhxError):
    """Failure raised from inside a component's evaluate function."""


class ComponentMessageError(ComponentError):
    """User-visible component failure."""


class NotYetImplementedError(ComponentError):
    """The component is registered but has no implementation."""

    def __init__(self, component_name: str) -> None:
        self.component_name = component_name
        super().__init__(f"Component '{component_name}' is not yet implemented")


class CoercionError(ComponentMessageError):
    """A value could not be interpreted as the requested shape.

    Attributes:
        context: Component or pin name that requested the coercion.
        expected: Name of the requested shape.
        actual_kind: Kind of the value that was encountered.

    """

    def __init__(self, context: str, expected: str, actual_kind: str, detail: str = "") -> None:
        self.context = context
        self.expected = expected
        self.actual_kind = actual_kind
        suffix = f": {detail}" if detail else ""
        super().__init__(f"{context}: expected {expected}, got {actual_kind}{suffix}")


# =============================================================================
# Evaluation
# =============================================================================


class EvaluationError(GhxError):
    """Error that aborts an evaluation run."""


class ComponentNotFoundError(EvaluationError):
    """No component kind matches the node's identifiers."""

    def __init__(
        self,
        node_id: int,
        guid: str | None = None,
        name: str | None = None,
        nickname: str | None = None,
    ) -> None:
        self.node_id = node_id
        self.guid = guid
        self.name = name
        self.nickname = nickname
        super().__init__(
            f"No component found for node {node_id} (guid={guid!r}, name={name!r}, nickname={nickname!r})",
        )


class MissingInputError(EvaluationError):
    """A required input pin has neither a wire, a default, nor an optional fallback."""

    def __init__(self, node_id: int, pin: str) -> None:
        self.node_id = node_id
        self.pin = pin
        super().__init__(f"Node {node_id} is missing input '{pin}'")


class MissingDependencyOutputError(EvaluationError):
    """An upstream node has not produced the output pin a wire reads from."""

    def __init__(self, node_id: int, dependency_node_id: int, pin: str) -> None:
        self.node_id = node_id
        self.dependency_node_id = dependency_node_id
        self.pin = pin
        super().__init__(
            f"Node {node_id} depends on output '{pin}' of node {dependency_node_id}, which is not available",
        )


class ComponentFailedError(EvaluationError):
    """A component raised a ComponentError while evaluating a node."""

    def __init__(self, node_id: int, component_name: str, source: ComponentError) -> None:
        self.node_id = node_id
        self.component_name = component_name
        self.source = source
        super().__init__(f"Component '{component_name}' failed on node {node_id}: {source}")


class UnknownEvaluationNodeError(EvaluationError):
    """The plan references a node that is not in the graph."""

    def __init__(self, node_id: int) -> None:
        self.node_id = node_id
        super().__init__(f"Evaluation plan references unknown node {node_id}")


# =============================================================================
# Engine facade
# =============================================================================


class EngineError(GhxError):
    """Misuse of the Engine facade (no document loaded, unknown slider, bad value)."""
