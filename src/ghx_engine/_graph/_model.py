"""Nodes, wires and the graph that indexes them."""

import logging
from dataclasses import dataclass, field

from ghx_engine._errors import DuplicateNodeError, UnknownNodeError
from ghx_engine._value import Value

logger = logging.getLogger(__name__)

type MetaValue = float | int | str
type MetaMap = dict[str, MetaValue]


def normalize_guid(guid: str) -> str:
    """Lowercase a unique id and strip surrounding whitespace and braces.

    Example:
        >>> normalize_guid("{57DA07BD-ECAB-415D-9D86-AF36D7073ABC}")
        '57da07bd-ecab-415d-9d86-af36d7073abc'

    """
    return guid.strip().strip("{}").strip().lower()


def normalize_name(name: str) -> str:
    """Trim and lowercase a component name or nickname."""
    return name.strip().lower()


def _check_pin_name(pin: str) -> None:
    if not pin:
        msg = "Pin names must be non-empty"
        raise ValueError(msg)


@dataclass(slots=True)
class Node:
    """An instance of a component inside a graph.

    Attributes:
        id: Stable node id. None until the node is added to a graph.
        guid: Canonical unique id of the component kind, if known.
        name: Canonical component name, if known.
        nickname: Short component nickname, if known.
        inputs: Default values for input pins, by pin name.
        outputs: Output values by pin name; seeded by persistent data and
            overwritten by the evaluator.
        input_order: Declared input pins, in authoritative iteration order.
        meta: Free-form parameters (slider bounds, panel text, ...).

    """

    id: int | None = None
    guid: str | None = None
    name: str | None = None
    nickname: str | None = None
    inputs: dict[str, Value] = field(default_factory=dict)
    outputs: dict[str, Value] = field(default_factory=dict)
    input_order: list[str] = field(default_factory=list)
    meta: MetaMap = field(default_factory=dict)

    def add_input(self, pin: str, default: Value | None = None) -> None:
        """Declare an input pin, optionally with a default value."""
        _check_pin_name(pin)
        if pin not in self.input_order:
            self.input_order.append(pin)
        if default is not None:
            self.inputs[pin] = default

    def set_output(self, pin: str, value: Value) -> None:
        _check_pin_name(pin)
        self.outputs[pin] = value

    @property
    def label(self) -> str:
        """Human-readable label: nickname, else name, else the node id."""
        return self.nickname or self.name or str(self.id)


@dataclass(frozen=True, slots=True)
class Wire:
    """Directed connection from an output pin to an input pin."""

    from_node: int
    from_pin: str
    to_node: int
    to_pin: str

    def __str__(self) -> str:
        return f"{self.from_node}:{self.from_pin} -> {self.to_node}:{self.to_pin}"


@dataclass(slots=True)
class Graph:
    """Nodes and wires with lookup indices.

    Nodes are indexed by id, by normalized guid and by normalized name and
    nickname. Every wire's endpoints are guaranteed to exist.

    Example:
        >>> graph = Graph()
        >>> a = graph.add_node(Node(name="Number Slider"))
        >>> b = graph.add_node(Node(name="Number"))
        >>> graph.add_wire(Wire(a, "OUT", b, "Num"))
        >>> [node.id for node in graph.nodes_with_name("number")]
        [1]

    """

    nodes: list[Node] = field(default_factory=list)
    wires: list[Wire] = field(default_factory=list)
    _by_id: dict[int, Node] = field(default_factory=dict, repr=False)
    _by_guid: dict[str, list[int]] = field(default_factory=dict, repr=False)
    _by_name: dict[str, list[int]] = field(default_factory=dict, repr=False)
    _next_id: int = field(default=0, repr=False)

    def add_node(self, node: Node) -> int:
        """Add a node, assigning a fresh id when it has none.

        Returns:
            The node's id.

        Raises:
            DuplicateNodeError: If a node with the same id already exists.

        """
        if node.id is None:
            node.id = self._next_id
        if node.id in self._by_id:
            raise DuplicateNodeError(node.id)
        node_id = node.id
        self._next_id = max(self._next_id, node_id + 1)

        self.nodes.append(node)
        self._by_id[node_id] = node
        if node.guid:
            self._by_guid.setdefault(normalize_guid(node.guid), []).append(node_id)
        for label in {normalize_name(n) for n in (node.name, node.nickname) if n and n.strip()}:
            self._by_name.setdefault(label, []).append(node_id)
        logger.debug("Added node %d (%s)", node_id, node.label)
        return node_id

    def add_wire(self, wire: Wire) -> None:
        """Add a wire between two existing nodes.

        Raises:
            UnknownNodeError: If either endpoint does not exist.

        """
        for endpoint in (wire.from_node, wire.to_node):
            if endpoint not in self._by_id:
                raise UnknownNodeError(endpoint)
        _check_pin_name(wire.from_pin)
        _check_pin_name(wire.to_pin)
        self.wires.append(wire)

    def node(self, node_id: int) -> Node | None:
        return self._by_id.get(node_id)

    def nodes_with_guid(self, guid: str) -> list[Node]:
        return [self._by_id[i] for i in self._by_guid.get(normalize_guid(guid), [])]

    def nodes_with_name(self, name: str) -> list[Node]:
        """Nodes whose name or nickname matches ``name`` (trimmed, case-insensitive)."""
        return [self._by_id[i] for i in self._by_name.get(normalize_name(name), [])]

    def node_ids(self) -> list[int]:
        return [node.id for node in self.nodes if node.id is not None]

    def successors(self) -> dict[int, set[int]]:
        """Map every node id to the ids of nodes wired from it."""
        result: dict[int, set[int]] = {node_id: set() for node_id in self._by_id}
        for wire in self.wires:
            result[wire.from_node].add(wire.to_node)
        return result

    def wires_from(self, node_id: int) -> list[Wire]:
        return [wire for wire in self.wires if wire.from_node == node_id]

    def wires_to(self, node_id: int) -> list[Wire]:
        return [wire for wire in self.wires if wire.to_node == node_id]

    @property
    def next_id(self) -> int:
        """Id that the next node without a preset id will receive."""
        return self._next_id

    def __len__(self) -> int:
        return len(self.nodes)

    def __contains__(self, node_id: object) -> bool:
        return node_id in self._by_id
