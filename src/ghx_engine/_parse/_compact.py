"""Reader for the compact ``<ghx>`` document shape.

Element and attribute names are case-sensitive::

    <ghx>
      <objects>
        <object id="0" guid="{...}" name="Number Slider" nickname="S">
          <slider min="0" max="10" value="3" step="0.5" output="OUT"/>
          <inputs><input name="A" value="1.5"/></inputs>
          <outputs><output name="R"/></outputs>
        </object>
      </objects>
      <wires><wire from="0:OUT" to="1:A"/></wires>
    </ghx>
"""

import logging
import xml.etree.ElementTree as ET

from ghx_engine._components.inputs import SLIDER_OUTPUT
from ghx_engine._errors import GraphError, GraphStructureError, IndexParseError
from ghx_engine._graph import Graph, Node, Wire
from ghx_engine._value import NULL, Number, Value

from ._common import infer_value, parse_number

logger = logging.getLogger(__name__)

SLIDER_NAME = "Number Slider"


def parse_node_id(text: str) -> int:
    """Parse an integer node id.

    Raises:
        IndexParseError: If the text is not an integer.

    """
    try:
        return int(text.strip())
    except ValueError:
        raise IndexParseError(text) from None


def parse_pin_ref(text: str) -> tuple[int, str]:
    """Split a ``"<node-id>:<pin-name>"`` reference.

    Raises:
        IndexParseError: Unless there is exactly one ``:`` between an integer
            id and a non-empty pin name.

    """
    parts = text.split(":")
    if len(parts) != 2 or not parts[1].strip():  # noqa: PLR2004
        raise IndexParseError(text)
    node_text, pin = parts
    try:
        node_id = int(node_text.strip())
    except ValueError:
        raise IndexParseError(text) from None
    return node_id, pin.strip()


def _pin_value(element: ET.Element) -> Value | None:
    for raw in (element.get("value"), element.get("default"), element.text):
        if raw is not None and raw.strip():
            return infer_value(raw.strip(), element.get("type"))
    return None


def _read_slider(node: Node, slider: ET.Element) -> None:
    context = f"slider of node {node.id}"
    for key in ("min", "max", "step", "value"):
        raw = slider.get(key)
        if raw is not None:
            node.meta[key] = parse_number(raw, context)
    if node.guid is None and node.name is None:
        node.name = SLIDER_NAME
    value = node.meta.get("value")
    if value is not None:
        node.set_output(slider.get("output") or SLIDER_OUTPUT, Number(float(value)))


def _read_object(element: ET.Element) -> Node:
    raw_id = element.get("id")
    node = Node(
        id=None if raw_id is None else parse_node_id(raw_id),
        guid=element.get("guid"),
        name=element.get("name"),
        nickname=element.get("nickname"),
    )
    slider = element.find("slider")
    if slider is not None:
        _read_slider(node, slider)

    for pin in element.findall("inputs/input"):
        name = pin.get("name")
        if not name:
            msg = f"Input pin without a name on object {raw_id}"
            raise GraphStructureError(msg)
        node.add_input(name, _pin_value(pin))

    for pin in element.findall("outputs/output"):
        name = pin.get("name")
        if not name:
            msg = f"Output pin without a name on object {raw_id}"
            raise GraphStructureError(msg)
        if name not in node.outputs:
            value = _pin_value(pin)
            node.set_output(name, NULL if value is None else value)
    return node


def parse_compact(root: ET.Element) -> Graph:
    """Build a graph from a parsed ``<ghx>`` root element.

    Raises:
        IndexParseError: If a node id or wire reference is malformed.
        NumberParseError: If a slider attribute is not numeric.
        GraphStructureError: On duplicate node ids, wires to unknown nodes
            or unnamed pins.

    """
    graph = Graph()
    try:
        for element in root.findall("objects/object"):
            graph.add_node(_read_object(element))
        for element in root.findall("wires/wire"):
            source, target = element.get("from"), element.get("to")
            if source is None or target is None:
                msg = "Wire without 'from' or 'to'"
                raise GraphStructureError(msg)
            from_node, from_pin = parse_pin_ref(source)
            to_node, to_pin = parse_pin_ref(target)
            graph.add_wire(Wire(from_node, from_pin, to_node, to_pin))
    except GraphError as e:
        raise GraphStructureError(str(e)) from e
    logger.debug("Parsed compact document: %d nodes, %d wires", len(graph.nodes), len(graph.wires))
    return graph
