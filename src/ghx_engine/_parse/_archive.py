"""Reader for the host application's ``<archive>`` document shape.

The archive is a tree of named ``chunk`` elements, each holding ``items``
(named scalar values) and nested ``chunks``. Chunk, item and element names
are matched case-insensitively. Components live at
``Definition > DefinitionObjects > Object > Container``; each ``param_input``
chunk declares an input pin whose ``Source`` items reference the instance
guid of another object or of one of its ``param_output`` chunks.
"""

import logging
import xml.etree.ElementTree as ET
from dataclasses import dataclass, field

from ghx_engine._components.inputs import PANEL_OUTPUT, SLIDER_OUTPUT, TOGGLE_OUTPUT
from ghx_engine._errors import GraphError, GraphStructureError
from ghx_engine._graph import Graph, Node, Wire, normalize_guid
from ghx_engine._value import NULL, Boolean, List, Number, Text, Value

from ._common import infer_value, parse_flag, parse_number

logger = logging.getLogger(__name__)

SLIDER_GUIDS = frozenset({"57da07bd-ecab-415d-9d86-af36d7073abc", "5e0b22ab-f3aa-4cc2-8329-7e548bb9a58b"})
PANEL_GUIDS = frozenset({"59e0b89a-e487-49f8-bab8-b5bab16be14c"})
TOGGLE_GUIDS = frozenset({"2e78987b-9dfb-42a2-8b76-3923ac8bd91a", "ad483f40-dc72-40dc-844d-c9e462c7d19f"})

SLIDER_STEP_KEYS = ("step", "increment", "interval")
DEFAULT_SLIDER_STEP = 0.1


# =============================================================================
# Chunk navigation
# =============================================================================


def _is(element: ET.Element, tag: str) -> bool:
    return element.tag.lower() == tag


def _name(element: ET.Element) -> str:
    return (element.get("name") or "").lower()


def _children(element: ET.Element, container: str, tag: str) -> list[ET.Element]:
    result: list[ET.Element] = []
    for group in element:
        if _is(group, container):
            result.extend(child for child in group if _is(child, tag))
    return result


def chunks(element: ET.Element, name: str | None = None) -> list[ET.Element]:
    """Child chunks of ``element``, optionally only those called ``name``."""
    found = _children(element, "chunks", "chunk")
    if name is None:
        return found
    return [chunk for chunk in found if _name(chunk) == name.lower()]


def chunk(element: ET.Element, name: str) -> ET.Element | None:
    found = chunks(element, name)
    return found[0] if found else None


def require_chunk(element: ET.Element, name: str, where: str) -> ET.Element:
    found = chunk(element, name)
    if found is None:
        msg = f"Missing chunk '{name}' in {where}"
        raise GraphStructureError(msg)
    return found


def items(element: ET.Element, name: str | None = None) -> list[ET.Element]:
    found = _children(element, "items", "item")
    if name is None:
        return found
    return [item for item in found if _name(item) == name.lower()]


def item_text(element: ET.Element, name: str) -> str | None:
    """Trimmed text of the first item called ``name``; None when absent or empty."""
    for item in items(element, name):
        text = (item.text or "").strip()
        if text:
            return text
    return None


# =============================================================================
# Values
# =============================================================================


def _coordinates(item: ET.Element) -> tuple[float, float, float] | None:
    """Read ``<X>``/``<Y>``/``<Z>`` children of a point or vector item."""
    values: dict[str, float] = {}
    for child in item:
        axis = child.tag.lower()
        if axis in ("x", "y", "z") and child.text is not None:
            values[axis] = parse_number(child.text, f"{item.get('type_name')} {axis}", decimal_comma=True)
    if len(values) != 3:  # noqa: PLR2004
        return None
    return (values["x"], values["y"], values["z"])


def item_value(item: ET.Element) -> Value:
    """Interpret one persistent-data item using its ``type_name`` hint."""
    type_name = item.get("type_name")
    coords = _coordinates(item)
    if coords is not None:
        text = ";".join(repr(c) for c in coords)
        return infer_value(text, type_name or "point")
    return infer_value((item.text or "").strip(), type_name, decimal_comma=True)


def persistent_data(param: ET.Element) -> Value | None:
    """Collect ``PersistentData > Branch > Item > item`` values of a parameter.

    A single item gives its value, several give a List in document order.
    """
    data = chunk(param, "PersistentData")
    if data is None:
        return None
    values = [
        item_value(item)
        for branch in chunks(data, "Branch")
        for entry in chunks(branch, "Item")
        for item in items(entry)
    ]
    if not values:
        return None
    if len(values) == 1:
        return values[0]
    return List(tuple(values))


# =============================================================================
# Objects
# =============================================================================


@dataclass(slots=True)
class _ParsedObject:
    node: Node
    instance_guid: str | None
    default_output: str | None
    output_guids: dict[str, str] = field(default_factory=dict)
    sources: list[tuple[str, str]] = field(default_factory=list)


def _pin_label(param: ET.Element, fallback: str) -> str:
    for key in ("NickName", "Name", "Description"):
        text = item_text(param, key)
        if text:
            return text
    return fallback


def _indexed(params: list[ET.Element]) -> list[ET.Element]:
    """Order parameter chunks by their ``index`` attribute, document order otherwise."""

    def key(pair: tuple[int, ET.Element]) -> tuple[int, int]:
        position, param = pair
        raw = param.get("index")
        try:
            return (int(raw) if raw is not None else position, position)
        except ValueError:
            return (position, position)

    return [param for _, param in sorted(enumerate(params), key=key)]


def _slider_chunks(container: ET.Element) -> list[ET.Element]:
    return [child for child in chunks(container) if "slider" in _name(child)]


def _read_slider(node: Node, container: ET.Element) -> None:
    context = f"slider {node.label}"
    found: dict[str, float] = {}
    for slider in _slider_chunks(container):
        for item in items(slider):
            key = _name(item)
            text = (item.text or "").strip()
            if not text:
                continue
            if key in ("value", "min", "max"):
                found.setdefault(key, parse_number(text, context, decimal_comma=True))
            elif key in SLIDER_STEP_KEYS:
                found.setdefault("step", parse_number(text, context, decimal_comma=True))

    if "step" not in found:
        low, high = found.get("min"), found.get("max")
        span = None if low is None or high is None else high - low
        found["step"] = span / 100.0 if span is not None and span > 0 else DEFAULT_SLIDER_STEP
    node.meta.update(found)
    if "value" in found:
        node.set_output(SLIDER_OUTPUT, Number(found["value"]))


def _read_panel(node: Node, container: ET.Element) -> None:
    text = item_text(container, "UserText")
    if text is None:
        node.set_output(PANEL_OUTPUT, NULL)
        return
    node.meta["UserText"] = text
    node.set_output(PANEL_OUTPUT, Text(text))


def _read_toggle(node: Node, container: ET.Element) -> None:
    text = item_text(container, "ToggleValue") or item_text(container, "Value")
    flag = parse_flag(text) if text is not None else None
    if flag is None:
        return
    node.meta["value"] = 1 if flag else 0
    node.set_output(TOGGLE_OUTPUT, Boolean(flag))


def _read_object(element: ET.Element, position: int) -> _ParsedObject:
    where = f"Object {position}"
    container = require_chunk(element, "Container", where)
    guid = item_text(element, "GUID")
    node = Node(
        guid=guid,
        name=item_text(container, "Name") or item_text(element, "Name"),
        nickname=item_text(container, "NickName"),
    )
    instance_guid = item_text(container, "InstanceGuid")
    if instance_guid is not None:
        node.meta["InstanceGuid"] = normalize_guid(instance_guid)

    parsed = _ParsedObject(node=node, instance_guid=instance_guid, default_output=None)

    for i, param in enumerate(_indexed(chunks(container, "param_input"))):
        pin = _pin_label(param, f"in{i}")
        node.add_input(pin, persistent_data(param))
        for source in items(param, "Source"):
            reference = (source.text or "").strip()
            if reference:
                parsed.sources.append((pin, reference))

    for i, param in enumerate(_indexed(chunks(container, "param_output"))):
        pin = _pin_label(param, f"out{i}")
        node.set_output(pin, NULL)
        if parsed.default_output is None:
            parsed.default_output = pin
        output_guid = item_text(param, "InstanceGuid")
        if output_guid is not None:
            parsed.output_guids[normalize_guid(output_guid)] = pin

    kind = normalize_guid(guid) if guid else ""
    if kind in SLIDER_GUIDS or _slider_chunks(container):
        _read_slider(node, container)
        parsed.default_output = parsed.default_output or SLIDER_OUTPUT
    elif kind in PANEL_GUIDS:
        _read_panel(node, container)
        parsed.default_output = parsed.default_output or PANEL_OUTPUT
    elif kind in TOGGLE_GUIDS:
        _read_toggle(node, container)
        parsed.default_output = parsed.default_output or TOGGLE_OUTPUT
    return parsed


def parse_archive(root: ET.Element) -> Graph:
    """Build a graph from a parsed ``<archive>`` root element.

    Nodes receive ids in document order. Wires are added after all nodes
    exist: a ``Source`` guid naming an object connects from that object's
    default output (its first ``param_output``, or the slider, panel or
    toggle output); a guid naming a ``param_output`` connects from that
    output pin.

    Raises:
        GraphStructureError: On a missing mandatory chunk, an unresolvable
            source reference or a node that cannot be added.
        NumberParseError: If a numeric item does not parse.

    """
    definition = require_chunk(root, "Definition", "archive")
    objects = require_chunk(definition, "DefinitionObjects", "Definition")

    graph = Graph()
    parsed_objects: list[_ParsedObject] = []
    sources: dict[str, tuple[int, str | None]] = {}
    try:
        for position, element in enumerate(chunks(objects, "Object")):
            parsed = _read_object(element, position)
            node_id = graph.add_node(parsed.node)
            parsed_objects.append(parsed)
            if parsed.instance_guid is not None:
                sources.setdefault(normalize_guid(parsed.instance_guid), (node_id, parsed.default_output))
            for output_guid, pin in parsed.output_guids.items():
                sources.setdefault(output_guid, (node_id, pin))

        for parsed in parsed_objects:
            target = parsed.node.id
            assert target is not None  # noqa: S101
            for pin, reference in parsed.sources:
                owner = sources.get(normalize_guid(reference))
                if owner is None:
                    msg = f"Unknown source {reference} for input '{pin}' of node {target}"
                    raise GraphStructureError(msg)
                source_node, source_pin = owner
                if source_pin is None:
                    msg = f"Source {reference} (node {source_node}) has no output to wire from"
                    raise GraphStructureError(msg)
                graph.add_wire(Wire(source_node, source_pin, target, pin))
    except GraphError as e:
        raise GraphStructureError(str(e)) from e

    logger.debug("Parsed archive document: %d nodes, %d wires", len(graph.nodes), len(graph.wires))
    return graph
