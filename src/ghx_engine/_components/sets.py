"""List, sequence and text components (Sets > List, Sequence, Text)."""

import math
from collections.abc import Sequence

from ghx_engine import _coerce as co
from ghx_engine._errors import ComponentMessageError
from ghx_engine._graph import MetaMap
from ghx_engine._value import NULL, Boolean, List, Null, Number, Text, Value

from ._base import ComponentCategory, ComponentOutputs, ComponentTable, arg, broadcast, or_default, require_inputs

table = ComponentTable(ComponentCategory.SETS)

MAX_SEQUENCE_LENGTH = 1_000_000


def _count(value: Value, context: str) -> int:
    count = co.coerce_integer(value, context)
    if count < 0:
        msg = f"{context} needs a non-negative count, got {count}"
        raise ComponentMessageError(msg)
    if count > MAX_SEQUENCE_LENGTH:
        msg = f"{context} count {count} exceeds {MAX_SEQUENCE_LENGTH}"
        raise ComponentMessageError(msg)
    return count


@table.component(
    "List Length",
    guids=["1817fd29-20ae-4503-b542-f0fb651e67d7"],
    names=["Lng"],
    inputs=["L"],
    outputs=["L"],
)
def list_length(inputs: Sequence[Value], meta: MetaMap) -> ComponentOutputs:
    require_inputs(inputs, 1, "List Length")
    return {"L": Number(float(len(co.coerce_list(inputs[0]))))}


@table.component(
    "Reverse List",
    guids=["6ec97ea8-c559-47a2-8d0f-ce80c794d1f4"],
    names=["Rev"],
    inputs=["L"],
    outputs=["L"],
)
def reverse_list(inputs: Sequence[Value], meta: MetaMap) -> ComponentOutputs:
    require_inputs(inputs, 1, "Reverse List")
    return {"L": List(tuple(reversed(co.coerce_list(inputs[0]))))}


@table.component(
    "List Item",
    guids=[
        "285ddd8a-5398-4a3e-b3c2-361025711a51",
        "59daf374-bc21-4a5e-8282-5504fb7ae9ae",
        "6e2ba21a-2252-42f4-8d3f-f5e0f49cc4ef",
    ],
    names=["Item"],
    inputs=["L", "i", "W"],
    outputs=["i"],
    optional=["W"],
)
def list_item(inputs: Sequence[Value], meta: MetaMap) -> ComponentOutputs:
    """Pick items by index; with ``W`` set indices wrap around the list.

    An empty list gives Null. Several indices give a List of items.
    """
    require_inputs(inputs, 2, "List Item")
    items = co.coerce_list(inputs[0])
    wrap = co.coerce_boolean(or_default(arg(inputs, 2), Boolean(False)), "List Item W")
    if not items:
        return {"i": NULL}

    def pick(index_value: Value) -> Value:
        index = co.coerce_integer(index_value, "List Item i")
        if wrap:
            index %= len(items)
        if not 0 <= index < len(items):
            msg = f"List Item index {index} is out of range for a list of {len(items)}"
            raise ComponentMessageError(msg)
        return items[index]

    return {"i": broadcast([inputs[1]], pick)}


@table.component(
    "Range",
    guids=["9445ca40-cc73-4861-a455-146308676855"],
    inputs=["D", "N"],
    outputs=["R"],
)
def range_numbers(inputs: Sequence[Value], meta: MetaMap) -> ComponentOutputs:
    """``N + 1`` evenly spaced numbers covering the domain from start to end."""
    require_inputs(inputs, 2, "Range")
    domain = co.coerce_domain(inputs[0], "Range D")
    steps = _count(inputs[1], "Range N")
    if steps == 0:
        return {"R": List((Number(domain.start),))}
    step = (domain.end - domain.start) / steps
    values = [domain.start + i * step for i in range(steps)]
    values.append(domain.end)
    return {"R": List(tuple(Number(v) for v in values))}


@table.component(
    "Series",
    guids=["e64c5fb1-845c-4ab1-8911-5f338516ba67"],
    names=["Ser"],
    inputs=["S", "N", "C"],
    outputs=["S"],
)
def series(inputs: Sequence[Value], meta: MetaMap) -> ComponentOutputs:
    """``C`` numbers starting at ``S`` with step ``N``."""
    require_inputs(inputs, 3, "Series")
    start = co.coerce_number(inputs[0], "Series S")
    step = co.coerce_number(inputs[1], "Series N")
    count = _count(inputs[2], "Series C")
    if not (math.isfinite(start) and math.isfinite(step)):
        msg = "Series needs a finite start and step"
        raise ComponentMessageError(msg)
    return {"S": List(tuple(Number(start + i * step) for i in range(count)))}


@table.component(
    "Concatenate",
    guids=["01cbd6e3-ccbe-4c24-baeb-46e10553e18b", "2013e425-8713-42e2-a661-b57e78840337"],
    names=["Concat"],
    inputs=["A", "B"],
    outputs=["R"],
    optional=["B"],
)
def concatenate(inputs: Sequence[Value], meta: MetaMap) -> ComponentOutputs:
    require_inputs(inputs, 1, "Concatenate")

    def join(a: Value, b: Value) -> Value:
        tail = "" if isinstance(b, Null) else co.coerce_text(b, "Concatenate B")
        return Text(co.coerce_text(a, "Concatenate A") + tail)

    return {"R": broadcast([inputs[0], arg(inputs, 1)], join)}


@table.component(
    "Text Length",
    guids=["dca05f6f-e3d9-42e3-b3bb-eb20363fb335"],
    names=["Len"],
    inputs=["T"],
    outputs=["L"],
)
def text_length(inputs: Sequence[Value], meta: MetaMap) -> ComponentOutputs:
    """Length of the text in characters."""
    require_inputs(inputs, 1, "Text Length")
    return {"L": broadcast([inputs[0]], lambda t: Number(float(len(co.coerce_text(t, "Text Length")))))}


REGISTRATIONS = tuple(table.kinds)
