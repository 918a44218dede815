"""Domain components (Maths > Domain)."""

import math
from collections.abc import Sequence

from ghx_engine import _coerce as co
from ghx_engine._errors import ComponentMessageError
from ghx_engine._graph import MetaMap
from ghx_engine._value import Domain1D, Domain2D, Number, Value

from ._base import ComponentCategory, ComponentOutputs, ComponentTable, broadcast, require_inputs

table = ComponentTable(ComponentCategory.MATHS)


def _finite_domain(start: float, end: float, context: str) -> Domain1D:
    if not (math.isfinite(start) and math.isfinite(end)):
        msg = f"{context}: domain bounds must be finite, got {start} and {end}"
        raise ComponentMessageError(msg)
    return Domain1D(start, end)


@table.component(
    "Construct Domain",
    guids=["d1a28e95-cf96-4936-bf34-8bf142d731bf"],
    names=["Dom"],
    inputs=["A", "B"],
    outputs=["I"],
)
def construct_domain(inputs: Sequence[Value], meta: MetaMap) -> ComponentOutputs:
    require_inputs(inputs, 2, "Construct Domain")

    def build(a: Value, b: Value) -> Value:
        return _finite_domain(
            co.coerce_number(a, "Construct Domain"),
            co.coerce_number(b, "Construct Domain"),
            "Construct Domain",
        )

    return {"I": broadcast([inputs[0], inputs[1]], build)}


@table.component(
    "Deconstruct Domain",
    guids=["825ea536-aebb-41e9-af32-8baeb2ecb590"],
    names=["DeDomain"],
    inputs=["I"],
    outputs=["S", "E"],
)
def deconstruct_domain(inputs: Sequence[Value], meta: MetaMap) -> ComponentOutputs:
    require_inputs(inputs, 1, "Deconstruct Domain")
    domain = co.coerce_domain(inputs[0], "Deconstruct Domain")
    return {"S": Number(domain.start), "E": Number(domain.end)}


@table.component(
    "Construct Domain²",
    guids=["8555a743-36c1-42b8-abcc-06d9cb94519f"],
    names=["Dom2"],
    inputs=["U", "V"],
    outputs=["I²"],
)
def construct_domain2(inputs: Sequence[Value], meta: MetaMap) -> ComponentOutputs:
    require_inputs(inputs, 2, "Construct Domain²")
    u = co.coerce_domain(inputs[0], "Construct Domain²")
    v = co.coerce_domain(inputs[1], "Construct Domain²")
    return {"I²": Domain2D(u, v)}


@table.component(
    "Remap Numbers",
    guids=["2fcc2743-8339-4cdf-a046-a1f17439191d"],
    names=["Remap", "ReMap"],
    inputs=["V", "S", "T"],
    outputs=["R", "C"],
)
def remap_numbers(inputs: Sequence[Value], meta: MetaMap) -> ComponentOutputs:
    """Map values from the source domain onto the target; ``C`` clips to the source first."""
    require_inputs(inputs, 3, "Remap Numbers")
    source = co.coerce_domain(inputs[1], "Remap Numbers")
    target = co.coerce_domain(inputs[2], "Remap Numbers")

    def mapped(value: Value) -> Value:
        return Number(source.remap(co.coerce_number(value, "Remap Numbers"), target))

    def clipped(value: Value) -> Value:
        return Number(source.remap(source.clamp(co.coerce_number(value, "Remap Numbers")), target))

    return {"R": broadcast([inputs[0]], mapped), "C": broadcast([inputs[0]], clipped)}


@table.component(
    "Bounds",
    guids=["f44b92b0-3b5b-493a-86f4-fd7408c3daf3"],
    names=["Bnd"],
    inputs=["N"],
    outputs=["I"],
)
def bounds(inputs: Sequence[Value], meta: MetaMap) -> ComponentOutputs:
    require_inputs(inputs, 1, "Bounds")
    numbers = [n for n in co.collect_numbers(inputs[0], "Bounds") if math.isfinite(n)]
    if not numbers:
        msg = "Bounds needs at least one finite number"
        raise ComponentMessageError(msg)
    return {"I": Domain1D(min(numbers), max(numbers))}


REGISTRATIONS = tuple(table.kinds)
