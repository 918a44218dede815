"""Primitive parameter components (Params > Primitive and Params > Geometry).

A parameter passes its input through after checking that it has the
parameter's kind. Lists are validated element-wise and keep their nesting;
an empty input yields Null.
"""

from collections.abc import Callable, Sequence

from ghx_engine import _coerce as co
from ghx_engine._graph import MetaMap
from ghx_engine._value import (
    NULL,
    Boolean,
    DateTime,
    Domain2D,
    List,
    Null,
    Number,
    Point,
    Text,
    Value,
    Vector,
)

from ._base import ComponentCategory, ComponentOutputs, ComponentTable

table = ComponentTable(ComponentCategory.PARAMS)

type Converter = Callable[[Value, str], Value]


def _map_leaves(value: Value, convert: Converter, context: str) -> Value:
    match value:
        case Null():
            return NULL
        case List(items=items):
            return List(tuple(_map_leaves(item, convert, context) for item in items))
    return convert(value, context)


def _param(inputs: Sequence[Value], pin: str, convert: Converter, context: str) -> ComponentOutputs:
    values = [value for value in inputs if not isinstance(value, Null)]
    if not values:
        return {pin: NULL}
    value = values[0] if len(values) == 1 else List(tuple(values))
    return {pin: _map_leaves(value, convert, context)}


def _to_number(value: Value, context: str) -> Value:
    return Number(co.coerce_number(value, context))


def _to_integer(value: Value, context: str) -> Value:
    return Number(float(co.coerce_integer(value, context)))


def _to_text(value: Value, context: str) -> Value:
    return Text(co.coerce_text(value, context))


def _to_boolean(value: Value, context: str) -> Value:
    return Boolean(co.coerce_boolean(value, context))


def _to_complex(value: Value, context: str) -> Value:
    return co.coerce_complex(value, context)


def _to_time(value: Value, context: str) -> Value:
    if isinstance(value, DateTime):
        return value
    raise co.CoercionError(context, "time", value.kind)


def _to_colour(value: Value, context: str) -> Value:
    return co.coerce_color(value, context)


def _to_matrix(value: Value, context: str) -> Value:
    return co.coerce_matrix(value, context)


def _to_domain(value: Value, context: str) -> Value:
    if isinstance(value, Domain2D):
        return value
    return co.coerce_domain(value, context)


def _to_point(value: Value, context: str) -> Value:
    return Point(*co.coerce_point(value, context))


def _to_vector(value: Value, context: str) -> Value:
    return Vector(*co.coerce_vector(value, context))


@table.component(
    "Number",
    guids=["3e8ca6be-fda8-4aaf-b5c0-3c54c8bb7312"],
    names=["Num"],
    inputs=["Num"],
    outputs=["Num"],
    optional=["Num"],
)
def number(inputs: Sequence[Value], meta: MetaMap) -> ComponentOutputs:
    return _param(inputs, "Num", _to_number, "Number")


@table.component(
    "Integer",
    guids=["2e3ab970-8545-46bb-836c-1c11e5610bce"],
    names=["Int"],
    inputs=["Int"],
    outputs=["Int"],
    optional=["Int"],
)
def integer(inputs: Sequence[Value], meta: MetaMap) -> ComponentOutputs:
    return _param(inputs, "Int", _to_integer, "Integer")


@table.component(
    "Text",
    guids=["3ede854e-c753-40eb-84cb-b48008f14fd4"],
    names=["Txt"],
    inputs=["Txt"],
    outputs=["Txt"],
    optional=["Txt"],
)
def text(inputs: Sequence[Value], meta: MetaMap) -> ComponentOutputs:
    return _param(inputs, "Txt", _to_text, "Text")


@table.component(
    "Boolean",
    guids=["cb95db89-6165-43b6-9c41-5702bc5bf137"],
    names=["Bool"],
    inputs=["Bool"],
    outputs=["Bool"],
    optional=["Bool"],
)
def boolean(inputs: Sequence[Value], meta: MetaMap) -> ComponentOutputs:
    return _param(inputs, "Bool", _to_boolean, "Boolean")


@table.component(
    "Complex",
    guids=["476c0cf8-bc3c-4f1c-a61a-6e91e1f8b91e"],
    names=["C"],
    inputs=["C"],
    outputs=["C"],
    optional=["C"],
)
def complex_param(inputs: Sequence[Value], meta: MetaMap) -> ComponentOutputs:
    return _param(inputs, "C", _to_complex, "Complex")


@table.component(
    "Time",
    guids=["81dfff08-0c83-4f1b-a358-14791d642d9e"],
    inputs=["Time"],
    outputs=["Time"],
    optional=["Time"],
)
def time(inputs: Sequence[Value], meta: MetaMap) -> ComponentOutputs:
    return _param(inputs, "Time", _to_time, "Time")


@table.component(
    "Colour",
    guids=["203a91c3-287a-43b6-a9c5-ebb96240a650"],
    names=["Col"],
    inputs=["Col"],
    outputs=["Col"],
    optional=["Col"],
)
def colour(inputs: Sequence[Value], meta: MetaMap) -> ComponentOutputs:
    return _param(inputs, "Col", _to_colour, "Colour")


@table.component(
    "Matrix",
    guids=["bd4a8a18-a3cc-40ba-965b-3be91fee563b"],
    inputs=["Matrix"],
    outputs=["Matrix"],
    optional=["Matrix"],
)
def matrix(inputs: Sequence[Value], meta: MetaMap) -> ComponentOutputs:
    return _param(inputs, "Matrix", _to_matrix, "Matrix")


@table.component(
    "Domain",
    guids=["15b7afe5-d0d0-43e1-b894-34fcfe3be384"],
    inputs=["Domain"],
    outputs=["Domain"],
    optional=["Domain"],
)
def domain(inputs: Sequence[Value], meta: MetaMap) -> ComponentOutputs:
    return _param(inputs, "Domain", _to_domain, "Domain")


@table.component(
    "Point",
    guids=["fbac3e32-f100-4292-8692-77240a42fd1a"],
    names=["Pt"],
    inputs=["Pt"],
    outputs=["Pt"],
    optional=["Pt"],
)
def point(inputs: Sequence[Value], meta: MetaMap) -> ComponentOutputs:
    return _param(inputs, "Pt", _to_point, "Point")


@table.component(
    "Vector",
    guids=["16ef3e75-e315-4899-b531-d3166b42dac9"],
    names=["Vec"],
    inputs=["V"],
    outputs=["V"],
    optional=["V"],
)
def vector(inputs: Sequence[Value], meta: MetaMap) -> ComponentOutputs:
    return _param(inputs, "V", _to_vector, "Vector")


REGISTRATIONS = tuple(table.kinds)
