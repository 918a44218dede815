"""Arithmetic, comparison and boolean gate components (Maths > Operators)."""

import math
from collections.abc import Callable, Sequence

from ghx_engine import _coerce as co
from ghx_engine import _geometry as geo
from ghx_engine._errors import ComponentMessageError
from ghx_engine._graph import MetaMap
from ghx_engine._value import Boolean, List, Number, Point, Value, Vector

from ._base import ComponentCategory, ComponentOutputs, ComponentTable, arg, broadcast, require_inputs

table = ComponentTable(ComponentCategory.MATHS)

DIVISION_TOLERANCE = 1e-12
EQUALITY_TOLERANCE = 1e-9
MAX_FACTORIAL = 170


def _binary(inputs: Sequence[Value], name: str, func: Callable[[float, float], float]) -> Value:
    require_inputs(inputs, 2, name)

    def apply(a: Value, b: Value) -> Value:
        return Number(func(co.coerce_number(a, name), co.coerce_number(b, name)))

    return broadcast([inputs[0], inputs[1]], apply)


def _unary(inputs: Sequence[Value], name: str, func: Callable[[float], float]) -> Value:
    require_inputs(inputs, 1, name)
    return broadcast([inputs[0]], lambda a: Number(func(co.coerce_number(a, name))))


def _add_values(a: Value, b: Value) -> Value:
    if isinstance(a, Point | Vector) and isinstance(b, Point | Vector):
        result = geo.add(a.coords, b.coords)
        return Point(*result) if isinstance(a, Point) else Vector(*result)
    return Number(co.coerce_number(a, "Addition") + co.coerce_number(b, "Addition"))


@table.component(
    "Addition",
    guids=["a0d62394-a118-422d-abb3-6af115c75b25", "cae37d1c-8146-4e0b-9cf1-14cb3e337b94"],
    names=["Add", "A+B"],
    inputs=["A", "B"],
    outputs=["R"],
)
def addition(inputs: Sequence[Value], meta: MetaMap) -> ComponentOutputs:
    require_inputs(inputs, 2, "Addition")
    return {"R": broadcast([inputs[0], inputs[1]], _add_values)}


@table.component(
    "Subtraction",
    guids=["2c56ab33-c7cc-4129-886c-d5856b714010", "9c007a04-d0d9-48e4-9da3-9ba142bc4d46"],
    names=["A-B"],
    inputs=["A", "B"],
    outputs=["R"],
)
def subtraction(inputs: Sequence[Value], meta: MetaMap) -> ComponentOutputs:
    return {"R": _binary(inputs, "Subtraction", lambda a, b: a - b)}


@table.component(
    "Multiplication",
    guids=["b8963bb1-aa57-476e-a20e-ed6cf635a49c", "ce46b74e-00c9-43c4-805a-193b69ea4a11"],
    names=["A×B", "AxB"],
    inputs=["A", "B"],
    outputs=["R"],
)
def multiplication(inputs: Sequence[Value], meta: MetaMap) -> ComponentOutputs:
    return {"R": _binary(inputs, "Multiplication", lambda a, b: a * b)}


def _divide(a: float, b: float) -> float:
    if abs(b) < DIVISION_TOLERANCE:
        msg = "Division by zero"
        raise ComponentMessageError(msg)
    return a / b


@table.component(
    "Division",
    guids=["9c85271f-89fa-4e9f-9f4a-d75802120ccc"],
    names=["A/B"],
    inputs=["A", "B"],
    outputs=["R"],
)
def division(inputs: Sequence[Value], meta: MetaMap) -> ComponentOutputs:
    return {"R": _binary(inputs, "Division", _divide)}


def _modulus(a: float, b: float) -> float:
    if not (math.isfinite(a) and math.isfinite(b)):
        msg = f"Modulus of {a} by {b} is undefined"
        raise ComponentMessageError(msg)
    if abs(b) < DIVISION_TOLERANCE:
        msg = "Modulus by zero"
        raise ComponentMessageError(msg)
    # Floored: the result takes the sign of the divisor.
    return math.fmod(math.fmod(a, b) + b, b)


@table.component(
    "Modulus",
    guids=["431bc610-8ae1-4090-b217-1a9d9c519fe2"],
    names=["Mod"],
    inputs=["A", "B"],
    outputs=["R"],
)
def modulus(inputs: Sequence[Value], meta: MetaMap) -> ComponentOutputs:
    return {"R": _binary(inputs, "Modulus", _modulus)}


def _power(a: float, b: float) -> float:
    try:
        result = math.pow(a, b)
    except (ValueError, OverflowError) as e:
        msg = f"Power {a} ^ {b} is undefined: {e}"
        raise ComponentMessageError(msg) from e
    return result


@table.component(
    "Power",
    guids=["78fed580-851b-46fe-af2f-6519a9d378e0"],
    names=["Pow"],
    inputs=["A", "B"],
    outputs=["R"],
)
def power(inputs: Sequence[Value], meta: MetaMap) -> ComponentOutputs:
    return {"R": _binary(inputs, "Power", _power)}


@table.component(
    "Negative",
    guids=["a3371040-e552-4bc8-b0ff-10a840258e88"],
    names=["Neg"],
    inputs=["x"],
    outputs=["y"],
)
def negative(inputs: Sequence[Value], meta: MetaMap) -> ComponentOutputs:
    return {"y": _unary(inputs, "Negative", lambda x: -x)}


@table.component(
    "Absolute",
    guids=["28124995-cf99-4298-b6f4-c75a8e379f18"],
    names=["Abs"],
    inputs=["x"],
    outputs=["y"],
)
def absolute(inputs: Sequence[Value], meta: MetaMap) -> ComponentOutputs:
    return {"y": _unary(inputs, "Absolute", abs)}


def _factorial(x: float) -> float:
    if x < 0 or not float(x).is_integer():
        msg = f"Factorial needs a non-negative integer, got {co.format_number(x)}"
        raise ComponentMessageError(msg)
    if x > MAX_FACTORIAL:
        msg = f"Factorial of {int(x)} overflows"
        raise ComponentMessageError(msg)
    return float(math.factorial(int(x)))


@table.component(
    "Factorial",
    guids=["80da90e3-3ea9-4cfe-b7cc-2b6019f850e3", "a0a38131-c5fc-4984-b05d-34cf57f0c018"],
    names=["Fac"],
    inputs=["N"],
    outputs=["F"],
)
def factorial(inputs: Sequence[Value], meta: MetaMap) -> ComponentOutputs:
    return {"F": _unary(inputs, "Factorial", _factorial)}


def _mass_values(inputs: Sequence[Value], name: str) -> list[Value]:
    """Flatten all inputs into scalars or vectors, dropping Nulls."""
    values: list[Value] = []
    for value in inputs:
        for item in _flatten(value):
            if isinstance(item, Point | Vector):
                values.append(item)
            else:
                values.append(Number(co.coerce_number(item, name)))
    return values


def _flatten(value: Value) -> list[Value]:
    if isinstance(value, List):
        return [leaf for item in value.items for leaf in _flatten(item)]
    return list(co.coerce_list(value))


def _multiply_values(a: Value, b: Value) -> Value:
    if isinstance(a, Point | Vector) and isinstance(b, Number):
        return Vector(*geo.scale(a.coords, b.value))
    if isinstance(a, Number) and isinstance(b, Point | Vector):
        return Vector(*geo.scale(b.coords, a.value))
    if isinstance(a, Point | Vector) and isinstance(b, Point | Vector):
        return Number(geo.dot(a.coords, b.coords))
    return Number(co.coerce_number(a, "Mass Multiplication") * co.coerce_number(b, "Mass Multiplication"))


def _sequential(values: list[Value], combine: Callable[[Value, Value], Value]) -> tuple[Value, list[Value]]:
    total = values[0]
    partial = [total]
    for value in values[1:]:
        total = combine(total, value)
        partial.append(total)
    return total, partial


@table.component(
    "Mass Addition",
    guids=["5b850221-b527-4bd6-8c62-e94168cd6efa"],
    names=["MA"],
    inputs=["I"],
    outputs=["R", "Pr"],
)
def mass_addition(inputs: Sequence[Value], meta: MetaMap) -> ComponentOutputs:
    values = _mass_values(inputs, "Mass Addition")
    if not values:
        return {"R": Number(0.0), "Pr": List(())}
    total, partial = _sequential(values, _add_values)
    return {"R": total, "Pr": List(tuple(partial))}


@table.component(
    "Mass Multiplication",
    guids=["921775f7-bf22-4cfc-a4db-c415a56069c4", "e44c1bd7-72cc-4697-80c9-02787baf7bb4"],
    names=["MM"],
    inputs=["I"],
    outputs=["R", "Pr"],
)
def mass_multiplication(inputs: Sequence[Value], meta: MetaMap) -> ComponentOutputs:
    values = _mass_values(inputs, "Mass Multiplication")
    if not values:
        return {"R": Number(1.0), "Pr": List(())}
    total, partial = _sequential(values, _multiply_values)
    return {"R": total, "Pr": List(tuple(partial))}


def _compare(
    inputs: Sequence[Value],
    name: str,
    strict: Callable[[float, float], bool],
    inclusive: Callable[[float, float], bool],
) -> tuple[Value, Value]:
    require_inputs(inputs, 2, name)

    def apply_strict(a: Value, b: Value) -> Value:
        return Boolean(strict(co.coerce_number(a, name), co.coerce_number(b, name)))

    def apply_inclusive(a: Value, b: Value) -> Value:
        return Boolean(inclusive(co.coerce_number(a, name), co.coerce_number(b, name)))

    pair = [inputs[0], inputs[1]]
    return broadcast(pair, apply_strict), broadcast(pair, apply_inclusive)


@table.component(
    "Larger Than",
    guids=["30d58600-1aab-42db-80a3-f1ea6c4269a0"],
    names=["Larger", ">"],
    inputs=["A", "B"],
    outputs=[">", ">="],
)
def larger_than(inputs: Sequence[Value], meta: MetaMap) -> ComponentOutputs:
    greater, greater_or_equal = _compare(inputs, "Larger Than", lambda a, b: a > b, lambda a, b: a >= b)
    return {">": greater, ">=": greater_or_equal}


@table.component(
    "Smaller Than",
    guids=["ae840986-cade-4e5a-96b0-570f007d4fc0"],
    names=["Smaller", "<"],
    inputs=["A", "B"],
    outputs=["<", "<="],
)
def smaller_than(inputs: Sequence[Value], meta: MetaMap) -> ComponentOutputs:
    less, less_or_equal = _compare(inputs, "Smaller Than", lambda a, b: a < b, lambda a, b: a <= b)
    return {"<": less, "<=": less_or_equal}


def _equal(a: Value, b: Value) -> bool:
    if isinstance(a, Point | Vector) and isinstance(b, Point | Vector):
        return geo.distance(a.coords, b.coords) <= EQUALITY_TOLERANCE
    try:
        return abs(co.coerce_number(a, "Equality") - co.coerce_number(b, "Equality")) <= EQUALITY_TOLERANCE
    except co.CoercionError:
        return a == b


@table.component(
    "Equality",
    guids=["5db0fb89-4f22-4f09-a777-fa5e55aed7ec"],
    names=["Equals"],
    inputs=["A", "B"],
    outputs=["=", "≠"],
)
def equality(inputs: Sequence[Value], meta: MetaMap) -> ComponentOutputs:
    require_inputs(inputs, 2, "Equality")
    pair = [inputs[0], inputs[1]]
    return {
        "=": broadcast(pair, lambda a, b: Boolean(_equal(a, b))),
        "≠": broadcast(pair, lambda a, b: Boolean(not _equal(a, b))),
    }


def _gate(inputs: Sequence[Value], name: str, func: Callable[[bool, bool], bool]) -> Value:
    require_inputs(inputs, 2, name)

    def apply(a: Value, b: Value) -> Value:
        return Boolean(func(co.coerce_boolean(a, name), co.coerce_boolean(b, name)))

    return broadcast([inputs[0], inputs[1]], apply)


@table.component(
    "Gate And",
    guids=["040f195d-0b4e-4fe0-901f-fedb2fd3db15"],
    names=["And"],
    inputs=["A", "B"],
    outputs=["R"],
)
def gate_and(inputs: Sequence[Value], meta: MetaMap) -> ComponentOutputs:
    return {"R": _gate(inputs, "Gate And", lambda a, b: a and b)}


@table.component(
    "Gate Or",
    guids=["5cad70f9-5a53-4c5c-a782-54a479b4abe3"],
    names=["Or"],
    inputs=["A", "B"],
    outputs=["R"],
)
def gate_or(inputs: Sequence[Value], meta: MetaMap) -> ComponentOutputs:
    return {"R": _gate(inputs, "Gate Or", lambda a, b: a or b)}


@table.component(
    "Gate Not",
    guids=["cb2c7d3c-41b4-4c6d-a6bd-9235bd2851bb"],
    names=["Not"],
    inputs=["A"],
    outputs=["R"],
)
def gate_not(inputs: Sequence[Value], meta: MetaMap) -> ComponentOutputs:
    require_inputs(inputs, 1, "Gate Not")
    return {"R": broadcast([arg(inputs, 0)], lambda a: Boolean(not co.coerce_boolean(a, "Gate Not")))}


REGISTRATIONS = tuple(table.kinds)
