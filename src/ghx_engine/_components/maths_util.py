"""Utility, trigonometry, complex and time components (Maths > Util, Trig, Time)."""

import datetime as dt
import math
from collections.abc import Callable, Sequence

from ghx_engine import _coerce as co
from ghx_engine._errors import ComponentMessageError
from ghx_engine._graph import MetaMap
from ghx_engine._value import NULL, Complex, DateTime, Null, Number, Value

from ._base import ComponentCategory, ComponentOutputs, ComponentTable, arg, broadcast, require_inputs

table = ComponentTable(ComponentCategory.MATHS)

type _UnaryFn = Callable[[float], float]


def _numeric(inputs: Sequence[Value], name: str, pin: str, func: _UnaryFn) -> ComponentOutputs:
    require_inputs(inputs, 1, name)
    return {pin: broadcast([inputs[0]], lambda a: Number(func(co.coerce_number(a, name))))}


@table.component(
    "Pi",
    guids=["0d2ccfb3-9d41-4759-9452-da6a522c3eaa"],
    inputs=["N"],
    outputs=["y"],
    optional=["N"],
)
def pi(inputs: Sequence[Value], meta: MetaMap) -> ComponentOutputs:
    """Pi times the factor ``N`` (1 when unwired)."""
    factor = arg(inputs, 0)
    if isinstance(factor, Null):
        return {"y": Number(math.pi)}
    return {"y": broadcast([factor], lambda n: Number(math.pi * co.coerce_number(n, "Pi")))}


@table.component(
    "Maximum",
    guids=["0d1e2027-f153-460d-84c0-f9af431b08cb"],
    names=["Max"],
    inputs=["A", "B"],
    outputs=["R"],
)
def maximum(inputs: Sequence[Value], meta: MetaMap) -> ComponentOutputs:
    require_inputs(inputs, 2, "Maximum")
    return {
        "R": broadcast(
            [inputs[0], inputs[1]],
            lambda a, b: Number(max(co.coerce_number(a, "Maximum"), co.coerce_number(b, "Maximum"))),
        ),
    }


@table.component(
    "Minimum",
    guids=["57308b30-772d-4919-ac67-e86c18f3a996"],
    names=["Min"],
    inputs=["A", "B"],
    outputs=["R"],
)
def minimum(inputs: Sequence[Value], meta: MetaMap) -> ComponentOutputs:
    require_inputs(inputs, 2, "Minimum")
    return {
        "R": broadcast(
            [inputs[0], inputs[1]],
            lambda a, b: Number(min(co.coerce_number(a, "Minimum"), co.coerce_number(b, "Minimum"))),
        ),
    }


@table.component(
    "Average",
    guids=["7986486c-621a-48fb-8f27-a28a22c91cc9"],
    names=["Avr"],
    inputs=["I"],
    outputs=["AM"],
)
def average(inputs: Sequence[Value], meta: MetaMap) -> ComponentOutputs:
    """Arithmetic mean of every number in the input; Null when there are none."""
    require_inputs(inputs, 1, "Average")
    numbers = co.collect_numbers(inputs[0], "Average")
    if not numbers:
        return {"AM": NULL}
    try:
        total = math.fsum(numbers)
    except (ValueError, OverflowError) as e:
        msg = f"Average is undefined: {e}"
        raise ComponentMessageError(msg) from e
    return {"AM": Number(total / len(numbers))}


def _round_half_away(number: float) -> float:
    if not math.isfinite(number):
        return number
    return math.copysign(math.floor(abs(number) + 0.5), number)


@table.component(
    "Round",
    guids=["a50c4a3b-0177-4c91-8556-db95de6c56c8"],
    inputs=["x"],
    outputs=["N", "F", "C"],
)
def round_number(inputs: Sequence[Value], meta: MetaMap) -> ComponentOutputs:
    """Nearest (half away from zero), floor and ceiling of a number."""
    require_inputs(inputs, 1, "Round")
    number = co.coerce_number(inputs[0], "Round")
    if not math.isfinite(number):
        return {"N": Number(number), "F": Number(number), "C": Number(number)}
    return {
        "N": Number(_round_half_away(number)),
        "F": Number(float(math.floor(number))),
        "C": Number(float(math.ceil(number))),
    }


@table.component(
    "Degrees",
    guids=["0d77c51e-584f-44e8-aed2-c2ddf4803888"],
    names=["Deg"],
    inputs=["R"],
    outputs=["D"],
)
def degrees(inputs: Sequence[Value], meta: MetaMap) -> ComponentOutputs:
    return _numeric(inputs, "Degrees", "D", math.degrees)


@table.component(
    "Radians",
    guids=["a4cd2751-414d-42ec-8916-476ebf62d7fe"],
    names=["Rad"],
    inputs=["D"],
    outputs=["R"],
)
def radians(inputs: Sequence[Value], meta: MetaMap) -> ComponentOutputs:
    return _numeric(inputs, "Radians", "R", math.radians)


def _trig(func: _UnaryFn, name: str) -> _UnaryFn:
    def apply(x: float) -> float:
        if math.isinf(x):
            msg = f"{name} of an infinite angle is undefined"
            raise ComponentMessageError(msg)
        return func(x)

    return apply


@table.component(
    "Sine",
    guids=["7663efbb-d9b8-4c6a-a0da-c3750a7bbe77"],
    names=["Sin"],
    inputs=["x"],
    outputs=["y"],
)
def sine(inputs: Sequence[Value], meta: MetaMap) -> ComponentOutputs:
    return _numeric(inputs, "Sine", "y", _trig(math.sin, "Sine"))


@table.component(
    "Cosine",
    guids=["d2d2a900-780c-4d58-9a35-1f9d8d35df6f"],
    names=["Cos"],
    inputs=["x"],
    outputs=["y"],
)
def cosine(inputs: Sequence[Value], meta: MetaMap) -> ComponentOutputs:
    return _numeric(inputs, "Cosine", "y", _trig(math.cos, "Cosine"))


@table.component(
    "Create Complex",
    guids=["63d12974-2915-4ccf-ac26-5d566c3bac92"],
    names=["Complex"],
    inputs=["R", "I"],
    outputs=["C"],
    optional=["I"],
)
def create_complex(inputs: Sequence[Value], meta: MetaMap) -> ComponentOutputs:
    require_inputs(inputs, 1, "Create Complex")
    imaginary = arg(inputs, 1)
    if isinstance(imaginary, Null):
        imaginary = Number(0.0)

    def build(re: Value, im: Value) -> Value:
        return Complex(co.coerce_number(re, "Create Complex"), co.coerce_number(im, "Create Complex"))

    return {"C": broadcast([inputs[0], imaginary], build)}


@table.component(
    "Complex Modulus",
    guids=["88fb33f9-f467-452b-a0e3-44bdb78a9b06"],
    names=["Mod"],
    inputs=["C"],
    outputs=["R"],
)
def complex_modulus(inputs: Sequence[Value], meta: MetaMap) -> ComponentOutputs:
    require_inputs(inputs, 1, "Complex Modulus")

    def modulus(value: Value) -> Value:
        number = co.coerce_complex(value, "Complex Modulus")
        return Number(math.hypot(number.re, number.im))

    return {"R": broadcast([inputs[0]], modulus)}


def _date_part(value: Value, label: str, low: int, high: int, default: int | None = None) -> int:
    if isinstance(value, Null):
        if default is None:
            msg = f"Construct Date requires {label}"
            raise ComponentMessageError(msg)
        return default
    number = co.coerce_integer(value, f"Construct Date {label}")
    if not low <= number <= high:
        msg = f"Construct Date {label} must be in {low}..{high}, got {number}"
        raise ComponentMessageError(msg)
    return number


@table.component(
    "Construct Date",
    guids=["0c2f0932-5ddc-4ece-bd84-a3a059d3df7a"],
    names=["Date"],
    inputs=["Y", "M", "D", "h", "m", "s"],
    outputs=["D"],
    optional=["h", "m", "s"],
)
def construct_date(inputs: Sequence[Value], meta: MetaMap) -> ComponentOutputs:
    """Build a date from year, month and day plus an optional time of day.

    Seconds may carry a fraction down to nanoseconds.
    """
    year = _date_part(arg(inputs, 0), "year", 1, 9999)
    month = _date_part(arg(inputs, 1), "month", 1, 12)
    day = _date_part(arg(inputs, 2), "day", 1, 31)
    hour = _date_part(arg(inputs, 3), "hour", 0, 23, default=0)
    minute = _date_part(arg(inputs, 4), "minute", 0, 59, default=0)

    seconds_value = arg(inputs, 5)
    seconds = 0.0 if isinstance(seconds_value, Null) else co.coerce_number(seconds_value, "Construct Date second")
    if not 0.0 <= seconds < 60.0:  # noqa: PLR2004
        msg = f"Construct Date second must be in [0, 60), got {seconds}"
        raise ComponentMessageError(msg)
    whole = math.floor(seconds)
    nanos = min(round((seconds - whole) * 1e9), 999_999_999)

    try:
        moment = dt.datetime(year, month, day, hour, minute, whole, nanos // 1000)  # noqa: DTZ001
    except ValueError as e:
        msg = f"Construct Date: invalid date: {e}"
        raise ComponentMessageError(msg) from e
    return {"D": DateTime(moment, nanos % 1000)}


REGISTRATIONS = tuple(table.kinds)
