"""Interactive input components (Params > Input).

These read their state from node metadata written by the document parser
or by the Engine facade.
"""

import math
from collections.abc import Sequence

from ghx_engine import _coerce as co
from ghx_engine._errors import CoercionError, ComponentMessageError
from ghx_engine._graph import MetaMap
from ghx_engine._value import NULL, Boolean, Null, Number, Text, Value, describe

from ._base import ComponentCategory, ComponentOutputs, ComponentTable

table = ComponentTable(ComponentCategory.INPUT)

SLIDER_OUTPUT = "OUT"
PANEL_OUTPUT = "Output"
TOGGLE_OUTPUT = "Output"


def meta_number(meta: MetaMap, key: str, component: str) -> float | None:
    """Read a numeric metadata entry; None when absent."""
    if key not in meta:
        return None
    raw = meta[key]
    if isinstance(raw, str):
        msg = f"{component}: meta key '{key}' is not numeric ({raw!r})"
        raise ComponentMessageError(msg)
    return float(raw)


def quantize_slider(value: float, minimum: float, maximum: float, step: float | None) -> float:
    """Clamp ``value`` into ``[minimum, maximum]`` and snap it to the step grid.

    Snapping only happens for a positive step with finite bounds; the grid is
    anchored at ``minimum`` and the result is clamped again afterwards.

    Example:
        >>> quantize_slider(3.3, 0.0, 10.0, 0.5)
        3.5

    """
    value = min(max(value, minimum), maximum)
    if step is not None and step > 0 and math.isfinite(minimum) and math.isfinite(maximum):
        value = minimum + round((value - minimum) / step) * step
        value = min(max(value, minimum), maximum)
    return value


@table.component(
    "Number Slider",
    guids=["57da07bd-ecab-415d-9d86-af36d7073abc", "5e0b22ab-f3aa-4cc2-8329-7e548bb9a58b"],
    names=["Slider"],
    outputs=[SLIDER_OUTPUT],
)
def number_slider(inputs: Sequence[Value], meta: MetaMap) -> ComponentOutputs:
    name = "Number Slider"
    if inputs:
        msg = f"{name} takes no inputs, got {len(inputs)}"
        raise ComponentMessageError(msg)

    value = meta_number(meta, "value", name)
    if value is None:
        msg = f"{name} is missing meta key 'value'"
        raise ComponentMessageError(msg)
    minimum = meta_number(meta, "min", name)
    maximum = meta_number(meta, "max", name)
    step = meta_number(meta, "step", name)
    minimum = -math.inf if minimum is None else minimum
    maximum = math.inf if maximum is None else maximum

    for label, number in (("value", value), ("minimum", minimum), ("maximum", maximum), ("step", step)):
        if number is not None and math.isnan(number):
            msg = f"{name} {label} is not a valid number"
            raise ComponentMessageError(msg)
    if minimum > maximum:
        msg = f"{name} minimum {minimum} is greater than maximum {maximum}"
        raise ComponentMessageError(msg)

    return {SLIDER_OUTPUT: Number(quantize_slider(value, minimum, maximum, step))}


@table.component(
    "Panel",
    guids=["59e0b89a-e487-49f8-bab8-b5bab16be14c"],
    inputs=["Input"],
    outputs=[PANEL_OUTPUT],
    optional=["Input"],
)
def panel(inputs: Sequence[Value], meta: MetaMap) -> ComponentOutputs:
    lines = [_panel_line(value) for value in _flatten(inputs)]
    if lines:
        return {PANEL_OUTPUT: Text("\n".join(lines))}
    user_text = meta.get("UserText")
    if user_text is None:
        return {PANEL_OUTPUT: NULL}
    if isinstance(user_text, str):
        return {PANEL_OUTPUT: Text(user_text)}
    return {PANEL_OUTPUT: Text(co.format_number(float(user_text)))}


def _panel_line(value: Value) -> str:
    try:
        return co.coerce_text(value, "Panel")
    except CoercionError:
        return describe(value)


def _flatten(inputs: Sequence[Value]) -> list[Value]:
    flat: list[Value] = []
    for value in inputs:
        if isinstance(value, Null):
            continue
        flat.extend(item for item in co.coerce_list(value) if not isinstance(item, Null))
    return flat


@table.component(
    "Boolean Toggle",
    guids=["2e78987b-9dfb-42a2-8b76-3923ac8bd91a", "ad483f40-dc72-40dc-844d-c9e462c7d19f"],
    names=["Toggle"],
    outputs=[TOGGLE_OUTPUT],
)
def boolean_toggle(inputs: Sequence[Value], meta: MetaMap) -> ComponentOutputs:
    raw = meta.get("value", meta.get("Value"))
    if raw is None:
        return {TOGGLE_OUTPUT: Boolean(False)}
    if isinstance(raw, str):
        return {TOGGLE_OUTPUT: Boolean(co.coerce_boolean(Text(raw), "Boolean Toggle"))}
    return {TOGGLE_OUTPUT: Boolean(raw != 0)}


REGISTRATIONS = tuple(table.kinds)
