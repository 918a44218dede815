"""Line and polyline components (Curve > Primitive, Spline)."""

import logging
from collections.abc import Sequence

from ghx_engine import _coerce as co
from ghx_engine import _geometry as geo
from ghx_engine._errors import ComponentMessageError
from ghx_engine._graph import MetaMap
from ghx_engine._value import NULL, Boolean, CurveLine, List, Null, Number, Point, Value, Vec3

from ._base import ComponentCategory, ComponentOutputs, ComponentTable, arg, broadcast, or_default, require_inputs

logger = logging.getLogger(__name__)

table = ComponentTable(ComponentCategory.CURVE)


def _endpoints(value: Value, context: str) -> list[Vec3]:
    """Flatten a value into endpoint coordinates; numbers broadcast to ``(n, n, n)``."""
    match value:
        case Null():
            return []
        case List(items=items) if len(items) == 3 and all(isinstance(item, Number) for item in items):  # noqa: PLR2004
            return [co.coerce_point(value, context)]
        case List(items=items):
            points: list[Vec3] = []
            for item in items:
                points.extend(_endpoints(item, context))
            return points
    return [co.coerce_point(value, context)]


@table.component(
    "Line",
    guids=["4c4e56eb-2f04-43f9-95a3-cc46a14f495a"],
    names=["Ln"],
    inputs=["A", "B"],
    outputs=["L"],
)
def line(inputs: Sequence[Value], meta: MetaMap) -> ComponentOutputs:
    """Lines between start and end points, matched by longest list.

    Pairs whose endpoints coincide produce Null. A single line is returned
    on its own, several as a List.
    """
    require_inputs(inputs, 2, "Line")
    starts = _endpoints(inputs[0], "Line start")
    ends = _endpoints(inputs[1], "Line end")
    if not starts:
        msg = "Line needs at least one start point"
        raise ComponentMessageError(msg)
    if not ends:
        msg = "Line needs at least one end point"
        raise ComponentMessageError(msg)

    lines: list[Value] = []
    for i in range(max(len(starts), len(ends))):
        start = starts[min(i, len(starts) - 1)]
        end = ends[min(i, len(ends) - 1)]
        lines.append(CurveLine(start, end) if start != end else NULL)
    logger.debug("Line built %d segments from %d starts and %d ends", len(lines), len(starts), len(ends))
    if len(lines) == 1:
        return {"L": lines[0]}
    return {"L": List(tuple(lines))}


@table.component(
    "Line SDL",
    guids=["4c619bc9-39fd-4717-82a6-1e07ea237bbe"],
    names=["LineSDL"],
    inputs=["S", "D", "L"],
    outputs=["L"],
)
def line_sdl(inputs: Sequence[Value], meta: MetaMap) -> ComponentOutputs:
    """Line from a start point along a direction for a given length."""
    require_inputs(inputs, 3, "Line SDL")

    def build(start: Value, direction: Value, length: Value) -> Value:
        origin = co.coerce_point(start, "Line SDL")
        unit = geo.normalize(co.coerce_vector(direction, "Line SDL"))
        if unit is None:
            msg = "Line SDL needs a non-zero direction"
            raise ComponentMessageError(msg)
        return CurveLine(origin, geo.add(origin, geo.scale(unit, co.coerce_number(length, "Line SDL"))))

    return {"L": broadcast([inputs[0], inputs[1], inputs[2]], build)}


@table.component(
    "Polyline",
    guids=["71b5b089-500a-4ea6-81c5-2f960441a0e8"],
    names=["PolyLine", "PLine"],
    inputs=["V", "C"],
    outputs=["Pl"],
    optional=["C"],
)
def polyline(inputs: Sequence[Value], meta: MetaMap) -> ComponentOutputs:
    """Polyline through the vertices, as a List of Points.

    With ``C`` set the first vertex is repeated at the end unless the
    polyline is already closed.
    """
    require_inputs(inputs, 1, "Polyline")
    points = co.coerce_polyline(inputs[0], "Polyline")
    if co.coerce_boolean(or_default(arg(inputs, 1), Boolean(False)), "Polyline") and points[0] != points[-1]:
        points.append(points[0])
    return {"Pl": List(tuple(Point(*p) for p in points))}


REGISTRATIONS = tuple(table.kinds)
