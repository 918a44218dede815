"""Lenient interpretation of values as concrete numeric and geometric shapes.

Components phrase their requests against these helpers instead of matching on
variants directly, so that the coercion policy lives in one place:

- a single-element ``List`` is unwrapped before anything else is tried;
- ``Number`` and ``Boolean`` convert into each other (0 is false);
- ``Point`` and ``Vector`` are interchangeable where coordinates are wanted;
- ``Text`` is parsed (after trimming) when a number or flag is wanted;
- nested lists are flattened when a sequence of numbers or points is wanted.

Every helper takes a ``context`` (component or pin name) that ends up in the
:class:`~ghx_engine._errors.CoercionError` raised on failure, together with
the kind of the value actually encountered.
"""

import math

from . import _geometry as geo
from ._errors import CoercionError
from ._value import (
    WORLD_XY,
    Boolean,
    Color,
    Complex,
    CurveLine,
    Domain1D,
    Domain2D,
    List,
    Matrix,
    Null,
    Number,
    Plane,
    Point,
    Text,
    Value,
    Vec3,
    Vector,
)

BOOLEAN_TOLERANCE = 1e-9


def _parse_float(text: str, context: str) -> float:
    stripped = text.strip()
    if "_" in stripped:
        raise CoercionError(context, "number", "Text", f"cannot parse {text!r}")
    try:
        number = float(stripped)
    except ValueError:
        raise CoercionError(context, "number", "Text", f"cannot parse {text!r}") from None
    if math.isnan(number):
        raise CoercionError(context, "number", "Text", "value is NaN")
    return number


def coerce_number(value: Value, context: str = "number") -> float:
    """Interpret a value as a finite-or-infinite float; NaN is rejected.

    Raises:
        CoercionError: If the value has no numeric interpretation or is NaN.

    """
    match value:
        case Number(value=number):
            if math.isnan(number):
                raise CoercionError(context, "number", "Number", "value is NaN")
            return number
        case Boolean(value=flag):
            return 1.0 if flag else 0.0
        case Text(value=text):
            return _parse_float(text, context)
        case List(items=(item,)):
            return coerce_number(item, context)
    raise CoercionError(context, "number", value.kind)


def coerce_integer(value: Value, context: str = "integer") -> int:
    """Interpret a value as an integer, rounding half away from zero."""
    number = coerce_number(value, context)
    if math.isinf(number):
        raise CoercionError(context, "integer", value.kind, "value is infinite")
    return int(math.copysign(math.floor(abs(number) + 0.5), number))


def coerce_boolean(value: Value, context: str = "boolean") -> bool:
    """Interpret a value as a flag; numbers are true when non-zero."""
    match value:
        case Boolean(value=flag):
            return flag
        case Number(value=number):
            if math.isnan(number):
                raise CoercionError(context, "boolean", "Number", "value is NaN")
            return abs(number) > BOOLEAN_TOLERANCE
        case Text(value=text):
            lowered = text.strip().lower()
            if lowered == "true":
                return True
            if lowered == "false":
                return False
            try:
                return abs(_parse_float(text, context)) > BOOLEAN_TOLERANCE
            except CoercionError:
                raise CoercionError(context, "boolean", "Text", f"cannot parse {text!r}") from None
        case List(items=(item,)):
            return coerce_boolean(item, context)
    raise CoercionError(context, "boolean", value.kind)


def format_number(number: float) -> str:
    """Format a number the way it is shown as text (integers without a fraction)."""
    if math.isfinite(number) and number.is_integer():
        return str(int(number))
    return repr(number)


def coerce_text(value: Value, context: str = "text") -> str:
    match value:
        case Text(value=text):
            return text
        case Number(value=number):
            return format_number(number)
        case Boolean(value=flag):
            return "true" if flag else "false"
        case List(items=(item,)):
            return coerce_text(item, context)
    raise CoercionError(context, "text", value.kind)


def _coords_from_list(items: tuple[Value, ...]) -> Vec3 | None:
    if len(items) == 3 and all(isinstance(item, Number) for item in items):  # noqa: PLR2004
        coords = tuple(item.value for item in items)  # type: ignore[union-attr]
        if not any(math.isnan(c) for c in coords):
            return coords  # type: ignore[return-value]
    return None


def coerce_point(value: Value, context: str = "point") -> Vec3:
    """Interpret a value as point coordinates.

    Points and vectors carry their coordinates over, a number ``n`` is
    broadcast to ``(n, n, n)`` and a list of three numbers is read as
    ``(x, y, z)``.
    """
    match value:
        case Point() | Vector():
            return value.coords
        case Number():
            n = coerce_number(value, context)
            return (n, n, n)
        case List(items=(item,)):
            return coerce_point(item, context)
        case List(items=items):
            coords = _coords_from_list(items)
            if coords is not None:
                return coords
    raise CoercionError(context, "point", value.kind)


def coerce_vector(value: Value, context: str = "vector") -> Vec3:
    """Interpret a value as vector components (same rules as points)."""
    try:
        return coerce_point(value, context)
    except CoercionError as e:
        raise CoercionError(context, "vector", e.actual_kind) from None


def coerce_line(value: Value, context: str = "line") -> tuple[Vec3, Vec3]:
    """Interpret a value as a segment: a CurveLine or a list of two points."""
    match value:
        case CurveLine(p1=p1, p2=p2):
            return (p1, p2)
        case List(items=(item,)):
            return coerce_line(item, context)
        case List(items=(first, second)):
            return (coerce_point(first, context), coerce_point(second, context))
    raise CoercionError(context, "line", value.kind)


def _flatten_polyline(value: Value, context: str, points: list[Vec3]) -> None:
    match value:
        case List(items=items):
            for item in items:
                _flatten_polyline(item, context, points)
        case CurveLine(p1=p1, p2=p2):
            if not points or points[-1] != p1:
                points.append(p1)
            points.append(p2)
        case Null():
            pass
        case _:
            points.append(coerce_point(value, context))


def coerce_polyline(value: Value, context: str = "polyline") -> list[Vec3]:
    """Flatten nested lists and lines into a point sequence of at least two points.

    Consecutive lines sharing an endpoint contribute the shared point once.
    """
    points: list[Vec3] = []
    _flatten_polyline(value, context, points)
    if len(points) < 2:  # noqa: PLR2004
        raise CoercionError(context, "polyline", value.kind, f"need at least 2 points, got {len(points)}")
    return points


def _collect_numbers(value: Value, context: str, numbers: list[float]) -> None:
    match value:
        case List(items=items):
            for item in items:
                _collect_numbers(item, context, numbers)
        case Point() | Vector():
            numbers.extend(value.coords)
        case Null():
            pass
        case _:
            numbers.append(coerce_number(value, context))


def collect_numbers(value: Value, context: str = "numbers") -> list[float]:
    """Flatten a value into a list of numbers; points contribute their coordinates."""
    numbers: list[float] = []
    _collect_numbers(value, context, numbers)
    return numbers


def _collect_points(value: Value, context: str, points: list[Vec3]) -> None:
    match value:
        case Point() | Vector():
            points.append(value.coords)
        case List(items=items):
            coords = _coords_from_list(items)
            if coords is not None:
                points.append(coords)
                return
            for item in items:
                _collect_points(item, context, points)
        case Null():
            pass
        case _:
            raise CoercionError(context, "points", value.kind)


def collect_points(value: Value, context: str = "points") -> list[Vec3]:
    """Flatten a value into a list of point coordinates."""
    points: list[Vec3] = []
    _collect_points(value, context, points)
    return points


def coerce_list(value: Value) -> tuple[Value, ...]:
    """View any value as a sequence: lists as-is, Null as empty, others as one item."""
    match value:
        case List(items=items):
            return items
        case Null():
            return ()
    return (value,)


def coerce_plane(value: Value, context: str = "plane") -> Plane:  # noqa: C901
    """Interpret a value as a plane.

    Accepted encodings:

    - ``Plane`` itself;
    - ``List([origin, x_sample, y_sample])``: three points, the axes point from
      the origin towards the samples (y is orthogonalized against x);
    - ``List([origin, direction])``: the plane through ``origin`` whose z axis
      is ``normalize(direction)``; a second Point is read as ``point - origin``;
    - a bare ``Point``: that origin with the world XY frame;
    - a bare ``Vector``: that normal through the world origin.

    Raises:
        CoercionError: If the value has no plane interpretation or the frame
            is degenerate.

    """
    plane: Plane | None
    match value:
        case Plane():
            return value
        case Point():
            return Plane(value.coords, WORLD_XY.x_axis, WORLD_XY.y_axis, WORLD_XY.z_axis)
        case Vector():
            plane = geo.plane_from_normal(WORLD_XY.origin, value.coords)
        case List(items=(item,)):
            return coerce_plane(item, context)
        case List(items=(first, Vector() as normal)):
            plane = geo.plane_from_normal(coerce_point(first, context), normal.coords)
        case List(items=(first, second)):
            origin = coerce_point(first, context)
            plane = geo.plane_from_normal(origin, geo.sub(coerce_point(second, context), origin))
        case List(items=(first, second, third)):
            origin = coerce_point(first, context)
            x_sample = coerce_point(second, context)
            y_sample = coerce_point(third, context)
            plane = geo.plane_from_axes(origin, geo.sub(x_sample, origin), geo.sub(y_sample, origin))
        case _:
            raise CoercionError(context, "plane", value.kind)
    if plane is None:
        raise CoercionError(context, "plane", value.kind, "degenerate frame")
    return plane


def coerce_domain(value: Value, context: str = "domain") -> Domain1D:
    """Interpret a value as a one-dimensional domain.

    A number ``n`` reads as the degenerate domain ``n To n``; a list of two
    numbers as ``a To b``; text as ``"a To b"``.
    """
    match value:
        case Domain1D():
            return value
        case Number():
            number = coerce_number(value, context)
            return Domain1D(number, number)
        case Text(value=text):
            parts = text.lower().split(" to ")
            if len(parts) == 2:  # noqa: PLR2004
                return Domain1D(_parse_float(parts[0], context), _parse_float(parts[1], context))
        case List(items=(item,)):
            return coerce_domain(item, context)
        case List(items=(first, second)):
            return Domain1D(coerce_number(first, context), coerce_number(second, context))
    raise CoercionError(context, "domain", value.kind)


def coerce_domain2d(value: Value, context: str = "domain²") -> Domain2D:
    match value:
        case Domain2D():
            return value
        case List(items=(item,)):
            return coerce_domain2d(item, context)
        case List(items=(first, second)):
            return Domain2D(coerce_domain(first, context), coerce_domain(second, context))
    raise CoercionError(context, "domain²", value.kind)


def coerce_matrix(value: Value, context: str = "matrix") -> Matrix:
    """Interpret a value as a matrix; a list of equal-length number lists gives its rows."""
    match value:
        case Matrix():
            return value
        case Number():
            return Matrix(1, 1, (coerce_number(value, context),))
        case List(items=items) if items and all(isinstance(row, List) for row in items):
            rows = [collect_numbers(row, context) for row in items]
            columns = len(rows[0])
            if any(len(row) != columns for row in rows):
                raise CoercionError(context, "matrix", "List", "rows have different lengths")
            return Matrix(len(rows), columns, tuple(v for row in rows for v in row))
        case List(items=(item,)):
            return coerce_matrix(item, context)
    raise CoercionError(context, "matrix", value.kind)


def coerce_complex(value: Value, context: str = "complex") -> Complex:
    match value:
        case Complex():
            return value
        case List(items=(item,)):
            return coerce_complex(item, context)
    try:
        return Complex(coerce_number(value, context), 0.0)
    except CoercionError:
        raise CoercionError(context, "complex", value.kind) from None


def _channel(number: float) -> float:
    return min(max(number, 0.0), 1.0)


def coerce_color(value: Value, context: str = "colour") -> Color:
    """Interpret a value as a colour.

    Lists or comma- or semicolon-separated text of three or four channels
    are accepted, as is ``#rrggbb`` hex text; channels above 1 are read on
    the 0-255 scale.
    """
    match value:
        case Color():
            return value
        case List(items=(item,)):
            return coerce_color(item, context)
        case Text(value=text) if text.strip().startswith("#"):
            digits = text.strip()[1:]
            try:
                channels = [int(digits[i : i + 2], 16) / 255.0 for i in range(0, len(digits), 2)]
            except ValueError:
                raise CoercionError(context, "colour", "Text", f"cannot parse {text!r}") from None
            if len(digits) in (6, 8):
                return Color(*channels)
        case List() | Text():
            if isinstance(value, Text):
                channels = [_parse_float(part, context) for part in value.value.replace(";", ",").split(",")]
            else:
                channels = collect_numbers(value, context)
            if len(channels) in (3, 4):
                divisor = 255.0 if any(c > 1.0 for c in channels) else 1.0
                scaled = [_channel(c / divisor) for c in channels]
                return Color(*scaled)
    raise CoercionError(context, "colour", value.kind)
