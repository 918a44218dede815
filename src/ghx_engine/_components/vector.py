"""Point, vector and plane components (Vector > Point, Vector, Plane)."""

from collections.abc import Sequence

from ghx_engine import _coerce as co
from ghx_engine import _geometry as geo
from ghx_engine._errors import ComponentMessageError
from ghx_engine._graph import MetaMap
from ghx_engine._value import (
    WORLD_XY,
    Boolean,
    List,
    Null,
    Number,
    Plane,
    Point,
    Text,
    Value,
    Vec3,
    Vector,
)

from ._base import (
    ComponentCategory,
    ComponentOutputs,
    ComponentTable,
    arg,
    broadcast,
    broadcast_pins,
    or_default,
    require_inputs,
)

table = ComponentTable(ComponentCategory.VECTOR)

ZERO: Vec3 = (0.0, 0.0, 0.0)
_ZERO_NUMBER = Number(0.0)
_FALSE = Boolean(False)


def _unitized(vector: Vec3) -> Vec3:
    return geo.normalize(vector) or ZERO


# Point


@table.component(
    "Construct Point",
    guids=["3581f42a-9592-4549-bd6b-1c0fc39d067b"],
    names=["Pt", "Point XYZ"],
    inputs=["X", "Y", "Z"],
    outputs=["Pt"],
    optional=["X", "Y", "Z"],
)
def construct_point(inputs: Sequence[Value], meta: MetaMap) -> ComponentOutputs:
    """Point from three coordinates; unwired coordinates are zero."""
    coords = [or_default(arg(inputs, i), _ZERO_NUMBER) for i in range(3)]

    def build(x: Value, y: Value, z: Value) -> Value:
        return Point(
            co.coerce_number(x, "Construct Point"),
            co.coerce_number(y, "Construct Point"),
            co.coerce_number(z, "Construct Point"),
        )

    return {"Pt": broadcast(coords, build)}


@table.component(
    "Deconstruct Point",
    guids=["9abae6b7-fa1d-448c-9209-4a8155345841"],
    names=["Deconstruct", "pDecon"],
    inputs=["P"],
    outputs=["X", "Y", "Z"],
)
def deconstruct_point(inputs: Sequence[Value], meta: MetaMap) -> ComponentOutputs:
    require_inputs(inputs, 1, "Deconstruct Point")

    def split(point: Value) -> ComponentOutputs:
        x, y, z = co.coerce_point(point, "Deconstruct Point")
        return {"X": Number(x), "Y": Number(y), "Z": Number(z)}

    value = inputs[0]
    if isinstance(value, List) and len(value) == 3 and all(isinstance(item, Number) for item in value):  # noqa: PLR2004
        # A bare coordinate triple is one point, not three.
        return split(value)
    return broadcast_pins([inputs[0]], split, ["X", "Y", "Z"])


@table.component(
    "Distance",
    guids=["93b8e93d-f932-402c-b435-84be04d87666"],
    names=["Dist"],
    inputs=["A", "B"],
    outputs=["D"],
)
def distance(inputs: Sequence[Value], meta: MetaMap) -> ComponentOutputs:
    require_inputs(inputs, 2, "Distance")

    def measure(a: Value, b: Value) -> Value:
        return Number(geo.distance(co.coerce_point(a, "Distance"), co.coerce_point(b, "Distance")))

    return {"D": broadcast([inputs[0], inputs[1]], measure)}


def _axis_mask(value: Value) -> list[int]:
    """Axis indices named by a mask such as ``"xyz"`` or ``"zx"``; all three by default."""
    axes: list[int] = []
    for item in co.coerce_list(value):
        if isinstance(item, Text):
            axes.extend("xyz".index(ch) for ch in item.value.lower() if ch in "xyz")
    return axes or [0, 1, 2]


@table.component(
    "Numbers to Points",
    guids=["0ae07da9-951b-4b9b-98ca-d312c252374d"],
    names=["Num2Pt"],
    inputs=["N", "M"],
    outputs=["P"],
    optional=["M"],
)
def numbers_to_points(inputs: Sequence[Value], meta: MetaMap) -> ComponentOutputs:
    """Group a flat number list into points, one number per masked axis.

    A trailing group shorter than the mask is dropped.
    """
    require_inputs(inputs, 1, "Numbers to Points")
    numbers = co.collect_numbers(inputs[0], "Numbers to Points")
    mask = _axis_mask(arg(inputs, 1))
    points: list[Value] = []
    for start in range(0, len(numbers) - len(mask) + 1, len(mask)):
        coords = [0.0, 0.0, 0.0]
        for axis, number in zip(mask, numbers[start : start + len(mask)], strict=True):
            coords[axis] = number
        points.append(Point(*coords))
    return {"P": List(tuple(points))}


# Vector


@table.component(
    "Vector XYZ",
    guids=["56b92eab-d121-43f7-94d3-6cd8f0ddead8"],
    names=["Vec"],
    inputs=["X", "Y", "Z"],
    outputs=["V", "L"],
    optional=["X", "Y", "Z"],
)
def vector_xyz(inputs: Sequence[Value], meta: MetaMap) -> ComponentOutputs:
    components = [or_default(arg(inputs, i), _ZERO_NUMBER) for i in range(3)]

    def build(x: Value, y: Value, z: Value) -> ComponentOutputs:
        vector = (
            co.coerce_number(x, "Vector XYZ"),
            co.coerce_number(y, "Vector XYZ"),
            co.coerce_number(z, "Vector XYZ"),
        )
        return {"V": Vector(*vector), "L": Number(geo.length(vector))}

    return broadcast_pins(components, build, ["V", "L"])


def _unit_axis(inputs: Sequence[Value], axis: Vec3, name: str) -> ComponentOutputs:
    factor = or_default(arg(inputs, 0), Number(1.0))
    return {"V": broadcast([factor], lambda f: Vector(*geo.scale(axis, co.coerce_number(f, name))))}


@table.component(
    "Unit X",
    guids=["79f9fbb3-8f1d-4d9a-88a9-f7961b1012cd"],
    names=["X"],
    inputs=["F"],
    outputs=["V"],
    optional=["F"],
)
def unit_x(inputs: Sequence[Value], meta: MetaMap) -> ComponentOutputs:
    return _unit_axis(inputs, (1.0, 0.0, 0.0), "Unit X")


@table.component(
    "Unit Y",
    guids=["d3d195ea-2d59-4ffa-90b1-8b7ff3369f69"],
    names=["Y"],
    inputs=["F"],
    outputs=["V"],
    optional=["F"],
)
def unit_y(inputs: Sequence[Value], meta: MetaMap) -> ComponentOutputs:
    return _unit_axis(inputs, (0.0, 1.0, 0.0), "Unit Y")


@table.component(
    "Unit Z",
    guids=["9103c240-a6a9-4223-9b42-dbd19bf38e2b"],
    names=["Z"],
    inputs=["F"],
    outputs=["V"],
    optional=["F"],
)
def unit_z(inputs: Sequence[Value], meta: MetaMap) -> ComponentOutputs:
    return _unit_axis(inputs, (0.0, 0.0, 1.0), "Unit Z")


@table.component(
    "Vector 2Pt",
    guids=["934ede4a-924a-4973-bb05-0dc4b36fae75"],
    names=["Vec2Pt"],
    inputs=["A", "B", "U"],
    outputs=["V", "L"],
    optional=["U"],
)
def vector_2pt(inputs: Sequence[Value], meta: MetaMap) -> ComponentOutputs:
    """Vector from A to B; ``L`` is the length before unitizing."""
    require_inputs(inputs, 2, "Vector 2Pt")

    def build(a: Value, b: Value, unitize: Value) -> ComponentOutputs:
        vector = geo.sub(co.coerce_point(b, "Vector 2Pt"), co.coerce_point(a, "Vector 2Pt"))
        length = geo.length(vector)
        if co.coerce_boolean(unitize, "Vector 2Pt"):
            vector = _unitized(vector)
        return {"V": Vector(*vector), "L": Number(length)}

    return broadcast_pins([inputs[0], inputs[1], or_default(arg(inputs, 2), _FALSE)], build, ["V", "L"])


@table.component(
    "Amplitude",
    guids=["6ec39468-dae7-4ffa-a766-f2ab22a2c62e"],
    names=["Amp"],
    inputs=["V", "A"],
    outputs=["V"],
)
def amplitude(inputs: Sequence[Value], meta: MetaMap) -> ComponentOutputs:
    """Rescale a vector to the given length; a zero vector stays zero."""
    require_inputs(inputs, 2, "Amplitude")

    def build(vector: Value, size: Value) -> Value:
        direction = geo.normalize(co.coerce_vector(vector, "Amplitude"))
        if direction is None:
            return Vector(*ZERO)
        return Vector(*geo.scale(direction, co.coerce_number(size, "Amplitude")))

    return {"V": broadcast([inputs[0], inputs[1]], build)}


@table.component(
    "Cross Product",
    guids=["2a5cfb31-028a-4b34-b4e1-9b20ae15312e"],
    names=["XProd"],
    inputs=["A", "B", "U"],
    outputs=["V", "L"],
    optional=["U"],
)
def cross_product(inputs: Sequence[Value], meta: MetaMap) -> ComponentOutputs:
    require_inputs(inputs, 2, "Cross Product")

    def build(a: Value, b: Value, unitize: Value) -> ComponentOutputs:
        vector = geo.cross(co.coerce_vector(a, "Cross Product"), co.coerce_vector(b, "Cross Product"))
        length = geo.length(vector)
        if co.coerce_boolean(unitize, "Cross Product"):
            vector = _unitized(vector)
        return {"V": Vector(*vector), "L": Number(length)}

    return broadcast_pins([inputs[0], inputs[1], or_default(arg(inputs, 2), _FALSE)], build, ["V", "L"])


@table.component(
    "Dot Product",
    guids=["43b9ea8f-f772-40f2-9880-011a9c3cbbb0"],
    names=["DProd"],
    inputs=["A", "B", "U"],
    outputs=["D"],
    optional=["U"],
)
def dot_product(inputs: Sequence[Value], meta: MetaMap) -> ComponentOutputs:
    """Dot product; with ``U`` set both vectors are unitized first (zero vectors give 0)."""
    require_inputs(inputs, 2, "Dot Product")

    def build(a: Value, b: Value, unitize: Value) -> Value:
        va = co.coerce_vector(a, "Dot Product")
        vb = co.coerce_vector(b, "Dot Product")
        if co.coerce_boolean(unitize, "Dot Product"):
            na, nb = geo.normalize(va), geo.normalize(vb)
            if na is None or nb is None:
                return Number(0.0)
            va, vb = na, nb
        return Number(geo.dot(va, vb))

    return {"D": broadcast([inputs[0], inputs[1], or_default(arg(inputs, 2), _FALSE)], build)}


@table.component(
    "Unit Vector",
    guids=["d2da1306-259a-4994-85a4-672d8a4c7805"],
    names=["Unit"],
    inputs=["V"],
    outputs=["V"],
)
def unit_vector(inputs: Sequence[Value], meta: MetaMap) -> ComponentOutputs:
    require_inputs(inputs, 1, "Unit Vector")
    return {"V": broadcast([inputs[0]], lambda v: Vector(*_unitized(co.coerce_vector(v, "Unit Vector"))))}


@table.component(
    "Deconstruct Vector",
    guids=["a50fcd4a-cf42-4c3f-8616-022761e6cc93"],
    names=["DeVec"],
    inputs=["V"],
    outputs=["X", "Y", "Z"],
)
def deconstruct_vector(inputs: Sequence[Value], meta: MetaMap) -> ComponentOutputs:
    require_inputs(inputs, 1, "Deconstruct Vector")

    def split(vector: Value) -> ComponentOutputs:
        x, y, z = co.coerce_vector(vector, "Deconstruct Vector")
        return {"X": Number(x), "Y": Number(y), "Z": Number(z)}

    return broadcast_pins([inputs[0]], split, ["X", "Y", "Z"])


# Plane


def _plane_at(origin: Vec3) -> Plane:
    return Plane(origin, WORLD_XY.x_axis, WORLD_XY.y_axis, WORLD_XY.z_axis)


def _planes(planes: list[Plane]) -> Value:
    """One plane as itself, several as a List."""
    if len(planes) == 1:
        return planes[0]
    return List(tuple(planes))


@table.component(
    "XY Plane",
    guids=["17b7152b-d30d-4d50-b9ef-c9fe25576fc2"],
    names=["XY"],
    inputs=["O"],
    outputs=["P"],
    optional=["O"],
)
def xy_plane(inputs: Sequence[Value], meta: MetaMap) -> ComponentOutputs:
    """World XY plane through each origin (the world origin when unwired)."""
    origins = co.collect_points(arg(inputs, 0), "XY Plane") or [ZERO]
    return {"P": _planes([_plane_at(origin) for origin in origins])}


@table.component(
    "Construct Plane",
    guids=["bc3e379e-7206-4e7b-b63a-ff61f4b38a3e"],
    names=["Pl"],
    inputs=["O", "X", "Y"],
    outputs=["Pl"],
    optional=["O", "X", "Y"],
)
def construct_plane(inputs: Sequence[Value], meta: MetaMap) -> ComponentOutputs:
    """Plane from an origin and x/y directions.

    The x direction is kept; y is orthogonalized against it. A zero x falls
    back to world X, and a zero or parallel y to some vector orthogonal to x.
    """
    origin_value = arg(inputs, 0)
    origin = ZERO if isinstance(origin_value, Null) else co.coerce_point(origin_value, "Construct Plane")
    x_value, y_value = arg(inputs, 1), arg(inputs, 2)
    x_dir = WORLD_XY.x_axis if isinstance(x_value, Null) else co.coerce_vector(x_value, "Construct Plane")
    y_dir = WORLD_XY.y_axis if isinstance(y_value, Null) else co.coerce_vector(y_value, "Construct Plane")
    if geo.normalize(x_dir) is None:
        x_dir = WORLD_XY.x_axis
    plane = geo.plane_from_axes(origin, x_dir, y_dir)
    if plane is None:
        plane = geo.plane_from_axes(origin, x_dir, geo.orthogonal(x_dir))
    if plane is None:
        msg = "Construct Plane could not build a frame"
        raise ComponentMessageError(msg)
    return {"Pl": plane}


@table.component(
    "Deconstruct Plane",
    guids=["3cd2949b-4ea8-4ffb-a70c-5c380f9f46ea"],
    names=["DePlane"],
    inputs=["P"],
    outputs=["O", "X", "Y", "Z"],
)
def deconstruct_plane(inputs: Sequence[Value], meta: MetaMap) -> ComponentOutputs:
    require_inputs(inputs, 1, "Deconstruct Plane")
    plane = co.coerce_plane(inputs[0], "Deconstruct Plane")
    return {
        "O": Point(*plane.origin),
        "X": Vector(*plane.x_axis),
        "Y": Vector(*plane.y_axis),
        "Z": Vector(*plane.z_axis),
    }


@table.component(
    "Plane 3Pt",
    guids=["c98a6015-7a2f-423c-bc66-bdc505249b45"],
    names=["Pl 3Pt"],
    inputs=["A", "B", "C"],
    outputs=["Pl"],
)
def plane_3pt(inputs: Sequence[Value], meta: MetaMap) -> ComponentOutputs:
    """Plane through A with x towards B and C on the positive-y side."""
    require_inputs(inputs, 3, "Plane 3Pt")
    a = co.coerce_point(inputs[0], "Plane 3Pt")
    b = co.coerce_point(inputs[1], "Plane 3Pt")
    c = co.coerce_point(inputs[2], "Plane 3Pt")
    plane = geo.plane_from_axes(a, geo.sub(b, a), geo.sub(c, a))
    if plane is None:
        msg = "Plane 3Pt needs three points that are not collinear"
        raise ComponentMessageError(msg)
    return {"Pl": plane}


@table.component(
    "Plane Normal",
    guids=["cfb6b17f-ca82-4f5d-b604-d4f69f569de3"],
    inputs=["O", "Z"],
    outputs=["P"],
    optional=["O", "Z"],
)
def plane_normal(inputs: Sequence[Value], meta: MetaMap) -> ComponentOutputs:
    """Plane at each origin with the given z axis (world Z when unwired or zero)."""
    origins = co.collect_points(arg(inputs, 0), "Plane Normal") or [ZERO]
    normal_value = arg(inputs, 1)
    normal = WORLD_XY.z_axis if isinstance(normal_value, Null) else co.coerce_vector(normal_value, "Plane Normal")
    if geo.normalize(normal) is None:
        normal = WORLD_XY.z_axis
    planes = [geo.plane_from_normal(origin, normal) for origin in origins]
    return {"P": _planes([plane for plane in planes if plane is not None])}


@table.component(
    "Plane Origin",
    guids=["75eec078-a905-47a1-b0d2-0934182b1e3d"],
    names=["Pl Origin"],
    inputs=["B", "O"],
    outputs=["Pl"],
    optional=["O"],
)
def plane_origin(inputs: Sequence[Value], meta: MetaMap) -> ComponentOutputs:
    """Move a plane to a new origin, keeping its axes."""
    require_inputs(inputs, 1, "Plane Origin")
    plane = co.coerce_plane(inputs[0], "Plane Origin")
    origin_value = arg(inputs, 1)
    if isinstance(origin_value, Null):
        return {"Pl": plane}
    origin = co.coerce_point(origin_value, "Plane Origin")
    return {"Pl": Plane(origin, plane.x_axis, plane.y_axis, plane.z_axis)}


REGISTRATIONS = tuple(table.kinds)
