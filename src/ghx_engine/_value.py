"""Runtime values flowing on wires.

The value universe is closed: every variant is a frozen dataclass and the
``Value`` alias is their union. Components pattern-match on the concrete
classes and ask the coercion layer (``ghx_engine._coerce``) for lenient
interpretations instead of branching on variants themselves.

Every variant exposes ``kind``, a :class:`ValueKind` used in error messages.
"""

from __future__ import annotations

import datetime as dt
import math
from collections.abc import Iterable, Iterator
from dataclasses import dataclass, field
from enum import StrEnum
from typing import ClassVar

type Vec3 = tuple[float, float, float]


class ValueKind(StrEnum):
    """Textual kind of a value."""

    NULL = "Null"
    NUMBER = "Number"
    BOOLEAN = "Boolean"
    TEXT = "Text"
    POINT = "Point"
    VECTOR = "Vector"
    CURVE_LINE = "CurveLine"
    SURFACE = "Surface"
    MESH = "Mesh"
    DOMAIN = "Domain"
    MATRIX = "Matrix"
    COMPLEX = "Complex"
    DATE_TIME = "DateTime"
    COLOR = "Color"
    MATERIAL = "Material"
    SYMBOL = "Symbol"
    TAG = "Tag"
    PLANE = "Plane"
    LIST = "List"


@dataclass(frozen=True, slots=True)
class Null:
    """Absence of a value."""

    kind: ClassVar[ValueKind] = ValueKind.NULL


NULL = Null()


@dataclass(frozen=True, slots=True)
class Number:
    """64-bit floating point scalar. NaN is allowed but fails coercion."""

    value: float
    kind: ClassVar[ValueKind] = ValueKind.NUMBER


@dataclass(frozen=True, slots=True)
class Boolean:
    value: bool
    kind: ClassVar[ValueKind] = ValueKind.BOOLEAN


@dataclass(frozen=True, slots=True)
class Text:
    value: str
    kind: ClassVar[ValueKind] = ValueKind.TEXT


@dataclass(frozen=True, slots=True)
class Point:
    """A position in world space."""

    x: float
    y: float
    z: float
    kind: ClassVar[ValueKind] = ValueKind.POINT

    @property
    def coords(self) -> Vec3:
        return (self.x, self.y, self.z)


@dataclass(frozen=True, slots=True)
class Vector:
    """A translation in world space. Same layout as Point, different meaning."""

    x: float
    y: float
    z: float
    kind: ClassVar[ValueKind] = ValueKind.VECTOR

    @property
    def coords(self) -> Vec3:
        return (self.x, self.y, self.z)


@dataclass(frozen=True, slots=True)
class CurveLine:
    """A straight segment between two points."""

    p1: Vec3
    p2: Vec3
    kind: ClassVar[ValueKind] = ValueKind.CURVE_LINE


@dataclass(frozen=True, slots=True)
class Surface:
    """Legacy polygonal shape: a vertex list and faces of three or more indices.

    Raises:
        ValueError: If a face has fewer than three indices or references a
            vertex that does not exist.

    """

    vertices: tuple[Vec3, ...]
    faces: tuple[tuple[int, ...], ...]
    kind: ClassVar[ValueKind] = ValueKind.SURFACE

    def __post_init__(self) -> None:
        count = len(self.vertices)
        for face in self.faces:
            if len(face) < 3:  # noqa: PLR2004
                msg = f"Surface face {face} has fewer than 3 indices"
                raise ValueError(msg)
            if any(index < 0 or index >= count for index in face):
                msg = f"Surface face {face} references a vertex outside 0..{count - 1}"
                raise ValueError(msg)


@dataclass(frozen=True, slots=True)
class MeshDiagnostics:
    """Optional bookkeeping attached to a mesh by the component that built it."""

    vertex_count: int = 0
    triangle_count: int = 0
    degenerate_triangle_count: int = 0
    warnings: tuple[str, ...] = ()


@dataclass(frozen=True, slots=True)
class Mesh:
    """Indexed triangle mesh with optional per-vertex attributes.

    Attributes:
        vertices: Vertex positions.
        indices: Flat triangle index list; its length is a multiple of 3.
        normals: Optional per-vertex normals, one per vertex.
        uvs: Optional per-vertex texture coordinates, one per vertex.
        diagnostics: Optional diagnostics.

    Raises:
        ValueError: If any of the invariants above is violated.

    """

    vertices: tuple[Vec3, ...]
    indices: tuple[int, ...]
    normals: tuple[Vec3, ...] | None = None
    uvs: tuple[tuple[float, float], ...] | None = None
    diagnostics: MeshDiagnostics | None = None
    kind: ClassVar[ValueKind] = ValueKind.MESH

    def __post_init__(self) -> None:
        count = len(self.vertices)
        if len(self.indices) % 3 != 0:
            msg = f"Mesh index count {len(self.indices)} is not a multiple of 3"
            raise ValueError(msg)
        if any(index < 0 or index >= count for index in self.indices):
            msg = f"Mesh index out of range for {count} vertices"
            raise ValueError(msg)
        if self.normals is not None and len(self.normals) != count:
            msg = f"Mesh has {len(self.normals)} normals for {count} vertices"
            raise ValueError(msg)
        if self.uvs is not None and len(self.uvs) != count:
            msg = f"Mesh has {len(self.uvs)} uvs for {count} vertices"
            raise ValueError(msg)

    @property
    def triangles(self) -> list[tuple[int, int, int]]:
        return [
            (self.indices[i], self.indices[i + 1], self.indices[i + 2])
            for i in range(0, len(self.indices), 3)
        ]


@dataclass(frozen=True, slots=True)
class Domain1D:
    """A closed numeric interval.

    Only ``start`` and ``end`` are supplied; the derived fields always satisfy
    ``min = min(start, end)``, ``max = max(start, end)``,
    ``length = |end - start|``, ``span = max - min`` and
    ``center = (start + end) / 2``.

    Example:
        >>> Domain1D(5.0, 1.0).span
        4.0

    """

    start: float
    end: float
    min: float = field(init=False)
    max: float = field(init=False)
    span: float = field(init=False)
    length: float = field(init=False)
    center: float = field(init=False)
    kind: ClassVar[ValueKind] = ValueKind.DOMAIN

    def __post_init__(self) -> None:
        lo = min(self.start, self.end)
        hi = max(self.start, self.end)
        object.__setattr__(self, "min", lo)
        object.__setattr__(self, "max", hi)
        object.__setattr__(self, "span", hi - lo)
        object.__setattr__(self, "length", abs(self.end - self.start))
        object.__setattr__(self, "center", (self.start + self.end) / 2.0)

    def contains(self, value: float, *, strict: bool = False) -> bool:
        if strict:
            return self.min < value < self.max
        return self.min <= value <= self.max

    def clamp(self, value: float) -> float:
        return min(max(value, self.min), self.max)

    def remap(self, value: float, target: Domain1D) -> float:
        """Map ``value`` linearly from this interval onto ``target``."""
        if math.isclose(self.end, self.start):
            return target.start
        t = (value - self.start) / (self.end - self.start)
        return target.start + t * (target.end - target.start)


@dataclass(frozen=True, slots=True)
class Domain2D:
    u: Domain1D
    v: Domain1D
    kind: ClassVar[ValueKind] = ValueKind.DOMAIN


type Domain = Domain1D | Domain2D


@dataclass(frozen=True, slots=True)
class Matrix:
    """Row-major matrix.

    Raises:
        ValueError: If ``len(values) != rows * columns``.

    """

    rows: int
    columns: int
    values: tuple[float, ...]
    kind: ClassVar[ValueKind] = ValueKind.MATRIX

    def __post_init__(self) -> None:
        if self.rows < 0 or self.columns < 0:
            msg = f"Matrix dimensions must be non-negative, got {self.rows}x{self.columns}"
            raise ValueError(msg)
        if len(self.values) != self.rows * self.columns:
            msg = f"Matrix {self.rows}x{self.columns} needs {self.rows * self.columns} values, got {len(self.values)}"
            raise ValueError(msg)

    def at(self, row: int, column: int) -> float:
        return self.values[row * self.columns + column]

    def row(self, row: int) -> tuple[float, ...]:
        return self.values[row * self.columns : (row + 1) * self.columns]


@dataclass(frozen=True, slots=True)
class Complex:
    re: float
    im: float
    kind: ClassVar[ValueKind] = ValueKind.COMPLEX


@dataclass(frozen=True, slots=True)
class DateTime:
    """Civil date and time without a time zone.

    ``moment`` carries microsecond precision; ``nanosecond`` holds the
    remaining 0-999 nanoseconds.
    """

    moment: dt.datetime
    nanosecond: int = 0
    kind: ClassVar[ValueKind] = ValueKind.DATE_TIME

    def __post_init__(self) -> None:
        if self.moment.tzinfo is not None:
            msg = "DateTime values carry no time zone"
            raise ValueError(msg)
        if not 0 <= self.nanosecond < 1000:  # noqa: PLR2004
            msg = f"nanosecond must be in 0..999, got {self.nanosecond}"
            raise ValueError(msg)


@dataclass(frozen=True, slots=True)
class Color:
    """Linear color with channels in [0, 1]."""

    r: float
    g: float
    b: float
    a: float | None = None
    kind: ClassVar[ValueKind] = ValueKind.COLOR


@dataclass(frozen=True, slots=True)
class Material:
    diffuse: Color
    specular: Color
    emission: Color
    transparency: float
    shine: float
    kind: ClassVar[ValueKind] = ValueKind.MATERIAL


@dataclass(frozen=True, slots=True)
class Symbol:
    """Point display symbol."""

    style: str
    size_primary: float
    size_secondary: float | None
    rotation: float
    fill: Color
    edge: Color | None
    width: float
    adjust: bool
    kind: ClassVar[ValueKind] = ValueKind.SYMBOL


@dataclass(frozen=True, slots=True)
class Plane:
    """Oriented frame: origin plus an orthonormal basis."""

    origin: Vec3
    x_axis: Vec3
    y_axis: Vec3
    z_axis: Vec3
    kind: ClassVar[ValueKind] = ValueKind.PLANE


WORLD_XY = Plane(
    origin=(0.0, 0.0, 0.0),
    x_axis=(1.0, 0.0, 0.0),
    y_axis=(0.0, 1.0, 0.0),
    z_axis=(0.0, 0.0, 1.0),
)


@dataclass(frozen=True, slots=True)
class Tag:
    """Text label placed on a plane."""

    plane: Plane
    text: str
    size: float
    color: Color | None = None
    kind: ClassVar[ValueKind] = ValueKind.TAG


@dataclass(frozen=True, slots=True)
class List:
    """Heterogeneous ordered sequence of values."""

    items: tuple[Value, ...] = ()
    kind: ClassVar[ValueKind] = ValueKind.LIST

    def __len__(self) -> int:
        return len(self.items)

    def __iter__(self) -> Iterator[Value]:
        return iter(self.items)


type Value = (
    Null
    | Number
    | Boolean
    | Text
    | Point
    | Vector
    | CurveLine
    | Surface
    | Mesh
    | Domain1D
    | Domain2D
    | Matrix
    | Complex
    | DateTime
    | Color
    | Material
    | Symbol
    | Tag
    | Plane
    | List
)

GEOMETRY_TYPES = (Point, CurveLine, Surface, Mesh)


def make_list(items: Iterable[Value]) -> List:
    """Build a List from any iterable of values."""
    return List(tuple(items))


def is_geometry(value: Value) -> bool:
    """Check whether a value is renderable (recursively for lists)."""
    if isinstance(value, GEOMETRY_TYPES):
        return True
    if isinstance(value, List):
        return any(is_geometry(item) for item in value.items)
    return False


def _fmt(number: float) -> str:
    return f"{number:g}"


def _fmt_vec(vec: Vec3) -> str:
    return f"({', '.join(_fmt(c) for c in vec)})"


def describe(value: Value) -> str:  # noqa: C901, PLR0911
    """Render a value as a short human-readable string."""
    match value:
        case Null():
            return "null"
        case Number(value=number):
            return _fmt(number)
        case Boolean(value=flag):
            return "true" if flag else "false"
        case Text(value=text):
            return text
        case Point() | Vector():
            return f"{value.kind}{_fmt_vec(value.coords)}"
        case CurveLine(p1=p1, p2=p2):
            return f"Line{_fmt_vec(p1)} -> {_fmt_vec(p2)}"
        case Surface(vertices=vertices, faces=faces):
            return f"Surface[{len(vertices)} vertices, {len(faces)} faces]"
        case Mesh(vertices=vertices, indices=indices):
            return f"Mesh[{len(vertices)} vertices, {len(indices) // 3} triangles]"
        case Domain1D(start=start, end=end):
            return f"{_fmt(start)} To {_fmt(end)}"
        case Domain2D(u=u, v=v):
            return f"u: {describe(u)}, v: {describe(v)}"
        case Matrix(rows=rows, columns=columns):
            return f"Matrix[{rows}x{columns}]"
        case Complex(re=re, im=im):
            sign = "-" if im < 0 else "+"
            return f"{_fmt(re)} {sign} {_fmt(abs(im))}i"
        case DateTime(moment=moment):
            return moment.isoformat()
        case Color(r=r, g=g, b=b, a=a):
            channels = [r, g, b] if a is None else [r, g, b, a]
            return f"Color({', '.join(_fmt(c) for c in channels)})"
        case Plane(origin=origin, z_axis=z_axis):
            return f"Plane(o={_fmt_vec(origin)}, z={_fmt_vec(z_axis)})"
        case List(items=items):
            return f"[{', '.join(describe(item) for item in items)}]"
        case _:
            return str(value.kind)
