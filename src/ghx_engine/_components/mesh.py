"""Mesh construction components (Mesh > Primitive)."""

import logging
import math
from collections.abc import Sequence

from ghx_engine import _coerce as co
from ghx_engine import _geometry as geo
from ghx_engine._errors import ComponentMessageError
from ghx_engine._graph import MetaMap
from ghx_engine._value import List, Mesh, MeshDiagnostics, Null, Number, Value, Vec3

from ._base import ComponentCategory, ComponentOutputs, ComponentTable, arg, require_inputs

logger = logging.getLogger(__name__)

table = ComponentTable(ComponentCategory.MESH)

DEGENERATE_AREA = 1e-12


def _index(value: Value, context: str) -> int:
    number = co.coerce_number(value, context)
    if number < 0 or not math.isfinite(number) or not number.is_integer():
        msg = f"{context} needs a non-negative integer index, got {co.format_number(number)}"
        raise ComponentMessageError(msg)
    return int(number)


def _faces(value: Value) -> list[list[int]]:
    """Read faces as lists of vertex indices; a flat index list is one face."""
    items = co.coerce_list(value)
    if items and all(isinstance(item, Number) for item in items):
        return [[_index(item, "Construct Mesh face") for item in items]]
    faces: list[list[int]] = []
    for face in items:
        if not isinstance(face, List):
            msg = f"Construct Mesh needs each face as a list of indices, got {face.kind}"
            raise ComponentMessageError(msg)
        faces.append([_index(item, "Construct Mesh face") for item in face])
    return faces


def triangulate(faces: Sequence[Sequence[int]], vertex_count: int) -> list[int]:
    """Fan-triangulate polygon faces into a flat triangle index list.

    Raises:
        ComponentMessageError: If a face has fewer than three indices or
            references a vertex that does not exist.

    """
    indices: list[int] = []
    for face in faces:
        if len(face) < 3:  # noqa: PLR2004
            msg = f"Construct Mesh face {list(face)} has fewer than 3 indices"
            raise ComponentMessageError(msg)
        if any(index >= vertex_count for index in face):
            msg = f"Construct Mesh face {list(face)} references a vertex outside 0..{vertex_count - 1}"
            raise ComponentMessageError(msg)
        for i in range(1, len(face) - 1):
            indices.extend((face[0], face[i], face[i + 1]))
    return indices


def _degenerate_count(vertices: Sequence[Vec3], indices: Sequence[int]) -> int:
    count = 0
    for i in range(0, len(indices), 3):
        a, b, c = (vertices[j] for j in indices[i : i + 3])
        if geo.length(geo.cross(geo.sub(b, a), geo.sub(c, a))) <= DEGENERATE_AREA:
            count += 1
    return count


@table.component(
    "Construct Mesh",
    guids=["e2c0f9db-a862-4bd9-810c-ef2610e7a56f"],
    names=["ConMesh"],
    inputs=["V", "F", "C"],
    outputs=["M"],
    optional=["C"],
)
def construct_mesh(inputs: Sequence[Value], meta: MetaMap) -> ComponentOutputs:
    """Triangle mesh from vertices and polygon faces.

    Faces with more than three vertices are fan-triangulated. Vertex colours
    are accepted but not stored on the mesh; a warning is recorded in the
    diagnostics instead.
    """
    require_inputs(inputs, 2, "Construct Mesh")
    vertices = co.collect_points(inputs[0], "Construct Mesh V")
    faces = _faces(inputs[1])
    indices = triangulate(faces, len(vertices))

    warnings: list[str] = []
    if not isinstance(arg(inputs, 2), Null):
        warnings.append("vertex colours are not stored")
    degenerate = _degenerate_count(vertices, indices)
    if degenerate:
        warnings.append(f"{degenerate} degenerate triangles")
    diagnostics = MeshDiagnostics(
        vertex_count=len(vertices),
        triangle_count=len(indices) // 3,
        degenerate_triangle_count=degenerate,
        warnings=tuple(warnings),
    )
    logger.debug("Construct Mesh: %d vertices, %d faces, %d triangles", len(vertices), len(faces), len(indices) // 3)
    return {"M": Mesh(tuple(vertices), tuple(indices), diagnostics=diagnostics)}


def _face(inputs: Sequence[Value], count: int, name: str) -> ComponentOutputs:
    require_inputs(inputs, count, name)
    return {"F": List(tuple(Number(float(_index(inputs[i], name))) for i in range(count)))}


@table.component(
    "Mesh Triangle",
    guids=["5a4ddedd-5af9-49e5-bace-12910a8b9366"],
    names=["Triangle"],
    inputs=["A", "B", "C"],
    outputs=["F"],
)
def mesh_triangle(inputs: Sequence[Value], meta: MetaMap) -> ComponentOutputs:
    return _face(inputs, 3, "Mesh Triangle")


@table.component(
    "Mesh Quad",
    guids=["1cb59c86-7f6b-4e52-9a0c-6441850e9520"],
    names=["Quad"],
    inputs=["A", "B", "C", "D"],
    outputs=["F"],
)
def mesh_quad(inputs: Sequence[Value], meta: MetaMap) -> ComponentOutputs:
    return _face(inputs, 4, "Mesh Quad")


REGISTRATIONS = tuple(table.kinds)
