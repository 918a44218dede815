"""Export of evaluation results to TOML or JSON."""

import logging
from pathlib import Path
from typing import Any

import tomli_w
from pydantic import BaseModel, ConfigDict, Field

from ._eval_engine import EvaluationResult
from ._graph import Graph
from ._value import (
    Boolean,
    Color,
    Complex,
    CurveLine,
    DateTime,
    Domain1D,
    Domain2D,
    List,
    Material,
    Matrix,
    Mesh,
    Null,
    Number,
    Plane,
    Point,
    Surface,
    Symbol,
    Tag,
    Text,
    Value,
    Vector,
)

logger = logging.getLogger(__name__)

type Data = dict[str, Any]


# =============================================================================
# Value serialization
# =============================================================================


def _color(color: Color) -> list[float]:
    return [color.r, color.g, color.b] if color.a is None else [color.r, color.g, color.b, color.a]


def _domain(domain: Domain1D) -> list[float]:
    return [domain.start, domain.end]


def _plane(plane: Plane) -> Data:
    return {
        "origin": list(plane.origin),
        "x_axis": list(plane.x_axis),
        "y_axis": list(plane.y_axis),
        "z_axis": list(plane.z_axis),
    }


def _mesh(mesh: Mesh) -> Data:
    data: Data = {
        "vertices": [list(v) for v in mesh.vertices],
        "indices": list(mesh.indices),
    }
    if mesh.normals is not None:
        data["normals"] = [list(n) for n in mesh.normals]
    if mesh.uvs is not None:
        data["uvs"] = [list(uv) for uv in mesh.uvs]
    if mesh.diagnostics is not None:
        data["diagnostics"] = {
            "vertex_count": mesh.diagnostics.vertex_count,
            "triangle_count": mesh.diagnostics.triangle_count,
            "degenerate_triangle_count": mesh.diagnostics.degenerate_triangle_count,
            "warnings": list(mesh.diagnostics.warnings),
        }
    return data


def _symbol(symbol: Symbol) -> Data:
    data: Data = {
        "style": symbol.style,
        "size_primary": symbol.size_primary,
        "rotation": symbol.rotation,
        "fill": _color(symbol.fill),
        "width": symbol.width,
        "adjust": symbol.adjust,
    }
    if symbol.size_secondary is not None:
        data["size_secondary"] = symbol.size_secondary
    if symbol.edge is not None:
        data["edge"] = _color(symbol.edge)
    return data


def _payload(value: Value) -> Any:  # noqa: C901, PLR0911
    match value:
        case Number(value=number):
            return number
        case Boolean(value=flag):
            return flag
        case Text(value=text):
            return text
        case Point() | Vector():
            return list(value.coords)
        case CurveLine(p1=p1, p2=p2):
            return {"p1": list(p1), "p2": list(p2)}
        case Surface(vertices=vertices, faces=faces):
            return {"vertices": [list(v) for v in vertices], "faces": [list(f) for f in faces]}
        case Mesh():
            return _mesh(value)
        case Domain1D():
            return _domain(value)
        case Domain2D(u=u, v=v):
            return {"u": _domain(u), "v": _domain(v)}
        case Matrix(rows=rows, columns=columns, values=values):
            return {"rows": rows, "columns": columns, "values": list(values)}
        case Complex(re=re, im=im):
            return [re, im]
        case DateTime(moment=moment, nanosecond=nanosecond):
            return {"moment": moment.isoformat(), "nanosecond": nanosecond}
        case Color():
            return _color(value)
        case Material():
            return {
                "diffuse": _color(value.diffuse),
                "specular": _color(value.specular),
                "emission": _color(value.emission),
                "transparency": value.transparency,
                "shine": value.shine,
            }
        case Symbol():
            return _symbol(value)
        case Tag(plane=plane, text=text, size=size, color=color):
            data: Data = {"plane": _plane(plane), "text": text, "size": size}
            if color is not None:
                data["color"] = _color(color)
            return data
        case Plane():
            return _plane(value)
        case List(items=items):
            return [value_to_data(item) for item in items]
        case _:
            msg = f"Cannot serialize value of kind {value.kind}"
            raise TypeError(msg)


def value_to_data(value: Value) -> Data:
    """Render a value as a tagged table ``{kind, value}``.

    Null renders as ``{"kind": "Null"}`` without a ``value`` key, so the
    result never contains None.

    Example:
        >>> value_to_data(Point(1.0, 2.0, 3.0))
        {'kind': 'Point', 'value': [1.0, 2.0, 3.0]}

    """
    if isinstance(value, Null):
        return {"kind": str(value.kind)}
    return {"kind": str(value.kind), "value": _payload(value)}


# =============================================================================
# Export models
# =============================================================================


class NodeOutputsModel(BaseModel):
    """Outputs of one evaluated node."""

    model_config = ConfigDict(frozen=True)

    node_id: int
    name: str
    outputs: dict[str, Data] = Field(default_factory=dict)


class ExportModel(BaseModel):
    """Serializable form of an evaluation result."""

    model_config = ConfigDict(frozen=True, ser_json_inf_nan="constants")

    nodes: list[NodeOutputsModel] = Field(default_factory=list)
    geometry: list[Data] = Field(default_factory=list)


def result_to_model(result: EvaluationResult, graph: Graph | None = None) -> ExportModel:
    """Convert an evaluation result into its export model.

    Nodes are listed in evaluation order. When ``graph`` is given, each
    node is labelled with its nickname or name.
    """
    nodes: list[NodeOutputsModel] = []
    for node_id, outputs in result.items():
        node = graph.node(node_id) if graph is not None else None
        nodes.append(
            NodeOutputsModel(
                node_id=node_id,
                name=node.label if node is not None else str(node_id),
                outputs={pin: value_to_data(value) for pin, value in outputs.items()},
            ),
        )
    return ExportModel(nodes=nodes, geometry=[value_to_data(value) for value in result.geometry])


def dumps_toml(model: ExportModel) -> str:
    return tomli_w.dumps(model.model_dump(mode="python"))


def dumps_json(model: ExportModel) -> str:
    return model.model_dump_json(indent=2)


def export_result(
    result: EvaluationResult,
    output_path: Path | str,
    *,
    graph: Graph | None = None,
    fmt: str = "toml",
) -> None:
    """Write an evaluation result to a TOML or JSON file.

    Args:
        result: The evaluation to export.
        output_path: Destination file.
        graph: The evaluated graph, used for node labels.
        fmt: ``"toml"`` or ``"json"``.

    Raises:
        ValueError: If ``fmt`` is not a supported format.

    """
    model = result_to_model(result, graph)
    match fmt.lower():
        case "toml":
            text = dumps_toml(model)
        case "json":
            text = dumps_json(model)
        case _:
            msg = f"Unsupported export format {fmt!r}"
            raise ValueError(msg)

    output_path = Path(output_path)
    output_path.write_text(text, encoding="utf-8")
    logger.debug("Exported %d nodes to %s", len(model.nodes), output_path)
