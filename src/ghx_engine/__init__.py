"""Parse and evaluate parametric node-graph documents."""

__all__ = [
    "ComponentCategory",
    "ComponentKind",
    "ComponentRegistry",
    "Engine",
    "EvaluationPlan",
    "EvaluationResult",
    "GeometryItem",
    "GeometryKind",
    "Graph",
    "Node",
    "NodeInfo",
    "SliderInfo",
    "Value",
    "Wire",
    "evaluate",
    "export_result",
    "geometry_items",
    "parse",
    "parse_file",
    "result_to_model",
    "value_to_data",
]

from ._components import ComponentCategory, ComponentKind, ComponentRegistry
from ._engine import Engine, GeometryItem, GeometryKind, NodeInfo, SliderInfo, geometry_items
from ._eval_engine import EvaluationPlan, EvaluationResult, evaluate
from ._graph import Graph, Node, Wire
from ._io import export_result, result_to_model, value_to_data
from ._parse import parse, parse_file
from ._value import Value
