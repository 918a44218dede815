"""Evaluation engine module for ghx_engine.

This module provides the planner and the evaluator. The evaluator takes a
Graph and a ComponentRegistry and produces the outputs of every node
without modifying the graph.

Key types:
- EvaluationPlan: Topological order, sorted fan-in sources and pin order
- EvaluationResult: Outputs by node and harvested geometry
- evaluate: All-or-nothing evaluation of a graph
- gather_inputs: Input vector construction for one node
"""

from ._engine import EvaluationResult, evaluate
from ._plan import EvaluationPlan, PinSource
from ._resolution import gather_inputs

__all__ = [
    "EvaluationPlan",
    "EvaluationResult",
    "PinSource",
    "evaluate",
    "gather_inputs",
]
