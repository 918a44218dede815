"""Component kinds and their registry.

This module contains:
- ComponentKind: descriptor of one executable component kind
- ComponentCategory: category tab a kind belongs to
- ComponentRegistry: lookup by guid, name and nickname
- Category modules (params, inputs, maths_*, vector, curve, sets, mesh,
  display), each exporting a REGISTRATIONS tuple
"""

from ._base import ComponentCategory, ComponentKind, ComponentOutputs, EvaluateFn
from ._registry import ComponentRegistry

__all__ = [
    "ComponentCategory",
    "ComponentKind",
    "ComponentOutputs",
    "ComponentRegistry",
    "EvaluateFn",
]
