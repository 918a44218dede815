"""Graph module providing the node/wire model.

This module contains:
- Node, Wire, Graph: the document graph with id, guid and name indices
- topological_sort, find_cycle: deterministic ordering over node ids
"""

from ._algorithms import find_cycle, topological_sort
from ._model import Graph, MetaMap, MetaValue, Node, Wire, normalize_guid, normalize_name

__all__ = [
    "Graph",
    "MetaMap",
    "MetaValue",
    "Node",
    "Wire",
    "find_cycle",
    "normalize_guid",
    "normalize_name",
    "topological_sort",
]
