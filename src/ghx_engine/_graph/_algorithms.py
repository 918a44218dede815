"""Ordering algorithms over node-id graphs."""

import heapq
from collections import defaultdict
from collections.abc import Collection, Mapping

from ghx_engine._errors import CycleError


def topological_sort(successors: Mapping[int, Collection[int]]) -> list[int]:
    """Sort a graph topologically (producers before consumers).

    Kahn's algorithm with a min-heap of ready nodes, so that among nodes whose
    dependencies are all satisfied the smallest id always comes first. The
    result is therefore independent of edge insertion order.

    Args:
        successors: Mapping from node to the nodes that consume its outputs.
            An edge (a -> b) means "b depends on a".

    Returns:
        List of node ids in topological order.

    Raises:
        CycleError: If the graph contains a cycle. The error names the nodes
            along one cycle found by :func:`find_cycle`.

    Example:
        >>> topological_sort({2: [0], 1: [0], 0: []})
        [1, 2, 0]

    """
    # Calculate in-degree for each node
    indegree: defaultdict[int, int] = defaultdict(int)
    for node, targets in successors.items():
        indegree[node] = indegree.get(node, 0)
        for target in targets:
            indegree[target] += 1

    ready = [node for node, deg in indegree.items() if deg == 0]
    heapq.heapify(ready)
    order: list[int] = []

    while ready:
        node = heapq.heappop(ready)
        order.append(node)
        for target in sorted(successors.get(node, ())):
            indegree[target] -= 1
            if indegree[target] == 0:
                heapq.heappush(ready, target)

    if len(order) != len(indegree):
        cycle = find_cycle(successors)
        if not cycle:
            placed = set(order)
            cycle = sorted(node for node in indegree if node not in placed)
        raise CycleError(cycle)

    return order


def find_cycle(successors: Mapping[int, Collection[int]]) -> list[int]:
    """Find one cycle by depth-first search.

    Nodes and neighbours are visited in ascending order, so the same graph
    always yields the same cycle.

    Returns:
        The nodes along the cycle in path order (the first node is not
        repeated at the end), or an empty list if the graph is acyclic.

    Example:
        >>> find_cycle({0: [1], 1: [2], 2: [1]})
        [1, 2]

    """
    visiting: set[int] = set()
    done: set[int] = set()
    stack: list[int] = []

    def visit(node: int) -> list[int]:
        visiting.add(node)
        stack.append(node)
        for target in sorted(successors.get(node, ())):
            if target in visiting:
                return stack[stack.index(target) :]
            if target not in done:
                found = visit(target)
                if found:
                    return found
        stack.pop()
        visiting.discard(node)
        done.add(node)
        return []

    for node in sorted(successors):
        if node not in done:
            found = visit(node)
            if found:
                return list(found)
    return []
