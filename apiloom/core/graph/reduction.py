"""Package dependency simplification for the overview diagram.

Transitive reduction drops every edge whose target stays reachable from
its source through the remaining edges; the common-prefix helper
shortens package labels.
"""

import logging
from typing import Dict, Hashable, Iterable, Set

from .models import Edge, EdgeSet

logger = logging.getLogger(__name__)


def _adjacency(edges: Iterable[Edge]) -> Dict[Hashable, Set[Hashable]]:
    graph: Dict[Hashable, Set[Hashable]] = {}
    for edge in edges:
        graph.setdefault(edge.source, set()).add(edge.target)
    return graph


def is_indirectly_reachable(
    graph: Dict[Hashable, Set[Hashable]],
    source: Hashable,
    target: Hashable,
) -> bool:
    """True when ``target`` is reachable from ``source`` without the direct edge.

    Iterative worklist with a visited set; dependency cycles terminate.
    """
    visited = {source}
    stack = [t for t in graph.get(source, ()) if t != target]

    while stack:
        current = stack.pop()
        if current in visited:
            continue
        visited.add(current)
        for nxt in graph.get(current, ()):
            if nxt == target:
                return True
            if nxt not in visited:
                stack.append(nxt)
    return False


def transitive_reduction(edges: Iterable[Edge]) -> EdgeSet:
    """Remove edges implied by other paths, one at a time, until stable.

    Edges are examined in total edge order, so the result is deterministic
    even when cycles make the minimal edge set non-unique.
    """
    remaining = EdgeSet(edges)
    graph = _adjacency(remaining)
    removed = 0

    changed = True
    while changed:
        changed = False
        for edge in remaining:
            if is_indirectly_reachable(graph, edge.source, edge.target):
                remaining.discard(edge)
                graph[edge.source].discard(edge.target)
                removed += 1
                changed = True
                break

    if removed:
        logger.debug(f"Transitive reduction removed {removed} redundant edges")
    return remaining


def common_package_prefix(names: Iterable[str]) -> int:
    """Length of the longest dot-terminated prefix shared by all names.

    The candidate is taken from the greatest name and never exceeds the
    length of the shortest one, so no name is stripped to nothing.

    Raises:
        ValueError: If one of the names is empty.
    """
    names = sorted(names, reverse=True)
    if not names:
        return 0

    min_len = min(len(n) for n in names)
    if min_len == 0:
        raise ValueError("Unexpected empty package name")

    first = names[0]
    for prefix_len in range(min_len, 0, -1):
        if first[prefix_len - 1] != ".":
            continue
        candidate = first[:prefix_len]
        if all(n.startswith(candidate) for n in names):
            return prefix_len
    return 0
