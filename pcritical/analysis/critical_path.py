"""Critical path analysis on the weighted import graph.

The critical path is the root-to-leaf chain with the largest summed
package cost. It is the chain that cannot be shortened by building more
packages in parallel.

Algorithm:
  1.  Depth-first postorder from the root, reversed, gives a topological
      order of every reachable node (importers before imports).
  2.  Walk that order backwards. pathto[v] starts at cost(v); for each
      importer u of v, relax pathto[u] = max(pathto[u], pathto[v] + cost(u)).
      When v is processed all of its imports already are, so pathto[v] is
      final and equals the heaviest chain from v down to a leaf.
  3.  From the root, repeatedly step to the import with the largest
      pathto, marking the edge, until a leaf is reached. Equal values go
      to the lexicographically smallest identity.

Runs in O(V + E). Cycles are not detected; Go import graphs have none.
"""

from __future__ import annotations

import logging
from typing import Iterator

from pcritical.analysis.graph_models import DependencyGraph, Edge
from pcritical.errors import InternalInconsistencyError
from pcritical.models import CriticalPath, PathSegment

logger = logging.getLogger(__name__)


def topological_sort(graph: DependencyGraph, root: str) -> list[str]:
    """Return the nodes reachable from *root*, importers before imports."""
    graph.node(root)
    postorder: list[str] = []
    visited = {root}
    stack: list[tuple[str, Iterator[Edge]]] = [(root, iter(graph.out_edges(root)))]
    while stack:
        identity, edges = stack[-1]
        for edge in edges:
            if edge.target not in visited:
                visited.add(edge.target)
                stack.append((edge.target, iter(graph.out_edges(edge.target))))
                break
        else:
            stack.pop()
            postorder.append(identity)
    postorder.reverse()
    return postorder


def longest_paths(graph: DependencyGraph, order: list[str]) -> dict[str, int]:
    """Heaviest chain cost from each node in *order* down to a leaf."""
    pathto = {identity: graph.node(identity).cost for identity in order}
    for identity in reversed(order):
        toval = pathto[identity]
        for edge in graph.in_edges(identity):
            pred = edge.source
            if pred not in pathto:
                # importer not reachable from the root
                continue
            candidate = toval + graph.node(pred).cost
            if candidate > pathto[pred]:
                logger.debug("update pathto[%s] to %d (edge to %s)", pred, candidate, identity)
                pathto[pred] = candidate
    return pathto


def _segment(graph: DependencyGraph, identity: str, edge_weight: int) -> PathSegment:
    node = graph.node(identity)
    return PathSegment(
        identity=identity,
        node_id=node.node_id,
        cost=node.cost,
        function_count=node.size.function_count if node.size else 0,
        edge_weight=edge_weight,
    )


def mark_critical_path(
    graph: DependencyGraph,
    root: str,
    pathto: dict[str, int],
) -> CriticalPath:
    """Walk from *root* along the heaviest imports, marking each edge."""
    path = CriticalPath(segments=[_segment(graph, root, 0)])
    cur = root
    while True:
        edges = graph.out_edges(cur)
        if not edges:
            break
        best: Edge | None = None
        best_value = 0
        for edge in edges:
            if edge.target not in pathto:
                raise InternalInconsistencyError(f"no path value for {edge.target}")
            value = pathto[edge.target]
            if (
                best is None
                or value > best_value
                or (value == best_value and edge.target < best.target)
            ):
                best, best_value = edge, value
        if best is None or best_value <= 0:
            raise InternalInconsistencyError(
                f"no successor of {cur} has a positive path value"
            )
        best.critical = True
        path.segments.append(_segment(graph, best.target, best.weight or 0))
        cur = best.target
    return path


def find_critical_path(graph: DependencyGraph, root: str) -> CriticalPath:
    """Topologically sort, compute path values and mark the critical path.

    Requires weights to have been assigned.
    """
    order = topological_sort(graph, root)
    logger.debug("topsorted listing: %s", order)
    pathto = longest_paths(graph, order)

    if logger.isEnabledFor(logging.DEBUG):
        ranked = sorted(pathto, key=lambda identity: pathto[identity], reverse=True)
        for rank, identity in enumerate(ranked):
            node = graph.node(identity)
            logger.debug("%d: %s sz=%d pt=%d %s",
                         rank, node.node_id, node.cost, pathto[identity], identity)

    path = mark_critical_path(graph, root, pathto)
    if path.total_cost != pathto[root]:
        raise InternalInconsistencyError(
            f"critical path cost {path.total_cost} != pathto[{root}] {pathto[root]}"
        )
    return path
