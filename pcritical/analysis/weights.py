"""Edge weights: the weight of X -> Y is the estimated build cost of Y."""

from __future__ import annotations

import logging
import os
from concurrent.futures import ThreadPoolExecutor, wait

from pcritical.analysis.graph_models import DependencyGraph
from pcritical.models import PackageSize
from pcritical.toolchain.base import SizeResolver

logger = logging.getLogger(__name__)


def assign_weights(
    graph: DependencyGraph,
    sizer: SizeResolver,
    workers: int | None = None,
) -> dict[str, PackageSize]:
    """Measure every node in parallel, then annotate nodes and edges.

    The first failing measurement (in node insertion order) is raised after
    the whole batch has finished; nothing is annotated in that case.
    """
    identities = list(graph.nodes)
    if not identities:
        return {}
    workers = max(1, workers or (os.cpu_count() or 2) // 2)
    logger.info("measuring %d packages with %d workers", len(identities), workers)

    with ThreadPoolExecutor(max_workers=min(workers, len(identities))) as pool:
        futures = [pool.submit(sizer.measure, identity) for identity in identities]
        wait(futures)

    sizes = {identity: future.result() for identity, future in zip(identities, futures)}

    logger.info("finished size computation, applying edge weights")
    for identity, size in sizes.items():
        graph.node(identity).size = size
    for edge in graph.edges:
        edge.weight = sizes[edge.target].estimated_cost
        logger.debug("weight %s -> %s = %d", edge.source, edge.target, edge.weight)
    return sizes
