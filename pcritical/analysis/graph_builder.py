"""Dependency graph builder: discovers the transitive imports of a target."""

from __future__ import annotations

import logging
import os
from concurrent.futures import ThreadPoolExecutor, as_completed
from dataclasses import dataclass
from typing import Iterator

from pcritical.analysis.graph_models import DependencyGraph, Node
from pcritical.toolchain.base import MetadataResolver

logger = logging.getLogger(__name__)

NO_SOURCE_PSEUDO_PACKAGE = "C"
UNSAFE_PSEUDO_PACKAGE = "unsafe"


@dataclass
class _Frame:
    node: Node
    deps: Iterator[str]
    pending: str | None = None  # dependency being populated below this frame


class GraphBuilder:
    """Build a dependency graph by querying package metadata.

    Metadata for the direct dependencies of each node is fetched in a
    bounded parallel batch first, so the sequential walk that follows
    mostly hits the cache. Only the sequential walk mutates the graph.
    """

    def __init__(
        self,
        resolver: MetadataResolver,
        graph: DependencyGraph | None = None,
        workers: int | None = None,
        include_unsafe: bool = False,
        skip_standard: bool = False,
    ):
        self.resolver = resolver
        self.graph = graph if graph is not None else DependencyGraph()
        self.workers = max(1, workers or os.cpu_count() or 1)
        self.include_unsafe = include_unsafe
        self.skip_standard = skip_standard

    def is_pseudo_dependency(self, identity: str) -> bool:
        if identity == NO_SOURCE_PSEUDO_PACKAGE:
            return True
        return identity == UNSAFE_PSEUDO_PACKAGE and not self.include_unsafe

    def populate(self, identity: str) -> Node:
        """Add *identity* and everything it imports to the graph.

        Depth-first with an explicit stack, so import depth is not bounded
        by the interpreter's recursion limit.
        """
        root = self._enter(identity)
        stack = [root]
        while stack:
            frame = stack[-1]
            for dep in frame.deps:
                dep_info = self.resolver.resolve(dep)
                if self.skip_standard and dep_info.standard:
                    # standard packages only import other standard packages
                    continue
                if dep not in self.graph:
                    frame.pending = dep
                    stack.append(self._enter(dep))
                    break
                self.graph.add_edge(frame.node.identity, dep)
            else:
                stack.pop()
                if stack:
                    parent = stack[-1]
                    self.graph.add_edge(parent.node.identity, parent.pending)
                    parent.pending = None
        return root.node

    def _enter(self, identity: str) -> _Frame:
        logger.debug("populate %s", identity)
        # Insert before descending so shared dependencies are visited once.
        node = self.graph.add_node(identity)
        info = self.resolver.resolve(identity)
        deps = [dep for dep in info.imports if not self.is_pseudo_dependency(dep)]
        self._warm([dep for dep in deps if dep not in self.graph])
        return _Frame(node=node, deps=iter(deps))

    def _warm(self, deps: list[str]) -> None:
        """Resolve *deps* in parallel and wait for all of them."""
        if not deps:
            return
        logger.debug("warming %d deps with %d workers", len(deps), self.workers)
        with ThreadPoolExecutor(max_workers=min(self.workers, len(deps))) as pool:
            futures = {pool.submit(self.resolver.resolve, dep): dep for dep in deps}
            for future in as_completed(futures):
                exc = future.exception()
                if exc is not None:
                    # not cached; the sequential walk queries it again and raises
                    logger.debug("warm-up of %s failed: %s", futures[future], exc)
