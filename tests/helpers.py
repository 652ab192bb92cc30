"""Fake toolchain collaborators and graph factories shared by the tests."""

from __future__ import annotations

import threading
import time
from collections import Counter

from pcritical.analysis.graph_models import DependencyGraph
from pcritical.errors import BuildError, ResolutionError
from pcritical.models import PackageInfo, PackageSize
from pcritical.pipeline import Toolchain
from pcritical.toolchain.base import MetadataResolver, SizeResolver

# P -> {Q, R}, Q -> {S, T}, R -> {T}
DIAMOND = {
    "P": ["Q", "R"],
    "Q": ["S", "T"],
    "R": ["T"],
    "S": [],
    "T": [],
}
DIAMOND_COSTS = {"P": 10, "Q": 11, "R": 11, "T": 29, "S": 3}


class FakeResolver(MetadataResolver):
    def __init__(self, imports, standard=(), root="/src/repo", fail=(), delay=0.0):
        self.imports = imports
        self.standard = set(standard)
        self.root = root
        self.fail = set(fail)
        self.delay = delay
        self.calls: Counter[str] = Counter()
        self.active = 0
        self.max_active = 0
        self._lock = threading.Lock()

    def resolve(self, identity):
        with self._lock:
            self.calls[identity] += 1
            self.active += 1
            self.max_active = max(self.max_active, self.active)
        try:
            if self.delay:
                time.sleep(self.delay)
            if identity in self.fail or identity not in self.imports:
                raise ResolutionError(identity, "cannot find package")
            return PackageInfo(
                import_path=identity,
                root=self.root,
                standard=identity in self.standard,
                imports=list(self.imports[identity]),
            )
        finally:
            with self._lock:
                self.active -= 1


class FakeSizer(SizeResolver):
    def __init__(self, costs, fail=(), delay=0.0):
        self.costs = costs
        self.fail = set(fail)
        self.delay = delay
        self.calls: Counter[str] = Counter()
        self._lock = threading.Lock()

    def measure(self, identity):
        with self._lock:
            self.calls[identity] += 1
        if self.delay:
            time.sleep(self.delay)
        if identity in self.fail:
            raise BuildError(identity, "undefined: foo")
        cost = self.costs[identity]
        return PackageSize(estimated_cost=cost, function_count=cost // 10)


def fake_toolchain(imports, costs, fingerprint="rev1\ngoroot1", **resolver_kwargs):
    return Toolchain(
        resolver=FakeResolver(imports, **resolver_kwargs),
        sizer=FakeSizer(costs),
        goroot=lambda: "/usr/local/go",
        fingerprint=lambda root, goroot: fingerprint,
    )


def build_weighted_graph(imports, costs, root):
    """Graph reachable from *root* with sizes and weights filled in directly."""
    graph = DependencyGraph()

    def visit(identity):
        graph.add_node(identity)
        for dep in imports[identity]:
            if dep not in graph:
                visit(dep)
            graph.add_edge(identity, dep)

    visit(root)
    for identity, node in graph.nodes.items():
        node.size = PackageSize(estimated_cost=costs[identity], function_count=0)
    for edge in graph.edges:
        edge.weight = costs[edge.target]
    return graph
