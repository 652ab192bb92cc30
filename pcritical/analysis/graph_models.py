"""Data models for the dependency graph."""

from __future__ import annotations

from dataclasses import dataclass, field

from pcritical.errors import InternalInconsistencyError
from pcritical.models import PackageSize


@dataclass
class Node:
    index: int
    identity: str
    size: PackageSize | None = None  # set by weight assignment

    @property
    def node_id(self) -> str:
        return f"N{self.index}"

    @property
    def label(self) -> str:
        return self.identity

    @property
    def cost(self) -> int:
        if self.size is None:
            raise InternalInconsistencyError(f"no size assigned to {self.identity}")
        return self.size.estimated_cost


@dataclass
class Edge:
    source: str  # dependent
    target: str  # dependency
    weight: int | None = None  # estimated cost of target
    critical: bool = False


@dataclass
class DependencyGraph:
    """Directed import graph; edges point from importer to imported."""
    nodes: dict[str, Node] = field(default_factory=dict)
    edges: list[Edge] = field(default_factory=list)
    forward: dict[str, list[Edge]] = field(default_factory=dict)  # source -> out edges
    reverse: dict[str, list[Edge]] = field(default_factory=dict)  # target -> in edges
    attrs: dict[str, str] = field(default_factory=dict)

    def __contains__(self, identity: str) -> bool:
        return identity in self.nodes

    def __len__(self) -> int:
        return len(self.nodes)

    def add_node(self, identity: str) -> Node:
        if identity in self.nodes:
            raise InternalInconsistencyError(f"node {identity} inserted twice")
        node = Node(index=len(self.nodes), identity=identity)
        self.nodes[identity] = node
        self.forward[identity] = []
        self.reverse[identity] = []
        return node

    def node(self, identity: str) -> Node:
        try:
            return self.nodes[identity]
        except KeyError:
            raise InternalInconsistencyError(f"unknown node {identity}") from None

    def add_edge(self, source: str, target: str) -> Edge:
        self.node(source)
        self.node(target)
        edge = Edge(source=source, target=target)
        self.edges.append(edge)
        self.forward[source].append(edge)
        self.reverse[target].append(edge)
        return edge

    def out_edges(self, identity: str) -> list[Edge]:
        self.node(identity)
        return self.forward[identity]

    def in_edges(self, identity: str) -> list[Edge]:
        self.node(identity)
        return self.reverse[identity]
