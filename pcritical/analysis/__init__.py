"""Dependency graph construction and critical path analysis."""

from __future__ import annotations

from pcritical.analysis.graph_models import DependencyGraph, Edge, Node
from pcritical.analysis.graph_builder import GraphBuilder
from pcritical.analysis.weights import assign_weights
from pcritical.analysis.critical_path import (
    find_critical_path,
    longest_paths,
    mark_critical_path,
    topological_sort,
)

__all__ = [
    "DependencyGraph",
    "Edge",
    "GraphBuilder",
    "Node",
    "assign_weights",
    "find_critical_path",
    "longest_paths",
    "mark_critical_path",
    "topological_sort",
]
