"""Graphviz DOT output for the weighted import graph."""

from __future__ import annotations

from pathlib import Path
from typing import Iterable, TextIO

from pcritical.analysis.graph_models import DependencyGraph

CRITICAL_COLOR = "red"


def _quote(value: str) -> str:
    return '"' + value.replace("\\", "\\\\").replace('"', '\\"') + '"'


def _attr_list(attrs: dict[str, str]) -> str:
    if not attrs:
        return ""
    body = ", ".join(f"{key}={_quote(val)}" for key, val in attrs.items())
    return f" [{body}]"


def render_dot(
    graph: DependencyGraph,
    include: Iterable[int] | None = None,
    polyline: bool = False,
) -> str:
    """Render *graph* as DOT text.

    *include* restricts the output to the given node indices (and the edges
    between them); ``None`` emits everything.
    """
    keep = set(include) if include is not None else None
    lines = ["digraph G {"]

    graph_attrs = dict(graph.attrs)
    if polyline:
        graph_attrs["splines"] = "polyline"
    for key, val in graph_attrs.items():
        lines.append(f"  {key}={_quote(val)};")

    for node in graph.nodes.values():
        if keep is not None and node.index not in keep:
            continue
        lines.append(f"  {node.node_id}{_attr_list({'label': node.label})};")

    for edge in graph.edges:
        src = graph.node(edge.source)
        dst = graph.node(edge.target)
        if keep is not None and (src.index not in keep or dst.index not in keep):
            continue
        attrs: dict[str, str] = {}
        if edge.weight is not None:
            attrs["label"] = str(edge.weight)
        if edge.critical:
            attrs["color"] = CRITICAL_COLOR
        lines.append(f"  {src.node_id} -> {dst.node_id}{_attr_list(attrs)};")

    lines.append("}")
    return "\n".join(lines) + "\n"


def write_dot(
    graph: DependencyGraph,
    out: TextIO | Path,
    include: Iterable[int] | None = None,
    polyline: bool = False,
) -> None:
    text = render_dot(graph, include=include, polyline=polyline)
    if isinstance(out, Path):
        out.write_text(text)
    else:
        out.write(text)
