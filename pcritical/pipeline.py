"""Analysis pipeline: resolve -> fingerprint -> graph -> weights -> critical path -> output."""

from __future__ import annotations

import logging
from dataclasses import dataclass
from pathlib import Path
from typing import Callable

from pcritical.analysis import GraphBuilder, assign_weights, find_critical_path
from pcritical.analysis.graph_models import DependencyGraph
from pcritical.cache import CachedMetadataResolver, CachedSizeResolver, open_cache
from pcritical.errors import OutputError
from pcritical.models import AnalysisConfig, CriticalPath
from pcritical.render import write_dot
from pcritical.report import format_critical_path
from pcritical.toolchain import (
    GoListResolver,
    GoSizeResolver,
    MetadataResolver,
    SizeResolver,
    environment_fingerprint,
    go_root,
)

logger = logging.getLogger(__name__)

CRITICAL_PATH_KIND = "cpath"

ProgressCallback = Callable[[str, int, int], None]


@dataclass
class Toolchain:
    """External collaborators used by a run."""
    resolver: MetadataResolver
    sizer: SizeResolver
    goroot: Callable[[], str]
    fingerprint: Callable[[str, str], str]


def default_toolchain() -> Toolchain:
    return Toolchain(
        resolver=GoListResolver(),
        sizer=GoSizeResolver(),
        goroot=go_root,
        fingerprint=environment_fingerprint,
    )


@dataclass
class AnalysisResult:
    graph: DependencyGraph
    path: CriticalPath
    report: str
    dot_path: Path | None = None


def run_analysis(
    config: AnalysisConfig,
    toolchain: Toolchain | None = None,
    progress: ProgressCallback | None = None,
) -> AnalysisResult:
    """Run the full analysis for ``config.target``."""
    toolchain = toolchain or default_toolchain()

    # Stage 1: locate the target and fingerprint the environment
    if progress:
        progress("Resolving target", 0, 1)
    goroot = toolchain.goroot()
    logger.info("GOROOT is %s", goroot)
    target = toolchain.resolver.resolve(config.target)
    root = target.import_path
    logger.info("target is %s (root %s)", root, target.root)
    fingerprint = toolchain.fingerprint(target.root, goroot)
    cache = open_cache(config.cache_dir, fingerprint)
    if progress:
        progress("Resolving target", 1, 1)

    # Stage 2: dependency graph
    if progress:
        progress("Building graph", 0, 1)
    builder = GraphBuilder(
        CachedMetadataResolver(toolchain.resolver, cache),
        workers=config.workers,
        include_unsafe=config.include_unsafe,
        skip_standard=config.skip_standard,
    )
    builder.populate(root)
    graph = builder.graph
    logger.info("graph has %d nodes, %d edges", len(graph.nodes), len(graph.edges))
    if progress:
        progress("Building graph", 1, 1)

    # Stage 3: package sizes
    if progress:
        progress("Measuring packages", 0, len(graph.nodes))
    assign_weights(graph, CachedSizeResolver(toolchain.sizer, cache), workers=config.size_workers)
    if progress:
        progress("Measuring packages", len(graph.nodes), len(graph.nodes))

    # Stage 4: critical path
    path = find_critical_path(graph, root)
    report = format_critical_path(path)
    cache.put(CRITICAL_PATH_KIND, root, report.encode())

    # Stage 5: DOT output
    dot_path = None
    if config.dot_output is not None:
        include = None
        if not config.full_graph:
            include = {graph.node(identity).index for identity in path.identities}
        dot_path = Path(config.dot_output)
        try:
            write_dot(graph, dot_path, include=include, polyline=config.polyline)
        except OSError as e:
            raise OutputError(dot_path, str(e)) from e

    return AnalysisResult(graph=graph, path=path, report=report, dot_path=dot_path)
