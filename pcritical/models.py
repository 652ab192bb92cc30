"""Data models for the pcritical pipeline."""

from __future__ import annotations

import os
from dataclasses import dataclass, field
from pathlib import Path

from pydantic import BaseModel, ConfigDict, Field


class PackageInfo(BaseModel):
    """Subset of ``go list -json`` output used by the graph builder."""
    model_config = ConfigDict(populate_by_name=True)

    import_path: str = Field(alias="ImportPath")
    root: str = Field(default="", alias="Root")
    standard: bool = Field(default=False, alias="Standard")
    imports: list[str] = Field(default_factory=list, alias="Imports")


class PackageSize(BaseModel):
    """Estimated build cost of one package."""
    estimated_cost: int = Field(ge=0)
    function_count: int = Field(default=0, ge=0)


@dataclass
class PathSegment:
    """One step of the critical path."""
    identity: str
    node_id: str
    cost: int
    function_count: int = 0
    edge_weight: int = 0  # weight of the edge leading here; 0 for the root


@dataclass
class CriticalPath:
    segments: list[PathSegment] = field(default_factory=list)

    @property
    def total_cost(self) -> int:
        return sum(seg.cost for seg in self.segments)

    @property
    def identities(self) -> list[str]:
        return [seg.identity for seg in self.segments]


def _default_workers() -> int:
    return os.cpu_count() or 1


def default_cache_dir() -> Path:
    return Path.home() / ".pcritical" / "cache"


@dataclass
class AnalysisConfig:
    """Configuration for one analysis run."""
    target: str
    cache_dir: Path = field(default_factory=default_cache_dir)
    dot_output: Path | None = field(default_factory=lambda: Path("tmp.dot"))
    skip_standard: bool = False
    include_unsafe: bool = False
    polyline: bool = False
    full_graph: bool = False
    workers: int = field(default_factory=_default_workers)
    size_workers: int = field(default_factory=lambda: max(1, _default_workers() // 2))
