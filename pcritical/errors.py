"""Error types.

Environmental failures (toolchain, disk, version control) derive from
``PcriticalError`` and are reported to the user. ``InternalInconsistencyError``
marks a defect in this program and is never converted into a user-facing
message.
"""

from __future__ import annotations

from pathlib import Path


class PcriticalError(Exception):
    """Base class for environmental failures."""


class ResolutionError(PcriticalError):
    """Package metadata could not be obtained or parsed."""

    def __init__(self, identity: str, reason: str, command: str = "go list -json"):
        self.identity = identity
        super().__init__(f"{command} {identity}: {reason}")


class BuildError(PcriticalError):
    """The compiled artifact for a package could not be produced."""

    def __init__(self, identity: str, reason: str):
        self.identity = identity
        super().__init__(f"go build {identity}: {reason}")


class MeasurementError(PcriticalError):
    """The compiled artifact exists but its size or symbols are unreadable."""

    def __init__(self, identity: str, reason: str):
        self.identity = identity
        super().__init__(f"measuring {identity}: {reason}")


class CacheError(PcriticalError):
    """Disk tier read/write failure (a miss is not an error)."""

    def __init__(self, path: Path, reason: str):
        self.path = path
        super().__init__(f"cache {path}: {reason}")


class OutputError(PcriticalError):
    """A result file could not be written."""

    def __init__(self, path: Path, reason: str):
        self.path = path
        super().__init__(f"writing {path}: {reason}")


class RevisionError(PcriticalError):
    """Version-control metadata unavailable for a hard lookup."""


class InternalInconsistencyError(RuntimeError):
    """An invariant of the analysis was violated."""
