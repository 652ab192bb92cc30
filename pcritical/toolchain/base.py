"""Abstract collaborator interfaces used by the analysis."""

from __future__ import annotations

import abc

from pcritical.models import PackageInfo, PackageSize


class MetadataResolver(abc.ABC):
    """Looks up package metadata for an identity."""

    @abc.abstractmethod
    def resolve(self, identity: str) -> PackageInfo:
        """Return metadata or raise ResolutionError."""


class SizeResolver(abc.ABC):
    """Measures the estimated build cost of an identity."""

    @abc.abstractmethod
    def measure(self, identity: str) -> PackageSize:
        """Return the size or raise BuildError / MeasurementError."""
