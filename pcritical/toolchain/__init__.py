"""Adapters around the external Go toolchain and git."""

from __future__ import annotations

from pcritical.toolchain.base import MetadataResolver, SizeResolver
from pcritical.toolchain.golist import GoListResolver, go_root
from pcritical.toolchain.gosize import GoSizeResolver
from pcritical.toolchain.revision import environment_fingerprint, revision_of

__all__ = [
    "GoListResolver",
    "GoSizeResolver",
    "MetadataResolver",
    "SizeResolver",
    "environment_fingerprint",
    "go_root",
    "revision_of",
]
