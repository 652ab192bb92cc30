"""Package build cost via ``go build -o`` and ``go tool nm``.

The estimated cost of a package is the size in bytes of its compiled
archive. The number of text symbols is reported alongside it.
"""

from __future__ import annotations

import logging
import re
import subprocess
import tempfile
from pathlib import Path

from pcritical.errors import BuildError, MeasurementError
from pcritical.models import PackageSize
from pcritical.toolchain.base import SizeResolver

logger = logging.getLogger(__name__)

# [file: ] [address] type name
_NM_LINE = re.compile(
    r"^(?:\S+?:\s*)?\s*(?:[0-9a-fA-F]+\s+)?(?P<kind>[A-Za-z])\s+\S"
)


def count_text_symbols(identity: str, nm_output: str) -> int:
    """Count function (``T``/``t``) symbols in ``go tool nm`` output."""
    count = 0
    for line in nm_output.splitlines():
        if not line.strip():
            continue
        m = _NM_LINE.match(line)
        if m is None:
            raise MeasurementError(identity, f"unexpected nm output line {line!r}")
        if m.group("kind") in ("T", "t"):
            count += 1
    return count


class GoSizeResolver(SizeResolver):
    """Compiles a package into a scratch directory and measures it."""

    def __init__(self, go: str = "go"):
        self.go = go

    def measure(self, identity: str) -> PackageSize:
        with tempfile.TemporaryDirectory(prefix="pcritical-") as tmpdir:
            artifact = Path(tmpdir) / "pkg.a"
            self._build(identity, artifact)
            try:
                size = artifact.stat().st_size
            except OSError as e:
                raise MeasurementError(identity, f"no artifact: {e}") from e
            nfuncs = self._count_functions(identity, artifact)
        logger.debug("size of %s: %d bytes, %d funcs", identity, size, nfuncs)
        return PackageSize(estimated_cost=size, function_count=nfuncs)

    def _build(self, identity: str, artifact: Path) -> None:
        try:
            subprocess.run(
                [self.go, "build", "-o", str(artifact), identity],
                capture_output=True, text=True, check=True,
            )
        except FileNotFoundError as e:
            raise BuildError(identity, f"{self.go} not found") from e
        except subprocess.CalledProcessError as e:
            raise BuildError(identity, (e.stderr or "").strip() or f"exit status {e.returncode}") from e

    def _count_functions(self, identity: str, artifact: Path) -> int:
        try:
            proc = subprocess.run(
                [self.go, "tool", "nm", str(artifact)],
                capture_output=True, text=True, check=True,
            )
        except (OSError, subprocess.CalledProcessError) as e:
            raise MeasurementError(identity, f"go tool nm: {e}") from e
        return count_text_symbols(identity, proc.stdout)
