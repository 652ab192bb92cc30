"""Package metadata via ``go list -json``."""

from __future__ import annotations

import logging
import subprocess

from pydantic import ValidationError

from pcritical.errors import ResolutionError
from pcritical.models import PackageInfo
from pcritical.toolchain.base import MetadataResolver

logger = logging.getLogger(__name__)


def _failure_reason(e: subprocess.CalledProcessError) -> str:
    stderr = (e.stderr or "").strip()
    return stderr or f"exit status {e.returncode}"


class GoListResolver(MetadataResolver):
    """Runs ``go list -json`` once per call, no caching."""

    def __init__(self, go: str = "go"):
        self.go = go

    def resolve(self, identity: str) -> PackageInfo:
        logger.debug("go list -json %s", identity)
        try:
            proc = subprocess.run(
                [self.go, "list", "-json", identity],
                capture_output=True, text=True, check=True,
            )
        except FileNotFoundError as e:
            raise ResolutionError(identity, f"{self.go} not found") from e
        except subprocess.CalledProcessError as e:
            raise ResolutionError(identity, _failure_reason(e)) from e

        try:
            return PackageInfo.model_validate_json(proc.stdout)
        except ValidationError as e:
            raise ResolutionError(identity, f"unmarshal: {e}") from e


def go_root(go: str = "go") -> str:
    """Return the toolchain's GOROOT."""
    try:
        proc = subprocess.run(
            [go, "env", "GOROOT"],
            capture_output=True, text=True, check=True,
        )
    except FileNotFoundError as e:
        raise ResolutionError("GOROOT", f"{go} not found", command="go env") from e
    except subprocess.CalledProcessError as e:
        raise ResolutionError("GOROOT", _failure_reason(e), command="go env") from e
    return proc.stdout.strip()
