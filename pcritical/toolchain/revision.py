"""Revision lookups used to fingerprint the cache."""

from __future__ import annotations

import logging
import subprocess
from pathlib import Path

from pcritical.errors import RevisionError

logger = logging.getLogger(__name__)


def revision_of(path: str | Path, soft: bool = False) -> str:
    """Return the ``git log -1 --oneline`` summary for the repo at *path*.

    With *soft*, a directory without ``.git`` yields the path itself.
    """
    path = Path(path)
    if soft and not (path / ".git").exists():
        return str(path)
    try:
        proc = subprocess.run(
            ["git", "log", "-1", "--oneline"],
            cwd=path, capture_output=True, text=True, check=True,
        )
    except subprocess.CalledProcessError as e:
        reason = (e.stderr or "").strip() or f"exit status {e.returncode}"
        raise RevisionError(f"git log -1 --oneline in {path}: {reason}") from e
    except OSError as e:
        raise RevisionError(f"git log -1 --oneline in {path}: {e}") from e
    return proc.stdout.strip()


def make_fingerprint(repo_revision: str, goroot_revision: str) -> str:
    return f"{repo_revision}\n{goroot_revision}"


def environment_fingerprint(target_root: str, goroot: str) -> str:
    """Fingerprint from the GOROOT revision and the target repo revision."""
    goroot_revision = revision_of(goroot, soft=True)
    logger.debug("goroot revision: %s", goroot_revision)
    if target_root == goroot:
        # target lives in the standard library
        repo_revision = goroot_revision
    else:
        repo_revision = revision_of(target_root)
    logger.debug("repo revision: %s", repo_revision)
    return make_fingerprint(repo_revision, goroot_revision)
