"""Memoizing store for expensive toolchain queries.

Entries live in memory and on disk, one file per (kind, key). The whole
on-disk directory belongs to a single environment fingerprint: when the
recorded fingerprint differs from the current one, every entry is dropped.
"""

from __future__ import annotations

import logging
import os
import shutil
import threading
import uuid
from pathlib import Path

from pcritical.errors import CacheError, InternalInconsistencyError

logger = logging.getLogger(__name__)

FINGERPRINT_FILE = "fingerprint"
_KEY_SEPARATOR_REPLACEMENT = "%"


def sanitize_key(key: str) -> str:
    """Turn an identity into a single path component."""
    safe = key.replace("/", _KEY_SEPARATOR_REPLACEMENT)
    if os.sep != "/":
        safe = safe.replace(os.sep, _KEY_SEPARATOR_REPLACEMENT)
    return safe


class QueryCache:
    """In-memory overlay on top of a fingerprinted cache directory.

    The memory tier is guarded by a lock and may be used from worker
    threads. Disk files for a key are written by one caller at a time
    because the cached resolvers serialize queries per key.
    """

    def __init__(self, directory: Path):
        self.directory = Path(directory)
        self._memory: dict[tuple[str, str], bytes] = {}
        self._lock = threading.Lock()
        self._fingerprint: str | None = None

    @property
    def fingerprint(self) -> str | None:
        return self._fingerprint

    def ensure_valid(self, fingerprint: str) -> None:
        """Bind the cache to *fingerprint*, wiping it if it belongs to another.

        A non-empty directory without a fingerprint record is left over from
        an interrupted wipe and is discarded as well.
        """
        with self._lock:
            if self._fingerprint == fingerprint:
                return
            record = self.directory / FINGERPRINT_FILE
            try:
                if record.exists():
                    if record.read_text() != fingerprint:
                        logger.info("fingerprint changed, discarding cache %s", self.directory)
                        self._discard()
                elif self.directory.exists() and any(self.directory.iterdir()):
                    logger.info("no fingerprint record, discarding cache %s", self.directory)
                    self._discard()
                if not record.exists():
                    self.directory.mkdir(parents=True, exist_ok=True)
                    record.write_text(fingerprint)
                    logger.debug("initialized cache %s", self.directory)
            except OSError as e:
                raise CacheError(self.directory, str(e)) from e
            self._memory.clear()
            self._fingerprint = fingerprint

    def get(self, kind: str, key: str) -> tuple[bytes | None, bool]:
        """Return ``(payload, found)``; memory first, then disk."""
        self._check_bound()
        with self._lock:
            payload = self._memory.get((kind, key))
        if payload is not None:
            return payload, True
        if not self._owns_directory():
            return None, False

        path = self._entry_path(kind, key)
        try:
            payload = path.read_bytes()
        except FileNotFoundError:
            return None, False
        except OSError as e:
            raise CacheError(path, str(e)) from e

        with self._lock:
            self._memory[(kind, key)] = payload
        logger.debug("disk hit %s/%s", kind, key)
        return payload, True

    def put(self, kind: str, key: str, payload: bytes) -> None:
        """Store *payload* in both tiers.

        Once another handle has rebound the directory to a different
        fingerprint, entries go to the memory tier only.
        """
        self._check_bound()
        with self._lock:
            self._memory[(kind, key)] = payload
        if not self._owns_directory():
            logger.warning("cache %s was rebound, keeping %s/%s in memory only",
                           self.directory, kind, key)
            return

        path = self._entry_path(kind, key)
        tmp = path.with_name(path.name + ".tmp")
        try:
            path.parent.mkdir(parents=True, exist_ok=True)
            tmp.write_bytes(payload)
            os.replace(tmp, path)
        except OSError as e:
            raise CacheError(path, str(e)) from e

    def _owns_directory(self) -> bool:
        """True while the on-disk record still holds this handle's fingerprint."""
        record = self.directory / FINGERPRINT_FILE
        try:
            return record.read_text() == self._fingerprint
        except FileNotFoundError:
            return False
        except OSError as e:
            raise CacheError(record, str(e)) from e

    def _discard(self) -> None:
        # move aside first so a failed delete cannot leave stale entries in place
        stale = self.directory.with_name(
            f"{self.directory.name}.stale-{os.getpid()}-{uuid.uuid4().hex[:8]}"
        )
        os.rename(self.directory, stale)
        shutil.rmtree(stale)

    def _entry_path(self, kind: str, key: str) -> Path:
        return self.directory / kind / sanitize_key(key)

    def _check_bound(self) -> None:
        if self._fingerprint is None:
            raise InternalInconsistencyError(
                f"cache {self.directory} used before ensure_valid()"
            )


def open_cache(directory: Path, fingerprint: str) -> QueryCache:
    """Create a cache handle bound to *fingerprint*."""
    cache = QueryCache(directory)
    cache.ensure_valid(fingerprint)
    return cache


def remove_cache(directory: Path) -> bool:
    """Delete a cache directory. Returns False if there was nothing to delete."""
    directory = Path(directory)
    if not directory.exists():
        return False
    try:
        shutil.rmtree(directory)
    except OSError as e:
        raise CacheError(directory, str(e)) from e
    return True
