"""Cache-backed resolvers.

Each wrapper serializes queries per identity, so concurrent workers asking
for the same package trigger one external invocation; the rest are hits.
"""

from __future__ import annotations

import logging
import threading
from typing import Callable, TypeVar

from pydantic import BaseModel, ValidationError

from pcritical.cache.store import QueryCache
from pcritical.errors import CacheError
from pcritical.models import PackageInfo, PackageSize
from pcritical.toolchain.base import MetadataResolver, SizeResolver

logger = logging.getLogger(__name__)

M = TypeVar("M", bound=BaseModel)


class _KeyedLocks:
    def __init__(self):
        self._locks: dict[str, threading.Lock] = {}
        self._guard = threading.Lock()

    def lock_for(self, key: str) -> threading.Lock:
        with self._guard:
            lock = self._locks.get(key)
            if lock is None:
                lock = self._locks[key] = threading.Lock()
            return lock


class _CachedQuery:
    kind: str = ""

    def __init__(self, cache: QueryCache):
        self.cache = cache
        self._locks = _KeyedLocks()

    def _lookup(self, identity: str, model: type[M], compute: Callable[[str], M]) -> M:
        with self._locks.lock_for(identity):
            payload, found = self.cache.get(self.kind, identity)
            if found:
                try:
                    return model.model_validate_json(payload)
                except ValidationError as e:
                    raise CacheError(
                        self.cache.directory / self.kind,
                        f"corrupt entry for {identity}: {e}",
                    ) from e
            logger.debug("%s miss: %s", self.kind, identity)
            value = compute(identity)
            self.cache.put(self.kind, identity, value.model_dump_json(by_alias=True).encode())
            return value


class CachedMetadataResolver(_CachedQuery, MetadataResolver):
    kind = "golist"

    def __init__(self, resolver: MetadataResolver, cache: QueryCache):
        super().__init__(cache)
        self.resolver = resolver

    def resolve(self, identity: str) -> PackageInfo:
        return self._lookup(identity, PackageInfo, self.resolver.resolve)


class CachedSizeResolver(_CachedQuery, SizeResolver):
    kind = "pkgsize"

    def __init__(self, resolver: SizeResolver, cache: QueryCache):
        super().__init__(cache)
        self.resolver = resolver

    def measure(self, identity: str) -> PackageSize:
        return self._lookup(identity, PackageSize, self.resolver.measure)
