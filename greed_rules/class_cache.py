#!/usr/bin/env python3
"""
The catalog of origins and classes produced by one successful ingestion.

A ClassCache is never patched: a refresh builds a new one and the holder
swaps its reference in a single assignment, so readers never see a
half-built catalog.
"""

import json
import logging
import threading
from concurrent.futures import Future, ThreadPoolExecutor
from concurrent.futures import wait as wait_for
from datetime import datetime
from pathlib import Path
from types import MappingProxyType
from typing import Any, Dict, Iterable, List, Optional

from greed_rules.errors import CacheLoadError
from greed_rules.models import ClassRecord, OriginRecord
from greed_rules.parse_requirements import meets_requirement

logger = logging.getLogger(__name__)


class ClassCache:
    """Name-keyed origins and classes plus the document's last-modified time."""

    def __init__(self, origins: Iterable[OriginRecord] = (), classes: Iterable[ClassRecord] = (),
                 last_modified: Optional[datetime] = None):
        self._origins = MappingProxyType({origin.name: origin for origin in origins})
        self._classes = MappingProxyType({class_record.name: class_record for class_record in classes})
        self._last_modified = last_modified

    def __repr__(self) -> str:
        return (f'ClassCache(origins={len(self._origins)}, classes={len(self._classes)}, '
                f'last_modified={self._last_modified!r})')

    def __eq__(self, other):
        if not isinstance(other, ClassCache):
            return NotImplemented
        return (dict(self._origins) == dict(other._origins)
                and dict(self._classes) == dict(other._classes)
                and self._last_modified == other._last_modified)

    __hash__ = None

    @property
    def origins(self):
        return self._origins

    @property
    def classes(self):
        return self._classes

    @property
    def last_modified(self) -> Optional[datetime]:
        return self._last_modified

    def get_origin(self, name: str) -> Optional[OriginRecord]:
        return self._origins.get(name)

    def get_origins(self) -> List[OriginRecord]:
        return list(self._origins.values())

    def get_class(self, name: str) -> Optional[ClassRecord]:
        return self._classes.get(name)

    def get_classes(self) -> List[ClassRecord]:
        return list(self._classes.values())

    def get_class_cache_count(self) -> int:
        return len(self._classes)

    def get_class_available(self, class_record: ClassRecord, held_classes: Iterable[ClassRecord]) -> bool:
        """A class with no requirement is always available."""
        if class_record.requirement is None:
            return True
        return meets_requirement(class_record.requirement, held_classes)

    def map_to_concrete_classes(self, names: Iterable[str]) -> List[ClassRecord]:
        """Resolve saved class names against this catalog, in order.

        Names the current document no longer has are dropped.
        """
        concrete = []
        for name in names:
            class_record = self._classes.get(name)
            if class_record is None:
                logger.warning("Class %r is not in the current rules document", name)
                continue
            concrete.append(class_record)
        return concrete

    def is_stale(self, last_modified: Optional[datetime]) -> bool:
        """True unless the remote document is known to be unchanged."""
        if self._last_modified is None or last_modified is None:
            return True
        return self._last_modified != last_modified

    def to_dict(self) -> Dict[str, Any]:
        return {
            'last_modified': self._last_modified.isoformat() if self._last_modified else None,
            'origins': [origin.to_dict() for origin in self._origins.values()],
            'classes': [class_record.to_dict() for class_record in self._classes.values()],
        }

    @classmethod
    def from_dict(cls, data: Dict[str, Any]) -> 'ClassCache':
        last_modified = data.get('last_modified')
        return cls(
            origins=[OriginRecord.from_dict(item) for item in data.get('origins', [])],
            classes=[ClassRecord.from_dict(item) for item in data.get('classes', [])],
            last_modified=datetime.fromisoformat(last_modified) if last_modified else None,
        )

    def save(self, path) -> None:
        path = Path(path)
        path.parent.mkdir(parents=True, exist_ok=True)
        with open(path, 'w', encoding='utf-8') as f:
            json.dump(self.to_dict(), f, indent=2, ensure_ascii=False)

    @classmethod
    def load(cls, path) -> 'ClassCache':
        """Read a cache written by save(); a missing file gives an empty cache."""
        path = Path(path)
        if not path.exists():
            logger.info("No class cache at %s, starting empty", path)
            return cls()
        try:
            with open(path, 'r', encoding='utf-8') as f:
                data = json.load(f)
        except ValueError as e:
            raise CacheLoadError(f"Could not read class cache {path}: {e}") from e
        if not isinstance(data, dict):
            raise CacheLoadError(f"Class cache {path} must hold an object, got {type(data).__name__}")
        try:
            return cls.from_dict(data)
        except (AttributeError, KeyError, TypeError, ValueError) as e:
            raise CacheLoadError(f"Could not read class cache {path}: {e}") from e


class CatalogStore:
    """Holds the current ClassCache and refreshes it on a background worker.

    The UI reads ``cache`` at any time and calls ``poll()`` once per frame;
    a finished refresh replaces the cache reference in one assignment.
    """

    def __init__(self, cache: Optional[ClassCache] = None):
        self.cache = cache if cache is not None else ClassCache()
        self._executor = ThreadPoolExecutor(max_workers=1, thread_name_prefix='rules-refresh-worker')
        self._pending: Optional[Future] = None
        self._lock = threading.Lock()

    def refresh(self, source, **options) -> Future:
        """Start a refresh from source, or return the one already running.

        options are passed through to refresh_catalog.
        """
        # parse_all imports this module, so import it lazily
        from greed_rules.parse_all import refresh_catalog

        with self._lock:
            if self._pending is not None and not self._pending.done():
                return self._pending
            logger.info("Refreshing rules catalog")
            self._pending = self._executor.submit(refresh_catalog, self.cache, source, **options)
            return self._pending

    def poll(self) -> Optional[BaseException]:
        """Install a finished refresh. Returns the error of a failed one."""
        with self._lock:
            pending = self._pending
            if pending is None or not pending.done():
                return None
            self._pending = None

        error = pending.exception()
        if error is not None:
            logger.error("Rules refresh failed, keeping the previous catalog: %s", error)
            return error

        new_cache = pending.result()
        if new_cache is not self.cache:
            logger.info("Installed refreshed catalog: %r", new_cache)
        self.cache = new_cache
        return None

    def wait(self, timeout: Optional[float] = None) -> Optional[BaseException]:
        """Block until the running refresh finishes, then poll()."""
        pending = self._pending
        if pending is not None:
            wait_for([pending], timeout=timeout)
        return self.poll()

    def shutdown(self) -> None:
        self._executor.shutdown(wait=True)
