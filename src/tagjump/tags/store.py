"""In-memory index store with atomic snapshot replacement."""

from __future__ import annotations

import datetime as dt
import logging
import threading
from dataclasses import dataclass, field
from pathlib import Path
from typing import Optional

from .resolver import ResolutionCache
from .types import TagRecord, TagsIndex

logger = logging.getLogger(__name__)


@dataclass(frozen=True)
class IndexSnapshot:
    index: TagsIndex
    cache: ResolutionCache = field(default_factory=ResolutionCache, compare=False)
    generation: int = 0
    source: Optional[Path] = None
    loaded_at: Optional[dt.datetime] = None


class IndexStore:
    """Holds exactly one complete snapshot; readers never see a partial one.

    ``swap`` replaces the single snapshot reference, so a ``get`` that starts
    after it returns sees the new index in full and the old cache is dropped.
    """

    def __init__(self) -> None:
        self._lock = threading.Lock()
        self._snapshot = IndexSnapshot(index=TagsIndex())

    def get(self) -> IndexSnapshot:
        with self._lock:
            return self._snapshot

    @property
    def index(self) -> TagsIndex:
        return self.get().index

    def swap(self, index: TagsIndex, *, source: Optional[Path] = None) -> IndexSnapshot:
        with self._lock:
            snapshot = IndexSnapshot(
                index=index,
                generation=self._snapshot.generation + 1,
                source=source,
                loaded_at=dt.datetime.now(dt.timezone.utc),
            )
            previous, self._snapshot = self._snapshot, snapshot
        previous.cache.clear()
        logger.info(
            "Index swapped: generation=%d symbols=%d records=%d",
            snapshot.generation,
            len(index),
            index.record_count,
        )
        return snapshot

    def clear(self) -> None:
        self.swap(TagsIndex())

    def lookup(self, symbol: str) -> tuple[TagRecord, ...]:
        return self.get().index.lookup(symbol)
