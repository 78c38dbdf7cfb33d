"""Turn tag addresses into zero-based line numbers."""

from __future__ import annotations

import logging
import threading
from pathlib import Path
from typing import Optional, Union

from tagjump.core.errors import FileNotFound, OutOfRange, PatternNotFound, ResolveError

from .types import AddressSpec, NumericAddress, PatternAddress, ResolvedLocation, TagRecord

logger = logging.getLogger(__name__)


def read_source_lines(path: Path) -> list[str]:
    """Split on ``\\n`` only so line numbers agree with ctags."""
    try:
        data = path.read_bytes()
    except OSError as exc:
        raise FileNotFound(f"cannot read {path}: {exc}") from exc
    text = data.decode("utf-8", errors="ignore")
    return [line[:-1] if line.endswith("\r") else line for line in text.split("\n")]


class ResolutionCache:
    """File contents and resolved addresses for one index generation.

    Owned by an index snapshot and dropped together with it, so edits on disk
    are picked up after the next regeneration.
    """

    def __init__(self) -> None:
        self._lines: dict[Path, list[str]] = {}
        self._resolved: dict[tuple[Path, AddressSpec], Union[int, ResolveError]] = {}
        self._lock = threading.Lock()

    def lines(self, path: Path) -> list[str]:
        with self._lock:
            cached = self._lines.get(path)
        if cached is not None:
            return cached
        lines = read_source_lines(path)
        with self._lock:
            return self._lines.setdefault(path, lines)

    def get(self, key: tuple[Path, AddressSpec]) -> Optional[Union[int, ResolveError]]:
        with self._lock:
            return self._resolved.get(key)

    def put(self, key: tuple[Path, AddressSpec], outcome: Union[int, ResolveError]) -> None:
        with self._lock:
            self._resolved[key] = outcome

    @property
    def file_count(self) -> int:
        with self._lock:
            return len(self._lines)

    def clear(self) -> None:
        with self._lock:
            self._lines.clear()
            self._resolved.clear()


class AddressResolver:
    def __init__(self, root: str | Path, cache: Optional[ResolutionCache] = None) -> None:
        self.root = Path(root)
        self.cache = cache if cache is not None else ResolutionCache()

    def absolute_path(self, tag_path: str | Path) -> Path:
        path = Path(tag_path)
        if not path.is_absolute():
            path = self.root / path
        return path

    def resolve(self, tag_path: str | Path, address: AddressSpec) -> int:
        """Return the zero-based line for ``address`` in ``tag_path``.

        Raises:
            OutOfRange: numeric address below 1.
            FileNotFound: the file is missing or unreadable.
            PatternNotFound: no line satisfies the search pattern.
        """
        path = self.absolute_path(tag_path)
        key = (path, address)
        cached = self.cache.get(key)
        if cached is not None:
            if isinstance(cached, ResolveError):
                raise cached
            return cached

        try:
            lineno = self._resolve_uncached(path, address)
        except ResolveError as exc:
            self.cache.put(key, exc)
            raise
        self.cache.put(key, lineno)
        return lineno

    def _resolve_uncached(self, path: Path, address: AddressSpec) -> int:
        if isinstance(address, NumericAddress):
            if address.line < 1:
                raise OutOfRange(f"line {address.line} in {path}")
            if not path.is_file():
                raise FileNotFound(f"{path} does not exist")
            return address.line - 1

        if isinstance(address, PatternAddress):
            for idx, line in enumerate(self.cache.lines(path)):
                if address.matches(line):
                    return idx
            raise PatternNotFound(f"{address.text!r} not found in {path}")

        raise TypeError(f"unsupported address type: {type(address).__name__}")

    def resolve_record(self, record: TagRecord) -> ResolvedLocation:
        lineno = self.resolve(record.path, record.address)
        return ResolvedLocation(path=self.absolute_path(record.path), lineno=lineno)
