"""Shared dataclasses for the tags index."""

from __future__ import annotations

from dataclasses import dataclass, field
from pathlib import Path
from types import MappingProxyType
from typing import Iterator, Mapping, Optional, Sequence, Union


@dataclass(frozen=True)
class NumericAddress:
    line: int  # 1-based, as stored in the tags file


@dataclass(frozen=True)
class PatternAddress:
    text: str  # unescaped literal, anchors stripped
    anchored_start: bool = False
    anchored_end: bool = False

    def matches(self, line: str) -> bool:
        if self.anchored_start and self.anchored_end:
            return line == self.text
        if self.anchored_start:
            return line.startswith(self.text)
        if self.anchored_end:
            return line.endswith(self.text)
        return self.text in line


AddressSpec = Union[NumericAddress, PatternAddress]


@dataclass(frozen=True)
class TagRecord:
    symbol: str
    path: str
    address: AddressSpec
    kind: Optional[str] = None
    fields: tuple[tuple[str, str], ...] = ()

    def get_field(self, key: str) -> Optional[str]:
        for name, value in self.fields:
            if name == key:
                return value
        return None


@dataclass(frozen=True)
class ResolvedLocation:
    path: Path
    lineno: int  # zero-based


@dataclass(frozen=True)
class ParseWarning:
    lineno: int
    reason: str
    line: str


@dataclass(frozen=True)
class TagsIndex:
    """Symbol -> records, in tags-file order.  Never mutated after build."""

    entries: Mapping[str, tuple[TagRecord, ...]] = field(
        default_factory=lambda: MappingProxyType({})
    )

    @classmethod
    def from_records(cls, records: Sequence[TagRecord]) -> "TagsIndex":
        grouped: dict[str, list[TagRecord]] = {}
        for record in records:
            grouped.setdefault(record.symbol, []).append(record)
        frozen = {symbol: tuple(items) for symbol, items in grouped.items()}
        return cls(entries=MappingProxyType(frozen))

    def lookup(self, symbol: str) -> tuple[TagRecord, ...]:
        return self.entries.get(symbol, ())

    @property
    def symbols(self) -> list[str]:
        return list(self.entries.keys())

    @property
    def record_count(self) -> int:
        return sum(len(items) for items in self.entries.values())

    def __contains__(self, symbol: object) -> bool:
        return symbol in self.entries

    def __iter__(self) -> Iterator[TagRecord]:
        for items in self.entries.values():
            yield from items

    def __len__(self) -> int:
        return len(self.entries)
