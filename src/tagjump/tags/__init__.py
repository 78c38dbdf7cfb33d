"""Tags index engine: parse, store, regenerate, resolve."""

from .engine import TagsEngine
from .orchestrator import RegenerationOrchestrator
from .parser import TagsParser, parse_tags
from .providers import DefinitionProvider, ProviderRegistry
from .resolver import AddressResolver, ResolutionCache
from .store import IndexSnapshot, IndexStore
from .types import (
    AddressSpec,
    NumericAddress,
    ParseWarning,
    PatternAddress,
    ResolvedLocation,
    TagRecord,
    TagsIndex,
)

__all__ = [
    "TagsEngine",
    "RegenerationOrchestrator",
    "TagsParser",
    "parse_tags",
    "DefinitionProvider",
    "ProviderRegistry",
    "AddressResolver",
    "ResolutionCache",
    "IndexSnapshot",
    "IndexStore",
    "AddressSpec",
    "NumericAddress",
    "PatternAddress",
    "ParseWarning",
    "ResolvedLocation",
    "TagRecord",
    "TagsIndex",
]
