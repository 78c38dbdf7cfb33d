"""Language id -> definition capability mapping."""

from __future__ import annotations

import logging
from typing import Iterable, Optional, Protocol

from .types import ResolvedLocation

logger = logging.getLogger(__name__)


class DefinitionProvider(Protocol):
    def lookup(self, symbol: str) -> list[ResolvedLocation]: ...


class ProviderRegistry:
    """Every registered language shares the same provider instance."""

    def __init__(self) -> None:
        self._providers: dict[str, DefinitionProvider] = {}

    def register(self, language_id: str, provider: DefinitionProvider) -> None:
        self._providers[language_id] = provider
        logger.debug("Registered definition provider for %s", language_id)

    def register_languages(self, language_ids: Iterable[str], provider: DefinitionProvider) -> None:
        for language_id in language_ids:
            self.register(language_id, provider)

    def get(self, language_id: str) -> Optional[DefinitionProvider]:
        return self._providers.get(language_id)

    @property
    def languages(self) -> list[str]:
        return sorted(self._providers)

    def definitions(self, language_id: str, symbol: str) -> list[ResolvedLocation]:
        provider = self.get(language_id)
        if provider is None:
            return []
        return provider.lookup(symbol)
