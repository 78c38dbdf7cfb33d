"""Workspace-scoped tags engine: the entry point for editor integrations."""

from __future__ import annotations

import logging
import threading
from pathlib import Path
from typing import Any, Optional

from tagjump.core.config import AppConfig, WorkspaceConfig
from tagjump.core.errors import ParseError, ResolveError
from tagjump.tools.ctags_tools import CtagsGenerator, GenerationArgs, TagGenerator

from .orchestrator import RegenerationOrchestrator
from .providers import ProviderRegistry
from .resolver import AddressResolver
from .store import IndexSnapshot, IndexStore
from .types import ResolvedLocation

logger = logging.getLogger(__name__)


class TagsEngine:
    """Owns the index for one workspace root.

    Usage:
        engine = TagsEngine(AppConfig.load("tagjump.yaml", root="/src/project"))
        engine.activate()
        for loc in engine.lookup("main"):
            print(loc.path, loc.lineno)
    """

    def __init__(self, config: AppConfig, *, generator: Optional[TagGenerator] = None) -> None:
        self.config = config
        # Generation runs ctags with the root as cwd, so pin both paths now.
        self.root = Path(config.workspace.root).resolve()
        self.tags_path = self.root / config.workspace.tags_file
        self.store = IndexStore()
        self.generator = generator or CtagsGenerator(
            binary=config.generator.binary,
            extra_args=config.generator.extra_args,
        )
        self.orchestrator = RegenerationOrchestrator(
            self.root, self.tags_path, self.store, self.generator
        )
        self.providers = ProviderRegistry()
        self.providers.register_languages(config.providers.languages, self)

    @classmethod
    def for_root(
        cls,
        root: str | Path,
        *,
        tags_file: Optional[str] = None,
        generator: Optional[TagGenerator] = None,
    ) -> "TagsEngine":
        workspace = WorkspaceConfig(root=Path(root))
        if tags_file:
            workspace.tags_file = tags_file
        return cls(AppConfig(workspace=workspace), generator=generator)

    def reindex(self) -> IndexSnapshot:
        """Load the existing tags file; raises ParseError when unusable."""
        return self.orchestrator.reindex()

    def regenerate(
        self,
        args: Optional[GenerationArgs] = None,
        *,
        cancel: Optional[threading.Event] = None,
        timeout_sec: Optional[float] = None,
    ) -> IndexSnapshot:
        args = args or self.config.generator.generation_args()
        if timeout_sec is None:
            timeout_sec = self.config.generator.timeout_sec
        return self.orchestrator.regenerate(args, cancel=cancel, timeout_sec=timeout_sec)

    def activate(self, args: Optional[GenerationArgs] = None) -> IndexSnapshot:
        """Startup path: reuse the tags file on disk, regenerate if unusable."""
        try:
            snapshot = self.reindex()
            logger.info("Tags index loaded from %s", self.tags_path)
            return snapshot
        except ParseError as exc:
            logger.info("No usable tags index (%s), regenerating", exc)
            return self.regenerate(args)

    def deactivate(self) -> None:
        self.store.clear()

    close = deactivate

    def lookup(self, symbol: str) -> list[ResolvedLocation]:
        snapshot = self.store.get()
        records = snapshot.index.lookup(symbol)
        resolver = AddressResolver(self.root, snapshot.cache)
        locations: list[ResolvedLocation] = []
        for record in records:
            try:
                location = resolver.resolve_record(record)
            except ResolveError as exc:
                logger.debug("Dropping %s in %s: %s", symbol, record.path, exc)
                continue
            logger.info('"%s" matches %s:%d', symbol, location.path, location.lineno)
            locations.append(location)
        if not locations:
            logger.info('"%s" has no matches.', symbol)
        return locations

    def definitions(self, language_id: str, symbol: str) -> list[ResolvedLocation]:
        return self.providers.definitions(language_id, symbol)

    def status(self) -> dict[str, Any]:
        snapshot = self.store.get()
        return {
            "root": str(self.root),
            "tags_path": str(self.tags_path),
            "generation": snapshot.generation,
            "symbols": len(snapshot.index),
            "records": snapshot.index.record_count,
            "loaded_at": snapshot.loaded_at.isoformat() if snapshot.loaded_at else None,
            "regenerating": self.orchestrator.running,
            "languages": self.providers.languages,
        }
