"""Regeneration orchestration: run the generator, reload, swap."""

from __future__ import annotations

import logging
import threading
from pathlib import Path
from typing import Optional

from tagjump.core.errors import AlreadyRunning, GenerationCancelled, GenerationError, ParseError
from tagjump.tools.ctags_tools import GenerationArgs, TagGenerator

from .parser import TagsParser
from .store import IndexSnapshot, IndexStore

logger = logging.getLogger(__name__)

# One in-flight lock per resolved workspace root, shared by every engine in the
# process, so two writers can never race on the same tags file.
_ROOT_LOCKS: dict[Path, threading.Lock] = {}
_ROOT_LOCKS_GUARD = threading.Lock()


def root_lock(root: Path) -> threading.Lock:
    key = Path(root).resolve()
    with _ROOT_LOCKS_GUARD:
        return _ROOT_LOCKS.setdefault(key, threading.Lock())


class RegenerationOrchestrator:
    def __init__(
        self,
        root: Path,
        tags_path: Path,
        store: IndexStore,
        generator: TagGenerator,
    ) -> None:
        self.root = Path(root)
        self.tags_path = Path(tags_path)
        self.store = store
        self.generator = generator
        self._in_flight = root_lock(self.root)

    @property
    def running(self) -> bool:
        return self._in_flight.locked()

    def regenerate(
        self,
        args: GenerationArgs,
        *,
        cancel: Optional[threading.Event] = None,
        timeout_sec: Optional[float] = None,
    ) -> IndexSnapshot:
        """Run the generator and swap in the new index.

        The previous index stays in place on every failure path.

        Raises:
            AlreadyRunning: another regeneration holds this workspace root.
            GenerationCancelled: ``cancel`` was set while the generator ran.
            GenerationError: spawn failure, non-zero exit, timeout, or a
                tags file without usable records.
        """
        if not self._in_flight.acquire(blocking=False):
            raise AlreadyRunning(f"regeneration already running for {self.root}")
        try:
            logger.info("Regenerating tags: root=%s args=%s", self.root, args.describe())
            result = self.generator.generate(
                self.root,
                self.tags_path,
                args,
                cancel=cancel,
                timeout_sec=timeout_sec,
            )
            if result.cancelled:
                raise GenerationCancelled(
                    "tag generation cancelled", returncode=result.returncode, log=result.log
                )
            if result.timed_out:
                raise GenerationError(
                    f"tag generation timed out after {timeout_sec}s",
                    returncode=result.returncode,
                    log=result.log,
                )
            if not result.success:
                logger.warning("Tag generation failed: returncode=%s", result.returncode)
                raise GenerationError(
                    f"tag generation failed (exit code {result.returncode})",
                    returncode=result.returncode,
                    log=result.log,
                )
            try:
                return self._load()
            except ParseError as exc:
                raise GenerationError(
                    f"generator produced no usable index: {exc}",
                    returncode=result.returncode,
                    log=result.log,
                ) from exc
        finally:
            self._in_flight.release()

    def reindex(self) -> IndexSnapshot:
        """Load the existing tags file without running the generator.

        Raises:
            AlreadyRunning: the tags file is being rewritten right now.
            ParseError: the file is missing, unreadable, or has no records.
        """
        if not self._in_flight.acquire(blocking=False):
            raise AlreadyRunning(f"regeneration already running for {self.root}")
        try:
            return self._load()
        finally:
            self._in_flight.release()

    def _load(self) -> IndexSnapshot:
        index = TagsParser().parse_file(self.tags_path)
        return self.store.swap(index, source=self.tags_path)
