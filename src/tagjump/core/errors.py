"""Custom exception hierarchy."""

from __future__ import annotations

from typing import Sequence


class TagJumpError(Exception):
    """Base error."""


class ConfigError(TagJumpError):
    """Invalid configuration."""


class GenerationError(TagJumpError):
    """The tag generator could not be spawned or exited non-zero."""

    def __init__(self, message: str, *, returncode: int | None = None, log: str = "") -> None:
        super().__init__(message)
        self.returncode = returncode
        self.log = log


class GenerationCancelled(GenerationError):
    """Regeneration was cancelled by the caller; the generator was killed."""


class AlreadyRunning(TagJumpError):
    """A regeneration is already in flight for this workspace root."""


class ParseError(TagJumpError):
    """Tags file missing, unreadable, or without a single usable record."""

    def __init__(self, message: str, warnings: Sequence[object] = ()) -> None:
        super().__init__(message)
        self.warnings = list(warnings)


class ResolveError(TagJumpError):
    """A single tag address could not be turned into a line number."""


class FileNotFound(ResolveError):
    pass


class PatternNotFound(ResolveError):
    pass


class OutOfRange(ResolveError):
    pass
