"""Core utilities."""

from .config import AppConfig, GeneratorConfig, ProviderConfig, WorkspaceConfig
from .errors import (
    AlreadyRunning,
    ConfigError,
    FileNotFound,
    GenerationCancelled,
    GenerationError,
    OutOfRange,
    ParseError,
    PatternNotFound,
    ResolveError,
    TagJumpError,
)

__all__ = [
    "AppConfig",
    "WorkspaceConfig",
    "GeneratorConfig",
    "ProviderConfig",
    "TagJumpError",
    "ConfigError",
    "GenerationError",
    "GenerationCancelled",
    "AlreadyRunning",
    "ParseError",
    "ResolveError",
    "FileNotFound",
    "PatternNotFound",
    "OutOfRange",
]
