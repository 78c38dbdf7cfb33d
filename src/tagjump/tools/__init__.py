"""Tooling wrappers for the external tag generator."""

from .ctags_tools import CtagsGenerator, GenerationArgs, GenerationResult, TagGenerator

__all__ = [
    "CtagsGenerator",
    "GenerationArgs",
    "GenerationResult",
    "TagGenerator",
]
