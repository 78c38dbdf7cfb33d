"""Configuration loading and normalization.

Settings are plain YAML turned into typed pydantic models.  Environment
variables in YAML values are expanded before parsing.  Besides the native
layout, the editor-style ``ctags:`` block (``languages``, ``excludePatterns``,
``tagsFile``) is accepted and mapped onto the native fields.
"""

from __future__ import annotations

import logging
import os
from pathlib import Path
from typing import TYPE_CHECKING, Any, Optional

import yaml
from pydantic import BaseModel, Field, ValidationError, field_validator

from .errors import ConfigError

if TYPE_CHECKING:
    from tagjump.tools.ctags_tools import GenerationArgs

logger = logging.getLogger(__name__)

DEFAULT_TAGS_FILE = ".vscode-ctags"


def _expand_env(text: str) -> str:
    """Expand ${VARS} inside YAML text."""
    return os.path.expandvars(text)


class WorkspaceConfig(BaseModel):
    root: Path = Path(".")
    tags_file: str = DEFAULT_TAGS_FILE

    @field_validator("tags_file")
    @classmethod
    def _tags_file_not_empty(cls, value: str) -> str:
        if not value.strip():
            raise ValueError("tags_file must not be empty")
        return value

    @property
    def tags_path(self) -> Path:
        return self.root / self.tags_file


class GeneratorConfig(BaseModel):
    binary: str = "ctags"
    extra_args: list[str] = Field(default_factory=lambda: ["-R"])
    timeout_sec: Optional[float] = None
    languages: list[str] = Field(default_factory=lambda: ["all"])
    exclude_patterns: list[str] = Field(default_factory=list)

    def generation_args(self) -> "GenerationArgs":
        from tagjump.tools.ctags_tools import GenerationArgs

        return GenerationArgs.build(self.languages, self.exclude_patterns)


class ProviderConfig(BaseModel):
    # Language identifiers served by the single definition capability.
    languages: list[str] = Field(default_factory=lambda: ["c", "cpp"])


class AppConfig(BaseModel):
    workspace: WorkspaceConfig = Field(default_factory=WorkspaceConfig)
    generator: GeneratorConfig = Field(default_factory=GeneratorConfig)
    providers: ProviderConfig = Field(default_factory=ProviderConfig)

    @classmethod
    def from_yaml(cls, path: str | Path) -> "AppConfig":
        raw = load_yaml(path)
        return cls.from_raw(raw)

    @classmethod
    def from_raw(cls, raw: dict[str, Any]) -> "AppConfig":
        normalized = normalize_raw_config(raw)
        try:
            return cls(**normalized)
        except ValidationError as exc:
            raise ConfigError(f"invalid configuration: {exc}") from exc

    @classmethod
    def load(cls, path: str | Path | None, *, root: str | Path | None = None) -> "AppConfig":
        """Load ``path`` if it exists, otherwise fall back to defaults."""
        if path and Path(path).exists():
            cfg = cls.from_yaml(path)
        else:
            if path:
                logger.info("Config %s not found, using defaults", path)
            cfg = cls()
        if root is not None:
            cfg.workspace.root = Path(root)
        return cfg


def load_yaml(path: str | Path) -> dict[str, Any]:
    """Load YAML and expand environment variables."""
    p = Path(path)
    try:
        text = _expand_env(p.read_text(encoding="utf-8"))
        data = yaml.safe_load(text) or {}
    except (OSError, yaml.YAMLError) as exc:
        raise ConfigError(f"cannot read config {p}: {exc}") from exc
    if not isinstance(data, dict):
        raise ConfigError(f"config {p} must be a mapping, got {type(data).__name__}")
    logger.debug("Loaded YAML: path=%s keys=%s", p, list(data.keys()))
    return data


def normalize_raw_config(raw: dict[str, Any]) -> dict[str, Any]:
    """Accept editor-style config shapes and map them to AppConfig fields."""
    workspace_cfg = dict(raw.get("workspace", {}) or {})
    generator_cfg = dict(raw.get("generator", {}) or {})
    providers_cfg = dict(raw.get("providers", {}) or {})

    editor_cfg = raw.get("ctags", {}) or {}
    if editor_cfg:
        logger.debug("Normalizing editor-style keys: %s", list(editor_cfg.keys()))
        if "languages" in editor_cfg:
            generator_cfg.setdefault("languages", editor_cfg["languages"])
        if "excludePatterns" in editor_cfg:
            generator_cfg.setdefault("exclude_patterns", editor_cfg["excludePatterns"])
        if "tagsFile" in editor_cfg:
            workspace_cfg.setdefault("tags_file", editor_cfg["tagsFile"])

    return {
        "workspace": workspace_cfg,
        "generator": generator_cfg,
        "providers": providers_cfg,
    }
