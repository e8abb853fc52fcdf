# SPDX-License-Identifier: MIT
# Copyright (c) 2025 Blackcat Informatics® Inc.
"""Layered configuration loading (defaults, TOML files, pyproject)."""

from __future__ import annotations

import copy
import tomllib
from collections.abc import Mapping, Sequence
from pathlib import Path
from typing import Any, Final, Protocol

from pydantic import BaseModel, Field, ValidationError

from .config import Config, ConfigError

CONFIG_FILENAME: Final[str] = ".shannotate.toml"
PYPROJECT_FILENAME: Final[str] = "pyproject.toml"
PYPROJECT_TOOL_KEY: Final[str] = "tool"
PYPROJECT_SECTION_KEY: Final[str] = "shannotate"


class ConfigSource(Protocol):
    """Source of a partial configuration mapping."""

    name: str

    def load(self) -> Mapping[str, Any]:
        """Return the configuration fragment provided by the source."""

        raise NotImplementedError


class DefaultConfigSource:
    """Return the built-in defaults as a configuration fragment."""

    name = "defaults"

    def load(self) -> Mapping[str, Any]:
        return Config().to_dict()


class TomlConfigSource:
    """Load configuration data from a standalone TOML document."""

    def __init__(self, path: Path, *, name: str | None = None) -> None:
        self._path = path
        self.name = name or str(path)

    def load(self) -> Mapping[str, Any]:
        if not self._path.is_file():
            return {}
        try:
            with self._path.open("rb") as handle:
                return tomllib.load(handle)
        except tomllib.TOMLDecodeError as exc:
            raise ConfigError(f"Invalid TOML in {self._path}: {exc}") from exc


class PyProjectConfigSource(TomlConfigSource):
    """Read configuration from ``[tool.shannotate]`` within ``pyproject.toml``."""

    def load(self) -> Mapping[str, Any]:
        data = super().load()
        tool_section = data.get(PYPROJECT_TOOL_KEY)
        if not isinstance(tool_section, Mapping):
            return {}
        section = tool_section.get(PYPROJECT_SECTION_KEY)
        if not isinstance(section, Mapping):
            return {}
        return section


def _deep_merge(base: Mapping[str, Any], override: Mapping[str, Any]) -> dict[str, Any]:
    """Return ``base`` updated recursively with ``override``."""

    merged: dict[str, Any] = copy.deepcopy(dict(base))
    for key, value in override.items():
        current = merged.get(key)
        if isinstance(current, Mapping) and isinstance(value, Mapping):
            merged[key] = _deep_merge(current, value)
        else:
            merged[key] = copy.deepcopy(value)
    return merged


def _unknown_keys(fragment: Mapping[str, Any], model: type[BaseModel], prefix: str = "") -> list[str]:
    """Return dotted paths of keys in ``fragment`` that ``model`` does not declare."""

    unknown: list[str] = []
    for key, value in fragment.items():
        field = model.model_fields.get(key)
        path = f"{prefix}{key}"
        if field is None:
            unknown.append(path)
            continue
        annotation = field.annotation
        if isinstance(value, Mapping) and isinstance(annotation, type) and issubclass(annotation, BaseModel):
            unknown.extend(_unknown_keys(value, annotation, prefix=f"{path}."))
    return unknown


class ConfigLoadResult(BaseModel):
    """Resolved configuration together with provenance details."""

    config: Config
    sources: list[str] = Field(default_factory=list)
    warnings: list[str] = Field(default_factory=list)


class ConfigLoader:
    """Apply layered configuration sources with predictable precedence."""

    def __init__(self, *, sources: Sequence[ConfigSource]) -> None:
        if not sources:
            raise ValueError("at least one configuration source is required")
        self._sources = list(sources)

    @classmethod
    def for_root(
        cls,
        project_root: Path,
        *,
        user_config: Path | None = None,
        project_config: Path | None = None,
    ) -> ConfigLoader:
        """Build a loader that respects user, pyproject, and project sources.

        Args:
            project_root: Workspace root used to discover configuration files.
            user_config: Optional path to a user-level override.
            project_config: Optional project-level override path.

        Returns:
            ConfigLoader: Loader configured with default precedence ordering.
        """

        root = project_root.resolve()
        home_config = user_config if user_config is not None else Path.home() / CONFIG_FILENAME
        project_file = project_config if project_config is not None else root / CONFIG_FILENAME
        sources: list[ConfigSource] = [
            DefaultConfigSource(),
            TomlConfigSource(home_config),
            PyProjectConfigSource(root / PYPROJECT_FILENAME),
            TomlConfigSource(project_file),
        ]
        return cls(sources=sources)

    def load(self) -> Config:
        """Return the resolved configuration without provenance metadata."""

        return self.load_with_trace().config

    def load_with_trace(self, *, strict: bool = False) -> ConfigLoadResult:
        """Return the resolved configuration with trace metadata.

        Args:
            strict: When ``True`` unknown keys raise instead of producing warnings.

        Returns:
            ConfigLoadResult: Resolved configuration and provenance details.

        Raises:
            ConfigError: If a source is malformed or the merged values are invalid.
        """

        merged: dict[str, Any] = {}
        applied: list[str] = []
        warnings: list[str] = []
        for source in self._sources:
            fragment = source.load()
            if not fragment:
                continue
            warnings.extend(f"{source.name}: unknown key '{key}'" for key in _unknown_keys(fragment, Config))
            merged = _deep_merge(merged, fragment)
            applied.append(source.name)
        if strict and warnings:
            raise ConfigError("; ".join(warnings))
        try:
            config = Config.model_validate(_strip_unknown(merged, Config))
        except ValidationError as exc:
            raise ConfigError(str(exc)) from exc
        return ConfigLoadResult(config=config, sources=applied, warnings=warnings)


def _strip_unknown(fragment: Mapping[str, Any], model: type[BaseModel]) -> dict[str, Any]:
    """Return ``fragment`` restricted to keys declared on ``model``."""

    cleaned: dict[str, Any] = {}
    for key, value in fragment.items():
        field = model.model_fields.get(key)
        if field is None:
            continue
        annotation = field.annotation
        if isinstance(value, Mapping) and isinstance(annotation, type) and issubclass(annotation, BaseModel):
            cleaned[key] = _strip_unknown(value, annotation)
        else:
            cleaned[key] = value
    return cleaned


def load_config(project_root: Path) -> Config:
    """Load configuration for ``project_root`` using the default tiered sources."""

    return ConfigLoader.for_root(project_root).load()


__all__ = [
    "CONFIG_FILENAME",
    "ConfigLoadResult",
    "ConfigLoader",
    "ConfigSource",
    "DefaultConfigSource",
    "PyProjectConfigSource",
    "TomlConfigSource",
    "load_config",
]
