"""
Nesting configuration and its persistent store.

``NestingConfig`` is an immutable snapshot: the enabled flag plus the file
extensions allowed to pull a same-named directory under them. ``SettingsStore``
owns the one mutable copy, writes it to disk as JSON and tells subscribers
whenever a different snapshot is applied.
"""

from __future__ import annotations

import json
import logging
import os
from pathlib import Path
from typing import Callable, FrozenSet, Iterable, List, Optional, Tuple

from platformdirs import user_config_dir
from pydantic import BaseModel, ConfigDict, ValidationError, field_validator

logger = logging.getLogger(__name__)

APP_NAME = "dirnest"
CONFIG_FILENAME = "settings.json"
CONFIG_ENV_VAR = "DIRNEST_CONFIG"

DEFAULT_EXTENSIONS: Tuple[str, ...] = (
    "php",  # Laravel traits/concerns
    "rb",   # Rails concerns
    "vue",  # Vue components
    "js",
    "ts",
    "jsx",  # React components
    "tsx",
    "py",
    "go",
)

Listener = Callable[["NestingConfig"], None]


class SettingsError(Exception):
    """Raised when settings cannot be persisted."""


def normalize_extension(value: str) -> str:
    """``" .PHP "`` -> ``"php"``."""
    return value.strip().lstrip(".").strip().lower()


def normalize_extensions(values: Iterable[str]) -> Tuple[str, ...]:
    seen = []
    for value in values:
        ext = normalize_extension(value)
        if ext and ext not in seen:
            seen.append(ext)
    return tuple(seen)


class NestingConfig(BaseModel):
    model_config = ConfigDict(frozen=True)

    enabled: bool = True
    enabled_extensions: Tuple[str, ...] = DEFAULT_EXTENSIONS

    @field_validator("enabled_extensions", mode="before")
    @classmethod
    def _normalize(cls, value):
        if isinstance(value, str):
            value = [value]
        return normalize_extensions(str(v) for v in value)

    @property
    def extension_set(self) -> FrozenSet[str]:
        return frozenset(self.enabled_extensions)

    def is_eligible(self, extension: Optional[str]) -> bool:
        if not isinstance(extension, str) or not extension:
            return False
        return extension.lower() in self.extension_set

    def with_enabled(self, enabled: bool) -> NestingConfig:
        return self.model_copy(update={"enabled": enabled})

    def with_extension(self, extension: str) -> NestingConfig:
        """Add an extension; blanks and duplicates leave the config as is."""
        ext = normalize_extension(extension)
        if not ext or ext in self.enabled_extensions:
            return self
        return NestingConfig(enabled=self.enabled, enabled_extensions=self.enabled_extensions + (ext,))

    def without_extension(self, extension: str) -> NestingConfig:
        ext = normalize_extension(extension)
        if ext not in self.enabled_extensions:
            return self
        remaining = tuple(e for e in self.enabled_extensions if e != ext)
        return NestingConfig(enabled=self.enabled, enabled_extensions=remaining)


def default_config_path() -> Path:
    override = os.environ.get(CONFIG_ENV_VAR)
    if override:
        return Path(override).expanduser()
    return Path(user_config_dir(APP_NAME, appauthor=False)) / CONFIG_FILENAME


class SettingsStore:
    """
    Owner of the live nesting configuration.

    The file is read lazily on first access. Readers get immutable snapshots;
    the only way to change them is ``apply()``, which persists the new value
    and then calls every subscriber with it.
    """

    def __init__(self, path: Optional[Path] = None):
        self.path = Path(path) if path is not None else default_config_path()
        self._current: Optional[NestingConfig] = None
        self._listeners: List[Listener] = []

    def snapshot(self) -> NestingConfig:
        if self._current is None:
            self._current = self._load()
        return self._current

    def apply(self, config: NestingConfig) -> NestingConfig:
        previous = self.snapshot()
        self._save(config)
        self._current = config
        if config != previous:
            logger.debug("Nesting settings changed: %s", config)
            for listener in list(self._listeners):
                listener(config)
        return config

    def reset(self) -> NestingConfig:
        return self.apply(NestingConfig())

    def subscribe(self, listener: Listener) -> Callable[[], None]:
        """Register a change listener; the returned callable removes it."""
        self._listeners.append(listener)

        def unsubscribe() -> None:
            if listener in self._listeners:
                self._listeners.remove(listener)

        return unsubscribe

    def _load(self) -> NestingConfig:
        if not self.path.is_file():
            return NestingConfig()
        try:
            return NestingConfig.model_validate_json(self.path.read_text(encoding="utf-8"))
        except (OSError, ValidationError) as e:
            logger.warning("Ignoring unreadable settings file %s: %s", self.path, e)
            return NestingConfig()

    def _save(self, config: NestingConfig) -> None:
        payload = config.model_dump(mode="json")
        try:
            self.path.parent.mkdir(parents=True, exist_ok=True)
            self.path.write_text(json.dumps(payload, indent=2) + "\n", encoding="utf-8")
        except OSError as e:
            raise SettingsError(f"Could not write settings to {self.path}: {e}") from e
