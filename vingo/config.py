"""
Конфигурация движка шаблонов.

Настройки читаются из YAML-файла vingo.yaml (необязательного) и
переопределяются переменными окружения.
"""

from __future__ import annotations

import os
from dataclasses import dataclass, fields, replace
from pathlib import Path
from typing import Any, Dict, Optional

from ruamel.yaml import YAML
from ruamel.yaml.error import YAMLError

from .errors import ConfigError

CONFIG_FILE = "vingo.yaml"

_yaml = YAML(typ="safe")


@dataclass(frozen=True)
class EngineConfig:
    """
    Настройки лексера, рендерера и кэша шаблонов.

    Attributes:
        open_marker: Открывающий разделитель тега
        close_marker: Закрывающий разделитель тега
        switch_var: Зарезервированное имя переменной с субъектом switch
        encoding: Кодировка файлов шаблонов
        cache_enabled: Использовать ли кэш скомпилированных шаблонов
    """
    open_marker: str = "<{"
    close_marker: str = "}>"
    switch_var: str = "__switch__"
    encoding: str = "utf-8"
    cache_enabled: bool = True

    def __post_init__(self) -> None:
        if not self.open_marker or not self.close_marker:
            raise ConfigError("Tag markers must be non-empty")
        if self.open_marker == self.close_marker:
            raise ConfigError(f"Open and close markers must differ (got '{self.open_marker}')")
        if not self.switch_var:
            raise ConfigError("switch_var must be non-empty")

    @classmethod
    def from_dict(cls, data: Dict[str, Any]) -> "EngineConfig":
        """Создание экземпляра из словаря (из YAML)."""
        known = {f.name: f for f in fields(cls)}
        unknown = sorted(set(data) - set(known))
        if unknown:
            raise ConfigError(f"Unknown config keys: {', '.join(unknown)}")

        values: Dict[str, Any] = {}
        for key, value in data.items():
            expected = bool if key == "cache_enabled" else str
            if not isinstance(value, expected):
                raise ConfigError(
                    f"{key}: expected {expected.__name__}, got {type(value).__name__}"
                )
            values[key] = value
        return cls(**values)

    def with_env(self) -> "EngineConfig":
        """
        Применяет переопределения из окружения.

        VINGO_CACHE=0/false/no/off отключает кэш независимо от файла.
        """
        env = os.environ.get("VINGO_CACHE", None)
        if env is None:
            return self
        enabled = env.strip().lower() not in {"0", "false", "no", "off", ""}
        return replace(self, cache_enabled=enabled)


DEFAULT_CONFIG = EngineConfig()


def load_config(path: Path) -> EngineConfig:
    """
    Загружает конфигурацию из YAML-файла.

    Raises:
        ConfigError: Файл не читается, не является YAML-мапой или содержит
            неизвестные/некорректные ключи
    """
    try:
        raw = _yaml.load(path.read_text(encoding="utf-8")) or {}
    except (OSError, YAMLError) as e:
        raise ConfigError(f"Failed to read config {path}: {e}")
    if not isinstance(raw, dict):
        raise ConfigError(f"YAML must be a mapping: {path}")
    return EngineConfig.from_dict(raw).with_env()


def find_config(start: Path) -> Optional[Path]:
    """Путь к vingo.yaml в каталоге start или None."""
    candidate = start / CONFIG_FILE
    return candidate if candidate.is_file() else None


def resolve_config(start: Optional[Path] = None) -> EngineConfig:
    """Конфигурация из vingo.yaml (если он есть) с учётом окружения."""
    path = find_config(start or Path.cwd())
    if path is None:
        return DEFAULT_CONFIG.with_env()
    return load_config(path)


__all__ = [
    "EngineConfig",
    "DEFAULT_CONFIG",
    "CONFIG_FILE",
    "load_config",
    "find_config",
    "resolve_config",
]
