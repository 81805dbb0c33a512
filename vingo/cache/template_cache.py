"""
Кэш скомпилированных шаблонов в памяти процесса.

Ключом служит канонический абсолютный путь файла, а признаком свежести
служит время модификации в наносекундах (точное совпадение). Чтение кэша идёт без
блокировок; вставка выполняется под мьютексом, а компиляция вне его,
поэтому один файл может компилироваться одновременно в нескольких потоках:
побеждает последняя запись.

Записи никогда не удаляются.
"""

from __future__ import annotations

import logging
import os
import threading
from dataclasses import dataclass
from pathlib import Path
from typing import Any, Dict, Mapping, Optional, Union

from ..config import DEFAULT_CONFIG, EngineConfig, resolve_config
from ..errors import TemplateFileError
from ..template.compiler import compile_text
from ..template.nodes import TemplateAST
from ..template.renderer import TemplateRenderer

logger = logging.getLogger(__name__)

PathLike = Union[str, "os.PathLike[str]"]


@dataclass(frozen=True)
class Template:
    """
    Скомпилированный шаблон.

    Attributes:
        path: Канонический путь исходного файла
        nodes: Корневые узлы AST
        mtime_ns: Время модификации файла на момент компиляции
    """
    path: Path
    nodes: TemplateAST
    mtime_ns: int


@dataclass(frozen=True)
class CacheSnapshot:
    enabled: bool
    entries: int


class TemplateCache:
    """
    Отображение путь → скомпилированный шаблон.

    Безопасен для конкурентного использования из нескольких потоков.
    Скомпилированные AST неизменяемы и разделяются между рендерингами.
    """

    def __init__(self, config: Optional[EngineConfig] = None):
        self.config = config if config is not None else resolve_config()
        self.enabled = self.config.cache_enabled
        self._entries: Dict[Path, Template] = {}
        self._lock = threading.Lock()
        self._renderer = TemplateRenderer(self.config)

    def get_or_compile(self, path: PathLike) -> Template:
        """
        Возвращает AST шаблона, перекомпилируя файл при изменении mtime.

        Raises:
            TemplateFileError: Файл не найден, не читается или не декодируется
            ParserError: Файл содержит структурную ошибку шаблона
        """
        key = self._key(path)
        mtime_ns = self._stat(key)

        if self.enabled:
            cached = self._entries.get(key)
            if cached is not None and cached.mtime_ns == mtime_ns:
                logger.debug(f"Template cache hit: {key}")
                return cached

        template = self._compile(key, mtime_ns)

        if self.enabled:
            with self._lock:
                self._entries[key] = template
        return template

    def render(self, path: PathLike, context: Optional[Mapping[str, Any]] = None) -> str:
        """Рендерит файл шаблона с данными context."""
        template = self.get_or_compile(path)
        return self._renderer.render(template.nodes, context)

    def snapshot(self) -> CacheSnapshot:
        return CacheSnapshot(enabled=self.enabled, entries=len(self._entries))

    # --------------------------- internals --------------------------- #

    @staticmethod
    def _key(path: PathLike) -> Path:
        try:
            return Path(path).resolve()
        except (OSError, RuntimeError) as e:
            raise TemplateFileError(str(path), e)

    @staticmethod
    def _stat(key: Path) -> int:
        try:
            return key.stat().st_mtime_ns
        except OSError as e:
            raise TemplateFileError(str(key), e)

    def _compile(self, key: Path, mtime_ns: int) -> Template:
        try:
            source = key.read_text(encoding=self.config.encoding)
        except (OSError, UnicodeDecodeError) as e:
            raise TemplateFileError(str(key), e)

        logger.debug(f"Compiling template: {key}")
        nodes = compile_text(source, self.config, name=str(key))
        return Template(path=key, nodes=nodes, mtime_ns=mtime_ns)


_default_cache: Optional[TemplateCache] = None
_default_lock = threading.Lock()


def default_cache() -> TemplateCache:
    """
    Общий для процесса кэш, создаётся при первом обращении.

    Использует настройки по умолчанию с учётом окружения (VINGO_CACHE);
    vingo.yaml из рабочего каталога не читается. Для своих настроек
    создайте TemplateCache(load_config(path)).
    """
    global _default_cache
    if _default_cache is None:
        with _default_lock:
            if _default_cache is None:
                _default_cache = TemplateCache(DEFAULT_CONFIG.with_env())
    return _default_cache


def render(path: PathLike, context: Optional[Mapping[str, Any]] = None) -> str:
    """
    Рендерит файл шаблона через общий кэш процесса.

    Args:
        path: Путь к файлу шаблона
        context: Данные для подстановки

    Returns:
        Отрендеренный текст

    Raises:
        TemplateFileError: Файл не найден или не читается
        ParserError: Шаблон содержит структурную ошибку
    """
    return default_cache().render(path, context)
