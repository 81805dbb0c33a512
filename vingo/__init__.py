"""
vingo — движок текстовых шаблонов с тегами <{ }>.

Основной вход — render(path, context): файл компилируется в AST один раз
и переиспользуется, пока не изменится время модификации файла.
"""

from __future__ import annotations

from .cache import CacheSnapshot, Template, TemplateCache, render
from .config import DEFAULT_CONFIG, EngineConfig, load_config
from .errors import ConfigError, TemplateFileError, VingoUserError
from .template import ParserError, compile_text, render_ast, render_text
from .version import tool_version

__all__ = [
    "render",
    "compile_text",
    "render_text",
    "render_ast",
    "Template",
    "TemplateCache",
    "CacheSnapshot",
    "EngineConfig",
    "DEFAULT_CONFIG",
    "load_config",
    "ParserError",
    "VingoUserError",
    "TemplateFileError",
    "ConfigError",
    "tool_version",
]
