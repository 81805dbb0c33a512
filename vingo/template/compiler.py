"""
Компиляция шаблона: текст → токены → AST.
"""

from __future__ import annotations

import logging
from typing import Any, Mapping, Optional

from .lexer import TemplateLexer
from .nodes import TemplateAST
from .parser import TemplateParser
from .renderer import TemplateRenderer
from ..config import DEFAULT_CONFIG, EngineConfig

logger = logging.getLogger(__name__)


def compile_text(source: str, config: EngineConfig = DEFAULT_CONFIG, name: str = "<string>") -> TemplateAST:
    """
    Компилирует текст шаблона в AST.

    Args:
        source: Исходный текст шаблона
        config: Настройки разделителей
        name: Имя шаблона для диагностики

    Raises:
        ParserError: При структурной ошибке шаблона
    """
    tokens = TemplateLexer(config).tokenize(source)
    ast = TemplateParser(tokens).parse()
    logger.debug(f"Compiled template '{name}': {len(tokens)} tokens -> {len(ast)} nodes")
    return ast


def render_text(source: str, context: Optional[Mapping[str, Any]] = None,
                config: EngineConfig = DEFAULT_CONFIG) -> str:
    """Компилирует и сразу рендерит шаблон из текста, без кэширования."""
    return TemplateRenderer(config).render(compile_text(source, config), context)


__all__ = ["compile_text", "render_text"]
