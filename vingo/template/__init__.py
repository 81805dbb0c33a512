"""
Шаблонизатор: лексер, парсер, AST и рендерер.

Синтаксис тегов (разделители <{ и }>):
- <{ user.name }>, <{ user.name | "N/A" }>
- <{if cond}> ... <{elseif cond}> ... <{else}> ... <{/if}>
- <{for item in items}>, <{for i, item in items}> ... <{/for}>
- <{switch expr}> <{case value}> ... <{default}> ... <{/switch}>
"""

from __future__ import annotations

from .compiler import compile_text, render_text
from .lexer import TemplateLexer, tokenize_template
from .nodes import TemplateAST, TemplateNode
from .parser import ParserError, TemplateParser, parse_template
from .renderer import TemplateRenderer, render_ast
from .tokens import Token, TokenType

__all__ = [
    "compile_text",
    "render_text",
    "TemplateLexer",
    "tokenize_template",
    "TemplateAST",
    "TemplateNode",
    "ParserError",
    "TemplateParser",
    "parse_template",
    "TemplateRenderer",
    "render_ast",
    "Token",
    "TokenType",
]
