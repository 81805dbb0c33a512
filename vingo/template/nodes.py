"""
AST-узлы шаблона.

Неизменяемые классы узлов. Контейнерные узлы (if/for/switch) владеют
своими дочерними узлами единолично: AST — это дерево без общих ссылок.
После компиляции дерево только читается, поэтому один скомпилированный
шаблон безопасно рендерится из нескольких потоков.
"""

from __future__ import annotations

from dataclasses import dataclass, field
from typing import List, Optional

from ..conditions.model import ChainCondition


@dataclass(frozen=True)
class TemplateNode:
    """Базовый класс для всех узлов AST шаблона."""
    pass


@dataclass(frozen=True)
class TextNode(TemplateNode):
    """
    Обычный текстовый контент в шаблоне.

    Выводится в результат как есть, без экранирования.
    """
    text: str


@dataclass(frozen=True)
class VariableNode(TemplateNode):
    """
    Подстановка значения <{ path | "default" }>.

    Если путь не разрешился, выводится default (или пустая строка).
    """
    path: str
    default: Optional[str] = None
    # Зарезервировано под фильтры вида <{ name | upper }>, пока не используется
    filters: List[str] = field(default_factory=list)


@dataclass(frozen=True)
class IfBranch:
    """Ветка if/elseif: условие и тело."""
    condition_text: str
    body: List[TemplateNode]
    # AST условия после парсинга (заполняется парсером условий)
    condition_ast: Optional[ChainCondition] = None


@dataclass(frozen=True)
class IfNode(TemplateNode):
    """
    Условный блок <{if c}>...<{elseif c}>...<{else}>...<{/if}>.

    Рендерится тело первой истинной ветки, иначе else_body (если есть).
    """
    branches: List[IfBranch]
    else_body: Optional[List[TemplateNode]] = None


@dataclass(frozen=True)
class ForNode(TemplateNode):
    """
    Цикл <{for item in items}> или <{for i, item in items}>.
    """
    item_var: str
    list_expr: str
    body: List[TemplateNode]
    index_var: Optional[str] = None


@dataclass(frozen=True)
class SwitchCase:
    """Метка case и её тело."""
    condition_text: str
    body: List[TemplateNode]
    # Заполняется только для меток с оператором сравнения
    condition_ast: Optional[ChainCondition] = None


@dataclass(frozen=True)
class SwitchNode(TemplateNode):
    """
    Выбор <{switch expr}><{case a}>...<{default}>...<{/switch}>.

    Субъект вычисляется один раз, срабатывает первая подходящая метка.
    """
    subject: str
    cases: List[SwitchCase]
    default_body: Optional[List[TemplateNode]] = None


# Алиас для списка узлов (AST)
TemplateAST = List[TemplateNode]


__all__ = [
    "TemplateNode",
    "TextNode",
    "VariableNode",
    "IfBranch",
    "IfNode",
    "ForNode",
    "SwitchCase",
    "SwitchNode",
    "TemplateAST",
]
