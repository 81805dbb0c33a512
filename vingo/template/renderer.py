"""
Рендерер AST шаблона.

Обходит дерево узлов и собирает итоговый текст, используя вычислитель
условий и модель значений контекста.

Рендеринг работает по принципу best-effort: неразрешённые пути
и ошибки вычисления условий не прерывают обработку документа.
"""

from __future__ import annotations

import logging
from collections import ChainMap
from collections.abc import Mapping
from typing import Any, Dict, List, Optional, Sequence

from .nodes import (
    ForNode,
    IfNode,
    SwitchNode,
    TemplateNode,
    TextNode,
    VariableNode,
)
from ..conditions.evaluator import ConditionEvaluator, EvaluationError, evaluate_against_value
from ..conditions.model import ChainCondition
from ..conditions.parser import ConditionParseError, parse_condition
from ..config import DEFAULT_CONFIG, EngineConfig
from ..values import is_sequence, lookup, to_text

logger = logging.getLogger(__name__)


class TemplateRenderer:
    """
    Вычисляет AST шаблона в контексте данных.

    Рендерер не хранит состояния между вызовами, поэтому один экземпляр
    можно использовать из нескольких потоков.
    """

    def __init__(self, config: EngineConfig = DEFAULT_CONFIG):
        self.config = config

    def render(self, nodes: Sequence[TemplateNode], context: Optional[Mapping[str, Any]] = None) -> str:
        """
        Рендерит последовательность узлов.

        Args:
            nodes: Корневые узлы AST
            context: Данные для подстановки; не изменяются

        Returns:
            Отрендеренный текст
        """
        return self._render_nodes(nodes, context if context is not None else {})

    def _render_nodes(self, nodes: Sequence[TemplateNode], data: Mapping[str, Any]) -> str:
        return "".join(self._render_node(node, data) for node in nodes)

    def _render_node(self, node: TemplateNode, data: Mapping[str, Any]) -> str:
        """Оценивает один узел AST."""
        if isinstance(node, TextNode):
            return node.text
        if isinstance(node, VariableNode):
            return self._render_variable(node, data)
        if isinstance(node, IfNode):
            return self._render_if(node, data)
        if isinstance(node, ForNode):
            return self._render_for(node, data)
        if isinstance(node, SwitchNode):
            return self._render_switch(node, data)

        logger.warning(f"No renderer for node type: {type(node).__name__}")
        return ""

    def _render_variable(self, node: VariableNode, data: Mapping[str, Any]) -> str:
        found, value = lookup(data, node.path)
        if not found or value is None:
            return node.default if node.default is not None else ""
        return to_text(value)

    def _render_if(self, node: IfNode, data: Mapping[str, Any]) -> str:
        for branch in node.branches:
            if self._check(branch.condition_text, branch.condition_ast, data):
                return self._render_nodes(branch.body, data)
        if node.else_body is not None:
            return self._render_nodes(node.else_body, data)
        return ""

    def _render_for(self, node: ForNode, data: Mapping[str, Any]) -> str:
        """
        Рендерит тело цикла для каждого элемента списка.

        Переменные цикла кладутся в отдельный слой ChainMap поверх
        контекста и видны только внутри тела.
        """
        found, items = lookup(data, node.list_expr)
        if not found or not is_sequence(items):
            if found:
                logger.debug(f"for: '{node.list_expr}' is not a list ({type(items).__name__}), skipping")
            return ""

        parts: List[str] = []
        for index, item in enumerate(items):
            scope: Dict[str, Any] = {node.item_var: item}
            if node.index_var:
                scope[node.index_var] = index
            parts.append(self._render_nodes(node.body, ChainMap(scope, data)))
        return "".join(parts)

    def _render_switch(self, node: SwitchNode, data: Mapping[str, Any]) -> str:
        found, subject = lookup(data, node.subject)
        if not found:
            subject = None

        for case in node.cases:
            try:
                if case.condition_ast is not None:
                    scoped = ChainMap({self.config.switch_var: subject}, data)
                    matched = ConditionEvaluator(scoped).evaluate(case.condition_ast)
                else:
                    matched = evaluate_against_value(
                        case.condition_text, subject, data, self.config.switch_var
                    )
            except (ConditionParseError, EvaluationError) as e:
                logger.warning(f"Error evaluating case '{case.condition_text}': {e}")
                matched = False
            if matched:
                return self._render_nodes(case.body, data)

        if node.default_body is not None:
            return self._render_nodes(node.default_body, data)
        return ""

    def _check(self, text: str, ast: Optional[ChainCondition], data: Mapping[str, Any]) -> bool:
        """Вычисляет условие; ошибка вычисления считается ложью."""
        try:
            condition = ast if ast is not None else parse_condition(text)
            return ConditionEvaluator(data).evaluate(condition)
        except (ConditionParseError, EvaluationError) as e:
            logger.warning(f"Error evaluating condition '{text}': {e}")
            return False


def render_ast(nodes: Sequence[TemplateNode], context: Optional[Mapping[str, Any]] = None,
               config: EngineConfig = DEFAULT_CONFIG) -> str:
    """Удобная функция: AST + контекст → текст."""
    return TemplateRenderer(config).render(nodes, context)


__all__ = ["TemplateRenderer", "render_ast"]
