"""
Парсер шаблонов.

Преобразует последовательность токенов в AST (абстрактное синтаксическое дерево)
с поддержкой подстановок, условий, циклов и switch.

Вложенность обрабатывается рекурсивным спуском: вложенная конструкция
полностью разбирается (вместе со своим закрывающим тегом) до того,
как управление вернётся к внешней.
"""

from __future__ import annotations

import re
from typing import List, Optional

from .nodes import (
    ForNode,
    IfBranch,
    IfNode,
    SwitchCase,
    SwitchNode,
    TemplateAST,
    TemplateNode,
    TextNode,
    VariableNode,
)
from .tokens import Token, TokenType
from ..conditions.model import ChainCondition
from ..conditions.parser import ConditionParseError, contains_comparison, parse_condition
from ..errors import VingoUserError

_FOR_HEADER = re.compile(r'^(.+?)\s+in\s+(.+)$', re.DOTALL)
_IDENTIFIER = re.compile(r'^\w+$')

# Токены, с которых может начинаться узел в теле любой конструкции
_NODE_STARTS = {
    TokenType.TEXT,
    TokenType.VARIABLE,
    TokenType.IF,
    TokenType.FOR,
    TokenType.SWITCH,
}


class ParserError(VingoUserError):
    """Ошибка синтаксического анализа."""

    def __init__(self, message: str, token: Token, index: int):
        super().__init__(f"{message} at line {token.line} (token #{index}: {token.type.name})")
        self.token = token
        self.index = index
        self.line = token.line


class TemplateParser:
    """
    Рекурсивный парсер для шаблонов.

    Обрабатывает последовательность токенов и строит AST, корректно
    обрабатывая вложенные конструкции.
    """

    def __init__(self, tokens: List[Token]):
        self.tokens = tokens
        self.position = 0

    def parse(self) -> TemplateAST:
        """
        Парсит всю последовательность токенов в AST.

        Returns:
            Список корневых узлов AST

        Raises:
            ParserError: При ошибке синтаксического анализа
        """
        ast: List[TemplateNode] = []

        while not self._is_at_end():
            current = self._current_token()
            if current.type not in _NODE_STARTS:
                raise self._error(f"Unexpected token at top level: {current.raw or current.type.name}")
            ast.append(self._parse_node())

        return ast

    def _parse_node(self) -> TemplateNode:
        """Парсит один узел, начиная с текущего токена."""
        token = self._current_token()

        if token.type == TokenType.TEXT:
            self._advance()
            return TextNode(text=token.value)
        if token.type == TokenType.VARIABLE:
            self._advance()
            return VariableNode(path=token.value, default=token.default)
        if token.type == TokenType.IF:
            return self._parse_if()
        if token.type == TokenType.FOR:
            return self._parse_for()
        if token.type == TokenType.SWITCH:
            return self._parse_switch()

        raise self._error(f"Unexpected token: {token.type.name}")

    # ---------------------------- if ---------------------------- #

    def _parse_if(self) -> IfNode:
        """
        Парсит <{if c}>...(<{elseif c}>...)*(<{else}>...)?<{/if}>.

        Узлы добавляются в «текущее тело»: тело последней открытой ветки
        или тело else.
        """
        start_index = self.position
        start = self._advance()

        branches: List[IfBranch] = []
        branch_condition = start.value
        branch_ast = self._parse_condition(start, start_index)
        current_body: List[TemplateNode] = []
        else_body: Optional[List[TemplateNode]] = None

        while not self._is_at_end():
            token = self._current_token()

            if token.type == TokenType.ENDIF:
                self._advance()
                if else_body is None:
                    branches.append(IfBranch(branch_condition, current_body, branch_ast))
                return IfNode(branches=branches, else_body=else_body)

            if token.type == TokenType.ELSEIF:
                if else_body is not None:
                    raise self._error("'elseif' after 'else'")
                branches.append(IfBranch(branch_condition, current_body, branch_ast))
                branch_ast = self._parse_condition(token, self.position)
                branch_condition = token.value
                current_body = []
                self._advance()
                continue

            if token.type == TokenType.ELSE:
                if else_body is not None:
                    raise self._error("Duplicate 'else' in if block")
                branches.append(IfBranch(branch_condition, current_body, branch_ast))
                else_body = []
                current_body = else_body
                self._advance()
                continue

            if token.type not in _NODE_STARTS:
                raise self._error(f"Unexpected token inside if: {token.type.name}")
            current_body.append(self._parse_node())

        raise ParserError("Unclosed if", start, start_index)

    # ---------------------------- for ---------------------------- #

    def _parse_for(self) -> ForNode:
        """
        Парсит <{for item in expr}> или <{for i, item in expr}> ... <{/for}>.
        """
        start_index = self.position
        start = self._advance()

        header = _FOR_HEADER.match(start.value)
        if not header:
            raise ParserError(f"Invalid for tag, expected 'in': {start.raw}", start, start_index)

        item_spec = header.group(1).strip()
        list_expr = header.group(2).strip()

        index_var: Optional[str] = None
        if "," in item_spec:
            index_part, item_part = item_spec.split(",", 1)
            index_var = index_part.strip()
            item_var = item_part.strip()
        else:
            item_var = item_spec

        for name in (index_var, item_var):
            if name is not None and not _IDENTIFIER.match(name):
                raise ParserError(f"Invalid loop variable '{name}': {start.raw}", start, start_index)

        body: List[TemplateNode] = []
        while not self._is_at_end():
            token = self._current_token()

            if token.type == TokenType.ENDFOR:
                self._advance()
                return ForNode(item_var=item_var, list_expr=list_expr, body=body, index_var=index_var)

            if token.type not in _NODE_STARTS:
                raise self._error(f"Unexpected token inside for: {token.type.name}")
            body.append(self._parse_node())

        raise ParserError("Unclosed for", start, start_index)

    # ---------------------------- switch ---------------------------- #

    def _parse_switch(self) -> SwitchNode:
        """
        Парсит <{switch expr}>(<{case c}>...)*(<{default}>...)?<{/switch}>.

        Тело без метки case (в том числе текст между switch и первым case)
        при сбросе становится телом default. Если таких тел несколько,
        побеждает последнее непустое.
        """
        start_index = self.position
        start = self._advance()

        cases: List[SwitchCase] = []
        default_body: Optional[List[TemplateNode]] = None
        label: Optional[Token] = None
        label_ast: Optional[ChainCondition] = None
        current_body: List[TemplateNode] = []

        def flush() -> None:
            nonlocal default_body
            if label is not None:
                cases.append(SwitchCase(label.value, current_body, label_ast))
            elif current_body:
                default_body = current_body

        while not self._is_at_end():
            token = self._current_token()

            if token.type == TokenType.ENDSWITCH:
                self._advance()
                flush()
                return SwitchNode(subject=start.value, cases=cases, default_body=default_body)

            if token.type in (TokenType.CASE, TokenType.DEFAULT):
                flush()
                if token.type == TokenType.CASE:
                    label = token
                    label_ast = self._parse_case_label(token, self.position)
                else:
                    label = None
                    label_ast = None
                current_body = []
                self._advance()
                continue

            if token.type not in _NODE_STARTS:
                raise self._error(f"Unexpected token inside switch: {token.type.name}")
            current_body.append(self._parse_node())

        raise ParserError("Unclosed switch", start, start_index)

    # ---------------------------- conditions ---------------------------- #

    def _parse_condition(self, token: Token, index: int) -> ChainCondition:
        """Разбирает условие if/elseif; синтаксическая ошибка условия — ошибка шаблона."""
        try:
            return parse_condition(token.value)
        except ConditionParseError as e:
            raise ParserError(f"Invalid condition '{token.value}': {e.message}", token, index)

    def _parse_case_label(self, token: Token, index: int) -> Optional[ChainCondition]:
        """
        Разбирает метку case.

        Метка без операторов сравнения — это литерал, её синтаксис
        не проверяется. AST сохраняется только для меток со сравнением.
        """
        if not contains_comparison(token.value):
            return None
        return self._parse_condition(token, index)

    # ---------------------------- helpers ---------------------------- #

    def _current_token(self) -> Token:
        return self.tokens[self.position]

    def _is_at_end(self) -> bool:
        return self.position >= len(self.tokens)

    def _advance(self) -> Token:
        token = self.tokens[self.position]
        self.position += 1
        return token

    def _error(self, message: str) -> ParserError:
        return ParserError(message, self._current_token(), self.position)


def parse_template(tokens: List[Token]) -> TemplateAST:
    """Удобная функция: токены → AST."""
    return TemplateParser(tokens).parse()


__all__ = ["TemplateParser", "ParserError", "parse_template"]
