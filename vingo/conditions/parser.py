"""
Парсер условных выражений.

Строит цепочку простых условий из последовательности токенов.
Приоритетов операторов и группировки нет: and/or равноправны
и применяются строго слева направо.

Грамматика:
expression → simple (("and" | "or") simple)*
simple     → operand (OPERATOR operand)?
operand    → (STRING | WORD)+
"""

from __future__ import annotations

from functools import lru_cache
from typing import List, Tuple

from .lexer import ConditionLexer, Token
from .model import (
    ChainCondition,
    ComparisonCondition,
    LogicalOperator,
    SimpleCondition,
    TruthCondition,
)


class ConditionParseError(ValueError):
    """Ошибка парсинга условного выражения."""

    def __init__(self, message: str, position: int):
        self.message = message
        self.position = position
        super().__init__(f"Parse error at position {position}: {message}")


class ConditionParser:
    """
    Парсер условных выражений.

    Преобразует строку условия в ChainCondition. Операнды сохраняются
    как исходный текст: разрешение литералов и путей выполняется
    при вычислении, в контексте конкретного рендеринга.
    """

    def __init__(self):
        self.lexer = ConditionLexer()
        self._text = ""
        self._tokens: List[Token] = []
        self._position = 0

    def parse(self, condition_str: str) -> ChainCondition:
        """
        Парсит строку условия в AST.

        Args:
            condition_str: Строка условного выражения

        Returns:
            Корневой узел AST

        Raises:
            ConditionParseError: При синтаксической ошибке
        """
        self._text = condition_str
        self._tokens = self.lexer.tokenize(condition_str)
        self._position = 0

        if self._is_at_end():
            raise ConditionParseError("Empty condition", 0)

        first = self._parse_simple()
        rest: List[Tuple[LogicalOperator, SimpleCondition]] = []

        while not self._is_at_end():
            keyword = self._advance()
            rest.append((LogicalOperator(keyword.value), self._parse_simple()))

        return ChainCondition(first=first, rest=tuple(rest))

    def _parse_simple(self) -> SimpleCondition:
        """Парсит простое условие до ближайшей связки and/or или конца строки."""
        start = self._current_token()
        operand_tokens: List[Token] = []
        operator: Token | None = None
        left: List[Token] = []

        while self._current_token().type not in ('KEYWORD', 'EOF'):
            token = self._advance()
            if token.type == 'OPERATOR':
                if operator is not None:
                    raise ConditionParseError(
                        f"Unexpected second comparison operator '{token.value}'", token.position
                    )
                if not operand_tokens:
                    raise ConditionParseError(
                        f"Missing left operand for '{token.value}'", token.position
                    )
                operator = token
                left = operand_tokens
                operand_tokens = []
                continue
            operand_tokens.append(token)

        if operator is None:
            if not operand_tokens:
                raise ConditionParseError(self._missing_operand_message(start), start.position)
            return TruthCondition(operand=self._span(operand_tokens))

        if not operand_tokens:
            raise ConditionParseError(
                f"Missing right operand for '{operator.value}'", self._current_position()
            )
        return ComparisonCondition(
            left=self._span(left),
            operator=operator.value,
            right=self._span(operand_tokens),
        )

    def _missing_operand_message(self, token: Token) -> str:
        if token.type == 'KEYWORD':
            return f"Expected condition before '{token.value}'"
        previous = self._tokens[self._position - 1] if self._position > 0 else None
        if previous is not None and previous.type == 'KEYWORD':
            return f"Expected condition after '{previous.value}'"
        return "Unexpected end of expression"

    def _span(self, tokens: List[Token]) -> str:
        """Исходный текст операнда от первого до последнего токена."""
        return self._text[tokens[0].position:tokens[-1].end]

    # Вспомогательные методы для работы с токенами

    def _current_token(self) -> Token:
        """Возвращает текущий токен без продвижения позиции."""
        if self._position >= len(self._tokens):
            return Token(type='EOF', value='', position=len(self._text))
        return self._tokens[self._position]

    def _current_position(self) -> int:
        """Возвращает текущую позицию в исходной строке."""
        return self._current_token().position

    def _is_at_end(self) -> bool:
        """Проверяет, достигли ли мы конца токенов."""
        return self._current_token().type == 'EOF'

    def _advance(self) -> Token:
        """Продвигает позицию и возвращает предыдущий токен."""
        token = self._current_token()
        if not self._is_at_end():
            self._position += 1
        return token


@lru_cache(maxsize=1024)
def parse_condition(condition_str: str) -> ChainCondition:
    """
    Разбирает условие с мемоизацией.

    AST условий неизменяемы, поэтому один результат безопасно
    разделяется между рендерингами и потоками.
    """
    return ConditionParser().parse(condition_str)


def contains_comparison(condition_str: str) -> bool:
    """Есть ли в строке оператор сравнения вне кавычек."""
    return any(token.type == 'OPERATOR' for token in ConditionLexer().tokenize(condition_str))


__all__ = ["ConditionParser", "ConditionParseError", "parse_condition", "contains_comparison"]
