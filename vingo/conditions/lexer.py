"""
Лексер для разбора условных выражений.

Выполняет токенизацию строки условия, разбивая её на значимые элементы:
- Строковые литералы в кавычках (не разбиваются на части)
- Операторы сравнения (==, !=, >=, <=, >, <)
- Ключевые слова (and, or)
- Слова (пути, числа, голые литералы)
- Пробелы (игнорируются)
"""

from __future__ import annotations

import re
from dataclasses import dataclass
from typing import List

from .model import COMPARISON_OPERATORS


@dataclass(frozen=True)
class Token:
    """
    Токен для парсинга условий.

    Attributes:
        type: Тип токена (STRING, OPERATOR, KEYWORD, WORD, EOF)
        value: Значение токена
        position: Позиция в исходной строке
    """
    type: str
    value: str
    position: int

    @property
    def end(self) -> int:
        """Позиция сразу за токеном."""
        return self.position + len(self.value)

    def __repr__(self):
        return f"Token({self.type}, '{self.value}', pos={self.position})"


class ConditionLexer:
    """
    Лексер для разбиения строки условия на токены.

    В отличие от наивного разбиения по пробелам, учитывает кавычки:
    `name == "salt and pepper"` не содержит логической связки.
    """

    # Спецификация токенов: (regex_pattern, token_type, ignore_flag)
    TOKEN_SPECS = [
        # Пробелы и табуляция (игнорируем)
        (r'\s+', 'WHITESPACE', True),

        # Строки в кавычках
        (r'"(?:\\.|[^"\\])*"', 'STRING', False),
        (r"'[^']*'", 'STRING', False),

        # Операторы сравнения (двухсимвольные первыми)
        ('|'.join(re.escape(op) for op in COMPARISON_OPERATORS), 'OPERATOR', False),

        # Слово: всё, кроме пробелов, кавычек и начала оператора
        (r'(?:[^\s=!<>"\']|[=!](?!=))+', 'WORD', False),

        # Одиночный символ (незакрытая кавычка и т.п.) считается словом
        (r'.', 'WORD', False),
    ]

    KEYWORDS = {'and', 'or'}

    def __init__(self):
        self._compiled_patterns = [
            (re.compile(pattern), token_type, ignore)
            for pattern, token_type, ignore in self.TOKEN_SPECS
        ]

    def tokenize(self, text: str) -> List[Token]:
        """
        Разбивает строку на токены.

        Args:
            text: Строка условия для разбора

        Returns:
            Список токенов, включая EOF в конце
        """
        tokens: List[Token] = []
        position = 0

        while position < len(text):
            for pattern, token_type, ignore in self._compiled_patterns:
                match = pattern.match(text, position)
                if not match:
                    continue

                value = match.group(0)
                if not ignore:
                    final_type = token_type
                    if token_type == 'WORD' and value in self.KEYWORDS:
                        final_type = 'KEYWORD'
                    tokens.append(Token(type=final_type, value=value, position=position))

                position = match.end()
                break

        tokens.append(Token(type='EOF', value='', position=position))
        return tokens
