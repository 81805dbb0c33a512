"""
Лексические типы.

Определяет типы токенов шаблона и сам токен.
"""

from __future__ import annotations

import enum
from dataclasses import dataclass
from typing import Optional


class TokenType(enum.Enum):
    """Типы токенов в шаблоне."""

    # Текстовый контент (в том числе нераспознанные теги)
    TEXT = "TEXT"

    # Подстановка переменной <{ user.name | "default" }>
    VARIABLE = "VARIABLE"

    # Условия
    IF = "IF"
    ELSEIF = "ELSEIF"
    ELSE = "ELSE"
    ENDIF = "ENDIF"

    # Циклы
    FOR = "FOR"
    ENDFOR = "ENDFOR"

    # Выбор
    SWITCH = "SWITCH"
    CASE = "CASE"
    DEFAULT = "DEFAULT"
    ENDSWITCH = "ENDSWITCH"


@dataclass(frozen=True)
class Token:
    """
    Токен с позиционной информацией для диагностики ошибок.

    Attributes:
        type: Тип токена
        value: Текст (TEXT), путь (VARIABLE), выражение или заголовок цикла
        raw: Исходный текст тега без разделителей (пусто для TEXT)
        default: Литерал по умолчанию для VARIABLE, если указан
        position: Смещение в исходном тексте
        line: Номер строки (начиная с 1)
    """
    type: TokenType
    value: str
    raw: str = ""
    default: Optional[str] = None
    position: int = 0
    line: int = 1

    def __repr__(self) -> str:
        return f"Token({self.type.name}, {self.value!r}, line {self.line})"


__all__ = ["TokenType", "Token"]
