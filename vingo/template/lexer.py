"""
Лексический анализатор шаблонов.

Разбивает исходный текст на текстовые токены и теги. Тег — это всё,
что находится между открывающим (<{) и первым следующим закрывающим (}>)
разделителем. Тело тега сопоставляется с фиксированным набором грамматик;
нераспознанный тег возвращается в вывод как обычный текст.
"""

from __future__ import annotations

import re
from typing import List, Optional, Tuple

from .tokens import Token, TokenType
from ..config import DEFAULT_CONFIG, EngineConfig

_FLAGS = re.DOTALL


class _LineCounter:
    """Номер строки по смещению; смещения запрашиваются по возрастанию."""

    def __init__(self, text: str):
        self._text = text
        self._pos = 0
        self._line = 1

    def at(self, position: int) -> int:
        self._line += self._text.count("\n", self._pos, position)
        self._pos = position
        return self._line


class TemplateLexer:
    """
    Лексический анализатор шаблонов.

    Лексер терпим к ошибкам: незакрытый разделитель и неизвестные
    теги не являются ошибками и попадают в вывод дословно.
    """

    # Грамматики тегов в порядке проверки: первая совпавшая побеждает
    _TAG_PATTERNS: List[Tuple[TokenType, "re.Pattern[str]"]] = [
        (TokenType.IF, re.compile(r'^if\s+(.+)$', _FLAGS)),
        (TokenType.ELSEIF, re.compile(r'^elseif\s+(.+)$', _FLAGS)),
        (TokenType.ELSE, re.compile(r'^else$')),
        (TokenType.ENDIF, re.compile(r'^/if$')),
        (TokenType.FOR, re.compile(r'^for\s+(.+)$', _FLAGS)),
        (TokenType.ENDFOR, re.compile(r'^/for$')),
        (TokenType.SWITCH, re.compile(r'^switch\s+(.+)$', _FLAGS)),
        (TokenType.CASE, re.compile(r'^case\s+(.+)$', _FLAGS)),
        (TokenType.DEFAULT, re.compile(r'^default$')),
        (TokenType.ENDSWITCH, re.compile(r'^/switch$')),
    ]

    # Переменная: точечный путь и необязательный литерал по умолчанию
    _VARIABLE_PATTERN = re.compile(r'^(\w+(?:\.\w+)*)(?:\s*\|\s*"(.*?)")?$', _FLAGS)

    def __init__(self, config: EngineConfig = DEFAULT_CONFIG):
        self.open_marker = config.open_marker
        self.close_marker = config.close_marker

    def tokenize(self, text: str) -> List[Token]:
        """
        Токенизирует весь исходный текст и возвращает список токенов.
        """
        tokens: List[Token] = []
        chunks = text.split(self.open_marker)
        lines = _LineCounter(text)

        # Текст до первого разделителя
        position = 0
        if chunks[0]:
            tokens.append(Token(TokenType.TEXT, chunks[0], position=0, line=1))
        position += len(chunks[0])

        for chunk in chunks[1:]:
            line = lines.at(position)
            body_end = chunk.find(self.close_marker)

            if body_end < 0:
                # Незакрытый тег: отдаём как есть вместе с разделителем
                tokens.append(Token(
                    TokenType.TEXT, self.open_marker + chunk, position=position, line=line
                ))
            else:
                tokens.append(self._classify(chunk[:body_end], position, line))
                rest = chunk[body_end + len(self.close_marker):]
                if rest:
                    rest_pos = position + len(self.open_marker) + body_end + len(self.close_marker)
                    tokens.append(Token(
                        TokenType.TEXT, rest,
                        position=rest_pos,
                        line=lines.at(rest_pos),
                    ))

            position += len(self.open_marker) + len(chunk)

        return tokens

    def _classify(self, body: str, position: int, line: int) -> Token:
        """Определяет тип тега по его телу."""
        tag = body.strip()

        for token_type, pattern in self._TAG_PATTERNS:
            match = pattern.match(tag)
            if match:
                value = match.group(1).strip() if pattern.groups else ""
                return Token(token_type, value, raw=tag, position=position, line=line)

        match = self._VARIABLE_PATTERN.match(tag)
        if match:
            default: Optional[str] = match.group(2)
            return Token(
                TokenType.VARIABLE, match.group(1),
                raw=tag, default=default, position=position, line=line,
            )

        # Неизвестный тег остаётся в выводе дословно, с разделителями
        return Token(
            TokenType.TEXT,
            self.open_marker + body + self.close_marker,
            raw=tag, position=position, line=line,
        )


def tokenize_template(text: str, config: EngineConfig = DEFAULT_CONFIG) -> List[Token]:
    """
    Удобная функция для токенизации шаблона.

    Args:
        text: Исходный текст шаблона
        config: Настройки разделителей

    Returns:
        Список токенов
    """
    return TemplateLexer(config).tokenize(text)


__all__ = ["TemplateLexer", "tokenize_template"]
