"""
Модель значений контекста рендеринга.

Контекст — это мапа со строковыми ключами, значения которой имеют
динамический тип: строка, число, булево, вложенная мапа, запись
(dataclass или обычный объект), список или None.

Модуль отвечает за:
- разбор литералов (строки в кавычках, числа, true/false)
- поиск по точечному пути (user.address.city, items.0)
- естественное текстовое представление значений
"""

from __future__ import annotations

import json
import math
import re
from collections.abc import Mapping, Sequence
from numbers import Number
from typing import Any, Tuple

_INT_RE = re.compile(r'^[+-]?\d+$')
_FLOAT_RE = re.compile(r'^[+-]?(?:\d+\.?\d*|\.\d+)(?:[eE][+-]?\d+)?$')

# Литерал не распознан
_NO_LITERAL: Tuple[bool, Any] = (False, None)


def is_quoted(text: str) -> bool:
    """Проверяет, обёрнута ли строка в парные кавычки."""
    return len(text) >= 2 and text[0] == text[-1] and text[0] in ('"', "'")


def unquote(text: str) -> str:
    """
    Снимает кавычки со строкового литерала.

    Двойные кавычки поддерживают escape-последовательности JSON (\\n, \\", \\u0041),
    одинарные берутся как есть.
    """
    if text[0] == '"':
        try:
            value = json.loads(text)
            if isinstance(value, str):
                return value
        except ValueError:
            pass
    return text[1:-1]


def parse_number(text: str) -> Tuple[bool, Any]:
    """Разбирает целочисленный или вещественный литерал."""
    if _INT_RE.match(text):
        return True, int(text)
    if _FLOAT_RE.match(text):
        return True, float(text)
    return _NO_LITERAL


def parse_literal(text: str) -> Tuple[bool, Any]:
    """
    Пытается распознать литерал.

    Порядок: строка в кавычках, число, true/false.

    Returns:
        Кортеж (распознан ли литерал, значение)
    """
    text = text.strip()
    if is_quoted(text):
        return True, unquote(text)
    found, number = parse_number(text)
    if found:
        return True, number
    if text == "true":
        return True, True
    if text == "false":
        return True, False
    return _NO_LITERAL


def literal_from_string(text: str) -> Any:
    """Литерал из строки; нераспознанный текст возвращается как голая строка."""
    text = text.strip()
    found, value = parse_literal(text)
    return value if found else text


def _step(current: Any, segment: str) -> Tuple[bool, Any]:
    """Один шаг обхода пути: ключ мапы, индекс списка или поле записи."""
    if isinstance(current, Mapping):
        if segment in current:
            return True, current[segment]
        return _NO_LITERAL

    if is_sequence(current):
        if segment.isascii() and segment.isdigit():
            index = int(segment)
            if index < len(current):
                return True, current[index]
        return _NO_LITERAL

    if current is None or isinstance(current, (str, bytes, int, float, bool)):
        return _NO_LITERAL

    # Запись: только публичные поля, методы не вызываем
    if segment.startswith("_"):
        return _NO_LITERAL
    try:
        value = getattr(current, segment)
    except AttributeError:
        return _NO_LITERAL
    if callable(value):
        return _NO_LITERAL
    return True, value


def lookup_path(data: Mapping[str, Any], path: str) -> Tuple[bool, Any]:
    """
    Ищет значение по точечному пути без разбора литералов.

    Returns:
        Кортеж (найдено ли значение, значение)
    """
    path = path.strip()
    if not path:
        return _NO_LITERAL

    current: Any = data
    for segment in path.split("."):
        if not segment:
            return _NO_LITERAL
        found, current = _step(current, segment)
        if not found:
            return _NO_LITERAL
    return True, current


def lookup(data: Mapping[str, Any], path: str) -> Tuple[bool, Any]:
    """
    Разрешает операнд: сначала как литерал, затем как путь в контексте.

    Литералы имеют приоритет, поэтому `5`, `"x"` и `true` никогда
    не ищутся в контексте.
    """
    found, value = parse_literal(path)
    if found:
        return True, value
    return lookup_path(data, path)


def resolve_operand(data: Mapping[str, Any], text: str) -> Any:
    """Значение операнда; неразрешённый путь становится голой строкой."""
    found, value = lookup(data, text)
    if found:
        return value
    return literal_from_string(text)


def is_number(value: Any) -> bool:
    """Число в строгом смысле: любой numbers.Number, но не bool."""
    return isinstance(value, Number) and not isinstance(value, bool)


def is_sequence(value: Any) -> bool:
    """Упорядоченная последовательность: список, кортеж, range и т.п., но не строка."""
    return isinstance(value, Sequence) and not isinstance(value, (str, bytes, bytearray))


def to_number(value: Any) -> Tuple[bool, float]:
    """
    Приводит значение к числу.

    Числа берутся как есть, строки разбираются как числовые литералы.
    Булевы значения и None числами не считаются.
    """
    if is_number(value):
        try:
            return True, float(value)
        except (TypeError, ValueError):
            return False, 0.0
    if isinstance(value, str):
        found, number = parse_number(value.strip())
        if found:
            return True, float(number)
    return False, 0.0


def to_text(value: Any) -> str:
    """
    Естественное текстовое представление значения для вывода в шаблон.

    None → "", булевы → true/false, целые float без дробной части → без ".0".
    """
    if value is None:
        return ""
    if isinstance(value, bool):
        return "true" if value else "false"
    if isinstance(value, float):
        if math.isfinite(value) and value.is_integer():
            return str(int(value))
        return repr(value)
    if isinstance(value, str):
        return value
    return str(value)


__all__ = [
    "is_quoted",
    "unquote",
    "parse_number",
    "parse_literal",
    "literal_from_string",
    "lookup_path",
    "lookup",
    "resolve_operand",
    "is_number",
    "is_sequence",
    "to_number",
    "to_text",
]
