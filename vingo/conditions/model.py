"""
Модели данных для системы условий.

Содержит классы для представления условий в тегах if/elseif/case.
"""

from __future__ import annotations

from abc import ABC, abstractmethod
from dataclasses import dataclass, field
from enum import Enum
from typing import List, Tuple, Union


class ConditionType(Enum):
    """Типы условий в системе."""
    COMPARISON = "comparison"
    TRUTH = "truth"
    CHAIN = "chain"


class LogicalOperator(Enum):
    """Логические связки между простыми условиями."""
    AND = "and"
    OR = "or"


# Операторы сравнения в порядке проверки (двухсимвольные раньше односимвольных)
COMPARISON_OPERATORS = ("==", "!=", ">=", "<=", ">", "<")


@dataclass(frozen=True)
class Condition(ABC):
    """Базовый абстрактный класс для всех условий."""

    @abstractmethod
    def get_type(self) -> ConditionType:
        """Возвращает тип условия."""
        pass

    def __str__(self) -> str:
        """Строковое представление условия."""
        return self._to_string()

    @abstractmethod
    def _to_string(self) -> str:
        """Внутренний метод для создания строкового представления."""
        pass


@dataclass(frozen=True)
class ComparisonCondition(Condition):
    """
    Сравнение двух операндов: left op right

    Операнды хранятся в исходном виде и разрешаются при вычислении.
    """
    left: str
    operator: str
    right: str

    def get_type(self) -> ConditionType:
        return ConditionType.COMPARISON

    def _to_string(self) -> str:
        return f"{self.left} {self.operator} {self.right}"


@dataclass(frozen=True)
class TruthCondition(Condition):
    """
    Проверка истинности одного операнда: operand

    Истинно, если значение операнда truthy.
    """
    operand: str

    def get_type(self) -> ConditionType:
        return ConditionType.TRUTH

    def _to_string(self) -> str:
        return self.operand


SimpleCondition = Union[ComparisonCondition, TruthCondition]


@dataclass(frozen=True)
class ChainCondition(Condition):
    """
    Цепочка простых условий: first (and|or) c2 (and|or) c3 ...

    Вычисляется строго слева направо без приоритетов:
    `a or b and c` означает `(a or b) and c`.
    """
    first: SimpleCondition
    rest: Tuple[Tuple[LogicalOperator, SimpleCondition], ...] = field(default_factory=tuple)

    def get_type(self) -> ConditionType:
        return ConditionType.CHAIN

    def links(self) -> List[SimpleCondition]:
        """Все простые условия цепочки по порядку."""
        return [self.first] + [cond for _, cond in self.rest]

    def _to_string(self) -> str:
        parts = [str(self.first)]
        for op, cond in self.rest:
            parts.append(f"{op.value} {cond}")
        return " ".join(parts)


AnyCondition = Union[ComparisonCondition, TruthCondition, ChainCondition]

__all__ = [
    "Condition",
    "ConditionType",
    "LogicalOperator",
    "COMPARISON_OPERATORS",
    "ComparisonCondition",
    "TruthCondition",
    "SimpleCondition",
    "ChainCondition",
    "AnyCondition",
]
