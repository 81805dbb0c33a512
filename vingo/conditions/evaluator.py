"""
Вычислитель условных выражений.

Проходит по AST условий и вычисляет их значения в контексте рендеринга:
разрешает операнды (литералы и точечные пути), сравнивает значения
с приведением типов и проверяет истинность.
"""

from __future__ import annotations

from collections import ChainMap
from collections.abc import Mapping, Sized
from numbers import Number
from typing import Any, cast

from .model import (
    ChainCondition,
    ComparisonCondition,
    Condition,
    ConditionType,
    LogicalOperator,
    TruthCondition,
)
from .parser import ConditionParseError, contains_comparison, parse_condition
from ..values import literal_from_string, resolve_operand, to_number, to_text

DEFAULT_SWITCH_VAR = "__switch__"


class EvaluationError(Exception):
    """Ошибка при вычислении условного выражения."""
    pass


def is_truthy(value: Any) -> bool:
    """
    Булева интерпретация значения.

    Правила:
    - None ложно
    - bool — сам по себе
    - строка истинна, если непуста
    - число истинно, если не ноль
    - коллекция (последовательность, мапа, множество) истинна, если непуста
    - всё остальное (например, записи) истинно
    """
    if value is None:
        return False
    if isinstance(value, (bool, str)):
        return bool(value)
    if isinstance(value, Number):
        return value != 0
    if isinstance(value, Sized):
        return len(value) > 0
    return True


def compare_values(left: Any, operator: str, right: Any) -> bool:
    """
    Сравнивает два значения.

    Порядок попыток:
    1. Оба приводятся к числу → числовое сравнение
    2. Оба булевы → определены только == и !=
    3. Иначе сравниваются текстовые представления (лексикографически)

    Raises:
        EvaluationError: Упорядочивающее сравнение булевых значений
            или неизвестный оператор
    """
    left_is_num, left_num = to_number(left)
    right_is_num, right_num = to_number(right)
    if left_is_num and right_is_num:
        return _apply(left_num, operator, right_num)

    if isinstance(left, bool) and isinstance(right, bool):
        if operator == "==":
            return left == right
        if operator == "!=":
            return left != right
        raise EvaluationError(f"Operator '{operator}' is not supported between booleans")

    return _apply(to_text(left), operator, to_text(right))


def _apply(left: Any, operator: str, right: Any) -> bool:
    if operator == "==":
        return left == right
    if operator == "!=":
        return left != right
    if operator == ">":
        return left > right
    if operator == "<":
        return left < right
    if operator == ">=":
        return left >= right
    if operator == "<=":
        return left <= right
    raise EvaluationError(
        f"Unsupported comparison '{operator}' between {type(left).__name__} and {type(right).__name__}"
    )


class ConditionEvaluator:
    """
    Вычислитель условных выражений.

    Принимает AST условия и контекст рендеринга, возвращает булево значение.
    """

    def __init__(self, context: Mapping[str, Any]):
        """
        Инициализирует вычислитель с контекстом.

        Args:
            context: Данные рендеринга, по которым разрешаются пути
        """
        self.context = context

    def evaluate(self, condition: Condition) -> bool:
        """
        Вычисляет значение условия.

        Raises:
            EvaluationError: При ошибке вычисления
        """
        condition_type = condition.get_type()

        if condition_type == ConditionType.CHAIN:
            return self._evaluate_chain(cast(ChainCondition, condition))
        elif condition_type == ConditionType.COMPARISON:
            return self._evaluate_comparison(cast(ComparisonCondition, condition))
        elif condition_type == ConditionType.TRUTH:
            return self._evaluate_truth(cast(TruthCondition, condition))
        else:
            raise EvaluationError(f"Unknown condition type: {condition_type}")

    def _evaluate_chain(self, condition: ChainCondition) -> bool:
        """
        Вычисляет цепочку слева направо.

        Все звенья вычисляются всегда: ошибка в любом из них
        делает ошибочным всё условие.
        """
        result = self.evaluate(condition.first)
        for operator, link in condition.rest:
            link_result = self.evaluate(link)
            if operator is LogicalOperator.AND:
                result = result and link_result
            else:
                result = result or link_result
        return result

    def _evaluate_comparison(self, condition: ComparisonCondition) -> bool:
        """
        Вычисляет сравнение: left op right

        Неразрешённый путь трактуется как голый строковый литерал,
        поэтому `role == admin` сравнивает с текстом "admin".
        """
        left = resolve_operand(self.context, condition.left)
        right = resolve_operand(self.context, condition.right)
        return compare_values(left, condition.operator, right)

    def _evaluate_truth(self, condition: TruthCondition) -> bool:
        """
        Вычисляет истинность операнда.

        Неразрешённый путь, как и в сравнениях, становится голой строкой,
        поэтому непустое имя без значения в контексте истинно.
        """
        return is_truthy(resolve_operand(self.context, condition.operand))

    def evaluate_text(self, condition_text: str) -> bool:
        """
        Вычисляет условие из текстового представления.

        Raises:
            ConditionParseError: При ошибке парсинга условия
            EvaluationError: При ошибке вычисления условия
        """
        return self.evaluate(parse_condition(condition_text))


def evaluate_condition_string(condition_str: str, context: Mapping[str, Any]) -> bool:
    """
    Удобная функция для вычисления условия из строки.

    Raises:
        ConditionParseError: При ошибке парсинга
        EvaluationError: При ошибке вычисления
    """
    return ConditionEvaluator(context).evaluate_text(condition_str)


def evaluate_against_value(
    case_expr: str,
    subject: Any,
    context: Mapping[str, Any],
    switch_var: str = DEFAULT_SWITCH_VAR,
) -> bool:
    """
    Проверяет, совпадает ли метка case с субъектом switch.

    Субъект доступен выражению через переменную switch_var.

    - Метка с оператором сравнения вычисляется как обычное условие
      (`case __switch__ > 10`).
    - Иначе метка берётся как литерал и сравнивается с субъектом через ==,
      затем по текстовому представлению, затем вычисляется как условие
      с привязанным субъектом; ошибки на последнем шаге означают «не совпало».

    Raises:
        ConditionParseError: Метка с оператором не разбирается
        EvaluationError: Ошибка вычисления метки с оператором
    """
    evaluator = ConditionEvaluator(ChainMap({switch_var: subject}, context))

    if contains_comparison(case_expr):
        return evaluator.evaluate(parse_condition(case_expr))

    literal = literal_from_string(case_expr)
    if compare_values(subject, "==", literal):
        return True

    if to_text(subject) == to_text(literal):
        return True

    try:
        return evaluator.evaluate(parse_condition(case_expr))
    except (ConditionParseError, EvaluationError):
        return False


__all__ = [
    "ConditionEvaluator",
    "EvaluationError",
    "DEFAULT_SWITCH_VAR",
    "compare_values",
    "is_truthy",
    "evaluate_condition_string",
    "evaluate_against_value",
]
