"""
Условные выражения для тегов if/elseif/case.

Минимальный язык: сравнения (==, !=, >, <, >=, <=) и связки and/or,
вычисляемые строго слева направо, без приоритетов и скобок.
"""

from __future__ import annotations

from .evaluator import (
    ConditionEvaluator,
    EvaluationError,
    DEFAULT_SWITCH_VAR,
    compare_values,
    is_truthy,
    evaluate_condition_string,
    evaluate_against_value,
)
from .parser import ConditionParser, ConditionParseError, contains_comparison, parse_condition

__all__ = [
    "ConditionEvaluator",
    "EvaluationError",
    "DEFAULT_SWITCH_VAR",
    "compare_values",
    "is_truthy",
    "evaluate_condition_string",
    "evaluate_against_value",
    "ConditionParser",
    "ConditionParseError",
    "parse_condition",
    "contains_comparison",
]
