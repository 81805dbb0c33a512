"""
Base exception for user-facing errors.

All expected errors that should be displayed to the user
as clean messages (without stack traces) must inherit from VingoUserError.

Programming errors and bugs should NOT inherit from VingoUserError —
they will propagate with full tracebacks.
"""

from __future__ import annotations


class VingoUserError(Exception):
    """
    Base class for all user-facing errors in vingo.

    These errors indicate problems that the user can fix:
    broken templates, missing files, invalid configuration, etc.
    """
    pass


class TemplateFileError(VingoUserError):
    """Файл шаблона не найден, не читается или не декодируется."""

    def __init__(self, path: str, cause: Exception):
        super().__init__(f"Cannot load template '{path}': {cause}")
        self.path = path
        self.cause = cause


class ConfigError(VingoUserError):
    """Ошибка загрузки или валидации конфигурации движка."""
    pass


__all__ = ["VingoUserError", "TemplateFileError", "ConfigError"]
