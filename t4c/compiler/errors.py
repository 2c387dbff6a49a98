"""
Ошибки компиляции шаблона.

Все ошибки обнаруживаются синхронно на этапах сканирования, парсинга
и применения директив и фатальны для компиляции шаблона: возвращается
первая найденная ошибка (самая левая), без накопления.
"""

from __future__ import annotations

from typing import Sequence

from ..diagnostics import Span
from ..errors import T4UserError


class TemplateCompileError(T4UserError):
    """Базовая ошибка компиляции с привязкой к исходнику."""

    kind = "TemplateCompileError"

    def __init__(self, message: str, span: Span):
        super().__init__(f"{message} at offset {span.start}")
        self.message = message
        self.span = span


class UnterminatedDelimiterError(TemplateCompileError):
    """Открывающий разделитель без закрывающего до конца входа."""

    kind = "UnterminatedDelimiter"

    def __init__(self, span: Span, delimiter: str, closer: str):
        super().__init__(f"Unterminated delimiter '{delimiter}' (expected '{closer}')", span)
        self.delimiter = delimiter


class UnbalancedBlockError(TemplateCompileError):
    """Нарушена парность открывающих и закрывающих блоков."""

    kind = "UnbalancedBlock"

    def __init__(self, span: Span, detail: str):
        super().__init__(detail, span)


class UnknownDirectiveError(TemplateCompileError):
    kind = "UnknownDirective"

    def __init__(self, name: str, span: Span):
        shown = name or "<empty>"
        super().__init__(f"Unknown directive '{shown}'", span)
        self.name = name


class InvalidDirectiveArgsError(TemplateCompileError):
    kind = "InvalidDirectiveArgs"

    def __init__(self, name: str, args: Sequence[str], span: Span, reason: str):
        super().__init__(f"Invalid arguments for directive '{name}': {reason}", span)
        self.name = name
        self.directive_args = tuple(args)
        self.reason = reason


__all__ = [
    "TemplateCompileError",
    "UnterminatedDelimiterError",
    "UnbalancedBlockError",
    "UnknownDirectiveError",
    "InvalidDirectiveArgsError",
]
