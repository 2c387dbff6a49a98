"""
Лексические типы.

Сканер производит плоский поток токенов, покрывающий весь исходник
без пропусков и перекрытий; парсер потребляет его ровно один раз.
"""

from __future__ import annotations

import enum
from dataclasses import dataclass
from typing import Tuple

from ..diagnostics import Span


class TokenType(enum.Enum):
    """Типы токенов в шаблоне."""

    # Текстовый контент (LiteralText)
    TEXT = "TEXT"

    # Разделители выражений: <#= ... #>
    EXPR_OPEN = "EXPR_OPEN"
    EXPR_CLOSE = "EXPR_CLOSE"

    # Разделители блоков кода: <# ... #>
    BLOCK_OPEN = "BLOCK_OPEN"
    BLOCK_CLOSE = "BLOCK_CLOSE"

    # Непрозрачный фрагмент кода между разделителями
    CODE = "CODE"

    # Директива целиком: <#@ escape off #> или <# cleanws block #>
    DIRECTIVE = "DIRECTIVE"

    EOF = "EOF"


@dataclass(frozen=True)
class Token:
    """
    Токен с позиционной информацией для точной диагностики ошибок.

    Для DIRECTIVE value — имя директивы, args — её аргументы.
    """
    type: TokenType
    value: str
    span: Span
    args: Tuple[str, ...] = ()

    def __repr__(self) -> str:
        if self.type is TokenType.DIRECTIVE:
            return f"Token({self.type.name}, {self.value!r}, args={list(self.args)!r}, {self.span!r})"
        return f"Token({self.type.name}, {self.value!r}, {self.span!r})"


__all__ = ["TokenType", "Token"]
