"""
Состояние парсинга одного шаблона.

Создаётся в начале парсинга из параметров компиляции, меняется только
директивами и входом/выходом из блоков и отбрасывается по окончании
парсинга. Между шаблонами не разделяется.
"""

from __future__ import annotations

import enum
from dataclasses import dataclass
from typing import Optional

from ..config.model import CompilerOptions
from ..types import EscapeMode, WhitespaceMode


class EscapeState(enum.Enum):
    """
    Текущий режим экранирования в точке парсинга.

    AUTO — экранировать выражения;
    RAW — экранирование выключено директивой escape;
    DISABLED — экранирование выключено параметрами компиляции (autoescape: false).
    """
    AUTO = "auto"
    RAW = "raw"
    DISABLED = "disabled"


@dataclass
class ParseState:
    cleanws: WhitespaceMode = WhitespaceMode.NONE
    escape: EscapeState = EscapeState.AUTO
    # имя пользовательской функции экранирования (<#@ escape function="..." #>)
    escaper: Optional[str] = None
    depth: int = 0

    @classmethod
    def initial(cls, options: CompilerOptions) -> ParseState:
        return cls(
            cleanws=options.cleanws,
            escape=EscapeState.AUTO if options.autoescape else EscapeState.DISABLED,
        )

    def resolve_escape(self) -> EscapeMode:
        """Снимок режима для очередного выражения."""
        return EscapeMode.AUTO if self.escape is EscapeState.AUTO else EscapeMode.RAW

    def resolve_escaper(self) -> Optional[str]:
        return self.escaper if self.escape is EscapeState.AUTO else None


__all__ = ["EscapeState", "ParseState"]
