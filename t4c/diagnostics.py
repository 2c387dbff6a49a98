"""
Позиционная информация для диагностики.

Span-ы создаются сканером, переносятся парсером в узлы AST и генератором
в инструкции, поэтому любую ошибку (в том числе ошибку внешнего компилятора
сгенерированного кода) можно сопоставить с координатами исходного шаблона.
"""

from __future__ import annotations

import bisect
from dataclasses import dataclass
from typing import List, Optional, Protocol


@dataclass(frozen=True)
class Span:
    """
    Полуоткрытый диапазон [start, end) в исходном тексте шаблона.

    Смещения считаются в символах строки Python, а не в байтах.
    """
    start: int
    end: int

    def __post_init__(self):
        if self.start < 0 or self.end < self.start:
            raise ValueError(f"Invalid span: ({self.start}, {self.end})")

    def __len__(self) -> int:
        return self.end - self.start

    def text_of(self, source: str) -> str:
        """Возвращает фрагмент исходника, покрываемый диапазоном."""
        return source[self.start:self.end]

    def cover(self, other: Span) -> Span:
        """Минимальный диапазон, содержащий оба."""
        return Span(min(self.start, other.start), max(self.end, other.end))

    def __repr__(self) -> str:
        return f"Span({self.start}, {self.end})"


@dataclass(frozen=True)
class SourceLocation:
    """Человекочитаемая позиция (строки и колонки начиная с 1)."""
    line: int
    column: int

    def __str__(self) -> str:
        return f"{self.line}:{self.column}"


class SourceMap:
    """
    Отображение смещений в пары строка/колонка.

    Строится один раз для исходника; поиск строки — бинарный
    по таблице начал строк.
    """

    def __init__(self, source: str):
        self.source = source
        self._line_starts: List[int] = [0]
        for index, char in enumerate(source):
            if char == "\n":
                self._line_starts.append(index + 1)

    @property
    def line_count(self) -> int:
        return len(self._line_starts)

    def locate(self, offset: int) -> SourceLocation:
        if offset < 0 or offset > len(self.source):
            raise ValueError(f"Offset {offset} is outside of the source (length {len(self.source)})")
        line_index = bisect.bisect_right(self._line_starts, offset) - 1
        return SourceLocation(line=line_index + 1, column=offset - self._line_starts[line_index] + 1)

    def line_text(self, line: int) -> str:
        """Текст строки без завершающего перевода строки."""
        start = self._line_starts[line - 1]
        end = self._line_starts[line] if line < len(self._line_starts) else len(self.source)
        return self.source[start:end].rstrip("\r\n")


class SpannedError(Protocol):
    """Всё, что умеет сообщить текст ошибки и её диапазон."""
    message: str
    span: Span


def format_diagnostic(error: SpannedError, source: str, name: str = "<template>",
                      source_map: Optional[SourceMap] = None) -> str:
    """
    Форматирует ошибку в стиле компилятора:

        page.tt:3:7: error: unterminated expression delimiter '<#='
            I like <#= self.food
                   ^^^

    Подчёркивание обрезается первой строкой диапазона.
    """
    smap = source_map or SourceMap(source)
    loc = smap.locate(error.span.start)
    header = f"{name}:{loc}: error: {error.message}"

    line_text = smap.line_text(loc.line)
    if not line_text.strip():
        return header

    width = max(1, min(len(error.span), len(line_text) - (loc.column - 1)))
    marker = " " * (loc.column - 1) + "^" * width
    return "\n".join([header, "    " + line_text, "    " + marker])


__all__ = ["Span", "SourceLocation", "SourceMap", "SpannedError", "format_diagnostic"]
