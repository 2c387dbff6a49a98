"""
Классификация фрагментов кода блоков.

Код внутри блоков непрозрачен: компилятор не проверяет его синтаксис,
но должен знать, какие фрагменты открывают составную конструкцию,
какие её закрывают, а какие продолжают (else/elif), чтобы проверить
парность и отследить глубину вложенности.
"""

from __future__ import annotations

import enum
import re
from dataclasses import dataclass
from typing import FrozenSet, Optional, Union

from ..types import BlockStyle


class BlockRole(enum.Enum):
    OPEN = "open"          # if x / for x in xs / while x {
    CLOSE = "close"        # endif / end / }
    CONTINUE = "continue"  # else / elif y / } else {
    STATEMENT = "statement"


@dataclass(frozen=True)
class BlockShape:
    """Результат классификации фрагмента."""
    role: BlockRole
    # ключевое слово открытия (if/for...) или цель закрытия (endif → if);
    # None для brace-стиля и обобщённого end
    keyword: Optional[str] = None


class KeywordBlockSyntax:
    """
    Ключевые слова в стиле шаблонизаторов:

        <# if user #> ... <# elif guest #> ... <# else #> ... <# endif #>
        <# for item in items #> ... <# end #>
    """

    OPENERS: FrozenSet[str] = frozenset({"if", "for", "while", "with", "try", "def", "class"})
    CONTINUATIONS: FrozenSet[str] = frozenset({"else", "elif", "except", "finally"})

    _FIRST_WORD = re.compile(r"\s*([A-Za-z_]\w*)")

    def classify(self, code: str) -> BlockShape:
        first = self._first_word(code)
        if first is None:
            return BlockShape(BlockRole.STATEMENT)

        if first == "async":
            second = self._first_word(code.lstrip()[len("async"):])
            if second in ("for", "with", "def"):
                return BlockShape(BlockRole.OPEN, second)
            return BlockShape(BlockRole.STATEMENT)

        if first in self.OPENERS:
            return BlockShape(BlockRole.OPEN, first)
        if first in self.CONTINUATIONS:
            return BlockShape(BlockRole.CONTINUE, first)
        if first == "end":
            return BlockShape(BlockRole.CLOSE)
        if first.startswith("end") and first[3:] in self.OPENERS:
            return BlockShape(BlockRole.CLOSE, first[3:])
        return BlockShape(BlockRole.STATEMENT)

    def _first_word(self, code: str) -> Optional[str]:
        match = self._FIRST_WORD.match(code)
        return match.group(1) if match else None


class BraceBlockSyntax:
    """
    Фигурные скобки в стиле C/Rust:

        <# for item in items { #> ... <# } #>
        <# if a { #> ... <# } else { #> ... <# } #>

    Учитываются только скобка в конце фрагмента (открытие)
    и в его начале (закрытие); один фрагмент — один уровень.
    """

    def classify(self, code: str) -> BlockShape:
        text = code.strip()
        closes = text.startswith("}")
        opens = text.endswith("{")
        if closes and opens and len(text) > 1:
            return BlockShape(BlockRole.CONTINUE)
        if opens:
            return BlockShape(BlockRole.OPEN)
        if closes:
            return BlockShape(BlockRole.CLOSE)
        return BlockShape(BlockRole.STATEMENT)


BlockSyntax = Union[KeywordBlockSyntax, BraceBlockSyntax]


def block_syntax_for(style: BlockStyle) -> BlockSyntax:
    if style is BlockStyle.BRACE:
        return BraceBlockSyntax()
    return KeywordBlockSyntax()


__all__ = [
    "BlockRole",
    "BlockShape",
    "BlockSyntax",
    "KeywordBlockSyntax",
    "BraceBlockSyntax",
    "block_syntax_for",
]
