"""
Генератор инструкций.

Обходит нормализованный AST в порядке исходника и выпускает
последовательность инструкций вывода. Это единственный артефакт,
передаваемый внешнему рендереру: тот отображает каждую инструкцию
в оператор над приёмником вывода (write / write_escaped).
"""

from __future__ import annotations

import logging
from dataclasses import dataclass
from typing import List, Optional, Tuple, Union

from .nodes import TemplateAST, LiteralNode, ExpressionNode, BlockNode, DirectiveNode
from ..diagnostics import Span
from ..types import EscapeMode

logger = logging.getLogger(__name__)


@dataclass(frozen=True)
class EmitLiteral:
    """Записать текст в приёмник как есть."""
    text: str
    span: Span


@dataclass(frozen=True)
class EmitExpression:
    """Вычислить выражение и записать его значение (с экранированием или без)."""
    code: str
    escape: EscapeMode
    span: Span
    escaper: Optional[str] = None


@dataclass(frozen=True)
class EmitRaw:
    """Вставить фрагмент кода дословно."""
    code: str
    span: Span


Instruction = Union[EmitLiteral, EmitExpression, EmitRaw]


@dataclass(frozen=True)
class CompiledTemplate:
    """
    Результат компиляции шаблона.

    sink — имя накопительного приёмника вывода, к которому внешний
    рендерер привязывает все записи; debug — сквозной флаг для него же.
    """
    name: str
    instructions: Tuple[Instruction, ...]
    sink: str = "_out"
    debug: bool = False

    def __iter__(self):
        return iter(self.instructions)

    def __len__(self) -> int:
        return len(self.instructions)


class CodeGenerator:
    """
    Генератор последовательности инструкций.

    На корректно построенном AST не завершается с ошибкой.
    """

    def generate(self, ast: TemplateAST) -> List[Instruction]:
        instructions: List[Instruction] = []

        for node in ast:
            if isinstance(node, LiteralNode):
                if node.text:
                    instructions.append(EmitLiteral(node.text, node.span))
            elif isinstance(node, ExpressionNode):
                if node.code:
                    escaper = node.escaper if node.escape is EscapeMode.AUTO else None
                    instructions.append(EmitExpression(node.code, node.escape, node.span, escaper))
            elif isinstance(node, BlockNode):
                if node.code:
                    instructions.append(EmitRaw(node.code, node.span))
            elif isinstance(node, DirectiveNode):
                # уже применена при парсинге
                continue
            else:
                raise TypeError(f"Unsupported node type: {type(node).__name__}")

        logger.debug("Generated %d instructions from %d nodes", len(instructions), len(ast))
        return instructions


def statement_for(instruction: Instruction, sink: str = "_out") -> str:
    """
    Канонический оператор хост-языка для инструкции (предпросмотр того,
    что построит внешний рендерер).
    """
    if isinstance(instruction, EmitLiteral):
        return f"{sink}.write({instruction.text!r})"
    if isinstance(instruction, EmitExpression):
        if instruction.escape is EscapeMode.RAW:
            return f"{sink}.write({instruction.code})"
        if instruction.escaper:
            return f"{sink}.write({instruction.escaper}({instruction.code}))"
        return f"{sink}.write_escaped({instruction.code})"
    return instruction.code


__all__ = [
    "EmitLiteral",
    "EmitExpression",
    "EmitRaw",
    "Instruction",
    "CompiledTemplate",
    "CodeGenerator",
    "statement_for",
]
