"""
Отладочные представления результата компиляции.

format_parts — разбор шаблона по частям (Text/Expr/Code/Dir) с позициями;
format_listing — инструкции в виде операторов над приёмником вывода.
"""

from __future__ import annotations

from typing import List, Optional

from .codegen import CompiledTemplate, statement_for
from .nodes import TemplateAST, LiteralNode, ExpressionNode, BlockNode, DirectiveNode
from ..diagnostics import SourceMap


def format_parts(ast: TemplateAST, source: str) -> str:
    """Одна строка на узел: позиция, вид и содержимое."""
    smap = SourceMap(source)
    lines: List[str] = []

    for node in ast:
        loc = smap.locate(node.span.start)
        if isinstance(node, LiteralNode):
            lines.append(f"{loc} Text:{node.text!r}")
        elif isinstance(node, ExpressionNode):
            mode = node.escape.value if not node.escaper else f"{node.escape.value}:{node.escaper}"
            lines.append(f"{loc} Expr[{mode}]:{node.code}")
        elif isinstance(node, BlockNode):
            lines.append(f"{loc} Code[{node.role.value}@{node.depth}]:{node.code}")
        elif isinstance(node, DirectiveNode):
            lines.append(f"{loc} Dir:{' '.join((node.name, *node.args))}")

    return "\n".join(lines)


def format_listing(compiled: CompiledTemplate, source: Optional[str] = None) -> str:
    """
    Инструкции как операторы хост-языка.

    Если передан исходник, каждая строка получает комментарий
    с позицией в шаблоне.
    """
    smap = SourceMap(source) if source is not None else None
    lines: List[str] = []

    for instruction in compiled.instructions:
        statement = statement_for(instruction, compiled.sink)
        if smap is None:
            lines.append(statement)
        else:
            lines.append(f"{statement}  # {compiled.name}:{smap.locate(instruction.span.start)}")

    return "\n".join(lines)


__all__ = ["format_parts", "format_listing"]
