"""
AST-узлы шаблона.

Дерево плоское и упорядочено по исходнику: вложенность выражается
ролями блоков (open/continue/close) и их глубиной, а не вложенными
списками. Все узлы неизменяемы и несут Span исходной конструкции.
"""

from __future__ import annotations

from dataclasses import dataclass, field
from typing import List, Optional, Tuple

from .blocks import BlockRole
from ..diagnostics import Span
from ..types import EscapeMode, WhitespaceMode


@dataclass(frozen=True)
class TemplateNode:
    """Базовый класс для всех узлов AST шаблона."""
    span: Span


@dataclass(frozen=True)
class LiteralNode(TemplateNode):
    """
    Обычный текст шаблона.

    Выводится как есть; span покрывает исходный текст (включая
    удвоенные разделители, поэтому длина text может отличаться).
    """
    text: str


@dataclass(frozen=True)
class ExpressionNode(TemplateNode):
    """
    Выражение <#= code #>.

    Режим экранирования фиксируется в момент парсинга из текущего
    состояния директив и позже не меняется.
    """
    code: str
    escape: EscapeMode = EscapeMode.AUTO
    # пользовательская функция экранирования (только для AUTO)
    escaper: Optional[str] = None


@dataclass(frozen=True)
class BlockNode(TemplateNode):
    """
    Непрозрачный фрагмент кода <# code #>.

    Компилятор не отвечает за синтаксис фрагмента, только за порядок
    и парность открывающих/закрывающих фрагментов.
    """
    code: str
    role: BlockRole = BlockRole.STATEMENT
    # глубина, на которой стоит фрагмент: у открывающего и парного
    # закрывающего она совпадает
    depth: int = 0
    keyword: Optional[str] = None
    cleanws: WhitespaceMode = WhitespaceMode.NONE


@dataclass(frozen=True)
class DirectiveNode(TemplateNode):
    """
    Директива, уже применённая к состоянию парсинга.

    В AST остаётся как инертная метка: влияет на чистку пробелов
    вокруг себя и не порождает инструкций.
    """
    name: str
    args: Tuple[str, ...] = field(default_factory=tuple)
    cleanws: WhitespaceMode = WhitespaceMode.NONE


# Алиас для списка узлов (AST)
TemplateAST = List[TemplateNode]


def is_block_boundary(node: TemplateNode) -> bool:
    """Узлы, вокруг которых работает чистка пробелов."""
    return isinstance(node, (BlockNode, DirectiveNode))


def collect_text_content(ast: TemplateAST) -> str:
    """
    Склеивает литералы и код выражений в порядке исходника
    (для тестирования и отладки).
    """
    parts: List[str] = []
    for node in ast:
        if isinstance(node, LiteralNode):
            parts.append(node.text)
        elif isinstance(node, ExpressionNode):
            parts.append(node.code)
    return "".join(parts)


def format_ast_tree(ast: TemplateAST) -> str:
    """Форматирует AST с отступами по глубине блоков для отладки."""
    lines = []
    depth = 0

    for node in ast:
        if isinstance(node, BlockNode):
            if node.role in (BlockRole.CLOSE, BlockRole.CONTINUE):
                depth = node.depth
            lines.append(f"{'  ' * depth}Block[{node.role.value}]({node.code!r})")
            if node.role in (BlockRole.OPEN, BlockRole.CONTINUE):
                depth = node.depth + 1
            continue

        prefix = "  " * depth
        if isinstance(node, LiteralNode):
            preview = node.text[:50] + "..." if len(node.text) > 50 else node.text
            lines.append(f"{prefix}Literal({preview!r})")
        elif isinstance(node, ExpressionNode):
            lines.append(f"{prefix}Expression({node.code!r}, {node.escape.value})")
        elif isinstance(node, DirectiveNode):
            lines.append(f"{prefix}Directive({' '.join((node.name, *node.args))})")
        else:
            lines.append(f"{prefix}{type(node).__name__}")

    return "\n".join(lines)


__all__ = [
    "TemplateNode",
    "TemplateAST",
    "LiteralNode",
    "ExpressionNode",
    "BlockNode",
    "DirectiveNode",
    "is_block_boundary",
    "collect_text_content",
    "format_ast_tree",
]
