"""
Чистка пробелов вокруг блоков (cleanws).

Проход после парсинга: у литерала, соседствующего с блоком кода или
директивой, срезается пробельный отрезок, примыкающий к этому соседу,
если в точке соседа действовал режим BLOCK. Литералы рядом с выражениями
не меняются никогда. Проход идемпотентен.
"""

from __future__ import annotations

import logging
from typing import Optional

from .nodes import (
    TemplateAST, TemplateNode, LiteralNode, ExpressionNode, is_block_boundary
)
from ..diagnostics import Span
from ..types import WhitespaceMode

logger = logging.getLogger(__name__)


def _cleans(node: Optional[TemplateNode]) -> bool:
    return node is not None and is_block_boundary(node) and node.cleanws is WhitespaceMode.BLOCK


def _trim_literal(node: LiteralNode, leading: bool, trailing: bool) -> Optional[LiteralNode]:
    """
    Срезает пробелы с указанных сторон.

    Returns:
        Новый узел, исходный (если менять нечего) или None, если текст исчез
    """
    text = node.text
    start, end = node.span.start, node.span.end

    if leading:
        stripped = text.lstrip()
        start += len(text) - len(stripped)
        text = stripped
    if trailing:
        stripped = text.rstrip()
        end -= len(text) - len(stripped)
        text = stripped

    if text == node.text:
        return node
    if not text:
        return None
    return LiteralNode(span=Span(start, end), text=text)


def normalize_whitespace(ast: TemplateAST) -> TemplateAST:
    """
    Применяет чистку пробелов к AST.

    Args:
        ast: AST после парсинга (не изменяется)

    Returns:
        Новый список узлов; литералы, ставшие пустыми, удаляются
    """
    result: TemplateAST = []
    trimmed = 0

    for index, node in enumerate(ast):
        if not isinstance(node, LiteralNode):
            result.append(node)
            continue

        prev_node = ast[index - 1] if index > 0 else None
        next_node = ast[index + 1] if index + 1 < len(ast) else None

        if isinstance(prev_node, ExpressionNode) or isinstance(next_node, ExpressionNode):
            result.append(node)
            continue

        new_node = _trim_literal(node, leading=_cleans(prev_node), trailing=_cleans(next_node))
        if new_node is not node:
            trimmed += 1
        if new_node is not None:
            result.append(new_node)

    if trimmed:
        logger.debug("cleanws: trimmed %d literal(s)", trimmed)
    return result


__all__ = ["normalize_whitespace"]
