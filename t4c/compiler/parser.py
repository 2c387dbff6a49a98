"""
Парсер шаблонов.

Потребляет поток токенов сканера и строит плоский AST, отслеживая
вложенность блоков явным стеком открытых фрагментов. Директивы
передаются процессору директив и меняют состояние парсинга, которое
фиксируется в каждом следующем узле.
"""

from __future__ import annotations

import logging
from typing import Iterable, Iterator, List, Optional

from .blocks import BlockRole, block_syntax_for
from .directives import DirectiveProcessor
from .errors import UnbalancedBlockError
from .nodes import (
    TemplateAST, TemplateNode, LiteralNode, ExpressionNode, BlockNode, DirectiveNode
)
from .state import ParseState
from .tokens import Token, TokenType
from ..config.model import CompilerOptions, DEFAULT_OPTIONS
from ..diagnostics import Span

logger = logging.getLogger(__name__)


class ParserError(Exception):
    """Нарушен контракт потока токенов (ошибка сканера, а не шаблона)."""

    def __init__(self, message: str, token: Token):
        super().__init__(f"{message} at {token.span} (token: {token.type.name})")
        self.token = token


class TemplateParser:
    """
    Парсер шаблонов.

    Экземпляр одноразовый: состояние парсинга и стек блоков
    принадлежат одному шаблону.
    """

    def __init__(self, tokens: Iterable[Token], options: CompilerOptions = DEFAULT_OPTIONS):
        self._tokens: Iterator[Token] = iter(tokens)
        self._current: Optional[Token] = None
        # следующий токен запрашивается только когда он нужен: иначе сканер
        # сообщил бы об ошибке правее той, что ещё не проверена
        self._need_next = True
        self.options = options
        self.state = ParseState.initial(options)
        self.directives = DirectiveProcessor()
        self.block_syntax = block_syntax_for(options.block_style)
        # открытые составные конструкции, от внешней к внутренней
        self.open_blocks: List[BlockNode] = []

    def parse(self) -> TemplateAST:
        """
        Парсит всю последовательность токенов в AST.

        Returns:
            Список узлов в порядке исходника

        Raises:
            UnbalancedBlockError: При нарушении парности блоков
            UnknownDirectiveError, InvalidDirectiveArgsError: При ошибках директив
            TemplateCompileError: Ошибки сканера всплывают по мере чтения потока
        """
        ast: TemplateAST = []

        while not self._is_at_end():
            ast.append(self._parse_node())

        if self.open_blocks:
            innermost = self.open_blocks[-1]
            raise UnbalancedBlockError(innermost.span, f"Unclosed block '{innermost.code}'")

        logger.debug("Parsed %d nodes", len(ast))
        return ast

    def _parse_node(self) -> TemplateNode:
        current = self._peek()

        if current.type is TokenType.TEXT:
            self._advance()
            return LiteralNode(span=current.span, text=current.value)
        if current.type is TokenType.EXPR_OPEN:
            return self._parse_expression()
        if current.type is TokenType.BLOCK_OPEN:
            return self._parse_block()
        if current.type is TokenType.DIRECTIVE:
            return self._parse_directive()

        raise ParserError(f"Unexpected token at top level: {current.type.name}", current)

    def _parse_expression(self) -> ExpressionNode:
        opener = self._consume(TokenType.EXPR_OPEN)
        code = self._consume(TokenType.CODE)
        closer = self._consume(TokenType.EXPR_CLOSE)

        # снимок текущего режима: последующие директивы его не меняют
        return ExpressionNode(
            span=opener.span.cover(closer.span),
            code=code.value.strip(),
            escape=self.state.resolve_escape(),
            escaper=self.state.resolve_escaper(),
        )

    def _parse_block(self) -> BlockNode:
        opener = self._consume(TokenType.BLOCK_OPEN)
        code_token = self._consume(TokenType.CODE)
        closer = self._consume(TokenType.BLOCK_CLOSE)

        span = opener.span.cover(closer.span)
        code = code_token.value.strip()
        shape = self.block_syntax.classify(code)
        role = shape.role

        if role is BlockRole.OPEN:
            node = self._make_block(span, code, role, self.state.depth, shape.keyword)
            self.open_blocks.append(node)
            self.state.depth += 1
            return node

        if role is BlockRole.CONTINUE:
            if not self.open_blocks:
                raise UnbalancedBlockError(span, f"'{code}' outside of any block")
            return self._make_block(span, code, role, self.state.depth - 1, shape.keyword)

        if role is BlockRole.CLOSE:
            if not self.open_blocks:
                raise UnbalancedBlockError(span, f"'{code}' closes nothing")
            innermost = self.open_blocks[-1]
            if shape.keyword is not None and innermost.keyword is not None and shape.keyword != innermost.keyword:
                raise UnbalancedBlockError(
                    innermost.span,
                    f"Block '{innermost.code}' is closed by mismatched '{code}'",
                )
            self.open_blocks.pop()
            self.state.depth -= 1
            return self._make_block(span, code, role, self.state.depth, innermost.keyword)

        return self._make_block(span, code, role, self.state.depth, None)

    def _make_block(self, span: Span, code: str, role: BlockRole, depth: int,
                    keyword: Optional[str]) -> BlockNode:
        return BlockNode(
            span=span,
            code=code,
            role=role,
            depth=depth,
            keyword=keyword,
            cleanws=self.state.cleanws,
        )

    def _parse_directive(self) -> DirectiveNode:
        token = self._consume(TokenType.DIRECTIVE)
        self.directives.apply(token.value, token.args, token.span, self.state)
        # состояние уже включает эффект самой директивы: она влияет
        # на пробелы вокруг себя, в том числе в самом начале шаблона
        return DirectiveNode(
            span=token.span,
            name=token.value,
            args=token.args,
            cleanws=self.state.cleanws,
        )

    # -------------------- Token stream --------------------

    def _fill(self) -> None:
        if self._need_next:
            self._current = next(self._tokens, None)
            self._need_next = False

    def _advance(self) -> None:
        self._fill()
        self._need_next = True

    def _peek(self) -> Token:
        self._fill()
        assert self._current is not None
        return self._current

    def _is_at_end(self) -> bool:
        self._fill()
        return self._current is None or self._current.type is TokenType.EOF

    def _consume(self, expected: TokenType) -> Token:
        if self._is_at_end() or self._peek().type is not expected:
            token = self._current
            if token is None:
                raise RuntimeError(f"Token stream ended while expecting {expected.name}")
            raise ParserError(f"Expected {expected.name}", token)
        token = self._peek()
        self._advance()
        return token


def parse_template(tokens: Iterable[Token], options: CompilerOptions = DEFAULT_OPTIONS) -> TemplateAST:
    """
    Удобная функция для парсинга потока токенов.

    Args:
        tokens: Токены сканера (список или ленивый итератор)
        options: Параметры компиляции

    Returns:
        AST шаблона
    """
    return TemplateParser(tokens, options).parse()


__all__ = ["TemplateParser", "ParserError", "parse_template"]
