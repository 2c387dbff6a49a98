"""
Сканер шаблонов.

Один проход слева направо: вне разделителей символы копятся в TEXT-токен
до ближайшего открывающего разделителя; <#= начинает выражение,
<#@ — явную директиву, <# — блок кода; всё это длится до первого #>.
Блок, содержимое которого соответствует грамматике директивы
(поддерживаемое имя и допустимые аргументы), помечается как DIRECTIVE;
иначе он остаётся обычным кодом.
"""

from __future__ import annotations

import logging
import re
from typing import Iterator, List, Optional, Tuple

from .directives import DirectiveKind, parse_directive, split_directive_args
from .errors import InvalidDirectiveArgsError, TemplateCompileError, UnterminatedDelimiterError
from .tokens import Token, TokenType
from ..config.model import CompilerOptions, DEFAULT_OPTIONS
from ..diagnostics import Span

logger = logging.getLogger(__name__)

_DIRECTIVE_HEAD = re.compile(r"\s*([A-Za-z_]\w*)(?=\s|$)(.*)\Z", re.DOTALL)
_EXPLICIT_HEAD = re.compile(r"\s*([^\s]*)(.*)\Z", re.DOTALL)


class TemplateScanner:
    """
    Сканер шаблона в плоский поток токенов.

    Экземпляр одноразовый: создаётся на один шаблон.
    """

    def __init__(self, text: str, options: CompilerOptions = DEFAULT_OPTIONS):
        self.text = text
        self.length = len(text)
        self.options = options
        self.delims = options.delimiters
        self.position = 0
        # токены, готовые к выдаче; опустошается после каждого шага
        self._pending: List[Token] = []

        # накапливаемый литерал: части значения и начало в исходнике
        self._literal_parts: List[str] = []
        self._literal_start = 0

    def tokenize(self) -> List[Token]:
        """
        Токенизирует весь исходный текст.

        Returns:
            Список токенов, завершающийся EOF

        Raises:
            TemplateCompileError: См. iter_tokens
        """
        return list(self.iter_tokens())

    def iter_tokens(self) -> Iterator[Token]:
        """
        Ленивая токенизация: каждый токен выдаётся сразу после распознавания,
        поэтому ошибки обнаруживаются строго в порядке исходника.

        Raises:
            UnterminatedDelimiterError: Открывающий разделитель без закрывающего
            InvalidDirectiveArgsError: Неразбираемые аргументы директивы
            UnknownDirectiveError: Явная директива с неизвестным именем
        """
        open_delim = self.delims.open
        doubled_open = open_delim * 2

        while self.position < self.length:
            index = self.text.find(open_delim, self.position)
            if index == -1:
                self._push_literal(self.text[self.position:], self.position)
                self.position = self.length
                break

            if self.options.doubled_delimiters and self.text.startswith(doubled_open, index):
                # <#<# означает буквальный <# внутри текста
                self._push_literal(self.text[self.position:index] + open_delim, self.position)
                self.position = index + len(doubled_open)
                continue

            self._push_literal(self.text[self.position:index], self.position)
            self._flush_literal(index)
            self._scan_delimited(index)
            yield from self._drain()

        self._flush_literal(self.length)
        self._pending.append(Token(TokenType.EOF, "", Span(self.length, self.length)))
        yield from self._drain()

        logger.debug("Scanned %d characters", self.length)

    def _drain(self) -> List[Token]:
        ready, self._pending = self._pending, []
        return ready

    # -------------------- Literal text --------------------

    def _push_literal(self, value: str, start: int) -> None:
        if not self._literal_parts:
            self._literal_start = start
        self._literal_parts.append(value)

    def _flush_literal(self, end: int) -> None:
        if not self._literal_parts:
            return
        value = "".join(self._literal_parts)
        self._literal_parts = []
        if value:
            self._pending.append(Token(TokenType.TEXT, value, Span(self._literal_start, end)))

    # -------------------- Delimited constructs --------------------

    def _scan_delimited(self, index: int) -> None:
        """Разбирает конструкцию, начинающуюся открывающим разделителем в index."""
        delims = self.delims

        if self.text.startswith(delims.expression_open, index):
            opener = delims.expression_open
            open_type, close_type = TokenType.EXPR_OPEN, TokenType.EXPR_CLOSE
        elif self.text.startswith(delims.directive_open, index):
            opener = delims.directive_open
            open_type = close_type = None
        else:
            opener = delims.open
            open_type, close_type = TokenType.BLOCK_OPEN, TokenType.BLOCK_CLOSE

        open_span = Span(index, index + len(opener))
        code, close_index = self._read_code(open_span.end, open_span, opener)
        close_span = Span(close_index, close_index + len(delims.close))
        self.position = close_span.end

        if open_type is None:
            self._push_directive(code, open_span.cover(close_span))
            return

        if open_type is TokenType.BLOCK_OPEN and self.options.bare_directives:
            span = open_span.cover(close_span)
            directive = self._bare_directive(code, span)
            if directive is not None:
                name, args = directive
                self._pending.append(Token(TokenType.DIRECTIVE, name, span, tuple(args)))
                return

        self._pending.append(Token(open_type, opener, open_span))
        self._pending.append(Token(TokenType.CODE, code, Span(open_span.end, close_span.start)))
        self._pending.append(Token(close_type, delims.close, close_span))

    def _read_code(self, start: int, open_span: Span, opener: str) -> Tuple[str, int]:
        """
        Читает непрозрачный код до первого закрывающего разделителя.

        Returns:
            Кортеж (код, позиция закрывающего разделителя)
        """
        close_delim = self.delims.close
        doubled_close = close_delim * 2
        parts: List[str] = []
        pos = start

        while True:
            index = self.text.find(close_delim, pos)
            if index == -1:
                raise UnterminatedDelimiterError(open_span, opener, close_delim)
            if self.options.doubled_delimiters and self.text.startswith(doubled_close, index):
                # #>#> означает буквальный #> внутри кода
                parts.append(self.text[pos:index] + close_delim)
                pos = index + len(doubled_close)
                continue
            parts.append(self.text[pos:index])
            return "".join(parts), index

    # -------------------- Directives --------------------

    def _bare_directive(self, code: str, span: Span) -> Optional[Tuple[str, List[str]]]:
        """Имя и аргументы, если обычный блок целиком является директивой."""
        match = _DIRECTIVE_HEAD.match(code)
        if not match or DirectiveKind.lookup(match.group(1)) is None:
            return None
        name, rest = match.group(1), match.group(2)
        try:
            args = split_directive_args(rest)
            parse_directive(name, args, span)
        except (ValueError, TemplateCompileError):
            # например, <# escape = html.escape #>
            return None
        return name, args

    def _push_directive(self, code: str, span: Span) -> None:
        match = _EXPLICIT_HEAD.match(code)
        # _EXPLICIT_HEAD совпадает с любой строкой
        assert match is not None
        name, rest = match.group(1), match.group(2)
        try:
            args = split_directive_args(rest)
        except ValueError as e:
            raise InvalidDirectiveArgsError(name, [rest.strip()], span, str(e)) from e
        self._pending.append(Token(TokenType.DIRECTIVE, name, span, tuple(args)))


def scan_template(text: str, options: CompilerOptions = DEFAULT_OPTIONS) -> List[Token]:
    """
    Удобная функция для токенизации шаблона.

    Args:
        text: Исходный текст шаблона
        options: Параметры компиляции (разделители и т.п.)

    Returns:
        Список токенов
    """
    return TemplateScanner(text, options).tokenize()


__all__ = ["TemplateScanner", "scan_template"]
