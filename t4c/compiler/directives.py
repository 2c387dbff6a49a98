"""
Директивы компиляции.

Закрытый набор поддерживаемых директив с отдельной функцией валидации
для каждой. Директивы — чисто compile-time сигналы: они меняют
ParseState и никогда не попадают в последовательность инструкций.

    <#@ cleanws block #>              чистить пробелы вокруг блоков
    <# cleanws none #>                перестать
    <# escape off #>                  выводить выражения без экранирования
    <#@ escape function="html" #>     экранировать функцией html
"""

from __future__ import annotations

import enum
import logging
import re
from dataclasses import dataclass
from typing import Callable, Dict, List, Optional, Sequence, Union

from .errors import InvalidDirectiveArgsError, UnknownDirectiveError
from .state import EscapeState, ParseState
from ..diagnostics import Span
from ..types import WhitespaceMode

logger = logging.getLogger(__name__)


class DirectiveKind(enum.Enum):
    CLEANWS = "cleanws"
    ESCAPE = "escape"

    @classmethod
    def lookup(cls, name: str) -> Optional[DirectiveKind]:
        try:
            return cls(name)
        except ValueError:
            return None


@dataclass(frozen=True)
class CleanwsDirective:
    mode: WhitespaceMode


@dataclass(frozen=True)
class EscapeDirective:
    state: EscapeState
    escaper: Optional[str] = None


Directive = Union[CleanwsDirective, EscapeDirective]


_ENABLE_WORDS = {"on", "true", "yes", "enable", "enabled"}
_DISABLE_WORDS = {"off", "false", "no", "disable", "disabled"}


# -------------------- Argument grammar --------------------

# слово | key="quoted \" value" | key=bare
_ARG_PATTERN = re.compile(
    r'(?P<key>[A-Za-z_][\w.-]*)\s*=\s*(?:"(?P<quoted>(?:[^"\\]|\\.)*)"|(?P<bare>[^\s"]*))'
    r'|(?P<word>[^\s"=]+)'
)
_ESCAPED_CHAR = re.compile(r"\\(.)")


def split_directive_args(text: str) -> List[str]:
    """
    Разбивает текст аргументов директивы.

    Пары key="value" нормализуются в "key=value".

    Raises:
        ValueError: Если текст не соответствует грамматике аргументов
    """
    args: List[str] = []
    pos = 0
    length = len(text)
    while pos < length:
        if text[pos].isspace():
            pos += 1
            continue
        match = _ARG_PATTERN.match(text, pos)
        if not match:
            raise ValueError(f"unexpected {text[pos]!r} at argument offset {pos}")
        if match.group("word") is not None:
            args.append(match.group("word"))
        else:
            quoted = match.group("quoted")
            value = _ESCAPED_CHAR.sub(r"\1", quoted) if quoted is not None else match.group("bare")
            args.append(f"{match.group('key')}={value}")
        pos = match.end()
        # аргументы разделяются пробелами, key="a"b недопустимо
        if pos < length and not text[pos].isspace():
            raise ValueError(f"missing separator at argument offset {pos}")
    return args


# -------------------- Validators --------------------

def _validate_cleanws(args: Sequence[str], span: Span) -> CleanwsDirective:
    if not args:
        return CleanwsDirective(WhitespaceMode.BLOCK)
    if len(args) > 1:
        raise InvalidDirectiveArgsError("cleanws", args, span, "expected at most one argument")
    value = args[0].lower()
    if value == WhitespaceMode.BLOCK.value or value in _ENABLE_WORDS:
        return CleanwsDirective(WhitespaceMode.BLOCK)
    if value == WhitespaceMode.NONE.value or value in _DISABLE_WORDS:
        return CleanwsDirective(WhitespaceMode.NONE)
    raise InvalidDirectiveArgsError("cleanws", args, span, f"unsupported mode {args[0]!r}")


def _is_dotted_identifier(name: str) -> bool:
    return all(part.isidentifier() for part in name.split("."))


def _validate_escape(args: Sequence[str], span: Span) -> EscapeDirective:
    if len(args) != 1:
        raise InvalidDirectiveArgsError("escape", args, span, "expected exactly one argument")
    arg = args[0]
    if arg.startswith("function="):
        function = arg[len("function="):]
        if not function:
            return EscapeDirective(EscapeState.RAW)
        if not _is_dotted_identifier(function):
            raise InvalidDirectiveArgsError("escape", args, span, f"invalid function name {function!r}")
        return EscapeDirective(EscapeState.AUTO, escaper=function)
    value = arg.lower()
    if value in ("auto",) or value in _ENABLE_WORDS:
        return EscapeDirective(EscapeState.AUTO)
    if value in ("raw", "none") or value in _DISABLE_WORDS:
        return EscapeDirective(EscapeState.RAW)
    raise InvalidDirectiveArgsError("escape", args, span, f"unsupported value {arg!r}")


_VALIDATORS: Dict[DirectiveKind, Callable[[Sequence[str], Span], Directive]] = {
    DirectiveKind.CLEANWS: _validate_cleanws,
    DirectiveKind.ESCAPE: _validate_escape,
}


def parse_directive(name: str, args: Sequence[str], span: Span) -> Directive:
    """
    Проверяет имя и аргументы директивы и строит её типизированное значение.

    Raises:
        UnknownDirectiveError: Имя вне поддерживаемого набора
        InvalidDirectiveArgsError: Аргументы не подходят директиве
    """
    kind = DirectiveKind.lookup(name)
    if kind is None:
        raise UnknownDirectiveError(name, span)
    return _VALIDATORS[kind](args, span)


class DirectiveProcessor:
    """Применяет директивы к состоянию парсинга."""

    def apply(self, name: str, args: Sequence[str], span: Span, state: ParseState) -> Directive:
        directive = parse_directive(name, args, span)

        if isinstance(directive, CleanwsDirective):
            state.cleanws = directive.mode
        else:
            if directive.state is EscapeState.AUTO:
                state.escape = EscapeState.AUTO
                state.escaper = directive.escaper
            elif state.escape is not EscapeState.DISABLED:
                # выключение поверх выключенного конфигурацией оставляет DISABLED
                state.escape = EscapeState.RAW
                state.escaper = None

        logger.debug("Directive %s %s at %s → cleanws=%s, escape=%s",
                     name, list(args), span, state.cleanws.value, state.escape.value)
        return directive


__all__ = [
    "DirectiveKind",
    "CleanwsDirective",
    "EscapeDirective",
    "Directive",
    "DirectiveProcessor",
    "parse_directive",
    "split_directive_args",
]
