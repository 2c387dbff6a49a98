from __future__ import annotations

from dataclasses import dataclass, field

from ..types import BlockStyle, WhitespaceMode


@dataclass(frozen=True)
class Delimiters:
    """
    Разделители шаблона.

    Выражение: open + expression (по умолчанию <#= ... #>),
    явная директива: open + directive (<#@ ... #>),
    блок кода: open ... close (<# ... #>).
    """
    open: str = "<#"
    close: str = "#>"
    expression: str = "="
    directive: str = "@"

    def __post_init__(self):
        for name in ("open", "close", "expression", "directive"):
            if not getattr(self, name):
                raise ValueError(f"delimiter '{name}' must not be empty")
        if self.open == self.close:
            raise ValueError("open and close delimiters must differ")
        if self.expression == self.directive:
            raise ValueError("expression and directive markers must differ")

    @property
    def expression_open(self) -> str:
        return self.open + self.expression

    @property
    def directive_open(self) -> str:
        return self.open + self.directive


@dataclass(frozen=True)
class CompilerOptions:
    """Параметры компиляции одного шаблона."""
    delimiters: Delimiters = field(default_factory=Delimiters)
    block_style: BlockStyle = BlockStyle.KEYWORD
    # начальные состояния; директивы меняют их по ходу шаблона
    autoescape: bool = True
    cleanws: WhitespaceMode = WhitespaceMode.NONE
    # имя накопительного приёмника вывода в сгенерированном коде
    sink: str = "_out"
    # сквозной флаг для внешнего рендерера: сохранять соответствие span → вывод
    debug: bool = False
    # <#<# в тексте и #>#> в коде означают буквальные разделители
    doubled_delimiters: bool = True
    # распознавать <# escape off #> наравне с <#@ escape off #>
    bare_directives: bool = True

    def __post_init__(self):
        if not self.sink.isidentifier():
            raise ValueError(f"sink must be an identifier, got {self.sink!r}")


DEFAULT_OPTIONS = CompilerOptions()


__all__ = ["Delimiters", "CompilerOptions", "DEFAULT_OPTIONS"]
