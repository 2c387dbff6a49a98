from __future__ import annotations

from .compiler import (
    CompiledTemplate,
    EmitExpression,
    EmitLiteral,
    EmitRaw,
    TemplateCompileError,
    TemplateCompiler,
    compile_file,
    compile_template,
)
from .config import CompilerOptions, ConfigError, Delimiters, load_options
from .diagnostics import Span, format_diagnostic
from .errors import T4UserError
from .types import BlockStyle, EscapeMode, WhitespaceMode

__all__ = [
    "BlockStyle",
    "CompiledTemplate",
    "CompilerOptions",
    "ConfigError",
    "Delimiters",
    "EmitExpression",
    "EmitLiteral",
    "EmitRaw",
    "EscapeMode",
    "Span",
    "T4UserError",
    "TemplateCompileError",
    "TemplateCompiler",
    "WhitespaceMode",
    "compile_file",
    "compile_template",
    "format_diagnostic",
    "load_options",
]
