"""
Компилятор T4-шаблонов.

Текст с литералами, выражениями <#= expr #> и блоками кода <# code #>
компилируется заранее в последовательность инструкций вывода.
"""

from __future__ import annotations

from .codegen import (
    CodeGenerator, CompiledTemplate, EmitExpression, EmitLiteral, EmitRaw, Instruction, statement_for
)
from .errors import (
    InvalidDirectiveArgsError,
    TemplateCompileError,
    UnbalancedBlockError,
    UnknownDirectiveError,
    UnterminatedDelimiterError,
)
from .listing import format_listing, format_parts
from .nodes import (
    BlockNode, DirectiveNode, ExpressionNode, LiteralNode, TemplateAST, TemplateNode
)
from .parser import TemplateParser, parse_template
from .pipeline import TemplateCompiler, compile_file, compile_template
from .scanner import TemplateScanner, scan_template
from .whitespace import normalize_whitespace

__all__ = [
    # Pipeline
    "TemplateCompiler",
    "compile_template",
    "compile_file",

    # Stages
    "TemplateScanner",
    "scan_template",
    "TemplateParser",
    "parse_template",
    "normalize_whitespace",
    "CodeGenerator",

    # Nodes
    "TemplateNode",
    "TemplateAST",
    "LiteralNode",
    "ExpressionNode",
    "BlockNode",
    "DirectiveNode",

    # Instructions
    "CompiledTemplate",
    "Instruction",
    "EmitLiteral",
    "EmitExpression",
    "EmitRaw",
    "statement_for",

    # Debug views
    "format_parts",
    "format_listing",

    # Errors
    "TemplateCompileError",
    "UnterminatedDelimiterError",
    "UnbalancedBlockError",
    "UnknownDirectiveError",
    "InvalidDirectiveArgsError",
]
