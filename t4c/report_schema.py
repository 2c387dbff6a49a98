"""
JSON-отчёты CLI.

Формат стабилен для внешних инструментов (formatVersion); поля в camelCase.
"""

from __future__ import annotations

from typing import List, Literal, Optional

from pydantic import BaseModel, ConfigDict, Field

from .compiler.codegen import CompiledTemplate, EmitExpression, EmitLiteral, EmitRaw, Instruction
from .compiler.errors import TemplateCompileError
from .diagnostics import SourceMap

FORMAT_VERSION = 1


class _Model(BaseModel):
    model_config = ConfigDict(populate_by_name=True, frozen=True)


class SpanModel(_Model):
    start: int = Field(..., ge=0)
    end: int = Field(..., ge=0)
    line: int = Field(..., ge=1, description="Line of span start (1-based)")
    column: int = Field(..., ge=1, description="Column of span start (1-based)")


class InstructionModel(_Model):
    op: Literal["literal", "expression", "raw"]
    span: SpanModel
    text: Optional[str] = None
    code: Optional[str] = None
    escape: Optional[Literal["auto", "raw"]] = None
    escaper: Optional[str] = None


class DiagnosticModel(_Model):
    kind: str
    message: str
    span: SpanModel


class CompileReport(_Model):
    format_version: int = Field(FORMAT_VERSION, alias="formatVersion")
    tool_version: str = Field(..., alias="toolVersion")
    template: str
    ok: bool
    sink: str = "_out"
    debug: bool = False
    instructions: List[InstructionModel] = Field(default_factory=list)
    error: Optional[DiagnosticModel] = None


def _span_model(span, smap: SourceMap) -> SpanModel:
    loc = smap.locate(span.start)
    return SpanModel(start=span.start, end=span.end, line=loc.line, column=loc.column)


def _instruction_model(instruction: Instruction, smap: SourceMap) -> InstructionModel:
    span = _span_model(instruction.span, smap)
    if isinstance(instruction, EmitLiteral):
        return InstructionModel(op="literal", span=span, text=instruction.text)
    if isinstance(instruction, EmitExpression):
        return InstructionModel(
            op="expression",
            span=span,
            code=instruction.code,
            escape=instruction.escape.value,
            escaper=instruction.escaper,
        )
    assert isinstance(instruction, EmitRaw)
    return InstructionModel(op="raw", span=span, code=instruction.code)


def build_compile_report(compiled: CompiledTemplate, source: str, tool_version: str) -> CompileReport:
    smap = SourceMap(source)
    return CompileReport(
        tool_version=tool_version,
        template=compiled.name,
        ok=True,
        sink=compiled.sink,
        debug=compiled.debug,
        instructions=[_instruction_model(i, smap) for i in compiled.instructions],
    )


def build_error_report(name: str, error: TemplateCompileError, source: str,
                       tool_version: str) -> CompileReport:
    smap = SourceMap(source)
    return CompileReport(
        tool_version=tool_version,
        template=name,
        ok=False,
        error=DiagnosticModel(kind=error.kind, message=error.message, span=_span_model(error.span, smap)),
    )


__all__ = [
    "FORMAT_VERSION",
    "SpanModel",
    "InstructionModel",
    "DiagnosticModel",
    "CompileReport",
    "build_compile_report",
    "build_error_report",
]
