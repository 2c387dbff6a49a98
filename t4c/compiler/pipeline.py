"""
Публичный API компилятора шаблонов.

Связывает этапы в один проход:

    Scanner → Parser (+ Directive Processor) → Whitespace Normalizer → Code Generator

Каждый вызов создаёт свежие экземпляры этапов; разделяемого между
шаблонами состояния и кэшей нет.
"""

from __future__ import annotations

import logging
from pathlib import Path
from typing import Optional

from .codegen import CodeGenerator, CompiledTemplate
from .nodes import TemplateAST
from .parser import TemplateParser
from .scanner import TemplateScanner
from .whitespace import normalize_whitespace
from ..config.model import CompilerOptions, DEFAULT_OPTIONS

logger = logging.getLogger(__name__)


class TemplateCompiler:
    """
    Компилятор шаблонов с фиксированными параметрами.

    Экземпляр можно переиспользовать: вызовы compile() независимы.
    """

    def __init__(self, options: Optional[CompilerOptions] = None):
        self.options = options or DEFAULT_OPTIONS

    def parse(self, text: str) -> TemplateAST:
        """
        Строит нормализованный AST без генерации инструкций
        (для отладочных представлений).
        """
        scanner = TemplateScanner(text, self.options)
        ast = TemplateParser(scanner.iter_tokens(), self.options).parse()
        return normalize_whitespace(ast)

    def compile(self, text: str, name: str = "<template>") -> CompiledTemplate:
        """
        Компилирует текст шаблона в последовательность инструкций.

        Args:
            text: Исходный текст шаблона
            name: Имя шаблона для диагностики

        Returns:
            Скомпилированный шаблон

        Raises:
            TemplateCompileError: Первая (самая левая) ошибка шаблона
        """
        ast = self.parse(text)
        instructions = CodeGenerator().generate(ast)
        logger.debug("Compiled %s: %d instructions", name, len(instructions))
        return CompiledTemplate(
            name=name,
            instructions=tuple(instructions),
            sink=self.options.sink,
            debug=self.options.debug,
        )


def compile_template(text: str, options: Optional[CompilerOptions] = None,
                     name: str = "<template>") -> CompiledTemplate:
    """Удобная функция: компиляция одного шаблона из строки."""
    return TemplateCompiler(options).compile(text, name)


def compile_file(path: Path, options: Optional[CompilerOptions] = None) -> CompiledTemplate:
    """Читает шаблон из файла (UTF-8) и компилирует его; имя шаблона — путь."""
    path = Path(path)
    text = path.read_text(encoding="utf-8")
    return TemplateCompiler(options).compile(text, name=str(path))


__all__ = ["TemplateCompiler", "compile_template", "compile_file"]
