from __future__ import annotations

import argparse
import dataclasses
import sys
from pathlib import Path
from typing import List, Optional

from .compiler.errors import TemplateCompileError
from .compiler.listing import format_listing, format_parts
from .compiler.pipeline import TemplateCompiler
from .config import CompilerOptions, find_options, load_options
from .diagnostics import format_diagnostic
from .errors import T4UserError
from .jsonic import dumps as jdumps
from .report_schema import build_compile_report, build_error_report
from .version import tool_version


def _build_parser() -> argparse.ArgumentParser:
    p = argparse.ArgumentParser(
        prog="t4c",
        description="T4-style template compiler",
        add_help=True,
    )
    p.add_argument("-v", "--version", action="version", version=f"%(prog)s {tool_version()}")
    sub = p.add_subparsers(dest="cmd", required=True)

    def add_config(sp: argparse.ArgumentParser) -> None:
        sp.add_argument(
            "--config",
            metavar="FILE",
            help="параметры компиляции (YAML); по умолчанию t4c.yaml рядом с шаблоном",
        )

    sp_compile = sub.add_parser("compile", help="JSON-отчёт: инструкции или первая ошибка")
    sp_compile.add_argument("template", help="путь к шаблону")
    add_config(sp_compile)
    sp_compile.add_argument(
        "--debug",
        action="store_true",
        help="выставить сквозной флаг debug в результате",
    )
    sp_compile.add_argument(
        "--pretty",
        action="store_true",
        help="JSON с отступами",
    )

    sp_check = sub.add_parser("check", help="Проверка шаблонов; ошибки в stderr")
    sp_check.add_argument("templates", nargs="+", metavar="TEMPLATE", help="пути к шаблонам")
    add_config(sp_check)

    sp_dump = sub.add_parser("dump", help="Разбор шаблона по частям (не JSON)")
    sp_dump.add_argument("template", help="путь к шаблону")
    add_config(sp_dump)
    sp_dump.add_argument(
        "--listing",
        action="store_true",
        help="вывести инструкции как операторы над приёмником вывода",
    )

    return p


def _options_for(template: Path, config: Optional[str]) -> CompilerOptions:
    if config:
        cfg_path = Path(config)
        if not cfg_path.is_file():
            raise T4UserError(f"Config file not found: {cfg_path}")
        return load_options(cfg_path)
    found = find_options(template.parent)
    return load_options(found) if found else CompilerOptions()


def _read_template(path: Path) -> str:
    if not path.is_file():
        raise T4UserError(f"Template not found: {path}")
    return path.read_text(encoding="utf-8")


def _cmd_compile(ns: argparse.Namespace) -> int:
    path = Path(ns.template)
    options = _options_for(path, ns.config)
    if ns.debug:
        options = dataclasses.replace(options, debug=True)
    source = _read_template(path)

    try:
        compiled = TemplateCompiler(options).compile(source, name=str(path))
    except TemplateCompileError as e:
        report = build_error_report(str(path), e, source, tool_version())
        sys.stdout.write(jdumps(report.model_dump(mode="json", by_alias=True), pretty=ns.pretty))
        sys.stderr.write(format_diagnostic(e, source, str(path)) + "\n")
        return e.exit_code

    report = build_compile_report(compiled, source, tool_version())
    sys.stdout.write(jdumps(report.model_dump(mode="json", by_alias=True), pretty=ns.pretty))
    return 0


def _cmd_check(ns: argparse.Namespace) -> int:
    failed = 0
    for name in ns.templates:
        path = Path(name)
        try:
            source = _read_template(path)
            compiler = TemplateCompiler(_options_for(path, ns.config))
        except T4UserError as e:
            failed += 1
            sys.stderr.write(str(e).rstrip() + "\n")
            continue
        try:
            compiler.compile(source, name=str(path))
        except TemplateCompileError as e:
            failed += 1
            sys.stderr.write(format_diagnostic(e, source, str(path)) + "\n")
            continue
        sys.stdout.write(f"{path}: ok\n")
    return 2 if failed else 0


def _cmd_dump(ns: argparse.Namespace) -> int:
    path = Path(ns.template)
    source = _read_template(path)
    compiler = TemplateCompiler(_options_for(path, ns.config))
    try:
        if ns.listing:
            text = format_listing(compiler.compile(source, name=str(path)), source)
        else:
            text = format_parts(compiler.parse(source), source)
    except TemplateCompileError as e:
        sys.stderr.write(format_diagnostic(e, source, str(path)) + "\n")
        return 2
    sys.stdout.write(text + "\n" if text else "")
    return 0


def main(argv: List[str] | None = None) -> int:
    ns = _build_parser().parse_args(argv)

    try:
        if ns.cmd == "compile":
            return _cmd_compile(ns)
        if ns.cmd == "check":
            return _cmd_check(ns)
        if ns.cmd == "dump":
            return _cmd_dump(ns)

    except T4UserError as e:
        sys.stderr.write(str(e).rstrip() + "\n")
        return e.exit_code

    return 2


if __name__ == "__main__":
    raise SystemExit(main())
