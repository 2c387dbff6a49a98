"""
Загрузчик параметров компилятора из YAML.

Файл t4c.yaml — плоское отображение полей CompilerOptions:

    block_style: brace
    autoescape: false
    cleanws: block
    delimiters:
      open: "{%"
      close: "%}"
"""

from __future__ import annotations

from pathlib import Path
from typing import Optional

from ruamel.yaml import YAML
from ruamel.yaml.error import YAMLError

from .model import CompilerOptions, DEFAULT_OPTIONS
from .typed import ConfigError, build_typed

CONFIG_FILE = "t4c.yaml"

_yaml = YAML(typ="safe")


def _read_yaml_map(path: Path) -> dict:
    """Читает YAML файл и возвращает словарь."""
    try:
        raw = _yaml.load(path.read_text(encoding="utf-8")) or {}
    except YAMLError as e:
        raise ConfigError(f"invalid YAML in {path}: {e}")
    if not isinstance(raw, dict):
        raise ConfigError(f"YAML must be a mapping: {path}")
    return raw


def load_options(path: Path) -> CompilerOptions:
    """
    Загружает параметры компиляции.

    • Если файла нет — возвращаются параметры по умолчанию.
    • Неизвестные ключи и значения неверного типа — ConfigError с путём поля.
    """
    if not path.is_file():
        return DEFAULT_OPTIONS
    raw = _read_yaml_map(path)
    try:
        return build_typed(CompilerOptions, raw)
    except ConfigError as e:
        raise ConfigError(f"{path}: {e}") from e


def find_options(start_dir: Path) -> Optional[Path]:
    """Путь к t4c.yaml в каталоге шаблона, если он есть."""
    candidate = start_dir / CONFIG_FILE
    return candidate if candidate.is_file() else None


__all__ = ["CONFIG_FILE", "load_options", "find_options"]
