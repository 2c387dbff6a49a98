from __future__ import annotations

import dataclasses
import enum
import logging
import os
import typing as t
from dataclasses import fields, is_dataclass
from types import UnionType

from ..errors import T4UserError

# -------------------- Logging setup --------------------

_LOG = logging.getLogger("t4c.config.typed")

def _setup_logging_once() -> None:
    if getattr(_setup_logging_once, "_inited", False):
        return
    _setup_logging_once._inited = True  # type: ignore[attr-defined]
    if not os.environ.get("T4C_CONFIG_DEBUG"):
        return
    _LOG.setLevel(logging.DEBUG)
    if not _LOG.handlers:
        h = logging.StreamHandler()
        h.setFormatter(logging.Formatter("[%(levelname)s] %(message)s"))
        _LOG.addHandler(h)

_setup_logging_once()

# -------------------- Public error --------------------

class ConfigError(T4UserError):
    """Ошибка загрузки конфигурации компилятора с указанием пути поля."""

    def __init__(self, message: str, path: tuple[str, ...] = ()):
        self.path = path
        prefix = f"{'.'.join(path)}: " if path else ""
        super().__init__(prefix + message)


_T = t.TypeVar("_T")


def build_typed(cls: type[_T], data: t.Any) -> _T:
    """
    Построить dataclass-объект по сырым данным из YAML,
    рекурсивно приводя вложенные структуры согласно type hints.
    """
    _LOG.debug("build_typed: %s from %s", getattr(cls, "__name__", cls), type(data).__name__)
    return t.cast(_T, _coerce_dataclass(cls, data, path=()))


def _coerce_dataclass(cls: type, data: t.Any, path: tuple[str, ...]) -> t.Any:
    if not isinstance(data, dict):
        raise ConfigError(f"expected mapping for {cls.__name__}, got {type(data).__name__}", path)
    # строгая проверка лишних ключей
    allowed = {f.name for f in fields(cls)}
    extras = set(data.keys()) - allowed
    if extras:
        raise ConfigError(f"unexpected keys: {sorted(map(str, extras))!r}", path)

    hints = t.get_type_hints(cls)
    kwargs: dict[str, t.Any] = {}
    for f in fields(cls):
        f_path = (*path, f.name)
        if f.name in data:
            kwargs[f.name] = coerce(data[f.name], hints.get(f.name, f.type), f_path)
        elif f.default is dataclasses.MISSING and f.default_factory is dataclasses.MISSING:  # type: ignore[misc]
            raise ConfigError("required field missing", f_path)
        else:
            _LOG.debug("  %s: using dataclass default", ".".join(f_path))
    try:
        return cls(**kwargs)
    except ValueError as e:
        # __post_init__ валидирует значения
        raise ConfigError(str(e), path) from e


def coerce(value: t.Any, hint: t.Any, path: tuple[str, ...]) -> t.Any:
    """Рекурсивная нормализация значения согласно типу-подсказке."""
    origin = t.get_origin(hint)
    args = t.get_args(hint)
    _LOG.debug("coerce %s: hint=%s, value=%r", ".".join(path) or "$", hint, value)

    if hint is t.Any:
        return value

    # Optional[T]
    if origin in (t.Union, UnionType):
        if value is None and type(None) in args:
            return None
        errors: list[str] = []
        for option in args:
            if option is type(None):
                continue
            try:
                return coerce(value, option, path)
            except ConfigError as e:
                errors.append(str(e))
        raise ConfigError(" | ".join(errors) or "union alternatives exhausted", path)

    # bool проверяем раньше int: YAML не должен превращать 1 в True
    if hint is bool:
        if isinstance(value, bool):
            return value
        raise ConfigError(f"expected bool, got {type(value).__name__}", path)

    if hint in (str, int, float):
        if isinstance(value, hint) and not isinstance(value, bool):
            return value
        raise ConfigError(f"expected {hint.__name__}, got {type(value).__name__}", path)

    # Enum: по значению или по имени
    if isinstance(hint, type) and issubclass(hint, enum.Enum):
        if isinstance(value, hint):
            return value
        try:
            return hint(value)
        except ValueError:
            pass
        if isinstance(value, str) and value.upper() in hint.__members__:
            return hint[value.upper()]
        allowed = ", ".join(m.value for m in hint)
        raise ConfigError(f"expected one of [{allowed}], got {value!r}", path)

    if isinstance(hint, type) and is_dataclass(hint):
        return _coerce_dataclass(hint, value, path)

    raise ConfigError(f"unsupported field type {hint!r}", path)


__all__ = ["ConfigError", "build_typed", "coerce"]
