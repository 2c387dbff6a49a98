from __future__ import annotations

from importlib import metadata

DIST_NAME = "t4c"
# исходники без установки (например, запуск тестов из чекаута)
_UNKNOWN_VERSION = "0.0.0"


def tool_version() -> str:
    """Версия установленного дистрибутива t4c; модуль ни от чего в пакете не зависит."""
    try:
        return metadata.version(DIST_NAME)
    except metadata.PackageNotFoundError:
        return _UNKNOWN_VERSION


__all__ = ["DIST_NAME", "tool_version"]
