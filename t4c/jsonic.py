from __future__ import annotations

import json
from typing import Any


def dumps(obj: Any, pretty: bool = False) -> str:
    """
    JSON для ответов CLI.

    Не-ASCII не экранируется; компактный вывод по умолчанию, с отступами
    при pretty. Завершающий перевод строки добавляет CLI.
    """
    if pretty:
        return json.dumps(obj, ensure_ascii=False, indent=2)
    return json.dumps(obj, ensure_ascii=False, separators=(",", ":"))


__all__ = ["dumps"]
