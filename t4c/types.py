from __future__ import annotations

import enum


# ---- Режимы, общие для конфигурации и компилятора ----

class EscapeMode(enum.Enum):
    """
    Режим вывода выражения, зафиксированный в узле при парсинге.

    AUTO — значение проходит через экранирующий примитив приёмника,
    RAW — пишется как есть.
    """
    AUTO = "auto"
    RAW = "raw"


class WhitespaceMode(enum.Enum):
    """
    Режим чистки пробелов вокруг блоков.

    Действует только на литералы, соседствующие с блоками кода
    и директивами; выражения не затрагивает никогда.
    """
    BLOCK = "block"
    NONE = "none"


class BlockStyle(enum.Enum):
    """Способ распознавания открывающих и закрывающих фрагментов кода."""
    KEYWORD = "keyword"  # <# if x #> ... <# endif #>
    BRACE = "brace"      # <# if x { #> ... <# } #>


__all__ = ["EscapeMode", "WhitespaceMode", "BlockStyle"]
