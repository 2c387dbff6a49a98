from .load import CONFIG_FILE, find_options, load_options
from .model import CompilerOptions, DEFAULT_OPTIONS, Delimiters
from .typed import ConfigError

__all__ = [
    "CONFIG_FILE",
    "CompilerOptions",
    "ConfigError",
    "DEFAULT_OPTIONS",
    "Delimiters",
    "find_options",
    "load_options",
]
