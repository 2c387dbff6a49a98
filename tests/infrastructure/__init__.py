"""
Unified test infrastructure for t4c.

Modules:
- file_utils: Utilities for creating templates and config files
- cli_utils: Running the CLI in a subprocess and parsing its JSON output
- template_utils: Shortcuts over compiler results (literals, instruction kinds)
"""

from .file_utils import write, write_template, write_config
from .cli_utils import run_cli, jload
from .template_utils import literal_texts, emitted_literals, instruction_kinds, parse_nodes

__all__ = [
    # File utilities
    "write", "write_template", "write_config",

    # CLI utilities
    "run_cli", "jload",

    # Template utilities
    "literal_texts", "emitted_literals", "instruction_kinds", "parse_nodes",
]
