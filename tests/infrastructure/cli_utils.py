"""
Utilities for working with CLI in tests.
"""

import json
import os
import subprocess
import sys
from pathlib import Path

PROJECT_ROOT = Path(__file__).resolve().parents[2]


def run_cli(root: Path, *args: str) -> subprocess.CompletedProcess:
    """
    Runs t4c.cli with specified arguments in the given directory.

    Args:
        root: Working directory for command execution
        *args: Command line arguments for t4c.cli

    Returns:
        CompletedProcess with execution results
    """
    env = os.environ.copy()
    # the package must be importable from any working directory
    env["PYTHONPATH"] = os.pathsep.join(filter(None, [str(PROJECT_ROOT), env.get("PYTHONPATH")]))
    return subprocess.run(
        [sys.executable, "-m", "t4c.cli", *args],
        cwd=root, env=env, capture_output=True, text=True, encoding="utf-8"
    )


def jload(s: str):
    """Parses JSON output of the CLI."""
    return json.loads(s)
