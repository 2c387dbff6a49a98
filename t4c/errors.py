"""
User-facing errors of t4c.

A template that does not compile or a config file that does not load
is the user's problem to fix, so the CLI reports it as a one-line
message (or a caret diagnostic) and exits with exit_code.
Anything else escaping from the compiler is a bug and keeps its traceback.
"""

from __future__ import annotations


class T4UserError(Exception):
    """
    Base class for errors the user can fix: malformed templates,
    unsupported directives, invalid t4c.yaml, missing input files.
    """

    exit_code = 2


__all__ = ["T4UserError"]
