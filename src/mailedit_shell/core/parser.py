# src/mailedit_shell/core/parser.py
from __future__ import annotations
import shlex
from typing import List, Optional, Tuple

# Chaining operators understood by the shell.
_OPS: set[str] = {"&&", "||", ";"}


def parse_command_line(line: str) -> List[Tuple[str, List[str], Optional[str]]]:
    """
    Parses the user input into a list of command segments.

    A command segment is (command_name, args, op_before), where op_before is the
    operator that joined it to the previous segment (None for the first one).

    Args:
        line (str): The raw input string from the shell.

    Returns:
        List[Tuple[str, List[str], Optional[str]]]: List of command segments.
    """
    s = (line or "").strip()
    if not s:
        return []

    try:
        # shlex keeps quoted text (e.g. a new paragraph) in one argument
        tokens = shlex.split(s, posix=True)
    except ValueError:
        tokens = s.split()

    out: list[tuple[str, list[str], str | None]] = []
    current_name: str | None = None
    current_args: list[str] = []
    op_before: str | None = None

    for tok in tokens:
        if tok in _OPS:
            if current_name is not None:
                out.append((current_name, current_args, op_before))
            current_name, current_args = None, []
            op_before = tok
        elif current_name is None:
            current_name = tok
        else:
            current_args.append(tok)

    if current_name is not None:
        out.append((current_name, current_args, op_before))
    return out
