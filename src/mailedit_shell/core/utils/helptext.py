# src/mailedit_shell/core/utils/helptext.py
from mailedit_shell.core.command_registry import COMMAND_HELP_TEXTS

HEADER_HELP_TEXT = """
✉️  mailedit - Help

Edit HTML email templates element by element.

---
OPERATORS
---
  A ; B               Execute B after A, regardless of the outcome.
  A && B              Execute B only if A was successful (exit code 0).
  A || B              Execute B only if A failed (exit code != 0).

---
COMMANDS
---
GENERAL:
  help                Show this help text.
  quit                Exit the shell.
""".strip()


def get_help_text() -> str:
    """
    Assembles the full help text from the header and the help text
    fragments discovered in the command handlers.
    """
    full_help_parts = [HEADER_HELP_TEXT]
    for command_name in sorted(COMMAND_HELP_TEXTS.keys()):
        full_help_parts.append(COMMAND_HELP_TEXTS[command_name])
    return "\n\n".join(full_help_parts)
