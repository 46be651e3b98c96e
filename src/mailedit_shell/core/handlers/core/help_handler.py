# src/mailedit_shell/core/handlers/core/help_handler.py
from mailedit_shell.core.context.editor_context import EditorContext
from mailedit_shell.core.utils.helptext import get_help_text


def handle_help(_args, _ctx: EditorContext, _stdin=None) -> int:
    print(get_help_text())
    return 0
