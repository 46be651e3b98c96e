# src/mailedit_shell/core/handlers/core/quit_handler.py
from mailedit_shell.core.context.editor_context import EditorContext
from mailedit_shell.core.xngine import QUIT_CODE


def handle_quit(args, ctx: EditorContext, _stdin=None) -> int:
    """Signals the shell to stop. Refuses while the selection has unsaved edits, unless --force."""
    if ctx.session is not None and ctx.session.is_dirty and "--force" not in (args or []):
        print("⚠️  The current selection has unsaved edits. Use 'save', 'cancel' or 'quit --force'.")
        return 1
    return QUIT_CODE
