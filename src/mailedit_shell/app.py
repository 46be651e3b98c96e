from __future__ import annotations

import argparse
import logging
import sys

from prompt_toolkit import PromptSession
from prompt_toolkit.completion import Completer
from prompt_toolkit.document import Document
from prompt_toolkit.history import FileHistory

from mailedit_shell.core.command_registry import COMMAND_HIERARCHY, register_all_commands
from mailedit_shell.core.context.editor_context import EditorContext
from mailedit_shell.core.core import execute_sequence, parse_command_line
from mailedit_shell.core.managers.completion_manager import CompletionManager
from mailedit_shell.core.managers.config_manager import config_manager
from mailedit_shell.core.utils.configure_logging import configure_logger
from mailedit_shell.core.utils.path_utils import PathUtils
from mailedit_shell.core.xngine import QUIT_CODE

# Initialize logging based on configuration
configure_logger(
    config_manager.get_nested("debug.level", "WARNING"),
    module_specific_levels=config_manager.get_nested("debug.module_levels", {}),
)
logger = logging.getLogger(__name__)


class PromptToolkitCompleter(Completer):
    """Adapts the CompletionManager to prompt_toolkit's Completer interface."""

    def __init__(self, manager: CompletionManager):
        self.manager = manager

    def get_completions(self, document: Document, complete_event):
        yield from self.manager.generate_completions(document)


def start_shell(template: str | None = None) -> None:
    """Starts the interactive REPL, optionally opening a template first."""
    register_all_commands()
    ctx = EditorContext()

    print("Welcome to mailedit (type 'help' for commands)")
    if template:
        execute_sequence([("open", [template], None)], ctx)

    history_path = PathUtils.get_shell_history_file()
    session = PromptSession(
        history=FileHistory(str(history_path)),
        completer=PromptToolkitCompleter(CompletionManager(ctx, COMMAND_HIERARCHY)),
        complete_while_typing=True,
    )
    ctx.prompt_session = session
    logger.info("Shell startup; history file at: %s", history_path)

    try:
        while True:
            try:
                line = session.prompt("mailedit>> ").strip()
            except (EOFError, KeyboardInterrupt):
                break

            commands = parse_command_line(line)
            if not commands:
                continue

            if execute_sequence(commands, ctx) == QUIT_CODE:
                break
    finally:
        print("Bye!")


def main(argv: list[str] | None = None) -> int:
    """Entrypoint for running the shell from the command line."""
    parser = argparse.ArgumentParser(prog="mailedit", description="Edit HTML email templates.")
    parser.add_argument("template", nargs="?", help="Template file to open on start-up.")
    pargs = parser.parse_args(argv)
    start_shell(pargs.template)
    return 0


if __name__ == "__main__":
    sys.exit(main())
