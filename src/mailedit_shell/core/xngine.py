from __future__ import annotations

import inspect
import logging
from typing import Callable, Dict, List, Optional, Tuple

from mailedit_shell.core.context.editor_context import EditorContext

QUIT_CODE = 130


class ExecuteEngine:
    """
    Runs parsed command segments against the registered handlers,
    honouring the ';', '&&' and '||' operators.
    """

    def __init__(
            self,
            *,
            command_registry: Dict[str, Callable[..., int]],
            logger: Optional[logging.Logger] = None,
    ) -> None:
        self._commands = command_registry
        self._log = logger or logging.getLogger(__name__)

    def execute_sequence(
            self,
            commands: List[Tuple[str, List[str], Optional[str]]],
            context: Optional[EditorContext] = None,
    ) -> int:
        """
        Executes the segments in order and returns the last exit code.
        Returns 130 immediately when a handler asks the shell to quit.
        """
        ctx = context or EditorContext()
        last_exit = 0

        for name, args, op in commands:
            # --- Operator Logic (&&, ||) ---
            if op == "&&" and last_exit != 0:
                continue
            if op == "||" and last_exit == 0:
                continue

            handler = self._commands.get(name)
            if handler is None:
                print(f"command not found: {name}")
                last_exit = 127
                continue

            try:
                last_exit = int(self._call_handler(handler, args, ctx))
            except Exception as e:
                self._log.error("Command '%s' failed: %s", name, e, exc_info=True)
                print(f"❌ Error in '{name}': {e}")
                last_exit = 1

            if last_exit == QUIT_CODE:
                return QUIT_CODE

        return last_exit

    @staticmethod
    def _call_handler(handler: Callable[..., int], args: List[str], ctx: EditorContext) -> int:
        sig = inspect.signature(handler)
        if len(sig.parameters) >= 3:
            return handler(args, ctx, None)
        return handler(args, ctx)
