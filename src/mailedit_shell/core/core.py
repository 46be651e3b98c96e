# src/mailedit_shell/core/core.py
from __future__ import annotations

import logging

from mailedit_shell.core.xngine import ExecuteEngine
from mailedit_shell.core.command_registry import CommandRegistry
from mailedit_shell.core.parser import parse_command_line

logger = logging.getLogger(__name__)

# Registration is done by app.py (register_all_commands); the engine reads the
# shared registry dict, so it sees commands registered later.
XNGINE = ExecuteEngine(command_registry=CommandRegistry, logger=logger)

execute_sequence = XNGINE.execute_sequence

__all__ = ["execute_sequence", "parse_command_line"]
