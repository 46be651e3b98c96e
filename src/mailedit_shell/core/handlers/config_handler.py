# src/mailedit_shell/core/handlers/config_handler.py
import json
import logging
from typing import List, Optional, Dict, Any

from mailedit_shell.core.context.editor_context import EditorContext
from mailedit_shell.core.managers.config_manager import config_manager

logger = logging.getLogger(__name__)

COMMAND_HIERARCHY: Dict[str, Optional[Dict[str, Any]]] = {
    "config": {"list": None, "set": None, "reset": None},
}

config_help_text = """
CONFIGURATION:
  config list                Show the current configuration as JSON.
  config set <key> <value>   Set a config value for the session (e.g., session.reselect_policy restore).
  config reset               Reload the configuration from settings.json.
""".strip()


def handle_config(args: List[str], ctx: EditorContext, _stdin: Optional[str] = None) -> int:
    """Handles the 'config' command for viewing and modifying session configuration."""
    if not args:
        print(config_help_text)
        return 1

    command = args[0]

    if command == "list":
        print(json.dumps(config_manager.get_all(), indent=2))
        return 0

    if command == "set":
        if len(args) < 3:
            print("Usage: config set <key> <value>")
            return 1
        key_path = args[1]
        value = " ".join(args[2:])

        if config_manager.set_nested(key_path, value):
            new_value = config_manager.get_nested(key_path)
            print(f"✅ Config updated: {key_path} = {new_value} (type: {type(new_value).__name__})")
            if key_path.startswith(("editor.", "session.")) and ctx.session is not None:
                print("   Takes effect for the next template you open.")
            return 0
        print(f"❌ Error: Failed to set config value for key '{key_path}'.")
        return 1

    if command == "reset":
        config_manager.reset()
        print("✅ Configuration has been reset to the values from settings.json.")
        return 0

    print(f"Unknown command: 'config {command}'.")
    return 1
