import importlib
import logging
from typing import Dict, Any, Tuple

from mailedit_shell.core.utils.path_utils import PathUtils

logger = logging.getLogger(__name__)

HANDLERS_PACKAGE = "mailedit_shell.core.handlers"


def discover_handlers() -> Tuple[Dict[str, Any], Dict[str, Any], Dict[str, str]]:
    """
    Scans the handlers directory (recursively) for '*_handler.py' modules and returns:
    1. A map of command names to their handler function (functions named 'handle_<name>').
    2. A map of command names to their hierarchy definition (module COMMAND_HIERARCHY).
    3. A map of command names to their help text ('<name>_help_text' strings).
    """
    discovered_handlers: Dict[str, Any] = {}
    discovered_hierarchies: Dict[str, Any] = {}
    discovered_help_texts: Dict[str, str] = {}

    handlers_dir = PathUtils.get_handlers_dir()
    if not handlers_dir.is_dir():
        logger.warning("Handlers directory not found: %s", handlers_dir)
        return discovered_handlers, discovered_hierarchies, discovered_help_texts

    logger.debug("Scanning for handlers in: '%s'", handlers_dir)

    for file_path in sorted(handlers_dir.glob("**/*_handler.py")):
        relative_parts = list(file_path.relative_to(handlers_dir).with_suffix("").parts)
        module_name = ".".join([HANDLERS_PACKAGE, *relative_parts])
        try:
            module = importlib.import_module(module_name)
        except Exception as e:
            logger.error("Failed to load handler module %s: %s", file_path.name, e, exc_info=True)
            continue

        # A module may declare one hierarchy per command: {command: {...}}
        hierarchy = getattr(module, "COMMAND_HIERARCHY", None) or {}

        for attr_name in dir(module):
            value = getattr(module, attr_name)
            if attr_name.startswith("handle_") and callable(value):
                command_name = attr_name[len("handle_"):]
                discovered_handlers[command_name] = value
                discovered_hierarchies[command_name] = hierarchy.get(command_name)
                logger.debug("Discovered command '%s'", command_name)
            elif attr_name.endswith("_help_text") and isinstance(value, str):
                discovered_help_texts[attr_name[:-len("_help_text")]] = value

    return discovered_handlers, discovered_hierarchies, discovered_help_texts
