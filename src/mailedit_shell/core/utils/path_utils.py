# src/mailedit_shell/core/utils/path_utils.py
import logging
from pathlib import Path

logger = logging.getLogger(__name__)


class PathUtils:
    """
    A central utility for retrieving the shell's package and user paths.
    """

    # --- Package paths ---

    @staticmethod
    def get_shell_package_root() -> Path:
        """Returns the directory of the mailedit_shell package (where settings.json lives)."""
        return Path(__file__).resolve().parent.parent.parent

    @staticmethod
    def get_handlers_dir() -> Path:
        return PathUtils.get_shell_package_root() / "core" / "handlers"

    # --- User specific paths ---

    @staticmethod
    def get_shell_history_file() -> Path:
        """
        Returns the path to the shell history file in the user's home directory.
        (e.g., ~/.mailedit_shell_history)
        """
        return Path.home() / ".mailedit_shell_history"
