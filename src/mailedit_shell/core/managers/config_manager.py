# src/mailedit_shell/core/managers/config_manager.py
import json
import logging
from typing import Any, Dict, List, Optional

from pydantic import BaseModel, ValidationError

from mailedit.managers.session_manager import ReselectPolicy
from mailedit_shell.core.utils.path_utils import PathUtils

logger = logging.getLogger(__name__)

_TRUE_WORDS = ("1", "true", "yes", "on")


class EditorSettings(BaseModel):
    """The 'editor' and 'session' sections, validated for building a session."""
    parser: str = "html.parser"
    id_attribute: str = "id"
    wrapper_tag: str = "a"
    editable_tags: List[str] = []
    reselect_policy: ReselectPolicy = ReselectPolicy.REJECT


class ConfigManager:
    """
    Singleton holding the shell configuration.

    Defaults come from settings.json next to the package; `config set` changes
    values in memory for the running shell only.
    """
    _instance = None

    def __new__(cls):
        if cls._instance is None:
            cls._instance = super(ConfigManager, cls).__new__(cls)
            cls._instance._config = {}
            cls._instance.reset()
        return cls._instance

    def get_all(self) -> Dict[str, Any]:
        return self._config

    def get_nested(self, key_path: str, default: Optional[Any] = None) -> Any:
        """Looks up a dotted key such as 'editor.wrapper_tag'; `default` when any part is missing."""
        node: Any = self._config
        for part in key_path.split('.'):
            if not isinstance(node, dict) or part not in node:
                return default
            node = node[part]
        return default if node is None else node

    def set_nested(self, key_path: str, value: Any) -> bool:
        """
        Stores `value` under a dotted key, creating sections on the way.

        A string is converted to the kind of value it replaces: 'true'/'false' for
        booleans, comma-separated items for lists, int/float for numbers.
        """
        *sections, leaf = key_path.split('.')
        target = self._config
        for section in sections:
            target = target.setdefault(section, {})
            if not isinstance(target, dict):
                logger.error("Cannot set '%s': '%s' is not a section.", key_path, section)
                return False

        current = target.get(leaf)
        if isinstance(value, str):
            value = self._coerce(key_path, value, current)

        target[leaf] = value
        logger.info("Configuration updated: %s = %r", key_path, value)
        return True

    @staticmethod
    def _coerce(key_path: str, raw: str, current: Any) -> Any:
        if isinstance(current, bool):
            return raw.strip().lower() in _TRUE_WORDS
        if isinstance(current, list):
            return [item.strip() for item in raw.split(",") if item.strip()]
        if isinstance(current, (int, float)):
            try:
                return type(current)(raw)
            except ValueError:
                logger.warning("'%s' expects a %s; keeping the text %r.", key_path, type(current).__name__, raw)
        return raw

    def editor_settings(self) -> EditorSettings:
        """Returns the settings a new editing session is built from; invalid values fall back to defaults."""
        values = {**self.get_nested("editor", {}), **self.get_nested("session", {})}
        try:
            return EditorSettings.model_validate(values)
        except ValidationError as e:
            logger.warning("Invalid editor settings, using defaults: %s", e)
            return EditorSettings()

    def reset(self) -> None:
        """Reloads the configuration from settings.json, discarding in-memory changes."""
        config_path = PathUtils.get_shell_package_root() / "settings.json"
        try:
            with open(config_path, "r", encoding="utf-8") as f:
                self._config = json.load(f)
        except FileNotFoundError:
            logger.warning("settings.json not found at %s. Using empty config.", config_path)
            self._config = {}
            return
        except (OSError, json.JSONDecodeError) as e:
            logger.error("Failed to load settings.json: %s", e, exc_info=True)
            self._config = {}
            return
        logger.info("Configuration has been (re)loaded from %s.", config_path)


# The global singleton instance used by the whole shell.
config_manager = ConfigManager()
