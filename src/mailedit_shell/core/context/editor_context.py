# src/mailedit_shell/core/context/editor_context.py
import logging
from pathlib import Path
from typing import Optional, Any

from mailedit.dom.engine import MutationEngine
from mailedit.managers.session_manager import EditSession
from mailedit_shell.core.managers.config_manager import config_manager

logger = logging.getLogger(__name__)


class EditorContext:
    """
    Holds the state of the shell: the template file that is open and the
    editing session on its content.
    """

    def __init__(self):
        self.template_path: Optional[Path] = None
        self.session: Optional[EditSession] = None
        self.prompt_session: Optional[Any] = None

    def open_template(self, path: Path, html: str) -> EditSession:
        """Starts a fresh editing session on `html`, read from `path`, using the current settings."""
        settings = config_manager.editor_settings()
        engine = MutationEngine(
            parser=settings.parser,
            id_attribute=settings.id_attribute,
            wrapper_tag=settings.wrapper_tag,
        )

        self.template_path = path
        self.session = EditSession(html, engine=engine, reselect_policy=settings.reselect_policy)
        logger.info("Opened template %s (%d chars, reselect=%s).", path, len(html), settings.reselect_policy.value)
        return self.session

    @property
    def document(self) -> Optional[str]:
        return self.session.document if self.session else None

    def __repr__(self) -> str:
        selected = self.session.selection.address if self.session and self.session.selection else "None"
        return f"<EditorContext template={self.template_path} selection={selected}>"
