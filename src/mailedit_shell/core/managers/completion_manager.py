import logging
import re
from typing import Dict, Any, Iterable, List

from prompt_toolkit.completion import Completion
from prompt_toolkit.document import Document

from mailedit_shell.core.context.editor_context import EditorContext
from mailedit_shell.core.managers.config_manager import config_manager

logger = logging.getLogger(__name__)

# Regex to find the last operator *before* the cursor
OPERATOR_PATTERN = re.compile(r"(\s+(?:&&|\|\||;)\s+)")


class CompletionManager:
    """
    Generates completion suggestions: commands, their subcommands, and element
    addresses of the open template for 'select' and 'show'.
    """

    ADDRESS_COMMANDS = ("select", "show")

    def __init__(self, editor_context: EditorContext, command_hierarchy: Dict[str, Any]):
        self.ctx = editor_context
        self.command_hierarchy = command_hierarchy

    def generate_completions(self, document: Document) -> Iterable[Completion]:
        """Completes the segment after the last operator before the cursor."""
        text_before_cursor = document.text_before_cursor

        last_op_match = None
        for match in OPERATOR_PATTERN.finditer(text_before_cursor):
            last_op_match = match
        segment = text_before_cursor[last_op_match.end():] if last_op_match else text_before_cursor

        words = segment.lstrip().split()
        completing_new_word = segment.endswith(" ")
        word = "" if completing_new_word else (words[-1] if words else "")
        position = len(words) + (1 if completing_new_word else 0)

        if position <= 1:
            yield from self._prefixed(sorted(self.command_hierarchy.keys()), word, "Command")
            return

        if position != 2:
            return

        command = words[0]
        if command in self.ADDRESS_COMMANDS:
            yield from self._prefixed(self._addresses(), word, "Address")
            return

        entry = self.command_hierarchy.get(command)
        if isinstance(entry, dict):
            yield from self._prefixed(sorted(entry.keys()), word, None)

    def _addresses(self) -> List[str]:
        """Addresses of editable elements in the working copy."""
        if self.ctx.session is None:
            return []
        editable = set(config_manager.editor_settings().editable_tags)
        engine = self.ctx.session.engine
        try:
            soup = engine.parse(self.ctx.document)
        except Exception as e:
            logger.debug("No address completions: %s", e)
            return []
        return [str(address) for address, tag in engine.codec.iter_addresses(soup) if tag.name in editable]

    @staticmethod
    def _prefixed(candidates: Iterable[str], word: str, meta) -> Iterable[Completion]:
        for candidate in candidates:
            if candidate.startswith(word):
                yield Completion(candidate, start_position=-len(word), display_meta=meta)
