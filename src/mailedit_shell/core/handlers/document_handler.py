# src/mailedit_shell/core/handlers/document_handler.py
from __future__ import annotations

import logging
from pathlib import Path
from typing import List, Optional

from tqdm import tqdm

from mailedit.model import Address
from mailedit_shell.core.context.editor_context import EditorContext
from mailedit_shell.core.managers.config_manager import config_manager

logger = logging.getLogger(__name__)

open_help_text = """
TEMPLATES:
  open <file>          Load an HTML template and start an editing session.
  show [<address>]     Print the document, or the markup of one element.
  tree [--all]         List the addresses of editable elements (--all: every element).
""".strip()

COMMAND_HIERARCHY = {"tree": {"--all": None}}


def _require_document(ctx: EditorContext) -> bool:
    if ctx.session is None:
        print("❌ Error: No template open. Use 'open <file>' first.")
        return False
    return True


def handle_open(args: List[str], ctx: EditorContext, _stdin: Optional[str] = None) -> int:
    """Reads a template file from disk and starts a session on it."""
    if len(args) != 1:
        print("Usage: open <file>")
        return 1

    path = Path(args[0]).expanduser()
    if ctx.session is not None and ctx.session.is_dirty:
        print("❌ Error: The open selection has unsaved edits. Use 'save' or 'cancel' first.")
        return 1

    try:
        html = path.read_text(encoding="utf-8")
    except OSError as e:
        logger.error("Could not read template %s: %s", path, e)
        print(f"❌ Error: Could not read '{path}': {e}")
        return 1

    ctx.open_template(path, html)
    print(f"✅ Opened '{path}' ({len(html)} characters).")
    return 0


def handle_show(args: List[str], ctx: EditorContext, _stdin: Optional[str] = None) -> int:
    """Prints the whole document or a single element."""
    if not _require_document(ctx):
        return 1

    if not args:
        print(ctx.document)
        return 0

    engine = ctx.session.engine
    try:
        address = Address.parse(args[0])
    except ValueError as e:
        print(f"❌ Error: {e}")
        return 1

    soup = engine.parse(ctx.document)
    resolution = engine.resolver.resolve(address, soup)
    if not resolution.found:
        print(f"❌ Error: No element at '{address}'.")
        return 1

    print(str(resolution.node))
    return 0


def handle_tree(args: List[str], ctx: EditorContext, _stdin: Optional[str] = None) -> int:
    """Lists every (editable) element with its address and a short text preview."""
    if not _require_document(ctx):
        return 1

    show_all = "--all" in args
    editable = set(config_manager.editor_settings().editable_tags)
    threshold = config_manager.get_nested("tree.progress_threshold", 500)

    engine = ctx.session.engine
    soup = engine.parse(ctx.document)
    entries = list(engine.codec.iter_addresses(soup))

    lines = []
    for address, tag in tqdm(entries, desc="Addressing", unit="el", leave=False,
                             disable=len(entries) < threshold):
        if not show_all and tag.name not in editable:
            continue
        preview = " ".join(tag.get_text(" ", strip=True).split())[:40]
        if tag.name == "img":
            preview = tag.get("src", "")[:40]
        lines.append(f"  {str(address):<50} <{tag.name}> {preview}")

    if not lines:
        print("No editable elements found.")
        return 0

    print("\n".join(lines))
    return 0
