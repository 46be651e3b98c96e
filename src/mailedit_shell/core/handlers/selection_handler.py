# src/mailedit_shell/core/handlers/selection_handler.py
import argparse
import json
import logging
from typing import List, Optional

from mailedit.model import RenderedBox
from mailedit_shell.core.context.editor_context import EditorContext

logger = logging.getLogger(__name__)

select_help_text = """
SELECTION:
  select <address> [--width N] [--height N]
                       Select an element (snapshot taken). --width/--height give the
                       rendered size in px when the template does not state it.
  selection            Print the current selection.
  save                 Keep the edits and write the template back to its file.
  cancel               Discard the edits made since 'select'.
""".strip()


def _print_descriptor(descriptor) -> None:
    print(json.dumps(descriptor.model_dump(exclude_none=True), indent=2))


def handle_select(args: List[str], ctx: EditorContext, _stdin: Optional[str] = None) -> int:
    parser = argparse.ArgumentParser(prog="select", description="Select an element by address.")
    parser.add_argument("address", help="Path address (/table[1]/tr[1]/td[1]) or //*[@id=\"...\"].")
    parser.add_argument("--width", type=float, default=None, help="Rendered width in px.")
    parser.add_argument("--height", type=float, default=None, help="Rendered height in px.")

    try:
        pargs = parser.parse_args(args)
    except SystemExit:
        return 1

    if ctx.session is None:
        print("❌ Error: No template open. Use 'open <file>' first.")
        return 1

    rendered = None
    if pargs.width is not None or pargs.height is not None:
        rendered = RenderedBox(width=pargs.width, height=pargs.height)

    was_open = ctx.session.is_open
    descriptor = ctx.session.select(pargs.address, rendered)
    if descriptor is None:
        if was_open and ctx.session.is_open:
            print("❌ Error: A selection is still open. Use 'save' or 'cancel' first.")
        else:
            print(f"❌ Error: No element at '{pargs.address}'.")
        return 1

    _print_descriptor(descriptor)
    return 0


def handle_selection(_args: List[str], ctx: EditorContext, _stdin: Optional[str] = None) -> int:
    if ctx.session is None or ctx.session.selection is None:
        print("Nothing selected.")
        return 1
    _print_descriptor(ctx.session.selection)
    return 0


def handle_save(_args: List[str], ctx: EditorContext, _stdin: Optional[str] = None) -> int:
    """Keeps the working copy and persists it to the template file."""
    if ctx.session is None:
        print("❌ Error: No template open.")
        return 1

    html = ctx.session.save()
    if ctx.template_path is None:
        print("✅ Changes kept (no file to write).")
        return 0

    try:
        ctx.template_path.write_text(html, encoding="utf-8")
    except OSError as e:
        logger.error("Could not write template %s: %s", ctx.template_path, e)
        print(f"❌ Error: Could not write '{ctx.template_path}': {e}")
        return 1

    print(f"✅ Saved '{ctx.template_path}'.")
    return 0


def handle_cancel(_args: List[str], ctx: EditorContext, _stdin: Optional[str] = None) -> int:
    """Restores the document as it was when the selection was made."""
    if ctx.session is None or not ctx.session.is_open:
        print("Nothing to cancel.")
        return 1
    ctx.session.cancel()
    print("✅ Edits discarded.")
    return 0
