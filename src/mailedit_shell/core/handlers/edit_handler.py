# src/mailedit_shell/core/handlers/edit_handler.py
import logging
from typing import Dict, List, Optional

from pydantic import ValidationError

from mailedit.model import EditResult, ElementUpdate, SizingMode
from mailedit_shell.core.context.editor_context import EditorContext

logger = logging.getLogger(__name__)

# Shell field names -> ElementUpdate fields
FIELDS: Dict[str, str] = {
    "tag": "tag_name",
    "text": "text",
    "href": "href",
    "src": "src",
    "alt": "alt",
    "fit": "object_fit",
    "position": "object_position",
    "height": "height",
    "width": "width",
    "scale": "scale",
}

edit_help_text = """
EDITING (applies to the selected element):
  edit tag <name>          Change the element's tag, e.g. 'edit tag h1'.
  edit text <text...>      Replace the text.
  edit href <url>          Set the link (wraps the element in <a> if needed).
  edit src|alt <value>     Image source / alternative text.
  edit fit <value>         Image object-fit (contain, cover, ...).
  edit position <x> <y>    Crop point and zoom pivot, e.g. 'edit position 30% 60%'.
  edit height|width <v>    Image size, e.g. 240px or auto.
  edit scale <n>           Zoom; 1 resets.
  size fit|fill            Fit: fixed box, contain. Fill: auto height, cover.
""".strip()

COMMAND_HIERARCHY = {
    "edit": {name: None for name in FIELDS},
    "size": {mode.value: None for mode in SizingMode},
}


def _report(result: EditResult) -> int:
    if not result.ok:
        print(f"❌ Edit failed: {result.status.value.replace('_', ' ')}.")
        return 1
    if result.ignored_fields:
        print(f"⚠️  Not applicable to this element: {', '.join(result.ignored_fields)}")
    if result.changed:
        suffix = f" (now at {result.target})" if result.target != result.address else ""
        print(f"✅ Updated{suffix}.")
    else:
        print("No change.")
    return 0


def handle_edit(args: List[str], ctx: EditorContext, _stdin: Optional[str] = None) -> int:
    if len(args) < 2 or args[0] not in FIELDS:
        print("Usage: edit <field> <value...>  (fields: " + ", ".join(FIELDS) + ")")
        return 1

    if ctx.session is None or not ctx.session.is_open:
        print("❌ Error: Nothing selected. Use 'select <address>' first.")
        return 1

    field = FIELDS[args[0]]
    value = " ".join(args[1:])

    try:
        update = ElementUpdate(**{field: value})
    except ValidationError as e:
        print(f"❌ Error: Invalid value for '{args[0]}': {e.errors()[0]['msg']}")
        return 1

    return _report(ctx.session.update(update))


def handle_size(args: List[str], ctx: EditorContext, _stdin: Optional[str] = None) -> int:
    if len(args) != 1:
        print("Usage: size fit|fill")
        return 1

    try:
        mode = SizingMode(args[0].lower())
    except ValueError:
        print(f"❌ Error: Unknown sizing mode '{args[0]}'. Use 'fit' or 'fill'.")
        return 1

    if ctx.session is None or ctx.session.selection is None:
        print("❌ Error: Nothing selected. Use 'select <address>' first.")
        return 1

    if not ctx.session.selection.is_image:
        print("❌ Error: Sizing only applies to images.")
        return 1

    return _report(ctx.session.apply_sizing(mode))
