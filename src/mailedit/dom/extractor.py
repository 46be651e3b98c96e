# src/mailedit/dom/extractor.py
import logging
import re
from typing import Optional

from bs4 import NavigableString, Tag
from bs4.element import PreformattedString

from .styles import InlineStyle, format_px, parse_px
from ..model import Address, RenderedBox, SelectionDescriptor

logger = logging.getLogger(__name__)

DEFAULT_POSITION = "50% 50%"
DEFAULT_OBJECT_FIT = "initial"

_WHITESPACE = re.compile(r"[ \t\n\r\f\v]+")
# matrix(a, b, c, d, e, f): 'a' is the horizontal scale component
_MATRIX = re.compile(r"matrix\(\s*(-?[\d.]+(?:e-?\d+)?)", re.IGNORECASE)
_SCALE = re.compile(r"scale(?:x)?\(\s*(-?[\d.]+(?:e-?\d+)?)", re.IGNORECASE)


def rendered_text(node: Tag) -> str:
    """
    Approximates the text a browser renders for `node`: whitespace runs collapse,
    <br> becomes a line break, comments and other markup-only strings are skipped.
    """
    parts = []
    for item in node.descendants:
        if isinstance(item, Tag):
            if item.name == "br":
                parts.append("\n")
        elif isinstance(item, NavigableString) and not isinstance(item, PreformattedString):
            if item.parent is not None and item.parent.name in ("script", "style"):
                continue
            parts.append(_WHITESPACE.sub(" ", str(item)))

    lines = "".join(parts).split("\n")
    return "\n".join(line.strip() for line in lines).strip()


def parse_scale(transform: Optional[str]) -> float:
    """Extracts the horizontal scale from a 2-D transform value; 1 when there is none."""
    if not transform or transform.strip().lower() == "none":
        return 1.0
    for pattern in (_MATRIX, _SCALE):
        m = pattern.search(transform)
        if m:
            try:
                return float(m.group(1))
            except ValueError:
                logger.debug("Unreadable transform value: %s", transform)
                return 1.0
    return 1.0


class SelectionExtractor:
    """
    Reads an element's current editable state into a SelectionDescriptor.
    The inverse of EditApplicator: every field it writes can be read back here.
    """

    def extract(
            self,
            node: Tag,
            address: Address,
            rendered: Optional[RenderedBox] = None,
    ) -> SelectionDescriptor:
        descriptor = SelectionDescriptor(
            tag_name=node.name.upper(),
            address=str(address),
            text=rendered_text(node),
        )

        if node.name == "img":
            descriptor = descriptor.model_copy(update=self._image_state(node, rendered))

        anchor = node if node.name == "a" else node.find_parent("a")
        if anchor is not None and anchor.get("href") is not None:
            descriptor.href = anchor.get("href")

        return descriptor

    @staticmethod
    def _image_state(img: Tag, rendered: Optional[RenderedBox]) -> dict:
        style = InlineStyle(img)
        state = {
            "src": img.get("src", ""),
            "alt": img.get("alt", ""),
            "object_fit": style.get("object-fit") or DEFAULT_OBJECT_FIT,
            "object_position": style.get("object-position") or DEFAULT_POSITION,
            "transform_origin": style.get("transform-origin") or DEFAULT_POSITION,
            "style_height": style.get("height", ""),
            "style_width": style.get("width", ""),
            "scale": parse_scale(style.get("transform")),
        }

        for dim in ("height", "width"):
            measured = getattr(rendered, dim) if rendered is not None else None
            if measured is None:
                measured = parse_px(style.get(dim))
            if measured is None:
                measured = parse_px(img.get(dim))
            state[f"computed_{dim}"] = format_px(measured) if measured is not None else None

        return state
