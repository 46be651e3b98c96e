# src/mailedit/dom/applicator.py
import logging
import re
from dataclasses import dataclass, field
from typing import List

from bs4 import BeautifulSoup, NavigableString, Tag

from .styles import InlineStyle, format_number, format_px, parse_px
from ..model import ElementUpdate

logger = logging.getLogger(__name__)

_TAG_NAME = re.compile(r"^[A-Za-z][A-Za-z0-9:_.-]*$")
_BARE_NUMBER = re.compile(r"^\s*\d+(?:\.\d+)?\s*$")


@dataclass
class AppliedEdit:
    """What the applicator did: the (possibly replaced) node, whether markup changed, skipped fields."""
    node: Tag
    changed: bool = False
    ignored_fields: List[str] = field(default_factory=list)


class EditApplicator:
    """
    Applies an ElementUpdate to a resolved element, in a fixed order:
    tag morph, text, attributes (src/alt/href), image framing.

    A tag morph replaces the element, so every later step works on the new one.
    Image-only fields sent for other elements are skipped and reported, never fatal.
    """

    def __init__(self, wrapper_tag: str = "a"):
        self.wrapper_tag = wrapper_tag

    def apply(self, node: Tag, update: ElementUpdate, soup: BeautifulSoup) -> AppliedEdit:
        result = AppliedEdit(node=node)

        if update.tag_name is not None:
            self._morph(result, update.tag_name, soup)

        if update.text is not None:
            self._set_text(result, update.text, soup)

        is_image = result.node.name == "img"

        # --- Attributes ---
        for name in ("src", "alt"):
            value = getattr(update, name)
            if value is None:
                continue
            if is_image:
                result.changed |= self._set_attr(result.node, name, value)
            else:
                result.ignored_fields.append(name)

        if update.href is not None:
            self._set_href(result, update.href, soup)

        # --- Image framing ---
        frame = update.image_frame_fields()
        if frame:
            if is_image:
                self._frame_image(result, update)
            else:
                result.ignored_fields.extend(frame.keys())

        if result.ignored_fields:
            logger.debug("Fields %s not supported on <%s>; ignored.", result.ignored_fields, result.node.name)
        return result

    def _morph(self, result: AppliedEdit, tag_name: str, soup: BeautifulSoup) -> None:
        """Replaces the element with a new tag, keeping attributes and children."""
        new_name = tag_name.strip().lower()
        if not _TAG_NAME.match(new_name):
            result.ignored_fields.append("tag_name")
            return
        if new_name == result.node.name.lower():
            return

        old = result.node
        replacement = soup.new_tag(new_name)
        replacement.attrs = {k: (list(v) if isinstance(v, list) else v) for k, v in old.attrs.items()}
        for child in list(old.contents):
            replacement.append(child.extract())
        old.replace_with(replacement)

        logger.debug("Morphed <%s> into <%s>.", old.name, new_name)
        result.node = replacement
        result.changed = True

    @staticmethod
    def _set_text(result: AppliedEdit, text: str, soup: BeautifulSoup) -> None:
        """Replaces the element's content with `text`; newlines become <br> like a rendered-text setter."""
        node = result.node
        before = node.decode_contents()

        node.clear()
        lines = text.replace("\r\n", "\n").split("\n")
        for i, line in enumerate(lines):
            if i > 0:
                node.append(soup.new_tag("br"))
            if line:
                node.append(NavigableString(line))

        result.changed |= node.decode_contents() != before

    def _set_href(self, result: AppliedEdit, href: str, soup: BeautifulSoup) -> None:
        node = result.node
        parent = node.parent

        if node.name == self.wrapper_tag:
            result.changed |= self._set_attr(node, "href", href)
        elif isinstance(parent, Tag) and parent.name == self.wrapper_tag:
            result.changed |= self._set_attr(parent, "href", href)
        elif href:
            node.wrap(soup.new_tag(self.wrapper_tag, href=href))
            logger.debug("Wrapped <%s> in a new <%s href=%r>.", node.name, self.wrapper_tag, href)
            result.changed = True

    def _frame_image(self, result: AppliedEdit, update: ElementUpdate) -> None:
        img = result.node
        style = InlineStyle(img)
        before_style = img.get("style")
        changed = False

        if update.object_fit is not None:
            style.set("object-fit", update.object_fit)

        # Crop point and zoom pivot always move together.
        if update.object_position is not None:
            style.set("object-position", update.object_position)
            style.set("transform-origin", update.object_position)

        if update.height is not None:
            changed |= self._set_dimension(img, style, "height", update.height)
        if update.width is not None:
            changed |= self._set_dimension(img, style, "width", update.width)

        if update.scale is not None:
            if update.scale == 1:
                style.remove("transform")
            else:
                style.set("transform", f"scale({format_number(update.scale)})")
                changed |= self._clip_parent(img)

        style.write()
        result.changed |= changed or img.get("style") != before_style

    def _set_dimension(self, img: Tag, style: InlineStyle, name: str, value: str) -> bool:
        """Sets a style dimension and keeps the matching sizing attribute consistent."""
        value = value.strip()
        if value == "":
            style.remove(name)
            return self._remove_attr(img, name)

        if value.lower() == "auto":
            style.set(name, "auto")
            return self._remove_attr(img, name)

        px = parse_px(value)
        if _BARE_NUMBER.match(value):
            style.set(name, format_px(px))
        else:
            style.set(name, value)
        attr_value = format_number(px) if px is not None else value.replace("px", "")
        return self._set_attr(img, name, attr_value)

    @staticmethod
    def _clip_parent(img: Tag) -> bool:
        """Makes the parent clip the scaled image to its original box."""
        parent = img.parent
        if not isinstance(parent, Tag) or isinstance(parent, BeautifulSoup):
            return False
        style = InlineStyle(parent)
        before = parent.get("style")
        style.set("overflow", "hidden")
        style.set("display", "block")
        style.write()
        return parent.get("style") != before

    @staticmethod
    def _set_attr(tag: Tag, name: str, value: str) -> bool:
        if tag.get(name) == value:
            return False
        tag[name] = value
        return True

    @staticmethod
    def _remove_attr(tag: Tag, name: str) -> bool:
        if name not in tag.attrs:
            return False
        del tag[name]
        return True
