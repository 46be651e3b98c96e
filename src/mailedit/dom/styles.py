# src/mailedit/dom/styles.py
import re
from typing import Dict, Optional

from bs4 import Tag

# Splits on ';' that are not inside parentheses (e.g. url(data:...;base64,...))
_DECLARATION_SPLIT = re.compile(r";(?![^(]*\))")
_PX_NUMBER = re.compile(r"^\s*(-?\d+(?:\.\d+)?)\s*(px)?\s*$", re.IGNORECASE)


def parse_px(value: Optional[str]) -> Optional[float]:
    """Returns the pixel amount of '120', '120px' or '120.5px'; None for anything else."""
    if not value:
        return None
    m = _PX_NUMBER.match(value)
    return float(m.group(1)) if m else None


def format_px(value: float) -> str:
    return f"{format_number(value)}px"


def format_number(value: float) -> str:
    """Renders 2.0 as '2' and 1.25 as '1.25'."""
    value = float(value)
    return str(int(value)) if value.is_integer() else str(value)


class InlineStyle:
    """
    Ordered view over an element's `style` attribute.

    Only declarations touched through `set`/`remove` change; the rest keep their
    order and value. `write` drops the attribute when no declarations are left.
    """

    def __init__(self, tag: Tag):
        self.tag = tag
        self._decls: Dict[str, str] = self.parse(tag.get("style") or "")

    @staticmethod
    def parse(text: str) -> Dict[str, str]:
        decls: Dict[str, str] = {}
        for chunk in _DECLARATION_SPLIT.split(text):
            if ":" not in chunk:
                continue
            name, value = chunk.split(":", 1)
            name, value = name.strip().lower(), value.strip()
            if name and value:
                decls[name] = value
        return decls

    def get(self, name: str, default: Optional[str] = None) -> Optional[str]:
        return self._decls.get(name.lower(), default)

    def set(self, name: str, value: str) -> None:
        if value == "":
            self.remove(name)
            return
        self._decls[name.lower()] = value

    def remove(self, name: str) -> None:
        self._decls.pop(name.lower(), None)

    def __contains__(self, name: str) -> bool:
        return name.lower() in self._decls

    def __str__(self) -> str:
        return " ".join(f"{name}: {value};" for name, value in self._decls.items())

    def write(self) -> None:
        """Writes the declarations back onto the tag."""
        if self._decls:
            self.tag["style"] = str(self)
        elif "style" in self.tag.attrs:
            del self.tag["style"]
