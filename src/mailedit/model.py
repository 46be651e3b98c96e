# src/mailedit/model.py (Editor Layer)
import re
from enum import Enum
from typing import Optional, List, Dict, Any, Iterable, Union

from pydantic import BaseModel, ConfigDict, Field

# Pattern for a single path step: /tag[ordinal]
STEP_PATTERN = re.compile(r"/([^/\[\]\s]+)\[(\d+)\]")
# Pattern for the identifier form: //*[@id="value"] or //*[@id='value']
IDENTIFIER_PATTERN = re.compile(r"""^//\*\[@id=(?:"([^"]*)"|'([^']*)')\]$""")

IMAGE_FRAME_FIELDS = ("object_fit", "object_position", "height", "width", "scale")


class AddressStep(BaseModel):
    """One (tag, ordinal) step of a positional address."""
    model_config = ConfigDict(frozen=True)

    tag: str
    ordinal: int = Field(ge=1)

    def __str__(self) -> str:
        return f"/{self.tag}[{self.ordinal}]"


class Address(BaseModel):
    """
    Positional or identifier-based name of an element.

    Either `identifier` is set (single-step id reference) or `steps` lists the
    path from the content root down to the element. No steps and no identifier
    addresses the content root itself.
    """
    model_config = ConfigDict(frozen=True)

    steps: List[AddressStep] = Field(default_factory=list)
    identifier: Optional[str] = None

    @property
    def is_identifier(self) -> bool:
        return self.identifier is not None

    @property
    def is_root(self) -> bool:
        return not self.is_identifier and not self.steps

    @classmethod
    def parse(cls, text: str) -> "Address":
        """
        Parses an address string into an Address.

        Raises:
            ValueError: If the text is neither an identifier nor a path address.
        """
        s = (text or "").strip()
        if not s:
            return cls()

        m = IDENTIFIER_PATTERN.match(s)
        if m:
            return cls(identifier=m.group(1) if m.group(1) is not None else m.group(2))

        steps: List[AddressStep] = []
        pos = 0
        for match in STEP_PATTERN.finditer(s):
            if match.start() != pos:
                break
            steps.append(AddressStep(tag=match.group(1).lower(), ordinal=int(match.group(2))))
            pos = match.end()

        if pos != len(s) or not steps:
            raise ValueError(f"Malformed address: {text!r}")
        return cls(steps=steps)

    def with_wrapper(self, tag: str) -> "Address":
        """Returns the path with a wrapper step inserted before the final step (ordinal 1)."""
        if self.is_identifier or not self.steps:
            return self
        wrapper = AddressStep(tag=tag, ordinal=1)
        return Address(steps=[*self.steps[:-1], wrapper, self.steps[-1]])

    @staticmethod
    def can_name(identifier: str) -> bool:
        """An id holding both quote characters has no identifier form."""
        return not ('"' in identifier and "'" in identifier)

    def __str__(self) -> str:
        if self.is_identifier:
            if '"' in self.identifier:
                return f"//*[@id='{self.identifier}']"
            return f'//*[@id="{self.identifier}"]'
        return "".join(str(step) for step in self.steps)


class ElementUpdate(BaseModel):
    """
    A partial edit for a single element. Fields left as None are not part of the edit.

    Groups: tag morph (tag_name), text (text), attributes (href, src, alt) and
    image framing (object_fit, object_position, height, width, scale).
    """
    model_config = ConfigDict(populate_by_name=True, extra="forbid")

    tag_name: Optional[str] = Field(default=None, alias="tagName")
    text: Optional[str] = None
    href: Optional[str] = None
    src: Optional[str] = None
    alt: Optional[str] = None
    object_fit: Optional[str] = Field(default=None, alias="objectFit")
    object_position: Optional[str] = Field(default=None, alias="objectPosition")
    height: Optional[str] = None
    width: Optional[str] = None
    scale: Optional[float] = None

    @property
    def is_empty(self) -> bool:
        return not self.set_fields()

    def set_fields(self) -> Dict[str, Any]:
        """Returns only the fields that are part of this edit."""
        return self.model_dump(exclude_none=True)

    def image_frame_fields(self) -> Dict[str, Any]:
        return {k: v for k, v in self.set_fields().items() if k in IMAGE_FRAME_FIELDS}


class RenderedBox(BaseModel):
    """Post-layout size of an element as measured by the rendering surface (CSS px)."""
    width: Optional[float] = None
    height: Optional[float] = None


class SelectionDescriptor(BaseModel):
    """Snapshot of an element's editable state, keyed by its address."""
    tag_name: str
    address: str
    text: Optional[str] = None
    src: Optional[str] = None
    href: Optional[str] = None
    alt: Optional[str] = None
    object_fit: Optional[str] = None
    object_position: Optional[str] = None
    transform_origin: Optional[str] = None
    scale: Optional[float] = None
    style_height: Optional[str] = None
    computed_height: Optional[str] = None
    style_width: Optional[str] = None
    computed_width: Optional[str] = None

    @property
    def is_image(self) -> bool:
        return self.tag_name.upper() == "IMG"

    def merge(self, update: ElementUpdate, exclude: Iterable[str] = ()) -> "SelectionDescriptor":
        """Returns a copy with the fields of `update` folded in, except those in `exclude`."""
        skipped = set(exclude)
        changes = {k: v for k, v in update.set_fields().items() if k not in skipped}
        if "tag_name" in changes:
            changes["tag_name"] = changes["tag_name"].upper()
        if "object_position" in changes:
            changes["transform_origin"] = changes["object_position"]
        if "height" in changes:
            changes["style_height"] = changes.pop("height")
        if "width" in changes:
            changes["style_width"] = changes.pop("width")
        return self.model_copy(update=changes)


class EditStatus(str, Enum):
    APPLIED = "applied"
    UNCHANGED = "unchanged"
    PARSE_FAILURE = "parse_failure"
    RESOLUTION_FAILURE = "resolution_failure"


class EditResult(BaseModel):
    """
    Outcome of one MutationEngine.apply call. `html` is always a complete document.

    `target` is the address of the edited element in the resulting document; it
    differs from `address` after a tag morph or an anchor wrap.
    """
    html: str
    status: EditStatus
    address: str = ""
    target: str = ""
    recovered: bool = False
    ignored_fields: List[str] = Field(default_factory=list)

    @property
    def ok(self) -> bool:
        return self.status in (EditStatus.APPLIED, EditStatus.UNCHANGED)

    @property
    def changed(self) -> bool:
        return self.status == EditStatus.APPLIED


class SizingMode(str, Enum):
    FIT = "fit"
    FILL = "fill"


UpdateLike = Union[ElementUpdate, Dict[str, Any]]
AddressLike = Union[Address, str]
