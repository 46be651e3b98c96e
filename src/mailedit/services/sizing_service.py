from __future__ import annotations

import logging

from mailedit.model import ElementUpdate, SelectionDescriptor, SizingMode

logger = logging.getLogger(__name__)


def _is_unsized(style_value: str | None) -> bool:
    return not style_value or style_value == "auto"


def sizing_update(mode: SizingMode | str, descriptor: SelectionDescriptor) -> ElementUpdate:
    """
    Builds the image-frame edit for a named sizing mode.

    Fit keeps the box at its rendered size and letterboxes the image (contain).
    Fill lets the height follow the image (auto) and crops to the box (cover).
    In both modes a dimension the operator has not sized yet is pinned to the
    rendered size measured before the edit.
    """
    mode = SizingMode(mode)
    fields: dict = {}

    if mode is SizingMode.FIT:
        fields["object_fit"] = "contain"
        if _is_unsized(descriptor.style_height) and descriptor.computed_height:
            fields["height"] = descriptor.computed_height
        if _is_unsized(descriptor.style_width) and descriptor.computed_width:
            fields["width"] = descriptor.computed_width
    else:
        fields["object_fit"] = "cover"
        fields["height"] = "auto"
        if _is_unsized(descriptor.style_width) and descriptor.computed_width:
            fields["width"] = descriptor.computed_width

    logger.debug("Sizing mode %s for %s -> %s", mode.value, descriptor.address, fields)
    return ElementUpdate(**fields)


def detect_sizing_mode(descriptor: SelectionDescriptor) -> SizingMode:
    """Reports which sizing mode the image currently reflects."""
    if descriptor.style_height == "auto":
        return SizingMode.FILL
    if not descriptor.style_height and descriptor.object_fit == "cover":
        return SizingMode.FILL
    return SizingMode.FIT
