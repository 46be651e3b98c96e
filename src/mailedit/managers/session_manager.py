# src/mailedit/managers/session_manager.py
import logging
from enum import Enum
from typing import Optional

from pydantic import ValidationError

from mailedit.dom.engine import MutationEngine
from mailedit.model import (
    AddressLike,
    EditResult,
    EditStatus,
    RenderedBox,
    SelectionDescriptor,
    SizingMode,
    UpdateLike,
    ElementUpdate,
)
from mailedit.services.sizing_service import sizing_update

logger = logging.getLogger(__name__)


class ReselectPolicy(str, Enum):
    """What `select` does when a selection is already open."""
    REJECT = "reject"      # require save() or cancel() first
    RESTORE = "restore"    # roll back the open selection, then open the new one
    ABANDON = "abandon"    # keep unsaved edits in the working copy, drop the old snapshot


class EditSession:
    """
    Holds one document being edited and at most one open selection.

    Selecting an element snapshots the document text. Edits go to the working copy so
    their effect accumulates; cancel() puts the snapshot back verbatim, save() keeps the
    working copy and forgets the snapshot.
    """

    def __init__(
            self,
            html: str,
            engine: Optional[MutationEngine] = None,
            reselect_policy: ReselectPolicy = ReselectPolicy.REJECT,
    ):
        self.engine = engine or MutationEngine()
        self.reselect_policy = ReselectPolicy(reselect_policy)
        self.document: str = html
        self.snapshot: Optional[str] = None
        self.selection: Optional[SelectionDescriptor] = None

    @property
    def is_open(self) -> bool:
        return self.snapshot is not None

    @property
    def is_dirty(self) -> bool:
        return self.is_open and self.document != self.snapshot

    def select(self, address: AddressLike, rendered: Optional[RenderedBox] = None) -> Optional[SelectionDescriptor]:
        """
        Opens a selection on the element at `address`.

        Returns:
            Optional[SelectionDescriptor]: The element's state, or None when the address
                                           does not resolve or the open selection blocks it.
        """
        if self.is_open:
            if self.reselect_policy is ReselectPolicy.REJECT:
                logger.warning(
                    "Selection '%s' is still open; save or cancel it before selecting '%s'.",
                    self.selection.address if self.selection else "?", address
                )
                return None
            if self.reselect_policy is ReselectPolicy.RESTORE:
                logger.info("Restoring snapshot before opening a new selection.")
                self.document = self.snapshot
            else:
                logger.info("Abandoning open selection; unsaved edits stay in the working copy.")
            self._close()

        descriptor = self.engine.extract(self.document, address, rendered)
        if descriptor is None:
            logger.warning("Nothing to select at '%s'.", address)
            return None

        self.snapshot = self.document
        self.selection = descriptor
        logger.debug("Opened selection on <%s> at '%s'.", descriptor.tag_name, descriptor.address)
        return descriptor

    def update(self, update: UpdateLike) -> EditResult:
        """Applies a partial edit to the selected element in the working copy."""
        if not self.is_open or self.selection is None:
            logger.warning("No open selection; edit ignored.")
            return EditResult(html=self.document, status=EditStatus.RESOLUTION_FAILURE)

        if not isinstance(update, ElementUpdate):
            try:
                update = ElementUpdate.model_validate(update)
            except ValidationError as e:
                logger.error("Invalid edit for '%s': %s", self.selection.address, e)
                return EditResult(html=self.document, status=EditStatus.PARSE_FAILURE, address=self.selection.address)

        result = self.engine.apply(self.document, self.selection.address, update)
        if result.ok:
            self.document = result.html
            # A morph or an anchor wrap moves the element; follow it.
            self.selection = self.selection.merge(update, exclude=result.ignored_fields).model_copy(
                update={"address": result.target or self.selection.address}
            )
        else:
            logger.warning("Edit at '%s' failed: %s", self.selection.address, result.status.value)
        return result

    def apply_sizing(self, mode: SizingMode) -> EditResult:
        """Applies the Fit or Fill composite to the selected image."""
        if self.selection is None:
            logger.warning("No open selection; sizing ignored.")
            return EditResult(html=self.document, status=EditStatus.RESOLUTION_FAILURE)
        return self.update(sizing_update(mode, self.selection))

    def cancel(self) -> str:
        """Discards the working copy and restores the snapshot taken at selection time."""
        if self.snapshot is not None:
            self.document = self.snapshot
        self._close()
        return self.document

    def save(self) -> str:
        """Keeps the working copy and drops the snapshot. Returns the text to persist."""
        self._close()
        return self.document

    def _close(self) -> None:
        self.snapshot = None
        self.selection = None
