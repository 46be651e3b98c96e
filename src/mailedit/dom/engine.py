# src/mailedit/dom/engine.py
import logging
from typing import Optional

from bs4 import BeautifulSoup
from pydantic import ValidationError

from .address import AddressCodec
from .applicator import EditApplicator
from .extractor import SelectionExtractor
from .resolver import NodeResolver
from ..model import (
    Address,
    AddressLike,
    EditResult,
    EditStatus,
    ElementUpdate,
    RenderedBox,
    SelectionDescriptor,
    UpdateLike,
)

logger = logging.getLogger(__name__)


class MutationEngine:
    """
    Entry point for editing an HTML document by address.

    Every call parses the text afresh, resolves the address, applies the edit and
    serializes the whole document. No tree or node handle outlives a call. Failures
    never raise: the caller gets the original text back plus a status saying why.
    """

    def __init__(
            self,
            parser: str = "html.parser",
            id_attribute: str = "id",
            wrapper_tag: str = "a",
    ):
        self.parser = parser
        self.codec = AddressCodec(id_attribute=id_attribute)
        self.resolver = NodeResolver(self.codec, wrapper_tag=wrapper_tag)
        self.applicator = EditApplicator(wrapper_tag=wrapper_tag)
        self.extractor = SelectionExtractor()

    def parse(self, html: str) -> BeautifulSoup:
        if not isinstance(html, str):
            raise TypeError(f"Expected HTML text, got {type(html).__name__}")
        return BeautifulSoup(html, self.parser)

    def apply(self, html: str, address: AddressLike, update: UpdateLike) -> EditResult:
        """
        Applies one edit to the element at `address`.

        Args:
            html (str): The complete document text.
            address (Address | str): Path or identifier address of the target.
            update (ElementUpdate | dict): The fields to change.

        Returns:
            EditResult: The full resulting document and a status. On any failure
                        `html` is the input text, unchanged.
        """
        address_text = str(address)
        if not isinstance(html, str):
            logger.error("Expected HTML text, got %s; nothing to edit.", type(html).__name__)
            return EditResult(html="", status=EditStatus.PARSE_FAILURE, address=address_text)

        try:
            addr = address if isinstance(address, Address) else Address.parse(address)
        except (ValueError, TypeError) as e:
            logger.warning("Malformed address %r: %s", address, e)
            return EditResult(html=html, status=EditStatus.RESOLUTION_FAILURE, address=address_text)

        try:
            edit = update if isinstance(update, ElementUpdate) else ElementUpdate.model_validate(update)
        except ValidationError as e:
            logger.error("Invalid edit for '%s': %s", addr, e)
            return EditResult(html=html, status=EditStatus.PARSE_FAILURE, address=address_text)

        try:
            soup = self.parse(html)
            resolution = self.resolver.resolve(addr, soup)
            if not resolution.found:
                return EditResult(html=html, status=EditStatus.RESOLUTION_FAILURE, address=address_text)

            applied = self.applicator.apply(resolution.node, edit, soup)
            status = EditStatus.APPLIED if applied.changed else EditStatus.UNCHANGED
            output = str(soup) if applied.changed else html
            target = self.codec.encode(applied.node, self.codec.content_root(soup))
        except Exception as e:
            logger.error("Failed to update HTML at '%s': %s", addr, e, exc_info=True)
            return EditResult(html=html, status=EditStatus.PARSE_FAILURE, address=address_text)

        if applied.changed:
            logger.debug("Applied %s at '%s'.", sorted(edit.set_fields()), addr)

        return EditResult(
            html=output,
            status=status,
            address=address_text,
            target=str(target),
            recovered=resolution.recovered,
            ignored_fields=applied.ignored_fields,
        )

    def extract(
            self,
            html: str,
            address: AddressLike,
            rendered: Optional[RenderedBox] = None,
    ) -> Optional[SelectionDescriptor]:
        """Reads the editable state of the element at `address`; None if it cannot be found."""
        try:
            addr = address if isinstance(address, Address) else Address.parse(address)
            soup = self.parse(html)
        except (ValueError, TypeError) as e:
            logger.warning("Cannot read selection at %r: %s", address, e)
            return None

        resolution = self.resolver.resolve(addr, soup)
        if not resolution.found:
            return None
        return self.extractor.extract(resolution.node, addr, rendered)

    def address_of(self, html: str, predicate) -> Optional[Address]:
        """Returns the address of the first element for which `predicate(tag)` is true."""
        soup = self.parse(html)
        for address, tag in self.codec.iter_addresses(soup):
            if predicate(tag):
                return address
        return None


def update_html(html: str, address: AddressLike, update: UpdateLike) -> str:
    """Applies one edit with default settings and returns only the resulting text."""
    return MutationEngine().apply(html, address, update).html
