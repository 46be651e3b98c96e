# src/mailedit/dom/resolver.py
import logging
from dataclasses import dataclass
from typing import Optional

from bs4 import BeautifulSoup, Tag

from .address import AddressCodec
from ..model import Address

logger = logging.getLogger(__name__)


@dataclass
class Resolution:
    """Result of resolving an address: the element (if any) and whether recovery was needed."""
    node: Optional[Tag]
    recovered: bool = False

    @property
    def found(self) -> bool:
        return self.node is not None


class NodeResolver:
    """
    Locates the element named by an address in a freshly parsed document.

    When the direct lookup fails, exactly one retry is made that assumes a previous
    edit wrapped the target in a new <a> element: the final step is looked up inside
    each wrapper child of the parent level, first match in document order wins.
    """

    def __init__(self, codec: Optional[AddressCodec] = None, wrapper_tag: str = "a"):
        self.codec = codec or AddressCodec()
        self.wrapper_tag = wrapper_tag

    def resolve(self, address: Address, soup: BeautifulSoup) -> Resolution:
        node = self._as_element(self.codec.resolve(address, soup))
        if node is not None:
            return Resolution(node=node)

        if address.is_identifier or not address.steps:
            logger.warning("Could not resolve address '%s'.", address)
            return Resolution(node=None)

        node = self._recover(address, soup)
        if node is None:
            logger.warning(
                "Could not resolve address '%s' (retry via '%s' also failed).",
                address, address.with_wrapper(self.wrapper_tag)
            )
            return Resolution(node=None)

        logger.info("Resolved '%s' through a <%s> wrapper.", address, self.wrapper_tag)
        return Resolution(node=node, recovered=True)

    def _recover(self, address: Address, soup: BeautifulSoup) -> Optional[Tag]:
        parent = self.codec.walk(self.codec.content_root(soup), address.steps[:-1])
        if parent is None:
            return None

        last = address.steps[-1]
        for wrapper in parent.find_all(self.wrapper_tag, recursive=False):
            node = self.codec.child_at(wrapper, last)
            if node is not None:
                return node
        return None

    @staticmethod
    def _as_element(node: Optional[Tag]) -> Optional[Tag]:
        # The document object is never an edit target.
        if node is None or isinstance(node, BeautifulSoup):
            return None
        return node
