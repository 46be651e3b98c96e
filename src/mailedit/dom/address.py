# src/mailedit/dom/address.py
import logging
from typing import Iterator, List, Optional, Tuple, Union

from bs4 import BeautifulSoup, Tag

from ..model import Address, AddressStep

logger = logging.getLogger(__name__)

ParentLike = Union[BeautifulSoup, Tag]


class AddressCodec:
    """
    Converts elements to positional addresses and back.

    A path address lists (tag, ordinal) steps from the content root (<body>, or the
    whole document for fragments) to the element. The ordinal is 1-based and only
    counts preceding siblings with the same tag, so two siblings never share a step.
    Elements carrying a non-empty id are addressed by that id instead.
    """

    def __init__(self, id_attribute: str = "id"):
        self.id_attribute = id_attribute

    @staticmethod
    def content_root(soup: BeautifulSoup) -> ParentLike:
        """Returns the <body> element, or the document itself when there is none."""
        return soup.body if soup.body is not None else soup

    @staticmethod
    def ordinal(node: Tag) -> int:
        return len(node.find_previous_siblings(node.name)) + 1

    def encode(self, node: Tag, root: Optional[ParentLike] = None) -> Address:
        """
        Computes the address of `node`.

        Args:
            node (Tag): The element to name.
            root (Optional[Tag]): The rendering root. The walk also stops at <body>
                                  or at the document when no root is given.

        Returns:
            Address: Empty for the root itself, an identifier address when the node
                     has an id, otherwise the ancestor-to-descendant path.
        """
        if node is root:
            return Address()

        identifier = node.get(self.id_attribute)
        if isinstance(identifier, str) and identifier != "" and Address.can_name(identifier):
            return Address(identifier=identifier)

        steps: List[AddressStep] = []
        current: Tag = node
        while True:
            steps.append(AddressStep(tag=current.name, ordinal=self.ordinal(current)))
            parent = current.parent
            if (
                    parent is None
                    or parent is root
                    or isinstance(parent, BeautifulSoup)
                    or parent.name == "body"
            ):
                break
            current = parent

        steps.reverse()
        return Address(steps=steps)

    @staticmethod
    def decode(text: str) -> Address:
        """Parses an address string. Raises ValueError on malformed input."""
        return Address.parse(text)

    def resolve(self, address: Address, soup: BeautifulSoup) -> Optional[Tag]:
        """Maps an address to the element it names in `soup`, or None."""
        if address.is_identifier:
            if not address.identifier:
                return None
            return soup.find(attrs={self.id_attribute: address.identifier})

        return self.walk(self.content_root(soup), address.steps)

    @staticmethod
    def child_at(parent: ParentLike, step: AddressStep) -> Optional[Tag]:
        """Returns the `ordinal`-th direct child of `parent` with the step's tag."""
        matches = parent.find_all(step.tag, recursive=False)
        if step.ordinal > len(matches):
            return None
        return matches[step.ordinal - 1]

    def walk(self, start: ParentLike, steps: List[AddressStep]) -> Optional[ParentLike]:
        current: Optional[ParentLike] = start
        for step in steps:
            current = self.child_at(current, step)
            if current is None:
                return None
        return current

    def iter_addresses(self, soup: BeautifulSoup) -> Iterator[Tuple[Address, Tag]]:
        """Yields (address, element) for every element under the content root, in document order."""
        root = self.content_root(soup)
        for tag in root.find_all(True):
            yield self.encode(tag, root), tag
