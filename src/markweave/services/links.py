"""Reference-style link collection."""

import logging
from dataclasses import dataclass

from markweave.services.escaping import escape_title

LOGGER = logging.getLogger(__name__)


@dataclass(frozen=True)
class LinkReference:
    """One entry of the reference appendix.

    Attributes:
        id: Reference number, assigned from 1 in first-seen order
        url: Resolved and encoded target URL
        title: Title from the first link that registered this URL
    """

    id: int
    url: str
    title: str | None = None

    def definition(self) -> str:
        """Reference definition line, e.g. ``[1]: https://example.com "Title"``."""
        if self.title:
            return f'[{self.id}]: {self.url} "{escape_title(self.title)}"'
        return f"[{self.id}]: {self.url}"


class LinkReferenceTable:
    """URL-keyed, insertion-ordered reference table for one conversion."""

    def __init__(self) -> None:
        self._by_url: dict[str, LinkReference] = {}

    def register(self, url: str, title: str | None = None) -> int:
        """Return the reference id for a URL, registering it on first sight.

        Args:
            url: Normalised link target
            title: Optional title; ignored when the URL is already registered

        Returns:
            Reference id
        """
        existing = self._by_url.get(url)
        if existing is not None:
            return existing.id
        reference = LinkReference(id=len(self._by_url) + 1, url=url, title=title or None)
        self._by_url[url] = reference
        LOGGER.debug(f"Registered link reference [{reference.id}] for {url}")
        return reference.id

    def references(self) -> list[LinkReference]:
        """All references in id order."""
        return list(self._by_url.values())

    def render(self) -> str:
        """Reference appendix, one definition per line."""
        return "\n".join(ref.definition() for ref in self._by_url.values())

    def __len__(self) -> int:
        return len(self._by_url)
