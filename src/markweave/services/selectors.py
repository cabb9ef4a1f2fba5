"""Simple selector matching and the exclusion pass.

Only simple selectors are supported: a tag name, ``.class`` and ``#id``,
optionally compounded (``div.note#intro``). Combinators and attribute
selectors are not; such selectors are logged and match nothing.
"""

import logging
import re
from collections.abc import Iterable
from dataclasses import dataclass, field

from bs4 import BeautifulSoup, Tag

LOGGER = logging.getLogger(__name__)

# tag? then any number of .class / #id atoms
_SIMPLE_SELECTOR_RE = re.compile(r"^(?P<tag>[a-zA-Z][a-zA-Z0-9-]*|\*)?(?P<atoms>(?:[.#][\w-]+)*)$")
_ATOM_RE = re.compile(r"([.#])([\w-]+)")


@dataclass(frozen=True)
class SimpleSelector:
    """A compiled simple selector.

    Attributes:
        tag: Lower-cased tag name, or None for any tag
        classes: Class names that must all be present
        element_id: Required id, if any
    """

    tag: str | None = None
    classes: tuple[str, ...] = ()
    element_id: str | None = None

    def matches(self, node: Tag) -> bool:
        """Check whether the node satisfies every atom of this selector."""
        if self.tag is not None and (node.name or "").lower() != self.tag:
            return False
        if self.element_id is not None and node.get("id") != self.element_id:
            return False
        if self.classes:
            node_classes = class_list(node)
            if not all(c in node_classes for c in self.classes):
                return False
        return True


def class_list(node: Tag) -> list[str]:
    """Return the node's classes as a list, whatever form bs4 stored them in."""
    classes = node.get("class")
    if not classes:
        return []
    if isinstance(classes, str):
        return classes.split()
    return list(classes)


def compile_selector(selector: str) -> SimpleSelector | None:
    """Compile a selector string, returning None if it is not a simple selector.

    Args:
        selector: Selector such as ``nav``, ``.ad``, ``#sidebar`` or ``div.ad``

    Returns:
        Compiled selector, or None for unsupported forms
    """
    text = selector.strip()
    match = _SIMPLE_SELECTOR_RE.match(text) if text else None
    if match is None or not (match.group("tag") or match.group("atoms")):
        LOGGER.warning(f"Unsupported selector '{selector}' will match nothing")
        return None

    tag = match.group("tag")
    classes: list[str] = []
    element_id = None
    for kind, name in _ATOM_RE.findall(match.group("atoms")):
        if kind == ".":
            classes.append(name)
        elif element_id is None:
            element_id = name
        elif element_id != name:
            # Two different ids can never match the same element
            LOGGER.warning(f"Selector '{selector}' requires two ids and will match nothing")
            return None

    return SimpleSelector(
        tag=None if tag in (None, "*") else tag.lower(),
        classes=tuple(classes),
        element_id=element_id,
    )


def matches(node: Tag, selector: str) -> bool:
    """Check a single node against a single selector string.

    Args:
        node: Element to test
        selector: Simple selector string

    Returns:
        True if the node matches; unrecognised selectors match nothing
    """
    compiled = compile_selector(selector)
    return compiled is not None and compiled.matches(node)


def compile_selectors(selectors: Iterable[str]) -> list[SimpleSelector]:
    """Compile many selectors, dropping the ones that are not supported."""
    compiled = []
    for selector in sorted(selectors):
        result = compile_selector(selector)
        if result is not None:
            compiled.append(result)
    return compiled


@dataclass
class ExclusionMap:
    """Result of the exclusion pass.

    Nodes are tracked by identity for the lifetime of one conversion; the
    tree itself is never modified.

    Attributes:
        excluded: ids of nodes matching an exclude selector and no include selector
        included: ids of nodes matching an include selector
    """

    excluded: set[int] = field(default_factory=set)
    included: set[int] = field(default_factory=set)

    def is_excluded(self, node: Tag) -> bool:
        """True if the node itself is marked excluded."""
        return id(node) in self.excluded

    def is_included(self, node: Tag) -> bool:
        """True if the node itself is marked included."""
        return id(node) in self.included

    def __bool__(self) -> bool:
        return bool(self.excluded or self.included)


def annotate_exclusions(
    root: BeautifulSoup | Tag,
    exclude_selectors: Iterable[str],
    include_selectors: Iterable[str],
) -> ExclusionMap:
    """Mark every element of the tree as excluded or included.

    A single depth-first walk. An element matching any include selector is
    marked included and never excluded, whatever else it matches.

    Args:
        root: Parsed document or subtree
        exclude_selectors: Selectors for elements to drop
        include_selectors: Selectors for elements to keep regardless

    Returns:
        ExclusionMap annotation for the tree
    """
    exclude = compile_selectors(exclude_selectors)
    include = compile_selectors(include_selectors)
    annotation = ExclusionMap()
    if not exclude and not include:
        return annotation

    nodes = [root] if isinstance(root, Tag) and not isinstance(root, BeautifulSoup) else []
    nodes_iter = (n for n in (*nodes, *root.descendants) if isinstance(n, Tag))
    for node in nodes_iter:
        if any(sel.matches(node) for sel in include):
            annotation.included.add(id(node))
        elif any(sel.matches(node) for sel in exclude):
            annotation.excluded.add(id(node))

    LOGGER.debug(
        f"Exclusion pass marked {len(annotation.excluded)} excluded and {len(annotation.included)} included nodes"
    )
    return annotation
