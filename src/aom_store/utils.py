"""
Small helpers for consumers that display the accessible tree.
"""

from __future__ import annotations

from collections.abc import Iterable, Sequence

from .constants import BODY_TAG, INPUT_TAG, SECTIONING_TAGS, TAGS_WITH_NULL_ROLE_MAPPING
from .models.element import AomNode, NodeElement, TextElement


def trim_string(text: str | None, max_length: int) -> str:
    """Shorten text to fit ``max_length`` characters, ending with an ellipsis."""
    if not text:
        return ""
    if len(text) > max_length - 3:
        return text[: max_length - 3] + "..."
    return text


def trim_start(elements: Sequence[AomNode]) -> list[AomNode] | None:
    """Drop leading whitespace from a run of sibling nodes.

    Blank leading text nodes are skipped and the first non-blank text node
    is replaced by a copy without its leading whitespace. Persisted nodes
    are never modified.

    Returns:
        The trimmed run, or None when every node is blank text
    """
    for index, element in enumerate(elements):
        if not isinstance(element, TextElement):
            return list(elements[index:])

        stripped = element.text.lstrip()
        if stripped:
            first = TextElement(key=element.key, text=stripped)
            first.parent = element.parent
            return [first, *elements[index + 1 :]]

    return None


def find_descendant_input(nodes: Iterable[AomNode]) -> NodeElement | None:
    """Depth-first search for the first <input> among nodes and their descendants."""
    for node in nodes:
        if not isinstance(node, NodeElement):
            continue
        if node.tag == INPUT_TAG:
            return node
        found = find_descendant_input(node.children)
        if found is not None:
            return found
    return None


def has_empty_role_mapping(tag: str) -> bool:
    """Check whether a markup tag maps to no ARIA role at all."""
    return tag.lower() in TAGS_WITH_NULL_ROLE_MAPPING


def is_root_landmark(node: NodeElement) -> bool:
    """Check whether a landmark (banner, contentinfo, ...) is scoped to the page.

    A node is page scoped unless a sectioning element sits between it and
    <body>.
    """
    ancestor = node.parent
    while ancestor is not None:
        if ancestor.tag == BODY_TAG:
            return True
        if ancestor.tag in SECTIONING_TAGS:
            return False
        ancestor = ancestor.parent
    return True
