"""
Top-down propagation of grouping contexts.

Every container node gets one pointer per context kind: the enclosing
form, label, fieldset, live region and table. Pointers are computed once
when the node is registered, from its already registered parent, and stay
put until the node is unregistered.
"""

from __future__ import annotations

from .constants import (
    FIELDSET_MEMBER_TAGS,
    FIELDSET_TAG,
    FORM_MEMBER_TAGS,
    FORM_TAG,
    LABEL_MEMBER_TAGS,
    LABEL_TAG,
    LIVE_OFF,
    TABLE_TAG,
)
from .models.context import (
    AriaTableContext,
    Context,
    HtmlTableContext,
    RevealCallback,
    is_table_root,
)
from .models.element import NodeElement

# (relations field, root tag, member tags) for the plain grouping contexts
GROUPING_CONTEXTS: tuple[tuple[str, str, tuple[str, ...]], ...] = (
    ("form_context", FORM_TAG, FORM_MEMBER_TAGS),
    ("label_context", LABEL_TAG, LABEL_MEMBER_TAGS),
    ("fieldset_context", FIELDSET_TAG, FIELDSET_MEMBER_TAGS),
)


class ContextPropagator:
    """Assigns and releases the context pointers of container nodes.

    Args:
        on_reveal: Callback handed to every table context created here
    """

    def __init__(self, on_reveal: RevealCallback | None = None) -> None:
        self.on_reveal = on_reveal

    def propagate(self, node: NodeElement) -> None:
        """Set every context pointer of a node from its parent.

        The parent must already have been propagated; registration is
        top-down, so this always holds inside the store.
        """
        for name, root_tag, member_tags in GROUPING_CONTEXTS:
            self._set_context(node, name, root_tag, member_tags)
        self._set_aria_live_context(node)
        self._set_table_context(node)

    def release(self, node: NodeElement) -> None:
        """Drop a node from the contexts it joined and clear its pointers."""
        for context in node.relations.iter_contexts():
            context.remove_member(node)
        node.relations.clear_contexts()

    def _set_context(
        self,
        node: NodeElement,
        name: str,
        root_tag: str,
        member_tags: tuple[str, ...],
    ) -> None:
        parent = node.parent
        if node.tag == root_tag:
            context = Context(node)
        elif parent is None:
            # Tree roots get an empty context instead of none at all
            context = Context(None)
        else:
            context = getattr(parent.relations, name)
        setattr(node.relations, name, context)

        if context is not None and node.tag in member_tags:
            context.add_member(node)

    def _set_aria_live_context(self, node: NodeElement) -> None:
        parent = node.parent
        if node.attributes.aria_live != LIVE_OFF:
            node.relations.aria_live_context = Context(node)
        elif parent is not None:
            node.relations.aria_live_context = parent.relations.aria_live_context

    def _set_table_context(self, node: NodeElement) -> None:
        parent = node.parent
        if node.tag == TABLE_TAG:
            node.relations.table_context = HtmlTableContext(node, self.on_reveal)
        elif is_table_root(node):
            node.relations.table_context = AriaTableContext(node, self.on_reveal)
        elif parent is not None:
            node.relations.table_context = parent.relations.table_context
