"""
The store: a live accessible tree kept in sync with incoming snapshots.

A producer computes a fresh snapshot of the document's accessible tree and
hands it to the store. The first snapshot is registered as is; every later
snapshot is merged into the nodes the store already holds, so a node that
keeps its key keeps its object identity. While merging, the store keeps
the relation index, the grouping contexts, focus and the live-region alert
queue consistent with the tree.
"""

from __future__ import annotations

import logging
from collections.abc import Iterator

from .alerts import Alert, AlertQueue
from .contexts import ContextPropagator
from .errors import DuplicateIdentityError, InvariantViolation
from .focus import FocusTracker
from .models.context import RevealCallback
from .models.element import AomKey, AomNode, NodeElement, TextElement
from .reconcile import get_map, reconcile_child_list_order, reconcile_fields
from .relations import RelationIndex

logger = logging.getLogger(__name__)

# Plain fields copied from an incoming container node. A copied role can
# change the implied aria-live mode; contexts keep their registration-time roots.
SIMPLE_FIELDS = ("role", "is_hidden", "is_inline")


def _variant(element: AomNode) -> str:
    return "text" if isinstance(element, TextElement) else "node"


class Store:
    """Persisted accessible tree plus its indices, focus and alert state.

    The store is single threaded: each public call runs to completion and
    the tree is never observed half merged. Node objects returned by the
    store are shared and keep changing with later snapshots.

    Attributes:
        root: Persisted root node, None before the first registration
        relations: Index resolving id references between nodes
        contexts: Propagator assigning inherited context pointers
        focus_tracker: Owner of focus and active-descendant state
        alert_queue: Pending live-region announcements

    Example:
        >>> store = Store()
        >>> store.sync(first_snapshot)
        >>> store.sync(second_snapshot)
        >>> [alert.content for alert in store.alerts]
        ['Saved']
    """

    def __init__(self, on_reveal_cell: RevealCallback | None = None) -> None:
        """Initialize an empty store.

        Args:
            on_reveal_cell: Called with (table context, cell position) when
                focus or an active descendant lands in a table cell
        """
        self._key_to_element: dict[AomKey, AomNode] = {}
        self.root: AomNode | None = None
        self.relations = RelationIndex()
        self.contexts = ContextPropagator(on_reveal_cell)
        self.focus_tracker = FocusTracker()
        self.alert_queue = AlertQueue()

    # ------------------------------------------------------------------
    # Read access
    # ------------------------------------------------------------------

    def get_element(self, key: AomKey | None) -> AomNode | None:
        """Look up a registered node; unknown or empty keys give None."""
        if not key:
            return None
        return self._key_to_element.get(key)

    @property
    def alerts(self) -> list[Alert]:
        """The live alert list, most urgent first."""
        return self.alert_queue.alerts

    @property
    def focused_node(self) -> NodeElement | None:
        return self.focus_tracker.focused

    @property
    def active_descendant_node(self) -> NodeElement | None:
        return self.focus_tracker.active_descendant

    def iter_elements(self) -> Iterator[AomNode]:
        yield from self._key_to_element.values()

    def __contains__(self, key: object) -> bool:
        return key in self._key_to_element

    def __len__(self) -> int:
        return len(self._key_to_element)

    # ------------------------------------------------------------------
    # Synchronization
    # ------------------------------------------------------------------

    def sync(self, snapshot: AomNode) -> AomNode:
        """Bring the store in line with a complete snapshot.

        Registers the first snapshot, merges later ones into the persisted
        root, and replaces the root when the snapshot's root key changed.

        Returns:
            The persisted root
        """
        if self.root is not None and self.root.key == snapshot.key:
            self.update(snapshot)
            return self.root

        if self.root is not None:
            logger.debug("Root changed from %s to %s", self.root.key, snapshot.key)
            self.unregister(self.root)
        self.register(snapshot)
        self.root = snapshot
        return snapshot

    def register(self, element: AomNode | None) -> AomNode | None:
        """Insert a brand-new subtree into the store.

        The incoming objects become the persisted nodes. Relations,
        contexts, focus and alerts are derived for every container node,
        parents before children.

        Args:
            element: Root of the subtree to register

        Returns:
            The registered element

        Raises:
            DuplicateIdentityError: If a key of the subtree is already
                registered or repeats inside the subtree. Nothing is
                registered in that case.
        """
        if element is None:
            return None

        self._check_new_keys(element)
        if self.root is None and element.parent is None:
            self.root = element
        self._register(element)
        return element

    def update(self, update: AomNode, visited: set[AomKey] | None = None) -> None:
        """Merge a snapshot into the registered node with the same key.

        Unknown keys are ignored. Each node is merged at most once per
        top-level call; ``visited`` carries the keys already merged.

        Args:
            update: Incoming snapshot of a registered node
            visited: Keys already merged during this synchronization

        Raises:
            InvariantViolation: If the snapshot switches the node between
                container and text
            DuplicateIdentityError: If a newly introduced child reuses a key
                that cannot be released (such as an ancestor's)
        """
        if visited is None:
            visited = set()

        element = self.get_element(update.key)
        if element is None:
            logger.debug("Ignoring update of unknown element %s", update.key)
            return
        if element.key in visited:
            return

        if isinstance(element, TextElement) and isinstance(update, TextElement):
            visited.add(element.key)
            reconcile_fields(element, update, ("text",))
            parent = element.aria_parent
            live = parent.relations.aria_live_context if parent is not None else None
            if live is not None and live.root is not None:
                self.add_active_alarm(live.root)
            return

        if not isinstance(element, NodeElement) or not isinstance(update, NodeElement):
            logger.warning("Element %s changed variant in snapshot", element.key)
            raise InvariantViolation(element.key, _variant(element), _variant(update))

        visited.add(element.key)
        self.relations.update_references(element, element.attributes, update.attributes)
        reconcile_fields(element, update, SIMPLE_FIELDS)
        reconcile_fields(element.get_raw_attributes(), update.get_raw_attributes())
        reconcile_fields(element.get_raw_properties(), update.get_raw_properties())

        self._reconcile_children(element, update, visited)

        live = element.relations.aria_live_context
        if live is not None and live.root is not None:
            self.add_active_alarm(live.root)

        if update.is_focused:
            self.focus(element)

    def unregister(self, element: AomNode | None) -> None:
        """Remove a node and its subtree from the store.

        Clears relation memberships, context pointers, pending alerts and
        focus for every node of the subtree. Unknown or None elements are
        ignored, so calling this twice is harmless.
        """
        if element is None:
            return

        node = self._key_to_element.get(element.key)
        if node is None:
            return

        if isinstance(node, NodeElement):
            self.alert_queue.clear_active_alarm(node)
            self.relations.update_references(node, node.attributes, None)
            self.contexts.release(node)

            for child in list(node.children):
                self.unregister(child)

            self.focus_tracker.forget(node)

        del self._key_to_element[node.key]
        if node is self.root:
            self.root = None
        logger.debug("Unregistered %s", node.key)

    # ------------------------------------------------------------------
    # Focus and alerts
    # ------------------------------------------------------------------

    def focus(self, element: AomNode | None) -> None:
        """Move focus to a registered node, or clear it with None."""
        self.focus_tracker.focus(element)

    def add_active_alarm(self, root: NodeElement) -> Alert | None:
        return self.alert_queue.add_active_alarm(root)

    def clear_active_alarm(self, node: NodeElement) -> bool:
        return self.alert_queue.clear_active_alarm(node)

    # ------------------------------------------------------------------
    # Internals
    # ------------------------------------------------------------------

    def _register(self, element: AomNode) -> None:
        self._key_to_element[element.key] = element
        if not isinstance(element, NodeElement):
            return

        self.relations.update_references(element, None, element.attributes)
        self.contexts.propagate(element)

        for child in list(element.children):
            if child is None:
                continue
            child.parent = element
            self._register(child)

        if element.is_focused:
            self.focus(element)

        live = element.relations.aria_live_context
        if live is not None and live.root is not None:
            self.add_active_alarm(live.root)

    def _check_new_keys(self, element: AomNode) -> None:
        """Reject a subtree that reuses a registered key or repeats one."""
        seen: set[AomKey] = set()
        pending: list[AomNode] = [element]
        while pending:
            node = pending.pop()
            if node.key in self._key_to_element or node.key in seen:
                logger.warning("Duplicated element in register: %s", node.key)
                raise DuplicateIdentityError(node.key)
            seen.add(node.key)
            pending.extend(child for child in node.children if child is not None)

    def _reconcile_children(
        self,
        element: NodeElement,
        update: NodeElement,
        visited: set[AomKey],
    ) -> None:
        target_map = get_map(element.children)
        source_map = get_map(update.children)

        # Children first, then the parent link, so focus and alert
        # cleanup still see the real ancestors.
        for key, node in target_map.items():
            if key not in source_map:
                self.unregister(node)
                node.parent = None

        for key, node in source_map.items():
            if key in target_map:
                self.update(node, visited)
            else:
                self._release_moved(node, element)
                node.parent = element
                self.register(node)

        reconcile_child_list_order(element.children, update.children, self.get_element)

    def _release_moved(self, incoming: AomNode, new_parent: NodeElement) -> None:
        """Drop stale nodes whose keys reappear in a newly introduced subtree.

        A node that moved to another parent is destroyed at its old place
        and registered again from the incoming snapshot.
        """
        ancestors = {node.key for node in _markup_ancestors(new_parent)}
        pending: list[AomNode] = [incoming]
        while pending:
            node = pending.pop()
            stale = self._key_to_element.get(node.key)
            if stale is not None and stale is not node and stale.key not in ancestors:
                logger.debug("Element %s moved under %s", stale.key, new_parent.key)
                old_parent = stale.parent
                self.unregister(stale)
                if old_parent is not None:
                    old_parent.remove_child(stale)
                stale.parent = None
            pending.extend(child for child in node.children if child is not None)


def _markup_ancestors(node: NodeElement) -> Iterator[NodeElement]:
    seen: set[int] = set()
    current: NodeElement | None = node
    while current is not None and id(current) not in seen:
        seen.add(id(current))
        yield current
        current = current.parent
