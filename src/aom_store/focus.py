"""
Focus and active-descendant tracking.

The tracker owns the single focused node of a store, mirrors it into the
``is_focused`` / ``contains_focus`` flags along the ancestor chain, and
asks table contexts to reveal the cells that focus lands in.
"""

from __future__ import annotations

import logging
from enum import Enum, auto

from .models.element import AomNode, NodeElement

logger = logging.getLogger(__name__)


class FocusState(Enum):
    """Phase of a focus transition."""

    IDLE = auto()
    CLEARING = auto()
    SETTING = auto()


class FocusTracker:
    """Holds at most one focused node and one active descendant.

    A focus transition runs IDLE -> CLEARING -> SETTING -> IDLE. Calls that
    arrive while a transition is running (for instance from a reveal
    callback, or from unregistering the node being defocused) are ignored,
    so a transition never recurses into itself.

    Attributes:
        focused: Node currently holding focus
        active_descendant: Active descendant of the focused node
        state: Current transition phase
    """

    def __init__(self) -> None:
        self.focused: NodeElement | None = None
        self.active_descendant: NodeElement | None = None
        self.state = FocusState.IDLE
        self._focus_chain: list[NodeElement] = []

    def focus(self, element: AomNode | None) -> None:
        """Move focus to a container node, or clear it with None.

        Text nodes cannot hold focus: passing one only clears the
        previous focus. Focusing the focused node again re-marks its
        ancestors, so the chain follows aria-owns changes.
        """
        if self.state is not FocusState.IDLE:
            logger.debug("Ignoring focus request during %s", self.state.name)
            return

        try:
            previous = self.focused
            if previous is not None:
                self.state = FocusState.CLEARING
                self._clear_chain()
                if previous is not element:
                    previous.is_focused = False
                    self.focused = None

            if isinstance(element, NodeElement):
                self.state = FocusState.SETTING
                moved = self.focused is not element
                element.is_focused = True
                self.focused = element
                # Cleared later from this list, not by walking aria_parent again
                self._focus_chain = list(element.iter_ancestors())
                for node in self._focus_chain:
                    node.contains_focus = True
                    if moved and node.relations.table_context is not None:
                        node.relations.table_context.show_cell_with_node(node)
                if moved:
                    logger.debug("Focused %s", element.key)

            self._update_active_descendant()
        finally:
            self.state = FocusState.IDLE

    def _clear_chain(self) -> None:
        for node in self._focus_chain:
            node.contains_focus = False
        self._focus_chain = []

    def forget(self, node: NodeElement) -> None:
        """Drop every reference to a node that is being destroyed."""
        if self.focused is node:
            self.focus(None)
        if self.active_descendant is node:
            self.active_descendant = None

    def _update_active_descendant(self) -> None:
        if self.focused is None:
            return

        descendants = self.focused.relations.aria_active_descendants
        active = descendants[0] if descendants else None
        if active is None or active is self.active_descendant:
            return

        if active.relations.table_context is not None:
            active.relations.table_context.show_cell_with_node(active)
        self.active_descendant = active
        logger.debug("Active descendant of %s is %s", self.focused.key, active.key)
