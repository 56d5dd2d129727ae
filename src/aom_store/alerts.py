"""
Queue of live-region announcements.

Alerts are derived from the tree: whenever a live region's content may
have changed, the store recomputes the region's text and offers it to the
queue. Assertive regions interrupt everything queued, polite regions wait
their turn.
"""

from __future__ import annotations

import logging
from collections.abc import Iterator
from dataclasses import dataclass

from .constants import LIVE_ASSERTIVE, LIVE_POLITE
from .models.element import AomKey, NodeElement

logger = logging.getLogger(__name__)


@dataclass(frozen=True)
class Alert:
    """A pending announcement.

    Attributes:
        source: Live-region root that produced the alert
        mode: "assertive" or "polite"
        content: Text to announce
    """

    source: NodeElement
    mode: str
    content: str

    @property
    def source_key(self) -> AomKey:
        return self.source.key


def region_text(root: NodeElement) -> str:
    """Join the accessible names of a region's children into one string."""
    return " ".join(child.accessible_name or "" for child in root.children).strip()


class AlertQueue:
    """Ordered list of alerts that are currently worth announcing."""

    def __init__(self) -> None:
        self.alerts: list[Alert] = []

    def add_active_alarm(self, root: NodeElement) -> Alert | None:
        """Offer the current content of a live region to the queue.

        Empty content is ignored, and so is content identical to the alert
        already leading the queue for the same region. Otherwise the
        region's previous alert is dropped, then an assertive alert
        replaces the whole queue while a polite one is appended.

        Args:
            root: Root node of the live region

        Returns:
            The alert that was queued, or None
        """
        content = region_text(root)
        if not content:
            return None

        leading = self.alerts[0] if self.alerts else None
        if leading is not None and leading.source_key == root.key and leading.content == content:
            logger.debug("Suppressing repeated alert from %s", root.key)
            return None

        self.clear_active_alarm(root)

        mode = root.attributes.aria_live
        alert = Alert(source=root, mode=mode, content=content)
        if mode == LIVE_ASSERTIVE:
            self.alerts[:] = [alert]
        elif mode == LIVE_POLITE:
            self.alerts.append(alert)
        else:
            return None

        logger.debug("Queued %s alert from %s: %r", mode, root.key, content)
        return alert

    def clear_active_alarm(self, node: NodeElement) -> bool:
        """Remove the first alert sourced from a node.

        Returns:
            True if an alert was removed
        """
        for index, alert in enumerate(self.alerts):
            if alert.source_key == node.key:
                del self.alerts[index]
                return True
        return False

    def clear(self) -> None:
        self.alerts.clear()

    def __iter__(self) -> Iterator[Alert]:
        return iter(self.alerts)

    def __len__(self) -> int:
        return len(self.alerts)

    def __getitem__(self, index: int) -> Alert:
        return self.alerts[index]
