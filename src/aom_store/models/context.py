"""
Grouping contexts inherited down the accessible tree.

A context is anchored at a root node (the nearest enclosing form, label,
fieldset, live region or table) and collects the member descendants that
registered into it. Table contexts additionally know their row and cell
geometry so focus changes can ask them to reveal a cell.
"""

from __future__ import annotations

import logging
from collections.abc import Callable
from dataclasses import dataclass

from ..constants import (
    ARIA_CELL_ROLES,
    ARIA_ROW_ROLES,
    ARIA_TABLE_ROLES,
    HTML_CELL_TAGS,
    HTML_ROW_TAGS,
    TABLE_TAG,
)
from .element import NodeElement

logger = logging.getLogger(__name__)


class Context:
    """A root node plus the ordered members registered under it.

    The root is None for the empty context handed to a tree root that is
    not itself a context root.

    Attributes:
        root: Node that starts the context
        members: Member descendants in registration order
    """

    def __init__(self, root: NodeElement | None) -> None:
        self.root = root
        self.members: list[NodeElement] = []

    def add_member(self, node: NodeElement) -> None:
        self.members.append(node)

    def remove_member(self, node: NodeElement) -> bool:
        """Remove a member by identity.

        Returns:
            True if the node was a member
        """
        for index, member in enumerate(self.members):
            if member is node:
                del self.members[index]
                return True
        return False

    def __repr__(self) -> str:
        root = self.root.key if self.root is not None else None
        return f"{type(self).__name__}(root={root!r}, members={len(self.members)})"


@dataclass(frozen=True)
class CellPosition:
    """Zero-based grid coordinates of a table cell."""

    row: int
    column: int


RevealCallback = Callable[["TableContext", CellPosition], None]


def is_table_root(node: NodeElement) -> bool:
    """Check whether a node starts a table context (HTML table or ARIA grid)."""
    return node.tag == TABLE_TAG or node.role in ARIA_TABLE_ROLES


class TableContext(Context):
    """Context of a table-like subtree that can reveal one of its cells.

    Subclasses decide which nodes are rows and cells. Geometry is computed
    from the current children of the root on every request, so it follows
    reconciliation without bookkeeping. Revealing a cell records it in
    ``visible_cell`` and notifies ``on_reveal``, the hook for whatever
    table model displays the grid.

    Attributes:
        root: The table node
        visible_cell: Position of the most recently revealed cell
        on_reveal: Optional callback invoked with (context, position)
    """

    def __init__(self, root: NodeElement, on_reveal: RevealCallback | None = None) -> None:
        super().__init__(root)
        self.visible_cell: CellPosition | None = None
        self.on_reveal = on_reveal

    def is_row(self, node: NodeElement) -> bool:
        raise NotImplementedError

    def is_cell(self, node: NodeElement) -> bool:
        raise NotImplementedError

    def column_span(self, cell: NodeElement) -> int:
        return 1

    def rows(self) -> list[NodeElement]:
        """Rows of this table in document order, excluding nested tables."""
        if self.root is None:
            return []
        return self._collect(self.root, self.is_row)

    def cells(self, row: NodeElement) -> list[NodeElement]:
        """Cells of a row in document order."""
        return self._collect(row, self.is_cell)

    def _collect(
        self, node: NodeElement, match: Callable[[NodeElement], bool]
    ) -> list[NodeElement]:
        found: list[NodeElement] = []
        for child in node.children:
            if not isinstance(child, NodeElement):
                continue
            if match(child):
                found.append(child)
            elif not is_table_root(child):
                found.extend(self._collect(child, match))
        return found

    def find_cell(self, node: NodeElement) -> NodeElement | None:
        """Find the cell of this table enclosing a node (the node itself included)."""
        current: NodeElement | None = node
        while current is not None and current is not self.root:
            if self.is_cell(current):
                return current
            current = current.parent
        return None

    def cell_position(self, cell: NodeElement) -> CellPosition | None:
        """Compute grid coordinates of a cell, honouring column spans."""
        for row_index, row in enumerate(self.rows()):
            column = 0
            for candidate in self.cells(row):
                if candidate is cell:
                    return CellPosition(row_index, column)
                column += self.column_span(candidate)
        return None

    def show_cell_with_node(self, node: NodeElement) -> CellPosition | None:
        """Reveal the cell that contains a node.

        Args:
            node: Any node inside the table

        Returns:
            Position of the revealed cell, or None if the node is not in a cell
        """
        cell = self.find_cell(node)
        if cell is None:
            return None

        position = self.cell_position(cell)
        if position is None:
            return None

        self.visible_cell = position
        root_key = self.root.key if self.root is not None else None
        logger.debug("Revealing cell %s of table %s", position, root_key)
        if self.on_reveal is not None:
            self.on_reveal(self, position)
        return position


class HtmlTableContext(TableContext):
    """Table context for a markup <table>: <tr> rows and <td>/<th> cells."""

    def is_row(self, node: NodeElement) -> bool:
        return node.tag in HTML_ROW_TAGS

    def is_cell(self, node: NodeElement) -> bool:
        return node.tag in HTML_CELL_TAGS

    def column_span(self, cell: NodeElement) -> int:
        try:
            span = int(str(cell.raw_attributes.get("colspan", 1)))
        except ValueError:
            return 1
        return max(span, 1)


class AriaTableContext(TableContext):
    """Table context for role="table"/"grid": role-based rows and cells."""

    def is_row(self, node: NodeElement) -> bool:
        return node.role in ARIA_ROW_ROLES

    def is_cell(self, node: NodeElement) -> bool:
        return node.role in ARIA_CELL_ROLES
