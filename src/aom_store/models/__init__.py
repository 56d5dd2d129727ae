"""
Data models for the accessible object model.

This module provides the node variants, their derived attribute view and
relations record, and the grouping contexts inherited down the tree.
"""

from .context import (
    AriaTableContext,
    CellPosition,
    Context,
    HtmlTableContext,
    TableContext,
    is_table_root,
)
from .element import (
    AomElement,
    AomKey,
    AomNode,
    AriaAttributes,
    KeyRegistry,
    NodeElement,
    NodeRelations,
    TextElement,
    same_identity,
)

__all__ = [
    "AomElement",
    "AomKey",
    "AomNode",
    "AriaAttributes",
    "AriaTableContext",
    "CellPosition",
    "Context",
    "HtmlTableContext",
    "KeyRegistry",
    "NodeElement",
    "NodeRelations",
    "TableContext",
    "TextElement",
    "is_table_root",
    "same_identity",
]
