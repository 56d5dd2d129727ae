"""
aom_store - A live accessible object model kept in sync with document snapshots.

This package holds the accessible tree of a document (roles, names, states
and id-based relations), merges every new snapshot into it while keeping
node identity, and derives focus and live-region announcements from the
changes.

Example:
    >>> from aom_store import NodeElement, Store, TextElement
    >>> store = Store()
    >>> store.sync(
    ...     NodeElement("body", "body", children=[
    ...         NodeElement("status", "div", role="status", children=[TextElement("t", "Saved")]),
    ...     ])
    ... )
    >>> [alert.content for alert in store.alerts]
    ['Saved']
"""

__version__ = "0.1.0"
__all__ = [
    "Store",
    "RelationIndex",
    "RelationKind",
    "RelationsForId",
    "ContextPropagator",
    "FocusTracker",
    "FocusState",
    "Alert",
    "AlertQueue",
    # Models
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
    "same_identity",
    # Errors
    "AomStoreError",
    "DuplicateIdentityError",
    "InvariantViolation",
    "SnapshotFormatError",
    # Snapshots and inspection
    "element_from_dict",
    "element_to_dict",
    "load_snapshot_file",
    "ViewMode",
    "to_yaml",
]

from .alerts import Alert, AlertQueue
from .contexts import ContextPropagator
from .errors import (
    AomStoreError,
    DuplicateIdentityError,
    InvariantViolation,
    SnapshotFormatError,
)
from .focus import FocusState, FocusTracker
from .models import (
    AomElement,
    AomKey,
    AomNode,
    AriaAttributes,
    AriaTableContext,
    CellPosition,
    Context,
    HtmlTableContext,
    KeyRegistry,
    NodeElement,
    NodeRelations,
    TableContext,
    TextElement,
    same_identity,
)
from .relations import RelationIndex, RelationKind, RelationsForId
from .snapshot import element_from_dict, element_to_dict, load_snapshot_file
from .store import Store
from .view import ViewMode, to_yaml
