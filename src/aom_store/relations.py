"""
Relation index for resolving id-based references between nodes.

This module provides the RelationIndex class, which keeps one
RelationsForId record per markup id value. A record lists the nodes that
currently carry the id and, per relation kind, the nodes that reference
it (aria-labelledby, aria-activedescendant, aria-owns and <label for>).

The index owns every list it hands out. Nodes cache references to these
same lists in their NodeRelations record, so a node that joins or leaves
an id later is visible through every cached reference at once.
"""

from __future__ import annotations

import logging
from collections.abc import Iterator
from dataclasses import dataclass, field
from enum import Enum, auto

from .models.element import AriaAttributes, NodeElement

logger = logging.getLogger(__name__)


class RelationKind(Enum):
    """Ways a node can be tied to a markup id."""

    ID = auto()
    LABEL_OF = auto()
    ACTIVE_DESCENDANT_OF = auto()
    OWNED_BY = auto()
    LABEL_FOR = auto()


# Attribute on AriaAttributes holding the referenced id, per kind
REFERENCE_ATTRIBUTES: dict[RelationKind, str] = {
    RelationKind.LABEL_OF: "aria_labelledby",
    RelationKind.ACTIVE_DESCENDANT_OF: "aria_activedescendant",
    RelationKind.OWNED_BY: "aria_owns",
    RelationKind.LABEL_FOR: "html_for",
}

# NodeRelations field of the referencing node, pointed at the target's elements_with_id
OWN_RELATIONS: dict[RelationKind, str] = {
    RelationKind.LABEL_OF: "aria_labelled_by",
    RelationKind.ACTIVE_DESCENDANT_OF: "aria_active_descendants",
    RelationKind.OWNED_BY: "aria_owns",
    RelationKind.LABEL_FOR: "html_for_label_of",
}

# NodeRelations field of the id carrier, pointed at the matching referrer list
FOREIGN_RELATIONS: dict[RelationKind, str] = {
    RelationKind.LABEL_OF: "aria_label_of",
    RelationKind.ACTIVE_DESCENDANT_OF: "aria_active_descendant_of",
    RelationKind.OWNED_BY: "aria_owned_by",
    RelationKind.LABEL_FOR: "html_for_labelled_by",
}


@dataclass(eq=False)
class RelationsForId:
    """Everything the index knows about one id value.

    Attributes:
        elements_with_id: Nodes carrying the id
        aria_label_of: Nodes labelled by the id (aria-labelledby)
        aria_owned_by: Nodes owning the id (aria-owns)
        aria_active_descendant_of: Nodes whose active descendant is the id
        html_label: Labels associated with the id through <label for>
    """

    elements_with_id: list[NodeElement] = field(default_factory=list)
    aria_label_of: list[NodeElement] = field(default_factory=list)
    aria_owned_by: list[NodeElement] = field(default_factory=list)
    aria_active_descendant_of: list[NodeElement] = field(default_factory=list)
    html_label: list[NodeElement] = field(default_factory=list)

    def members(self, kind: RelationKind) -> list[NodeElement]:
        """Return the index-owned list for a relation kind."""
        if kind is RelationKind.ID:
            return self.elements_with_id
        if kind is RelationKind.LABEL_OF:
            return self.aria_label_of
        if kind is RelationKind.ACTIVE_DESCENDANT_OF:
            return self.aria_active_descendant_of
        if kind is RelationKind.OWNED_BY:
            return self.aria_owned_by
        return self.html_label

    @property
    def is_empty(self) -> bool:
        return not any(self.members(kind) for kind in RelationKind)


def remove_from(nodes: list[NodeElement], node: NodeElement) -> bool:
    """Remove the first occurrence of a node by identity, in place."""
    for index, existing in enumerate(nodes):
        if existing is node:
            del nodes[index]
            return True
    return False


class RelationIndex:
    """Per-id lookup tables for cross-tree references.

    Records are created on first reference and never dropped, so memory
    grows with the number of distinct ids seen during the store's lifetime.

    Example:
        >>> index = RelationIndex()
        >>> index.link(label, "name", RelationKind.ID)
        >>> index.link(field, "name", RelationKind.LABEL_OF)
        >>> label.relations.aria_label_of
        [field]
    """

    def __init__(self) -> None:
        self._by_id: dict[str, RelationsForId] = {}

    def get_or_create(self, id_value: str) -> RelationsForId:
        """Return the record for an id, creating an empty one on first use."""
        record = self._by_id.get(id_value)
        if record is None:
            record = RelationsForId()
            self._by_id[id_value] = record
        return record

    def get(self, id_value: str) -> RelationsForId | None:
        """Return the record for an id without creating it."""
        return self._by_id.get(id_value)

    def elements_with_id(self, id_value: str) -> list[NodeElement]:
        record = self._by_id.get(id_value)
        return list(record.elements_with_id) if record is not None else []

    def link(self, node: NodeElement, id_value: str, kind: RelationKind) -> None:
        """Tie a node to an id through one relation kind.

        For RelationKind.ID the node becomes a carrier of the id and its
        foreign relation lists are pointed at the record. For the reference
        kinds the node joins the record's referrer list and its own
        relation list is pointed at the id's carriers.
        """
        record = self.get_or_create(id_value)
        record.members(kind).append(node)

        if kind is RelationKind.ID:
            for foreign_kind, name in FOREIGN_RELATIONS.items():
                setattr(node.relations, name, record.members(foreign_kind))
        else:
            setattr(node.relations, OWN_RELATIONS[kind], record.elements_with_id)

    def unlink(self, node: NodeElement, id_value: str, kind: RelationKind) -> None:
        """Undo link(); unknown ids and absent nodes are ignored."""
        record = self._by_id.get(id_value)
        if record is not None:
            remove_from(record.members(kind), node)

        if kind is RelationKind.ID:
            for name in FOREIGN_RELATIONS.values():
                setattr(node.relations, name, [])
        else:
            setattr(node.relations, OWN_RELATIONS[kind], [])

    def update_references(
        self,
        node: NodeElement,
        old: AriaAttributes | None,
        new: AriaAttributes | None,
    ) -> None:
        """Move a node's index entries from its old attributes to its new ones.

        Pass ``old=None`` when registering and ``new=None`` when
        unregistering. Kinds whose id did not change are left untouched.
        """
        old_id = old.id if old is not None else None
        new_id = new.id if new is not None else None
        if old_id != new_id:
            if old_id:
                self.unlink(node, old_id, RelationKind.ID)
            if new_id:
                self.link(node, new_id, RelationKind.ID)

        for kind, attribute in REFERENCE_ATTRIBUTES.items():
            old_value = getattr(old, attribute) if old is not None else None
            new_value = getattr(new, attribute) if new is not None else None
            if old_value == new_value:
                continue
            if old_value:
                self.unlink(node, old_value, kind)
            if new_value:
                self.link(node, new_value, kind)

    def iter_records(self) -> Iterator[tuple[str, RelationsForId]]:
        yield from self._by_id.items()

    def __contains__(self, id_value: object) -> bool:
        return id_value in self._by_id

    def __len__(self) -> int:
        return len(self._by_id)
