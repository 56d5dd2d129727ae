"""
Helpers for merging an incoming snapshot into persisted nodes.

These functions mutate the persisted side in place and never replace the
objects consumers may be holding: dictionaries are patched key by key and
child lists are reordered through slice assignment.
"""

from __future__ import annotations

from collections.abc import Callable, Iterable, MutableMapping, Sequence
from typing import Any

from .models.element import AomKey, AomNode


def get_map(nodes: Iterable[AomNode | None]) -> dict[AomKey, AomNode]:
    """Build a key to node map, preserving order and skipping empty slots."""
    return {node.key: node for node in nodes if node is not None}


def reconcile_fields(
    target: Any,
    source: Any,
    fields: Sequence[str] | None = None,
) -> list[str]:
    """Copy changed values from source to target.

    With ``fields`` the named attributes of two objects are compared and
    copied. Without it both arguments are treated as mappings: changed
    and new keys are copied and keys missing from the source are deleted.

    Args:
        target: Persisted object or mapping, updated in place
        source: Incoming object or mapping
        fields: Attribute names to reconcile, or None for mappings

    Returns:
        Names of the fields or keys that changed
    """
    changed: list[str] = []

    if fields is not None:
        for name in fields:
            value = getattr(source, name)
            if getattr(target, name) != value:
                setattr(target, name, value)
                changed.append(name)
        return changed

    mapping: MutableMapping[str, Any] = target
    for key in [key for key in mapping if key not in source]:
        del mapping[key]
        changed.append(key)
    for key, value in source.items():
        if key not in mapping or mapping[key] != value:
            mapping[key] = value
            changed.append(key)
    return changed


def reconcile_child_list_order(
    target: list[AomNode],
    source: Sequence[AomNode | None],
    lookup: Callable[[AomKey], AomNode | None],
) -> None:
    """Rewrite a persisted child list to follow the incoming order.

    Each incoming child is resolved to its persisted node through
    ``lookup``; the list object itself is kept.
    """
    ordered: list[AomNode] = []
    for node in source:
        if node is None:
            continue
        persisted = lookup(node.key)
        if persisted is not None:
            ordered.append(persisted)
    target[:] = ordered
