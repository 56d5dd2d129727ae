"""
Snapshot documents: element trees as plain dictionaries, YAML or JSON.

Producers that run out of process, and the command line, describe each
snapshot as a nested mapping. A text node has ``key`` and ``text``; a
container node has ``key`` and ``tag`` plus optional ``role``,
``attributes``, ``properties``, ``focused``, ``hidden``, ``inline`` and
``children``.

Example YAML file:
    ```yaml
    snapshots:
      - key: body
        tag: body
        children:
          - key: status
            tag: div
            role: status
            children:
              - key: status-text
                text: "Saved"
    ```
"""

from __future__ import annotations

import json
import logging
from pathlib import Path
from typing import Any

import yaml

from .errors import SnapshotFormatError
from .models.element import AomNode, NodeElement, TextElement

logger = logging.getLogger(__name__)

CONTAINER_KEYS = frozenset(
    {"key", "tag", "role", "attributes", "properties", "focused", "hidden", "inline", "children"}
)
TEXT_KEYS = frozenset({"key", "text"})


def element_from_dict(data: Any) -> AomNode:
    """Build an element tree from a snapshot mapping.

    Args:
        data: Snapshot mapping as described in the module docstring

    Returns:
        Root of the new element tree

    Raises:
        SnapshotFormatError: If the mapping is malformed; ``errors`` lists
            every problem found, each prefixed with its location
    """
    errors: list[str] = []
    element = _build(data, "$", errors)
    if errors or element is None:
        raise SnapshotFormatError(
            f"Invalid snapshot: {len(errors)} problem(s) found", errors=errors
        )
    return element


def _build(data: Any, location: str, errors: list[str]) -> AomNode | None:
    if not isinstance(data, dict):
        errors.append(f"{location}: element must be a mapping")
        return None

    key = data.get("key")
    if key is None or str(key).strip() == "":
        errors.append(f"{location}: missing 'key'")
        return None
    key = str(key)

    if "text" in data and "tag" not in data:
        unknown = sorted(set(data) - TEXT_KEYS)
        if unknown:
            errors.append(f"{location}: unknown text node field(s) {unknown}")
        text = data.get("text")
        return TextElement(key=key, text="" if text is None else str(text))

    tag = data.get("tag")
    if not tag:
        errors.append(f"{location}: element '{key}' needs either 'tag' or 'text'")
        return None

    unknown = sorted(set(data) - CONTAINER_KEYS)
    if unknown:
        errors.append(f"{location}: unknown field(s) {unknown}")

    attributes = _mapping(data.get("attributes"), f"{location}.attributes", errors)
    properties = _mapping(data.get("properties"), f"{location}.properties", errors)

    raw_children = data.get("children") or []
    if not isinstance(raw_children, list):
        errors.append(f"{location}.children: must be a list")
        raw_children = []

    children: list[AomNode] = []
    for index, child_data in enumerate(raw_children):
        child = _build(child_data, f"{location}.children[{index}]", errors)
        if child is not None:
            children.append(child)

    return NodeElement(
        key=key,
        tag=str(tag),
        role=str(data["role"]) if data.get("role") is not None else None,
        raw_attributes=attributes,
        raw_properties=properties,
        children=children,
        is_focused=bool(data.get("focused", False)),
        is_hidden=bool(data.get("hidden", False)),
        is_inline=bool(data.get("inline", False)),
    )


def _mapping(value: Any, location: str, errors: list[str]) -> dict[str, Any]:
    if value is None:
        return {}
    if not isinstance(value, dict):
        errors.append(f"{location}: must be a mapping")
        return {}
    return {str(name): item for name, item in value.items()}


def element_to_dict(element: AomNode) -> dict[str, Any]:
    """Describe an element tree as a snapshot mapping (inverse of element_from_dict)."""
    if isinstance(element, TextElement):
        return {"key": element.key, "text": element.text}

    data: dict[str, Any] = {"key": element.key, "tag": element.tag}
    if element.role is not None:
        data["role"] = element.role
    if element.raw_attributes:
        data["attributes"] = dict(element.raw_attributes)
    if element.raw_properties:
        data["properties"] = dict(element.raw_properties)
    if element.is_focused:
        data["focused"] = True
    if element.is_hidden:
        data["hidden"] = True
    if element.is_inline:
        data["inline"] = True
    if element.children:
        data["children"] = [element_to_dict(child) for child in element.children]
    return data


def load_snapshots(data: Any) -> list[AomNode]:
    """Build every snapshot of a parsed snapshot document.

    Args:
        data: Parsed document with a top-level 'snapshots' list

    Raises:
        SnapshotFormatError: If the document or any snapshot is malformed
    """
    if not isinstance(data, dict):
        raise SnapshotFormatError("Snapshot file must contain a dictionary/object")
    if "snapshots" not in data:
        raise SnapshotFormatError("Snapshot file must contain a 'snapshots' key")

    raw_snapshots = data["snapshots"]
    if not isinstance(raw_snapshots, list):
        raise SnapshotFormatError("'snapshots' must be a list")

    snapshots: list[AomNode] = []
    errors: list[str] = []
    for index, raw in enumerate(raw_snapshots):
        element = _build(raw, f"snapshots[{index}]", errors)
        if element is not None:
            snapshots.append(element)

    if errors:
        raise SnapshotFormatError(
            f"Invalid snapshot file: {len(errors)} problem(s) found", errors=errors
        )
    return snapshots


def load_snapshot_file(path: str | Path, format: str | None = None) -> list[AomNode]:
    """Load snapshots from a YAML or JSON file.

    Args:
        path: Path to the snapshot file
        format: "yaml" or "json"; guessed from the suffix when omitted

    Returns:
        One element tree per snapshot, in file order

    Raises:
        SnapshotFormatError: If the file cannot be parsed or is malformed
        FileNotFoundError: If the file does not exist
    """
    file_path = Path(path)
    if not file_path.exists():
        raise FileNotFoundError(f"Snapshot file not found: {path}")

    if format is None:
        format = "json" if file_path.suffix.lower() == ".json" else "yaml"

    try:
        with open(file_path, encoding="utf-8") as f:
            if format == "yaml":
                data = yaml.safe_load(f)
            elif format == "json":
                data = json.load(f)
            else:
                raise SnapshotFormatError(f"Unsupported format: {format}")
    except yaml.YAMLError as e:
        raise SnapshotFormatError(f"Failed to parse YAML: {e}") from e
    except json.JSONDecodeError as e:
        raise SnapshotFormatError(f"Failed to parse JSON: {e}") from e

    snapshots = load_snapshots(data)
    logger.debug("Loaded %d snapshot(s) from %s", len(snapshots), file_path)
    return snapshots


def dump_snapshots(snapshots: list[AomNode]) -> str:
    """Serialize element trees into a YAML snapshot document."""
    document = {"snapshots": [element_to_dict(snapshot) for snapshot in snapshots]}
    return yaml.safe_dump(document, sort_keys=False, allow_unicode=True)
