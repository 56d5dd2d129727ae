"""
Read-only YAML outline of a store for inspection.

The outline lists the persisted tree with roles, names, keys and states,
followed by the pending live-region alerts. It is meant for people and
test fixtures, not for parsing back into snapshots (see snapshot.py).
"""

from __future__ import annotations

from dataclasses import dataclass
from io import StringIO
from typing import TYPE_CHECKING

from .constants import LIVE_OFF
from .models.element import AomNode, NodeElement, TextElement
from .utils import trim_string

if TYPE_CHECKING:
    from .store import Store


@dataclass
class ViewMode:
    """Configuration for what to include in the outline.

    Attributes:
        verbosity: Output verbosity level ("minimal", "standard", "full")
        include_hidden: Include nodes hidden from assistive technology
        include_relations: Include relation and context details (implied by "full")
        max_text_length: Longest text shown before truncation
    """

    verbosity: str = "standard"
    include_hidden: bool = False
    include_relations: bool = False
    max_text_length: int = 60

    def __post_init__(self) -> None:
        """Validate verbosity level and text length."""
        valid_levels = ("minimal", "standard", "full")
        if self.verbosity not in valid_levels:
            raise ValueError(f"verbosity must be one of {valid_levels}, got '{self.verbosity}'")
        if self.max_text_length < 4:
            raise ValueError("max_text_length must be at least 4")


def to_yaml(store: Store, view_mode: ViewMode | None = None) -> str:
    """Render a store as a YAML outline.

    Example output (standard):
        tree:
          root: body
          elements: 4
          focused: name-field

        content:
          - textbox [key=name-field] [focused] [required]:
              name: "Name"

        alerts:
          - polite [source=status]: "Saved"
    """
    writer = _YamlWriter(view_mode or ViewMode())
    return writer.write(store)


class _YamlWriter:
    """Internal class for writing YAML output."""

    def __init__(self, view_mode: ViewMode) -> None:
        self.view_mode = view_mode
        self.verbosity = view_mode.verbosity
        self.buffer = StringIO()
        self._indent = 0

    @property
    def _show_relations(self) -> bool:
        return self.verbosity == "full" or self.view_mode.include_relations

    def write(self, store: Store) -> str:
        """Write the store to YAML."""
        self.buffer = StringIO()
        self._write_header(store)

        self._write_line("")
        self._write_line("content:")
        self._indent += 1
        if store.root is not None:
            self._write_node(store.root)
        self._indent -= 1

        if store.alerts:
            self._write_alerts(store)

        return self.buffer.getvalue()

    def _write_header(self, store: Store) -> None:
        self._write_line("tree:")
        self._indent += 1
        root_key = store.root.key if store.root is not None else None
        self._write_line(f"root: {root_key if root_key is not None else 'null'}")
        self._write_line(f"elements: {len(store)}")
        if store.focused_node is not None:
            self._write_line(f"focused: {store.focused_node.key}")
        if store.active_descendant_node is not None:
            self._write_line(f"active_descendant: {store.active_descendant_node.key}")
        self._write_line(f"verbosity: {self.verbosity}")
        self._indent -= 1

    def _write_node(self, node: AomNode) -> None:
        if isinstance(node, TextElement):
            if self.verbosity != "minimal" and node.text.strip():
                text = self._escape_yaml_string(self._truncate_text(node.text.strip()))
                self._write_line(f'- text "{text}"')
            return

        if node.is_hidden and not self.view_mode.include_hidden:
            return

        if self.verbosity == "minimal":
            self._write_node_minimal(node)
        else:
            self._write_node_detailed(node)

    def _write_node_minimal(self, node: NodeElement) -> None:
        name = self._escape_yaml_string(self._truncate_text(node.accessible_name))
        name_part = f' "{name}"' if name else ""
        self._write_line(f"- {self._label(node)}{name_part} [key={node.key}]")
        self._indent += 1
        for child in node.children:
            self._write_node(child)
        self._indent -= 1

    def _write_node_detailed(self, node: NodeElement) -> None:
        annotations = " ".join(self._annotations(node))
        header = f"- {self._label(node)} [key={node.key}]"
        if annotations:
            header += f" {annotations}"
        self._write_line(f"{header}:")
        self._indent += 1

        name = node.accessible_name
        if name:
            name = self._escape_yaml_string(self._truncate_text(name))
            self._write_line(f'name: "{name}"')

        value = node.attributes.html_value
        if value:
            self._write_line(f'value: "{self._escape_yaml_string(value)}"')

        if self._show_relations:
            self._write_relations(node)

        include_hidden = self.view_mode.include_hidden
        visible = [
            child
            for child in node.children
            if isinstance(child, TextElement) or include_hidden or not child.is_hidden
        ]
        if visible:
            self._write_line("children:")
            self._indent += 1
            for child in visible:
                self._write_node(child)
            self._indent -= 1

        self._indent -= 1

    def _write_relations(self, node: NodeElement) -> None:
        relations = node.relations
        lists = {
            "labelled_by": relations.aria_labelled_by,
            "label_of": relations.aria_label_of,
            "active_descendant": relations.aria_active_descendants,
            "active_descendant_of": relations.aria_active_descendant_of,
            "owns": relations.aria_owns,
            "owned_by": relations.aria_owned_by,
            "label_for": relations.html_for_label_of,
            "labelled_by_label": relations.html_for_labelled_by,
        }
        for name, nodes in lists.items():
            if nodes:
                keys = ", ".join(member.key for member in nodes)
                self._write_line(f"{name}: [{keys}]")

        contexts = {
            "form": relations.form_context,
            "label": relations.label_context,
            "fieldset": relations.fieldset_context,
            "live_region": relations.aria_live_context,
            "table": relations.table_context,
        }
        for name, context in contexts.items():
            if context is not None and context.root is not None and context.root is not node:
                self._write_line(f"{name}: {context.root.key}")

    def _write_alerts(self, store: Store) -> None:
        self._write_line("")
        self._write_line("alerts:")
        self._indent += 1
        for alert in store.alerts:
            content = self._escape_yaml_string(self._truncate_text(alert.content))
            self._write_line(f'- {alert.mode} [source={alert.source_key}]: "{content}"')
        self._indent -= 1

    def _label(self, node: NodeElement) -> str:
        return node.role or node.tag

    def _annotations(self, node: NodeElement) -> list[str]:
        """Build the bracketed state annotations for a node."""
        attributes = node.attributes
        states = []
        if attributes.aria_level is not None:
            states.append(f"[level={attributes.aria_level}]")
        if node.is_focused:
            states.append("[focused]")
        elif node.contains_focus:
            states.append("[focus-within]")
        if node.is_hidden:
            states.append("[hidden]")
        if attributes.aria_required:
            states.append("[required]")
        if attributes.aria_invalid:
            states.append("[invalid]")
        if attributes.aria_multiline:
            states.append("[multiline]")
        if attributes.html_checked or attributes.aria_checked == "true":
            states.append("[checked]")
        elif attributes.aria_checked == "mixed":
            states.append("[mixed]")
        if attributes.aria_expanded is not None:
            states.append("[expanded]" if attributes.aria_expanded else "[collapsed]")
        if attributes.aria_live != LIVE_OFF:
            states.append(f"[live={attributes.aria_live}]")
        return states

    def _write_line(self, text: str) -> None:
        """Write a line with current indentation."""
        indent = "  " * self._indent
        self.buffer.write(f"{indent}{text}\n")

    def _truncate_text(self, text: str) -> str:
        """Truncate text with ellipsis if too long."""
        return trim_string(text, self.view_mode.max_text_length)

    def _escape_yaml_string(self, text: str) -> str:
        """Escape special characters in a YAML string."""
        text = text.replace("\\", "\\\\")
        text = text.replace('"', '\\"')
        text = text.replace("\n", "\\n")
        text = text.replace("\r", "\\r")
        text = text.replace("\t", "\\t")
        return text
