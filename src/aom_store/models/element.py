"""
Core element types for the accessible object model (AOM).

This module defines the two node variants held by the store, container
nodes and text nodes, together with the derived ARIA attribute view and
the per-node relations record.

Node identity is a string key. A key is assigned once per underlying
document element and stays the same across snapshots of that element,
so the store can merge every new snapshot into the node it already holds.
"""

from __future__ import annotations

import uuid
import weakref
from collections.abc import Iterator
from dataclasses import dataclass, field
from typing import TYPE_CHECKING, Any, Union
from weakref import WeakKeyDictionary

from ..constants import IMPLICIT_LIVE_ROLES, LIVE_OFF

if TYPE_CHECKING:
    from .context import Context, TableContext

AomKey = str


class KeyRegistry:
    """Assigns stable keys to external document objects.

    Producers use one registry per document so that every snapshot they
    build refers to the same external element with the same key. Keys are
    uuid4 strings and are never reused, even after the external object has
    been garbage collected.

    Example:
        >>> keys = KeyRegistry()
        >>> keys.key_for(dom_node) == keys.key_for(dom_node)
        True
    """

    def __init__(self) -> None:
        self._keys: WeakKeyDictionary[Any, AomKey] = WeakKeyDictionary()

    def key_for(self, obj: Any) -> AomKey:
        """Return the key of an external object, assigning one on first sight.

        Args:
            obj: Any weak-referenceable object standing for a document element

        Returns:
            The object's key

        Raises:
            TypeError: If the object cannot be weakly referenced
        """
        key = self._keys.get(obj)
        if key is None:
            key = str(uuid.uuid4())
            self._keys[obj] = key
        return key

    def __contains__(self, obj: object) -> bool:
        try:
            return obj in self._keys
        except TypeError:
            return False

    def __len__(self) -> int:
        return len(self._keys)


def _to_bool(value: Any) -> bool | None:
    """Parse an ARIA boolean token or a presence attribute."""
    if value is None:
        return None
    if isinstance(value, bool):
        return value
    token = str(value).strip().lower()
    if token == "false":
        return False
    # Presence attributes such as required="" count as true
    if token in ("true", "", "required", "checked", "multiline"):
        return True
    return None


def _to_id(value: Any) -> str | None:
    """Normalize an id reference; blank values mean no reference."""
    if value is None:
        return None
    value = str(value).strip()
    return value or None


def _to_int(value: Any) -> int | None:
    if value is None or isinstance(value, bool):
        return None
    try:
        return int(str(value).strip())
    except ValueError:
        return None


@dataclass(frozen=True)
class AriaAttributes:
    """Accessibility attributes derived from a node's raw markup maps.

    Attributes:
        id: Markup id of the node
        aria_labelledby: Id of the node labelling this one
        aria_activedescendant: Id of the active descendant
        aria_owns: Id of the node owned by this one
        html_for: Id targeted by a <label for="...">
        aria_live: Live-region mode ("off", "polite" or "assertive")
        aria_label: Author supplied accessible name
        aria_level: Heading or tree level
        aria_required: Whether input is required
        aria_invalid: Whether the current value is invalid
        aria_multiline: Whether a textbox accepts multiple lines
        aria_checked: Checked state token ("true", "false" or "mixed")
        aria_expanded: Whether a collapsible element is expanded
        html_checked: Checked state of a native checkbox or radio
        html_value: Current value of a native form control
    """

    id: str | None = None
    aria_labelledby: str | None = None
    aria_activedescendant: str | None = None
    aria_owns: str | None = None
    html_for: str | None = None
    aria_live: str = LIVE_OFF
    aria_label: str | None = None
    aria_level: int | None = None
    aria_required: bool = False
    aria_invalid: bool = False
    aria_multiline: bool = False
    aria_checked: str | None = None
    aria_expanded: bool | None = None
    html_checked: bool = False
    html_value: str | None = None

    @classmethod
    def from_raw(
        cls,
        raw_attributes: dict[str, Any],
        raw_properties: dict[str, Any],
        role: str | None = None,
    ) -> AriaAttributes:
        """Derive attributes from raw markup attributes and DOM properties.

        Args:
            raw_attributes: Markup attributes (e.g. {"aria-live": "polite"})
            raw_properties: Element properties (e.g. {"checked": True})
            role: Role of the node, used for implicit live-region modes

        Returns:
            AriaAttributes view of the raw maps
        """
        attrs = raw_attributes
        props = raw_properties

        live = attrs.get("aria-live")
        if live is None:
            live = IMPLICIT_LIVE_ROLES.get(role or "", LIVE_OFF)
        live = str(live).strip().lower() or LIVE_OFF

        required = _to_bool(attrs.get("aria-required"))
        if required is None:
            required = _to_bool(props.get("required", attrs.get("required")))

        checked = attrs.get("aria-checked")
        label = attrs.get("aria-label")
        value = props.get("value", attrs.get("value"))

        return cls(
            id=_to_id(attrs.get("id")),
            aria_labelledby=_to_id(attrs.get("aria-labelledby")),
            aria_activedescendant=_to_id(attrs.get("aria-activedescendant")),
            aria_owns=_to_id(attrs.get("aria-owns")),
            html_for=_to_id(attrs.get("for")),
            aria_live=live,
            aria_label=str(label) if label is not None else None,
            aria_level=_to_int(attrs.get("aria-level")),
            aria_required=bool(required),
            aria_invalid=bool(_to_bool(attrs.get("aria-invalid"))),
            aria_multiline=bool(_to_bool(attrs.get("aria-multiline"))),
            aria_checked=str(checked).strip().lower() if checked is not None else None,
            aria_expanded=_to_bool(attrs.get("aria-expanded")),
            html_checked=bool(_to_bool(props.get("checked"))),
            html_value=str(value) if value is not None else None,
        )


@dataclass(eq=False)
class NodeRelations:
    """Relations and inherited contexts of a container node.

    The foreign lists (``aria_label_of`` and friends) hold the nodes that
    point at this node's id. The own lists (``aria_labelled_by`` and
    friends) hold the nodes carrying the id this node points at. Both are
    the very lists owned by the RelationIndex, never private copies, so
    they stay current as other nodes come and go. Re-read them through the
    node instead of keeping them around.
    """

    # Nodes carrying the id referenced by this node
    aria_labelled_by: list[NodeElement] = field(default_factory=list)
    aria_active_descendants: list[NodeElement] = field(default_factory=list)
    aria_owns: list[NodeElement] = field(default_factory=list)
    html_for_label_of: list[NodeElement] = field(default_factory=list)

    # Nodes referencing this node's own id
    aria_label_of: list[NodeElement] = field(default_factory=list)
    aria_active_descendant_of: list[NodeElement] = field(default_factory=list)
    aria_owned_by: list[NodeElement] = field(default_factory=list)
    html_for_labelled_by: list[NodeElement] = field(default_factory=list)

    form_context: Context | None = None
    label_context: Context | None = None
    fieldset_context: Context | None = None
    aria_live_context: Context | None = None
    table_context: TableContext | None = None

    CONTEXT_FIELDS = (
        "form_context",
        "label_context",
        "fieldset_context",
        "aria_live_context",
        "table_context",
    )

    def iter_contexts(self) -> Iterator[Context]:
        """Yield every context pointer that is set."""
        for name in self.CONTEXT_FIELDS:
            context = getattr(self, name)
            if context is not None:
                yield context

    def clear_contexts(self) -> None:
        for name in self.CONTEXT_FIELDS:
            setattr(self, name, None)


class AomElement:
    """Behaviour shared by both node variants: identity and parent link.

    The parent link is a weak back-reference. Parents own their children
    through ``children``; children only point back for ancestor walks.
    """

    key: AomKey
    role: str | None
    _parent_ref: weakref.ref[NodeElement] | None = None

    @property
    def parent(self) -> NodeElement | None:
        """The markup parent, or None for a detached node or tree root."""
        if self._parent_ref is None:
            return None
        return self._parent_ref()

    @parent.setter
    def parent(self, value: NodeElement | None) -> None:
        self._parent_ref = weakref.ref(value) if value is not None else None

    @property
    def aria_parent(self) -> NodeElement | None:
        """The accessibility parent: the owning node if any, else the markup parent."""
        return self.parent

    def iter_ancestors(self) -> Iterator[NodeElement]:
        """Walk accessibility parents, starting at this node when it is a container.

        Stops when a node repeats, so aria-owns cycles terminate.
        """
        seen: set[int] = set()
        node: AomElement | None = self if isinstance(self, NodeElement) else self.aria_parent
        while node is not None and id(node) not in seen:
            seen.add(id(node))
            yield node  # type: ignore[misc]
            node = node.aria_parent

    @property
    def accessible_name(self) -> str:
        raise NotImplementedError

    @property
    def text_content(self) -> str:
        raise NotImplementedError


@dataclass(eq=False)
class TextElement(AomElement):
    """A leaf node holding literal text.

    Attributes:
        key: Stable node identity
        text: Text content
    """

    key: AomKey
    text: str = ""

    role = "text"

    @property
    def children(self) -> tuple[()]:
        return ()

    @property
    def accessible_name(self) -> str:
        return self.text

    @property
    def text_content(self) -> str:
        return self.text


@dataclass(eq=False)
class NodeElement(AomElement):
    """A container node of the accessible tree.

    Attributes:
        key: Stable node identity
        tag: Underlying markup tag name (lower case)
        role: ARIA role, None when the tag has no role mapping
        raw_attributes: Markup attributes not yet promoted to ARIA semantics
        raw_properties: Element properties (value, checked, ...)
        children: Child nodes in document order
        is_focused: Whether the node holds input focus
        is_hidden: Whether the node is hidden from assistive technology
        is_inline: Whether the node renders inline
        contains_focus: Whether the node or a descendant holds focus
        relations: Relation lists and inherited contexts
    """

    key: AomKey
    tag: str
    role: str | None = None
    raw_attributes: dict[str, Any] = field(default_factory=dict)
    raw_properties: dict[str, Any] = field(default_factory=dict)
    children: list[AomNode] = field(default_factory=list)
    is_focused: bool = False
    is_hidden: bool = False
    is_inline: bool = False
    contains_focus: bool = field(default=False, init=False)
    relations: NodeRelations = field(default_factory=NodeRelations, init=False, repr=False)

    def __post_init__(self) -> None:
        """Validate the tag and establish parent links for existing children."""
        if not self.tag:
            raise ValueError("Element tag cannot be empty")
        self.tag = self.tag.lower()
        for child in self.children:
            child.parent = self

    @property
    def attributes(self) -> AriaAttributes:
        """ARIA attributes derived from the current raw maps."""
        return AriaAttributes.from_raw(self.raw_attributes, self.raw_properties, self.role)

    def get_raw_attributes(self) -> dict[str, Any]:
        return self.raw_attributes

    def get_raw_properties(self) -> dict[str, Any]:
        return self.raw_properties

    def append_child(self, child: AomNode) -> None:
        """Add a child at the end and set its parent link."""
        if not isinstance(child, (NodeElement, TextElement)):
            raise TypeError("Child must be a NodeElement or TextElement instance")
        child.parent = self
        self.children.append(child)

    def remove_child(self, child: AomNode) -> bool:
        """Remove a child and clear its parent link."""
        for index, existing in enumerate(self.children):
            if existing is child:
                del self.children[index]
                child.parent = None
                return True
        return False

    @property
    def aria_parent(self) -> NodeElement | None:
        owners = self.relations.aria_owned_by
        for owner in owners:
            if owner is not self:
                return owner
        return self.parent

    def iter_descendants(self) -> Iterator[AomNode]:
        """Yield all descendants in document order."""
        for child in self.children:
            yield child
            if isinstance(child, NodeElement):
                yield from child.iter_descendants()

    @property
    def text_content(self) -> str:
        """Whitespace-normalized text of all descendant text nodes."""
        parts = [node.text for node in self.iter_descendants() if isinstance(node, TextElement)]
        return " ".join("".join(parts).split())

    @property
    def accessible_name(self) -> str:
        """Accessible name computed from the node's relations and content.

        Precedence: aria-labelledby targets, aria-label, labels associated
        through <label for>, then the node's own text content.
        """
        labelled_by = [node for node in self.relations.aria_labelled_by if node is not self]
        if labelled_by:
            name = " ".join(node._name_without_references() for node in labelled_by).strip()
            if name:
                return name
        return self._name_without_references(include_labels=True)

    def _name_without_references(self, include_labels: bool = False) -> str:
        label = self.attributes.aria_label
        if label and label.strip():
            return " ".join(label.split())
        if include_labels:
            labels = [node for node in self.relations.html_for_labelled_by if node is not self]
            if labels:
                name = " ".join(node.text_content for node in labels).strip()
                if name:
                    return name
        return self.text_content


AomNode = Union[NodeElement, TextElement]


def same_identity(a: AomElement | None, b: AomElement | None) -> bool:
    """Check whether two elements stand for the same document element."""
    if a is None or b is None:
        return False
    return a.key == b.key
