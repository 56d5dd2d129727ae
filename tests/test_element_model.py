"""
Tests for the element model.

These tests verify:
- Stable key assignment for external objects
- Attributes derived from raw markup maps
- Parent links, ancestor walks and identity comparison
- Accessible name computation
"""

import gc

import pytest

from aom_store.models.element import (
    AriaAttributes,
    KeyRegistry,
    NodeElement,
    TextElement,
    same_identity,
)
from aom_store.relations import RelationIndex


class _DomNode:
    """Stand-in for an external document node."""


class TestKeyRegistry:
    """Tests for KeyRegistry."""

    def test_same_object_gets_same_key(self) -> None:
        """Test that repeated lookups return the first key."""
        keys = KeyRegistry()
        dom_node = _DomNode()

        assert keys.key_for(dom_node) == keys.key_for(dom_node)
        assert dom_node in keys

    def test_different_objects_get_different_keys(self) -> None:
        """Test that keys are unique per object."""
        keys = KeyRegistry()

        assert keys.key_for(_DomNode()) != keys.key_for(_DomNode())

    def test_keys_are_not_reused_after_collection(self) -> None:
        """Test that a collected object's key never comes back."""
        keys = KeyRegistry()
        first = _DomNode()
        first_key = keys.key_for(first)
        del first
        gc.collect()

        assert len(keys) == 0
        assert keys.key_for(_DomNode()) != first_key

    def test_unweakrefable_object_raises(self) -> None:
        """Test that plain values cannot be keyed."""
        keys = KeyRegistry()

        with pytest.raises(TypeError):
            keys.key_for(42)
        assert 42 not in keys


class TestAriaAttributes:
    """Tests for attributes derived from raw maps."""

    def test_defaults(self) -> None:
        """Test attributes of a node without markup attributes."""
        attributes = AriaAttributes.from_raw({}, {})

        assert attributes.id is None
        assert attributes.aria_live == "off"
        assert attributes.aria_required is False
        assert attributes.aria_expanded is None

    def test_reference_attributes(self) -> None:
        """Test id and id-reference attributes."""
        attributes = AriaAttributes.from_raw(
            {
                "id": "field",
                "aria-labelledby": "label",
                "aria-activedescendant": "option-2",
                "aria-owns": "popup",
                "for": "other",
            },
            {},
        )

        assert attributes.id == "field"
        assert attributes.aria_labelledby == "label"
        assert attributes.aria_activedescendant == "option-2"
        assert attributes.aria_owns == "popup"
        assert attributes.html_for == "other"

    def test_blank_id_means_no_id(self) -> None:
        """Test that whitespace-only ids are ignored."""
        assert AriaAttributes.from_raw({"id": "  "}, {}).id is None

    def test_boolean_tokens(self) -> None:
        """Test parsing of ARIA boolean tokens and presence attributes."""
        attributes = AriaAttributes.from_raw(
            {"aria-invalid": "true", "aria-multiline": "false", "required": ""},
            {"checked": True},
        )

        assert attributes.aria_invalid is True
        assert attributes.aria_multiline is False
        assert attributes.aria_required is True
        assert attributes.html_checked is True

    def test_level_and_value(self) -> None:
        """Test numeric level and string value."""
        attributes = AriaAttributes.from_raw({"aria-level": "2"}, {"value": "Ada"})

        assert attributes.aria_level == 2
        assert attributes.html_value == "Ada"

    def test_implicit_live_from_role(self) -> None:
        """Test live-region modes implied by roles."""
        assert AriaAttributes.from_raw({}, {}, role="alert").aria_live == "assertive"
        assert AriaAttributes.from_raw({}, {}, role="status").aria_live == "polite"

    def test_explicit_live_wins_over_role(self) -> None:
        """Test that aria-live overrides the role's implicit mode."""
        attributes = AriaAttributes.from_raw({"aria-live": "off"}, {}, role="alert")

        assert attributes.aria_live == "off"

    def test_node_attributes_follow_raw_maps(self) -> None:
        """Test that NodeElement.attributes is derived on every access."""
        node = NodeElement("n", "input")
        assert node.attributes.aria_invalid is False

        node.raw_attributes["aria-invalid"] = "true"

        assert node.attributes.aria_invalid is True


class TestNodeElement:
    """Tests for NodeElement structure."""

    def test_children_get_parent_links(self) -> None:
        """Test that construction wires parent links."""
        child = TextElement("t", "hello")
        node = NodeElement("p", "P", children=[child])

        assert node.tag == "p"
        assert child.parent is node

    def test_empty_tag_raises(self) -> None:
        """Test that a container needs a tag."""
        with pytest.raises(ValueError, match="tag cannot be empty"):
            NodeElement("n", "")

    def test_append_and_remove_child(self) -> None:
        """Test child management helpers."""
        node = NodeElement("div", "div")
        child = NodeElement("span", "span")

        node.append_child(child)
        assert node.children == [child]
        assert child.parent is node

        assert node.remove_child(child) is True
        assert node.children == []
        assert child.parent is None
        assert node.remove_child(child) is False

    def test_append_rejects_other_types(self) -> None:
        """Test that only elements can be children."""
        with pytest.raises(TypeError):
            NodeElement("div", "div").append_child("text")  # type: ignore[arg-type]

    def test_text_element_has_no_children(self) -> None:
        """Test the text node variant."""
        text = TextElement("t", "hi")

        assert text.children == ()
        assert text.role == "text"
        assert text.accessible_name == "hi"

    def test_iter_ancestors(self) -> None:
        """Test walking from a node up to the root."""
        leaf = NodeElement("leaf", "span")
        middle = NodeElement("middle", "div", children=[leaf])
        root = NodeElement("root", "body", children=[middle])

        assert [node.key for node in leaf.iter_ancestors()] == ["leaf", "middle", "root"]
        assert root.parent is None

    def test_text_ancestors_start_at_parent(self) -> None:
        """Test that a text node's ancestor walk starts at its parent."""
        text = TextElement("t", "x")
        paragraph = NodeElement("p", "p", children=[text])

        assert list(text.iter_ancestors()) == [paragraph]

    def test_owned_node_uses_owner_as_aria_parent(self) -> None:
        """Test that aria-owns re-parents a node for ancestor walks."""
        index = RelationIndex()
        popup = NodeElement("popup", "div", raw_attributes={"id": "popup"})
        NodeElement("body", "body", children=[popup])
        combo = NodeElement("combo", "input", raw_attributes={"aria-owns": "popup"})
        index.update_references(popup, None, popup.attributes)
        index.update_references(combo, None, combo.attributes)

        assert popup.aria_parent is combo

    def test_owns_cycle_terminates(self) -> None:
        """Test that mutual aria-owns does not loop forever."""
        index = RelationIndex()
        a = NodeElement("a", "div", raw_attributes={"id": "a", "aria-owns": "b"})
        b = NodeElement("b", "div", raw_attributes={"id": "b", "aria-owns": "a"})
        index.update_references(a, None, a.attributes)
        index.update_references(b, None, b.attributes)

        assert [node.key for node in a.iter_ancestors()] == ["a", "b"]


class TestAccessibleName:
    """Tests for accessible name computation."""

    def test_name_from_content(self) -> None:
        """Test names computed from descendant text."""
        node = NodeElement(
            "button",
            "button",
            children=[
                TextElement("t1", "  Save "),
                NodeElement("b", "b", children=[TextElement("t2", "now")]),
            ],
        )

        assert node.accessible_name == "Save now"

    def test_aria_label_wins_over_content(self) -> None:
        """Test that aria-label overrides content."""
        node = NodeElement(
            "button",
            "button",
            raw_attributes={"aria-label": "Close"},
            children=[TextElement("t", "X")],
        )

        assert node.accessible_name == "Close"

    def test_labelledby_wins_over_aria_label(self) -> None:
        """Test names taken from aria-labelledby targets."""
        index = RelationIndex()
        label = NodeElement(
            "label", "span", raw_attributes={"id": "l"}, children=[TextElement("t", "Email")]
        )
        field = NodeElement(
            "field", "input", raw_attributes={"aria-labelledby": "l", "aria-label": "x"}
        )
        index.update_references(label, None, label.attributes)
        index.update_references(field, None, field.attributes)

        assert field.accessible_name == "Email"

    def test_name_from_label_for(self) -> None:
        """Test names taken from <label for> associations."""
        index = RelationIndex()
        label = NodeElement(
            "label", "label", raw_attributes={"for": "f"}, children=[TextElement("t", "Name")]
        )
        field = NodeElement("field", "input", raw_attributes={"id": "f"})
        index.update_references(label, None, label.attributes)
        index.update_references(field, None, field.attributes)

        assert field.accessible_name == "Name"


class TestSameIdentity:
    """Tests for same_identity."""

    def test_compares_keys(self) -> None:
        """Test identity by key across distinct objects."""
        assert same_identity(TextElement("k", "a"), TextElement("k", "b"))
        assert not same_identity(TextElement("k", "a"), TextElement("j", "a"))

    def test_none_is_never_identical(self) -> None:
        """Test that None never matches."""
        assert not same_identity(None, None)
        assert not same_identity(TextElement("k"), None)
