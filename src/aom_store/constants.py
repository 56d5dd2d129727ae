"""
Centralized tag and role tables.

Import from here so context propagation, table geometry and the consumer
helpers agree on which markup tags and ARIA roles mean what.
"""

# =============================================================================
# Context roots and members
# =============================================================================

FORM_TAG = "form"
LABEL_TAG = "label"
FIELDSET_TAG = "fieldset"
TABLE_TAG = "table"

# Member tags collected into each grouping context
FORM_MEMBER_TAGS = ("input",)
LABEL_MEMBER_TAGS = ("input", "textarea")
FIELDSET_MEMBER_TAGS = ("legend",)

# Roles that turn a container into an ARIA table context
ARIA_TABLE_ROLES = ("table", "grid", "treegrid")


# =============================================================================
# Table geometry
# =============================================================================

HTML_ROW_TAGS = ("tr",)
HTML_CELL_TAGS = ("td", "th")

ARIA_ROW_ROLES = ("row",)
ARIA_CELL_ROLES = ("cell", "gridcell", "columnheader", "rowheader")


# =============================================================================
# Live regions
# =============================================================================

LIVE_OFF = "off"
LIVE_POLITE = "polite"
LIVE_ASSERTIVE = "assertive"

# Roles with an implicit aria-live value
IMPLICIT_LIVE_ROLES: dict[str, str] = {
    "alert": LIVE_ASSERTIVE,
    "status": LIVE_POLITE,
    "log": LIVE_POLITE,
}


# =============================================================================
# Role mapping
# =============================================================================

# Markup tags that have no corresponding ARIA role
TAGS_WITH_NULL_ROLE_MAPPING = frozenset(
    {
        "audio", "abbr", "b", "base", "bdi", "bdo", "blockquote", "body", "br",
        "canvas", "caption", "cite", "code", "col", "colgroup", "data", "del",
        "details", "div", "dl", "em", "embed", "figcaption", "hgroup", "i",
        "iframe", "ins", "kbd", "label", "legend", "link", "map", "mark", "math",
        "meta", "meter", "noscript", "object", "p", "param", "picture", "pre",
        "q", "rp", "rt", "ruby", "s", "samp", "slot", "small", "source", "span",
        "strong", "sub", "summary", "sup", "template", "time", "title", "track",
        "u", "var", "video", "wbr",
    }
)  # fmt: skip

# Tags that start a new landmark scope
SECTIONING_TAGS = frozenset(
    {
        "main", "article", "aside", "nav", "section", "blockquote", "details",
        "dialog", "fieldset", "figure", "td",
    }
)  # fmt: skip

INPUT_TAG = "input"
BODY_TAG = "body"
