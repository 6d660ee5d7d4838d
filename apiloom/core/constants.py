"""Shared constants for apiloom.

Tag vocabulary, colors, fonts and platform type names used across the
graph builder, the subgraph selector and the DOT renderer.
"""

# =============================================================================
# Descriptor Tags
# =============================================================================

# Prefixes stripped from tag names when descriptors are loaded
TAG_PREFIXES = ("apiviz.", "apiloom.")

TAG_USES = "uses"
TAG_HAS = "has"
TAG_OWNS = "owns"
TAG_COMPOSED_OF = "composedOf"
TAG_LANDMARK = "landmark"
TAG_HIDDEN = "hidden"
TAG_EXCLUDE = "exclude"
TAG_EXCLUDE_SUBTYPES = "excludeSubtypes"
TAG_INHERIT = "inherit"
TAG_CATEGORY = "category"
TAG_STEREOTYPE = "stereotype"
TAG_DEPRECATED = "deprecated"

KNOWN_TAGS = frozenset({
    TAG_USES, TAG_HAS, TAG_OWNS, TAG_COMPOSED_OF,
    TAG_LANDMARK, TAG_HIDDEN, TAG_EXCLUDE, TAG_EXCLUDE_SUBTYPES,
    TAG_INHERIT, TAG_CATEGORY, TAG_STEREOTYPE, TAG_DEPRECATED,
})

# Label token meaning "no label" in relationship tag bodies
EMPTY_LABEL_TOKEN = "-"
ONEWAY_TOKEN = "oneway"

SEE_ALSO_LABEL = "&#171;see also&#187;"

# =============================================================================
# Platform Types
# =============================================================================

# Supertypes that never produce a generalization edge
UNIVERSAL_ROOT_TYPES = frozenset({
    "java.lang.Object",
    "java.lang.Annotation",
    "java.lang.Enum",
    "object",
})

# Interface every annotation type implements; never drawn
MARKER_ANNOTATION_INTERFACE = "java.lang.annotation.Annotation"

# =============================================================================
# Colors
# =============================================================================

DEFAULT_FILL_COLOR = "#FFFFFF"
DEFAULT_LINE_COLOR = "#000000"

# khaki1
HIGHLIGHT_FILL_COLOR = "#FFF68F"
LANDMARK_FILL_COLOR = "#FFF68F"

INK_FONT_COLOR = "black"
MUTED_FONT_COLOR = "gray30"

# Added to each RGB channel of out-of-scope hex colors, clamped at 0xFF
DESATURATION_OFFSET = 0x4D

# Auto-assigned category colors: (name, fill, line), in assignment order
CATEGORY_PALETTE = (
    ("red", "#FF0000", "#8B0000"),
    ("blue", "#87CEEB", "#3A5FCD"),
    ("green", "#98FB98", "#008B45"),
    ("orange", "#FFA500", "#CD3700"),
    ("brown", "#EEB4B4", "#CD853F"),
    ("purple", "#6A5ACD", "#7D26CD"),
    ("yellow", "#FFFF00", "#8B8B00"),
    ("grey", "#F2F2F2", "#828282"),
)

# =============================================================================
# Fonts and Layout
# =============================================================================

NORMAL_FONT = "Arial"
ITALIC_FONT = "Arial Italic"

GRAPH_NAME = "APIVIZ"

# Class diagrams switch to the wide layout above this many related nodes
MAX_COMPACT_RELATED_NODES = 5

# =============================================================================
# Output Files
# =============================================================================

OVERVIEW_DIAGRAM_NAME = "overview-summary"
PACKAGE_DIAGRAM_NAME = "package-summary"
DIAGRAM_FILE_SUFFIX = ".dot"
DOC_PAGE_SUFFIX = ".html"
