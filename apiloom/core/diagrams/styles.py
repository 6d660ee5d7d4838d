"""Category registry and color resolution.

Categories are named fill/line color pairs. Some are declared in the
configuration; the rest are registered the first time a node or package
tag names them, taking the next unused palette entry. The registry is
owned by one DiagramService and mutated only on the rendering thread.
"""

import logging
import re
from dataclasses import dataclass
from typing import Dict, Iterable, List, Optional, Sequence, Tuple

from ..constants import (
    CATEGORY_PALETTE,
    DEFAULT_FILL_COLOR,
    DEFAULT_LINE_COLOR,
    DESATURATION_OFFSET,
    HIGHLIGHT_FILL_COLOR,
    INK_FONT_COLOR,
    LANDMARK_FILL_COLOR,
    MUTED_FONT_COLOR,
    TAG_CATEGORY,
    TAG_LANDMARK,
)
from ..descriptors.models import PackageDescriptor, Tags
from ..graph.models import Node

logger = logging.getLogger(__name__)

HEX_COLOR_RE = re.compile(r"^#[0-9A-Fa-f]{6}$")
NAMED_COLOR_RE = re.compile(r"^[A-Za-z][A-Za-z0-9]*$")


class CategorySpecError(ValueError):
    """A configured category option is malformed."""


@dataclass(frozen=True)
class Category:
    """A named style group."""
    name: str
    fill_color: str = DEFAULT_FILL_COLOR
    line_color: str = DEFAULT_LINE_COLOR


def _check_color(spec: str, color: str) -> str:
    if HEX_COLOR_RE.match(color) or NAMED_COLOR_RE.match(color):
        return color
    raise CategorySpecError(f"Invalid color '{color}' in category '{spec}'")


def parse_category_spec(args: Sequence[str]) -> Category:
    """Parse one category option in any of its three argument forms.

    - 1 arg: ``name[:fillColor[:lineColor]]``
    - 2 args: ``name fillColor[:lineColor]``
    - 3 args: ``name fillColor lineColor``

    Raises:
        CategorySpecError: On an empty name, surplus parts or a bad color.
    """
    args = [a.strip() for a in args]
    if not args:
        raise CategorySpecError("Empty category specification")

    if len(args) == 1:
        parts = args[0].split(":")
    elif len(args) == 2:
        parts = [args[0]] + args[1].split(":")
    else:
        parts = list(args)

    spec = " ".join(args)
    if len(parts) > 3:
        raise CategorySpecError(f"Too many parts in category '{spec}'")

    name = parts[0]
    if not name:
        raise CategorySpecError(f"Missing category name in '{spec}'")

    fill = _check_color(spec, parts[1]) if len(parts) > 1 and parts[1] else DEFAULT_FILL_COLOR
    line = _check_color(spec, parts[2]) if len(parts) > 2 and parts[2] else DEFAULT_LINE_COLOR
    return Category(name=name, fill_color=fill, line_color=line)


def _shift_channel(hex_pair: str) -> str:
    value = min(int(hex_pair, 16) + DESATURATION_OFFSET, 0xFF)
    return f"{value:02x}"


def desaturate(color: str) -> str:
    """Shift a ``#RRGGBB`` color toward white; named colors pass through."""
    if not HEX_COLOR_RE.match(color):
        return color
    return "#" + "".join(_shift_channel(color[i:i + 2]) for i in (1, 3, 5))


class CategoryRegistry:
    """Name -> Category map with lazy palette assignment.

    Registration is idempotent: once a name is known it always resolves
    to the same colors. Palette entries are handed out in discovery order;
    after the last one, new categories get the default white/black.
    """

    def __init__(self, declared: Iterable[Category] = ()):
        self._categories: Dict[str, Category] = {}
        self._auto_assigned = 0
        for category in declared:
            if category.name in self._categories:
                logger.warning(f"Category defined multiple times: {category.name}")
            self._categories[category.name] = category

    def __contains__(self, name: str) -> bool:
        return name in self._categories

    def __len__(self) -> int:
        return len(self._categories)

    def get(self, name: Optional[str]) -> Optional[Category]:
        if name is None:
            return None
        return self._categories.get(name)

    def names(self) -> List[str]:
        return list(self._categories)

    def ensure(self, name: Optional[str]) -> Optional[Category]:
        """Return the category called ``name``, registering it on first use."""
        if name is None:
            return None
        existing = self._categories.get(name)
        if existing is not None:
            return existing

        if self._auto_assigned < len(CATEGORY_PALETTE):
            _, fill, line = CATEGORY_PALETTE[self._auto_assigned]
            self._auto_assigned += 1
            category = Category(name=name, fill_color=fill, line_color=line)
        else:
            category = Category(name=name)

        self._categories[name] = category
        logger.info(f"Category Options: {name}, {category.fill_color}, {category.line_color}")
        return category

    def ensure_for(self, tags: Tags) -> Optional[Category]:
        texts = tags.get(TAG_CATEGORY, ())
        return self.ensure(texts[0]) if texts else None


class StyleResolver:
    """Resolve node and edge colors for one diagram.

    Args:
        registry: The run's category registry.
        package: The diagram's package; None for the overview.
        focus: The focal type of a class diagram.
    """

    def __init__(
        self,
        registry: CategoryRegistry,
        package: Optional[str] = None,
        focus: Optional[Node] = None,
    ):
        self._registry = registry
        self._package = package
        self._focus = focus

    def in_scope(self, node: Node) -> bool:
        return self._package is None or node.package == self._package

    def _category(self, tags: Tags) -> Optional[Category]:
        return self._registry.ensure_for(tags)

    def fill_color(self, node: Node) -> str:
        if self._is_focus(node):
            return HIGHLIGHT_FILL_COLOR

        if node.has_tag(TAG_LANDMARK):
            color = LANDMARK_FILL_COLOR
        else:
            category = self._category(node.tags)
            color = category.fill_color if category else DEFAULT_FILL_COLOR

        return color if self.in_scope(node) else desaturate(color)

    def _is_focus(self, node: Node) -> bool:
        return self._focus is not None and node.key == self._focus.key

    def _line_color(self, node: Node, is_focus: bool) -> str:
        color = DEFAULT_LINE_COLOR
        if not is_focus and not node.has_tag(TAG_LANDMARK):
            category = self._category(node.tags)
            if category is not None:
                color = category.line_color

        return color if self.in_scope(node) else desaturate(color)

    def line_color(self, node: Node) -> str:
        return self._line_color(node, self._is_focus(node))

    def edge_line_color(self, target: Node) -> str:
        """Edges take the line color of their target, focal or not."""
        return self._line_color(target, False)

    def font_color(self, node: Node) -> str:
        return INK_FONT_COLOR if self.in_scope(node) else MUTED_FONT_COLOR

    def package_fill_color(self, pkg: PackageDescriptor) -> str:
        if pkg.has_tag(TAG_LANDMARK):
            return LANDMARK_FILL_COLOR
        category = self._category(pkg.tags)
        return category.fill_color if category else DEFAULT_FILL_COLOR

    def package_edge_colors(self) -> Tuple[str, str]:
        """(line, font) colors for overview edges."""
        return DEFAULT_LINE_COLOR, INK_FONT_COLOR
