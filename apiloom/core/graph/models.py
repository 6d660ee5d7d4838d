"""Relationship graph data models.

Nodes live in an arena keyed by qualified name; edges refer to their
endpoints by key only, so the graph never holds reference cycles.
"""

from dataclasses import dataclass, field
from enum import Enum
from typing import Dict, Iterable, Iterator, List, Optional, Tuple

from ..constants import TAG_DEPRECATED, TAG_EXCLUDE, TAG_HIDDEN
from ..descriptors.models import MethodDescriptor, Tags


class EdgeType(Enum):
    """Relationship kinds with their DOT glyphs.

    Declaration order is the edge sort priority. ``arrowhead`` of None
    means "open when oneway, otherwise none". Reversed types are drawn
    parent-to-child so the hierarchy reads top-down.
    """
    GENERALIZATION = ("generalization", "empty", "none", "solid", True)
    REALIZATION = ("realization", "empty", "none", "dashed", True)
    DEPENDENCY = ("dependency", "open", "none", "dashed", False)
    NAVIGABILITY = ("navigability", None, "none", "solid", False)
    AGGREGATION = ("aggregation", None, "ediamond", "solid", False)
    COMPOSITION = ("composition", None, "diamond", "solid", False)
    SEE_ALSO = ("see_also", "none", "none", "dotted", False)
    PACKAGE_DEPENDENCY = ("package_dependency", "open", "none", "dashed", False)

    def __init__(self, label: str, arrowhead: Optional[str], arrowtail: str, style: str, reversed_: bool):
        self.label = label
        self.arrowhead = arrowhead
        self.arrowtail = arrowtail
        self.style = style
        self.is_reversed = reversed_

    @property
    def priority(self) -> int:
        return _EDGE_TYPE_ORDER[self]

    @property
    def is_subtyping(self) -> bool:
        return self in (EdgeType.GENERALIZATION, EdgeType.REALIZATION)

    def head_glyph(self, oneway: bool) -> str:
        if self.arrowhead is None:
            return "open" if oneway else "none"
        return self.arrowhead


_EDGE_TYPE_ORDER = {t: i for i, t in enumerate(EdgeType)}


@dataclass(frozen=True)
class Edge:
    """A directed, typed relationship between two node keys."""

    type: EdgeType
    source: str
    target: str
    source_label: str = ""
    target_label: str = ""
    edge_label: str = ""
    # Not part of identity: the first registered variant is kept
    oneway: bool = field(default=False, compare=False)

    def sort_key(self) -> Tuple:
        return (
            self.type.priority,
            self.source,
            self.target,
            self.source_label,
            self.target_label,
            self.edge_label,
        )

    def __lt__(self, other: "Edge") -> bool:
        return self.sort_key() < other.sort_key()


class EdgeSet:
    """Duplicate-free edge container iterated in total edge order."""

    __slots__ = ("_edges",)

    def __init__(self, edges: Iterable[Edge] = ()):
        self._edges: Dict[Edge, None] = {}
        for e in edges:
            self.add(e)

    def add(self, edge: Edge) -> bool:
        if edge in self._edges:
            return False
        self._edges[edge] = None
        return True

    def discard(self, edge: Edge) -> None:
        self._edges.pop(edge, None)

    def __contains__(self, edge: object) -> bool:
        return edge in self._edges

    def __len__(self) -> int:
        return len(self._edges)

    def __iter__(self) -> Iterator[Edge]:
        return iter(sorted(self._edges, key=Edge.sort_key))

    def __repr__(self) -> str:
        return f"EdgeSet({list(self)!r})"


@dataclass
class Node:
    """A type in the relationship graph.

    External nodes stand in for names that are referenced but not
    described (platform supertypes, unknown relationship targets).
    """

    qualified_name: str
    package: str
    is_interface: bool = False
    is_abstract: bool = False
    is_enum: bool = False
    is_annotation: bool = False
    is_exception: bool = False
    is_deprecated: bool = False
    included: bool = False
    external: bool = False
    methods: Tuple[MethodDescriptor, ...] = ()
    tags: Tags = field(default_factory=dict)

    @property
    def key(self) -> str:
        return self.qualified_name

    @property
    def name(self) -> str:
        if self.package and self.qualified_name.startswith(self.package + "."):
            return self.qualified_name[len(self.package) + 1:]
        return self.qualified_name

    @property
    def node_id(self) -> str:
        return node_id(self.qualified_name)

    @property
    def is_static_utility(self) -> bool:
        """At least one non-constructor method, and all of them static."""
        methods = [m for m in self.methods if not m.is_constructor]
        return bool(methods) and all(m.is_static for m in methods)

    def tag_texts(self, tag: str) -> Tuple[str, ...]:
        return self.tags.get(tag, ())

    def has_tag(self, tag: str) -> bool:
        return tag in self.tags

    def first_tag_text(self, tag: str) -> Optional[str]:
        texts = self.tag_texts(tag)
        return texts[0] if texts else None

    @property
    def is_hidden(self) -> bool:
        return is_hidden(self.tags)

    @property
    def deprecated(self) -> bool:
        return self.is_deprecated or self.has_tag(TAG_DEPRECATED)


def node_id(name: str) -> str:
    """DOT identifier for a qualified name."""
    return name.replace(".", "_")


def is_hidden(tags: Tags) -> bool:
    """Hidden tag, or an exclude tag with an empty body."""
    if TAG_HIDDEN in tags:
        return True
    return any(not (text or "").strip() for text in tags.get(TAG_EXCLUDE, ()))


def exclude_patterns(tags: Tags) -> List[str]:
    """Non-empty exclude tag bodies, stripped."""
    return [t.strip() for t in tags.get(TAG_EXCLUDE, ()) if t and t.strip()]
