"""Scoped subgraph selection.

Extracts the node and edge sets one diagram renders. A class diagram is
seeded with its focal type; a package summary with every type of the
package. Each seed contributes its forward and reverse edges, filtered by
the hidden/exclude/inherit/excludeSubtypes tag rules.
"""

import logging
import re
from dataclasses import dataclass, field
from typing import Dict, List, Optional, Pattern

from ..constants import TAG_EXCLUDE_SUBTYPES, TAG_INHERIT
from ..descriptors.models import PackageDescriptor
from .builder import RelationshipGraph
from .models import Edge, EdgeSet, EdgeType, Node, exclude_patterns, is_hidden

logger = logging.getLogger(__name__)


class ExcludePatternError(ValueError):
    """An exclude tag body is not a valid regular expression."""

    def __init__(self, owner: str, pattern: str, reason: str):
        super().__init__(f"Invalid exclude pattern '{pattern}' on {owner}: {reason}")
        self.owner = owner
        self.pattern = pattern


@dataclass(frozen=True)
class SelectionOptions:
    """Filter switches for one diagram kind.

    Attributes:
        use_hidden: Drop hidden nodes and edges touching them.
        use_see_also: Keep SEE_ALSO edges.
        force_inherit: Apply the package's exclude patterns to every seed.
    """
    use_hidden: bool
    use_see_also: bool
    force_inherit: bool


PACKAGE_SUMMARY_OPTIONS = SelectionOptions(use_hidden=True, use_see_also=False, force_inherit=True)
CLASS_DIAGRAM_OPTIONS = SelectionOptions(use_hidden=False, use_see_also=True, force_inherit=False)


@dataclass
class Subgraph:
    """Nodes and edges selected for one diagram."""
    package: PackageDescriptor
    focus: Optional[Node] = None
    nodes: Dict[str, Node] = field(default_factory=dict)
    edges: EdgeSet = field(default_factory=EdgeSet)

    def sorted_nodes(self) -> List[Node]:
        return [self.nodes[k] for k in sorted(self.nodes)]


class SubgraphSelector:
    """Select per-diagram subgraphs from a RelationshipGraph."""

    def __init__(self, graph: RelationshipGraph):
        self._graph = graph
        self._patterns: Dict[str, Pattern] = {}

    def select_package(self, package_name: str) -> Subgraph:
        pkg = self._graph.package(package_name)
        subgraph = Subgraph(package=pkg)
        for node in self._graph:
            self._fetch(subgraph, node, PACKAGE_SUMMARY_OPTIONS)
        return subgraph

    def select_class(self, qualified_name: str) -> Subgraph:
        node = self._graph.node(qualified_name)
        pkg = self._graph.package(node.package)
        subgraph = Subgraph(package=pkg, focus=node)
        self._fetch(subgraph, node, CLASS_DIAGRAM_OPTIONS)
        return subgraph

    # ── Filters ─────────────────────────────────────────────────────────

    def _compile(self, owner: str, pattern: str) -> Pattern:
        compiled = self._patterns.get(pattern)
        if compiled is None:
            try:
                compiled = re.compile(pattern)
            except re.error as e:
                raise ExcludePatternError(owner, pattern, str(e)) from e
            self._patterns[pattern] = compiled
        return compiled

    def _matches_any(self, owner: str, patterns: List[str], *names: str) -> bool:
        for pattern in patterns:
            regex = self._compile(owner, pattern)
            for name in names:
                if regex.search(name):
                    return True
        return False

    def _is_excluded(
        self,
        pkg: PackageDescriptor,
        seed: Node,
        edge: Edge,
        options: SelectionOptions,
    ) -> bool:
        if options.force_inherit or seed.has_tag(TAG_INHERIT):
            if self._matches_any(
                f"package {pkg.name}", exclude_patterns(pkg.tags), edge.source, edge.target,
            ):
                return True
        return self._matches_any(
            seed.qualified_name, exclude_patterns(seed.tags), edge.source, edge.target,
        )

    # ── Selection ───────────────────────────────────────────────────────

    def _fetch(self, subgraph: Subgraph, seed: Node, options: SelectionOptions) -> None:
        pkg = subgraph.package

        if options.use_hidden and seed.is_hidden:
            return

        if options.force_inherit and self._matches_any(
            f"package {pkg.name}", exclude_patterns(pkg.tags), seed.qualified_name,
        ):
            return

        if seed.package != pkg.name:
            return

        subgraph.nodes[seed.key] = seed
        exclude_subtypes = seed.has_tag(TAG_EXCLUDE_SUBTYPES)

        for edge in self._graph.edges_from(seed.key):
            self._consider(subgraph, seed, edge, options)

        for edge in self._graph.edges_to(seed.key):
            if exclude_subtypes and edge.type.is_subtyping:
                continue
            self._consider(subgraph, seed, edge, options)

    def _consider(
        self,
        subgraph: Subgraph,
        seed: Node,
        edge: Edge,
        options: SelectionOptions,
    ) -> None:
        if not options.use_see_also and edge.type is EdgeType.SEE_ALSO:
            return

        if self._is_excluded(subgraph.package, seed, edge, options):
            return

        source = self._graph.node(edge.source)
        target = self._graph.node(edge.target)
        source_hidden = options.use_hidden and is_hidden(source.tags)
        target_hidden = options.use_hidden and is_hidden(target.tags)

        if not source_hidden and not target_hidden:
            subgraph.edges.add(edge)
        if not source_hidden:
            subgraph.nodes[source.key] = source
        if not target_hidden:
            subgraph.nodes[target.key] = target
