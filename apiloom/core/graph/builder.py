"""Relationship graph construction.

Walks every included type descriptor once and records its relationships
(generalization, realization, tag-declared associations, see-also) in a
RelationshipGraph. The graph is read-only once built.
"""

import logging
from typing import Dict, Iterator, List, Optional

from ..constants import (
    MARKER_ANNOTATION_INTERFACE,
    SEE_ALSO_LABEL,
    UNIVERSAL_ROOT_TYPES,
)
from ..descriptors.models import DescriptorSet, PackageDescriptor, TypeDescriptor
from .models import Edge, EdgeSet, EdgeType, Node
from .tags import relationship_tags

logger = logging.getLogger(__name__)


def _package_of(qualified_name: str) -> str:
    # Undescribed nested types (a.Outer.Inner) get the outer type as package
    return qualified_name.rsplit(".", 1)[0] if "." in qualified_name else ""


def node_from_descriptor(desc: TypeDescriptor) -> Node:
    return Node(
        qualified_name=desc.qualified_name,
        package=desc.package,
        is_interface=desc.is_interface,
        is_abstract=desc.is_abstract,
        is_enum=desc.is_enum,
        is_annotation=desc.is_annotation,
        is_exception=desc.is_exception,
        is_deprecated=desc.is_deprecated,
        included=desc.included,
        methods=desc.methods,
        tags=desc.tags,
    )


class RelationshipGraph:
    """Arena of type nodes plus forward and reverse edge indices.

    Attributes:
        descriptors: The DescriptorSet the graph was built from.
        nodes: Nodes keyed by qualified name.
    """

    def __init__(self, descriptors: DescriptorSet):
        self.descriptors = descriptors
        self.nodes: Dict[str, Node] = {}
        self._forward: Dict[str, EdgeSet] = {}
        self._reverse: Dict[str, EdgeSet] = {}

    def __contains__(self, key: str) -> bool:
        return key in self.nodes

    def __len__(self) -> int:
        return len(self.nodes)

    def __iter__(self) -> Iterator[Node]:
        return iter(self.nodes[k] for k in sorted(self.nodes))

    def node(self, key: str) -> Node:
        return self.nodes[key]

    def get(self, key: str) -> Optional[Node]:
        return self.nodes.get(key)

    def package(self, name: str) -> PackageDescriptor:
        return self.descriptors.package_named(name)

    def add_node(self, node: Node) -> Node:
        existing = self.nodes.get(node.key)
        if existing is not None:
            return existing
        self.nodes[node.key] = node
        self._forward[node.key] = EdgeSet()
        return node

    def add_edge(self, edge: Edge) -> None:
        self._forward.setdefault(edge.source, EdgeSet()).add(edge)
        self._reverse.setdefault(edge.target, EdgeSet()).add(edge)

    def edges_from(self, key: str) -> EdgeSet:
        """Edges whose source is ``key`` ("what does X depend on")."""
        return self._forward.get(key) or EdgeSet()

    def edges_to(self, key: str) -> EdgeSet:
        """Edges whose target is ``key`` ("what depends on X")."""
        return self._reverse.get(key) or EdgeSet()

    def edges(self) -> EdgeSet:
        all_edges = EdgeSet()
        for edge_set in self._forward.values():
            for e in edge_set:
                all_edges.add(e)
        return all_edges

    def types_in(self, package: str) -> List[Node]:
        return [n for n in self if n.package == package]


class GraphBuilder:
    """Build the program-wide RelationshipGraph from descriptors.

    Edge kinds produced:
    - GENERALIZATION: type -> direct superclass (universal roots skipped)
    - REALIZATION:    type -> directly implemented interface
    - DEPENDENCY / NAVIGABILITY / AGGREGATION / COMPOSITION:
                      type -> target of a uses/has/owns/composedOf tag
    - SEE_ALSO:       one edge per cross-referenced pair, smaller name first
    """

    def __init__(self, descriptors: DescriptorSet):
        self._descriptors = descriptors

    def build(self) -> RelationshipGraph:
        graph = RelationshipGraph(self._descriptors)
        types = self._descriptors.included_types()
        logger.info(f"Building graph for {len(types)} types")

        for desc in types:
            graph.add_node(node_from_descriptor(desc))
            self._add_related(graph, desc)

        logger.info(
            f"Graph built: {len(graph)} nodes, {len(graph.edges())} edges"
        )
        return graph

    # ── Node registration ───────────────────────────────────────────────

    def _ensure_node(self, graph: RelationshipGraph, name: str) -> Node:
        """Register ``name`` without expanding its own relationships."""
        existing = graph.get(name)
        if existing is not None:
            return existing

        desc = self._descriptors.type_named(name)
        if desc is not None:
            return graph.add_node(node_from_descriptor(desc))

        return graph.add_node(Node(
            qualified_name=name,
            package=_package_of(name),
            external=True,
        ))

    # ── Edge extraction ─────────────────────────────────────────────────

    def _add_related(self, graph: RelationshipGraph, desc: TypeDescriptor) -> None:
        source = desc.qualified_name

        # Generalization
        superclass = desc.superclass
        if superclass and superclass not in UNIVERSAL_ROOT_TYPES:
            self._ensure_node(graph, superclass)
            graph.add_edge(Edge(EdgeType.GENERALIZATION, source, superclass))

        # Realization
        for iface in desc.interfaces:
            if iface == MARKER_ANNOTATION_INTERFACE:
                continue
            self._ensure_node(graph, iface)
            graph.add_edge(Edge(EdgeType.REALIZATION, source, iface))

        # uses / has / owns / composedOf
        for rel in relationship_tags(desc.tags):
            self._ensure_node(graph, rel.target)
            graph.add_edge(Edge(
                rel.edge_type,
                source,
                rel.target,
                source_label=rel.source_label,
                target_label=rel.target_label,
                edge_label=rel.edge_label,
                oneway=rel.oneway,
            ))

        # See-also, one edge per unordered pair
        for ref in desc.see_also:
            if self._descriptors.type_named(ref) is None:
                logger.debug(f"{source}: unresolvable cross-reference '{ref}' skipped")
                continue
            self._ensure_node(graph, ref)
            if ref == source:
                continue
            low, high = sorted((source, ref))
            graph.add_edge(Edge(EdgeType.SEE_ALSO, low, high, edge_label=SEE_ALSO_LABEL))


def build_graph(descriptors: DescriptorSet) -> RelationshipGraph:
    return GraphBuilder(descriptors).build()
