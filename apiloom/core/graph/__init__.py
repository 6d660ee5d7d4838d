# apiloom graph - program-wide relationship graph and per-diagram subgraphs
# Edge types: generalization, realization, dependency, navigability,
# aggregation, composition, see_also, package_dependency

from .builder import GraphBuilder, RelationshipGraph, build_graph
from .models import Edge, EdgeSet, EdgeType, Node
from .reduction import common_package_prefix, transitive_reduction
from .selector import (
    CLASS_DIAGRAM_OPTIONS,
    PACKAGE_SUMMARY_OPTIONS,
    ExcludePatternError,
    SelectionOptions,
    Subgraph,
    SubgraphSelector,
)
from .tags import RelationshipTag, UnrecognizedTag, classify_tags

__all__ = [
    "CLASS_DIAGRAM_OPTIONS",
    "Edge",
    "EdgeSet",
    "EdgeType",
    "ExcludePatternError",
    "GraphBuilder",
    "Node",
    "PACKAGE_SUMMARY_OPTIONS",
    "RelationshipGraph",
    "RelationshipTag",
    "SelectionOptions",
    "Subgraph",
    "SubgraphSelector",
    "UnrecognizedTag",
    "build_graph",
    "classify_tags",
    "common_package_prefix",
    "transitive_reduction",
]
