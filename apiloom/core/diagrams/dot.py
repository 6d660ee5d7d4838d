"""Deterministic Graphviz DOT generators for APIviz diagrams.

Takes selected subgraphs (or the package dependency set) and produces DOT
text. Never invokes Graphviz itself; the text is the whole handoff.
"""

import logging
import re
from typing import List, Optional, Tuple

from ..constants import (
    DOC_PAGE_SUFFIX,
    GRAPH_NAME,
    ITALIC_FONT,
    MAX_COMPACT_RELATED_NODES,
    NORMAL_FONT,
    PACKAGE_DIAGRAM_NAME,
    TAG_STEREOTYPE,
)
from ..descriptors.models import PackageDescriptor
from ..graph.models import Edge, EdgeSet, Node, node_id
from ..graph.reduction import common_package_prefix, transitive_reduction
from ..graph.selector import Subgraph
from .styles import CategoryRegistry, StyleResolver

logger = logging.getLogger(__name__)

NEWLINE = "\n"

_ESCAPE_RE = re.compile(r"(\"|'|\\.?|\s)+")

# Graph attribute blocks, one statement per line
_OVERVIEW_LAYOUT = ("rankdir=LR", "ranksep=0.3", "nodesep=0.2", "mclimit=128")
_PACKAGE_LAYOUT = ("rankdir=LR", "ranksep=0.3", "nodesep=0.25", "mclimit=1024")
_COMPACT_CLASS_LAYOUT = ("rankdir=TB", "ranksep=0.4", "nodesep=0.3", "mclimit=128")
_WIDE_CLASS_LAYOUT = ("rankdir=LR", "ranksep=1.0", "nodesep=0.2", "mclimit=128")
_COMMON_LAYOUT = (
    "outputorder=edgesfirst",
    "center=1",
    "remincross=true",
    "searchsize=65536",
    "splines=polyline",
)

_EDGE_DEFAULTS = f'edge [fontsize=10, fontname="{NORMAL_FONT}", style="setlinewidth(0.6)"]; '
_NODE_DEFAULTS = (
    f'node [shape=box, fontsize=10, fontname="{NORMAL_FONT}", '
    f'width=0.1, height=0.1, style="setlinewidth(0.6)"]; '
)


class DiagramError(RuntimeError):
    """A single diagram could not be produced; other diagrams continue."""


# ── Text helpers ────────────────────────────────────────────────────────


def escape(text: Optional[str]) -> str:
    """Collapse quotes, backslash escapes and whitespace runs into one space."""
    if not text:
        return ""
    return _ESCAPE_RE.sub(" ", text)


def stereotype(node: Node) -> Optional[str]:
    """Explicit tag > exception > annotation > enum > static > interface."""
    explicit = node.first_tag_text(TAG_STEREOTYPE)
    if explicit is not None:
        return escape(explicit)
    if node.is_exception:
        return "exception"
    if node.is_annotation:
        return "annotation"
    if node.is_enum:
        return "enum"
    if node.is_static_utility:
        return "static"
    if node.is_interface:
        return "interface"
    return None


def node_label(node: Node, package: str) -> str:
    label = ""
    kind = stereotype(node)
    if kind is not None:
        label += f"&#171;{kind}&#187;\\n"

    label += node.name
    if node.package and node.package != package:
        label += f"\\n({node.package})"
    return label


def natural_rank(node: Node) -> int:
    if node.is_annotation:
        return 0
    if node.is_enum:
        return 1
    if node.is_static_utility:
        return 2
    if node.is_interface:
        return 3
    if node.is_abstract:
        return 4
    if node.is_exception:
        return 100
    return 50


def sort_nodes(nodes: List[Node], portrait: bool) -> List[Node]:
    """Order nodes by natural rank and simple name for the given layout.

    Portrait: rank descending, names ascending.
    Landscape: rank ascending, names descending.
    """
    # Two stable sorts; the qualified name keeps equal simple names ordered
    ordered = sorted(nodes, key=lambda n: (n.name, n.qualified_name), reverse=not portrait)
    return sorted(ordered, key=natural_rank, reverse=portrait)


def _path_elements(path: str) -> List[str]:
    return re.split(r"[/\\]+", path)


def relative_href(package: str, node: Node) -> Optional[str]:
    """Documentation page of ``node`` relative to ``package``'s directory.

    Only included types have a page.
    """
    if not node.included:
        return None

    source = _path_elements(package.replace(".", "/"))
    target = _path_elements(f"{node.package.replace('.', '/')}/{node.name}{DOC_PAGE_SUFFIX}")

    common = 0
    for a, b in zip(source, target):
        if a != b:
            break
        common += 1

    parts = ["/.."] * (len(source) - common)
    parts.extend(f"/{element}" for element in target[common:])
    return "".join(parts)[1:]


def count_related(edges: EdgeSet, focus: Node) -> Tuple[int, int]:
    """(above, below) counts of the focal type's neighbours."""
    above = below = 0
    for edge in edges:
        from_focus = edge.source == focus.key
        if edge.type.is_reversed:
            if from_focus:
                above += 1
            else:
                below += 1
        elif from_focus:
            below += 1
        else:
            above += 1
    return above, below


def _header(layout: Tuple[str, ...]) -> List[str]:
    lines = [f"digraph {GRAPH_NAME} {{"]
    lines.extend(f"{attr};" for attr in layout + _COMMON_LAYOUT)
    lines.append(_EDGE_DEFAULTS)
    lines.append(_NODE_DEFAULTS)
    return lines


def _finish(lines: List[str]) -> str:
    lines.append("}")
    return NEWLINE.join(lines) + NEWLINE


# ── Statements ──────────────────────────────────────────────────────────


def _edge_statement(
    edge: Edge,
    color: str,
    font_color: str,
) -> str:
    head = edge.type.head_glyph(edge.oneway)
    tail = edge.type.arrowtail
    if edge.type.is_reversed:
        # Drawn parent-to-child so the hierarchy reads top-down
        src, tgt = node_id(edge.target), node_id(edge.source)
        head, tail = tail, head
    else:
        src, tgt = node_id(edge.source), node_id(edge.target)

    return (
        f'{src} -> {tgt} [arrowhead="{head}", arrowtail="{tail}", '
        f'style="{edge.type.style}", dir="both", color="{color}", '
        f'fontcolor="{font_color}", label="{escape(edge.edge_label)}", '
        f'headlabel="{escape(edge.target_label)}", '
        f'taillabel="{escape(edge.source_label)}" ];'
    )


class DotRenderer:
    """Render overview, package summary and class diagrams.

    Args:
        registry: The run's category registry; categories named by rendered
            nodes are registered as a side effect.
    """

    def __init__(self, registry: CategoryRegistry):
        self._registry = registry

    # ── Overview ────────────────────────────────────────────────────────

    def render_overview(self, packages: List[PackageDescriptor], edges: EdgeSet) -> str:
        """Render package dependencies, transitively reduced.

        Raises:
            DiagramError: If a drawn package has an empty name.
        """
        names = sorted((p.name for p in packages), reverse=True)
        try:
            prefix_len = common_package_prefix(names)
        except ValueError as e:
            raise DiagramError(str(e)) from e

        reduced = transitive_reduction(edges)
        styles = StyleResolver(self._registry)
        line_color, font_color = styles.package_edge_colors()

        lines = _header(_OVERVIEW_LAYOUT)
        for pkg in sorted(packages, key=lambda p: p.name, reverse=True):
            lines.append(self._package_statement(styles, pkg, prefix_len))
        for edge in reduced:
            lines.append(_edge_statement(edge, line_color, font_color))

        logger.debug(
            f"Overview rendered: {len(packages)} packages, "
            f"{len(reduced)}/{len(edges)} edges kept, prefix length {prefix_len}"
        )
        return _finish(lines)

    def _package_statement(
        self,
        styles: StyleResolver,
        pkg: PackageDescriptor,
        prefix_len: int,
    ) -> str:
        style = "filled,dotted" if pkg.is_deprecated else "filled"
        href = f"{pkg.name.replace('.', '/')}/{PACKAGE_DIAGRAM_NAME}{DOC_PAGE_SUFFIX}"
        return (
            f'{node_id(pkg.name)} [label="{pkg.name[prefix_len:]}", style="{style}", '
            f'fillcolor="{styles.package_fill_color(pkg)}", href="{href}"];'
        )

    # ── Package summary / class diagram ─────────────────────────────────

    def render_package_summary(self, subgraph: Subgraph) -> str:
        lines = _header(_PACKAGE_LAYOUT)
        lines.extend(self._subgraph_statements(subgraph, portrait=True))
        return _finish(lines)

    def render_class_diagram(self, subgraph: Subgraph) -> str:
        if subgraph.focus is None:
            raise DiagramError(f"No focal type for class diagram of {subgraph.package.name}")

        above, below = count_related(subgraph.edges, subgraph.focus)
        if max(above, below) <= MAX_COMPACT_RELATED_NODES:
            layout, portrait = _COMPACT_CLASS_LAYOUT, False
        else:
            layout, portrait = _WIDE_CLASS_LAYOUT, True
        logger.debug(
            f"{subgraph.focus.key}: {above} above, {below} below, "
            f"{'wide' if portrait else 'compact'} layout"
        )

        lines = _header(layout)
        lines.extend(self._subgraph_statements(subgraph, portrait=portrait))
        return _finish(lines)

    def _subgraph_statements(self, subgraph: Subgraph, portrait: bool) -> List[str]:
        package = subgraph.package.name
        styles = StyleResolver(self._registry, package=package, focus=subgraph.focus)

        lines = []
        for node in sort_nodes(list(subgraph.nodes.values()), portrait):
            lines.append(self._node_statement(styles, package, node))

        for edge in subgraph.edges:
            target = subgraph.nodes.get(edge.target)
            if target is None:
                raise DiagramError(f"Edge {edge.source} -> {edge.target} has no rendered target")
            lines.append(_edge_statement(
                edge, styles.edge_line_color(target), styles.font_color(target),
            ))
        return lines

    def _node_statement(self, styles: StyleResolver, package: str, node: Node) -> str:
        # Registers the node's category before any color lookup
        self._registry.ensure_for(node.tags)

        label = node_label(node, package)
        attrs = [f'label="{label}"', f'tooltip="{escape(label)}"']
        if node.is_abstract and not node.is_interface:
            attrs.append(f'fontname="{ITALIC_FONT}"')
        attrs.append(f'style="{"filled,dotted" if node.deprecated else "filled"}"')
        attrs.append(f'color="{styles.line_color(node)}"')
        attrs.append(f'fontcolor="{styles.font_color(node)}"')
        attrs.append(f'fillcolor="{styles.fill_color(node)}"')

        href = relative_href(package, node)
        if href is not None:
            attrs.append(f'href="{href}"')

        return f"{node.node_id} [{', '.join(attrs)}];"
