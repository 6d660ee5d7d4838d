"""Package coupling analysis for the overview diagram.

The overview is built from efferent (outbound) package couplings rather
than from the type-level graph. Analyzers share one contract; the run
checks the report against the descriptor set before trusting it.
"""

import logging
from abc import ABC, abstractmethod
from dataclasses import dataclass, field
from typing import Dict, List, Optional, Set, Tuple

from ..descriptors.models import CouplingData, DescriptorSet, PackageDescriptor
from ..graph.builder import RelationshipGraph
from ..graph.models import Edge, EdgeSet, EdgeType, is_hidden

logger = logging.getLogger(__name__)


@dataclass
class CouplingReport:
    """Per-package analyzed classes and efferent couplings."""
    classes: Dict[str, Set[str]] = field(default_factory=dict)
    efferents: Dict[str, Set[str]] = field(default_factory=dict)

    @property
    def class_count(self) -> int:
        return sum(len(c) for c in self.classes.values())

    def has_package(self, name: str) -> bool:
        return name in self.classes or name in self.efferents

    def efferents_of(self, name: str) -> List[str]:
        return sorted(self.efferents.get(name, ()))


class CouplingAnalyzer(ABC):
    """Abstract base for package coupling analyzers."""

    @abstractmethod
    def analyze(self, packages: List[str], graph: RelationshipGraph) -> CouplingReport:
        """Return couplings restricted to ``packages``."""
        ...


class StaticCouplingAnalyzer(CouplingAnalyzer):
    """Serve couplings computed ahead of time by an external analyzer."""

    def __init__(self, data: CouplingData):
        self._data = data

    def analyze(self, packages: List[str], graph: RelationshipGraph) -> CouplingReport:
        wanted = set(packages)
        report = CouplingReport()
        for pkg, classes in self._data.classes.items():
            if pkg in wanted:
                report.classes[pkg] = set(classes)
        for pkg, targets in self._data.efferents.items():
            if pkg in wanted:
                report.efferents[pkg] = {t for t in targets if t in wanted}
        return report


class GraphCouplingAnalyzer(CouplingAnalyzer):
    """Derive package couplings from the type-level relationship graph.

    Every edge except SEE_ALSO whose endpoints live in two different
    analyzed packages counts as an efferent coupling of the source package.
    """

    def analyze(self, packages: List[str], graph: RelationshipGraph) -> CouplingReport:
        wanted = set(packages)
        report = CouplingReport()

        for desc in graph.descriptors.included_types():
            if desc.package in wanted:
                report.classes.setdefault(desc.package, set()).add(desc.binary_name)

        for edge in graph.edges():
            if edge.type is EdgeType.SEE_ALSO:
                continue
            src_pkg = graph.node(edge.source).package
            tgt_pkg = graph.node(edge.target).package
            if src_pkg in wanted and tgt_pkg in wanted and src_pkg != tgt_pkg:
                report.efferents.setdefault(src_pkg, set()).add(tgt_pkg)

        return report


def visible_packages(descriptors: DescriptorSet) -> List[str]:
    """Names of the packages eligible for the overview, sorted."""
    return [p.name for p in descriptors.packages() if not is_hidden(p.tags)]


def check_coupling_report(report: CouplingReport, descriptors: DescriptorSet) -> Optional[str]:
    """Return a problem description when the report cannot be trusted.

    A report with no classes, or one missing any visible included type,
    means the analyzer saw a different code base (typically a wrong
    classpath); the overview must not be drawn from it.
    """
    if report.class_count == 0:
        return "Coupling analysis did not locate any compiled classes"

    for desc in descriptors.included_types():
        if not desc.package or is_hidden(descriptors.package_named(desc.package).tags):
            continue
        if desc.binary_name not in report.classes.get(desc.package, ()):
            return f"Coupling analysis did not locate some compiled classes: {desc.binary_name}"

    return None


def package_dependencies(
    report: CouplingReport,
    descriptors: DescriptorSet,
) -> Tuple[List[PackageDescriptor], EdgeSet]:
    """Packages and PACKAGE_DEPENDENCY edges the overview draws.

    A package is drawn when it is visible and the report knows it. An
    efferent becomes an edge only between two distinct included packages
    whose target is a visible package of this run.
    """
    known: Dict[str, PackageDescriptor] = {p.name: p for p in descriptors.packages()}
    drawn: List[PackageDescriptor] = []
    edges = EdgeSet()

    for name in sorted(known, reverse=True):
        pkg = known[name]
        if is_hidden(pkg.tags) or not report.has_package(name):
            continue
        drawn.append(pkg)

        for target_name in report.efferents_of(name):
            target = known.get(target_name)
            if target is None or is_hidden(target.tags):
                continue
            if target_name != name and pkg.included and target.included:
                edges.add(Edge(EdgeType.PACKAGE_DEPENDENCY, name, target_name))

    logger.debug(f"Overview: {len(drawn)} packages, {len(edges)} dependencies before reduction")
    return drawn, edges
