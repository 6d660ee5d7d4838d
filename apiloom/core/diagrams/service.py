"""DiagramService — orchestrator for one diagram generation run.

Builds the relationship graph once, then renders the overview, one
package summary per package and one class diagram per included type, in
that fixed order. Category registration happens lazily while rendering,
so the traversal order is part of the output contract.
"""

import logging
import os
from dataclasses import dataclass, field
from typing import Callable, Dict, List, Optional, Sequence, Tuple, Union

from ..config.config_loader import Settings, get_settings
from ..constants import DIAGRAM_FILE_SUFFIX, OVERVIEW_DIAGRAM_NAME, PACKAGE_DIAGRAM_NAME
from ..coupling.analyzer import (
    CouplingAnalyzer,
    GraphCouplingAnalyzer,
    StaticCouplingAnalyzer,
    check_coupling_report,
    package_dependencies,
    visible_packages,
)
from ..descriptors.models import DescriptorSet
from ..graph.builder import build_graph
from ..graph.selector import SubgraphSelector
from .dot import DiagramError, DotRenderer
from .styles import Category, CategoryRegistry, CategorySpecError, parse_category_spec
from .validator import validate_dot

logger = logging.getLogger(__name__)

SEVERITY_WARNING = "warning"
SEVERITY_ERROR = "error"


@dataclass
class Diagnostic:
    """A problem attributed to a diagram, package, type or option."""
    subject: str
    message: str
    severity: str = SEVERITY_WARNING

    def __str__(self) -> str:
        return f"{self.subject}: {self.message}"


@dataclass
class GenerationResult:
    """Diagram texts of one run, keyed by qualified name, plus diagnostics."""
    overview: Optional[str] = None
    packages: Dict[str, str] = field(default_factory=dict)
    classes: Dict[str, str] = field(default_factory=dict)
    diagnostics: List[Diagnostic] = field(default_factory=list)
    aborted: bool = False

    @property
    def diagram_count(self) -> int:
        return (1 if self.overview is not None else 0) + len(self.packages) + len(self.classes)

    @property
    def errors(self) -> List[Diagnostic]:
        return [d for d in self.diagnostics if d.severity == SEVERITY_ERROR]

    @property
    def warnings(self) -> List[Diagnostic]:
        return [d for d in self.diagnostics if d.severity == SEVERITY_WARNING]


def declared_categories(
    specs: Sequence[Union[str, Sequence[str]]],
) -> Tuple[List[Category], List[Diagnostic]]:
    """Parse configured category options, skipping malformed ones."""
    categories: List[Category] = []
    diagnostics: List[Diagnostic] = []
    for spec in specs:
        args = spec.split() if isinstance(spec, str) else list(spec)
        try:
            categories.append(parse_category_spec(args))
        except CategorySpecError as e:
            logger.warning(f"Ignoring category option: {e}")
            diagnostics.append(Diagnostic("category", str(e)))
    return categories, diagnostics


def diagram_path(qualified_name: str, package: str) -> str:
    """Output path, relative and '/'-separated, of a class diagram."""
    name = qualified_name[len(package) + 1:] if package else qualified_name
    if not package:
        return f"{name}{DIAGRAM_FILE_SUFFIX}"
    return f"{package.replace('.', '/')}/{name}{DIAGRAM_FILE_SUFFIX}"


def package_diagram_path(package: str) -> str:
    if not package:
        return f"{PACKAGE_DIAGRAM_NAME}{DIAGRAM_FILE_SUFFIX}"
    return f"{package.replace('.', '/')}/{PACKAGE_DIAGRAM_NAME}{DIAGRAM_FILE_SUFFIX}"


class DiagramService:
    """Generates every diagram of one run from a DescriptorSet."""

    def __init__(
        self,
        descriptors: DescriptorSet,
        settings: Optional[Settings] = None,
        coupling_analyzer: Optional[CouplingAnalyzer] = None,
    ):
        """Initialize DiagramService.

        Args:
            descriptors: Types and packages of the run
            settings: Run settings; the cached configuration when omitted
            coupling_analyzer: Package coupling source for the overview;
                chosen from ``settings.diagrams.coupling`` when omitted
        """
        self._descriptors = descriptors
        self._settings = settings or get_settings()

        categories, self._config_diagnostics = declared_categories(self._settings.categories)
        self._registry = CategoryRegistry(categories)

        self._graph = build_graph(descriptors)
        self._selector = SubgraphSelector(self._graph)
        self._renderer = DotRenderer(self._registry)
        self._coupling = coupling_analyzer or self._default_analyzer()
        self._diagnostics: List[Diagnostic] = []

    @property
    def registry(self) -> CategoryRegistry:
        return self._registry

    @property
    def diagnostics(self) -> List[Diagnostic]:
        """Configuration diagnostics followed by those of the last calls."""
        return self._config_diagnostics + self._diagnostics

    def _default_analyzer(self) -> Optional[CouplingAnalyzer]:
        if self._settings.diagrams.coupling == "graph":
            return GraphCouplingAnalyzer()
        if self._descriptors.couplings is not None:
            return StaticCouplingAnalyzer(self._descriptors.couplings)
        return None

    # ── Single diagrams ───────────────────────────────────────────────

    def generate_overview(self) -> Optional[str]:
        """Package dependency overview, or None when it must be skipped."""
        if not self._settings.diagrams.package_diagram:
            logger.info("Package diagram disabled, skipping overview")
            return None

        if self._coupling is None:
            self._skip_overview("No package coupling data available")
            return None

        report = self._coupling.analyze(visible_packages(self._descriptors), self._graph)
        problem = check_coupling_report(report, self._descriptors)
        if problem is not None:
            self._skip_overview(problem)
            return None

        packages, edges = package_dependencies(report, self._descriptors)
        logger.info(f"Generating {OVERVIEW_DIAGRAM_NAME} ({len(packages)} packages)")
        text = self._renderer.render_overview(packages, edges)
        self._validate(OVERVIEW_DIAGRAM_NAME, text)
        return text

    def generate_package_summary(self, package_name: str) -> str:
        logger.info(f"Generating package summary for {package_name or '<unnamed>'}")
        subgraph = self._selector.select_package(package_name)
        text = self._renderer.render_package_summary(subgraph)
        self._validate(package_diagram_path(package_name), text)
        return text

    def generate_class_diagram(self, type_name: str) -> str:
        node = self._graph.get(type_name)
        if node is None or not node.included:
            raise DiagramError(f"{type_name} is not an included type")

        logger.info(f"Generating class diagram for {type_name}")
        subgraph = self._selector.select_class(type_name)
        text = self._renderer.render_class_diagram(subgraph)
        self._validate(diagram_path(type_name, node.package), text)
        return text

    # ── Whole run ─────────────────────────────────────────────────────

    def generate_all(self) -> GenerationResult:
        """Overview, package summaries, then class diagrams, all sorted.

        A DiagramError aborts only its diagram. Any other error, including
        an invalid exclude pattern, aborts the run and is recorded on the
        returned result.
        """
        self._diagnostics = []
        result = GenerationResult()

        try:
            result.overview = self._attempt(OVERVIEW_DIAGRAM_NAME, self.generate_overview)

            for pkg in self._descriptors.packages():
                text = self._attempt(pkg.name, lambda: self.generate_package_summary(pkg.name))
                if text is not None:
                    result.packages[pkg.name] = text

            for desc in self._descriptors.included_types():
                text = self._attempt(
                    desc.qualified_name,
                    lambda: self.generate_class_diagram(desc.qualified_name),
                )
                if text is not None:
                    result.classes[desc.qualified_name] = text

        except Exception as e:
            logger.error(f"An error occurred during diagram generation: {e}")
            self._diagnostics.append(Diagnostic("run", str(e), SEVERITY_ERROR))
            result.aborted = True

        result.diagnostics = self.diagnostics
        logger.info(
            f"Generated {result.diagram_count} diagrams "
            f"({len(result.errors)} errors, {len(result.warnings)} warnings)"
        )
        return result

    def write(self, result: GenerationResult, output_dir: Optional[str] = None) -> List[str]:
        """Write every diagram of ``result`` as UTF-8 .dot files.

        Returns:
            Paths of the written files, in generation order.
        """
        output_dir = output_dir or self._settings.diagrams.output_dir
        files: List[Tuple[str, str]] = []

        if result.overview is not None:
            files.append((f"{OVERVIEW_DIAGRAM_NAME}{DIAGRAM_FILE_SUFFIX}", result.overview))
        for name, text in result.packages.items():
            files.append((package_diagram_path(name), text))
        for name, text in result.classes.items():
            files.append((diagram_path(name, self._descriptors.type_named(name).package), text))

        written = []
        for rel_path, text in files:
            path = os.path.join(output_dir, *rel_path.split("/"))
            os.makedirs(os.path.dirname(path), exist_ok=True)
            with open(path, "w", encoding="utf-8") as f:
                f.write(text)
            written.append(path)

        logger.info(f"Wrote {len(written)} diagrams to {output_dir}")
        return written

    # ── Internal helpers ──────────────────────────────────────────────

    def _attempt(self, subject: str, generate: Callable[[], Optional[str]]) -> Optional[str]:
        try:
            return generate()
        except DiagramError as e:
            logger.error(f"Diagram for {subject} aborted: {e}")
            self._diagnostics.append(Diagnostic(subject, str(e), SEVERITY_ERROR))
            return None

    def _skip_overview(self, reason: str) -> None:
        logger.warning(f"{reason}; package dependency diagram will not be generated")
        self._diagnostics.append(Diagnostic(OVERVIEW_DIAGRAM_NAME, reason))

    def _validate(self, name: str, text: str) -> None:
        if self._settings.diagrams.validate_output:
            validate_dot(name, text)
