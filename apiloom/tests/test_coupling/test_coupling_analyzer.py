"""Unit tests for package coupling analysis.

Tests cover:
- Static analyzer restricted to the requested packages
- Graph analyzer deriving couplings from type relationships
- Report sanity checks (zero classes, missing classes, hidden packages)
- Overview package and dependency selection
"""

from apiloom.core.coupling import (
    CouplingReport,
    GraphCouplingAnalyzer,
    StaticCouplingAnalyzer,
    check_coupling_report,
    package_dependencies,
    visible_packages,
)
from apiloom.core.descriptors.models import (
    CouplingData,
    DescriptorSet,
    PackageDescriptor,
    TypeDescriptor,
)
from apiloom.core.graph import build_graph


# ── Fixtures ──────────────────────────────────────────────────────────────


def _make_descriptors(packages=None) -> DescriptorSet:
    return DescriptorSet(
        [
            TypeDescriptor("a.A", "a", tags={"uses": ("b.B",)}, see_also=("c.C",)),
            TypeDescriptor("a.Helper", "a", superclass="a.A"),
            TypeDescriptor("b.B", "b"),
            TypeDescriptor("c.C", "c"),
        ],
        packages=packages,
    )


def _make_report(classes=None, efferents=None) -> CouplingReport:
    if classes is None:
        classes = {"a": {"a.A", "a.Helper"}, "b": {"b.B"}, "c": {"c.C"}}
    return CouplingReport(classes=classes, efferents=efferents or {})


# ── Tests: Analyzers ──────────────────────────────────────────────────────


class TestStaticCouplingAnalyzer:

    def test_restricted_to_requested_packages(self):
        data = CouplingData(
            classes={"a": ["a.A"], "b": ["b.B"], "x": ["x.X"]},
            efferents={"a": ["b", "x"], "x": ["a"]},
        )
        descriptors = _make_descriptors()
        report = StaticCouplingAnalyzer(data).analyze(["a", "b"], build_graph(descriptors))

        assert report.classes == {"a": {"a.A"}, "b": {"b.B"}}
        assert report.efferents == {"a": {"b"}}

    def test_empty_data(self):
        descriptors = _make_descriptors()
        report = StaticCouplingAnalyzer(CouplingData()).analyze(["a"], build_graph(descriptors))
        assert report.class_count == 0


class TestGraphCouplingAnalyzer:

    def test_cross_package_edges_become_efferents(self):
        descriptors = _make_descriptors()
        report = GraphCouplingAnalyzer().analyze(["a", "b", "c"], build_graph(descriptors))

        assert report.classes["a"] == {"a.A", "a.Helper"}
        # See-also links and same-package generalization do not couple
        assert report.efferents == {"a": {"b"}}

    def test_unrequested_package_ignored(self):
        descriptors = _make_descriptors()
        report = GraphCouplingAnalyzer().analyze(["a"], build_graph(descriptors))
        assert set(report.classes) == {"a"}
        assert report.efferents == {}

    def test_nested_type_uses_binary_name(self):
        descriptors = DescriptorSet([TypeDescriptor("a.Outer.Inner", "a")])
        report = GraphCouplingAnalyzer().analyze(["a"], build_graph(descriptors))
        assert report.classes == {"a": {"a.Outer$Inner"}}


# ── Tests: Report Checks ──────────────────────────────────────────────────


class TestCheckCouplingReport:

    def test_valid_report(self):
        assert check_coupling_report(_make_report(), _make_descriptors()) is None

    def test_zero_classes(self):
        problem = check_coupling_report(_make_report(classes={}), _make_descriptors())
        assert problem == "Coupling analysis did not locate any compiled classes"

    def test_missing_class_named(self):
        report = _make_report(classes={"a": {"a.A"}, "b": {"b.B"}, "c": {"c.C"}})
        problem = check_coupling_report(report, _make_descriptors())
        assert problem.endswith("a.Helper")

    def test_hidden_package_not_required(self):
        descriptors = _make_descriptors([PackageDescriptor("c", tags={"hidden": ("",)})])
        report = _make_report(classes={"a": {"a.A", "a.Helper"}, "b": {"b.B"}})
        assert check_coupling_report(report, descriptors) is None

    def test_report_counts(self):
        report = _make_report(efferents={"a": {"c", "b"}})
        assert report.class_count == 4
        assert report.efferents_of("a") == ["b", "c"]
        assert report.has_package("b")
        assert not report.has_package("z")


# ── Tests: Overview Selection ─────────────────────────────────────────────


class TestPackageDependencies:

    def test_visible_packages(self):
        descriptors = _make_descriptors([PackageDescriptor("b", tags={"exclude": ("",)})])
        assert visible_packages(descriptors) == ["a", "c"]

    def test_packages_drawn_in_descending_order(self):
        drawn, _edges = package_dependencies(_make_report(), _make_descriptors())
        assert [p.name for p in drawn] == ["c", "b", "a"]

    def test_edges_between_known_distinct_packages(self):
        report = _make_report(efferents={"a": {"a", "b", "zzz"}, "b": {"c"}})
        _drawn, edges = package_dependencies(report, _make_descriptors())
        assert [(e.source, e.target) for e in edges] == [("a", "b"), ("b", "c")]

    def test_hidden_package_dropped(self):
        descriptors = _make_descriptors([PackageDescriptor("b", tags={"hidden": ("",)})])
        report = _make_report(efferents={"a": {"b", "c"}})
        drawn, edges = package_dependencies(report, descriptors)
        assert [p.name for p in drawn] == ["c", "a"]
        assert [(e.source, e.target) for e in edges] == [("a", "c")]

    def test_package_unknown_to_report_not_drawn(self):
        report = _make_report(classes={"a": {"a.A"}})
        drawn, _edges = package_dependencies(report, _make_descriptors())
        assert [p.name for p in drawn] == ["a"]

    def test_non_included_package_has_no_edges(self):
        descriptors = _make_descriptors([PackageDescriptor("b", included=False)])
        report = _make_report(efferents={"a": {"b"}, "b": {"c"}})
        drawn, edges = package_dependencies(report, descriptors)
        assert "b" in [p.name for p in drawn]
        assert len(edges) == 0
