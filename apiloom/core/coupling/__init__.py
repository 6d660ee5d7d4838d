# apiloom coupling - efferent package coupling for the overview diagram

from .analyzer import (
    CouplingAnalyzer,
    CouplingReport,
    GraphCouplingAnalyzer,
    StaticCouplingAnalyzer,
    check_coupling_report,
    package_dependencies,
    visible_packages,
)

__all__ = [
    "CouplingAnalyzer",
    "CouplingReport",
    "GraphCouplingAnalyzer",
    "StaticCouplingAnalyzer",
    "check_coupling_report",
    "package_dependencies",
    "visible_packages",
]
