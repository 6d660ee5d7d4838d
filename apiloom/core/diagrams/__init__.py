"""APIviz-style diagram generation.

Produces Graphviz DOT text for three diagram kinds:
  Overview: package dependencies, transitively reduced
  Package summary: the types of one package and their neighbours
  Class diagram: one focal type and its direct relationships

Public API:
  DiagramService — orchestrator for one generation run
"""

from .dot import DiagramError, DotRenderer
from .service import DiagramService, Diagnostic, GenerationResult
from .styles import Category, CategoryRegistry, CategorySpecError, parse_category_spec
from .validator import DiagramSyntaxError, validate_dot

__all__ = [
    "Category",
    "CategoryRegistry",
    "CategorySpecError",
    "DiagramError",
    "DiagramService",
    "DiagramSyntaxError",
    "Diagnostic",
    "DotRenderer",
    "GenerationResult",
    "parse_category_spec",
    "validate_dot",
]
