"""DOT syntax validation for generated diagrams."""

import logging

import pydot

from .dot import DiagramError

logger = logging.getLogger(__name__)


class DiagramSyntaxError(DiagramError):
    """Generated diagram text does not parse as DOT."""


def validate_dot(name: str, text: str) -> None:
    """Parse ``text`` with pydot and raise when it is not a single digraph.

    Raises:
        DiagramSyntaxError: If pydot rejects the text.
    """
    try:
        graphs = pydot.graph_from_dot_data(text)
    except Exception as e:
        raise DiagramSyntaxError(f"{name}: invalid DOT syntax: {e}") from e

    if not graphs:
        raise DiagramSyntaxError(f"{name}: invalid DOT syntax")
    if len(graphs) != 1 or graphs[0].get_type() != "digraph":
        raise DiagramSyntaxError(f"{name}: expected exactly one digraph, got {len(graphs)} graphs")

    logger.debug(f"{name}: DOT syntax ok")
