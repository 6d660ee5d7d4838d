"""Relationship tag parsing.

Free-form tags are classified once into structured records: a
RelationshipTag for the four edge-producing kinds, an UnrecognizedTag for
everything else. Downstream code never string-matches tag names again.

Body grammar (permissive, never raises):

    <FQCN> [oneway] [<sourceLabel> <targetLabel> [<edgeLabel> ...]]

A label token of ``-`` stands for an empty label. Extra tokens are joined
into the edge label; a lone label token becomes the source label.
"""

import logging
from dataclasses import dataclass
from typing import Dict, Iterator, List, Optional, Tuple, Union

from ..constants import (
    EMPTY_LABEL_TOKEN,
    ONEWAY_TOKEN,
    TAG_COMPOSED_OF,
    TAG_HAS,
    TAG_OWNS,
    TAG_USES,
)
from .models import EdgeType

logger = logging.getLogger(__name__)

RELATIONSHIP_TAGS: Dict[str, EdgeType] = {
    TAG_USES: EdgeType.DEPENDENCY,
    TAG_HAS: EdgeType.NAVIGABILITY,
    TAG_OWNS: EdgeType.AGGREGATION,
    TAG_COMPOSED_OF: EdgeType.COMPOSITION,
}


@dataclass(frozen=True)
class RelationshipTag:
    """An edge intent parsed from a uses/has/owns/composedOf tag."""
    tag: str
    edge_type: EdgeType
    target: str
    source_label: str = ""
    target_label: str = ""
    edge_label: str = ""
    oneway: bool = False


@dataclass(frozen=True)
class UnrecognizedTag:
    """Any tag that does not describe a relationship."""
    tag: str
    text: str


ParsedTag = Union[RelationshipTag, UnrecognizedTag]


def _label(token: str) -> str:
    return "" if token == EMPTY_LABEL_TOKEN else token


def parse_relationship_body(tag: str, text: str) -> Optional[RelationshipTag]:
    """Parse one relationship tag body; None when the body is empty."""
    edge_type = RELATIONSHIP_TAGS[tag]
    tokens = (text or "").split()
    if not tokens:
        logger.debug(f"Dropping @{tag} tag with an empty body")
        return None

    target, rest = tokens[0], tokens[1:]

    oneway = False
    if rest and rest[0] == ONEWAY_TOKEN:
        oneway = True
        rest = rest[1:]

    source_label = _label(rest[0]) if len(rest) > 0 else ""
    target_label = _label(rest[1]) if len(rest) > 1 else ""
    edge_label = " ".join(rest[2:])
    if edge_label == EMPTY_LABEL_TOKEN:
        edge_label = ""

    if len(rest) == 1:
        logger.debug(f"@{tag} {text!r}: missing target label, using source label only")

    return RelationshipTag(
        tag=tag,
        edge_type=edge_type,
        target=target,
        source_label=source_label,
        target_label=target_label,
        edge_label=edge_label,
        oneway=oneway,
    )


def classify_tags(tags: Dict[str, Tuple[str, ...]]) -> Iterator[ParsedTag]:
    """Yield one parsed record per tag body, in tag then body order."""
    for tag, texts in tags.items():
        for text in texts:
            if tag in RELATIONSHIP_TAGS:
                parsed = parse_relationship_body(tag, text)
                if parsed is not None:
                    yield parsed
            else:
                yield UnrecognizedTag(tag=tag, text=text)


def relationship_tags(tags: Dict[str, Tuple[str, ...]]) -> List[RelationshipTag]:
    return [t for t in classify_tags(tags) if isinstance(t, RelationshipTag)]
