"""Unit tests for relationship tag parsing."""

from apiloom.core.graph.models import EdgeType
from apiloom.core.graph.tags import (
    RelationshipTag,
    UnrecognizedTag,
    classify_tags,
    parse_relationship_body,
    relationship_tags,
)


class TestParseRelationshipBody:

    def test_target_only(self):
        tag = parse_relationship_body("uses", "a.B")
        assert tag == RelationshipTag(tag="uses", edge_type=EdgeType.DEPENDENCY, target="a.B")

    def test_full_body(self):
        tag = parse_relationship_body("has", "a.B oneway owner items holds many")
        assert tag.edge_type == EdgeType.NAVIGABILITY
        assert tag.target == "a.B"
        assert tag.oneway
        assert tag.source_label == "owner"
        assert tag.target_label == "items"
        assert tag.edge_label == "holds many"

    def test_dash_means_empty_label(self):
        tag = parse_relationship_body("owns", "a.B - - contains")
        assert tag.edge_type == EdgeType.AGGREGATION
        assert tag.source_label == ""
        assert tag.target_label == ""
        assert tag.edge_label == "contains"

    def test_dash_edge_label(self):
        tag = parse_relationship_body("composedOf", "a.B 1 * -")
        assert tag.edge_type == EdgeType.COMPOSITION
        assert (tag.source_label, tag.target_label, tag.edge_label) == ("1", "*", "")

    def test_single_dangling_label_is_source_label(self):
        tag = parse_relationship_body("uses", "a.B lonely")
        assert tag.source_label == "lonely"
        assert tag.target_label == ""
        assert tag.edge_label == ""

    def test_whitespace_runs_tolerated(self):
        tag = parse_relationship_body("uses", "  a.B \t  x   y  ")
        assert (tag.target, tag.source_label, tag.target_label) == ("a.B", "x", "y")

    def test_empty_body_dropped(self):
        assert parse_relationship_body("uses", "   ") is None
        assert parse_relationship_body("uses", "") is None

    def test_oneway_only_after_target(self):
        tag = parse_relationship_body("has", "a.B x oneway")
        assert not tag.oneway
        assert tag.source_label == "x"
        assert tag.target_label == "oneway"


class TestClassifyTags:

    def test_unrecognized_tags_bucketed(self):
        parsed = list(classify_tags({"landmark": ("",), "uses": ("a.B",)}))
        assert parsed[0] == UnrecognizedTag(tag="landmark", text="")
        assert isinstance(parsed[1], RelationshipTag)

    def test_one_record_per_body(self):
        parsed = relationship_tags({"uses": ("a.B", "a.C"), "has": ("a.D",)})
        assert [(t.tag, t.target) for t in parsed] == [("uses", "a.B"), ("uses", "a.C"), ("has", "a.D")]

    def test_empty_bodies_skipped(self):
        assert relationship_tags({"uses": ("",)}) == []
