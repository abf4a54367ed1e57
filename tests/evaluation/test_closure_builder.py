"""Tests for EvidenceClosureBuilder.

Tests cover:
- Each hop selects exactly its statements
- Target first, hops in table order, deduplicated
- Boundedness: unrelated statements never enter the closure
- Batch-order independence of membership
"""

import pytest

from identity_system.data_management.statement_graph import StatementGraph
from identity_system.evaluation.closure_builder import (
    SAME_AS_HOPS,
    EvidenceClosureBuilder,
    HopMatch,
    HopRule,
)


@pytest.fixture
def builder():
    return EvidenceClosureBuilder()


@pytest.fixture
def closure(builder, person_scenario):
    graph = StatementGraph.from_batch(person_scenario.batch)
    return builder.build(person_scenario.target, graph)


class TestHops:
    """Per-hop selection."""

    def test_validity_uses_both_encodings(self, closure, person_scenario):
        assert closure.hops["validity"] == (
            person_scenario.valid_from_late,
            person_scenario.valid_from_early,
            person_scenario.valid_through,
        )

    def test_citations_reference_validity(self, closure, person_scenario):
        assert closure.hops["citations"] == (
            person_scenario.citation_late,
            person_scenario.citation_early,
            person_scenario.citation_blog,
        )

    def test_names_and_affiliations_on_endpoints(self, closure, person_scenario):
        assert closure.hops["names"] == (person_scenario.name_x, person_scenario.name_gh)
        assert closure.hops["affiliations"] == (person_scenario.works_for,)

    def test_contradiction_either_direction(self, closure, person_scenario):
        assert closure.hops["contradictions"] == (person_scenario.different_from,)

    def test_report_bodies_and_properties(self, closure, person_scenario):
        assert closure.hops["report_bodies"] == (
            person_scenario.report_name,
            person_scenario.report_version,
            person_scenario.report_description,
            person_scenario.report_based_on,
            person_scenario.report_property,
        )
        assert closure.hops["report_properties"] == (person_scenario.property_name,)


class TestClosureShape:
    """Ordering, deduplication and boundedness."""

    def test_target_first(self, closure, person_scenario):
        assert closure.statements[0] == person_scenario.target
        assert closure.target == person_scenario.target

    def test_statement_ids_unique(self, closure):
        assert len(closure.statement_ids) == len(set(closure.statement_ids))

    def test_unrelated_statements_excluded(self, closure, person_scenario):
        for outsider in (
            person_scenario.acme_name,
            person_scenario.bob_name,
            person_scenario.bob_same_as,
            person_scenario.bob_valid_from,
        ):
            assert outsider.statement_id not in closure

    def test_everything_else_included(self, closure, person_scenario):
        outsiders = {
            person_scenario.acme_name.statement_id,
            person_scenario.bob_name.statement_id,
            person_scenario.bob_same_as.statement_id,
            person_scenario.bob_valid_from.statement_id,
        }
        expected = {s.statement_id for s in person_scenario.statements} - outsiders
        assert set(closure.statement_ids) == expected
        assert len(closure) == len(expected)

    def test_membership_independent_of_batch_order(self, builder, person_scenario, closure):
        reversed_graph = StatementGraph(list(reversed(person_scenario.statements)))
        rebuilt = builder.build(person_scenario.target, reversed_graph)
        assert set(rebuilt.statement_ids) == set(closure.statement_ids)
        assert rebuilt.statements[0] == person_scenario.target

    def test_deterministic(self, builder, person_scenario, closure):
        graph = StatementGraph.from_batch(person_scenario.batch)
        assert builder.build(person_scenario.target, graph) == closure

    def test_target_alone(self, builder, person_scenario):
        graph = StatementGraph([person_scenario.target])
        closure = builder.build(person_scenario.target, graph)
        assert closure.statement_ids == [person_scenario.target.statement_id]
        assert all(found == () for found in closure.hops.values())


class TestHopTable:
    """The hop table is data; custom tables drive the same traversal."""

    def test_default_table_order(self):
        assert [rule.name for rule in SAME_AS_HOPS] == [
            "validity",
            "citations",
            "names",
            "affiliations",
            "contradictions",
            "report_bodies",
            "report_properties",
        ]

    def test_custom_table(self, person_scenario):
        names_only = (
            HopRule("names", None, HopMatch.SUBJECT_IS_ENDPOINT, ("target",)),
        )
        builder = EvidenceClosureBuilder(hops=names_only)
        graph = StatementGraph.from_batch(person_scenario.batch)
        closure = builder.build(person_scenario.target, graph)

        assert set(closure.hops) == {"names"}
        assert person_scenario.works_for in closure.hops["names"]
        assert person_scenario.valid_from_early.statement_id not in closure
