"""Tests for StatementGraph lookups and reference matching."""

import pytest

from identity_system.config.vocabulary import SCHEMA_NAME_IRI, SCHEMA_VALID_FROM_IRI
from identity_system.data_management.errors import InputNotFoundError
from identity_system.data_management.statement_graph import (
    StatementGraph,
    reference_keys,
    refers_to,
)


@pytest.fixture
def graph(person_scenario):
    return StatementGraph.from_batch(person_scenario.batch)


class TestStatementGraphLookup:
    """Tests for indexed lookups."""

    def test_get_and_contains(self, graph, person_scenario):
        target = person_scenario.target
        assert graph.get(target.statement_id) == target
        assert target.statement_id in graph
        assert graph.get("missing") is None

    def test_require_missing_raises(self, graph):
        with pytest.raises(InputNotFoundError) as exc_info:
            graph.require("did:eid:0xmissing")
        assert exc_info.value.statement_id == "did:eid:0xmissing"
        assert "statement batch" in str(exc_info.value)

    def test_with_predicate_in_batch_order(self, graph, person_scenario):
        found = graph.with_predicate(SCHEMA_VALID_FROM_IRI)
        assert found == [
            person_scenario.valid_from_late,
            person_scenario.valid_from_early,
            person_scenario.bob_valid_from,
        ]

    def test_with_subject_matches_id_and_raw(self, graph, person_scenario):
        target = person_scenario.target
        by_id = graph.with_subject([target.subject_id])
        by_raw = graph.with_subject([target.subject_raw])
        assert by_id == by_raw
        assert person_scenario.name_x in by_id

    def test_with_object(self, graph, person_scenario):
        target = person_scenario.target
        assert graph.with_object([target.object_id]) == [target]
        assert graph.with_object([person_scenario.works_for.object_id]) == [
            person_scenario.works_for
        ]

    def test_duplicates_dropped(self, person_scenario):
        statements = person_scenario.statements + [person_scenario.name_x]
        graph = StatementGraph(statements)
        assert len(graph) == len(person_scenario.statements)
        assert graph.with_predicate(SCHEMA_NAME_IRI).count(person_scenario.name_x) == 1


class TestReferenceMatching:
    """Both self-reference encodings must match the same target."""

    def test_reference_keys(self, person_scenario):
        target = person_scenario.target
        assert reference_keys(target) == frozenset(
            {target.statement_id, target.raw_identifier}
        )

    def test_raw_triple_encoding_matches(self, person_scenario):
        keys = reference_keys(person_scenario.target)
        assert refers_to(person_scenario.valid_from_early, keys)

    def test_statement_id_as_raw_matches(self, person_scenario):
        """validThrough references the target by statement id as subject raw."""
        keys = reference_keys(person_scenario.target)
        statement = person_scenario.valid_through
        assert statement.subject_raw == person_scenario.target.statement_id
        assert statement.subject_id != person_scenario.target.statement_id
        assert refers_to(statement, keys)

    def test_unrelated_statement_does_not_match(self, person_scenario):
        keys = reference_keys(person_scenario.target)
        assert not refers_to(person_scenario.bob_valid_from, keys)
        assert not refers_to(person_scenario.name_x, keys)

    def test_referencing_finds_both_encodings(self, graph, person_scenario):
        found = graph.referencing([person_scenario.target])
        assert found == [
            person_scenario.valid_from_late,
            person_scenario.valid_from_early,
            person_scenario.valid_through,
        ]

    def test_referencing_filters_predicates(self, graph, person_scenario):
        found = graph.referencing(
            [person_scenario.target], frozenset({SCHEMA_VALID_FROM_IRI})
        )
        assert person_scenario.valid_through not in found
        assert len(found) == 2
