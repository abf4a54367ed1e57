"""Tests for AtomicPromptRenderer and its helpers.

Tests cover:
- Section order and exact framing (title, fences, single trailing newline)
- Statement blocks, including section references for statement subjects
- Primary source report normalisation
- Definitions terms
- Deterministic output path
"""

import pytest

from identity_system.config.prompts import (
    ANCHOR_SECTION,
    CANONICAL_REPORT_NAME,
    TARGET_SECTION,
)
from identity_system.data_management.identifiers import short_identifier, slugify_identifier
from identity_system.data_management.schemas import Consideration
from identity_system.data_management.statement_graph import StatementGraph
from identity_system.evaluation.closure_builder import EvidenceClosureBuilder
from identity_system.evaluation.consideration_router import ConsiderationRouter
from identity_system.evaluation.prompt_renderer import (
    AtomicPromptRenderer,
    definition_terms,
    primary_source_report_lines,
    prompt_relative_path,
    statement_text_block,
)
from identity_system.evaluation.term_resolver import VocabularyTermResolver

METHOD_ID = "temporal-validity/owl-sameAs/Person"


@pytest.fixture
def closure(person_scenario):
    graph = StatementGraph.from_batch(person_scenario.batch)
    return EvidenceClosureBuilder().build(person_scenario.target, graph)


@pytest.fixture
def router():
    return ConsiderationRouter(report_path_marker="/evidence/reports/")


@pytest.fixture
def renderer():
    return AtomicPromptRenderer(VocabularyTermResolver([]), method_id=METHOD_ID, short_id_length=12)


@pytest.fixture
def citation_unit(router, closure, person_scenario):
    pool = router.route(Consideration.CITATION_CHAIN, person_scenario.target, closure)
    return pool.units[0]


class TestStatementTextBlock:
    """Tests for three-line statement rendering."""

    def test_entity_subject(self, person_scenario):
        block = statement_text_block(person_scenario.target)
        assert block.split("\n") == [
            "- subject (fide:Person (source fide:NetworkResource)): https://x.com/alice",
            "- predicate: owl:sameAs",
            "- object (fide:Person (source fide:NetworkResource)): https://github.com/alice",
        ]

    def test_statement_subject_without_section_shows_id(self, person_scenario):
        block = statement_text_block(person_scenario.valid_from_early)
        first = block.split("\n")[0]
        assert first == (
            f"- subject (fide:Statement): {person_scenario.valid_from_early.subject_id}"
        )

    def test_statement_subject_with_section(self, person_scenario):
        target = person_scenario.target
        sections = {target.statement_id: TARGET_SECTION, target.raw_identifier: TARGET_SECTION}
        block = statement_text_block(person_scenario.valid_from_early, sections)
        lines = block.split("\n")
        assert lines[0] == f"- subject (fide:Statement): section: {TARGET_SECTION}"
        assert lines[1] == "- predicate: schema:validFrom"
        assert lines[2] == "- object (fide:DateLiteral (source fide:DateLiteral)): 2021-01-01"

    def test_section_found_by_statement_id_raw(self, person_scenario):
        """validThrough uses the statement-id encoding as its subject raw."""
        target = person_scenario.target
        sections = {target.statement_id: TARGET_SECTION}
        block = statement_text_block(person_scenario.valid_through, sections)
        assert f"section: {TARGET_SECTION}" in block


class TestPrimarySourceReport:
    """Tests for the fenced report block."""

    def test_report_lines(self, closure, person_scenario):
        lines = primary_source_report_lines(person_scenario.citation_early, closure)
        assert lines == [
            f'schema:name: "{CANONICAL_REPORT_NAME}"',
            'schema:version: "1.0"',
            'schema:description: "Both profiles link \\"alice\\" handles."',
            "schema:isBasedOn:",
            '  - "https://x.com/alice/status/1"',
        ]

    def test_name_kept_when_it_names_both_terms(self, closure, person_scenario):
        named = person_scenario.report_name.model_copy(
            update={"object_raw": "Alice owl:sameAs validFrom review"}
        )
        statements = [named if s == person_scenario.report_name else s for s in closure.statements]
        patched = closure.model_copy(update={"statements": tuple(statements)})
        lines = primary_source_report_lines(person_scenario.citation_early, patched)
        assert lines[0] == 'schema:name: "Alice owl:sameAs validFrom review"'

    def test_non_citation_evidence(self, closure, person_scenario):
        assert primary_source_report_lines(person_scenario.name_x, closure) == ["none"]

    def test_citation_without_report_body(self, closure, person_scenario):
        assert primary_source_report_lines(person_scenario.citation_late, closure) == ["none"]


class TestDefinitionTerms:
    """Tests for definition term collection."""

    def test_terms_from_statements_and_report(self, closure, person_scenario):
        report_lines = primary_source_report_lines(person_scenario.citation_early, closure)
        terms = definition_terms(
            [person_scenario.target, person_scenario.valid_from_early, person_scenario.citation_early],
            report_lines,
        )
        assert terms == sorted(terms)
        for expected in (
            "fide:Person",
            "fide:NetworkResource",
            "fide:Statement",
            "fide:DateLiteral",
            "fide:CreativeWork",
            "owl:sameAs",
            "schema:validFrom",
            "prov:hadPrimarySource",
            "schema:name",
            "schema:version",
            "schema:description",
            "schema:isBasedOn",
        ):
            assert expected in terms

    def test_missing_anchor_ignored(self, person_scenario):
        terms = definition_terms([person_scenario.name_x, None], ["none"])
        assert "schema:name" in terms
        assert "fide:TextLiteral" in terms


class TestRender:
    """Tests for the full rendered document."""

    def test_section_order(self, renderer, citation_unit, closure):
        text = renderer.render(citation_unit, closure).text
        headings = [line for line in text.split("\n") if line.startswith("#") and not line.startswith("###")]
        assert headings == [
            "# Atomic Evidence Check",
            "## Introduction",
            "## Definitions",
            "## Task",
            "## Statement: Target owl:sameAs",
            "## Consideration",
            "## Statement: Anchor schema:validFrom",
            "## Statement: Evidence under review",
            "## Primary Source Report",
            "## Return JSON",
            "## Rules",
        ]

    def test_framing(self, renderer, citation_unit, closure):
        text = renderer.render(citation_unit, closure).text
        assert text.startswith("# Atomic Evidence Check\n\n## Introduction\n")
        assert text.endswith("- Do not invent facts beyond the provided statements.\n")
        assert not text.endswith("\n\n")
        assert "## Consideration\n- citation_chain\n" in text

    def test_section_references(self, renderer, citation_unit, closure):
        text = renderer.render(citation_unit, closure).text
        anchor_part = text.split(f"## {ANCHOR_SECTION}\n")[1].split("\n\n")[0]
        evidence_part = text.split("## Statement: Evidence under review\n")[1].split("\n\n")[0]

        assert f"section: {TARGET_SECTION}" in anchor_part
        assert f"section: {ANCHOR_SECTION}" in evidence_part
        assert "- predicate: prov:hadPrimarySource" in evidence_part

    def test_report_fenced(self, renderer, citation_unit, closure):
        text = renderer.render(citation_unit, closure).text
        report = text.split("## Primary Source Report\n")[1].split("\n\n")[0]
        lines = report.split("\n")
        assert lines[0] == "```"
        assert lines[-1] == "```"
        assert f'schema:name: "{CANONICAL_REPORT_NAME}"' in lines

    def test_no_anchor_renders_none(self, renderer, router, closure, person_scenario):
        unit = router.route(Consideration.NAME_ALIGNMENT, person_scenario.target, closure).units[0]
        text = renderer.render(unit, closure).text
        assert f"## {ANCHOR_SECTION}\n- none\n" in text
        assert "## Primary Source Report\n```\nnone\n```" in text

    def test_byte_identical(self, renderer, citation_unit, closure):
        first = renderer.render(citation_unit, closure)
        second = AtomicPromptRenderer(
            VocabularyTermResolver([]), method_id=METHOD_ID, short_id_length=12
        ).render(citation_unit, closure)
        assert first.text == second.text
        assert first.relative_path == second.relative_path

    def test_relative_path(self, renderer, citation_unit, closure, person_scenario):
        rendered = renderer.render(citation_unit, closure)
        evidence_id = person_scenario.citation_early.statement_id
        assert rendered.relative_path == (
            f"{METHOD_ID}/{slugify_identifier(person_scenario.target.statement_id)}/"
            f"citation_chain--{short_identifier(evidence_id)}.md"
        )


class TestPromptRelativePath:
    def test_path_shape(self):
        path = prompt_relative_path(
            METHOD_ID, "did:eid:0xAAA", "name_alignment", "did:eid:0x0123456789abcdef", 12
        )
        assert path == f"{METHOD_ID}/did-eid-0xaaa/name_alignment--0123456789ab.md"
