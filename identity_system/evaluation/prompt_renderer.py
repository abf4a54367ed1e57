"""Deterministic rendering of evidence units into atomic evaluation prompts.

A rendered prompt is a Markdown document built from the fixed text in
config.prompts.atomic_prompts around three statement blocks (target, anchor,
evidence), a Definitions section and a fenced Primary Source Report. The
same unit and closure always render byte-identical text at the same path:

    <method_id>/<slug(target id)>/<consideration>--<short(evidence id)>.md

Statement block format:
    - subject (<type phrase>): <subject raw, or "section: <name>">
    - predicate: <predicate CURIE>
    - object (fide:<T> (source fide:<S>)): <object raw>
"""

import re
from typing import Optional

import structlog

from identity_system.config.prompts import (
    ANCHOR_SECTION,
    ATOMIC_PROMPT_INTRODUCTION,
    ATOMIC_PROMPT_RETURN_JSON,
    ATOMIC_PROMPT_RULES,
    ATOMIC_PROMPT_TASK,
    ATOMIC_PROMPT_TITLE,
    CANONICAL_REPORT_NAME,
    CONFIDENCE_PREFIX_PATTERN,
    EVIDENCE_SECTION,
    NO_REPORT,
    REPORT_NAME_REQUIRED_MARKERS,
    TARGET_SECTION,
)
from identity_system.config.settings import settings
from identity_system.config.vocabulary import (
    PROV_HAD_PRIMARY_SOURCE_IRI,
    SCHEMA_DESCRIPTION_IRI,
    SCHEMA_IS_BASED_ON_IRI,
    SCHEMA_NAME_IRI,
    SCHEMA_VERSION_IRI,
    to_curie,
    type_curie,
)
from identity_system.data_management.errors import InvalidIdentifierError
from identity_system.data_management.identifiers import (
    STATEMENT_TYPE,
    ParsedIdentifier,
    parse_identifier,
    short_identifier,
    slugify_identifier,
)
from identity_system.data_management.schemas.evaluation_schema import (
    EvidenceClosure,
    EvidenceUnit,
    RenderedPrompt,
)
from identity_system.data_management.schemas.statement_schema import Statement
from identity_system.evaluation.term_resolver import VocabularyTermResolver

_UNKNOWN = ParsedIdentifier(entity_type="Unknown", source_type="Unknown")
_REPORT_TERM_PATTERN = re.compile(r"^-?\s*([a-z]+:[A-Za-z0-9]+):")
_CONFIDENCE_PREFIX = re.compile(CONFIDENCE_PREFIX_PATTERN, re.IGNORECASE)


def _parse_or_unknown(identifier: str) -> ParsedIdentifier:
    try:
        return parse_identifier(identifier)
    except InvalidIdentifierError:
        return _UNKNOWN


def _type_phrase(parsed: ParsedIdentifier) -> str:
    return f"{type_curie(parsed.entity_type)} (source {type_curie(parsed.source_type)})"


def statement_text_block(statement: Statement, sections: Optional[dict[str, str]] = None) -> str:
    """Three-line rendering of one statement.

    Args:
        statement: Statement to render.
        sections: Reference key -> section name. A Statement-typed subject
            found here renders as "section: <name>" instead of its id.
    """
    subject = _parse_or_unknown(statement.subject_id)
    obj = _parse_or_unknown(statement.object_id)

    if subject.entity_type == STATEMENT_TYPE:
        subject_phrase = type_curie(STATEMENT_TYPE)
        section = None
        if sections:
            section = sections.get(statement.subject_raw) or sections.get(statement.subject_id)
        subject_value = f"section: {section}" if section else statement.subject_id
    else:
        subject_phrase = _type_phrase(subject)
        subject_value = statement.subject_raw

    return "\n".join([
        f"- subject ({subject_phrase}): {subject_value}",
        f"- predicate: {to_curie(statement.predicate_raw)}",
        f"- object ({_type_phrase(obj)}): {statement.object_raw}",
    ])


def primary_source_report_lines(evidence: Statement, closure: EvidenceClosure) -> list[str]:
    """Report attributes for a hadPrimarySource evidence statement.

    Returns ["none"] for any other evidence or when the cited report has no
    statements in the closure.
    """
    if evidence.predicate_raw != PROV_HAD_PRIMARY_SOURCE_IRI:
        return [NO_REPORT]

    report = [
        statement
        for statement in closure.statements
        if statement.subject_id == evidence.object_id
        or statement.subject_raw == evidence.object_raw
    ]
    if not report:
        return [NO_REPORT]

    def objects(predicate: str) -> list[str]:
        return [s.object_raw for s in report if s.predicate_raw == predicate]

    lines: list[str] = []
    names = objects(SCHEMA_NAME_IRI)
    if names:
        name = names[0]
        if not all(marker in name for marker in REPORT_NAME_REQUIRED_MARKERS):
            name = CANONICAL_REPORT_NAME
        lines.append(f'schema:name: "{name}"')

    versions = objects(SCHEMA_VERSION_IRI)
    if versions:
        lines.append(f'schema:version: "{versions[0]}"')

    descriptions = objects(SCHEMA_DESCRIPTION_IRI)
    if descriptions:
        cleaned = _CONFIDENCE_PREFIX.sub("", descriptions[0], count=1)
        escaped = cleaned.replace('"', '\\"')
        lines.append(f'schema:description: "{escaped}"')

    based_on = objects(SCHEMA_IS_BASED_ON_IRI)
    if based_on:
        lines.append("schema:isBasedOn:")
        lines.extend(f'  - "{iri}"' for iri in based_on)

    return lines or [NO_REPORT]


def definition_terms(
    statements: list[Optional[Statement]], report_lines: list[str]
) -> list[str]:
    """Sorted type, source and predicate terms to define for a prompt."""
    terms: set[str] = set()
    for statement in statements:
        if statement is None:
            continue
        for identifier in (statement.subject_id, statement.object_id):
            parsed = _parse_or_unknown(identifier)
            terms.add(type_curie(parsed.entity_type))
            terms.add(type_curie(parsed.source_type))
        terms.add(to_curie(statement.predicate_raw))

    for line in report_lines:
        match = _REPORT_TERM_PATTERN.match(line)
        if match:
            terms.add(match.group(1))
    return sorted(terms)


def prompt_relative_path(
    method_id: str,
    target_statement_id: str,
    consideration: str,
    evidence_statement_id: str,
    short_length: Optional[int] = None,
) -> str:
    """Deterministic prompt path relative to the prompts root."""
    short = short_identifier(
        evidence_statement_id, short_length or settings.short_id_length
    )
    return "/".join([
        method_id,
        slugify_identifier(target_statement_id),
        f"{consideration}--{short}.md",
    ])


class AtomicPromptRenderer:
    """Renders one evidence unit into an atomic evidence-check document."""

    def __init__(
        self,
        term_resolver: VocabularyTermResolver,
        method_id: str = "temporal-validity/owl-sameAs/Person",
        short_id_length: Optional[int] = None,
    ) -> None:
        self.term_resolver = term_resolver
        self.method_id = method_id
        self.short_id_length = short_id_length or settings.short_id_length
        self._logger = structlog.get_logger().bind(component="AtomicPromptRenderer")

    def _sections(self, target: Statement, anchor: Optional[Statement]) -> dict[str, str]:
        sections = {
            target.statement_id: TARGET_SECTION,
            target.raw_identifier: TARGET_SECTION,
        }
        if anchor is not None:
            sections[anchor.statement_id] = ANCHOR_SECTION
            sections[anchor.raw_identifier] = ANCHOR_SECTION
        return sections

    def render_text(self, unit: EvidenceUnit, closure: EvidenceClosure) -> str:
        target, anchor, evidence = unit.target, unit.anchor, unit.evidence
        sections = self._sections(target, anchor)
        report_lines = primary_source_report_lines(evidence, closure)
        definitions = self.term_resolver.definitions_markdown(
            definition_terms([target, anchor, evidence], report_lines)
        )
        anchor_block = statement_text_block(anchor, sections) if anchor else "- none"

        blocks = [
            [ATOMIC_PROMPT_TITLE],
            ["## Introduction", *ATOMIC_PROMPT_INTRODUCTION],
            ["## Definitions", *definitions],
            ["## Task", *ATOMIC_PROMPT_TASK],
            [f"## {TARGET_SECTION}", statement_text_block(target, sections)],
            ["## Consideration", f"- {unit.consideration.value}"],
            [f"## {ANCHOR_SECTION}", anchor_block],
            [f"## {EVIDENCE_SECTION}", statement_text_block(evidence, sections)],
            ["## Primary Source Report", "```", *report_lines, "```"],
            ["## Return JSON", *ATOMIC_PROMPT_RETURN_JSON],
            ["## Rules", *ATOMIC_PROMPT_RULES],
        ]
        text = "\n\n".join("\n".join(block) for block in blocks)
        return text.rstrip("\n") + "\n"

    def render(self, unit: EvidenceUnit, closure: EvidenceClosure) -> RenderedPrompt:
        """Render unit against its closure.

        Returns:
            RenderedPrompt with text ending in exactly one newline and a path
            relative to the prompts root.
        """
        text = self.render_text(unit, closure)
        relative_path = prompt_relative_path(
            self.method_id,
            unit.target.statement_id,
            unit.consideration.value,
            unit.evidence.statement_id,
            self.short_id_length,
        )
        self._logger.debug(
            "prompt_rendered",
            consideration=unit.consideration.value,
            evidence_statement_id=unit.evidence.statement_id,
            prompt_chars=len(text),
        )
        return RenderedPrompt(unit=unit, text=text, relative_path=relative_path)


__all__ = [
    "AtomicPromptRenderer",
    "statement_text_block",
    "primary_source_report_lines",
    "definition_terms",
    "prompt_relative_path",
]
