"""Shared fixtures: statement factories and a Person same-as scenario.

The Person scenario is one owl:sameAs claim between two Alice accounts with
two validFrom statements (2022-06-01 ingested first, 2021-01-01 ingested
later), report-backed and non-report citations, a cited report with a
property node, names, an affiliation, a contradiction, and unrelated Bob
statements that must never reach the closure.
"""

from types import SimpleNamespace

import pytest

from identity_system.config.vocabulary import (
    OWL_DIFFERENT_FROM_IRI,
    OWL_SAME_AS_IRI,
    PROV_HAD_PRIMARY_SOURCE_IRI,
    SCHEMA_ADDITIONAL_PROPERTY_IRI,
    SCHEMA_DESCRIPTION_IRI,
    SCHEMA_IS_BASED_ON_IRI,
    SCHEMA_NAME_IRI,
    SCHEMA_VALID_FROM_IRI,
    SCHEMA_VALID_THROUGH_IRI,
    SCHEMA_VERSION_IRI,
)
from identity_system.data_management.identifiers import identity_of
from identity_system.data_management.schemas import Statement, StatementWire
from identity_system.data_management.statement_loader import build_statement_batch

PREDICATE_TYPE = ("Concept", "NetworkResource")

REPORT_URL = "https://fide.work/evidence/reports/alice-sameas-2021"
LATE_REPORT_URL = "https://fide.work/evidence/reports/alice-sameas-2022"
BLOG_URL = "https://example.com/blog/alice-moves"


def _make_statement(subject, predicate_iri, obj, first_seen_at=None) -> Statement:
    s_type, s_source, s_raw = subject
    o_type, o_source, o_raw = obj
    wire = StatementWire(
        s=identity_of(s_type, s_source, s_raw),
        sr=s_raw,
        p=identity_of(*PREDICATE_TYPE, predicate_iri),
        pr=predicate_iri,
        o=identity_of(o_type, o_source, o_raw),
        or_=o_raw,
        first_seen_at=first_seen_at,
    )
    return Statement.from_wire(wire)


def _about(statement: Statement, encoding: str = "raw") -> tuple[str, str, str]:
    """Subject triple for a statement about statement, in either encoding."""
    raw = statement.raw_identifier if encoding == "raw" else statement.statement_id
    return ("Statement", "Statement", raw)


def _text(value: str) -> tuple[str, str, str]:
    return ("TextLiteral", "TextLiteral", value)


def _date(value: str) -> tuple[str, str, str]:
    return ("DateLiteral", "DateLiteral", value)


def _url(value: str) -> tuple[str, str, str]:
    return ("CreativeWork", "NetworkResource", value)


@pytest.fixture
def make_statement():
    """Factory: make_statement((type, source, raw), predicate_iri, (type, source, raw))."""
    return _make_statement


@pytest.fixture
def about():
    """Factory: subject triple referencing a statement ("raw" or "id" encoding)."""
    return _about


@pytest.fixture
def person_scenario():
    """Person same-as claim with its full evidentiary neighbourhood."""
    alice_x = ("Person", "NetworkResource", "https://x.com/alice")
    alice_gh = ("Person", "NetworkResource", "https://github.com/alice")
    acme = ("Organization", "NetworkResource", "https://acme.example")
    bob_x = ("Person", "NetworkResource", "https://x.com/bob")
    bob_gh = ("Person", "NetworkResource", "https://github.com/bob")
    property_node = ("Concept", "NetworkResource", "https://fide.work/evidence/properties/signal-1")

    target = _make_statement(alice_x, OWL_SAME_AS_IRI, alice_gh)
    valid_from_late = _make_statement(
        _about(target), SCHEMA_VALID_FROM_IRI, _date("2022-06-01"), first_seen_at=1000
    )
    valid_from_early = _make_statement(
        _about(target), SCHEMA_VALID_FROM_IRI, _date("2021-01-01"), first_seen_at=2000
    )
    valid_through = _make_statement(
        _about(target, "id"), SCHEMA_VALID_THROUGH_IRI, _date("2025-01-01")
    )
    citation_early = _make_statement(
        _about(valid_from_early, "id"), PROV_HAD_PRIMARY_SOURCE_IRI, _url(REPORT_URL)
    )
    citation_late = _make_statement(
        _about(valid_from_late), PROV_HAD_PRIMARY_SOURCE_IRI, _url(LATE_REPORT_URL)
    )
    citation_blog = _make_statement(
        _about(valid_from_early), PROV_HAD_PRIMARY_SOURCE_IRI, _url(BLOG_URL)
    )

    report = _url(REPORT_URL)
    report_name = _make_statement(report, SCHEMA_NAME_IRI, _text("Alice identity report"))
    report_version = _make_statement(report, SCHEMA_VERSION_IRI, _text("1.0"))
    report_description = _make_statement(
        report,
        SCHEMA_DESCRIPTION_IRI,
        _text('Estimated validFrom confidence=0.82. Both profiles link "alice" handles.'),
    )
    report_based_on = _make_statement(
        report, SCHEMA_IS_BASED_ON_IRI, _url("https://x.com/alice/status/1")
    )
    report_property = _make_statement(report, SCHEMA_ADDITIONAL_PROPERTY_IRI, property_node)
    property_name = _make_statement(property_node, SCHEMA_NAME_IRI, _text("bio-link"))

    name_x = _make_statement(alice_x, SCHEMA_NAME_IRI, _text("Alice Example"))
    name_gh = _make_statement(alice_gh, SCHEMA_NAME_IRI, _text("Alice E."))
    works_for = _make_statement(alice_gh, "https://schema.org/worksFor", acme)
    different_from = _make_statement(alice_gh, OWL_DIFFERENT_FROM_IRI, alice_x)

    acme_name = _make_statement(acme, SCHEMA_NAME_IRI, _text("Acme"))
    bob_name = _make_statement(bob_x, SCHEMA_NAME_IRI, _text("Bob"))
    bob_same_as = _make_statement(bob_x, OWL_SAME_AS_IRI, bob_gh)
    bob_valid_from = _make_statement(
        _about(bob_same_as), SCHEMA_VALID_FROM_IRI, _date("2020-01-01"), first_seen_at=10
    )

    statements = [
        target,
        valid_from_late,
        valid_from_early,
        valid_through,
        citation_late,
        citation_early,
        citation_blog,
        report_name,
        report_version,
        report_description,
        report_based_on,
        report_property,
        property_name,
        name_x,
        name_gh,
        works_for,
        different_from,
        acme_name,
        bob_name,
        bob_same_as,
        bob_valid_from,
    ]
    batch = build_statement_batch([s.to_wire().to_wire_dict() for s in statements])

    return SimpleNamespace(
        target=target,
        valid_from_late=valid_from_late,
        valid_from_early=valid_from_early,
        valid_through=valid_through,
        citation_early=citation_early,
        citation_late=citation_late,
        citation_blog=citation_blog,
        report_name=report_name,
        report_version=report_version,
        report_description=report_description,
        report_based_on=report_based_on,
        report_property=report_property,
        property_name=property_name,
        name_x=name_x,
        name_gh=name_gh,
        works_for=works_for,
        different_from=different_from,
        acme_name=acme_name,
        bob_name=bob_name,
        bob_same_as=bob_same_as,
        bob_valid_from=bob_valid_from,
        statements=statements,
        batch=batch,
    )
