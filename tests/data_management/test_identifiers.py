"""Tests for content-addressed identifiers.

Tests cover:
- identity_of determinism and encoding shape
- parse_identifier recovering entity and source types
- Rejection of foreign, malformed and unknown-type identifiers
- statement_identity_of over component identifiers
- short_identifier and slugify_identifier path helpers
"""

import pytest

from identity_system.data_management.errors import InvalidIdentifierError
from identity_system.data_management.identifiers import (
    ID_PREFIX,
    build_statement_raw_identifier,
    identity_of,
    is_identifier,
    parse_identifier,
    short_identifier,
    slugify_identifier,
    statement_identity_of,
)


class TestIdentityOf:
    """Tests for identifier derivation."""

    def test_same_input_same_identifier(self):
        """Identical typed raw values yield identical identifiers."""
        first = identity_of("Person", "NetworkResource", "https://x.com/alice")
        second = identity_of("Person", "NetworkResource", "https://x.com/alice")
        assert first == second

    def test_type_participates_in_identity(self):
        """Same raw value under different types yields different identifiers."""
        person = identity_of("Person", "NetworkResource", "https://x.com/alice")
        org = identity_of("Organization", "NetworkResource", "https://x.com/alice")
        assert person != org

    def test_encoding_shape(self):
        """Prefix followed by 40 lowercase hex digits."""
        identifier = identity_of("Person", "NetworkResource", "https://x.com/alice")
        assert identifier.startswith(ID_PREFIX)
        body = identifier[len(ID_PREFIX):]
        assert len(body) == 40
        assert body == body.lower()
        int(body, 16)

    def test_unknown_type_rejected(self):
        """Type names outside the closed table raise ValueError."""
        with pytest.raises(ValueError):
            identity_of("Spaceship", "NetworkResource", "x")


class TestParseIdentifier:
    """Tests for type recovery from identifiers."""

    def test_recovers_types(self):
        """Entity and source type round-trip through the encoding."""
        identifier = identity_of("Organization", "PlatformAccount", "acme")
        parsed = parse_identifier(identifier)
        assert parsed.entity_type == "Organization"
        assert parsed.source_type == "PlatformAccount"

    @pytest.mark.parametrize(
        "value",
        [
            "https://x.com/alice",
            "did:eid:0x1234",
            ID_PREFIX + "z" * 40,
            ID_PREFIX + "0" * 36 + "ff" + "01",
        ],
    )
    def test_rejects_invalid(self, value):
        """Foreign, short, non-hex and unknown-code identifiers are rejected."""
        with pytest.raises(InvalidIdentifierError):
            parse_identifier(value)
        assert is_identifier(value) is False

    def test_invalid_identifier_is_value_error(self):
        """InvalidIdentifierError is catchable as ValueError."""
        with pytest.raises(ValueError):
            parse_identifier("nope")


class TestStatementIdentity:
    """Tests for statement identifier derivation."""

    def test_statement_identity_is_identity_of_raw_triple(self):
        """Statement id equals identity_of(Statement, Statement, 'S|P|O')."""
        s = identity_of("Person", "NetworkResource", "a")
        p = identity_of("Concept", "NetworkResource", "https://www.w3.org/2002/07/owl#sameAs")
        o = identity_of("Person", "NetworkResource", "b")

        expected = identity_of("Statement", "Statement", f"{s}|{p}|{o}")
        assert statement_identity_of(s, p, o) == expected
        assert build_statement_raw_identifier(s, p, o) == f"{s}|{p}|{o}"

    def test_statement_identity_parses_as_statement(self):
        s = identity_of("Person", "NetworkResource", "a")
        p = identity_of("Concept", "NetworkResource", "p")
        o = identity_of("TextLiteral", "TextLiteral", "Alice")
        parsed = parse_identifier(statement_identity_of(s, p, o))
        assert parsed.entity_type == "Statement"
        assert parsed.source_type == "Statement"

    def test_rejects_non_identifier_component(self):
        """Every component must itself be an identifier."""
        s = identity_of("Person", "NetworkResource", "a")
        with pytest.raises(InvalidIdentifierError):
            statement_identity_of(s, "not-an-id", s)


class TestPathHelpers:
    """Tests for prompt path helpers."""

    def test_short_identifier_strips_prefix(self):
        identifier = ID_PREFIX + "abcdef0123456789" + "0" * 24
        assert short_identifier(identifier) == "abcdef012345"
        assert short_identifier(identifier, 4) == "abcd"

    def test_short_identifier_without_prefix(self):
        assert short_identifier("abcdef0123456789") == "abcdef012345"

    def test_slugify(self):
        assert slugify_identifier("did:eid:0xABC") == "did-eid-0xabc"
        assert slugify_identifier("--a b//c--") == "a-b-c"
