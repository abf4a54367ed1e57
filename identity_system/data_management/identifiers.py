"""Content-addressed identifiers for entities, values and statements.

Default implementation of the identity collaborator contract:

- identity_of(entity_type, source_type, raw) -> identifier
- statement_identity_of(subject_id, predicate_id, object_id) -> identifier
- parse_identifier(identifier) -> (entity_type, source_type)

Encoding:
    did:eid:0x<36 hex digest><2 hex entity-type code><2 hex source-type code>

The digest is SHA-256 over "entity_type|source_type|raw". A statement's own
identifier is the identity of its pipe-joined component identifiers with
entity and source type "Statement", so a statement-about-a-statement whose
subject raw value is "S|P|O" has a subject identifier equal to the target's
statement identifier.
"""

import hashlib
import re
from typing import NamedTuple

from identity_system.data_management.errors import InvalidIdentifierError

ID_PREFIX = "did:eid:0x"
DIGEST_HEX_LENGTH = 36
_CODE_HEX_LENGTH = 2
_ID_HEX_LENGTH = DIGEST_HEX_LENGTH + 2 * _CODE_HEX_LENGTH
_HEX_PATTERN = re.compile(r"^[0-9a-f]+$")

STATEMENT_TYPE = "Statement"

# Predicates are always typed as vocabulary concepts addressed by IRI.
PREDICATE_ENTITY_TYPE = "Concept"
PREDICATE_SOURCE_TYPE = "NetworkResource"

# Closed type table; codes are 1-based positions. Append only: reordering
# changes every identifier ever derived.
TYPE_NAMES: tuple[str, ...] = (
    "Person",
    "Organization",
    "SoftwareAgent",
    "CreativeWork",
    "Concept",
    "Place",
    "Event",
    "Action",
    "PhysicalObject",
    "Statement",
    "NetworkResource",
    "PlatformAccount",
    "CryptographicAccount",
    "TextLiteral",
    "IntegerLiteral",
    "DecimalLiteral",
    "BoolLiteral",
    "DateLiteral",
    "TimeLiteral",
    "DateTimeLiteral",
    "DurationLiteral",
    "URILiteral",
    "JSONLiteral",
)

_CODE_BY_NAME: dict[str, str] = {
    name: f"{index + 1:02x}" for index, name in enumerate(TYPE_NAMES)
}
_NAME_BY_CODE: dict[str, str] = {code: name for name, code in _CODE_BY_NAME.items()}


class ParsedIdentifier(NamedTuple):
    """Type information recovered from an identifier."""

    entity_type: str
    source_type: str


def _type_code(type_name: str) -> str:
    code = _CODE_BY_NAME.get(type_name)
    if code is None:
        raise ValueError(f"Unknown type name: {type_name}")
    return code


def identity_of(entity_type: str, source_type: str, raw_value: str) -> str:
    """Derive the identifier of a typed raw value.

    Args:
        entity_type: Entity type name (e.g. "Person", "Statement").
        source_type: Identifier source type name (e.g. "NetworkResource").
        raw_value: Raw identifier value.

    Returns:
        Deterministic identifier string.

    Raises:
        ValueError: If either type name is not in TYPE_NAMES.
    """
    entity_code = _type_code(entity_type)
    source_code = _type_code(source_type)
    digest = hashlib.sha256(
        f"{entity_type}|{source_type}|{raw_value}".encode("utf-8")
    ).hexdigest()[:DIGEST_HEX_LENGTH]
    return f"{ID_PREFIX}{digest}{entity_code}{source_code}"


def parse_identifier(identifier: str) -> ParsedIdentifier:
    """Recover entity and source type from an identifier.

    Raises:
        InvalidIdentifierError: If the identifier is not in this encoding.
    """
    if not isinstance(identifier, str) or not identifier.startswith(ID_PREFIX):
        raise InvalidIdentifierError(str(identifier), f"expected prefix {ID_PREFIX}")

    body = identifier[len(ID_PREFIX):]
    if len(body) != _ID_HEX_LENGTH or not _HEX_PATTERN.match(body):
        raise InvalidIdentifierError(
            identifier, f"expected {_ID_HEX_LENGTH} lowercase hex digits"
        )

    entity_code = body[DIGEST_HEX_LENGTH:DIGEST_HEX_LENGTH + _CODE_HEX_LENGTH]
    source_code = body[DIGEST_HEX_LENGTH + _CODE_HEX_LENGTH:]
    entity_type = _NAME_BY_CODE.get(entity_code)
    source_type = _NAME_BY_CODE.get(source_code)
    if entity_type is None or source_type is None:
        raise InvalidIdentifierError(identifier, "unknown type code")

    return ParsedIdentifier(entity_type=entity_type, source_type=source_type)


def is_identifier(value: str) -> bool:
    """True if value parses as an identifier."""
    try:
        parse_identifier(value)
    except InvalidIdentifierError:
        return False
    return True


def build_statement_raw_identifier(
    subject_id: str, predicate_id: str, object_id: str
) -> str:
    """Canonical pipe-joined triple form used to reference a statement."""
    return f"{subject_id}|{predicate_id}|{object_id}"


def statement_identity_of(subject_id: str, predicate_id: str, object_id: str) -> str:
    """Derive a statement's identifier from its component identifiers.

    Raises:
        InvalidIdentifierError: If any component is not an identifier.
    """
    for component in (subject_id, predicate_id, object_id):
        parse_identifier(component)
    return identity_of(
        STATEMENT_TYPE,
        STATEMENT_TYPE,
        build_statement_raw_identifier(subject_id, predicate_id, object_id),
    )


def short_identifier(identifier: str, length: int = 12) -> str:
    """Fixed-length prefix of an identifier's hex body (prefix stripped)."""
    body = identifier[len(ID_PREFIX):] if identifier.startswith(ID_PREFIX) else identifier
    return body[:length]


def slugify_identifier(value: str) -> str:
    """Filesystem-safe slug: runs of non-alphanumerics become '-', lower-cased."""
    return re.sub(r"[^a-zA-Z0-9]+", "-", value).strip("-").lower()


__all__ = [
    "ID_PREFIX",
    "STATEMENT_TYPE",
    "PREDICATE_ENTITY_TYPE",
    "PREDICATE_SOURCE_TYPE",
    "TYPE_NAMES",
    "ParsedIdentifier",
    "identity_of",
    "parse_identifier",
    "is_identifier",
    "build_statement_raw_identifier",
    "statement_identity_of",
    "short_identifier",
    "slugify_identifier",
]
