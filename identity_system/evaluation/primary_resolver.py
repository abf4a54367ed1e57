"""Primary identity resolution for same-as entity clusters.

Picks one canonical identifier for a cluster of owl:sameAs claims around a
focal raw value. The winner is the earliest-ingested schema:validFrom
statement about one of the cluster's claims, so the choice is auditable: any
reader holding the same statements reaches the same primary id.

Resolution:
1. Cluster claims: owl:sameAs statements whose subject has the requested
   entity type and whose subject raw or object raw equals the focal value.
2. Candidates: schema:validFrom statements whose subject is a Statement and
   whose subject raw "S|P|O" re-derives to the id of a cluster claim.
3. Order: first-seen ascending, statement id ascending, subject raw
   ascending. First-seen is first_seen_at when the wire carried one, else
   the validFrom object date; neither ⇒ last.
4. primary_id = identity_of(entity_type, "Statement", winner subject raw).

This ordering is ingest order wherever ingest time is known. It stays
independent of the citation_chain anchor, which always orders by the
validFrom object date.

Usage:
    resolver = PrimaryIdentityResolver()
    identity = resolver.resolve_primary("Person", batch.statements, "https://x.com/alice")
"""

from typing import Iterable, Optional

import structlog

from identity_system.config.vocabulary import (
    OWL_SAME_AS_IRI,
    SCHEMA_NAME_IRI,
    SCHEMA_VALID_FROM_IRI,
)
from identity_system.data_management.errors import InvalidIdentifierError
from identity_system.data_management.identifiers import (
    STATEMENT_TYPE,
    identity_of,
    parse_identifier,
    statement_identity_of,
)
from identity_system.data_management.schemas.evaluation_schema import PrimaryIdentity
from identity_system.data_management.schemas.statement_schema import Statement
from identity_system.utils.dates import parse_validity_timestamp


def _entity_type_of(identifier: str) -> Optional[str]:
    try:
        return parse_identifier(identifier).entity_type
    except InvalidIdentifierError:
        return None


def _first_seen_key(statement: Statement) -> float:
    """Ingest time in epoch ms; without one, the asserted validFrom date."""
    if statement.first_seen_at is not None:
        return float(statement.first_seen_at)
    return parse_validity_timestamp(statement.object_raw) * 1000


def _candidate_sort_key(statement: Statement) -> tuple:
    statement_id = statement.statement_id or None
    return (
        _first_seen_key(statement),
        statement_id is None,
        statement_id or "",
        statement.subject_raw,
    )


class PrimaryIdentityResolver:
    """Deterministic primary identifier selection for one entity cluster."""

    def __init__(self) -> None:
        self._logger = structlog.get_logger().bind(component="PrimaryIdentityResolver")

    def cluster_claim_ids(
        self,
        entity_type: str,
        statements: Iterable[Statement],
        focal_raw: str,
    ) -> set[str]:
        """Ids of same-as claims touching focal_raw with a subject of entity_type."""
        return {
            statement.statement_id
            for statement in statements
            if statement.predicate_raw == OWL_SAME_AS_IRI
            and _entity_type_of(statement.subject_id) == entity_type
            and focal_raw in (statement.subject_raw, statement.object_raw)
        }

    def _referenced_claim_id(self, statement: Statement) -> Optional[str]:
        """Re-derive the claim id a validFrom subject raw points at, if well-formed."""
        parts = statement.subject_raw.split("|")
        if len(parts) != 3:
            return None
        try:
            return statement_identity_of(*parts)
        except InvalidIdentifierError:
            return None

    def candidates(
        self,
        entity_type: str,
        statements: Iterable[Statement],
        focal_raw: str,
    ) -> list[Statement]:
        """validFrom statements about cluster claims, in resolution order."""
        statements = list(statements)
        claim_ids = self.cluster_claim_ids(entity_type, statements, focal_raw)
        if not claim_ids:
            return []

        selected = [
            statement
            for statement in statements
            if statement.predicate_raw == SCHEMA_VALID_FROM_IRI
            and _entity_type_of(statement.subject_id) == STATEMENT_TYPE
            and self._referenced_claim_id(statement) in claim_ids
        ]
        return sorted(selected, key=_candidate_sort_key)

    def resolve_primary(
        self,
        entity_type: str,
        statements: Iterable[Statement],
        focal_raw: str,
    ) -> Optional[PrimaryIdentity]:
        """Resolve the primary identifier for the cluster around focal_raw.

        Args:
            entity_type: Entity type of the cluster (e.g. "Person").
            statements: Statements to search, typically a whole batch.
            focal_raw: Raw identifier value the cluster is built around.

        Returns:
            PrimaryIdentity, or None when no validFrom candidate survives.
            Unresolved is a normal outcome, not an error.
        """
        ordered = self.candidates(entity_type, statements, focal_raw)
        if not ordered:
            self._logger.info(
                "primary_unresolved", entity_type=entity_type, focal_raw=focal_raw
            )
            return None

        winner = ordered[0]
        identity = PrimaryIdentity(
            entity_type=entity_type,
            focal_raw=focal_raw,
            primary_id=identity_of(entity_type, STATEMENT_TYPE, winner.subject_raw),
            anchor_raw=winner.subject_raw,
            anchor_statement_id=winner.statement_id,
            anchor_first_seen_at=winner.first_seen_at,
            candidate_count=len(ordered),
        )
        self._logger.info(
            "primary_resolved",
            entity_type=entity_type,
            primary_id=identity.primary_id,
            anchor_statement_id=winner.statement_id,
            candidate_count=len(ordered),
        )
        return identity

    def find_focal_identifier(
        self,
        entity_type: str,
        statements: Iterable[Statement],
        identifier_contains: Optional[str] = None,
        name_contains: Optional[str] = None,
    ) -> Optional[str]:
        """Pick a focal raw value among subjects of entity_type.

        Preference: a subject raw containing identifier_contains, then a
        subject whose schema:name contains name_contains (case-insensitive),
        then the first subject raw in batch order.
        """
        statements = list(statements)
        typed = [
            statement
            for statement in statements
            if _entity_type_of(statement.subject_id) == entity_type
        ]
        subjects = list(dict.fromkeys(statement.subject_raw for statement in typed))
        if not subjects:
            return None

        if identifier_contains:
            for raw in subjects:
                if identifier_contains in raw:
                    return raw

        if name_contains:
            needle = name_contains.lower()
            for statement in typed:
                if (
                    statement.predicate_raw == SCHEMA_NAME_IRI
                    and needle in statement.object_raw.lower()
                ):
                    return statement.subject_raw

        return subjects[0]


__all__ = ["PrimaryIdentityResolver"]
