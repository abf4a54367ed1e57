"""Statement schemas - the unit of the content-addressed statement graph.

A statement is a subject-predicate-object triple of identifiers, each paired
with its raw value, plus the statement's own identifier derived from the
three component identifiers. Statements are immutable and created once at
ingest; identical triples always carry identical statement ids.

Wire format (one JSON object per JSONL line):
    {"s": ..., "sr": ..., "p": ..., "pr": ..., "o": ..., "or": ...}
with an optional "first_seen_at" ingest timestamp in epoch milliseconds.
"""

from typing import Any, Optional

from pydantic import BaseModel, Field, field_validator

from identity_system.data_management.identifiers import (
    build_statement_raw_identifier,
    statement_identity_of,
)


class StatementWire(BaseModel):
    """Six-field wire record as produced by the statement loader.

    Attributes:
        s: Subject identifier.
        sr: Subject raw value.
        p: Predicate identifier.
        pr: Predicate raw value (the predicate IRI).
        o: Object identifier.
        or_: Object raw value (serialised as "or").
        first_seen_at: Optional ingest timestamp, epoch milliseconds.
    """

    s: str = Field(..., min_length=1, description="Subject identifier")
    sr: str = Field(..., min_length=1, description="Subject raw value")
    p: str = Field(..., min_length=1, description="Predicate identifier")
    pr: str = Field(..., min_length=1, description="Predicate raw value (IRI)")
    o: str = Field(..., min_length=1, description="Object identifier")
    or_: str = Field(..., alias="or", min_length=1, description="Object raw value")
    first_seen_at: Optional[int] = Field(
        default=None, description="Ingest timestamp in epoch milliseconds"
    )

    model_config = {
        "populate_by_name": True,
        "extra": "ignore",
        "frozen": True,
        "json_schema_extra": {
            "examples": [
                {
                    "s": "did:eid:0x...0101",
                    "sr": "https://x.com/alice",
                    "p": "did:eid:0x...050b",
                    "pr": "https://www.w3.org/2002/07/owl#sameAs",
                    "o": "did:eid:0x...010c",
                    "or": "https://github.com/alice",
                }
            ]
        },
    }

    @field_validator("s", "sr", "p", "pr", "o", "or_")
    @classmethod
    def not_blank(cls, value: str) -> str:
        if not value.strip():
            raise ValueError("expected non-empty string")
        return value

    def to_wire_dict(self) -> dict[str, Any]:
        """Serialise with wire keys, omitting an absent timestamp."""
        return self.model_dump(by_alias=True, exclude_none=True)


class Statement(BaseModel):
    """An immutable statement with its derived identifier.

    Attributes:
        statement_id: Identity of (subject_id, predicate_id, object_id).
        subject_id / subject_raw: Subject identifier and raw value.
        predicate_id / predicate_raw: Predicate identifier and IRI.
        object_id / object_raw: Object identifier and raw value.
        first_seen_at: Ingest timestamp (epoch ms) when known.
    """

    statement_id: str = Field(..., description="Derived statement identifier")
    subject_id: str
    subject_raw: str
    predicate_id: str
    predicate_raw: str
    object_id: str
    object_raw: str
    first_seen_at: Optional[int] = None

    model_config = {"frozen": True}

    @classmethod
    def from_wire(cls, wire: StatementWire) -> "Statement":
        """Build a statement from a wire record, deriving its identifier."""
        return cls(
            statement_id=statement_identity_of(wire.s, wire.p, wire.o),
            subject_id=wire.s,
            subject_raw=wire.sr,
            predicate_id=wire.p,
            predicate_raw=wire.pr,
            object_id=wire.o,
            object_raw=wire.or_,
            first_seen_at=wire.first_seen_at,
        )

    @property
    def raw_identifier(self) -> str:
        """Pipe-joined triple used when another statement references this one."""
        return build_statement_raw_identifier(
            self.subject_id, self.predicate_id, self.object_id
        )

    @property
    def endpoints(self) -> tuple[str, str]:
        """Subject and object identifiers."""
        return (self.subject_id, self.object_id)

    def to_wire(self) -> StatementWire:
        return StatementWire(
            s=self.subject_id,
            sr=self.subject_raw,
            p=self.predicate_id,
            pr=self.predicate_raw,
            o=self.object_id,
            or_=self.object_raw,
            first_seen_at=self.first_seen_at,
        )


class StatementBatch(BaseModel):
    """An ordered statement batch loaded for one command invocation.

    Attributes:
        statements: Statements in input order.
        root: SHA-256 hex over the sorted statement ids joined by newlines.
    """

    statements: tuple[Statement, ...]
    root: str = Field(..., description="Order-independent batch fingerprint")

    model_config = {"frozen": True}

    @property
    def statement_ids(self) -> list[str]:
        return [statement.statement_id for statement in self.statements]

    def __len__(self) -> int:
        return len(self.statements)
