"""Statement batch loading from JSONL wire files or JSON snapshots.

Features:
- JSONL input: one wire record per non-blank line
- JSON snapshot input: an object carrying a "statementWires" array
- Statement ids derived on load; component identifiers validated
- Batch root: SHA-256 over sorted statement ids, independent of input order

A malformed record fails the whole load. A partially loaded graph would make
every downstream evidence selection silently wrong.
"""

import hashlib
import json
from pathlib import Path
from typing import Any, Iterable, List

from loguru import logger
from pydantic import ValidationError

from identity_system.data_management.errors import (
    InvalidIdentifierError,
    StatementBatchError,
)
from identity_system.data_management.identifiers import (
    PREDICATE_ENTITY_TYPE,
    PREDICATE_SOURCE_TYPE,
    identity_of,
)
from identity_system.data_management.schemas.statement_schema import (
    Statement,
    StatementBatch,
    StatementWire,
)

_log = logger.bind(component="StatementLoader")


def calculate_batch_root(statement_ids: Iterable[str]) -> str:
    """Order-independent fingerprint of a statement batch.

    Raises:
        StatementBatchError: If there are no statement ids.
    """
    canonical_ids = sorted(statement_ids)
    if not canonical_ids:
        raise StatementBatchError("expected one or more statement ids")
    return hashlib.sha256("\n".join(canonical_ids).encode("utf-8")).hexdigest()


def _record_to_statement(record: Any, line_number: int) -> Statement:
    if not isinstance(record, dict):
        raise StatementBatchError("expected object", line_number)

    try:
        wire = StatementWire.model_validate(record)
    except ValidationError as exc:
        first = exc.errors()[0]
        field = ".".join(str(part) for part in first.get("loc", ())) or "record"
        raise StatementBatchError(
            f"{first.get('msg', 'invalid value')} at {field}", line_number
        ) from exc

    try:
        return Statement.from_wire(wire)
    except InvalidIdentifierError as exc:
        raise StatementBatchError(str(exc), line_number) from exc


def build_statement_batch(records: List[Any]) -> StatementBatch:
    """Validate wire records and assemble a batch, failing on the first bad record."""
    if not records:
        raise StatementBatchError("no statement records found")

    statements = tuple(
        _record_to_statement(record, index + 1) for index, record in enumerate(records)
    )
    root = calculate_batch_root(statement.statement_id for statement in statements)
    return StatementBatch(statements=statements, root=root)


def parse_statement_batch_jsonl(text: str) -> StatementBatch:
    """Parse a JSONL statement batch.

    Raises:
        StatementBatchError: On empty input, invalid JSON or an invalid record.
    """
    if not text or not text.strip():
        raise StatementBatchError("expected non-empty JSONL input")

    records: List[Any] = []
    for line in (raw_line.strip() for raw_line in text.split("\n")):
        if not line:
            continue
        try:
            records.append(json.loads(line))
        except json.JSONDecodeError as exc:
            # Line numbers count non-blank lines, matching build_statement_batch
            raise StatementBatchError("invalid JSON", len(records) + 1) from exc

    return build_statement_batch(records)


def parse_statement_batch_snapshot(text: str) -> StatementBatch:
    """Parse a JSON snapshot object carrying a "statementWires" array."""
    try:
        parsed = json.loads(text)
    except json.JSONDecodeError as exc:
        raise StatementBatchError("snapshot is not valid JSON") from exc

    wires = parsed.get("statementWires") if isinstance(parsed, dict) else None
    if not isinstance(wires, list):
        raise StatementBatchError("snapshot must carry a statementWires array")

    return build_statement_batch(wires)


def load_statement_batch(path: str | Path) -> StatementBatch:
    """Load a statement batch from disk.

    Files ending in .json are read as snapshots; anything else as JSONL.
    """
    batch_path = Path(path)
    try:
        text = batch_path.read_text(encoding="utf-8")
    except UnicodeDecodeError as exc:
        raise StatementBatchError(f"{batch_path} is not valid UTF-8") from exc

    if batch_path.suffix.lower() == ".json":
        batch = parse_statement_batch_snapshot(text)
    else:
        batch = parse_statement_batch_jsonl(text)

    _log.info(
        "Statement batch loaded",
        path=str(batch_path),
        statement_count=len(batch),
        root=batch.root,
    )
    return batch


def make_statement_wire(
    subject: tuple[str, str, str],
    predicate_iri: str,
    obj: tuple[str, str, str],
    first_seen_at: int | None = None,
) -> StatementWire:
    """Build a wire record from typed raw values.

    Args:
        subject: (entity type, source type, raw value) of the subject.
        predicate_iri: Predicate IRI, typed as a Concept network resource.
        obj: (entity type, source type, raw value) of the object.
        first_seen_at: Optional ingest timestamp in epoch milliseconds.

    Raises:
        ValueError: If a type name is not registered.
    """
    subject_type, subject_source, subject_raw = subject
    object_type, object_source, object_raw = obj
    return StatementWire(
        s=identity_of(subject_type, subject_source, subject_raw),
        sr=subject_raw,
        p=identity_of(PREDICATE_ENTITY_TYPE, PREDICATE_SOURCE_TYPE, predicate_iri),
        pr=predicate_iri,
        o=identity_of(object_type, object_source, object_raw),
        or_=object_raw,
        first_seen_at=first_seen_at,
    )


def to_wire_jsonl(statements: Iterable[Statement]) -> str:
    """Serialise statements back to normalised JSONL (trailing newline)."""
    lines = [
        json.dumps(statement.to_wire().to_wire_dict(), ensure_ascii=False)
        for statement in statements
    ]
    return "\n".join(lines) + "\n"


__all__ = [
    "calculate_batch_root",
    "build_statement_batch",
    "parse_statement_batch_jsonl",
    "parse_statement_batch_snapshot",
    "load_statement_batch",
    "make_statement_wire",
    "to_wire_jsonl",
]
