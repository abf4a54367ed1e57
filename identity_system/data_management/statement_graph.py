"""Read-only statement graph with indexed lookups and reference matching.

The graph wraps one loaded batch for the duration of a command. Lookups are
O(1) per key through indexes built once at construction, and every lookup
returns statements in batch order so downstream output is deterministic.

Reference matching:
    A statement R is "about" a target statement T when R's subject carries
    one of T's reference keys, either as subject identifier or as subject raw
    value. T's reference keys are its statement id and its pipe-joined raw
    triple "S|P|O". reference_keys() is the single canonicalisation applied
    before any membership test; callers never compare encodings directly.
"""

from typing import Dict, FrozenSet, Iterable, Iterator, List, Optional

from loguru import logger

from identity_system.data_management.errors import InputNotFoundError
from identity_system.data_management.schemas.statement_schema import (
    Statement,
    StatementBatch,
)


def reference_keys(*statements: Statement) -> FrozenSet[str]:
    """All values by which another statement may reference the given statements."""
    keys: set[str] = set()
    for statement in statements:
        keys.add(statement.statement_id)
        keys.add(statement.raw_identifier)
    return frozenset(keys)


def refers_to(candidate: Statement, keys: FrozenSet[str]) -> bool:
    """True if candidate's subject references any statement behind keys."""
    return candidate.subject_id in keys or candidate.subject_raw in keys


class StatementGraph:
    """
    Read-only view over one statement batch.

    Indexes:
    - _by_id: statement_id -> statement (first occurrence wins)
    - _by_subject: subject id and subject raw -> statements
    - _by_object: object id -> statements
    - _by_predicate: predicate IRI -> statements
    - _position: statement_id -> batch position, for stable ordering
    """

    def __init__(self, statements: Iterable[Statement]):
        self._statements: List[Statement] = []
        self._by_id: Dict[str, Statement] = {}
        self._by_subject: Dict[str, List[Statement]] = {}
        self._by_object: Dict[str, List[Statement]] = {}
        self._by_predicate: Dict[str, List[Statement]] = {}
        self._position: Dict[str, int] = {}

        duplicates = 0
        for statement in statements:
            if statement.statement_id in self._by_id:
                duplicates += 1
                continue

            self._position[statement.statement_id] = len(self._statements)
            self._statements.append(statement)
            self._by_id[statement.statement_id] = statement
            self._by_subject.setdefault(statement.subject_id, []).append(statement)
            if statement.subject_raw != statement.subject_id:
                self._by_subject.setdefault(statement.subject_raw, []).append(statement)
            self._by_object.setdefault(statement.object_id, []).append(statement)
            self._by_predicate.setdefault(statement.predicate_raw, []).append(statement)

        logger.bind(component="StatementGraph").debug(
            "Statement graph indexed",
            statement_count=len(self._statements),
            duplicates_dropped=duplicates,
        )

    @classmethod
    def from_batch(cls, batch: StatementBatch) -> "StatementGraph":
        return cls(batch.statements)

    @property
    def statements(self) -> tuple[Statement, ...]:
        return tuple(self._statements)

    def __len__(self) -> int:
        return len(self._statements)

    def __iter__(self) -> Iterator[Statement]:
        return iter(self._statements)

    def __contains__(self, statement_id: object) -> bool:
        return statement_id in self._by_id

    def get(self, statement_id: str) -> Optional[Statement]:
        return self._by_id.get(statement_id)

    def require(self, statement_id: str, where: str = "statement batch") -> Statement:
        """Look up a statement, raising InputNotFoundError when absent."""
        statement = self._by_id.get(statement_id)
        if statement is None:
            raise InputNotFoundError(statement_id, where)
        return statement

    def _ordered(self, candidates: Iterable[Statement]) -> List[Statement]:
        unique = {statement.statement_id: statement for statement in candidates}
        return sorted(unique.values(), key=lambda s: self._position[s.statement_id])

    def with_predicate(self, *predicates: str) -> List[Statement]:
        """Statements whose predicate IRI is any of predicates."""
        return self._ordered(
            statement
            for predicate in predicates
            for statement in self._by_predicate.get(predicate, ())
        )

    def with_subject(self, keys: Iterable[str]) -> List[Statement]:
        """Statements whose subject id or subject raw value is in keys."""
        return self._ordered(
            statement
            for key in keys
            for statement in self._by_subject.get(key, ())
        )

    def with_object(self, object_ids: Iterable[str]) -> List[Statement]:
        return self._ordered(
            statement
            for object_id in object_ids
            for statement in self._by_object.get(object_id, ())
        )

    def referencing(
        self,
        targets: Iterable[Statement],
        predicates: Optional[FrozenSet[str]] = None,
    ) -> List[Statement]:
        """Statements about any of targets, optionally restricted by predicate."""
        keys = reference_keys(*targets)
        return [
            statement
            for statement in self.with_subject(keys)
            if refers_to(statement, keys)
            and (predicates is None or statement.predicate_raw in predicates)
        ]


__all__ = ["StatementGraph", "reference_keys", "refers_to"]
