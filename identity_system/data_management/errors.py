"""Error taxonomy for identity evaluation.

Defined in the data layer so that loaders, the statement graph and the
evaluation components raise the same types without circular imports.

Every error carries the offending identifiers as attributes and inline in
its message. Nothing here is retryable: all work is pure computation over an
already-loaded statement batch.
"""

from typing import Optional


class IdentitySystemError(Exception):
    """Base class for all identity evaluation failures."""


class StatementBatchError(IdentitySystemError, ValueError):
    """A statement batch could not be loaded.

    Raised for the first malformed record; the whole batch is rejected so
    downstream selection never runs over a partial graph.
    """

    def __init__(self, message: str, line_number: Optional[int] = None) -> None:
        self.line_number = line_number
        if line_number is not None:
            message = f"Invalid statement line {line_number}: {message}"
        super().__init__(message)


class InvalidIdentifierError(IdentitySystemError, ValueError):
    """An identifier does not follow the content-addressed encoding."""

    def __init__(self, identifier: str, reason: str) -> None:
        self.identifier = identifier
        self.reason = reason
        super().__init__(f"Invalid identifier {identifier!r}: {reason}")


class InputNotFoundError(IdentitySystemError):
    """A named target or evidence statement is absent from the graph or pool."""

    def __init__(self, statement_id: str, where: str) -> None:
        self.statement_id = statement_id
        self.where = where
        super().__init__(f"Statement not found in {where}: {statement_id}")


class PolicyViolationError(IdentitySystemError):
    """The target fails the evaluation method's structural precondition."""

    def __init__(self, statement_id: str, method: str, reason: str) -> None:
        self.statement_id = statement_id
        self.method = method
        self.reason = reason
        super().__init__(
            f"Statement {statement_id} does not meet {method} method criteria: {reason}"
        )


class EmptyEvidencePoolError(IdentitySystemError):
    """An explicitly requested consideration has no evidence candidates."""

    def __init__(self, statement_id: str, consideration: str, reason: str) -> None:
        self.statement_id = statement_id
        self.consideration = consideration
        self.reason = reason
        super().__init__(
            f"No evidence for consideration {consideration} on {statement_id}: {reason}"
        )


class MissingAnchorError(EmptyEvidencePoolError):
    """citation_chain needs a report-backed validFrom anchor and none exists."""


__all__ = [
    "IdentitySystemError",
    "StatementBatchError",
    "InvalidIdentifierError",
    "InputNotFoundError",
    "PolicyViolationError",
    "EmptyEvidencePoolError",
    "MissingAnchorError",
]
