"""Schema package for statements and same-as evaluation data structures.

Primary exports:
- Statement / StatementWire / StatementBatch: the statement graph unit
- Consideration: the five evidence categories
- EvidenceClosure: closure builder output
- EvidenceUnit / EvidencePool: router output handed to the renderer
- PrimaryIdentity: resolver output
- PromptAtomicRequest / PromptAtomicSummary: pipeline input and output

Usage:
    from identity_system.data_management.schemas import Statement, StatementWire
    statement = Statement.from_wire(StatementWire.model_validate(record))
"""

from identity_system.data_management.schemas.statement_schema import (
    Statement,
    StatementBatch,
    StatementWire,
)
from identity_system.data_management.schemas.evaluation_schema import (
    ALL_CONSIDERATIONS,
    Consideration,
    ConsiderationSummary,
    EvaluationMethod,
    EvidenceClosure,
    EvidencePool,
    EvidenceUnit,
    GeneratedPrompt,
    PrimaryIdentity,
    PromptAtomicRequest,
    PromptAtomicSummary,
    RenderedPrompt,
)

__all__ = [
    # Statements
    "Statement",
    "StatementBatch",
    "StatementWire",
    # Evaluation
    "ALL_CONSIDERATIONS",
    "Consideration",
    "ConsiderationSummary",
    "EvaluationMethod",
    "EvidenceClosure",
    "EvidencePool",
    "EvidenceUnit",
    "GeneratedPrompt",
    "PrimaryIdentity",
    "PromptAtomicRequest",
    "PromptAtomicSummary",
    "RenderedPrompt",
]
