"""Evaluation domain schemas for same-as evidence preparation.

Defines the data structures passed between the evaluation components:
primary identity resolution results, evidence units and pools, rendered
prompts, and the machine-readable run summary.

Per design:
- 5 considerations, a closed set, always iterated in declaration order
- An evidence unit is the minimal tuple handed to adjudication:
  target claim, consideration, one evidence statement, its anchor(s)
- No schema here carries a same/different decision; adjudication happens
  elsewhere
"""

from enum import Enum
from typing import Optional

from pydantic import BaseModel, Field, model_validator

from identity_system.data_management.schemas.statement_schema import Statement


class Consideration(str, Enum):
    """Evidence category used to adjudicate a same-as claim.

    CITATION_CHAIN: Report-backed primary sources cited by the anchor validFrom.
    EXPLICIT_CONTRADICTION: differentFrom statements linking the two endpoints.
    NAME_ALIGNMENT: schema:name statements on either endpoint.
    AFFILIATION_OVERLAP: worksFor/memberOf/affiliation on either endpoint.
    VALID_FROM_TIMESTAMP: validFrom statements about the target claim.
    """

    CITATION_CHAIN = "citation_chain"
    EXPLICIT_CONTRADICTION = "explicit_contradiction"
    NAME_ALIGNMENT = "name_alignment"
    AFFILIATION_OVERLAP = "affiliation_overlap"
    VALID_FROM_TIMESTAMP = "valid_from_timestamp"


ALL_CONSIDERATIONS: tuple[Consideration, ...] = tuple(Consideration)


class EvaluationMethod(BaseModel):
    """A registered evaluation method and its structural precondition."""

    method_id: str = Field(..., description="e.g. temporal-validity/owl-sameAs/Person")
    method_version: str = Field(..., description="e.g. v1")
    method_name: str
    subject_entity_type: str = Field(
        ..., description="Entity type the target's subject must have"
    )

    model_config = {"frozen": True}

    @property
    def key(self) -> str:
        return f"{self.method_id}@{self.method_version}"


class PrimaryIdentity(BaseModel):
    """Canonical anchor identifier resolved for one entity cluster.

    Attributes:
        primary_id: identity_of(entity_type, "Statement", anchor_raw).
        anchor_raw: Pipe-joined same-as triple the winning validFrom is about.
        anchor_statement_id: Id of the winning validFrom statement.
        anchor_first_seen_at: Ingest timestamp of the winner, if known.
        candidate_count: validFrom candidates that survived re-derivation.
    """

    entity_type: str
    focal_raw: str
    primary_id: str
    anchor_raw: str
    anchor_statement_id: Optional[str] = None
    anchor_first_seen_at: Optional[int] = None
    candidate_count: int = Field(default=1, ge=1)


class EvidenceClosure(BaseModel):
    """Minimal evidentiary subgraph around one target claim.

    statements holds the target first, then every hop in table order, each hop
    in batch order, deduplicated by statement id (first occurrence wins).
    hops keeps the per-hop selections for inspection and tests.
    """

    target: Statement
    statements: tuple[Statement, ...]
    hops: dict[str, tuple[Statement, ...]] = Field(default_factory=dict)

    model_config = {"frozen": True}

    @property
    def statement_ids(self) -> list[str]:
        return [statement.statement_id for statement in self.statements]

    def with_predicate(self, *predicates: str) -> list[Statement]:
        """Closure statements whose predicate IRI is any of predicates."""
        return [s for s in self.statements if s.predicate_raw in predicates]

    def __contains__(self, statement_id: object) -> bool:
        return any(s.statement_id == statement_id for s in self.statements)

    def __len__(self) -> int:
        return len(self.statements)


class EvidenceUnit(BaseModel):
    """One (claim, consideration, evidence) unit handed to adjudication."""

    target: Statement
    consideration: Consideration
    evidence: Statement
    anchors: tuple[Statement, ...] = ()

    model_config = {"frozen": True}

    @property
    def anchor(self) -> Optional[Statement]:
        return self.anchors[0] if self.anchors else None


class EvidencePool(BaseModel):
    """Evidence selected for one consideration.

    skipped_reason is set exactly when no unit was produced.
    """

    consideration: Consideration
    evidence: tuple[Statement, ...] = ()
    units: tuple[EvidenceUnit, ...] = ()
    skipped_reason: Optional[str] = None

    model_config = {"frozen": True}

    @property
    def pool_size(self) -> int:
        return len(self.evidence)


class RenderedPrompt(BaseModel):
    """A rendered evaluation document and its deterministic relative path."""

    unit: EvidenceUnit
    text: str
    relative_path: str

    model_config = {"frozen": True}


class GeneratedPrompt(BaseModel):
    """Summary row for one written prompt file."""

    consideration: Consideration
    evidence_statement_id: str
    out_path: str
    prompt_chars: int
    anchor_statement_count: int


class ConsiderationSummary(BaseModel):
    """Per-consideration pool size and generated-unit count."""

    consideration: Consideration
    evidence_pool_count: int
    generated_count: int
    skipped_reason: Optional[str] = None


class PromptAtomicRequest(BaseModel):
    """Caller request for atomic prompt generation.

    An explicit evidence statement only makes sense within one consideration.
    """

    statement_id: str = Field(..., min_length=1, description="Target same-as statement id")
    consideration: Optional[Consideration] = None
    evidence_statement_id: Optional[str] = None
    method: Optional[str] = Field(
        default=None, description="Method key or id; chosen by subject type when omitted"
    )

    @model_validator(mode="after")
    def evidence_requires_consideration(self) -> "PromptAtomicRequest":
        if self.evidence_statement_id and self.consideration is None:
            raise ValueError("evidence_statement_id requires consideration")
        return self


class PromptAtomicSummary(BaseModel):
    """Machine-readable summary of one prompt-atomic run."""

    mode: str = "prompt-atomic"
    method: str
    batch_root: str
    target_statement_id: str
    selected_considerations: list[Consideration]
    generated_count: int
    considerations: list[ConsiderationSummary] = Field(default_factory=list)
    generated: list[GeneratedPrompt] = Field(default_factory=list)


__all__ = [
    "Consideration",
    "ALL_CONSIDERATIONS",
    "EvaluationMethod",
    "PrimaryIdentity",
    "EvidenceClosure",
    "EvidenceUnit",
    "EvidencePool",
    "RenderedPrompt",
    "GeneratedPrompt",
    "ConsiderationSummary",
    "PromptAtomicRequest",
    "PromptAtomicSummary",
]
