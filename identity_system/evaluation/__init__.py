"""Evaluation components for same-as evidence preparation.

Core workflow for one target owl:sameAs claim:
1. EvidenceClosureBuilder walks a fixed hop table to the bounded closure
2. ConsiderationRouter partitions the closure into per-consideration pools
3. AtomicPromptRenderer renders each evidence unit, with definitions from an
   injected VocabularyTermResolver

PrimaryIdentityResolver runs independently, once per entity cluster.

No component here decides same/different; adjudication happens downstream.
"""

from identity_system.evaluation.closure_builder import (
    EvidenceClosureBuilder,
    HopMatch,
    HopRule,
    SAME_AS_HOPS,
)
from identity_system.evaluation.consideration_router import ConsiderationRouter
from identity_system.evaluation.primary_resolver import PrimaryIdentityResolver
from identity_system.evaluation.prompt_renderer import AtomicPromptRenderer
from identity_system.evaluation.term_resolver import (
    TermDefinition,
    VocabularyTermResolver,
    default_term_resolver,
)

__all__ = [
    "EvidenceClosureBuilder",
    "HopMatch",
    "HopRule",
    "SAME_AS_HOPS",
    "ConsiderationRouter",
    "PrimaryIdentityResolver",
    "AtomicPromptRenderer",
    "TermDefinition",
    "VocabularyTermResolver",
    "default_term_resolver",
]
