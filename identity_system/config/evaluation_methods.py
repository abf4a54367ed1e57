"""Registry of evaluation methods for same-as temporal validity.

A method fixes which claims it accepts (owl:sameAs between subjects of one
entity type) and the directory its prompts are written under. The method id
doubles as that directory, so renaming an id moves every rendered prompt.
"""

from typing import Optional

from identity_system.config.settings import settings
from identity_system.config.vocabulary import OWL_SAME_AS_IRI, to_curie
from identity_system.data_management.errors import (
    InvalidIdentifierError,
    PolicyViolationError,
)
from identity_system.data_management.identifiers import parse_identifier
from identity_system.data_management.schemas.evaluation_schema import EvaluationMethod
from identity_system.data_management.schemas.statement_schema import Statement

EVALUATION_METHODS: tuple[EvaluationMethod, ...] = tuple(
    EvaluationMethod(
        method_id=f"temporal-validity/owl-sameAs/{entity_type}",
        method_version="v1",
        method_name=f"{entity_type} owl:sameAs temporal validity",
        subject_entity_type=entity_type,
    )
    for entity_type in ("Person", "Organization", "Concept")
)


def resolve_method(name: str) -> Optional[EvaluationMethod]:
    """Look up a method by key ("<id>@<version>") or by bare id."""
    for method in EVALUATION_METHODS:
        if name in (method.key, method.method_id):
            return method
    return None


def method_for_entity_type(entity_type: str) -> Optional[EvaluationMethod]:
    """Method accepting subjects of entity_type, if one is registered."""
    for method in EVALUATION_METHODS:
        if method.subject_entity_type == entity_type:
            return method
    return None


def select_method(target: Statement, requested: Optional[str] = None) -> EvaluationMethod:
    """Pick the method for a target claim.

    An explicit request must name a registered method. Otherwise the method
    follows the target's subject entity type, falling back to
    settings.default_method.

    Raises:
        ValueError: If requested names no registered method.
    """
    if requested:
        method = resolve_method(requested)
        if method is None:
            known = ", ".join(m.key for m in EVALUATION_METHODS)
            raise ValueError(f"Unknown evaluation method {requested!r}. Known: {known}")
        return method

    try:
        entity_type = parse_identifier(target.subject_id).entity_type
    except InvalidIdentifierError:
        entity_type = ""
    method = method_for_entity_type(entity_type) or resolve_method(settings.default_method)
    if method is None:
        raise ValueError(f"Unknown default evaluation method {settings.default_method!r}")
    return method


def check_method_criteria(target: Statement, method: EvaluationMethod) -> None:
    """Enforce the method's structural precondition on the target claim.

    Raises:
        PolicyViolationError: If the predicate is not owl:sameAs or the
            subject entity type differs from the method's.
    """
    if target.predicate_raw != OWL_SAME_AS_IRI:
        raise PolicyViolationError(
            target.statement_id,
            method.key,
            f"target predicate must be owl:sameAs, found {to_curie(target.predicate_raw)}",
        )

    try:
        subject_type = parse_identifier(target.subject_id).entity_type
    except InvalidIdentifierError as exc:
        raise PolicyViolationError(target.statement_id, method.key, exc.reason) from exc

    if subject_type != method.subject_entity_type:
        raise PolicyViolationError(
            target.statement_id,
            method.key,
            f"{method.subject_entity_type} method requires {method.subject_entity_type} "
            f"subject type, found {subject_type}",
        )


__all__ = [
    "EVALUATION_METHODS",
    "resolve_method",
    "method_for_entity_type",
    "select_method",
    "check_method_criteria",
]
