"""Partition of an evidence closure into per-consideration evidence pools.

Each consideration selects its own pool from the closure and pairs every
pool member with the statement(s) it is anchored to:

- citation_chain: report-backed hadPrimarySource statements citing the anchor
  validFrom. The anchor is the closure validFrom about the target with the
  earliest parsed object date (unparseable dates last, ties by statement id).
  Without an anchor, or without a report-backed citation, the pool is empty.
- explicit_contradiction: differentFrom linking the target's two endpoints.
- name_alignment: schema:name on either target endpoint.
- affiliation_overlap: worksFor/memberOf/affiliation on either endpoint.
- valid_from_timestamp: validFrom about the target.

Outside citation_chain, a unit's anchor is the closure statement its
evidence's subject references, if any.

The anchor date order here is the validity date the claim asserts. It is not
the ingest order the primary identity resolver uses.
"""

from typing import Optional

import structlog

from identity_system.config.settings import settings
from identity_system.config.vocabulary import (
    AFFILIATION_PREDICATES,
    OWL_DIFFERENT_FROM_IRI,
    PROV_HAD_PRIMARY_SOURCE_IRI,
    SCHEMA_NAME_IRI,
    SCHEMA_VALID_FROM_IRI,
)
from identity_system.data_management.errors import (
    EmptyEvidencePoolError,
    InputNotFoundError,
    MissingAnchorError,
)
from identity_system.data_management.schemas.evaluation_schema import (
    Consideration,
    EvidenceClosure,
    EvidencePool,
    EvidenceUnit,
)
from identity_system.data_management.schemas.statement_schema import Statement
from identity_system.data_management.statement_graph import reference_keys, refers_to
from identity_system.utils.dates import parse_validity_timestamp


class ConsiderationRouter:
    """Selects evidence pools and anchors for each consideration."""

    def __init__(self, report_path_marker: Optional[str] = None) -> None:
        self.report_path_marker = report_path_marker or settings.report_path_marker
        self._logger = structlog.get_logger().bind(component="ConsiderationRouter")

    def is_report_backed(self, statement: Statement) -> bool:
        """True for hadPrimarySource citing an http(s) report URL."""
        if statement.predicate_raw != PROV_HAD_PRIMARY_SOURCE_IRI:
            return False
        url = statement.object_raw
        if not url.startswith(("http://", "https://")):
            return False
        return self.report_path_marker in url

    def anchor_validity(
        self, target: Statement, closure: EvidenceClosure
    ) -> Optional[Statement]:
        """Earliest-dated validFrom in the closure about target."""
        keys = reference_keys(target)
        candidates = [
            statement
            for statement in closure.with_predicate(SCHEMA_VALID_FROM_IRI)
            if refers_to(statement, keys)
        ]
        if not candidates:
            return None
        return min(
            candidates,
            key=lambda s: (parse_validity_timestamp(s.object_raw), s.statement_id),
        )

    def _citation_chain_pool(
        self, target: Statement, closure: EvidenceClosure
    ) -> tuple[list[Statement], Optional[Statement], Optional[str]]:
        anchor = self.anchor_validity(target, closure)
        if anchor is None:
            return [], None, "no schema:validFrom anchor references the target"

        keys = reference_keys(anchor)
        pool = [
            statement
            for statement in closure.with_predicate(PROV_HAD_PRIMARY_SOURCE_IRI)
            if refers_to(statement, keys) and self.is_report_backed(statement)
        ]
        if not pool:
            return [], anchor, "no report-backed primary source cites the anchor validFrom"
        return pool, anchor, None

    def evidence_pool(
        self,
        consideration: Consideration,
        target: Statement,
        closure: EvidenceClosure,
    ) -> tuple[list[Statement], Optional[str]]:
        """Pool for one consideration and, when empty, the reason."""
        if consideration is Consideration.CITATION_CHAIN:
            pool, _, reason = self._citation_chain_pool(target, closure)
            return pool, reason

        endpoints = set(target.endpoints)
        if consideration is Consideration.EXPLICIT_CONTRADICTION:
            pairs = {target.endpoints, (target.object_id, target.subject_id)}
            pool = [
                s
                for s in closure.with_predicate(OWL_DIFFERENT_FROM_IRI)
                if (s.subject_id, s.object_id) in pairs
            ]
            reason = "no owl:differentFrom links the target endpoints"
        elif consideration is Consideration.NAME_ALIGNMENT:
            pool = [
                s
                for s in closure.with_predicate(SCHEMA_NAME_IRI)
                if s.subject_id in endpoints
            ]
            reason = "no schema:name statements on the target endpoints"
        elif consideration is Consideration.AFFILIATION_OVERLAP:
            pool = [
                s
                for s in closure.with_predicate(*AFFILIATION_PREDICATES)
                if s.subject_id in endpoints
            ]
            reason = "no affiliation statements on the target endpoints"
        else:
            keys = reference_keys(target)
            pool = [
                s
                for s in closure.with_predicate(SCHEMA_VALID_FROM_IRI)
                if refers_to(s, keys)
            ]
            reason = "no schema:validFrom statements reference the target"

        return pool, (None if pool else reason)

    def anchors_for(self, evidence: Statement, closure: EvidenceClosure) -> tuple[Statement, ...]:
        """First closure statement the evidence's subject references."""
        for statement in closure.statements:
            if refers_to(evidence, reference_keys(statement)):
                return (statement,)
        return ()

    def route(
        self,
        consideration: Consideration,
        target: Statement,
        closure: EvidenceClosure,
        evidence_id: Optional[str] = None,
        required: bool = False,
    ) -> EvidencePool:
        """Select the evidence pool and units for one consideration.

        Args:
            consideration: Consideration to route.
            target: The same-as claim under evaluation.
            closure: Evidence closure of target.
            evidence_id: Restrict output to this single pool member.
            required: Raise instead of skipping when the pool is empty.

        Returns:
            EvidencePool; skipped_reason is set when no unit was produced.

        Raises:
            MissingAnchorError: citation_chain required but has no anchor or
                report-backed citation.
            EmptyEvidencePoolError: Required consideration has an empty pool.
            InputNotFoundError: evidence_id is not in the pool.
        """
        anchor: Optional[Statement] = None
        if consideration is Consideration.CITATION_CHAIN:
            pool, anchor, reason = self._citation_chain_pool(target, closure)
        else:
            pool, reason = self.evidence_pool(consideration, target, closure)

        if not pool:
            if required or evidence_id:
                error_type = (
                    MissingAnchorError
                    if consideration is Consideration.CITATION_CHAIN
                    else EmptyEvidencePoolError
                )
                raise error_type(target.statement_id, consideration.value, reason or "")
            self._logger.info(
                "consideration_skipped",
                consideration=consideration.value,
                target_statement_id=target.statement_id,
                reason=reason,
            )
            return EvidencePool(consideration=consideration, skipped_reason=reason)

        selected = pool
        if evidence_id:
            selected = [statement for statement in pool if statement.statement_id == evidence_id]
            if not selected:
                raise InputNotFoundError(
                    evidence_id, f"evidence pool for {consideration.value}"
                )

        units = tuple(
            EvidenceUnit(
                target=target,
                consideration=consideration,
                evidence=evidence,
                anchors=(anchor,) if anchor is not None else self.anchors_for(evidence, closure),
            )
            for evidence in selected
        )
        self._logger.info(
            "pool_selected",
            consideration=consideration.value,
            target_statement_id=target.statement_id,
            pool_size=len(pool),
            unit_count=len(units),
        )
        return EvidencePool(consideration=consideration, evidence=tuple(pool), units=units)


__all__ = ["ConsiderationRouter"]
