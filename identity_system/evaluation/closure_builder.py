"""Evidence closure construction around one target same-as claim.

The closure is the minimal subgraph an adjudicator needs: the target, its
validity statements, their citations, the cited reports and the reports'
property nodes, plus names, affiliations and contradictions on the target's
two endpoints. Nothing outside these hops is ever included, so the closure is
bounded by the table below regardless of batch size.

Hop table (evaluated in order; each hop reads earlier hops as sources):

    validity          validFrom/validThrough   references a source      target
    citations         hadPrimarySource         references a source      target, validity
    names             schema:name              subject is an endpoint   target
    affiliations      affiliation family       subject is an endpoint   target
    contradictions    differentFrom            links both endpoints     target
    report_bodies     any                      subject is source object citations
    report_properties any                      subject is source object report_bodies
                                                                        (additionalProperty)
"""

from enum import Enum
from typing import Dict, NamedTuple, Optional

import structlog

from identity_system.config.vocabulary import (
    AFFILIATION_PREDICATES,
    OWL_DIFFERENT_FROM_IRI,
    PROV_HAD_PRIMARY_SOURCE_IRI,
    SCHEMA_ADDITIONAL_PROPERTY_IRI,
    SCHEMA_NAME_IRI,
    VALIDITY_PREDICATES,
)
from identity_system.data_management.schemas.evaluation_schema import EvidenceClosure
from identity_system.data_management.schemas.statement_schema import Statement
from identity_system.data_management.statement_graph import (
    StatementGraph,
    reference_keys,
    refers_to,
)

TARGET = "target"


class HopMatch(str, Enum):
    """How a candidate statement relates to a hop's source statements."""

    REFERENCES = "references"
    SUBJECT_IS_ENDPOINT = "subject_is_endpoint"
    ENDPOINT_PAIR = "endpoint_pair"
    SUBJECT_IS_OBJECT_OF = "subject_is_object_of"


class HopRule(NamedTuple):
    """One traversal step.

    Attributes:
        name: Hop name, also the key in EvidenceClosure.hops.
        predicates: Candidate predicate IRIs, or None for any predicate.
        match: Relation between candidate and source statements.
        sources: "target" and/or names of earlier hops.
        source_predicates: Restrict sources to these predicates, if set.
    """

    name: str
    predicates: Optional[frozenset[str]]
    match: HopMatch
    sources: tuple[str, ...]
    source_predicates: Optional[frozenset[str]] = None


SAME_AS_HOPS: tuple[HopRule, ...] = (
    HopRule("validity", VALIDITY_PREDICATES, HopMatch.REFERENCES, (TARGET,)),
    HopRule(
        "citations",
        frozenset({PROV_HAD_PRIMARY_SOURCE_IRI}),
        HopMatch.REFERENCES,
        (TARGET, "validity"),
    ),
    HopRule("names", frozenset({SCHEMA_NAME_IRI}), HopMatch.SUBJECT_IS_ENDPOINT, (TARGET,)),
    HopRule("affiliations", AFFILIATION_PREDICATES, HopMatch.SUBJECT_IS_ENDPOINT, (TARGET,)),
    HopRule(
        "contradictions",
        frozenset({OWL_DIFFERENT_FROM_IRI}),
        HopMatch.ENDPOINT_PAIR,
        (TARGET,),
    ),
    HopRule("report_bodies", None, HopMatch.SUBJECT_IS_OBJECT_OF, ("citations",)),
    HopRule(
        "report_properties",
        None,
        HopMatch.SUBJECT_IS_OBJECT_OF,
        ("report_bodies",),
        frozenset({SCHEMA_ADDITIONAL_PROPERTY_IRI}),
    ),
)


def _select(
    graph: StatementGraph, match: HopMatch, sources: list[Statement]
) -> list[Statement]:
    """Candidates related to sources under match, in batch order."""
    if match is HopMatch.REFERENCES:
        keys = reference_keys(*sources)
        return [s for s in graph.with_subject(keys) if refers_to(s, keys)]

    if match is HopMatch.SUBJECT_IS_ENDPOINT:
        endpoints = {endpoint for source in sources for endpoint in source.endpoints}
        return [s for s in graph.with_subject(endpoints) if s.subject_id in endpoints]

    if match is HopMatch.ENDPOINT_PAIR:
        pairs = set()
        for source in sources:
            pairs.add((source.subject_id, source.object_id))
            pairs.add((source.object_id, source.subject_id))
        endpoints = {subject for subject, _ in pairs}
        return [
            s
            for s in graph.with_subject(endpoints)
            if (s.subject_id, s.object_id) in pairs
        ]

    object_ids = {source.object_id for source in sources}
    object_raws = {source.object_raw for source in sources}
    return [
        s
        for s in graph.with_subject(object_ids | object_raws)
        if s.subject_id in object_ids or s.subject_raw in object_raws
    ]


class EvidenceClosureBuilder:
    """Builds the bounded evidence closure for a target claim from a hop table."""

    def __init__(self, hops: tuple[HopRule, ...] = SAME_AS_HOPS) -> None:
        self.hops = hops
        self._logger = structlog.get_logger().bind(component="EvidenceClosureBuilder")

    def build(self, target: Statement, graph: StatementGraph) -> EvidenceClosure:
        """Compute the closure of target over graph.

        Args:
            target: The same-as claim under evaluation.
            graph: Indexed view over the loaded batch.

        Returns:
            EvidenceClosure with the target first and hops in table order.
        """
        selected: Dict[str, tuple[Statement, ...]] = {TARGET: (target,)}

        for rule in self.hops:
            sources = [
                statement
                for source_name in rule.sources
                for statement in selected.get(source_name, ())
                if rule.source_predicates is None
                or statement.predicate_raw in rule.source_predicates
            ]
            if not sources:
                selected[rule.name] = ()
                continue

            candidates = _select(graph, rule.match, sources)
            selected[rule.name] = tuple(
                statement
                for statement in candidates
                if rule.predicates is None or statement.predicate_raw in rule.predicates
            )

        ordered: Dict[str, Statement] = {}
        for name in (TARGET, *(rule.name for rule in self.hops)):
            for statement in selected[name]:
                ordered.setdefault(statement.statement_id, statement)

        closure = EvidenceClosure(
            target=target,
            statements=tuple(ordered.values()),
            hops={rule.name: selected[rule.name] for rule in self.hops},
        )
        self._logger.info(
            "closure_built",
            target_statement_id=target.statement_id,
            statement_count=len(closure),
            hop_counts={name: len(found) for name, found in closure.hops.items()},
        )
        return closure


__all__ = ["EvidenceClosureBuilder", "HopRule", "HopMatch", "SAME_AS_HOPS"]
