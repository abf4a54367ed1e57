"""Vocabulary configuration for same-as evaluation.

Holds the predicate IRIs the evaluation engine reasons over, the CURIE prefix
table used when rendering terms, and the built-in fallback definitions used
when a term is absent from every loaded vocabulary snapshot.

Predicate families:
- Identity: owl:sameAs, owl:differentFrom
- Temporal validity: schema:validFrom, schema:validThrough
- Citation: prov:hadPrimarySource
- Report bodies: schema:name, schema:version, schema:description,
  schema:isBasedOn, schema:additionalProperty
- Affiliation: schema:worksFor, schema:memberOf, schema:affiliation
"""

from typing import Dict, Optional, Tuple

OWL_SAME_AS_IRI = "https://www.w3.org/2002/07/owl#sameAs"
OWL_DIFFERENT_FROM_IRI = "https://www.w3.org/2002/07/owl#differentFrom"
SCHEMA_VALID_FROM_IRI = "https://schema.org/validFrom"
SCHEMA_VALID_THROUGH_IRI = "https://schema.org/validThrough"
SCHEMA_NAME_IRI = "https://schema.org/name"
SCHEMA_VERSION_IRI = "https://schema.org/version"
SCHEMA_DESCRIPTION_IRI = "https://schema.org/description"
SCHEMA_IS_BASED_ON_IRI = "https://schema.org/isBasedOn"
SCHEMA_ADDITIONAL_PROPERTY_IRI = "https://schema.org/additionalProperty"
PROV_HAD_PRIMARY_SOURCE_IRI = "https://www.w3.org/ns/prov#hadPrimarySource"

AFFILIATION_PREDICATES = frozenset({
    "https://schema.org/worksFor",
    "https://schema.org/memberOf",
    "https://schema.org/affiliation",
})

VALIDITY_PREDICATES = frozenset({SCHEMA_VALID_FROM_IRI, SCHEMA_VALID_THROUGH_IRI})

# Namespace IRI -> CURIE prefix. Both http and https spellings appear in
# published vocabularies, so each namespace may be listed twice.
CURIE_PREFIXES: Tuple[Tuple[str, str], ...] = (
    ("https://fide.work/vocab#", "fide"),
    ("https://schema.org/", "schema"),
    ("http://schema.org/", "schema"),
    ("http://www.w3.org/2000/01/rdf-schema#", "rdfs"),
    ("http://www.w3.org/2002/07/owl#", "owl"),
    ("https://www.w3.org/2002/07/owl#", "owl"),
    ("http://www.w3.org/ns/prov#", "prov"),
    ("https://www.w3.org/ns/prov#", "prov"),
    ("http://www.w3.org/1999/02/22-rdf-syntax-ns#", "rdf"),
    ("https://www.w3.org/1999/02/22-rdf-syntax-ns#", "rdf"),
    ("http://www.w3.org/2001/XMLSchema#", "xsd"),
    ("http://www.w3.org/ns/org#", "org"),
    ("https://w3id.org/security#", "sec"),
)

# CURIE prefix -> canonical namespace used when expanding a CURIE back to an IRI
CURIE_EXPANSIONS: Dict[str, str] = {
    "fide": "https://fide.work/vocab#",
    "schema": "https://schema.org/",
    "prov": "http://www.w3.org/ns/prov#",
    "owl": "http://www.w3.org/2002/07/owl#",
    "rdf": "http://www.w3.org/1999/02/22-rdf-syntax-ns#",
    "rdfs": "http://www.w3.org/2000/01/rdf-schema#",
    "xsd": "http://www.w3.org/2001/XMLSchema#",
    "org": "http://www.w3.org/ns/org#",
    "sec": "https://w3id.org/security#",
}

# Entity/source types render under the fide: prefix
TYPE_PREFIX = "fide"


def to_curie(iri: str) -> str:
    """Compact an IRI to a CURIE; unknown namespaces are returned unchanged."""
    for namespace, prefix in CURIE_PREFIXES:
        if iri.startswith(namespace):
            return f"{prefix}:{iri[len(namespace):]}"
    return iri


def curie_to_iri(term: str) -> Optional[str]:
    """Expand a CURIE to its canonical IRI, or None for unknown prefixes."""
    prefix, _, local = term.partition(":")
    if not prefix or not local:
        return None
    namespace = CURIE_EXPANSIONS.get(prefix)
    return f"{namespace}{local}" if namespace else None


def type_curie(type_name: str) -> str:
    """Render an entity or source type name as a CURIE (Person -> fide:Person)."""
    return f"{TYPE_PREFIX}:{type_name}"


# Built-in definitions used when a term is absent from every snapshot
TERM_DEFINITIONS: Dict[str, str] = {
    "owl:sameAs": "indicates that two identifiers refer to the same entity.",
    "owl:differentFrom": "indicates that two identifiers refer to different entities.",
    "schema:validFrom": "the date/time from which a statement is considered valid.",
    "schema:validThrough": "the date/time until which a statement is considered valid.",
    "schema:name": "the name of an item.",
    "schema:version": "the version identifier of a resource.",
    "schema:description": "a description of an item.",
    "schema:isBasedOn": "a resource used as a source or basis.",
    "schema:additionalProperty": "a property-value pair attached to an item.",
    "schema:worksFor": "an organization the person works for.",
    "schema:memberOf": "an organization the item is a member of.",
    "schema:affiliation": "an organization the person is affiliated with.",
    "prov:hadPrimarySource": "links a statement to the primary source report used as evidence.",
    "fide:Statement": "an atomic subject-predicate-object assertion.",
    "fide:Person": "a person entity type.",
    "fide:Organization": "an organization entity type.",
    "fide:SoftwareAgent": "a software agent entity type.",
    "fide:NetworkResource": "a network-addressable identifier source.",
    "fide:PlatformAccount": "an authority-hosted account identifier source.",
    "fide:CryptographicAccount": "a cryptographic account identifier source.",
    "fide:CreativeWork": "a creative work entity type.",
    "fide:Concept": "a concept entity type.",
    "fide:Place": "a place entity type.",
    "fide:Event": "an event entity type.",
    "fide:Action": "an action entity type.",
    "fide:PhysicalObject": "a physical object entity type.",
    "fide:TextLiteral": "a text literal value.",
    "fide:IntegerLiteral": "an integer literal value.",
    "fide:DecimalLiteral": "a decimal literal value.",
    "fide:BoolLiteral": "a boolean literal value.",
    "fide:DateLiteral": "a date literal value.",
    "fide:TimeLiteral": "a time literal value.",
    "fide:DateTimeLiteral": "a datetime literal value.",
    "fide:DurationLiteral": "a duration literal value.",
    "fide:URILiteral": "a URI literal value.",
    "fide:JSONLiteral": "a JSON literal value.",
}

UNKNOWN_DEFINITION = "definition not available."


__all__ = [
    "OWL_SAME_AS_IRI",
    "OWL_DIFFERENT_FROM_IRI",
    "SCHEMA_VALID_FROM_IRI",
    "SCHEMA_VALID_THROUGH_IRI",
    "SCHEMA_NAME_IRI",
    "SCHEMA_VERSION_IRI",
    "SCHEMA_DESCRIPTION_IRI",
    "SCHEMA_IS_BASED_ON_IRI",
    "SCHEMA_ADDITIONAL_PROPERTY_IRI",
    "PROV_HAD_PRIMARY_SOURCE_IRI",
    "AFFILIATION_PREDICATES",
    "VALIDITY_PREDICATES",
    "TERM_DEFINITIONS",
    "UNKNOWN_DEFINITION",
    "to_curie",
    "curie_to_iri",
    "type_curie",
]
