"""Vocabulary term definitions for rendered prompts.

Definitions come from JSON-LD vocabulary snapshots (fide, schema.org, PROV-O,
OWL), merged into one index keyed by both CURIE and full IRI. When a term is
in no snapshot, the built-in table in config.vocabulary answers; failing that
the definition reads "definition not available.".

The index is built once per resolver instance behind a lock, on first lookup.
The resolver is injected into the renderer; default_term_resolver() exists for
the CLI, which builds one process-wide instance from settings.
"""

import json
import threading
from pathlib import Path
from typing import Any, Dict, Iterable, Optional

import structlog
from pydantic import BaseModel, Field

from identity_system.config.settings import settings
from identity_system.config.vocabulary import (
    TERM_DEFINITIONS,
    UNKNOWN_DEFINITION,
    curie_to_iri,
    to_curie,
)


class TermDefinition(BaseModel):
    """One entry of the Definitions section."""

    term: str
    kind: str = Field(..., description="entity_type | predicate | other")
    definition: Optional[str] = None
    label: Optional[str] = None
    category: Optional[str] = None
    equivalent_class: list[str] = Field(default_factory=list)
    sub_class_of: list[str] = Field(default_factory=list)

    def to_markdown_lines(self) -> list[str]:
        lines = [f"### {self.term}", f"- kind: {self.kind}"]
        if self.definition:
            lines.append(f"- definition: {self.definition}")
        if self.label:
            lines.append(f"- label: {self.label}")
        if self.category:
            lines.append(f"- category: {self.category}")
        if self.equivalent_class:
            lines.append(f"- equivalentClass: {', '.join(self.equivalent_class)}")
        if self.sub_class_of:
            lines.append(f"- subClassOf: {', '.join(self.sub_class_of)}")
        return lines


def term_kind(term: str) -> str:
    if term.startswith("fide:"):
        return "entity_type"
    if ":" in term:
        return "predicate"
    return "other"


def _jsonld_text(value: Any) -> Optional[str]:
    """First text in a JSON-LD value: string, @value, @id, or list thereof."""
    if not value:
        return None
    if isinstance(value, str):
        return value
    if isinstance(value, list):
        for item in value:
            text = _jsonld_text(item)
            if text:
                return text
        return None
    if isinstance(value, dict):
        for key in ("@value", "@id"):
            if isinstance(value.get(key), str):
                return value[key]
    return None


def _jsonld_ids(value: Any) -> list[str]:
    if not value:
        return []
    if isinstance(value, list):
        return [node_id for item in value for node_id in _jsonld_ids(item)]
    if isinstance(value, dict) and isinstance(value.get("@id"), str):
        return [value["@id"]]
    return []


class VocabularyTermResolver:
    """Resolves CURIEs and IRIs to definitions from vocabulary snapshots."""

    def __init__(
        self,
        snapshot_paths: Iterable[str | Path] = (),
        fallback: Optional[Dict[str, str]] = None,
    ) -> None:
        """Initialize VocabularyTermResolver.

        Args:
            snapshot_paths: JSON-LD files in precedence order; on duplicate
                terms the earlier file wins.
            fallback: Built-in term -> definition table.
        """
        self.snapshot_paths = [Path(path) for path in snapshot_paths]
        self.fallback = TERM_DEFINITIONS if fallback is None else fallback
        self._index: Optional[Dict[str, TermDefinition]] = None
        self._lock = threading.Lock()
        self._logger = structlog.get_logger().bind(component="VocabularyTermResolver")

    def _read_snapshot(self, path: Path) -> list[dict]:
        try:
            parsed = json.loads(path.read_text(encoding="utf-8"))
        except (OSError, json.JSONDecodeError) as exc:
            self._logger.warning("vocabulary_snapshot_skipped", path=str(path), error=str(exc))
            return []
        graph = parsed.get("@graph") if isinstance(parsed, dict) else None
        if not isinstance(graph, list):
            return []
        return [node for node in graph if isinstance(node, dict)]

    def _build_index(self) -> Dict[str, TermDefinition]:
        index: Dict[str, TermDefinition] = {}
        for path in self.snapshot_paths:
            nodes = self._read_snapshot(path)
            for node in nodes:
                iri = node.get("@id")
                if not isinstance(iri, str) or not iri:
                    continue
                curie = to_curie(iri)
                definition = TermDefinition(
                    term=curie,
                    kind=term_kind(curie),
                    label=_jsonld_text(node.get("rdfs:label")) or _jsonld_text(node.get("schema:name")),
                    definition=_jsonld_text(node.get("rdfs:comment")),
                    category=_jsonld_text(node.get("schema:category")),
                    equivalent_class=[to_curie(i) for i in _jsonld_ids(node.get("owl:equivalentClass"))],
                    sub_class_of=[to_curie(i) for i in _jsonld_ids(node.get("rdfs:subClassOf"))],
                )
                index.setdefault(curie, definition)
                index.setdefault(iri, definition)
            self._logger.debug("vocabulary_snapshot_loaded", path=str(path), node_count=len(nodes))

        self._logger.info(
            "vocabulary_index_built",
            snapshot_count=len(self.snapshot_paths),
            term_count=len(index),
        )
        return index

    def _ensure_index(self) -> Dict[str, TermDefinition]:
        if self._index is None:
            with self._lock:
                if self._index is None:
                    self._index = self._build_index()
        return self._index

    def define(self, term: str) -> TermDefinition:
        """Definition for one term, falling back to the built-in table."""
        index = self._ensure_index()
        found = index.get(term)
        if found is None:
            iri = curie_to_iri(term)
            found = index.get(iri) if iri else None
        if found is not None:
            return found.model_copy(update={"term": term})

        return TermDefinition(
            term=term,
            kind=term_kind(term),
            definition=self.fallback.get(term, UNKNOWN_DEFINITION),
        )

    def definitions_markdown(self, terms: Iterable[str]) -> list[str]:
        """Markdown lines for the Definitions section, sorted by term."""
        lines: list[str] = []
        for term in sorted(set(terms)):
            lines.extend(self.define(term).to_markdown_lines())
            lines.append("")
        while lines and lines[-1] == "":
            lines.pop()
        return lines


_default_resolver: Optional[VocabularyTermResolver] = None
_default_lock = threading.Lock()


def default_term_resolver() -> VocabularyTermResolver:
    """Process-wide resolver over settings.vocabulary_paths."""
    global _default_resolver
    with _default_lock:
        if _default_resolver is None:
            _default_resolver = VocabularyTermResolver(settings.vocabulary_paths)
    return _default_resolver


__all__ = ["VocabularyTermResolver", "TermDefinition", "default_term_resolver", "term_kind"]
