"""Atomic prompt generation pipeline for one target same-as claim.

Flow:
    statement batch -> StatementGraph -> EvidenceClosureBuilder
    -> ConsiderationRouter (per consideration) -> AtomicPromptRenderer
    -> one Markdown file per evidence unit under the prompts root

Running every consideration skips those with empty pools and records why.
Naming one consideration makes an empty pool an error. If nothing at all is
generated the run fails, so a silent no-op never looks like success.

Rendering is idempotent, so a failed run may leave some prompts on disk and
a rerun simply overwrites them.

Usage:
    from identity_system.pipeline import PromptAtomicPipeline

    pipeline = PromptAtomicPipeline(term_resolver=default_term_resolver())
    summary = pipeline.run(batch, PromptAtomicRequest(statement_id=target_id))
"""

from pathlib import Path
from typing import NamedTuple, Optional

from identity_system.config.evaluation_methods import (
    check_method_criteria,
    select_method,
)
from identity_system.config.settings import settings
from identity_system.data_management.errors import EmptyEvidencePoolError
from identity_system.data_management.schemas.evaluation_schema import (
    ALL_CONSIDERATIONS,
    ConsiderationSummary,
    EvaluationMethod,
    EvidencePool,
    GeneratedPrompt,
    PromptAtomicRequest,
    PromptAtomicSummary,
    RenderedPrompt,
)
from identity_system.data_management.schemas.statement_schema import StatementBatch
from identity_system.data_management.statement_graph import StatementGraph
from identity_system.evaluation.closure_builder import EvidenceClosureBuilder
from identity_system.evaluation.consideration_router import ConsiderationRouter
from identity_system.evaluation.prompt_renderer import AtomicPromptRenderer
from identity_system.evaluation.term_resolver import VocabularyTermResolver
from identity_system.utils.logging import get_correlation_id, get_structured_logger


class PreparedPrompts(NamedTuple):
    """Rendered but unwritten output of one run."""

    method: EvaluationMethod
    target_statement_id: str
    pools: list[EvidencePool]
    rendered: list[RenderedPrompt]


class PromptAtomicPipeline:
    """Orchestrates closure, routing and rendering for one target claim."""

    def __init__(
        self,
        term_resolver: VocabularyTermResolver,
        closure_builder: Optional[EvidenceClosureBuilder] = None,
        router: Optional[ConsiderationRouter] = None,
        prompts_root: Optional[str | Path] = None,
    ) -> None:
        """Initialize PromptAtomicPipeline.

        Args:
            term_resolver: Shared vocabulary resolver, injected into renderers.
            closure_builder: Closure builder. Defaults to the same-as hop table.
            router: Consideration router. Defaults to settings' report marker.
            prompts_root: Output root. Defaults to settings.prompts_root.
        """
        self.term_resolver = term_resolver
        self.closure_builder = closure_builder or EvidenceClosureBuilder()
        self.router = router or ConsiderationRouter()
        self.prompts_root = Path(prompts_root or settings.prompts_root)

    def prepare(self, batch: StatementBatch, request: PromptAtomicRequest) -> PreparedPrompts:
        """Select evidence and render prompts without touching the filesystem.

        Raises:
            InputNotFoundError: Target or explicit evidence id not found.
            PolicyViolationError: Target fails the method's precondition.
            EmptyEvidencePoolError: Requested consideration has no evidence,
                or no consideration produced any prompt.
        """
        logger = get_structured_logger(
            "PromptAtomicPipeline",
            run_id=get_correlation_id(),
            target_statement_id=request.statement_id,
        )

        graph = StatementGraph.from_batch(batch)
        target = graph.require(request.statement_id)
        method = select_method(target, request.method)
        check_method_criteria(target, method)
        logger.info("method_selected", method=method.key, batch_root=batch.root)

        closure = self.closure_builder.build(target, graph)
        renderer = AtomicPromptRenderer(self.term_resolver, method_id=method.method_id)

        explicit = request.consideration is not None
        considerations = [request.consideration] if explicit else list(ALL_CONSIDERATIONS)

        pools: list[EvidencePool] = []
        rendered: list[RenderedPrompt] = []
        for consideration in considerations:
            pool = self.router.route(
                consideration,
                target,
                closure,
                evidence_id=request.evidence_statement_id,
                required=explicit,
            )
            pools.append(pool)
            rendered.extend(renderer.render(unit, closure) for unit in pool.units)

        if not rendered:
            reasons = "; ".join(
                f"{pool.consideration.value}: {pool.skipped_reason}" for pool in pools
            )
            raise EmptyEvidencePoolError(
                target.statement_id, "all", f"no prompts generated ({reasons})"
            )

        logger.info(
            "prompts_rendered",
            method=method.key,
            consideration_count=len(pools),
            prompt_count=len(rendered),
        )
        return PreparedPrompts(
            method=method,
            target_statement_id=target.statement_id,
            pools=pools,
            rendered=rendered,
        )

    def write(self, prompt: RenderedPrompt) -> Path:
        """Write one rendered prompt below the prompts root."""
        out_path = self.prompts_root / prompt.relative_path
        out_path.parent.mkdir(parents=True, exist_ok=True)
        out_path.write_text(prompt.text, encoding="utf-8")
        return out_path

    def run(self, batch: StatementBatch, request: PromptAtomicRequest) -> PromptAtomicSummary:
        """Render and write every prompt for request, returning the run summary."""
        prepared = self.prepare(batch, request)

        generated = [
            GeneratedPrompt(
                consideration=prompt.unit.consideration,
                evidence_statement_id=prompt.unit.evidence.statement_id,
                out_path=self.write(prompt).as_posix(),
                prompt_chars=len(prompt.text),
                anchor_statement_count=len(prompt.unit.anchors),
            )
            for prompt in prepared.rendered
        ]

        considerations = [
            ConsiderationSummary(
                consideration=pool.consideration,
                evidence_pool_count=pool.pool_size,
                generated_count=len(pool.units),
                skipped_reason=pool.skipped_reason,
            )
            for pool in prepared.pools
        ]

        return PromptAtomicSummary(
            method=prepared.method.key,
            batch_root=batch.root,
            target_statement_id=prepared.target_statement_id,
            selected_considerations=[pool.consideration for pool in prepared.pools],
            generated_count=len(generated),
            considerations=considerations,
            generated=generated,
        )


__all__ = ["PromptAtomicPipeline", "PreparedPrompts"]
