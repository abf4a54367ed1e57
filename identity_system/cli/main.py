"""Command-line interface for the identity evaluation system using Typer and Rich."""

import json
import sys
from pathlib import Path
from typing import List, NoReturn, Optional

import typer
from pydantic import ValidationError
from rich.console import Console
from rich.markup import escape
from rich.table import Table

from identity_system.config.evaluation_methods import EVALUATION_METHODS
from identity_system.config.logging import configure_logging, get_logger
from identity_system.config.settings import settings
from identity_system.data_management.errors import IdentitySystemError
from identity_system.data_management.schemas.evaluation_schema import (
    Consideration,
    PromptAtomicRequest,
)
from identity_system.data_management.statement_loader import (
    build_statement_batch,
    load_statement_batch,
    make_statement_wire,
    to_wire_jsonl,
)
from identity_system.evaluation.primary_resolver import PrimaryIdentityResolver
from identity_system.evaluation.term_resolver import (
    VocabularyTermResolver,
    default_term_resolver,
)
from identity_system.pipeline.prompt_pipeline import PromptAtomicPipeline

VERSION = "0.1.0"

# Initialize CLI app
app = typer.Typer(
    help="Identity Evidence System CLI - same-as evidence selection and prompt synthesis",
    add_completion=False,
)
statement_app = typer.Typer(help="Validate and normalise statement batches", add_completion=False)
identity_app = typer.Typer(help="Primary identity resolution", add_completion=False)
eval_app = typer.Typer(help="Evaluation prompt generation", add_completion=False)
vocab_app = typer.Typer(help="Vocabulary term lookup", add_completion=False)
methods_app = typer.Typer(help="Registered evaluation methods", add_completion=False)
app.add_typer(statement_app, name="statement")
app.add_typer(identity_app, name="identity")
app.add_typer(eval_app, name="eval")
app.add_typer(vocab_app, name="vocab")
app.add_typer(methods_app, name="methods")

# stdout carries results; errors go to stderr
console = Console()
err_console = Console(stderr=True)

logger = get_logger("cli")

InputOption = typer.Option(..., "--in", help="Statement batch (.jsonl, or .json snapshot)")
JsonOption = typer.Option(False, "--json", help="Print machine-readable JSON")


@app.callback()
def main(
    verbose: bool = typer.Option(False, "--verbose", "-v", help="Log at DEBUG level"),
) -> None:
    """Identity evidence selection and prompt synthesis."""
    if verbose:
        configure_logging("DEBUG")


def _fail(error: Exception, code: int = 1) -> NoReturn:
    err_console.print(f"[red]✗[/red] {escape(str(error))}")
    logger.error(f"Command failed: {error}")
    raise typer.Exit(code)


@app.command()
def status() -> None:
    """
    Display system configuration.

    Shows output locations, vocabulary snapshots, registered methods and
    logging settings.
    """
    logger.info("Displaying system status")

    table = Table(title="Identity System Status", show_header=True, header_style="bold magenta")
    table.add_column("Component", style="cyan", width=20)
    table.add_column("Status", style="green", width=15)
    table.add_column("Details", style="yellow")

    python_version = f"Python {sys.version_info.major}.{sys.version_info.minor}.{sys.version_info.micro}"
    table.add_row("Environment", "✓ Ready", python_version)
    table.add_row("Prompts Root", "✓ Configured", settings.prompts_root)

    vocab_status = "✓ Configured" if settings.vocabulary_paths else "⚠ Built-in only"
    vocab_details = ", ".join(settings.vocabulary_paths) or "fallback definitions"
    table.add_row("Vocabulary", vocab_status, vocab_details)

    methods = ", ".join(method.key for method in EVALUATION_METHODS)
    table.add_row("Methods", f"✓ {len(EVALUATION_METHODS)} registered", methods)

    log_details = f"Level: {settings.log_level}, Format: {settings.log_format}"
    table.add_row("Logging", "✓ Active", log_details)

    console.print(table)


@app.command()
def version() -> None:
    """Display version information."""
    console.print("[bold]Identity Evidence System[/bold]")
    console.print(f"Version: {VERSION}")


@statement_app.command("validate")
def statement_validate(
    input_path: Path = InputOption,
    as_json: bool = JsonOption,
) -> None:
    """Validate a statement batch and report its size and root."""
    try:
        batch = load_statement_batch(input_path)
    except (IdentitySystemError, OSError) as e:
        _fail(e)

    if as_json:
        typer.echo(json.dumps({"valid": True, "statementCount": len(batch), "root": batch.root}))
        return

    console.print(f"[green]✓[/green] {len(batch)} statements valid")
    console.print(f"Root: {batch.root}")


@statement_app.command("root")
def statement_root(input_path: Path = InputOption) -> None:
    """Print the order-independent root of a statement batch."""
    try:
        batch = load_statement_batch(input_path)
    except (IdentitySystemError, OSError) as e:
        _fail(e)
    typer.echo(batch.root)


@statement_app.command("normalize")
def statement_normalize(
    input_path: Path = InputOption,
    out: Optional[Path] = typer.Option(None, "--out", help="Write JSONL here instead of stdout"),
) -> None:
    """Rewrite a batch (JSONL or snapshot) as normalised JSONL."""
    try:
        batch = load_statement_batch(input_path)
    except (IdentitySystemError, OSError) as e:
        _fail(e)

    text = to_wire_jsonl(batch.statements)
    if out is None:
        typer.echo(text, nl=False)
        return

    out.parent.mkdir(parents=True, exist_ok=True)
    out.write_text(text, encoding="utf-8")
    err_console.print(f"[green]✓[/green] Wrote {len(batch)} statements to {out}")


@statement_app.command("add")
def statement_add(
    subject: str = typer.Option(..., "--subject", help="Subject raw value"),
    subject_type: str = typer.Option(..., "--subject-type", help="Subject entity type"),
    subject_source: str = typer.Option(..., "--subject-source", help="Subject source type"),
    predicate: str = typer.Option(..., "--predicate", help="Predicate IRI"),
    obj: str = typer.Option(..., "--object", help="Object raw value"),
    object_type: str = typer.Option(..., "--object-type", help="Object entity type"),
    object_source: str = typer.Option(..., "--object-source", help="Object source type"),
    first_seen_at: Optional[int] = typer.Option(
        None, "--first-seen-at", help="Ingest timestamp in epoch milliseconds"
    ),
    out: Optional[Path] = typer.Option(None, "--out", help="Write a one-statement JSONL batch here"),
    as_json: bool = JsonOption,
) -> None:
    """Build one statement wire from typed raw values."""
    try:
        wire = make_statement_wire(
            (subject_type, subject_source, subject),
            predicate,
            (object_type, object_source, obj),
            first_seen_at=first_seen_at,
        )
        batch = build_statement_batch([wire.to_wire_dict()])
    except (IdentitySystemError, ValueError) as e:
        _fail(e)

    text = to_wire_jsonl(batch.statements)
    if out is not None:
        out.parent.mkdir(parents=True, exist_ok=True)
        out.write_text(text, encoding="utf-8")

    if as_json:
        typer.echo(
            json.dumps(
                {
                    "ok": True,
                    "root": batch.root,
                    "statementCount": len(batch),
                    "outPath": str(out) if out is not None else None,
                    "statementIds": batch.statement_ids,
                }
            )
        )
    elif out is None:
        typer.echo(text, nl=False)
    else:
        typer.echo(str(out))


@identity_app.command("primary")
def identity_primary(
    input_path: Path = InputOption,
    entity_type: str = typer.Option("Person", "--entity-type", help="Cluster entity type"),
    focal: Optional[str] = typer.Option(None, "--focal", help="Focal raw identifier"),
    identifier_contains: Optional[str] = typer.Option(
        None, "--identifier-contains", help="Pick the focal identifier containing this text"
    ),
    name_contains: Optional[str] = typer.Option(
        None, "--name-contains", help="Pick the focal identifier whose name contains this text"
    ),
    as_json: bool = JsonOption,
) -> None:
    """Resolve the primary identifier for one entity cluster."""
    try:
        batch = load_statement_batch(input_path)
    except (IdentitySystemError, OSError) as e:
        _fail(e)

    resolver = PrimaryIdentityResolver()
    focal_raw = focal or resolver.find_focal_identifier(
        entity_type,
        batch.statements,
        identifier_contains=identifier_contains,
        name_contains=name_contains,
    )
    if not focal_raw:
        _fail(ValueError(f"No focal identifier found for entity type {entity_type}"))

    identity = resolver.resolve_primary(entity_type, batch.statements, focal_raw)

    if as_json:
        if identity is None:
            typer.echo(json.dumps({"resolved": False, "focalRaw": focal_raw}))
        else:
            typer.echo(identity.model_dump_json(indent=2))
        return

    if identity is None:
        console.print(f"[yellow]⚠[/yellow] Unresolved: no validFrom candidate for {focal_raw}")
        return

    table = Table(title="Primary Identity", show_header=False)
    table.add_column("Field", style="cyan")
    table.add_column("Value", style="green")
    table.add_row("Entity type", identity.entity_type)
    table.add_row("Focal", identity.focal_raw)
    table.add_row("Primary id", identity.primary_id)
    table.add_row("Anchor statement", identity.anchor_statement_id or "-")
    table.add_row("Candidates", str(identity.candidate_count))
    console.print(table)


@eval_app.command("prompt-atomic")
def eval_prompt_atomic(
    input_path: Path = InputOption,
    statement_id: str = typer.Option(..., "--statement", help="Target owl:sameAs statement id"),
    consideration: Optional[Consideration] = typer.Option(
        None, "--consideration", help="Restrict to one consideration"
    ),
    evidence_statement_id: Optional[str] = typer.Option(
        None, "--evidence-statement", help="Render only this evidence statement"
    ),
    method: Optional[str] = typer.Option(None, "--method", help="Evaluation method key or id"),
    prompts_root: Optional[Path] = typer.Option(
        None, "--prompts-root", help="Output root (default from settings)"
    ),
    as_json: bool = JsonOption,
) -> None:
    """Render one atomic evidence-check prompt per evidence unit."""
    try:
        request = PromptAtomicRequest(
            statement_id=statement_id,
            consideration=consideration,
            evidence_statement_id=evidence_statement_id,
            method=method,
        )
    except ValidationError as e:
        _fail(e, code=2)

    try:
        batch = load_statement_batch(input_path)
        pipeline = PromptAtomicPipeline(
            term_resolver=default_term_resolver(),
            prompts_root=prompts_root,
        )
        summary = pipeline.run(batch, request)
    except (IdentitySystemError, ValueError, OSError) as e:
        _fail(e)

    logger.info(
        "Prompt generation complete",
        target=summary.target_statement_id,
        generated=summary.generated_count,
    )

    if as_json:
        typer.echo(summary.model_dump_json(indent=2))
        return

    table = Table(title=f"Atomic Prompts ({summary.method})", show_header=True, header_style="bold magenta")
    table.add_column("Consideration", style="cyan")
    table.add_column("Pool", justify="right")
    table.add_column("Generated", justify="right", style="green")
    table.add_column("Skipped", style="yellow")
    for row in summary.considerations:
        table.add_row(
            row.consideration.value,
            str(row.evidence_pool_count),
            str(row.generated_count),
            row.skipped_reason or "",
        )
    console.print(table)
    for generated in summary.generated:
        console.print(f"[dim]{generated.out_path}[/dim]")


@vocab_app.command("define")
def vocab_define(
    terms: List[str] = typer.Argument(..., help="CURIEs or IRIs to define"),
    vocab: Optional[List[Path]] = typer.Option(
        None, "--vocab", help="JSON-LD snapshot (repeatable; overrides settings)"
    ),
) -> None:
    """Print the Definitions entries a prompt would carry for the given terms."""
    resolver = VocabularyTermResolver(vocab) if vocab else default_term_resolver()
    typer.echo("\n".join(resolver.definitions_markdown(terms)))


@methods_app.command("list")
def methods_list(as_json: bool = JsonOption) -> None:
    """List registered evaluation methods."""
    if as_json:
        methods = [
            {
                "key": method.key,
                "methodId": method.method_id,
                "version": method.method_version,
                "name": method.method_name,
                "subjectTypes": [method.subject_entity_type],
            }
            for method in EVALUATION_METHODS
        ]
        typer.echo(json.dumps({"count": len(methods), "methods": methods}))
        return

    table = Table(title="Evaluation Methods")
    table.add_column("Key", style="cyan")
    table.add_column("Name")
    table.add_column("Subject type", style="green")
    for method in EVALUATION_METHODS:
        table.add_row(method.key, method.method_name, method.subject_entity_type)
    console.print(table)


if __name__ == "__main__":
    app()
