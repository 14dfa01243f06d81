"""
HR-Assistant Command Line Interface

Provides CLI commands for ingesting and analyzing HR documents, keeping
the embedding index current, and searching or asking questions over the
stored documents.
"""

import asyncio
from pathlib import Path
from typing import Optional

import typer
from rich.console import Console
from rich.table import Table

app = typer.Typer(
    name="hr-assistant",
    help="HR document intelligence and retrieval CLI",
    add_completion=False,
)
console = Console()


@app.callback()
def main():
    """Configure logging before any command runs."""
    from hr_assistant.utils.logger import setup_logging

    setup_logging()


def _require_database() -> None:
    from hr_assistant.data.database import get_database_manager

    if not get_database_manager().check_sync_connection():
        console.print("[red]Error: Could not connect to MongoDB. Run 'init-db' first.[/red]")
        raise typer.Exit(1)


def _build(memory: bool = False):
    """Build a pipeline on MongoDB, or on a throwaway in-memory store."""
    from hr_assistant.core.pipeline import build_pipeline
    from hr_assistant.data.repositories import InMemoryDocumentStore

    if memory:
        return build_pipeline(store=InMemoryDocumentStore())
    _require_database()
    return build_pipeline()


def _fail(error) -> None:
    console.print(f"[red]{error.kind}:[/red] {error.message}")
    raise typer.Exit(1)


def _collect_files(path: Path, recursive: bool) -> list[Path]:
    from hr_assistant.utils.constants import SUPPORTED_DOCUMENT_FORMATS

    if path.is_file():
        return [path]
    pattern = "**/*" if recursive else "*"
    files: list[Path] = []
    for ext in SUPPORTED_DOCUMENT_FORMATS:
        files.extend(path.glob(f"{pattern}{ext}"))
    return sorted(files)


def _print_analysis(analysis) -> None:
    table = Table(title="Analysis", show_header=False)
    table.add_column("Field", style="cyan")
    table.add_column("Value", style="green")

    table.add_row("Document Type", str(analysis.document_type))
    table.add_row("Experience Level", str(analysis.experience_level))
    if analysis.years_of_experience is not None:
        table.add_row("Years of Experience", f"{analysis.years_of_experience:.1f}")
    if analysis.summary:
        table.add_row("Summary", analysis.summary)
    if analysis.skills:
        table.add_row("Skills", ", ".join(analysis.skills))
    if analysis.keywords:
        table.add_row("Keywords", ", ".join(analysis.keywords))
    if analysis.sentiment:
        table.add_row("Sentiment", f"{analysis.sentiment.label} ({analysis.sentiment.score:+.2f})")
    if analysis.contact_info:
        contact = analysis.contact_info
        for label, value in (
            ("Name", contact.full_name),
            ("Email", contact.email),
            ("Phone", contact.phone),
            ("Location", contact.location),
            ("LinkedIn", contact.linkedin_url),
            ("GitHub", contact.github_url),
        ):
            if value:
                table.add_row(label, value)
    for name, reason in analysis.failures.items():
        table.add_row(f"[red]{name} failed[/red]", reason)

    console.print(table)


@app.command()
def version():
    """Show application version."""
    from hr_assistant import __version__, __app_name__

    console.print(f"[bold blue]{__app_name__}[/bold blue] version [green]{__version__}[/green]")


@app.command()
def info():
    """Show system information and configuration."""
    from hr_assistant.utils.config import get_settings

    settings = get_settings()

    table = Table(title="HR-Assistant Configuration")
    table.add_column("Setting", style="cyan")
    table.add_column("Value", style="green")

    table.add_row("Environment", settings.environment)
    table.add_row("Debug Mode", str(settings.debug))
    table.add_row("Database Host", settings.database.host)
    table.add_row("Database Name", settings.database.name)
    table.add_row("Embedding Provider", settings.embedding.provider)
    table.add_row("Embedding Model", settings.embedding.model)
    table.add_row("Embedding Version", settings.embedding.version)
    table.add_row("ML Device", settings.embedding.device)
    table.add_row("Generation Model", settings.generation.model)
    table.add_row("Generation Enabled", str(settings.generation.api_key is not None))
    table.add_row("Log Level", settings.logging.level)

    console.print(table)


@app.command()
def init_db():
    """Initialize the database with required collections and indexes."""
    from hr_assistant.data.database import get_database_manager

    console.print("[yellow]Initializing database...[/yellow]")

    db_manager = get_database_manager()

    console.print("  Checking database connection...")
    if not db_manager.check_sync_connection():
        console.print("[red]Error: Could not connect to MongoDB.[/red]")
        console.print("[dim]Make sure MongoDB is running and connection settings are correct.[/dim]")
        raise typer.Exit(1)

    console.print("  [green]✓[/green] Connected to MongoDB")

    console.print("  Creating indexes...")
    try:
        asyncio.run(db_manager.ensure_indexes())
    except Exception as e:
        console.print(f"[red]Error initializing database: {e}[/red]")
        raise typer.Exit(1)
    console.print("  [green]✓[/green] Indexes created")

    console.print("\n[green]Database initialized successfully![/green]")


@app.command()
def ingest(
    path: Path = typer.Argument(..., help="Path to a document or a directory"),
    owner: str = typer.Option("default", "--owner", "-o", help="Owner id for the documents"),
    recursive: bool = typer.Option(False, "--recursive", "-r", help="Search recursively"),
    sentiment: bool = typer.Option(False, "--sentiment", help="Also analyze sentiment"),
    memory: bool = typer.Option(False, "--memory", help="Use a throwaway in-memory store"),
):
    """Ingest documents: extract, analyze, embed and store."""
    from rich.progress import BarColumn, Progress, SpinnerColumn, TextColumn

    from hr_assistant.core.errors import PipelineError
    from hr_assistant.data.models import AnalysisOptions

    if not path.exists():
        console.print(f"[red]Error: Path does not exist: {path}[/red]")
        raise typer.Exit(1)

    files = _collect_files(path, recursive)
    if not files:
        console.print("[yellow]No supported documents found.[/yellow]")
        raise typer.Exit(0)

    console.print(f"Found [cyan]{len(files)}[/cyan] document(s)")

    pipeline = _build(memory)
    options = AnalysisOptions(analyze_sentiment=sentiment)

    ingested: list = []
    errors: list[tuple[Path, str]] = []

    async def run(progress, task) -> None:
        for file_path in files:
            try:
                document = await pipeline.ingest_document(
                    file_path.read_bytes(),
                    None,
                    file_path.name,
                    owner,
                    options,
                    metadata={"source_path": str(file_path)},
                )
                ingested.append(document)
            except PipelineError as e:
                errors.append((file_path, f"{e.kind}: {e.message}"))
            except OSError as e:
                errors.append((file_path, str(e)))
            progress.update(task, advance=1)

    with Progress(
        SpinnerColumn(),
        TextColumn("[progress.description]{task.description}"),
        BarColumn(),
        TextColumn("[progress.percentage]{task.percentage:>3.0f}%"),
        console=console,
    ) as progress:
        task = progress.add_task("Ingesting documents...", total=len(files))
        asyncio.run(run(progress, task))

    if ingested:
        table = Table(title="Ingested Documents")
        table.add_column("ID", style="dim")
        table.add_column("File", style="cyan")
        table.add_column("Type")
        table.add_column("Level")
        table.add_column("Embedded", justify="center")

        for document in ingested:
            analysis = document.analysis
            table.add_row(
                document.id,
                document.filename,
                str(analysis.document_type) if analysis else "-",
                str(analysis.experience_level) if analysis else "-",
                "[green]✓[/green]" if document.is_embedded else "[red]✗[/red]",
            )
        console.print(table)

    console.print()
    console.print("[bold]Ingest Summary:[/bold]")
    console.print(f"  [green]✓ Ingested:[/green] {len(ingested)}")
    console.print(f"  [red]✗ Errors:[/red] {len(errors)}")

    if errors:
        console.print("\n[yellow]Errors:[/yellow]")
        for file_path, error_msg in errors[:10]:
            console.print(f"  [dim]{file_path.name}:[/dim] {error_msg}")
        if len(errors) > 10:
            console.print(f"  [dim]... and {len(errors) - 10} more errors[/dim]")


@app.command()
def analyze(
    path: Path = typer.Argument(..., help="Path to a document"),
    sentiment: bool = typer.Option(False, "--sentiment", help="Also analyze sentiment"),
    no_summary: bool = typer.Option(False, "--no-summary", help="Skip the summary"),
    no_contact: bool = typer.Option(False, "--no-contact", help="Skip contact extraction"),
):
    """Analyze a document without storing it."""
    from hr_assistant.core.errors import PipelineError
    from hr_assistant.data.models import AnalysisOptions

    if not path.is_file():
        console.print(f"[red]Error: File not found: {path}[/red]")
        raise typer.Exit(1)

    pipeline = _build(memory=True)
    options = AnalysisOptions(
        analyze_sentiment=sentiment,
        generate_summary=not no_summary,
        extract_contact_info=not no_contact,
    )

    try:
        analysis = asyncio.run(
            pipeline.analyze_document(path.read_bytes(), None, options, filename=path.name)
        )
    except PipelineError as e:
        _fail(e)

    _print_analysis(analysis)


@app.command()
def embed(
    document_id: str = typer.Argument(..., help="Document id"),
    force: bool = typer.Option(False, "--force", "-f", help="Recompute even when current"),
):
    """Compute the embedding of one stored document."""
    from hr_assistant.core.errors import PipelineError

    pipeline = _build()
    try:
        outcome = asyncio.run(pipeline.embed_document(document_id, force=force))
    except PipelineError as e:
        _fail(e)

    if outcome.already_current:
        console.print(f"[dim]Embedding for {document_id} is already current.[/dim]")
    else:
        record = outcome.record
        console.print(
            f"[green]✓[/green] Embedded {document_id} "
            f"({record.model_id}, {record.version}, {record.dimension} dims)"
        )


@app.command()
def backfill(
    owner: Optional[str] = typer.Option(None, "--owner", "-o", help="Only this owner's documents"),
    limit: Optional[int] = typer.Option(None, "--limit", "-l", help="Maximum documents to process"),
):
    """Embed documents whose embeddings are missing or stale."""
    from hr_assistant.core.errors import PipelineError

    pipeline = _build()
    console.print("[yellow]Backfilling embeddings...[/yellow]")
    try:
        report = asyncio.run(pipeline.backfill_embeddings(owner_id=owner, limit=limit))
    except PipelineError as e:
        _fail(e)

    console.print("[bold]Backfill Summary:[/bold]")
    console.print(f"  [green]✓ Updated:[/green] {len(report.updated_ids)}")
    console.print(f"  [dim]○ Skipped:[/dim] {len(report.skipped_ids)}")
    console.print(f"  [red]✗ Errors:[/red] {len(report.errors)}")

    for error in report.errors[:10]:
        console.print(f"  [dim]{error.document_id}:[/dim] {error.reason}")


@app.command()
def search(
    query: str = typer.Argument("", help="Free-text query"),
    owner: Optional[str] = typer.Option(None, "--owner", "-o", help="Only this owner's documents"),
    skill: list[str] = typer.Option([], "--skill", "-s", help="Required skill (repeatable)"),
    level: list[str] = typer.Option([], "--level", help="Experience level (repeatable)"),
    doc_type: list[str] = typer.Option([], "--type", "-t", help="Document type (repeatable)"),
    top_k: Optional[int] = typer.Option(None, "--top", "-k", help="Number of results"),
):
    """Search stored documents."""
    from hr_assistant.core.errors import PipelineError
    from hr_assistant.data.models import SearchFilters

    pipeline = _build()
    filters = SearchFilters(skills=skill, experience_levels=level, document_types=doc_type)

    try:
        result = asyncio.run(pipeline.search(query, filters=filters, owner_id=owner, top_k=top_k))
    except PipelineError as e:
        _fail(e)

    if not result.hits:
        console.print("[yellow]No matching documents.[/yellow]")
        return

    mode = "hybrid" if result.semantic_enabled else "lexical"
    table = Table(title=f"Results ({mode}, {result.total_candidates} candidates)")
    table.add_column("#", style="dim", width=3)
    table.add_column("Score", justify="right", style="green")
    table.add_column("Title", style="cyan")
    table.add_column("ID", style="dim")
    table.add_column("Highlights")

    for i, hit in enumerate(result.hits, 1):
        table.add_row(
            str(i),
            f"{hit.score:.3f}",
            hit.title,
            hit.document_id,
            "\n".join(hit.highlights) or hit.preview[:120],
        )

    console.print(table)


@app.command()
def ask(
    question: str = typer.Argument(..., help="Question about the stored documents"),
    owner: Optional[str] = typer.Option(None, "--owner", "-o", help="Only this owner's documents"),
):
    """Answer a question from the stored documents."""
    from hr_assistant.core.errors import PipelineError

    pipeline = _build()
    try:
        answer = asyncio.run(pipeline.answer(question, owner_id=owner))
    except PipelineError as e:
        _fail(e)

    console.print(answer.answer)
    console.print()
    if answer.grounded:
        console.print(f"[dim]Sources: {', '.join(answer.sources)}[/dim]")
    else:
        console.print("[yellow]No supporting documents were found.[/yellow]")


@app.command()
def history(
    owner: Optional[str] = typer.Option(None, "--owner", "-o", help="Only this owner's queries"),
    limit: int = typer.Option(20, "--limit", "-l", help="Number of entries"),
):
    """Show recent search and answer queries."""
    from hr_assistant.data.repositories import QueryLogRepository

    _require_database()
    entries = asyncio.run(QueryLogRepository().recent(owner_id=owner, limit=limit))

    if not entries:
        console.print("[yellow]No queries logged yet.[/yellow]")
        return

    table = Table(title="Recent Queries")
    table.add_column("Time", style="dim")
    table.add_column("Kind", style="cyan")
    table.add_column("Query")
    table.add_column("Results", justify="right", style="green")

    for entry in entries:
        table.add_row(
            entry.created_at.strftime("%Y-%m-%d %H:%M"),
            str(entry.kind),
            entry.query[:60],
            str(entry.result_count),
        )

    console.print(table)


if __name__ == "__main__":
    app()
