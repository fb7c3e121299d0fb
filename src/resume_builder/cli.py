"""CLI interface using typer + rich."""

from __future__ import annotations

import asyncio
import json
import logging
import webbrowser
from pathlib import Path
from typing import Awaitable, NoReturn, TypeVar

from dotenv import load_dotenv

load_dotenv()

import typer
import yaml
from pydantic import ValidationError
from rich.console import Console
from rich.panel import Panel
from rich.table import Table

from resume_builder.clients.gemini_client import GeminiClient
from resume_builder.clients.rate_limiter import RateLimiter
from resume_builder.config import AppConfig, load_config
from resume_builder.errors import ConfigError, ResumeBuilderError
from resume_builder.export.composer import AVAILABLE_THEMES, DEFAULT_THEME
from resume_builder.logging.usage_store import UsageStore
from resume_builder.models.resume import ResumeDocument
from resume_builder.pipeline.ai_gateway import AiGateway
from resume_builder.pipeline.orchestrator import ResumeOrchestrator
from resume_builder.storage.resume_store import ResumeStore

app = typer.Typer(
    name="resume-builder",
    help="AI resume enhancement, scoring and PDF export",
    no_args_is_help=True,
)
console = Console()

T = TypeVar("T")


@app.callback()
def main(
    verbose: bool = typer.Option(False, "--verbose", "-v", help="Debug logging"),
) -> None:
    logging.basicConfig(
        level=logging.DEBUG if verbose else logging.WARNING,
        format="%(asctime)s %(levelname)s %(name)s: %(message)s",
    )


def _orchestrator(config: AppConfig, *, with_ai: bool = False) -> ResumeOrchestrator:
    store = ResumeStore(config.storage.resolved_db_path)
    if not with_ai:
        return ResumeOrchestrator(store)
    try:
        client = GeminiClient.from_config(config.gemini)
    except ResumeBuilderError as e:
        console.print(f"[red]{e}[/red]")
        raise typer.Exit(1) from e
    limiter = RateLimiter(
        max_requests=config.rate_limit.max_requests,
        window_seconds=config.rate_limit.window_seconds,
    )
    usage = UsageStore(config.storage.resolved_usage_db_path)
    return ResumeOrchestrator(store, AiGateway(client, limiter, usage))


def _fail(e: Exception) -> NoReturn:
    console.print(f"[red]{e}[/red]")
    raise typer.Exit(1) from e


def _config() -> AppConfig:
    try:
        return load_config()
    except ConfigError as e:
        _fail(e)


async def _run_and_close(orchestrator: ResumeOrchestrator, operation: Awaitable[T]) -> T:
    try:
        return await operation
    finally:
        await orchestrator.aclose()


def _load_document(path: Path) -> ResumeDocument:
    text = path.read_text(encoding="utf-8")
    if path.suffix.lower() in (".yaml", ".yml"):
        data = yaml.safe_load(text) or {}
    else:
        data = json.loads(text)
    return ResumeDocument.model_validate(data)


def _print_resume(resume: ResumeDocument) -> None:
    lines = [
        f"[bold]{resume.full_name}[/bold]  (#{resume.id}, theme: {resume.template})",
        " | ".join(p for p in (resume.email, resume.phone, resume.location) if p),
    ]
    if resume.enhanced_career_objective:
        lines.append(f"\n[cyan]Objective (enhanced):[/cyan] {resume.enhanced_career_objective}")
    elif resume.career_objective:
        lines.append(f"\n[cyan]Objective:[/cyan] {resume.career_objective}")
    if resume.enhanced_professional_summary:
        lines.append(f"[cyan]Summary (enhanced):[/cyan] {resume.enhanced_professional_summary}")
    elif resume.professional_summary:
        lines.append(f"[cyan]Summary:[/cyan] {resume.professional_summary}")
    if resume.enhanced_data:
        lines.append(f"[yellow]Unparsed enhancement:[/yellow] {resume.enhanced_data[:300]}")
    if resume.resume_score is not None:
        lines.append(f"\n[bold]Score:[/bold] {resume.resume_score:.0f}/100")
    if resume.resume_score_feedback:
        lines.append(f"[bold]Feedback:[/bold] {resume.resume_score_feedback}")
    counts = (
        f"{len(resume.educations)} education, {len(resume.projects)} projects, "
        f"{len(resume.skills)} skills, {len(resume.certifications)} certifications, "
        f"{len(resume.languages)} languages, {len(resume.achievements)} achievements"
    )
    lines.append(f"\n[dim]{counts}[/dim]")
    console.print(Panel("\n".join(lines), title="Resume", border_style="blue"))


@app.command()
def create(
    file: Path = typer.Argument(help="Resume data file (.json or .yaml)"),
) -> None:
    """Store a new resume from a JSON or YAML file."""
    if not file.exists():
        console.print(f"[red]File not found: {file}[/red]")
        raise typer.Exit(1)
    try:
        document = _load_document(file)
    except (ValidationError, ValueError, yaml.YAMLError) as e:
        _fail(e)
    resume = _orchestrator(_config()).create_resume(document)
    console.print(f"[green]Resume created with ID: {resume.id}[/green]")


@app.command()
def show(resume_id: int = typer.Argument(help="Resume ID")) -> None:
    """Show a stored resume."""
    try:
        resume = _orchestrator(_config()).get_resume(resume_id)
    except ResumeBuilderError as e:
        _fail(e)
    _print_resume(resume)


@app.command("list")
def list_resumes() -> None:
    """List stored resumes."""
    resumes = _orchestrator(_config()).list_resumes()
    if not resumes:
        console.print("[yellow]No resumes stored.[/yellow]")
        return
    table = Table("ID", "Name", "Email", "Theme", "Score")
    for r in resumes:
        score = f"{r.resume_score:.0f}" if r.resume_score is not None else "-"
        table.add_row(str(r.id), r.full_name, r.email, r.template, score)
    console.print(table)


@app.command()
def delete(resume_id: int = typer.Argument(help="Resume ID")) -> None:
    """Delete a stored resume."""
    try:
        _orchestrator(_config()).delete_resume(resume_id)
    except ResumeBuilderError as e:
        _fail(e)
    console.print(f"[green]Resume {resume_id} deleted.[/green]")


@app.command()
def enhance(resume_id: int = typer.Argument(help="Resume ID")) -> None:
    """Rewrite the objective and summary with the AI service."""
    orchestrator = _orchestrator(_config(), with_ai=True)
    with console.status("Enhancing resume..."):
        try:
            resume = asyncio.run(_run_and_close(orchestrator, orchestrator.enhance_resume(resume_id)))
        except ResumeBuilderError as e:
            _fail(e)
    _print_resume(resume)


@app.command()
def score(resume_id: int = typer.Argument(help="Resume ID")) -> None:
    """Score the resume with the AI service."""
    orchestrator = _orchestrator(_config(), with_ai=True)
    with console.status("Scoring resume..."):
        try:
            resume = asyncio.run(_run_and_close(orchestrator, orchestrator.score_resume(resume_id)))
        except ResumeBuilderError as e:
            _fail(e)
    _print_resume(resume)


@app.command()
def pdf(
    resume_id: int = typer.Argument(help="Resume ID"),
    theme: str = typer.Option(None, "--theme", "-t", help="classic | modern | creative"),
    output: Path = typer.Option(None, "--output", "-o", help="Output .pdf path"),
) -> None:
    """Render the resume to PDF."""
    orchestrator = _orchestrator(_config())
    try:
        pdf_bytes = orchestrator.generate_pdf(resume_id, theme=theme)
    except ResumeBuilderError as e:
        _fail(e)
    if output is None:
        output = Path(f"./output/resume_{resume_id}.pdf")
    output.parent.mkdir(parents=True, exist_ok=True)
    output.write_bytes(pdf_bytes)
    console.print(f"[green]PDF saved: {output}[/green]")


@app.command()
def preview(
    resume_id: int = typer.Argument(help="Resume ID"),
    theme: str = typer.Option(None, "--theme", "-t", help="classic | modern | creative"),
    output: Path = typer.Option(None, "--output", "-o", help="Output .html path"),
    open_browser: bool = typer.Option(True, "--open/--no-open", help="Open in browser"),
) -> None:
    """Write the composed HTML and open it in the browser."""
    orchestrator = _orchestrator(_config())
    try:
        html = orchestrator.preview_html(resume_id, theme=theme)
    except ResumeBuilderError as e:
        _fail(e)
    if output is None:
        output = Path(f"./output/resume_{resume_id}.html")
    output.parent.mkdir(parents=True, exist_ok=True)
    output.write_text(html, encoding="utf-8")
    console.print(f"[green]HTML saved: {output}[/green]")
    if open_browser:
        webbrowser.open(output.resolve().as_uri())


@app.command()
def themes() -> None:
    """List the available visual themes."""
    for name in AVAILABLE_THEMES:
        marker = " (default)" if name == DEFAULT_THEME else ""
        console.print(f"  [bold]{name}[/bold]{marker}")


@app.command()
def usage(limit: int = typer.Option(10, "--limit", "-n", help="Recent calls to show")) -> None:
    """Show AI call statistics."""
    store = UsageStore(_config().storage.resolved_usage_db_path)
    stats = store.get_stats()
    console.print(Panel(
        f"Calls: {stats['total_calls']} | Success: {stats['success_rate']:.0f}% | "
        f"Raw fallbacks: {stats['raw_fallback_count']} | "
        f"Rate limited: {stats['rate_limited_count']}",
        title="AI usage",
    ))
    table = Table("Time", "Operation", "Resume", "Attempts", "Result")
    for log in store.get_logs(limit=limit):
        result = log.result_kind if log.success else f"[red]{log.error_type}[/red]"
        table.add_row(
            log.timestamp.strftime("%Y-%m-%d %H:%M:%S"),
            log.operation,
            str(log.resume_id or "-"),
            str(log.attempts),
            result or "-",
        )
    console.print(table)


if __name__ == "__main__":
    app()
