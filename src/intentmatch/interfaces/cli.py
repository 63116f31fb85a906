"""Command-line interface for the intent matcher.

Commands:
- ask: Answer a single question
- chat: Interactive question loop
- entries: List the configured knowledge base
- info: Show effective configuration
"""

import asyncio
from pathlib import Path
from typing import Optional

import typer
from rich.console import Console
from rich.table import Table

from intentmatch.config.loader import get_default_config_path, load_config
from intentmatch.config.schema import AppConfig
from intentmatch.core.similarity import InvalidInputError
from intentmatch.observability.logging import configure_logging, get_logger
from intentmatch.pipelines.matcher import IntentMatcher
from intentmatch.providers.base import ProviderError
from intentmatch.service import build_knowledge_base, build_matcher

app = typer.Typer(
    name="intentmatch",
    help="Answer questions by semantic similarity to a fixed Q&A knowledge base",
    add_completion=False,
)

console = Console()
logger = get_logger(__name__)

# Shown for any embedding failure; details go to the log
PROVIDER_FAILURE_MESSAGE = "The assistant is temporarily unavailable. Please try again in a moment."

EXIT_WORDS = {"exit", "quit", ":q"}


@app.command()
def ask(
    query: str = typer.Argument(..., help="Question to answer"),
    config_file: Optional[Path] = typer.Option(None, "--config", "-c", help="Config file path"),
    show_score: bool = typer.Option(False, "--show-score", "-s", help="Print similarity score and matched question"),
):
    """Answer a single question."""
    exit_code = asyncio.run(_ask_async(query, config_file, show_score))
    if exit_code:
        raise typer.Exit(exit_code)


async def _ask_async(query: str, config_file: Optional[Path], show_score: bool) -> int:
    """Async implementation of ask command."""
    config = _load_config(config_file)

    matcher = await _start_matcher(config)
    if matcher is None:
        return 1

    try:
        return await _answer(matcher, query, show_score)
    finally:
        await matcher.embedding_provider.close()


@app.command()
def chat(
    config_file: Optional[Path] = typer.Option(None, "--config", "-c", help="Config file path"),
    show_score: bool = typer.Option(False, "--show-score", "-s", help="Print similarity score and matched question"),
):
    """Start an interactive question loop."""
    asyncio.run(_chat_async(config_file, show_score))


async def _chat_async(config_file: Optional[Path], show_score: bool) -> None:
    """Async implementation of chat command."""
    config = _load_config(config_file)

    matcher = await _start_matcher(config)
    if matcher is None:
        raise typer.Exit(1)

    console.print("[cyan]Ask a question (type 'exit' to leave).[/cyan]")

    try:
        while True:
            try:
                query = await asyncio.to_thread(console.input, "[bold green]> [/bold green]")
            except (EOFError, KeyboardInterrupt):
                console.print()
                break

            query = query.strip()
            if not query:
                continue
            if query.lower() in EXIT_WORDS:
                break

            await _answer(matcher, query, show_score)
    finally:
        await matcher.embedding_provider.close()


async def _start_matcher(config: AppConfig) -> Optional[IntentMatcher]:
    """Build the matcher, reporting startup failures on the console."""
    try:
        console.print(f"[cyan]Initializing embedding provider: {config.embedding.provider.value}...[/cyan]")
        matcher = await build_matcher(config)
    except ProviderError as e:
        logger.error("matcher_startup_failed", provider=e.provider, error=e.message)
        console.print(f"[red]{PROVIDER_FAILURE_MESSAGE}[/red]")
        return None
    except (OSError, ValueError) as e:
        console.print(f"[red]Error initializing matcher: {str(e)}[/red]")
        return None

    console.print(f"[green]✓ Knowledge base ready ({len(matcher.knowledge_base)} entries)[/green]")
    return matcher


async def _answer(matcher: IntentMatcher, query: str, show_score: bool) -> int:
    """Match one query and print the reply. Returns an exit code."""
    try:
        result = await matcher.match(query)
    except ProviderError as e:
        logger.error("query_embedding_failed", provider=e.provider, error=e.message)
        console.print(f"[red]{PROVIDER_FAILURE_MESSAGE}[/red]")
        return 1
    except InvalidInputError as e:
        logger.error("query_scoring_failed", query=query, error=str(e))
        console.print(f"[red]{PROVIDER_FAILURE_MESSAGE}[/red]")
        return 1

    if result.matched:
        console.print(result.answer)
    else:
        console.print(f"[yellow]{matcher.fallback_message}[/yellow]")

    if show_score:
        question = result.best_entry.question if result.best_entry else "-"
        console.print(
            f"[dim]score={result.score:.4f} threshold={matcher.threshold} matched={result.matched} question={question}[/dim]"
        )

    return 0


@app.command()
def entries(
    config_file: Optional[Path] = typer.Option(None, "--config", "-c", help="Config file path"),
):
    """List the configured knowledge base entries."""
    config = _load_config(config_file)

    try:
        kb = build_knowledge_base(config)
    except (OSError, ValueError) as e:
        console.print(f"[red]Error loading knowledge base: {str(e)}[/red]")
        raise typer.Exit(1)

    if len(kb) == 0:
        console.print("[yellow]Knowledge base is empty[/yellow]")
        return

    table = Table(title=f"Knowledge Base ({len(kb)} entries)")
    table.add_column("#", style="dim", justify="right")
    table.add_column("Question", style="cyan")
    table.add_column("Answer", style="green")

    for i, entry in enumerate(kb.entries(), 1):
        answer = entry.answer if len(entry.answer) <= 80 else entry.answer[:77] + "..."
        table.add_row(str(i), entry.question, answer)

    console.print(table)


@app.command()
def info(
    config_file: Optional[Path] = typer.Option(None, "--config", "-c", help="Config file path"),
):
    """Show system information and configuration."""
    config = _load_config(config_file)

    table = Table(title="Intent Matcher Information")
    table.add_column("Setting", style="cyan")
    table.add_column("Value", style="green")

    table.add_row("Log Level", config.log_level.value)
    table.add_row("Embedding Provider", config.embedding.provider.value)
    table.add_row("Embedding Model", config.embedding.model_name)
    table.add_row("API Key", "configured" if config.embedding.api_key else "missing")
    table.add_row("Request Timeout", f"{config.embedding.timeout_seconds}s")
    table.add_row("Similarity Threshold", str(config.matcher.similarity_threshold))
    table.add_row("Fallback Message", config.matcher.fallback_message)
    table.add_row("Knowledge File", str(config.knowledge_base.path or "-"))
    table.add_row("Inline Entries", str(len(config.knowledge_base.entries)))

    console.print(table)


def _load_config(config_file: Optional[Path]) -> AppConfig:
    """Load configuration and setup logging."""
    if config_file is None:
        config_file = get_default_config_path()

    config = load_config(config_file)
    configure_logging(level=config.log_level.value, json_logs=config.json_logs)

    return config


if __name__ == "__main__":
    app()
