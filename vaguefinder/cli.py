"""VagueFinder CLI."""

import asyncio
import json
import logging
from pathlib import Path

# Load .env file
from dotenv import load_dotenv
load_dotenv()

import click
import yaml
from rich.console import Console
from rich.logging import RichHandler
from rich.progress import BarColumn, DownloadColumn, Progress, TextColumn
from rich.table import Table

from vaguefinder.config import Settings, load_items, load_settings
from vaguefinder.errors import VagueFinderError
from vaguefinder.finder import VagueFinder
from vaguefinder.models import ComparisonResult, LoadStatus, ProgressSnapshot, ProviderType


console = Console()


def configure_logging(level: str) -> None:
    """Route library logs through rich."""
    logging.basicConfig(
        level=level.upper(),
        format="%(message)s",
        datefmt="[%X]",
        handlers=[RichHandler(console=console, show_path=False)],
        force=True,
    )


@click.group()
@click.option("--config", "config_path", default=None, type=click.Path(exists=True), help="YAML settings file")
@click.option("--provider", type=click.Choice([p.value for p in ProviderType]), default=None, help="Embedding backend")
@click.option("--model", default=None, help="Model name for the local backend")
@click.option("--log-level", default=None, help="Logging level (DEBUG, INFO, WARNING)")
@click.pass_context
def cli(ctx, config_path: str | None, provider: str | None, model: str | None, log_level: str | None):
    """VagueFinder - rank and compare short texts by semantic closeness."""
    ctx.ensure_object(dict)
    settings = load_settings(
        Path(config_path) if config_path else None,
        provider=provider,
        model_name=model,
        log_level=log_level,
    )
    configure_logging(settings.log_level)
    ctx.obj["settings"] = settings


def _collect_items(items: tuple[str, ...], items_file: str | None) -> list[str]:
    collected = list(items)
    if items_file:
        try:
            collected.extend(load_items(Path(items_file)))
        except (ValueError, yaml.YAMLError) as e:
            raise click.BadParameter(str(e), param_hint="--items-file")
    if not collected:
        raise click.UsageError("Provide candidates with --item or --items-file")
    return collected


def _run(coro) -> None:
    try:
        asyncio.run(coro)
    except VagueFinderError as e:
        console.print(f"[red]Error: {e}[/red]")
        raise SystemExit(1)


async def _load(finder: VagueFinder, quiet: bool) -> None:
    """Load the provider, drawing a progress bar unless quiet."""
    if quiet:
        await finder.load()
        return

    with Progress(
        TextColumn("[bold]{task.description}"),
        BarColumn(),
        DownloadColumn(),
        console=console,
        transient=True,
    ) as progress:
        task = progress.add_task("Loading model", total=None)

        def on_progress(snapshot: ProgressSnapshot):
            if snapshot.status == LoadStatus.PROGRESS and snapshot.bytes_total:
                progress.update(
                    task,
                    description=f"Loading {snapshot.resource_file or snapshot.resource_name}",
                    completed=snapshot.bytes_loaded,
                    total=snapshot.bytes_total,
                )

        unsubscribe = finder.subscribe(on_progress)
        try:
            await finder.load()
        finally:
            unsubscribe()


def _print_results(result: ComparisonResult, title: str, json_output: bool) -> None:
    if json_output:
        click.echo(json.dumps(result.model_dump(), indent=2))
        return

    table = Table(title=title)
    table.add_column("#", style="dim", width=4)
    table.add_column("Score", style="cyan")
    table.add_column("Text")

    for i, candidate in enumerate(result.results, 1):
        table.add_row(str(i), f"{candidate.score:.4f}", candidate.text)

    console.print(table)


@cli.command()
@click.argument("text_a")
@click.argument("text_b")
@click.option("--json-output", is_flag=True, help="Output as JSON")
@click.pass_context
def compare(ctx, text_a: str, text_b: str, json_output: bool):
    """Compare two texts."""
    _run(_compare_async(ctx.obj["settings"], text_a, text_b, json_output))


async def _compare_async(settings: Settings, text_a: str, text_b: str, json_output: bool):
    async with VagueFinder.from_settings(settings) as finder:
        await _load(finder, quiet=json_output)
        result = await finder.compare_two(text_a, text_b)

    if json_output:
        click.echo(json.dumps(result.model_dump(), indent=2))
    else:
        console.print(f"[bold]Similarity:[/bold] [cyan]{result.score:.4f}[/cyan]")


@cli.command()
@click.argument("text")
@click.option("--item", "-i", "items", multiple=True, help="Candidate text (repeatable)")
@click.option("--items-file", default=None, type=click.Path(exists=True), help="YAML list or text file of candidates")
@click.option("--cached", is_flag=True, help="Precompute candidate embeddings before ranking")
@click.option("--json-output", is_flag=True, help="Output as JSON")
@click.pass_context
def rank(ctx, text: str, items: tuple[str, ...], items_file: str | None, cached: bool, json_output: bool):
    """Rank every candidate by similarity to TEXT."""
    candidates = _collect_items(items, items_file)
    _run(_rank_async(ctx.obj["settings"], text, candidates, cached, json_output))


async def _rank_async(settings: Settings, text: str, candidates: list[str], cached: bool, json_output: bool):
    async with VagueFinder.from_settings(settings) as finder:
        await _load(finder, quiet=json_output)
        if cached:
            entries = await finder.precompute(candidates)
            result = await finder.rank_cached(text, entries)
        else:
            result = await finder.rank_all(text, candidates)

    _print_results(result, f"Ranked against: {text}", json_output)


@cli.command()
@click.argument("text")
@click.option("-k", "k", default=5, show_default=True, help="Number of results")
@click.option("--item", "-i", "items", multiple=True, help="Candidate text (repeatable)")
@click.option("--items-file", default=None, type=click.Path(exists=True), help="YAML list or text file of candidates")
@click.option("--json-output", is_flag=True, help="Output as JSON")
@click.pass_context
def top(ctx, text: str, k: int, items: tuple[str, ...], items_file: str | None, json_output: bool):
    """Show the K candidates most similar to TEXT."""
    candidates = _collect_items(items, items_file)
    _run(_top_async(ctx.obj["settings"], text, candidates, k, json_output))


async def _top_async(settings: Settings, text: str, candidates: list[str], k: int, json_output: bool):
    async with VagueFinder.from_settings(settings) as finder:
        await _load(finder, quiet=json_output)
        result = await finder.top_k(text, candidates, k)

    _print_results(result, f"Top {len(result.results)} for: {text}", json_output)


def main():
    cli(obj={})


if __name__ == "__main__":
    main()
