#!/usr/bin/env python3
"""
Inferential Path Miner - mine weighted inferential patterns from entity graphs
"""

import logging
import sys
from pathlib import Path
from typing import Optional

import click
import yaml
from rich.console import Console
from rich.table import Table

from pathminer.kb.knowledge_base import load_knowledge_base
from pathminer.kg.graph_store import load_graph
from pathminer.mining.frequency import CorpusFrequencyEstimator
from pathminer.mining.miner import InferentialPathMiner, MiningResult
from pathminer.mining.search import BoundedPathSearch

logger = logging.getLogger(__name__)

DEFAULT_CONFIG_PATH = "config/config.yaml"


def load_config(config_path: str = DEFAULT_CONFIG_PATH) -> dict:
    """Load configuration from YAML file."""
    try:
        with open(config_path, 'r') as f:
            config = yaml.safe_load(f) or {}
        return config
    except FileNotFoundError:
        if config_path == DEFAULT_CONFIG_PATH:
            return {}
        print(f"❌ Configuration file not found: {config_path}")
        sys.exit(1)
    except yaml.YAMLError as e:
        print(f"❌ Error parsing configuration file: {e}")
        sys.exit(1)


def setup_logging(config: dict, debug: bool = False):
    """Setup logging configuration."""
    log_config = config.get("logging", {}) or {}
    log_level = logging.DEBUG if debug else getattr(logging, str(log_config.get("level", "INFO")).upper(), logging.INFO)
    log_format = log_config.get("format", "%(asctime)s - %(name)s - %(levelname)s - %(message)s")

    handlers = [logging.StreamHandler()]
    log_file = log_config.get("file")
    if log_file:
        # Create logs directory if it doesn't exist
        Path(log_file).parent.mkdir(parents=True, exist_ok=True)
        handlers.append(logging.FileHandler(log_file))

    logging.basicConfig(level=log_level, format=log_format, handlers=handlers, force=True)


def display_patterns(console: Console, result: MiningResult, top: int):
    """Display the heaviest mined patterns in a table."""
    table = Table(title=f"Top {min(top, len(result.patterns))} of {len(result.patterns)} Patterns")
    table.add_column("Weight", style="cyan", justify="right")
    table.add_column("Kind", style="magenta")
    table.add_column("Pattern", style="white")

    for key, weight in result.top(top):
        table.add_row(f"{weight:.3f}", key.kind.value, str(key))

    console.print(table)

    summary = Table(title="Summary")
    summary.add_column("Metric", style="cyan")
    summary.add_column("Value", style="white")
    summary.add_row("Entities", str(result.graph_stats["total_entities"]))
    summary.add_row("Facts", str(result.graph_stats["total_facts"]))
    summary.add_row("Paths", str(len(result.paths)))
    summary.add_row("Patterns", str(len(result.patterns)))
    summary.add_row("Total Weight", f"{result.total_weight:.3f}")
    if result.enforcement is not None:
        summary.add_row("Contradictions Removed", str(result.enforcement.contradictions_removed))
        summary.add_row("Low Confidence Removed", str(result.enforcement.low_confidence_removed))
        summary.add_row("Known Facts Added", str(result.enforcement.known_facts_added))
    summary.add_row("Time", f"{result.elapsed:.2f}s")
    console.print(summary)


@click.group()
@click.option('--config', '-c', default=DEFAULT_CONFIG_PATH, help='Configuration file path')
@click.option('--debug', '-d', is_flag=True, help='Enable debug logging')
@click.pass_context
def cli(ctx, config, debug):
    """Inferential Path Miner CLI."""
    ctx.ensure_object(dict)
    ctx.obj['config'] = load_config(config)
    ctx.obj['debug'] = debug

    setup_logging(ctx.obj['config'], debug)


@cli.command()
@click.argument('graph_path', type=click.Path(exists=True, dir_okay=False))
@click.option('--kb', 'kb_path', type=click.Path(exists=True, dir_okay=False), help='Knowledge base JSON file')
@click.option('--max-depth', type=int, help='Maximum length of an open chain')
@click.option('--cutoff', type=float, help='Drop facts with confidence below this value')
@click.option('--workers', '-w', type=int, help='Number of aggregation workers')
@click.option('--documents', type=click.Path(exists=True, file_okay=False),
              help='Directory of text documents; enables document factor scaling')
@click.option('--output', '-o', type=click.Path(dir_okay=False), help='Write patterns to this JSON file')
@click.option('--top', '-n', default=20, show_default=True, help='Number of patterns to display')
@click.pass_context
def mine(ctx, graph_path, kb_path, max_depth, cutoff, workers, documents, output, top):
    """Mine weighted inferential patterns from an entity graph."""
    console = Console()
    mining_config = dict(ctx.obj['config'].get("mining", {}) or {})
    overrides = {"max_depth": max_depth, "confidence_cutoff": cutoff, "workers": workers}
    mining_config.update({name: value for name, value in overrides.items() if value is not None})

    try:
        graph = load_graph(graph_path)
        kb = load_knowledge_base(kb_path) if kb_path else None

        estimator = None
        if documents:
            estimator = CorpusFrequencyEstimator.from_directory(documents)
            mining_config["use_document_factor"] = True

        miner = InferentialPathMiner(mining_config, kb=kb, estimator=estimator)
        result = miner.mine(graph)
    except Exception as e:
        logger.error(f"Mining failed: {e}")
        console.print(f"[red]❌ Mining failed: {e}[/red]")
        sys.exit(1)

    if not result.patterns:
        console.print("[yellow]No patterns found.[/yellow]")
    else:
        display_patterns(console, result, top)

    if output:
        result.export(output)
        console.print(f"[green]✅ Wrote {len(result.patterns)} patterns to {output}[/green]")


@cli.command()
@click.argument('graph_path', type=click.Path(exists=True, dir_okay=False))
@click.option('--max-depth', type=int, help='Maximum length of an open chain')
@click.option('--limit', '-n', default=100, show_default=True, help='Number of paths to display')
@click.pass_context
def paths(ctx, graph_path, max_depth, limit):
    """Print the raw path corpus of an entity graph."""
    console = Console()
    mining_config = ctx.obj['config'].get("mining", {}) or {}
    depth: Optional[int] = max_depth if max_depth is not None else mining_config.get("max_depth", 3)

    try:
        graph = load_graph(graph_path)
        corpus = BoundedPathSearch(depth, mining_config.get("name_fallback", True)).run(graph)
    except Exception as e:
        logger.error(f"Path search failed: {e}")
        console.print(f"[red]❌ Path search failed: {e}[/red]")
        sys.exit(1)

    table = Table(title=f"{len(corpus)} Paths (max depth {depth})")
    table.add_column("Root", style="cyan")
    table.add_column("Loop", style="magenta")
    table.add_column("Path", style="white")
    for path in corpus[:limit]:
        table.add_row(str(path.root), "yes" if path.is_loop else "no", str(path))
    console.print(table)


@cli.command()
@click.argument('graph_path', type=click.Path(exists=True, dir_okay=False))
@click.pass_context
def stats(ctx, graph_path):
    """Show entity graph statistics."""
    console = Console()
    try:
        graph_stats = load_graph(graph_path).get_stats()
    except Exception as e:
        console.print(f"[red]❌ Failed to load graph: {e}[/red]")
        sys.exit(1)

    table = Table(title="Entity Graph Statistics")
    table.add_column("Metric", style="cyan")
    table.add_column("Value", style="white")
    table.add_row("Total Entities", str(graph_stats["total_entities"]))
    table.add_row("Total Facts", str(graph_stats["total_facts"]))
    table.add_row("Entity Types", ", ".join(graph_stats["entity_types"]))
    table.add_row("Relation Types", ", ".join(graph_stats["relation_types"]))
    console.print(table)


if __name__ == "__main__":
    cli()
