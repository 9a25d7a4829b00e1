"""
Command-line interface for cdhit-clstr.

This module exposes the cluster tools through Click: summary statistics,
top-N and minimum-size selection, FASTA extraction and validation.
"""

import functools
import json
import sys
from pathlib import Path
from typing import Iterable, Optional

import click
from loguru import logger
from pydantic import ValidationError as PydanticValidationError
from rich.console import Console
from rich.markup import escape
from rich.table import Table
from tqdm import tqdm

from ..analysis.extraction import open_sequence_database, write_cluster_fastas, write_representatives
from ..analysis.selection import filter_clusters_by_size, top_n_clusters
from ..analysis.statistics import cluster_size_table, summarize_clusters
from ..config.settings import Settings, get_settings
from ..core.exceptions import ClstrError, ConfigurationError
from ..core.parser import ClstrParser
from ..core.types import Cluster
from ..core.writer import ClstrWriter
from ..utils.file_operations import derive_output_path
from ..utils.logging import setup_logging
from ..utils.validation import validate_cluster_order, validate_clusters

console = Console(stderr=True)


def setup_cli_logging(settings: Settings, verbose: bool = False, quiet: bool = False) -> None:
    """Setup logging for CLI."""
    config = settings.get_logging_config()
    if quiet:
        level = "ERROR"
    elif verbose or settings.debug:
        level = "DEBUG"
    else:
        level = config["level"]

    setup_logging(
        level=level,
        log_file=config["log_file"],
        format_string=config["format"],
        enable_json=config["enable_json_logging"],
    )


def handle_errors(func):
    """Decorator to handle CLI errors gracefully."""
    @functools.wraps(func)
    def wrapper(*args, **kwargs):
        try:
            return func(*args, **kwargs)
        except ClstrError as e:
            console.print(f"[red]clstr error: {escape(str(e))}[/red]")
            sys.exit(1)
    return wrapper


def load_settings(config: Optional[str]) -> Settings:
    """Load settings from a JSON file, or from the environment."""
    try:
        if config:
            return Settings.load_config(Path(config))
        return get_settings()
    except PydanticValidationError as e:
        raise ConfigurationError(
            f"Invalid configuration: {e}",
            config_key=config,
        ) from e
    except json.JSONDecodeError as e:
        raise ConfigurationError(
            f"Configuration file is not valid JSON: {e}",
            config_key=config,
        ) from e
    except OSError as e:
        raise ConfigurationError(
            f"Cannot read configuration file: {e}",
            config_key=config,
        ) from e


def open_clusters(ctx: click.Context, file_path: str, desc: str) -> Iterable[Cluster]:
    """Open a cluster file as configured, closing it when the command ends."""
    settings: Settings = ctx.obj["settings"]
    parser = ctx.with_resource(ClstrParser.from_path(file_path, encoding=settings.parser.encoding))
    clusters: Iterable[Cluster] = parser
    if settings.parser.check_order:
        clusters = validate_cluster_order(clusters)
    return tqdm(
        clusters,
        desc=desc,
        unit="cluster",
        disable=ctx.obj["quiet"] or not settings.tools.show_progress,
    )


def open_writer(ctx: click.Context, output_path: Path) -> ClstrWriter:
    settings: Settings = ctx.obj["settings"]
    return ClstrWriter.to_path(
        output_path,
        default_precision=settings.writer.default_precision,
        encoding=settings.writer.encoding,
    )


@click.group()
@click.version_option(package_name="cdhit-clstr")
@click.option("--verbose", "-v", is_flag=True, help="Enable verbose logging")
@click.option("--quiet", "-q", is_flag=True, help="Only report errors")
@click.option("--config", "-c", type=click.Path(exists=True, dir_okay=False), help="JSON configuration file")
@click.pass_context
@handle_errors
def cli(ctx: click.Context, verbose: bool, quiet: bool, config: Optional[str]):
    """
    Tools for CD-HIT .clstr cluster reports.

    Read, summarize, filter and extract clusters from the files written by
    CD-HIT and CD-HIT-EST.
    """
    ctx.ensure_object(dict)
    settings = load_settings(config)

    ctx.obj["settings"] = settings
    ctx.obj["verbose"] = verbose
    ctx.obj["quiet"] = quiet

    setup_cli_logging(settings, verbose, quiet)
    if config:
        logger.debug(f"Loaded configuration from {config}")


@cli.command()
@click.argument("file", type=click.Path(exists=True, dir_okay=False))
@click.option("--table", "-t", is_flag=True, help="Print each cluster and number of sequences per cluster")
@click.option("--pretty", is_flag=True, help="Render the summary as a table")
@click.pass_context
@handle_errors
def stats(ctx: click.Context, file: str, table: bool, pretty: bool):
    """Get statistics on a CD-HIT cluster file."""
    clusters = open_clusters(ctx, file, "stats")

    if table:
        for cluster_id, size in cluster_size_table(clusters):
            click.echo(f"{cluster_id}\t{size}")
        return

    summary = summarize_clusters(clusters)

    if pretty:
        result_table = Table(title=f"Cluster statistics: {Path(file).name}")
        result_table.add_column("Metric", style="cyan")
        result_table.add_column("Value", style="yellow")
        result_table.add_row("Clusters", str(summary.cluster_count))
        result_table.add_row("Sequences", str(summary.sequence_count))
        result_table.add_row("Avg seqs per cluster", f"{summary.mean_cluster_size:.2f}")
        result_table.add_row("Singletons", str(summary.singleton_count))
        result_table.add_row(
            "Largest cluster",
            f"{summary.largest_cluster_id} ({summary.largest_cluster_size})"
            if summary.largest_cluster_id is not None else "N/A",
        )
        Console().print(result_table)
        return

    click.echo(summary.to_tsv(), nl=False)


@cli.command()
@click.argument("file", type=click.Path(exists=True, dir_okay=False))
@click.option("--cluster-number", "-n", type=click.IntRange(min=1),
              help="The number of top clusters to write to the output file [default: 500]")
@click.option("--output", "-o", type=click.Path(dir_okay=False), help="Output .clstr file")
@click.option("--renumber", is_flag=True, help="Renumber the selected clusters from 0")
@click.pass_context
@handle_errors
def topn(ctx: click.Context, file: str, cluster_number: Optional[int], output: Optional[str], renumber: bool):
    """Write the top N clusters to a new file."""
    settings: Settings = ctx.obj["settings"]
    n = cluster_number or settings.tools.top_n
    output_path = Path(output) if output else derive_output_path(file, f"top{n}.clstr")

    selected = top_n_clusters(open_clusters(ctx, file, "topn"), n, renumber=renumber)

    with open_writer(ctx, output_path) as writer:
        writer.write_clusters(selected)

    logger.info(f"Wrote {len(selected)} clusters to {output_path}")
    if not ctx.obj["quiet"]:
        click.echo(f"{len(selected)} clusters written to {output_path}")


@cli.command()
@click.argument("file", type=click.Path(exists=True, dir_okay=False))
@click.option("--filter-number", "-n", type=click.IntRange(min=1),
              help="The minimum number of sequences in a cluster for it to be written [default: 20]")
@click.option("--output", "-o", type=click.Path(dir_okay=False), help="Output .clstr file")
@click.pass_context
@handle_errors
def filtern(ctx: click.Context, file: str, filter_number: Optional[int], output: Optional[str]):
    """Write clusters with at least N records to a new file."""
    settings: Settings = ctx.obj["settings"]
    threshold = filter_number or settings.tools.filter_min_size
    output_path = Path(output) if output else derive_output_path(file, f"more_than_{threshold}.clstr")

    clusters = filter_clusters_by_size(open_clusters(ctx, file, "filtern"), threshold)
    with open_writer(ctx, output_path) as writer:
        count = writer.write_clusters(clusters)

    logger.info(f"Wrote {count} clusters with at least {threshold} sequences to {output_path}")
    if not ctx.obj["quiet"]:
        click.echo(f"{count} clusters written to {output_path}")


@cli.command()
@click.argument("file", type=click.Path(exists=True, dir_okay=False))
@click.argument("database", type=click.Path(exists=True, dir_okay=False))
@click.option("--output-dir", "-o", type=click.Path(file_okay=False),
              help="Directory for the FASTA files [default: next to FILE]")
@click.option("--strict/--no-strict", default=None, help="Fail when a sequence is missing from DATABASE")
@click.pass_context
@handle_errors
def tofasta(ctx: click.Context, file: str, database: str, output_dir: Optional[str], strict: Optional[bool]):
    """
    Generate one FASTA file per cluster.

    DATABASE is the FASTA file, gzipped or not, the cluster file was derived
    from. Each output file is named after the description of the cluster's
    representative sequence.
    """
    settings: Settings = ctx.obj["settings"]
    strict = settings.tools.strict_lookup if strict is None else strict

    with open_sequence_database(database) as sequences:
        written = write_cluster_fastas(
            open_clusters(ctx, file, "tofasta"),
            sequences,
            file,
            output_dir=output_dir,
            strict=strict,
        )

    if not ctx.obj["quiet"]:
        click.echo(f"{len(written)} FASTA files written")


@cli.command()
@click.argument("file", type=click.Path(exists=True, dir_okay=False))
@click.argument("database", type=click.Path(exists=True, dir_okay=False))
@click.option("--output", "-o", type=click.Path(dir_okay=False), help="Output FASTA file")
@click.option("--strict/--no-strict", default=None, help="Fail when a representative is missing from DATABASE")
@click.pass_context
@handle_errors
def reps(ctx: click.Context, file: str, database: str, output: Optional[str], strict: Optional[bool]):
    """Write the representative sequence of every cluster to one FASTA file."""
    settings: Settings = ctx.obj["settings"]
    strict = settings.tools.strict_lookup if strict is None else strict
    output_path = Path(output) if output else derive_output_path(file, "representatives.fasta")

    with open_sequence_database(database) as sequences:
        count = write_representatives(open_clusters(ctx, file, "reps"), sequences, output_path, strict=strict)

    if not ctx.obj["quiet"]:
        click.echo(f"{count} representative sequences written to {output_path}")


@cli.command()
@click.argument("file", type=click.Path(exists=True, dir_okay=False))
@click.option("--check-order/--no-check-order", default=True, show_default=True,
              help="Require strictly increasing cluster ids")
@click.pass_context
@handle_errors
def validate(ctx: click.Context, file: str, check_order: bool):
    """Parse a whole cluster file and report the first error."""
    settings: Settings = ctx.obj["settings"]
    with ClstrParser.from_path(file, encoding=settings.parser.encoding) as parser:
        report = validate_clusters(parser, check_order=check_order)

    click.echo(
        f"{file}: OK ({report.cluster_count} clusters, {report.sequence_count} sequences)"
    )


if __name__ == "__main__":
    cli()
