"""mat73writer CLI — inspect written files and preview chunk plans.

Commands:
    mat73writer info <file>                               Show file layout
    mat73writer plan <file-period> <sample-period>        Show chunk plan
"""

from __future__ import annotations

from pathlib import Path
from typing import TYPE_CHECKING

import click
from rich.console import Console
from rich.markup import escape
from rich.panel import Panel
from rich.table import Table

if TYPE_CHECKING:
    from mat73writer.storage.reader import MatReader

console = Console()


@click.group()
@click.version_option(version="0.1.0", prog_name="mat73writer")
def cli() -> None:
    """mat73writer — stream time series into MATLAB v7.3 files."""
    pass


@cli.command()
@click.argument("file", type=click.Path(exists=True, path_type=Path))
def info(file: Path) -> None:
    """Show the preamble, properties and datasets of a .mat file."""
    from mat73writer.storage.reader import MatReader

    try:
        reader = MatReader(file)
        reader.open()
    except Exception as e:
        console.print(f"[red]Error opening {file}: {e}[/red]")
        raise SystemExit(1)

    try:
        _print_layout(file, reader)
    finally:
        reader.close()
    console.print()


def _print_layout(file: Path, reader: MatReader) -> None:
    console.print()
    console.print(Panel.fit(f"[bold]{reader.banner}[/bold]", subtitle=f"{file}"))

    meta_table = Table(show_header=False, box=None, padding=(0, 2))
    meta_table.add_column("Key", style="dim")
    meta_table.add_column("Value")
    for key, value in reader.properties.items():
        meta_table.add_row(key, value)
    meta_table.add_row("catalogs", ", ".join(reader.catalog_ids))
    console.print(meta_table)

    for catalog_id in reader.catalog_ids:
        console.print()
        table = Table(title=catalog_id)
        table.add_column("Resource")
        table.add_column("Dataset")
        table.add_column("Length", justify="right")
        table.add_column("Chunk", justify="right")

        for resource_id in reader.resource_ids(catalog_id):
            for name in reader.dataset_names(catalog_id, resource_id):
                ds = reader.dataset(catalog_id, resource_id, name)
                chunk = str(ds.chunks[0]) if ds.chunks else "-"
                table.add_row(resource_id, name, str(ds.shape[0]), chunk)
        console.print(table)

        properties = reader.catalog_properties_text(catalog_id)
        if properties is not None:
            console.print(Panel(escape(properties), title="properties", border_style="dim"))


@cli.command()
@click.argument("file_period", type=float)
@click.argument("sample_period", type=float)
@click.option("--max-chunk-length", default=None, type=int, help="Upper bound on samples per chunk")
def plan(file_period: float, sample_period: float, max_chunk_length: int | None) -> None:
    """Show the chunk plan for FILE_PERIOD and SAMPLE_PERIOD (in seconds)."""
    from datetime import timedelta

    from mat73writer.storage.chunking import plan_chunks
    from mat73writer.storage.format import MAX_CHUNK_LENGTH

    if sample_period <= 0:
        raise click.BadParameter("must be positive", param_hint="SAMPLE_PERIOD")

    limit = max_chunk_length or MAX_CHUNK_LENGTH
    total_length = timedelta(seconds=file_period) // timedelta(seconds=sample_period)
    result = plan_chunks(total_length, limit)

    if result.chunk_length <= 0:
        console.print(f"[red]✗ No chunk length <= {limit} divides {total_length} samples.[/red]")
        raise SystemExit(1)

    table = Table(show_header=False, box=None, padding=(0, 2))
    table.add_column("Key", style="dim")
    table.add_column("Value", justify="right")
    table.add_row("Total length", str(total_length))
    table.add_row("Chunk length", str(result.chunk_length))
    table.add_row("Chunk count", str(result.chunk_count))
    console.print(table)


if __name__ == "__main__":
    cli()
